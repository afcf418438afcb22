"""Catalog requirements parser.

Turns copy-pasted degree requirement pages into a structured ``ProgramData``
document of requirement categories, courses and OR/AND/selection groups.

Usage::

    from catalog_parser.parser import parse_program, validate_parsed_data

    program = parse_program(catalog_text)
    print(program.requirements)
    print(validate_parsed_data(program).errors)
    payload = program.to_json_dict()
"""

from catalog_parser.parser.models import (
    AndGroup,
    Course,
    CourseType,
    DegreeType,
    FlexibleCourse,
    Footnote,
    OrGroup,
    OrOptionCourse,
    ProgramData,
    RegularCourse,
    Requirement,
    SelectionGroup,
    SelectionType,
    ValidationResult,
)
from catalog_parser.parser.extractor import CatalogParseError, parse_program
from catalog_parser.parser.footnotes import extract_footnotes
from catalog_parser.parser.validation import find_unresolved_footnote_refs, validate_parsed_data

__all__ = [
    "parse_program",
    "validate_parsed_data",
    "find_unresolved_footnote_refs",
    "extract_footnotes",
    "CatalogParseError",
    "ProgramData",
    "Requirement",
    "Footnote",
    "Course",
    "CourseType",
    "DegreeType",
    "RegularCourse",
    "OrOptionCourse",
    "FlexibleCourse",
    "OrGroup",
    "AndGroup",
    "SelectionGroup",
    "SelectionType",
    "ValidationResult",
]
