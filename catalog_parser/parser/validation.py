"""Structural sanity checks for parsed programs.

Used by callers to decide whether a parse result is good enough to keep.
Errors make a document invalid; warnings flag suspicious but representable
output, such as a selection with no options.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import ValidationError

from catalog_parser.config import ParserConfig

from .models import ProgramData, SelectionGroup, SelectionType, ValidationResult, iter_courses, nesting_depth


_WARNING_PREFIX = "WARNING: "
_MAX_PLAUSIBLE_CREDITS = 200


def _format_validation_error(exc: ValidationError) -> list[str]:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "document"
        messages.append(f"Invalid program data at {location}: {error.get('msg', 'invalid value')}")
    return messages


def find_unresolved_footnote_refs(program: ProgramData) -> list[int]:
    """Footnote numbers referenced by some course but never declared, in first-seen order."""
    declared = {footnote.number for footnote in program.footnotes}
    missing: list[int] = []
    for requirement in program.requirements:
        for course in iter_courses(requirement.courses):
            for ref in course.footnote_refs:
                if ref not in declared and ref not in missing:
                    missing.append(ref)
    return missing


def _collect_warnings(program: ProgramData, config: ParserConfig) -> list[str]:
    warnings: list[str] = []
    for requirement in program.requirements:
        for course in requirement.courses:
            depth = nesting_depth(course)
            if depth > config.max_group_depth:
                warnings.append(
                    f"'{requirement.name}' has groups nested {depth} deep "
                    f"(limit {config.max_group_depth})"
                )
        for course in iter_courses(requirement.courses):
            if not isinstance(course, SelectionGroup):
                continue
            options = len(course.selection_options)
            if options == 0:
                warnings.append(f"Selection '{course.title}' in '{requirement.name}' has no options")
            elif course.selection_type == SelectionType.COURSES and course.selection_count > options:
                warnings.append(
                    f"Selection '{course.title}' in '{requirement.name}' asks for "
                    f"{course.selection_count} of only {options} option(s)"
                )

    for ref in find_unresolved_footnote_refs(program):
        warnings.append(f"Footnote {ref} is referenced but never defined")
    if program.total_credits > _MAX_PLAUSIBLE_CREDITS:
        warnings.append(f"Total credits value seems implausible: {program.total_credits}")
    return [_WARNING_PREFIX + warning for warning in warnings]


def validate_parsed_data(
    data: Union[ProgramData, dict[str, Any]], config: Optional[ParserConfig] = None
) -> ValidationResult:
    """Check that a parsed program is usable.

    A program is valid when it has a name and a degree type, at least one
    requirement, and every requirement has a name and at least one course.

    Args:
        data: A ``ProgramData`` or the equivalent JSON dict, e.g. one coming
            back from an editor.
        config: Supplies the nesting limit used for the depth warning.

    Returns:
        A ``ValidationResult``. Malformed dicts are reported as errors rather
        than raised.
    """
    config = config or ParserConfig()
    errors: list[str] = []

    if isinstance(data, dict):
        degree = data.get("degreeType", data.get("degree_type"))
        if not isinstance(degree, str) or not degree.strip():
            errors.append("Degree type is missing or empty")
        try:
            program = ProgramData.model_validate(data)
        except ValidationError as exc:
            errors.extend(_format_validation_error(exc))
            return ValidationResult(is_valid=False, errors=errors)
    else:
        program = data

    if not program.name.strip():
        errors.append("Program name is missing or empty")
    if not program.requirements:
        errors.append("No requirements found in program data")

    for position, requirement in enumerate(program.requirements, start=1):
        label = f"Requirement {position}"
        if not requirement.name.strip():
            errors.append(f"{label} is missing a name")
        if not requirement.courses:
            errors.append(f'{label} "{requirement.name}" has no courses')

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=_collect_warnings(program, config),
    )
