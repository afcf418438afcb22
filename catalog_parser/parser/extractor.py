"""Catalog text to ``ProgramData``.

This is the program driver. It reads the title line, walks the remaining
lines looking for category headers and shorthand slots, hands each category
to :func:`parse_category`, then runs the post-processing passes from
:mod:`.enhancer` and the independent footnote scan.

The parser is a pure function of its input: no I/O, no environment reads,
and a fresh ``ParseContext`` per call, so the same text always produces the
same document, group ids included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from catalog_parser.config import ParserConfig

from .category import parse_category
from .classifier import (
    detect_table_format,
    is_category_header,
    is_flexible_requirement,
    is_footnote_start,
    is_navigation_header,
    strip_markup,
)
from .context import ParseContext
from .courses import parse_flexible_requirement
from .enhancer import (
    add_missing_required_categories,
    consolidate_and_groups,
    enhance_with_logic_groups,
    enhance_with_selection_groups,
    filter_empty_categories,
    handle_missing_major_requirements,
    limit_group_depth,
)
from .footnotes import extract_footnotes
from .models import DegreeType, FlexibleCourse, ProgramData, Requirement


class CatalogParseError(ValueError):
    """Raised when the input cannot be parsed at all (e.g. it is not text)."""


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DEGREE_PREFIX_PATTERNS = [
    re.compile(re.escape(prefix), re.IGNORECASE)
    for prefix in (
        "Bachelor of Science in ",
        "Master of Science in ",
        "Doctor of Philosophy in ",
        "Minor in ",
        "BS in ",
        "MS in ",
    )
]
_CONCENTRATION_PATTERN = re.compile(r"^(.+?)\s*-\s*(.+)$")
_THREAD_PATTERN = re.compile(r"^(.+?),\s*(.+?)\s+Thread$", re.IGNORECASE)
_MAJOR_HEADER_PATTERN = re.compile(r"^Major Requirements?$", re.IGNORECASE)

_TOTAL_CREDITS_PATTERN = re.compile(r"Total\s+Credit\s+Hours\s*(\d+)", re.IGNORECASE)
_ALT_TOTAL_CREDITS_PATTERNS = [
    re.compile(r"Total\s+Credits?\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"Total\s+Hours?\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"(\d+)\s+Total\s+Credit\s+Hours", re.IGNORECASE),
    re.compile(r"Total:\s*(\d+)\s+credits?", re.IGNORECASE),
]

# Substring of a shorthand line -> name of the category synthesised for it.
_FLEXIBLE_CATEGORY_NAMES = (
    ("Any HUM", "Arts, Humanities, and Ethics"),
    ("Any SS", "Social Sciences"),
    ("AE Options", "AE Options"),
    ("Math Option", "Math Options"),
    ("Free Electives", "Free Electives"),
    ("Approved Electives", "Approved Electives"),
    ("CS Electives", "CS Electives"),
)

_DEFAULT_COLLEGE = "College of Computing"


@dataclass(frozen=True)
class ProgramTitle:
    """Program identity read from the first line of the catalog text."""

    name: str
    degree_type: DegreeType = DegreeType.BS
    concentration: Optional[str] = None
    thread: Optional[str] = None


# ---------------------------------------------------------------------------
# Document Metadata
# ---------------------------------------------------------------------------

def parse_title_line(line: str) -> ProgramTitle:
    """Split a title such as 'Bachelor of Science in Computer Science - Intelligence'.

    The degree phrase is stripped from the name, a ``' - X'`` suffix becomes
    the concentration and a ``', X Thread'`` suffix the thread. The degree
    type defaults to BS; later checks override earlier ones, so 'Minor'
    beats 'Master'.
    """
    first = strip_markup(line)
    name = first
    for pattern in _DEGREE_PREFIX_PATTERNS:
        name = pattern.sub("", name, count=1)
    name = name.strip()

    concentration: Optional[str] = None
    thread: Optional[str] = None
    match = _CONCENTRATION_PATTERN.match(name)
    if match:
        name, concentration = match.group(1).strip(), match.group(2).strip()
    match = _THREAD_PATTERN.match(name)
    if match:
        name, thread = match.group(1).strip(), match.group(2).strip()

    lower = first.lower()
    degree_type = DegreeType.BS
    if "master" in lower:
        degree_type = DegreeType.MS
    if "phd" in lower or "doctor of philosophy" in lower:
        degree_type = DegreeType.PHD
    if "minor" in lower:
        degree_type = DegreeType.MINOR

    return ProgramTitle(name=name, degree_type=degree_type, concentration=concentration, thread=thread)


def extract_total_credits(text: str) -> int:
    """Best-effort 'Total Credit Hours' value; 0 when the text has none."""
    match = _TOTAL_CREDITS_PATTERN.search(text)
    if match:
        return int(match.group(1))
    for pattern in _ALT_TOTAL_CREDITS_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return 0


def extract_college(program_name: str) -> str:
    """Classify the owning college from keywords in the program name."""
    lower = program_name.lower()
    if "computer science" in lower or "computing" in lower:
        return "College of Computing"
    if "engineering" in lower:
        return "College of Engineering"
    if "science" in lower or "mathematics" in lower:
        return "College of Sciences"
    return _DEFAULT_COLLEGE


def create_flexible_category(line: str, config: Optional[ParserConfig] = None) -> Optional[Requirement]:
    """Wrap a stray shorthand line in its own one-course category.

    Returns ``None`` for lines with no entry in the category name table.
    """
    clean = line.strip()
    name = next((name for key, name in _FLEXIBLE_CATEGORY_NAMES if key in clean), None)
    if name is None:
        return None
    course = parse_flexible_requirement(clean, config) or FlexibleCourse(title=strip_markup(clean))
    return Requirement(name=name, courses=[course])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _parse_requirements(lines: list[str], ctx: ParseContext) -> list[Requirement]:
    requirements: list[Requirement] = []
    index = 1
    while index < len(lines):
        line = lines[index].strip()
        if not line or is_navigation_header(line) or is_footnote_start(line):
            index += 1
            continue

        if _MAJOR_HEADER_PATTERN.match(strip_markup(line)):
            result = parse_category(lines, index, ctx)
            if result.category is not None:
                requirements.append(result.category)
            index = result.next_index
            continue

        if is_category_header(line):
            result = parse_category(lines, index, ctx)
            if result.category is not None and result.category.courses:
                requirements.append(result.category)
            elif result.category is not None:
                ctx.trace(f"Skipped empty category '{result.category.name}'")
            index = result.next_index
            continue

        if is_flexible_requirement(line):
            category = create_flexible_category(line, ctx.config)
            if category is not None:
                ctx.trace(f"Flexible category '{category.name}' from line {index}")
                requirements.append(category)
            else:
                ctx.trace(f"No category for flexible line {index}: {line}")

        index += 1
    return requirements


def parse_program(text: Any, config: Optional[ParserConfig] = None) -> ProgramData:
    """Parse pasted catalog text into a ``ProgramData`` document.

    Never fails on irregular or empty text: unrecognised lines are dropped
    and empty input yields a document with no requirements.

    Args:
        text: The catalog page as plain text; line 0 is the program title.
        config: Parser tunables. Defaults to ``ParserConfig()``.

    Returns:
        The parsed program.

    Raises:
        CatalogParseError: If *text* is ``None`` or not a string.
    """
    if text is None:
        raise CatalogParseError("Catalog text is required, got None")
    if not isinstance(text, str):
        raise CatalogParseError(f"Catalog text must be a string, got {type(text).__name__}")

    ctx = ParseContext(config=config or ParserConfig(), table_format=detect_table_format(text))
    lines = [line for line in text.splitlines() if line.strip()]
    title = parse_title_line(lines[0] if lines else "")
    ctx.trace(f"Parsing '{title.name}' ({title.degree_type.value}), {len(lines)} line(s)")
    if ctx.table_format:
        ctx.trace("Table format detected")

    requirements = _parse_requirements(lines, ctx)

    if title.degree_type != DegreeType.MINOR:
        requirements = handle_missing_major_requirements(requirements, text, ctx)
    requirements = add_missing_required_categories(requirements, text, title.degree_type, ctx)
    requirements = enhance_with_logic_groups(requirements, ctx)
    requirements = enhance_with_selection_groups(requirements, ctx)
    requirements = consolidate_and_groups(requirements, ctx)
    requirements = limit_group_depth(requirements, ctx)
    requirements = filter_empty_categories(requirements, ctx)

    footnotes = extract_footnotes(text)
    ctx.trace(f"Found {len(requirements)} categories and {len(footnotes)} footnote(s)")

    return ProgramData(
        name=title.name,
        degree_type=title.degree_type,
        concentration=title.concentration,
        thread=title.thread,
        requirements=requirements,
        footnotes=footnotes,
        college=extract_college(title.name),
        total_credits=extract_total_credits(text),
    )
