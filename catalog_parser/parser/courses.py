"""Course fragment parsing.

Turns a single line (or a code line plus its title line) into one ``Course``
node. Every ``parse_*`` function returns ``None`` when the line does not fit
its layout so the category parser can try the next strategy.

Trailing numbers are the hard part. A run of small integers at the end of a
title is read as footnote markers (``'Computing for Engineers 3'`` -> ``[3]``),
anything outside the configured range is left alone as part of the title,
and a ``<refs> <credit>`` pair keeps the refs and discards the credit. The
rule is a heuristic: a course legitimately titled with a single-digit number
will lose that number to ``footnote_refs``.
"""

from __future__ import annotations

import re
from typing import Optional

from catalog_parser.config import ParserConfig

from .classifier import (
    COURSE_CODE,
    is_bare_course_code,
    is_course_code_line,
    is_flexible_requirement,
    is_footnote_start,
    is_known_category,
    starts_with_or,
    strip_markup,
    strip_or_prefix,
)
from .context import ParseContext
from .models import AndGroup, Course, FlexibleCourse, OrOptionCourse, RegularCourse


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WHITESPACE_PATTERN = re.compile(r"\s+")
_STANDARD_PATTERN = re.compile(rf"^({COURSE_CODE})\s+(.+)$")
_CODE_PREFIX_PATTERN = re.compile(rf"^({COURSE_CODE})\b\s*(.*)$")
_CODE_AND_PATTERN = re.compile(rf"^(?P<codes>{COURSE_CODE}(?:\s*&\s*{COURSE_CODE})+)\s*(?P<rest>.*)$")
_COMPLEX_PATTERN = re.compile(rf"^(?P<codes>{COURSE_CODE}(?:\s*&\s*{COURSE_CODE})*)\s+(?P<title>.+)$")
_OR_TABLE_PATTERN = re.compile(rf"^(?i:or)\s+({COURSE_CODE})\s+(.+)$")
_AMPERSAND_SPLIT_PATTERN = re.compile(r"\s*&\s*")

_SINCE_YEAR_PATTERN = re.compile(r"\bsince\s+\d{4}\b", re.IGNORECASE)
_REFS_AND_CREDIT_TAIL = re.compile(
    r"^(?P<head>.*?)(?:^|\s+)(?P<refs>\d+(?:\s*,\s*\d+)*)\s+(?P<credit>\d+)\s*$"
)
_REFS_TAIL = re.compile(r"^(?P<head>.*?)(?:^|\s+)(?P<refs>\d+(?:\s*,\s*\d+)*)\s*$")

_LAB_SCIENCE_PATTERN = re.compile(r"^Lab Science\s*(\d+)?\s*(\d+)?$", re.IGNORECASE)
_FREE_ELECTIVES_PATTERN = re.compile(r"^Free Electives\s+(\d+)\s+(\d+)$", re.IGNORECASE)
_ANY_DEPT_PATTERN = re.compile(r"^Any\s+([A-Z]+)\s*(\d+)?$")
_NAMED_REQUIREMENT_PATTERN = re.compile(r"^(.+?Requirement)\s*(\d+)?\s*(\d+)?$", re.IGNORECASE)
_NAMED_ELECTIVES_PATTERN = re.compile(r"^(.+?Electives?)\s*(\d+)?\s*(\d+)?$", re.IGNORECASE)
_WORDS_AND_NUMBERS_PATTERN = re.compile(r"^([A-Za-z\s]+?)\s+(\d+)\s+(\d+)$")
_TRAILING_NUMBERS_PATTERN = re.compile(r"(?:\s*\d+)+$")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_code(code: str) -> str:
    """Collapse internal whitespace, e.g. ``'MGT    3076'`` -> ``'MGT 3076'``."""
    return _WHITESPACE_PATTERN.sub(" ", code.strip())


def _collapse(text: str) -> str:
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def _to_ints(refs: str) -> list[int]:
    return [int(part) for part in re.split(r"\s*,\s*", refs.strip()) if part]


def _dedupe(values: list[int]) -> list[int]:
    seen: list[int] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def split_footnote_tail(
    text: str, config: Optional[ParserConfig] = None, require_credit: bool = False
) -> tuple[str, list[int]]:
    """Split trailing footnote markers off *text*.

    Returns ``(head, refs)``. When the tail does not qualify, *text* comes
    back unchanged with no refs. With ``require_credit`` only the
    ``<refs> <credit>`` form is accepted, so a lone trailing number stays a
    credit value.
    """
    config = config or ParserConfig()

    match = _REFS_AND_CREDIT_TAIL.match(text)
    if match:
        refs = _to_ints(match.group("refs"))
        if refs and all(config.is_footnote_number(ref) for ref in refs):
            return match.group("head").strip(), _dedupe(refs)
        return text, []
    if require_credit:
        return text, []

    match = _REFS_TAIL.match(text)
    if match:
        refs = _to_ints(match.group("refs"))
        if refs and all(config.is_footnote_number(ref) for ref in refs):
            return match.group("head").strip(), _dedupe(refs)
    return text, []


def parse_course_title(
    title_part: str, config: Optional[ParserConfig] = None
) -> tuple[str, list[int]]:
    """Extract ``(title, footnote_refs)`` from the text after a course code.

    A tab-separated tail is a table column (credit hours) and is dropped.
    Titles mentioning ``since <year>`` or ``1877`` are returned verbatim.
    """
    text = title_part.strip()
    if "\t" in text:
        text = text.split("\t", 1)[0]
    text = _collapse(text)
    if not text:
        return "", []
    if _SINCE_YEAR_PATTERN.search(text) or "1877" in text:
        return text, []
    return split_footnote_tail(text, config)


def parse_table_title(title_part: str, config: Optional[ParserConfig] = None) -> tuple[str, list[int]]:
    """Title parsing for table layouts, where credits live in their own column."""
    config = config or ParserConfig()
    text = title_part.strip()
    if "\t" in text:
        text = text.split("\t", 1)[0]
    text = _collapse(text)
    match = _REFS_TAIL.match(text)
    if match and match.group("head").strip():
        refs = _to_ints(match.group("refs"))
        if refs and all(config.is_footnote_number(ref) for ref in refs):
            return match.group("head").strip(), _dedupe(refs)
    return text, []


def is_title_line(line: str) -> bool:
    """True if *line* can serve as the title of a preceding bare course code."""
    clean = strip_markup(line)
    if not clean or clean.startswith("&"):
        return False
    if is_course_code_line(clean) or starts_with_or(clean) or is_footnote_start(clean):
        return False
    if is_known_category(clean) or is_flexible_requirement(clean):
        return False
    return not clean.lower().startswith("total ")


# ---------------------------------------------------------------------------
# Course Parsers
# ---------------------------------------------------------------------------

def parse_code_and_group(line: str, ctx: Optional[ParseContext] = None) -> Optional[AndGroup]:
    """Parse ``'CODE & CODE [& CODE ...] title'`` into an AND group.

    The shared title is copied onto every member.
    """
    ctx = ctx or ParseContext()
    clean = strip_or_prefix(strip_markup(line))
    match = _CODE_AND_PATTERN.match(clean)
    if not match:
        return None
    codes = [normalize_code(code) for code in _AMPERSAND_SPLIT_PATTERN.split(match.group("codes"))]
    title, refs = parse_course_title(match.group("rest"), ctx.config)
    members: list[Course] = [RegularCourse(code=code, title=title) for code in codes]
    return ctx.and_group(members, title=title, footnote_refs=refs)


def parse_standard_course(line: str, ctx: Optional[ParseContext] = None) -> Optional[Course]:
    """Parse ``'[or ]CODE title'`` into a regular or ``or_option`` course.

    Code-level AND (``'CODE & CODE title'``) is checked first and returned as
    an AND group. A title containing ``&`` is left for
    :func:`parse_complex_course`.
    """
    ctx = ctx or ParseContext()
    clean = strip_markup(line)
    is_option = starts_with_or(clean)
    if is_option:
        clean = strip_or_prefix(clean)

    group = parse_code_and_group(clean, ctx)
    if group is not None:
        return group

    match = _STANDARD_PATTERN.match(clean)
    if not match:
        return None
    code, title_part = match.groups()
    if "&" in title_part:
        return None

    title, refs = parse_course_title(title_part, ctx.config)
    course_cls = OrOptionCourse if is_option else RegularCourse
    return course_cls(code=normalize_code(code), title=title, footnote_refs=refs)


def parse_complex_course(line: str, ctx: Optional[ParseContext] = None) -> Optional[Course]:
    """Parse ``'CODE (& CODE)* title'``; one code gives a course, more give an AND group."""
    ctx = ctx or ParseContext()
    clean = strip_markup(line)
    is_option = starts_with_or(clean)
    if is_option:
        clean = strip_or_prefix(clean)

    match = _COMPLEX_PATTERN.match(clean)
    if not match:
        return None
    codes = [normalize_code(code) for code in _AMPERSAND_SPLIT_PATTERN.split(match.group("codes"))]
    title, refs = parse_course_title(match.group("title"), ctx.config)
    if len(codes) == 1:
        course_cls = OrOptionCourse if is_option else RegularCourse
        return course_cls(code=codes[0], title=title, footnote_refs=refs)
    members: list[Course] = [RegularCourse(code=code, title=title) for code in codes]
    return ctx.and_group(members, title=title, footnote_refs=refs)


def parse_course_from_text(text: str, config: Optional[ParserConfig] = None) -> Optional[RegularCourse]:
    """Parse one member of an OR/AND expression.

    A leading course code is optional; without one the whole text becomes the
    title of a code-less course.
    """
    clean = strip_or_prefix(strip_markup(text))
    if not clean:
        return None
    match = _CODE_PREFIX_PATTERN.match(clean)
    if match:
        title, refs = parse_course_title(match.group(2), config)
        return RegularCourse(code=normalize_code(match.group(1)), title=title, footnote_refs=refs)
    title, refs = parse_course_title(clean, config)
    return RegularCourse(code="", title=title, footnote_refs=refs)


def parse_code_title_pair(
    lines: list[str], index: int, config: Optional[ParserConfig] = None, table: bool = False
) -> Optional[tuple[Course, int]]:
    """Parse a bare course-code line whose title sits on the next line.

    Returns ``(course, next_index)`` or ``None``.
    """
    if index + 1 >= len(lines) or not is_bare_course_code(lines[index]):
        return None
    title_line = lines[index + 1]
    if not is_title_line(title_line):
        return None
    parse_title = parse_table_title if table else parse_course_title
    title, refs = parse_title(strip_markup(title_line), config)
    if not title:
        return None
    code = normalize_code(strip_markup(lines[index]))
    return RegularCourse(code=code, title=title, footnote_refs=refs), index + 2


def parse_table_format_course(
    lines: list[str], index: int, config: Optional[ParserConfig] = None
) -> Optional[tuple[Course, int]]:
    """Parse one course in the code/title/credit table layout.

    Handles a bare code line followed by its title line, an inline
    ``'CODE title'`` row and an inline ``'or CODE title'`` row.
    """
    pair = parse_code_title_pair(lines, index, config, table=True)
    if pair is not None:
        return pair

    clean = strip_markup(lines[index])
    match = _OR_TABLE_PATTERN.match(clean)
    if match:
        title, refs = parse_table_title(match.group(2), config)
        return OrOptionCourse(code=normalize_code(match.group(1)), title=title, footnote_refs=refs), index + 1

    match = _STANDARD_PATTERN.match(clean)
    if match and "&" not in match.group(2):
        title, refs = parse_table_title(match.group(2), config)
        return RegularCourse(code=normalize_code(match.group(1)), title=title, footnote_refs=refs), index + 1
    return None


# ---------------------------------------------------------------------------
# Flexible Requirements
# ---------------------------------------------------------------------------

def _flexible_refs(first: Optional[str], second: Optional[str], config: ParserConfig) -> list[int]:
    """Footnote refs for '<slot> N [M]' lines: N counts only if it is in range and M looks like credit."""
    if first is None:
        return []
    value = int(first)
    if not config.is_footnote_number(value):
        return []
    if second is not None and int(second) < 3:
        return []
    return [value]


def parse_flexible_requirement(line: str, config: Optional[ParserConfig] = None) -> Optional[FlexibleCourse]:
    """Parse a shorthand slot such as 'Free Electives 1 10' into a flexible course."""
    config = config or ParserConfig()
    clean = _collapse(strip_markup(line))
    if not is_flexible_requirement(clean):
        return None

    match = _LAB_SCIENCE_PATTERN.match(clean)
    if match:
        refs = [int(match.group(1))] if match.group(1) and config.is_footnote_number(int(match.group(1))) else []
        return FlexibleCourse(title="Lab Science", footnote_refs=refs)

    match = _FREE_ELECTIVES_PATTERN.match(clean)
    if match:
        return FlexibleCourse(
            title="Free Electives", footnote_refs=_flexible_refs(match.group(1), match.group(2), config)
        )

    match = _ANY_DEPT_PATTERN.match(clean)
    if match:
        return FlexibleCourse(title=f"Any {match.group(1)}")

    for pattern in (_NAMED_REQUIREMENT_PATTERN, _NAMED_ELECTIVES_PATTERN, _WORDS_AND_NUMBERS_PATTERN):
        match = pattern.match(clean)
        if match:
            return FlexibleCourse(
                title=match.group(1).strip(),
                footnote_refs=_flexible_refs(match.group(2), match.group(3), config),
            )

    if clean.isdigit():
        return FlexibleCourse(title="Flexible requirement")

    title = _TRAILING_NUMBERS_PATTERN.sub("", clean).strip()
    return FlexibleCourse(title=title or clean)
