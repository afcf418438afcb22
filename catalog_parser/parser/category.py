"""Category parsing.

Walks the lines of one requirement category, from the line after its header
to the next boundary (empty line, category header or footnote start), and
assembles its ordered list of ``Course`` nodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .classifier import clean_category_name, is_category_header, is_footnote_start
from .context import ParseContext
from .courses import (
    parse_code_and_group,
    parse_complex_course,
    parse_flexible_requirement,
    parse_standard_course,
    parse_table_format_course,
)
from .groups import (
    GroupMatch,
    collect_trailing_or,
    detect_and_pattern,
    detect_or_pattern,
    detect_selection,
)
from .models import Course, Requirement


@dataclass(frozen=True)
class CategoryResult:
    """The parsed category (``None`` when the header has no usable name) and where to resume."""

    category: Optional[Requirement]
    next_index: int


_Strategy = Callable[[list[str], int, ParseContext], Optional[GroupMatch]]


# ---------------------------------------------------------------------------
# Single-line strategies
# ---------------------------------------------------------------------------

def _single(node: Optional[Course], index: int) -> Optional[GroupMatch]:
    return GroupMatch(node, index + 1) if node is not None else None


def _inline_and(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    return _single(parse_code_and_group(lines[index], ctx), index)


def _table_course(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    if not ctx.table_format:
        return None
    parsed = parse_table_format_course(lines, index, ctx.config)
    return GroupMatch(*parsed) if parsed is not None else None


def _standard_course(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    return _single(parse_standard_course(lines[index], ctx), index)


def _complex_course(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    return _single(parse_complex_course(lines[index], ctx), index)


# Multi-line group detectors consume their own lines.
_GROUP_STRATEGIES: tuple[_Strategy, ...] = (detect_selection, detect_or_pattern)

# Any course or AND group parsed here absorbs the "or ..." lines right after it.
_COURSE_STRATEGIES: tuple[_Strategy, ...] = (
    _inline_and,
    detect_and_pattern,
    _table_course,
    _standard_course,
    _complex_course,
)


def parse_line(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    """Try every strategy on ``lines[index]`` in priority order; first match wins."""
    for strategy in _GROUP_STRATEGIES:
        match = strategy(lines, index, ctx)
        if match is not None:
            return match

    for strategy in _COURSE_STRATEGIES:
        match = strategy(lines, index, ctx)
        if match is not None:
            return collect_trailing_or(match, lines, ctx)

    return _single(parse_flexible_requirement(lines[index], ctx.config), index)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_category(lines: list[str], start_index: int, ctx: ParseContext) -> CategoryResult:
    """Parse the category whose header is ``lines[start_index]``.

    Unrecognised lines are dropped. ``next_index`` points at the boundary
    line, which is left for the caller to process.

    Args:
        lines: All non-empty document lines.
        start_index: Index of the header line.
        ctx: The current parse context.

    Returns:
        A ``CategoryResult`` with the category and the index to resume from.
    """
    name = clean_category_name(lines[start_index])
    ctx.trace(f"Category '{name}' at line {start_index}")

    courses: list[Course] = []
    index = start_index + 1
    while index < len(lines):
        line = lines[index].strip()
        if not line or is_category_header(line) or is_footnote_start(line):
            break
        match = parse_line(lines, index, ctx)
        if match is None:
            ctx.trace(f"Dropped line {index}: {line}")
            index += 1
            continue
        courses.append(match.node)
        index = match.next_index

    if not name:
        return CategoryResult(category=None, next_index=index)
    ctx.trace(f"Category '{name}' ends at line {index} with {len(courses)} course(s)")
    return CategoryResult(category=Requirement(name=name, courses=courses), next_index=index)
