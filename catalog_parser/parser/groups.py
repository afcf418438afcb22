"""Group detectors for OR, AND and SELECTION constructs.

Each ``detect_*`` function looks at ``lines[index]`` (and, where the layout
spans lines, the lines after it). On a match it returns a ``GroupMatch``
holding the built node and the index to resume from; otherwise it returns
``None`` and consumes nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .classifier import (
    COURSE_CODE,
    is_bare_course_code,
    is_category_header,
    is_course_code_line,
    is_credit_bearing_line,
    is_footnote_start,
    starts_with_or,
    strip_markup,
    strip_or_prefix,
)
from .context import ParseContext
from .courses import (
    normalize_code,
    parse_code_and_group,
    parse_code_title_pair,
    parse_complex_course,
    parse_course_from_text,
    parse_course_title,
    parse_standard_course,
    split_footnote_tail,
)
from .models import Course, RegularCourse


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_OR_SPLIT_PATTERN = re.compile(rf"\s+(?i:or)\s+(?=\(?\s*{COURSE_CODE})")
_DANGLING_OR_PATTERN = re.compile(rf"^(?P<first>{COURSE_CODE}.*?)\s+(?i:or)\s*$")
_AND_PAIR_PATTERN = re.compile(
    rf"^(?P<first>{COURSE_CODE}\s+[^&]+?)\s+&\s+(?P<second>{COURSE_CODE}(?:\s+.*)?)$"
)
_AMPERSAND_LINE_PATTERN = re.compile(rf"^&\s*(?P<code>{COURSE_CODE})\s*(?P<rest>.*)$")
_CONTINUATION_PATTERN = re.compile(r"^[a-z]")

_COUNT_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}
_COURSE_SELECTION = (
    r"Select\s+(?P<count>one|two|three|four|five|six|seven|eight|nine|ten|\d+)\s+"
    r"(?:of\s+)?(?:the\s+following|electives?|courses?|options?)\b"
)
_HOUR_SELECTION = (
    r"Select\s+(?P<hours>\d+)\s+(?:credit\s+)?(?:hours?|credits?|hrs?)\b"
    r"(?:\s+(?:from|of)\s+(?:the\s+following|electives?|courses?)\b)?"
)
_SELECTION_PHRASE = rf"(?:{_COURSE_SELECTION}|{_HOUR_SELECTION})"
_SELECTION_LINE_PATTERN = re.compile(
    rf"^(?P<prefix>.+?)?(?:^|\s+)(?P<phrase>{_SELECTION_PHRASE})", re.IGNORECASE
)
SELECTION_PHRASE_PATTERN = re.compile(rf"\b{_SELECTION_PHRASE}", re.IGNORECASE)


@dataclass(frozen=True)
class GroupMatch:
    """A detected node and the index of the first line after it."""

    node: Course
    next_index: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_selection_count(token: Optional[str]) -> int:
    """Turn 'three' or '3' into an int; anything unusable falls back to 1."""
    if not token:
        return 1
    token = token.strip().lower()
    if token.isdigit():
        return max(int(token), 1)
    return _COUNT_WORDS.get(token, 1)


def selection_terms(match: re.Match[str]) -> tuple[int, Optional[int]]:
    """Return ``(count, hours)`` for a selection phrase match.

    Hour-based phrases yield a count of 1 and the hour total; course-based
    phrases yield their count and ``None``.
    """
    hours = match.group("hours")
    if hours:
        return 1, max(int(hours), 1)
    return parse_selection_count(match.group("count")), None


def parse_or_member(text: str, ctx: ParseContext) -> Optional[Course]:
    """Parse one alternative of an OR construct.

    ``'(CODE & CODE) title'`` and ``'CODE & CODE title'`` become AND groups
    nested inside the OR; anything else is a single course.
    """
    text = strip_or_prefix(strip_markup(text))
    if text.startswith("("):
        close = text.find(")")
        inner = text[1:close] if close != -1 else text[1:]
        trailing = text[close + 1:].strip() if close != -1 else ""
        text = f"{inner.strip()} {trailing}".strip()
    group = parse_code_and_group(text, ctx)
    if group is not None:
        return group
    return parse_course_from_text(text, ctx.config)


def collect_trailing_or(match: GroupMatch, lines: list[str], ctx: ParseContext) -> GroupMatch:
    """Fold directly following ``or ...`` lines into an OR group with *match*.

    Scanning stops at the first line that is not an ``or`` alternative. When
    no such lines follow, *match* is returned unchanged.
    """
    members: list[Course] = [match.node]
    index = match.next_index
    while index < len(lines):
        line = lines[index].strip()
        if not line or not starts_with_or(line) or is_footnote_start(line):
            break
        member = parse_or_member(line, ctx)
        if member is not None:
            members.append(member)
        index += 1

    if len(members) < 2:
        return match
    return GroupMatch(ctx.or_group(members), index)


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------

def detect_or_pattern(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    """Detect an OR construct starting at ``lines[index]``.

    Same-line forms are tried first: ``'CODE title OR CODE title'`` and
    ``'CODE OR (CODE & CODE)'``. Then a line ending in a dangling ``or``
    collects the ``or ...`` lines after it, up to an empty line, a header, a
    footnote or the next course-code line.
    """
    line = strip_markup(lines[index])
    if not is_course_code_line(line):
        return None

    parts = _OR_SPLIT_PATTERN.split(line)
    if len(parts) >= 2:
        members = [m for m in (parse_or_member(part, ctx) for part in parts) if m is not None]
        if len(members) < 2:
            return None
        return GroupMatch(ctx.or_group(members), index + 1)

    dangling = _DANGLING_OR_PATTERN.match(line)
    if not dangling:
        return None

    first = parse_course_from_text(dangling.group("first"), ctx.config)
    members = [first] if first is not None else []
    cursor = index + 1
    while cursor < len(lines):
        candidate = lines[cursor].strip()
        if (
            not candidate
            or is_category_header(candidate)
            or is_footnote_start(candidate)
            or is_course_code_line(candidate)
        ):
            break
        if starts_with_or(candidate):
            member = parse_or_member(candidate, ctx)
            if member is not None:
                members.append(member)
        cursor += 1

    if len(members) >= 2:
        return GroupMatch(ctx.or_group(members), cursor)
    if members:
        return GroupMatch(members[0], cursor)
    return None


def detect_and_pattern(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    """Detect an AND construct starting at ``lines[index]``.

    Recognises a code chain with a shared title (``'CODE & CODE title'``),
    two codes with their own titles (``'CODE title & CODE title'``), and a
    bare code line followed by ``'& CODE title'`` lines plus lower-case
    title continuation lines.
    """
    line = strip_markup(lines[index])
    if not is_course_code_line(line):
        return None

    group = parse_code_and_group(line, ctx)
    if group is not None:
        return GroupMatch(group, index + 1)

    pair = _AND_PAIR_PATTERN.match(line)
    if pair:
        first = parse_course_from_text(pair.group("first"), ctx.config)
        second = parse_course_from_text(pair.group("second"), ctx.config)
        if first is not None and second is not None:
            return GroupMatch(ctx.and_group([first, second]), index + 1)

    if not is_bare_course_code(line):
        return None

    codes = [normalize_code(line)]
    title_parts: list[str] = []
    cursor = index + 1
    while cursor < len(lines):
        follow = _AMPERSAND_LINE_PATTERN.match(strip_markup(lines[cursor]))
        if not follow:
            break
        codes.append(normalize_code(follow.group("code")))
        if follow.group("rest"):
            title_parts.append(follow.group("rest"))
        cursor += 1
    if len(codes) < 2:
        return None

    while cursor < len(lines):
        candidate = strip_markup(lines[cursor])
        if not _CONTINUATION_PATTERN.match(candidate) or starts_with_or(candidate):
            break
        title_parts.append(candidate)
        cursor += 1

    title, refs = parse_course_title(" ".join(title_parts), ctx.config)
    members: list[Course] = [RegularCourse(code=code, title=title) for code in codes]
    return GroupMatch(ctx.and_group(members, title=title, footnote_refs=refs), cursor)


def detect_selection(lines: list[str], index: int, ctx: ParseContext) -> Optional[GroupMatch]:
    """Detect a 'Select <N> of the following' or 'Select <N> hours from' block.

    Every following line up to a header, footnote, credit-bearing line or the
    next selection is an option. Options may be AND groups, code/title line
    pairs or single courses; OR chains are not recognised inside a selection.
    """
    line = strip_markup(lines[index])
    match = _SELECTION_LINE_PATTERN.match(line)
    if not match:
        return None

    count, hours = selection_terms(match)
    prefix = (match.group("prefix") or "").strip(" :-")
    title = prefix or match.group("phrase")
    # Only a "<refs> <credit>" tail carries footnotes; a lone number is the credit value.
    tail = line[match.end():].strip(" :.")
    _, refs = split_footnote_tail(tail, ctx.config, require_credit=True)

    options: list[Course] = []
    cursor = index + 1
    while cursor < len(lines):
        candidate = lines[cursor].strip()
        if (
            not candidate
            or is_category_header(candidate)
            or is_footnote_start(candidate)
            or is_credit_bearing_line(candidate)
            or _SELECTION_LINE_PATTERN.match(strip_markup(candidate))
        ):
            break

        and_match = detect_and_pattern(lines, cursor, ctx)
        if and_match is not None:
            options.append(and_match.node)
            cursor = and_match.next_index
            continue

        pair = parse_code_title_pair(lines, cursor, ctx.config)
        if pair is not None:
            options.append(pair[0])
            cursor = pair[1]
            continue

        course = parse_standard_course(candidate, ctx) or parse_complex_course(candidate, ctx)
        if course is not None:
            options.append(course)
        else:
            ctx.trace(f"Dropped selection line {cursor}: {candidate}")
        cursor += 1

    return GroupMatch(ctx.selection(count, options, title=title, footnote_refs=refs, hours=hours), cursor)
