"""Line classification predicates.

Every function here takes one line of catalog text and answers a yes/no
question about it without side effects. Callers evaluate them in a fixed
order: a line that is a category header is never also treated as a flexible
requirement, because the header check always runs first.
"""

from __future__ import annotations

import re


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Two to four uppercase letters, a four-digit number, an optional suffix letter.
COURSE_CODE = r"[A-Z]{2,4}\s+\d{4}[A-Z]?"

_MARKUP_PATTERN = re.compile(r"\*+")
_COURSE_CODE_PREFIX_PATTERN = re.compile(rf"^{COURSE_CODE}\b")
_BARE_COURSE_CODE_PATTERN = re.compile(rf"^{COURSE_CODE}$")
_BARE_NUMBER_PATTERN = re.compile(r"^\d+$")
_OR_PREFIX_PATTERN = re.compile(r"^or\s+", re.IGNORECASE)
_FOOTNOTE_MARKER_PATTERN = re.compile(r"^\*{0,2}\d+\*{0,2}$")
_GENERAL_HEADER_PATTERN = re.compile(r"^[A-Z][A-Za-z\s&,.-]+$")

_NAVIGATION_EXACT = frozenset({"requirements", "program of study"})
_NAVIGATION_PHRASES = (
    "overview",
    "designators and options",
    "course list",
    "code title",
    "codetitle",
    "prerequisite",
)
_FOOTNOTE_PHRASES = (
    "pass-fail",
    "grade of",
    "better is required",
    "not allowed",
    "must complete",
    "minimum grade",
)

_KNOWN_CATEGORY_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^Major Requirements?$",
        r"^Required Courses$",
        r"^[A-Z]+ Electives$",
        r"^[A-Z]+ Major Requirements?$",
        r"^CE Breadth Electives$",
        r"^College of Engineering Requirements?$",
        r"^Core IMPACTS?$",
        r"^Institutional Priority$",
        r"^Wellness Requirement$",
        r"^Mathematics and Quantitative Skills$",
        r"^Political Science and U\.?S\.? History$",
        r"^Arts, Humanities,? and Ethics$",
        r"^Communicating in Writing$",
        r"^Technology, Mathematics,? and Sciences$",
        r"^Social Sciences?$",
        r"^Field of Study$",
        r"^.+Concentration$",
        r"^.+Technical Electives$",
        r"^Program of Study$",
    )
]

# Up to two trailing numbers: an optional footnote marker and a credit value.
_NUMBERS = r"(?:\s*\d+){0,2}"

# "Any HUM" and "<DEPT> Options" rely on an uppercase department token.
_FLEXIBLE_PATTERNS = [
    re.compile(rf"^Any [A-Z]+{_NUMBERS}$"),
    re.compile(r"^Any [A-Z]+\s+\d+X+\s*\d*$"),
    re.compile(rf"^[A-Z]+ Options?{_NUMBERS}$"),
    re.compile(rf"^[A-Z]+ Electives{_NUMBERS}$"),
    re.compile(rf"^(?:Free|Approved) Electives{_NUMBERS}$", re.IGNORECASE),
    re.compile(rf"^Lab Science{_NUMBERS}$", re.IGNORECASE),
    re.compile(r"^Lab Science\s*\d+\s*Lab Science\s*\d+", re.IGNORECASE),
    re.compile(rf"^(?:Math|Science) Options?{_NUMBERS}$", re.IGNORECASE),
    re.compile(rf"^(?:Economics|Ethics) Requirement{_NUMBERS}$", re.IGNORECASE),
    re.compile(r"^CE Technical Electives\s*$", re.IGNORECASE),
    re.compile(r"^(?:Classes|Courses) in\s+[A-Z]"),
    re.compile(r"^Courses (?:from|outside) "),
    re.compile(r"^Concentration electives?\s*$", re.IGNORECASE),
    re.compile(r"^Study Abroad Experience", re.IGNORECASE),
    re.compile(r"^3000-, 4000-level"),
    re.compile(r"^\d+$"),
]

_TWO_NUMBER_LINE_PATTERN = re.compile(r"^[A-Za-z\s]+\s+\d+\s+\d+$")
_TOTAL_LINE_PATTERN = re.compile(r"^Total\s+Credit\s+Hours?\s+\d+$", re.IGNORECASE)
_TRAILING_CREDIT_PATTERN = re.compile(r"\s+\d{1,3}$")
_TRAILING_DIGIT_PATTERN = re.compile(r"\d$")

_TABLE_FORMAT_PATTERNS = [
    re.compile(r"Code\s*Title", re.IGNORECASE),
    re.compile(r"Course\s+List", re.IGNORECASE),
]

_CATEGORY_PREFIX_PATTERN = re.compile(r"^(?:course|and|or|select)\s+", re.IGNORECASE)
_CATEGORY_SUFFIX_PATTERN = re.compile(r"\s+(?:course|and|or|select)$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def strip_markup(line: str) -> str:
    """Remove markdown bold/italic asterisks and surrounding whitespace."""
    return _MARKUP_PATTERN.sub("", line).strip()


def clean_category_name(line: str) -> str:
    """Turn a header line into a category label.

    Strips markup and dangling connectives left over from copy-paste, e.g.
    ``'**Select Free Electives**'`` -> ``'Free Electives'``.
    """
    name = strip_markup(line)
    name = _CATEGORY_PREFIX_PATTERN.sub("", name)
    name = _CATEGORY_SUFFIX_PATTERN.sub("", name)
    return name.strip()


def starts_with_or(line: str) -> bool:
    """True if the line is written as an ``or ...`` alternative."""
    return bool(_OR_PREFIX_PATTERN.match(line.strip()))


def strip_or_prefix(line: str) -> str:
    return _OR_PREFIX_PATTERN.sub("", line.strip(), count=1)


def is_course_code_line(line: str) -> bool:
    """True if the line begins with a course code."""
    return bool(_COURSE_CODE_PREFIX_PATTERN.match(strip_markup(line)))


def is_bare_course_code(line: str) -> bool:
    """True if the line is nothing but a course code."""
    return bool(_BARE_COURSE_CODE_PATTERN.match(strip_markup(line)))


def detect_table_format(text: str) -> bool:
    """Detect the code/title/credit table layout from its header signature."""
    return any(pattern.search(text) for pattern in _TABLE_FORMAT_PATTERNS)


# ---------------------------------------------------------------------------
# Classifiers
# ---------------------------------------------------------------------------

def is_navigation_header(line: str) -> bool:
    """True for catalog page chrome such as 'Overview' or 'Code Title'.

    'Requirements' and 'Program of Study' only count when they are the whole
    line, so that 'Major Requirements' stays a category.
    """
    lower = strip_markup(line).lower()
    if not lower:
        return False
    if lower in _NAVIGATION_EXACT:
        return True
    return any(phrase in lower for phrase in _NAVIGATION_PHRASES)


def is_footnote_start(line: str) -> bool:
    """True for a bare footnote number or a line of footnote boilerplate."""
    stripped = line.strip()
    if _FOOTNOTE_MARKER_PATTERN.match(stripped):
        return True
    lower = stripped.lower()
    return any(phrase in lower for phrase in _FOOTNOTE_PHRASES)


def is_known_category(line: str) -> bool:
    """True if the line matches one of the named category patterns."""
    clean = strip_markup(line)
    return any(pattern.match(clean) for pattern in _KNOWN_CATEGORY_PATTERNS)


def is_category_header(line: str) -> bool:
    """Decide whether a line opens a new requirement category.

    Course lines, bare numbers, ``or``/``select`` lines and navigation chrome
    are rejected outright. A named category pattern wins next; failing that, a
    capitalised line made only of letters, spaces and ``&,.-`` is accepted.
    Digits are outside that character class, so a credit-suffixed line such
    as ``'Free Electives 6'`` never passes as a header.
    """
    clean = strip_markup(line)
    if not clean or is_navigation_header(clean):
        return False
    if _COURSE_CODE_PREFIX_PATTERN.match(clean) or _BARE_NUMBER_PATTERN.match(clean):
        return False
    lower = clean.lower()
    if lower.startswith("or ") or lower.startswith("select "):
        return False

    if any(pattern.match(clean) for pattern in _KNOWN_CATEGORY_PATTERNS):
        return True

    return len(clean) > 2 and bool(_GENERAL_HEADER_PATTERN.match(clean))


def is_flexible_requirement(line: str) -> bool:
    """True for shorthand slots like 'Any HUM', 'Free Electives 6' or 'Lab Science 4'."""
    clean = strip_markup(line)
    return any(pattern.match(clean) for pattern in _FLEXIBLE_PATTERNS)


def is_credit_bearing_line(line: str) -> bool:
    """True for lines that carry their own credit value, e.g. 'Free Electives 1    10'.

    Such a line is a requirement of its own and ends a selection's option list.
    """
    clean = strip_markup(line)
    if _TWO_NUMBER_LINE_PATTERN.match(clean) or _TOTAL_LINE_PATTERN.match(clean):
        return True
    lower = clean.lower()
    if (
        not _COURSE_CODE_PREFIX_PATTERN.match(clean)
        and _TRAILING_CREDIT_PATTERN.search(clean)
        and "since" not in lower
        and "1877" not in lower
    ):
        return True
    return is_flexible_requirement(clean) and bool(_TRAILING_DIGIT_PATTERN.search(clean))
