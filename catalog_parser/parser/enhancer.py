"""Whole-document post-processing passes.

Each pass takes the current requirement list and returns a new one; the
input models are never mutated. :func:`parse_program` applies them in the
order they appear in this module.
"""

from __future__ import annotations

import re

from .context import ParseContext
from .groups import SELECTION_PHRASE_PATTERN, selection_terms
from .models import (
    Course,
    DegreeType,
    FlexibleCourse,
    Requirement,
    as_regular,
    children_of,
    is_contentless,
    iter_courses,
    with_children,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_MAJOR_REQUIREMENTS = "Major Requirements"
_FIELD_OF_STUDY = "field of study"

_MAJOR_TITLE_KEYWORDS = (
    "Economics Requirement",
    "Ethics Requirement",
    "Thermodynamics",
    "Dynamics",
    "Design",
    "Control",
    "Experimental",
    "Technical Communications",
    "Vehicle Performance",
    "Aerodynamics",
    "Structural Analysis",
    "Vibration",
    "Propulsion",
    "Laboratory",
    "Capstone",
)
_MAJOR_CODE_PREFIXES = ("CEE ", "AE ", "ME ", "CHBE ", "MSE ")

# (category name, placeholder title, evidence phrases)
_MINOR_CHECKLIST = (
    ("Required Courses", "Required Courses", ("Required Courses",)),
    ("CS Electives", "CS Electives", ("CS Electives", "Electives")),
)
_DEGREE_CHECKLIST = (
    ("Arts, Humanities, and Ethics", "Any HUM", ("Any HUM",)),
    ("Social Sciences", "Any SS", ("Any SS",)),
    ("Major Requirements", "Major Requirements", ("Major Requirements", "Economics Requirement")),
    ("Free Electives", "Free Electives", ("Free Electives", "Approved Electives")),
)

_DUPLICABLE_TITLE_PATTERN = re.compile(r"lab science|elective", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Category backfill
# ---------------------------------------------------------------------------

def _belongs_to_major(course: Course) -> bool:
    if any(keyword in course.title for keyword in _MAJOR_TITLE_KEYWORDS):
        return True
    return course.code.startswith(_MAJOR_CODE_PREFIXES)


def handle_missing_major_requirements(
    requirements: list[Requirement], text: str, ctx: ParseContext
) -> list[Requirement]:
    """Split a 'Major Requirements' category out of 'Field of Study'.

    Only applies when the text mentions Major Requirements but no parsed
    category carries that name. Matching courses move to a new category
    placed right after 'Field of Study'.
    """
    if _MAJOR_REQUIREMENTS not in text:
        return requirements
    if any(_MAJOR_REQUIREMENTS.lower() in r.name.lower() for r in requirements):
        return requirements

    for position, requirement in enumerate(requirements):
        if _FIELD_OF_STUDY not in requirement.name.lower():
            continue
        major = [c for c in requirement.courses if _belongs_to_major(c)]
        if not major:
            return requirements
        remaining = [c for c in requirement.courses if not _belongs_to_major(c)]
        ctx.trace(f"Moved {len(major)} course(s) from '{requirement.name}' to {_MAJOR_REQUIREMENTS}")
        result = list(requirements)
        result[position] = requirement.model_copy(update={"courses": remaining})
        result.insert(position + 1, Requirement(name=_MAJOR_REQUIREMENTS, courses=major))
        return result
    return requirements


def add_missing_required_categories(
    requirements: list[Requirement], text: str, degree_type: DegreeType, ctx: ParseContext
) -> list[Requirement]:
    """Append placeholder categories the text mentions but parsing never produced.

    A checklist entry is satisfied when some category name contains the
    first word of its name, or when a flexible slot with its placeholder
    title already exists anywhere in the document.
    """
    checklist = _MINOR_CHECKLIST if degree_type == DegreeType.MINOR else _DEGREE_CHECKLIST
    names = [r.name.lower() for r in requirements]
    flexible_titles = {
        course.title.lower()
        for requirement in requirements
        for course in iter_courses(requirement.courses)
        if course.course_type == "flexible"
    }

    result = list(requirements)
    for name, placeholder, evidence in checklist:
        if not any(phrase in text for phrase in evidence):
            continue
        first_word = name.lower().split()[0]
        if any(first_word in existing for existing in names) or placeholder.lower() in flexible_titles:
            continue
        ctx.trace(f"Added placeholder category '{name}'")
        result.append(Requirement(name=name, courses=[FlexibleCourse(title=placeholder)]))
        names.append(name.lower())
    return result


# ---------------------------------------------------------------------------
# Group enhancement
# ---------------------------------------------------------------------------

def enhance_with_logic_groups(requirements: list[Requirement], ctx: ParseContext) -> list[Requirement]:
    """Coalesce runs of two or more ungrouped ``or_option`` courses into OR groups."""
    result: list[Requirement] = []
    for requirement in requirements:
        courses: list[Course] = []
        run: list[Course] = []
        for course in [*requirement.courses, None]:
            if course is not None and course.course_type == "or_option":
                run.append(course)
                continue
            if len(run) >= 2:
                courses.append(ctx.or_group(run))
            else:
                courses.extend(run)
            run = []
            if course is not None:
                courses.append(course)
        result.append(requirement.model_copy(update={"courses": courses}))
    return result


def enhance_with_selection_groups(requirements: list[Requirement], ctx: ParseContext) -> list[Requirement]:
    """Turn courses whose title reads "Select N of the following" or "Select N hours" into selections.

    The ``or_option`` courses directly after such a course become its options.
    """
    result: list[Requirement] = []
    for requirement in requirements:
        source = requirement.courses
        courses: list[Course] = []
        index = 0
        while index < len(source):
            course = source[index]
            match = None
            if children_of(course) is None:
                match = SELECTION_PHRASE_PATTERN.search(course.title)
            if match is None:
                courses.append(course)
                index += 1
                continue

            options: list[Course] = []
            index += 1
            while index < len(source) and source[index].course_type == "or_option":
                options.append(as_regular(source[index]))
                index += 1
            count, hours = selection_terms(match)
            courses.append(
                ctx.selection(
                    count,
                    options,
                    title=course.title,
                    footnote_refs=course.footnote_refs,
                    hours=hours,
                )
            )
        result.append(requirement.model_copy(update={"courses": courses}))
    return result


def _is_duplicable(course: Course) -> bool:
    if children_of(course) is not None or not course.title.strip():
        return False
    return course.course_type == "flexible" or bool(_DUPLICABLE_TITLE_PATTERN.search(course.title))


def consolidate_and_groups(requirements: list[Requirement], ctx: ParseContext) -> list[Requirement]:
    """Merge consecutive duplicate slots, e.g. two 'Lab Science' lines, into one AND group."""
    result: list[Requirement] = []
    for requirement in requirements:
        source = requirement.courses
        courses: list[Course] = []
        index = 0
        while index < len(source):
            course = source[index]
            end = index + 1
            if _is_duplicable(course):
                key = course.title.strip().lower()
                while (
                    end < len(source)
                    and _is_duplicable(source[end])
                    and source[end].title.strip().lower() == key
                ):
                    end += 1
            if end - index >= 2:
                title = f"{course.title} ({end - index} courses)"
                courses.append(ctx.and_group(list(source[index:end]), title=title))
            else:
                courses.append(course)
            index = end
        result.append(requirement.model_copy(update={"courses": courses}))
    return result


# ---------------------------------------------------------------------------
# Depth guard & filtering
# ---------------------------------------------------------------------------

def _leaves(course: Course) -> list[Course]:
    children = children_of(course)
    if children is None:
        return [course]
    return [leaf for child in children for leaf in _leaves(child)]


def _limit(course: Course, depth: int, max_depth: int) -> Course:
    children = children_of(course)
    if children is None:
        return course
    limited: list[Course] = []
    for child in children:
        if children_of(child) is not None and depth + 1 > max_depth:
            limited.extend(_leaves(child))
        else:
            limited.append(_limit(child, depth + 1, max_depth))
    return with_children(course, limited)


def limit_group_depth(requirements: list[Requirement], ctx: ParseContext) -> list[Requirement]:
    """Flatten groups nested deeper than ``ctx.config.max_group_depth``.

    A top-level group is nesting level 1. A group that would sit deeper than
    the limit is replaced by its leaf courses inside its parent.
    """
    max_depth = ctx.config.max_group_depth
    result: list[Requirement] = []
    for requirement in requirements:
        courses: list[Course] = []
        for course in requirement.courses:
            courses.append(_limit(course, 1, max_depth))
        if courses != requirement.courses:
            ctx.trace(f"Flattened nesting deeper than {max_depth} in '{requirement.name}'")
        result.append(requirement.model_copy(update={"courses": courses}))
    return result


def filter_empty_categories(requirements: list[Requirement], ctx: ParseContext) -> list[Requirement]:
    """Drop categories without a single course that carries a real code or title."""
    kept: list[Requirement] = []
    for requirement in requirements:
        if any(not is_contentless(c) for c in requirement.courses):
            kept.append(requirement)
        else:
            ctx.trace(f"Dropped empty category '{requirement.name}'")
    return kept
