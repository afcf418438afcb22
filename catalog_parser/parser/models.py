"""Pydantic v2 models for the catalog requirements parser.

Defines the structure produced by :func:`parse_program`: a ``ProgramData``
document holding named ``Requirement`` categories, each an ordered list of
``Course`` nodes. ``Course`` is a tagged union discriminated on
``course_type`` so that every variant carries only the fields it needs.

Attribute names are snake_case; the camelCase aliases are the JSON keys the
editor front-end reads and writes.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class CourseType(str, Enum):
    """Discriminator for the ``Course`` union."""
    REGULAR = "regular"
    OR_OPTION = "or_option"
    FLEXIBLE = "flexible"
    OR_GROUP = "or_group"
    AND_GROUP = "and_group"
    SELECTION = "selection"


class DegreeType(str, Enum):
    """Degree level detected from the title line."""
    BS = "BS"
    MS = "MS"
    PHD = "PhD"
    MINOR = "Minor"


class SelectionType(str, Enum):
    """Whether a selection counts courses or credit hours."""
    COURSES = "courses"
    HOURS = "hours"


# Codes that mark a node as a placeholder rather than a real course.
PLACEHOLDER_CODES = frozenset({"", "EMPTY", "FLEXIBLE"})


# ---------------------------------------------------------------------------
# Course Variants
# ---------------------------------------------------------------------------

class _CourseBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str = Field(default="", description="Course code, e.g. 'MATH 1551'; empty for synthetic nodes")
    title: str = Field(default="", description="Human-readable course or slot title")
    footnote_refs: list[int] = Field(
        default_factory=list,
        alias="footnoteRefs",
        description="Footnote numbers referenced by this node, in source order",
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RegularCourse(_CourseBase):
    """A single named course."""
    course_type: Literal["regular"] = Field(default="regular", alias="courseType")


class OrOptionCourse(_CourseBase):
    """A course written as an ``or ...`` alternative that has not been grouped yet."""
    course_type: Literal["or_option"] = Field(default="or_option", alias="courseType")


class FlexibleCourse(_CourseBase):
    """An unstructured slot such as 'Free Electives' or 'Any HUM'."""
    course_type: Literal["flexible"] = Field(default="flexible", alias="courseType")


class OrGroup(_CourseBase):
    """Mutually exclusive alternatives; exactly one satisfies the slot."""
    course_type: Literal["or_group"] = Field(default="or_group", alias="courseType")
    group_id: str = Field(default="", alias="groupId", description="Per-parse group identifier")
    group_courses: list[Course] = Field(
        ..., min_length=2, alias="groupCourses", description="Alternatives, in source order"
    )


class AndGroup(_CourseBase):
    """Courses that must all be taken together."""
    course_type: Literal["and_group"] = Field(default="and_group", alias="courseType")
    group_id: str = Field(default="", alias="groupId", description="Per-parse group identifier")
    group_courses: list[Course] = Field(
        ..., min_length=2, alias="groupCourses", description="Required members, in source order"
    )


class SelectionGroup(_CourseBase):
    """Pick options from a listed pool.

    Course-based selections ask for ``selection_count`` options. Hour-based
    selections ("Select 9 hours from the following") ask for
    ``selection_hours`` credit hours instead and leave ``selection_count``
    at its default of 1.
    """
    course_type: Literal["selection"] = Field(default="selection", alias="courseType")
    group_id: str = Field(default="", alias="groupId", description="Per-parse group identifier")
    selection_type: SelectionType = Field(
        default=SelectionType.COURSES, alias="selectionType", description="What the selection counts"
    )
    selection_count: int = Field(
        default=1, ge=1, alias="selectionCount", description="How many options must be picked"
    )
    selection_hours: Optional[int] = Field(
        default=None, ge=1, alias="selectionHours", description="Credit hours required for hour-based selections"
    )
    selection_options: list[Course] = Field(
        default_factory=list, alias="selectionOptions", description="The option pool"
    )


Course = Annotated[
    Union[RegularCourse, OrOptionCourse, FlexibleCourse, OrGroup, AndGroup, SelectionGroup],
    Field(discriminator="course_type"),
]


# ---------------------------------------------------------------------------
# Document Models
# ---------------------------------------------------------------------------

class Requirement(BaseModel):
    """A named category of courses, e.g. 'Major Requirements'."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Category label with markup stripped")
    courses: list[Course] = Field(default_factory=list, description="Top-level courses in source order")


class Footnote(BaseModel):
    """A numbered annotation declared in the trailing footnote block."""
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, description="Source-declared footnote number")
    text: str = Field(default="", description="Accumulated footnote text")


class ProgramData(BaseModel):
    """The complete parse result for one catalog page."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(default="", description="Program name from the title line")
    degree_type: DegreeType = Field(default=DegreeType.BS, alias="degreeType")
    concentration: Optional[str] = Field(default=None, description="'Name - Concentration' suffix")
    thread: Optional[str] = Field(default=None, description="'Name, X Thread' suffix")
    requirements: list[Requirement] = Field(default_factory=list)
    footnotes: list[Footnote] = Field(default_factory=list)
    college: str = Field(default="College of Computing", description="Derived college classification")
    total_credits: int = Field(
        default=0, ge=0, alias="totalCredits", description="Best-effort 'Total Credit Hours' value"
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON shape consumed by the editor."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValidationResult(BaseModel):
    """Outcome of :func:`validate_parsed_data`."""
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


for _model in (OrGroup, AndGroup, SelectionGroup, Requirement, ProgramData):
    _model.model_rebuild()


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def children_of(course: Course) -> Optional[list[Course]]:
    """Return the child list of a group node, or ``None`` for leaves."""
    if isinstance(course, (OrGroup, AndGroup)):
        return course.group_courses
    if isinstance(course, SelectionGroup):
        return course.selection_options
    return None


def with_children(course: Course, children: list[Course]) -> Course:
    """Return a copy of a group node with its children replaced."""
    if isinstance(course, (OrGroup, AndGroup)):
        return course.model_copy(update={"group_courses": children})
    if isinstance(course, SelectionGroup):
        return course.model_copy(update={"selection_options": children})
    return course


def iter_courses(courses: list[Course]) -> Iterator[Course]:
    """Yield every node of a course forest, depth-first in source order."""
    for course in courses:
        yield course
        children = children_of(course)
        if children:
            yield from iter_courses(children)


def nesting_depth(course: Course) -> int:
    """Group nesting level of a node: 0 for a leaf, 1 for a group of leaves."""
    children = children_of(course)
    if children is None:
        return 0
    return 1 + max((nesting_depth(child) for child in children), default=0)


def as_regular(course: Course) -> Course:
    """Demote an ``or_option`` to a ``regular`` course; other nodes pass through."""
    if isinstance(course, OrOptionCourse):
        return RegularCourse(code=course.code, title=course.title, footnote_refs=course.footnote_refs)
    return course


def is_contentless(course: Course) -> bool:
    """True for placeholder nodes that carry neither a real code nor a title."""
    return not course.title.strip() and course.code.strip().upper() in PLACEHOLDER_CODES
