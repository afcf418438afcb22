"""Tests for course fragment parsing (title/footnote extraction, course layouts, flexible slots)."""

from __future__ import annotations

import pytest

from catalog_parser.config import ParserConfig
from catalog_parser.parser.courses import (
    is_title_line,
    normalize_code,
    parse_code_and_group,
    parse_code_title_pair,
    parse_complex_course,
    parse_course_from_text,
    parse_course_title,
    parse_flexible_requirement,
    parse_standard_course,
    parse_table_format_course,
    parse_table_title,
    split_footnote_tail,
)
from catalog_parser.parser.models import (
    AndGroup,
    FlexibleCourse,
    OrOptionCourse,
    RegularCourse,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Titles & footnotes
# ---------------------------------------------------------------------------


class TestParseCourseTitle:
    @pytest.mark.parametrize(
        "title_part,expected",
        [
            ("Computing for Engineers 3", ("Computing for Engineers", [3])),
            ("Investments 2    3", ("Investments", [2])),
            ("Topics 1, 2", ("Topics", [1, 2])),
            ("Calculus 12", ("Calculus 12", [])),
            ("Fixed   Income  ", ("Fixed Income", [])),
            ("Data Structures\t3", ("Data Structures", [])),
            ("", ("", [])),
        ],
    )
    def test_footnote_heuristic(self, title_part: str, expected: tuple[str, list[int]]):
        assert parse_course_title(title_part) == expected

    def test_since_year_kept_verbatim(self):
        assert parse_course_title("The United States since 1877 3") == ("The United States since 1877 3", [])

    def test_configurable_range(self):
        config = ParserConfig(footnote_max=12)
        assert parse_course_title("Calculus 12", config) == ("Calculus", [12])

    def test_duplicate_refs_collapse(self):
        assert parse_course_title("Seminar 2, 2") == ("Seminar", [2])

    def test_split_requires_credit(self):
        assert split_footnote_tail("2,3    9", require_credit=True) == ("", [2, 3])
        assert split_footnote_tail("9", require_credit=True) == ("9", [])

    def test_table_title(self):
        assert parse_table_title("Introduction to Computing 3") == ("Introduction to Computing", [3])
        assert parse_table_title("Calculus\t4") == ("Calculus", [])

    def test_normalize_code(self):
        assert normalize_code("  MGT    3076 ") == "MGT 3076"


# ---------------------------------------------------------------------------
# Course layouts
# ---------------------------------------------------------------------------


class TestStandardCourse:
    def test_regular(self):
        course = parse_standard_course("MATH 1551 Differential Calculus")
        assert course == RegularCourse(code="MATH 1551", title="Differential Calculus")

    def test_or_option(self):
        course = parse_standard_course("or MATH 1501 Calculus Basics")
        assert isinstance(course, OrOptionCourse)
        assert course.code == "MATH 1501"

    def test_code_level_and(self):
        course = parse_standard_course("BIOS 1107 & BIOS 1107L Introduction to Biology")
        assert isinstance(course, AndGroup)
        assert [c.code for c in course.group_courses] == ["BIOS 1107", "BIOS 1107L"]
        assert all(c.title == "Introduction to Biology" for c in course.group_courses)

    def test_whitespace_in_code(self):
        course = parse_standard_course("MGT    3076    Investments 2    3")
        assert course.code == "MGT 3076"
        assert course.title == "Investments"
        assert course.footnote_refs == [2]

    def test_title_with_ampersand_left_for_complex(self):
        assert parse_standard_course("CS 1301 Intro & Lab") is None
        course = parse_complex_course("CS 1301 Intro & Lab")
        assert course == RegularCourse(code="CS 1301", title="Intro & Lab")

    @pytest.mark.parametrize("line", ["Lab Science 4", "MGT 3075", "Free Electives 1    10"])
    def test_no_match(self, line: str):
        assert parse_standard_course(line) is None


class TestComplexCourse:
    def test_single_code(self):
        course = parse_complex_course("or CS 1371 Computing for Engineers 3")
        assert isinstance(course, OrOptionCourse)
        assert course.footnote_refs == [3]

    def test_code_chain(self):
        group = parse_code_and_group("PHYS 2211 & PHYS 2212 & PHYS 2213 Physics Sequence")
        assert isinstance(group, AndGroup)
        assert [c.code for c in group.group_courses] == ["PHYS 2211", "PHYS 2212", "PHYS 2213"]
        assert group.title == "Physics Sequence"

    def test_chain_requires_ampersand(self):
        assert parse_code_and_group("PHYS 2211 Physics I") is None


class TestCourseFromText:
    def test_with_code(self):
        assert parse_course_from_text("MATH 1711    Finite Mathematics") == RegularCourse(
            code="MATH 1711", title="Finite Mathematics"
        )

    def test_without_code(self):
        course = parse_course_from_text("Approved substitute course")
        assert course.code == ""
        assert course.title == "Approved substitute course"

    def test_empty(self):
        assert parse_course_from_text("   ") is None


class TestCodeTitlePairs:
    def test_pair(self):
        parsed = parse_code_title_pair(["MGT 3075", "Security Valuation    "], 0)
        assert parsed == (RegularCourse(code="MGT 3075", title="Security Valuation"), 2)

    @pytest.mark.parametrize(
        "lines",
        [
            ["MGT 3075"],
            ["MGT 3075", "MGT 3082"],
            ["MGT 3075", "Finance Concentration"],
            ["MGT 3075", "or MGT 3082 Real Estate"],
            ["MGT 3075", "& MGT 3082 Real Estate"],
            ["MGT 3075", "Free Electives 1    10"],
            ["MGT 3075 Security Valuation", "Derivatives"],
        ],
    )
    def test_not_a_pair(self, lines: list[str]):
        assert parse_code_title_pair(lines, 0) is None

    def test_title_line_predicate(self):
        assert is_title_line("Financial Markets: Trading and Structure")
        assert not is_title_line("Total Credit Hours 122")
        assert not is_title_line("3")


class TestTableFormat:
    def test_two_line_row(self):
        parsed = parse_table_format_course(["CS 1301", "Introduction to Computing 3"], 0)
        assert parsed == (RegularCourse(code="CS 1301", title="Introduction to Computing", footnote_refs=[3]), 2)

    def test_inline_or_row(self):
        course, next_index = parse_table_format_course(["or CS 2051 Honors Discrete Math"], 0)
        assert isinstance(course, OrOptionCourse)
        assert course.code == "CS 2051"
        assert next_index == 1

    def test_inline_row_with_tab_credit(self):
        course, _ = parse_table_format_course(["CS 1301\tIntro to Computing\t3"], 0)
        assert course.title == "Intro to Computing"
        assert course.footnote_refs == []

    def test_no_match(self):
        assert parse_table_format_course(["Any HUM"], 0) is None


# ---------------------------------------------------------------------------
# Flexible requirements
# ---------------------------------------------------------------------------


class TestFlexibleRequirement:
    @pytest.mark.parametrize(
        "line,title,refs",
        [
            ("Free Electives 1    10", "Free Electives", [1]),
            ("Free Electives 2    1", "Free Electives", []),
            ("Lab Science 4", "Lab Science", [4]),
            ("Lab Science", "Lab Science", []),
            ("Any HUM", "Any HUM", []),
            ("Any SS 6", "Any SS", []),
            ("Economics Requirement 3", "Economics Requirement", [3]),
            ("AE Options 9", "AE Options", []),
            ("12", "Flexible requirement", []),
        ],
    )
    def test_slots(self, line: str, title: str, refs: list[int]):
        course = parse_flexible_requirement(line)
        assert isinstance(course, FlexibleCourse)
        assert course.code == ""
        assert course.title == title
        assert course.footnote_refs == refs

    @pytest.mark.parametrize("line", ["CS 1301 Intro to Computing", "Security Valuation"])
    def test_not_flexible(self, line: str):
        assert parse_flexible_requirement(line) is None
