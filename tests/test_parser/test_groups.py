"""Tests for the OR / AND / SELECTION group detectors."""

from __future__ import annotations

import pytest

from catalog_parser.parser.context import ParseContext
from catalog_parser.parser.groups import (
    SELECTION_PHRASE_PATTERN,
    GroupMatch,
    collect_trailing_or,
    detect_and_pattern,
    detect_or_pattern,
    detect_selection,
    parse_or_member,
    parse_selection_count,
    selection_terms,
)
from catalog_parser.parser.models import (
    AndGroup,
    OrGroup,
    RegularCourse,
    SelectionGroup,
    SelectionType,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestSelectionCount:
    @pytest.mark.parametrize(
        "token,expected",
        [("three", 3), ("Ten", 10), ("3", 3), ("0", 1), (None, 1), ("many", 1)],
    )
    def test_parse(self, token, expected: int):
        assert parse_selection_count(token) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Select two of the following", (2, None)),
            ("Select 9 hours from the following", (1, 9)),
            ("Select 6 credit hours of electives", (1, 6)),
            ("select 12 credits", (1, 12)),
            ("Select 3 hrs", (1, 3)),
        ],
    )
    def test_terms(self, text: str, expected: tuple):
        assert selection_terms(SELECTION_PHRASE_PATTERN.search(text)) == expected


class TestOrMember:
    def test_plain(self, ctx: ParseContext):
        member = parse_or_member("or MATH 1711 Finite Mathematics", ctx)
        assert member == RegularCourse(code="MATH 1711", title="Finite Mathematics")

    def test_parenthesised_and(self, ctx: ParseContext):
        member = parse_or_member("(MATH 1551 & MATH 1553) Calculus and Linear Algebra", ctx)
        assert isinstance(member, AndGroup)
        assert [c.code for c in member.group_courses] == ["MATH 1551", "MATH 1553"]
        assert member.title == "Calculus and Linear Algebra"


# ---------------------------------------------------------------------------
# OR detection
# ---------------------------------------------------------------------------


class TestDetectOr:
    def test_same_line(self, ctx: ParseContext):
        lines = ["CS 1301 Intro to Computing or CS 1371 Computing for Engineers"]
        match = detect_or_pattern(lines, 0, ctx)
        assert match is not None
        assert isinstance(match.node, OrGroup)
        assert [c.code for c in match.node.group_courses] == ["CS 1301", "CS 1371"]
        assert match.node.group_courses[1].title == "Computing for Engineers"
        assert match.next_index == 1

    def test_same_line_with_nested_and(self, ctx: ParseContext):
        lines = ["MATH 1711 Finite Mathematics or (MATH 1551 & MATH 1553) Calculus and Linear Algebra"]
        match = detect_or_pattern(lines, 0, ctx)
        first, second = match.node.group_courses
        assert first.code == "MATH 1711"
        assert isinstance(second, AndGroup)

    def test_dangling_or_collects_following_lines(self, ctx: ParseContext):
        lines = [
            "CS 1301 Intro to Computing or",
            "or CS 1371 Computing for Engineers",
            "or CS 1315 Media Computation",
            "CS 1331 Object Oriented Programming",
        ]
        match = detect_or_pattern(lines, 0, ctx)
        assert [c.code for c in match.node.group_courses] == ["CS 1301", "CS 1371", "CS 1315"]
        assert match.next_index == 3

    def test_members_are_demoted_to_regular(self, ctx: ParseContext):
        lines = ["CS 1301 Intro or", "or CS 1371 Computing"]
        match = detect_or_pattern(lines, 0, ctx)
        assert all(c.course_type == "regular" for c in match.node.group_courses)

    @pytest.mark.parametrize("line", ["CS 1301 Intro to Computing", "Lab Science 4", "Organic Chemistry or Biology"])
    def test_no_match(self, ctx: ParseContext, line: str):
        assert detect_or_pattern([line], 0, ctx) is None

    def test_title_words_are_not_split(self, ctx: ParseContext):
        lines = ["CS 2050 Introduction to Discrete Math for CS"]
        assert detect_or_pattern(lines, 0, ctx) is None


class TestTrailingOr:
    def test_folds_following_or_lines(self, ctx: ParseContext):
        lines = [
            "MATH 1551 Differential Calculus",
            "or MATH 1501 Calculus Basics",
            "or MATH 1561 Advanced Calculus",
            "PHYS 2211 Introduction Physics",
        ]
        start = GroupMatch(RegularCourse(code="MATH 1551", title="Differential Calculus"), 1)
        match = collect_trailing_or(start, lines, ctx)
        assert isinstance(match.node, OrGroup)
        assert len(match.node.group_courses) == 3
        assert match.next_index == 3

    def test_unchanged_without_or_lines(self, ctx: ParseContext):
        start = GroupMatch(RegularCourse(code="MATH 1551"), 1)
        assert collect_trailing_or(start, ["MATH 1551", "PHYS 2211 Physics"], ctx) is start

    def test_stops_at_footnote(self, ctx: ParseContext):
        start = GroupMatch(RegularCourse(code="MATH 1551"), 1)
        assert collect_trailing_or(start, ["MATH 1551", "3"], ctx) is start


# ---------------------------------------------------------------------------
# AND detection
# ---------------------------------------------------------------------------


class TestDetectAnd:
    def test_code_chain(self, ctx: ParseContext):
        match = detect_and_pattern(["BIOS 1107 & BIOS 1107L Introduction to Biology"], 0, ctx)
        assert isinstance(match.node, AndGroup)
        assert [c.code for c in match.node.group_courses] == ["BIOS 1107", "BIOS 1107L"]
        assert match.next_index == 1

    def test_pair_with_own_titles(self, ctx: ParseContext):
        match = detect_and_pattern(["CS 1301 Intro to Computing & CS 1315 Media Computation"], 0, ctx)
        first, second = match.node.group_courses
        assert (first.code, first.title) == ("CS 1301", "Intro to Computing")
        assert (second.code, second.title) == ("CS 1315", "Media Computation")

    def test_multi_line_sequence(self, ctx: ParseContext):
        lines = [
            "MATH 1551",
            "& MATH 1553    Differential Calculus",
            "and Introduction to Linear Algebra    4",
            "or MATH 1711    Finite Mathematics",
        ]
        match = detect_and_pattern(lines, 0, ctx)
        assert isinstance(match.node, AndGroup)
        assert [c.code for c in match.node.group_courses] == ["MATH 1551", "MATH 1553"]
        assert match.node.title == "Differential Calculus and Introduction to Linear Algebra"
        assert match.node.footnote_refs == [4]
        assert match.next_index == 3

    def test_bare_code_without_ampersand_line(self, ctx: ParseContext):
        assert detect_and_pattern(["MATH 1551", "Differential Calculus"], 0, ctx) is None

    def test_group_ids_are_sequential(self, ctx: ParseContext):
        first = detect_and_pattern(["CS 1301 & CS 1302 Intro"], 0, ctx)
        second = detect_and_pattern(["CS 1331 & CS 1332 Data"], 0, ctx)
        assert (first.node.group_id, second.node.group_id) == ("and_1", "and_2")


# ---------------------------------------------------------------------------
# SELECTION detection
# ---------------------------------------------------------------------------


class TestDetectSelection:
    def test_code_title_pairs_until_credit_line(self, ctx: ParseContext):
        lines = [
            "Select three of the following: 2,3    9",
            "MGT 3075",
            "Security Valuation    ",
            "MGT 3082",
            "Fundamentals of Real Estate Development    ",
            "Free Electives 1    10",
        ]
        match = detect_selection(lines, 0, ctx)
        node = match.node
        assert isinstance(node, SelectionGroup)
        assert node.selection_count == 3
        assert node.footnote_refs == [2, 3]
        assert [c.code for c in node.selection_options] == ["MGT 3075", "MGT 3082"]
        assert node.selection_options[0].title == "Security Valuation"
        assert match.next_index == 5

    def test_numeric_count_and_header_boundary(self, ctx: ParseContext):
        lines = [
            "Select 2 courses from the list below",
            "CS 4641 Machine Learning",
            "CS 4650 Natural Language",
            "Any HUM",
        ]
        match = detect_selection(lines, 0, ctx)
        assert match.node.selection_count == 2
        assert match.node.footnote_refs == []
        assert len(match.node.selection_options) == 2
        assert match.next_index == 3

    def test_and_group_options(self, ctx: ParseContext):
        lines = [
            "Select one of the following:",
            "PHYS 2211 & PHYS 2212 Intro Physics Sequence",
            "CHEM 1211K Chemical Principles I",
        ]
        options = detect_selection(lines, 0, ctx).node.selection_options
        assert isinstance(options[0], AndGroup)
        assert options[1] == RegularCourse(code="CHEM 1211K", title="Chemical Principles I")

    def test_degenerate_selection_is_kept(self, ctx: ParseContext):
        match = detect_selection(["Select one of the following:", "Major Requirements"], 0, ctx)
        assert match.node.selection_options == []
        assert match.node.title == "Select one of the following"
        assert match.next_index == 1

    def test_prefix_becomes_title(self, ctx: ParseContext):
        match = detect_selection(["Technical Electives: Select two of the following"], 0, ctx)
        assert match.node.title == "Technical Electives"
        assert match.node.selection_count == 2

    def test_stops_at_next_selection(self, ctx: ParseContext):
        lines = [
            "Select one of the following:",
            "CS 3510 Design and Analysis of Algorithms",
            "Select two of the following:",
            "CS 4641 Machine Learning",
        ]
        match = detect_selection(lines, 0, ctx)
        assert len(match.node.selection_options) == 1
        assert match.next_index == 2

    def test_or_lines_are_not_grouped_inside_selection(self, ctx: ParseContext):
        lines = [
            "Select one of the following:",
            "CS 3510 Design and Analysis of Algorithms",
            "or CS 3511 Design and Analysis of Algorithms, Honors",
        ]
        options = detect_selection(lines, 0, ctx).node.selection_options
        assert [c.course_type for c in options] == ["regular", "or_option"]

    def test_hour_based_selection(self, ctx: ParseContext):
        lines = [
            "Select 9 hours from the following:",
            "CS 3510 Design and Analysis of Algorithms",
            "CS 3600 Introduction to Artificial Intelligence",
            "CS 4400 Introduction to Database Systems",
        ]
        match = detect_selection(lines, 0, ctx)
        node = match.node
        assert isinstance(node, SelectionGroup)
        assert node.selection_type == SelectionType.HOURS
        assert node.selection_hours == 9
        assert node.selection_count == 1
        assert node.title == "Select 9 hours from the following"
        assert [c.code for c in node.selection_options] == ["CS 3510", "CS 3600", "CS 4400"]
        assert match.next_index == 4

    def test_credit_hour_selection_with_prefix(self, ctx: ParseContext):
        lines = [
            "Technical Electives: Select 6 credit hours",
            "CS 4641 Machine Learning",
            "Select one of the following:",
        ]
        match = detect_selection(lines, 0, ctx)
        assert match.node.title == "Technical Electives"
        assert match.node.selection_hours == 6
        assert len(match.node.selection_options) == 1
        assert match.next_index == 2

    def test_course_selection_has_no_hours(self, ctx: ParseContext):
        node = detect_selection(["Select two of the following:"], 0, ctx).node
        assert node.selection_type == SelectionType.COURSES
        assert node.selection_hours is None
        assert "selectionHours" not in node.to_json_dict()

    def test_no_match(self, ctx: ParseContext):
        assert detect_selection(["CS 1301 Intro to Computing"], 0, ctx) is None
