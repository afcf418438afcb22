"""Per-call parse state.

A ``ParseContext`` is created by :func:`parse_program` for every call and
threaded through the category parser, detectors and post-processing passes.
It owns the group-id counter, so identical text always yields identical ids,
and it is the only place the core writes console output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from catalog_parser.config import ParserConfig
from catalog_parser.utils import print_trace

from .models import AndGroup, Course, OrGroup, SelectionGroup, SelectionType, as_regular


@dataclass
class ParseContext:
    """Configuration, mode flags and id allocation for one parse."""

    config: ParserConfig = field(default_factory=ParserConfig)
    table_format: bool = False
    group_counter: int = field(default=0, init=False, repr=False)

    def next_group_id(self, kind: str) -> str:
        """Allocate the next id, e.g. ``'or_3'``."""
        self.group_counter += 1
        return f"{kind}_{self.group_counter}"

    def trace(self, message: str) -> None:
        """Print a trace line when verbose output is enabled."""
        if self.config.verbose:
            print_trace(message)

    # ------------------------------------------------------------------
    # Group builders
    # ------------------------------------------------------------------

    def or_group(self, members: list[Course], title: str = "") -> OrGroup:
        """Build an OR group; ``or_option`` members are demoted to ``regular``.

        Raises:
            ValueError: If fewer than two members are given.
        """
        if len(members) < 2:
            raise ValueError(f"An OR group needs at least 2 courses, got {len(members)}")
        children = [as_regular(member) for member in members]
        label = title or " or ".join(child.code or child.title for child in children)
        group = OrGroup(group_id=self.next_group_id("or"), title=label, group_courses=children)
        self.trace(f"OR group {group.group_id}: {label}")
        return group

    def and_group(
        self, members: list[Course], title: str = "", footnote_refs: Optional[list[int]] = None
    ) -> AndGroup:
        """Build an AND group of courses that must all be taken.

        Raises:
            ValueError: If fewer than two members are given.
        """
        if len(members) < 2:
            raise ValueError(f"An AND group needs at least 2 courses, got {len(members)}")
        children = [as_regular(member) for member in members]
        label = title or " & ".join(child.code or child.title for child in children)
        group = AndGroup(
            group_id=self.next_group_id("and"),
            title=label,
            footnote_refs=list(footnote_refs or []),
            group_courses=children,
        )
        self.trace(f"AND group {group.group_id}: {label}")
        return group

    def selection(
        self,
        count: int,
        options: list[Course],
        title: str = "",
        footnote_refs: Optional[list[int]] = None,
        hours: Optional[int] = None,
    ) -> SelectionGroup:
        """Build a selection; ``options`` may be empty.

        With ``hours`` set the selection is hour-based and ``count`` is ignored.
        """
        if hours is not None:
            hours = max(hours, 1)
            group = SelectionGroup(
                group_id=self.next_group_id("select"),
                title=title or f"Select {hours} hours from the following",
                footnote_refs=list(footnote_refs or []),
                selection_type=SelectionType.HOURS,
                selection_hours=hours,
                selection_options=list(options),
            )
            self.trace(f"Selection {group.group_id}: {hours} hours from {len(options)}")
            return group

        count = max(count, 1)
        group = SelectionGroup(
            group_id=self.next_group_id("select"),
            title=title or f"Select {count} of the following",
            footnote_refs=list(footnote_refs or []),
            selection_count=count,
            selection_options=list(options),
        )
        self.trace(f"Selection {group.group_id}: pick {count} of {len(options)}")
        return group
