"""Shared utility functions for the catalog parser.

Provides JSON I/O for parsed documents and the Rich-based console helpers
used by the CLI and by the parser's verbose trace output.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from catalog_parser.parser.models import ProgramData

console = Console()


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON document.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically. The write runs in a worker
    thread so a large document does not block the event loop.

    Args:
        data: Serialisable data (dict or list).
        path: Destination file path.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False)
    await asyncio.to_thread(file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print()


def print_requirements_table(program: ProgramData) -> None:
    """Print one row per requirement category with per-type node counts."""
    table = Table(title=program.name or "Untitled Program", show_header=True, header_style="bold cyan")
    table.add_column("Category")
    table.add_column("Courses", justify="right")
    table.add_column("Groups", justify="right")
    table.add_column("Flexible", justify="right")

    for requirement in program.requirements:
        groups = sum(
            1 for c in requirement.courses if c.course_type in ("or_group", "and_group", "selection")
        )
        flexible = sum(1 for c in requirement.courses if c.course_type == "flexible")
        table.add_row(
            escape(requirement.name),
            str(len(requirement.courses)),
            str(groups),
            str(flexible),
        )

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_trace(message: str) -> None:
    """Print a dim parser trace line."""
    console.print(f"[dim]{escape(message)}[/dim]")
