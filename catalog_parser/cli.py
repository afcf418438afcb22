"""Command-line front end for the catalog parser.

Reads a pasted catalog page from disk, parses it and prints a summary.

Usage::

    python -m catalog_parser.cli catalog.txt
    python -m catalog_parser.cli catalog.txt --output program.json --strict
    python -m catalog_parser.cli catalog.txt --json --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from catalog_parser.config import ParserConfig
from catalog_parser.parser import parse_program, validate_parsed_data
from catalog_parser.utils import (
    console,
    print_error,
    print_requirements_table,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)


_SUPPORTED_SUFFIXES = (".txt", ".md", ".markdown", "")


async def _read_catalog(path: str) -> str:
    """Read a catalog text file asynchronously using asyncio.to_thread."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    if not file_path.is_file():
        raise ValueError(f"Catalog path is not a file: {path}")
    if file_path.suffix.lower() not in _SUPPORTED_SUFFIXES:
        raise ValueError(f"Expected a plain-text catalog file, got: {file_path.suffix}")
    return await asyncio.to_thread(file_path.read_text, "utf-8")


def _build_config(args: argparse.Namespace) -> ParserConfig:
    config = ParserConfig.load(Path(args.config)) if args.config else ParserConfig.from_env()
    if args.verbose:
        config = config.model_copy(update={"verbose": True})
    return config


async def run(args: argparse.Namespace) -> int:
    """Parse the catalog named in *args* and report on it.

    Returns:
        The process exit status: 0 on success, 1 on an I/O or config error,
        or on an invalid document when ``--strict`` is set.
    """
    try:
        config = _build_config(args)
        text = await _read_catalog(args.catalog)
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 1

    program = parse_program(text, config)
    result = validate_parsed_data(program, config)

    print_summary_table(
        {
            "Program": program.name or "-",
            "Degree": program.degree_type.value,
            "Concentration": program.concentration or "-",
            "Thread": program.thread or "-",
            "College": program.college,
            "Total credits": str(program.total_credits),
            "Categories": str(len(program.requirements)),
            "Footnotes": str(len(program.footnotes)),
        },
        title="Parsed Program",
    )
    if program.requirements:
        print_requirements_table(program)

    if args.json:
        console.print_json(data=program.to_json_dict())

    for warning in result.warnings:
        print_warning(warning)
    for error in result.errors:
        print_error(error)

    if args.output:
        await save_json(program.to_json_dict(), args.output)
        print_success(f"Wrote {args.output}")

    if args.strict and not result.is_valid:
        console.print("[bold red]Error:[/bold red] Parsed program failed validation")
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``python -m catalog_parser.cli``."""
    parser = argparse.ArgumentParser(
        description="Parse copy-pasted catalog requirement text into structured JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m catalog_parser.cli catalog.txt\n"
            "  python -m catalog_parser.cli catalog.txt -o program.json --strict\n"
            "  python -m catalog_parser.cli catalog.txt --json --verbose\n"
        ),
    )

    parser.add_argument(
        "catalog",
        help="Path to the catalog text file",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the parsed program as JSON to this file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed program as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print parser trace output",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Load parser settings from a JSON file instead of the environment",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if the parsed program fails validation",
    )

    args = parser.parse_args(argv)

    status = asyncio.run(run(args))
    if status != 0:
        sys.exit(status)


if __name__ == "__main__":
    main()
