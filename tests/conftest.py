"""Shared pytest fixtures for the catalog parser test suite.

Provides reusable fixtures for:
- Fixture catalog texts (Finance concentration, full sample catalog)
- Inline catalog snippets for the canonical parsing scenarios
- A fresh ``ParseContext``
- An environment with no ``CATALOG_PARSER_*`` overrides
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from catalog_parser.parser.context import ParseContext


FIXTURES_DIR = Path(__file__).parent / "fixtures"

_ENV_VARS = (
    "CATALOG_PARSER_FOOTNOTE_MIN",
    "CATALOG_PARSER_FOOTNOTE_MAX",
    "CATALOG_PARSER_MAX_GROUP_DEPTH",
    "CATALOG_PARSER_VERBOSE",
)


# ---------------------------------------------------------------------------
# Fixture files
# ---------------------------------------------------------------------------

@pytest.fixture
def finance_catalog_path() -> Path:
    """Path to the Finance concentration page (selection followed by a credit line)."""
    path = FIXTURES_DIR / "finance-concentration.txt"
    assert path.exists(), f"Finance fixture not found at {path}"
    return path


@pytest.fixture
def finance_text(finance_catalog_path: Path) -> str:
    return finance_catalog_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_catalog_path() -> Path:
    """Path to a full BS catalog page with footnotes and a total-credits line."""
    path = FIXTURES_DIR / "sample-catalog.txt"
    assert path.exists(), f"Sample catalog fixture not found at {path}"
    return path


@pytest.fixture
def sample_catalog_text(sample_catalog_path: Path) -> str:
    return sample_catalog_path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Inline catalog snippets
# ---------------------------------------------------------------------------

@pytest.fixture
def simple_and_text() -> str:
    return textwrap.dedent("""\
        Program Title
        Major Requirements
        BIOS 1107 & BIOS 1107L Introduction to Biology
    """)


@pytest.fixture
def trailing_or_text() -> str:
    return textwrap.dedent("""\
        T
        Major Requirements
        MATH 1551 Differential Calculus
        or MATH 1501 Calculus Basics
        or MATH 1561 Advanced Calculus
        PHYS 2211 Introduction Physics
    """)


@pytest.fixture
def math_sequence_text() -> str:
    """Two Lab Science slots and a multi-line AND sequence with an OR alternative."""
    return textwrap.dedent("""\
        Business Administration
        Technology, Mathematics, and Sciences
        Lab Science    4
        Lab Science    4
        MATH 1551
        & MATH 1553    Differential Calculus
        and Introduction to Linear Algebra    4
        or MATH 1711    Finite Mathematics
    """)


# ---------------------------------------------------------------------------
# Parser state & environment
# ---------------------------------------------------------------------------

@pytest.fixture
def ctx() -> ParseContext:
    """A fresh parse context with default configuration."""
    return ParseContext()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every ``CATALOG_PARSER_*`` variable for the duration of a test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
