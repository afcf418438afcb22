"""Catalog parser configuration.

Typed, validated tunables for the parser core. The core itself never reads
the environment; callers (the CLI, a web handler) build a ``ParserConfig``
once and pass it to :func:`catalog_parser.parser.parse_program`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator


_TRUTHY = {"1", "true", "yes", "on"}


class ParserConfig(BaseModel):
    """Tuning knobs for a single parse.

    The footnote range is the single-digit heuristic that separates trailing
    footnote markers from credit hours and years. The default ``1..9`` is the
    historical behaviour that existing fixtures depend on; widening it is a
    behaviour change.
    """

    footnote_min: int = Field(
        default=1, ge=1, description="Smallest trailing integer read as a footnote marker"
    )
    footnote_max: int = Field(
        default=9, ge=1, description="Largest trailing integer read as a footnote marker"
    )
    max_group_depth: int = Field(
        default=4, ge=1, description="Deepest allowed group nesting; deeper groups are flattened"
    )
    verbose: bool = Field(default=False, description="Print parse trace lines to the console")

    @model_validator(mode="after")
    def _check_footnote_range(self) -> "ParserConfig":
        if self.footnote_max < self.footnote_min:
            raise ValueError(
                f"footnote_max ({self.footnote_max}) must be >= footnote_min ({self.footnote_min})"
            )
        return self

    def is_footnote_number(self, value: int) -> bool:
        """Return ``True`` if *value* falls inside the footnote range."""
        return self.footnote_min <= value <= self.footnote_max

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ParserConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Build a ``ParserConfig`` from environment variables.

        Recognised variables (all optional):
            CATALOG_PARSER_FOOTNOTE_MIN, CATALOG_PARSER_FOOTNOTE_MAX,
            CATALOG_PARSER_MAX_GROUP_DEPTH, CATALOG_PARSER_VERBOSE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CATALOG_PARSER_FOOTNOTE_MIN"):
            kwargs["footnote_min"] = int(os.environ["CATALOG_PARSER_FOOTNOTE_MIN"])
        if os.environ.get("CATALOG_PARSER_FOOTNOTE_MAX"):
            kwargs["footnote_max"] = int(os.environ["CATALOG_PARSER_FOOTNOTE_MAX"])
        if os.environ.get("CATALOG_PARSER_MAX_GROUP_DEPTH"):
            kwargs["max_group_depth"] = int(os.environ["CATALOG_PARSER_MAX_GROUP_DEPTH"])
        if os.environ.get("CATALOG_PARSER_VERBOSE"):
            kwargs["verbose"] = os.environ["CATALOG_PARSER_VERBOSE"].strip().lower() in _TRUTHY
        return cls(**kwargs)
