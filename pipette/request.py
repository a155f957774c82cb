"""
Import request model for pipette.

``ImportRequest`` collects the arguments of one ``import_file()`` call
and validates their types and ranges before anything is dispatched.
Format applicability of each option is checked separately, once the
format is known (see ``pipette.options``).
"""

from __future__ import annotations

import math
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
)

from pipette.names import make_names as default_make_names

# Defaults of the format-conditional options. ``metadata`` defaults to
# the active config and is checked against it instead.
OPTION_DEFAULTS: dict[str, Any] = {
    "rownames": True,
    "colnames": True,
    "sheet": 1,
    "skip": 0,
}

# Reader options honored only by importers that list them in ``consumes``.
READER_DEFAULTS: dict[str, Any] = {
    "comment": "",
    "n_max": math.inf,
}


class ImportRequest(BaseModel):
    """Validated arguments of a single import call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: str
    format: StrictStr = "auto"
    rownames: StrictBool = True
    colnames: StrictBool | list[StrictStr] = True
    sheet: StrictInt | StrictStr = 1
    comment: StrictStr = ""
    skip: StrictInt = Field(0, ge=0)
    n_max: float = Field(math.inf, gt=0)
    make_names: Callable[[list[str]], list[str]] = default_make_names
    metadata: StrictBool = False
    quiet: StrictBool = False

    @field_validator("source", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value

    @field_validator("colnames")
    @classmethod
    def _check_colnames(cls, value: bool | list[str]) -> bool | list[str]:
        if isinstance(value, list) and not value:
            raise ValueError("colnames must be a bool or a non-empty list of names")
        return value

    @field_validator("sheet")
    @classmethod
    def _check_sheet(cls, value: int | str) -> int | str:
        if isinstance(value, int) and value < 1:
            raise ValueError("sheet position is 1-based and must be >= 1")
        return value

    @field_validator("n_max")
    @classmethod
    def _check_n_max(cls, value: float) -> float:
        if not math.isinf(value) and value != int(value):
            raise ValueError("n_max must be a whole number or math.inf")
        return value

    @property
    def nrows(self) -> int | None:
        """``n_max`` as an int, or ``None`` when unlimited."""
        return None if math.isinf(self.n_max) else int(self.n_max)

    @property
    def explicit_colnames(self) -> list[str] | None:
        """The manual column names, when given as a list."""
        return self.colnames if isinstance(self.colnames, list) else None

    @property
    def has_header(self) -> bool:
        """Whether the first (non-skipped) row holds column names."""
        return self.colnames is True

    def call_repr(self) -> str:
        """Textual form of the call, listing only non-default arguments."""
        args = [repr(self.source)]
        for name, field in type(self).model_fields.items():
            if name == "source":
                continue
            value = getattr(self, name)
            if value == field.default:
                continue
            if name == "make_names":
                value_repr = getattr(value, "__name__", repr(value))
            else:
                value_repr = repr(value)
            args.append(f"{name}={value_repr}")
        return f"pipette.import_file({', '.join(args)})"
