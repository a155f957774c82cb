"""
Post-processing normalizer for pipette.

Applies the same treatment to every importer's result, whatever the
format, so that callers get consistent names and metadata:

0. Return shape: tabular frames become ``polars.DataFrame`` when the
   config asks for polars (no row labels, no attached metadata).
1. Explicit column names must match the imported names exactly.
2. A ``rowname`` column becomes the row index (pandas tabular frames
   only, when ``rownames=True``).
3. Duplicate names are reported with a warning.
4. Names are coerced with the request's ``make_names`` function.
5. Names that are still not valid identifiers are reported.
6. With ``metadata=True`` the provenance record is attached under
   ``attrs["import"]``.

"Names" are the column labels of tabular frames and the keys of named
lists. Other results (lists of lines, matrices, scalars) have none and
skip steps 3-5. Results of R data files skip this module altogether.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd
import polars as pl

from pipette.config import ImportConfig
from pipette.containers import NamedList
from pipette.exceptions import ColumnNameMismatchError
from pipette.importers.base import RawResult, backend_errors
from pipette.metadata import ProvenanceRecord, set_metadata, supports_metadata
from pipette.names import duplicated_names, has_valid_names
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

ROWNAME_COLUMN = "rowname"


# ---------------------------------------------------------------------------
# Name access
# ---------------------------------------------------------------------------

def names_of(obj: Any, tabular: bool) -> list[str] | None:
    """The user-facing names of *obj*, or ``None`` if it has none."""
    if isinstance(obj, pl.DataFrame):
        return list(obj.columns)
    if isinstance(obj, pd.DataFrame):
        if not tabular or isinstance(obj.columns, pd.RangeIndex):
            return None
        return list(obj.columns)
    if isinstance(obj, NamedList):
        return list(obj.keys())
    return None


def with_names(obj: Any, names: list[str]) -> Any | None:
    """Return *obj* relabelled with *names*, or ``None`` if it cannot take them.

    A frame needs one name per column. Mapping keys and polars columns
    must also stay unique.
    """
    current = names_of(obj, tabular=True)
    if current is None or len(current) != len(names):
        return None
    if isinstance(obj, pd.DataFrame):
        return obj.set_axis(names, axis=1)
    if len(set(names)) != len(names):
        return None
    if isinstance(obj, pl.DataFrame):
        return obj.rename(dict(zip(current, names)))
    renamed = NamedList(zip(names, obj.values()))
    renamed.attrs.update(obj.attrs)
    return renamed


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _to_return_type(raw: RawResult, request: ImportRequest, config: ImportConfig) -> Any:
    payload = raw.payload
    if config.return_type == "polars" and raw.tabular and isinstance(payload, pd.DataFrame):
        with backend_errors(request.source, "polars::from_pandas"):
            return pl.from_pandas(payload, include_index=False)
    return payload


def _check_colnames(obj: Any, request: ImportRequest) -> None:
    expected = request.explicit_colnames
    if expected is None:
        return
    actual = names_of(obj, tabular=True)
    if actual != expected:
        raise ColumnNameMismatchError(
            f"Imported column names {actual} do not match the requested {expected}"
        )


def _promote_rownames(df: pd.DataFrame, request: ImportRequest) -> pd.DataFrame:
    if not request.quiet:
        logger.info("Setting row names from '%s' column.", ROWNAME_COLUMN)
    df = df.set_index(ROWNAME_COLUMN)
    df.index.name = None
    return df


def _warn_duplicates(names: list[str]) -> None:
    dupes = duplicated_names(names)
    if dupes:
        logger.warning("Duplicate names detected: %s", ", ".join(dupes))


def _coerce_names(obj: Any, names: list[str], request: ImportRequest) -> Any:
    coerced = list(request.make_names(names))
    if coerced == names:
        return obj
    renamed = with_names(obj, coerced)
    if renamed is None:
        logger.debug("Names could not be reassigned; keeping the imported names.")
        return obj
    new_dupes = set(duplicated_names(coerced)) - set(duplicated_names(names))
    if new_dupes:
        logger.warning(
            "Name coercion produced duplicate names: %s", ", ".join(sorted(new_dupes)),
        )
    return renamed


def normalize(
    raw: RawResult,
    request: ImportRequest,
    config: ImportConfig,
    provenance: ProvenanceRecord | None = None,
) -> Any:
    """Apply the uniform post-processing to an importer's result.

    Args:
        raw: The importer's result.
        request: The validated import request.
        config: Active config snapshot.
        provenance: Record to attach when ``request.metadata`` is set.

    Returns:
        The normalized object.

    Raises:
        ColumnNameMismatchError: If explicit column names were requested
            and the imported names differ.
    """
    obj = _to_return_type(raw, request, config)

    _check_colnames(obj, request)

    if (
        raw.tabular
        and request.rownames
        and isinstance(obj, pd.DataFrame)
        and ROWNAME_COLUMN in obj.columns
    ):
        obj = _promote_rownames(obj, request)

    names = names_of(obj, raw.tabular)
    if names is not None:
        _warn_duplicates(names)
        obj = _coerce_names(obj, names, request)
        if not has_valid_names(names_of(obj, raw.tabular) or []):
            logger.warning("Invalid names detected.")

    if request.metadata and provenance is not None and supports_metadata(obj):
        set_metadata(obj, provenance.model_copy(update={"call": request.call_repr()}))

    return obj
