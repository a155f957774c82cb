"""
Delimited text importer for pipette (CSV, TSV, TXT).

Four interchangeable engines parse CSV/TSV files; the active one is
chosen by ``ImportConfig.engine``:

==========  ============================  =========================  ==================
Engine      Backend                       Comment lines              Mid-line comment
==========  ============================  =========================  ==================
pandas      ``pandas.read_csv``           single-character prefix    rest of line cut
pyarrow     ``pyarrow.csv.read_csv``      not supported              n/a
polars      ``polars.read_csv``           prefix of any length       kept as data
csv         standard-library ``csv``      prefix of any length       kept as data
==========  ============================  =========================  ==================

With ``comment="#"``, a cell ``2#note`` reads as ``2`` under pandas and
as ``"2#note"`` under polars and csv. Row and column counts agree.

Requesting a comment filter the engine cannot apply fails with
OptionMismatchError before the file is opened, rather than returning
rows that should have been excluded.

TXT files are whitespace separated and always read with
``pandas.read_table``, whatever the engine setting.

Every engine returns a ``pandas.DataFrame`` with the same columns and
row count for the same input; only type inference differs.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Callable
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

import pandas as pd

from pipette.exceptions import OptionMismatchError
from pipette.importers.base import (
    BaseImporter,
    RawResult,
    apply_column_names,
    backend_errors,
)
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

_SEPARATORS = {"csv": ",", "tsv": "\t", "txt": r"\s+"}


@dataclass(frozen=True)
class ReadOptions:
    """Engine-independent parsing options for one file."""
    sep: str
    header: bool
    skip: int
    comment: str
    nrows: int | None
    na_values: list[str]


# ---------------------------------------------------------------------------
# Engine readers
# ---------------------------------------------------------------------------

def _read_pandas(path: Path, opts: ReadOptions) -> pd.DataFrame:
    return pd.read_csv(
        path,
        sep=opts.sep,
        header=0 if opts.header else None,
        skiprows=opts.skip,
        comment=opts.comment or None,
        nrows=opts.nrows,
        na_values=opts.na_values,
        keep_default_na=False,
        skipinitialspace=True,
        skip_blank_lines=True,
    )


def _read_pyarrow(path: Path, opts: ReadOptions) -> pd.DataFrame:
    import pyarrow.csv as pacsv

    table = pacsv.read_csv(
        path,
        read_options=pacsv.ReadOptions(
            skip_rows=opts.skip,
            autogenerate_column_names=not opts.header,
        ),
        parse_options=pacsv.ParseOptions(delimiter=opts.sep),
        convert_options=pacsv.ConvertOptions(
            null_values=opts.na_values,
            strings_can_be_null=True,
        ),
    )
    if opts.nrows is not None:
        table = table.slice(0, opts.nrows)
    return table.to_pandas()


def _read_polars(path: Path, opts: ReadOptions) -> pd.DataFrame:
    import polars as pl

    df = pl.read_csv(
        path,
        separator=opts.sep,
        has_header=opts.header,
        skip_rows=opts.skip,
        comment_prefix=opts.comment or None,
        n_rows=opts.nrows,
        null_values=opts.na_values,
    )
    return df.to_pandas()


def _infer_numeric(df: pd.DataFrame) -> pd.DataFrame:
    """Convert columns whose non-missing values are all numeric."""
    for i in range(df.shape[1]):
        column = df.iloc[:, i]
        converted = pd.to_numeric(column, errors="coerce")
        if converted.notna().sum() == column.notna().sum():
            df.isetitem(i, converted)
    return df


def _read_stdlib(path: Path, opts: ReadOptions) -> pd.DataFrame:
    with open(path, "r", encoding="utf-8", newline="") as f:
        lines = islice(f, opts.skip, None)
        if opts.comment:
            lines = (line for line in lines if not line.startswith(opts.comment))
        rows = [
            [cell.strip() for cell in row]
            for row in csv.reader(lines, delimiter=opts.sep)
            if any(cell.strip() for cell in row)
        ]
    header = rows.pop(0) if opts.header and rows else None
    if opts.nrows is not None:
        rows = rows[: opts.nrows]
    df = pd.DataFrame(rows, columns=header, dtype=object)
    df = df.mask(df.isin(opts.na_values))
    return _infer_numeric(df)


@dataclass(frozen=True)
class DelimEngine:
    """A delimited-text backend and its capabilities."""
    name: str
    package: str
    function: str
    reader: Callable[[Path, ReadOptions], pd.DataFrame]
    supports_comment: bool = True
    multichar_comment: bool = True


ENGINES: dict[str, DelimEngine] = {
    "pandas": DelimEngine(
        "pandas", "pandas", "read_csv", _read_pandas, multichar_comment=False,
    ),
    "pyarrow": DelimEngine(
        "pyarrow", "pyarrow.csv", "read_csv", _read_pyarrow, supports_comment=False,
    ),
    "polars": DelimEngine("polars", "polars", "read_csv", _read_polars),
    "csv": DelimEngine("csv", "csv", "reader", _read_stdlib),
}

_TABLE_ENGINE = DelimEngine(
    "pandas", "pandas", "read_table", _read_pandas, multichar_comment=False,
)


def check_engine_capability(engine: DelimEngine, comment: str) -> None:
    """Fail fast if *engine* cannot apply the requested comment filter."""
    if not comment:
        return
    if not engine.supports_comment:
        raise OptionMismatchError(
            f"'{engine.package}::{engine.function}' does not support comment "
            "exclusion. Use a different engine or leave comment=''."
        )
    if len(comment) > 1 and not engine.multichar_comment:
        raise OptionMismatchError(
            f"'{engine.package}::{engine.function}' only supports a "
            f"single-character comment prefix (got {comment!r})"
        )


# ---------------------------------------------------------------------------
# Importer
# ---------------------------------------------------------------------------

class DelimImporter(BaseImporter):
    """Importer for plain text delimited files."""

    consumes = frozenset({"colnames", "comment", "n_max", "skip"})

    def engine_for(self, tag: str) -> DelimEngine:
        if tag == "txt":
            return _TABLE_ENGINE
        return ENGINES[self.config.engine]

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        engine = self.engine_for(tag)
        check_engine_capability(engine, request.comment)
        opts = ReadOptions(
            sep=_SEPARATORS[tag],
            header=request.has_header,
            skip=request.skip,
            comment=request.comment,
            nrows=request.nrows,
            na_values=list(self.config.na_values),
        )
        self.log_import(request, engine.package, engine.function)
        importer = f"{engine.package}::{engine.function}"
        with self.local_file(request) as path:
            with backend_errors(request.source, importer):
                df = engine.reader(path, opts)
        df = apply_column_names(df, request)
        logger.debug(
            "Parsed %d rows x %d columns with %s", len(df), df.shape[1], importer,
        )
        return RawResult(
            payload=df,
            package=engine.package,
            function=engine.function,
            tabular=True,
        )
