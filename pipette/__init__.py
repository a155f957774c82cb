"""
pipette: one function to import biological and tabular data files.

Public API surface:

- ``import_file(source, ...)`` -- **main entry point**. Infers the file
  type from the extension (or an explicit ``format``), hands the file to
  the matching backend, and returns a normalized object: a
  ``pandas.DataFrame`` for tables, a ``NamedList``/``RecordList`` for
  documents and gene sets, a list of lines for source code.

- ``get_metadata(obj)`` / ``set_metadata(obj, value)`` -- access the
  import provenance attached with ``metadata=True``.

- ``resolve_format(source)`` / ``supported_formats()`` -- inspect format
  detection without importing anything.

- ``sanitize_na(obj)`` -- turn "no value" strings ("", whitespace,
  "NA", "NULL", "none available") into missing values after import.

- ``get_config()`` / ``set_config(...)`` -- process-wide defaults
  (delimited engine, return type, metadata/quiet defaults, NA strings).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pipette._pipeline import run_import
from pipette._version import __version__
from pipette.config import (
    ImportConfig,
    get_config,
    load_config,
    reset_config,
    save_config,
    set_config,
)
from pipette.containers import NamedList, RecordList
from pipette.exceptions import (
    BackendError,
    ColumnNameMismatchError,
    MalformedContainerError,
    OptionMismatchError,
    PipetteError,
    UnresolvedFormatError,
    UnsupportedFormatError,
)
from pipette.formats import resolve_format, supported_formats
from pipette.metadata import ProvenanceRecord, get_metadata, set_metadata
from pipette.names import has_valid_names, make_names
from pipette.names import make_names as _default_make_names
from pipette.request import ImportRequest
from pipette.sanitize import sanitize_na

__all__ = [
    "import_file",
    "get_metadata",
    "set_metadata",
    "resolve_format",
    "supported_formats",
    "make_names",
    "has_valid_names",
    "sanitize_na",
    "ImportConfig",
    "get_config",
    "set_config",
    "reset_config",
    "load_config",
    "save_config",
    "ImportRequest",
    "ProvenanceRecord",
    "NamedList",
    "RecordList",
    "PipetteError",
    "UnresolvedFormatError",
    "UnsupportedFormatError",
    "OptionMismatchError",
    "ColumnNameMismatchError",
    "MalformedContainerError",
    "BackendError",
    "__version__",
]

logger = logging.getLogger(__name__)


def import_file(
    source: str | Path,
    format: str = "auto",
    rownames: bool = True,
    colnames: bool | list[str] = True,
    sheet: int | str = 1,
    comment: str = "",
    skip: int = 0,
    n_max: float = math.inf,
    make_names: Callable[[list[str]], list[str]] | None = None,
    metadata: bool | None = None,
    quiet: bool | None = None,
    config: ImportConfig | None = None,
) -> Any:
    """Import a file (local path or URL) into Python.

    Orchestration:
      1. Validate the arguments into an ``ImportRequest``.
      2. Resolve the format tag from the extension (or *format*).
      3. Check that every non-default option applies to that format.
      4. Load the file with the format's backend.
      5. Normalize names and attach provenance.

    Args:
        source: Local file path or URL. Compressed files (``.gz``,
            ``.bz2``, ``.xz``, ``.zip``) are decompressed on the fly.
        format: Explicit format tag, e.g. ``"csv"``. ``"auto"`` infers
            it from the file extension.
        rownames: Use a column named ``rowname`` as row names
            (delimited and Excel files only).
        colnames: ``True`` if the first row holds column names,
            ``False`` for generic names (``X1``, ``X2``, ...), or a list
            of names to use instead (delimited and Excel files only).
        sheet: Worksheet name or 1-based position (Excel), or data
            table title or position (Prism).
        comment: Prefix marking comment lines to exclude.
        skip: Number of lines to skip before reading.
        n_max: Maximum number of records to read.
        make_names: Name coercion applied to column/element names.
            Defaults to ``pipette.make_names``.
        metadata: Attach import provenance under ``attrs["import"]``.
            Defaults to the active config.
        quiet: Suppress informational log messages. Defaults to the
            active config.
        config: Settings for this call. Defaults to ``get_config()``.

    Returns:
        The imported object.

    Raises:
        pydantic.ValidationError: If an argument has the wrong type or
            is out of range.
        FileNotFoundError: If a local *source* does not exist.
        UnresolvedFormatError: If no format can be inferred.
        UnsupportedFormatError: If the format is not supported.
        OptionMismatchError: If an option does not apply to the format.
        ColumnNameMismatchError: If the imported column names differ
            from *colnames*.
        BackendError: If the backend parser fails.

    Examples::

        df = pipette.import_file("samples.csv")
        df = pipette.import_file("counts.tsv.gz", metadata=True)
        pipette.get_metadata(df).importer   # 'pandas::read_csv'
        sets = pipette.import_file("hallmark.gmt")
    """
    config = config or get_config()
    request = ImportRequest(
        source=source,
        format=format,
        rownames=rownames,
        colnames=colnames,
        sheet=sheet,
        comment=comment,
        skip=skip,
        n_max=n_max,
        make_names=make_names or _default_make_names,
        metadata=config.metadata if metadata is None else metadata,
        quiet=config.quiet if quiet is None else quiet,
    )
    return run_import(request, config)
