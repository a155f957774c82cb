"""
Base importer contract for pipette.

Every format-specific importer implements ``load()``:

1. Resolve the request's source to a readable local file via
   ``self.local_file()`` (downloads and decompression are scoped to the
   ``with`` block).
2. Call exactly one backend parser inside ``backend_errors()``, which
   turns any backend exception into a chained ``BackendError``.
3. Return a ``RawResult``: the parsed payload plus the identity of the
   library and function used, for provenance.

Importers do not rename columns, promote row names, or attach
provenance themselves; the post-processing normalizer does that
uniformly for every format.
"""

from __future__ import annotations

import logging
import os
import warnings
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

import pandas as pd

from pipette.config import ImportConfig
from pipette.exceptions import BackendError, PipetteError
from pipette.files import local_file
from pipette.formats import is_url, source_basename
from pipette.metadata import ProvenanceRecord
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

_API_WARNINGS = (DeprecationWarning, PendingDeprecationWarning, FutureWarning)


@dataclass
class RawResult:
    """Standardized output from any importer.

    Attributes:
        payload: The parsed object (DataFrame, NamedList, list, ...).
        package: Library that parsed the file (e.g. ``"pandas"``).
        function: Function within *package* (e.g. ``"read_csv"``).
        tabular: True when *payload* is a row-name capable data frame
            whose columns are user-facing names. Row-name promotion and
            name coercion only apply to these (and to named lists).
        normalize: False for R data files, which are returned exactly as
            stored.
        provenance: A provenance record built by the importer itself.
            Only set by importers that delegate to another import and
            carry its record over.
    """
    payload: Any
    package: str
    function: str
    tabular: bool = False
    normalize: bool = True
    provenance: ProvenanceRecord | None = None

    @property
    def importer(self) -> str:
        return f"{self.package}::{self.function}"


@contextmanager
def backend_errors(
    source: str,
    importer: str,
    *,
    strict_warnings: bool = False,
) -> Iterator[None]:
    """Convert backend failures into ``BackendError``.

    Args:
        source: The file being imported (for the error message).
        importer: ``"library::function"`` identity of the backend.
        strict_warnings: Escalate warnings raised inside the block to
            errors, so they fail the import too. Deprecation notices
            about the backend's own API are left as warnings.
    """
    with warnings.catch_warnings():
        if strict_warnings:
            warnings.simplefilter("error")
            for category in _API_WARNINGS:
                warnings.simplefilter("default", category)
        try:
            yield
        except PipetteError:
            raise
        except Exception as exc:
            raise BackendError(
                f"Failed to import '{source_basename(source)}' using {importer}: {exc}"
            ) from exc


def generic_names(n: int) -> list[str]:
    """Column names used when a file has no header row: X1, X2, ..."""
    return [f"X{i}" for i in range(1, n + 1)]


def apply_column_names(df: pd.DataFrame, request: ImportRequest) -> pd.DataFrame:
    """Name the columns of a frame read without a header row.

    Explicit names are only applied when their count matches the parsed
    columns; otherwise the generic names are kept and the normalizer
    reports the mismatch.
    """
    if request.has_header:
        return df
    names = request.explicit_colnames
    if names is not None and len(names) == df.shape[1]:
        return df.set_axis(names, axis=1)
    return df.set_axis(generic_names(df.shape[1]), axis=1)


class BaseImporter(ABC):
    """Abstract base class for format importers.

    Subclasses set ``consumes`` to the request fields they read (besides
    ``source`` and ``quiet``) and implement ``load()``. Reader options
    outside ``consumes`` (``comment``, ``n_max``) must stay at their
    defaults; ``pipette.options`` rejects the request otherwise.
    """

    consumes: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, config: ImportConfig) -> None:
        self.config = config

    @abstractmethod
    def load(self, request: ImportRequest, tag: str) -> RawResult:
        """Import ``request.source`` as format *tag*.

        Raises:
            BackendError: If the backend parser fails.
        """

    def local_file(self, request: ImportRequest, source: str | None = None):
        """Scoped local copy of *source* (defaults to the request source)."""
        return local_file(
            source or request.source,
            quiet=request.quiet,
            timeout=self.config.download_timeout,
        )

    def log_import(self, request: ImportRequest, package: str, function: str) -> None:
        """Log which backend imports the file, unless the request is quiet."""
        if request.quiet:
            return
        source = request.source
        if is_url(source):
            where = source.rsplit("/", 1)[0]
        else:
            where = os.path.realpath(Path(source).parent)
        logger.info(
            "Importing %s at %s using %s::%s.",
            source_basename(source), where, package, function,
        )
