"""
MatrixMarket importer for pipette (MTX).

Parses the matrix with ``scipy.io.mmread`` and returns it as a
``pandas.DataFrame``: sparse-backed for coordinate files, dense for
array files.

Row and column names may ship as sidecar files next to the matrix,
one name per line, with the suffix appended to the full file name::

    counts.mtx.gz
    counts.mtx.gz.rownames
    counts.mtx.gz.colnames

Each sidecar is optional and looked up independently. When present, its
name count must match the matrix dimension.
"""

from __future__ import annotations

import logging

import pandas as pd
from scipy import io as spio
from scipy import sparse

from pipette.exceptions import BackendError
from pipette.files import optional_file
from pipette.formats import source_basename
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.importers.lines import read_lines
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

SIDECAR_SUFFIXES = {"index": ".rownames", "columns": ".colnames"}
_AXIS_LABELS = {"index": "rows", "columns": "columns"}


class MtxImporter(BaseImporter):
    """Importer for MatrixMarket files and their name sidecars."""

    def _read_sidecar(self, request: ImportRequest, suffix: str) -> list[str] | None:
        sidecar = f"{request.source}{suffix}"
        with optional_file(
            sidecar, quiet=request.quiet, timeout=self.config.download_timeout,
        ) as path:
            if path is None:
                return None
            names = [name for name in read_lines(path) if name]
        logger.debug("Read %d names from %s", len(names), source_basename(sidecar))
        return names

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "scipy.io", "mmread")
        with self.local_file(request) as path:
            with backend_errors(request.source, "scipy.io::mmread"):
                matrix = spio.mmread(path)

        if sparse.issparse(matrix):
            df = pd.DataFrame.sparse.from_spmatrix(sparse.csc_matrix(matrix))
        else:
            df = pd.DataFrame(matrix)

        for axis, suffix in SIDECAR_SUFFIXES.items():
            names = self._read_sidecar(request, suffix)
            if names is None:
                continue
            expected = len(getattr(df, axis))
            if len(names) != expected:
                raise BackendError(
                    f"'{source_basename(request.source)}{suffix}' has {len(names)} "
                    f"names but the matrix has {expected} {_AXIS_LABELS[axis]}"
                )
            df = df.set_axis(names, axis=axis)

        return RawResult(payload=df, package="scipy.io", function="mmread")
