"""
bcbio count matrix importer for pipette (COUNTS).

A ``.counts`` file is a tab-separated table with an ``id`` column (gene
or transcript identifiers) followed by one integer column per sample.
The file is imported as TSV through ``import_file()`` itself, so the
same logging, metadata, and engine settings apply, then reshaped into
an integer matrix indexed by ``id``.
"""

from __future__ import annotations

import logging

from pipette.exceptions import ColumnNameMismatchError, MalformedContainerError
from pipette.formats import source_basename
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.importers.delim import ENGINES
from pipette.metadata import get_metadata
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

ID_COLUMN = "id"


class BcbioCountsImporter(BaseImporter):
    """Importer for bcbio-nextgen count matrices."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        from pipette import import_file

        inner = import_file(
            request.source,
            format="tsv",
            metadata=request.metadata,
            quiet=request.quiet,
            config=self.config.model_copy(update={"return_type": "pandas"}),
        )
        name = source_basename(request.source)
        if ID_COLUMN not in inner.columns:
            raise ColumnNameMismatchError(
                f"'{name}' has no '{ID_COLUMN}' column "
                f"(columns: {list(inner.columns)})"
            )
        ids = inner[ID_COLUMN]
        if ids.duplicated().any():
            dupes = sorted(ids[ids.duplicated()].astype(str).unique())
            raise MalformedContainerError(
                f"'{name}' has duplicate ids: {', '.join(dupes)}"
            )
        provenance = get_metadata(inner)
        engine = ENGINES[self.config.engine]
        with backend_errors(request.source, f"{engine.package}::{engine.function}"):
            counts = inner.set_index(ID_COLUMN).astype(int)
        counts.index.name = None
        counts.attrs = {}
        logger.debug("Read %d x %d count matrix from %s", *counts.shape, name)
        return RawResult(
            payload=counts,
            package=engine.package,
            function=engine.function,
            tabular=True,
            provenance=provenance,
        )
