"""
R-native data importers for pipette (RDS, RDA/RDATA).

Both formats are parsed with the ``rdata`` package and returned exactly
as it converts them: no row-name promotion, no name coercion, and no
provenance. ``RawResult.normalize`` is False for both.

An RDA file is a container of named objects. pipette only accepts
containers holding exactly one object and returns that object alone.
"""

from __future__ import annotations

import logging

import rdata

from pipette.exceptions import MalformedContainerError
from pipette.formats import source_basename
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


class RdsImporter(BaseImporter):
    """Importer for single serialized R objects."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "rdata", "read_rds")
        with self.local_file(request) as path:
            with backend_errors(request.source, "rdata::read_rds"):
                obj = rdata.read_rds(path)
        return RawResult(
            payload=obj, package="rdata", function="read_rds", normalize=False,
        )


class RdaImporter(BaseImporter):
    """Importer for R data containers holding a single object."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "rdata", "read_rda")
        with self.local_file(request) as path:
            with backend_errors(request.source, "rdata::read_rda"):
                objects = rdata.read_rda(path)
        if len(objects) != 1:
            raise MalformedContainerError(
                f"'{source_basename(request.source)}' must contain exactly one "
                f"object (found {len(objects)}: {sorted(objects)})"
            )
        name, obj = next(iter(objects.items()))
        logger.debug("Loaded object '%s' from %s", name, request.source)
        return RawResult(
            payload=obj, package="rdata", function="read_rda", normalize=False,
        )
