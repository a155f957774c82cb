"""
Serialization importers for pipette (JSON, YAML).

Documents are parsed with ``json.load`` and ``yaml.safe_load``. A
top-level mapping comes back as a ``NamedList`` and a top-level array as
a ``RecordList`` (see ``pipette.containers``), so provenance can be
attached. Scalar documents are returned as-is.
"""

from __future__ import annotations

import json
import logging

import yaml

from pipette.containers import wrap_document
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


class JsonImporter(BaseImporter):
    """Importer for JSON documents."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "json", "load")
        with self.local_file(request) as path:
            with backend_errors(request.source, "json::load"):
                with open(path, "r", encoding="utf-8") as f:
                    document = json.load(f)
        return RawResult(
            payload=wrap_document(document), package="json", function="load",
        )


class YamlImporter(BaseImporter):
    """Importer for YAML documents."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "yaml", "safe_load")
        with self.local_file(request) as path:
            with backend_errors(request.source, "yaml::safe_load"):
                with open(path, "r", encoding="utf-8") as f:
                    document = yaml.safe_load(f)
        return RawResult(
            payload=wrap_document(document), package="yaml", function="safe_load",
        )
