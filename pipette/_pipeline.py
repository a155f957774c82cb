"""
Internal import orchestration for pipette.

Extracted from ``__init__.py`` so that importers that delegate to
another import (bcbio counts) can reuse the same resolve -> check ->
load -> normalize sequence without circular imports.

This module is **not** part of the public API.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pipette.config import ImportConfig
from pipette.formats import is_url, resolve_format
from pipette.metadata import build_provenance
from pipette.normalize import normalize
from pipette.options import check_option_applicability
from pipette.registry import get_importer, group_for_tag
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


def run_import(request: ImportRequest, config: ImportConfig) -> Any:
    """Run one import from a validated request.

    Steps:
      1. Check that a local source exists (URLs are checked on download).
      2. Resolve the format tag and its group.
      3. Check that every option applies to that group.
      4. Load the file with the group's importer.
      5. Return R data payloads as-is; normalize everything else,
         attaching provenance when ``request.metadata`` is set.

    Raises:
        FileNotFoundError: If a local source does not exist.
        UnresolvedFormatError: If no format can be inferred.
        UnsupportedFormatError: If the format has no importer.
        OptionMismatchError: If an option does not apply to the format.
        BackendError: If the backend parser fails.
    """
    if not is_url(request.source) and not Path(request.source).is_file():
        raise FileNotFoundError(f"File not found: {request.source}")

    tag = resolve_format(request.source, request.format)
    group = group_for_tag(tag)
    check_option_applicability(tag, group, request, config)

    importer = get_importer(tag, config)
    raw = importer.load(request, tag)

    if not raw.normalize:
        logger.debug("Returning %s result unmodified", raw.importer)
        return raw.payload

    provenance = raw.provenance
    if request.metadata and provenance is None:
        provenance = build_provenance(request.source, raw.package, raw.function)
    return normalize(raw, request, config, provenance)
