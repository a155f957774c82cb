"""
Importer registry for pipette.

Maps each format group to the importer class that handles it. The map
is a plain table built once, on first use, from the importer modules;
there is no lookup of importer names at call time.

Lookup algorithm:
1. Find the group of the format tag in the recognition table.
2. Return the importer class registered for that group.
3. Tags outside the table fail with UnsupportedFormatError.
"""

from __future__ import annotations

import logging

from pipette.config import ImportConfig
from pipette.exceptions import UnsupportedFormatError
from pipette.formats import FormatGroup, load_format_table
from pipette.importers.base import BaseImporter

logger = logging.getLogger(__name__)

# Maps format group to importer class
_IMPORTER_MAP: dict[FormatGroup, type[BaseImporter]] = {}


def _get_importer_map() -> dict[FormatGroup, type[BaseImporter]]:
    """Lazily build the importer map to avoid circular imports."""
    if not _IMPORTER_MAP:
        from pipette.importers.bcbio import BcbioCountsImporter
        from pipette.importers.delim import DelimImporter
        from pipette.importers.excel import ExcelImporter
        from pipette.importers.genesets import GmtImporter, GmxImporter
        from pipette.importers.intervals import IntervalsImporter
        from pipette.importers.lines import LinesImporter
        from pipette.importers.prism import PrismImporter
        from pipette.importers.rnative import RdaImporter, RdsImporter
        from pipette.importers.serialization import JsonImporter, YamlImporter
        from pipette.importers.sparse import MtxImporter
        from pipette.importers.tabular import TabularImporter

        _IMPORTER_MAP.update({
            FormatGroup.DELIM: DelimImporter,
            FormatGroup.EXCEL: ExcelImporter,
            FormatGroup.PRISM: PrismImporter,
            FormatGroup.RDATA_SINGLE: RdsImporter,
            FormatGroup.RDATA: RdaImporter,
            FormatGroup.MTX: MtxImporter,
            FormatGroup.JSON: JsonImporter,
            FormatGroup.YAML: YamlImporter,
            FormatGroup.GMT: GmtImporter,
            FormatGroup.GMX: GmxImporter,
            FormatGroup.INTERVALS: IntervalsImporter,
            FormatGroup.LINES: LinesImporter,
            FormatGroup.BCBIO: BcbioCountsImporter,
            FormatGroup.TABULAR: TabularImporter,
        })
    return _IMPORTER_MAP


def group_for_tag(tag: str) -> FormatGroup:
    """Return the format group of *tag*.

    Raises:
        UnsupportedFormatError: If *tag* is not in the recognition table.
    """
    group = load_format_table().group_of(tag)
    if group is None:
        raise UnsupportedFormatError(f"'{tag}' extension is not supported.")
    return group


def importer_class(group: FormatGroup) -> type[BaseImporter]:
    """Return the importer class registered for *group*."""
    return _get_importer_map()[group]


def get_importer(tag: str, config: ImportConfig) -> BaseImporter:
    """Instantiate the importer for format *tag*.

    Raises:
        UnsupportedFormatError: If no importer handles *tag*.
    """
    group = group_for_tag(tag)
    cls = importer_class(group)
    logger.debug("Selected %s for '%s' (group %s)", cls.__name__, tag, group.value)
    return cls(config)
