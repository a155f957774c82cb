"""
GraphPad Prism importer for pipette (PZFX).

A PZFX project is an XML document holding one or more data tables::

    <GraphPadPrismFile>
      <Table ID="Table0">
        <Title>Growth</Title>
        <XColumn><Title>Day</Title><Subcolumn><d>1</d>...</Subcolumn></XColumn>
        <YColumn><Title>Control</Title>
          <Subcolumn><d>0.5</d>...</Subcolumn>
          <Subcolumn><d>0.6</d>...</Subcolumn>
        </YColumn>
      </Table>
    </GraphPadPrismFile>

Each subcolumn becomes one DataFrame column. Columns with several
subcolumns (replicates) are named ``<title>_1``, ``<title>_2``, ...;
row titles become a ``ROWTITLE`` column. Newer files declare an XML
namespace, older ones do not; both are handled.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np
import pandas as pd

from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

_TABLE_TAGS = ("Table", "HugeTable")

# Column element -> default title when the column has none.
_COLUMN_TAGS = {
    "RowTitlesColumn": "ROWTITLE",
    "XColumn": "X",
    "XAdvancedColumn": "X",
    "YColumn": "Y",
}


def _local(tag: str) -> str:
    """Element tag without its ``{namespace}`` prefix."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def _value(cell: ET.Element) -> object:
    text = _text(cell)
    if not text:
        return np.nan
    try:
        return float(text)
    except ValueError:
        return text


def _tables(root: ET.Element) -> list[ET.Element]:
    return [el for el in root if _local(el.tag) in _TABLE_TAGS]


def pzfx_tables(path: str | Path) -> list[str]:
    """Titles of the data tables in a PZFX file, in file order."""
    root = ET.parse(path).getroot()
    return [_text(next(iter(_children(t, "Title")), None)) for t in _tables(root)]


def read_pzfx(path: str | Path, table: int | str = 1) -> pd.DataFrame:
    """Read one data table of a PZFX file.

    Args:
        path: Path to the ``.pzfx`` file.
        table: Table title, or 1-based table position.

    Raises:
        ValueError: If the table does not exist.
    """
    root = ET.parse(path).getroot()
    tables = _tables(root)
    titles = [_text(next(iter(_children(t, "Title")), None)) for t in tables]

    if isinstance(table, int):
        if not 1 <= table <= len(tables):
            raise ValueError(
                f"Table {table} requested but the file has {len(tables)} table(s)"
            )
        element = tables[table - 1]
    else:
        if table not in titles:
            raise ValueError(f"Table '{table}' not found. Available: {titles}")
        element = tables[titles.index(table)]

    names: list[str] = []
    columns: list[list[object]] = []
    y_index = 0
    for column in element:
        kind = _local(column.tag)
        if kind not in _COLUMN_TAGS:
            continue
        default = _COLUMN_TAGS[kind]
        if kind == "YColumn":
            y_index += 1
            default = f"Y{y_index}"
        title = _text(next(iter(_children(column, "Title")), None)) or default
        subcolumns = _children(column, "Subcolumn")
        for i, sub in enumerate(subcolumns, start=1):
            names.append(title if len(subcolumns) == 1 else f"{title}_{i}")
            columns.append([_value(d) for d in _children(sub, "d")])

    n_rows = max((len(c) for c in columns), default=0)
    padded = [c + [np.nan] * (n_rows - len(c)) for c in columns]
    df = pd.DataFrame(dict(enumerate(padded)), index=range(n_rows))
    return df.set_axis(names, axis=1).infer_objects()


class PrismImporter(BaseImporter):
    """Importer for GraphPad Prism projects."""

    consumes = frozenset({"sheet"})

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "pipette", "read_pzfx")
        with self.local_file(request) as path:
            with backend_errors(request.source, "pipette::read_pzfx"):
                df = read_pzfx(path, table=request.sheet)
        logger.debug("Read Prism table with columns %s", list(df.columns))
        return RawResult(
            payload=df, package="pipette", function="read_pzfx", tabular=True,
        )
