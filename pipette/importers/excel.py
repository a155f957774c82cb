"""
Microsoft Excel importer for pipette (XLSX, XLS, XLSB).

Reads one worksheet with ``pandas.read_excel``. The engine follows the
extension: openpyxl for XLSX, xlrd for legacy XLS, pyxlsb for binary
XLSB. ``sheet`` is either a sheet name or a 1-based position.

Fully blank rows are dropped, since spreadsheet readers keep them.

Warnings raised by the reader (unparseable cells, unsupported workbook
features) fail the import with BackendError while
``ImportConfig.strict_excel`` is on (the default).
"""

from __future__ import annotations

import logging

import pandas as pd

from pipette.importers.base import (
    BaseImporter,
    RawResult,
    apply_column_names,
    backend_errors,
)
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd", "xlsb": "pyxlsb"}


class ExcelImporter(BaseImporter):
    """Importer for Excel workbooks."""

    consumes = frozenset({"colnames", "n_max", "sheet", "skip"})

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        sheet = request.sheet - 1 if isinstance(request.sheet, int) else request.sheet
        self.log_import(request, "pandas", "read_excel")
        with self.local_file(request) as path:
            with backend_errors(
                request.source,
                "pandas::read_excel",
                strict_warnings=self.config.strict_excel,
            ):
                df = pd.read_excel(
                    path,
                    sheet_name=sheet,
                    header=0 if request.has_header else None,
                    skiprows=request.skip,
                    nrows=request.nrows,
                    na_values=list(self.config.na_values),
                    keep_default_na=False,
                    engine=_ENGINES[tag],
                )
        df = df.dropna(how="all").reset_index(drop=True)
        df = apply_column_names(df, request)
        return RawResult(
            payload=df, package="pandas", function="read_excel", tabular=True,
        )
