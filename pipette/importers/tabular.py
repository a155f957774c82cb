"""
Catch-all importer for infrequently used tabular formats.

Each tag is handed to the pandas, pyarrow, or scipy reader for that
format. Options beyond the file itself are not forwarded; these files
are read as stored.

Some readers need optional dependencies (``odfpy`` for ODS,
``pyreadstat`` for SPSS). A missing one surfaces as a BackendError
naming the reader.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
from pyarrow import parquet as pq
from scipy.io import arff, loadmat

from pipette.containers import NamedList
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


def _read_arff(path: Path) -> pd.DataFrame:
    data, _meta = arff.loadarff(path)
    df = pd.DataFrame(data)
    # Nominal attributes come back as bytes.
    for col in df.columns[df.dtypes == object]:
        df[col] = df[col].str.decode("utf-8")
    return df


def _read_mat(path: Path) -> NamedList:
    contents = loadmat(path)
    return NamedList(
        (name, value) for name, value in contents.items() if not name.startswith("__")
    )


def _read_parquet(path: Path) -> pd.DataFrame:
    return pq.read_table(path).to_pandas()


# tag -> (package, function, reader, tabular)
READERS: dict[str, tuple[str, str, Callable[[Path], Any], bool]] = {
    "arff": ("scipy.io.arff", "loadarff", _read_arff, True),
    "dta": ("pandas", "read_stata", pd.read_stata, True),
    "feather": ("pandas", "read_feather", pd.read_feather, True),
    "fwf": ("pandas", "read_fwf", pd.read_fwf, True),
    "mat": ("scipy.io", "loadmat", _read_mat, False),
    "ods": ("pandas", "read_excel", lambda p: pd.read_excel(p, engine="odf"), True),
    "orc": ("pandas", "read_orc", pd.read_orc, True),
    "parquet": ("pyarrow.parquet", "read_table", _read_parquet, True),
    "psv": ("pandas", "read_csv", lambda p: pd.read_csv(p, sep="|"), True),
    "sas7bdat": (
        "pandas", "read_sas", lambda p: pd.read_sas(p, format="sas7bdat"), True,
    ),
    "sav": ("pandas", "read_spss", pd.read_spss, True),
    "xml": ("pandas", "read_xml", lambda p: pd.read_xml(p, parser="etree"), True),
    "xpt": ("pandas", "read_sas", lambda p: pd.read_sas(p, format="xport"), True),
    "zsav": ("pandas", "read_spss", pd.read_spss, True),
}


class TabularImporter(BaseImporter):
    """Importer dispatching rare formats to their generic converter."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        package, function, reader, tabular = READERS[tag]
        self.log_import(request, package, function)
        with self.local_file(request) as path:
            with backend_errors(request.source, f"{package}::{function}"):
                payload = reader(path)
        return RawResult(
            payload=payload, package=package, function=function, tabular=tabular,
        )
