"""
Import provenance for pipette.

Every importer reports which library and function parsed the file. When
``metadata=True`` that identity is turned into a ``ProvenanceRecord``
and stored in the returned object's ``attrs`` under the "import" key:

    >>> df = pipette.import_file("a.csv", metadata=True)
    >>> get_metadata(df).importer
    'pandas::read_csv'

The record is a side channel: it is never a column or an element of the
data. Objects without an ``attrs`` dict (scalars, polars frames, objects
returned by R data files) simply do not carry one.
"""

from __future__ import annotations

import datetime
import logging
import platform
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from pipette._version import __version__
from pipette.formats import is_url

logger = logging.getLogger(__name__)

IMPORT_KEY = "import"

# Import name -> distribution name, where they differ.
_DISTRIBUTIONS = {
    "yaml": "PyYAML",
    "pyBigWig": "pyBigWig",
}


class ProvenanceRecord(BaseModel):
    """How, when, and with what an object was imported."""

    model_config = ConfigDict(frozen=True)

    package: str
    package_version: str
    importer: str
    importer_version: str
    file: str
    date: datetime.date
    call: str | None = None


def package_version(package: str) -> str:
    """Installed version of the library behind *package*.

    Standard-library modules report the interpreter version.
    """
    top = package.split(".")[0]
    if top == "pipette":
        return __version__
    if top in sys.stdlib_module_names:
        return platform.python_version()
    try:
        return version(_DISTRIBUTIONS.get(top, top))
    except PackageNotFoundError:
        logger.debug("No installed distribution found for %s", top)
        return "unknown"


def build_provenance(source: str, package: str, function: str) -> ProvenanceRecord:
    """Build the provenance record for an import of *source*.

    Local files are recorded as resolved absolute paths; URLs verbatim.
    """
    source = str(source)
    file = source if is_url(source) else str(Path(source).resolve())
    return ProvenanceRecord(
        package="pipette",
        package_version=__version__,
        importer=f"{package}::{function}",
        importer_version=package_version(package),
        file=file,
        date=datetime.date.today(),
    )


def supports_metadata(obj: Any) -> bool:
    """Whether *obj* has a per-object ``attrs`` metadata store."""
    return isinstance(getattr(obj, "attrs", None), dict)


def get_metadata(obj: Any, which: str = IMPORT_KEY) -> Any:
    """Return the metadata stored on *obj* under *which*, or ``None``."""
    if not supports_metadata(obj):
        return None
    return obj.attrs.get(which)


def set_metadata(obj: Any, value: Any, which: str = IMPORT_KEY) -> Any:
    """Store *value* on *obj* under *which* and return *obj*.

    Raises:
        TypeError: If *obj* has no ``attrs`` metadata store.
    """
    if not supports_metadata(obj):
        raise TypeError(
            f"Objects of type {type(obj).__name__} do not support attached metadata"
        )
    obj.attrs[which] = value
    return obj
