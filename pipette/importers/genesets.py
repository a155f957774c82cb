"""
Gene set importers for pipette (GMT, GMX/GRP).

GMT files hold one gene set per line, tab separated::

    HALLMARK_APOPTOSIS<TAB>http://...<TAB>CASP3<TAB>BAX<TAB>...

The first token is the set name, the second a description (dropped),
and the remaining tokens are the members.

GMX/GRP files hold a single set, one entry per line: the set name on
the first line, a description on the second, then one member per line.

Both return a ``NamedList`` mapping set name -> list of members.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from pipette.containers import NamedList
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.importers.lines import read_lines
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


def read_gmt(path: str | Path) -> NamedList:
    """Parse a GMT file into set name -> members."""
    sets = NamedList()
    names: list[str] = []
    for line in read_lines(path):
        if not line.strip():
            continue
        tokens = line.split("\t")
        names.append(tokens[0])
        sets[tokens[0]] = [t for t in tokens[2:] if t]
    dupes = sorted(name for name, n in Counter(names).items() if n > 1)
    if dupes:
        logger.warning(
            "Duplicate gene set names detected; the last definition wins: %s",
            ", ".join(dupes),
        )
    return sets


def read_gmx(path: str | Path) -> NamedList:
    """Parse a GMX/GRP file into a single-entry set name -> members."""
    lines = read_lines(path)
    if not lines or not lines[0].strip():
        raise ValueError("Gene set file is empty or has no set name on its first line")
    name = lines[0].split()[0]
    members = [line.strip() for line in lines[2:] if line.strip()]
    return NamedList({name: members})


class GmtImporter(BaseImporter):
    """Importer for GMT gene set collections."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "pipette", "read_gmt")
        with self.local_file(request) as path:
            with backend_errors(request.source, "pipette::read_gmt"):
                sets = read_gmt(path)
        logger.debug("Read %d gene sets from %s", len(sets), request.source)
        return RawResult(payload=sets, package="pipette", function="read_gmt")


class GmxImporter(BaseImporter):
    """Importer for single gene set files."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        self.log_import(request, "pipette", "read_gmx")
        with self.local_file(request) as path:
            with backend_errors(request.source, "pipette::read_gmx"):
                sets = read_gmx(path)
        return RawResult(payload=sets, package="pipette", function="read_gmx")
