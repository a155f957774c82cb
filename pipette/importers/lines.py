"""
Line-oriented importer for pipette (LOG, MD, PY, R, RMD, SH).

Returns the file as a plain ``list[str]``, one element per line, with
line terminators removed. Empty lines are kept.

Option semantics:
- ``skip``: lines dropped from the top.
- ``n_max``: maximum number of lines read (after ``skip``).
- ``comment``: lines starting with this prefix are removed *after*
  reading. Because ``n_max`` counts lines before that filter, combining
  a comment filter with a finite ``n_max`` is rejected.
"""

from __future__ import annotations

import logging
from itertools import islice
from pathlib import Path

from pipette.exceptions import OptionMismatchError
from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)


def read_lines(
    path: str | Path,
    *,
    skip: int = 0,
    nrows: int | None = None,
    comment: str = "",
) -> list[str]:
    """Read *path* as a list of lines."""
    stop = None if nrows is None else skip + nrows
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\r\n") for line in islice(f, skip, stop)]
    if comment:
        lines = [line for line in lines if not line.startswith(comment)]
    return lines


class LinesImporter(BaseImporter):
    """Importer for source code and log files."""

    consumes = frozenset({"comment", "skip", "n_max"})

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        if request.comment and request.nrows is not None:
            raise OptionMismatchError(
                "A comment filter cannot be combined with a finite n_max "
                "for line-oriented files"
            )
        self.log_import(request, "builtins", "open")
        with self.local_file(request) as path:
            if path.stat().st_size == 0:
                return RawResult(payload=[], package="builtins", function="open")
            with backend_errors(request.source, "builtins::open"):
                lines = read_lines(
                    path,
                    skip=request.skip,
                    nrows=request.nrows,
                    comment=request.comment,
                )
        logger.debug("Read %d lines from %s", len(lines), request.source)
        return RawResult(payload=lines, package="builtins", function="open")
