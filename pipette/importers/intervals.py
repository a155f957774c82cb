"""
Genomic interval importer for pipette.

Handles annotation (GFF/GTF), BED-family, and coverage (bigWig, wiggle)
files. Every reader returns a ``pandas.DataFrame`` in the pyranges
column convention: ``Chromosome``, ``Start`` (0-based), ``End``
(exclusive), then format-specific columns.

================================  ===================================
Tags                              Backend
================================  ===================================
gtf                               ``pyranges.read_gtf``
gff3 (and gff with version 3)     ``pyranges.read_gff3``
gff1, gff2                        ``pandas.read_csv`` (GFF schema)
bed                               ``pyranges.read_bed``
bed15, bedgraph, bedpe,           ``pandas.read_csv`` (fixed schemas)
broadpeak, narrowpeak
bigwig, bw                        ``pyranges.read_bigwig`` (pyBigWig)
wig                               ``pipette.read_wig``
================================  ===================================

``gff`` files are sniffed for a ``##gff-version`` pragma and routed to
the matching reader; without one they are treated as GFF3.

Warnings raised by these readers usually mean malformed records were
skipped or coerced. With ``ImportConfig.strict_intervals`` (the default)
they fail the import as a BackendError.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Callable
from pathlib import Path

import pandas as pd

from pipette.importers.base import BaseImporter, RawResult, backend_errors
from pipette.importers.lines import read_lines
from pipette.request import ImportRequest

logger = logging.getLogger(__name__)

_BED12 = [
    "Chromosome", "Start", "End", "Name", "Score", "Strand",
    "ThickStart", "ThickEnd", "ItemRGB", "BlockCount", "BlockSizes", "BlockStarts",
]
_NARROWPEAK = [
    "Chromosome", "Start", "End", "Name", "Score", "Strand",
    "SignalValue", "PValue", "QValue", "Peak",
]

SCHEMAS: dict[str, list[str]] = {
    "bedgraph": ["Chromosome", "Start", "End", "Score"],
    "bedpe": [
        "Chromosome", "Start", "End", "Chromosome2", "Start2", "End2",
        "Name", "Score", "Strand", "Strand2",
    ],
    "bed15": _BED12 + ["ExpCount", "ExpIds", "ExpScores"],
    "broadpeak": _NARROWPEAK[:-1],
    "narrowpeak": _NARROWPEAK,
    "gff1": [
        "Chromosome", "Source", "Feature", "Start", "End",
        "Score", "Strand", "Frame", "Group",
    ],
    "gff2": [
        "Chromosome", "Source", "Feature", "Start", "End",
        "Score", "Strand", "Frame", "Attributes",
    ],
}

_GFF_VERSION = re.compile(r"^##gff-version\s+(\d)")
_HEADER_PREFIXES = ("#", "track", "browser")


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def sniff_gff_version(path: str | Path) -> str:
    """GFF version declared by the ``##gff-version`` pragma ("3" if absent)."""
    for line in read_lines(path, nrows=20):
        match = _GFF_VERSION.match(line)
        if match:
            return match.group(1)
    return "3"


def read_schema(path: str | Path, tag: str) -> pd.DataFrame:
    """Read a headerless tab-separated interval file with a fixed schema.

    Track, browser, and comment lines are skipped. GFF coordinates are
    1-based closed and are shifted to 0-based starts.
    """
    body = "\n".join(
        line for line in read_lines(path)
        if line.strip() and not line.startswith(_HEADER_PREFIXES)
    )
    columns = SCHEMAS[tag]
    df = pd.read_csv(
        io.StringIO(body),
        sep="\t",
        header=None,
        names=columns,
        na_values=["."],
        keep_default_na=False,
    )
    if tag.startswith("gff"):
        df["Start"] = df["Start"] - 1
    return df


def _wig_params(line: str) -> dict[str, str]:
    return dict(token.split("=", 1) for token in line.split()[1:] if "=" in token)


def read_wig(path: str | Path) -> pd.DataFrame:
    """Read a wiggle file (variableStep, fixedStep, or BED-like sections)."""
    records: list[tuple[str, int, int, float]] = []
    mode = None
    chrom = ""
    start = step = span = 1
    for line in read_lines(path):
        if not line.strip() or line.startswith(_HEADER_PREFIXES):
            continue
        if line.startswith("variableStep"):
            params = _wig_params(line)
            mode, chrom = "variable", params["chrom"]
            span = int(params.get("span", 1))
            continue
        if line.startswith("fixedStep"):
            params = _wig_params(line)
            mode, chrom = "fixed", params["chrom"]
            start = int(params["start"])
            step = int(params.get("step", 1))
            span = int(params.get("span", 1))
            continue
        fields = line.split()
        if mode == "variable":
            pos = int(fields[0])
            records.append((chrom, pos - 1, pos - 1 + span, float(fields[1])))
        elif mode == "fixed":
            records.append((chrom, start - 1, start - 1 + span, float(fields[0])))
            start += step
        else:
            records.append((fields[0], int(fields[1]), int(fields[2]), float(fields[3])))
    return pd.DataFrame(records, columns=["Chromosome", "Start", "End", "Score"])


# ---------------------------------------------------------------------------
# Importer
# ---------------------------------------------------------------------------

def _pyranges_reader(name: str) -> Callable[[Path], pd.DataFrame]:
    def reader(path: Path) -> pd.DataFrame:
        import pyranges

        return getattr(pyranges, name)(str(path), as_df=True)
    return reader


def _schema_reader(tag: str) -> Callable[[Path], pd.DataFrame]:
    return lambda path: read_schema(path, tag)


# tag -> (package, function, reader)
READERS: dict[str, tuple[str, str, Callable[[Path], pd.DataFrame]]] = {
    "gtf": ("pyranges", "read_gtf", _pyranges_reader("read_gtf")),
    "gff3": ("pyranges", "read_gff3", _pyranges_reader("read_gff3")),
    "bed": ("pyranges", "read_bed", _pyranges_reader("read_bed")),
    "bigwig": ("pyranges", "read_bigwig", _pyranges_reader("read_bigwig")),
    "bw": ("pyranges", "read_bigwig", _pyranges_reader("read_bigwig")),
    "wig": ("pipette", "read_wig", read_wig),
    **{
        tag: ("pandas", "read_csv", _schema_reader(tag))
        for tag in SCHEMAS
    },
}


class IntervalsImporter(BaseImporter):
    """Importer for genomic interval and coverage files."""

    def load(self, request: ImportRequest, tag: str) -> RawResult:
        with self.local_file(request) as path:
            if tag == "gff":
                tag = f"gff{sniff_gff_version(path)}"
                logger.debug("Sniffed GFF version for %s: %s", request.source, tag)
            package, function, reader = READERS.get(tag, READERS["gff3"])
            if package == "pyranges":
                # Imported before the strict block is entered.
                import pyranges  # noqa: F401
            self.log_import(request, package, function)
            with backend_errors(
                request.source,
                f"{package}::{function}",
                strict_warnings=self.config.strict_intervals,
            ):
                df = reader(path)
        logger.debug("Read %d intervals from %s", len(df), request.source)
        return RawResult(payload=df, package=package, function=function)
