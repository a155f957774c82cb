"""
Unit tests for the gene set importers (pipette.importers.genesets).
"""

import logging

import pytest

from pipette.config import ImportConfig
from pipette.containers import NamedList
from pipette.exceptions import BackendError
from pipette.importers.genesets import GmtImporter, GmxImporter, read_gmt, read_gmx
from pipette.request import ImportRequest

GMT = (
    "SET_A\thttp://example.org/a\tTP53\tBRCA1\tEGFR\n"
    "SET_B\tna\tMYC\n"
    "\n"
)

GMX = "HALLMARK_X\n> description\nTP53\nBRCA1\n\n"


class TestReadGmt:
    def test_sets(self, write_file):
        sets = read_gmt(write_file("a.gmt", GMT))
        assert isinstance(sets, NamedList)
        assert sets == {"SET_A": ["TP53", "BRCA1", "EGFR"], "SET_B": ["MYC"]}

    def test_order_preserved(self, write_file):
        assert list(read_gmt(write_file("a.gmt", GMT))) == ["SET_A", "SET_B"]

    def test_duplicate_set_names_warned(self, write_file, caplog):
        path = write_file("a.gmt", "S\td\tA\nS\td\tB\n")
        with caplog.at_level(logging.WARNING, logger="pipette.importers.genesets"):
            sets = read_gmt(path)
        assert sets == {"S": ["B"]}
        assert "Duplicate gene set names detected" in caplog.text


class TestReadGmx:
    def test_single_set(self, write_file):
        sets = read_gmx(write_file("a.gmx", GMX))
        assert sets == {"HALLMARK_X": ["TP53", "BRCA1"]}

    def test_empty(self, write_file):
        with pytest.raises(ValueError, match="empty"):
            read_gmx(write_file("a.grp", ""))


class TestImporters:
    def test_gmt_identity(self, write_file):
        request = ImportRequest(source=str(write_file("a.gmt", GMT)), quiet=True)
        raw = GmtImporter(ImportConfig()).load(request, "gmt")
        assert raw.importer == "pipette::read_gmt"
        assert len(raw.payload) == 2

    def test_grp_identity(self, write_file):
        request = ImportRequest(source=str(write_file("a.grp", GMX)), quiet=True)
        raw = GmxImporter(ImportConfig()).load(request, "grp")
        assert raw.importer == "pipette::read_gmx"
        assert list(raw.payload) == ["HALLMARK_X"]

    def test_empty_file_is_backend_error(self, write_file):
        request = ImportRequest(source=str(write_file("a.gmx", "")), quiet=True)
        with pytest.raises(BackendError):
            GmxImporter(ImportConfig()).load(request, "gmx")
