"""
Unit tests for the line-oriented importer (pipette.importers.lines).
"""

import pytest

from pipette.config import ImportConfig
from pipette.exceptions import OptionMismatchError
from pipette.importers.lines import LinesImporter, read_lines
from pipette.request import ImportRequest

SCRIPT = "#!/bin/sh\n# setup\necho one\n\necho two\n"


def _load(path, **options):
    request = ImportRequest(source=str(path), quiet=True, **options)
    return LinesImporter(ImportConfig()).load(request, "sh")


class TestReadLines:
    def test_terminators_removed_blank_lines_kept(self, write_file):
        path = write_file("a.sh", SCRIPT)
        assert read_lines(path) == ["#!/bin/sh", "# setup", "echo one", "", "echo two"]

    def test_crlf(self, tmp_path):
        path = tmp_path / "a.log"
        path.write_bytes(b"a\r\nb\r\n")
        assert read_lines(path) == ["a", "b"]

    def test_skip_and_nrows(self, write_file):
        path = write_file("a.sh", SCRIPT)
        assert read_lines(path, skip=2, nrows=2) == ["echo one", ""]

    def test_comment_filtered_after_reading(self, write_file):
        path = write_file("a.sh", SCRIPT)
        assert read_lines(path, comment="#") == ["echo one", "", "echo two"]


class TestLinesImporter:
    def test_plain_list(self, write_file):
        raw = _load(write_file("a.sh", SCRIPT))
        assert type(raw.payload) is list
        assert len(raw.payload) == 5
        assert raw.importer == "builtins::open"
        assert raw.tabular is False

    def test_empty_file(self, write_file):
        raw = _load(write_file("empty.sh", ""))
        assert raw.payload == []

    def test_skip_and_n_max(self, write_file):
        raw = _load(write_file("a.sh", SCRIPT), skip=1, n_max=2)
        assert raw.payload == ["# setup", "echo one"]

    def test_comment(self, write_file):
        raw = _load(write_file("a.sh", SCRIPT), comment="#")
        assert raw.payload == ["echo one", "", "echo two"]

    def test_comment_with_n_max_rejected(self, write_file):
        with pytest.raises(OptionMismatchError, match="finite n_max"):
            _load(write_file("a.sh", SCRIPT), comment="#", n_max=2)
