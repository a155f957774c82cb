"""
Unit tests for the demo script (scripts/run_import.py).

The script is not part of the package; it is loaded from its file path.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

import pipette

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_import.py"


@pytest.fixture(scope="module")
def run_import():
    spec = importlib.util.spec_from_file_location("run_import", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestParseArgs:
    def test_files_and_flags(self, run_import):
        args = run_import._parse_args(["--metadata", "--engine", "polars", "a.csv", "b.gmt"])
        assert args.files == ["a.csv", "b.gmt"]
        assert args.metadata is True
        assert args.engine == "polars"

    def test_defaults(self, run_import):
        args = run_import._parse_args(["a.csv"])
        assert args.metadata is False
        assert args.engine is None

    @pytest.mark.parametrize(
        "argv",
        [[], ["a.csv", "--engine"], ["--engine", "spark", "a.csv"]],
    )
    def test_invalid_arguments_exit(self, run_import, argv):
        with pytest.raises(SystemExit):
            run_import._parse_args(argv)


class TestMain:
    def test_imports_and_reports(self, run_import, write_file, monkeypatch):
        path = write_file("a.csv", "rowname,a\nr1,1\n")
        monkeypatch.setattr(sys, "argv", ["run_import.py", "--engine", "polars", str(path)])
        assert run_import.main() == 0
        assert pipette.get_config().engine == "polars"

    def test_failure_counted(self, run_import, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["run_import.py", str(tmp_path / "missing.csv")])
        assert run_import.main() == 1
