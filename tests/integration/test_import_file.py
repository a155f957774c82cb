"""
Integration tests: end-to-end imports through ``pipette.import_file()``.

Every test writes its input to ``tmp_path`` and goes through the whole
chain: request validation -> format resolution -> option check ->
importer -> normalizer.
"""

from __future__ import annotations

import datetime
import gzip
import logging

import pandas as pd
import polars as pl
import pytest
import rdata
from pydantic import ValidationError

import pipette
from pipette import (
    BackendError,
    ColumnNameMismatchError,
    ImportConfig,
    MalformedContainerError,
    NamedList,
    OptionMismatchError,
    UnresolvedFormatError,
    UnsupportedFormatError,
    get_metadata,
    import_file,
)

A_CSV = "rowname,a,b\nr1,1,x\nr2,2,y\n"


@pytest.fixture()
def a_csv(write_file):
    return write_file("a.csv", A_CSV)


# ---------------------------------------------------------------------------
# Delimited files
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestDelimited:
    """The canonical CSV scenario."""

    def test_rownames_promoted(self, a_csv):
        df = import_file(a_csv, quiet=True)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["a", "b"]
        assert list(df.index) == ["r1", "r2"]
        assert df.loc["r2", "a"] == 2

    def test_no_rownames_no_colnames(self, a_csv):
        df = import_file(a_csv, rownames=False, colnames=False, quiet=True)
        assert list(df.columns) == ["X1", "X2", "X3"]
        assert len(df) == 3
        assert df["X1"].tolist() == ["rowname", "r1", "r2"]

    def test_explicit_colnames(self, write_file):
        path = write_file("b.csv", "1,2\n3,4\n")
        df = import_file(path, colnames=["left", "right"], quiet=True)
        assert list(df.columns) == ["left", "right"]

    def test_explicit_colnames_mismatch(self, write_file):
        path = write_file("b.csv", "1,2,3\n")
        with pytest.raises(ColumnNameMismatchError):
            import_file(path, colnames=["left", "right"], quiet=True)

    def test_compressed(self, tmp_path):
        path = tmp_path / "a.csv.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(A_CSV)
        df = import_file(path, quiet=True)
        assert list(df.index) == ["r1", "r2"]

    def test_format_override(self, write_file):
        path = write_file("data", "x\ty\n1\t2\n")
        df = import_file(path, format="tsv", quiet=True)
        assert list(df.columns) == ["x", "y"]

    @pytest.mark.parametrize("engine", ["pandas", "pyarrow", "polars", "csv"])
    def test_engines_agree(self, a_csv, engine):
        df = import_file(a_csv, quiet=True, config=ImportConfig(engine=engine))
        assert list(df.columns) == ["a", "b"]
        assert list(df.index) == ["r1", "r2"]

    def test_process_wide_engine(self, a_csv):
        pipette.set_config(engine="polars", metadata=True)
        df = import_file(a_csv, quiet=True)
        assert get_metadata(df).importer == "polars::read_csv"

    def test_polars_return_type(self, a_csv):
        df = import_file(a_csv, quiet=True, config=ImportConfig(return_type="polars"))
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["rowname", "a", "b"]

    def test_duplicate_names_warned(self, write_file, caplog):
        path = write_file("d.csv", "a,b,c\n1,2,3\n")
        with caplog.at_level(logging.WARNING):
            df = import_file(path, quiet=True, make_names=lambda n: ["x", "y", "x"])
        assert list(df.columns) == ["x", "y", "x"]
        assert "duplicate names: x" in caplog.text

    def test_logs_import(self, a_csv, caplog):
        with caplog.at_level(logging.INFO, logger="pipette"):
            import_file(a_csv)
        assert "Importing a.csv at" in caplog.text
        assert "using pandas::read_csv." in caplog.text
        assert "Setting row names from 'rowname' column." in caplog.text


# ---------------------------------------------------------------------------
# Provenance
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestMetadata:
    def test_provenance_attached(self, a_csv):
        df = import_file(a_csv, metadata=True, quiet=True)
        record = get_metadata(df)
        assert record.package == "pipette"
        assert record.package_version == pipette.__version__
        assert record.importer == "pandas::read_csv"
        assert record.importer_version == pd.__version__
        assert record.file == str(a_csv.resolve())
        assert record.date == datetime.date.today()
        assert record.call.startswith("pipette.import_file(")
        assert "metadata=True" in record.call

    def test_not_attached_by_default(self, a_csv):
        assert get_metadata(import_file(a_csv, quiet=True)) is None

    def test_json_provenance(self, write_file):
        obj = import_file(write_file("a.json", '{"k": 1}'), metadata=True, quiet=True)
        assert get_metadata(obj).importer == "json::load"

    def test_bcbio_provenance(self, write_file):
        path = write_file("x.counts", "id\ts1\nG1\t5\nG2\t6\n")
        df = import_file(path, metadata=True, quiet=True)
        record = get_metadata(df)
        assert record.importer == "pandas::read_csv"
        assert record.call == f"pipette.import_file({str(path)!r}, metadata=True, quiet=True)"
        assert df.loc["G2", "s1"] == 6


# ---------------------------------------------------------------------------
# Other formats
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestOtherFormats:
    def test_gmt(self, write_file):
        sets = import_file(
            write_file("h.gmt", "SET A\tdesc\tTP53\tMYC\nSET_B\tdesc\tEGFR\n"), quiet=True,
        )
        assert isinstance(sets, NamedList)
        assert sets == {"SET_A": ["TP53", "MYC"], "SET_B": ["EGFR"]}

    def test_lines(self, write_file):
        lines = import_file(write_file("a.R", "x <- 1\n# c\ny <- 2\n"), quiet=True)
        assert lines == ["x <- 1", "# c", "y <- 2"]

    def test_lines_with_skip(self, write_file):
        lines = import_file(write_file("a.md", "# T\n\nbody\n"), skip=2, quiet=True)
        assert lines == ["body"]

    def test_mtx_names_not_coerced(self, write_file):
        path = write_file(
            "m.mtx",
            "%%MatrixMarket matrix coordinate integer general\n2 2 1\n1 1 3\n",
        )
        write_file("m.mtx.colnames", "cell-1\ncell-2\n")
        df = import_file(path, quiet=True)
        assert list(df.columns) == ["cell-1", "cell-2"]

    def test_yaml(self, write_file):
        doc = import_file(write_file("c.yml", "key value: 1\n"), quiet=True)
        assert doc == {"key_value": 1}

    def test_narrowpeak(self, write_file):
        path = write_file("p.narrowPeak", "chr1\t1\t5\tp\t0\t.\t1\t2\t3\t4\n")
        df = import_file(path, quiet=True)
        assert df["Chromosome"].tolist() == ["chr1"]

    def test_rds_unmodified(self, tmp_path):
        path = tmp_path / "x.rds"
        rdata.write_rds(path, pd.DataFrame({"rowname": [1.0, 2.0], "bad name": ["a", "b"]}))
        out = import_file(path, metadata=True, quiet=True)
        assert list(out.columns) == ["rowname", "bad name"]
        assert out["rowname"].tolist() == [1.0, 2.0]
        assert get_metadata(out) is None

    def test_rda_with_two_objects(self, tmp_path):
        path = tmp_path / "x.rda"
        frame = pd.DataFrame({"a": [1.0]})
        rdata.write_rda(path, {"first": frame, "second": frame})
        with pytest.raises(MalformedContainerError):
            import_file(path, quiet=True)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestFailures:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_file(tmp_path / "missing.csv")

    def test_no_extension(self, write_file):
        with pytest.raises(UnresolvedFormatError):
            import_file(write_file("README", "x"))

    def test_denylisted(self, write_file):
        with pytest.raises(UnsupportedFormatError):
            import_file(write_file("paper.pdf", "x"))

    def test_unsupported_override(self, a_csv):
        with pytest.raises(UnsupportedFormatError, match="'foo' extension is not supported"):
            import_file(a_csv, format="foo")

    def test_option_mismatch(self, a_csv):
        with pytest.raises(OptionMismatchError):
            import_file(a_csv, sheet=2)

    def test_metadata_on_lines(self, write_file):
        with pytest.raises(OptionMismatchError):
            import_file(write_file("a.py", "x = 1\n"), metadata=True)

    def test_invalid_argument(self, a_csv):
        with pytest.raises(ValidationError):
            import_file(a_csv, skip=-1)

    def test_backend_failure(self, write_file):
        with pytest.raises(BackendError):
            import_file(write_file("bad.json", "{"), quiet=True)

    def test_reader_options_on_json(self, write_file):
        path = write_file("a.json", '{"a": 1}')
        with pytest.raises(OptionMismatchError, match="comment"):
            import_file(path, comment="#", quiet=True)
        with pytest.raises(OptionMismatchError, match="n_max"):
            import_file(path, n_max=1, quiet=True)

    def test_pyarrow_comment(self, a_csv):
        with pytest.raises(OptionMismatchError):
            import_file(a_csv, comment="#", config=ImportConfig(engine="pyarrow"))
