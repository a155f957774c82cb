"""
Unit tests for the bcbio count matrix importer (pipette.importers.bcbio).
"""

import pytest

from pipette.config import ImportConfig
from pipette.exceptions import ColumnNameMismatchError, MalformedContainerError
from pipette.importers.bcbio import BcbioCountsImporter
from pipette.metadata import ProvenanceRecord
from pipette.request import ImportRequest

COUNTS = "id\tsample1\tsample2\nENSG1\t10\t0\nENSG2\t3\t8\n"


def _load(path, metadata=False, config=None):
    request = ImportRequest(source=str(path), quiet=True, metadata=metadata)
    return BcbioCountsImporter(config or ImportConfig()).load(request, "counts")


class TestBcbioCounts:
    def test_integer_matrix_indexed_by_id(self, write_file):
        raw = _load(write_file("x.counts", COUNTS))
        df = raw.payload
        assert list(df.index) == ["ENSG1", "ENSG2"]
        assert df.index.name is None
        assert list(df.columns) == ["sample1", "sample2"]
        assert all(str(dtype).startswith("int") for dtype in df.dtypes)
        assert df.loc["ENSG2", "sample2"] == 8
        assert raw.tabular is True

    def test_missing_id_column(self, write_file):
        path = write_file("x.counts", "gene\ts1\nA\t1\n")
        with pytest.raises(ColumnNameMismatchError, match="'id'"):
            _load(path)

    def test_duplicate_ids(self, write_file):
        path = write_file("x.counts", "id\ts1\nA\t1\nA\t2\nB\t3\n")
        with pytest.raises(MalformedContainerError, match="duplicate ids: A"):
            _load(path)

    def test_inner_provenance_carried_over(self, write_file):
        raw = _load(write_file("x.counts", COUNTS), metadata=True)
        assert isinstance(raw.provenance, ProvenanceRecord)
        assert raw.provenance.importer == "pandas::read_csv"
        assert raw.payload.attrs == {}

    def test_no_provenance_without_metadata(self, write_file):
        raw = _load(write_file("x.counts", COUNTS))
        assert raw.provenance is None

    def test_engine_identity(self, write_file):
        raw = _load(write_file("x.counts", COUNTS), config=ImportConfig(engine="polars"))
        assert raw.importer == "polars::read_csv"

    def test_polars_return_type_still_reads_pandas(self, write_file):
        config = ImportConfig(return_type="polars")
        raw = _load(write_file("x.counts", COUNTS), config=config)
        assert list(raw.payload.index) == ["ENSG1", "ENSG2"]
