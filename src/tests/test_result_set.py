from types import SimpleNamespace

import pyarrow as pa
import pyarrow.csv as pa_csv
import pytest

from core.result_set import ResultRow, ResultSet
from core.schema import SchemaDefinition


@pytest.fixture
def schema():
    return SchemaDefinition(SimpleNamespace(fieldSchemas=[
        SimpleNamespace(name="id", type="int", comment=None),
        SimpleNamespace(name="name", type="string", comment=None),
        SimpleNamespace(name="score", type="double", comment=None),
    ]))


@pytest.fixture
def result_set(schema):
    return ResultSet(["1\ta\t0.5", "2\tb\tNULL", "3\tc\t2.0"], schema)


class TestResultRow:

    def test_lookup_by_name_and_position(self, result_set):
        row = result_set[0]
        assert row["id"] == 1
        assert row[1] == "a"
        assert row[-1] == 0.5
        assert row.get("missing", "fallback") == "fallback"
        with pytest.raises(KeyError):
            row["missing"]

    def test_mapping_views(self, result_set):
        row = result_set[1]
        assert row.keys() == ("id", "name", "score")
        assert row.values() == (2, "b", None)
        assert row.as_dict() == {"id": 2, "name": "b", "score": None}
        assert list(row) == [2, "b", None]

    def test_equality(self, schema, result_set):
        assert result_set[0] == ResultRow((1, "a", 0.5), schema)
        assert result_set[0] == {"id": 1, "name": "a", "score": 0.5}
        assert result_set[0] != result_set[1]


class TestResultSet:

    def test_sequence_behaviour(self, result_set, schema):
        assert len(result_set) == 3
        assert result_set.schema is schema
        assert all(row.schema is schema for row in result_set)
        assert [row["id"] for row in result_set[1:]] == [2, 3]

    def test_first(self, result_set, schema):
        assert result_set.first()["name"] == "a"
        assert ResultSet([], schema).first() is None

    def test_arrays_and_dicts(self, result_set):
        assert result_set.as_arrays()[2] == [3, "c", 2.0]
        assert result_set.as_dicts()[0] == {"id": 1, "name": "a", "score": 0.5}

    def test_column_metadata(self, result_set):
        assert result_set.column_names == ("id", "name", "score")
        assert result_set.column_type_map == {"id": "int", "name": "string", "score": "double"}

    def test_to_arrow(self, result_set):
        table = result_set.to_arrow()
        assert isinstance(table, pa.Table)
        assert table.schema.names == ["id", "name", "score"]
        assert table.schema.field("id").type == pa.int32()
        assert table.column("score").to_pylist() == [0.5, None, 2.0]

    def test_to_pandas(self, result_set):
        frame = result_set.to_pandas()
        assert list(frame.columns) == ["id", "name", "score"]
        assert frame["name"].tolist() == ["a", "b", "c"]

    def test_to_csv_round_trips_through_arrow(self, result_set, tmp_path):
        out_file = tmp_path / "rows.csv"
        assert result_set.to_csv(str(out_file)) is None

        table = pa_csv.read_csv(str(out_file))
        assert table.column("name").to_pylist() == ["a", "b", "c"]

    def test_to_tsv_returns_text(self, result_set):
        text = result_set.to_tsv()
        lines = text.strip().splitlines()
        assert len(lines) == 4
        assert lines[0].replace('"', "").split("\t") == ["id", "name", "score"]


def test_rows_with_complex_values_are_hashable():
    schema = SchemaDefinition(SimpleNamespace(fieldSchemas=[
        SimpleNamespace(name="tags", type="array<string>", comment=None),
        SimpleNamespace(name="attrs", type="map<string,int>", comment=None),
    ]))
    rows = ResultSet(['["a","b"]\t{"x":1}', '["a","b"]\t{"x":1}', '[]\t{}'], schema)

    assert len(set(rows)) == 2
    assert hash(rows[0]) == hash(rows[1])
