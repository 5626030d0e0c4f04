import io
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterator, List, Optional, Tuple

import pyarrow as pa
import pyarrow.csv as pa_csv

from core.schema import RawRow, SchemaDefinition, base_type

logger = logging.getLogger(__name__)

# Hive types with a direct Arrow equivalent; anything else is inferred.
ARROW_TYPES = {
    "tinyint": pa.int8(),
    "smallint": pa.int16(),
    "int": pa.int32(),
    "bigint": pa.int64(),
    "float": pa.float32(),
    "double": pa.float64(),
    "boolean": pa.bool_(),
    "string": pa.string(),
    "varchar": pa.string(),
    "char": pa.string(),
}


class ResultRow:
    """One typed row, readable by column name or by position."""

    __slots__ = ("_schema", "_values")

    def __init__(self, values: Tuple[Any, ...], schema: SchemaDefinition):
        self._schema = schema
        self._values = tuple(values)

    @property
    def schema(self) -> SchemaDefinition:
        return self._schema

    def __getitem__(self, key):
        if isinstance(key, str):
            try:
                return self._values[self._schema.column_names.index(key)]
            except ValueError:
                raise KeyError(key) from None
        return self._values[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except (KeyError, IndexError):
            return default

    def keys(self) -> Tuple[str, ...]:
        return self._schema.column_names

    def values(self) -> Tuple[Any, ...]:
        return self._values

    def items(self) -> List[Tuple[str, Any]]:
        return list(zip(self._schema.column_names, self._values))

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.items())

    def as_tuple(self) -> Tuple[Any, ...]:
        return self._values

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultRow):
            return self.keys() == other.keys() and self._values == other._values
        if isinstance(other, Mapping):
            return self.as_dict() == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.keys(), _freeze(self._values)))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.as_dict()!r})"


def _freeze(value: Any) -> Any:
    # Complex columns come back as lists and dicts.
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, dict):
        return frozenset((k, _freeze(v)) for k, v in value.items())
    return value


class ResultSet(Sequence):
    """
    Typed rows of one query (or one batch of it), all sharing a schema.
    """

    def __init__(self, rows: List[RawRow], schema: SchemaDefinition):
        self.schema = schema
        self._rows = tuple(ResultRow(schema.coerce_row(row), schema) for row in rows)

    @property
    def column_names(self) -> Tuple[str, ...]:
        return self.schema.column_names

    @property
    def column_type_map(self) -> Dict[str, str]:
        return self.schema.column_type_map

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self._rows[index])
        return self._rows[index]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rows={len(self._rows)}, schema={self.schema!r})"

    def first(self) -> Optional[ResultRow]:
        """First row, or None for an empty result"""
        return self._rows[0] if self._rows else None

    def as_arrays(self) -> List[List[Any]]:
        return [list(row) for row in self._rows]

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [row.as_dict() for row in self._rows]

    def to_arrow(self) -> pa.Table:
        """Convert the rows into an Arrow table, one column per schema column."""
        type_map = self.column_type_map
        columns = {}
        for position, name in enumerate(self.column_names):
            values = [row[position] for row in self._rows]
            arrow_type = ARROW_TYPES.get(base_type(type_map[name]))
            columns[name] = pa.array(values, type=arrow_type)
        return pa.table(columns)

    def to_pandas(self):
        """Convert the rows into a pandas DataFrame (through Arrow)."""
        return self.to_arrow().to_pandas()

    def to_csv(self, out_file: Optional[str] = None) -> Optional[str]:
        return self._to_separated_output(",", out_file)

    def to_tsv(self, out_file: Optional[str] = None) -> Optional[str]:
        return self._to_separated_output("\t", out_file)

    def _to_separated_output(self, sep: str, out_file: Optional[str]) -> Optional[str]:
        options = pa_csv.WriteOptions(include_header=True, delimiter=sep)
        table = self.to_arrow()
        if out_file is not None:
            pa_csv.write_csv(table, out_file, write_options=options)
            logger.info(f"Wrote {len(self._rows)} rows to {out_file}")
            return None

        sink = io.BytesIO()
        pa_csv.write_csv(table, sink, write_options=options)
        return sink.getvalue().decode("utf-8")
