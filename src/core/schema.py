import json
import logging
import math
import re
from collections import Counter
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.errors import SchemaMismatchError

logger = logging.getLogger(__name__)

RawRow = Union[str, Sequence[Any]]

FIELD_SEPARATOR = "\t"
NULL_TEXT = "NULL"

INTEGER_TYPES = {"tinyint", "smallint", "int", "bigint"}
FLOAT_TYPES = {"float", "double"}
COMPLEX_TYPE_PATTERN = re.compile(r"^(array|map|struct)\b")
SPECIAL_FLOATS = {
    "Infinity": math.inf,
    "-Infinity": -math.inf,
    "NaN": math.nan,
}


def split_row(raw: Optional[RawRow]) -> List[Any]:
    """Split a raw Hive row into positional values.

    Hive hands rows back as one tab separated string; rows that are already
    sequences are taken as they are. ``None`` and ``""`` are empty rows.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split(FIELD_SEPARATOR) if raw else []
    return list(raw)


def base_type(hive_type: str) -> str:
    """Strip parameters off a Hive type: ``decimal(10,2)`` -> ``decimal``."""
    return hive_type.split("(", 1)[0].split("<", 1)[0].strip()


class SchemaDefinition:
    """Column names and types of one query result.

    Built from the schema descriptor Hive returns (anything with a
    ``fieldSchemas`` list of ``name``/``type`` entries) and one example row.
    The example row only matters when it is wider than the descriptor, which
    happens for partition columns on ``SELECT *``.
    """

    def __init__(self, schema: Any, example_row: Optional[RawRow] = None):
        self.schema = schema
        self._field_schemas = list(getattr(schema, "fieldSchemas", None) or [])
        self._example_row = split_row(example_row)
        self._column_names = tuple(self._build_column_names())
        self._column_type_map = self._build_column_type_map()

    @property
    def column_names(self) -> Tuple[str, ...]:
        return self._column_names

    @property
    def column_type_map(self) -> Dict[str, str]:
        return dict(self._column_type_map)

    def __len__(self) -> int:
        return len(self._column_names)

    def __repr__(self) -> str:
        columns = ", ".join(f"{n}:{self._column_type_map[n]}" for n in self._column_names)
        return f"{self.__class__.__name__}({columns})"

    def _build_column_names(self) -> List[str]:
        names = [field.name for field in self._field_schemas]

        # SELECT a.foo, b.foo gives two columns called foo; number every one of them.
        totals = Counter(names)
        seen: Counter = Counter()
        disambiguated = []
        for name in names:
            if totals[name] > 1:
                seen[name] += 1
                disambiguated.append(f"{name}_{seen[name]}")
            else:
                disambiguated.append(name)

        # Hive leaves partition columns out of the schema on SELECT *.
        offset = 0
        while len(disambiguated) < len(self._example_row):
            offset += 1
            disambiguated.append(f"_p{offset}")
        return disambiguated

    def _build_column_type_map(self) -> Dict[str, str]:
        type_map = {}
        for position, name in enumerate(self._column_names):
            if position < len(self._field_schemas):
                type_map[name] = str(self._field_schemas[position].type).strip().lower()
            else:
                type_map[name] = "string"
        return type_map

    def coerce_row(self, raw: RawRow) -> Tuple[Any, ...]:
        """Split and type one raw row, enforcing the schema's arity."""
        # An empty string is one empty value here, unlike an example row.
        values = raw.split(FIELD_SEPARATOR) if isinstance(raw, str) else list(raw)
        if len(values) != len(self._column_names):
            raise SchemaMismatchError(len(self._column_names), len(values))
        return tuple(
            self.coerce_column(name, value)
            for name, value in zip(self._column_names, values)
        )

    def coerce_column(self, column_name: str, value: Any) -> Any:
        hive_type = self._column_type_map[column_name]
        if not isinstance(value, str):
            return value

        kind = base_type(hive_type)
        if kind in ("string", "varchar", "char"):
            return value
        if value == NULL_TEXT:
            return None
        if value in SPECIAL_FLOATS:
            return SPECIAL_FLOATS[value]
        if kind in INTEGER_TYPES:
            return int(value)
        if kind in FLOAT_TYPES:
            return float(value)
        if kind == "boolean":
            return value.lower() == "true"
        if kind == "decimal":
            try:
                return Decimal(value)
            except InvalidOperation:
                logger.debug(f"Leaving unparsable decimal {value!r} in {column_name} as text")
                return value
        if kind == "date":
            try:
                return date.fromisoformat(value)
            except ValueError:
                return value
        if kind == "timestamp":
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return value
        if COMPLEX_TYPE_PATTERN.match(hive_type):
            return self._coerce_complex_value(value)
        return value

    @staticmethod
    def _coerce_complex_value(value: str) -> Any:
        if not value or value == "null":
            return None
        return json.loads(value)
