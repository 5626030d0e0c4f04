from core.config import ConnectionConfig
from core.errors import (
    ConnectionStateError,
    HiveClientError,
    InvalidArgumentError,
    SchemaMismatchError,
    TransportError,
)
from core.result_set import ResultRow, ResultSet
from core.schema import SchemaDefinition
from core.table_schema import Column, TableSchema

__all__ = [
    "ConnectionConfig",
    "ConnectionStateError",
    "HiveClientError",
    "InvalidArgumentError",
    "SchemaMismatchError",
    "TransportError",
    "ResultRow",
    "ResultSet",
    "SchemaDefinition",
    "Column",
    "TableSchema",
]
