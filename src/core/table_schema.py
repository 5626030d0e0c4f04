from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Column:
    """A column or partition column of a Hive table"""
    name: str
    type: str
    comment: Optional[str] = None

    def __str__(self) -> str:
        comment_string = "" if self.comment is None else f" COMMENT '{self.comment}'"
        return f"`{self.name}` {str(self.type).upper()}{comment_string}"


@dataclass
class TableSchema:
    """
    Definition of a delimited text Hive table, rendered into DDL statements.

    Example:
        schema = (
            TableSchema("events", comment="raw events")
            .column("id", "bigint")
            .column("payload", "string", "json body")
            .partition("dt", "string")
        )
        connection.create_table(schema)
    """
    name: str
    comment: Optional[str] = None
    location: Optional[str] = None
    field_sep: str = "\t"
    line_sep: str = "\n"
    collection_sep: str = "|"
    columns: List[Column] = field(default_factory=list)
    partitions: List[Column] = field(default_factory=list)

    def column(self, name: str, type: str, comment: Optional[str] = None) -> "TableSchema":
        self.columns.append(Column(name, type, comment))
        return self

    def partition(self, name: str, type: str, comment: Optional[str] = None) -> "TableSchema":
        self.partitions.append(Column(name, type, comment))
        return self

    def create_table_statement(self) -> str:
        external = "" if self.location is None else "EXTERNAL "
        statement = (
            f"CREATE {external}TABLE {self.table_statement()}\n"
            f"ROW FORMAT DELIMITED\n"
            f"FIELDS TERMINATED BY '{_escape(self.field_sep)}'\n"
            f"LINES TERMINATED BY '{_escape(self.line_sep)}'\n"
            f"COLLECTION ITEMS TERMINATED BY '{_escape(self.collection_sep)}'\n"
            f"STORED AS TEXTFILE"
        )
        if self.location is not None:
            statement += f"\nLOCATION '{self.location}'"
        return statement

    def table_statement(self) -> str:
        statement = f"`{self.name}` {self._column_statement(self.columns)}"
        if self.comment is not None:
            statement += f"\nCOMMENT '{self.comment}'"
        if self.partitions:
            statement += f"\nPARTITIONED BY {self._column_statement(self.partitions)}"
        return statement

    def replace_columns_statement(self) -> str:
        return self._alter_columns_statement("REPLACE")

    def add_columns_statement(self) -> str:
        return self._alter_columns_statement("ADD")

    def __str__(self) -> str:
        return self.table_statement()

    def _alter_columns_statement(self, add_or_replace: str) -> str:
        return f"ALTER TABLE `{self.name}` {add_or_replace} COLUMNS {self._column_statement(self.columns)}"

    @staticmethod
    def _column_statement(columns: List[Column]) -> str:
        cols = ",\n".join(str(column) for column in columns)
        return f"(\n{cols}\n)"


def _escape(separator: str) -> str:
    # Hive reads separators as escaped literals, e.g. '\t'
    return separator.encode("unicode_escape").decode("ascii")
