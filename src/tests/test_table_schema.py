import unittest

from core.table_schema import Column, TableSchema


class TestTableSchema(unittest.TestCase):
    def setUp(self):
        self.schema = (
            TableSchema("events", comment="raw events")
            .column("id", "bigint")
            .column("payload", "string", "json body")
            .partition("dt", "string")
        )

    def test_column_rendering(self):
        self.assertEqual(str(Column("id", "bigint")), "`id` BIGINT")
        self.assertEqual(str(Column("p", "string", "body")), "`p` STRING COMMENT 'body'")

    def test_create_table_statement(self):
        expected = (
            "CREATE TABLE `events` (\n"
            "`id` BIGINT,\n"
            "`payload` STRING COMMENT 'json body'\n"
            ")\n"
            "COMMENT 'raw events'\n"
            "PARTITIONED BY (\n"
            "`dt` STRING\n"
            ")\n"
            "ROW FORMAT DELIMITED\n"
            "FIELDS TERMINATED BY '\\t'\n"
            "LINES TERMINATED BY '\\n'\n"
            "COLLECTION ITEMS TERMINATED BY '|'\n"
            "STORED AS TEXTFILE"
        )
        self.assertEqual(self.schema.create_table_statement(), expected)

    def test_location_makes_table_external(self):
        schema = TableSchema("logs", location="s3://bucket/logs", field_sep=",").column("line", "string")
        statement = schema.create_table_statement()
        self.assertTrue(statement.startswith("CREATE EXTERNAL TABLE `logs`"))
        self.assertIn("FIELDS TERMINATED BY ','", statement)
        self.assertTrue(statement.endswith("LOCATION 's3://bucket/logs'"))

    def test_alter_columns_statements(self):
        self.assertEqual(
            self.schema.add_columns_statement(),
            "ALTER TABLE `events` ADD COLUMNS (\n`id` BIGINT,\n`payload` STRING COMMENT 'json body'\n)",
        )
        self.assertTrue(self.schema.replace_columns_statement().startswith("ALTER TABLE `events` REPLACE COLUMNS ("))

    def test_partitions_are_not_table_columns(self):
        self.assertEqual([c.name for c in self.schema.columns], ["id", "payload"])
        self.assertEqual([c.name for c in self.schema.partitions], ["dt"])
        self.assertNotIn("dt", self.schema.add_columns_statement())


if __name__ == "__main__":
    unittest.main()
