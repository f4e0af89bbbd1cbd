from pathlib import Path

from src.medhir_portal.medhir_portal.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use


def test_schema_file_yields_only_table_statement():
    schema = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
    sql = _strip_create_db_and_use(schema.read_text(encoding="utf-8"))

    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 1
    assert statements[0].startswith("CREATE TABLE IF NOT EXISTS tab_storage")


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");"

    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
    ]
