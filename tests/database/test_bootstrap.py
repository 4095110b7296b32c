from timeclock.database.bootstrap import SCHEMA_PATH, _iter_sql_statements
from timeclock.database.connection import DBConfig


def test_schema_splits_into_create_statements():
    statements = list(_iter_sql_statements(SCHEMA_PATH.read_text(encoding="utf-8")))

    assert len(statements) == 4
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)


def test_comments_and_blank_statements_are_dropped():
    sql = "-- header\nCREATE TABLE a (id INT);\n\n  -- note\n;\nCREATE TABLE b (id INT);"
    assert list(_iter_sql_statements(sql)) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


def test_db_config_defaults():
    cfg = DBConfig.from_dict({"host": "db", "port": "3307"})
    assert (cfg.host, cfg.port, cfg.user, cfg.database) == ("db", 3307, "root", "timeclock")
