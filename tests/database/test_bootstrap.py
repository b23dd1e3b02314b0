from __future__ import annotations

import mysql.connector
import pytest

from src.onboarding_tracker.onboarding_tracker.core.exceptions import StoreUnavailableError
from src.onboarding_tracker.onboarding_tracker.database import bootstrap
from src.onboarding_tracker.onboarding_tracker.database.bootstrap import _load_script, split_statements
from src.onboarding_tracker.onboarding_tracker.main import SCHEMA_PATH, SEED_PATH


def test_split_ignores_semicolons_in_literals():
    sql = "INSERT INTO t VALUES ('a;b', \"c;d\");\nINSERT INTO t VALUES ('it\\'s;ok');\n"

    assert list(split_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b', \"c;d\")",
        "INSERT INTO t VALUES ('it\\'s;ok')",
    ]


def test_split_keeps_unterminated_tail():
    assert list(split_statements("SELECT 1; SELECT 2")) == ["SELECT 1", "SELECT 2"]


def test_schema_script_targets_configured_database():
    sql = _load_script(SCHEMA_PATH)

    assert "CREATE DATABASE" not in sql.upper()
    assert "CREATE TABLE IF NOT EXISTS students" in sql
    assert "kit_received_time" in sql


def test_seed_script_is_rerunnable():
    statements = list(split_statements(_load_script(SEED_PATH)))

    assert statements
    assert all(s.upper().startswith("INSERT IGNORE") for s in statements)


def test_list_tables_connect_failure_is_store_unavailable(monkeypatch):
    def refuse(self, *, with_database=True):
        raise mysql.connector.Error("Can't connect to MySQL server")

    monkeypatch.setattr(bootstrap.DatabaseConnection, "connect", refuse)

    with pytest.raises(StoreUnavailableError):
        bootstrap.list_tables({"database": "onboarding_db"})


def test_list_tables_query_failure_is_store_unavailable(monkeypatch):
    class BrokenCursor:
        def execute(self, sql):
            raise mysql.connector.Error("Lost connection")

    class Conn:
        closed = False

        def cursor(self):
            return BrokenCursor()

        def close(self):
            Conn.closed = True

    monkeypatch.setattr(bootstrap.DatabaseConnection, "connect", lambda self, **kw: Conn())

    with pytest.raises(StoreUnavailableError):
        bootstrap.list_tables({"database": "onboarding_db"})
    assert Conn.closed is True
