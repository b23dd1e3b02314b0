"""Apply ``database/schema.sql`` and ``database/seed.sql`` to the configured store.

The SQL files may carry their own ``CREATE DATABASE`` / ``USE`` lines for
manual runs in a MySQL client; those are dropped here so the target database
always comes from settings.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Mapping, Union

import mysql.connector

from ..core.exceptions import StoreUnavailableError
from ..observability.events import LogEvent
from ..observability.structured import create_logger
from .connection import DBConfig, DatabaseConnection

logger = create_logger("database")

PathLike = Union[str, Path]

_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENTS = re.compile(r"(?m)^\s*--.*$")


def split_statements(sql: str) -> Iterator[str]:
    """Yield ``;``-terminated statements, ignoring semicolons inside quoted literals."""
    quote = None
    start = 0
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _load_script(path: PathLike) -> str:
    sql = Path(path).read_text(encoding="utf-8")
    return _LINE_COMMENTS.sub("", _DATABASE_DIRECTIVES.sub("", sql))


def _execute_script(config: DBConfig, path: PathLike) -> int:
    statements = list(split_statements(_load_script(path)))
    try:
        conn = DatabaseConnection(config).connect()
    except mysql.connector.Error as err:
        raise StoreUnavailableError(f"Cannot connect to {config.describe()}: {err}") from err

    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    except mysql.connector.Error as err:
        conn.rollback()
        raise StoreUnavailableError(f"Failed to apply {Path(path).name}: {err}") from err
    finally:
        conn.close()

    logger.info(
        LogEvent.STORE_SCRIPT_APPLIED,
        f"Applied {Path(path).name}",
        {"target": config.describe(), "statements": len(statements)},
    )
    return len(statements)


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    try:
        conn = DatabaseConnection(config).connect(with_database=False)
    except mysql.connector.Error as err:
        raise StoreUnavailableError(f"Cannot connect to {config.host}:{config.port}: {err}") from err
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: PathLike) -> int:
    """Create the database if needed, then run the (idempotent) schema script."""
    ensure_database_exists(db_config)
    return _execute_script(DBConfig.from_mapping(db_config), schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: PathLike) -> int:
    return _execute_script(DBConfig.from_mapping(db_config), seed_path)


def list_tables(db_config: Mapping) -> list[str]:
    config = DBConfig.from_mapping(db_config)
    try:
        conn = DatabaseConnection(config).connect()
    except mysql.connector.Error as err:
        raise StoreUnavailableError(f"Cannot connect to {config.describe()}: {err}") from err
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    except mysql.connector.Error as err:
        raise StoreUnavailableError(f"Cannot list tables in {config.describe()}: {err}") from err
    finally:
        conn.close()
