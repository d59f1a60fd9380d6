"""PostgreSQL helpers shared by the mirror and seed handlers.

Table names are checked against an allow-list before use, then case-folded and
composed into statements with ``psycopg2.sql.Identifier``. Row values are always
bound parameters.
"""

import re
from typing import List, Optional, Sequence

import psycopg2
from aibs_informatics_core.utils.os_operations import get_env_var
from psycopg2 import sql
from psycopg2.extensions import connection as PGConnection

from data_replication_aws_lambda.common.constants import DEFAULT_TABLE_NAME, TABLE_NAME_ENV_VAR
from data_replication_aws_lambda.common.exceptions import ConfigurationError, InvalidIdentifier
from data_replication_aws_lambda.common.logging import get_service_logger
from data_replication_aws_lambda.handlers.database.model import DatabaseEndpoint, InventoryRow

logger = get_service_logger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_]+")

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    item_id INTEGER PRIMARY KEY,
    item_name TEXT NOT NULL,
    quantity INTEGER NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""
SELECT_ROWS_SQL = "SELECT item_id, item_name, quantity, updated_at FROM {table} ORDER BY item_id"
COUNT_ROWS_SQL = "SELECT COUNT(*) FROM {table}"
TRUNCATE_SQL = "TRUNCATE TABLE {table}"
UPSERT_ROW_SQL = """
INSERT INTO {table} (item_id, item_name, quantity, updated_at)
VALUES (%s, %s, %s, %s)
ON CONFLICT (item_id) DO UPDATE
SET item_name = EXCLUDED.item_name,
    quantity = EXCLUDED.quantity,
    updated_at = EXCLUDED.updated_at
"""
INSERT_IF_ABSENT_SQL = """
INSERT INTO {table} (item_id, item_name, quantity)
VALUES (%s, %s, %s)
ON CONFLICT (item_id) DO NOTHING
"""


def validate_identifier(identifier: Optional[str]) -> str:
    if not identifier or not IDENTIFIER_PATTERN.fullmatch(identifier):
        raise InvalidIdentifier(f"Invalid table identifier supplied: {identifier!r}")
    return identifier


def resolve_table_name(table_name: Optional[str] = None) -> str:
    """Validated table name from the request, ``TABLE_NAME`` or the default."""
    return validate_identifier(table_name or get_env_var(TABLE_NAME_ENV_VAR) or DEFAULT_TABLE_NAME)


def check_credentials(*endpoints: DatabaseEndpoint):
    for endpoint in endpoints:
        if not endpoint.has_credentials:
            raise ConfigurationError("Database credentials are not set (DB_USER / DB_PASSWORD)")


def compose(statement: str, table_name: str) -> sql.Composed:
    """Bind ``table_name`` into ``statement`` as a quoted identifier.

    The name is case-folded first so it refers to the same relation PostgreSQL
    resolves for the unquoted name (``Inventory2024`` -> ``inventory2024``).
    """
    return sql.SQL(statement).format(table=sql.Identifier(table_name.lower()))


def open_connection(endpoint: DatabaseEndpoint, autocommit: bool = True) -> PGConnection:
    logger.info(f"Connecting to {endpoint}")
    conn = psycopg2.connect(
        host=endpoint.host,
        port=endpoint.port,
        dbname=endpoint.dbname,
        user=endpoint.user,
        password=endpoint.password,
    )
    conn.autocommit = autocommit
    return conn


def ensure_table(conn: PGConnection, table_name: str):
    with conn.cursor() as cursor:
        cursor.execute(compose(CREATE_TABLE_SQL, table_name))


def fetch_rows(conn: PGConnection, table_name: str) -> List[InventoryRow]:
    with conn.cursor() as cursor:
        cursor.execute(compose(SELECT_ROWS_SQL, table_name))
        return [
            InventoryRow(item_id=item_id, item_name=item_name, quantity=quantity, updated_at=ts)
            for item_id, item_name, quantity, ts in cursor.fetchall()
        ]


def count_rows(conn: PGConnection, table_name: str) -> int:
    with conn.cursor() as cursor:
        cursor.execute(compose(COUNT_ROWS_SQL, table_name))
        result = cursor.fetchone()
    return int(result[0]) if result else 0


def truncate_table(conn: PGConnection, table_name: str):
    with conn.cursor() as cursor:
        cursor.execute(compose(TRUNCATE_SQL, table_name))


def upsert_rows(conn: PGConnection, table_name: str, rows: Sequence[InventoryRow]):
    statement = compose(UPSERT_ROW_SQL, table_name)
    with conn.cursor() as cursor:
        for row in rows:
            cursor.execute(statement, (row.item_id, row.item_name, row.quantity, row.updated_at))


def insert_rows_if_absent(conn: PGConnection, table_name: str, rows: Sequence[InventoryRow]):
    statement = compose(INSERT_IF_ABSENT_SQL, table_name)
    with conn.cursor() as cursor:
        for row in rows:
            cursor.execute(statement, (row.item_id, row.item_name, row.quantity))
