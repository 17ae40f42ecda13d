# db/materializer.py
# Load an uploaded CSV into its own throwaway in-memory database.
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from config import CSV_TABLE_NAME
from db.sqlite_client import connect, quote_identifier
from errors import MaterializationError
from models import ParsedTable

LOG = logging.getLogger(__name__)


def materialize(table: ParsedTable, table_name: str = CSV_TABLE_NAME) -> sqlite3.Connection:
    """
    Create a fresh in-memory database holding one TEXT-typed table shaped
    like `table` and bulk-load every row with parameterized inserts.

    All-or-nothing: on any failure the connection is closed and
    MaterializationError is raised.
    """
    cols = ", ".join(f"{quote_identifier(h)} TEXT" for h in table.headers)
    placeholders = ", ".join("?" for _ in table.headers)
    insert_sql = f"INSERT INTO {quote_identifier(table_name)} VALUES ({placeholders})"

    conn = connect()
    try:
        conn.execute(f"CREATE TABLE {quote_identifier(table_name)} ({cols})")
        conn.execute("BEGIN")
        conn.executemany(insert_sql, ([row[h] for h in table.headers] for row in table.rows))
        conn.execute("COMMIT")
    except Exception as e:
        conn.close()
        raise MaterializationError(f"Failed to load CSV data into table {table_name}: {e}")
    LOG.debug("Materialized %d rows x %d columns into %s", len(table.rows), len(table.headers), table_name)
    return conn


@contextmanager
def ephemeral_database(table: ParsedTable, table_name: str = CSV_TABLE_NAME) -> Iterator[sqlite3.Connection]:
    """Yield a materialized database and close it on every exit path."""
    conn = materialize(table, table_name)
    try:
        yield conn
    finally:
        conn.close()
