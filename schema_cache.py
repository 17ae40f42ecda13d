# schema_cache.py
import logging
import sqlite3
import time
from typing import Dict, List, Optional

from config import SCHEMA_CACHE_TTL
from db.sqlite_client import fetch_table_schema, list_tables

LOG = logging.getLogger(__name__)


class SchemaCache:
    """
    Column lists of the shared database, used as LLM prompt context.
    Entries live for `ttl` seconds; DDL against the shared database should
    call clear() so the next prompt sees the new schema.
    """

    def __init__(self, conn: sqlite3.Connection, ttl: float = SCHEMA_CACHE_TTL):
        self.conn = conn
        self.ttl = ttl
        # None -> not loaded; otherwise (timestamp_seconds, {table: [columns]})
        self._entry = None

    def get_schema(self) -> Dict[str, List[str]]:
        now = time.time()
        if self._entry is not None:
            ts, schema = self._entry
            if (now - ts) < self.ttl:
                return schema
        try:
            schema = {t: fetch_table_schema(self.conn, t) for t in list_tables(self.conn)}
        except sqlite3.Error as e:
            # keep serving the previous value, even if stale
            if self._entry is not None:
                LOG.warning("Schema refresh failed, serving stale schema: %s", e)
                return self._entry[1]
            raise
        self._entry = (now, schema)
        return schema

    def get_table_columns(self, table: str) -> Optional[List[str]]:
        """Return the columns of `table`, or None if there is no such table."""
        return self.get_schema().get(table)

    def describe(self) -> str:
        schema = self.get_schema()
        if not schema:
            return "(the database has no tables)"
        return "\n".join(f"- {t} ({', '.join(cols)})" for t, cols in schema.items())

    def set_table_schema(self, table: str, columns: List[str]) -> None:
        """Manual cache setter (useful for tests)."""
        schema = dict(self.get_schema())
        schema[table] = list(columns)
        self._entry = (time.time(), schema)

    def clear(self) -> None:
        self._entry = None
