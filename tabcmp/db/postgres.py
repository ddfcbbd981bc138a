"""Catalog implementation backed by a live PostgreSQL connection."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg

from ..exceptions import CatalogError
from .columns import fetch_charset_collation, fetch_columns
from .indexes import fetch_indexes
from .tables import fetch_table_names

logger = logging.getLogger(__name__)


class PostgresCatalog:
    """Reads table metadata for one schema over a shared psycopg connection.

    The connection is owned by the caller and only used for reads. Every Table
    created from this catalog shares it, so it must not be used concurrently.
    """

    supports_engines = False
    supports_charsets = True

    def __init__(self, conn: psycopg.Connection, schema: str = "public"):
        self.conn = conn
        self.schema = schema

    @classmethod
    @contextmanager
    def connect(
        cls, connection_string: str, schema: str = "public"
    ) -> Iterator["PostgresCatalog"]:
        """Open a connection and yield a catalog bound to it."""
        try:
            conn = psycopg.connect(connection_string, autocommit=True)
        except psycopg.Error as e:
            raise CatalogError(f"Could not connect to database: {e}") from e
        with conn:
            yield cls(conn, schema=schema)

    def list_table_names(self) -> list[str]:
        names = self._run(fetch_table_names, self.schema)
        logger.debug("Found %d tables in schema %s", len(names), self.schema)
        return names

    def load_columns(self, table_name: str) -> dict[str, dict[str, Any]]:
        return self._run(fetch_columns, self.schema, table_name)

    def load_indices(self, table_name: str) -> dict[str, dict[str, Any]]:
        return self._run(fetch_indexes, self.schema, table_name)

    def load_engine(self, table_name: str) -> str | None:
        return None

    def load_charset_collation(
        self, table_name: str, field_name: str
    ) -> tuple[str | None, str | None]:
        return self._run(fetch_charset_collation, self.schema, table_name, field_name)

    def _run(self, fetch, *args):
        try:
            return fetch(self.conn, *args)
        except psycopg.Error as e:
            raise CatalogError(f"Failed to read catalog metadata: {e}") from e
