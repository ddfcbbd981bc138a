"""Tests for the PostgreSQL catalog against a fake psycopg connection."""

import psycopg
import pytest

from tabcmp import CatalogError, Column, Database, Index, PostgresCatalog
from tabcmp.db import columns, indexes, tables


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        self.conn.executed.append((query, params))
        if self.conn.error:
            raise self.conn.error
        self.rows = self.conn.responses[query](params)

    def fetchall(self):
        return self.rows

    def fetchone(self):
        return self.rows[0] if self.rows else None


class FakeConnection:
    def __init__(self, responses, error=None):
        self.responses = responses
        self.error = error
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


COLUMN_ROWS = {
    "posts": [
        ("id", "integer", "nextval('posts_id_seq'::regclass)", "NO", True),
        ("title", "character varying(255)", None, "YES", False),
        ("pid", "integer", "1", "NO", False),
    ],
}

INDEX_ROWS = {
    "posts": [
        ("posts_pid_key", True, ["pid"]),
        ("posts_title_pid_idx", False, ["title", "pid"]),
    ],
}

COLLATIONS = {("posts", "title"): (None, "en_US.utf8")}


@pytest.fixture
def conn():
    return FakeConnection(
        {
            tables.QUERY: lambda params: [("comments",), ("posts",)],
            columns.QUERY: lambda params: COLUMN_ROWS.get(params[1], []),
            columns.CHARSET_QUERY: lambda params: [
                COLLATIONS.get((params[1], params[2]), (None, None))
            ],
            indexes.QUERY: lambda params: INDEX_ROWS.get(params[1], []),
        }
    )


def test_lists_table_names(conn):
    catalog = PostgresCatalog(conn, schema="app")
    assert catalog.list_table_names() == ["comments", "posts"]
    assert conn.executed == [(tables.QUERY, ("app",))]


def test_loads_raw_columns(conn):
    raw = PostgresCatalog(conn).load_columns("posts")
    assert raw["title"] == {
        "db_type": "character varying(255)",
        "default": None,
        "allow_null": True,
        "primary_key": False,
    }
    assert raw["id"]["primary_key"] is True
    assert raw["id"]["allow_null"] is False
    assert conn.executed[0][1] == ("public", "posts")


def test_table_shape_from_postgres(conn):
    table = Database(PostgresCatalog(conn)).table("posts")
    assert list(table.fields) == ["id", "title", "pid"]
    assert table.fields["pid"] == Column(db_type="integer", default="1", allow_null=False)
    assert table.fields["title"].collation == "en_US.utf8"
    assert table.fields["title"].charset is None
    assert table.engine is None
    assert table.indices_by_columns == {
        ("pid",): Index(("pid",), unique=True, name="posts_pid_key"),
        ("title", "pid"): Index(("title", "pid"), unique=False, name="posts_title_pid_idx"),
    }


def test_charset_lookup_without_row():
    conn = FakeConnection({columns.CHARSET_QUERY: lambda params: []})
    assert PostgresCatalog(conn).load_charset_collation("posts", "gone") == (None, None)


def test_unknown_table_is_none(conn):
    assert Database(PostgresCatalog(conn)).table("missing") is None


def test_driver_errors_become_catalog_errors():
    conn = FakeConnection({}, error=psycopg.OperationalError("server closed the connection"))
    with pytest.raises(CatalogError, match="server closed"):
        PostgresCatalog(conn).list_table_names()


def test_connect_failure(monkeypatch):
    def fail(*args, **kwargs):
        raise psycopg.OperationalError("connection refused")

    monkeypatch.setattr(psycopg, "connect", fail)
    with pytest.raises(CatalogError, match="connection refused"):
        with PostgresCatalog.connect("postgresql://localhost/none"):
            pass
