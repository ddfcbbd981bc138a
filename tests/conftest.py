"""Shared fixtures: in-memory catalogs holding a handful of small tables."""

import pytest

from tabcmp import Database, MemoryCatalog


def column(db_type, primary_key=False, default=None, allow_null=True, **extra):
    return {
        "db_type": db_type,
        "primary_key": primary_key,
        "default": default,
        "allow_null": allow_null,
        **extra,
    }


ID = column("integer", primary_key=True, allow_null=False)

TABLES = {
    "test_table_1": {
        "columns": {
            "id": ID,
            "title": column("character varying(255)"),
            "body": column("text"),
        },
        "indices": {
            "test_table_1_title_index": {"columns": ["title"], "unique": False},
        },
    },
    "test_table_2": {
        "columns": {
            "id": ID,
            "title": column("character varying(255)", allow_null=False),
            "body": column("text"),
        },
    },
    "test_table_3": {
        "columns": {
            "id": ID,
            "body": column("text"),
        },
    },
    "test_table_4": {
        "columns": {
            "id": ID,
            "title": column("character varying(50)", allow_null=False),
            "body": column("text"),
        },
    },
    "posts": {
        "columns": {
            "id": ID,
            "title": column("character varying(255)"),
            "body": column("text"),
            "pid": column("integer", default="1", allow_null=False),
        },
        "indices": {
            "posts_title_index": {"columns": ["title"], "unique": False},
            "posts_pid_index": {"columns": ["pid"], "unique": True},
        },
    },
}


@pytest.fixture
def catalog():
    """Catalog without engine or charset support."""
    return MemoryCatalog(TABLES)


@pytest.fixture
def db(catalog):
    return Database(catalog)


@pytest.fixture
def mysql_like_catalog():
    """Catalog that reports storage engines and per-column charsets."""
    return MemoryCatalog(
        {
            "test_table_5": {
                "columns": {
                    "id": ID,
                    "body": column(
                        "text", charset="utf8", collation="utf8_general_ci"
                    ),
                },
                "engine": "InnoDB",
            },
        },
        supports_engines=True,
        supports_charsets=True,
    )
