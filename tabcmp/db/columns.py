"""Column dataclass and queries for PostgreSQL column introspection."""

from dataclasses import dataclass
from typing import Any, Mapping

import psycopg

# Raw column attributes that take part in a comparison.
SCHEMA_FIELDS = ("db_type", "primary_key", "default", "allow_null")


@dataclass(frozen=True)
class Column:
    """Comparable definition of a single table column."""

    db_type: str
    primary_key: bool = False
    default: str | None = None
    allow_null: bool = True
    charset: str | None = None
    collation: str | None = None

    @classmethod
    def from_metadata(
        cls,
        raw: Mapping[str, Any],
        charset: str | None = None,
        collation: str | None = None,
    ) -> "Column":
        """Project raw catalog attributes onto the comparable column shape.

        Attributes missing from ``raw`` are treated as not specified.
        """
        return cls(
            db_type=raw.get("db_type") or "",
            primary_key=bool(raw.get("primary_key", False)),
            default=raw.get("default"),
            allow_null=bool(raw.get("allow_null", True)),
            charset=charset,
            collation=collation,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the column as a dict, leaving out unset charset/collation."""
        result: dict[str, Any] = {name: getattr(self, name) for name in SCHEMA_FIELDS}
        if self.charset is not None:
            result["charset"] = self.charset
        if self.collation is not None:
            result["collation"] = self.collation
        return result

    def __str__(self) -> str:
        parts = [self.db_type, "null" if self.allow_null else "not null"]
        if self.default is not None:
            parts.append(f"default {self.default}")
        if self.primary_key:
            parts.append("primary key")
        return " ".join(parts)


QUERY = """
SELECT
    c.column_name,
    format_type(a.atttypid, a.atttypmod) AS db_type,
    c.column_default,
    c.is_nullable,
    COALESCE(pk.is_primary, false) AS primary_key
FROM information_schema.columns c
JOIN pg_namespace n ON n.nspname = c.table_schema
JOIN pg_class t ON t.relname = c.table_name AND t.relnamespace = n.oid
JOIN pg_attribute a ON a.attrelid = t.oid AND a.attname = c.column_name
LEFT JOIN LATERAL (
    SELECT true AS is_primary
    FROM pg_index ix
    WHERE ix.indrelid = t.oid
      AND ix.indisprimary
      AND a.attnum = ANY(ix.indkey)
) pk ON true
WHERE c.table_schema = %s
  AND c.table_name = %s
ORDER BY c.ordinal_position
"""

CHARSET_QUERY = """
SELECT
    character_set_name,
    collation_name
FROM information_schema.columns
WHERE table_schema = %s
  AND table_name = %s
  AND column_name = %s
"""


def fetch_columns(
    conn: psycopg.Connection, schema_name: str, table_name: str
) -> dict[str, dict[str, Any]]:
    """Fetch raw column attributes for one table, keyed by column name."""
    columns = {}
    with conn.cursor() as cur:
        cur.execute(QUERY, (schema_name, table_name))
        for row in cur.fetchall():
            columns[row[0]] = {
                "db_type": row[1],
                "default": row[2],
                "allow_null": row[3] == "YES",
                "primary_key": bool(row[4]),
            }
    return columns


def fetch_charset_collation(
    conn: psycopg.Connection, schema_name: str, table_name: str, column_name: str
) -> tuple[str | None, str | None]:
    """Fetch the character set and collation of a single column."""
    with conn.cursor() as cur:
        cur.execute(CHARSET_QUERY, (schema_name, table_name, column_name))
        row = cur.fetchone()
    if not row:
        return None, None
    return row[0], row[1]
