"""Index dataclass and query for PostgreSQL index introspection."""

from dataclasses import dataclass
from typing import Any, Mapping

import psycopg

IndexKey = tuple[str, ...]


@dataclass(frozen=True)
class Index:
    """Represents a table index by its ordered column list."""

    columns: IndexKey
    unique: bool = False
    name: str | None = None

    @classmethod
    def from_metadata(cls, raw: Mapping[str, Any], name: str | None = None) -> "Index":
        """Build an Index from raw catalog attributes."""
        return cls(
            columns=tuple(raw.get("columns") or ()),
            unique=bool(raw.get("unique", False)),
            name=name if name is not None else raw.get("name"),
        )

    @property
    def key(self) -> IndexKey:
        """Column tuple the index is compared by."""
        return self.columns

    def to_dict(self) -> dict[str, Any]:
        """Return the comparable part of the index (columns and uniqueness)."""
        return {"columns": self.columns, "unique": self.unique}

    def __str__(self) -> str:
        kind = "unique index" if self.unique else "index"
        return f"{kind} ({', '.join(self.columns)})"


QUERY = """
SELECT
    i.relname AS index_name,
    ix.indisunique AS is_unique,
    array_agg(a.attname ORDER BY k.ord) AS columns
FROM pg_index ix
JOIN pg_class i ON i.oid = ix.indexrelid
JOIN pg_class t ON t.oid = ix.indrelid
JOIN pg_namespace n ON n.oid = t.relnamespace
CROSS JOIN LATERAL unnest(ix.indkey::int2[]) WITH ORDINALITY AS k(attnum, ord)
JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
WHERE n.nspname = %s
  AND t.relname = %s
  AND NOT ix.indisprimary
GROUP BY i.relname, ix.indisunique
ORDER BY i.relname
"""


def fetch_indexes(
    conn: psycopg.Connection, schema_name: str, table_name: str
) -> dict[str, dict[str, Any]]:
    """Fetch the non-primary indexes of one table, keyed by index name.

    Expression index members have no pg_attribute row and are left out of
    the column list.
    """
    indexes = {}
    with conn.cursor() as cur:
        cur.execute(QUERY, (schema_name, table_name))
        for row in cur.fetchall():
            indexes[row[0]] = {
                "unique": bool(row[1]),
                "columns": list(row[2]),
            }
    return indexes
