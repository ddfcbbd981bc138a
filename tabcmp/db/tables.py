"""Table shape and query for PostgreSQL table introspection."""

import logging
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

import psycopg

from ..sorted_map import SortedMap
from ..textdiff import DEFAULT_DIFFER, TextDiffer
from .catalog import Catalog
from .columns import Column
from .indexes import Index, IndexKey

if TYPE_CHECKING:
    from ..comparison import DiffResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Table:
    """Point-in-time snapshot of a table's fields and indices.

    Metadata is read from the catalog on first access and cached for the
    lifetime of the object. The exposed mappings are read-only; build a new
    Table to observe a later state of the same table.
    """

    catalog: Catalog = field(repr=False)
    name: str

    def __str__(self) -> str:
        return f"Table({self.name})"

    @cached_property
    def fields(self) -> Mapping[str, Column]:
        """Comparable column definitions keyed by column name."""
        raw_columns = self.catalog.load_columns(self.name)
        logger.debug("Loaded %d columns for table %s", len(raw_columns), self.name)
        fields = {}
        for field_name, raw in raw_columns.items():
            charset = collation = None
            if self.catalog.supports_charsets:
                charset, collation = self.catalog.load_charset_collation(
                    self.name, field_name
                )
            fields[field_name] = Column.from_metadata(
                raw, charset=charset, collation=collation
            )
        return MappingProxyType(fields)

    @cached_property
    def indices(self) -> Mapping[str, Index]:
        """Index definitions keyed by native index name."""
        raw_indices = self.catalog.load_indices(self.name)
        logger.debug("Loaded %d indices for table %s", len(raw_indices), self.name)
        return MappingProxyType(
            {name: Index.from_metadata(raw, name=name) for name, raw in raw_indices.items()}
        )

    @cached_property
    def indices_by_columns(self) -> Mapping[IndexKey, Index]:
        """Index definitions keyed by their ordered column list.

        Two indices over the same columns collapse into the one defined last.
        """
        by_columns: dict[IndexKey, Index] = {}
        for index in self.indices.values():
            by_columns[index.key] = index
        return MappingProxyType(by_columns)

    @cached_property
    def engine(self) -> str | None:
        """Storage engine name, or None when the catalog has no engines."""
        if not self.catalog.supports_engines:
            return None
        return self.catalog.load_engine(self.name)

    def to_map(self) -> SortedMap:
        """Return the canonical, order-independent form of the table shape."""
        result = SortedMap(
            {
                "fields": {name: col.to_dict() for name, col in self.fields.items()},
                "indices": {
                    columns: index.to_dict()
                    for columns, index in self.indices_by_columns.items()
                },
            }
        )
        if self.catalog.supports_engines:
            result["engine"] = self.engine
        return result

    def matches(
        self,
        fields: Mapping[str, bool] | None = None,
        indices: Mapping[IndexKey, bool] | None = None,
    ) -> bool:
        """Check presence assumptions about fields and indices.

        ``{"title": True, "legacy": False}`` holds when ``title`` exists and
        ``legacy`` does not. Index assumptions are keyed by column tuple.
        """
        for name, expected in (fields or {}).items():
            if (name in self.fields) != bool(expected):
                return False
        for columns, expected in (indices or {}).items():
            if (tuple(columns) in self.indices_by_columns) != bool(expected):
                return False
        return True

    def diff(
        self,
        other: "Table",
        mode: str = "hash",
        differ: TextDiffer | None = DEFAULT_DIFFER,
    ) -> "DiffResult | str":
        """Compare this table (the blueprint) against ``other`` (the target).

        ``hash`` mode returns a DiffResult. ``text``, ``color`` and ``html``
        render a line diff of both canonical shapes with ``differ``.
        """
        from ..comparison import diff_tables

        return diff_tables(self, other, mode=mode, differ=differ)


QUERY = """
SELECT t.table_name
FROM information_schema.tables t
WHERE t.table_schema = %s
  AND t.table_type = 'BASE TABLE'
ORDER BY t.table_name
"""


def fetch_table_names(conn: psycopg.Connection, schema_name: str) -> list[str]:
    """Fetch the names of all base tables in a schema."""
    with conn.cursor() as cur:
        cur.execute(QUERY, (schema_name,))
        return [row[0] for row in cur.fetchall()]
