"""In-memory catalog and JSON snapshots of table metadata.

Snapshot format::

    {
        "supports_engines": false,
        "supports_charsets": false,
        "tables": {
            "posts": {
                "columns": {"id": {"db_type": "integer", "primary_key": true,
                                   "default": null, "allow_null": false}},
                "indices": {"posts_title_index": {"columns": ["title"],
                                                  "unique": false}},
                "engine": "InnoDB"
            }
        }
    }

Columns may also carry ``charset`` and ``collation`` keys.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..exceptions import CatalogError
from .catalog import Catalog
from .columns import SCHEMA_FIELDS

logger = logging.getLogger(__name__)


class MemoryCatalog:
    """Catalog that serves table metadata from plain dictionaries."""

    def __init__(
        self,
        tables: Mapping[str, Mapping[str, Any]],
        supports_engines: bool = False,
        supports_charsets: bool = False,
    ):
        for name, table in tables.items():
            if not isinstance(table, Mapping) or not isinstance(
                table.get("columns", {}), Mapping
            ):
                raise CatalogError(f"Malformed metadata for table {name!r}")
            for index_name, index in table.get("indices", {}).items():
                if not isinstance(index, Mapping) or "columns" not in index:
                    raise CatalogError(
                        f"Index {index_name!r} of table {name!r} has no column list"
                    )
        self._tables = {name: table for name, table in tables.items()}
        self.supports_engines = supports_engines
        self.supports_charsets = supports_charsets

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MemoryCatalog":
        """Build a catalog from snapshot data."""
        if not isinstance(data, Mapping) or not isinstance(data.get("tables"), Mapping):
            raise CatalogError("Snapshot data must contain a 'tables' mapping")
        return cls(
            data["tables"],
            supports_engines=bool(data.get("supports_engines", False)),
            supports_charsets=bool(data.get("supports_charsets", False)),
        )

    @classmethod
    def load(cls, path: str | Path) -> "MemoryCatalog":
        """Read a catalog from a JSON snapshot file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read snapshot {path}: {e}") from e
        logger.debug("Loaded snapshot %s", path)
        return cls.from_dict(data)

    def list_table_names(self) -> list[str]:
        return list(self._tables)

    def load_columns(self, table_name: str) -> dict[str, dict[str, Any]]:
        columns = self._tables.get(table_name, {}).get("columns", {})
        return {name: dict(raw) for name, raw in columns.items()}

    def load_indices(self, table_name: str) -> dict[str, dict[str, Any]]:
        indices = self._tables.get(table_name, {}).get("indices", {})
        return {name: dict(raw) for name, raw in indices.items()}

    def load_engine(self, table_name: str) -> str | None:
        return self._tables.get(table_name, {}).get("engine")

    def load_charset_collation(
        self, table_name: str, field_name: str
    ) -> tuple[str | None, str | None]:
        raw = self._tables.get(table_name, {}).get("columns", {}).get(field_name, {})
        return raw.get("charset"), raw.get("collation")


def snapshot(catalog: Catalog) -> dict[str, Any]:
    """Dump every table of a catalog into the JSON snapshot format."""
    tables: dict[str, Any] = {}
    for table_name in sorted(catalog.list_table_names()):
        columns = {}
        for name, raw in catalog.load_columns(table_name).items():
            column = {attr: raw.get(attr) for attr in SCHEMA_FIELDS}
            if catalog.supports_charsets:
                column["charset"], column["collation"] = catalog.load_charset_collation(
                    table_name, name
                )
            columns[name] = column
        indices = {
            name: {"columns": list(raw["columns"]), "unique": bool(raw.get("unique"))}
            for name, raw in catalog.load_indices(table_name).items()
        }
        entry: dict[str, Any] = {"columns": columns, "indices": indices}
        if catalog.supports_engines:
            entry["engine"] = catalog.load_engine(table_name)
        tables[table_name] = entry
    return {
        "supports_engines": catalog.supports_engines,
        "supports_charsets": catalog.supports_charsets,
        "tables": tables,
    }


def save_snapshot(catalog: Catalog, path: str | Path) -> None:
    """Write a catalog snapshot to a JSON file."""
    data = snapshot(catalog)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
    except OSError as e:
        raise CatalogError(f"Could not write snapshot {path}: {e}") from e
