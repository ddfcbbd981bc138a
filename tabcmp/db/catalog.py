"""Metadata accessor protocol that table shapes are loaded from."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Catalog(Protocol):
    """Protocol for reading table metadata from a backing store.

    Implementations expose two capability flags. ``load_engine`` is only
    called when ``supports_engines`` is true, and ``load_charset_collation``
    only when ``supports_charsets`` is true.
    """

    supports_engines: bool
    supports_charsets: bool

    def list_table_names(self) -> list[str]:
        """Return the names of all tables in the catalog."""
        ...

    def load_columns(self, table_name: str) -> dict[str, dict[str, Any]]:
        """Return raw column attributes keyed by column name.

        Attributes used for comparison are ``db_type``, ``primary_key``,
        ``default`` and ``allow_null``; any others are ignored.
        """
        ...

    def load_indices(self, table_name: str) -> dict[str, dict[str, Any]]:
        """Return raw index attributes (``columns``, ``unique``) keyed by name."""
        ...

    def load_engine(self, table_name: str) -> str | None:
        """Return the storage engine of a table."""
        ...

    def load_charset_collation(
        self, table_name: str, field_name: str
    ) -> tuple[str | None, str | None]:
        """Return the ``(charset, collation)`` pair of a column."""
        ...
