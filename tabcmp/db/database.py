"""Database class that enumerates the tables of a catalog."""

import logging
from functools import cached_property
from typing import overload

from .catalog import Catalog
from .tables import Table

logger = logging.getLogger(__name__)


class Database:
    """Entry point to the table shapes of one catalog.

    Tables are created once per Database and reuse the catalog handle
    passed in here; nothing is shared between Database instances.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    @cached_property
    def tables_by_names(self) -> dict[str, Table]:
        tables = {}
        for table_name in self.catalog.list_table_names():
            tables[str(table_name)] = Table(self.catalog, str(table_name))
        logger.debug("Catalog lists %d tables", len(tables))
        return tables

    @property
    def tables(self) -> list[Table]:
        return list(self.tables_by_names.values())

    @property
    def table_names(self) -> list[str]:
        return list(self.tables_by_names.keys())

    @overload
    def table(self, name: str) -> Table | None: ...

    @overload
    def table(self, name: str, *names: str) -> list[Table | None]: ...

    def table(self, name, *names):
        """Look up tables by name.

        Unknown names yield None rather than raising. With more than one name
        a list is returned in the order requested.
        """
        if names:
            return [self.tables_by_names.get(str(n)) for n in (name, *names)]
        return self.tables_by_names.get(str(name))

