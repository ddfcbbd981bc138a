"""Table metadata submodule for tabcmp."""

from .catalog import Catalog
from .columns import Column
from .database import Database
from .indexes import Index, IndexKey
from .memory import MemoryCatalog, save_snapshot, snapshot
from .postgres import PostgresCatalog
from .tables import Table

__all__ = [
    "Catalog",
    "Column",
    "Database",
    "Index",
    "IndexKey",
    "MemoryCatalog",
    "PostgresCatalog",
    "Table",
    "save_snapshot",
    "snapshot",
]
