"""tabcmp - Table Shape Comparison and Migration Tool."""

from .db import (
    Catalog,
    Column,
    Database,
    Index,
    MemoryCatalog,
    PostgresCatalog,
    Table,
    save_snapshot,
    snapshot,
)
from .comparison import DIFF_MODES, DiffResult, FieldChange, compare_tables, diff_tables
from .exceptions import (
    CatalogError,
    TabcmpError,
    TextDiffUnavailableError,
    UnsupportedDiffModeError,
)
from .migration import MigrationGenerator, OpKind, Operation
from .sorted_map import SortedMap
from .textdiff import DEFAULT_DIFFER, LineDiffer, TextDiffer

__all__ = [
    "Catalog",
    "Column",
    "Database",
    "Index",
    "MemoryCatalog",
    "PostgresCatalog",
    "Table",
    "save_snapshot",
    "snapshot",
    "DIFF_MODES",
    "DiffResult",
    "FieldChange",
    "compare_tables",
    "diff_tables",
    "CatalogError",
    "TabcmpError",
    "TextDiffUnavailableError",
    "UnsupportedDiffModeError",
    "MigrationGenerator",
    "OpKind",
    "Operation",
    "SortedMap",
    "DEFAULT_DIFFER",
    "LineDiffer",
    "TextDiffer",
]
