"""Migration script generation from table diffs.

A DiffResult is turned into an ordered list of Operations which are then
rendered as PostgreSQL DDL. The order is fixed: added columns, dropped
columns, changed columns, added indices, dropped indices, each group in
SortedMap key order, so the same diff always renders the same script.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .comparison import DiffResult, compare_tables
from .db import Table
from .db.indexes import IndexKey


class OpKind(Enum):
    """Kind of schema alteration."""

    ADD_COLUMN = "add_column"
    DROP_COLUMN = "drop_column"
    SET_DEFAULT = "set_column_default"
    SET_NULL = "set_column_allow_null"
    SET_TYPE = "set_column_type"
    ADD_INDEX = "add_index"
    DROP_INDEX = "drop_index"


COLUMN_KINDS = frozenset(
    {OpKind.ADD_COLUMN, OpKind.DROP_COLUMN, OpKind.SET_DEFAULT, OpKind.SET_NULL, OpKind.SET_TYPE}
)


@dataclass
class Operation:
    """One schema alteration against ``table``.

    ``options`` only holds attributes that are set, e.g. ``default`` is left
    out of an add-column operation for a column without a default.
    """

    kind: OpKind
    table: str
    column: str | None = None
    columns: IndexKey = ()
    options: dict[str, Any] = field(default_factory=dict)


def quote_ident(name: str) -> str:
    """Quote an SQL identifier with double quotes."""
    return '"' + str(name).replace('"', '""') + '"'


def default_index_name(table: str, columns: IndexKey) -> str:
    """Name PostgreSQL gives an unnamed index over ``columns``."""
    return f"{table}_{'_'.join(columns)}_idx"


class MigrationGenerator:
    """Renders the migration that turns the target table into the blueprint.

    Args:
        diff: Blueprint-vs-target diff to render.
        table_name: Table the statements apply to (the target table).
        drop_columns: Emit DROP COLUMN for columns only the target has.
        drop_indices: Emit DROP INDEX for indices only the target has.
        alter_types: Emit column type/collation changes for changed columns.
        envelope: Wrap all column operations in a single ALTER TABLE.
    """

    def __init__(
        self,
        diff: DiffResult,
        table_name: str,
        *,
        drop_columns: bool = True,
        drop_indices: bool = True,
        alter_types: bool = False,
        envelope: bool = False,
    ):
        self.diff = diff
        self.table_name = table_name
        self.drop_columns = drop_columns
        self.drop_indices = drop_indices
        self.alter_types = alter_types
        self.envelope = envelope

    @classmethod
    def for_tables(cls, blueprint: Table, target: Table, **options: Any) -> "MigrationGenerator":
        """Create a generator for the diff between two tables."""
        return cls(compare_tables(blueprint, target), target.name, **options)

    def operations(self) -> list[Operation]:
        """Return the migration as an ordered list of operations."""
        table = self.table_name
        ops = []

        for name, col in self.diff.missing_fields.items():
            options: dict[str, Any] = {"type": col.db_type, "null": col.allow_null}
            if col.default is not None:
                options["default"] = col.default
            ops.append(Operation(OpKind.ADD_COLUMN, table, column=name, options=options))

        if self.drop_columns:
            for name in self.diff.extra_fields:
                ops.append(Operation(OpKind.DROP_COLUMN, table, column=name))

        for name, change in self.diff.changed_fields.items():
            own, other = change.own, change.other
            if own.default != other.default:
                ops.append(
                    Operation(
                        OpKind.SET_DEFAULT, table, column=name, options={"default": own.default}
                    )
                )
            if own.allow_null != other.allow_null:
                ops.append(
                    Operation(
                        OpKind.SET_NULL, table, column=name, options={"null": own.allow_null}
                    )
                )
            if self.alter_types and (
                own.db_type != other.db_type or own.collation != other.collation
            ):
                options = {"type": own.db_type}
                if own.collation is not None:
                    options["collation"] = own.collation
                elif other.collation is not None:
                    options["collation"] = "default"
                ops.append(Operation(OpKind.SET_TYPE, table, column=name, options=options))

        for columns, index in self.diff.missing_indices.items():
            ops.append(
                Operation(
                    OpKind.ADD_INDEX, table, columns=columns, options={"unique": index.unique}
                )
            )

        if self.drop_indices:
            for columns, index in self.diff.extra_indices.items():
                name = index.name or default_index_name(table, columns)
                ops.append(
                    Operation(OpKind.DROP_INDEX, table, columns=columns, options={"name": name})
                )

        return ops

    def render(self) -> str:
        """Render the migration as PostgreSQL DDL, one operation per line."""
        ops = self.operations()
        column_ops = [op for op in ops if op.kind in COLUMN_KINDS]
        index_ops = [op for op in ops if op.kind not in COLUMN_KINDS]
        table = quote_ident(self.table_name)

        lines = []
        if self.envelope:
            if column_ops:
                lines.append(f"ALTER TABLE {table}")
                clauses = [render_clause(op) for op in column_ops]
                lines.extend(f"    {clause}," for clause in clauses[:-1])
                lines.append(f"    {clauses[-1]};")
        else:
            lines.extend(f"ALTER TABLE {table} {render_clause(op)};" for op in column_ops)
        lines.extend(render_statement(op) for op in index_ops)

        if not lines:
            return ""
        return "\n".join(lines) + "\n"


def render_clause(op: Operation) -> str:
    """Render a column operation as an ALTER TABLE clause."""
    column = quote_ident(op.column)
    if op.kind == OpKind.ADD_COLUMN:
        parts = [f"ADD COLUMN {column} {op.options['type']}"]
        parts.append("NULL" if op.options["null"] else "NOT NULL")
        if "default" in op.options:
            parts.append(f"DEFAULT {op.options['default']}")
        return " ".join(parts)
    if op.kind == OpKind.DROP_COLUMN:
        return f"DROP COLUMN {column}"
    if op.kind == OpKind.SET_DEFAULT:
        if op.options["default"] is None:
            return f"ALTER COLUMN {column} DROP DEFAULT"
        return f"ALTER COLUMN {column} SET DEFAULT {op.options['default']}"
    if op.kind == OpKind.SET_NULL:
        if op.options["null"]:
            return f"ALTER COLUMN {column} DROP NOT NULL"
        return f"ALTER COLUMN {column} SET NOT NULL"
    if op.kind == OpKind.SET_TYPE:
        clause = f"ALTER COLUMN {column} TYPE {op.options['type']}"
        if "collation" in op.options:
            clause += f" COLLATE {quote_ident(op.options['collation'])}"
        return clause
    raise ValueError(f"{op.kind.value} is not a column operation")


def render_statement(op: Operation) -> str:
    """Render an index operation as a standalone statement."""
    if op.kind == OpKind.ADD_INDEX:
        unique = "UNIQUE " if op.options["unique"] else ""
        columns = ", ".join(quote_ident(c) for c in op.columns)
        return f"CREATE {unique}INDEX ON {quote_ident(op.table)} ({columns});"
    if op.kind == OpKind.DROP_INDEX:
        return f"DROP INDEX {quote_ident(op.options['name'])};"
    raise ValueError(f"{op.kind.value} is not an index operation")
