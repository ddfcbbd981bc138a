"""Comparison logic for table shapes."""

import logging
from dataclasses import dataclass, field, fields
from typing import Any

from .db import Column, Index, Table
from .exceptions import TextDiffUnavailableError, UnsupportedDiffModeError
from .sorted_map import SortedMap
from .textdiff import DEFAULT_DIFFER, TEXT_MODES, TextDiffer

logger = logging.getLogger(__name__)

DIFF_MODES = ("hash",) + TEXT_MODES


@dataclass(frozen=True)
class FieldChange:
    """A field present in both tables with differing definitions."""

    own: Column
    other: Column

    def differences(self) -> dict[str, tuple[Any, Any]]:
        """Return the differing attributes as ``{name: (own, other)}``."""
        result = {}
        for fld in fields(self.own):
            own_val = getattr(self.own, fld.name)
            other_val = getattr(self.other, fld.name)
            if own_val != other_val:
                result[fld.name] = (own_val, other_val)
        return result


@dataclass
class DiffResult:
    """Structural delta between a blueprint table and a target table.

    "Missing" entries exist in the blueprint only, "extra" entries in the
    target only.
    """

    missing_fields: SortedMap = field(default_factory=SortedMap)
    extra_fields: SortedMap = field(default_factory=SortedMap)
    changed_fields: SortedMap = field(default_factory=SortedMap)
    missing_indices: SortedMap = field(default_factory=SortedMap)
    extra_indices: SortedMap = field(default_factory=SortedMap)

    def has_differences(self) -> bool:
        """Check if there are any differences."""
        return any(
            [
                self.missing_fields,
                self.extra_fields,
                self.changed_fields,
                self.missing_indices,
                self.extra_indices,
            ]
        )

    def reversed(self) -> "DiffResult":
        """Return the result of comparing the two tables the other way round."""
        return DiffResult(
            missing_fields=SortedMap(self.extra_fields),
            extra_fields=SortedMap(self.missing_fields),
            changed_fields=SortedMap(
                {
                    name: FieldChange(own=change.other, other=change.own)
                    for name, change in self.changed_fields.items()
                }
            ),
            missing_indices=SortedMap(self.extra_indices),
            extra_indices=SortedMap(self.missing_indices),
        )

    def to_map(self) -> SortedMap:
        """Return the diff as nested plain values for display."""

        def index_dict(index: Index) -> dict[str, Any]:
            return {**index.to_dict(), "name": index.name}

        return SortedMap(
            {
                "missing_fields": {
                    name: col.to_dict() for name, col in self.missing_fields.items()
                },
                "extra_fields": {
                    name: col.to_dict() for name, col in self.extra_fields.items()
                },
                "changed_fields": {
                    name: {"own": change.own.to_dict(), "other": change.other.to_dict()}
                    for name, change in self.changed_fields.items()
                },
                "missing_indices": {
                    cols: index_dict(index) for cols, index in self.missing_indices.items()
                },
                "extra_indices": {
                    cols: index_dict(index) for cols, index in self.extra_indices.items()
                },
            }
        )


def compare_tables(own: Table, other: Table) -> DiffResult:
    """Compare a blueprint table with a target table.

    Args:
        own: The reference (blueprint) table.
        other: The comparison (target) table.
    """
    own_fields = own.fields
    other_fields = other.fields
    own_keys = set(own_fields.keys())
    other_keys = set(other_fields.keys())

    changed_fields = {}
    for key in own_keys & other_keys:
        if own_fields[key] != other_fields[key]:
            changed_fields[key] = FieldChange(own=own_fields[key], other=other_fields[key])

    own_indices = own.indices_by_columns
    other_indices = other.indices_by_columns
    own_index_keys = set(own_indices.keys())
    other_index_keys = set(other_indices.keys())

    missing_indices = {key: own_indices[key] for key in own_index_keys - other_index_keys}
    extra_indices = {key: other_indices[key] for key in other_index_keys - own_index_keys}

    # Same columns with a different uniqueness flag count as a replaced index
    for key in own_index_keys & other_index_keys:
        if own_indices[key].unique != other_indices[key].unique:
            missing_indices[key] = own_indices[key]
            extra_indices[key] = other_indices[key]

    result = DiffResult(
        missing_fields=SortedMap({key: own_fields[key] for key in own_keys - other_keys}),
        extra_fields=SortedMap({key: other_fields[key] for key in other_keys - own_keys}),
        changed_fields=SortedMap(changed_fields),
        missing_indices=SortedMap(missing_indices),
        extra_indices=SortedMap(extra_indices),
    )
    logger.debug(
        "Compared %s with %s: %d missing, %d extra, %d changed fields; "
        "%d missing, %d extra indices",
        own.name,
        other.name,
        len(result.missing_fields),
        len(result.extra_fields),
        len(result.changed_fields),
        len(result.missing_indices),
        len(result.extra_indices),
    )
    return result


def diff_tables(
    own: Table,
    other: Table,
    mode: str = "hash",
    differ: TextDiffer | None = DEFAULT_DIFFER,
) -> DiffResult | str:
    """Diff two tables in the requested rendering mode.

    ``hash`` returns a DiffResult. The textual modes serialize both canonical
    shapes and hand them to ``differ``; with no differ they are unavailable
    while ``hash`` keeps working.

    Raises:
        UnsupportedDiffModeError: if ``mode`` is not a known diff mode.
        TextDiffUnavailableError: if a textual mode is requested without a differ.
    """
    if mode == "hash":
        return compare_tables(own, other)
    if mode not in TEXT_MODES:
        raise UnsupportedDiffModeError(mode)
    if differ is None:
        raise TextDiffUnavailableError(mode)
    return differ.render(
        own.to_map().pformat(),
        other.to_map().pformat(),
        mode,
        own_label=own.name,
        other_label=other.name,
    )
