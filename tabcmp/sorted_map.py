"""Mapping that iterates and serializes its keys in a canonical order.

Two SortedMaps built from the same content produce the same iteration order,
the same ``repr`` and the same ``pformat`` output no matter how the source
mappings were built. Table shapes and diff results are wrapped in this type
before they are compared or printed.
"""

from collections.abc import Callable, Iterator, Mapping, MutableMapping
from enum import Enum
from typing import Any


def _sort_key(key: Any) -> tuple:
    """Return the total-order sort key for a mapping key.

    Scalar keys are compared by their string form, enum keys by their value.
    Keys with the same string form are told apart by type name and repr.
    Tuple keys (index column lists) are compared element-wise and sort after
    all scalar keys.
    """
    if isinstance(key, tuple):
        return (1, tuple(_sort_key(part) for part in key))
    if isinstance(key, Enum):
        return (0, str(key.value), type(key).__qualname__, repr(key))
    return (0, str(key), type(key).__qualname__, repr(key))


def _wrap(value: Any) -> Any:
    if isinstance(value, SortedMap):
        return value
    if isinstance(value, Mapping):
        return SortedMap(value)
    return value


class SortedMap(MutableMapping):
    """Recursively key-sorted mapping.

    Nested mappings are converted to SortedMaps on construction and on
    assignment. Mutations must go through this object: iteration walks the
    key sequence computed after the last mutation.
    """

    def __init__(self, data: Mapping | None = None):
        self._data: dict = {}
        if data is not None:
            for key, value in data.items():
                self._data[key] = _wrap(value)
        self._sort_keys()

    def _sort_keys(self) -> None:
        self._keys = sorted(self._data, key=_sort_key)

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[key] = _wrap(value)
        self._sort_keys()

    def __delitem__(self, key: Any) -> None:
        del self._data[key]
        self._sort_keys()

    def __iter__(self) -> Iterator:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SortedMap):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def delete_if(self, predicate: Callable[[Any, Any], bool]) -> "SortedMap":
        """Remove every entry for which ``predicate(key, value)`` is true."""
        for key in [k for k in self._keys if predicate(k, self._data[k])]:
            del self._data[key]
        self._sort_keys()
        return self

    def to_dict(self) -> dict:
        """Return a plain dict copy, unwrapping nested SortedMaps."""
        return {
            key: value.to_dict() if isinstance(value, SortedMap) else value
            for key, value in self.items()
        }

    def pformat(self, indent: int = 4) -> str:
        """Return a deterministic multi-line serialization."""
        return "\n".join(self._format_lines(0, indent))

    def _format_lines(self, level: int, indent: int) -> list[str]:
        if not self._keys:
            return ["{}"]
        pad = " " * (indent * (level + 1))
        lines = ["{"]
        for key, value in self.items():
            if isinstance(value, SortedMap):
                nested = value._format_lines(level + 1, indent)
                lines.append(f"{pad}{key!r}: {nested[0]}")
                lines.extend(nested[1:])
                lines[-1] += ","
            else:
                lines.append(f"{pad}{key!r}: {value!r},")
        lines.append(" " * (indent * level) + "}")
        return lines

    def __repr__(self) -> str:
        items = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"SortedMap({{{items}}})"
