"""A lookup table whose values are lists."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Hashable, Mapping

from .errors import SerializationError
from .logger import Logger
from .table import Table, decode, encode


def _normalize(index: int, length: int) -> int:
    if not -length <= index < length:
        raise IndexError("list index out of range")
    return index % length


class LookupList(Table):
    """A table mapping keys to lists, logging single-element changes."""

    def __init__(self, table_id: int, logger: Logger) -> None:
        super().__init__(table_id, logger)
        self._inner: dict[Hashable, list[Any]] = {}

    def handle_event(self, data: bytes) -> None:
        match decode(data):
            case ("push", key, value):
                self._push_inner(key, value)
            case ("remove", key, index):
                values = self._inner.get(key)
                if values is not None:
                    del values[index]
            case ("create_key", key):
                self._inner[key] = []
            case ("clear_key", key):
                self._inner.pop(key, None)
            case ("clear",):
                self._inner.clear()
            case other:
                raise SerializationError(
                    ValueError(f"unknown lookup list entry: {other!r}")
                )

    def compact_repr(self) -> bytes:
        parts = []
        for key, values in self._inner.items():
            if not values:
                parts.append(self._compact_entry(("create_key", key)))
            parts.extend(self._compact_entry(("push", key, value)) for value in values)
        return b"".join(parts)

    def _push_inner(self, key: Hashable, value: Any) -> None:
        self._inner.setdefault(key, []).append(value)

    def push(self, key: Hashable, value: Any) -> None:
        """Append ``value`` to the list under ``key``, creating it if needed."""
        data = encode(("push", key, value))
        self._push_inner(key, value)
        self.logger.write(self.table_id, data)

    def create_key(self, key: Hashable) -> list[Any] | None:
        """Set ``key`` to an empty list; return the list it replaced, or None."""
        data = encode(("create_key", key))
        previous = self._inner.get(key)
        self._inner[key] = []
        self.logger.write(self.table_id, data)
        return previous

    def remove(self, key: Hashable, index: int) -> bool:
        """Remove the element at ``index`` under ``key``; False if the key is absent."""
        values = self._inner.get(key)
        if values is None:
            return False
        position = _normalize(index, len(values))
        data = encode(("remove", key, position))
        self.logger.write(self.table_id, data)
        del values[position]
        return True

    def get(self) -> Mapping[Hashable, list[Any]]:
        """Read-only view of each key's list."""
        return MappingProxyType(self._inner)

    def clear(self) -> None:
        """Drop every key together with its list."""
        self._inner.clear()
        self.logger.write(self.table_id, encode(("clear",)))

    def clear_key(self, key: Hashable) -> list[Any] | None:
        """Remove ``key``; return its list, or None if it was absent."""
        data = encode(("clear_key", key))
        previous = self._inner.pop(key, None)
        self.logger.write(self.table_id, data)
        return previous