"""Databases built from a declared set of tables sharing one log."""

from __future__ import annotations

import typing
from dataclasses import replace
from typing import ClassVar

from .config import Config
from .errors import UnexpectedError
from .logger import Logger, TxHandle
from .table import Table

_MAX_TABLES = 254


class Schema:
    """Base class of a database; subclasses declare tables as annotations.

    Each annotated attribute whose type is a :class:`Table` becomes a table,
    numbered from 1 in declaration order.  The class name names the log file.
    Annotations must be the table classes themselves, not strings::

        class Accounts(Schema):
            owner: Single
            users: LookupTable
    """

    def __init__(self, config: Config) -> None:
        tables = type(self)._table_types()
        config = replace(config, schema_name=type(self).__name__)
        logger = Logger(config)
        by_id: dict[int, Table] = {}
        try:
            entries = logger.get_entries(logger.get_bytes())
            for table_id, (name, kind) in enumerate(tables, start=1):
                table = kind(table_id, logger)
                setattr(self, name, table)
                by_id[table_id] = table
            for entry in entries:
                table = by_id.get(entry.table_id)
                if table is None:
                    raise UnexpectedError(
                        f"log entry for unknown table id {entry.table_id}"
                    )
                table.handle_event(entry.data)
        except BaseException:
            logger.close()
            raise
        self._logger = logger
        self._tables = tuple(by_id.values())

    @classmethod
    def _table_types(cls) -> tuple[tuple[str, type[Table]], ...]:
        cached = cls.__dict__.get("_schema_tables")
        if cached is not None:
            return cached

        hints: dict[str, object] = {}
        for klass in reversed(cls.__mro__):
            hints.update(vars(klass).get("__annotations__", {}))

        tables: list[tuple[str, type[Table]]] = []
        for name, hint in hints.items():
            if name.startswith("_"):
                continue
            if isinstance(hint, str):
                raise TypeError(
                    f"{cls.__name__}.{name} must be annotated with a table class, "
                    f"not the string {hint!r}"
                )
            if hint is ClassVar or typing.get_origin(hint) is ClassVar:
                continue
            if not (isinstance(hint, type) and issubclass(hint, Table)):
                raise TypeError(f"{cls.__name__}.{name} is not a table type: {hint!r}")
            tables.append((name, hint))

        if not tables:
            raise TypeError(f"no tables found in {cls.__name__}")
        if len(tables) > _MAX_TABLES:
            raise TypeError(f"too many tables found, the maximum is: {_MAX_TABLES}")

        result = tuple(tables)
        cls._schema_tables = result
        return result

    def compact_log(self) -> None:
        """Atomically rewrite the log holding only the current state."""
        data = b"".join(table.compact_repr() for table in self._tables)
        self._logger.compact_log(data)

    @property
    def logger(self) -> Logger:
        """The log shared by every table of this database."""
        return self._logger

    def config(self) -> Config:
        """A copy of the configuration, with the schema name filled in."""
        return self._logger.config()

    def incomplete_write(self) -> bool:
        """Whether a torn entry was found when the log was read."""
        return self._logger.incomplete_write()

    def begin_transaction(self) -> TxHandle:
        """Buffer writes until the returned handle is ended."""
        return self._logger.begin_tx()

    def close(self) -> None:
        """Release the log file and its lock."""
        self._logger.close()

    def __enter__(self) -> Schema:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()