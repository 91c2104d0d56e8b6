"""Errors raised by the database."""

from __future__ import annotations


class DbError(Exception):
    """Base class of every error raised by the database."""


class UnexpectedError(DbError):
    """The log or the configuration is in a state the database cannot handle."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"unexpected error: {self.message}"


class DbIoError(DbError):
    """Reading, writing or locking the log file failed."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error
        self.__cause__ = error

    def __str__(self) -> str:
        return f"io error: {self.error}"


class SerializationError(DbError):
    """A value could not be encoded into, or decoded from, a log entry."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error
        self.__cause__ = error

    def __str__(self) -> str:
        return f"serialization error: {self.error}"