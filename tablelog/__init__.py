"""Embedded, transactional key value store with typed tables backed by an append-only log."""

__version__ = "0.3.2"

__all__ = [
    "compacter",
    "config",
    "db",
    "errors",
    "example",
    "list_table",
    "logger",
    "lookup",
    "lookup_list",
    "lookup_set",
    "single",
    "table",
]