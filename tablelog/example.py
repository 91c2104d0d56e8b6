"""A small sample database and a command that clears one of its tables."""

from __future__ import annotations

import argparse
import tempfile
from pathlib import Path

from .config import Config
from .db import Schema
from .lookup import LookupTable
from .single import Single


class SampleSchemaV1(Schema):
    """Sample database with a name table and a single flag."""

    names: LookupTable
    is_good: Single


def main(argv=None) -> int:
    """Open the sample database and clear its ``names`` table."""
    parser = argparse.ArgumentParser(description="Clear the names of the sample database.")
    parser.add_argument(
        "folder",
        nargs="?",
        default=str(Path(tempfile.gettempdir()) / "test"),
        help="folder that holds the database log",
    )
    args = parser.parse_args(argv)
    with SampleSchemaV1(Config.in_folder(args.folder)) as db:
        db.names.clear()
    return 0