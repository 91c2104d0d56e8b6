"""Where the log lives and how the database behaves."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import UnexpectedError


@dataclass
class Config:
    """Database settings; start from :meth:`Config.in_folder`."""

    path: Path = field(default_factory=Path)
    create_path: bool = True
    create_db: bool = True
    read_only: bool = False
    no_io: bool = False
    fs_locks: bool = True
    fs_locks_block: bool = False
    schema_name: str | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @classmethod
    def in_folder(cls, path) -> Config:
        """Settings for a log kept in the folder ``path``."""
        return cls(path=Path(path))

    @classmethod
    def without_io(cls) -> Config:
        """Settings for a database that never touches the file system."""
        return cls(
            create_path=False,
            create_db=False,
            read_only=True,
            no_io=True,
            fs_locks=False,
            fs_locks_block=False,
        )

    def _name(self) -> str:
        if self.schema_name is None:
            raise UnexpectedError("schema name not populated")
        return self.schema_name

    def db_location_v1(self) -> Path:
        """Location of a log written in the first, unstamped format."""
        return self.path / self._name()

    def db_location_v2(self) -> Path:
        """Location of the current log."""
        return self.path / f"{self._name()}.db"

    def compaction_location(self) -> Path:
        """Location of the temporary file written during compaction."""
        return self.path / f"{self._name()}.db.tmp"