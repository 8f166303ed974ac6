"""
Read-only filesystem primitives used by the reconciler.

Every ``OSError`` is re-raised as :class:`FilesystemError` so a file that
vanishes between listing and reading aborts the walk with the offending path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .errors import FilesystemError

logger = logging.getLogger(__name__)


class Entry(BaseModel):
    """A path seen during a walk, plus the root the walk started from."""

    model_config = ConfigDict(frozen=True)

    path: Path
    origin: Path

    @property
    def relative_path(self) -> str:
        return self.path.relative_to(self.origin).as_posix()


class Directory(Entry):
    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def root(cls, path: str | Path) -> Directory:
        """Directory that starts a walk (it is its own origin).

        The path is made absolute without following symlinks, so a linked
        root keeps the name it was given.
        """
        absolute = Path(os.path.abspath(path))
        return cls(path=absolute, origin=absolute)


class File(Entry):
    @property
    def file_name(self) -> str:
        return self.path.name


def list_entries(path: Path) -> list[Path]:
    """Return the direct entries of *path*, sorted by name."""
    try:
        return sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise FilesystemError(path, f"Cannot list directory ({exc.strerror or exc})") from exc


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(path, f"Cannot read file ({exc.strerror or exc})") from exc
    except UnicodeDecodeError as exc:
        raise FilesystemError(path, "File is not valid UTF-8") from exc


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FilesystemError(path, f"Cannot read file ({exc.strerror or exc})") from exc


def is_file(path: Path) -> bool:
    return path.is_file()


def locate_first_present(directory: Directory, names: Iterable[str]) -> File | None:
    """Return the first of *names* that exists as a file inside *directory*.

    *names* is checked in order, so earlier names take precedence.
    """
    for name in names:
        candidate = directory.path / name
        if is_file(candidate):
            logger.debug("Found %s in %s", name, directory.path)
            return File(path=candidate, origin=directory.origin)
    return None
