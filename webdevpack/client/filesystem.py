from __future__ import annotations

import os
from typing import Optional, Union

from webdevpack.client.exceptions import (
    SourceNotFoundError,
    SourceNotReadableError,
    TargetNotWritableError,
)

PathLike = Union[str, os.PathLike]


class LocalFileSystem:
    """Local filesystem access used by preflight checks and file transfer.

    Substitute a subclass to fake permissions or storage in tests.

    Security notes:
    - Never deletes or modifies source files.

    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_readable(self, path: str) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: str) -> bool:
        return os.access(path, os.W_OK)

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def write_bytes(self, path: str, data: bytes) -> None:
        with open(path, "wb") as f:
            f.write(data)

    def make_dirs(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)


def check_source(path: PathLike, fs: Optional[LocalFileSystem] = None) -> None:
    """Fail unless `path` exists and is readable."""

    fs = fs or LocalFileSystem()
    p = os.fspath(path)
    if not fs.exists(p):
        raise SourceNotFoundError(p)
    if not fs.is_readable(p):
        raise SourceNotReadableError(p)


def check_target(path: PathLike, fs: Optional[LocalFileSystem] = None) -> None:
    """Fail unless `path` can be written.

    An existing target must be writable. A missing target needs a writable
    nearest existing ancestor directory, since missing parents are created
    on download.

    """

    fs = fs or LocalFileSystem()
    p = os.fspath(path)
    if fs.exists(p):
        if not fs.is_writable(p):
            raise TargetNotWritableError(p)
        return

    parent = _nearest_existing_ancestor(p, fs)
    if not fs.is_dir(parent) or not fs.is_writable(parent):
        raise TargetNotWritableError(p)


def _nearest_existing_ancestor(path: str, fs: LocalFileSystem) -> str:
    current = os.path.dirname(os.path.abspath(path))
    while not fs.exists(current):
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return current
