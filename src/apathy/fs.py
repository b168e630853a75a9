"""Filesystem access layer consumed by paths and tree operations.

Query methods answer with booleans. Mutating methods return ``None`` and
raise the same ``OSError`` subclasses the host ``os`` module raises, so tree
operations can tell recoverable conditions (``FileExistsError``,
``FileNotFoundError``) from terminal ones.
"""

from __future__ import annotations

import errno
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

from apathy import capabilities

__all__ = [
    "FileSystem",
    "OSFileSystem",
    "MemoryFileSystem",
    "get_filesystem",
    "set_filesystem",
    "use_filesystem",
]

SEP = "/"


def _os_error(cls: type[OSError], code: int, path: str) -> OSError:
    return cls(code, os.strerror(code), path)


@runtime_checkable
class FileSystem(Protocol):
    def exists(self, path: str) -> bool: ...

    def is_file(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def is_link(self, path: str) -> bool: ...

    def list_entries(self, path: str) -> list[str]: ...

    def create_directory(self, path: str, mode: int = 0o777) -> None: ...

    def remove_entry(self, path: str) -> None: ...

    def rename(self, src: str, dst: str) -> None: ...

    def create_empty_file(self, path: str, mode: int = 0o777) -> None: ...

    def getcwd(self) -> str: ...


class OSFileSystem:
    """Host filesystem through the stdlib ``os`` module."""

    def exists(self, path: str) -> bool:
        if not capabilities.has(capabilities.FS_READ):
            return False
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        if not capabilities.has(capabilities.FS_READ):
            return False
        return os.path.isfile(path)

    def is_directory(self, path: str) -> bool:
        if not capabilities.has(capabilities.FS_READ):
            return False
        return os.path.isdir(path)

    def is_link(self, path: str) -> bool:
        if not capabilities.has(capabilities.FS_READ):
            return False
        return os.path.islink(path)

    def list_entries(self, path: str) -> list[str]:
        capabilities.require(capabilities.FS_READ)
        return list(os.listdir(path))

    def create_directory(self, path: str, mode: int = 0o777) -> None:
        capabilities.require(capabilities.FS_WRITE)
        os.mkdir(path, mode)

    def remove_entry(self, path: str) -> None:
        capabilities.require(capabilities.FS_WRITE)
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            os.unlink(path)

    def rename(self, src: str, dst: str) -> None:
        capabilities.require(capabilities.FS_WRITE)
        os.rename(src, dst)

    def create_empty_file(self, path: str, mode: int = 0o777) -> None:
        capabilities.require(capabilities.FS_WRITE)
        fd = os.open(path, os.O_RDONLY | os.O_CREAT, mode)
        os.close(fd)

    def getcwd(self) -> str:
        capabilities.require(capabilities.FS_READ)
        return os.getcwd()


class MemoryFileSystem:
    """Dictionary-backed tree with its own working directory.

    Each entry maps an absolute, normalized path to ``None`` for a file or to
    an insertion-ordered ``dict`` of child names for a directory. As on the
    host, ``..`` only resolves through a directory that exists. There are no
    links. A non-root ``cwd`` is created, parents included, on construction.
    """

    def __init__(self, cwd: str = SEP) -> None:
        self._entries: dict[str, dict[str, None] | None] = {SEP: {}}
        self._cwd = SEP
        current = ""
        for part in self._resolve(cwd).split(SEP):
            if not part:
                continue
            current += SEP + part
            if current not in self._entries:
                self.create_directory(current)
        self.chdir(cwd)

    def _resolve(self, path: str) -> str:
        if not path.startswith(SEP):
            path = self._cwd.rstrip(SEP) + SEP + path
        parts: list[str] = []
        for part in path.split(SEP):
            if not part or part == ".":
                continue
            if part == "..":
                self._require_directory(SEP + SEP.join(parts), path)
                if parts:
                    parts.pop()
                continue
            parts.append(part)
        return SEP + SEP.join(parts)

    def _require_directory(self, resolved: str, path: str) -> None:
        if resolved not in self._entries:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        if self._entries[resolved] is None:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)

    @staticmethod
    def _split(resolved: str) -> tuple[str, str]:
        idx = resolved.rfind(SEP)
        return (resolved[:idx] or SEP), resolved[idx + 1 :]

    def _lookup(self, path: str) -> str | None:
        try:
            resolved = self._resolve(path)
        except OSError:
            return None
        if resolved not in self._entries:
            return None
        if path.endswith(SEP) and self._entries[resolved] is None:
            return None
        return resolved

    def _parent_children(self, path: str, resolved: str) -> dict[str, None]:
        parent, _ = self._split(resolved)
        if parent not in self._entries:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        children = self._entries[parent]
        if children is None:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        return children

    def chdir(self, path: str) -> None:
        resolved = self._resolve(path)
        self._require_directory(resolved, path)
        self._cwd = resolved

    def exists(self, path: str) -> bool:
        return self._lookup(path) is not None

    def is_file(self, path: str) -> bool:
        resolved = self._lookup(path)
        return resolved is not None and self._entries[resolved] is None

    def is_directory(self, path: str) -> bool:
        resolved = self._lookup(path)
        return resolved is not None and self._entries[resolved] is not None

    def is_link(self, path: str) -> bool:
        return False

    def list_entries(self, path: str) -> list[str]:
        resolved = self._resolve(path)
        if resolved not in self._entries:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        children = self._entries[resolved]
        if children is None:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        return list(children)

    def create_directory(self, path: str, mode: int = 0o777) -> None:
        resolved = self._resolve(path)
        if resolved in self._entries:
            raise _os_error(FileExistsError, errno.EEXIST, path)
        children = self._parent_children(path, resolved)
        children[self._split(resolved)[1]] = None
        self._entries[resolved] = {}

    def create_empty_file(self, path: str, mode: int = 0o777) -> None:
        resolved = self._resolve(path)
        if resolved in self._entries:
            if self._entries[resolved] is not None:
                raise _os_error(IsADirectoryError, errno.EISDIR, path)
            if path.endswith(SEP):
                raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
            return
        if path.endswith(SEP):
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        children = self._parent_children(path, resolved)
        children[self._split(resolved)[1]] = None
        self._entries[resolved] = None

    def remove_entry(self, path: str) -> None:
        resolved = self._lookup(path)
        if resolved is None:
            raise _os_error(FileNotFoundError, errno.ENOENT, path)
        if resolved == SEP:
            raise _os_error(OSError, errno.EBUSY, path)
        if self._entries[resolved]:
            raise _os_error(OSError, errno.ENOTEMPTY, path)
        parent, name = self._split(resolved)
        del self._entries[resolved]
        parent_children = self._entries[parent]
        if parent_children is not None:
            parent_children.pop(name, None)

    def rename(self, src: str, dst: str) -> None:
        source = self._lookup(src)
        if source is None:
            raise _os_error(FileNotFoundError, errno.ENOENT, src)
        target = self._resolve(dst)
        if source == target:
            return
        if source == SEP or target.startswith(source + SEP):
            raise _os_error(OSError, errno.EINVAL, dst)
        children = self._parent_children(dst, target)
        source_is_dir = self._entries[source] is not None
        if target in self._entries:
            existing = self._entries[target]
            if existing is None and source_is_dir:
                raise _os_error(NotADirectoryError, errno.ENOTDIR, dst)
            if existing is not None and not source_is_dir:
                raise _os_error(IsADirectoryError, errno.EISDIR, dst)
            if existing:
                raise _os_error(OSError, errno.ENOTEMPTY, dst)
            del self._entries[target]
        moved = [
            key
            for key in self._entries
            if key == source or key.startswith(source + SEP)
        ]
        for key in moved:
            self._entries[target + key[len(source) :]] = self._entries.pop(key)
        parent, name = self._split(source)
        parent_children = self._entries[parent]
        if parent_children is not None:
            parent_children.pop(name, None)
        children[self._split(target)[1]] = None
        if self._cwd == source or self._cwd.startswith(source + SEP):
            self._cwd = target + self._cwd[len(source) :]

    def getcwd(self) -> str:
        return self._cwd


_ACTIVE: FileSystem = OSFileSystem()


def get_filesystem(fs: FileSystem | None = None) -> FileSystem:
    """Return ``fs`` when given, else the active layer."""
    return fs if fs is not None else _ACTIVE


def set_filesystem(fs: FileSystem) -> FileSystem:
    """Install ``fs`` as the active layer and return the previous one."""
    global _ACTIVE
    if not isinstance(fs, FileSystem):
        raise TypeError(f"expected a FileSystem, not {type(fs).__name__}")
    previous = _ACTIVE
    _ACTIVE = fs
    return previous


@contextmanager
def use_filesystem(fs: FileSystem) -> Iterator[FileSystem]:
    previous = set_filesystem(fs)
    try:
        yield fs
    finally:
        set_filesystem(previous)
