"""String-backed path values with a fluent, in-place manipulation API.

Mutating methods change the receiver and return it so calls can be chained::

    Path("/").append("usr").append("lib").directory()

Use ``copy()`` first when the original value must survive. Methods that need
the working directory or file metadata take an optional ``fs`` layer and
fall back to the active one.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from apathy import fs as _fs

PathInput = Union[str, "Path", os.PathLike, int, float]


@dataclass(frozen=True)
class Segment:
    """One separator-delimited component produced by ``Path.split``.

    ``directory`` is true when the component was followed by a separator.
    """

    segment: str
    directory: bool


def _coerce(value: Any) -> str:
    if isinstance(value, Path):
        return value._path
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise TypeError(
            "argument should be a str, a number or an os.PathLike object, not 'bool'"
        )
    if isinstance(value, (int, float)):
        return format(value)
    if isinstance(value, (bytes, bytearray)):
        raise TypeError(
            "argument should be a str or an os.PathLike object "
            "where __fspath__ returns a str, not 'bytes'"
        )
    method = getattr(value, "__fspath__", None)
    if method is not None:
        fspath = method()
        if isinstance(fspath, str):
            return fspath
        raise TypeError(
            "argument should be a str or an os.PathLike object "
            f"where __fspath__ returns a str, not {type(fspath).__name__!r}"
        )
    raise TypeError(
        "argument should be a str, a number or an os.PathLike object, "
        f"not {type(value).__name__!r}"
    )


class Path:
    separator = "/"

    __slots__ = ("_path",)

    def __init__(
        self,
        path: PathInput | None = None,
        formatter: Callable[[Any], str] | None = None,
    ) -> None:
        if path is None:
            self._path = ""
        elif formatter is not None:
            text = formatter(path)
            if not isinstance(text, str):
                raise TypeError(
                    f"formatter returned {type(text).__name__!r}, not 'str'"
                )
            self._path = text
        else:
            self._path = _coerce(path)

    def __fspath__(self) -> str:
        return self._path

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"Path({self._path!r})"

    def string(self) -> str:
        return self._path

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Path):
            return self._path == other._path
        if isinstance(other, str):
            return self._path == other
        return NotImplemented

    # mutable
    __hash__ = None  # type: ignore[assignment]

    def equivalent(self, other: PathInput, *, fs: _fs.FileSystem | None = None) -> bool:
        """Whether both paths name the same resource.

        Copies of each side are absolutized and sanitized before comparing,
        so neither operand is modified.
        """
        mine = self.copy().absolute(fs=fs).sanitize(fs=fs)
        theirs = Path(other).absolute(fs=fs).sanitize(fs=fs)
        return mine._path == theirs._path

    def copy(self) -> Path:
        return Path(self._path)

    def __copy__(self) -> Path:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Path:
        return self.copy()

    # Manipulations

    def append(self, segment: PathInput) -> Path:
        self.trim()
        self._path += self.separator + _coerce(segment)
        return self

    def __lshift__(self, segment: PathInput) -> Path:
        return self.append(segment)

    def __truediv__(self, segment: PathInput) -> Path:
        return Path.join(self, segment)

    def relative(self, other: PathInput) -> Path:
        rel = Path(other)
        if not rel.is_absolute():
            return self.append(rel)
        self._path = rel._path
        return self

    def up(self, *, fs: _fs.FileSystem | None = None) -> Path:
        self.absolute(fs=fs).sanitize(fs=fs).trim()
        idx = self._path.rfind(self.separator)
        if idx != -1:
            self._path = self._path[:idx]
        return self.directory()

    def absolute(self, *, fs: _fs.FileSystem | None = None) -> Path:
        if not self.is_absolute():
            self._path = Path.join(Path.cwd(fs=fs), self._path)._path
        return self

    def sanitize(self, *, fs: _fs.FileSystem | None = None) -> Path:
        """Normalize the path lexically.

        Runs of separators collapse, ``.`` segments disappear and ``..``
        removes the segment before it. A relative path that climbs above its
        first segment is absolutized against the working directory and
        sanitized again; on an absolute path extra ``..`` stop at the root.
        A path beginning with ``.`` is re-rooted at the working directory. A
        trailing separator survives.
        """
        sep = self.separator
        path = self._path
        segments: list[str] = []
        end = 0
        while True:
            while end < len(path) and path[end] == sep:
                end += 1
            if end == len(path):
                # trailing separator: the path names a directory
                segments.append("")
                break
            pos = path.find(sep, end)
            segment = path[end:] if pos == -1 else path[end:pos]
            if segment == "..":
                if segments:
                    segments.pop()
                elif not self.is_absolute():
                    return self.absolute(fs=fs).sanitize(fs=fs)
            elif segment != ".":
                segments.append(segment)
            if pos == -1:
                break
            end = pos + 1

        if path.startswith("."):
            prefix = Path.cwd(fs=fs)._path
        elif self.is_absolute():
            prefix = sep
        else:
            prefix = ""
        self._path = prefix + sep.join(segments)
        return self

    def directory(self) -> Path:
        self.trim()
        self._path += self.separator
        return self

    def trim(self) -> Path:
        self._path = self._path.rstrip(self.separator)
        return self

    def parent(self, *, fs: _fs.FileSystem | None = None) -> Path:
        return self.copy().up(fs=fs)

    # Decomposition

    def split(self) -> list[Segment]:
        trailing = self.has_trailing_separator()
        parts = [part for part in self._path.split(self.separator) if part]
        segments: list[Segment] = []
        if self.is_absolute():
            segments.append(Segment("", True))
        for idx, part in enumerate(parts):
            segments.append(Segment(part, trailing or idx < len(parts) - 1))
        if trailing:
            segments.append(Segment("", False))
        return segments

    def _name(self) -> str:
        return self._path[self._path.rfind(self.separator) + 1 :]

    def extension(self) -> str:
        name = self._name()
        idx = name.rfind(".")
        if idx == -1:
            return ""
        return name[idx + 1 :]

    def stem(self) -> Path:
        name = self._name()
        idx = name.rfind(".")
        if idx == -1:
            return self.copy()
        return Path(self._path[: len(self._path) - len(name) + idx])

    # Type tests

    def is_absolute(self) -> bool:
        return self._path.startswith(self.separator)

    def has_trailing_separator(self) -> bool:
        return self._path.endswith(self.separator)

    def exists(self, *, fs: _fs.FileSystem | None = None) -> bool:
        return _fs.get_filesystem(fs).exists(self._path)

    def is_file(self, *, fs: _fs.FileSystem | None = None) -> bool:
        return _fs.get_filesystem(fs).is_file(self._path)

    def is_directory(self, *, fs: _fs.FileSystem | None = None) -> bool:
        return _fs.get_filesystem(fs).is_directory(self._path)

    # Static utilities; the tree operations live in apathy.tree

    @staticmethod
    def join(a: PathInput, b: PathInput) -> Path:
        p = Path(a)
        p.append(b)
        return p

    @staticmethod
    def cwd(*, fs: _fs.FileSystem | None = None) -> Path:
        return Path(_fs.get_filesystem(fs).getcwd()).directory()

    @staticmethod
    def touch(p: PathInput, mode: int = 0o777, *, fs: _fs.FileSystem | None = None) -> bool:
        from apathy import tree

        return tree.touch(p, mode, fs=fs)

    @staticmethod
    def makedirs(
        p: PathInput, mode: int = 0o777, *, fs: _fs.FileSystem | None = None
    ) -> bool:
        from apathy import tree

        return tree.makedirs(p, mode, fs=fs)

    @staticmethod
    def rmdirs(
        p: PathInput, ignore_errors: bool = False, *, fs: _fs.FileSystem | None = None
    ) -> bool:
        from apathy import tree

        return tree.rmdirs(p, ignore_errors, fs=fs)

    @staticmethod
    def listdir(p: PathInput, *, fs: _fs.FileSystem | None = None) -> list[Path]:
        from apathy import tree

        return tree.listdir(p, fs=fs)

    @staticmethod
    def move(
        src: PathInput,
        dst: PathInput,
        make_parents: bool = False,
        *,
        fs: _fs.FileSystem | None = None,
    ) -> bool:
        from apathy import tree

        return tree.move(src, dst, make_parents, fs=fs)

    @staticmethod
    def rm(p: PathInput, *, fs: _fs.FileSystem | None = None) -> bool:
        from apathy import tree

        return tree.rm(p, fs=fs)


__all__ = ["Path", "PathInput", "Segment"]
