"""Lexical path algebra and recursive filesystem tree operations."""

from __future__ import annotations

import logging

from apathy.errors import ApathyError, InvalidModeError
from apathy.fs import (
    FileSystem,
    MemoryFileSystem,
    OSFileSystem,
    get_filesystem,
    set_filesystem,
    use_filesystem,
)
from apathy.path import Path, Segment
from apathy.tree import cwd, join, listdir, makedirs, move, rm, rmdirs, touch

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ApathyError",
    "FileSystem",
    "InvalidModeError",
    "MemoryFileSystem",
    "OSFileSystem",
    "Path",
    "Segment",
    "cwd",
    "get_filesystem",
    "join",
    "listdir",
    "makedirs",
    "move",
    "rm",
    "rmdirs",
    "set_filesystem",
    "touch",
    "use_filesystem",
]
