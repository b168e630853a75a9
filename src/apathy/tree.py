"""Recursive filesystem tree operations built on ``Path``.

None of these raise for filesystem conditions: failures come back as
``False`` (or an empty list) and are logged on this module's logger.
"""

from __future__ import annotations

import logging

from apathy import fs as _fs
from apathy.errors import InvalidModeError
from apathy.path import Path, PathInput

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o777

__all__ = [
    "DEFAULT_MODE",
    "join",
    "cwd",
    "touch",
    "makedirs",
    "rmdirs",
    "listdir",
    "move",
    "rm",
]


def _check_mode(mode: int) -> int:
    if isinstance(mode, bool) or not isinstance(mode, int):
        raise InvalidModeError(f"mode must be an int, not {type(mode).__name__}")
    if mode < 0 or mode > 0o7777:
        raise InvalidModeError(f"mode out of range: {mode:#o}")
    return mode


def _absolute(p: Path, layer: _fs.FileSystem) -> Path | None:
    try:
        return p.copy().absolute(fs=layer)
    except OSError as exc:
        logger.warning("cannot resolve %s: %s", p, exc)
        return None


def join(a: PathInput, b: PathInput) -> Path:
    return Path.join(a, b)


def cwd(*, fs: _fs.FileSystem | None = None) -> Path:
    return Path.cwd(fs=fs)


def touch(p: PathInput, mode: int = DEFAULT_MODE, *, fs: _fs.FileSystem | None = None) -> bool:
    """Create an empty file at ``p`` if none exists, making parents as needed."""
    mode = _check_mode(mode)
    layer = _fs.get_filesystem(fs)
    path = Path(p)
    try:
        layer.create_empty_file(str(path), mode)
        return True
    except OSError:
        pass
    absolute = _absolute(path, layer)
    if absolute is None:
        return False
    makedirs(absolute.up(fs=layer), mode, fs=layer)
    try:
        layer.create_empty_file(str(path), mode)
    except OSError as exc:
        logger.warning("touch %s failed: %s", path, exc)
        return False
    return True


def makedirs(p: PathInput, mode: int = DEFAULT_MODE, *, fs: _fs.FileSystem | None = None) -> bool:
    """Create ``p`` and any missing parents.

    An existing directory counts as success. A missing intermediate is
    created first and the target retried once; any other error is final.
    """
    mode = _check_mode(mode)
    layer = _fs.get_filesystem(fs)
    target = _absolute(Path(p), layer)
    if target is None:
        return False
    try:
        layer.create_directory(str(target), mode)
        return True
    except FileExistsError:
        return target.is_directory(fs=layer)
    except FileNotFoundError:
        # the root always exists, so recursion ends there
        makedirs(target.parent(fs=layer), mode, fs=layer)
    except OSError as exc:
        logger.warning("makedirs %s failed: %s", target, exc)
        return False
    try:
        layer.create_directory(str(target), mode)
    except FileExistsError:
        return target.is_directory(fs=layer)
    except OSError as exc:
        logger.warning("makedirs %s failed: %s", target, exc)
        return False
    return True


def rmdirs(p: PathInput, ignore_errors: bool = False, *, fs: _fs.FileSystem | None = None) -> bool:
    """Remove the directory ``p`` and everything below it.

    A child that cannot be removed is logged; it aborts the walk unless
    ``ignore_errors`` is set. The result reflects only the removal of ``p``
    itself, so ignored child failures do not show up in it.

    Links are never followed: a link in the tree is removed itself, and a
    link passed as ``p`` is refused.
    """
    layer = _fs.get_filesystem(fs)
    path = Path(p)
    if not path.is_directory(fs=layer) or layer.is_link(str(path.copy().trim())):
        return False
    for child in listdir(path, fs=layer):
        if child.is_directory(fs=layer) and not layer.is_link(str(child)):
            ok = rmdirs(child, ignore_errors, fs=layer)
        else:
            ok = rm(child, fs=layer)
        if ok:
            continue
        if not ignore_errors:
            logger.warning("rmdirs %s: failed to remove %s", path, child)
            return False
        logger.debug("rmdirs %s: ignoring failure on %s", path, child)
    try:
        layer.remove_entry(str(path))
    except OSError as exc:
        logger.warning("rmdirs %s failed: %s", path, exc)
        return False
    return True


def listdir(p: PathInput, *, fs: _fs.FileSystem | None = None) -> list[Path]:
    """Absolute paths of the entries in ``p``; empty if it cannot be read."""
    layer = _fs.get_filesystem(fs)
    base = _absolute(Path(p), layer)
    if base is None:
        return []
    try:
        names = layer.list_entries(str(base))
    except OSError as exc:
        logger.debug("listdir %s failed: %s", base, exc)
        return []
    results: list[Path] = []
    for name in names:
        if name in (".", ".."):
            continue
        results.append(base.copy().relative(name))
    return results


def move(
    src: PathInput,
    dst: PathInput,
    make_parents: bool = False,
    *,
    fs: _fs.FileSystem | None = None,
) -> bool:
    layer = _fs.get_filesystem(fs)
    source = Path(src)
    target = Path(dst)
    try:
        layer.rename(str(source), str(target))
        return True
    except OSError as exc:
        if not make_parents:
            logger.debug("move %s -> %s failed: %s", source, target, exc)
            return False
    absolute = _absolute(target, layer)
    if absolute is None:
        return False
    makedirs(absolute.up(fs=layer), fs=layer)
    try:
        layer.rename(str(source), str(target))
    except OSError as exc:
        logger.warning("move %s -> %s failed: %s", source, target, exc)
        return False
    return True


def rm(p: PathInput, *, fs: _fs.FileSystem | None = None) -> bool:
    layer = _fs.get_filesystem(fs)
    path = Path(p)
    try:
        layer.remove_entry(str(path))
    except OSError as exc:
        logger.warning("rm %s failed: %s", path, exc)
        return False
    return True
