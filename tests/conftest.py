from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path as HostPath

import pytest

from apathy import MemoryFileSystem, OSFileSystem, use_filesystem


@pytest.fixture(autouse=True)
def _unrestricted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APATHY_CAPABILITIES", raising=False)
    monkeypatch.delenv("APATHY_TRUSTED", raising=False)


@pytest.fixture
def memfs() -> Iterator[MemoryFileSystem]:
    fs = MemoryFileSystem(cwd="/home/user")
    with use_filesystem(fs):
        yield fs


@pytest.fixture
def host_cwd(tmp_path: HostPath, monkeypatch: pytest.MonkeyPatch) -> Iterator[HostPath]:
    monkeypatch.chdir(tmp_path)
    with use_filesystem(OSFileSystem()):
        yield tmp_path
