"""Capability policy for host filesystem access.

``APATHY_CAPABILITIES`` lists the granted capabilities, comma separated.
When it is unset, host access is unrestricted; when it is set, even to an
empty string, only the listed grants pass. ``APATHY_TRUSTED`` switches the
check off.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

FS_READ = "fs.read"
FS_WRITE = "fs.write"

_CAPS_ENV = "APATHY_CAPABILITIES"
_TRUSTED_ENV = "APATHY_TRUSTED"

# env var -> (raw value, parsed value)
_ENV_CACHE: dict[str, tuple[str, Any]] = {}


def _grants(raw: str) -> frozenset[str]:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def _truthy(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env(name: str, parse: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name, "")
    cached = _ENV_CACHE.get(name)
    if cached is None or cached[0] != raw:
        cached = (raw, parse(raw))
        _ENV_CACHE[name] = cached
    return cached[1]


def restricted() -> bool:
    return _CAPS_ENV in os.environ


def has(capability: str) -> bool:
    if not restricted() or _env(_TRUSTED_ENV, _truthy):
        return True
    return capability in _env(_CAPS_ENV, _grants)


def require(capability: str) -> None:
    if not has(capability):
        raise PermissionError(f"Missing capability: {capability}")
