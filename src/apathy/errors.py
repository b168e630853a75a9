from __future__ import annotations


class ApathyError(Exception):
    """Base error for apathy programming misuse."""


class InvalidModeError(ApathyError, ValueError):
    """Creation mode is not an integer permission mask."""
