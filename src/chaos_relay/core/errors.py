"""Relay exceptions. Messages are fixed; backend detail stays in server logs."""
from __future__ import annotations

class RelayError(Exception):
    """Base class for relay failures."""

class CompletionError(RelayError):
    """The call to the completion backend failed."""

    def __init__(self, message: str = "Completion backend request failed") -> None:
        super().__init__(message)
