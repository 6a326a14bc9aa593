"""Exceptions raised by the audit pipeline."""

from __future__ import annotations


class ProvtrailError(Exception):
    """Base class for audit pipeline errors."""


class InvalidTokenError(ProvtrailError, ValueError):
    """A unique token cannot be minted into a sharded path."""

    def __init__(self, token: str, reason: str):
        super().__init__(f"Cannot mint path from token {token!r}: {reason}")
        self.token = token
        self.reason = reason


class MalformedUriError(ProvtrailError, ValueError):
    """A composed string is not a syntactically valid URI."""

    def __init__(self, uri: str, reason: str):
        super().__init__(f"Malformed URI {uri!r}: {reason}")
        self.uri = uri
        self.reason = reason


class SinkWriteError(ProvtrailError):
    """The audit sink failed to persist a record."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Audit write failed at {path}: {message}")
        self.path = path


class NotConfiguredError(ProvtrailError):
    """The pipeline was used before a successful start."""
