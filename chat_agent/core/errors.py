"""Exceptions raised by the chat pipeline."""

from pathlib import Path
from typing import Optional

from .messages import Response


class ChatError(Exception):
    """Base class for every error the CLI reports to the user."""


class ConfigError(ChatError):
    """Configuration is missing or invalid."""


class TransportError(ChatError):
    """The endpoint could not be reached (connection, TLS or timeout)."""


class ProtocolError(ChatError):
    """The endpoint answered, but not with a usable chat completion."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ChatError):
    """The endpoint returned no choices."""


class CorruptHistoryError(ChatError):
    """The history file exists but does not hold a valid message list."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"history file {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason


class HistoryIOError(ChatError):
    """The history file could not be read or written.

    When raised after a successful turn, *response* holds the reply that
    could not be persisted.
    """

    def __init__(self, path: Path, reason: str, response: Optional[Response] = None):
        super().__init__(f"cannot access history file {path}: {reason}")
        self.path = path
        self.reason = reason
        self.response = response
