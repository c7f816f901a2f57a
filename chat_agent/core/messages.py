"""Message vocabulary shared by the client, the history store and the session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Role(str, Enum):
    """Speaker of a message. The value is the name used on the wire."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    text: str

    def to_api(self) -> Dict[str, str]:
        """Return the chat-completions representation of the message."""
        return {"role": self.role.value, "content": self.text}

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Build a message from its history-file representation.

        Raises ``ValueError``, ``KeyError`` or ``TypeError`` when *data* is
        not a well-formed entry.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError("message text must be a string")
        return cls(role=Role(data["role"]), text=text)


@dataclass(frozen=True)
class Response:
    """Raw assistant reply returned by a chat client."""

    text: str
