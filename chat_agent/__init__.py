"""Command line chat agent for OpenAI-compatible models.

Features
--------
1. History persistence: the conversation is stored on disk and sent along with every new prompt.
2. Code extraction: fenced code blocks (```bash ...```) are pulled out of the reply and shown on their own.
3. Any OpenAI-compatible endpoint: point ``OPENAI_BASE_URL`` at a local or hosted server.

Run `python -m chat_agent` or the installed `chat` command.
"""
# Re-export useful symbols for convenience
from .core import (
    CodeBlock,
    HistoryStore,
    Message,
    Response,
    Role,
    Session,
    SYSTEM_PROMPT,
    extract_code_blocks,
    iter_code_blocks,
)
from .core.client import ChatClient, OpenAIChatClient
from .core.config import Settings
from .core.errors import (
    ChatError,
    ConfigError,
    CorruptHistoryError,
    EmptyResponseError,
    HistoryIOError,
    ProtocolError,
    TransportError,
)
from .cli import ChatCLI, run_cli

__all__ = [
    "CodeBlock",
    "HistoryStore",
    "Message",
    "Response",
    "Role",
    "Session",
    "SYSTEM_PROMPT",
    "extract_code_blocks",
    "iter_code_blocks",
    "ChatClient",
    "OpenAIChatClient",
    "Settings",
    "ChatError",
    "ConfigError",
    "CorruptHistoryError",
    "EmptyResponseError",
    "HistoryIOError",
    "ProtocolError",
    "TransportError",
    "ChatCLI",
    "run_cli",
]
