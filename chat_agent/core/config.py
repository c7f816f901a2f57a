"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TIMEOUT = 60.0
HISTORY_DIRNAME = ".chat_agent"
HISTORY_FILENAME = "history.json"

_ZSHRC_KEY_PATTERN = re.compile(r"(?:export\s+)?OPENAI_API_KEY\s*=\s*['\"]?([^'\"\n]+)['\"]?")


@dataclass
class Settings:
    api_key: Optional[str]
    endpoint_url: Optional[str]
    model_name: str
    history_path: Path
    timeout: float = DEFAULT_TIMEOUT
    max_turns: Optional[int] = None

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None,
    ) -> "Settings":
        """Collect settings from *environ* (defaults to ``os.environ``).

        The API key falls back to an ``OPENAI_API_KEY=...`` line in
        ``~/.zshrc``; a missing key is only an error once a client is built.
        """
        env = os.environ if environ is None else environ
        home = Path.home() if home is None else home

        api_key = env.get("OPENAI_API_KEY") or _read_zshrc_key(home / ".zshrc")

        return cls(
            api_key=api_key,
            endpoint_url=env.get("OPENAI_BASE_URL") or None,
            model_name=env.get("OPENAI_DEFAULT_MODEL") or DEFAULT_MODEL,
            history_path=history_path_from_env(env, home),
            timeout=_parse_timeout(env.get("CHAT_AGENT_TIMEOUT")),
            max_turns=_parse_max_turns(env.get("CHAT_AGENT_MAX_TURNS")),
        )


def history_path_from_env(
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return the history file location; needs no other setting to be valid."""
    env = os.environ if environ is None else environ
    history = env.get("CHAT_AGENT_HISTORY")
    if history:
        return Path(history).expanduser()
    home = Path.home() if home is None else home
    return home / HISTORY_DIRNAME / HISTORY_FILENAME


def _read_zshrc_key(path: Path) -> Optional[str]:
    # Convenience for macOS users who only export the key from their shell rc.
    if not path.exists():
        return None
    try:
        match = _ZSHRC_KEY_PATTERN.search(path.read_text())
    except (OSError, UnicodeDecodeError):
        return None
    return match.group(1).strip() if match else None


def _parse_timeout(value: Optional[str]) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(f"CHAT_AGENT_TIMEOUT must be a number, got {value!r}") from None
    if timeout <= 0:
        raise ConfigError("CHAT_AGENT_TIMEOUT must be positive")
    return timeout


def _parse_max_turns(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        max_turns = int(value)
    except ValueError:
        raise ConfigError(f"CHAT_AGENT_MAX_TURNS must be an integer, got {value!r}") from None
    if max_turns <= 0:
        raise ConfigError("CHAT_AGENT_MAX_TURNS must be positive")
    return max_turns
