"""Durable conversation history stored as a JSON file on disk."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from .errors import CorruptHistoryError, HistoryIOError
from .messages import Message

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class HistoryStore:
    """Loads, stores and resets the single conversation kept for the user.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers (including other processes) see either the old
    or the new history, never a partial file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> List[Message]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as exc:
            raise CorruptHistoryError(self.path, f"not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise HistoryIOError(self.path, exc.strerror or str(exc)) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptHistoryError(self.path, f"invalid JSON ({exc})") from exc
        except RecursionError as exc:
            raise CorruptHistoryError(self.path, "nesting too deep") from exc

        if not isinstance(data, dict):
            raise CorruptHistoryError(self.path, "top-level value is not an object")
        if data.get("version") != FORMAT_VERSION:
            raise CorruptHistoryError(self.path, f"unsupported version {data.get('version')!r}")

        entries = data.get("messages")
        if not isinstance(entries, list):
            raise CorruptHistoryError(self.path, "'messages' is not a list")

        messages: List[Message] = []
        for idx, entry in enumerate(entries):
            try:
                messages.append(Message.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                raise CorruptHistoryError(self.path, f"bad message at index {idx}: {exc}") from exc

        logger.debug("loaded %d messages from %s", len(messages), self.path)
        return messages

    def store(self, history: Sequence[Message]) -> None:
        data = {
            "version": FORMAT_VERSION,
            "messages": [m.to_dict() for m in history],
            "updated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        }
        payload = json.dumps(data, ensure_ascii=False, indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as exc:
            raise HistoryIOError(self.path, exc.strerror or str(exc)) from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise HistoryIOError(self.path, exc.strerror or str(exc)) from exc

        logger.debug("stored %d messages to %s", len(history), self.path)

    def reset(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise HistoryIOError(self.path, exc.strerror or str(exc)) from exc
        logger.debug("removed history file %s", self.path)
