"""One line of conversation: history in, one turn, history out."""

import logging
from typing import List, Optional, Tuple

from .client import ChatClient
from .errors import CorruptHistoryError, HistoryIOError
from .history import HistoryStore
from .messages import Message, Response, Role

logger = logging.getLogger(__name__)

# Injected as the first message of every request and never written to the
# history file.
SYSTEM_PROMPT = (
    "You are a bash assistant. Respond with bash commands quoted with "
    "```bash ...```, no explanations."
)


class Session:
    """Runs chat turns against *client*, keeping the history in *store*.

    Each turn is atomic: the user message and the assistant reply are added
    (and persisted) together, or not at all.
    """

    def __init__(
        self,
        client: ChatClient,
        store: HistoryStore,
        system_prompt: Optional[str] = SYSTEM_PROMPT,
        max_turns: Optional[int] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.system_prompt = system_prompt
        self.max_turns = max_turns
        self.warnings: List[str] = []
        self.load_error: Optional[CorruptHistoryError] = None

        try:
            self._history: List[Message] = store.load()
        except CorruptHistoryError as exc:
            # Losing old context beats refusing to answer.
            logger.warning("discarding unreadable history: %s", exc)
            self.load_error = exc
            self.warnings.append(f"{exc}; starting with an empty history")
            self._history = []

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self._history)

    def _outbound(self, user_message: Message) -> List[Message]:
        messages: List[Message] = []
        if self.system_prompt:
            messages.append(Message(Role.SYSTEM, self.system_prompt))
        messages.extend(self._history)
        messages.append(user_message)
        return messages

    def _trimmed(self, history: List[Message]) -> List[Message]:
        if self.max_turns is None:
            return history
        limit = self.max_turns * 2
        if len(history) <= limit:
            return history
        trimmed = history[-limit:]
        # never start on an assistant reply whose question was cut off
        while trimmed and trimmed[0].role is not Role.USER:
            trimmed = trimmed[1:]
        return trimmed

    def chat(self, prompt: str) -> Response:
        """Send *prompt* with the conversation so far and record the reply.

        Client errors propagate unchanged and leave the history untouched.
        If the reply cannot be persisted, ``HistoryIOError`` is raised with
        the reply attached as ``response``.
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")

        user_message = Message(Role.USER, prompt)
        response = self.client.chat(self._outbound(user_message))

        previous = self._history
        updated = self._trimmed(
            previous + [user_message, Message(Role.ASSISTANT, response.text)]
        )
        try:
            self.store.store(updated)
        except HistoryIOError as exc:
            exc.response = response
            raise

        self._history = updated
        return response

    def reset_history(self) -> None:
        self.store.reset()
        self._history = []
        self.load_error = None
