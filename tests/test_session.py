import unittest
from unittest.mock import patch

from chat_agent import (
    EmptyResponseError,
    HistoryIOError,
    Message,
    ProtocolError,
    Response,
    Role,
    Session,
    SYSTEM_PROMPT,
    TransportError,
)
from .test_base import BaseChatAgentTest, ScriptedChatClient


class TestSession(BaseChatAgentTest):
    def test_first_turn(self):
        """A turn sends system + user and stores user + assistant"""
        client = ScriptedChatClient("```bash\nls\n```")
        session = Session(client, self.store)

        response = session.chat("list files")

        self.assertEqual(response, Response("```bash\nls\n```"))
        self.assertEqual(
            client.calls[0],
            [Message(Role.SYSTEM, SYSTEM_PROMPT), Message(Role.USER, "list files")],
        )
        expected = [
            Message(Role.USER, "list files"),
            Message(Role.ASSISTANT, "```bash\nls\n```"),
        ]
        self.assertEqual(list(session.history), expected)
        self.assertEqual(self.store.load(), expected)

    def test_history_carried_across_sessions(self):
        """A new process sees the previous turns as context"""
        Session(ScriptedChatClient("one"), self.store).chat("first")

        client = ScriptedChatClient("two")
        session = Session(client, self.store)
        session.chat("second")

        self.assertEqual(
            [m.text for m in client.calls[0]],
            [SYSTEM_PROMPT, "first", "one", "second"],
        )
        self.assertEqual(len(self.store.load()), 4)

    def test_system_prompt_never_persisted(self):
        """Only user and assistant messages reach the history file"""
        session = Session(ScriptedChatClient("a", "b"), self.store)
        session.chat("x")
        session.chat("y")
        roles = [m.role for m in self.store.load()]
        self.assertEqual(roles, [Role.USER, Role.ASSISTANT, Role.USER, Role.ASSISTANT])

    def test_without_system_prompt(self):
        """The system message can be switched off"""
        client = ScriptedChatClient("ok")
        Session(client, self.store, system_prompt=None).chat("hi")
        self.assertEqual(client.calls[0], [Message(Role.USER, "hi")])

    def test_client_failure_leaves_history_untouched(self):
        """Failed turns change neither memory nor disk"""
        Session(ScriptedChatClient("one"), self.store).chat("first")
        before = self.read_history_bytes()

        for error in (
            TransportError("timed out"),
            ProtocolError("HTTP 500", status_code=500),
            EmptyResponseError("zero choices"),
        ):
            with self.subTest(error=error):
                session = Session(ScriptedChatClient(error), self.store)
                history = session.history
                with self.assertRaises(type(error)) as ctx:
                    session.chat("second")
                self.assertIs(ctx.exception, error)
                self.assertEqual(session.history, history)
                self.assertEqual(self.read_history_bytes(), before)

    def test_store_failure_reports_response(self):
        """A reply that cannot be saved is still handed back"""
        session = Session(ScriptedChatClient("```bash\npwd\n```"), self.store)

        with patch.object(self.store, "store", side_effect=HistoryIOError(self.history_path, "read-only")):
            with self.assertRaises(HistoryIOError) as ctx:
                session.chat("where am I")

        self.assertEqual(ctx.exception.response, Response("```bash\npwd\n```"))
        self.assertEqual(session.history, ())
        self.assertFalse(self.history_path.exists())

    def test_corrupt_history_falls_back_to_empty(self):
        """A corrupt file is reported as a warning and the turn still works"""
        self.history_path.write_text("garbage", encoding="utf-8")

        client = ScriptedChatClient("ok")
        session = Session(client, self.store)

        self.assertIsNotNone(session.load_error)
        self.assertEqual(len(session.warnings), 1)
        self.assertEqual(session.chat("hello"), Response("ok"))
        self.assertEqual(len(client.calls[0]), 2)
        self.assertEqual(
            self.store.load(),
            [Message(Role.USER, "hello"), Message(Role.ASSISTANT, "ok")],
        )

    def test_deeply_nested_history_falls_back_to_empty(self):
        """An over-nested file is discarded like any other corrupt one"""
        self.history_path.write_text("[" * 200000, encoding="utf-8")

        session = Session(ScriptedChatClient("ok"), self.store)

        self.assertIsNotNone(session.load_error)
        self.assertEqual(session.history, ())
        self.assertEqual(session.chat("hello"), Response("ok"))
        self.assertEqual(len(self.store.load()), 2)

    def test_empty_prompt_rejected(self):
        """Blank prompts never reach the client"""
        client = ScriptedChatClient()
        session = Session(client, self.store)
        with self.assertRaises(ValueError):
            session.chat("   ")
        self.assertEqual(client.calls, [])

    def test_reset_history(self):
        """Reset clears memory and disk"""
        session = Session(ScriptedChatClient("one", "two"), self.store)
        session.chat("first")

        session.reset_history()

        self.assertEqual(session.history, ())
        self.assertEqual(self.store.load(), [])
        session.chat("again")
        self.assertEqual(len(session.client.calls[1]), 2)

    def test_max_turns_trims_oldest_pairs(self):
        """Only the most recent turns are kept when a limit is set"""
        session = Session(ScriptedChatClient("a1", "a2", "a3"), self.store, max_turns=2)
        for prompt in ("q1", "q2", "q3"):
            session.chat(prompt)

        self.assertEqual(
            [m.text for m in self.store.load()],
            ["q2", "a2", "q3", "a3"],
        )
        self.assertEqual(self.store.load()[0].role, Role.USER)


if __name__ == "__main__":
    unittest.main()
