"""Command line entry point: ask one question, show the code it answers with.

Usage::

    chat [options] <text...>   send <text> along with the saved history
    chat reset                 forget the saved history

The conversation is kept in ``~/.chat_agent/history.json`` (override with
``CHAT_AGENT_HISTORY``) so follow-up questions keep their context.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rich.markup import escape
from rich.syntax import Syntax

from .core import HistoryStore, Session, extract_code_blocks
from .core.client import OpenAIChatClient
from .core.config import Settings, history_path_from_env
from .core.errors import ChatError, HistoryIOError
from .core.messages import Response
from .utils import (
    ASSISTANT_LABEL,
    ERROR_LABEL,
    WARNING_LABEL,
    Spinner,
    console,
    err_console,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def report_error(message: str) -> None:
    err_console.print(f"\\[{ERROR_LABEL}] {escape(message)}")


def report_warning(message: str) -> None:
    err_console.print(f"\\[{WARNING_LABEL}] {escape(message)}")


# ---------------------------------------------------------------------------
# Helper classes
# ---------------------------------------------------------------------------


class ChatCLI:
    """Runs a single turn of *session* and renders the reply."""

    def __init__(self, session: Session, raw: bool = False):
        self.session = session
        self.raw = raw

    def render(self, response: Response) -> None:
        blocks = extract_code_blocks(response.text)

        if self.raw:
            # Plain bodies only, suitable for piping into a shell.
            if not blocks:
                print(response.text)
            for block in blocks:
                print(block.body, end="" if block.body.endswith("\n") else "\n")
            return

        console.print(f"{ASSISTANT_LABEL}>")
        if not blocks:
            console.print(response.text, markup=False, highlight=False)
            return
        for block in blocks:
            console.print(
                Syntax(block.body.rstrip("\n"), block.language_tag or "text", word_wrap=True)
            )

    def ask(self, prompt: str) -> int:
        for warning in self.session.warnings:
            report_warning(warning)

        try:
            with Spinner(prefix=f"{ASSISTANT_LABEL}> "):
                response = self.session.chat(prompt)
        except HistoryIOError as exc:
            if exc.response is not None:
                self.render(exc.response)
            report_error(f"{exc} (this turn was not saved)")
            return EXIT_FAILURE
        except ChatError as exc:
            report_error(str(exc))
            return EXIT_FAILURE

        self.render(response)
        return EXIT_OK


# ---------------------------------------------------------------------------
# Entrypoint helpers
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chat",
        description="Ask an OpenAI-compatible model for shell commands, keeping the conversation history.",
        epilog="Run 'chat reset' to clear the saved history.",
    )
    parser.add_argument("--model", "-m", help="Model name to use (overrides OPENAI_DEFAULT_MODEL)")
    parser.add_argument(
        "--raw", "-r", action="store_true", help="Print only the code block bodies, without styling"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests and history access")
    parser.add_argument("prompt", nargs=argparse.REMAINDER, help="Prompt text, or 'reset'")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def reset_history() -> int:
    try:
        HistoryStore(history_path_from_env()).reset()
    except HistoryIOError as exc:
        report_error(str(exc))
        return EXIT_FAILURE
    console.print("[history cleared]", markup=False)
    return EXIT_OK


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    words: List[str] = args.prompt
    if not " ".join(words).strip():
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        if words == ["reset"]:
            return reset_history()

        settings = Settings.from_env()
        if args.model:
            settings.model_name = args.model

        client = OpenAIChatClient.from_settings(settings)
        session = Session(
            client,
            HistoryStore(settings.history_path),
            max_turns=settings.max_turns,
        )
        return ChatCLI(session, raw=args.raw).ask(" ".join(words))
    except ChatError as exc:
        report_error(str(exc))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        err_console.print("\n[interrupted]", markup=False)
        return EXIT_INTERRUPTED


def main() -> None:  # pragma: no cover
    sys.exit(run_cli())


if __name__ == "__main__":  # pragma: no cover
    main()
