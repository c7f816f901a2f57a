"""Spinner shown while waiting for the model to answer."""
from __future__ import annotations

from yaspin import yaspin  # type: ignore

from .ansi import console


class Spinner:
    """Display a small spinner next to a prefix while work is done.

    Does nothing when stdout is not a terminal so piped output stays clean.
    """

    def __init__(self, prefix: str = ""):
        self._prefix = prefix
        self._started = False
        # spinner after the text so prefix stays at the start
        self._spinner = yaspin(text="", side="right")

    def start(self) -> None:
        if self._started or not console.is_terminal:
            return
        console.print(self._prefix, end="")
        console.file.flush()
        self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._spinner.stop()
        # wipe the prefix so the answer starts on a clean line
        console.print("\r" + " " * len(console.render_str(self._prefix)) + "\r", end="")
        console.file.flush()
        self._started = False

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
