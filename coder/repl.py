from __future__ import annotations

from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML


def make_input_reader(prompt_session: PromptSession | None = None) -> Callable[[], str | None]:
    """
    Build the blocking input function used by the agent loop.
    Returns one line per call, skipping blank lines; None once the user quits
    (Ctrl+D, Ctrl+C, /exit).
    """
    session: PromptSession = prompt_session or PromptSession()

    def read() -> str | None:
        while True:
            try:
                text = session.prompt(HTML("<ansiblue><b>You</b></ansiblue>: "))
            except (EOFError, KeyboardInterrupt):
                return None

            text = text.strip()
            if not text:
                continue
            if text.lower() in ("/exit", "/quit"):
                return None
            return text

    return read
