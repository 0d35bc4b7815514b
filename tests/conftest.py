from __future__ import annotations

import io
import shutil
from pathlib import Path
from typing import Callable, Sequence

import pytest
from rich.console import Console

from coder.connectors.base import LLMConnector
from coder.errors import TransportError
from coder.models import Message, Response, TextBlock, Tool, ToolUseBlock
from coder.tools import default_registry

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git binary not available")


class ScriptedConnector(LLMConnector):
    """Replays canned replies and records every transcript it was sent."""

    def __init__(self, replies: Sequence[Response | Exception]) -> None:
        super().__init__(model="scripted")
        self.replies = list(replies)
        self.requests: list[tuple[Message, ...]] = []
        self.tools_seen: list[tuple[Tool, ...]] = []

    def complete(self, messages, tools=()):
        self.requests.append(tuple(messages))
        self.tools_seen.append(tuple(tools))
        if not self.replies:
            raise TransportError("script exhausted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def text_reply(text: str) -> Response:
    return Response(
        message=Message(role="assistant", content=(TextBlock(text=text),)),
        stop_reason="end_turn",
    )


def tool_reply(*calls: tuple[str, str, dict], text: str | None = None) -> Response:
    blocks: list = [TextBlock(text=text)] if text else []
    blocks += [ToolUseBlock(id=cid, name=name, input=args) for cid, name, args in calls]
    return Response(message=Message(role="assistant", content=tuple(blocks)), stop_reason="tool_use")


def scripted_input(lines: Sequence[str]) -> Callable[[], str | None]:
    """Input function yielding each line once, then None (end of input)."""
    pending = list(lines)

    def read() -> str | None:
        read.calls += 1
        return pending.pop(0) if pending else None

    read.calls = 0
    return read


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def registry():
    return default_registry()
