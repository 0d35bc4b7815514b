"""Connector conversions and error wrapping — fake clients, no network."""
from __future__ import annotations

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from coder.connectors import get_connector
from coder.connectors.anthropic import AnthropicConnector, _message_to_anthropic
from coder.connectors.ollama import OllamaConnector
from coder.errors import ConfigError, TransportError
from coder.models import Message, TextBlock, ToolResultBlock, ToolUseBlock


class _FakeMessages:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.reply


def _anthropic_client(reply=None, error=None):
    return SimpleNamespace(messages=_FakeMessages(reply, error))


def test_unknown_connector_is_config_error():
    with pytest.raises(ConfigError, match="Unknown connector 'gpt'"):
        get_connector("gpt", "x")


def test_message_to_anthropic_blocks():
    msg = Message(role="user", content=(
        ToolResultBlock(tool_use_id="t1", content="boom", is_error=True),
    ))
    assert _message_to_anthropic(msg) == {
        "role": "user",
        "content": [{"type": "tool_result", "tool_use_id": "t1", "content": "boom", "is_error": True}],
    }


def test_anthropic_complete_parses_reply(registry):
    reply = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Reading it."),
            SimpleNamespace(type="tool_use", id="toolu_1", name="read_file", input={"path": "a.txt"}),
        ],
        stop_reason="tool_use",
        model="claude-test",
    )
    client = _anthropic_client(reply)
    connector = AnthropicConnector(model="claude-test", max_tokens=512, client=client)

    response = connector.complete([Message.user_text("read a.txt")], tools=registry.schemas)

    sent = client.messages.kwargs
    assert sent["model"] == "claude-test"
    assert sent["max_tokens"] == 512
    assert sent["messages"] == [{"role": "user", "content": [{"type": "text", "text": "read a.txt"}]}]
    assert sent["tools"][0]["name"] == "read_file"
    assert "input_schema" in sent["tools"][0]

    assert response.stop_reason == "tool_use"
    assert [b.type for b in response.message.content] == ["text", "tool_use"]
    assert response.message.tool_uses[0] == ToolUseBlock(id="toolu_1", name="read_file", input={"path": "a.txt"})


def test_anthropic_api_error_becomes_transport_error():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = anthropic.APIConnectionError(request=request)
    connector = AnthropicConnector(model="m", client=_anthropic_client(error=error))
    with pytest.raises(TransportError):
        connector.complete([Message.user_text("hi")])


def test_anthropic_missing_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_AUTH_TOKEN", raising=False)
    with pytest.raises(TransportError, match="ANTHROPIC_API_KEY"):
        AnthropicConnector(model="m").complete([Message.user_text("hi")])


def test_ollama_flattens_tool_turns():
    connector = OllamaConnector(model="qwen", client=object())
    transcript = [
        Message.user_text("list"),
        Message(role="assistant", content=(
            TextBlock(text="ok"),
            ToolUseBlock(id="1", name="list_files", input={}),
            ToolUseBlock(id="2", name="read_file", input='{"path": "a"}'),
        )),
        Message(role="user", content=(
            ToolResultBlock(tool_use_id="1", content="[]"),
            ToolResultBlock(tool_use_id="2", content="nope", is_error=True),
        )),
    ]
    flat = connector._messages_to_ollama(transcript)
    assert flat[0] == {"role": "user", "content": "list"}
    assert flat[1]["tool_calls"][1]["function"] == {"name": "read_file", "arguments": {"path": "a"}}
    assert flat[2:] == [
        {"role": "tool", "content": "[]"},
        {"role": "tool", "content": "Error: nope"},
    ]


def test_ollama_assigns_call_ids():
    calls = [SimpleNamespace(function=SimpleNamespace(name="git_status", arguments={}))]
    client = SimpleNamespace(chat=lambda **kw: SimpleNamespace(
        message=SimpleNamespace(content="", tool_calls=calls * 2)
    ))
    response = OllamaConnector(model="qwen", client=client).complete([Message.user_text("status")])
    ids = [b.id for b in response.message.tool_uses]
    assert len(ids) == 2 and ids[0] != ids[1]
    assert response.stop_reason == "tool_use"


def test_anthropic_skips_empty_assistant_turns():
    reply = SimpleNamespace(content=[], stop_reason="end_turn", model="m")
    client = _anthropic_client(reply)
    connector = AnthropicConnector(model="m", client=client)
    transcript = [
        Message.user_text("hi"),
        Message(role="assistant", content=()),
        Message.user_text("still there?"),
    ]

    response = connector.complete(transcript)

    assert [m["role"] for m in client.messages.kwargs["messages"]] == ["user", "user"]
    assert response.message.content == ()


def test_ollama_timeout_becomes_transport_error():
    def chat(**kwargs):
        raise httpx.ReadTimeout("timed out")

    connector = OllamaConnector(model="qwen", client=SimpleNamespace(chat=chat))
    with pytest.raises(TransportError, match="timed out"):
        connector.complete([Message.user_text("hi")])
