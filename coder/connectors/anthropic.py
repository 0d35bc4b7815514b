from __future__ import annotations

import os
from typing import Any, Sequence

import anthropic

from coder.connectors.base import LLMConnector
from coder.errors import TransportError
from coder.logger import get_logger
from coder.models import Message, Response, TextBlock, Tool, ToolUseBlock

log = get_logger("connectors.anthropic")


def _tool_to_anthropic(tool: Tool) -> dict[str, Any]:
    return {
        "name": tool.name,
        "description": tool.description,
        "input_schema": tool.parameters,
    }


def _block_to_anthropic(block: Any) -> dict[str, Any]:
    if block.type == "text":
        return {"type": "text", "text": block.text}
    if block.type == "tool_use":
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    if block.type == "tool_result":
        return {
            "type": "tool_result",
            "tool_use_id": block.tool_use_id,
            "content": block.content,
            "is_error": block.is_error,
        }
    raise TypeError(f"unsupported content block type {block.type!r}")


def _message_to_anthropic(message: Message) -> dict[str, Any]:
    return {
        "role": message.role,
        "content": [_block_to_anthropic(b) for b in message.content],
    }


def _response_from_anthropic(reply: Any) -> Response:
    blocks: list[TextBlock | ToolUseBlock] = []
    for block in reply.content:
        if block.type == "text":
            blocks.append(TextBlock(text=block.text))
        elif block.type == "tool_use":
            blocks.append(ToolUseBlock(id=block.id, name=block.name, input=block.input))
        else:
            log.debug("ignoring %s block in model reply", block.type)
    return Response(
        message=Message(role="assistant", content=tuple(blocks)),
        stop_reason=reply.stop_reason or "",
        model=reply.model or "",
    )


class AnthropicConnector(LLMConnector):
    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not (os.environ.get("ANTHROPIC_API_KEY") or os.environ.get("ANTHROPIC_AUTH_TOKEN")):
                raise TransportError("ANTHROPIC_API_KEY is not set")
            self._client = anthropic.Anthropic()
        return self._client

    def complete(self, messages: Sequence[Message], tools: Sequence[Tool] = ()) -> Response:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            # the API rejects turns without content blocks
            "messages": [_message_to_anthropic(m) for m in messages if m.content],
        }
        if tools:
            kwargs["tools"] = [_tool_to_anthropic(t) for t in tools]

        log.debug("messages.create model=%s turns=%d", self.model, len(messages))
        try:
            reply = self.client.messages.create(**kwargs)
        except anthropic.AnthropicError as e:
            raise TransportError(str(e)) from e
        return _response_from_anthropic(reply)
