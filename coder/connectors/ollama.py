from __future__ import annotations

import json
import uuid
from typing import Any, Sequence

import httpx
import ollama

from coder.connectors.base import LLMConnector
from coder.errors import TransportError
from coder.models import Message, Response, TextBlock, Tool, ToolUseBlock


def _tool_to_ollama(tool: Tool) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        },
    }


def _arguments(raw: dict[str, Any] | str) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class OllamaConnector(LLMConnector):
    @property
    def client(self) -> ollama.Client:
        if self._client is None:
            self._client = ollama.Client()
        return self._client

    def complete(self, messages: Sequence[Message], tools: Sequence[Tool] = ()) -> Response:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": self._messages_to_ollama(messages),
            "options": {"num_predict": self.max_tokens},
        }
        if tools:
            kwargs["tools"] = [_tool_to_ollama(t) for t in tools]

        try:
            response = self.client.chat(**kwargs)
        except (ollama.ResponseError, ollama.RequestError, httpx.HTTPError, ConnectionError) as e:
            raise TransportError(str(e)) from e
        ollama_msg = response.message

        blocks: list[TextBlock | ToolUseBlock] = []
        if ollama_msg.content:
            blocks.append(TextBlock(text=ollama_msg.content))
        for tc in ollama_msg.tool_calls or []:
            # Ollama .arguments is usually a dict already, do not json.loads() it blindly
            args = tc.function.arguments
            if not isinstance(args, (dict, str)):
                args = dict(args)
            blocks.append(ToolUseBlock(
                id=str(uuid.uuid4()),  # Ollama doesn't assign IDs
                name=tc.function.name,
                input=args,
            ))

        stop_reason = "tool_use" if any(b.type == "tool_use" for b in blocks) else "end_turn"
        return Response(
            message=Message(role="assistant", content=tuple(blocks)),
            stop_reason=stop_reason,
            model=self.model,
        )

    def _messages_to_ollama(self, messages: Sequence[Message]) -> list[dict[str, Any]]:
        """Flatten block-structured turns into Ollama chat messages.

        A user turn carrying tool results becomes one ``role: tool`` message per
        result, in the order of the calls they answer.
        """
        result: list[dict[str, Any]] = []
        for msg in messages:
            text = "".join(b.text for b in msg.text_blocks)
            if msg.tool_results:
                for r in msg.tool_results:
                    content = f"Error: {r.content}" if r.is_error else r.content
                    result.append({"role": "tool", "content": content})
                if text:
                    result.append({"role": "user", "content": text})
            elif msg.tool_uses:
                result.append({
                    "role": "assistant",
                    "content": text,
                    "tool_calls": [
                        {
                            "function": {
                                "name": tc.name,
                                "arguments": _arguments(tc.input),
                            }
                        }
                        for tc in msg.tool_uses
                    ],
                })
            else:
                result.append({"role": msg.role, "content": text})
        return result
