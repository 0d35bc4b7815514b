from __future__ import annotations

from typing import Iterator

from coder.models import Message


class Transcript:
    """Append-only history of the conversation turns."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        if self._messages and message.tool_results:
            previous = self._messages[-1]
            expected = {b.id for b in previous.tool_uses}
            got = {b.tool_use_id for b in message.tool_results}
            if expected != got:
                raise ValueError(
                    f"tool results {sorted(got)} do not match tool calls {sorted(expected)}"
                )
        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
