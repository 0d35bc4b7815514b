from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] | str = Field(default_factory=dict)  # raw payload, dict or JSON text


class ToolResultBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: bool = False


ContentBlock = Annotated[
    Union[TextBlock, ToolUseBlock, ToolResultBlock],
    Field(discriminator="type"),
]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: tuple[ContentBlock, ...] = ()

    @classmethod
    def user_text(cls, text: str) -> Message:
        return cls(role="user", content=(TextBlock(text=text),))

    @property
    def text_blocks(self) -> list[TextBlock]:
        return [b for b in self.content if b.type == "text"]

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if b.type == "tool_use"]

    @property
    def tool_results(self) -> list[ToolResultBlock]:
        return [b for b in self.content if b.type == "tool_result"]


class Tool(BaseModel):
    name: str
    description: str
    parameters: dict[str, Any]  # JSON Schema object


class Response(BaseModel):
    message: Message
    stop_reason: str  # "end_turn" | "tool_use" | "max_tokens" | ...
    model: str = ""
