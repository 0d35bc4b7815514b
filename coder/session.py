from __future__ import annotations

from typing import Callable

from rich.console import Console

from coder import renderer
from coder.connectors.base import LLMConnector
from coder.logger import get_logger
from coder.models import Message, Response, ToolResultBlock
from coder.tools import ToolRegistry
from coder.transcript import Transcript

log = get_logger("session")


class Agent:
    """
    Turn controller for one conversation.

    Alternates between waiting for the user and resuming after tool execution:
    input is read only when the latest model turn asked for no tools.
    """

    def __init__(
        self,
        connector: LLMConnector,
        registry: ToolRegistry,
        get_user_message: Callable[[], str | None],
        console: Console | None = None,
    ) -> None:
        self.connector = connector
        self.registry = registry
        self.get_user_message = get_user_message
        self.console = console or renderer.console
        self.transcript = Transcript()
        self.model_turns = 0
        self.tool_calls = 0

    def run(self) -> None:
        """
        Drive the conversation until the input source is exhausted.
        TransportError propagates and ends the run.
        """
        read_user_input = True
        while True:
            if read_user_input:
                text = self.get_user_message()
                if text is None:
                    log.info("input closed after %d model turn(s)", self.model_turns)
                    break
                self.transcript.append(Message.user_text(text))

            results = self.step()
            if not results:
                read_user_input = True
                continue

            read_user_input = False
            self.transcript.append(Message(role="user", content=tuple(results)))

    def step(self) -> list[ToolResultBlock]:
        """One model call: show its text, run its tool calls, return their results."""
        response = self._call_model()
        message = response.message
        self.transcript.append(message)
        self.model_turns += 1

        for block in message.text_blocks:
            renderer.render_assistant_text(block.text, self.console)

        results: list[ToolResultBlock] = []
        for call in message.tool_uses:
            renderer.render_tool_call(call, self.console)
            result = self.registry.dispatch(call)
            if result.is_error:
                renderer.render_tool_error(result, self.console)
            results.append(result)
        self.tool_calls += len(results)
        return results

    def _call_model(self) -> Response:
        log.debug("model call with %d message(s)", len(self.transcript))
        with self.console.status("[dim]thinking...[/dim]", spinner="dots"):
            response = self.connector.complete(self.transcript.messages, tools=self.registry.schemas)
        log.debug("stop_reason=%s blocks=%d", response.stop_reason, len(response.message.content))
        return response
