"""Exception hierarchy for coder.

Only ``TransportError`` ends a session. Every ``ToolError`` is turned into an
error-flagged tool result and handed back to the model.
"""
from __future__ import annotations


class CoderError(Exception):
    """Base class for all coder errors."""


class ConfigError(CoderError):
    """Invalid startup configuration (duplicate tool names, unknown connector)."""


class TransportError(CoderError):
    """The model transport failed. Fatal to the run."""


class ToolError(CoderError):
    """A recoverable failure reported back to the model as a tool result."""


class ToolValidationError(ToolError):
    """Malformed or missing tool arguments."""


class ToolExecutionError(ToolError):
    """The underlying filesystem or git primitive failed."""


class UnknownToolError(ToolError):
    """The model asked for a tool name that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__("tool not found")
        self.name = name
