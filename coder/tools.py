from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from coder import fs_ops, git_ops, patch
from coder.errors import ConfigError, ToolError, ToolExecutionError, ToolValidationError, UnknownToolError
from coder.logger import get_logger
from coder.models import Tool, ToolResultBlock, ToolUseBlock

log = get_logger("tools")


class ToolDefinition(BaseModel):
    """A named tool: what the model sees (name, description, schema) and what runs."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str
    input_model: type[BaseModel]
    function: Callable[[Any], str]

    def to_tool(self) -> Tool:
        raw = self.input_model.model_json_schema()
        properties = {
            key: {k: v for k, v in prop.items() if k != "title"}
            for key, prop in raw.get("properties", {}).items()
        }
        return Tool(
            name=self.name,
            description=self.description,
            parameters={
                "type": "object",
                "properties": properties,
                "required": list(raw.get("required", [])),
            },
        )

    def parse(self, payload: Mapping[str, Any] | str | bytes | None) -> BaseModel:
        try:
            if isinstance(payload, (str, bytes)):
                return self.input_model.model_validate_json(payload or "{}")
            return self.input_model.model_validate(dict(payload or {}))
        except ValidationError as e:
            raise ToolValidationError(str(e)) from e

    def invoke(self, payload: Mapping[str, Any] | str | bytes | None) -> str:
        args = self.parse(payload)
        try:
            return self.function(args)
        except (OSError, ValueError) as e:
            raise ToolExecutionError(str(e)) from e


class ToolRegistry:
    """Immutable name → ToolDefinition table, built once at startup."""

    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        table: dict[str, ToolDefinition] = {}
        for d in definitions:
            if d.name in table:
                raise ConfigError(f"duplicate tool name '{d.name}'")
            table[d.name] = d
        self._table = MappingProxyType(table)
        self._schemas = tuple(d.to_tool() for d in table.values())

    @property
    def schemas(self) -> tuple[Tool, ...]:
        return self._schemas

    @property
    def names(self) -> list[str]:
        return list(self._table)

    def get(self, name: str) -> ToolDefinition | None:
        return self._table.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._table.values())

    def execute(self, name: str, payload: Mapping[str, Any] | str | bytes | None) -> str:
        """Run a tool by name. Raises ToolError subclasses on any recoverable failure."""
        definition = self._table.get(name)
        if definition is None:
            raise UnknownToolError(name)
        return definition.invoke(payload)

    def dispatch(self, call: ToolUseBlock) -> ToolResultBlock:
        """Execute one tool call and always return exactly one result for its id."""
        log.info("dispatch %s(%s)", call.name, format_arguments(call.input))
        try:
            output = self.execute(call.name, call.input)
        except UnknownToolError as e:
            log.warning("model requested unknown tool '%s'", e.name)
            return ToolResultBlock(tool_use_id=call.id, content=str(e), is_error=True)
        except ToolError as e:
            log.info("%s failed: %s", call.name, e)
            return ToolResultBlock(tool_use_id=call.id, content=str(e), is_error=True)
        return ToolResultBlock(tool_use_id=call.id, content=output, is_error=False)

    def dispatch_all(self, calls: Iterable[ToolUseBlock]) -> list[ToolResultBlock]:
        # one at a time, in request order
        return [self.dispatch(call) for call in calls]


def format_arguments(payload: Mapping[str, Any] | str | bytes | None) -> str:
    if isinstance(payload, bytes):
        return payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        return payload
    return json.dumps(payload or {}, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Tool table
# ---------------------------------------------------------------------------

READ_FILE = ToolDefinition(
    name="read_file",
    description=(
        "Read the contents of a given relative file path. Use this when you want "
        "to see what's inside a file. Do not use this with directory names."
    ),
    input_model=fs_ops.ReadFileInput,
    function=fs_ops.read_file,
)

LIST_FILES = ToolDefinition(
    name="list_files",
    description=(
        "List files and directories at a given path. "
        "If no path is provided, lists files in the current directory."
    ),
    input_model=fs_ops.ListFilesInput,
    function=fs_ops.list_files,
)

EDIT_FILE = ToolDefinition(
    name="edit_file",
    description=(
        "Make edits to a text file.\n"
        "Replaces every occurrence of 'old_str' with 'new_str' in the given file. "
        "'old_str' and 'new_str' MUST be different from each other. Include enough "
        "surrounding context in 'old_str' to pick out the text you mean.\n"
        "If the file specified with path doesn't exist and 'old_str' is empty, "
        "it will be created with 'new_str' as its content."
    ),
    input_model=patch.EditFileInput,
    function=patch.edit_file,
)

MAKE_DIR = ToolDefinition(
    name="make_dir",
    description=(
        "Creates a new directory at the specified path. "
        "If parent directories don't exist, they will be created as well."
    ),
    input_model=fs_ops.MakeDirInput,
    function=fs_ops.make_dir,
)

DELETE_DIR = ToolDefinition(
    name="delete_dir",
    description=(
        "Deletes a directory and all its contents recursively. "
        "Use with caution as this operation cannot be undone."
    ),
    input_model=fs_ops.DeleteDirInput,
    function=fs_ops.delete_dir,
)

GIT_STATUS = ToolDefinition(
    name="git_status",
    description="Show the working tree status, including staged, unstaged and untracked files",
    input_model=git_ops.NoInput,
    function=git_ops.git_status,
)

GIT_ADD = ToolDefinition(
    name="git_add",
    description="Stage changes for commit",
    input_model=git_ops.GitAddInput,
    function=git_ops.git_add,
)

GIT_COMMIT = ToolDefinition(
    name="git_commit",
    description="Commit staged changes",
    input_model=git_ops.GitCommitInput,
    function=git_ops.git_commit,
)

GIT_PUSH = ToolDefinition(
    name="git_push",
    description="Push commits to remote repository",
    input_model=git_ops.NoInput,
    function=git_ops.git_push,
)

GIT_PULL = ToolDefinition(
    name="git_pull",
    description="Pull changes from remote repository",
    input_model=git_ops.NoInput,
    function=git_ops.git_pull,
)

TOOLS: tuple[ToolDefinition, ...] = (
    READ_FILE,
    LIST_FILES,
    EDIT_FILE,
    MAKE_DIR,
    DELETE_DIR,
    GIT_STATUS,
    GIT_ADD,
    GIT_COMMIT,
    GIT_PUSH,
    GIT_PULL,
)


def default_registry() -> ToolRegistry:
    return ToolRegistry(TOOLS)
