"""Text-patch engine behind the ``edit_file`` tool."""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from coder.errors import ToolExecutionError, ToolValidationError


class EditFileInput(BaseModel):
    path: str = Field(description="The path to the file")
    old_str: str = Field(description="Text to search for - must match exactly")
    new_str: str = Field(description="Text to replace old_str with")


def replace_all(content: str, old_str: str, new_str: str) -> str:
    """Replace every non-overlapping literal occurrence, scanning left to right.

    Raises ToolExecutionError when ``old_str`` is non-empty and absent, so an
    edit that changes nothing is reported instead of silently accepted.
    """
    updated = content.replace(old_str, new_str)
    if updated == content and old_str != "":
        raise ToolExecutionError("old_str not found in file")
    return updated


def edit_file(args: EditFileInput) -> str:
    if not args.path or args.old_str == args.new_str:
        raise ToolValidationError("invalid input parameters")

    target = Path(args.path)
    try:
        raw = target.read_bytes()
    except FileNotFoundError:
        if args.old_str == "":
            return create_file(args.path, args.new_str)
        raise

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ToolExecutionError(f"cannot edit non-UTF-8 file {args.path}: {e}") from e

    target.write_bytes(replace_all(content, args.old_str, args.new_str).encode("utf-8"))
    return "OK"


def create_file(path: str, content: str) -> str:
    target = Path(path)
    parent = target.parent
    if parent != Path("."):
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ToolExecutionError(f"failed to create directory: {e}") from e

    try:
        target.write_bytes(content.encode("utf-8"))
    except OSError as e:
        raise ToolExecutionError(f"failed to create file: {e}") from e

    return f"Successfully created file {path}"
