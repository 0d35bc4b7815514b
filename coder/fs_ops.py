from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, Field

from coder.errors import ToolExecutionError, ToolValidationError


class ReadFileInput(BaseModel):
    path: str = Field(description="The relative path of a file in the working directory.")


class ListFilesInput(BaseModel):
    path: str = Field(
        default="",
        description=(
            "Optional relative path to list files from. "
            "Defaults to current directory if not provided."
        ),
    )


class MakeDirInput(BaseModel):
    path: str = Field(description="The relative path of the directory to create")


class DeleteDirInput(BaseModel):
    path: str = Field(description="The relative path of the directory to delete")


def read_file(args: ReadFileInput) -> str:
    raw = Path(args.path).read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ToolExecutionError(f"{args.path} is not a UTF-8 text file: {e}") from e


def list_files(args: ListFilesInput) -> str:
    """JSON array of every entry under the directory, directories suffixed with '/'."""
    root = Path(args.path or ".")
    root.lstat()  # missing path surfaces as FileNotFoundError
    if not _is_real_dir(root):
        return "[]"
    return json.dumps(list(_walk(root, root)))


def _walk(directory: Path, base: Path) -> Iterator[str]:
    # lexical, depth-first, parents before children
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        rel = entry.relative_to(base).as_posix()
        if _is_real_dir(entry):
            yield rel + "/"
            yield from _walk(entry, base)
        else:
            yield rel


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def make_dir(args: MakeDirInput) -> str:
    if not args.path:
        raise ToolValidationError("path cannot be empty")
    try:
        Path(args.path).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ToolExecutionError(f"failed to create directory: {e}") from e
    return f"Successfully created directory {args.path}"


def delete_dir(args: DeleteDirInput) -> str:
    if not args.path:
        raise ToolValidationError("path cannot be empty")

    target = Path(args.path)
    try:
        target.lstat()
    except FileNotFoundError:
        raise ToolExecutionError(f"directory does not exist: {args.path}") from None
    except OSError as e:
        raise ToolExecutionError(f"error checking directory: {e}") from e

    try:
        if _is_real_dir(target):
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError as e:
        raise ToolExecutionError(f"failed to delete directory: {e}") from e

    return f"Successfully deleted directory {args.path} and all its contents"
