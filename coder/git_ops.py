from __future__ import annotations

from pathlib import Path

import git
from git import Actor
from git.remote import PushInfo
from pydantic import BaseModel, Field

from coder.errors import ToolExecutionError, ToolValidationError

AGENT_ACTOR = Actor("AI Agent", "ai@agent.local")


class NoInput(BaseModel):
    pass


class GitAddInput(BaseModel):
    path: str = Field(description="Path of file(s) to stage. Use '.' for all files")


class GitCommitInput(BaseModel):
    message: str = Field(description="Commit message")


def open_repo(path: Path | str = ".") -> git.Repo:
    """Open the repository at the working directory (no parent search)."""
    try:
        return git.Repo(path)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
        raise ToolExecutionError(f"failed to open repository: {e}") from e


def git_status(args: NoInput) -> str:
    repo = open_repo()
    try:
        status = repo.git.status("--short")
    except git.GitCommandError as e:
        raise ToolExecutionError(f"failed to get status: {e}") from e
    return status or "nothing to commit, working tree clean"


def git_add(args: GitAddInput) -> str:
    if not args.path:
        raise ToolValidationError("path cannot be empty")
    repo = open_repo()
    try:
        repo.git.add(args.path)
    except git.GitCommandError as e:
        raise ToolExecutionError(f"failed to add files: {e}") from e
    return f"Successfully staged changes for: {args.path}"


def git_commit(args: GitCommitInput) -> str:
    if not args.message:
        raise ToolValidationError("commit message cannot be empty")
    repo = open_repo()
    # git commit, not index.commit: MERGE_HEAD and the empty-commit check must apply
    try:
        with repo.git.custom_environment(
            GIT_COMMITTER_NAME=AGENT_ACTOR.name,
            GIT_COMMITTER_EMAIL=AGENT_ACTOR.email,
        ):
            repo.git.commit("-m", args.message, author=f"{AGENT_ACTOR.name} <{AGENT_ACTOR.email}>")
    except (git.GitCommandError, ValueError) as e:
        raise ToolExecutionError(f"failed to commit: {e}") from e
    return f"Successfully created commit: {repo.head.commit.hexsha}"


def git_push(args: NoInput) -> str:
    repo = open_repo()
    try:
        infos = repo.remote().push()
    except (git.GitCommandError, ValueError) as e:
        raise ToolExecutionError(f"failed to push: {e}") from e

    failed = [i for i in infos if i.flags & (PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED)]
    if failed:
        summary = "; ".join(f"{i.remote_ref_string}: {i.summary.strip()}" for i in failed)
        raise ToolExecutionError(f"failed to push: {summary}")

    if all(i.flags & PushInfo.UP_TO_DATE for i in infos):
        return "Everything up-to-date"
    return "Successfully pushed changes to remote"


def git_pull(args: NoInput) -> str:
    repo = open_repo()
    before = _head_sha(repo)
    try:
        repo.remote().pull()
    except (git.GitCommandError, ValueError) as e:
        raise ToolExecutionError(f"failed to pull: {e}") from e

    if _head_sha(repo) == before:
        return "Already up-to-date"
    return "Successfully pulled changes from remote"


def _head_sha(repo: git.Repo) -> str | None:
    if not repo.head.is_valid():
        return None
    return repo.head.commit.hexsha
