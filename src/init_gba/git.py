"""Git operations used to fetch Butano and initialise new projects."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console

from . import process
from .errors import CommandError, MissingToolError
from .prompts import PromptSession

FALLBACK_BRANCH = "main"
SECONDARY_BRANCH = "master"
_REMOTE_REF_PREFIX = "refs/remotes/origin/"


def is_git_repo(directory: Path) -> bool:
    return (directory / ".git").exists()


def get_local_head(directory: Path) -> Optional[str]:
    """Commit hash of HEAD, or None when it cannot be read."""

    try:
        result = process.run("git", ["rev-parse", "HEAD"], cwd=directory)
    except CommandError:
        return None
    return result.stdout.strip() or None


def get_remote_head(directory: Path) -> Optional[str]:
    """Commit hash of ``origin``'s HEAD, or None when it cannot be read."""

    try:
        result = process.run("git", ["ls-remote", "origin", "HEAD"], cwd=directory)
    except CommandError:
        return None
    fields = result.stdout.split()
    return fields[0] if fields else None


def get_default_remote_branch(directory: Path) -> Optional[str]:
    try:
        result = process.run(
            "git", ["symbolic-ref", _REMOTE_REF_PREFIX + "HEAD"], cwd=directory
        )
    except CommandError:
        return None
    ref = result.stdout.strip()
    if not ref.startswith(_REMOTE_REF_PREFIX):
        return None
    return ref[len(_REMOTE_REF_PREFIX):] or None


def clone_repo(url: str, directory: Path) -> None:
    process.run("git", ["clone", "--depth", "1", url, str(directory)])


def update_repo(directory: Path) -> None:
    """Fetch ``origin`` and hard-reset to its default branch."""

    process.run("git", ["fetch", "--depth", "1", "origin"], cwd=directory)
    branch = get_default_remote_branch(directory) or FALLBACK_BRANCH
    try:
        process.run("git", ["reset", "--hard", f"origin/{branch}"], cwd=directory)
    except CommandError:
        logger.debug("Reset to origin/{} failed, trying origin/{}", branch, SECONDARY_BRANCH)
        process.run("git", ["reset", "--hard", f"origin/{SECONDARY_BRANCH}"], cwd=directory)


def ensure_git_available() -> None:
    if not process.command_exists("git"):
        raise MissingToolError("git")


def init_repository(directory: Path) -> None:
    process.run("git", ["init"], cwd=directory)


def maybe_init_git(target: Path, prompts: PromptSession, console: Console) -> bool:
    """Offer to run ``git init`` in the new project."""

    if not prompts.confirm("Initialize a git repository?", False):
        return False
    ensure_git_available()
    init_repository(target)
    console.print("Initialized git repository.")
    return True


__all__ = [
    "clone_repo",
    "ensure_git_available",
    "get_default_remote_branch",
    "get_local_head",
    "get_remote_head",
    "init_repository",
    "is_git_repo",
    "maybe_init_git",
    "update_repo",
]
