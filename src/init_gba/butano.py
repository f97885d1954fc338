"""Download or update the Butano library."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger
from rich.console import Console

from . import git
from .errors import AbortedByUser
from .models import ButanoStatus
from .prompts import PromptSession


def _download(repo_url: str, butano_dir: Path, console: Console) -> None:
    butano_dir.parent.mkdir(parents=True, exist_ok=True)
    with console.status("Downloading Butano"):
        git.clone_repo(repo_url, butano_dir)
    logger.info("Butano downloaded to {}", butano_dir)


def ensure_butano(
    butano_dir: Path,
    repo_url: str,
    skip_update: bool,
    prompts: PromptSession,
    console: Console,
) -> ButanoStatus:
    """Make sure Butano exists at ``butano_dir``, offering to download or update it.

    git availability is checked before anything on disk is changed.
    """

    if not butano_dir.exists():
        if not prompts.confirm(f"Butano not found at {butano_dir}. Download now?", True):
            raise AbortedByUser("Butano is required to continue.")
        git.ensure_git_available()
        _download(repo_url, butano_dir, console)
        return ButanoStatus.DOWNLOADED

    if not git.is_git_repo(butano_dir):
        if not prompts.confirm("Butano folder is not a git repo. Re-download it?", False):
            return ButanoStatus.EXISTING
        git.ensure_git_available()
        shutil.rmtree(butano_dir)
        _download(repo_url, butano_dir, console)
        return ButanoStatus.DOWNLOADED

    if skip_update:
        return ButanoStatus.EXISTING

    if not prompts.confirm("Check Butano for updates?", True):
        return ButanoStatus.EXISTING

    git.ensure_git_available()
    local = git.get_local_head(butano_dir)
    remote = git.get_remote_head(butano_dir)
    if local is None or remote is None:
        console.print("Could not determine Butano version. Skipping update.")
        return ButanoStatus.UNKNOWN

    if local == remote:
        return ButanoStatus.UP_TO_DATE

    if not prompts.confirm("Butano is out of date. Update now?", False):
        return ButanoStatus.EXISTING

    with console.status("Updating Butano"):
        git.update_repo(butano_dir)
    logger.info("Butano updated to {}", remote)
    return ButanoStatus.UPDATED


__all__ = ["ensure_butano"]
