"""Thin wrapper around subprocess for the external tools init-gba drives."""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from loguru import logger

from .errors import CommandError


@dataclass(slots=True, frozen=True)
class CommandResult:
    stdout: str
    stderr: str


def run(
    command: str,
    args: Sequence[str] = (),
    *,
    cwd: Optional[Path | str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> CommandResult:
    """Run ``command`` to completion and return its captured output.

    Raises :class:`CommandError` when the process exits non-zero or cannot be
    started at all.
    """

    argv = [command, *args]
    logger.debug("Running {} (cwd={})", argv, cwd or ".")
    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.debug("Could not start {}: {}", command, exc)
        raise CommandError(command, args, None, str(exc)) from exc

    if completed.returncode != 0:
        logger.debug("{} exited with {}: {}", command, completed.returncode, completed.stderr.strip())
        raise CommandError(command, args, completed.returncode, completed.stderr)
    return CommandResult(stdout=completed.stdout, stderr=completed.stderr)


def command_exists(name: str) -> bool:
    """Return True if ``name`` resolves to an executable on PATH."""

    if sys.platform == "win32":
        checker, args = "where", [name]
    else:
        # ``command`` is a shell builtin, so it needs a shell to run in.
        checker, args = "sh", ["-c", 'command -v "$1"', "sh", name]
    try:
        run(checker, args)
    except CommandError:
        return False
    return True


__all__ = ["CommandResult", "run", "command_exists"]
