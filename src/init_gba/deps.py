"""devkitPro toolchain detection."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from loguru import logger
from rich.console import Console

from . import process
from .models import DependencyStatus
from .prompts import PromptSession

DEVKITPRO_ENV = "DEVKITPRO"
DEVKITARM_ENV = "DEVKITARM"
ARM_GCC = "arm-none-eabi-gcc"
DEVKITPRO_PACMAN = "devkitpro-pacman"
GETTING_STARTED_URL = "https://devkitpro.org/wiki/Getting_Started"


def detect_devkitpro(env: Mapping[str, str]) -> bool:
    devkitpro = env.get(DEVKITPRO_ENV)
    if devkitpro and Path(devkitpro).exists():
        logger.debug("{} found at {}", DEVKITPRO_ENV, devkitpro)
        return True
    if process.command_exists(ARM_GCC):
        return True
    return process.command_exists(DEVKITPRO_PACMAN)


def handle_dependencies(
    prompts: PromptSession, console: Console, env: Mapping[str, str]
) -> DependencyStatus:
    """Check for devkitPro and point the user at install instructions if missing."""

    if detect_devkitpro(env):
        return DependencyStatus.DETECTED

    if not prompts.confirm("devkitPro was not detected. Install it now?", False):
        return DependencyStatus.MISSING_SKIPPED

    console.print("Automatic devkitPro installation is not implemented yet.")
    console.print(f"Please follow the official instructions: {GETTING_STARTED_URL}")
    return DependencyStatus.MISSING_INSTALL


__all__ = ["detect_devkitpro", "handle_dependencies"]
