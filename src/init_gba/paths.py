"""Path helpers shared by the create and doctor commands."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from .errors import AbortedByUser
from .prompts import PromptSession

BUTANO_MAKEFILE = "butano.mak"
NESTED_LIBRARY_DIR = "butano"
COMMON_DIR = "common"

_UNSAFE_CHARACTERS = re.compile(r"[^A-Za-z0-9._/\-\\]")
_PACKAGE_DIR = Path(__file__).resolve().parent


def expand_home(path: str, home: Optional[Path] = None) -> str:
    """Expand a leading ``~/`` to the home directory."""

    home_dir = str(home if home is not None else Path.home())
    if path == "~":
        return home_dir
    if path.startswith("~/"):
        return os.path.join(home_dir, path[2:])
    return path


def absolute_path(path: str, cwd: Path, home: Optional[Path] = None) -> Path:
    """Home-expand ``path`` and anchor it at ``cwd`` when relative."""

    expanded = Path(expand_home(path, home))
    if not expanded.is_absolute():
        expanded = cwd / expanded
    return Path(os.path.normpath(expanded))


def default_butano_dir(env: Mapping[str, str], home: Optional[Path] = None) -> str:
    """Return ``$BUTANO_PATH`` or ``~/Documents/butano``."""

    override = env.get("BUTANO_PATH")
    if override:
        return override
    home_dir = home if home is not None else Path.home()
    return str(home_dir / "Documents" / "butano")


def has_unsafe_path_characters(path: str) -> bool:
    return bool(_UNSAFE_CHARACTERS.search(path))


def resolve_butano_lib_dir(base: Path) -> Path:
    """Locate the directory holding ``butano.mak``, directly or one level down."""

    if (base / BUTANO_MAKEFILE).exists():
        return base
    nested = base / NESTED_LIBRARY_DIR
    if (nested / BUTANO_MAKEFILE).exists():
        return nested
    return base


def resolve_butano_common_dir(lib_dir: Path) -> Optional[Path]:
    """Find Butano's shared ``common`` assets next to or inside ``lib_dir``."""

    for candidate in (lib_dir.parent / COMMON_DIR, lib_dir / COMMON_DIR):
        if candidate.is_dir():
            return candidate
    return None


def normalize_relative_path(path: str) -> str:
    if path in ("", "."):
        return ""
    return path.replace(os.sep, "/").replace("\\", "/")


def ensure_empty_target(target: Path, force: bool, prompts: PromptSession) -> None:
    """Make sure ``target`` is absent or empty, removing it with consent."""

    if not target.exists():
        return
    if target.is_dir() and not any(target.iterdir()):
        return

    if not force:
        overwrite = prompts.confirm(
            f"Target directory {target} is not empty. Overwrite?", False
        )
        if not overwrite:
            raise AbortedByUser("Target directory is not empty.")

    logger.info("Removing existing {}", target)
    if target.is_dir():
        shutil.rmtree(target)
    else:
        target.unlink()


def bundled_example_template() -> Path:
    """Directory of the example sources shipped with init-gba."""

    return _PACKAGE_DIR / "assets" / "basic-template"


__all__ = [
    "BUTANO_MAKEFILE",
    "absolute_path",
    "bundled_example_template",
    "default_butano_dir",
    "ensure_empty_target",
    "expand_home",
    "has_unsafe_path_characters",
    "normalize_relative_path",
    "resolve_butano_common_dir",
    "resolve_butano_lib_dir",
]
