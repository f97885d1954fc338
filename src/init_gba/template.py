"""Template copying, token substitution and Makefile generation."""

from __future__ import annotations

import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader
from loguru import logger
from pathspec import PathSpec

from .rom import RomMetadata

TEXT_FILE_PATTERNS = [
    "*.bat",
    "*.c",
    "*.cmake",
    "*.cpp",
    "*.h",
    "*.hpp",
    "*.ini",
    "*.json",
    "*.mak",
    "*.markdown",
    "*.md",
    "*.mk",
    "*.sh",
    "*.toml",
    "*.txt",
    "*.yaml",
    "*.yml",
    "CMakeLists.txt",
    "Makefile",
]

_TEXT_FILES = PathSpec.from_lines("gitignore", TEXT_FILE_PATTERNS)
_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_WHITESPACE = re.compile(r"\s")

DEFAULT_ROM_TITLE = "GBA"
DEFAULT_ROM_CODE = "GAME"
ROM_CODE_FILLER = "G"
ROM_TITLE_LENGTH = 12
ROM_CODE_LENGTH = 4


@dataclass(slots=True)
class MakefileOptions:
    butano_dir: Path
    project_id: str
    target_dir: Path
    common_dir: Optional[str] = None
    rom_metadata: Optional[RomMetadata] = None


def _copy_dir(src: Path, dest: Path) -> None:
    dest.mkdir(parents=True, exist_ok=True)
    with os.scandir(src) as entries:
        for entry in entries:
            target = dest / entry.name
            if entry.is_dir(follow_symlinks=False):
                _copy_dir(Path(entry.path), target)
            elif entry.is_file(follow_symlinks=False):
                shutil.copy(entry.path, target)


def copy_template(src: Path, dest: Path) -> None:
    """Copy the template tree into ``dest``."""

    logger.debug("Copying template {} -> {}", src, dest)
    _copy_dir(src, dest)


def overlay_template(src: Path, dest: Path) -> None:
    """Copy ``src`` over an existing tree, keeping files it does not replace."""

    logger.debug("Overlaying {} onto {}", src, dest)
    _copy_dir(src, dest)


def remove_git_dir(directory: Path) -> bool:
    """Remove ``directory/.git`` if present. Returns True when it was removed."""

    git_dir = directory / ".git"
    if not git_dir.exists():
        return False
    try:
        if git_dir.is_dir() and not git_dir.is_symlink():
            shutil.rmtree(git_dir)
        else:
            git_dir.unlink()
    except OSError as exc:
        logger.debug("Could not remove {}: {}", git_dir, exc)
        return False
    return True


def list_files(directory: Path) -> List[Path]:
    files: List[Path] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                files.extend(list_files(Path(entry.path)))
            elif entry.is_file(follow_symlinks=False):
                files.append(Path(entry.path))
    return files


def list_all_paths(directory: Path) -> List[Path]:
    """Every file and directory below ``directory``, deepest paths first."""

    paths: List[Path] = []

    def _walk(current: Path) -> None:
        with os.scandir(current) as entries:
            for entry in entries:
                path = Path(entry.path)
                if entry.is_dir(follow_symlinks=False):
                    _walk(path)
                paths.append(path)

    _walk(directory)
    return sorted(paths, key=lambda path: len(str(path)), reverse=True)


def is_text_file(path: Path) -> bool:
    return _TEXT_FILES.match_file(path.name)


def is_binary(data: bytes) -> bool:
    return b"\x00" in data


def _replacement_pairs(token: str, replacement: str) -> List[tuple[str, str]]:
    pairs = [(token, replacement)]
    upper, lower = token.upper(), token.lower()
    if upper != token:
        pairs.append((upper, replacement.upper()))
    if lower != token:
        pairs.append((lower, replacement.lower()))
    return pairs


def replace_token_in_text_files(directory: Path, token: str, replacement: str) -> int:
    """Replace ``token`` in text files under ``directory``.

    The token is replaced as written, then upper-cased, then lower-cased.
    Files with a NUL byte or that are not valid UTF-8 are left alone. Returns
    the number of files whose contents changed.
    """

    pairs = _replacement_pairs(token, replacement)
    changed = 0
    for path in list_files(directory):
        if not is_text_file(path):
            continue
        data = path.read_bytes()
        if is_binary(data):
            continue
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping {}: not UTF-8", path)
            continue

        updated = content
        for needle, value in pairs:
            if needle:
                updated = updated.replace(needle, value)
        if updated != content:
            path.write_bytes(updated.encode("utf-8"))
            changed += 1
    logger.debug("Replaced '{}' in {} files", token, changed)
    return changed


def rename_paths_with_token(directory: Path, token: str, replacement: str) -> int:
    """Rename files and directories whose name contains ``token``."""

    if not token:
        return 0
    renamed = 0
    for path in list_all_paths(directory):
        if token not in path.name:
            continue
        new_path = path.with_name(path.name.replace(token, replacement))
        if new_path == path:
            continue
        path.rename(new_path)
        renamed += 1
    logger.debug("Renamed {} paths containing '{}'", renamed, token)
    return renamed


def to_project_id(name: str) -> str:
    normalized = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")[:64]
    return normalized or "project"


def to_rom_title(project_id: str) -> str:
    normalized = _NON_ALNUM.sub("", project_id).upper()
    return (normalized or DEFAULT_ROM_TITLE)[:ROM_TITLE_LENGTH]


def to_rom_code(project_id: str) -> str:
    normalized = _NON_ALNUM.sub("", project_id).upper()
    padded = (normalized or DEFAULT_ROM_CODE).ljust(ROM_CODE_LENGTH, ROM_CODE_FILLER)
    return padded[:ROM_CODE_LENGTH]


def escape_make_path(path: str) -> str:
    return _WHITESPACE.sub(lambda _: "\\ ", path)


def _environment() -> Environment:
    loader = FileSystemLoader(str(_TEMPLATES_DIR))
    return Environment(loader=loader, autoescape=False, keep_trailing_newline=True)


def makefile_contents(
    butano_dir: str | Path,
    project_id: str,
    common_dir: Optional[str] = None,
    rom_metadata: Optional[RomMetadata] = None,
) -> str:
    """Render the Butano project Makefile."""

    common = escape_make_path(common_dir) if common_dir else None

    def _with_common(name: str) -> str:
        return f"{name} {common}/{name}" if common else name

    template = _environment().get_template("Makefile.j2")
    return template.render(
        libbutano=escape_make_path(str(butano_dir)),
        sources="src",
        includes=_with_common("include"),
        graphics=_with_common("graphics"),
        audio=_with_common("audio"),
        dmg_audio=_with_common("dmg_audio"),
        rom_title=rom_metadata.title if rom_metadata else to_rom_title(project_id),
        rom_code=rom_metadata.code if rom_metadata else to_rom_code(project_id),
    )


def write_makefile(options: MakefileOptions) -> Path:
    path = options.target_dir / "Makefile"
    contents = makefile_contents(
        options.butano_dir,
        options.project_id,
        options.common_dir,
        options.rom_metadata,
    )
    path.write_text(contents, encoding="utf-8")
    logger.info("Wrote {}", path)
    return path


__all__ = [
    "MakefileOptions",
    "copy_template",
    "escape_make_path",
    "is_binary",
    "is_text_file",
    "list_all_paths",
    "list_files",
    "makefile_contents",
    "overlay_template",
    "remove_git_dir",
    "rename_paths_with_token",
    "replace_token_in_text_files",
    "to_project_id",
    "to_rom_code",
    "to_rom_title",
    "write_makefile",
]
