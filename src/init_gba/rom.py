"""ROM header metadata (title and game code)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Protocol

_TITLE_DISALLOWED = re.compile(r"[^A-Z0-9 ]+")
_CODE_DISALLOWED = re.compile(r"[^A-Z0-9]+")


class Prompts(Protocol):
    def confirm(self, message: str, default: bool = False) -> bool: ...

    def text(self, message: str, default: Optional[str] = None) -> str: ...


@dataclass(slots=True, frozen=True)
class RomMetadata:
    code: str
    title: str


def normalize_rom_title(value: str) -> str:
    """Upper-case, keep letters, digits and spaces, max 12 characters."""

    cleaned = _TITLE_DISALLOWED.sub("", value.upper()).strip()
    return (cleaned or "GBA")[:12]


def normalize_rom_code(value: str) -> str:
    """Upper-case alphanumerics, padded with ``G`` to exactly 4 characters."""

    cleaned = _CODE_DISALLOWED.sub("", value.upper())
    return (cleaned or "GAME").ljust(4, "G")[:4]


def resolve_rom_metadata(
    default_code: str,
    default_title: str,
    rom_code: Optional[str],
    rom_title: Optional[str],
    non_interactive: bool,
    prompts: Prompts,
) -> Optional[RomMetadata]:
    """Work out the ROM title and code.

    Flag values win outright. Without flags, non-interactive runs return None
    so the Makefile falls back to values derived from the project id, and
    interactive runs ask whether to set them at all before prompting.
    """

    if rom_code or rom_title:
        return RomMetadata(
            code=normalize_rom_code(rom_code or default_code),
            title=normalize_rom_title(rom_title or default_title),
        )

    if non_interactive:
        return None

    if not prompts.confirm("Set ROM metadata (title/code)?", False):
        return None

    title = prompts.text("ROM title", default_title)
    code = prompts.text("ROM code", default_code)
    return RomMetadata(code=normalize_rom_code(code), title=normalize_rom_title(title))


__all__ = [
    "RomMetadata",
    "normalize_rom_code",
    "normalize_rom_title",
    "resolve_rom_metadata",
]
