"""Option models, settings file loading and the run context."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_BUTANO_REPO = "https://github.com/GValiente/butano.git"
DEFAULT_TEMPLATE_TOKEN = "template"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class Settings(BaseModel):
    """Defaults read from an optional YAML settings file."""

    butano_path: Optional[str] = None
    butano_repo: Optional[str] = None
    template_token: Optional[str] = None

    @field_validator("butano_path", "butano_repo", "template_token", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)


class CreateOptions(BaseModel):
    """Flags accepted by ``init-gba create``."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    dir: Optional[str] = None
    butano_path: Optional[str] = None
    butano_repo: str = DEFAULT_BUTANO_REPO
    template_path: Optional[str] = None
    template_token: str = DEFAULT_TEMPLATE_TOKEN
    rom_code: Optional[str] = None
    rom_title: Optional[str] = None
    force: bool = False
    non_interactive: bool = False
    yes: bool = False
    skip_deps: bool = False
    skip_git: bool = False
    skip_makefile: bool = False
    skip_update: bool = False

    @field_validator(
        "name", "dir", "butano_path", "template_path", "rom_code", "rom_title", mode="before"
    )
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("template_token")
    @classmethod
    def _require_token(cls, value: str) -> str:
        if not value:
            raise ValueError("Template token cannot be empty")
        return value

    @field_validator("butano_repo")
    @classmethod
    def _require_repo(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Butano repository URL cannot be empty")
        return value

    def with_settings(self, settings: Settings | None) -> "CreateOptions":
        """Fill values that were not passed explicitly from ``settings``."""

        if settings is None:
            return self
        updates: Dict[str, Any] = {}
        for key in ("butano_path", "butano_repo", "template_token"):
            value = getattr(settings, key)
            if value is not None and key not in self.model_fields_set:
                updates[key] = value
        if not updates:
            return self
        explicit = {key: getattr(self, key) for key in self.model_fields_set}
        return CreateOptions.model_validate({**explicit, **updates})


class ExamplePreset(str, Enum):
    """Example projects the doctor command knows how to build."""

    CORE = "core"
    CUSTOM = "custom"
    MAXMOD = "maxmod"
    SELECT = "select"
    TEXT = "text"


class DoctorOptions(BaseModel):
    """Flags accepted by ``init-gba doctor``."""

    model_config = ConfigDict(frozen=True)

    butano_path: Optional[str] = None
    build_example: Optional[ExamplePreset] = None
    example_path: Optional[str] = None
    devkitpro: bool = False

    @field_validator("butano_path", "example_path", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def with_settings(self, settings: Settings | None) -> "DoctorOptions":
        if settings is None or settings.butano_path is None or self.butano_path is not None:
            return self
        return self.model_copy(update={"butano_path": settings.butano_path})


@dataclass(frozen=True)
class RunContext:
    """Process state the workflows read instead of touching globals."""

    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)
    interactive: bool = False
    home: Path = field(default_factory=Path.home)
    stdout_is_terminal: bool = False

    @classmethod
    def from_process(cls) -> "RunContext":
        return cls(
            cwd=Path.cwd(),
            env=dict(os.environ),
            interactive=sys.stdin.isatty(),
            home=Path.home(),
            stdout_is_terminal=sys.stdout.isatty(),
        )


class ConfigError(Exception):
    """Raised when a settings file is invalid."""


def load_settings(path: Path) -> Settings:
    """Load settings from a YAML file."""

    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"Settings file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc

    if data is None:
        data = {}
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def save_settings(settings: Settings, path: Path) -> None:
    """Persist settings to disk as YAML."""

    rendered = settings.model_dump()
    path.write_text(yaml.safe_dump(rendered, sort_keys=False))


__all__ = [
    "DEFAULT_BUTANO_REPO",
    "DEFAULT_TEMPLATE_TOKEN",
    "ConfigError",
    "CreateOptions",
    "DoctorOptions",
    "ExamplePreset",
    "RunContext",
    "Settings",
    "load_settings",
    "save_settings",
]
