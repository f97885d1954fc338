import io
import sys

import pytest

from pathlib import Path

from pydantic import ValidationError

from init_gba.config import (
    DEFAULT_BUTANO_REPO,
    ConfigError,
    CreateOptions,
    DoctorOptions,
    RunContext,
    Settings,
    load_settings,
    save_settings,
)


class _TerminalOutput(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_create_options_defaults_and_blank_values() -> None:
    options = CreateOptions(name="  ", rom_code="")
    assert options.name is None
    assert options.rom_code is None
    assert options.butano_repo == DEFAULT_BUTANO_REPO
    assert options.template_token == "template"


def test_create_options_reject_empty_token_and_repo() -> None:
    with pytest.raises(ValidationError):
        CreateOptions(template_token="")
    with pytest.raises(ValidationError):
        CreateOptions(butano_repo="   ")


def test_settings_fill_only_missing_values() -> None:
    settings = Settings(butano_path="/opt/butano", butano_repo="https://example.com/b.git", template_token="starter")
    options = CreateOptions(name="demo", template_token="custom").with_settings(settings)
    assert options.name == "demo"
    assert options.butano_path == "/opt/butano"
    assert options.butano_repo == "https://example.com/b.git"
    assert options.template_token == "custom"
    assert CreateOptions().with_settings(None) == CreateOptions()


def test_doctor_options_with_settings() -> None:
    settings = Settings(butano_path="/opt/butano")
    assert DoctorOptions().with_settings(settings).butano_path == "/opt/butano"
    assert DoctorOptions(butano_path="/mine").with_settings(settings).butano_path == "/mine"


def test_settings_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "init-gba.yaml"
    save_settings(Settings(butano_path="~/butano"), path)
    assert load_settings(path) == Settings(butano_path="~/butano")


def test_empty_settings_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_settings(path) == Settings()


@pytest.mark.parametrize(
    "content, message",
    [
        ("butano_path: [unterminated", "Failed to parse YAML"),
        ("butano_path: [1, 2]", "Invalid settings"),
    ],
)
def test_invalid_settings(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError, match=message):
        load_settings(path)


def test_missing_settings_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_settings(tmp_path / "missing.yaml")


def test_run_context_from_process(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "stdout", _TerminalOutput())
    context = RunContext.from_process()
    assert context.cwd == Path.cwd()
    assert context.stdout_is_terminal is True
