import pytest
import yaml

from pathlib import Path

from typer.testing import CliRunner

from init_gba.cli import app

runner = CliRunner()


@pytest.fixture()
def workspace(tmp_path: Path, butano_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    work = tmp_path / "work"
    work.mkdir()
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("BUTANO_PATH", str(butano_root))
    monkeypatch.delenv("DEVKITPRO", raising=False)
    monkeypatch.delenv("DEVKITARM", raising=False)
    return work


def test_create_non_interactive(workspace: Path, fake_runner) -> None:
    result = runner.invoke(app, ["create", "--name", "MyGame", "--non-interactive"])
    assert result.exit_code == 0, result.output
    assert "Done!" in result.output
    assert (workspace / "MyGame" / "Makefile").is_file()


def test_create_reports_errors(workspace: Path, fake_runner) -> None:
    result = runner.invoke(app, ["create", "--name", "MyGame", "--yes", "--template-path", "nowhere"])
    assert result.exit_code == 1
    assert "Error: Template path does not exist" in result.output


def test_create_rejects_empty_token(workspace: Path, fake_runner) -> None:
    result = runner.invoke(app, ["create", "--yes", "--template-token", ""])
    assert result.exit_code == 2
    assert "Invalid options" in result.output


def test_create_reads_settings_file(workspace: Path, tmp_path: Path, fake_runner) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text(yaml.safe_dump({"butano_repo": "https://example.com/fork.git"}))
    missing_butano = tmp_path / "fresh-butano"

    result = runner.invoke(
        app,
        ["create", "--yes", "--butano-path", str(missing_butano), "--config", str(config)],
    )

    assert result.exit_code == 1
    assert f"git clone --depth 1 https://example.com/fork.git {missing_butano}" in fake_runner.argvs


def test_bad_settings_file_exits(workspace: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("butano_path: [oops")
    result = runner.invoke(app, ["doctor", "--config", str(config)])
    assert result.exit_code == 4
    assert "Configuration error" in result.output


def test_doctor_always_exits_zero(workspace: Path, fake_runner) -> None:
    fake_runner.failures.add("sh")
    result = runner.invoke(app, ["doctor", "--build-example", "maxmod"])
    assert result.exit_code == 0, result.output
    assert "Init GBA Doctor" in result.output
    assert "Fix the errors above and try again." in result.output


def test_init_config_writes_settings(tmp_path: Path) -> None:
    path = tmp_path / "init-gba.yaml"
    result = runner.invoke(app, ["init-config", str(path)])
    assert result.exit_code == 0, result.output
    assert yaml.safe_load(path.read_text())["template_token"] == "template"
