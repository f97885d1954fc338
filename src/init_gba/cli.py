"""Typer-based CLI for init-gba."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import (
    DEFAULT_BUTANO_REPO,
    DEFAULT_TEMPLATE_TOKEN,
    ConfigError,
    CreateOptions,
    DoctorOptions,
    ExamplePreset,
    RunContext,
    Settings,
    load_settings,
    save_settings,
)
from .create import run_create
from .doctor import run_doctor
from .errors import InitGbaError

app = typer.Typer(help="Create Butano GBA projects and check your toolchain.")
console = Console()


def _console_sink(message: str) -> None:
    console.print(message, markup=False, highlight=False, end="")


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(_console_sink, level=level, format="{level}: {message}")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _load_optional_settings(path: Optional[Path]) -> Settings | None:
    if path is None:
        return None
    try:
        return load_settings(path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=4)


@app.command()
def create(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Game name"),
    directory: Optional[str] = typer.Option(None, "--dir", help="Target directory for the project"),
    butano_path: Optional[str] = typer.Option(None, "--butano-path", help="Butano installation path"),
    butano_repo: Optional[str] = typer.Option(
        None, "--butano-repo", help=f"Butano git repository URL [default: {DEFAULT_BUTANO_REPO}]"
    ),
    template_path: Optional[str] = typer.Option(None, "--template-path", help="Path to the template folder"),
    template_token: Optional[str] = typer.Option(
        None,
        "--template-token",
        help=f"Template token to replace in files [default: {DEFAULT_TEMPLATE_TOKEN}]",
    ),
    rom_code: Optional[str] = typer.Option(None, "--rom-code", help="ROM code (4 uppercase characters)"),
    rom_title: Optional[str] = typer.Option(None, "--rom-title", help="ROM title (uppercase, max 12 chars)"),
    force: bool = typer.Option(False, "--force", help="Overwrite target directory if it exists"),
    non_interactive: bool = typer.Option(False, "--non-interactive", help="Fail if required input is missing"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept defaults and skip prompts"),
    skip_deps: bool = typer.Option(False, "--skip-deps", help="Skip devkitPro dependency checks"),
    skip_git: bool = typer.Option(False, "--skip-git", help="Skip git init"),
    skip_makefile: bool = typer.Option(False, "--skip-makefile", help="Skip Makefile generation"),
    skip_update: bool = typer.Option(False, "--skip-update", help="Skip checking for Butano updates"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML file with default settings"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Create a new GBA project using Butano."""

    _configure_logging(log_level.upper(), log_file)
    settings = _load_optional_settings(config)

    flags: Dict[str, Any] = {
        "name": name,
        "dir": directory,
        "butano_path": butano_path,
        "butano_repo": butano_repo,
        "template_path": template_path,
        "template_token": template_token,
        "rom_code": rom_code,
        "rom_title": rom_title,
    }
    flags = {key: value for key, value in flags.items() if value is not None}
    try:
        options = CreateOptions(
            **flags,
            force=force,
            non_interactive=non_interactive,
            yes=yes,
            skip_deps=skip_deps,
            skip_git=skip_git,
            skip_makefile=skip_makefile,
            skip_update=skip_update,
        ).with_settings(settings)
    except ValidationError as exc:
        console.print(f"[red]Invalid options:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    try:
        run_create(options, RunContext.from_process(), console)
    except InitGbaError as exc:
        logger.debug("create failed: {!r}", exc)
        console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=1)


@app.command()
def doctor(
    butano_path: Optional[str] = typer.Option(None, "--butano-path", help="Butano installation path"),
    build_example: Optional[ExamplePreset] = typer.Option(
        None, "--build-example", help="Build a preset example to validate the toolchain"
    ),
    example_path: Optional[str] = typer.Option(
        None, "--example-path", help="Example project path to build (custom preset)"
    ),
    devkitpro: bool = typer.Option(False, "--devkitpro", help="Print devkitPro setup guidance"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML file with default settings"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Check your environment for common Butano issues."""

    _configure_logging(log_level.upper(), log_file)
    settings = _load_optional_settings(config)
    options = DoctorOptions(
        butano_path=butano_path,
        build_example=build_example,
        example_path=example_path,
        devkitpro=devkitpro,
    ).with_settings(settings)
    run_doctor(options, RunContext.from_process(), console)


@app.command("init-config")
def init_config(path: Path = typer.Argument(..., writable=True, resolve_path=True)) -> None:
    """Write an example settings file to PATH."""

    settings = Settings(
        butano_path="~/Documents/butano",
        butano_repo=DEFAULT_BUTANO_REPO,
        template_token=DEFAULT_TEMPLATE_TOKEN,
    )
    save_settings(settings, path)
    console.print(f"[green]Wrote settings to {escape(str(path))}[/green]")


if __name__ == "__main__":
    app()
