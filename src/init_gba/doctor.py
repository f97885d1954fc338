"""The ``doctor`` workflow: check the devkitPro and Butano setup."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console

from . import process
from .config import DoctorOptions, ExamplePreset, RunContext
from .deps import ARM_GCC, DEVKITARM_ENV, DEVKITPRO_ENV
from .errors import CommandError, OperationCancelled
from .models import CheckResult, CheckStatus, CheckSummary, summarize
from .paths import BUTANO_MAKEFILE, absolute_path, default_butano_dir, resolve_butano_lib_dir
from .prompts import PromptSession
from .rendering import Progress, boxed, check_line, progress_line

MAKE = "make"
DKP_PACMAN = "dkp-pacman"

DEVKITPRO_GUIDANCE = "\n".join(
    [
        "devkitPro setup",
        "",
        "Install devkitPro pacman and set up your shell:",
        "https://devkitpro.org/wiki/devkitPro_pacman",
        "",
        "Required environment variables:",
        "DEVKITPRO=/path/to/devkitpro",
        "DEVKITARM=$DEVKITPRO/devkitARM",
        "",
        "Install the GBA toolchain:",
        "dkp-pacman -S gba-dev",
    ]
)

_SELECTABLE_PRESETS = [
    (ExamplePreset.MAXMOD, "Maxmod (devkitPro example)"),
    (ExamplePreset.TEXT, "Butano text example"),
    (ExamplePreset.CORE, "Butano core example"),
    (ExamplePreset.CUSTOM, "Custom path"),
]


@dataclass(slots=True, frozen=True)
class ExampleSelection:
    label: str
    path: Optional[Path]


@dataclass(slots=True, frozen=True)
class ExampleBuildOutcome:
    label: str
    path: Optional[Path]
    succeeded: bool
    message: str


@dataclass(slots=True)
class DoctorReport:
    results: List[CheckResult] = field(default_factory=list)
    example_build: Optional[ExampleBuildOutcome] = None

    @property
    def summary(self) -> CheckSummary:
        return summarize(self.results)


def check_devkitpro(env) -> CheckResult:
    devkitpro = env.get(DEVKITPRO_ENV)
    if devkitpro and Path(devkitpro).exists():
        return CheckResult(DEVKITPRO_ENV, devkitpro, CheckStatus.OK)
    message = "Path does not exist" if devkitpro else "Not set"
    return CheckResult(DEVKITPRO_ENV, message, CheckStatus.WARN)


def check_devkitarm(env) -> CheckResult:
    """DEVKITARM, falling back to ``$DEVKITPRO/devkitARM``."""

    candidates = []
    if env.get(DEVKITARM_ENV):
        candidates.append(Path(env[DEVKITARM_ENV]))
    if env.get(DEVKITPRO_ENV):
        candidates.append(Path(env[DEVKITPRO_ENV]) / "devkitARM")
    for candidate in candidates:
        if candidate.exists():
            return CheckResult(DEVKITARM_ENV, str(candidate), CheckStatus.OK)
    return CheckResult(DEVKITARM_ENV, "Not set or missing", CheckStatus.WARN)


def check_executable(name: str, missing_status: CheckStatus) -> CheckResult:
    if process.command_exists(name):
        return CheckResult(name, "found", CheckStatus.OK)
    return CheckResult(name, "missing", missing_status)


def check_butano(butano_base: Path) -> CheckResult:
    lib_dir = resolve_butano_lib_dir(butano_base)
    if not butano_base.exists():
        return CheckResult("Butano", "Not found", CheckStatus.ERROR)
    if not (lib_dir / BUTANO_MAKEFILE).exists():
        return CheckResult("Butano", f"{BUTANO_MAKEFILE} missing", CheckStatus.WARN)
    return CheckResult("Butano", str(lib_dir), CheckStatus.OK)


def resolve_maxmod_example(devkitpro_dir: Path) -> Optional[Path]:
    for candidate in (
        devkitpro_dir / "examples" / "gba" / "maxmod",
        devkitpro_dir / "examples" / "gba" / "audio" / "maxmod",
    ):
        if candidate.exists():
            return candidate
    return None


def resolve_example_selection(
    preset: ExamplePreset,
    butano_base: Path,
    example_path: Optional[str],
    context: RunContext,
    prompts: PromptSession,
) -> Optional[ExampleSelection]:
    """Map a preset name to the example directory to build.

    Returns None when nothing should be built (no custom path available).
    """

    if preset is ExamplePreset.SELECT:
        choice = prompts.select(
            "Select an example to build", _SELECTABLE_PRESETS, ExamplePreset.TEXT
        )
        return resolve_example_selection(choice, butano_base, example_path, context, prompts)

    if preset is ExamplePreset.CUSTOM:
        custom = _resolve_custom_example_path(example_path, context, prompts)
        if custom is None:
            return None
        return ExampleSelection("Custom example", custom)

    if preset is ExamplePreset.CORE:
        return ExampleSelection("Butano core example", butano_base / "examples" / "core")

    if preset is ExamplePreset.TEXT:
        return ExampleSelection("Butano text example", butano_base / "examples" / "text")

    devkitpro = context.env.get(DEVKITPRO_ENV)
    if not devkitpro:
        return ExampleSelection("Maxmod example (DEVKITPRO not set)", None)
    maxmod = resolve_maxmod_example(Path(devkitpro))
    if maxmod is None:
        return ExampleSelection("Maxmod example (not found)", None)
    return ExampleSelection("Maxmod example", maxmod)


def _resolve_custom_example_path(
    example_path: Optional[str], context: RunContext, prompts: PromptSession
) -> Optional[Path]:
    if example_path and example_path.strip():
        return absolute_path(example_path.strip(), context.cwd, context.home)
    if prompts.non_interactive:
        return None
    value = prompts.text("Custom example path")
    return absolute_path(value, context.cwd, context.home)


def build_example(selection: ExampleSelection, console: Console) -> ExampleBuildOutcome:
    """Run ``make clean`` and ``make`` in the example directory.

    A failed build is reported, never raised.
    """

    if selection.path is None or not selection.path.exists():
        message = f"{selection.label} not found"
        progress_line(console, "Example build", message, Progress.WARN)
        return ExampleBuildOutcome(selection.label, selection.path, False, message)

    target = str(selection.path)
    try:
        with console.status(f"Building {selection.label}"):
            process.run(MAKE, ["-C", target, "clean"])
            process.run(MAKE, ["-C", target])
    except CommandError as exc:
        logger.debug("Example build failed: {}", exc)
        message = f"Example build failed ({selection.label})"
        console.print(f"[yellow]![/yellow] {message}", highlight=False)
        return ExampleBuildOutcome(selection.label, selection.path, False, message)

    message = f"Example build succeeded ({selection.label})"
    console.print(f"[green]✔[/green] {message}", highlight=False)
    return ExampleBuildOutcome(selection.label, selection.path, True, message)


def run_doctor(options: DoctorOptions, context: RunContext, console: Console) -> DoctorReport:
    """Run every check, print the results and return them."""

    prompts = PromptSession(non_interactive=not context.interactive)
    report = DoctorReport()
    env = context.env

    console.print("[bold]Init GBA Doctor[/bold]")

    report.results.append(check_devkitpro(env))
    report.results.append(check_devkitarm(env))
    report.results.append(check_executable(MAKE, CheckStatus.ERROR))
    report.results.append(check_executable(ARM_GCC, CheckStatus.ERROR))
    report.results.append(check_executable(DKP_PACMAN, CheckStatus.WARN))

    butano_base = absolute_path(
        options.butano_path or default_butano_dir(env, context.home), context.cwd, context.home
    )
    report.results.append(check_butano(butano_base))

    console.print("")
    for result in report.results:
        check_line(console, result)

    if options.build_example is not None:
        try:
            selection = resolve_example_selection(
                options.build_example, butano_base, options.example_path, context, prompts
            )
        except OperationCancelled as exc:
            console.print(str(exc))
            selection = None
        if selection is not None:
            report.example_build = build_example(selection, console)

    console.print("")
    if options.devkitpro:
        boxed(console, DEVKITPRO_GUIDANCE, "devkitPro")
        console.print("")

    summary = report.summary
    boxed(
        console,
        f"OK: {summary.ok}\nWarnings: {summary.warn}\nErrors: {summary.error}",
        "Summary",
    )
    if summary.has_errors:
        console.print("[yellow]Fix the errors above and try again.[/yellow]")
    return report


__all__ = [
    "DoctorReport",
    "ExampleBuildOutcome",
    "ExampleSelection",
    "build_example",
    "check_butano",
    "check_devkitarm",
    "check_devkitpro",
    "check_executable",
    "resolve_example_selection",
    "run_doctor",
]
