from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
from rich.console import Console

from init_gba import process
from init_gba.config import RunContext
from init_gba.errors import CommandError, MissingInputError
from init_gba.process import CommandResult


class ScriptedPrompts:
    """Prompt session that answers from a table and records what was asked."""

    def __init__(
        self,
        confirms: Optional[Dict[str, bool]] = None,
        texts: Optional[Dict[str, str]] = None,
        non_interactive: bool = False,
    ) -> None:
        self.confirms = confirms or {}
        self.texts = texts or {}
        self.non_interactive = non_interactive
        self.asked: List[str] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        for prefix, answer in self.confirms.items():
            if message.startswith(prefix):
                return answer
        return default

    def text(self, message: str, default: Optional[str] = None) -> str:
        self.asked.append(message)
        if message in self.texts:
            return self.texts[message]
        if default is None:
            raise MissingInputError(message)
        return default

    def select(self, message, choices, default):
        self.asked.append(message)
        return default

    def close(self) -> None:
        pass


class FakeRunner:
    """Stand-in for ``process.run`` keyed on the joined argument vector."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Tuple[str, ...], Optional[str]]] = []
        self.outputs: Dict[str, str] = {}
        self.failures: set[str] = set()

    def __call__(self, command, args=(), *, cwd=None, env=None) -> CommandResult:
        argv = " ".join([command, *args])
        self.calls.append((command, tuple(args), str(cwd) if cwd is not None else None))
        for failing in self.failures:
            if argv.startswith(failing):
                raise CommandError(command, args, 1, "boom")
        for prefix, stdout in self.outputs.items():
            if argv.startswith(prefix):
                return CommandResult(stdout=stdout, stderr="")
        return CommandResult(stdout="", stderr="")

    @property
    def argvs(self) -> List[str]:
        return [" ".join([command, *args]) for command, args, _ in self.calls]


@pytest.fixture()
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(process, "run", runner)
    return runner


@pytest.fixture()
def prompts_factory():
    return ScriptedPrompts


@pytest.fixture()
def console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture()
def butano_root(tmp_path: Path) -> Path:
    """A Butano checkout laid out like the real one: library, common assets, template."""

    root = tmp_path / "butano"
    (root / "butano").mkdir(parents=True)
    (root / "butano" / "butano.mak").write_text("# butano\n")
    for sub in ("include", "graphics", "audio", "dmg_audio"):
        (root / "common" / sub).mkdir(parents=True)

    template = root / "template"
    (template / "src").mkdir(parents=True)
    (template / "include").mkdir()
    (template / "CMakeLists.txt").write_text("cmake_minimum_required(VERSION 3.10)\nproject(template)\n")
    (template / "src" / "template_main.cpp").write_text('#include "template.h"\n')
    (template / "include" / "template.h").write_text("#define TEMPLATE_NAME \"template\"\n")
    (template / "README.md").write_text("Nothing to replace here.\n")
    (template / ".git").mkdir()
    (template / ".git" / "HEAD").write_text("ref: refs/heads/master\n")
    return root


@pytest.fixture()
def context(tmp_path: Path) -> RunContext:
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    return RunContext(cwd=workdir, env={}, interactive=False, home=home)
