from pathlib import Path

from init_gba.deps import GETTING_STARTED_URL, detect_devkitpro, handle_dependencies
from init_gba.models import DependencyStatus


def test_detect_from_environment(tmp_path: Path, fake_runner) -> None:
    assert detect_devkitpro({"DEVKITPRO": str(tmp_path)})
    assert fake_runner.calls == []


def test_detect_from_path(fake_runner) -> None:
    assert detect_devkitpro({"DEVKITPRO": "/does/not/exist"})
    fake_runner.failures.add("sh")
    assert not detect_devkitpro({})


def test_detected_skips_prompt(fake_runner, prompts_factory, console) -> None:
    prompts = prompts_factory()
    assert handle_dependencies(prompts, console, {}) is DependencyStatus.DETECTED
    assert prompts.asked == []


def test_missing_declined(fake_runner, prompts_factory, console) -> None:
    fake_runner.failures.add("sh")
    prompts = prompts_factory()
    assert handle_dependencies(prompts, console, {}) is DependencyStatus.MISSING_SKIPPED
    assert prompts.asked == ["devkitPro was not detected. Install it now?"]


def test_missing_accepted_shows_instructions(fake_runner, prompts_factory, console) -> None:
    fake_runner.failures.add("sh")
    prompts = prompts_factory(confirms={"devkitPro was not detected": True})
    assert handle_dependencies(prompts, console, {}) is DependencyStatus.MISSING_INSTALL
    assert GETTING_STARTED_URL in console.file.getvalue()
