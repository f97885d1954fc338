"""Shared status models for the create and doctor commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Optional, Union


class ButanoStatus(str, Enum):
    """Outcome of making sure Butano is present and current."""

    DOWNLOADED = "downloaded"
    EXISTING = "existing"
    UNKNOWN = "unknown"
    UP_TO_DATE = "up-to-date"
    UPDATED = "updated"
    UNRECOGNIZED = "unrecognized"


class DependencyStatus(str, Enum):
    """Outcome of the devkitPro probe."""

    DETECTED = "detected"
    MISSING_INSTALL = "missing-install"
    MISSING_SKIPPED = "missing-skipped"
    UNRECOGNIZED = "unrecognized"


class CheckStatus(str, Enum):
    """Severity of a doctor check."""

    OK = "ok"
    WARN = "warn"
    ERROR = "error"


_BUTANO_STATUS_TEXT: Dict[ButanoStatus, str] = {
    ButanoStatus.DOWNLOADED: "downloaded",
    ButanoStatus.EXISTING: "ready",
    ButanoStatus.UNKNOWN: "version unknown",
    ButanoStatus.UP_TO_DATE: "up to date",
    ButanoStatus.UPDATED: "updated",
    ButanoStatus.UNRECOGNIZED: "unrecognized",
}

_DEPENDENCY_STATUS_TEXT: Dict[DependencyStatus, str] = {
    DependencyStatus.DETECTED: "detected",
    DependencyStatus.MISSING_INSTALL: "install instructions shown",
    DependencyStatus.MISSING_SKIPPED: "not detected",
    DependencyStatus.UNRECOGNIZED: "unrecognized",
}


def _coerce(value: Union[str, Enum], enum_type, fallback):
    try:
        return enum_type(value)
    except ValueError:
        return fallback


def format_butano_status(status: Union[ButanoStatus, str]) -> str:
    """Return the progress-line text for a Butano status."""

    return _BUTANO_STATUS_TEXT[_coerce(status, ButanoStatus, ButanoStatus.UNRECOGNIZED)]


def format_dependency_status(status: Union[DependencyStatus, str]) -> str:
    """Return the progress-line text for a devkitPro status."""

    return _DEPENDENCY_STATUS_TEXT[
        _coerce(status, DependencyStatus, DependencyStatus.UNRECOGNIZED)
    ]


@dataclass(slots=True, frozen=True)
class CheckResult:
    """A single line of the doctor report."""

    label: str
    message: str
    status: CheckStatus


@dataclass(slots=True, frozen=True)
class CheckSummary:
    ok: int = 0
    warn: int = 0
    error: int = 0

    @property
    def has_errors(self) -> bool:
        return self.error > 0


def summarize(results: Iterable[CheckResult]) -> CheckSummary:
    counts = {status: 0 for status in CheckStatus}
    for result in results:
        counts[result.status] += 1
    return CheckSummary(
        ok=counts[CheckStatus.OK],
        warn=counts[CheckStatus.WARN],
        error=counts[CheckStatus.ERROR],
    )


@dataclass(slots=True)
class CreateResult:
    """What the create workflow produced."""

    target_dir: Path
    project_name: str
    project_id: str
    butano_status: ButanoStatus
    dependency_status: Optional[DependencyStatus] = None
    renamed_paths: int = 0
    changed_files: int = 0
    makefile: Optional[Path] = None
    git_initialized: bool = False


__all__ = [
    "ButanoStatus",
    "DependencyStatus",
    "CheckStatus",
    "CheckResult",
    "CheckSummary",
    "CreateResult",
    "format_butano_status",
    "format_dependency_status",
    "summarize",
]
