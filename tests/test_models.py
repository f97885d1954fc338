from init_gba.models import (
    ButanoStatus,
    CheckResult,
    CheckStatus,
    DependencyStatus,
    format_butano_status,
    format_dependency_status,
    summarize,
)


def test_format_butano_status() -> None:
    assert format_butano_status(ButanoStatus.EXISTING) == "ready"
    assert format_butano_status(ButanoStatus.UP_TO_DATE) == "up to date"
    assert format_butano_status("downloaded") == "downloaded"
    assert format_butano_status("sideloaded") == "unrecognized"


def test_format_dependency_status() -> None:
    assert format_dependency_status(DependencyStatus.DETECTED) == "detected"
    assert format_dependency_status(DependencyStatus.MISSING_INSTALL) == "install instructions shown"
    assert format_dependency_status("missing-skipped") == "not detected"
    assert format_dependency_status("bogus") == "unrecognized"


def test_summarize_counts_each_status() -> None:
    summary = summarize(
        [
            CheckResult("make", "found", CheckStatus.OK),
            CheckResult("DEVKITPRO", "Not set", CheckStatus.WARN),
            CheckResult("DEVKITARM", "Not set or missing", CheckStatus.WARN),
            CheckResult("Butano", "Not found", CheckStatus.ERROR),
        ]
    )
    assert (summary.ok, summary.warn, summary.error) == (1, 2, 1)
    assert summary.has_errors
    assert not summarize([]).has_errors
