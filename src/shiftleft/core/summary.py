"""Fold check results into the final verdict."""

from collections.abc import Sequence

from shiftleft.core.config import SummaryConfig
from shiftleft.core.result import (
    EXIT_CHECKS_FAILED,
    EXIT_PASSED,
    CheckResult,
    ReportLine,
    Summary,
)


def summarize(
    results: Sequence[CheckResult],
    config: SummaryConfig | None = None,
) -> Summary:
    """Build the summary report and exit code for a run.

    Results are partitioned into passed and failed names, each in
    the order the checks ran. The verdict is binary: exit 0 only
    when nothing failed.
    """
    config = config or SummaryConfig()
    passed = [r.name for r in results if r.success]
    failed = [r.name for r in results if not r.success]

    lines = [
        ReportLine(text="TEST SUMMARY", style="bold yellow"),
        ReportLine(text="=" * 40),
    ]

    if not failed:
        lines.append(ReportLine(text="ALL TESTS PASSED", style="bold green"))
        lines.append(ReportLine(text=config.success_message))
        if config.success_notes:
            lines.append(ReportLine(text=""))
            lines.append(ReportLine(
                text="Environment Parity Guaranteed:", style="blue"
            ))
            lines.extend(
                ReportLine(text=f"  + {note}") for note in config.success_notes
            )
        exit_code = EXIT_PASSED
    else:
        lines.append(ReportLine(text="SOME TESTS FAILED", style="bold red"))
        lines.append(ReportLine(text="Failed tests:"))
        lines.extend(
            ReportLine(text=f"  • {name}", style="red") for name in failed
        )
        lines.append(ReportLine(text=""))
        lines.append(ReportLine(text=config.failure_message))
        if config.hint:
            lines.append(ReportLine(text=""))
            lines.append(ReportLine(text=f"TIP: {config.hint}", style="yellow"))
        exit_code = EXIT_CHECKS_FAILED

    return Summary(
        passed=passed,
        failed=failed,
        exit_code=exit_code,
        lines=lines,
    )
