"""Check runner with log management."""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Protocol

from shiftleft import console
from shiftleft.core.log import logger
from shiftleft.core.result import CheckResult
from shiftleft.core.runner import Runner


class ExternalCheck(Protocol):
    """What CheckRunner needs to know about a check."""

    name: str
    label: str | None
    command: str

    def succeeded(self, returncode: int) -> bool:
        ...


class CheckRunner:
    """Execute check commands and keep their output in log files."""

    def __init__(
        self,
        workdir: Path,
        output_dir: Path,
        runner: Runner | None = None,
    ):
        """Initialize check runner.

        Args:
            workdir: Working directory for check commands
            output_dir: Directory for storing check logs
            runner: Command runner; a fresh Runner when omitted
        """
        self.workdir = workdir
        self.output_dir = output_dir
        self.runner = runner or Runner()

    def run_check(self, check: ExternalCheck) -> CheckResult:
        """Run one check and record its outcome.

        Output streams to the terminal while the command runs and
        is saved to <output_dir>/<name>-<timestamp>.log. A failing
        command, including one that cannot be found, is a failed
        result and never an exception.

        Returns:
            CheckResult with success status, returncode and log file
        """
        label = check.label or check.name
        console.print_running(label)

        timestamp = datetime.now()
        log_file = (
            self.output_dir
            / f"{check.name}-{timestamp.strftime('%Y%m%d-%H%M%S')}.log"
        )
        self.output_dir.mkdir(parents=True, exist_ok=True)

        started = time.monotonic()
        with logger.span("Check {check}", check=check.name):
            result = self.runner.execute(
                check.command,
                cwd=self.workdir,
                stream=True,
                log_file=log_file,
                check=False,
            )
        duration = time.monotonic() - started

        success = check.succeeded(result.exited)
        if success:
            console.print_passed(label)
            logger.info("Check passed", check=check.name)
        else:
            console.print_failed(label)
            logger.warn(
                "Check failed",
                check=check.name,
                returncode=result.exited,
                log_file=str(log_file),
            )

        return CheckResult(
            name=check.name,
            label=label,
            success=success,
            returncode=result.exited,
            timestamp=timestamp,
            duration=duration,
            log_file=log_file,
        )
