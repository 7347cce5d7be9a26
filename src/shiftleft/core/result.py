"""Result types for a parity run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

EXIT_PASSED = 0
EXIT_CHECKS_FAILED = 1
EXIT_FATAL = 2


class RunPhase(str, Enum):
    """Where a run is in its lifecycle.

    init -> prerequisites_checked -> built -> checking -> passed | failed

    fatal is reachable from init and prerequisites_checked. passed,
    failed and fatal are terminal.
    """

    INIT = "init"
    PREREQUISITES_CHECKED = "prerequisites_checked"
    BUILT = "built"
    CHECKING = "checking"
    PASSED = "passed"
    FAILED = "failed"
    FATAL = "fatal"

    @property
    def terminal(self) -> bool:
        return self in (RunPhase.PASSED, RunPhase.FAILED, RunPhase.FATAL)


class CheckResult(BaseModel):
    """Outcome of one check; recorded whether it passed or not."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    success: bool
    returncode: int
    timestamp: datetime
    duration: float = 0.0
    log_file: Path | None = None


class Fatal(BaseModel):
    """An environment failure that ends the run immediately."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prerequisite", "stage", "config"]
    stage: str
    message: str
    command: str | None = None
    returncode: int | None = None


class FatalError(Exception):
    """Raised when the environment is broken.

    Check failures are never raised; they are CheckResult values.
    """

    def __init__(self, fatal: Fatal):
        super().__init__(fatal.message)
        self.fatal = fatal


class ReportLine(BaseModel):
    """One line of the summary with its console style."""

    model_config = ConfigDict(frozen=True)

    text: str
    style: str = ""


class Summary(BaseModel):
    """Aggregate verdict over every CheckResult of a run."""

    model_config = ConfigDict(frozen=True)

    passed: list[str]
    failed: list[str]
    exit_code: int
    lines: list[ReportLine]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def report(self) -> str:
        return "\n".join(line.text for line in self.lines)


class RunReport(BaseModel):
    """What a run ends with, whichever terminal phase it reached."""

    phase: RunPhase
    exit_code: int
    results: list[CheckResult] = []
    summary: Summary | None = None
    fatal: Fatal | None = None
