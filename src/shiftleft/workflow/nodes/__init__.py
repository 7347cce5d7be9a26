"""Workflow nodes for the parity run and maintenance tasks."""

from shiftleft.workflow.nodes.abort import Abort
from shiftleft.workflow.nodes.build import Build
from shiftleft.workflow.nodes.prerequisites import CheckPrerequisites
from shiftleft.workflow.nodes.run_checks import RunChecks
from shiftleft.workflow.nodes.summarize import Summarize
from shiftleft.workflow.nodes.task import RunTask

__all__ = [
    "Abort",
    "Build",
    "CheckPrerequisites",
    "RunChecks",
    "RunTask",
    "Summarize",
]
