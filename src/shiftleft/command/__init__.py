"""CLI command modules for shiftleft."""

from shiftleft.command.plan import PlanCommand
from shiftleft.command.run import RunCommand
from shiftleft.command.task import CleanCommand, SetupCommand

__all__ = ["CleanCommand", "PlanCommand", "RunCommand", "SetupCommand"]
