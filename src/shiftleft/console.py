"""Rich console output for the parity run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from shiftleft.core.result import Fatal, Summary

if TYPE_CHECKING:
    from shiftleft.core.config import Config

# Markup and emoji codes are off: labels and commands come from
# user configuration and are printed verbatim.
console = Console(highlight=False, markup=False, emoji=False, soft_wrap=True)

RULE = "=" * 40


def print_banner(project: str, goal: str) -> None:
    console.print(f"{project} Container CI Test Runner", style="bold blue")
    console.print(RULE, style="blue")
    console.print(f"Goal: {goal}", style="yellow")
    console.print()


def print_stage(name: str) -> None:
    console.print()
    console.print(f"STAGE: {name}", style="bold yellow")
    console.print("-" * 40)


def print_running(label: str) -> None:
    console.print()
    console.print(f"Running: {label}")


def print_passed(label: str) -> None:
    console.print(Text.assemble(("PASSED", "bold green"), f": {label}"))


def print_failed(label: str) -> None:
    console.print(Text.assemble(("FAILED", "bold red"), f": {label}"))


def print_info(message: str) -> None:
    console.print(message)


def print_prerequisites_ok() -> None:
    console.print("Prerequisites satisfied", style="green")


def print_summary(summary: Summary) -> None:
    console.print()
    for line in summary.lines:
        console.print(line.text, style=line.style or None)


def print_fatal(fatal: Fatal) -> None:
    console.print()
    console.print("ENVIRONMENT BROKEN", style="bold red")
    console.print(RULE)
    console.print(fatal.message, style="red")
    if fatal.command:
        console.print(f"Command: {fatal.command}")
    if fatal.returncode is not None:
        console.print(f"Exit status: {fatal.returncode}")
    console.print("No checks were run past this point.", style="yellow")


def print_plan(config: Config) -> None:
    """Show what a run would execute, without executing it."""
    table = Table(title=f"{config.project} pipeline", show_lines=False)
    table.add_column("Stage", style="yellow")
    table.add_column("Name")
    table.add_column("Command", overflow="fold")

    for prerequisite in config.prerequisites:
        table.add_row(
            "PREREQUISITES", prerequisite.name, " || ".join(prerequisite.probes)
        )
    for command in config.build.commands:
        table.add_row(config.build.name, "", command)
    for stage in config.stages:
        for check in stage.checks:
            table.add_row(stage.name, check.name, check.command)

    console.print(table)
