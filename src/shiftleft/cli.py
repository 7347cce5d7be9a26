#!/usr/bin/env python3
"""shiftleft CLI - run your CI pipeline locally, in containers."""

import asyncio
import contextlib
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from shiftleft.command.plan import PlanCommand
from shiftleft.command.run import RunCommand
from shiftleft.command.task import CleanCommand, SetupCommand
from shiftleft.core.config import State
from shiftleft.core.log import logger


class CliState(State):
    """Reproduce the CI pipeline locally with the same containers,
    tools and commands, so a local pass predicts a CI pass.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.project value)
    2. shiftleft.yaml in the current directory, plus --include files
    3. .env file
    4. Environment variables (SHIFTLEFT_CONFIG__PROJECT=value)
    """

    run: CliSubCommand[RunCommand]
    plan: CliSubCommand[PlanCommand]
    setup: CliSubCommand[SetupCommand]
    clean: CliSubCommand[CleanCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            # argparse exits 0 after printing help
            with contextlib.suppress(SystemExit):
                CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes file and OTLP sinks on exit
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
