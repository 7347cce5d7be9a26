"""Maintenance commands - setup and clean."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from shiftleft.core.config import State


async def run_task(state: State, task: str) -> int:
    """Run the single-node task workflow for one config stage.

    Returns:
        0 on success, the fatal exit code when a command failed
    """
    from shiftleft.workflow.graph import create_task_workflow
    from shiftleft.workflow.nodes.task import RunTask

    workflow = create_task_workflow()
    async with workflow.iter(RunTask(task), state=state) as run:
        async for _node in run:
            pass

    return run.result.output.exit_code


class SetupCommand(BaseModel):
    """Prepare the development environment.

    Runs the commands under config.setup (by default: build the
    dev compose service and create the test-results directory).
    """

    async def run_workflow(self, state: State) -> int:
        return await run_task(state, "setup")


class CleanCommand(BaseModel):
    """Remove containers, volumes and test results.

    Runs the commands under config.clean.
    """

    async def run_workflow(self, state: State) -> int:
        return await run_task(state, "clean")
