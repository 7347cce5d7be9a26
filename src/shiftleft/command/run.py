"""Run command - the local CI parity run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from shiftleft.core.log import logger

if TYPE_CHECKING:
    from shiftleft.core.config import State


class RunCommand(BaseModel):
    """Run the whole CI pipeline locally.

    Checks prerequisites, builds the images, runs every check
    stage without stopping at failures, then prints a summary.
    Exits 0 when every check passed, 1 when any check failed and
    2 when the environment is broken (missing tool, failed build).
    """

    model_config = ConfigDict(populate_by_name=True)

    only: list[str] | None = Field(
        default=None,
        description=(
            "Run only these checks (repeatable, by check name, "
            "e.g. --only link-check)"
        ),
    )
    skip_build: bool = Field(
        default=False,
        alias="skip-build",
        description="Reuse existing images instead of building them",
    )

    async def run_workflow(self, state: State) -> int:
        """Run the parity workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code of the run
        """
        from shiftleft.workflow.graph import create_workflow
        from shiftleft.workflow.nodes.prerequisites import (
            CheckPrerequisites,
        )

        state.runtime.run.only = self.only
        state.runtime.run.skip_build = self.skip_build

        logger.info(
            "Starting parity run",
            project=state.config.project,
            only=self.only,
            skip_build=self.skip_build,
        )

        workflow = create_workflow()
        async with workflow.iter(CheckPrerequisites(), state=state) as run:
            async for _node in run:
                pass

        report = run.result.output
        return report.exit_code
