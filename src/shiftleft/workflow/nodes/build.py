"""Build node - run the build stage before any check."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.log import logger
from shiftleft.core.result import FatalError, RunPhase
from shiftleft.runner.stage import StageRunner


@dataclass
class Build(BaseNode[State]):
    """Build the images every check runs against."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "RunChecks | Abort":
        """Run the build stage commands in order.

        Returns:
            RunChecks: Build succeeded (or was skipped)
            Abort: A build command failed
        """
        from shiftleft.workflow.nodes.abort import Abort
        from shiftleft.workflow.nodes.run_checks import RunChecks

        config = ctx.state.config
        run = ctx.state.runtime.run

        if run.skip_build:
            logger.info("Skipping build stage")
        elif config.build.commands:
            console.print_stage(config.build.name)
            try:
                await asyncio.to_thread(
                    StageRunner(config.workdir).run_stage,
                    config.build.name,
                    config.build.commands,
                )
            except FatalError as e:
                return Abort(e.fatal)

        run.phase = RunPhase.BUILT
        return RunChecks()
