"""RunTask node - run a maintenance stage (setup, clean)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.log import logger
from shiftleft.core.result import (
    EXIT_PASSED,
    FatalError,
    RunPhase,
    RunReport,
)
from shiftleft.runner.stage import StageRunner


@dataclass
class RunTask(BaseNode[State, None, RunReport]):
    """Run the config stage called task ('setup' or 'clean')."""

    task: str

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "End[RunReport] | Abort":
        from shiftleft.workflow.nodes.abort import Abort

        stage = getattr(ctx.state.config, self.task)
        console.print_stage(stage.name)

        try:
            await asyncio.to_thread(
                StageRunner(ctx.state.config.workdir).run_stage,
                stage.name,
                stage.commands,
            )
        except FatalError as e:
            return Abort(e.fatal)

        logger.info("Task complete", task=self.task)
        run = ctx.state.runtime.run
        run.phase = RunPhase.PASSED
        run.report = RunReport(phase=RunPhase.PASSED, exit_code=EXIT_PASSED)
        return End(run.report)
