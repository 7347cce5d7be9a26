"""RunChecks node - run one check stage and accumulate results."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.result import CheckResult, RunPhase
from shiftleft.runner.check import CheckRunner


@dataclass
class RunChecks(BaseNode[State]):
    """Run the checks of stage number stage_index.

    Results so far travel with the node; each stage hands an
    extended tuple to the next one and finally to Summarize.
    """

    stage_index: int = 0
    results: tuple[CheckResult, ...] = ()

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "RunChecks | Summarize":
        """Run every selected check of this stage, never aborting.

        Returns:
            RunChecks: The next stage
            Summarize: All stages have run
        """
        from shiftleft.workflow.nodes.summarize import Summarize

        config = ctx.state.config
        run = ctx.state.runtime.run
        run.phase = RunPhase.CHECKING

        if self.stage_index >= len(config.stages):
            return Summarize(self.results)

        stage = config.stages[self.stage_index]
        checks = [
            check for check in stage.checks
            if run.only is None or check.name in run.only
        ]

        results = self.results
        if checks:
            console.print_stage(stage.name)
            runner = CheckRunner(config.workdir, config.output_dir)
            for check in checks:
                # Off the event loop, so Ctrl-C cancels the run
                # instead of waiting for the next await
                result = await asyncio.to_thread(runner.run_check, check)
                results = (*results, result)

        return RunChecks(self.stage_index + 1, results)
