"""Summarize node - print the verdict and end the run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.log import logger
from shiftleft.core.result import CheckResult, RunPhase, RunReport
from shiftleft.core.summary import summarize


@dataclass
class Summarize(BaseNode[State, None, RunReport]):
    """Turn the accumulated results into the final report."""

    results: tuple[CheckResult, ...] = ()

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[RunReport]:
        summary = summarize(self.results, ctx.state.config.summary)
        console.print_summary(summary)

        run = ctx.state.runtime.run
        run.phase = RunPhase.PASSED if summary.success else RunPhase.FAILED
        run.report = RunReport(
            phase=run.phase,
            exit_code=summary.exit_code,
            results=list(self.results),
            summary=summary,
        )

        logger.info(
            "Run finished",
            phase=run.phase.value,
            passed=len(summary.passed),
            failed=summary.failed,
        )
        return End(run.report)
