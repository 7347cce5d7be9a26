"""Abort node - end the run on a broken environment."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.log import logger
from shiftleft.core.result import EXIT_FATAL, Fatal, RunPhase, RunReport


@dataclass
class Abort(BaseNode[State, None, RunReport]):
    """Terminal node for fatal outcomes.

    Distinct from a failed summary: no verdict is given because
    the remaining checks never ran.
    """

    fatal: Fatal

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[RunReport]:
        console.print_fatal(self.fatal)
        logger.error(
            "Run aborted",
            kind=self.fatal.kind,
            stage=self.fatal.stage,
            command=self.fatal.command,
        )

        run = ctx.state.runtime.run
        run.phase = RunPhase.FATAL
        run.report = RunReport(
            phase=RunPhase.FATAL,
            exit_code=EXIT_FATAL,
            fatal=self.fatal,
        )
        return End(run.report)
