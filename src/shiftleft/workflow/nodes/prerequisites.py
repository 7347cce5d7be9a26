"""CheckPrerequisites node - validate selection and probe tools."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from shiftleft import console
from shiftleft.core.config import State
from shiftleft.core.log import logger
from shiftleft.core.result import Fatal, FatalError, RunPhase
from shiftleft.runner.prerequisite import check_prerequisite


@dataclass
class CheckPrerequisites(BaseNode[State]):
    """Entry node of the parity run."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "Build | Abort":
        """Probe every prerequisite tool.

        Returns:
            Build: All prerequisites are installed
            Abort: A tool is missing or --only names an unknown check
        """
        from shiftleft.workflow.nodes.abort import Abort
        from shiftleft.workflow.nodes.build import Build

        config = ctx.state.config
        run = ctx.state.runtime.run

        console.print_banner(config.project, config.goal)

        if run.only is not None:
            declared = {check.name for check in config.checks()}
            unknown = [name for name in run.only if name not in declared]
            if unknown:
                return Abort(Fatal(
                    kind="config",
                    stage="CONFIGURATION",
                    message=f"Unknown check(s): {', '.join(unknown)}",
                ))

        console.print_info("Checking prerequisites...")
        try:
            for prerequisite in config.prerequisites:
                await asyncio.to_thread(
                    check_prerequisite, prerequisite, cwd=config.workdir
                )
        except FatalError as e:
            return Abort(e.fatal)

        console.print_prerequisites_ok()
        run.phase = RunPhase.PREREQUISITES_CHECKED
        logger.info(
            "Prerequisites satisfied",
            tools=[p.name for p in config.prerequisites],
        )
        return Build()
