"""Plan command - show the configured pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from shiftleft import console

if TYPE_CHECKING:
    from shiftleft.core.config import State


class PlanCommand(BaseModel):
    """Print prerequisites, build commands and checks without
    running anything."""

    async def run_workflow(self, state: State) -> int:
        console.print_plan(state.config)
        return 0
