"""Graph workflow definitions."""

from pydantic_graph import Graph

from shiftleft.core.config import State
from shiftleft.core.log import logger


def create_workflow():
    """Create the parity run graph.

    CheckPrerequisites -> Build -> RunChecks (once per stage)
        -> Summarize
    CheckPrerequisites and Build divert to Abort when the
    environment is broken.

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    # Nodes are imported here so their forward references resolve
    # against this namespace
    from shiftleft.workflow.nodes.abort import Abort
    from shiftleft.workflow.nodes.build import Build
    from shiftleft.workflow.nodes.prerequisites import CheckPrerequisites
    from shiftleft.workflow.nodes.run_checks import RunChecks
    from shiftleft.workflow.nodes.summarize import Summarize

    return Graph(
        nodes=(
            CheckPrerequisites,
            Build,
            RunChecks,
            Summarize,
            Abort,
        ),
        state_type=State,
    )


def create_task_workflow():
    """Create the single-stage graph used by setup and clean."""
    from shiftleft.workflow.nodes.abort import Abort
    from shiftleft.workflow.nodes.task import RunTask

    return Graph(nodes=(RunTask, Abort), state_type=State)
