"""Prerequisite probing."""

from pathlib import Path

from shiftleft.core.config import PrerequisiteConfig
from shiftleft.core.log import logger
from shiftleft.core.result import Fatal, FatalError
from shiftleft.core.runner import Runner


def check_prerequisite(
    prerequisite: PrerequisiteConfig,
    runner: Runner | None = None,
    cwd: Path | None = None,
) -> None:
    """Make sure an external tool is usable.

    The probes are tried in order with their output hidden; the
    first one to exit 0 satisfies the prerequisite.

    Raises:
        FatalError: If every probe fails
    """
    runner = runner or Runner()

    for probe in prerequisite.probes:
        result = runner.execute(probe, cwd=cwd, check=False)
        if result.exited == 0:
            logger.debug(
                "Prerequisite satisfied",
                tool=prerequisite.name,
                probe=probe,
            )
            return
        logger.debug(
            "Prerequisite probe failed",
            tool=prerequisite.name,
            probe=probe,
            returncode=result.exited,
        )

    message = f"{prerequisite.name} not found."
    if prerequisite.hint:
        message = f"{message} {prerequisite.hint}"

    logger.error("Missing prerequisite", tool=prerequisite.name)
    raise FatalError(Fatal(
        kind="prerequisite",
        stage="PREREQUISITES",
        message=message,
        command=prerequisite.probes[-1],
        returncode=result.exited,
    ))
