"""Setup stage runner (image builds, setup and clean tasks)."""

from pathlib import Path

from shiftleft.core.log import logger
from shiftleft.core.result import Fatal, FatalError
from shiftleft.core.runner import Runner


class StageRunner:
    """Run setup commands in order, stopping at the first failure."""

    def __init__(self, workdir: Path, runner: Runner | None = None):
        self.workdir = workdir
        self.runner = runner or Runner()

    def run_stage(self, name: str, commands: list[str]) -> None:
        """Run every command of a stage.

        Output streams straight to the terminal so a failing
        command's own error text is what the user sees.

        Raises:
            FatalError: On the first command exiting non-zero; the
                remaining commands are not run
        """
        with logger.span("Stage {stage}", stage=name):
            for command in commands:
                logger.info("Running stage command", command=command)
                result = self.runner.execute(
                    command, cwd=self.workdir, stream=True, check=False
                )
                if result.exited != 0:
                    logger.error(
                        "Stage command failed",
                        stage=name,
                        command=command,
                        returncode=result.exited,
                    )
                    raise FatalError(Fatal(
                        kind="stage",
                        stage=name,
                        message=(
                            f"Stage {name} failed: '{command}' exited "
                            f"with status {result.exited}"
                        ),
                        command=command,
                        returncode=result.exited,
                    ))
