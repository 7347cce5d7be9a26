"""Command execution on top of invoke."""

from pathlib import Path

from invoke import Context, Result

from shiftleft.core.log import logger


class Runner(Context):
    """invoke.Context with a single entry point for running commands.

    Named execute() so it does not collide with Context.run().
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        stream: bool = False,
        log_file: Path | None = None,
        check: bool = True,
    ) -> Result:
        """Run a shell command and wait for it to exit.

        Args:
            command: Shell command line
            cwd: Working directory for the command
            stream: Pass stdout/stderr through to the terminal as
                the command produces it; otherwise output is only
                captured
            log_file: Write the combined captured output here
            check: Raise on a non-zero exit status

        Returns:
            invoke.Result with stdout, stderr and exited

        Raises:
            invoke.UnexpectedExit: If check is True and the command
                exits non-zero
        """
        kwargs = {
            "hide": not stream,
            "warn": not check,
            "in_stream": False,
        }

        logger.spew("Executing command", command=command, cwd=str(cwd or ""))

        if cwd:
            with self.cd(str(cwd)):
                result = self.run(command, **kwargs)
        else:
            result = self.run(command, **kwargs)

        logger.spew(
            "Command exited", command=command, returncode=result.exited
        )

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text(
                result.stdout + result.stderr, encoding="utf-8"
            )

        return result
