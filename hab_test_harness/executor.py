"""Execution of external commands with output appended to the run log."""

import asyncio
import logging
import os
import shlex
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import BinaryIO

from hab_test_harness.models.result import CommandResult
from hab_test_harness.platforms.base import Platform

log = logging.getLogger(__name__)


class CommandTimeoutError(TimeoutError):
    """Raised when a command does not exit within its timeout."""

    def __init__(self, args: Sequence[str], timeout: float) -> None:
        super().__init__(f"Command did not complete within {timeout} seconds")
        self.command = tuple(args)
        self.timeout = timeout


@dataclass(frozen=True, kw_only=True)
class CommandExecutor:
    """Runs commands in the platform's environment, logging to its log file.

    Commands run one at a time: each call blocks the caller until the child
    exits. Without a timeout a hung child hangs the run.
    """

    platform: Platform
    timeout: float | None = None

    async def hab(self, *args: str, timeout: float | None = None) -> CommandResult:
        """Run a hab subcommand, e.g. ``hab("pkg", "install", "core/bc")``."""
        return await self.run([str(self.platform.hab_bin), *args], timeout=timeout)

    async def run(
        self, args: Sequence[str], timeout: float | None = None
    ) -> CommandResult:
        """Run a command and return its exit code.

        Args:
            args: Program and arguments; never interpreted by a shell
            timeout: Seconds to wait before killing the command, overriding
                the executor default (None waits forever)

        Returns:
            The command result, including non-zero exit codes

        Raises:
            OSError: If the command cannot be started
            CommandTimeoutError: If the command exceeded its timeout

        """
        timeout = timeout if timeout is not None else self.timeout
        command_line = shlex.join(args)
        log_file = self.platform.log_file_path()
        env = {**os.environ, **self.platform.child_env()}

        with log_file.open("ab") as output:
            _record(output, f"Running: {command_line}")
            log.info("Running: %s", command_line)

            start = time.monotonic()
            try:
                process = await asyncio.create_subprocess_exec(
                    *args,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=output,
                    stderr=asyncio.subprocess.STDOUT,
                    env=env,
                )
            except OSError as exc:
                _record(output, f"Failed to start: {exc}")
                log.error("Failed to start %s: %s", command_line, exc)
                raise

            try:
                exit_code = await asyncio.wait_for(process.wait(), timeout)
            except TimeoutError:
                await _kill(process)
                _record(output, f"Killed after {timeout} seconds")
                log.error(
                    "Command timed out after %s seconds: %s", timeout, command_line
                )
                raise CommandTimeoutError(args, timeout) from None
            except BaseException:
                # Cancelled or interrupted: the child must not outlive the run
                if process.returncode is None:
                    await _kill(process)
                    _record(output, "Killed after cancellation")
                    log.warning("Killed %s after cancellation", command_line)
                raise

            duration = time.monotonic() - start
            _record(output, f"Exit code: {exit_code} ({duration:.2f}s)")

        log.debug("Exit code %d from %s", exit_code, command_line)
        return CommandResult(args=tuple(args), exit_code=exit_code, duration=duration)


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass
    # Reap even if this task is being cancelled again
    await asyncio.shield(process.wait())


def _record(output: BinaryIO, line: str) -> None:
    output.write(f"{line}\n".encode())
    output.flush()
