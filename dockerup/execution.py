"""Async command execution utilities."""

import asyncio
import logging
from dataclasses import dataclass

from .runlog import RunLog

COMMAND_NOT_FOUND = 127
SUDO = ("sudo",)

_logging = logging.getLogger(__name__)


async def run_command_async(
    argv: list[str], input: bytes | None = None, timeout: float | None = None
) -> tuple[int, bytes, bytes]:
    """Run a command and return (returncode, stdout, stderr).

    There is no timeout unless one is given; package manager runs can take
    as long as they take. A missing executable is reported as 127, like a
    shell would.
    """
    _logging.debug(f"Running command: {' '.join(argv)}")
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        _logging.debug(f"Command not found: {argv[0]}")
        return COMMAND_NOT_FOUND, b"", f"{argv[0]}: command not found".encode()

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(input=input), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        _ = await process.wait()
        _logging.error(f"Command timed out after {timeout} seconds: {' '.join(argv)}")
        return 1, b"", f"Command timed out after {timeout} seconds".encode()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.terminate()
        raise

    return process.returncode if process.returncode is not None else 1, stdout, stderr


@dataclass
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout.decode(errors="replace").strip()

    @property
    def error_output(self) -> str:
        return self.stderr.decode(errors="replace").strip()

    def describe(self) -> str:
        """One-line failure description for error messages."""
        detail = self.error_output or self.output
        text = f"'{' '.join(self.argv)}' exited with status {self.returncode}"
        if detail:
            text += f": {detail.splitlines()[-1]}"
        return text


class CommandRunner:
    """Runs external commands one at a time and records them in the run log.

    Privileged commands are prefixed with sudo; the installer itself never
    runs as root. In dry-run mode nothing is spawned and every command
    reports success.
    """

    def __init__(self, run_log: RunLog, dry_run: bool = False, sudo: tuple[str, ...] = SUDO):
        self.run_log = run_log
        self.dry_run = dry_run
        self.sudo = sudo

    async def run(
        self,
        argv: list[str],
        privileged: bool = False,
        input: bytes | None = None,
        quiet: bool = False,
        read_only: bool = False,
    ) -> CommandResult:
        full = [*self.sudo, *argv] if privileged else list(argv)

        # Read-only probes still run in dry-run mode so the plan matches the host.
        if self.dry_run and not read_only:
            self.run_log.write(f"[DRY-RUN] Would execute: {' '.join(full)}")
            return CommandResult(full, 0)

        self.run_log.command(full)
        returncode, stdout, stderr = await self._execute(full, input)
        result = CommandResult(full, returncode, stdout, stderr)

        # Binary payloads (key material) are not worth logging.
        if not quiet:
            self.run_log.output(result.output)
        self.run_log.output(result.error_output)
        if not result.ok:
            self.run_log.write(f"Exit status {returncode}")
        return result

    async def _execute(self, argv: list[str], input: bytes | None) -> tuple[int, bytes, bytes]:
        return await run_command_async(argv, input=input)
