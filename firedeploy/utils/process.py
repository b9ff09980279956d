"""Runner for external commands with live output and buffered results."""

import asyncio
import codecs
import os
from typing import Callable, Dict, List, NamedTuple, Optional

import click

from ..errors import ExternalProcessFailure
from .security import get_secure_logger, mask_secrets

logger = get_secure_logger(__name__)

LineCallback = Callable[[str], None]

# Read size for child output; lines may be longer than this.
CHUNK_SIZE = 4096


class ProcessResult(NamedTuple):
    """Outcome of one external command."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def failed(self) -> bool:
        return self.returncode != 0


class ProcessRunner:
    """Run external commands, echoing their output while capturing it.

    Both output streams are forwarded to the operator as they arrive and
    buffered so a failure can be reported with the captured text.
    """

    def __init__(self, echo: bool = True):
        self.echo = echo

    async def run(
        self,
        command: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        on_line: Optional[LineCallback] = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            command: Executable and its arguments
            cwd: Working directory for the command
            env: Extra environment variables layered over os.environ
            on_line: Called with every output line, stdout and stderr alike

        Returns:
            ProcessResult with the exit status and captured output

        Raises:
            ExternalProcessFailure: If the command cannot be started
        """
        logger.info("Running command: %s", mask_secrets(command))

        process_env = None
        if env:
            process_env = os.environ.copy()
            process_env.update(env)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                env=process_env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExternalProcessFailure(
                command, message=f"Cannot start '{command[0]}': {e}"
            ) from e

        stdout_chunks: List[str] = []
        stderr_chunks: List[str] = []
        try:
            await asyncio.gather(
                self._pump(process.stdout, stdout_chunks, False, on_line),
                self._pump(process.stderr, stderr_chunks, True, on_line),
            )
        except BaseException:
            # Also reached on cancellation; the child must not outlive us
            if process.returncode is None:
                process.kill()
            await process.wait()
            raise
        returncode = await process.wait()

        result = ProcessResult(
            returncode=returncode,
            stdout="".join(stdout_chunks),
            stderr="".join(stderr_chunks),
        )
        logger.debug("Command exited with status %s: %s", returncode, command[0])
        return result

    async def run_checked(self, command: List[str], **kwargs) -> ProcessResult:
        """Run a command and raise ExternalProcessFailure if it fails."""
        result = await self.run(command, **kwargs)
        if result.failed:
            raise ExternalProcessFailure(command, result)
        return result

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        chunks: List[str],
        is_stderr: bool,
        on_line: Optional[LineCallback],
    ) -> None:
        """
        Forward a stream until EOF.

        Text is echoed as soon as it arrives, so prompts without a trailing
        newline are visible. ``on_line`` only sees complete lines, plus the
        unterminated remainder at EOF.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""
        while True:
            raw = await stream.read(CHUNK_SIZE)
            text = decoder.decode(raw, final=not raw)
            if text:
                chunks.append(text)
                if self.echo:
                    click.echo(text, nl=False, err=is_stderr)
                if on_line is not None:
                    pending += text
                    *lines, pending = pending.split("\n")
                    for line in lines:
                        on_line(line.rstrip("\r"))
            if not raw:
                break
        if on_line is not None and pending:
            on_line(pending.rstrip("\r"))
