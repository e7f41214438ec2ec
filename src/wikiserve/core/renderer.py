"""External document renderer.

Runs a converter program (asciidoctor by default) as a subprocess that reads
the document from standard input and writes the rendered result to standard
output. Standard error is captured separately and attached to failures.
"""

import asyncio
from collections.abc import Sequence
from typing import BinaryIO

from wikiserve.core.errors import RenderError
from wikiserve.log import Component, get_logger

logger = get_logger(Component.RENDERER)


class ExternalRenderer:
    """Renders documents by piping them through an external program.

    One subprocess is spawned per render call. The wait is bounded by
    timeout; on timeout or cancellation of the awaiting task the subprocess
    is killed and reaped.
    """

    def __init__(self, command: Sequence[str], *, timeout: float | None = 30.0) -> None:
        """Initialize renderer.

        Args:
            command: Program and arguments, e.g. ["asciidoctor", "-"]
            timeout: Seconds to wait for the program, None to wait forever
        """
        if not command:
            raise ValueError("Renderer command must not be empty")
        self._command = tuple(command)
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    @property
    def name(self) -> str:
        """Program name used in messages."""
        return self._command[0]

    async def render(self, source: BinaryIO) -> bytes:
        """Render a document.

        Args:
            source: Open binary stream with the document

        Returns:
            Bytes the program wrote to standard output

        Raises:
            RenderError: If the input can not be read, the program can not be
                started, exits non-zero or exceeds the timeout
        """
        try:
            document = source.read()
        except OSError as e:
            raise RenderError("can not read renderer input") from e

        logger.debug(f"Running {' '.join(self._command)} ({len(document)} bytes)")

        try:
            process = await asyncio.create_subprocess_exec(
                *self._command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RenderError(f"can not run {self.name}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(document),
                timeout=self._timeout,
            )
        except TimeoutError:
            await _kill(process)
            raise RenderError(f"{self.name} timed out after {self._timeout:g}s") from None
        except asyncio.CancelledError:
            await _kill(process)
            raise
        except OSError as e:
            await _kill(process)
            raise RenderError(f"can not run {self.name}") from e

        if process.returncode != 0:
            raise RenderError(
                f"can not run {self.name}: exit status {process.returncode}",
                stderr=stderr.decode("utf-8", errors="replace"),
            )

        if stderr:
            logger.warning(f"{self.name}: {stderr.decode('utf-8', errors='replace').strip()}")

        return stdout


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
