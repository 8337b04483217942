"""
Async shell process execution with a hard timeout
"""

import asyncio
import logging
import os
import signal
import time
from typing import List

from launcher.errors import ProcessError

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs one shell command at a time per call, merging stderr into stdout.

    Awaiting run() only suspends the calling handler, so other chat updates
    keep being processed while a deploy is in flight. There are no retries:
    a failed deploy may already have broadcast a transaction.
    """

    READ_CHUNK = 4096

    async def run(self, command: str, timeout: float, label: str = "command") -> str:
        """Run command through the shell and return its combined output"""
        started = time.monotonic()
        logger.info(f"Running {label} (timeout {timeout:g}s)")

        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            start_new_session=True,
        )
        chunks: List[bytes] = []

        async def _collect():
            while True:
                chunk = await process.stdout.read(self.READ_CHUNK)
                if not chunk:
                    break
                chunks.append(chunk)
            await process.wait()

        try:
            await asyncio.wait_for(_collect(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(process)
            output = self._decode(chunks)
            logger.error(f"{label} timed out after {timeout:g}s")
            raise ProcessError(
                f"{label} timed out after {timeout:g}s",
                output=output,
                returncode=process.returncode,
                timed_out=True,
            )
        except BaseException:
            # cancelled while waiting; the process group must not outlive us
            await self._kill(process)
            raise

        output = self._decode(chunks)
        elapsed = time.monotonic() - started

        if process.returncode != 0:
            logger.error(f"{label} failed with exit code {process.returncode} after {elapsed:.1f}s")
            raise ProcessError(
                f"{label} failed with exit code {process.returncode}",
                output=output,
                returncode=process.returncode,
            )

        logger.info(f"{label} finished in {elapsed:.1f}s")
        return output

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            # the shell leads its own session, so its children go down with it
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return
        await process.wait()

    @staticmethod
    def _decode(chunks: List[bytes]) -> str:
        return b"".join(chunks).decode("utf-8", errors="replace")
