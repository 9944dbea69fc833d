"""Async local process execution.

Used for host-side commands (`date` on simulators, `xcrun simctl`,
`ideviceinfo`). Results keep the exact argv so callers can log what ran.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from xcui_commands.errors import ProcessRunnerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    args: list[str]
    stdout: str
    stderr: str
    returncode: int

    def ok(self) -> bool:
        return self.returncode == 0


class AsyncProcessRunner:
    """Run local commands via asyncio subprocesses."""

    def __init__(self, *, timeout_s: Optional[float] = 30.0) -> None:
        self._timeout_s = timeout_s

    async def run(
        self,
        command: str,
        *args: str,
        timeout_s: float | None = None,
        check: bool = True,
    ) -> ProcessResult:
        """Run `command args...` and return stdout/stderr/returncode.

        On timeout the child is killed and `ProcessRunnerError` is raised.
        """

        cmd = [command] + [str(a) for a in args]
        timeout = self._timeout_s if timeout_s is None else float(timeout_s)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessRunnerError(f"failed to start {' '.join(cmd)}: {e}") from e

        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise ProcessRunnerError(f"timed out after {timeout}s: {' '.join(cmd)}") from e

        result = ProcessResult(
            args=cmd,
            stdout=out.decode("utf-8", errors="replace"),
            stderr=err.decode("utf-8", errors="replace"),
            returncode=proc.returncode if proc.returncode is not None else -1,
        )
        logger.debug("%s exited with rc=%s", " ".join(cmd), result.returncode)
        if check and not result.ok():
            raise ProcessRunnerError(
                f"command failed (rc={result.returncode}): {' '.join(cmd)}\n"
                f"stdout: {result.stdout}\n"
                f"stderr: {result.stderr}"
            )
        return result
