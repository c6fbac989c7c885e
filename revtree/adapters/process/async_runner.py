"""Process runner implementing the ProcessRunner port with asyncio subprocesses."""

import asyncio
import contextlib
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from revtree.domain.exceptions import LaunchError

logger = logging.getLogger(__name__)


class AsyncProcessRunner:
    """Runs external commands as asyncio child processes.

    stdout and stderr are merged into one buffer; the buffer is decoded and
    returned when the process terminates, whatever its exit status.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the runner.

        Args:
            env: Extra environment variables layered over ``os.environ``
                (e.g., ``{"HGPLAIN": "1"}``).
        """
        self._env = dict(env) if env else {}

    def _environment(self) -> dict[str, str] | None:
        if not self._env:
            return None
        return {**os.environ, **self._env}

    async def run(self, command: str, args: list[str], cwd: Path) -> str:
        """Run a process to completion and return its combined output.

        Args:
            command: Executable name or path.
            args: Arguments passed to the executable.
            cwd: Working directory for the process.

        Returns:
            Entire combined stdout/stderr, decoded as UTF-8 (lossy).

        Raises:
            LaunchError: If the executable cannot be started.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=self._environment(),
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise LaunchError(
                f"Cannot start '{command}': {e.strerror or e}",
                hint=f"Check that '{command}' is installed and on your PATH",
            ) from e

        try:
            output, _ = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()
                logger.debug("%s %s killed on cancellation", command, " ".join(args))
            raise
        logger.debug(
            "%s %s exited with %s (%d bytes)",
            command,
            " ".join(args),
            proc.returncode,
            len(output),
        )
        return output.decode("utf-8", errors="replace")
