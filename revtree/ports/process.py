"""Process execution port interface.

Defines the abstract interface for running one external process and
collecting its output without blocking the event loop.
"""

from pathlib import Path
from typing import Protocol


class ProcessRunner(Protocol):
    """Protocol for asynchronous process execution."""

    async def run(self, command: str, args: list[str], cwd: Path) -> str:
        """Run a process to completion and return its combined output.

        The exit status is not surfaced: whatever the process printed to
        stdout and stderr is returned once it terminates.

        Args:
            command: Executable name or path.
            args: Arguments passed to the executable.
            cwd: Working directory for the process.

        Returns:
            Entire combined output, decoded as text.

        Raises:
            LaunchError: If the executable cannot be started.
        """
        ...
