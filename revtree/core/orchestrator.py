"""Command orchestration: fan out external invocations and join their output.

Every invocation is started immediately; the caller suspends until all of
them finish and receives their output in the order the specs were given,
regardless of which process exited first.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from revtree.domain.value_objects import CommandSpec
from revtree.ports.process import ProcessRunner
from revtree.ports.progress import NullProgress, ProgressIndicator

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs command specs concurrently and joins their results.

    Args:
        runner: Process runner used for every invocation.
        cwd: Working directory shared by all invocations (the repo root).
        progress: UI collaborator notified while a round is in flight.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        cwd: Path,
        progress: ProgressIndicator | None = None,
    ) -> None:
        self.runner = runner
        self.cwd = cwd
        self.progress: ProgressIndicator = progress or NullProgress()

    async def run_all(
        self,
        specs: Sequence[CommandSpec],
        description: str = "Running",
    ) -> list[str]:
        """Run every spec concurrently and return outputs in spec order.

        The progress indication starts before the first process is launched
        and is dismissed exactly once when the round ends, including when no
        specs were given or a launch failed.

        Args:
            specs: Commands to run.
            description: Progress label shown while the round is in flight.

        Returns:
            One output string per spec, positionally matching ``specs``.

        Raises:
            LaunchError: If any executable cannot be started. The remaining
                invocations of the round are cancelled and awaited first.
        """
        self.progress.on_start(description)
        try:
            tasks = [
                asyncio.ensure_future(self.runner.run(spec.command, list(spec.args), self.cwd))
                for spec in specs
            ]
            logger.debug("%s: launched %d command(s)", description, len(tasks))
            try:
                return list(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                # Let every cancelled invocation reap its process before raising
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        finally:
            self.progress.on_complete()

    async def run_one(self, spec: CommandSpec, description: str = "Running") -> str:
        """Run a single spec and return its output."""
        outputs = await self.run_all([spec], description)
        return outputs[0]
