"""Progress reporting utilities for non-interactive CLI commands.

Provides a Rich spinner implementing the ProgressIndicator port, shown while
the orchestrator waits on a round of VCS invocations.
"""

from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class RichProgressIndicator:
    """Rich-based progress indicator for a round of external commands.

    Each round adds a spinner task that is removed when the round completes,
    so nothing is left on screen once the command finishes.
    """

    def __init__(self, progress: Progress) -> None:
        """Initialize with a Rich Progress instance.

        Args:
            progress: Rich Progress instance to use for display.
        """
        self.progress = progress
        self.task_id: TaskID | None = None

    def on_start(self, description: str) -> None:
        """Show a spinner labelled with the round's description."""
        self.task_id = self.progress.add_task(f"{description}...", total=None)

    def on_complete(self) -> None:
        """Hide the spinner."""
        if self.task_id is not None:
            self.progress.remove_task(self.task_id)
            self.task_id = None


@contextmanager
def progress_context(
    quiet_mode: bool = False,
) -> Generator[RichProgressIndicator | None, None, None]:
    """Context manager for creating a transient spinner.

    Args:
        quiet_mode: If True, returns None (no progress reporting).

    Yields:
        RichProgressIndicator if not quiet, None otherwise.
    """
    if quiet_mode:
        yield None
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=Console(stderr=True),
            transient=True,
        ) as progress:
            yield RichProgressIndicator(progress)
