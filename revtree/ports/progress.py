"""Progress reporting protocol for in-flight external commands.

Defines callback interface for showing that a round of VCS invocations is
running, without the core depending on a specific UI library.
"""

from typing import Protocol


class ProgressIndicator(Protocol):
    """Protocol for progress indication callbacks.

    Implementations can use this to provide visual feedback (a spinner, a
    status-bar label) while the orchestrator waits on external processes.
    """

    def on_start(self, description: str) -> None:
        """Called when a round of invocations starts.

        Args:
            description: Name of the operation (e.g., "Refreshing").
        """
        ...

    def on_complete(self) -> None:
        """Called exactly once when the round completes."""
        ...


class NullProgress:
    """Progress indicator that shows nothing."""

    def on_start(self, description: str) -> None:
        pass

    def on_complete(self) -> None:
        pass
