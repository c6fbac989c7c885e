"""Unit tests for the Rich progress indicator."""

from unittest.mock import Mock

from revtree.core.progress import RichProgressIndicator, progress_context
from revtree.ports.progress import NullProgress


class TestRichProgressIndicator:
    """Tests for spinner task lifecycle."""

    def test_task_added_and_removed(self) -> None:
        progress = Mock()
        progress.add_task.return_value = 7
        indicator = RichProgressIndicator(progress)

        indicator.on_start("Refreshing")
        indicator.on_complete()

        progress.add_task.assert_called_once_with("Refreshing...", total=None)
        progress.remove_task.assert_called_once_with(7)

    def test_complete_without_start(self) -> None:
        progress = Mock()

        RichProgressIndicator(progress).on_complete()

        progress.remove_task.assert_not_called()


class TestProgressContext:
    """Tests for progress_context."""

    def test_quiet_mode_yields_none(self) -> None:
        with progress_context(quiet_mode=True) as progress:
            assert progress is None

    def test_yields_indicator(self) -> None:
        with progress_context() as progress:
            assert isinstance(progress, RichProgressIndicator)
            progress.on_start("Refreshing")
            progress.on_complete()


def test_null_progress_is_silent() -> None:
    progress = NullProgress()

    progress.on_start("Refreshing")
    progress.on_complete()
