"""Unit tests for CLI error formatting."""

import pytest

from revtree.core.errors import RevtreeCliError, config_exists_error


class TestRevtreeCliError:
    """Tests for RevtreeCliError."""

    def test_message_with_hint(self) -> None:
        error = RevtreeCliError("Something failed", hint="Try again")

        assert error.format_message() == "Something failed\nHint: Try again"

    def test_message_without_hint(self) -> None:
        assert RevtreeCliError("Something failed").format_message() == "Something failed"

    def test_exit_code(self) -> None:
        assert RevtreeCliError("x").exit_code == 1

    def test_config_exists_error(self) -> None:
        with pytest.raises(RevtreeCliError) as exc_info:
            config_exists_error("/tmp/config.toml")

        assert "/tmp/config.toml" in exc_info.value.message
        assert "--force" in exc_info.value.hint
