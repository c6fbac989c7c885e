"""CLI error handling with actionable hints.

Provides consistent error formatting for all revtree CLI commands.
"""

from typing import NoReturn

import click


class RevtreeCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise RevtreeCliError(
            "Config file already exists",
            hint="Edit it directly or delete it first",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def config_exists_error(path: str) -> NoReturn:
    """Raise error when a config file would be overwritten.

    Raises:
        RevtreeCliError: Always raises with a --force hint.
    """
    raise RevtreeCliError(
        f"Config file already exists: {path}",
        hint="Pass --force to overwrite it",
    )
