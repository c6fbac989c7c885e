"""Centralized color definitions for all revtree output.

Provides a consistent color scheme for the interactive tree, the diff preview
and the non-interactive ``dump`` command. Supports both click-style colors and
prompt_toolkit styles.
"""

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pygments.token import _TokenType

# Type aliases for color values
ClickColor = Literal["black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


class AnsiCodes:
    """ANSI escape codes for terminal coloring.

    Uses the standard 16-color palette so output adapts to terminal themes.
    """

    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"

    DARK_GRAY = "\x1b[90m"
    RED = "\x1b[91m"
    GREEN = "\x1b[92m"
    YELLOW = "\x1b[93m"
    MAGENTA = "\x1b[95m"
    CYAN = "\x1b[96m"


# Status code -> prompt_toolkit style class
STATUS_STYLES: dict[str, str] = {
    "M": "class:status.modified",
    "A": "class:status.added",
    "R": "class:status.removed",
    "!": "class:status.missing",
    "?": "class:status.unknown",
}


class RevtreeColors:
    """Centralized color palette for consistent output across revtree."""

    # === Tree colors ===
    REV_FG: ClickColor = "yellow"  # Short revision ids
    TAG_FG: ClickColor = "green"  # Tags
    CURRENT_FG: ClickColor = "magenta"  # Working copy parent marker
    SHELVE_FG: ClickColor = "cyan"  # Shelve names
    PATH_FG: ClickColor = "white"

    STATUS_FG: dict[str, ClickColor] = {
        "M": "blue",
        "A": "green",
        "R": "red",
        "!": "red",
        "?": "magenta",
    }

    # === Status message colors ===
    SUCCESS_FG: ClickColor = "green"
    WARNING_FG: ClickColor = "yellow"
    ERROR_FG: ClickColor = "red"

    @staticmethod
    def get_prompt_toolkit_style() -> dict[str, str]:
        """Get style dictionary for prompt_toolkit Style.from_dict().

        Uses ANSI color names instead of hex codes so colors adapt to the
        user's terminal theme.

        Returns:
            Dictionary mapping style class names to style definitions.
        """
        return {
            "separator": "fg:ansibrightblack",
            "dimmed": "fg:ansibrightblack",
            "marker": "fg:ansibrightblack",
            "rev": "fg:ansiyellow",
            "tag": "fg:ansigreen bold",
            "current": "fg:ansimagenta bold",
            "pending": "fg:ansimagenta bold",
            "shelve": "fg:ansicyan bold",
            "status.modified": "fg:ansiblue bold",
            "status.added": "fg:ansigreen bold",
            "status.removed": "fg:ansired bold",
            "status.missing": "fg:ansired",
            "status.unknown": "fg:ansimagenta",
            "diff.added": "fg:ansigreen",
            "diff.removed": "fg:ansired",
            "diff.header": "fg:ansicyan",
            "selected": "reverse",
            "status": "bold",
            "error": "fg:ansired bold",
            "prompt": "fg:ansiyellow bold",
        }

    @staticmethod
    def click_rev(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.REV_FG)

    @staticmethod
    def click_tag(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.TAG_FG, bold=True)

    @staticmethod
    def click_current(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.CURRENT_FG, bold=True)

    @staticmethod
    def click_shelve(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.SHELVE_FG, bold=True)

    @staticmethod
    def click_status(code: str) -> str:
        """Style a one-character file status code."""
        import click
        return click.style(code, fg=RevtreeColors.STATUS_FG.get(code, "white"), bold=True)

    @staticmethod
    def click_error(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.ERROR_FG)

    @staticmethod
    def click_success(text: str) -> str:
        import click
        return click.style(text, fg=RevtreeColors.SUCCESS_FG)

    @staticmethod
    def click_dimmed(text: str) -> str:
        import click
        return click.style(text, dim=True)


def _get_token_color_map() -> dict["_TokenType", str]:
    """Get the mapping from Pygments diff token types to ANSI color codes."""
    from pygments.token import Generic, Token

    return {
        Generic.Inserted: AnsiCodes.GREEN,
        Generic.Deleted: AnsiCodes.RED,
        Generic.Subheading: AnsiCodes.CYAN,
        Generic.Heading: AnsiCodes.BOLD,
        Token.Comment: AnsiCodes.DARK_GRAY,
    }


def _find_token_color(
    token_type: "_TokenType", color_map: dict["_TokenType", str]
) -> str | None:
    """Find the color for a token, checking parent token types."""
    for ttype in [token_type] + list(token_type.split()):
        if ttype in color_map:
            return color_map[ttype]
    return None


def _colorize_text(text: str, color: str | None) -> str:
    if color and text:
        return f"{color}{text}{AnsiCodes.RESET}"
    return text


def render_diff_highlighted(diff_text: str, theme: str = "ansi") -> str:
    """Render unified diff text with terminal colors.

    The default ``"ansi"`` theme maps diff tokens onto the 16-color palette
    so the user's terminal scheme is respected. Any other value is looked up
    as a Pygments style and rendered with the 256-color formatter; unknown
    style names fall back to the ``"ansi"`` rendering.

    Args:
        diff_text: Unified diff text.
        theme: Pygments style name, or "ansi".

    Returns:
        ANSI-colored text ready for terminal output.
    """
    from pygments import highlight, lex
    from pygments.lexers import DiffLexer
    from pygments.util import ClassNotFound

    if theme != "ansi":
        from pygments.formatters import Terminal256Formatter

        try:
            return highlight(diff_text, DiffLexer(), Terminal256Formatter(style=theme))
        except ClassNotFound:
            pass

    color_map = _get_token_color_map()
    parts: list[str] = []
    for token_type, value in lex(diff_text, DiffLexer()):
        color = _find_token_color(token_type, color_map)
        # Color each line separately so resets never span a newline
        parts.append("\n".join(_colorize_text(line, color) for line in value.split("\n")))
    return "".join(parts)
