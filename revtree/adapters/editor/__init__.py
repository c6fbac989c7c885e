"""Editor adapter for opening working-copy files at a hunk.

Implements the Editor port by suspending the UI and running the user's
editor as a child process. The editor is chosen the way hg chooses one for
commit messages, and may carry its own arguments (``"code --wait"``).
"""

import os
import shlex
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from revtree.ports.editor import (
    EditorExecutionError,
    EditorFileNotFoundError,
    EditorNotFoundError,
)

EDITOR_ENV_VARS = ("HGEDITOR", "VISUAL", "EDITOR")
FALLBACK_EDITOR = "vi"

LineArgs = Callable[[Path, int], list[str]]


def _plus_line(path: Path, line: int) -> list[str]:
    return [f"+{line}", str(path)]


def _goto(path: Path, line: int) -> list[str]:
    return ["--goto", f"{path}:{line}"]


def _colon(path: Path, line: int) -> list[str]:
    return [f"{path}:{line}"]


# Executable basename -> how it takes a start line
LINE_ARGS: dict[str, LineArgs] = {
    **dict.fromkeys(
        ["vi", "vim", "nvim", "emacs", "emacsclient", "nano", "hx", "kak"], _plus_line
    ),
    **dict.fromkeys(["code", "codium"], _goto),
    **dict.fromkeys(["subl", "zed"], _colon),
}


def get_editor() -> str:
    """Editor command from $HGEDITOR, $VISUAL or $EDITOR, else ``vi``."""
    for name in EDITOR_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return FALLBACK_EDITOR


def get_editor_command(editor: str, file_path: Path, line_num: int) -> list[str]:
    """Build the argv opening ``file_path`` at ``line_num``.

    Unknown editors get the ``+line`` form most terminal editors accept.

    Args:
        editor: Editor command, possibly with arguments.
        file_path: File to open.
        line_num: 1-based start line.

    Returns:
        Argument vector for subprocess.run().
    """
    argv = shlex.split(editor)
    line_args = LINE_ARGS.get(Path(argv[0]).name.lower(), _plus_line)
    return [*argv, *line_args(file_path, line_num)]


class SubprocessEditor:
    """Runs the user's editor in the foreground and waits for it."""

    def __init__(self, editor: str | None = None) -> None:
        """Initialize the editor adapter.

        Args:
            editor: Editor command; defaults to the environment's choice.
        """
        self._editor = editor or get_editor()

    def get_editor_name(self) -> str:
        return Path(shlex.split(self._editor)[0]).name

    def open_file(self, file_path: Path, line_num: int) -> None:
        """Open a working-copy file at a line.

        Raises:
            EditorFileNotFoundError: If the file is not in the working copy.
            EditorNotFoundError: If the editor executable is not on PATH.
            EditorExecutionError: If the editor exits with an error.
        """
        if not file_path.exists():
            raise EditorFileNotFoundError(
                f"File not found: {file_path}",
                hint="The file may have been removed in the working copy",
            )

        cmd = get_editor_command(self._editor, file_path, max(1, line_num))
        if shutil.which(cmd[0]) is None:
            raise EditorNotFoundError(
                f"Editor '{cmd[0]}' not found",
                hint="Set $HGEDITOR, $VISUAL or $EDITOR",
            )

        try:
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as e:
            raise EditorExecutionError(
                f"{self.get_editor_name()} exited with code {e.returncode}",
                hint="Any changes saved before it exited are kept",
            ) from e
