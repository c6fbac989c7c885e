"""Editor port used by the open-file action.

The UI hands a working-copy path and a start line to whatever implements
Editor; tests substitute a Mock.
"""

from pathlib import Path
from typing import Protocol

from revtree.domain.exceptions import RevtreeDomainError


class EditorError(RevtreeDomainError):
    """An editor could not open a working-copy file."""


class EditorFileNotFoundError(EditorError):
    """The file is missing from the working copy."""


class EditorNotFoundError(EditorError):
    """No executable for the chosen editor command."""


class EditorExecutionError(EditorError):
    """The editor exited with a non-zero status."""


class Editor(Protocol):
    def open_file(self, file_path: Path, line_num: int) -> None:
        """Open ``file_path`` with the cursor on ``line_num`` (1-based).

        Blocks until the editor exits. Raises an EditorError subclass on
        failure.
        """
        ...

    def get_editor_name(self) -> str:
        """Short name of the editor, for status messages."""
        ...
