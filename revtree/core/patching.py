"""Hunk-granularity revert through the external patch tool.

A single hunk is turned back into a standalone unified diff (the owning
file's header lines plus the hunk), staged in a temporary file, and applied
in reverse to the working copy.
"""

import logging
import os
import tempfile
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from revtree.core.orchestrator import Orchestrator
from revtree.domain.entities import ChangedFile, Hunk
from revtree.domain.value_objects import CommandSpec

logger = logging.getLogger(__name__)


def build_patch(file: ChangedFile, hunk: Hunk) -> str:
    """Build a one-hunk patch for ``file``.

    The file's diff preamble is reused when it was captured while fetching
    the hunks; otherwise minimal ``---``/``+++`` headers are synthesized.

    Args:
        file: File owning the hunk.
        hunk: Hunk to serialize.

    Returns:
        Patch text terminated by a blank line.
    """
    preamble = file.preamble or [f"--- a/{file.path}", f"+++ b/{file.path}"]
    return "\n".join([*preamble, *hunk.lines, ""]) + "\n"


@contextmanager
def staged_patch(text: str) -> Iterator[Path]:
    """Write patch text to a temporary file removed on every exit path."""
    handle = tempfile.NamedTemporaryFile(
        mode="w", suffix=".patch", prefix="revtree-", delete=False, encoding="utf-8"
    )
    path = Path(handle.name)
    try:
        with handle:
            handle.write(text)
        yield path
    finally:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass


class PatchReverter:
    """Reverse-applies single hunks to the working copy.

    Args:
        orchestrator: Runs the patch tool in the repository root.
        patch_executable: Name or path of the ``patch`` executable.
    """

    def __init__(self, orchestrator: Orchestrator, patch_executable: str = "patch") -> None:
        self.orchestrator = orchestrator
        self.patch_executable = patch_executable

    def reverse_spec(self, patch_file: Path, target: str) -> CommandSpec:
        return CommandSpec(
            self.patch_executable, ("-R", "-p1", "-i", str(patch_file), target)
        )

    async def revert_hunk(
        self,
        file: ChangedFile,
        hunk: Hunk,
        then: Callable[[], Awaitable[None]] | None = None,
    ) -> str:
        """Undo one hunk in the working copy.

        Args:
            file: File owning the hunk.
            hunk: Hunk to undo.
            then: Awaited after the patch tool exits (normally a rebuild).

        Returns:
            Output of the patch tool.
        """
        text = build_patch(file, hunk)
        with staged_patch(text) as patch_file:
            logger.debug("Reverting %s in %s via %s", hunk.header, file.path, patch_file)
            output = await self.orchestrator.run_one(
                self.reverse_spec(patch_file, file.path), "Reverting hunk"
            )
            if then is not None:
                await then()
        return output
