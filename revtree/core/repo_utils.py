"""Repository discovery utilities.

Functions for finding the Mercurial repository root from any subdirectory.
"""

from pathlib import Path

from revtree.domain.exceptions import RepositoryNotFoundError

HG_DIR = ".hg"


def find_hg_root(start_path: Path | None = None) -> Path | None:
    """Find the repository root by walking up directories.

    Searches for a .hg/ directory starting from start_path and walking up
    to the filesystem root, the same way hg itself finds its repository.

    Args:
        start_path: Directory to start searching from. Defaults to CWD.

    Returns:
        Absolute path to repository root (directory containing .hg/),
        or None if not found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        if (current / HG_DIR).is_dir():
            return current

        parent = current.parent
        if parent == current:
            return None

        current = parent


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the repository root or fail.

    Args:
        start_path: Directory to start searching from. Defaults to CWD.

    Returns:
        Absolute path to the repository root.

    Raises:
        RepositoryNotFoundError: If no .hg/ exists at or above start_path.
    """
    root = find_hg_root(start_path)
    if root is None:
        where = (start_path or Path.cwd()).resolve()
        raise RepositoryNotFoundError(
            f"No Mercurial repository found at or above {where}",
            hint="Run revtree inside a repository, or pass --repository PATH",
        )
    return root
