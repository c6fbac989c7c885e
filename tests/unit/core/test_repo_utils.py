"""Unit tests for repository discovery."""

from pathlib import Path

import pytest

from revtree.core.repo_utils import find_hg_root, find_repo_root
from revtree.domain.exceptions import RepositoryNotFoundError


class TestFindHgRoot:
    """Tests for walking up to the .hg directory."""

    def test_at_root(self, hg_repo: Path) -> None:
        assert find_hg_root(hg_repo) == hg_repo.resolve()

    def test_from_subdirectory(self, hg_repo: Path) -> None:
        nested = hg_repo / "src" / "pkg"
        nested.mkdir(parents=True)

        assert find_hg_root(nested) == hg_repo.resolve()

    def test_hg_file_is_not_a_repository(self, tmp_path: Path) -> None:
        (tmp_path / ".hg").write_text("not a directory")

        assert find_hg_root(tmp_path) != tmp_path.resolve()

    def test_defaults_to_cwd(self, hg_repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(hg_repo)

        assert find_hg_root() == hg_repo.resolve()


class TestFindRepoRoot:
    """Tests for the failing variant."""

    def test_found(self, hg_repo: Path) -> None:
        assert find_repo_root(hg_repo) == hg_repo.resolve()

    def test_not_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("revtree.core.repo_utils.find_hg_root", lambda start: None)

        with pytest.raises(RepositoryNotFoundError) as exc_info:
            find_repo_root(tmp_path)

        assert str(tmp_path.resolve()) in exc_info.value.message
        assert "--repository" in exc_info.value.hint
