"""Unit tests for the Mercurial command builder."""

import pytest

from revtree.adapters.hg_cmd.commands import LOG_TEMPLATE, HgCommands


@pytest.fixture
def hg() -> HgCommands:
    return HgCommands()


class TestQueries:
    """Tests for read-only query specs."""

    def test_log_uses_revset_limit_and_template(self) -> None:
        spec = HgCommands(revset="draft()", limit=20).log()

        assert spec.argv() == ["hg", "log", "-r", "draft()", "-l", "20", "--template", LOG_TEMPLATE]

    def test_log_template_fields(self) -> None:
        for field_name in ("changeset:", "summary:", "date:", "parent:", "tag:"):
            assert field_name in LOG_TEMPLATE
        assert LOG_TEMPLATE.endswith("\\n")

    def test_status(self, hg: HgCommands) -> None:
        assert hg.status().argv() == ["hg", "status"]
        assert hg.status_change("abc").argv() == ["hg", "status", "--change", "abc"]

    def test_current_parent(self, hg: HgCommands) -> None:
        assert hg.current_parent().args[:3] == ("log", "-r", "parents()")

    def test_shelves(self, hg: HgCommands) -> None:
        assert hg.shelve_list().argv() == ["hg", "shelve", "--list"]
        assert hg.shelve_diff("wip").argv() == ["hg", "shelve", "--patch", "wip"]

    def test_diff_working_copy_file(self, hg: HgCommands) -> None:
        assert hg.diff("a b.txt", None).argv() == ["hg", "diff", "--git", "path:a b.txt"]

    def test_diff_committed_file(self, hg: HgCommands) -> None:
        assert hg.diff("a.txt", "abc").argv() == [
            "hg", "diff", "--git", "--change", "abc", "path:a.txt",
        ]

    def test_diff_changeset(self, hg: HgCommands) -> None:
        assert hg.diff_changeset(None).argv() == ["hg", "diff", "--git"]
        assert hg.diff_changeset("abc").argv() == ["hg", "diff", "--git", "--change", "abc"]

    def test_custom_executable(self) -> None:
        assert HgCommands(executable="/opt/hg/bin/hg").status().command == "/opt/hg/bin/hg"


class TestMutations:
    """Tests for mutation specs."""

    def test_update(self, hg: HgCommands) -> None:
        assert hg.update("abc").argv() == ["hg", "update", "-r", "abc"]

    def test_strip_enables_extension(self, hg: HgCommands) -> None:
        assert hg.strip("abc").argv() == [
            "hg", "--config", "extensions.strip=", "strip", "-r", "abc",
        ]

    def test_revert_paths(self, hg: HgCommands) -> None:
        assert hg.revert(["a.txt", "b.txt"]).argv() == [
            "hg", "revert", "path:a.txt", "path:b.txt",
        ]

    def test_revert_all_to_revision(self, hg: HgCommands) -> None:
        assert hg.revert([], revision="abc", all_files=True).argv() == [
            "hg", "revert", "-r", "abc", "--all",
        ]

    def test_shelve(self, hg: HgCommands) -> None:
        assert hg.shelve(None, []).argv() == ["hg", "shelve"]
        assert hg.shelve("later", ["a.txt"]).argv() == [
            "hg", "shelve", "--name", "later", "path:a.txt",
        ]

    def test_unshelve_and_delete(self, hg: HgCommands) -> None:
        assert hg.unshelve("wip").argv() == ["hg", "unshelve", "wip"]
        assert hg.delete_shelve("wip").argv() == ["hg", "shelve", "--delete", "wip"]

    def test_commit_message_is_one_argument(self, hg: HgCommands) -> None:
        assert hg.commit("fix: it's \"done\"").argv() == [
            "hg", "commit", "--message", "fix: it's \"done\"",
        ]

    def test_amend(self, hg: HgCommands) -> None:
        assert hg.amend("new").argv() == ["hg", "commit", "--amend", "--message", "new"]
        assert hg.amend(None).argv() == [
            "hg", "--config", "ui.editor=true", "commit", "--amend",
        ]

    def test_duplicate_and_uncommit(self, hg: HgCommands) -> None:
        assert hg.duplicate("abc").argv() == ["hg", "graft", "--force", "-r", "abc"]
        assert hg.uncommit().argv() == ["hg", "--config", "extensions.uncommit=", "uncommit"]

    def test_phase(self, hg: HgCommands) -> None:
        assert hg.get_phase("abc").argv() == ["hg", "phase", "-r", "abc"]
        assert hg.set_phase("abc", "draft").argv() == [
            "hg", "phase", "--force", "--draft", "-r", "abc",
        ]

    def test_set_phase_rejects_unknown(self, hg: HgCommands) -> None:
        with pytest.raises(ValueError):
            hg.set_phase("abc", "obsolete")
