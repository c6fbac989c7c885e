"""Unit tests for the subprocess editor adapter."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from revtree.adapters.editor import SubprocessEditor, get_editor, get_editor_command
from revtree.ports.editor import (
    EditorExecutionError,
    EditorFileNotFoundError,
    EditorNotFoundError,
)


class TestGetEditor:
    """Tests for editor discovery."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("HGEDITOR", "VISUAL", "EDITOR"):
            monkeypatch.delenv(name, raising=False)

    def test_hgeditor_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HGEDITOR", "emacs -nw")
        monkeypatch.setenv("VISUAL", "nvim")

        assert get_editor() == "emacs -nw"

    def test_visual_before_editor(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VISUAL", "nvim")
        monkeypatch.setenv("EDITOR", "nano")

        assert get_editor() == "nvim"

    def test_blank_values_skipped_then_vi(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VISUAL", "  ")
        monkeypatch.setenv("EDITOR", "nano")
        assert get_editor() == "nano"

        monkeypatch.delenv("EDITOR")
        assert get_editor() == "vi"


class TestEditorCommand:
    """Tests for line-number command patterns."""

    @pytest.mark.parametrize(
        ("editor", "expected"),
        [
            ("vim", ["vim", "+7", "/r/a.txt"]),
            ("/usr/bin/nvim", ["/usr/bin/nvim", "+7", "/r/a.txt"]),
            ("code", ["code", "--goto", "/r/a.txt:7"]),
            ("subl", ["subl", "/r/a.txt:7"]),
            ("unknown-editor", ["unknown-editor", "+7", "/r/a.txt"]),
            ("code --wait", ["code", "--wait", "--goto", "/r/a.txt:7"]),
            ("zed", ["zed", "/r/a.txt:7"]),
        ],
    )
    def test_patterns(self, editor: str, expected: list[str]) -> None:
        assert get_editor_command(editor, Path("/r/a.txt"), 7) == expected


class TestSubprocessEditor:
    """Tests for opening files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(EditorFileNotFoundError):
            SubprocessEditor("vi").open_file(tmp_path / "absent.txt", 1)

    def test_missing_editor(self, tmp_path: Path) -> None:
        target = tmp_path / "a.txt"
        target.write_text("x\n")

        with pytest.raises(EditorNotFoundError) as exc_info:
            SubprocessEditor("revtree-no-such-editor").open_file(target, 1)

        assert "$EDITOR" in exc_info.value.hint

    def test_runs_editor_at_line(self, tmp_path: Path) -> None:
        target = tmp_path / "a.txt"
        target.write_text("x\n")

        with patch("shutil.which", return_value="/usr/bin/vim"), patch(
            "subprocess.run"
        ) as mock_run:
            SubprocessEditor("vim").open_file(target, 0)

        mock_run.assert_called_once_with(["vim", "+1", str(target)], check=True)

    def test_editor_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "a.txt"
        target.write_text("x\n")

        with patch("shutil.which", return_value="/usr/bin/vim"), patch(
            "subprocess.run", side_effect=subprocess.CalledProcessError(2, ["vim"])
        ):
            with pytest.raises(EditorExecutionError, match="exited with code 2"):
                SubprocessEditor("vim").open_file(target, 3)

    def test_editor_name(self) -> None:
        assert SubprocessEditor("/usr/local/bin/hx").get_editor_name() == "hx"

    def test_editor_with_arguments(self) -> None:
        assert SubprocessEditor("emacsclient -t").get_editor_name() == "emacsclient"
