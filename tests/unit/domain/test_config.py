"""Unit tests for configuration domain models."""

import pytest

from revtree.domain.config import DisplayConfig, LogConfig, RevtreeConfig, VcsConfig


class TestSectionValidation:
    """Tests for per-section validation."""

    def test_defaults(self) -> None:
        config = RevtreeConfig.default()

        assert config.vcs.executable == "hg"
        assert config.vcs.patch_executable == "patch"
        assert config.vcs.plain
        assert config.log.limit == 200
        assert config.display.theme == "ansi"
        assert config == RevtreeConfig()

    def test_empty_executable_rejected(self) -> None:
        with pytest.raises(ValueError, match="executable"):
            VcsConfig(executable="")
        with pytest.raises(ValueError, match="patch_executable"):
            VcsConfig(patch_executable="")

    @pytest.mark.parametrize("limit", [0, -5])
    def test_limit_must_be_positive(self, limit: int) -> None:
        with pytest.raises(ValueError, match="limit must be positive"):
            LogConfig(limit=limit)

    def test_blank_revset_rejected(self) -> None:
        with pytest.raises(ValueError, match="revset"):
            LogConfig(revset="   ")

    def test_frozen(self) -> None:
        config = DisplayConfig()

        with pytest.raises(AttributeError):
            config.theme = "monokai"  # type: ignore[misc]


class TestFromPartial:
    """Tests for overlaying TOML data onto a config."""

    def test_only_present_keys_change(self) -> None:
        base = RevtreeConfig.default()

        config = RevtreeConfig.from_partial(base, {"log": {"limit": 50}})

        assert config.log.limit == 50
        assert config.log.revset == base.log.revset
        assert config.vcs == base.vcs

    def test_layers_stack(self) -> None:
        first = RevtreeConfig.from_partial(
            RevtreeConfig.default(), {"display": {"theme": "monokai", "show_dates": False}}
        )

        second = RevtreeConfig.from_partial(first, {"display": {"theme": "ansi"}})

        assert second.display.theme == "ansi"
        assert not second.display.show_dates

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError, match=r"Unknown key\(s\) in \[vcs\]: colour"):
            RevtreeConfig.from_partial(RevtreeConfig.default(), {"vcs": {"colour": True}})

    def test_section_must_be_table(self) -> None:
        with pytest.raises(ValueError, match="must be a table"):
            RevtreeConfig.from_partial(RevtreeConfig.default(), {"log": 5})

    def test_values_are_revalidated(self) -> None:
        with pytest.raises(ValueError):
            RevtreeConfig.from_partial(RevtreeConfig.default(), {"log": {"limit": 0}})

    def test_unknown_sections_ignored(self) -> None:
        base = RevtreeConfig.default()

        assert RevtreeConfig.from_partial(base, {"extras": {"x": 1}}) == base
