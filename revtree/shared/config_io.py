"""Reading and writing revtree TOML config files.

Two files take part: a per-user global file and ``.hg/revtree.toml`` inside
the repository, which hg itself never reads or tracks.
"""

import os
import platform
import tomllib
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from revtree.domain.config import RevtreeConfig

APP_DIR = "revtree"
GLOBAL_CONFIG_NAME = "config.toml"
LOCAL_CONFIG_NAME = "revtree.toml"


def _config_home() -> Path:
    # %APPDATA% on Windows, $XDG_CONFIG_HOME elsewhere, ~/.config as fallback
    var = "APPDATA" if platform.system() == "Windows" else "XDG_CONFIG_HOME"
    base = os.environ.get(var, "")
    return Path(base) if base else Path.home() / ".config"


def get_global_config_path() -> Path:
    """Per-user config file; it need not exist."""
    return _config_home() / APP_DIR / GLOBAL_CONFIG_NAME


def get_local_config_path(repo_root: Path) -> Path:
    """Repository config file inside ``.hg/``."""
    return repo_root / ".hg" / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Parse a TOML config file into raw section tables.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid TOML.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path.name}: {e}") from e


def config_to_data(config: RevtreeConfig) -> dict[str, Any]:
    """Section tables for a config, ready for tomli_w."""
    return asdict(config)


def save_config(config: RevtreeConfig, path: Path) -> None:
    """Write ``config`` as TOML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
