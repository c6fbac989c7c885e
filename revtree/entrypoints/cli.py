"""Revtree CLI entrypoint.

Command-line interface for the revtree repository browser.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from revtree.domain.config import RevtreeConfig

from revtree.core.errors import RevtreeCliError, config_exists_error
from revtree.domain.exceptions import RevtreeDomainError
from revtree.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors become RevtreeCliError (message plus hint). Anything
    unexpected is reported with the command name, with a traceback in
    verbose mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except RevtreeCliError:
                # Let RevtreeCliError propagate to use its format_message()
                raise
            except RevtreeDomainError as e:
                raise RevtreeCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise RevtreeCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, log_file: str | None) -> None:
    """Configure root logging once for the process."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def _repo_root(ctx: click.Context) -> Path:
    """Locate the repository root from --repository or the CWD.

    Raises:
        RepositoryNotFoundError: If no enclosing repository exists.
    """
    from revtree.core.repo_utils import find_repo_root

    return find_repo_root(ctx.obj.get("repository"))


def _load_config(repo_root: Path) -> RevtreeConfig:
    """Load the effective configuration for a repository."""
    from revtree.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load(repo_root)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="revtree")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "--repository",
    "-R",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository to browse (default: the one enclosing the CWD).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write log records to this file.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    repository: Path | None,
    log_file: str | None,
) -> None:
    """Revtree - browse a Mercurial repository as a tree.

    History, pending changes and shelves in one lazily expanding tree.
    Runs the interactive browser when no command is given.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["repository"] = repository
    _configure_logging(verbose, log_file)

    if ctx.invoked_subcommand is None:
        ctx.invoke(ui)


@cli.command()
@click.pass_context
@handle_cli_errors("ui")
def ui(ctx: click.Context) -> None:
    """Open the interactive tree browser."""
    from revtree.adapters.factory import TreeFactory
    from revtree.adapters.tui.tree_ui import RevisionTreeUI

    repo_root = _repo_root(ctx)
    config = _load_config(repo_root)
    factory = TreeFactory(config, repo_root)

    logger.debug("Starting tree UI in %s", repo_root)
    RevisionTreeUI(factory, config, factory.create_editor()).run()


async def _populate(engine, expand_files: bool) -> None:
    await engine.rebuild()
    if expand_files:
        await engine.expand_many(engine.changesets)


@cli.command()
@click.option(
    "--files",
    "-f",
    "expand_files",
    is_flag=True,
    help="Expand every changeset to list its files.",
)
@click.pass_context
@handle_cli_errors("dump")
def dump(ctx: click.Context, expand_files: bool) -> None:
    """Print the tree once, without the interactive browser."""
    from revtree.adapters.factory import TreeFactory
    from revtree.core.presentation.rows import RowFormatter
    from revtree.core.progress import progress_context

    repo_root = _repo_root(ctx)
    config = _load_config(repo_root)
    factory = TreeFactory(config, repo_root)

    with progress_context(quiet_mode=ctx.obj.get("quiet", False)) as progress:
        components = factory.create_components(progress=progress)
        engine = components.engine
        asyncio.run(_populate(engine, expand_files))

    formatter = RowFormatter(engine.depth, show_dates=config.display.show_dates)
    for row in engine.sequence:
        click.echo(formatter.plain(row))


# Configuration management commands
@cli.group()
def config() -> None:
    """Manage revtree configuration files.

    revtree uses a two-tier configuration system:
    - Local: .hg/revtree.toml (repo-specific settings)
    - Global: ~/.config/revtree/config.toml (user defaults)

    Local settings override global settings. Missing values use built-in defaults.
    """
    pass


@config.command(name="init")
@click.option(
    "--global",
    "-g",
    "use_global",
    is_flag=True,
    help="Write the global config instead of the repository one.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, use_global: bool, force: bool) -> None:
    """Write a config file holding the default settings."""
    from revtree.domain.config import RevtreeConfig
    from revtree.shared.config_io import (
        get_global_config_path,
        get_local_config_path,
        save_config,
    )

    if use_global:
        path = get_global_config_path()
    else:
        path = get_local_config_path(_repo_root(ctx))

    if path.exists() and not force:
        config_exists_error(str(path))

    save_config(RevtreeConfig.default(), path)
    if not ctx.obj.get("quiet", False):
        click.echo(f"Wrote {path}")


def _display_path_status(path: Path, label: str) -> None:
    """Display a config path with its existence status."""
    status = "exists" if path.exists() else "not created"
    color = "green" if path.exists() else "yellow"
    click.echo(f"{label}{path} ({click.style(status, fg=color)})")


def _display_config_summary(config: RevtreeConfig) -> None:
    """Display every section of the effective config."""
    from dataclasses import asdict

    for section, values in asdict(config).items():
        click.echo(f"  [{section}]")
        for key, value in values.items():
            click.echo(f"    {key} = {value!r}")


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show configuration file locations and the effective settings."""
    from revtree.core.repo_utils import find_hg_root
    from revtree.domain.config import RevtreeConfig
    from revtree.shared.config_io import get_global_config_path, get_local_config_path

    _display_path_status(get_global_config_path(), "Global config: ")

    repo_root = find_hg_root(ctx.obj.get("repository"))
    if repo_root is None:
        click.echo("Local config:  Not in a Mercurial repository")
        click.echo("\nEffective configuration (defaults + global):")
        from revtree.adapters.factory import ConfigFactory

        provider = ConfigFactory().create_config_provider()
        config = provider.load_global(RevtreeConfig.default())
    else:
        _display_path_status(get_local_config_path(repo_root), "Local config:  ")
        click.echo("\nEffective configuration (merged global + local):")
        config = _load_config(repo_root)

    _display_config_summary(config)


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
