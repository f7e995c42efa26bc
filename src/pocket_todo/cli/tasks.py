"""Command-line interface for pocket-todo."""

import sys
import logging
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console

from .. import __version__
from ..config import ConfigModel, LOG_LEVELS, load_config
from ..storage import Storage, StorageError
from ..commands import TodoCommands, CommandResult

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_console(config: ConfigModel) -> Console:
    """Console for diagnostics; never wraps or interprets markup."""
    return Console(no_color=config.no_color, highlight=False, emoji=False, soft_wrap=True)


def setup_logging() -> None:
    """Configure process-wide logging for the console script."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)


def resolve_config(config_path: Optional[str], data_dir: Optional[str]) -> ConfigModel:
    """Resolve configuration once: file first, then command-line overrides."""
    if config_path:
        path = Path(config_path)
    elif data_dir:
        path = ConfigModel(data_dir=data_dir).get_config_path()
    else:
        path = None
    return load_config(path).with_overrides(data_dir=data_dir)


def report(ctx: click.Context, result: CommandResult, plain: bool = False) -> None:
    """Print a command result and apply the exit code policy."""
    config: ConfigModel = ctx.obj['config']
    colour = None if plain and result.success else ("green" if result.success else "red")
    # rich expands tabs, so item text goes through click to stay verbatim
    for line in result.lines:
        click.secho(line, fg=colour, color=False if config.no_color else None)

    if not result.success and ctx.obj['strict']:
        sys.exit(1)


def run_command(ctx: click.Context, handler: Callable[[TodoCommands], CommandResult],
                plain: bool = False) -> None:
    """Run a handler, turning storage errors into a diagnostic and exit 1."""
    try:
        result = handler(ctx.obj['commands'])
    except StorageError as e:
        logger.debug(f"Storage error: {e!r}")
        ctx.obj['console'].print(f"Error: {e}", style="red", markup=False)
        sys.exit(1)
    report(ctx, result, plain=plain)


class OrderedGroup(click.Group):
    """Lists subcommands in the order they were registered."""

    def list_commands(self, ctx):
        return list(self.commands)


@click.group(cls=OrderedGroup)
@click.version_option(version=__version__, prog_name="todo")
@click.option("--data-dir", envvar="TODO_DATA_DIR", type=click.Path(file_okay=False),
              help="Directory holding the todo list (default: ~/.todo)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config file")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), help="Diagnostic log level")
@click.option("--strict", is_flag=True, help="Exit with status 1 when a command fails")
@click.pass_context
def cli(ctx, data_dir, config_path, log_level, strict):
    """pocket-todo - a small personal todo list."""
    ctx.ensure_object(dict)

    config = resolve_config(config_path, data_dir).with_overrides(log_level=log_level)
    logging.getLogger("pocket_todo").setLevel(config.log_level.upper())
    logger.debug(f"Using storage at {config.data_dir}")

    storage = Storage(config)
    ctx.obj['config'] = config
    ctx.obj['console'] = get_console(config)
    ctx.obj['commands'] = TodoCommands(storage)
    ctx.obj['strict'] = strict or config.strict_exit_codes


@cli.command()
@click.pass_context
def init(ctx):
    """Initialise storage for todo command to use for persistence."""
    run_command(ctx, lambda commands: commands.init())


@cli.command()
@click.argument("todo", required=True)
@click.pass_context
def new(ctx, todo):
    """Add new item to todo list."""
    run_command(ctx, lambda commands: commands.new(todo))


@cli.command()
@click.argument("item_id", metavar="ID", type=int)
@click.pass_context
def complete(ctx, item_id):
    """Mark item ID as done."""
    run_command(ctx, lambda commands: commands.complete(item_id))


@cli.command(name="list")
@click.option("--all", "-a", "show_all", is_flag=True, help="Include completed items")
@click.option("--verbose", "-v", is_flag=True, help="Show created and completed times")
@click.pass_context
def list_items(ctx, show_all, verbose):
    """Print todo list."""
    run_command(ctx, lambda commands: commands.list(all=show_all, verbose=verbose), plain=True)


def main(*args, **kwargs):
    """Console script entry point."""
    setup_logging()
    return cli(*args, **kwargs)


if __name__ == "__main__":
    main()
