"""gitscope CLI - browse git history from the terminal."""

import click

from gitscope import __version__
from gitscope.cli.history import (
    blame_command,
    branches_command,
    cat_command,
    diff_command,
    log_command,
    remotes_command,
    search_command,
    show_command,
    staged_command,
    stash_group,
    tree_command,
)
from gitscope.cli.serve import serve_command
from gitscope.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="gitscope")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """gitscope - read-only git history, diff, blame and search."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(branches_command)
cli.add_command(remotes_command)
cli.add_command(log_command)
cli.add_command(show_command)
cli.add_command(diff_command)
cli.add_command(blame_command)
cli.add_command(tree_command)
cli.add_command(cat_command)
cli.add_command(search_command)
cli.add_command(staged_command)
cli.add_command(stash_group)
cli.add_command(serve_command)


if __name__ == "__main__":
    cli()
