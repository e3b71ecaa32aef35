"""gitscope serve command - run the MCP server over stdio."""

from pathlib import Path

import click

from gitscope.cli.utils import load_cli_config, repo_option


@click.command("serve")
@repo_option
@click.pass_context
def serve_command(ctx: click.Context, repo: Path | None) -> None:
    """Serve history browsing tools over MCP (stdio).

    Requests that do not name a repository use --repo, or the repository
    containing the current directory.
    """
    from gitscope.mcp.server import run_server

    config = load_cli_config(repo)
    if ctx.obj and ctx.obj.get("verbose"):
        config = config.model_copy(update={"logging": config.logging.model_copy(update={"level": "DEBUG"})})
    run_server(config, repo)
