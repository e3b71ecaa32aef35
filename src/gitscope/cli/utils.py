"""CLI utilities shared by the history commands."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from gitscope.config import GitScopeConfig, load_config
from gitscope.core.errors import ConfigError
from gitscope.core.serialization import to_wire
from gitscope.git import GitError, HistoryOps

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


def repo_option(fn: F) -> F:
    return click.option(
        "--repo",
        "repo",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        default=None,
        help="Repository path (default: discover from current directory)",
    )(fn)


def json_option(fn: F) -> F:
    return click.option("--json", "as_json", is_flag=True, help="Output as JSON")(fn)


def load_cli_config(repo: Path | None) -> GitScopeConfig:
    try:
        return load_config(repo)
    except ConfigError as e:
        raise click.ClickException(e.message) from e


def history_ops(repo: Path | None) -> HistoryOps:
    return HistoryOps(load_cli_config(repo))


def run_op(fn: Callable[..., T], *args: Any) -> T:
    """Call a history operation, turning domain errors into CLI errors."""
    try:
        return fn(*args)
    except GitError as e:
        raise click.ClickException(str(e)) from e


def echo_json(data: Any) -> None:
    click.echo(json.dumps(to_wire(data), indent=2))
