"""History browsing commands: branches, log, show, diff, blame, search and friends."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from gitscope.cli.utils import echo_json, history_ops, json_option, repo_option, run_op
from gitscope.git import FileChange, FileDiff, FileTreeNode

_STATUS_MARKS = {"added": "A", "modified": "M", "deleted": "D", "renamed": "R"}
_LINE_MARKS = {"context": " ", "addition": "+", "deletion": "-"}
_LINE_STYLES = {"context": "", "addition": "green", "deletion": "red"}


def _console() -> Console:
    return Console(highlight=False)


def _print_changes(changes: list[FileChange], empty: str) -> None:
    console = _console()
    if not changes:
        console.print(f"[dim]{empty}[/dim]")
        return
    for change in changes:
        mark = _STATUS_MARKS[change.status]
        if change.old_path:
            console.print(f"  {mark}  {change.old_path} -> {change.path}", markup=False)
        else:
            console.print(f"  {mark}  {change.path}", markup=False)


def _print_diff(diff: FileDiff) -> None:
    console = _console()
    header = f"{diff.old_path} -> {diff.path}" if diff.old_path else diff.path
    console.print(f"[bold]{escape(header)}[/bold] [dim]({diff.status})[/dim]")
    if diff.is_binary:
        console.print("[yellow]Binary file[/yellow]")
        return
    for line in diff.diff_lines:
        old_no = "" if line.old_line_number is None else str(line.old_line_number)
        new_no = "" if line.new_line_number is None else str(line.new_line_number)
        text = f"{old_no:>5} {new_no:>5} {_LINE_MARKS[line.line_type]} {line.content}"
        console.print(text, style=_LINE_STYLES[line.line_type], markup=False)
        if line.missing_newline:
            console.print("            \\ No newline at end of file", style="dim", markup=False)


def _add_tree_nodes(parent: Tree, nodes: tuple[FileTreeNode, ...] | list[FileTreeNode]) -> None:
    for node in nodes:
        if node.is_directory:
            _add_tree_nodes(parent.add(f"[bold blue]{escape(node.name)}/[/bold blue]"), node.children)
        else:
            size = f" [dim]{node.size} B[/dim]" if node.size is not None else ""
            parent.add(f"{escape(node.name)}{size}")


# =============================================================================
# Refs
# =============================================================================


@click.command("branches")
@repo_option
@json_option
def branches_command(repo: Path | None, as_json: bool) -> None:
    """List local branches."""
    branches = run_op(history_ops(repo).list_branches, repo)
    if as_json:
        echo_json(branches)
        return
    console = _console()
    for branch in branches:
        marker = "[green]*[/green]" if branch.is_current else " "
        console.print(f"{marker} {escape(branch.name)}")


@click.command("remotes")
@repo_option
@json_option
def remotes_command(repo: Path | None, as_json: bool) -> None:
    """List remotes, grouped by name."""
    remotes = run_op(history_ops(repo).list_remotes, repo)
    if as_json:
        echo_json(remotes)
        return
    grouped: dict[str, list[str]] = defaultdict(list)
    for remote in remotes:
        grouped[remote.name].append(f"{remote.url} ({'push' if remote.is_push else 'fetch'})")
    console = _console()
    if not grouped:
        console.print("[dim]No remotes[/dim]")
    for name, urls in grouped.items():
        console.print(f"[bold]{escape(name)}[/bold]")
        for url in urls:
            console.print(f"  {url}", markup=False)


# =============================================================================
# Commits
# =============================================================================


@click.command("log")
@repo_option
@json_option
@click.option("--branch", "branch_name", default=None, help="Branch to walk (default: HEAD)")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum commits to show")
def log_command(repo: Path | None, as_json: bool, branch_name: str | None, limit: int | None) -> None:
    """Show commit history, newest first."""
    commits = run_op(history_ops(repo).list_commits, repo, branch_name, limit)
    if as_json:
        echo_json(commits)
        return
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", style="dim", no_wrap=True)
    table.add_column("Author", style="cyan")
    table.add_column("Message")
    for commit in commits:
        summary = commit.summary + (" [merge]" if commit.is_merge else "")
        table.add_row(commit.short_id, commit.date.strftime("%Y-%m-%d %H:%M"), commit.author, summary)
    _console().print(table)


@click.command("show")
@repo_option
@json_option
@click.argument("commit_id")
def show_command(repo: Path | None, as_json: bool, commit_id: str) -> None:
    """List files changed by COMMIT_ID."""
    changes = run_op(history_ops(repo).get_commit_changes, repo, commit_id)
    if as_json:
        echo_json(changes)
        return
    _print_changes(changes, "No changes")


@click.command("diff")
@repo_option
@json_option
@click.argument("commit_id")
@click.argument("file_path")
def diff_command(repo: Path | None, as_json: bool, commit_id: str, file_path: str) -> None:
    """Show the line diff of FILE_PATH in COMMIT_ID."""
    diff = run_op(history_ops(repo).get_file_diff, repo, commit_id, file_path)
    if as_json:
        echo_json(diff)
        return
    _print_diff(diff)


@click.command("blame")
@repo_option
@json_option
@click.argument("commit_id")
@click.argument("file_path")
def blame_command(repo: Path | None, as_json: bool, commit_id: str, file_path: str) -> None:
    """Show the originating commit of every line of FILE_PATH at COMMIT_ID."""
    blame = run_op(history_ops(repo).get_file_blame, repo, commit_id, file_path)
    if as_json:
        echo_json(blame)
        return
    console = _console()
    for line in blame.blame_lines:
        prefix = f"{line.commit_short_id} {line.author[:16]:<16} {line.date:%Y-%m-%d} {line.line_number:>5} "
        console.print(prefix + line.content, markup=False)


@click.command("tree")
@repo_option
@json_option
@click.argument("commit_id")
def tree_command(repo: Path | None, as_json: bool, commit_id: str) -> None:
    """Show the file tree of COMMIT_ID."""
    nodes = run_op(history_ops(repo).get_commit_file_tree, repo, commit_id)
    if as_json:
        echo_json(nodes)
        return
    root = Tree(f"[bold]{escape(commit_id)}[/bold]")
    _add_tree_nodes(root, nodes)
    _console().print(root)


@click.command("cat")
@repo_option
@json_option
@click.argument("commit_id")
@click.argument("file_path")
def cat_command(repo: Path | None, as_json: bool, commit_id: str, file_path: str) -> None:
    """Print FILE_PATH as it is at COMMIT_ID."""
    content = run_op(history_ops(repo).get_file_content, repo, commit_id, file_path)
    if as_json:
        echo_json({"commit_id": commit_id, "path": file_path, "content": content})
        return
    click.echo(content, nl=False)


# =============================================================================
# Search
# =============================================================================


@click.command("search")
@repo_option
@json_option
@click.argument("query")
@click.option("--branch", "branch_name", default=None, help="Branch to search from (default: HEAD)")
@click.option("--max-commits", type=int, default=None, help="Commits to scan (10-10000)")
def search_command(
    repo: Path | None,
    as_json: bool,
    query: str,
    branch_name: str | None,
    max_commits: int | None,
) -> None:
    """Search commit messages, file names and file content for QUERY."""
    report = run_op(history_ops(repo).global_search_report, repo, query, branch_name, max_commits)
    if as_json:
        echo_json(
            {
                "results": report.results,
                "commits_scanned": report.commits_scanned,
                "truncated": report.truncated,
            }
        )
        return
    console = _console()
    if not report.results:
        console.print("[dim]No results[/dim]")
        return
    for result in report.results:
        location = result.file_path or ""
        if result.line_number is not None:
            location = f"{location}:{result.line_number}"
        console.print(
            f"[yellow]{result.commit_id[:8]}[/yellow] [cyan]{result.result_type:<7}[/cyan] {escape(location)}"
        )
        if result.content_preview:
            console.print(f"    {result.content_preview}", markup=False)
    if report.truncated:
        console.print("[dim]Result cap reached; older matches are not shown[/dim]")


# =============================================================================
# Staged changes and stashes
# =============================================================================


@click.command("staged")
@repo_option
@json_option
@click.argument("file_path", required=False)
def staged_command(repo: Path | None, as_json: bool, file_path: str | None) -> None:
    """List staged changes, or show the staged diff of FILE_PATH."""
    ops = history_ops(repo)
    if file_path is None:
        changes = run_op(ops.list_staged_changes, repo)
        if as_json:
            echo_json(changes)
        else:
            _print_changes(changes, "Nothing staged")
        return
    diff = run_op(ops.get_staged_file_diff, repo, file_path)
    if as_json:
        echo_json(diff)
    else:
        _print_diff(diff)


@click.group("stash")
def stash_group() -> None:
    """Inspect stash entries."""


@stash_group.command("list")
@repo_option
@json_option
def stash_list_command(repo: Path | None, as_json: bool) -> None:
    """List stash entries, most recent first."""
    stashes = run_op(history_ops(repo).list_stashes, repo)
    if as_json:
        echo_json(stashes)
        return
    console = _console()
    if not stashes:
        console.print("[dim]No stashes[/dim]")
    for stash in stashes:
        console.print(f"stash@{{{stash.index}}}: {stash.message}", markup=False)


@stash_group.command("show")
@repo_option
@json_option
@click.argument("stash_index", type=click.IntRange(min=0))
@click.argument("file_path", required=False)
def stash_show_command(repo: Path | None, as_json: bool, stash_index: int, file_path: str | None) -> None:
    """List files in stash STASH_INDEX, or show the diff of FILE_PATH in it."""
    ops = history_ops(repo)
    if file_path is None:
        changes = run_op(ops.get_stash_diff, repo, stash_index)
        if as_json:
            echo_json(changes)
        else:
            _print_changes(changes, "No changes")
        return
    diff = run_op(ops.get_stash_file_diff, repo, stash_index, file_path)
    if as_json:
        echo_json(diff)
    else:
        _print_diff(diff)
