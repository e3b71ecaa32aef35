"""History browsing MCP tools.

Each handler validates its params, runs the synchronous history operation in
a worker thread, and returns JSON-ready data.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import Field

from gitscope.config.constants import COMMIT_LIST_MAX, SEARCH_MIN_QUERY_LEN
from gitscope.core.serialization import to_wire
from gitscope.git.errors import GitError
from gitscope.git.models import FileDiff
from gitscope.mcp.errors import from_git_error
from gitscope.mcp.registry import registry
from gitscope.mcp.tools.base import BaseParams

if TYPE_CHECKING:
    from gitscope.mcp.context import AppContext

T = TypeVar("T")


async def _call(fn: Callable[..., T], *args: Any) -> T:
    """Run a history operation off the event loop, mapping domain errors."""
    try:
        return await asyncio.to_thread(fn, *args)
    except GitError as e:
        raise from_git_error(e) from e


def _diff_payload(diff: FileDiff) -> dict[str, Any]:
    payload: dict[str, Any] = to_wire(diff)
    payload["additions"] = diff.additions
    payload["deletions"] = diff.deletions
    if diff.is_binary:
        payload["summary"] = f"{diff.path}: binary file"
    else:
        payload["summary"] = f"{diff.path}: +{diff.additions}/-{diff.deletions}"
    return payload


# =============================================================================
# Parameter Models
# =============================================================================


class RepoParams(BaseParams):
    """Parameters for tools that only need the repository."""


class ListCommitsParams(BaseParams):
    branch_name: str | None = Field(
        default=None,
        description="Branch to walk. Unknown names fall back to HEAD.",
    )
    limit: int | None = Field(
        default=None,
        ge=1,
        le=COMMIT_LIST_MAX,
        description="Maximum commits to return.",
    )


class CommitParams(BaseParams):
    commit_id: str = Field(description="Commit id, abbreviated id, branch or revision expression.")


class CommitFileParams(CommitParams):
    file_path: str = Field(description="Repository-relative file path.")


class GlobalSearchParams(BaseParams):
    query: str = Field(description="Case-insensitive text to find in messages, paths and content.")
    branch_name: str | None = Field(default=None, description="Branch to search from. Defaults to HEAD.")
    max_commits: int | None = Field(
        default=None,
        description="Commits to scan, clamped to 10-10000.",
    )
    channel: str | None = Field(
        default=None,
        description="Search channel. Only the newest search on a channel is delivered.",
    )


class StagedFileParams(BaseParams):
    file_path: str = Field(description="Repository-relative file path.")


class StashParams(BaseParams):
    stash_index: int = Field(ge=0, description="Stash stack position, 0 is the most recent.")


class StashFileParams(StashParams):
    file_path: str = Field(description="Repository-relative file path.")


# =============================================================================
# Refs
# =============================================================================


@registry.register("list_branches", "List local branches and mark the current one.", RepoParams)
async def list_branches(ctx: AppContext, params: RepoParams) -> dict[str, Any]:
    branches = await _call(ctx.history.list_branches, ctx.repo_path(params.repo_path))
    current = next((b.name for b in branches if b.is_current), None)
    return {
        "branches": to_wire(branches),
        "summary": f"{len(branches)} branches, current: {current or 'detached'}",
    }


@registry.register("list_remotes", "List remotes with their fetch and push URLs.", RepoParams)
async def list_remotes(ctx: AppContext, params: RepoParams) -> dict[str, Any]:
    remotes = await _call(ctx.history.list_remotes, ctx.repo_path(params.repo_path))
    return {
        "remotes": to_wire(remotes),
        "summary": f"{len({r.name for r in remotes})} remotes",
    }


# =============================================================================
# Commits
# =============================================================================


@registry.register(
    "list_commits",
    "List commits reachable from a branch, newest first.",
    ListCommitsParams,
)
async def list_commits(ctx: AppContext, params: ListCommitsParams) -> dict[str, Any]:
    commits = await _call(
        ctx.history.list_commits,
        ctx.repo_path(params.repo_path),
        params.branch_name,
        params.limit,
    )
    return {"commits": to_wire(commits), "summary": f"{len(commits)} commits"}


@registry.register(
    "get_commit_changes",
    "List files changed by a commit relative to its first parent.",
    CommitParams,
)
async def get_commit_changes(ctx: AppContext, params: CommitParams) -> dict[str, Any]:
    changes = await _call(
        ctx.history.get_commit_changes,
        ctx.repo_path(params.repo_path),
        params.commit_id,
    )
    return {
        "commit_id": params.commit_id,
        "changes": to_wire(changes),
        "summary": f"{len(changes)} files changed",
    }


@registry.register("get_file_diff", "Line-level diff of one file in a commit.", CommitFileParams)
async def get_file_diff(ctx: AppContext, params: CommitFileParams) -> dict[str, Any]:
    diff = await _call(
        ctx.history.get_file_diff,
        ctx.repo_path(params.repo_path),
        params.commit_id,
        params.file_path,
    )
    return _diff_payload(diff)


@registry.register("get_file_blame", "Originating commit of every line of a file.", CommitFileParams)
async def get_file_blame(ctx: AppContext, params: CommitFileParams) -> dict[str, Any]:
    blame = await _call(
        ctx.history.get_file_blame,
        ctx.repo_path(params.repo_path),
        params.commit_id,
        params.file_path,
    )
    payload: dict[str, Any] = to_wire(blame)
    commits = {line.commit_id for line in blame.blame_lines}
    payload["summary"] = f"{len(blame.blame_lines)} lines from {len(commits)} commits"
    return payload


@registry.register(
    "get_commit_file_tree",
    "File tree of a commit, directories first.",
    CommitParams,
)
async def get_commit_file_tree(ctx: AppContext, params: CommitParams) -> dict[str, Any]:
    nodes = await _call(
        ctx.history.get_commit_file_tree,
        ctx.repo_path(params.repo_path),
        params.commit_id,
    )
    return {"commit_id": params.commit_id, "nodes": to_wire(nodes)}


@registry.register("get_file_content", "Text of a file at a commit.", CommitFileParams)
async def get_file_content(ctx: AppContext, params: CommitFileParams) -> dict[str, Any]:
    content = await _call(
        ctx.history.get_file_content,
        ctx.repo_path(params.repo_path),
        params.commit_id,
        params.file_path,
    )
    return {"commit_id": params.commit_id, "path": params.file_path, "content": content}


# =============================================================================
# Search
# =============================================================================


@registry.register(
    "global_search",
    "Search commit messages, changed file paths and changed file content across history.",
    GlobalSearchParams,
)
async def global_search(ctx: AppContext, params: GlobalSearchParams) -> dict[str, Any]:
    repo_path = ctx.repo_path(params.repo_path)
    channel = params.channel or str(repo_path or ".")
    generation = ctx.generations.issue(channel)

    if len(params.query.strip()) < SEARCH_MIN_QUERY_LEN:
        return {"results": [], "query_too_short": True, "generation": generation}

    report = await _call(
        ctx.history.global_search_report,
        repo_path,
        params.query,
        params.branch_name,
        params.max_commits,
    )

    if not ctx.generations.is_current(channel, generation):
        return {"results": [], "stale": True, "generation": generation}

    return {
        "results": to_wire(report.results),
        "stale": False,
        "generation": generation,
        "commits_scanned": report.commits_scanned,
        "truncated": report.truncated,
        "summary": f"{len(report.results)} results in {report.commits_scanned} commits",
    }


# =============================================================================
# Staged changes
# =============================================================================


@registry.register("list_staged_changes", "List changes staged in the index.", RepoParams)
async def list_staged_changes(ctx: AppContext, params: RepoParams) -> dict[str, Any]:
    changes = await _call(ctx.history.list_staged_changes, ctx.repo_path(params.repo_path))
    return {"changes": to_wire(changes), "summary": f"{len(changes)} staged files"}


@registry.register("get_staged_file_diff", "Line-level diff of one staged file.", StagedFileParams)
async def get_staged_file_diff(ctx: AppContext, params: StagedFileParams) -> dict[str, Any]:
    diff = await _call(
        ctx.history.get_staged_file_diff,
        ctx.repo_path(params.repo_path),
        params.file_path,
    )
    return _diff_payload(diff)


# =============================================================================
# Stashes
# =============================================================================


@registry.register("list_stashes", "List stash entries, most recent first.", RepoParams)
async def list_stashes(ctx: AppContext, params: RepoParams) -> dict[str, Any]:
    stashes = await _call(ctx.history.list_stashes, ctx.repo_path(params.repo_path))
    return {"stashes": to_wire(stashes), "summary": f"{len(stashes)} stashes"}


@registry.register("get_stash_diff", "List files changed by a stash entry.", StashParams)
async def get_stash_diff(ctx: AppContext, params: StashParams) -> dict[str, Any]:
    changes = await _call(
        ctx.history.get_stash_diff,
        ctx.repo_path(params.repo_path),
        params.stash_index,
    )
    return {
        "stash_index": params.stash_index,
        "changes": to_wire(changes),
        "summary": f"{len(changes)} files changed",
    }


@registry.register("get_stash_file_diff", "Line-level diff of one file in a stash entry.", StashFileParams)
async def get_stash_file_diff(ctx: AppContext, params: StashFileParams) -> dict[str, Any]:
    diff = await _call(
        ctx.history.get_stash_file_diff,
        ctx.repo_path(params.repo_path),
        params.stash_index,
        params.file_path,
    )
    return _diff_payload(diff)
