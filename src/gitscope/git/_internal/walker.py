"""Commit graph walker.

Yields commits newest first in topological order: a commit is never
produced before any of its descendants reachable from the start point.
"""

from __future__ import annotations

from collections.abc import Iterator

import pygit2
import structlog

from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.constants import SORT_HISTORY

log = structlog.get_logger(__name__)


def resolve_start(access: RepoAccess, branch_name: str | None) -> pygit2.Commit:
    """Tip of ``branch_name``, falling back to HEAD when it does not resolve.

    Raises EmptyRepositoryError when HEAD has no commits.
    """
    if branch_name:
        tip = access.resolve_branch(branch_name)
        if tip is not None:
            return tip
        log.info("branch_fallback", branch=branch_name, fallback="HEAD")
    return access.must_head_commit()


def walk(access: RepoAccess, start: pygit2.Commit, limit: int | None = None) -> Iterator[pygit2.Commit]:
    """Commits reachable from ``start``, at most ``limit`` of them."""
    if limit is not None and limit <= 0:
        return
    count = 0
    for commit in access.walk_commits(start.id, SORT_HISTORY):
        yield commit
        count += 1
        if limit is not None and count >= limit:
            return

