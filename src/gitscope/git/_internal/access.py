"""Repository access layer - owns pygit2.Repository and exposes computed facts.

One ``RepoAccess`` serves one request. pygit2 repository handles are not
shared across worker threads, so concurrent requests never share a cursor.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pygit2

from gitscope.git._internal.constants import BLAME_FIRST_PARENT
from gitscope.git._internal.parsing import normalize_tree_path
from gitscope.git.errors import (
    EmptyRepositoryError,
    NotARepositoryError,
    RevisionNotFoundError,
)


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        if not self._path.exists():
            raise NotARepositoryError(str(self._path))
        try:
            self._repo = pygit2.Repository(str(self._path))
        except (pygit2.GitError, KeyError) as e:
            raise NotARepositoryError(str(self._path)) from e

    @classmethod
    def discover(cls, start: Path | str | None = None) -> RepoAccess:
        """Open the repository containing ``start`` (default: current directory)."""
        start_path = Path(start) if start is not None else Path.cwd()
        found = pygit2.discover_repository(str(start_path))
        if found is None:
            raise NotARepositoryError(str(start_path))
        return cls(found)

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else Path(self._repo.path)

    @property
    def cache_key(self) -> str:
        """Stable identity of this repository for result caching."""
        return str(Path(self._repo.path).resolve())

    @property
    def index(self) -> pygit2.Index:
        return self._repo.index  # type: ignore[no-any-return]

    # =========================================================================
    # Repository State Facts
    # =========================================================================

    @property
    def is_unborn(self) -> bool:
        return self._repo.head_is_unborn

    def head_commit(self) -> pygit2.Commit | None:
        if self.is_unborn:
            return None
        return self._repo.head.peel(pygit2.Commit)

    def head_tree(self) -> pygit2.Tree | None:
        if self.is_unborn:
            return None
        return self._repo.head.peel(pygit2.Tree)

    def current_branch_name(self) -> str | None:
        if self.is_unborn or self._repo.head_is_detached:
            return None
        return self._repo.head.shorthand

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_commit(self, rev: str) -> pygit2.Commit:
        """Resolve a commit id, abbreviated id, ref name or revision expression."""
        try:
            obj = self._repo.revparse_single(rev)
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RevisionNotFoundError(rev) from e
        try:
            commit = obj.peel(pygit2.Commit)
        except (pygit2.GitError, ValueError, pygit2.InvalidSpecError) as e:
            raise RevisionNotFoundError(rev) from e
        if not isinstance(commit, pygit2.Commit):
            raise RevisionNotFoundError(rev)
        return commit

    def resolve_branch(self, name: str) -> pygit2.Commit | None:
        """Tip commit of a local or remote-tracking branch, or None if unknown."""
        branch = self._repo.branches.local.get(name) or self._repo.branches.remote.get(name)
        if branch is None:
            return None
        try:
            return branch.peel(pygit2.Commit)
        except (pygit2.GitError, ValueError):
            return None

    # =========================================================================
    # Must Helpers (assert replacements with proper errors)
    # =========================================================================

    def must_head_commit(self) -> pygit2.Commit:
        commit = self.head_commit()
        if commit is None:
            raise EmptyRepositoryError(str(self.path))
        return commit

    def must_commit(self, oid: pygit2.Oid) -> pygit2.Commit:
        obj = self._repo.get(oid)
        if not isinstance(obj, pygit2.Commit):
            raise RevisionNotFoundError(str(oid))
        return obj

    # =========================================================================
    # Tree and Blob Reads
    # =========================================================================

    def get_empty_tree(self) -> pygit2.Tree:
        """Get an empty tree for diff operations (root commits, unborn index)."""
        builder = self._repo.TreeBuilder()
        empty_tree_oid = builder.write()
        return self._repo.get(empty_tree_oid)  # type: ignore[return-value]

    def first_parent_tree(self, commit: pygit2.Commit) -> pygit2.Tree:
        """Tree of the first parent, or the empty tree for a root commit."""
        if not commit.parent_ids:
            return self.get_empty_tree()
        return self.must_commit(commit.parent_ids[0]).tree

    def tree_entry(self, tree: pygit2.Tree, path: str) -> pygit2.Object | None:
        """Object at a slash-separated path within ``tree``, or None."""
        normalized = normalize_tree_path(path)
        if not normalized:
            return None
        try:
            entry = tree[normalized]
        except (KeyError, ValueError):
            return None
        return self._repo.get(entry.id)

    def blob_at(self, tree: pygit2.Tree, path: str) -> pygit2.Blob | None:
        """Blob at ``path`` within ``tree``, or None if absent or not a file."""
        obj = self.tree_entry(tree, path)
        return obj if isinstance(obj, pygit2.Blob) else None

    def get_blob(self, oid: pygit2.Oid) -> pygit2.Blob | None:
        obj = self._repo.get(oid)
        return obj if isinstance(obj, pygit2.Blob) else None

    def index_blob(self, path: str) -> pygit2.Blob | None:
        """Staged blob for ``path``, or None if not in the index."""
        normalized = normalize_tree_path(path)
        try:
            entry = self.index[normalized]
        except KeyError:
            return None
        return self.get_blob(entry.id)

    # =========================================================================
    # Low-level pygit2 Operations (all pygit2 quirks live here)
    # =========================================================================

    def blame(self, path: str, newest_commit: pygit2.Oid) -> pygit2.Blame:
        """First-parent blame of ``path`` as of ``newest_commit``."""
        return self._repo.blame(path, flags=BLAME_FIRST_PARENT, newest_commit=newest_commit)

    def walk_commits(self, start: pygit2.Oid, sort: int) -> pygit2.Walker:
        return self._repo.walk(start, sort)  # type: ignore[arg-type]

    def diff_trees(self, old: pygit2.Tree, new: pygit2.Tree) -> pygit2.Diff:
        return old.diff_to_tree(new)

    def diff_tree_to_index(self, old: pygit2.Tree) -> pygit2.Diff:
        """Changes staged in the index relative to ``old``."""
        return self.index.diff_to_tree(old)

    def listall_stashes(self) -> list[Any]:
        return list(self._repo.listall_stashes())

    @property
    def local_branches(self) -> Any:
        return self._repo.branches.local

    @property
    def remotes(self) -> Any:
        return self._repo.remotes
