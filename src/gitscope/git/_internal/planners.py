"""Decision planners that separate "what to compare" from "how to compare it"."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

import pygit2

from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.constants import FIND_RENAMES
from gitscope.git.errors import StashNotFoundError
from gitscope.git.models import FileChange, delta_status


class ChangeSource(Enum):
    """Kinds of changesets."""

    COMMIT = auto()
    STAGED = auto()
    STASH = auto()


@dataclass(frozen=True, slots=True)
class ChangePlan:
    """Two sides of a changeset. ``new_tree`` of None means the index."""

    source: ChangeSource
    label: str
    old_tree: pygit2.Tree
    new_tree: pygit2.Tree | None = None


class ChangePlanner:
    """Plans and executes changeset comparisons."""

    def __init__(self, access: RepoAccess, rename_threshold: int = 50) -> None:
        self._access = access
        self._rename_threshold = rename_threshold

    def plan_commit(self, commit: pygit2.Commit) -> ChangePlan:
        """Commit against its first parent; root commits against the empty tree."""
        return ChangePlan(
            ChangeSource.COMMIT,
            label=str(commit.id),
            old_tree=self._access.first_parent_tree(commit),
            new_tree=commit.tree,
        )

    def plan_staged(self) -> ChangePlan:
        """Index against HEAD; against the empty tree before the first commit."""
        head_tree = self._access.head_tree()
        return ChangePlan(
            ChangeSource.STAGED,
            label="index",
            old_tree=head_tree if head_tree is not None else self._access.get_empty_tree(),
        )

    def plan_stash(self, index: int) -> ChangePlan:
        """Stash snapshot against the commit it was taken on."""
        commit = self.stash_commit(index)
        return ChangePlan(
            ChangeSource.STASH,
            label=f"stash@{{{index}}}",
            old_tree=self._access.first_parent_tree(commit),
            new_tree=commit.tree,
        )

    def stash_commit(self, index: int) -> pygit2.Commit:
        stashes = self._access.listall_stashes()
        if index < 0 or index >= len(stashes):
            raise StashNotFoundError(index)
        return self._access.must_commit(stashes[index].commit_id)

    def execute(self, plan: ChangePlan) -> pygit2.Diff:
        """Compute the raw diff with rename detection applied."""
        if plan.new_tree is None:
            diff = self._access.diff_tree_to_index(plan.old_tree)
        else:
            diff = self._access.diff_trees(plan.old_tree, plan.new_tree)
        diff.find_similar(flags=FIND_RENAMES, rename_threshold=self._rename_threshold)
        return diff

    def changes(self, plan: ChangePlan) -> list[FileChange]:
        """Files touched by the changeset, sorted by path."""
        result: list[FileChange] = []
        for delta in self.execute(plan).deltas:
            status = delta_status(delta.status)
            if status == "deleted":
                result.append(FileChange(delta.old_file.path, status))
            elif status == "renamed":
                result.append(FileChange(delta.new_file.path, status, delta.old_file.path))
            else:
                result.append(FileChange(delta.new_file.path, status))
        result.sort(key=lambda c: c.path)
        return result

    def read_sides(self, plan: ChangePlan, change: FileChange) -> tuple[bytes | None, bytes | None]:
        """Old and new blob content of one change; None where the file is absent."""
        old_path = change.old_path or change.path
        old_blob = None if change.status == "added" else self._access.blob_at(plan.old_tree, old_path)
        if change.status == "deleted":
            new_blob = None
        elif plan.new_tree is None:
            new_blob = self._access.index_blob(change.path)
        else:
            new_blob = self._access.blob_at(plan.new_tree, change.path)
        return (
            old_blob.data if old_blob is not None else None,
            new_blob.data if new_blob is not None else None,
        )

    def new_side_blob(self, plan: ChangePlan, path: str) -> pygit2.Blob | None:
        if plan.new_tree is None:
            return self._access.index_blob(path)
        return self._access.blob_at(plan.new_tree, path)
