"""History operations via pygit2 - returns serializable data models.

Every method opens its own ``RepoAccess`` so concurrent calls never share a
repository handle. ``repo_path`` of None means the repository containing the
current working directory.
"""

from __future__ import annotations

from pathlib import Path

import pygit2
import structlog

from gitscope.config.constants import (
    COMMIT_LIST_MAX,
    SEARCH_MAX_COMMITS,
    SEARCH_MIN_COMMITS,
    SEARCH_MIN_QUERY_LEN,
)
from gitscope.config.models import GitScopeConfig
from gitscope.git._internal import (
    BlameCache,
    ChangePlan,
    ChangePlanner,
    HistorySearch,
    RepoAccess,
    SearchBudget,
    SearchReport,
    blame_file,
    diff_blobs,
    file_type_of,
    is_binary_content,
    normalize_tree_path,
    resolve_start,
    walk,
)
from gitscope.git._internal.constants import FILEMODE_COMMIT, FILEMODE_LINK, FILEMODE_TREE
from gitscope.git.errors import FileNotFoundAtRevisionError
from gitscope.git.models import (
    BranchInfo,
    CommitInfo,
    FileBlame,
    FileChange,
    FileDiff,
    FileTreeNode,
    RemoteInfo,
    SearchResult,
    StashEntry,
    signature_time,
)

log = structlog.get_logger(__name__)

RepoPath = Path | str | None


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class HistoryOps:
    """Read-only history browsing over one or more repositories."""

    def __init__(
        self,
        config: GitScopeConfig | None = None,
        blame_cache: BlameCache | None = None,
    ) -> None:
        self._config = config or GitScopeConfig()
        self._blame_cache = (
            blame_cache if blame_cache is not None else BlameCache(self._config.cache.blame_capacity)
        )

    @property
    def config(self) -> GitScopeConfig:
        return self._config

    @property
    def blame_cache(self) -> BlameCache:
        return self._blame_cache

    def _open(self, repo_path: RepoPath) -> RepoAccess:
        if repo_path is None:
            return RepoAccess.discover()
        return RepoAccess(repo_path)

    def _planner(self, access: RepoAccess) -> ChangePlanner:
        return ChangePlanner(access, rename_threshold=self._config.diff.rename_threshold)

    # =========================================================================
    # Refs
    # =========================================================================

    def list_branches(self, repo_path: RepoPath = None) -> list[BranchInfo]:
        """Local branches sorted by name."""
        access = self._open(repo_path)
        current = access.current_branch_name()
        return [
            BranchInfo(name=name, is_current=name == current)
            for name in sorted(access.local_branches)
        ]

    def list_remotes(self, repo_path: RepoPath = None) -> list[RemoteInfo]:
        """One fetch and one push entry per remote, sharing the remote's name."""
        access = self._open(repo_path)
        result: list[RemoteInfo] = []
        for remote in access.remotes:
            url = remote.url or ""
            result.append(RemoteInfo(name=remote.name, url=url, is_push=False))
            result.append(RemoteInfo(name=remote.name, url=remote.push_url or url, is_push=True))
        return result

    # =========================================================================
    # Commits
    # =========================================================================

    def list_commits(
        self,
        repo_path: RepoPath = None,
        branch_name: str | None = None,
        limit: int | None = None,
    ) -> list[CommitInfo]:
        """Commits reachable from ``branch_name`` (HEAD when unknown), newest first."""
        access = self._open(repo_path)
        count = clamp(limit if limit is not None else self._config.limits.commit_list_default, 1, COMMIT_LIST_MAX)
        start = resolve_start(access, branch_name)
        commits = [CommitInfo.from_pygit2(c) for c in walk(access, start, count)]
        log.debug("commits_listed", branch=branch_name, count=len(commits))
        return commits

    def get_commit_changes(self, repo_path: RepoPath, commit_id: str) -> list[FileChange]:
        """Files touched by a commit relative to its first parent."""
        access = self._open(repo_path)
        planner = self._planner(access)
        return planner.changes(planner.plan_commit(access.resolve_commit(commit_id)))

    def get_file_diff(self, repo_path: RepoPath, commit_id: str, file_path: str) -> FileDiff:
        access = self._open(repo_path)
        planner = self._planner(access)
        return self._diff_in_plan(planner, planner.plan_commit(access.resolve_commit(commit_id)), file_path)

    # =========================================================================
    # Blame
    # =========================================================================

    def get_file_blame(self, repo_path: RepoPath, commit_id: str, file_path: str) -> FileBlame:
        """Per-line attribution, served from the blame cache when possible."""
        access = self._open(repo_path)
        commit = access.resolve_commit(commit_id)
        path = normalize_tree_path(file_path)
        key = (access.cache_key, str(commit.id), path)

        cached = self._blame_cache.get(key)
        if cached is not None:
            log.debug("blame_cache_hit", commit=key[1][:8], path=path)
            return cached

        log.debug("blame_cache_miss", commit=key[1][:8], path=path)
        blame = blame_file(access, commit, path)
        self._blame_cache.put(key, blame)
        return blame

    # =========================================================================
    # Trees and content
    # =========================================================================

    def get_commit_file_tree(self, repo_path: RepoPath, commit_id: str) -> list[FileTreeNode]:
        """Root-level nodes of the commit's tree, each with its full subtree."""
        access = self._open(repo_path)
        commit = access.resolve_commit(commit_id)
        return list(self._tree_nodes(access.repo, commit.tree, ""))

    def _tree_nodes(self, repo: pygit2.Repository, tree: pygit2.Tree, prefix: str) -> tuple[FileTreeNode, ...]:
        dirs: list[FileTreeNode] = []
        files: list[FileTreeNode] = []
        for entry in tree:
            path = f"{prefix}{entry.name}"
            if entry.filemode == FILEMODE_TREE:
                subtree = repo.get(entry.id)
                dirs.append(
                    FileTreeNode(
                        path=path,
                        name=entry.name,
                        is_directory=True,
                        file_type="directory",
                        children=self._tree_nodes(repo, subtree, f"{path}/"),
                    )
                )
            elif entry.filemode == FILEMODE_COMMIT:
                files.append(FileTreeNode(path=path, name=entry.name, is_directory=False, file_type="submodule"))
            else:
                blob = repo.get(entry.id)
                file_type = "symlink" if entry.filemode == FILEMODE_LINK else file_type_of(entry.name)
                files.append(
                    FileTreeNode(
                        path=path,
                        name=entry.name,
                        is_directory=False,
                        file_type=file_type,
                        size=blob.size if blob is not None else None,
                    )
                )
        dirs.sort(key=lambda n: n.name)
        files.sort(key=lambda n: n.name)
        return tuple(dirs + files)

    def get_file_content(self, repo_path: RepoPath, commit_id: str, file_path: str) -> str:
        """Text of a file at a commit.

        Raises:
            FileNotFoundAtRevisionError: file is absent at the commit or binary.
        """
        access = self._open(repo_path)
        commit = access.resolve_commit(commit_id)
        blob = access.blob_at(commit.tree, file_path)
        if blob is None:
            raise FileNotFoundAtRevisionError(file_path, commit_id)
        data = blob.data
        if is_binary_content(data):
            raise FileNotFoundAtRevisionError(file_path, commit_id, "binary content")
        return data.decode("utf-8", errors="replace")

    # =========================================================================
    # Search
    # =========================================================================

    def global_search(
        self,
        repo_path: RepoPath,
        query: str,
        branch_name: str | None = None,
        max_commits: int | None = None,
    ) -> list[SearchResult]:
        """Search messages, paths and content of the most recent commits."""
        return list(self.global_search_report(repo_path, query, branch_name, max_commits).results)

    def global_search_report(
        self,
        repo_path: RepoPath,
        query: str,
        branch_name: str | None = None,
        max_commits: int | None = None,
    ) -> SearchReport:
        needle = query.strip()
        if len(needle) < SEARCH_MIN_QUERY_LEN:
            return SearchReport(results=(), commits_scanned=0, truncated=False)

        search_config = self._config.search
        budget = SearchBudget(
            max_commits=clamp(
                max_commits if max_commits is not None else search_config.default_max_commits,
                SEARCH_MIN_COMMITS,
                SEARCH_MAX_COMMITS,
            ),
            max_results=search_config.max_results,
            content_max_bytes=search_config.content_max_bytes,
            preview_chars=search_config.preview_chars,
        )
        access = self._open(repo_path)
        start = resolve_start(access, branch_name)
        return HistorySearch(access, self._planner(access), budget).run(start, needle)

    # =========================================================================
    # Staged changes
    # =========================================================================

    def list_staged_changes(self, repo_path: RepoPath = None) -> list[FileChange]:
        """Changes in the index relative to HEAD."""
        access = self._open(repo_path)
        planner = self._planner(access)
        return planner.changes(planner.plan_staged())

    def get_staged_file_diff(self, repo_path: RepoPath, file_path: str) -> FileDiff:
        access = self._open(repo_path)
        planner = self._planner(access)
        return self._diff_in_plan(planner, planner.plan_staged(), file_path)

    # =========================================================================
    # Stashes
    # =========================================================================

    def list_stashes(self, repo_path: RepoPath = None) -> list[StashEntry]:
        """Stash stack, most recent first."""
        access = self._open(repo_path)
        result: list[StashEntry] = []
        for index, stash in enumerate(access.listall_stashes()):
            commit = access.must_commit(stash.commit_id)
            result.append(
                StashEntry(
                    index=index,
                    commit_id=str(stash.commit_id),
                    message=stash.message,
                    author=commit.author.name,
                    date=signature_time(commit.author),
                )
            )
        return result

    def get_stash_diff(self, repo_path: RepoPath, stash_index: int) -> list[FileChange]:
        access = self._open(repo_path)
        planner = self._planner(access)
        return planner.changes(planner.plan_stash(stash_index))

    def get_stash_file_diff(self, repo_path: RepoPath, stash_index: int, file_path: str) -> FileDiff:
        access = self._open(repo_path)
        planner = self._planner(access)
        return self._diff_in_plan(planner, planner.plan_stash(stash_index), file_path)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _diff_in_plan(self, planner: ChangePlanner, plan: ChangePlan, file_path: str) -> FileDiff:
        """Diff one file of a changeset.

        A file the changeset does not touch is reported as an all-context
        diff when it exists on the new side.
        """
        path = normalize_tree_path(file_path)
        changes = planner.changes(plan)
        change = next((c for c in changes if c.path == path), None)
        if change is None:
            change = next((c for c in changes if c.old_path == path), None)

        if change is not None:
            old_data, new_data = planner.read_sides(plan, change)
            return diff_blobs(
                change.path,
                change.status,
                old_data,
                new_data,
                old_path=change.old_path,
            )

        blob = planner.new_side_blob(plan, path)
        if blob is None:
            raise FileNotFoundAtRevisionError(path, plan.label)
        data = blob.data
        return diff_blobs(path, "modified", data, data)
