"""Full-history search across commit messages, file names and file content.

The scan follows walker order and stops at whichever budget runs out first:
commits scanned or results collected. Older matches past the result cap are
not reported.
"""

from __future__ import annotations

from dataclasses import dataclass

import pygit2
import structlog

from gitscope.config.constants import (
    CONTENT_PREVIEW_CHARS,
    CONTENT_SEARCH_MAX_BYTES,
    SEARCH_DEFAULT_COMMITS,
    SEARCH_MAX_RESULTS,
)
from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.diff import is_binary_content, split_lines
from gitscope.git._internal.planners import ChangePlan, ChangePlanner
from gitscope.git._internal.walker import walk
from gitscope.git.models import CommitInfo, FileChange, SearchResult

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SearchBudget:
    """Bounds on one search."""

    max_commits: int = SEARCH_DEFAULT_COMMITS
    max_results: int = SEARCH_MAX_RESULTS
    content_max_bytes: int = CONTENT_SEARCH_MAX_BYTES
    preview_chars: int = CONTENT_PREVIEW_CHARS


@dataclass(frozen=True, slots=True)
class SearchReport:
    """Search results plus how much history was covered."""

    results: tuple[SearchResult, ...]
    commits_scanned: int
    truncated: bool  # the result cap stopped the scan


def make_preview(line: str, limit: int) -> str:
    text = line.strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class HistorySearch:
    """Scans commits from a start point for a case-insensitive substring."""

    def __init__(self, access: RepoAccess, planner: ChangePlanner, budget: SearchBudget) -> None:
        self._access = access
        self._planner = planner
        self._budget = budget

    def run(self, start: pygit2.Commit, query: str) -> SearchReport:
        needle = query.lower()
        results: list[SearchResult] = []
        scanned = 0
        truncated = False

        for commit in walk(self._access, start, self._budget.max_commits):
            scanned += 1
            if len(commit.parent_ids) > 1:
                continue
            for hit in self._scan_commit(commit, needle):
                results.append(hit)
                if len(results) >= self._budget.max_results:
                    truncated = True
                    break
            if truncated:
                break

        log.info(
            "search_complete",
            query=query,
            commits_scanned=scanned,
            results=len(results),
            truncated=truncated,
        )
        return SearchReport(tuple(results), scanned, truncated)

    def _scan_commit(self, commit: pygit2.Commit, needle: str) -> list[SearchResult]:
        """Hits for one commit: message first, then file names, then content."""
        info = CommitInfo.from_pygit2(commit)
        hits: list[SearchResult] = []

        if needle in info.message.lower():
            hits.append(self._result("commit", info, content_preview=info.summary))

        plan = self._planner.plan_commit(commit)
        content_candidates: list[FileChange] = []
        for change in self._planner.changes(plan):
            if needle in change.path.lower():
                hits.append(
                    self._result("file", info, file_path=change.path, content_preview=f"File: {change.path}")
                )
            elif change.status != "deleted":
                content_candidates.append(change)

        for change in content_candidates:
            match = self._first_matching_line(plan, change.path, needle)
            if match is not None:
                line_number, line = match
                hits.append(
                    self._result(
                        "content",
                        info,
                        file_path=change.path,
                        content_preview=make_preview(line, self._budget.preview_chars),
                        line_number=line_number,
                    )
                )
        return hits

    def _first_matching_line(self, plan: ChangePlan, path: str, needle: str) -> tuple[int, str] | None:
        blob = self._planner.new_side_blob(plan, path)
        if blob is None or blob.size >= self._budget.content_max_bytes:
            return None
        data = blob.data
        if is_binary_content(data):
            return None
        for number, line in enumerate(split_lines(data), start=1):
            if needle in line.lower():
                return number, line
        return None

    @staticmethod
    def _result(
        result_type: str,
        info: CommitInfo,
        *,
        file_path: str | None = None,
        content_preview: str | None = None,
        line_number: int | None = None,
    ) -> SearchResult:
        return SearchResult(
            result_type=result_type,  # type: ignore[arg-type]
            commit_id=info.id,
            commit_message=info.message,
            commit_author=info.author,
            commit_date=info.date,
            file_path=file_path,
            content_preview=content_preview,
            line_number=line_number,
        )
