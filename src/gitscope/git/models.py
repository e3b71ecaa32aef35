"""Serializable data models for history browsing.

All models are read-only snapshots built per request. Only ``FileBlame``
outlives a request, inside the blame result cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

import pygit2
from pygit2.enums import DeltaStatus

from gitscope.config.constants import SHORT_ID_LEN

ChangeStatus = Literal["added", "modified", "deleted", "renamed"]
LineType = Literal["context", "addition", "deletion"]
ResultType = Literal["commit", "file", "content"]

_DELTA_STATUS_MAP: dict[int, ChangeStatus] = {
    DeltaStatus.ADDED: "added",
    DeltaStatus.DELETED: "deleted",
    DeltaStatus.MODIFIED: "modified",
    DeltaStatus.RENAMED: "renamed",
}


def delta_status(status: int) -> ChangeStatus:
    """Map a pygit2 delta status onto the four reported statuses.

    Copies and type changes are reported as modifications.
    """
    return _DELTA_STATUS_MAP.get(status, "modified")


def short_id(commit_id: str) -> str:
    return commit_id[:SHORT_ID_LEN]


def signature_time(sig: pygit2.Signature) -> datetime:
    return datetime.fromtimestamp(sig.time, tz=UTC)


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """Git commit information."""

    id: str
    short_id: str
    message: str
    author: str
    author_email: str
    date: datetime
    parent_ids: tuple[str, ...]

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1

    @property
    def summary(self) -> str:
        """First line of the message."""
        return self.message.splitlines()[0] if self.message else ""

    @classmethod
    def from_pygit2(cls, commit: pygit2.Commit) -> CommitInfo:
        sha = str(commit.id)
        return cls(
            id=sha,
            short_id=short_id(sha),
            message=commit.message,
            author=commit.author.name,
            author_email=commit.author.email,
            date=signature_time(commit.author),
            parent_ids=tuple(str(p) for p in commit.parent_ids),
        )


@dataclass(frozen=True, slots=True)
class BranchInfo:
    """Local branch."""

    name: str
    is_current: bool


@dataclass(frozen=True, slots=True)
class RemoteInfo:
    """One URL of a remote. Fetch and push URLs of a remote share its name."""

    name: str
    url: str
    is_push: bool


@dataclass(frozen=True, slots=True)
class FileChange:
    """A file touched by a changeset."""

    path: str
    status: ChangeStatus
    old_path: str | None = None  # set for renames


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One line of a line-level diff.

    ``old_line_number`` is set for context and deletion lines,
    ``new_line_number`` for context and addition lines.
    ``missing_newline`` marks the last line of a side that has no final
    newline.
    """

    line_type: LineType
    old_line_number: int | None
    new_line_number: int | None
    content: str
    missing_newline: bool = False


@dataclass(frozen=True, slots=True)
class FileDiff:
    """Line-level diff of one file. Binary files carry no lines."""

    path: str
    status: ChangeStatus
    is_binary: bool
    diff_lines: tuple[DiffLine, ...] = field(default_factory=tuple)
    old_path: str | None = None

    @property
    def additions(self) -> int:
        return sum(1 for line in self.diff_lines if line.line_type == "addition")

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.diff_lines if line.line_type == "deletion")


@dataclass(frozen=True, slots=True)
class BlameLine:
    """Attribution of one line of a file."""

    commit_id: str
    commit_short_id: str
    author: str
    date: datetime
    line_number: int  # 1-based, current-file coordinates
    content: str


@dataclass(frozen=True, slots=True)
class FileBlame:
    """Blame of a whole file; one entry per line of the file."""

    path: str
    blame_lines: tuple[BlameLine, ...]


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single search hit.

    ``file_path`` and ``line_number`` are populated only for file and
    content hits; ``line_number`` only for content hits.
    """

    result_type: ResultType
    commit_id: str
    commit_message: str
    commit_author: str
    commit_date: datetime
    file_path: str | None = None
    content_preview: str | None = None
    line_number: int | None = None


@dataclass(frozen=True, slots=True)
class StashEntry:
    """Git stash entry. Index 0 is the most recent stash."""

    index: int
    commit_id: str
    message: str
    author: str
    date: datetime


@dataclass(frozen=True, slots=True)
class FileTreeNode:
    """Node of a commit's file tree."""

    path: str
    name: str
    is_directory: bool
    file_type: str
    size: int | None = None
    children: tuple[FileTreeNode, ...] = field(default_factory=tuple)
