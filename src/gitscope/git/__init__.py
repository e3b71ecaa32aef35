"""Git history browsing module."""

from gitscope.git._internal import BlameCache, SearchReport
from gitscope.git.errors import (
    EmptyRepositoryError,
    FileNotFoundAtRevisionError,
    GitError,
    NotARepositoryError,
    RepositoryError,
    RevisionNotFoundError,
    StashError,
    StashNotFoundError,
)
from gitscope.git.models import (
    BlameLine,
    BranchInfo,
    CommitInfo,
    DiffLine,
    FileBlame,
    FileChange,
    FileDiff,
    FileTreeNode,
    RemoteInfo,
    SearchResult,
    StashEntry,
)
from gitscope.git.ops import HistoryOps

__all__ = [
    # Main class
    "HistoryOps",
    "BlameCache",
    "SearchReport",
    # Models
    "CommitInfo",
    "BranchInfo",
    "RemoteInfo",
    "FileChange",
    "DiffLine",
    "FileDiff",
    "BlameLine",
    "FileBlame",
    "SearchResult",
    "StashEntry",
    "FileTreeNode",
    # Errors
    "GitError",
    "RepositoryError",
    "NotARepositoryError",
    "EmptyRepositoryError",
    "RevisionNotFoundError",
    "FileNotFoundAtRevisionError",
    "StashError",
    "StashNotFoundError",
]
