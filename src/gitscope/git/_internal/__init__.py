"""Internal components for history browsing - not part of public API."""

from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.blame import blame_file
from gitscope.git._internal.cache import BlameCache, BlameKey
from gitscope.git._internal.diff import diff_blobs, is_binary_content, split_lines
from gitscope.git._internal.parsing import file_type_of, normalize_tree_path
from gitscope.git._internal.planners import ChangePlan, ChangePlanner, ChangeSource
from gitscope.git._internal.search import HistorySearch, SearchBudget, SearchReport
from gitscope.git._internal.walker import resolve_start, walk

__all__ = [
    # Access
    "RepoAccess",
    # Planners
    "ChangePlan",
    "ChangePlanner",
    "ChangeSource",
    # Engines
    "walk",
    "resolve_start",
    "diff_blobs",
    "is_binary_content",
    "split_lines",
    "blame_file",
    "HistorySearch",
    "SearchBudget",
    "SearchReport",
    # Cache
    "BlameCache",
    "BlameKey",
    # Parsing
    "file_type_of",
    "normalize_tree_path",
]
