"""Internal pygit2 constants - keeps trivia out of public modules."""

from __future__ import annotations

from pygit2.enums import BlameFlag, DiffFind, DiffOption, FileMode, SortMode

# Commit walking: newest first, never a parent before its children
SORT_HISTORY = SortMode.TOPOLOGICAL | SortMode.TIME

# Tree entry file modes
FILEMODE_TREE = FileMode.TREE
FILEMODE_LINK = FileMode.LINK
FILEMODE_COMMIT = FileMode.COMMIT

# Rename detection
FIND_RENAMES = DiffFind.FIND_RENAMES

# Blob diffs: binary detection happens before libgit2 sees the content
DIFF_FORCE_TEXT = DiffOption.FORCE_TEXT

# Blame follows first parents only
BLAME_FIRST_PARENT = BlameFlag.FIRST_PARENT
