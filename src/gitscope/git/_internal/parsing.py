"""String parsing helpers for tree paths and file names."""

from __future__ import annotations

from pathlib import PurePosixPath


def normalize_tree_path(path: str) -> str:
    """Repository-relative path with forward slashes and no leading './' or '/'."""
    cleaned = path.replace("\\", "/").strip("/")
    parts = [p for p in PurePosixPath(cleaned).parts if p not in (".", "")]
    return "/".join(parts)


def file_type_of(name: str) -> str:
    """Lowercased extension without the dot, or 'file' when there is none.

    Dotfiles such as '.gitignore' use the name after the dot.
    """
    suffix = PurePosixPath(name).suffix
    if suffix:
        return suffix[1:].lower()
    if name.startswith(".") and len(name) > 1:
        return name[1:].lower()
    return "file"
