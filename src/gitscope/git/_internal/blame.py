"""Blame engine: per-line attribution along first-parent history.

libgit2 walks first parents from the requested commit and carries every
unchanged line back to the parent; a line stops at the commit that
introduced it. The hunks it reports are expanded into one entry per line.
"""

from __future__ import annotations

import pygit2
import structlog

from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.diff import is_binary_content, split_lines
from gitscope.git._internal.parsing import normalize_tree_path
from gitscope.git.errors import FileNotFoundAtRevisionError
from gitscope.git.models import BlameLine, CommitInfo, FileBlame

log = structlog.get_logger(__name__)


def blame_file(access: RepoAccess, commit: pygit2.Commit, path: str) -> FileBlame:
    """Attribute every line of ``path`` at ``commit``.

    Raises:
        FileNotFoundAtRevisionError: path is absent at ``commit`` or is binary.
    """
    rev = str(commit.id)
    path = normalize_tree_path(path)
    blob = access.blob_at(commit.tree, path)
    if blob is None:
        raise FileNotFoundAtRevisionError(path, rev)
    if is_binary_content(blob.data):
        raise FileNotFoundAtRevisionError(path, rev, "binary content")

    lines = split_lines(blob.data)
    if not lines:
        return FileBlame(path=path, blame_lines=())

    try:
        blame = access.blame(path, commit.id)
    except (pygit2.GitError, KeyError) as e:
        raise FileNotFoundAtRevisionError(path, rev, str(e)) from e

    owners: list[pygit2.Oid | None] = [None] * len(lines)
    hunks = 0
    for hunk in blame:
        hunks += 1
        start = hunk.final_start_line_number - 1
        for index in range(start, min(start + hunk.lines_in_hunk, len(lines))):
            owners[index] = hunk.final_commit_id

    log.debug("blame_complete", path=path, commit=rev[:8], hunks=hunks, lines=len(lines))
    return FileBlame(path=path, blame_lines=_attribute(access, lines, owners))


def _attribute(
    access: RepoAccess,
    lines: list[str],
    owners: list[pygit2.Oid | None],
) -> tuple[BlameLine, ...]:
    infos: dict[pygit2.Oid, CommitInfo] = {}
    result: list[BlameLine] = []
    for number, (content, owner) in enumerate(zip(lines, owners, strict=True), start=1):
        assert owner is not None  # blame hunks cover every line of the file
        info = infos.get(owner)
        if info is None:
            info = infos[owner] = CommitInfo.from_pygit2(access.must_commit(owner))
        result.append(
            BlameLine(
                commit_id=info.id,
                commit_short_id=info.short_id,
                author=info.author,
                date=info.date,
                line_number=number,
                content=content,
            )
        )
    return tuple(result)
