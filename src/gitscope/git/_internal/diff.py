"""Line-level diff engine.

Two blob payloads are diffed by libgit2 through ``pygit2.Patch`` with enough
context to cover the whole file, so every line of both versions is reported
as context, deletion or addition. Unchanged stretches that fall between
hunks are filled in from the new side.
"""

from __future__ import annotations

import codecs

import pygit2

from gitscope.config.constants import BINARY_SNIFF_BYTES
from gitscope.git._internal.constants import DIFF_FORCE_TEXT
from gitscope.git.models import ChangeStatus, DiffLine, FileDiff, LineType

# pygit2 passes context_lines to libgit2 as an unsigned short
_MAX_CONTEXT_LINES = 0xFFFF

_ORIGIN_TYPES: dict[str, LineType] = {" ": "context", "-": "deletion", "+": "addition"}

_NON_UTF8_BOMS = (
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)


def is_binary_content(data: bytes) -> bool:
    """Sniff the leading chunk: NUL bytes, a UTF-16/32 BOM, or invalid UTF-8 mean binary."""
    chunk = data[:BINARY_SNIFF_BYTES]
    if b"\x00" in chunk:
        return True
    if chunk.startswith(_NON_UTF8_BOMS):
        return True
    # final=False tolerates a multi-byte sequence cut at the chunk boundary
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=False)
    except UnicodeDecodeError:
        return True
    return False


def split_lines(data: bytes) -> list[str]:
    """Decode blob content into lines. A final newline does not add an empty line."""
    if not data:
        return []
    text = data.decode("utf-8", errors="replace")
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def _decode_line(raw: bytes) -> tuple[str, bool]:
    """Content of a patch line and whether it lacks its newline."""
    if raw.endswith(b"\n"):
        return raw[:-1].decode("utf-8", errors="replace"), False
    return raw.decode("utf-8", errors="replace"), True


def build_diff_lines(old_data: bytes, new_data: bytes) -> tuple[DiffLine, ...]:
    """Number every line of both versions.

    Line numbers come from libgit2; each side's counter only advances on the
    lines it owns. The last line of a side that does not end in a newline is
    flagged with ``missing_newline``.
    """
    new_lines = split_lines(new_data)
    new_open_end = bool(new_data) and not new_data.endswith(b"\n")
    context_lines = min(max(old_data.count(b"\n"), new_data.count(b"\n")) + 1, _MAX_CONTEXT_LINES)

    patch = pygit2.Patch.create_from(
        old_data,
        new_data,
        flag=DIFF_FORCE_TEXT,
        context_lines=context_lines,
    )

    lines: list[DiffLine] = []
    old_no = new_no = 0

    def fill_context(until_new: int) -> None:
        nonlocal old_no, new_no
        while new_no < until_new:
            old_no += 1
            new_no += 1
            missing = new_open_end and new_no == len(new_lines)
            lines.append(DiffLine("context", old_no, new_no, new_lines[new_no - 1], missing))

    for hunk in patch.hunks:
        fill_context(hunk.new_start - 1 if hunk.new_lines else hunk.new_start)
        for line in hunk.lines:
            line_type = _ORIGIN_TYPES.get(line.origin)
            if line_type is None:
                # "\ No newline at end of file" markers; carried by missing_newline
                continue
            content, missing = _decode_line(line.raw_content)
            old_line = line.old_lineno if line.old_lineno > 0 else None
            new_line = line.new_lineno if line.new_lineno > 0 else None
            lines.append(DiffLine(line_type, old_line, new_line, content, missing))
            old_no = old_line or old_no
            new_no = new_line or new_no

    fill_context(len(new_lines))
    return tuple(lines)


def diff_blobs(
    path: str,
    status: ChangeStatus,
    old_data: bytes | None,
    new_data: bytes | None,
    *,
    old_path: str | None = None,
) -> FileDiff:
    """Diff two blob payloads. ``None`` stands for a side where the file is absent."""
    old_bytes = old_data or b""
    new_bytes = new_data or b""
    if is_binary_content(old_bytes) or is_binary_content(new_bytes):
        return FileDiff(path=path, status=status, is_binary=True, old_path=old_path)
    return FileDiff(
        path=path,
        status=status,
        is_binary=False,
        diff_lines=build_diff_lines(old_bytes, new_bytes),
        old_path=old_path,
    )
