"""Tests for the blame engine."""

from __future__ import annotations

import pytest

from gitscope.git._internal.access import RepoAccess
from gitscope.git._internal.blame import blame_file
from gitscope.git.errors import FileNotFoundAtRevisionError


def _blame(builder, rev: str, path: str):
    access = RepoAccess(builder.path)
    return blame_file(access, access.resolve_commit(rev), path)


def _owners(blame) -> list[str]:
    return [line.commit_id for line in blame.blame_lines]


class TestBlameFile:
    def test_untouched_file_attributed_to_root(self, builder) -> None:
        """Ten lines never modified after the root commit all belong to it."""
        content = "".join(f"line {i}\n" for i in range(1, 11))
        root = builder.commit({"ten.txt": content}, "Initial commit")
        builder.commit({"other.txt": "x\n"}, "Unrelated")
        builder.commit({"other.txt": "y\n"}, "Unrelated again")

        blame = _blame(builder, "HEAD", "ten.txt")

        assert len(blame.blame_lines) == 10
        assert set(_owners(blame)) == {root}
        assert [line.line_number for line in blame.blame_lines] == list(range(1, 11))

    def test_lines_attributed_to_introducing_commits(self, builder) -> None:
        c1 = builder.commit({"f.txt": "a\nb\nc\n"}, "one")
        c2 = builder.commit({"f.txt": "a\nB\nc\n"}, "two")
        c3 = builder.commit({"f.txt": "a\nB\nc\nd\n"}, "three")

        blame = _blame(builder, "HEAD", "f.txt")

        assert _owners(blame) == [c1, c2, c1, c3]
        assert [line.content for line in blame.blame_lines] == ["a", "B", "c", "d"]

    def test_line_moved_down_by_insertion_keeps_origin(self, builder) -> None:
        c1 = builder.commit({"f.txt": "x\ny\n"}, "one")
        c2 = builder.commit({"f.txt": "new\nx\ny\n"}, "two")

        blame = _blame(builder, c2, "f.txt")

        assert _owners(blame) == [c2, c1, c1]

    def test_blame_at_older_commit_ignores_later_history(self, builder) -> None:
        c1 = builder.commit({"f.txt": "a\n"}, "one")
        c2 = builder.commit({"f.txt": "a\nb\n"}, "two")
        builder.commit({"f.txt": "changed\n"}, "three")

        blame = _blame(builder, c2, "f.txt")

        assert _owners(blame) == [c1, c2]

    def test_file_added_after_root(self, builder) -> None:
        builder.commit({"README": "r\n"}, "root")
        added = builder.commit({"late.txt": "1\n2\n"}, "add late")

        assert set(_owners(_blame(builder, "HEAD", "late.txt"))) == {added}

    def test_file_deleted_and_readded(self, builder) -> None:
        builder.commit({"f.txt": "same\n", "keep": "k\n"}, "one")
        builder.commit({"f.txt": None}, "remove")
        readded = builder.commit({"f.txt": "same\n"}, "readd")

        assert _owners(_blame(builder, "HEAD", "f.txt")) == [readded]

    def test_follows_first_parent_through_merge(self, builder) -> None:
        root = builder.commit({"f.txt": "base\n"}, "root")
        builder.branch("side", root)
        builder.commit({"side.txt": "s\n"}, "side", branch="side")
        main_tip = builder.commit({"f.txt": "base\nmain\n"}, "main change")
        merge = builder.commit(
            {"side.txt": "s\n"},
            "merge",
            parents=[main_tip, builder.tip("side")],
        )

        blame = _blame(builder, merge, "f.txt")

        assert _owners(blame) == [root, main_tip]

    def test_metadata_copied_from_commit(self, builder) -> None:
        c1 = builder.commit({"f.txt": "a\n"}, "one", author="Alice")

        line = _blame(builder, "HEAD", "f.txt").blame_lines[0]

        assert line.author == "Alice"
        assert line.commit_short_id == c1[:8]
        assert line.date.tzinfo is not None

    def test_empty_file_has_no_lines(self, builder) -> None:
        builder.commit({"empty.txt": ""}, "empty")
        assert _blame(builder, "HEAD", "empty.txt").blame_lines == ()

    def test_missing_file_raises(self, builder) -> None:
        builder.commit({"f.txt": "a\n"}, "one")
        with pytest.raises(FileNotFoundAtRevisionError):
            _blame(builder, "HEAD", "nope.txt")

    def test_directory_path_raises(self, builder) -> None:
        builder.commit({"dir/f.txt": "a\n"}, "one")
        with pytest.raises(FileNotFoundAtRevisionError):
            _blame(builder, "HEAD", "dir")

    def test_binary_file_raises(self, builder) -> None:
        builder.commit({"img.bin": b"\x00\x01\x02"}, "binary")
        with pytest.raises(FileNotFoundAtRevisionError, match="binary"):
            _blame(builder, "HEAD", "img.bin")

    def test_line_count_matches_file(self, builder) -> None:
        builder.commit({"f.txt": "1\n2\n3\n"}, "one")
        builder.commit({"f.txt": "0\n1\n3\n4\n5"}, "two")

        blame = _blame(builder, "HEAD", "f.txt")

        assert len(blame.blame_lines) == 5

    def test_edits_at_both_ends_keep_middle_with_root(self, builder) -> None:
        """Only the two rewritten lines of a long file move to the editing commit."""
        lines = [f"line {i}\n" for i in range(1, 1501)]
        root = builder.commit({"big.txt": "".join(lines)}, "add big file")
        edit = builder.commit(
            {"big.txt": "".join(["first changed\n", *lines[1:-1], "last changed\n"])},
            "edit both ends",
        )

        owners = _owners(_blame(builder, "HEAD", "big.txt"))

        assert len(owners) == 1500
        assert owners[0] == edit
        assert owners[-1] == edit
        assert set(owners[1:-1]) == {root}

    def test_unterminated_last_line_is_blamed(self, builder) -> None:
        c1 = builder.commit({"f.txt": "a\nb"}, "one")
        c2 = builder.commit({"f.txt": "a\nb\nc"}, "two")

        blame = _blame(builder, "HEAD", "f.txt")

        assert [line.content for line in blame.blame_lines] == ["a", "b", "c"]
        assert _owners(blame) == [c1, c2, c2]

    def test_path_is_normalized(self, builder) -> None:
        c1 = builder.commit({"src/f.txt": "a\n"}, "one")
        assert _owners(_blame(builder, "HEAD", "./src/f.txt")) == [c1]
