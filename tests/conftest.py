"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a builder for fixture repositories with fully controlled history.
"""

from __future__ import annotations

import itertools
import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pygit2
import pytest
import structlog
from pygit2.enums import CheckoutStrategy, FileMode

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of gitscope modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("gitscope"):
        del sys.modules[module_name]


FileContent = str | bytes | None


class RepoBuilder:
    """Writes commits straight into the object database.

    Commit times advance by one minute per commit so walk order is fixed.
    ``None`` as file content deletes the path.
    """

    def __init__(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.repo = pygit2.init_repository(str(path), initial_head="main")
        self.repo.config["user.name"] = "Test User"
        self.repo.config["user.email"] = "test@example.com"
        self._clock = itertools.count(1_700_000_000, 60)

    def signature(self, name: str = "Test User", email: str = "test@example.com") -> pygit2.Signature:
        return pygit2.Signature(name, email, next(self._clock), 0)

    def tip(self, branch: str = "main") -> str:
        ref = self.repo.references.get(f"refs/heads/{branch}")
        assert ref is not None, f"no branch {branch}"
        return str(ref.target)

    def commit(
        self,
        files: dict[str, FileContent],
        message: str,
        *,
        branch: str = "main",
        parents: list[str] | None = None,
        author: str = "Test User",
    ) -> str:
        ref_name = f"refs/heads/{branch}"
        if parents is None:
            ref = self.repo.references.get(ref_name)
            parents = [] if ref is None else [str(ref.target)]

        index = pygit2.Index()
        if parents:
            index.read_tree(self.repo.get(parents[0]).tree)
        for path, content in files.items():
            if content is None:
                index.remove(path)
                continue
            data = content.encode("utf-8") if isinstance(content, str) else content
            index.add(pygit2.IndexEntry(path, self.repo.create_blob(data), FileMode.BLOB))
        tree_id = index.write_tree(self.repo)

        sig = self.signature(author)
        oid = self.repo.create_commit(ref_name, sig, sig, message, tree_id, parents)
        return str(oid)

    def branch(self, name: str, at: str) -> None:
        self.repo.branches.local.create(name, self.repo.get(at))

    def checkout_head(self) -> None:
        """Sync index and working tree with HEAD."""
        self.repo.checkout_head(strategy=CheckoutStrategy.FORCE)

    def write(self, path: str, content: str) -> None:
        full = self.path / path
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(content.encode("utf-8"))

    def stage(self, path: str, content: str | None) -> None:
        if content is None:
            (self.path / path).unlink()
            self.repo.index.remove(path)
        else:
            self.write(path, content)
            self.repo.index.add(path)
        self.repo.index.write()

    def stash(self, files: dict[str, str], message: str) -> None:
        """Modify tracked files in the working tree and stash the changes."""
        for path, content in files.items():
            self.write(path, content)
        self.repo.stash(self.signature(), message)


@pytest.fixture
def builder(tmp_path: Path) -> RepoBuilder:
    """Empty repository with HEAD on an unborn main branch."""
    return RepoBuilder(tmp_path / "repo")


@pytest.fixture
def linear_repo(builder: RepoBuilder) -> RepoBuilder:
    """Three commits on main: add, modify, add another file."""
    builder.commit({"README.md": "# Project\n", "src/app.py": "print('v1')\n"}, "Initial commit")
    builder.commit({"src/app.py": "print('v2')\nprint('more')\n"}, "Update app")
    builder.commit({"docs/guide.md": "Guide\n"}, "Add guide")
    return builder


@pytest.fixture
def merge_repo(builder: RepoBuilder) -> RepoBuilder:
    """Root adds a.txt, main adds b.py, an unrelated side branch is merged in.

    Messages and paths never contain "hello"; only file content does.
    """
    root = builder.commit({"a.txt": "hello world\n"}, "Initial commit")
    builder.branch("side", root)
    builder.commit({"c.txt": "unrelated\n"}, "Side work", branch="side")
    builder.commit({"b.py": "def hello(): pass\n"}, "Add module")
    main_tip = builder.tip("main")
    side_tip = builder.tip("side")
    builder.commit(
        {"c.txt": "unrelated\n"},
        "Merge branch 'side'",
        parents=[main_tip, side_tip],
    )
    return builder


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Reset logging state between tests."""
    from gitscope.core.logging import clear_request_id

    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    clear_request_id()
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    clear_request_id()
