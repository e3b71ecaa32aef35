"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class RepositoryError(GitError):
    """The repository itself cannot be used."""

    pass


class NotARepositoryError(RepositoryError):
    """Path is missing or is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class EmptyRepositoryError(RepositoryError):
    """Repository has no commits yet."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Repository has no commits: {path}")
        self.path = path


class RevisionNotFoundError(GitError):
    """Commit id or revision expression does not resolve to a commit."""

    def __init__(self, rev: str) -> None:
        super().__init__(f"Revision not found: {rev}")
        self.rev = rev


class FileNotFoundAtRevisionError(GitError):
    """File is absent (or not readable as text) at the given revision."""

    def __init__(self, path: str, rev: str, reason: str | None = None) -> None:
        reason_part = f" ({reason})" if reason else ""
        super().__init__(f"File not found at {rev}: {path}{reason_part}")
        self.path = path
        self.rev = rev
        self.reason = reason


class StashError(GitError):
    """Stash operation failed."""

    pass


class StashNotFoundError(StashError):
    """Stash entry not found."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Stash entry not found: stash@{{{index}}}")
        self.index = index
