"""Structured error system for MCP tools.

Domain errors from the history engine are mapped onto machine-readable codes
with a remediation hint. A failed request never carries a partial result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError

from gitscope.git.errors import (
    EmptyRepositoryError,
    FileNotFoundAtRevisionError,
    GitError,
    NotARepositoryError,
    RevisionNotFoundError,
    StashNotFoundError,
)


class MCPErrorCode(StrEnum):
    """Machine-readable error codes for MCP tool failures."""

    # Repository and revision errors
    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    REVISION_NOT_FOUND = "REVISION_NOT_FOUND"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    STASH_NOT_FOUND = "STASH_NOT_FOUND"

    # Validation errors - caller should fix input
    INVALID_PARAMS = "INVALID_PARAMS"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorResponse:
    """Structured error response for MCP tools."""

    code: MCPErrorCode
    message: str
    remediation: str
    path: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "path": self.path,
            "context": self.context,
        }


class MCPError(ToolError):
    """Base exception for MCP tool errors with structured response.

    Extends FastMCP's ToolError so FastMCP passes it through unchanged.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            code=self.code,
            message=self.message,
            remediation=self.remediation,
            path=self.path,
            context=self.context,
        )


def from_git_error(exc: GitError) -> MCPError:
    """Translate a history engine error into its structured form."""
    message = str(exc)
    if isinstance(exc, NotARepositoryError):
        return MCPError(
            MCPErrorCode.REPOSITORY_NOT_FOUND,
            message,
            "Check that repo_path points at a git working tree or .git directory.",
            path=exc.path,
        )
    if isinstance(exc, EmptyRepositoryError):
        return MCPError(
            MCPErrorCode.REPOSITORY_NOT_FOUND,
            message,
            "The repository has no commits yet. Create a commit first.",
            path=exc.path,
        )
    if isinstance(exc, RevisionNotFoundError):
        return MCPError(
            MCPErrorCode.REVISION_NOT_FOUND,
            message,
            "Use a commit id from list_commits, a branch name, or an expression such as HEAD~1.",
            rev=exc.rev,
        )
    if isinstance(exc, FileNotFoundAtRevisionError):
        return MCPError(
            MCPErrorCode.FILE_NOT_FOUND,
            message,
            "Use a path listed by get_commit_file_tree or get_commit_changes for that commit.",
            path=exc.path,
            rev=exc.rev,
        )
    if isinstance(exc, StashNotFoundError):
        return MCPError(
            MCPErrorCode.STASH_NOT_FOUND,
            message,
            "Use an index returned by list_stashes (0 is the most recent).",
            stash_index=exc.index,
        )
    return MCPError(MCPErrorCode.INTERNAL_ERROR, message, "Check the server log for details.")
