"""Base parameter models for MCP tools."""

from pydantic import BaseModel, ConfigDict, Field


class BaseParams(BaseModel):
    """Base class for all tool parameters.

    Uses extra="forbid" to reject unknown fields with clear errors.
    """

    model_config = ConfigDict(extra="forbid")

    repo_path: str | None = Field(
        default=None,
        description="Path to the repository. Defaults to the server's repository.",
    )
