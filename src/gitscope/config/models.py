"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GITSCOPE__SECTION__KEY)
3. Repo YAML (.gitscope/config.yaml)
4. Global YAML (~/.config/gitscope/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    GITSCOPE__<SECTION>__<KEY>=<VALUE>

Examples:
    GITSCOPE__LOGGING__LEVEL=DEBUG
    GITSCOPE__SEARCH__DEFAULT_MAX_COMMITS=500
    GITSCOPE__CACHE__BLAME_CAPACITY=200
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from gitscope.config.constants import (
    COMMIT_LIST_MAX,
    CONTENT_PREVIEW_CHARS,
    CONTENT_SEARCH_MAX_BYTES,
    SEARCH_DEFAULT_COMMITS,
    SEARCH_MAX_COMMITS,
    SEARCH_MAX_RESULTS,
    SEARCH_MIN_COMMITS,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GITSCOPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every blame cache hit and miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LimitsConfig(BaseModel):
    """History listing limits.

    Env vars:
        GITSCOPE__LIMITS__COMMIT_LIST_DEFAULT: Commits returned by list_commits
    """

    commit_list_default: int = Field(
        default=100,
        description="Default number of commits returned by list_commits.",
    )

    @field_validator("commit_list_default")
    @classmethod
    def validate_commit_list_default(cls, v: int) -> int:
        if not (1 <= v <= COMMIT_LIST_MAX):
            raise ValueError(f"commit_list_default must be 1-{COMMIT_LIST_MAX}, got {v}")
        return v


class SearchConfig(BaseModel):
    """Full-history search budgets.

    Env vars:
        GITSCOPE__SEARCH__DEFAULT_MAX_COMMITS: Commits scanned when the caller gives none
        GITSCOPE__SEARCH__MAX_RESULTS: Result cap per search
        GITSCOPE__SEARCH__CONTENT_MAX_BYTES: Skip content scan of blobs at or above this size
        GITSCOPE__SEARCH__PREVIEW_CHARS: Content preview length
    """

    default_max_commits: int = Field(
        default=SEARCH_DEFAULT_COMMITS,
        description="Commits scanned when the caller does not pass max_commits. "
        "TRADEOFF: Higher values find older matches but increase latency.",
    )
    max_results: int = Field(
        default=SEARCH_MAX_RESULTS,
        description=f"Maximum results per search (1-{SEARCH_MAX_RESULTS}). "
        "The scan stops once this is reached.",
    )
    content_max_bytes: int = Field(
        default=CONTENT_SEARCH_MAX_BYTES,
        description="Blobs of this size or larger are not content-scanned.",
    )
    preview_chars: int = Field(
        default=CONTENT_PREVIEW_CHARS,
        description="Maximum characters in a content match preview.",
    )

    @field_validator("default_max_commits")
    @classmethod
    def validate_default_max_commits(cls, v: int) -> int:
        if not (SEARCH_MIN_COMMITS <= v <= SEARCH_MAX_COMMITS):
            raise ValueError(
                f"default_max_commits must be {SEARCH_MIN_COMMITS}-{SEARCH_MAX_COMMITS}, got {v}"
            )
        return v

    @field_validator("max_results")
    @classmethod
    def validate_max_results(cls, v: int) -> int:
        if not (1 <= v <= SEARCH_MAX_RESULTS):
            raise ValueError(f"max_results must be 1-{SEARCH_MAX_RESULTS}, got {v}")
        return v

    @field_validator("content_max_bytes", "preview_chars")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be positive, got {v}")
        return v


class DiffConfig(BaseModel):
    """Diff engine configuration.

    Env vars:
        GITSCOPE__DIFF__RENAME_THRESHOLD: Similarity percentage for rename detection
    """

    rename_threshold: int = Field(
        default=50,
        description="Minimum similarity (percent) for a deleted/added pair to count as a rename.",
    )

    @field_validator("rename_threshold")
    @classmethod
    def validate_rename_threshold(cls, v: int) -> int:
        if not (1 <= v <= 100):
            raise ValueError(f"rename_threshold must be 1-100, got {v}")
        return v


class CacheConfig(BaseModel):
    """Result cache configuration.

    Env vars:
        GITSCOPE__CACHE__BLAME_CAPACITY: Blame results kept in memory
    """

    blame_capacity: int = Field(
        default=50,
        description="Blame results kept in memory. Oldest-inserted entries are evicted first.",
    )

    @field_validator("blame_capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"blame_capacity must be positive, got {v}")
        return v


class GitScopeConfig(BaseModel):
    """Root configuration for gitscope."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
