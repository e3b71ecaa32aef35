"""Application context for MCP handlers.

Single object passed to all tool handlers with the shared state of the server.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gitscope.config.models import GitScopeConfig
from gitscope.git import BlameCache, HistoryOps
from gitscope.mcp.generations import SearchGenerations


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers.

    ``default_repo`` is used when a request does not name a repository.
    The blame cache is owned here and shared by every request.
    """

    config: GitScopeConfig
    history: HistoryOps
    blame_cache: BlameCache
    generations: SearchGenerations
    default_repo: Path | None = None

    @classmethod
    def create(cls, config: GitScopeConfig | None = None, default_repo: Path | None = None) -> AppContext:
        config = config or GitScopeConfig()
        blame_cache = BlameCache(config.cache.blame_capacity)
        return cls(
            config=config,
            history=HistoryOps(config, blame_cache),
            blame_cache=blame_cache,
            generations=SearchGenerations(),
            default_repo=default_repo,
        )

    def repo_path(self, requested: str | None) -> Path | None:
        """Repository to open for a request; None means discover from CWD."""
        if requested:
            return Path(requested).expanduser()
        return self.default_repo
