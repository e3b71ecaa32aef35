"""Core module exports."""

from gitscope.core.errors import (
    ConfigError,
    ErrorCode,
    GitScopeError,
    InternalError,
)
from gitscope.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GitScopeError",
    "InternalError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
