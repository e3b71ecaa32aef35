"""FastMCP server creation and wiring.

Tool logging is two-phase: tool_start with params, then tool_complete with a
summary, or tool_error / tool_internal_error on failure.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.utilities.json_schema import dereference_refs
from pydantic import BaseModel, Field

from gitscope.core.errors import InternalError
from gitscope.core.logging import clear_request_id, get_log_file_path, set_request_id

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from gitscope.config.models import GitScopeConfig
    from gitscope.mcp.context import AppContext
    from gitscope.mcp.registry import ToolSpec

log = structlog.get_logger(__name__)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)
    success: bool
    error: str | None = None


def _extract_log_params(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Key params for the tool_start log, with long strings truncated."""
    params: dict[str, Any] = {}
    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 50:
            params[key] = value[:50] + "..."
        elif value is not None:
            params[key] = value
    return params


def _extract_result_summary(result: dict[str, Any]) -> dict[str, Any]:
    """Counts worth logging on tool_complete."""
    summary: dict[str, Any] = {}
    for key in ("results", "commits", "changes", "branches", "remotes", "stashes", "nodes", "blame_lines"):
        value = result.get(key)
        if isinstance(value, list):
            summary[key] = len(value)
    for key in ("stale", "query_too_short", "truncated", "commits_scanned"):
        if key in result:
            summary[key] = result[key]
    return summary


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context."""
    from fastmcp import FastMCP

    from gitscope.mcp.registry import registry

    # Import tools to trigger registration
    from gitscope.mcp.tools import history  # noqa: F401

    log.info("mcp_server_creating", default_repo=str(context.default_repo or "."))

    mcp = FastMCP(
        "gitscope",
        instructions="Read-only git history browsing: commits, diffs, blame and full-history search.",
    )

    tool_count = 0
    for spec in registry.get_all():
        _wire_tool(mcp, spec, context)
        tool_count += 1

    log.info("mcp_server_created", tool_count=tool_count)
    return mcp


def _make_handler(spec: ToolSpec, context: AppContext) -> Any:
    """Handler that validates kwargs, calls the tool and wraps the result."""
    from pydantic import ValidationError

    from gitscope.mcp.errors import MCPError, MCPErrorCode

    params_model = spec.params_model
    tool_name = spec.name

    async def handler(**kwargs: Any) -> dict[str, Any]:
        request_id = set_request_id()
        start_time = time.perf_counter()
        log.info("tool_start", tool=tool_name, **_extract_log_params(kwargs))

        try:
            try:
                params = params_model(**kwargs)
            except ValidationError as e:
                elapsed_ms = int((time.perf_counter() - start_time) * 1000)
                first = e.errors()[0]["msg"] if e.errors() else str(e)
                log.warning("tool_validation_error", tool=tool_name, error=first, elapsed_ms=elapsed_ms)
                return ToolResponse(
                    success=False,
                    error=f"Validation error: {first}",
                    meta={
                        "request_id": request_id,
                        "error": {
                            "code": MCPErrorCode.INVALID_PARAMS.value,
                            "message": first,
                            "remediation": "Fix the listed parameters and retry.",
                        },
                        "validation_errors": [
                            {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                            for err in e.errors()[:5]
                        ],
                    },
                ).model_dump()

            try:
                result_data: dict[str, Any] = await spec.handler(context, params)
            except MCPError as e:
                elapsed_ms = int((time.perf_counter() - start_time) * 1000)
                log.warning(
                    "tool_error",
                    tool=tool_name,
                    error_code=e.code.value,
                    error=e.message,
                    path=e.path,
                    elapsed_ms=elapsed_ms,
                )
                return ToolResponse(
                    success=False,
                    error=e.message,
                    meta={"request_id": request_id, "error": e.to_response().to_dict()},
                ).model_dump()
            except Exception as e:
                elapsed_ms = int((time.perf_counter() - start_time) * 1000)
                log.error("tool_internal_error", tool=tool_name, error=str(e), elapsed_ms=elapsed_ms)
                log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
                log_file = get_log_file_path()
                internal = InternalError.unexpected(str(e), tool=tool_name)
                return ToolResponse(
                    success=False,
                    error=internal.message,
                    meta={
                        "request_id": request_id,
                        "error": {
                            "code": MCPErrorCode.INTERNAL_ERROR.value,
                            "message": internal.message,
                            "remediation": f"See {log_file}" if log_file else "Check the server log.",
                            "context": internal.to_dict(),
                        },
                    },
                ).model_dump()

            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            log.info("tool_complete", tool=tool_name, elapsed_ms=elapsed_ms, **_extract_result_summary(result_data))
            return ToolResponse(
                success=True,
                result=result_data,
                meta={"request_id": request_id, "timestamp": int(time.time() * 1000)},
            ).model_dump()
        finally:
            clear_request_id()

    return handler


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Wire a single tool spec to FastMCP.

    The params model's fields become direct parameters so FastMCP exposes a
    flat schema.
    """
    from fastmcp.tools.tool import FunctionTool

    # dereference_refs inlines all $refs and removes $defs
    flat_schema = dereference_refs(spec.params_model.model_json_schema())

    tool = FunctionTool(
        name=spec.name,
        description=spec.description,
        parameters=flat_schema,
        fn=_make_handler(spec, context),
    )
    mcp.add_tool(tool)


def run_server(config: GitScopeConfig, default_repo: Path | None = None) -> None:
    """Create and run the MCP server over stdio."""
    from gitscope.core.logging import configure_logging
    from gitscope.mcp.context import AppContext

    configure_logging(config=config.logging)
    log.info("mcp_server_starting", default_repo=str(default_repo or "."))

    context = AppContext.create(config, default_repo)
    mcp = create_mcp_server(context)

    log.info("mcp_server_running")
    mcp.run()
