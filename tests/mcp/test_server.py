"""Tests for mcp/server.py module.

Covers:
- ToolResponse model
- _extract_log_params() and _extract_result_summary()
- _make_handler() envelopes: success, validation error, tool error, internal error
- create_mcp_server() wiring
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import pytest

import gitscope.mcp.tools.history  # noqa: F401
from gitscope.core.logging import get_request_id
from gitscope.mcp.context import AppContext
from gitscope.mcp.registry import ToolSpec, registry
from gitscope.mcp.server import (
    ToolResponse,
    _extract_log_params,
    _extract_result_summary,
    _make_handler,
    create_mcp_server,
)
from gitscope.mcp.tools.history import RepoParams


def _handler(name: str, context: AppContext) -> Any:
    spec = registry.get(name)
    assert spec is not None
    return _make_handler(spec, context)


class TestToolResponse:
    def test_success_response(self) -> None:
        response = ToolResponse(success=True, result={"commits": []})
        assert response.error is None
        assert response.meta == {}

    def test_json_serializable(self) -> None:
        response = ToolResponse(success=False, error="nope", meta={"error": {"code": "FILE_NOT_FOUND"}})
        parsed = json.loads(json.dumps(response.model_dump()))
        assert parsed["success"] is False
        assert parsed["meta"]["error"]["code"] == "FILE_NOT_FOUND"


class TestExtractLogParams:
    def test_truncates_long_strings(self) -> None:
        result = _extract_log_params({"query": "x" * 100})
        assert len(result["query"]) == 53
        assert result["query"].endswith("...")

    def test_skips_none(self) -> None:
        assert _extract_log_params({"branch_name": None, "limit": 5}) == {"limit": 5}


class TestExtractResultSummary:
    def test_counts_lists(self) -> None:
        summary = _extract_result_summary({"commits": [1, 2, 3], "summary": "3 commits"})
        assert summary == {"commits": 3}

    def test_search_flags(self) -> None:
        summary = _extract_result_summary(
            {"results": [], "stale": True, "generation": 2, "truncated": False, "commits_scanned": 10}
        )
        assert summary == {"results": 0, "stale": True, "truncated": False, "commits_scanned": 10}


class TestMakeHandler:
    @pytest.fixture
    def context(self, linear_repo) -> AppContext:
        return AppContext.create(default_repo=linear_repo.path)

    @pytest.mark.asyncio
    async def test_success_envelope(self, context: AppContext) -> None:
        response = await _handler("list_commits", context)(limit=2)

        assert response["success"] is True
        assert response["error"] is None
        assert len(response["result"]["commits"]) == 2
        assert response["meta"]["request_id"]
        assert isinstance(response["meta"]["timestamp"], int)

    @pytest.mark.asyncio
    async def test_request_id_cleared_after_call(self, context: AppContext) -> None:
        await _handler("list_branches", context)()
        assert get_request_id() is None

    @pytest.mark.asyncio
    async def test_validation_error(self, context: AppContext) -> None:
        response = await _handler("list_commits", context)(limit=0)

        assert response["success"] is False
        assert response["result"] is None
        assert response["meta"]["error"]["code"] == "INVALID_PARAMS"
        assert response["meta"]["validation_errors"][0]["field"] == "limit"

    @pytest.mark.asyncio
    async def test_unknown_parameter_rejected(self, context: AppContext) -> None:
        response = await _handler("list_branches", context)(surprise=True)
        assert response["meta"]["error"]["code"] == "INVALID_PARAMS"

    @pytest.mark.asyncio
    async def test_missing_required_parameter(self, context: AppContext) -> None:
        response = await _handler("get_commit_changes", context)()
        assert response["success"] is False
        assert response["meta"]["validation_errors"][0]["field"] == "commit_id"

    @pytest.mark.asyncio
    async def test_domain_error_envelope(self, context: AppContext) -> None:
        response = await _handler("get_file_content", context)(commit_id="HEAD", file_path="nope.txt")

        assert response["success"] is False
        assert response["result"] is None
        error = response["meta"]["error"]
        assert error["code"] == "FILE_NOT_FOUND"
        assert error["path"] == "nope.txt"
        assert error["remediation"]

    @pytest.mark.asyncio
    async def test_repository_error_envelope(self, context: AppContext, tmp_path) -> None:
        response = await _handler("list_branches", context)(repo_path=str(tmp_path / "missing"))
        assert response["meta"]["error"]["code"] == "REPOSITORY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal_error(self, context: AppContext) -> None:
        async def broken(ctx: AppContext, params: RepoParams) -> dict[str, Any]:
            raise RuntimeError("kaboom")

        spec = ToolSpec(name="broken", handler=broken, description="Broken", params_model=RepoParams)
        response = await _make_handler(spec, context)()

        assert response["success"] is False
        error = response["meta"]["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert "kaboom" in error["message"]
        assert error["context"]["details"] == {"tool": "broken"}


class TestCreateMcpServer:
    def test_creates_named_server(self, tmp_path) -> None:
        with patch("gitscope.mcp.registry.registry") as mock_registry:
            mock_registry.get_all.return_value = []
            mcp = create_mcp_server(AppContext.create(default_repo=tmp_path))
        assert mcp.name == "gitscope"

    def test_wires_every_registered_tool(self, tmp_path) -> None:
        with patch("gitscope.mcp.server._wire_tool") as wire:
            create_mcp_server(AppContext.create(default_repo=tmp_path))
        wired = {call.args[1].name for call in wire.call_args_list}
        assert wired == {spec.name for spec in registry.get_all()}
        assert len(wired) == 14
