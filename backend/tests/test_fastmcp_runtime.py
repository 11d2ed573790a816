"""MCP surface tests: tool schemas and the shared forwarding path."""

import asyncio

import httpx
import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from bgg_gateway.fastmcp_runtime import build_fastmcp_server
from bgg_gateway.models import UpstreamConfig
from bgg_gateway.registry import registry


def _upstream() -> UpstreamConfig:
    return UpstreamConfig(name="bgg", baseUrl="https://bgg.test/xmlapi2")


def _server(seen):
    def handler(request):
        seen.append(request)
        return httpx.Response(200, text="<items/>")

    return build_fastmcp_server(registry, _upstream, transport=httpx.MockTransport(handler))


def test_all_functions_registered_as_tools():
    server = build_fastmcp_server(registry, _upstream)
    tools = asyncio.run(server.get_tools())
    assert sorted(tools) == sorted(registry.names())


def test_tool_schemas_match_function_parameters():
    async def _list():
        async with Client(_server([])) as client:
            return {t.name: t.inputSchema for t in await client.list_tools()}

    schemas = asyncio.run(_list())

    search = schemas["search_game"]
    assert search["required"] == ["query"]
    assert set(search["properties"]) == {"query", "type", "exact"}
    assert search["properties"]["exact"]["default"] is False
    assert schemas["get_thing"]["required"] == ["id"]
    assert schemas["get_thing"]["properties"]["stats"]["default"] is True
    assert "required" not in schemas["get_hot_items"] or schemas["get_hot_items"]["required"] == []
    assert schemas["get_user_collection"]["required"] == ["username"]


def test_call_tool_with_documented_arguments_reaches_upstream():
    seen = []

    async def _call():
        async with Client(_server(seen)) as client:
            return await client.call_tool("search_game", {"query": "Catan", "exact": True})

    result = asyncio.run(_call())

    assert result.content[0].text == "<items/>"
    assert len(seen) == 1
    assert seen[0].url.path.endswith("/search")
    assert seen[0].url.params["query"] == "Catan"
    assert seen[0].url.params["exact"] == "1"
    assert seen[0].url.params["type"] == "boardgame"


def test_call_tool_omits_unset_optional_arguments():
    seen = []

    async def _call():
        async with Client(_server(seen)) as client:
            return await client.call_tool("get_thing", {"id": "13,822"})

    asyncio.run(_call())

    params = seen[0].url.params
    assert params["id"] == "13,822"
    assert params["stats"] == "1"
    assert "type" not in params


def test_call_tool_missing_required_argument_is_rejected():
    seen = []

    async def _call():
        async with Client(_server(seen)) as client:
            return await client.call_tool("get_user_collection", {})

    with pytest.raises(ToolError):
        asyncio.run(_call())
    assert seen == []


def test_app_mounts_mcp_sse(make_client):
    client = make_client(mcp_enabled=True)
    assert client.app.state.mcp_server is not None
    assert any(getattr(r, "path", None) == "/mcp-sdk" for r in client.app.routes)
