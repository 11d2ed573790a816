from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.tools.tool import FunctionTool

from .dispatch import invoke_function
from .models import UpstreamConfig
from .registry import FunctionRegistry


logger = logging.getLogger(__name__)


UpstreamProvider = Callable[[], UpstreamConfig]
ToolCall = Callable[[str, Dict[str, Any]], Awaitable[str]]


def _make_tool_call(
    registry: FunctionRegistry,
    upstream: UpstreamProvider,
    transport: Optional[httpx.AsyncBaseTransport],
) -> ToolCall:
    async def _call(name: str, args: Dict[str, Any]) -> str:
        # Unset optionals are left out, as in a /functions arguments object
        provided = {k: v for k, v in args.items() if v is not None}
        return await invoke_function(registry, upstream(), name, provided, transport=transport)

    return _call


def _tool_functions(call: ToolCall) -> Dict[str, Callable[..., Awaitable[str]]]:
    """함수별로 인자를 풀어 쓴 도구 함수를 만든다.

    FastMCP는 함수 시그니처로 inputSchema를 만들기 때문에, 인자 모델의 필드와
    기본값을 그대로 시그니처에 옮겨 manifest의 parameters와 같은 모양을 노출한다.
    """

    async def search_game(query: str, type: str = "boardgame", exact: bool = False) -> str:
        return await call("search_game", {"query": query, "type": type, "exact": exact})

    async def get_thing(id: str, type: Optional[str] = None, stats: bool = True) -> str:
        return await call("get_thing", {"id": id, "type": type, "stats": stats})

    async def get_hot_items(type: str = "boardgame") -> str:
        return await call("get_hot_items", {"type": type})

    async def get_user_collection(username: str) -> str:
        return await call("get_user_collection", {"username": username})

    return {
        "search_game": search_game,
        "get_thing": get_thing,
        "get_hot_items": get_hot_items,
        "get_user_collection": get_user_collection,
    }


def build_fastmcp_server(
    registry: FunctionRegistry,
    upstream: UpstreamProvider,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """레지스트리의 모든 함수를 MCP 도구로 등록한 FastMCP 서버를 만든다.

    - 도구 이름은 함수 이름과 같다
    - 도구 호출은 /functions와 같은 검증/전달 경로(invoke_function)를 탄다
    """
    functions = _tool_functions(_make_tool_call(registry, upstream, transport))
    server = FastMCP(name="BGG API MCP")
    for name in registry.names():
        if name not in functions:
            raise ValueError(f"no MCP tool function for {name}")
        binding = registry.get(name)
        tool = FunctionTool.from_function(
            functions[name],
            name=binding.name,
            description=binding.description,
        )
        server.add_tool(tool)
    logger.info("fastmcp.registered tools=%s", registry.names())
    return server


def build_fastmcp_sse_app(server: FastMCP):
    # SSE transport under the mount point: /sse and /messages
    from fastmcp.server.http import create_sse_app

    return create_sse_app(
        server=server,
        message_path="/messages",
        sse_path="/sse",
        auth=None,
        debug=False,
    )
