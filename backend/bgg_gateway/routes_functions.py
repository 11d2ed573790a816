from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from .dispatch import invoke_function
from .schemas import FunctionResult, FunctionsRequest
from .rate_limit import bind_request_settings, functions_limit


router = APIRouter(tags=["functions"])


BASE_MANIFEST: Dict[str, Any] = {
    "schema_version": "v1",
    "name_for_human": "BGG API MCP",
    "name_for_model": "bgg_api",
    "description_for_human": "Look up BoardGameGeek games, hot lists and user collections",
    "description_for_model": "Query board games, collections, hot items and item details through the BGG XML API",
    "auth": {"type": "none"},
}


@router.get("/manifest.json")
async def manifest(request: Request) -> Dict[str, Any]:
    """서비스 설명과 함수 목록을 반환한다. callback url에는 요청의 Host를 그대로 쓴다."""
    host = request.headers.get("host", request.url.netloc)
    functions = await request.app.state.tools_cache.get_tools_list()
    return {
        **BASE_MANIFEST,
        "api": {"type": "openai_function", "url": f"http://{host}/functions"},
        "functions": functions,
    }


@router.post("/functions", dependencies=[Depends(bind_request_settings)])
@functions_limit
async def call_function(request: Request, body: FunctionsRequest) -> FunctionResult:
    """function_call.name에 해당하는 BGG API를 호출하고 원본 응답을 result로 감싸 돌려준다."""
    state = request.app.state
    result = await invoke_function(
        state.registry,
        state.settings.upstream(),
        body.function_call.name,
        body.arguments,
        transport=state.upstream_transport,
    )
    return FunctionResult(result=result)
