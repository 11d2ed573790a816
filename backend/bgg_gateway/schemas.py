from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class FunctionCall(BaseModel):
    name: str


class FunctionsRequest(BaseModel):
    """POST /functions 요청 바디. arguments는 JSON 문자열(또는 객체)."""
    function_call: FunctionCall
    arguments: Optional[Union[str, Dict[str, Any]]] = None


class FunctionResult(BaseModel):
    """업스트림 응답 본문(XML)을 그대로 감싼다."""
    result: str


# Per-function argument models
class SearchGameArgs(BaseModel):
    query: str
    type: str = "boardgame"
    exact: bool = False


class GetThingArgs(BaseModel):
    id: str = Field(description="comma-joined BGG ids")
    type: Optional[str] = None
    stats: bool = True


class GetHotItemsArgs(BaseModel):
    type: str = "boardgame"


class GetUserCollectionArgs(BaseModel):
    username: str
