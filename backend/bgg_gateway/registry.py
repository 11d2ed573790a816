from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import FunctionBinding, FunctionDescriptor, ParamMapping
from .schemas import GetHotItemsArgs, GetThingArgs, GetUserCollectionArgs, SearchGameArgs


class FunctionRegistry:
    """함수 이름 → 업스트림 바인딩을 보관하는 레지스트리.

    - 프로세스 시작 시 한 번 만들어지고 이후에는 읽기만 한다
    - 등록 순서가 manifest의 functions 순서가 된다
    """
    def __init__(self, bindings: Iterable[FunctionBinding]) -> None:
        self._bindings: Dict[str, FunctionBinding] = {}
        for binding in bindings:
            if binding.name in self._bindings:
                raise ValueError(f"duplicate function: {binding.name}")
            self._bindings[binding.name] = binding

    def get(self, name: str) -> Optional[FunctionBinding]:
        return self._bindings.get(name)

    def names(self) -> List[str]:
        return list(self._bindings)

    def descriptors(self) -> List[FunctionDescriptor]:
        return [b.descriptor() for b in self._bindings.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


DEFAULT_BINDINGS = [
    FunctionBinding(
        name="search_game",
        description="Search board games by name",
        path="/search",
        paramMapping=ParamMapping(query={"query": "query", "type": "type", "exact": "exact"}),
        parameters={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search keyword"},
                "type": {"type": "string", "description": "Item type, e.g. boardgame", "default": "boardgame"},
                "exact": {"type": "boolean", "description": "Match the name exactly", "default": False},
            },
            "required": ["query"],
        },
        argsModel=SearchGameArgs,
    ),
    FunctionBinding(
        name="get_thing",
        description="Get details of the board games with the given ids",
        path="/thing",
        paramMapping=ParamMapping(query={"id": "id", "type": "type", "stats": "stats"}),
        parameters={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "BGG id, or several ids joined by commas"},
                "type": {"type": "string", "description": "Restrict results to this item type"},
                "stats": {"type": "boolean", "description": "Include ranking statistics", "default": True},
            },
            "required": ["id"],
        },
        argsModel=GetThingArgs,
    ),
    FunctionBinding(
        name="get_hot_items",
        description="Get the current hot list",
        path="/hot",
        paramMapping=ParamMapping(query={"type": "type"}),
        parameters={
            "type": "object",
            "properties": {
                "type": {"type": "string", "description": "Hot list type, e.g. boardgame", "default": "boardgame"},
            },
        },
        argsModel=GetHotItemsArgs,
    ),
    FunctionBinding(
        name="get_user_collection",
        description="Get a user's game collection",
        path="/collection",
        paramMapping=ParamMapping(query={"username": "username"}, fixed={"stats": "1"}),
        parameters={
            "type": "object",
            "properties": {
                "username": {"type": "string", "description": "BGG user name"},
            },
            "required": ["username"],
        },
        argsModel=GetUserCollectionArgs,
    ),
]


registry = FunctionRegistry(DEFAULT_BINDINGS)
