from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from .registry import FunctionRegistry


logger = logging.getLogger(__name__)

TOOLS_CACHE_KEY = "bgg:tools:list"


class ToolsListCache:
    """함수 설명 목록을 Redis에 TTL로 캐시한다.

    - 캐시 적중 시 저장된 목록을 그대로 사용한다
    - 미스 시 정적 목록을 SETEX로 저장한 뒤 돌려준다
    - Redis 오류가 나면 로그만 남기고 정적 목록으로 내려간다
    - client가 없으면(REDIS_URL 미설정) 항상 정적 목록을 쓴다
    """
    def __init__(self, registry: FunctionRegistry, client: Optional[Any] = None, ttl: int = 3600) -> None:
        self._registry = registry
        self._client = client
        self._ttl = ttl

    @classmethod
    def from_url(cls, registry: FunctionRegistry, redis_url: Optional[str], ttl: int = 3600) -> "ToolsListCache":
        client = aioredis.from_url(redis_url, decode_responses=True) if redis_url else None
        return cls(registry, client=client, ttl=ttl)

    def static_list(self) -> List[Dict[str, Any]]:
        return [d.model_dump() for d in self._registry.descriptors()]

    async def get_tools_list(self) -> List[Dict[str, Any]]:
        tools = self.static_list()
        if self._client is None:
            return tools
        try:
            cached = await self._client.get(TOOLS_CACHE_KEY)
            if cached:
                return json.loads(cached)
            await self._client.setex(TOOLS_CACHE_KEY, self._ttl, json.dumps(tools))
        except (RedisError, OSError, ValueError) as e:
            logger.error("tools_cache.redis_error error=%s", e)
        return tools

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
