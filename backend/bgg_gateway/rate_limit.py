from __future__ import annotations

from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import Settings, get_settings


# Settings of the app serving the current request
_request_settings: ContextVar[Optional[Settings]] = ContextVar("bgg_request_settings", default=None)


def _current_settings() -> Settings:
    return _request_settings.get() or get_settings()


def _functions_limit() -> str:
    return _current_settings().rate_limit


def _limit_disabled(request: Request) -> bool:
    return not request.app.state.settings.rate_limit_enabled


limiter = Limiter(key_func=get_remote_address)

functions_limit = limiter.limit(_functions_limit, exempt_when=_limit_disabled)


async def bind_request_settings(request: Request) -> None:
    """요청을 처리하는 앱의 설정을 한도 계산에 쓰도록 묶는다.

    async 의존성이라 엔드포인트와 같은 컨텍스트에서 실행되고, limiter는 그 뒤에 한도를 검사한다.
    """
    _request_settings.set(request.app.state.settings)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """한도를 넘은 요청에 429와 표준 오류 봉투를 돌려준다."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "message": f"Rate limit exceeded: {exc.detail}",
                "type": "rate_limited",
                "code": "RATE_LIMITED",
            }
        },
    )
