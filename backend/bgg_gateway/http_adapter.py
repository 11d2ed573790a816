from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import BggApiError, ErrorKind
from .models import AuthType, FunctionBinding, UpstreamConfig


logger = logging.getLogger(__name__)


def _build_headers(base_headers: Dict[str, str], auth: AuthType, auth_value: Optional[str]) -> Dict[str, str]:
    """요청 헤더를 구성한다.

    업스트림 기본 헤더를 복사하고, bearer 토큰이 설정돼 있으면 Authorization 헤더를 추가한다.
    """
    headers: Dict[str, str] = dict(base_headers)
    if auth == AuthType.bearer and auth_value:
        headers.setdefault("Authorization", auth_value if auth_value.lower().startswith("bearer") else f"Bearer {auth_value}")
    return headers


def _query_value(value: Any) -> Any:
    # BGG expects 1/0 flags, not true/false
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def _build_query(query_mapping: Dict[str, str], fixed: Dict[str, str], args: Dict[str, Any]) -> Dict[str, Any]:
    """쿼리스트링을 구성한다.

    - query_mapping에 정의된 키만 args에서 뽑아 사용하고, None 값은 생략한다.
    - fixed에 정의된 값은 인자와 관계없이 항상 붙인다.
    """
    query: Dict[str, Any] = {}
    for q_name, arg_key in query_mapping.items():
        if arg_key in args and args[arg_key] is not None:
            query[q_name] = _query_value(args[arg_key])
    for q_name, value in fixed.items():
        query.setdefault(q_name, value)
    return query


def _upstream_transport(
    upstream: UpstreamConfig, transport: Optional[httpx.AsyncBaseTransport]
) -> Optional[httpx.AsyncBaseTransport]:
    """명시적으로 받은 transport가 우선이고, 없으면 retries > 0일 때만 재시도 transport를 만든다."""
    if transport is None and upstream.retries > 0:
        # Connection-level retries only; httpx does not retry on responses
        return httpx.AsyncHTTPTransport(retries=upstream.retries)
    return transport


def _error_message(exc: httpx.HTTPError) -> str:
    return str(exc) or exc.__class__.__name__


async def call_via_binding(
    upstream: UpstreamConfig,
    binding: FunctionBinding,
    args: Dict[str, Any],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """바인딩 정보를 이용해 업스트림에 GET 요청을 한 번 보내고 응답 본문을 그대로 돌려준다.

    - URL: 업스트림 baseUrl + binding.path
    - Headers/Query: 업스트림 기본값 + 인증 설정 + 쿼리 매핑을 반영
    - 2xx가 아니거나 전송 단계에서 실패하면 BGG_API_ERROR로 변환한다
    """
    url = upstream.baseUrl.rstrip("/") + "/" + binding.path.lstrip("/")
    headers = _build_headers(upstream.defaultHeaders, upstream.auth.type, upstream.auth.value)
    query = _build_query(binding.paramMapping.query, binding.paramMapping.fixed, args)

    transport = _upstream_transport(upstream, transport)
    timeout = httpx.Timeout(upstream.timeout)
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            resp = await client.get(url, params=query or None, headers=headers)
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        message = _error_message(exc)
        logger.warning("upstream.failed function=%s url=%s error=%s", binding.name, url, message)
        raise BggApiError(ErrorKind.upstream, message) from exc

    logger.debug("upstream.ok function=%s status=%s bytes=%d", binding.name, resp.status_code, len(resp.content))
    return resp.text
