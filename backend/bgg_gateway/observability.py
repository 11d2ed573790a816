from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


logger = logging.getLogger("bgg_gateway.access")


REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ["method", "route", "status_code"],
    buckets=(0.1, 0.5, 1, 2, 5),
)

FUNCTION_CALLS = Counter(
    "bgg_function_calls",
    "Function calls forwarded to the BGG API",
    ["function", "outcome"],
)


def record_function_call(function: str, outcome: str) -> None:
    FUNCTION_CALLS.labels(function=function, outcome=outcome).inc()


class JSONFormatter(logging.Formatter):
    """로그 레코드를 한 줄짜리 JSON으로 직렬화한다."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("method", "path", "status_code", "duration_ms", "error_code"):
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """루트 로거에 핸들러를 붙인다. 여러 번 호출돼도 핸들러는 하나만 유지한다."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    handler.set_name("bgg_gateway")
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "bgg_gateway":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    # Unmatched paths collapse to one label
    return path or "unmatched"


async def observe_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """요청마다 접근 로그를 남기고 처리 시간을 히스토그램에 기록하는 HTTP 미들웨어."""
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed = time.perf_counter() - started
        REQUEST_DURATION.labels(
            method=request.method,
            route=_route_label(request),
            status_code=str(status_code),
        ).observe(elapsed)
        logger.info(
            "%s %s",
            request.method,
            request.url.path,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )


router = APIRouter(tags=["meta"])


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus exposition 형식으로 메트릭을 내보낸다."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
