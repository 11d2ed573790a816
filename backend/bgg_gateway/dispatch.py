from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

import httpx
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate
from pydantic import BaseModel, ValidationError

from .errors import BggApiError, ErrorKind
from .http_adapter import call_via_binding
from .models import FunctionBinding, UpstreamConfig
from .observability import record_function_call
from .registry import FunctionRegistry


RawArguments = Union[str, Dict[str, Any], None]


def resolve_function(registry: FunctionRegistry, name: str) -> FunctionBinding:
    binding = registry.get(name)
    if binding is None:
        raise BggApiError(ErrorKind.unknown_function, f"Unknown function name: {name}")
    return binding


def parse_arguments(binding: FunctionBinding, raw: RawArguments) -> BaseModel:
    """arguments(JSON 문자열 또는 객체)를 검증해 함수별 인자 모델로 변환한다.

    - 빈 값은 {}로 취급한다
    - JSON Schema(binding.parameters)로 필수/타입을 먼저 검사한다
    """
    if raw is None or raw == "":
        args: Any = {}
    elif isinstance(raw, str):
        try:
            args = json.loads(raw)
        except json.JSONDecodeError as e:
            raise BggApiError(ErrorKind.invalid_parameters, f"arguments is not valid JSON: {e.msg}")
    else:
        args = raw

    if not isinstance(args, dict):
        raise BggApiError(ErrorKind.invalid_parameters, "arguments must be a JSON object")

    try:
        validate(instance=args, schema=binding.parameters)
    except SchemaValidationError as ve:
        raise BggApiError(ErrorKind.invalid_parameters, f"Invalid parameters for {binding.name}: {ve.message}")

    try:
        return binding.argsModel.model_validate(args)
    except ValidationError as ve:
        raise BggApiError(ErrorKind.invalid_parameters, f"Invalid parameters for {binding.name}: {ve}")


async def invoke_function(
    registry: FunctionRegistry,
    upstream: UpstreamConfig,
    name: str,
    raw_args: RawArguments,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """함수 이름과 인자로 업스트림을 호출해 원본 응답 본문을 돌려준다."""
    try:
        binding = resolve_function(registry, name)
        args = parse_arguments(binding, raw_args)
    except BggApiError:
        record_function_call(name if name in registry else "unknown", "client_error")
        raise

    try:
        body = await call_via_binding(upstream, binding, args.model_dump(), transport=transport)
    except BggApiError:
        record_function_call(name, "upstream_error")
        raise
    except Exception:
        record_function_call(name, "internal_error")
        raise

    record_function_call(name, "ok")
    return body
