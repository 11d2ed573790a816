from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorKind(str, Enum):
    """게이트웨이가 돌려주는 오류 종류. 값은 응답의 error.code로 쓰인다."""
    unknown_function = "UNKNOWN_FUNCTION"
    invalid_parameters = "INVALID_PARAMETERS"
    upstream = "BGG_API_ERROR"
    internal = "INTERNAL_ERROR"

    @property
    def status_code(self) -> int:
        return _STATUS[self]

    @property
    def error_type(self) -> str:
        return _TYPES[self]


_STATUS = {
    ErrorKind.unknown_function: 400,
    ErrorKind.invalid_parameters: 400,
    ErrorKind.upstream: 500,
    ErrorKind.internal: 500,
}

_TYPES = {
    ErrorKind.unknown_function: "invalid_request",
    ErrorKind.invalid_parameters: "invalid_request",
    ErrorKind.upstream: "upstream_error",
    ErrorKind.internal: "internal_error",
}


class BggApiError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "type": self.kind.error_type,
                "code": self.kind.value,
            }
        }
