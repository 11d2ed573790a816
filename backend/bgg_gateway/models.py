from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class AuthType(str, Enum):
    """업스트림 API 인증 전달 방식"""
    bearer = "bearer"
    none = "none"


class AuthConfig(BaseModel):
    """업스트림 레벨의 인증 설정.

    - type: 인증 전달 방식
    - value: bearer 타입에서 사용할 토큰
    """
    type: AuthType = AuthType.none
    value: Optional[str] = None


class UpstreamConfig(BaseModel):
    """연결 대상 업스트림(BGG XML API) 설정."""
    name: str
    baseUrl: str
    auth: AuthConfig = Field(default_factory=AuthConfig)
    defaultHeaders: Dict[str, str] = Field(default_factory=dict)
    timeout: float = 30.0
    retries: int = 0


class ParamMapping(BaseModel):
    """함수 인자와 업스트림 쿼리스트링 간의 매핑 정의.

    - query: {쿼리키: 인자키}
    - fixed: 인자와 무관하게 항상 붙는 {쿼리키: 값}
    """
    query: Dict[str, str] = Field(default_factory=dict)
    fixed: Dict[str, str] = Field(default_factory=dict)


class FunctionDescriptor(BaseModel):
    """manifest/tools 목록에 노출되는 함수 설명."""
    name: str
    description: str
    parameters: Mapping[str, Any]


class FunctionBinding(BaseModel):
    """함수-업스트림 호출 바인딩 정의.

    - path: /search 형태의 업스트림 경로
    - parameters: JSON Schema로 인자 검증에 사용
    - argsModel: 검증된 인자를 기본값과 함께 담는 타입
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str
    path: str
    paramMapping: ParamMapping = Field(default_factory=ParamMapping)
    parameters: Mapping[str, Any]
    argsModel: Type[BaseModel]

    def descriptor(self) -> FunctionDescriptor:
        return FunctionDescriptor(name=self.name, description=self.description, parameters=self.parameters)
