from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import AuthConfig, AuthType, UpstreamConfig


class Settings(BaseSettings):
    """환경변수(.env 포함)에서 읽어오는 서비스 설정."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Upstream (BoardGameGeek XML API2)
    bgg_base_url: str = "https://boardgamegeek.com/xmlapi2"
    bgg_api_token: Optional[str] = None
    upstream_timeout_seconds: float = 30.0
    upstream_retries: int = 0
    user_agent: str = "BGG-MCP-Server/1.0"

    # Middleware
    rate_limit: str = "100/15minutes"
    rate_limit_enabled: bool = True
    metrics_enabled: bool = True
    mcp_enabled: bool = True
    cors_origins: List[str] = ["*"]

    # Tool list cache
    redis_url: Optional[str] = None
    tools_cache_ttl: int = 3600

    # Runtime
    environment: str = "development"
    port: int = 3000
    log_level: str = "INFO"
    log_format: str = "json"

    def upstream(self) -> UpstreamConfig:
        """업스트림 호출에 필요한 설정만 모아 UpstreamConfig로 돌려준다."""
        auth = AuthConfig()
        if self.bgg_api_token:
            auth = AuthConfig(type=AuthType.bearer, value=self.bgg_api_token)
        return UpstreamConfig(
            name="BoardGameGeek XML API2",
            baseUrl=self.bgg_base_url,
            auth=auth,
            defaultHeaders={"Accept": "application/xml", "User-Agent": self.user_agent},
            timeout=self.upstream_timeout_seconds,
            retries=self.upstream_retries,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
