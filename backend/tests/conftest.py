"""Shared fixtures: an in-process BGG upstream stub and app/client factories."""

import os

# Tests never talk to a real Redis or BGG
os.environ.pop("REDIS_URL", None)
os.environ.pop("BGG_API_TOKEN", None)

from typing import List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from bgg_gateway.config import Settings
from bgg_gateway.main import create_app
from bgg_gateway.rate_limit import limiter


class UpstreamStub:
    """Records every upstream request and answers with a canned XML body."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body = '<?xml version="1.0" encoding="utf-8"?><items total="0"></items>'
        self.error: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body, headers={"content-type": "text/xml"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_settings(**overrides) -> Settings:
    values = dict(
        rate_limit_enabled=False,
        mcp_enabled=False,
        redis_url=None,
        bgg_api_token=None,
        log_format="text",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _reset_limiter():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def make_client(upstream):
    clients = []

    def _make(raise_server_exceptions: bool = True, **overrides) -> TestClient:
        app = create_app(make_settings(**overrides), upstream_transport=upstream.transport)
        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
