"""linkcheck package test fixtures"""

import httpx
import pytest
from linkops.linkcheck import LinkChecker, LinkCheckConfig


def _route(request: httpx.Request) -> httpx.Response:
    """Fake web: the path decides how a URL behaves"""
    path = request.url.path
    if path.startswith("/ok"):
        return httpx.Response(200)
    if path.startswith("/moved"):
        return httpx.Response(301, headers={"Location": "https://links.example/ok/final"})
    if path.startswith("/missing"):
        return httpx.Response(404)
    if path.startswith("/error"):
        return httpx.Response(503)
    if path.startswith("/refused"):
        raise httpx.ConnectError("connection refused", request=request)
    if path.startswith("/slow"):
        raise httpx.ReadTimeout("timed out", request=request)
    return httpx.Response(200)


@pytest.fixture
def seen_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_transport(seen_requests) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen_requests.append(request)
        return _route(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def checker(mock_transport) -> LinkChecker:
    return LinkChecker(
        LinkCheckConfig(timeout_s=2, user_agent="LinkOps-Test/1.0", max_concurrency=2),
        transport=mock_transport,
    )
