from __future__ import annotations

import errno
import json
from typing import Any, List, Optional

import httpx
import pytest

from network_service.config import NetworkConfig
from network_service.endpoint import Endpoint, RequestGenerationError
from network_service.errors import (
    GenericNetworkError,
    HttpStatusError,
    NotConnectedError,
    RequestCancelledError,
    TransportError,
    TransportErrorCode,
    UrlGenerationError,
)
from network_service.result import Result
from network_service.service import NetworkService


class StubSession:
    def __init__(self, data: Optional[bytes] = None, response: Any = None, error: Optional[BaseException] = None) -> None:
        self.outcome = (data, response, error)
        self.requests: List[httpx.Request] = []
        self.closed = False

    def request(self, request: httpx.Request, completion) -> str:
        self.requests.append(request)
        completion(*self.outcome)
        return "task"

    def close(self) -> None:
        self.closed = True


class BrokenEndpoint:
    def url_request(self, config: NetworkConfig) -> httpx.Request:
        raise RequestGenerationError("cannot encode")


@pytest.fixture()
def config() -> NetworkConfig:
    return NetworkConfig(base_url="https://api.example.com")


def run(service: NetworkService, endpoint: Any) -> List[Result[bytes]]:
    results: List[Result[bytes]] = []
    service.request(endpoint, results.append)
    return results


def test_search_success_returns_exact_bytes(config: NetworkConfig) -> None:
    body = json.dumps({"documents": [{"image_url": "https://img.example.com/cat.png"}]}).encode()
    session = StubSession(body, httpx.Response(200), None)
    service = NetworkService(config, session)

    results = run(service, Endpoint(path="/search", query_parameters={"q": "cat"}))

    assert len(results) == 1
    assert results[0].ok
    assert results[0].value == body
    sent = session.requests[0]
    assert sent.method == "GET"
    assert str(sent.url) == "https://api.example.com/search?q=cat"


@pytest.mark.parametrize("data", [b"", None])
def test_success_with_empty_or_absent_body(config: NetworkConfig, data: Optional[bytes]) -> None:
    service = NetworkService(config, StubSession(data, httpx.Response(204), None))

    results = run(service, Endpoint(path="ping"))

    assert len(results) == 1
    assert results[0].ok
    assert results[0].value == data


def test_status_error_keeps_status_and_body(config: NetworkConfig) -> None:
    service = NetworkService(config, StubSession(None, httpx.Response(404), RuntimeError("not found")))

    results = run(service, Endpoint(path="search"))

    error = results[0].error
    assert isinstance(error, HttpStatusError)
    assert error.status_code == 404
    assert error.data is None
    assert error.kind == "http-error"


def test_status_error_wins_over_transport_error_identity(config: NetworkConfig) -> None:
    offline = TransportError(TransportErrorCode.NOT_CONNECTED)
    service = NetworkService(config, StubSession(b'{"message":"down"}', httpx.Response(503), offline))

    error = run(service, Endpoint(path="search"))[0].error

    assert isinstance(error, HttpStatusError)
    assert error.status_code == 503
    assert error.data == b'{"message":"down"}'


def test_not_connected_error(config: NetworkConfig) -> None:
    service = NetworkService(config, StubSession(None, None, TransportError(TransportErrorCode.NOT_CONNECTED)))

    results = run(service, Endpoint(path="search"))

    assert len(results) == 1
    assert isinstance(results[0].error, NotConnectedError)
    assert results[0].error.kind == "not-connected"


def test_cancelled_error(config: NetworkConfig) -> None:
    service = NetworkService(config, StubSession(None, None, TransportError(TransportErrorCode.CANCELLED)))

    error = run(service, Endpoint(path="search"))[0].error

    assert isinstance(error, RequestCancelledError)


@pytest.mark.parametrize(
    "transport_error",
    [ValueError("boom"), TransportError(TransportErrorCode.TIMED_OUT), TransportError(TransportErrorCode.UNKNOWN)],
)
def test_other_errors_are_generic(config: NetworkConfig, transport_error: Exception) -> None:
    service = NetworkService(config, StubSession(None, None, transport_error))

    error = run(service, Endpoint(path="search"))[0].error

    assert isinstance(error, GenericNetworkError)
    assert error.error is transport_error


def test_url_generation_failure_skips_transport(config: NetworkConfig) -> None:
    session = StubSession(b"unused", httpx.Response(200), None)
    service = NetworkService(config, session)

    results: List[Result[bytes]] = []
    task = service.request(BrokenEndpoint(), results.append)

    assert task is None
    assert len(results) == 1
    assert isinstance(results[0].error, UrlGenerationError)
    assert isinstance(results[0].error.__cause__, RequestGenerationError)
    assert session.requests == []


def test_relative_base_url_is_url_generation_error() -> None:
    session = StubSession()
    service = NetworkService(NetworkConfig(base_url="not-a-url"), session)

    results = run(service, Endpoint(path="search"))

    assert isinstance(results[0].error, UrlGenerationError)
    assert session.requests == []


def test_request_returns_transport_task(config: NetworkConfig) -> None:
    service = NetworkService(config, StubSession(b"ok", httpx.Response(200), None))

    assert service.request(Endpoint(path="search"), lambda result: None) == "task"


def test_fetch_and_unwrap(config: NetworkConfig) -> None:
    service = NetworkService(config, StubSession(None, httpx.Response(500), RuntimeError("server")))

    result = service.fetch(Endpoint(path="search"), timeout=1)

    with pytest.raises(HttpStatusError):
        result.unwrap()


def test_close_delegates_to_session(config: NetworkConfig) -> None:
    session = StubSession()
    with NetworkService(config, session):
        pass
    assert session.closed


def test_default_session_end_to_end(config: NetworkConfig) -> None:
    from network_service.session import DefaultSessionManager

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search":
            return httpx.Response(200, json={"q": request.url.params["q"]})
        return httpx.Response(404, content=b"missing")

    session = DefaultSessionManager(transport=httpx.MockTransport(handler))
    with NetworkService(config, session) as service:
        ok = service.fetch(Endpoint(path="search", query_parameters={"q": "cat"}), timeout=5)
        missing = service.fetch(Endpoint(path="nope"), timeout=5)

    assert json.loads(ok.unwrap()) == {"q": "cat"}
    assert isinstance(missing.error, HttpStatusError)
    assert missing.error.status_code == 404
    assert missing.error.data == b"missing"


def test_default_session_offline_maps_to_not_connected(config: NetworkConfig) -> None:
    from network_service.session import DefaultSessionManager

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request) from OSError(
            errno.ENETUNREACH, "Network is unreachable"
        )

    session = DefaultSessionManager(transport=httpx.MockTransport(handler))
    with NetworkService(config, session) as service:
        result = service.fetch(Endpoint(path="search"), timeout=5)

    assert isinstance(result.error, NotConnectedError)


def test_default_session_refused_connection_is_generic(config: NetworkConfig) -> None:
    from network_service.session import DefaultSessionManager

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    session = DefaultSessionManager(transport=httpx.MockTransport(handler))
    with NetworkService(config, session) as service:
        result = service.fetch(Endpoint(path="search"), timeout=5)

    assert isinstance(result.error, GenericNetworkError)
    assert isinstance(result.error.error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_arequest_success_and_failure(config: NetworkConfig) -> None:
    from network_service.session import DefaultSessionManager

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search":
            return httpx.Response(200, content=b"cats")
        return httpx.Response(500, content=b"boom")

    session = DefaultSessionManager(transport=httpx.MockTransport(handler))
    with NetworkService(config, session) as service:
        assert await service.arequest(Endpoint(path="search")) == b"cats"
        with pytest.raises(HttpStatusError) as excinfo:
            await service.arequest(Endpoint(path="broken"))
        with pytest.raises(UrlGenerationError):
            await service.arequest(BrokenEndpoint())

    assert excinfo.value.status_code == 500
