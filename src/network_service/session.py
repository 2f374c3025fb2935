"""Session transports that perform a single network call per request."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import httpx

from .errors import TransportError, TransportErrorCode

logger = logging.getLogger("network_service.session")

CompletionHandler = Callable[[Optional[bytes], Optional[httpx.Response], Optional[BaseException]], None]


@runtime_checkable
class SessionManager(Protocol):
    """Performs one call and invokes ``completion(data, response, error)`` exactly once."""

    def request(self, request: httpx.Request, completion: CompletionHandler) -> Any:
        ...


class DefaultSessionManager:
    def __init__(
        self,
        *,
        timeout: float = 10.0,
        max_workers: int = 8,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, follow_redirects=True, transport=transport)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="network-session")

    def __enter__(self) -> "DefaultSessionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request(self, request: httpx.Request, completion: CompletionHandler) -> Optional[Future]:
        try:
            task = self._executor.submit(self._perform, request, completion)
        except RuntimeError as exc:
            # executor already shut down
            completion(None, None, TransportError(TransportErrorCode.UNKNOWN, str(exc)))
            return None

        def on_done(future: Future) -> None:
            if future.cancelled():
                completion(None, None, TransportError(TransportErrorCode.CANCELLED))

        task.add_done_callback(on_done)
        return task

    def _perform(self, request: httpx.Request, completion: CompletionHandler) -> None:
        try:
            response = self._client.send(request)
        except Exception as exc:
            logger.debug("Transport failure method=%s url=%s error=%r", request.method, request.url, exc)
            completion(None, None, exc)
            return

        data = response.content
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            completion(data, response, exc)
            return
        completion(data, response, None)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self._client.close()


__all__ = ["CompletionHandler", "DefaultSessionManager", "SessionManager"]
