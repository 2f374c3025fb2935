"""Request service: builds requests, dispatches them and classifies outcomes."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from typing import Any, Callable, Optional

from .config import NetworkConfig
from .endpoint import Requestable
from .errors import (
    GenericNetworkError,
    HttpStatusError,
    NetworkError,
    NotConnectedError,
    RequestCancelledError,
    TransportErrorCode,
    UrlGenerationError,
    transport_error_code,
)
from .logging import NetworkErrorLogger
from .result import Result
from .session import DefaultSessionManager, SessionManager

NetworkCompletion = Callable[[Result[bytes]], None]


class NetworkService:
    def __init__(
        self,
        config: NetworkConfig,
        session_manager: Optional[SessionManager] = None,
        *,
        logger: Optional[NetworkErrorLogger] = None,
    ) -> None:
        self.config = config
        if session_manager is None:
            session_manager = DefaultSessionManager(timeout=config.timeout)
        self.session_manager = session_manager
        self.logger = logger or NetworkErrorLogger()

    def __enter__(self) -> "NetworkService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request(self, endpoint: Requestable, completion: NetworkCompletion) -> Any:
        """Send ``endpoint`` and call ``completion`` once with the classified result.

        Returns the transport's task handle, or ``None`` when the request could
        not be built.
        """
        try:
            url_request = endpoint.url_request(self.config)
        except Exception as exc:
            error = UrlGenerationError(str(exc) or "could not generate request")
            error.__cause__ = exc
            self.logger.log_error(error)
            completion(Result.failure(error))
            return None

        self.logger.log_request(url_request)

        def on_complete(data: Optional[bytes], response: Any, request_error: Optional[BaseException]) -> None:
            if request_error is not None:
                status_code = getattr(response, "status_code", None)
                if status_code is not None:
                    error: NetworkError = HttpStatusError(status_code, data)
                else:
                    error = self._resolve(request_error)
                self.logger.log_error(error)
                completion(Result.failure(error))
            else:
                self.logger.log_response(data, response)
                completion(Result.success(data))

        return self.session_manager.request(url_request, on_complete)

    def fetch(self, endpoint: Requestable, timeout: Optional[float] = None) -> Result[bytes]:
        """Blocking form of :meth:`request`."""
        future: Future = Future()
        self.request(endpoint, future.set_result)
        return future.result(timeout=timeout)

    async def arequest(self, endpoint: Requestable) -> Optional[bytes]:
        """Awaitable form of :meth:`request`; raises the ``NetworkError`` on failure."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def resolve(result: Result[bytes]) -> None:
            if not future.done():
                future.set_result(result)

        def completion(result: Result[bytes]) -> None:
            loop.call_soon_threadsafe(resolve, result)

        self.request(endpoint, completion)
        result = await future
        return result.unwrap()

    def _resolve(self, error: BaseException) -> NetworkError:
        code = transport_error_code(error)
        if code is TransportErrorCode.NOT_CONNECTED:
            resolved: NetworkError = NotConnectedError()
        elif code is TransportErrorCode.CANCELLED:
            resolved = RequestCancelledError()
        else:
            return GenericNetworkError(error)
        resolved.__cause__ = error
        return resolved

    def close(self) -> None:
        close = getattr(self.session_manager, "close", None)
        if callable(close):
            close()


__all__ = ["NetworkCompletion", "NetworkService"]
