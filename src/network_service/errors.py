"""Error taxonomy for the network service and transport error codes."""

from __future__ import annotations

import asyncio
import errno
import socket
from concurrent import futures
from enum import Enum
from typing import Iterator, Optional

import httpx


class NetworkError(RuntimeError):
    """Base error for request failures surfaced to callers."""

    kind = "network"


class UrlGenerationError(NetworkError):
    """The endpoint could not produce a valid request."""

    kind = "url-generation"

    def __init__(self, message: str = "could not generate request") -> None:
        super().__init__(message)


class HttpStatusError(NetworkError):
    kind = "http-error"

    def __init__(self, status_code: int, data: Optional[bytes] = None) -> None:
        self.status_code = status_code
        self.data = data
        super().__init__(f"request failed with status {status_code}")


class NotConnectedError(NetworkError):
    kind = "not-connected"

    def __init__(self, message: str = "not connected to the network") -> None:
        super().__init__(message)


class RequestCancelledError(NetworkError):
    kind = "cancelled"

    def __init__(self, message: str = "request cancelled") -> None:
        super().__init__(message)


class GenericNetworkError(NetworkError):
    kind = "generic"

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"request failed: {error!r}")


class TransportErrorCode(str, Enum):
    NOT_CONNECTED = "not_connected"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    UNKNOWN = "unknown"


class TransportError(Exception):
    """Raised or reported by session transports with an explicit code."""

    def __init__(self, code: TransportErrorCode, message: Optional[str] = None) -> None:
        self.code = code
        super().__init__(message or code.value)


_OFFLINE_ERRNOS = {errno.ENETUNREACH, errno.ENETDOWN}
# resolver failures seen when the host has no network at all
_OFFLINE_RESOLVER_ERRORS = {getattr(socket, "EAI_AGAIN", None)} - {None}


def _exception_chain(error: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def transport_error_code(error: BaseException) -> TransportErrorCode:
    """Inspect an error (and its causes) for the platform-level failure code."""

    for exc in _exception_chain(error):
        if isinstance(exc, TransportError):
            return exc.code
        if isinstance(exc, (asyncio.CancelledError, futures.CancelledError)):
            return TransportErrorCode.CANCELLED
        if isinstance(exc, socket.gaierror):
            if exc.errno in _OFFLINE_RESOLVER_ERRORS:
                return TransportErrorCode.NOT_CONNECTED
        elif isinstance(exc, OSError) and exc.errno in _OFFLINE_ERRNOS:
            return TransportErrorCode.NOT_CONNECTED
        if isinstance(exc, httpx.TimeoutException):
            return TransportErrorCode.TIMED_OUT
    return TransportErrorCode.UNKNOWN


__all__ = [
    "NetworkError",
    "UrlGenerationError",
    "HttpStatusError",
    "NotConnectedError",
    "RequestCancelledError",
    "GenericNetworkError",
    "TransportErrorCode",
    "TransportError",
    "transport_error_code",
]
