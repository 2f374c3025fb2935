"""Request/response logging for the network service."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("network_service")

MAX_BODY_CHARS = 1024
REDACTED_HEADERS = {"authorization", "cookie", "proxy-authorization"}


def _body_preview(data: Optional[bytes]) -> Optional[str]:
    if data is None:
        return None
    text = data.decode("utf-8", errors="replace")
    if len(text) > MAX_BODY_CHARS:
        return text[:MAX_BODY_CHARS] + "..."
    return text


def _headers(headers: httpx.Headers) -> Dict[str, str]:
    return {
        name: ("<redacted>" if name.lower() in REDACTED_HEADERS else value)
        for name, value in headers.items()
    }


def build_request_log(request: httpx.Request) -> Dict[str, Any]:
    try:
        body = _body_preview(request.content or None)
    except httpx.RequestNotRead:
        body = "<stream>"
    return {
        "event": "request",
        "method": request.method,
        "url": str(request.url),
        "headers": _headers(request.headers),
        "body": body,
    }


def build_response_log(data: Optional[bytes], response: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"event": "response", "body": _body_preview(data)}
    status_code = getattr(response, "status_code", None)
    if status_code is not None:
        payload["status_code"] = status_code
    return payload


def build_error_log(error: BaseException) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "event": "error",
        "kind": getattr(error, "kind", type(error).__name__),
        "message": str(error),
    }
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        payload["status_code"] = status_code
        payload["body"] = _body_preview(getattr(error, "data", None))
    return payload


class NetworkErrorLogger:
    """Emits JSON log lines; never alters the outcome being logged."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def log_request(self, request: httpx.Request) -> None:
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(json.dumps(build_request_log(request)))

    def log_response(self, data: Optional[bytes], response: Any) -> None:
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(json.dumps(build_response_log(data, response)))

    def log_error(self, error: BaseException) -> None:
        self._log.warning(json.dumps(build_error_log(error)))


__all__ = [
    "NetworkErrorLogger",
    "build_error_log",
    "build_request_log",
    "build_response_log",
]
