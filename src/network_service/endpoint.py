"""Endpoint descriptors that turn into concrete HTTP requests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from .config import NetworkConfig


class RequestGenerationError(ValueError):
    """Raised when an endpoint cannot be turned into a valid request."""


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class BodyEncoding(str, Enum):
    JSON = "json"
    FORM = "form"


_CONTENT_TYPES = {
    BodyEncoding.JSON: "application/json",
    BodyEncoding.FORM: "application/x-www-form-urlencoded",
}


@runtime_checkable
class Requestable(Protocol):
    def url_request(self, config: NetworkConfig) -> httpx.Request:
        ...


@runtime_checkable
class ResponseRequestable(Requestable, Protocol):
    @property
    def response_decoder(self) -> Any:
        ...


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True, by_alias=True)


def _encode_body(parameters: Mapping[str, Any], encoding: BodyEncoding) -> bytes:
    if encoding is BodyEncoding.FORM:
        return urlencode(parameters, doseq=True).encode("ascii")
    return json.dumps(parameters, separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class Endpoint:
    """Describes one API call; the request is built on demand from a config."""

    path: str
    method: HTTPMethod = HTTPMethod.GET
    is_full_path: bool = False
    header_parameters: Dict[str, str] = field(default_factory=dict)
    query_parameters: Dict[str, Any] = field(default_factory=dict)
    query_parameters_encodable: Optional[BaseModel] = None
    body_parameters: Dict[str, Any] = field(default_factory=dict)
    body_parameters_encodable: Optional[BaseModel] = None
    body_encoding: BodyEncoding = BodyEncoding.JSON
    response_decoder: Any = None

    def url(self, config: NetworkConfig) -> httpx.URL:
        if self.is_full_path:
            raw = self.path
        else:
            base = config.base_url if config.base_url.endswith("/") else config.base_url + "/"
            raw = base + self.path.lstrip("/")

        params: Dict[str, Any] = dict(config.query_parameters)
        params.update(self.query_parameters)

        try:
            if self.query_parameters_encodable is not None:
                params.update(_dump(self.query_parameters_encodable))
            url = httpx.URL(raw)
            if params:
                url = url.copy_merge_params(params)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestGenerationError(f"invalid url {raw!r}") from exc
        if not url.scheme or not url.host:
            raise RequestGenerationError(f"url {raw!r} is not absolute")
        return url

    def body(self) -> Optional[bytes]:
        try:
            if self.body_parameters_encodable is not None:
                parameters = _dump(self.body_parameters_encodable)
            else:
                parameters = self.body_parameters
            if not parameters:
                return None
            return _encode_body(parameters, self.body_encoding)
        except (TypeError, ValueError) as exc:
            raise RequestGenerationError("could not encode request body") from exc

    def url_request(self, config: NetworkConfig) -> httpx.Request:
        url = self.url(config)
        content = self.body()
        method = self.method.value if isinstance(self.method, HTTPMethod) else str(self.method)
        try:
            headers = dict(config.headers)
            headers.update(self.header_parameters)
            if content is not None and not any(name.lower() == "content-type" for name in headers):
                headers["Content-Type"] = _CONTENT_TYPES[self.body_encoding]
            return httpx.Request(method, url, headers=headers, content=content)
        except (TypeError, ValueError) as exc:
            raise RequestGenerationError("could not build request headers") from exc


__all__ = [
    "BodyEncoding",
    "Endpoint",
    "HTTPMethod",
    "RequestGenerationError",
    "Requestable",
    "ResponseRequestable",
]
