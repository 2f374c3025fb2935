"""Decoding layer on top of :class:`NetworkService`."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Protocol

from pydantic import TypeAdapter

from .endpoint import ResponseRequestable
from .errors import NetworkError
from .logging import NetworkErrorLogger
from .result import Result
from .service import NetworkService


class DataTransferError(RuntimeError):
    """Base error for response transfer failures."""


class NoResponseError(DataTransferError):
    def __init__(self) -> None:
        super().__init__("response carried no data")


class ParsingError(DataTransferError):
    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"could not decode response: {error}")


class NetworkFailureError(DataTransferError):
    def __init__(self, error: NetworkError) -> None:
        self.error = error
        super().__init__(str(error))


class ResponseDecoder(Protocol):
    requires_content: bool

    def decode(self, data: bytes) -> Any:
        ...


class JSONResponseDecoder:
    requires_content = True

    def __init__(self, model: Any = None) -> None:
        self._adapter = TypeAdapter(model) if model is not None else None

    def decode(self, data: bytes) -> Any:
        if self._adapter is not None:
            return self._adapter.validate_json(data)
        return json.loads(data)


class RawDataResponseDecoder:
    requires_content = False

    def decode(self, data: bytes) -> bytes:
        return data


def _decoder_for(endpoint: Any) -> ResponseDecoder:
    return getattr(endpoint, "response_decoder", None) or JSONResponseDecoder()


class DataTransferService:
    def __init__(self, network_service: NetworkService, *, logger: Optional[NetworkErrorLogger] = None) -> None:
        self.network_service = network_service
        self.logger = logger or network_service.logger

    def request(self, endpoint: ResponseRequestable, completion: Callable[[Result[Any]], None]) -> Any:
        decoder = _decoder_for(endpoint)

        def on_result(result: Result[bytes]) -> None:
            if result.error is not None:
                completion(Result.failure(NetworkFailureError(result.error)))
                return
            completion(self._decode(result.value, decoder))

        return self.network_service.request(endpoint, on_result)

    def fetch(self, endpoint: ResponseRequestable, timeout: Optional[float] = None) -> Any:
        """Blocking form of :meth:`request`; returns the decoded value or raises."""
        result = self.network_service.fetch(endpoint, timeout=timeout)
        if result.error is not None:
            raise NetworkFailureError(result.error) from result.error
        return self._decode(result.value, _decoder_for(endpoint)).unwrap()

    def _decode(self, data: Optional[bytes], decoder: ResponseDecoder) -> Result[Any]:
        if not data and decoder.requires_content:
            error: DataTransferError = NoResponseError()
            self.logger.log_error(error)
            return Result.failure(error)
        try:
            return Result.success(decoder.decode(data or b""))
        except Exception as exc:
            error = ParsingError(exc)
            error.__cause__ = exc
            self.logger.log_error(error)
            return Result.failure(error)


__all__ = [
    "DataTransferError",
    "DataTransferService",
    "JSONResponseDecoder",
    "NetworkFailureError",
    "NoResponseError",
    "ParsingError",
    "RawDataResponseDecoder",
    "ResponseDecoder",
]
