"""HTTP request layer: endpoints, session transports and classified results."""

from .config import NetworkConfig
from .endpoint import BodyEncoding, Endpoint, HTTPMethod, RequestGenerationError, Requestable
from .errors import (
    GenericNetworkError,
    HttpStatusError,
    NetworkError,
    NotConnectedError,
    RequestCancelledError,
    TransportError,
    TransportErrorCode,
    UrlGenerationError,
)
from .result import Result
from .service import NetworkService
from .session import DefaultSessionManager, SessionManager
from .transfer import DataTransferService, JSONResponseDecoder, RawDataResponseDecoder

__all__ = [
    "BodyEncoding",
    "DataTransferService",
    "DefaultSessionManager",
    "Endpoint",
    "GenericNetworkError",
    "HTTPMethod",
    "HttpStatusError",
    "JSONResponseDecoder",
    "NetworkConfig",
    "NetworkError",
    "NetworkService",
    "NotConnectedError",
    "RawDataResponseDecoder",
    "RequestCancelledError",
    "RequestGenerationError",
    "Requestable",
    "Result",
    "SessionManager",
    "TransportError",
    "TransportErrorCode",
    "UrlGenerationError",
]
