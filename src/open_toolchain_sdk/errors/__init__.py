"""Error hierarchy and HTTP error mapping for the SDK."""

from open_toolchain_sdk.errors.exceptions import (
    ERRORMSG_SERVICE_URL_MISSING,
    APIError,
    BadRequestError,
    ClientError,
    ConfigError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    InvalidServiceURLError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    RegionNotFoundError,
    SDKError,
    ServerError,
    ServiceURLMissingError,
    TransportError,
    UnauthorizedError,
    UnprocessableEntityError,
    ValidationError,
)
from open_toolchain_sdk.errors.handler import raise_for_status
from open_toolchain_sdk.errors.models import ErrorDetail

__all__ = [
    "ERRORMSG_SERVICE_URL_MISSING",
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConfigError",
    "ConflictError",
    "DecodeError",
    "ErrorDetail",
    "ForbiddenError",
    "InvalidServiceURLError",
    "NotFoundError",
    "OperationCancelledError",
    "RateLimitError",
    "RegionNotFoundError",
    "SDKError",
    "ServerError",
    "ServiceURLMissingError",
    "TransportError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    "ValidationError",
    "raise_for_status",
]
