"""Structured exceptions raised by the SDK."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from open_toolchain_sdk.errors.models import ErrorDetail
    from open_toolchain_sdk.transport.request import DetailedResponse

ERRORMSG_SERVICE_URL_MISSING = "service URL missing"
ERRORMSG_INVALID_SERVICE_URL = "invalid service URL"
ERRORMSG_REGION_NOT_FOUND = "region not found"
ERRORMSG_DEADLINE_EXCEEDED = "operation deadline exceeded"
ERRORMSG_CANCELED = "operation canceled"
ERRORMSG_RESPONSE_PROCESSING = "response processing error"


class SDKError(Exception):
    """Base exception for every error raised by the SDK."""

    pass


class ConfigError(SDKError):
    """Service construction or configuration is invalid."""

    pass


class InvalidServiceURLError(ConfigError):
    """A non-empty service URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        super().__init__(f"{ERRORMSG_INVALID_SERVICE_URL}: {url!r}")
        self.url = url


class ServiceURLMissingError(ConfigError):
    """An operation was invoked while the service URL is empty."""

    def __init__(self):
        super().__init__(ERRORMSG_SERVICE_URL_MISSING)


class RegionNotFoundError(ConfigError):
    """No regional endpoint is known for the requested region."""

    def __init__(self, region: str):
        super().__init__(f"{ERRORMSG_REGION_NOT_FOUND}: {region!r}")
        self.region = region


class ValidationError(SDKError):
    """Operation options are missing or incomplete.

    Raised before any network I/O.
    """

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.field_name = field_name


class TransportError(SDKError):
    """The request could not be delivered (connection, DNS, TLS, timeout)."""

    pass


class OperationCancelledError(SDKError):
    """The caller's cancellation scope fired before the operation finished."""

    def __init__(self, message: str, deadline_exceeded: bool = False):
        super().__init__(message)
        self.deadline_exceeded = deadline_exceeded


class DecodeError(SDKError):
    """The response arrived but its body could not be decoded."""

    def __init__(self, message: str, response: "DetailedResponse | None" = None):
        super().__init__(f"{ERRORMSG_RESPONSE_PROCESSING}: {message}")
        self.response = response


class APIError(SDKError):
    """Base exception for non-success HTTP responses."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "DetailedResponse | None" = None,
        error_detail: "ErrorDetail | None" = None,
        status_text: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.error_detail = error_detail
        self.status_text = status_text

    @property
    def body(self) -> bytes:
        return self.response.body if self.response is not None else b""


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class UnprocessableEntityError(ClientError):
    """422 Unprocessable Entity."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass
