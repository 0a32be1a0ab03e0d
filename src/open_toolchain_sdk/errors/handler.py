"""Error handling utilities for HTTP responses."""

from typing import TYPE_CHECKING

from open_toolchain_sdk.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from open_toolchain_sdk.errors.models import ErrorDetail

if TYPE_CHECKING:
    from open_toolchain_sdk.transport.request import DetailedResponse

EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def raise_for_status(response: "DetailedResponse") -> None:
    """Raise the matching APIError for a non-success response.

    Parses a structured error envelope if present, otherwise builds the
    message from the status line and the start of the body.

    Args:
        response: The response received from the service.

    Raises:
        APIError subclass based on status code.
    """
    status_code = response.status_code
    if is_success(status_code):
        return

    error_detail = ErrorDetail.from_response(response)

    if status_code in EXCEPTION_MAP:
        exc_class = EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    status_text = response.status_text
    if error_detail:
        message = error_detail.to_exception_message()
    else:
        response_text = response.text[:200]
        status_line = f"HTTP {status_code} {status_text}".rstrip()
        message = f"{status_line}: {response_text}" if response_text else status_line

    kwargs = {
        "status_code": status_code,
        "response": response,
        "error_detail": error_detail,
        "status_text": status_text,
    }

    if exc_class is RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        raise RateLimitError(message, retry_after=retry_after, **kwargs)

    if exc_class is UnprocessableEntityError:
        validation_errors = None
        if error_detail:
            if error_detail.errors is not None:
                validation_errors = error_detail.errors
            elif error_detail.extensions:
                validation_errors = error_detail.extensions.get("validation_errors")
        raise UnprocessableEntityError(message, validation_errors=validation_errors, **kwargs)

    raise exc_class(message, **kwargs)
