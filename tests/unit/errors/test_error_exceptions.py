"""Tests for the SDK exception hierarchy."""

import httpx
import pytest

from open_toolchain_sdk.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConfigError,
    DecodeError,
    InvalidServiceURLError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    RegionNotFoundError,
    SDKError,
    ServerError,
    ServiceURLMissingError,
    TransportError,
    UnprocessableEntityError,
    ValidationError,
)
from open_toolchain_sdk.transport.request import DetailedResponse


@pytest.mark.unit
@pytest.mark.parametrize(
    "exc_class,parent",
    [
        (ConfigError, SDKError),
        (InvalidServiceURLError, ConfigError),
        (ServiceURLMissingError, ConfigError),
        (RegionNotFoundError, ConfigError),
        (ValidationError, SDKError),
        (TransportError, SDKError),
        (OperationCancelledError, SDKError),
        (DecodeError, SDKError),
        (APIError, SDKError),
        (ClientError, APIError),
        (BadRequestError, ClientError),
        (NotFoundError, ClientError),
        (RateLimitError, ClientError),
        (UnprocessableEntityError, ClientError),
        (ServerError, APIError),
    ],
)
def test_hierarchy(exc_class, parent):
    assert issubclass(exc_class, parent)


@pytest.mark.unit
def test_config_messages():
    assert str(ServiceURLMissingError()) == "service URL missing"
    assert str(InvalidServiceURLError("{bad")) == "invalid service URL: '{bad'"
    assert str(RegionNotFoundError("mars")) == "region not found: 'mars'"


@pytest.mark.unit
def test_validation_error_field():
    error = ValidationError("guid must be provided", field_name="guid")
    assert error.field_name == "guid"
    assert str(error) == "guid must be provided"


@pytest.mark.unit
def test_cancelled_kinds():
    assert OperationCancelledError("operation canceled").deadline_exceeded is False
    assert OperationCancelledError("operation deadline exceeded", deadline_exceeded=True).deadline_exceeded is True


@pytest.mark.unit
def test_decode_error_carries_response():
    response = DetailedResponse.from_httpx(httpx.Response(200, content=b"{"))
    error = DecodeError("invalid JSON", response=response)

    assert str(error) == "response processing error: invalid JSON"
    assert error.response is response


@pytest.mark.unit
def test_api_error_fields():
    response = DetailedResponse.from_httpx(httpx.Response(404, content=b"missing"))
    error = NotFoundError("not here", status_code=404, response=response, status_text="Not Found")

    assert error.status_code == 404
    assert error.status_text == "Not Found"
    assert error.body == b"missing"
    assert error.error_detail is None


@pytest.mark.unit
def test_rate_limit_and_unprocessable_defaults():
    assert RateLimitError("slow down").retry_after is None
    assert UnprocessableEntityError("bad").validation_errors == []
