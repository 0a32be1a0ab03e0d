"""Tests for credential and authentication exceptions."""

import pytest

from open_toolchain_sdk.auth.exceptions import (
    AuthenticationError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    UnsupportedAuthTypeError,
)
from open_toolchain_sdk.errors import APIError, ConfigError, SDKError


class TestCredentialExceptions:
    """Test the credential exception hierarchy."""

    @pytest.mark.unit
    def test_credential_errors_are_config_errors(self):
        """Credential problems are reported as configuration errors."""
        for exc_class in (CredentialError, CredentialNotFoundError, CredentialFileError):
            assert issubclass(exc_class, ConfigError)
            assert issubclass(exc_class, SDKError)

    @pytest.mark.unit
    def test_not_found_carries_variable(self):
        error = CredentialNotFoundError("apikey must be provided", env_var_name="OPEN_TOOLCHAIN_APIKEY")
        assert str(error) == "apikey must be provided"
        assert error.env_var_name == "OPEN_TOOLCHAIN_APIKEY"

    @pytest.mark.unit
    def test_not_found_without_variable(self):
        assert CredentialNotFoundError("missing").env_var_name is None

    @pytest.mark.unit
    def test_unsupported_auth_type(self):
        error = UnsupportedAuthTypeError("kerberos")
        assert isinstance(error, CredentialError)
        assert str(error) == "unrecognized authentication kind: 'kerberos'"


class TestAuthenticationError:
    @pytest.mark.unit
    def test_is_api_error(self):
        error = AuthenticationError("rejected", status_code=400)
        assert isinstance(error, APIError)
        assert error.status_code == 400
        assert error.body == b""
