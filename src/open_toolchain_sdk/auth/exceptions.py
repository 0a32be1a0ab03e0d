"""Exceptions for credential resolution and authentication.

Credential errors are configuration errors: they are raised while a
service or authenticator is being built, before any request is sent.

Example:
    ```python
    from open_toolchain_sdk.auth.exceptions import CredentialNotFoundError

    if not apikey:
        raise CredentialNotFoundError("apikey must be provided", env_var_name="OPEN_TOOLCHAIN_APIKEY")
    ```
"""

from open_toolchain_sdk.errors.exceptions import APIError, ConfigError


class CredentialError(ConfigError):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a credential the authenticator needs is missing or empty.

    Attributes:
        env_var_name: The environment variable that was checked (if any).

    Example:
        ```python
        try:
            service = OpenToolchainV1.new_instance()
        except CredentialNotFoundError as e:
            print(f"Missing credential: {e.env_var_name}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        """Initialize CredentialNotFoundError.

        Args:
            message: Error message describing what credential is missing.
            env_var_name: Optional environment variable name for reference.
        """
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file (credentials file, CR token) cannot be read."""

    pass


class UnsupportedAuthTypeError(CredentialError):
    """Raised when AUTH_TYPE names an authentication kind the SDK does not know."""

    def __init__(self, auth_type: str):
        super().__init__(f"unrecognized authentication kind: {auth_type!r}")
        self.auth_type = auth_type


class AuthenticationError(APIError):
    """Raised when the IAM token server rejects a token request."""

    pass
