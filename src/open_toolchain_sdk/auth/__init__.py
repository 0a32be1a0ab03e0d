"""Authentication components.

This module provides:
- Multi-source configuration resolution (explicit → credentials file → env → default)
- The closed set of authenticators (no-auth, basic, bearer, IAM, container)
- A single-flight IAM token cache

Example:
    ```python
    from open_toolchain_sdk.auth import get_authenticator_from_environment

    authenticator = get_authenticator_from_environment("open_toolchain")
    ```
"""

from open_toolchain_sdk.auth.authenticators import (
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    ContainerAuthenticator,
    IAMAuthenticator,
    NoAuthAuthenticator,
)
from open_toolchain_sdk.auth.credentials import CredentialResolver, get_service_properties
from open_toolchain_sdk.auth.exceptions import (
    AuthenticationError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    UnsupportedAuthTypeError,
)
from open_toolchain_sdk.auth.factory import authenticator_from_properties, get_authenticator_from_environment

__all__ = [
    "AuthenticationError",
    "Authenticator",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "ContainerAuthenticator",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "IAMAuthenticator",
    "NoAuthAuthenticator",
    "UnsupportedAuthTypeError",
    "authenticator_from_properties",
    "get_authenticator_from_environment",
    "get_service_properties",
]
