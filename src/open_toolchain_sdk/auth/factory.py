"""Build an authenticator from external configuration."""

import logging
from collections.abc import Callable, Mapping

from open_toolchain_sdk.auth.authenticators import (
    AUTHTYPE_BASIC,
    AUTHTYPE_BEARERTOKEN,
    AUTHTYPE_CONTAINER,
    AUTHTYPE_IAM,
    AUTHTYPE_NOAUTH,
    Authenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    ContainerAuthenticator,
    IAMAuthenticator,
    NoAuthAuthenticator,
)
from open_toolchain_sdk.auth.credentials import CredentialResolver, parse_bool, service_env_prefix
from open_toolchain_sdk.auth.exceptions import CredentialNotFoundError, UnsupportedAuthTypeError

logger = logging.getLogger(__name__)


class _Properties:
    def __init__(self, props: Mapping[str, str], prefix: str):
        self._props = props
        self._prefix = prefix

    def get(self, key: str) -> str | None:
        return self._props.get(key) or None

    def required(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            env_var_name = self._prefix + key
            raise CredentialNotFoundError(f"{env_var_name} must be set", env_var_name=env_var_name)
        return value

    def token_options(self) -> dict:
        return {
            "url": self.get("AUTH_URL"),
            "client_id": self.get("CLIENT_ID"),
            "client_secret": self.get("CLIENT_SECRET"),
            "scope": self.get("SCOPE"),
            "disable_ssl_verification": parse_bool(self.get("AUTH_DISABLE_SSL")),
        }


def _noauth(props: _Properties) -> Authenticator:
    return NoAuthAuthenticator()


def _basic(props: _Properties) -> Authenticator:
    return BasicAuthenticator(props.required("USERNAME"), props.required("PASSWORD"))


def _bearer(props: _Properties) -> Authenticator:
    return BearerTokenAuthenticator(props.required("BEARER_TOKEN"))


def _iam(props: _Properties) -> Authenticator:
    return IAMAuthenticator(props.required("APIKEY"), **props.token_options())


def _container(props: _Properties) -> Authenticator:
    return ContainerAuthenticator(
        cr_token_filename=props.get("CR_TOKEN_FILENAME"),
        iam_profile_name=props.get("IAM_PROFILE_NAME"),
        iam_profile_id=props.get("IAM_PROFILE_ID"),
        **props.token_options(),
    )


BUILDERS: dict[str, Callable[[_Properties], Authenticator]] = {
    AUTHTYPE_NOAUTH: _noauth,
    AUTHTYPE_BASIC: _basic,
    AUTHTYPE_BEARERTOKEN: _bearer,
    AUTHTYPE_IAM: _iam,
    AUTHTYPE_CONTAINER: _container,
}


def authenticator_from_properties(props: Mapping[str, str], service_name: str) -> Authenticator:
    """Build the authenticator selected by ``AUTH_TYPE`` (default ``iam``).

    Raises:
        UnsupportedAuthTypeError: AUTH_TYPE is not one of the known kinds.
        CredentialNotFoundError: A credential the kind needs is missing.
    """
    auth_type = (props.get("AUTH_TYPE") or AUTHTYPE_IAM).strip().lower()
    builder = BUILDERS.get(auth_type)
    if builder is None:
        raise UnsupportedAuthTypeError(props.get("AUTH_TYPE", ""))

    logger.debug(f"Building {auth_type} authenticator for service {service_name!r}")
    return builder(_Properties(props, service_env_prefix(service_name)))


def get_authenticator_from_environment(
    service_name: str, resolver: CredentialResolver | None = None
) -> Authenticator:
    """Build the authenticator configured for ``service_name`` in env / credentials file."""
    props = (resolver or CredentialResolver()).service_properties(service_name)
    return authenticator_from_properties(props, service_name)
