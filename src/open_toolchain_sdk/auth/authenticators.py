"""Authenticators that add credentials to outbound requests.

The set is closed: :class:`NoAuthAuthenticator`, :class:`BasicAuthenticator`,
:class:`BearerTokenAuthenticator`, :class:`IAMAuthenticator` and
:class:`ContainerAuthenticator`. Each validates its configuration on
construction and exposes one capability, ``authenticate(request)``.

Example:
    ```python
    from open_toolchain_sdk.auth import IAMAuthenticator

    authenticator = IAMAuthenticator(apikey="my-apikey")
    ```
"""

import base64
import logging
from typing import Any, ClassVar

import httpx

from open_toolchain_sdk.auth.credentials import CredentialResolver
from open_toolchain_sdk.auth.exceptions import (
    AuthenticationError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)
from open_toolchain_sdk.auth.token_manager import IAMToken, TokenManager
from open_toolchain_sdk.errors.exceptions import DecodeError, TransportError
from open_toolchain_sdk.errors.handler import is_success
from open_toolchain_sdk.errors.models import ErrorDetail
from open_toolchain_sdk.transport.request import DetailedResponse

logger = logging.getLogger(__name__)

AUTHTYPE_NOAUTH = "noauth"
AUTHTYPE_BASIC = "basic"
AUTHTYPE_BEARERTOKEN = "bearertoken"
AUTHTYPE_IAM = "iam"
AUTHTYPE_CONTAINER = "container"

DEFAULT_IAM_URL = "https://iam.cloud.ibm.com"
IAM_TOKEN_PATH = "/identity/token"
DEFAULT_CR_TOKEN_FILENAMES = (
    "/var/run/secrets/tokens/vault-token",
    "/var/run/secrets/tokens/sa-token",
)

BAD_EDGE_CHARS = ("{", "}", '"')


def _require(value: str | None, name: str) -> str:
    if not value:
        raise CredentialNotFoundError(f"{name} must be provided")
    if value.startswith(BAD_EDGE_CHARS) or value.endswith(BAD_EDGE_CHARS):
        raise CredentialError(f"{name} must not begin or end with '{{', '}}' or '\"'; remove them")
    return value


class Authenticator:
    """Base class of the authenticator variants."""

    auth_type: ClassVar[str]

    def validate(self) -> None:
        """Raise a CredentialError if the configuration is unusable."""

    async def authenticate(self, request: httpx.Request) -> None:
        raise NotImplementedError


class NoAuthAuthenticator(Authenticator):
    """Sends requests without credentials."""

    auth_type = AUTHTYPE_NOAUTH

    async def authenticate(self, request: httpx.Request) -> None:
        return None


class BasicAuthenticator(Authenticator):
    """HTTP basic authentication (RFC 7617)."""

    auth_type = AUTHTYPE_BASIC

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password
        self.validate()

    def validate(self) -> None:
        _require(self.username, "username")
        _require(self.password, "password")

    async def authenticate(self, request: httpx.Request) -> None:
        raw = f"{self.username}:{self.password}".encode()
        request.headers["Authorization"] = "Basic " + base64.b64encode(raw).decode("ascii")


class BearerTokenAuthenticator(Authenticator):
    """Sends a caller-managed bearer token."""

    auth_type = AUTHTYPE_BEARERTOKEN

    def __init__(self, bearer_token: str):
        self.bearer_token = bearer_token
        self.validate()

    def validate(self) -> None:
        _require(self.bearer_token, "bearer_token")

    def set_bearer_token(self, bearer_token: str) -> None:
        _require(bearer_token, "bearer_token")
        self.bearer_token = bearer_token

    async def authenticate(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.bearer_token}"


class _IAMTokenAuthenticator(Authenticator):
    """Shared plumbing for variants that exchange something for an IAM token."""

    grant_type: ClassVar[str]

    def __init__(
        self,
        *,
        url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        scope: str | None = None,
        disable_ssl_verification: bool = False,
        headers: dict[str, str] | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.url = (url or DEFAULT_IAM_URL).rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self.disable_ssl_verification = disable_ssl_verification
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._http_transport = http_transport
        self.token_manager = TokenManager(self.request_token)

    @property
    def token_url(self) -> str:
        if self.url.endswith(IAM_TOKEN_PATH):
            return self.url
        return self.url + IAM_TOKEN_PATH

    def validate(self) -> None:
        if bool(self.client_id) != bool(self.client_secret):
            raise CredentialError("client_id and client_secret must be provided together")

    def _request_form(self) -> dict[str, str]:
        raise NotImplementedError

    async def authenticate(self, request: httpx.Request) -> None:
        token = await self.token_manager.get_token()
        request.headers["Authorization"] = f"Bearer {token}"

    async def request_token(self) -> IAMToken:
        """Exchange credentials for a new token at the IAM token endpoint.

        Raises:
            AuthenticationError: The token server answered with a non-2xx status.
            TransportError: The token server could not be reached.
            DecodeError: The token response was not understood.
        """
        form = {"grant_type": self.grant_type, **self._request_form()}
        if self.scope:
            form["scope"] = self.scope
        auth = (self.client_id, self.client_secret) if self.client_id else None
        headers = {"Accept": "application/json", **self.headers}

        client_kwargs: dict[str, Any] = {"timeout": self.timeout, "verify": not self.disable_ssl_verification}
        if self._http_transport is not None:
            client_kwargs["transport"] = self._http_transport

        async with httpx.AsyncClient(**client_kwargs) as client:
            try:
                response = await client.post(self.token_url, data=form, headers=headers, auth=auth)
            except httpx.TransportError as e:
                raise TransportError(f"IAM token request to {self.token_url} failed: {e}") from e

        detailed = DetailedResponse.from_httpx(response)
        if not is_success(response.status_code):
            error_detail = ErrorDetail.from_response(detailed)
            message = error_detail.to_exception_message() if error_detail else detailed.text[:200]
            raise AuthenticationError(
                f"IAM token request failed with HTTP {response.status_code}: {message}",
                status_code=response.status_code,
                response=detailed,
                error_detail=error_detail,
                status_text=response.reason_phrase,
            )

        try:
            token = IAMToken.from_response(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(f"invalid IAM token response: {e}", response=detailed) from e
        logger.debug(f"Obtained IAM token from {self.token_url}, expires at {token.expires_at:.0f}")
        return token


class IAMAuthenticator(_IAMTokenAuthenticator):
    """Exchanges an IBM Cloud API key for short-lived bearer tokens."""

    auth_type = AUTHTYPE_IAM
    grant_type = "urn:ibm:params:oauth:grant-type:apikey"

    def __init__(self, apikey: str, **kwargs):
        self.apikey = apikey
        super().__init__(**kwargs)
        self.validate()

    def validate(self) -> None:
        _require(self.apikey, "apikey")
        super().validate()

    def _request_form(self) -> dict[str, str]:
        return {"apikey": self.apikey, "response_type": "cloud_iam"}


class ContainerAuthenticator(_IAMTokenAuthenticator):
    """Exchanges a compute resource token (read from a file) for bearer tokens.

    Args:
        cr_token_filename: Token file; defaults to the first readable of
            ``/var/run/secrets/tokens/vault-token`` and ``.../sa-token``.
        iam_profile_name: Trusted profile name.
        iam_profile_id: Trusted profile id. One of name or id is required.
    """

    auth_type = AUTHTYPE_CONTAINER
    grant_type = "urn:ibm:params:oauth:grant-type:cr-token"

    def __init__(
        self,
        cr_token_filename: str | None = None,
        iam_profile_name: str | None = None,
        iam_profile_id: str | None = None,
        **kwargs,
    ):
        self.cr_token_filename = cr_token_filename
        self.iam_profile_name = iam_profile_name
        self.iam_profile_id = iam_profile_id
        super().__init__(**kwargs)
        self._files = CredentialResolver(load_credentials_file=False)
        self.validate()

    def validate(self) -> None:
        if not self.iam_profile_name and not self.iam_profile_id:
            raise CredentialNotFoundError("iam_profile_name or iam_profile_id must be provided")
        super().validate()

    def read_cr_token(self) -> str:
        if self.cr_token_filename:
            token = self._files.resolve_from_file(file_path=self.cr_token_filename, required=True)
        else:
            token = None
            for candidate in DEFAULT_CR_TOKEN_FILENAMES:
                token = self._files.resolve_from_file(file_path=candidate)
                if token:
                    break
        if not token:
            raise CredentialFileError("compute resource token file is empty or missing")
        return token

    def _request_form(self) -> dict[str, str]:
        form = {"cr_token": self.read_cr_token()}
        if self.iam_profile_name:
            form["profile_name"] = self.iam_profile_name
        if self.iam_profile_id:
            form["profile_id"] = self.iam_profile_id
        return form
