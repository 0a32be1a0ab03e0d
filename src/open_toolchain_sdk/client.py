"""Base service shared by the generated API clients.

A :class:`BaseService` owns the service URL, the authenticator, the retry
policy and the pooled HTTP transport. Operations build a
:class:`~open_toolchain_sdk.transport.request.RequestSpec` and hand it to
:meth:`BaseService.send`, which runs

    snapshot settings → build request → authenticate → transport (with
    optional retries) → map errors → decode

inside the caller's :class:`~open_toolchain_sdk.transport.scope.CancellationScope`.
"""

import copy
import logging
import platform
import threading
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from open_toolchain_sdk.auth.authenticators import Authenticator
from open_toolchain_sdk.auth.credentials import CredentialResolver, parse_bool
from open_toolchain_sdk.errors.exceptions import ConfigError, InvalidServiceURLError, TransportError
from open_toolchain_sdk.errors.handler import raise_for_status
from open_toolchain_sdk.transport.request import (
    JSON_CONTENT_TYPE,
    DetailedResponse,
    RequestSpec,
    build_http_request,
    decode_result,
)
from open_toolchain_sdk.transport.retry import RetryPolicy, RetryTransport
from open_toolchain_sdk.transport.scope import CancellationScope
from open_toolchain_sdk.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

USER_AGENT = f"open-toolchain-python-sdk/{__version__} (python {platform.python_version()}; {platform.system()})"


@dataclass
class ServiceOptions:
    """Inputs for constructing a service.

    Attributes:
        url: Base URL. Empty means the service default (or external config).
        authenticator: Credentials applied to every request.
        service_name: Name used to look up external configuration.
        transport: httpx transport to use instead of a pooled
            ``httpx.AsyncHTTPTransport`` (tests pass ``httpx.MockTransport``).
        timeout: Per-request timeout in seconds.
    """

    url: str | None = None
    authenticator: Authenticator | None = None
    service_name: str | None = None
    transport: httpx.AsyncBaseTransport | None = None
    timeout: float | None = None


def validate_service_url(url: str) -> None:
    """Raise InvalidServiceURLError unless ``url`` is an absolute http(s) URL."""
    if "{" in url or "}" in url:
        raise InvalidServiceURLError(url)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        raise InvalidServiceURLError(url) from None
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidServiceURLError(url)


class BaseService:
    """Stateless API client core.

    Safe for concurrent use from one event loop. The URL and retry policy
    are read atomically when each request is prepared, so changing them
    affects only requests prepared afterwards.
    """

    DEFAULT_SERVICE_URL: str = ""

    def __init__(self, options: ServiceOptions):
        if options.authenticator is None:
            raise ConfigError("authenticator must be provided")
        options.authenticator.validate()

        url = options.url if options.url is not None else self.DEFAULT_SERVICE_URL
        if url:
            validate_service_url(url)

        self._lock = threading.Lock()
        self._service_url = url
        self._retry_policy = RetryPolicy.disabled()
        self._default_headers: dict[str, str] = {}
        self._disable_ssl_verification = False
        self._timeout = httpx.Timeout(options.timeout or DEFAULT_TIMEOUT)
        self._injected_transport = options.transport
        self._transport: httpx.AsyncBaseTransport | None = None
        self._retired_transports: list[httpx.AsyncBaseTransport] = []
        self.authenticator = options.authenticator

    # -------------- settings -------------- #

    def set_service_url(self, url: str) -> None:
        """Set the base URL. An empty URL is stored; operations then fail until a URL is set.

        Raises:
            InvalidServiceURLError: ``url`` is non-empty and not an absolute http(s) URL.
        """
        if url:
            validate_service_url(url)
        with self._lock:
            self._service_url = url

    def get_service_url(self) -> str:
        with self._lock:
            return self._service_url

    @property
    def retry_policy(self) -> RetryPolicy:
        with self._lock:
            return self._retry_policy

    def enable_retries(self, max_retries: int = 0, max_interval: float = 0) -> None:
        """Turn on retries. 0 selects the default for either value."""
        policy = RetryPolicy.enabled_with(max_retries, max_interval)
        with self._lock:
            self._retry_policy = policy
        logger.debug(f"Retries enabled: max_retries={policy.max_retries}, max_interval={policy.max_interval}s")

    def disable_retries(self) -> None:
        with self._lock:
            self._retry_policy = RetryPolicy.disabled()

    def set_default_headers(self, headers: Mapping[str, str]) -> None:
        """Headers sent with every request; per-call headers override them."""
        with self._lock:
            self._default_headers = dict(headers)

    def set_disable_ssl_verification(self, disable: bool = True) -> None:
        with self._lock:
            if disable == self._disable_ssl_verification:
                return
            self._disable_ssl_verification = disable
            if self._transport is not None:
                self._retired_transports.append(self._transport)
                self._transport = None
        if disable:
            logger.warning("SSL certificate verification disabled")

    def configure_service(self, service_name: str, resolver: CredentialResolver | None = None) -> None:
        """Apply URL, SSL and retry settings from external configuration.

        Reads ``URL``, ``DISABLE_SSL``, ``ENABLE_RETRIES``, ``MAX_RETRIES`` and
        ``RETRY_INTERVAL`` for ``service_name``.
        """
        props = (resolver or CredentialResolver()).service_properties(service_name)

        if props.get("URL"):
            self.set_service_url(props["URL"])
        if parse_bool(props.get("DISABLE_SSL")):
            self.set_disable_ssl_verification(True)
        if parse_bool(props.get("ENABLE_RETRIES")):
            try:
                max_retries = int(props.get("MAX_RETRIES") or 0)
                max_interval = float(props.get("RETRY_INTERVAL") or 0)
            except ValueError as e:
                raise ConfigError(f"invalid retry settings for {service_name!r}: {e}") from e
            self.enable_retries(max_retries, max_interval)

    def clone(self) -> "BaseService":
        """Copy this service.

        The clone has the same URL, headers and retry settings but its own
        lock and connection pool; the authenticator object is shared.
        """
        with self._lock:
            clone = copy.copy(self)
            clone._default_headers = dict(self._default_headers)
        clone._lock = threading.Lock()
        clone._transport = None
        clone._retired_transports = []
        return clone

    # -------------- transport -------------- #

    def _get_transport(self) -> httpx.AsyncBaseTransport:
        if self._injected_transport is not None:
            return self._injected_transport
        with self._lock:
            if self._transport is None:
                self._transport = httpx.AsyncHTTPTransport(verify=not self._disable_ssl_verification)
            return self._transport

    async def aclose(self) -> None:
        """Close pooled connections owned by this service."""
        with self._lock:
            transports = [t for t in [self._transport, *self._retired_transports] if t is not None]
            self._transport = None
            self._retired_transports = []
        for transport in transports:
            await transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    # -------------- requests -------------- #

    def _sdk_headers(self, spec: RequestSpec) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if spec.response_type is not None:
            headers["Accept"] = JSON_CONTENT_TYPE
        return headers

    async def send(self, spec: RequestSpec, *, scope: CancellationScope | None = None) -> DetailedResponse:
        """Send a request and return the detailed response.

        Args:
            spec: What to send.
            scope: Optional cancellation scope bounding the whole exchange,
                including token refresh and retry backoff.

        Raises:
            ServiceURLMissingError: The service URL is empty.
            OperationCancelledError: ``scope`` fired first.
            TransportError: The request could not be delivered.
            APIError: The service answered with a non-2xx status.
            DecodeError: The body could not be decoded into ``spec.response_type``.
        """
        with self._lock:
            service_url = self._service_url
            policy = self._retry_policy
            default_headers = dict(self._default_headers)

        request = build_http_request(
            spec,
            service_url,
            default_headers=default_headers,
            sdk_headers=self._sdk_headers(spec),
            timeout=self._timeout,
        )

        if scope is None:
            return await self._execute(spec, request, policy)
        return await scope.run(self._execute(spec, request, policy))

    async def _execute(self, spec: RequestSpec, request: httpx.Request, policy: RetryPolicy) -> DetailedResponse:
        await self.authenticator.authenticate(request)

        transport = self._get_transport()
        if policy.enabled:
            transport = RetryTransport(wrapped_transport=transport, policy=policy)

        logger.debug(f"{spec.operation_id}: {request.method} {request.url}")
        try:
            response = await transport.handle_async_request(request)
            try:
                await response.aread()
            finally:
                await response.aclose()
        except httpx.TransportError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e!r}") from e

        detailed = DetailedResponse.from_httpx(response)
        logger.debug(f"{spec.operation_id}: HTTP {detailed.status_code} ({len(detailed.body)} bytes)")

        raise_for_status(detailed)
        if detailed.status_code not in spec.success_codes:
            logger.debug(
                f"{spec.operation_id}: accepted HTTP {detailed.status_code}, "
                f"documented success codes are {sorted(spec.success_codes)}"
            )

        decode_result(detailed, spec.response_type)
        return detailed
