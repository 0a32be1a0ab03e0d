"""Outgoing request descriptions and detailed responses.

Operations describe what to send with a :class:`RequestSpec`; the service
turns it into an ``httpx.Request``, sends it, and hands back a
:class:`DetailedResponse` carrying the status, headers, raw body and, where
the operation declares one, the decoded result model.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from urllib.parse import quote

import httpx
import pydantic

from open_toolchain_sdk.errors.exceptions import DecodeError, ServiceURLMissingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestSpec:
    """Everything an operation needs sent, independent of service state.

    Attributes:
        method: HTTP method.
        path: Path template, e.g. ``/devops/toolchains/{guid}``.
        operation_id: Operation name used in logs.
        path_params: Values substituted into ``path`` (percent-encoded).
        query: Query parameters; ``None`` values are dropped.
        headers: Per-call headers supplied by the caller.
        body: JSON-serialisable body, or None for no body.
        success_codes: Status codes the operation documents as success.
        response_type: Model class the body decodes into, if any.
    """

    method: str
    path: str
    operation_id: str
    path_params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] | None = None
    body: Any = None
    success_codes: frozenset[int] = frozenset({200})
    response_type: Any = None

    def resolve_url(self, service_url: str) -> str:
        if not service_url:
            raise ServiceURLMissingError()
        path = self.path
        for name, value in self.path_params.items():
            path = path.replace("{" + name + "}", quote(str(value), safe=""))
        return service_url.rstrip("/") + path

    def encoded_query(self) -> dict[str, str]:
        params = {}
        for name, value in self.query.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[name] = str(value)
        return params

    def encoded_body(self) -> bytes | None:
        if self.body is None:
            return None
        return json.dumps(self.body, separators=(",", ":")).encode("utf-8")


def build_http_request(
    spec: RequestSpec,
    service_url: str,
    *,
    default_headers: Mapping[str, str] | None = None,
    sdk_headers: Mapping[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
) -> httpx.Request:
    """Build the outbound request for a spec.

    Header precedence, lowest to highest: service default headers, SDK
    headers, per-call headers. ``Content-Type`` is always set by the
    envelope when a body is present; ``Authorization`` is left to the
    authenticator.
    """
    url = spec.resolve_url(service_url)

    headers = httpx.Headers(default_headers or {})
    headers.update(sdk_headers or {})
    headers.update(spec.headers or {})

    content = spec.encoded_body()
    if content is not None:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    elif "Content-Type" in headers:
        del headers["Content-Type"]

    extensions = {"timeout": timeout.as_dict()} if timeout is not None else {}
    return httpx.Request(
        spec.method,
        url,
        params=spec.encoded_query(),
        headers=headers,
        content=content,
        extensions=extensions,
    )


@dataclass
class DetailedResponse(Generic[T]):
    """Transport-level result returned alongside the decoded model."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""
    result: T | None = None
    status_text: str = ""

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "DetailedResponse":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
            status_text=response.reason_phrase,
        )

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def get_header_values(self, name: str) -> list[str]:
        return self.headers.get_list(name)

    def is_json(self) -> bool:
        return is_json_content_type(self.headers.get("content-type", ""))

    def json(self) -> Any:
        return json.loads(self.body)


def is_json_content_type(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == JSON_CONTENT_TYPE or (mime.startswith("application/") and mime.endswith("+json"))


def decode_result(response: DetailedResponse, response_type: Any) -> None:
    """Decode the response body into ``response_type`` in place.

    Leaves ``result`` as None when there is no body or it is not JSON.

    Raises:
        DecodeError: If the body is not valid JSON or does not fit the model.
    """
    if response_type is None or not response.body.strip():
        return
    if not response.is_json():
        logger.debug(f"Not decoding {response.headers.get('content-type')!r} response body")
        return

    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(f"invalid JSON: {e}", response=response) from e

    try:
        response.result = response_type.model_validate(data)
    except pydantic.ValidationError as e:
        problems = "; ".join(f"{_location(err['loc'])}: {err['msg']}" for err in e.errors())
        raise DecodeError(f"cannot decode {response_type.__name__}: {problems}", response=response) from e


def _location(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"
