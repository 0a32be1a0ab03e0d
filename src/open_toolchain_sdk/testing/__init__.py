"""Testing utilities for code that uses the SDK.

Build a client backed by ``httpx.MockTransport`` and assert on the requests
it sent.

Example:
    ```python
    from open_toolchain_sdk.testing import RequestRecorder, build_service, json_response


    async def test_get_toolchain():
        recorder = RequestRecorder(lambda request: json_response(200, {"name": "my-toolchain"}))
        service = build_service(recorder)

        response = await service.get_toolchain(GetToolchainOptions(guid="abc", env_id="ibm:yp:us-south"))

        assert response.result.name == "my-toolchain"
        assert recorder.last.url.params["env_id"] == "ibm:yp:us-south"
    ```
"""

import inspect
import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from open_toolchain_sdk.auth.authenticators import Authenticator, NoAuthAuthenticator
from open_toolchain_sdk.client import ServiceOptions
from open_toolchain_sdk.open_toolchain_v1.service import OpenToolchainV1

TEST_SERVICE_URL = "https://opentoolchainv1.test/api"

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def json_response(status_code: int = 200, data: Any = None, headers: dict[str, str] | None = None) -> httpx.Response:
    """Response with a JSON body (or no body when ``data`` is None)."""
    all_headers = dict(headers or {})
    if data is None:
        return httpx.Response(status_code, headers=all_headers)
    all_headers.setdefault("Content-Type", "application/json")
    return httpx.Response(status_code, headers=all_headers, content=json.dumps(data).encode())


class RequestRecorder:
    """Mock transport handler that remembers every request it sees."""

    def __init__(self, handler: Handler | None = None):
        self._handler = handler or (lambda request: httpx.Response(200))
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if inspect.isawaitable(response):
            response = await response
        return response

    @property
    def count(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def build_service(
    handler: Handler,
    *,
    url: str = TEST_SERVICE_URL,
    authenticator: Authenticator | None = None,
    timeout: float | None = None,
) -> OpenToolchainV1:
    """Open Toolchain client whose requests are answered by ``handler``."""
    return OpenToolchainV1(
        ServiceOptions(
            url=url,
            authenticator=authenticator or NoAuthAuthenticator(),
            transport=httpx.MockTransport(handler),
            timeout=timeout,
        )
    )
