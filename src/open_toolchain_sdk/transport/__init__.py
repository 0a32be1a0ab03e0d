"""Transport layer: request envelope, retries and cancellation.

Modules:
    request: RequestSpec, DetailedResponse and response decoding
    retry: RetryPolicy and the RetryTransport wrapper
    scope: CancellationScope for deadlines and explicit cancellation
"""

from open_toolchain_sdk.transport.request import DetailedResponse, RequestSpec
from open_toolchain_sdk.transport.retry import RetryPolicy, RetryTransport
from open_toolchain_sdk.transport.scope import CancellationScope

__all__ = [
    "CancellationScope",
    "DetailedResponse",
    "RequestSpec",
    "RetryPolicy",
    "RetryTransport",
]
