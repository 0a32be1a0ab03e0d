"""Open Toolchain SDK - async Python client for the DevOps Open Toolchain API.

This library provides:
- A typed client for toolchains, service instances and Tekton pipelines
- Configuration from the environment or an ``ibm-credentials.env`` file
- No-auth, basic, bearer, IAM and container authenticators
- Opt-in retries with jittered backoff, and cancellation scopes
- Testing helpers built on ``httpx.MockTransport``

Example:
    ```python
    from open_toolchain_sdk import CancellationScope, OpenToolchainV1
    from open_toolchain_sdk.open_toolchain_v1 import GetToolchainOptions

    # Reads OPEN_TOOLCHAIN_URL, OPEN_TOOLCHAIN_AUTH_TYPE, OPEN_TOOLCHAIN_APIKEY, ...
    service = OpenToolchainV1.new_instance()
    service.enable_retries()

    response = await service.get_toolchain(
        GetToolchainOptions(guid="...", env_id="ibm:yp:us-south"),
        scope=CancellationScope(timeout=10),
    )
    print(response.status_code, response.result.name)
    ```
"""

from open_toolchain_sdk.client import BaseService, ServiceOptions
from open_toolchain_sdk.open_toolchain_v1 import OpenToolchainV1
from open_toolchain_sdk.transport import CancellationScope, DetailedResponse
from open_toolchain_sdk.version import __version__

__all__ = [
    "BaseService",
    "CancellationScope",
    "DetailedResponse",
    "OpenToolchainV1",
    "ServiceOptions",
    "__version__",
]
