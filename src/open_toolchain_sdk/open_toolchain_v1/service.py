"""Open Toolchain API v1 client.

Manages toolchains, the service instances (tools) bound to them, and the
configuration and definitions of Tekton pipelines.

Example:
    ```python
    from open_toolchain_sdk.auth import IAMAuthenticator
    from open_toolchain_sdk.client import ServiceOptions
    from open_toolchain_sdk.open_toolchain_v1 import GetToolchainOptions, OpenToolchainV1

    async with OpenToolchainV1(ServiceOptions(authenticator=IAMAuthenticator("my-apikey"))) as service:
        response = await service.get_toolchain(GetToolchainOptions(guid="...", env_id="ibm:yp:us-south"))
        print(response.result.name)
    ```
"""

import logging
from types import MappingProxyType

from open_toolchain_sdk.auth.credentials import CredentialResolver
from open_toolchain_sdk.auth.factory import get_authenticator_from_environment
from open_toolchain_sdk.client import BaseService, ServiceOptions
from open_toolchain_sdk.errors.exceptions import RegionNotFoundError
from open_toolchain_sdk.models import wire_dict
from open_toolchain_sdk.open_toolchain_v1.models import (
    CreateServiceInstanceOptions,
    CreateServiceInstanceResponse,
    CreateTektonPipelineDefinitionOptions,
    CreateTektonPipelineDefinitionResponse,
    CreateToolchainOptions,
    DeleteServiceInstanceOptions,
    DeleteToolchainOptions,
    GetServiceInstanceOptions,
    GetServiceInstanceResponse,
    GetTektonPipelineDefinitionOptions,
    GetTektonPipelineOptions,
    GetToolchainOptions,
    PatchServiceInstanceOptions,
    PatchTektonPipelineOptions,
    PatchToolchainOptions,
    TektonPipeline,
    TektonPipelineDefinition,
    Toolchain,
)
from open_toolchain_sdk.transport.request import DetailedResponse, RequestSpec
from open_toolchain_sdk.transport.scope import CancellationScope
from open_toolchain_sdk.validation import validate_options

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "open_toolchain"

REGIONAL_ENDPOINTS = MappingProxyType(
    {
        "us-south": "https://devops-api.us-south.devops.cloud.ibm.com",
        "us-east": "https://devops-api.us-east.devops.cloud.ibm.com",
        "eu-de": "https://devops-api.eu-de.devops.cloud.ibm.com",
        "eu-gb": "https://devops-api.eu-gb.devops.cloud.ibm.com",
        "jp-tok": "https://devops-api.jp-tok.devops.cloud.ibm.com",
        "jp-osa": "https://devops-api.jp-osa.devops.cloud.ibm.com",
        "au-syd": "https://devops-api.au-syd.devops.cloud.ibm.com",
        "ca-tor": "https://devops-api.ca-tor.devops.cloud.ibm.com",
        "br-sao": "https://devops-api.br-sao.devops.cloud.ibm.com",
    }
)

DEFAULT_SERVICE_URL = REGIONAL_ENDPOINTS["us-south"]

TOOLCHAIN_PATH = "/devops/toolchains/{guid}"
SERVICE_INSTANCES_PATH = "/devops/service_instances"
SERVICE_INSTANCE_PATH = "/devops/service_instances/{guid}"
TEKTON_PIPELINE_PATH = "/devops/pipelines/tekton/api/v1/{guid}"


def get_service_url_for_region(region: str) -> str:
    """Base URL of the regional endpoint for ``region``.

    Raises:
        RegionNotFoundError: No endpoint is known for ``region``.
    """
    try:
        return REGIONAL_ENDPOINTS[region]
    except KeyError:
        raise RegionNotFoundError(region) from None


class OpenToolchainV1(BaseService):
    """Client for the Open Toolchain API v1.

    Every operation is a coroutine taking its options object and an optional
    ``scope`` (:class:`CancellationScope`) and returning a
    :class:`DetailedResponse` whose ``result`` holds the decoded model, or
    None when the operation has no response body.
    """

    DEFAULT_SERVICE_URL = DEFAULT_SERVICE_URL

    def __init__(self, options: ServiceOptions | None = None):
        super().__init__(options or ServiceOptions())

    @classmethod
    def new_instance(
        cls, options: ServiceOptions | None = None, resolver: CredentialResolver | None = None
    ) -> "OpenToolchainV1":
        """Build a client from external configuration.

        Settings are read for ``options.service_name`` (default
        ``open_toolchain``) from the environment and credentials file.
        An explicit URL or authenticator in ``options`` wins.

        Raises:
            ConfigError: Configuration is invalid or credentials are missing.
        """
        options = options or ServiceOptions()
        service_name = options.service_name or DEFAULT_SERVICE_NAME
        resolver = resolver or CredentialResolver()

        authenticator = options.authenticator or get_authenticator_from_environment(service_name, resolver)
        service = cls(
            ServiceOptions(
                url=options.url,
                authenticator=authenticator,
                service_name=service_name,
                transport=options.transport,
                timeout=options.timeout,
            )
        )
        service.configure_service(service_name, resolver)
        if options.url:
            service.set_service_url(options.url)
        return service

    get_service_url_for_region = staticmethod(get_service_url_for_region)

    def clone(self) -> "OpenToolchainV1":
        return super().clone()  # type: ignore[return-value]

    # -------------- toolchains -------------- #

    async def create_toolchain(
        self, options: CreateToolchainOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[None]:
        """Create a toolchain from a template repository."""
        validate_options(options, "create_toolchain_options")
        spec = RequestSpec(
            method="POST",
            path="/devops/setup/deploy",
            operation_id="create_toolchain",
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict(
                {
                    "repository": options.repository,
                    "autocreate": options.autocreate,
                    "resourceGroupId": options.resource_group_id,
                    "repository_token": options.repository_token,
                    "branch": options.branch,
                }
            ),
            success_codes=frozenset({201}),
        )
        return await self.send(spec, scope=scope)

    async def get_toolchain(
        self, options: GetToolchainOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[Toolchain]:
        """Returns details about a particular toolchain."""
        validate_options(options, "get_toolchain_options")
        spec = RequestSpec(
            method="GET",
            path=TOOLCHAIN_PATH,
            operation_id="get_toolchain",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            response_type=Toolchain,
        )
        return await self.send(spec, scope=scope)

    async def delete_toolchain(
        self, options: DeleteToolchainOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[None]:
        validate_options(options, "delete_toolchain_options")
        spec = RequestSpec(
            method="DELETE",
            path=TOOLCHAIN_PATH,
            operation_id="delete_toolchain",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
        )
        return await self.send(spec, scope=scope)

    async def patch_toolchain(
        self, options: PatchToolchainOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[None]:
        """Update a toolchain's name or description."""
        validate_options(options, "patch_toolchain_options")
        spec = RequestSpec(
            method="PATCH",
            path=TOOLCHAIN_PATH,
            operation_id="patch_toolchain",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict({"name": options.name, "description": options.description}),
            success_codes=frozenset({204}),
        )
        return await self.send(spec, scope=scope)

    # -------------- service instances -------------- #

    async def create_service_instance(
        self, options: CreateServiceInstanceOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[CreateServiceInstanceResponse]:
        """Bind a new tool to a toolchain."""
        validate_options(options, "create_service_instance_options")
        spec = RequestSpec(
            method="POST",
            path=SERVICE_INSTANCES_PATH,
            operation_id="create_service_instance",
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict(
                {
                    "toolchainId": options.toolchain_id,
                    "serviceId": options.service_id,
                    "parameters": options.parameters,
                }
            ),
            response_type=CreateServiceInstanceResponse,
        )
        return await self.send(spec, scope=scope)

    async def get_service_instance(
        self, options: GetServiceInstanceOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[GetServiceInstanceResponse]:
        validate_options(options, "get_service_instance_options")
        spec = RequestSpec(
            method="GET",
            path=SERVICE_INSTANCE_PATH,
            operation_id="get_service_instance",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id, "toolchainId": options.toolchain_id},
            headers=options.headers,
            response_type=GetServiceInstanceResponse,
        )
        return await self.send(spec, scope=scope)

    async def patch_service_instance(
        self, options: PatchServiceInstanceOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[None]:
        validate_options(options, "patch_service_instance_options")
        spec = RequestSpec(
            method="PATCH",
            path=SERVICE_INSTANCE_PATH,
            operation_id="patch_service_instance",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict(
                {
                    "toolchainId": options.toolchain_id,
                    "serviceId": options.service_id,
                    "parameters": options.parameters,
                }
            ),
        )
        return await self.send(spec, scope=scope)

    async def delete_service_instance(
        self, options: DeleteServiceInstanceOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[None]:
        validate_options(options, "delete_service_instance_options")
        spec = RequestSpec(
            method="DELETE",
            path=SERVICE_INSTANCE_PATH,
            operation_id="delete_service_instance",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id, "toolchainId": options.toolchain_id},
            headers=options.headers,
            success_codes=frozenset({204}),
        )
        return await self.send(spec, scope=scope)

    # -------------- tekton pipelines -------------- #

    async def get_tekton_pipeline(
        self, options: GetTektonPipelineOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[TektonPipeline]:
        validate_options(options, "get_tekton_pipeline_options")
        spec = RequestSpec(
            method="GET",
            path=TEKTON_PIPELINE_PATH,
            operation_id="get_tekton_pipeline",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            response_type=TektonPipeline,
        )
        return await self.send(spec, scope=scope)

    async def patch_tekton_pipeline(
        self, options: PatchTektonPipelineOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[TektonPipeline]:
        """Update pipeline configuration; only the fields set are sent.

        Returns the updated pipeline, or a None result when the service
        answers 204 without a body.
        """
        validate_options(options, "patch_tekton_pipeline_options")
        spec = RequestSpec(
            method="PATCH",
            path=TEKTON_PIPELINE_PATH + "/config",
            operation_id="patch_tekton_pipeline",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict(
                {
                    "envProperties": options.env_properties,
                    "inputs": options.inputs,
                    "pipelineDefinitionId": options.pipeline_definition_id,
                    "triggers": options.triggers,
                    "worker": options.worker,
                }
            ),
            success_codes=frozenset({200, 204}),
            response_type=TektonPipeline,
        )
        return await self.send(spec, scope=scope)

    async def get_tekton_pipeline_definition(
        self, options: GetTektonPipelineDefinitionOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[TektonPipelineDefinition]:
        validate_options(options, "get_tekton_pipeline_definition_options")
        spec = RequestSpec(
            method="GET",
            path=TEKTON_PIPELINE_PATH + "/definition",
            operation_id="get_tekton_pipeline_definition",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            response_type=TektonPipelineDefinition,
        )
        return await self.send(spec, scope=scope)

    async def create_tekton_pipeline_definition(
        self, options: CreateTektonPipelineDefinitionOptions, *, scope: CancellationScope | None = None
    ) -> DetailedResponse[CreateTektonPipelineDefinitionResponse]:
        validate_options(options, "create_tekton_pipeline_definition_options")
        spec = RequestSpec(
            method="POST",
            path=TEKTON_PIPELINE_PATH + "/definition",
            operation_id="create_tekton_pipeline_definition",
            path_params={"guid": options.guid},
            query={"env_id": options.env_id},
            headers=options.headers,
            body=wire_dict({"inputs": options.inputs}),
            response_type=CreateTektonPipelineDefinitionResponse,
        )
        return await self.send(spec, scope=scope)
