"""Open Toolchain API v1."""

from open_toolchain_sdk.open_toolchain_v1.models import (
    Container,
    CreateServiceInstanceOptions,
    CreateServiceInstanceResponse,
    CreateTektonPipelineDefinitionOptions,
    CreateTektonPipelineDefinitionResponse,
    CreateToolchainOptions,
    DeleteServiceInstanceOptions,
    DeleteToolchainOptions,
    EnvProperty,
    GetServiceInstanceOptions,
    GetServiceInstanceResponse,
    GetTektonPipelineDefinitionOptions,
    GetTektonPipelineOptions,
    GetToolchainOptions,
    InputScmSource,
    PatchServiceInstanceOptions,
    PatchTektonPipelineOptions,
    PatchToolchainOptions,
    ServiceInstance,
    ServiceInstanceParameters,
    ServiceStatus,
    TektonPipeline,
    TektonPipelineDefinition,
    TektonPipelineInput,
    TektonPipelineTrigger,
    Toolchain,
    ToolchainBinding,
    ToolchainService,
    ToolchainTemplate,
    TriggerEvents,
    TriggerScmSource,
    Worker,
)
from open_toolchain_sdk.open_toolchain_v1.service import (
    DEFAULT_SERVICE_NAME,
    DEFAULT_SERVICE_URL,
    REGIONAL_ENDPOINTS,
    OpenToolchainV1,
    get_service_url_for_region,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "DEFAULT_SERVICE_URL",
    "REGIONAL_ENDPOINTS",
    "Container",
    "CreateServiceInstanceOptions",
    "CreateServiceInstanceResponse",
    "CreateTektonPipelineDefinitionOptions",
    "CreateTektonPipelineDefinitionResponse",
    "CreateToolchainOptions",
    "DeleteServiceInstanceOptions",
    "DeleteToolchainOptions",
    "EnvProperty",
    "GetServiceInstanceOptions",
    "GetServiceInstanceResponse",
    "GetTektonPipelineDefinitionOptions",
    "GetTektonPipelineOptions",
    "GetToolchainOptions",
    "InputScmSource",
    "OpenToolchainV1",
    "PatchServiceInstanceOptions",
    "PatchTektonPipelineOptions",
    "PatchToolchainOptions",
    "ServiceInstance",
    "ServiceInstanceParameters",
    "ServiceStatus",
    "TektonPipeline",
    "TektonPipelineDefinition",
    "TektonPipelineInput",
    "TektonPipelineTrigger",
    "Toolchain",
    "ToolchainBinding",
    "ToolchainService",
    "ToolchainTemplate",
    "TriggerEvents",
    "TriggerScmSource",
    "Worker",
    "get_service_url_for_region",
]
