"""Request options and response models for the Open Toolchain API v1.

Wire names follow the API exactly; it mixes ``snake_case`` (toolchains,
service instance parameters) with ``camelCase`` (Tekton pipelines,
``toolchainId``/``serviceId``).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from pydantic import Field, model_validator

from open_toolchain_sdk.models import Model

# ---------------------------------------------------------------------------
# Toolchains
# ---------------------------------------------------------------------------


class Container(Model):
    """Resource group or organization that owns a toolchain or tool."""

    guid: str | None = None
    type: str | None = None


class ToolchainTemplate(Model):
    getting_started: str | None = None
    services_total: int | None = None
    name: str | None = None
    type: str | None = None
    url: str | None = None
    source: str | None = None
    locale: str | None = None


class ServiceStatus(Model):
    state: str | None = None


class ToolchainBinding(Model):
    status: ServiceStatus | None = None
    name: str | None = None
    webhook_id: str | None = None


class ToolchainService(Model):
    """A tool bound to a toolchain, as listed inside a toolchain."""

    broker_id: str | None = None
    service_id: str | None = None
    container: Container | None = None
    updated_at: datetime | None = None
    parameters: dict[str, Any] | None = None
    status: ServiceStatus | None = None
    dashboard_url: str | None = None
    region_id: str | None = None
    instance_id: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    url: str | None = None
    toolchain_binding: ToolchainBinding | None = None


class Toolchain(Model):
    toolchain_guid: str | None = None
    name: str | None = None
    description: str | None = None
    key: str | None = None
    container: Container | None = None
    crn: str | None = None
    created: datetime | None = None
    updated_at: datetime | None = None
    creator: str | None = None
    generator: str | None = None
    template: ToolchainTemplate | None = None
    tags: list[str] | None = None
    lifecycle_messaging_webhook_id: str | None = None
    region_id: str | None = None
    services: list[ToolchainService] | None = None


# ---------------------------------------------------------------------------
# Service instances
# ---------------------------------------------------------------------------


class ServiceInstanceParameters(Model):
    """Tool configuration sent when creating or updating a service instance.

    Which fields apply depends on the tool (Slack uses ``api_token``,
    ``channel_name`` and ``team_url``; Git tools use ``repo_url``,
    ``private_repo`` and so on). Unset fields are not sent.
    """

    name: str | None = None
    type: str | None = None
    label: str | None = None
    title: str | None = None
    description: str | None = None
    documentation_url: str | None = None
    api_key: str | None = None
    api_token: str | None = None
    service_key: str | None = None
    key_type: str | None = None
    service_id: str | None = None
    service_name: str | None = None
    service_crn: str | None = None
    server_url: str | None = None
    user_email: str | None = None
    user_phone: str | None = None
    channel_name: str | None = None
    team_url: str | None = None
    webhook: str | None = None
    repo_url: str | None = None
    git_id: str | None = None
    private_repo: bool | None = None
    has_issues: bool | None = None
    enable_traceability: bool | None = None
    legal: bool | None = None
    authorized: str | None = None
    instance_name: str | None = None
    integration_status: str | None = None
    region: str | None = None
    resource_group: str | None = None
    ui_pipeline: bool | None = None


class CreateServiceInstanceResponse(Model):
    status: str | None = None


class ServiceInstance(Model):
    instance_id: str | None = None
    dashboard_url: str | None = None
    service_id: str | None = None
    parameters: dict[str, Any] | None = None


class GetServiceInstanceResponse(Model):
    """A service instance, wrapped under ``serviceInstance`` by the API.

    Some deployments return the instance bare; both shapes decode here.
    """

    service_instance: ServiceInstance | None = Field(default=None, alias="serviceInstance")

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_instance(cls, data: Any) -> Any:
        if isinstance(data, dict) and data and not {"serviceInstance", "service_instance"} & data.keys():
            return {"serviceInstance": data}
        return data


# ---------------------------------------------------------------------------
# Tekton pipelines
# ---------------------------------------------------------------------------


class EnvProperty(Model):
    """Pipeline environment property; ``type`` is e.g. TEXT, SECURE or SINGLE_SELECT."""

    name: str | None = None
    value: str | None = None
    type: str | None = None


class InputScmSource(Model):
    path: str | None = None
    url: str | None = None
    type: str | None = None
    blind_connection: bool | None = Field(default=None, alias="blindConnection")
    branch: str | None = None


class TektonPipelineInput(Model):
    """Repository holding Tekton definitions the pipeline reads."""

    type: str | None = None
    service_instance_id: str | None = Field(default=None, alias="serviceInstanceId")
    shard_definition_id: str | None = Field(default=None, alias="shardDefinitionId")
    scm_source: InputScmSource | None = Field(default=None, alias="scmSource")


class TriggerScmSource(Model):
    url: str | None = None
    type: str | None = None
    branch: str | None = None
    pattern: str | None = None


class TriggerEvents(Model):
    push: bool | None = None
    pull_request: bool | None = None
    pull_request_closed: bool | None = None


class TektonPipelineTrigger(Model):
    id: str | None = None
    name: str | None = None
    event_listener: str | None = Field(default=None, alias="eventListener")
    disabled: bool | None = None
    scm_source: TriggerScmSource | None = Field(default=None, alias="scmSource")
    type: str | None = None
    events: TriggerEvents | None = None
    service_instance_id: str | None = Field(default=None, alias="serviceInstanceId")


class Worker(Model):
    worker_id: str | None = Field(default=None, alias="workerId")
    worker_name: str | None = Field(default=None, alias="workerName")
    worker_type: str | None = Field(default=None, alias="workerType")


class TektonPipeline(Model):
    id: str | None = None
    name: str | None = None
    status: str | None = None
    resource_group_id: str | None = Field(default=None, alias="resourceGroupId")
    toolchain_id: str | None = Field(default=None, alias="toolchainId")
    toolchain_crn: str | None = Field(default=None, alias="toolchainCRN")
    dashboard_url: str | None = None
    pipeline_definition_id: str | None = Field(default=None, alias="pipelineDefinitionId")
    created: datetime | None = None
    updated_at: datetime | None = None
    build_number: int | None = None
    env_properties: list[EnvProperty] | None = Field(default=None, alias="envProperties")
    inputs: list[TektonPipelineInput] | None = None
    triggers: list[TektonPipelineTrigger] | None = None
    worker: Worker | None = None


class TektonPipelineDefinition(Model):
    id: str | None = None
    pipeline_id: str | None = Field(default=None, alias="pipelineId")
    repo_url: str | None = Field(default=None, alias="repoUrl")
    branch: str | None = None
    path: str | None = None
    sha: str | None = None
    type: str | None = None
    shard_repos: list[str] | None = Field(default=None, alias="shardRepos")


class CreateTektonPipelineDefinitionResponse(Model):
    definition: TektonPipelineDefinition | None = None
    inputs: list[TektonPipelineInput] | None = None


# ---------------------------------------------------------------------------
# Operation options
# ---------------------------------------------------------------------------


@dataclass
class CreateToolchainOptions:
    env_id: str | None = None
    repository: str | None = None
    autocreate: bool | None = None
    resource_group_id: str | None = None
    repository_token: str | None = None
    branch: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("env_id", "repository")


@dataclass
class GetToolchainOptions:
    guid: str | None = None
    env_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class DeleteToolchainOptions:
    guid: str | None = None
    env_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class PatchToolchainOptions:
    guid: str | None = None
    env_id: str | None = None
    name: str | None = None
    description: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class CreateServiceInstanceOptions:
    env_id: str | None = None
    toolchain_id: str | None = None
    service_id: str | None = None
    parameters: ServiceInstanceParameters | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("env_id",)


@dataclass
class GetServiceInstanceOptions:
    guid: str | None = None
    env_id: str | None = None
    toolchain_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id", "toolchain_id")


@dataclass
class PatchServiceInstanceOptions:
    guid: str | None = None
    env_id: str | None = None
    toolchain_id: str | None = None
    service_id: str | None = None
    parameters: ServiceInstanceParameters | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class DeleteServiceInstanceOptions:
    guid: str | None = None
    env_id: str | None = None
    toolchain_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class GetTektonPipelineOptions:
    guid: str | None = None
    env_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class PatchTektonPipelineOptions:
    guid: str | None = None
    env_id: str | None = None
    env_properties: list[EnvProperty] | None = None
    inputs: list[TektonPipelineInput] | None = None
    pipeline_definition_id: str | None = None
    triggers: list[TektonPipelineTrigger] | None = None
    worker: Worker | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class GetTektonPipelineDefinitionOptions:
    guid: str | None = None
    env_id: str | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")


@dataclass
class CreateTektonPipelineDefinitionOptions:
    guid: str | None = None
    env_id: str | None = None
    inputs: list[TektonPipelineInput] | None = None
    headers: dict[str, str] | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("guid", "env_id")
