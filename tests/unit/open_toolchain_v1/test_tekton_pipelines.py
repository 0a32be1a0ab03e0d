"""Tests for the Tekton pipeline operations."""

import pytest

from open_toolchain_sdk.errors import DecodeError, ValidationError
from open_toolchain_sdk.open_toolchain_v1 import (
    CreateTektonPipelineDefinitionOptions,
    EnvProperty,
    GetTektonPipelineDefinitionOptions,
    GetTektonPipelineOptions,
    InputScmSource,
    PatchTektonPipelineOptions,
    TektonPipelineInput,
    TektonPipelineTrigger,
    TriggerEvents,
    TriggerScmSource,
    Worker,
)
from open_toolchain_sdk.testing import RequestRecorder, build_service, json_response

PIPELINE_JSON = {
    "id": "pipeline-1",
    "name": "my-pipeline",
    "status": "configured",
    "resourceGroupId": "rg-1",
    "toolchainId": "toolchain-1",
    "toolchainCRN": "crn:v1:toolchain",
    "dashboard_url": "https://cloud.ibm.com/devops/pipelines/tekton/pipeline-1",
    "pipelineDefinitionId": "definition-1",
    "created": "2021-03-01T10:00:00.000Z",
    "updated_at": "2021-03-02T10:00:00.000Z",
    "build_number": 7,
    "envProperties": [{"name": "region", "value": "us-south", "type": "TEXT"}],
    "inputs": [
        {
            "type": "scm",
            "serviceInstanceId": "repo-1",
            "shardDefinitionId": "shard-1",
            "scmSource": {"path": ".tekton", "url": "https://github.com/a/b", "type": "GitHub", "branch": "main"},
        }
    ],
    "triggers": [
        {
            "id": "trigger-1",
            "name": "on push",
            "eventListener": "listener",
            "disabled": False,
            "scmSource": {"url": "https://github.com/a/b", "type": "GitHub", "branch": "main"},
            "type": "scm",
            "events": {"push": True, "pull_request": False},
            "serviceInstanceId": "repo-1",
        }
    ],
    "worker": {"workerId": "public", "workerName": "IBM Managed workers", "workerType": "public"},
}

DEFINITION_JSON = {
    "id": "definition-1",
    "pipelineId": "pipeline-1",
    "repoUrl": "https://github.com/a/b",
    "branch": "main",
    "path": ".tekton",
    "sha": "abc123",
    "type": "tekton",
    "shardRepos": ["https://github.com/a/shard"],
}


class TestGetTektonPipeline:
    @pytest.mark.unit
    async def test_decodes_camel_case_fields(self, env_id):
        recorder = RequestRecorder(lambda request: json_response(200, PIPELINE_JSON))
        service = build_service(recorder)

        response = await service.get_tekton_pipeline(GetTektonPipelineOptions(guid="pipeline-1", env_id=env_id))
        pipeline = response.result

        assert recorder.last.url.path == "/api/devops/pipelines/tekton/api/v1/pipeline-1"
        assert pipeline.toolchain_crn == "crn:v1:toolchain"
        assert pipeline.pipeline_definition_id == "definition-1"
        assert pipeline.build_number == 7
        assert pipeline.env_properties == [EnvProperty(name="region", value="us-south", type="TEXT")]
        assert pipeline.inputs[0].scm_source.path == ".tekton"
        assert pipeline.triggers[0].event_listener == "listener"
        assert pipeline.triggers[0].disabled is False
        assert pipeline.triggers[0].events == TriggerEvents(push=True, pull_request=False)
        assert pipeline.worker.worker_name == "IBM Managed workers"

    @pytest.mark.unit
    async def test_wrong_shape_is_decode_error(self, env_id):
        service = build_service(lambda request: json_response(200, {"envProperties": "not-a-list"}))

        with pytest.raises(DecodeError) as exc_info:
            await service.get_tekton_pipeline(GetTektonPipelineOptions(guid="pipeline-1", env_id=env_id))

        assert exc_info.value.response.status_code == 200


class TestPatchTektonPipeline:
    @pytest.mark.unit
    async def test_request_shape(self, env_id):
        recorder = RequestRecorder(lambda request: json_response(200, PIPELINE_JSON))
        service = build_service(recorder)

        response = await service.patch_tekton_pipeline(
            PatchTektonPipelineOptions(
                guid="pipeline-1",
                env_id=env_id,
                env_properties=[EnvProperty(name="region", value="eu-de", type="TEXT")],
                inputs=[
                    TektonPipelineInput(
                        type="scm",
                        service_instance_id="repo-1",
                        scm_source=InputScmSource(path=".tekton", branch="main", blind_connection=False),
                    )
                ],
                triggers=[
                    TektonPipelineTrigger(
                        name="on push",
                        type="scm",
                        scm_source=TriggerScmSource(branch="main"),
                        events=TriggerEvents(push=True),
                    )
                ],
                worker=Worker(worker_id="public"),
            )
        )

        assert response.result.id == "pipeline-1"
        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/devops/pipelines/tekton/api/v1/pipeline-1/config"
        assert recorder.last_json() == {
            "envProperties": [{"name": "region", "value": "eu-de", "type": "TEXT"}],
            "inputs": [
                {
                    "type": "scm",
                    "serviceInstanceId": "repo-1",
                    "scmSource": {"path": ".tekton", "blindConnection": False, "branch": "main"},
                }
            ],
            "triggers": [
                {"name": "on push", "scmSource": {"branch": "main"}, "type": "scm", "events": {"push": True}}
            ],
            "worker": {"workerId": "public"},
        }

    @pytest.mark.unit
    async def test_only_set_fields_are_sent(self, env_id):
        recorder = RequestRecorder(lambda request: json_response(200, PIPELINE_JSON))
        service = build_service(recorder)

        await service.patch_tekton_pipeline(
            PatchTektonPipelineOptions(guid="pipeline-1", env_id=env_id, pipeline_definition_id="definition-2")
        )

        assert recorder.last_json() == {"pipelineDefinitionId": "definition-2"}

    @pytest.mark.unit
    async def test_no_content_is_success(self, env_id):
        service = build_service(lambda request: json_response(204))

        response = await service.patch_tekton_pipeline(PatchTektonPipelineOptions(guid="pipeline-1", env_id=env_id))

        assert response.status_code == 204
        assert response.result is None


class TestTektonPipelineDefinition:
    @pytest.mark.unit
    async def test_get(self, env_id):
        recorder = RequestRecorder(lambda request: json_response(200, DEFINITION_JSON))
        service = build_service(recorder)

        response = await service.get_tekton_pipeline_definition(
            GetTektonPipelineDefinitionOptions(guid="pipeline-1", env_id=env_id)
        )

        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/api/devops/pipelines/tekton/api/v1/pipeline-1/definition"
        assert response.result.repo_url == "https://github.com/a/b"
        assert response.result.shard_repos == ["https://github.com/a/shard"]

    @pytest.mark.unit
    async def test_create(self, env_id):
        recorder = RequestRecorder(
            lambda request: json_response(
                200,
                {"definition": DEFINITION_JSON, "inputs": [{"type": "scm", "serviceInstanceId": "repo-1"}]},
            )
        )
        service = build_service(recorder)

        response = await service.create_tekton_pipeline_definition(
            CreateTektonPipelineDefinitionOptions(
                guid="pipeline-1",
                env_id=env_id,
                inputs=[TektonPipelineInput(type="scm", service_instance_id="repo-1")],
            )
        )

        assert recorder.last.method == "POST"
        assert recorder.last_json() == {"inputs": [{"type": "scm", "serviceInstanceId": "repo-1"}]}
        assert response.result.definition.pipeline_id == "pipeline-1"
        assert response.result.inputs[0].service_instance_id == "repo-1"

    @pytest.mark.unit
    async def test_create_requires_guid(self, recorder, env_id):
        service = build_service(recorder)

        with pytest.raises(ValidationError, match="guid"):
            await service.create_tekton_pipeline_definition(CreateTektonPipelineDefinitionOptions(env_id=env_id))

        assert recorder.count == 0
