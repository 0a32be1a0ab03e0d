"""Pytest configuration and shared fixtures for open-toolchain-sdk tests."""

import pytest

from open_toolchain_sdk.testing import RequestRecorder, json_response

ENV_ID = "ibm:yp:us-south"

TOOLCHAIN_JSON = {
    "toolchain_guid": "ToolchainGUID",
    "name": "Name",
    "description": "Description",
    "key": "Key",
    "container": {"guid": "GUID", "type": "Type"},
    "crn": "CRN",
    "created": "2019-01-01T12:00:00.000Z",
    "updated_at": "2019-01-01T12:00:00.000Z",
    "creator": "Creator",
    "generator": "Generator",
    "template": {
        "getting_started": "GettingStarted",
        "services_total": 13,
        "name": "Name",
        "type": "Type",
        "url": "URL",
        "source": "Source",
        "locale": "Locale",
    },
    "tags": ["Tags"],
    "lifecycle_messaging_webhook_id": "LifecycleMessagingWebhookID",
    "region_id": "RegionID",
    "services": [
        {
            "broker_id": "BrokerID",
            "service_id": "ServiceID",
            "container": {"guid": "GUID", "type": "Type"},
            "updated_at": "2019-01-01T12:00:00.000Z",
            "parameters": {"api_token": "APIToken", "channel_name": "ChannelName", "team_url": "TeamURL"},
            "status": {"state": "State"},
            "dashboard_url": "DashboardURL",
            "region_id": "RegionID",
            "instance_id": "InstanceID",
            "description": "Description",
            "tags": ["Tags"],
            "url": "URL",
            "toolchain_binding": {"status": {"state": "State"}, "name": "Name", "webhook_id": "WebhookID"},
        }
    ],
}


@pytest.fixture(autouse=True)
def clear_env(monkeypatch, tmp_path):
    """Auto-cleanup: Clear service configuration before each test.

    Also runs each test from an empty directory with an empty home so no
    stray ibm-credentials.env is picked up.
    """
    import os

    test_prefixes = ("OPEN_TOOLCHAIN_", "TEST_SERVICE_", "IBM_CREDENTIALS_FILE")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)

    yield


@pytest.fixture
def env_id():
    return ENV_ID


@pytest.fixture
def toolchain_json():
    return TOOLCHAIN_JSON


@pytest.fixture
def recorder():
    """Recorder answering 200 with no body unless a test replaces the handler."""
    return RequestRecorder()


@pytest.fixture
def toolchain_recorder():
    return RequestRecorder(lambda request: json_response(200, TOOLCHAIN_JSON))
