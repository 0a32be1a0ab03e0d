"""Test basic package functionality."""

import open_toolchain_sdk


def test_version():
    """Test that package version is defined."""
    assert hasattr(open_toolchain_sdk, "__version__")
    assert open_toolchain_sdk.__version__ == "0.1.0"


def test_user_agent_carries_version():
    """Test that the SDK identifies itself with the package version."""
    from open_toolchain_sdk.client import USER_AGENT

    assert USER_AGENT.startswith(f"open-toolchain-python-sdk/{open_toolchain_sdk.__version__}")
