"""Tests for ArmClient construction."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from asaprov.client import ArmClient, build_arm_client
from asaprov.config import AsaprovConfig, ConfigError


def _sdk_client():
    return SimpleNamespace(
        streaming_jobs="jobs",
        functions="functions",
        inputs="inputs",
        outputs="outputs",
        transformations="transformations",
    )


class TestArmClient:
    """Tests for ArmClient and build_arm_client."""

    def test_from_management_client(self):
        client = ArmClient.from_management_client(_sdk_client(), subscription_id="sub")

        assert client.streaming_jobs == "jobs"
        assert client.transformations == "transformations"
        assert client.subscription_id == "sub"

    def test_build_requires_subscription(self, monkeypatch):
        monkeypatch.delenv("AZURE_SUBSCRIPTION_ID", raising=False)

        with pytest.raises(ConfigError, match="No subscription configured"):
            build_arm_client(AsaprovConfig(), credential=object())

    def test_build_uses_configured_subscription(self, monkeypatch):
        monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "from-environment")
        credential = object()

        with patch("azure.mgmt.streamanalytics.StreamAnalyticsManagementClient",
                   return_value=_sdk_client()) as mock_cls:
            client = build_arm_client(AsaprovConfig(subscription_id="from-config"), credential=credential)

        mock_cls.assert_called_once_with(credential, "from-config")
        assert client.subscription_id == "from-config"
        assert client.inputs == "inputs"

    def test_build_falls_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "from-environment")

        with patch("azure.mgmt.streamanalytics.StreamAnalyticsManagementClient",
                   return_value=_sdk_client()) as mock_cls:
            build_arm_client(credential=object())

        assert mock_cls.call_args.args[1] == "from-environment"
