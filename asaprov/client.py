"""
ArmClient - the management client context passed to every lifecycle call.

The handler never constructs clients or reads credentials itself. The
caller builds an ArmClient once and threads it through create, read,
update and delete, which keeps the handler testable with fakes and free
of global state.

The operation groups mirror StreamAnalyticsManagementClient:
- streaming_jobs: begin_create_or_replace, get, begin_delete, begin_start, begin_stop
- functions / inputs / outputs / transformations: create_or_replace
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from asaprov.config import AsaprovConfig, ConfigError


logger = logging.getLogger(__name__)


@dataclass
class ArmClient:
    """
    Operation groups used by the Stream Analytics job handler.

    Attributes:
        streaming_jobs: Job-level operations (long-running)
        functions: Function create-or-replace
        inputs: Input create-or-replace
        outputs: Output create-or-replace
        transformations: Transformation create-or-replace
        subscription_id: Subscription the client is bound to
    """
    streaming_jobs: Any
    functions: Any
    inputs: Any
    outputs: Any
    transformations: Any
    subscription_id: str = ""

    @classmethod
    def from_management_client(cls, sdk_client: Any, subscription_id: str = "") -> "ArmClient":
        """Wrap an existing StreamAnalyticsManagementClient."""
        return cls(
            streaming_jobs=sdk_client.streaming_jobs,
            functions=sdk_client.functions,
            inputs=sdk_client.inputs,
            outputs=sdk_client.outputs,
            transformations=sdk_client.transformations,
            subscription_id=subscription_id,
        )


def build_arm_client(
    config: Optional[AsaprovConfig] = None,
    credential: Optional[Any] = None,
) -> ArmClient:
    """
    Build an ArmClient backed by the Azure SDK.

    Args:
        config: Loaded configuration (subscription_id); falls back to
            AZURE_SUBSCRIPTION_ID when absent
        credential: Token credential; defaults to DefaultAzureCredential

    Returns:
        ArmClient bound to the subscription

    Raises:
        ConfigError: If no subscription ID is configured
    """
    from azure.identity import DefaultAzureCredential
    from azure.mgmt.streamanalytics import StreamAnalyticsManagementClient

    subscription_id = (config.subscription_id if config else None) or os.environ.get("AZURE_SUBSCRIPTION_ID")
    if not subscription_id:
        raise ConfigError(
            "No subscription configured. Set subscription_id in config.yaml "
            "or AZURE_SUBSCRIPTION_ID in the environment."
        )

    if credential is None:
        credential = DefaultAzureCredential()

    logger.debug("Creating Stream Analytics client for subscription %s", subscription_id)
    sdk_client = StreamAnalyticsManagementClient(credential, subscription_id)
    return ArmClient.from_management_client(sdk_client, subscription_id=subscription_id)
