"""
Parse persisted Stream Analytics job identifiers.

A job ID looks like:
    /subscriptions/{sub}/resourceGroups/{rg}/providers/Microsoft.StreamAnalytics/streamingjobs/{name}

Parsing is delegated to azure-mgmt-core; this module only checks that the
result actually addresses a streaming job.
"""

from dataclasses import dataclass

from azure.mgmt.core.tools import is_valid_resource_id, parse_resource_id

from asaprov.errors import ResourceIdError


STREAM_ANALYTICS_NAMESPACE = "Microsoft.StreamAnalytics"
STREAMING_JOBS_TYPE = "streamingjobs"


@dataclass(frozen=True)
class StreamJobId:
    """Structural components of a streaming job identifier."""
    subscription_id: str
    resource_group: str
    job_name: str


def parse_stream_job_id(resource_id: str) -> StreamJobId:
    """
    Parse a persisted identifier into resource group and job name.

    Args:
        resource_id: Identifier recorded after job creation

    Returns:
        StreamJobId

    Raises:
        ResourceIdError: If the identifier is empty, malformed, or not a
            streaming job
    """
    if not resource_id:
        raise ResourceIdError(resource_id, "identifier is empty")
    if not is_valid_resource_id(resource_id):
        raise ResourceIdError(resource_id, "not a valid Azure resource ID")

    parts = parse_resource_id(resource_id)
    namespace = parts.get("namespace", "")
    resource_type = parts.get("type", "")

    if namespace.lower() != STREAM_ANALYTICS_NAMESPACE.lower() or resource_type.lower() != STREAMING_JOBS_TYPE:
        raise ResourceIdError(
            resource_id,
            f"expected {STREAM_ANALYTICS_NAMESPACE}/{STREAMING_JOBS_TYPE}, got {namespace}/{resource_type}",
        )
    if parts.get("children"):
        raise ResourceIdError(resource_id, "identifier addresses a child resource, not a job")
    if not parts.get("resource_group") or not parts.get("name"):
        raise ResourceIdError(resource_id, "missing resource group or job name")

    return StreamJobId(
        subscription_id=parts.get("subscription", ""),
        resource_group=parts["resource_group"],
        job_name=parts["name"],
    )


def format_stream_job_id(subscription_id: str, resource_group: str, job_name: str) -> str:
    """Build the identifier the API would return for a job."""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{STREAM_ANALYTICS_NAMESPACE}/{STREAMING_JOBS_TYPE}/{job_name}"
    )
