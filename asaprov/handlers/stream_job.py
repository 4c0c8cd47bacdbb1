"""
Stream Analytics job handler.

Drives a job and its children through create, read, update and delete:

    create:  job -> set id -> functions -> inputs -> outputs -> transformation
             -> run-state -> read
    update:  run-state (if changed) -> job -> functions -> inputs -> outputs
             -> transformation -> read
    read:    parse id -> get job -> tags, job_state
    delete:  delete job (children go with it) -> clear id

All calls are sequential and blocking. The identifier is recorded right
after the job itself is created and before any child is submitted: deleting
the job cascades to its children, so as long as the identifier is known a
failed create can always be cleaned up by a later delete.
"""

import logging

from asaprov.builders import (
    expand_function,
    expand_input,
    expand_output,
    expand_streaming_job,
    expand_transformation,
)
from asaprov.client import ArmClient
from asaprov.handlers.base import ResourceHandler
from asaprov.lro import await_operation
from asaprov.resource_id import parse_stream_job_id
from asaprov.schemas import JobConfiguration, JobState, ResourceData
from asaprov.tags import flatten_tags


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Child submission
# -----------------------------------------------------------------------------


def set_functions(config: JobConfiguration, client: ArmClient, rg: str, job_name: str) -> None:
    for function in config.functions:
        result = client.functions.create_or_replace(rg, job_name, function.name, expand_function(function))
        logger.debug("Result from function creation is %r", result)


def set_inputs(config: JobConfiguration, client: ArmClient, rg: str, job_name: str) -> None:
    for job_input in config.inputs:
        result = client.inputs.create_or_replace(rg, job_name, job_input.name, expand_input(job_input))
        logger.debug("Result from input creation is %r", result)


def set_outputs(config: JobConfiguration, client: ArmClient, rg: str, job_name: str) -> None:
    for job_output in config.outputs:
        result = client.outputs.create_or_replace(rg, job_name, job_output.name, expand_output(job_output))
        logger.debug("Result from output creation is %r", result)


def set_transformation(config: JobConfiguration, client: ArmClient, rg: str, job_name: str) -> None:
    transformation = config.transformation
    if transformation is None:
        return
    result = client.transformations.create_or_replace(
        rg, job_name, transformation.name, expand_transformation(transformation)
    )
    logger.debug("Created transformation with fields %r", result)


def set_job_state(config: JobConfiguration, client: ArmClient, rg: str, job_name: str) -> None:
    """
    Drive the job to the declared run-state.

    No-op when job_state is not declared. Start and stop are long-running
    operations; a failure of either is a hard error.
    """
    if config.job_state is None:
        return

    if config.job_state == JobState.STOPPED:
        logger.info("Stopping job %s", job_name, extra={"resource": job_name, "operation": "stop"})
        await_operation(client.streaming_jobs.begin_stop(rg, job_name), f"stop of job {job_name}")
    elif config.job_state == JobState.RUNNING:
        logger.info("Starting job %s", job_name, extra={"resource": job_name, "operation": "start"})
        await_operation(client.streaming_jobs.begin_start(rg, job_name), f"start of job {job_name}")


# -----------------------------------------------------------------------------
# Handler
# -----------------------------------------------------------------------------


class StreamAnalyticsJobHandler(ResourceHandler):
    """
    Lifecycle handler for Stream Analytics jobs.

    Usage:
        handler = StreamAnalyticsJobHandler()
        data = ResourceData(JobConfiguration.from_dict(block))
        handler.create(data, client)
        data.id        # set even if a child submission failed
    """

    resource_type = "stream_analytics_job"

    def create(self, data: ResourceData, client: ArmClient) -> None:
        config = self._require_config(data)
        rg, job_name = config.resource_group_name, config.name

        logger.info("Creating job %s in %s", job_name, rg, extra={"resource": job_name, "operation": "create"})
        self._submit_job(data, client)
        self._submit_children(config, client)

        # Run-state last: a job needs its pipeline attached before it can run.
        set_job_state(config, client, rg, job_name)

        self.read(data, client)

    def update(self, data: ResourceData, client: ArmClient) -> None:
        config = self._require_config(data)
        rg, job_name = config.resource_group_name, config.name

        # Toggling run-state alone should not need a recreation.
        if data.has_change("job_state"):
            set_job_state(config, client, rg, job_name)

        # Full resubmission of the job and every child; unchanged bodies are
        # harmless because each call is create-or-replace.
        logger.info("Updating job %s in %s", job_name, rg, extra={"resource": job_name, "operation": "update"})
        self._submit_job(data, client)
        self._submit_children(config, client)

        self.read(data, client)

    def read(self, data: ResourceData, client: ArmClient) -> None:
        job_id = parse_stream_job_id(data.id)

        # A job deleted out of band surfaces as ResourceNotFoundError here.
        job = client.streaming_jobs.get(job_id.resource_group, job_id.job_name)

        data.set("tags", flatten_tags(job.tags))
        data.set("job_state", job.job_state)

    def delete(self, data: ResourceData, client: ArmClient) -> None:
        job_name = data.get("name")
        rg = data.get("resource_group_name")

        logger.info("Deleting job %s in %s", job_name, rg, extra={"resource": job_name, "operation": "delete"})
        await_operation(client.streaming_jobs.begin_delete(rg, job_name), f"deletion of job {job_name}")

        data.set_id("")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _submit_job(self, data: ResourceData, client: ArmClient) -> None:
        config = data.config
        job = expand_streaming_job(config)

        poller = client.streaming_jobs.begin_create_or_replace(config.resource_group_name, config.name, job)
        result = await_operation(poller, f"create/replace of job {config.name}")

        # Record before any child is submitted; see module docstring.
        data.set_id(result.id)

    def _submit_children(self, config: JobConfiguration, client: ArmClient) -> None:
        rg, job_name = config.resource_group_name, config.name
        set_functions(config, client, rg, job_name)
        set_inputs(config, client, rg, job_name)
        set_outputs(config, client, rg, job_name)
        set_transformation(config, client, rg, job_name)

    @staticmethod
    def _require_config(data: ResourceData) -> JobConfiguration:
        if data.config is None:
            raise ValueError("create/update require a declared configuration")
        return data.config
