"""Shared fixtures: declared job blocks and a recording fake of the management client."""

import logging
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from asaprov.client import ArmClient
from asaprov.config import AsaprovConfig
from asaprov.resource_id import format_stream_job_id
from asaprov.schemas import JobConfiguration


SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"


# -----------------------------------------------------------------------------
# Fake management client
# -----------------------------------------------------------------------------


class FakePoller:
    """Stands in for azure.core.polling.LROPoller."""

    def __init__(self, result=None, error=None, done=True, status="Succeeded"):
        self._result = result
        self._error = error
        self._done = done
        self._status = status

    def result(self, timeout=None):
        if self._error is not None:
            raise self._error
        return self._result

    def done(self):
        return self._done

    def status(self):
        return self._status


class FakeStreamingJobs:
    """
    Job-level operations.

    Every call is appended to the shared call log as (operation, job_name).
    `errors` maps an operation name to the exception its poller raises.
    """

    def __init__(self, calls):
        self.calls = calls
        self.errors = {}
        self.submitted = []
        self.job_state = "Created"
        self.tags = None

    def begin_create_or_replace(self, resource_group, job_name, streaming_job):
        self.calls.append(("begin_create_or_replace", job_name))
        self.submitted.append(streaming_job)
        error = self.errors.get("begin_create_or_replace")
        if error is None:
            self.tags = streaming_job.tags
        job = SimpleNamespace(id=format_stream_job_id(SUBSCRIPTION_ID, resource_group, job_name))
        return FakePoller(result=job, error=error)

    def get(self, resource_group, job_name):
        self.calls.append(("get", job_name))
        if "get" in self.errors:
            raise self.errors["get"]
        return SimpleNamespace(
            id=format_stream_job_id(SUBSCRIPTION_ID, resource_group, job_name),
            tags=self.tags,
            job_state=self.job_state,
        )

    def begin_start(self, resource_group, job_name):
        return self._run_state("begin_start", job_name, "Running")

    def begin_stop(self, resource_group, job_name):
        return self._run_state("begin_stop", job_name, "Stopped")

    def begin_delete(self, resource_group, job_name):
        self.calls.append(("begin_delete", job_name))
        return FakePoller(error=self.errors.get("begin_delete"))

    def _run_state(self, operation, job_name, new_state):
        self.calls.append((operation, job_name))
        error = self.errors.get(operation)
        if error is None:
            self.job_state = new_state
        return FakePoller(error=error)


class FakeChildOperations:
    """
    create_or_replace for one child kind.

    Calls are logged as (kind, child_name). `errors` maps a child name to
    the exception raised when that child is submitted.
    """

    def __init__(self, kind, calls):
        self.kind = kind
        self.calls = calls
        self.errors = {}
        self.submitted = []

    def create_or_replace(self, resource_group, job_name, child_name, model):
        self.calls.append((self.kind, child_name))
        if child_name in self.errors:
            raise self.errors[child_name]
        self.submitted.append(model)
        return model


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def arm_client(call_log):
    """ArmClient whose operation groups record into call_log."""
    return ArmClient(
        streaming_jobs=FakeStreamingJobs(call_log),
        functions=FakeChildOperations("functions", call_log),
        inputs=FakeChildOperations("inputs", call_log),
        outputs=FakeChildOperations("outputs", call_log),
        transformations=FakeChildOperations("transformations", call_log),
        subscription_id=SUBSCRIPTION_ID,
    )


# -----------------------------------------------------------------------------
# Declared blocks
# -----------------------------------------------------------------------------


def event_hub_block(**overrides):
    block = {
        "service_bus_namespace": "ingest-ns",
        "event_hub_name": "clicks",
        "shared_access_policy_name": "RootManageSharedAccessKey",
        "shared_access_policy_key": "c2VjcmV0",
    }
    block.update(overrides)
    return block


def blob_block(**overrides):
    block = {
        "storage_account_name": "archive",
        "storage_account_key": "a2V5",
        "container": "events",
        "path_pattern": "{date}/{time}",
        "date_format": "yyyy/MM/dd",
        "time_format": "HH",
    }
    block.update(overrides)
    return block


def job_block(**overrides):
    """A job with one input, one output and a transformation."""
    block = {
        "name": "job1",
        "resource_group_name": "analytics-rg",
        "location": "West Europe",
        "sku": "Standard",
        "job_input": [
            {
                "name": "in1",
                "type": "Stream",
                "serialization": {"type": "Json", "encoding": "UTF8"},
                "event_hub": event_hub_block(),
            }
        ],
        "job_output": [
            {
                "name": "out1",
                "serialization": {"type": "Csv", "field_delimiter": ","},
                "blob": blob_block(),
            }
        ],
        "transformation": {
            "name": "t1",
            "query": "SELECT * INTO [out1] FROM [in1]",
            "streaming_units": 3,
        },
    }
    block.update(overrides)
    return block


def bare_job_block(**overrides):
    """A job with no children at all."""
    block = {
        "name": "job1",
        "resource_group_name": "analytics-rg",
        "location": "westeurope",
        "sku": "Standard",
    }
    block.update(overrides)
    return block


def make_config(**overrides) -> JobConfiguration:
    return JobConfiguration.from_dict(job_block(**overrides))


# -----------------------------------------------------------------------------
# CLI and logging
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_asaprov_logger():
    """Drop handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger("asaprov")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def test_config(tmp_path):
    return AsaprovConfig(
        subscription_id=SUBSCRIPTION_ID,
        state_dir=str(tmp_path / "state"),
        log_level="WARNING",
    )


@pytest.fixture
def cli_env(test_config, arm_client):
    """Patch config loading and client construction for CLI commands."""
    with patch("asaprov.cli.load_config", return_value=test_config), \
         patch("asaprov.cli.build_arm_client", return_value=arm_client):
        yield SimpleNamespace(config=test_config, client=arm_client)
