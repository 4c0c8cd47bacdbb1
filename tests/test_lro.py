"""Tests for blocking on long-running operations.

Tests cover:
- Result passthrough
- Remote errors propagate unchanged
- Interrupted waits release the poller and log the abandoned operation
- Cleanup failures never mask the original error
"""

import logging

import pytest
from azure.core.exceptions import HttpResponseError

from asaprov.lro import Poller, await_operation

from conftest import FakePoller


class InterruptedPoller(FakePoller):
    """Poller whose wait is interrupted before the operation finishes."""

    def __init__(self, status="InProgress", status_error=None):
        super().__init__(error=KeyboardInterrupt(), done=False, status=status)
        self._status_error = status_error

    def status(self):
        if self._status_error is not None:
            raise self._status_error
        return super().status()


class TestAwaitOperation:
    """Tests for await_operation."""

    def test_fake_poller_satisfies_protocol(self):
        assert isinstance(FakePoller(), Poller)

    def test_returns_result(self):
        assert await_operation(FakePoller(result="job"), "create of job j") == "job"

    def test_remote_error_propagates_unchanged(self, caplog):
        error = HttpResponseError(message="InvalidSku")
        caplog.set_level(logging.DEBUG, logger="asaprov.lro")

        with pytest.raises(HttpResponseError) as exc_info:
            await_operation(FakePoller(error=error), "create of job j")

        assert exc_info.value is error
        assert "create of job j failed" in caplog.text
        assert "Abandoning" not in caplog.text

    def test_interrupted_wait_is_logged_as_abandoned(self, caplog):
        caplog.set_level(logging.DEBUG, logger="asaprov.lro")

        with pytest.raises(KeyboardInterrupt):
            await_operation(InterruptedPoller(), "start of job j")

        assert "Abandoning in-flight start of job j (status: InProgress)" in caplog.text

    def test_status_failure_does_not_mask_interrupt(self, caplog):
        caplog.set_level(logging.DEBUG, logger="asaprov.lro")
        poller = InterruptedPoller(status_error=RuntimeError("transport closed"))

        with pytest.raises(KeyboardInterrupt):
            await_operation(poller, "stop of job j")

        assert "(status: unknown)" in caplog.text
