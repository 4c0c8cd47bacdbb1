"""
Blocking wait on long-running management operations.

Job create/replace, start, stop and delete return an LROPoller. Callers
block on the poller and get either the final resource or the remote error,
unchanged. Whatever happens while waiting (success, remote error,
KeyboardInterrupt), the poller is released on the way out and an
unfinished operation is logged as abandoned. Cleanup never masks the
error that ended the wait. Only one operation is outstanding per resource
at a time.
"""

import logging
from typing import Any, Protocol, TypeVar, runtime_checkable


logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class Poller(Protocol[T]):
    """The slice of azure.core.polling.LROPoller this module relies on."""

    def result(self, timeout: float | None = None) -> T:
        ...

    def done(self) -> bool:
        ...

    def status(self) -> str:
        ...


def await_operation(poller: Poller[T], description: str) -> T:
    """
    Block until a long-running operation completes.

    Args:
        poller: Poller returned by a begin_* SDK call
        description: Human-readable label used in log lines

    Returns:
        The operation's final result (None for start/stop/delete)

    Raises:
        AzureError: Propagated unchanged from the poller
    """
    logger.debug("Waiting for %s", description)
    completed = False
    try:
        result = poller.result()
        completed = True
        return result
    finally:
        _release(poller, description, completed)


def _release(poller: Any, description: str, completed: bool) -> None:
    """Scope-exit cleanup for a poller."""
    if completed:
        logger.debug("%s finished", description)
        return

    try:
        finished = poller.done()
    except Exception:
        finished = False

    if finished:
        logger.debug("%s failed", description)
    else:
        status = _safe_status(poller)
        logger.warning("Abandoning in-flight %s (status: %s)", description, status)


def _safe_status(poller: Any) -> str:
    try:
        return str(poller.status())
    except Exception:
        return "unknown"
