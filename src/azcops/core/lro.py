"""Long-running operation execution.

Create, delete and start calls return a poller from the SDK. The executor
submits the call once, blocks until the poller reaches a terminal state and
returns the final result. Failures are mapped into the core error taxonomy;
nothing is retried here.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Protocol

from azcops.core.errors import OperationTimedOut, map_errors

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Kinds of long-running operations."""

    CREATE_OR_UPDATE = "create_or_update"
    DELETE = "delete"
    START = "start"


class Poller(Protocol):
    """Subset of ``azure.core.polling.LROPoller`` used by the executor."""

    def done(self) -> bool: ...

    def wait(self, timeout: float | None = None) -> None: ...

    def result(self, timeout: float | None = None) -> Any: ...


class LroExecutor:
    """
    Submit long-running operations and wait for their terminal state.

    Polling starts at ``poll_interval`` seconds and doubles up to
    ``max_interval``. When ``timeout`` is set, an operation still running
    past the deadline raises ``OperationTimedOut``; the remote operation
    itself is not cancelled.
    """

    def __init__(
        self,
        poll_interval: float = 5.0,
        max_interval: float = 30.0,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self.poll_interval = poll_interval
        self.max_interval = max(max_interval, poll_interval)
        self.timeout = timeout
        self._clock = clock

    def submit(
        self,
        operation: Operation,
        target: str,
        begin: Callable[[], Poller],
        timeout: float | None = None,
    ) -> Any:
        """
        Start an operation and block until it finishes.

        Args:
            operation: Operation kind, used for logging and error context.
            target: Identifier of the resource being acted on.
            begin: Callable that starts the operation and returns a poller.
            timeout: Per-call deadline overriding the executor default.

        Returns:
            The poller's final result (None for deletes).

        Raises:
            BackendRequestError: If the backend rejected the operation.
            OperationTimedOut: If the deadline passed first.
            UnexpectedError: For any other failure.
        """
        timeout = self.timeout if timeout is None else timeout
        with map_errors(operation.value, target):
            logger.debug("Submitting %s for %s", operation.value, target)
            poller = begin()
            deadline = None if timeout is None else self._clock() + timeout
            interval = self.poll_interval
            while not poller.done():
                if deadline is not None and self._clock() >= deadline:
                    raise OperationTimedOut(
                        f"Operation still running after {timeout:g}s",
                        operation=operation.value,
                        target=target,
                    )
                poller.wait(interval)
                interval = min(interval * 2, self.max_interval)
            result = poller.result()
            logger.debug("Completed %s for %s", operation.value, target)
            return result
