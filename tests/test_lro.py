import pytest
from azure.core.exceptions import HttpResponseError

from azcops.core.errors import BackendRequestError, OperationTimedOut, UnexpectedError
from azcops.core.lro import LroExecutor, Operation


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Poller:
    def __init__(self, polls: int, clock: _Clock | None = None, result="done"):
        self.remaining = polls
        self.clock = clock
        self.waits: list[float | None] = []
        self._result = result

    def done(self) -> bool:
        return self.remaining <= 0

    def wait(self, timeout=None) -> None:
        self.waits.append(timeout)
        self.remaining -= 1
        if self.clock is not None:
            self.clock.now += timeout or 0

    def result(self, timeout=None):
        return self._result


def test_submit_waits_with_doubling_backoff_and_returns_result():
    poller = _Poller(polls=4)
    executor = LroExecutor(poll_interval=1, max_interval=4)

    result = executor.submit(Operation.START, "job1", lambda: poller)

    assert result == "done"
    assert poller.waits == [1, 2, 4, 4]


def test_submit_returns_immediately_when_already_done():
    poller = _Poller(polls=0, result=None)

    assert LroExecutor().submit(Operation.DELETE, "app1", lambda: poller) is None
    assert poller.waits == []


def test_submit_raises_after_deadline():
    clock = _Clock()
    poller = _Poller(polls=10, clock=clock)
    executor = LroExecutor(poll_interval=1, timeout=3, clock=clock)

    with pytest.raises(OperationTimedOut) as caught:
        executor.submit(Operation.CREATE_OR_UPDATE, "group1", lambda: poller)

    assert caught.value.operation == "create_or_update"
    assert caught.value.target == "group1"
    assert poller.waits == [1, 2]


def test_backend_failure_is_mapped_and_not_retried():
    attempts: list[int] = []

    def _begin():
        attempts.append(1)
        exc = HttpResponseError(message="Conflict")
        exc.status_code = 409
        raise exc

    with pytest.raises(BackendRequestError) as caught:
        LroExecutor().submit(Operation.CREATE_OR_UPDATE, "app1", _begin)

    assert caught.value.status_code == 409
    assert len(attempts) == 1


def test_other_failures_become_unexpected_errors():
    def _begin():
        raise AttributeError("template")

    with pytest.raises(UnexpectedError, match="AttributeError"):
        LroExecutor().submit(Operation.START, "job1", _begin)


def test_poll_interval_must_be_positive():
    with pytest.raises(ValueError, match="poll_interval"):
        LroExecutor(poll_interval=0)
