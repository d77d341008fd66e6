import json

import pytest
import requests
from azure.core.exceptions import ClientAuthenticationError

from azcops.core.config import Settings
from azcops.core.errors import ExternalCallFailed
from azcops.core.executions import ExecutionDetailFetcher

EXEC_ID = (
    "/subscriptions/sub-1/resourceGroups/rg1/providers/Microsoft.App/jobs/job1"
    "/executions/job1-abc"
)


class _Response:
    def __init__(self, status_code: int, payload=None, invalid: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._invalid = invalid

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._invalid:
            raise ValueError("not json")
        return self._payload


class _Session:
    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[dict] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _fetcher(session: _Session) -> ExecutionDetailFetcher:
    return ExecutionDetailFetcher(Settings(), lambda: "tok", session=session)


def test_fetch_sends_bearer_token_and_api_version():
    url = f"https://management.azure.com{EXEC_ID}"
    session = _Session({url: _Response(200, {"name": "job1-abc", "status": "Running"})})

    details = _fetcher(session).fetch(EXEC_ID)

    assert json.loads(details) == {"name": "job1-abc", "status": "Running"}
    assert details.startswith("{\n  ")
    assert session.calls == [
        {
            "url": url,
            "params": {"api-version": "2023-04-01-preview"},
            "headers": {"Authorization": "Bearer tok"},
            "timeout": 30.0,
        }
    ]


def test_fetch_raises_on_non_success_status():
    url = f"https://management.azure.com{EXEC_ID}"
    session = _Session({url: _Response(404)})

    with pytest.raises(ExternalCallFailed) as caught:
        _fetcher(session).fetch(EXEC_ID)

    assert caught.value.status_code == 404
    assert caught.value.url == url


def test_fetch_raises_on_transport_error_and_invalid_json():
    bad = "/subscriptions/s/executions/bad"
    broken = "/subscriptions/s/executions/broken"
    session = _Session(
        {
            f"https://management.azure.com{bad}": requests.ConnectionError("reset"),
            f"https://management.azure.com{broken}": _Response(200, invalid=True),
        }
    )
    fetcher = _fetcher(session)

    with pytest.raises(ExternalCallFailed, match="reset"):
        fetcher.fetch(bad)
    with pytest.raises(ExternalCallFailed, match="not valid JSON"):
        fetcher.fetch(broken)


def test_collect_reports_failures_per_item_and_continues():
    ok_id = "/subscriptions/s/executions/ok"
    bad_id = "/subscriptions/s/executions/bad"
    session = _Session(
        {
            f"https://management.azure.com{bad_id}": _Response(500),
            f"https://management.azure.com{ok_id}": _Response(200, {"ok": True}),
        }
    )
    seen: list[str] = []

    results = _fetcher(session).collect(
        [bad_id, ok_id], on_item=lambda d: seen.append(d.execution_id)
    )

    assert [r.execution_id for r in results] == [bad_id, ok_id]
    assert results[0].ok is False and "500" in (results[0].error or "")
    assert results[1].ok is True and json.loads(results[1].details) == {"ok": True}
    assert seen == [bad_id, ok_id]


def test_collect_reports_token_failures_per_item():
    first = "/subscriptions/s/executions/e1"
    second = "/subscriptions/s/executions/e2"
    session = _Session({})

    def token() -> str:
        raise ClientAuthenticationError("token expired")

    results = ExecutionDetailFetcher(Settings(), token, session=session).collect(
        [first, second]
    )

    assert [r.execution_id for r in results] == [first, second]
    assert all(not r.ok and "token expired" in (r.error or "") for r in results)
    assert session.calls == []
