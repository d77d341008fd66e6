"""Job execution detail retrieval.

Execution details are read straight from the management REST endpoint with
a bearer token, outside the SDK, and returned as pretty-printed JSON. When
details are collected for several executions, each failure is recorded on
its own item and the remaining executions are still fetched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Iterable

import requests
from azure.core.exceptions import AzureError

from azcops.core.config import Settings
from azcops.core.errors import ExternalCallFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionDetail:
    """Details (or the fetch error) for a single job execution."""

    execution_id: str
    details: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ExecutionDetailFetcher:
    """Fetch execution details over HTTP with a management-plane token."""

    def __init__(
        self,
        settings: Settings,
        token: Callable[[], str],
        session: requests.Session | None = None,
    ):
        self.settings = settings
        self._token = token
        self._session = session or requests.Session()

    def url_for(self, execution_id: str) -> str:
        return f"{self.settings.management_endpoint}{execution_id}"

    def fetch(self, execution_id: str) -> str:
        """
        Return the pretty-printed JSON details of one execution.

        Raises:
            ExternalCallFailed: On a token failure, a non-success status or
                a transport error.
        """
        url = self.url_for(execution_id)
        logger.debug("Retrieving execution details for %s", execution_id)
        try:
            token = self._token()
        except AzureError as exc:
            raise ExternalCallFailed(
                f"Failed to acquire a management token: {exc}",
                url=url,
                operation="get execution details",
                target=execution_id,
            ) from exc
        try:
            response = self._session.get(
                url,
                params={"api-version": self.settings.execution_api_version},
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as exc:
            raise ExternalCallFailed(
                f"Failed to retrieve execution details: {exc}",
                url=url,
                operation="get execution details",
                target=execution_id,
            ) from exc

        if not response.ok:
            raise ExternalCallFailed(
                "Failed to retrieve execution details from the API "
                f"({response.status_code})",
                status_code=response.status_code,
                url=url,
                operation="get execution details",
                target=execution_id,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ExternalCallFailed(
                "Execution details are not valid JSON",
                status_code=response.status_code,
                url=url,
                operation="get execution details",
                target=execution_id,
            ) from exc
        return json.dumps(payload, indent=2)

    def collect(
        self,
        execution_ids: Iterable[str],
        on_item: Callable[[ExecutionDetail], None] | None = None,
    ) -> list[ExecutionDetail]:
        """
        Fetch details for each execution, recording failures per item.

        Args:
            execution_ids: Execution resource ids, in output order.
            on_item: Optional callback invoked after each item.
        """
        results: list[ExecutionDetail] = []
        for execution_id in execution_ids:
            try:
                detail = ExecutionDetail(execution_id, details=self.fetch(execution_id))
            except ExternalCallFailed as exc:
                logger.warning("%s", exc)
                detail = ExecutionDetail(execution_id, error=str(exc))
            results.append(detail)
            if on_item is not None:
                on_item(detail)
        return results
