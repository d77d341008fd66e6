from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from azure.core.polling import LROPoller

from azcops.core.adapters import sdk
from azcops.core.auth import ClientCache, ManagementClient
from azcops.core.errors import UnexpectedError
from azcops.core.locator import ResourceKind, resource_id
from azcops.core.models import (
    ContainerAppDocument,
    ContainerGroupDocument,
    ExecutionTemplate,
    JobTemplate,
)
from azcops.core.operations import Document, as_state

logger = logging.getLogger(__name__)


class AzureResourceAdapter:
    """Adapter around the Azure management SDKs for container resources."""

    def __init__(self, client: ManagementClient):
        self.client = client

    @classmethod
    def from_cache(cls, cache: ClientCache) -> AzureResourceAdapter:
        """Build an adapter over the cached client (never constructs one)."""
        return cls(cache.require())

    def _operations(self, kind: ResourceKind, subscription_id: str) -> Any:
        if kind is ResourceKind.CONTAINER_GROUP:
            return self.client.container_instances(subscription_id).container_groups
        apps = self.client.container_apps(subscription_id)
        if kind is ResourceKind.CONTAINER_APP:
            return apps.container_apps
        if kind is ResourceKind.CONTAINER_APP_JOB:
            return apps.jobs
        return apps.managed_environments

    def default_subscription_id(self) -> str:
        """Return the configured subscription, else the first visible one."""
        configured = self.client.settings.subscription_id
        if configured:
            return configured
        for subscription in self.client.subscriptions.subscriptions.list():
            return subscription.subscription_id
        raise UnexpectedError(
            "No subscription is visible to the current credential",
            operation="get default subscription",
        )

    def get_subscription_id(self, subscription_id: str) -> str:
        return self.client.subscriptions.subscriptions.get(
            subscription_id
        ).subscription_id

    def list_resource_groups(self, subscription_id: str) -> Iterator[str]:
        """Yield group names lazily so a caller can stop scanning early."""
        for group in self.client.resources(subscription_id).resource_groups.list():
            yield group.name

    def get_resource_group(self, subscription_id: str, resource_group: str) -> str:
        return self.client.resources(subscription_id).resource_groups.get(
            resource_group
        ).name

    def exists(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> bool:
        """Check existence with a HEAD request so absence raises nothing."""
        return bool(
            self.client.resources(subscription_id).resources.check_existence_by_id(
                resource_id(kind, subscription_id, resource_group, name),
                kind.api_version,
            )
        )

    def get(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> Mapping[str, Any]:
        return as_state(self._operations(kind, subscription_id).get(resource_group, name))

    def list(
        self, kind: ResourceKind, subscription_id: str, resource_group: str
    ) -> Iterator[Mapping[str, Any]]:
        operations = self._operations(kind, subscription_id)
        for item in operations.list_by_resource_group(resource_group):
            yield as_state(item)

    def get_job_template(
        self, subscription_id: str, resource_group: str, name: str
    ) -> JobTemplate:
        """Return the stored template of an app job."""
        job = self.client.container_apps(subscription_id).jobs.get(resource_group, name)
        return sdk.job_template_from_sdk(job)

    def begin_create_or_update(
        self,
        kind: ResourceKind,
        subscription_id: str,
        resource_group: str,
        document: Document,
    ) -> LROPoller:
        if isinstance(document, ContainerGroupDocument):
            body = sdk.container_group_to_sdk(document)
        elif isinstance(document, ContainerAppDocument):
            body = sdk.container_app_to_sdk(document)
        else:
            body = sdk.app_job_to_sdk(document)
        logger.debug("Submitting %s %s in %s", kind.label, document.name, resource_group)
        return self._operations(kind, subscription_id).begin_create_or_update(
            resource_group, document.name, body
        )

    def begin_delete(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> LROPoller:
        return self._operations(kind, subscription_id).begin_delete(resource_group, name)

    def begin_start_job(
        self,
        subscription_id: str,
        resource_group: str,
        name: str,
        template: ExecutionTemplate,
    ) -> LROPoller:
        return self.client.container_apps(subscription_id).jobs.begin_start(
            resource_group, name, template=sdk.execution_template_to_sdk(template)
        )

    def list_job_execution_ids(
        self, subscription_id: str, resource_group: str, job_name: str
    ) -> list[str]:
        executions = self.client.container_apps(subscription_id).jobs_executions
        return [e.id for e in executions.list(resource_group, job_name) if e.id]

    def get_job_execution_id(
        self,
        subscription_id: str,
        resource_group: str,
        job_name: str,
        execution_name: str,
    ) -> str:
        execution = self.client.container_apps(subscription_id).job_execution(
            resource_group, job_name, execution_name
        )
        return execution.id

    def access_token(self) -> str:
        return self.client.access_token()
