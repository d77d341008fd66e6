"""Operations exposed to the command-line frontend.

Each operation takes a flat parameter set, resolves its target, submits
any long-running call through the ``LroExecutor`` and returns plain state
documents. Failures surface as ``AzcopsError`` subclasses; lookups that
match nothing return an empty list.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence

from azcops.core.builders import EnvInput
from azcops.core.errors import map_errors
from azcops.core.executions import ExecutionDetail, ExecutionDetailFetcher
from azcops.core.locator import (
    ById,
    ByName,
    ResourceDescriptor,
    ResourceKind,
    ResourceLocator,
)
from azcops.core.lro import LroExecutor, Operation, Poller
from azcops.core.merge import as_execution_template, merge_execution_template
from azcops.core.models import (
    AppContainer,
    AppJobDocument,
    ContainerAppDocument,
    ContainerGroupDocument,
    ExecutionTemplate,
    JobTemplate,
)
from azcops.core.resolver import ResourceLookupAdapter, resolve, resolve_subscription

logger = logging.getLogger(__name__)

Document = ContainerGroupDocument | ContainerAppDocument | AppJobDocument


class ResourceAdapter(ResourceLookupAdapter, Protocol):
    """Lookups plus the mutating calls used by the operations."""

    def get_job_template(
        self, subscription_id: str, resource_group: str, name: str
    ) -> JobTemplate: ...

    def begin_create_or_update(
        self,
        kind: ResourceKind,
        subscription_id: str,
        resource_group: str,
        document: Document,
    ) -> Poller: ...

    def begin_delete(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> Poller: ...

    def begin_start_job(
        self,
        subscription_id: str,
        resource_group: str,
        name: str,
        template: ExecutionTemplate,
    ) -> Poller: ...

    def list_job_execution_ids(
        self, subscription_id: str, resource_group: str, job_name: str
    ) -> Iterable[str]: ...

    def get_job_execution_id(
        self,
        subscription_id: str,
        resource_group: str,
        job_name: str,
        execution_name: str,
    ) -> str: ...


def as_state(value: Any) -> Mapping[str, Any]:
    """Return an operation result as a plain dict."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    return value.as_dict()


def _locator_target(locator: ResourceLocator) -> str | None:
    if isinstance(locator, ById):
        return locator.resource_id
    return locator.name or locator.resource_group or locator.subscription_id


def _require(value: str | None, what: str) -> str:
    if not value:
        raise ValueError(f"{what} is required")
    return value


def get_environment(
    adapter: ResourceLookupAdapter,
    name: str,
    resource_group: str,
    subscription_id: str | None = None,
) -> Mapping[str, Any] | None:
    """Return a managed environment, or None when it does not exist."""
    _require(name, "Environment name")
    _require(resource_group, "Resource group")
    with map_errors("get managed environment", name):
        found = resolve(
            adapter,
            ByName(subscription_id, resource_group, name),
            ResourceKind.MANAGED_ENVIRONMENT,
        )
    return found[0].data if found else None


def get_resources(
    adapter: ResourceLookupAdapter,
    kind: ResourceKind,
    locator: ResourceLocator,
) -> list[Mapping[str, Any]]:
    """
    Return the state documents of every resource the locator matches.

    An id locator is fetched directly, so a missing resource raises
    ``BackendRequestError`` here rather than returning an empty list.
    """
    with map_errors(f"get {kind.label}", _locator_target(locator)):
        found = resolve(adapter, locator, kind)
        states: list[Mapping[str, Any]] = []
        for descriptor in found:
            data = descriptor.data
            if data is None:
                data = adapter.get(
                    kind,
                    descriptor.subscription_id,
                    descriptor.resource_group,
                    descriptor.name,
                )
            states.append(data)
    return states


def get_job_executions(
    adapter: ResourceAdapter,
    fetcher: ExecutionDetailFetcher,
    job_name: str,
    resource_group: str,
    subscription_id: str | None = None,
    execution_name: str | None = None,
    on_item: Callable[[ExecutionDetail], None] | None = None,
) -> list[ExecutionDetail]:
    """
    Return execution details for one job.

    With ``execution_name`` only that execution is fetched; otherwise every
    execution of the job is. Detail fetch failures are recorded on their
    own item and do not stop the remaining fetches.
    """
    _require(job_name, "Job name")
    _require(resource_group, "Resource group")
    with map_errors("list job executions", job_name):
        subscription = resolve_subscription(adapter, subscription_id)
        if execution_name:
            ids = [
                adapter.get_job_execution_id(
                    subscription, resource_group, job_name, execution_name
                )
            ]
        else:
            ids = list(
                adapter.list_job_execution_ids(subscription, resource_group, job_name)
            )
        logger.debug("Found %d execution(s) for job %s", len(ids), job_name)
        return fetcher.collect(ids, on_item=on_item)


def create_resource(
    adapter: ResourceAdapter,
    executor: LroExecutor,
    kind: ResourceKind,
    document: Document,
    resource_group: str,
    subscription_id: str | None = None,
) -> Mapping[str, Any]:
    """Create or update a resource and return its final state."""
    _require(resource_group, "Resource group")
    with map_errors(f"create {kind.label}", document.name):
        subscription = resolve_subscription(adapter, subscription_id)
        descriptor = ResourceDescriptor(kind, subscription, resource_group, document.name)
        result = executor.submit(
            Operation.CREATE_OR_UPDATE,
            descriptor.id,
            partial(
                adapter.begin_create_or_update,
                kind,
                subscription,
                resource_group,
                document,
            ),
        )
    return as_state(result)


def start_job(
    adapter: ResourceAdapter,
    executor: LroExecutor,
    name: str,
    resource_group: str,
    subscription_id: str | None = None,
    *,
    override: ExecutionTemplate | None = None,
    container: AppContainer | None = None,
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> Mapping[str, Any]:
    """
    Start one execution of an app job and return the execution reference.

    The job's stored template is merged with the overrides (see
    ``merge_execution_template``). A single ``container`` is treated as a
    one-container full override.
    """
    _require(name, "Job name")
    _require(resource_group, "Resource group")
    if override is not None and container is not None:
        raise ValueError("Use either an execution template or a container, not both")
    if container is not None:
        override = ExecutionTemplate(containers=(container,))

    with map_errors("start job", name):
        subscription = resolve_subscription(adapter, subscription_id)
        descriptor = ResourceDescriptor(
            ResourceKind.CONTAINER_APP_JOB, subscription, resource_group, name
        )
        logger.debug("Getting stored template of job %s", name)
        existing = adapter.get_job_template(subscription, resource_group, name)
        template = as_execution_template(
            merge_execution_template(existing, override, command, env)
        )
        result = executor.submit(
            Operation.START,
            descriptor.id,
            partial(adapter.begin_start_job, subscription, resource_group, name, template),
        )
    return as_state(result)


def remove_resource(
    adapter: ResourceAdapter,
    executor: LroExecutor,
    kind: ResourceKind,
    locator: ResourceLocator,
) -> str:
    """
    Delete one resource and return its id.

    A name locator must carry both the name and the resource group.
    """
    if isinstance(locator, ByName):
        _require(locator.name, "Name")
        _require(locator.resource_group, "Resource group")

    with map_errors(f"remove {kind.label}", _locator_target(locator)):
        if isinstance(locator, ById):
            descriptor = ResourceDescriptor.from_id(kind, locator.resource_id)
        else:
            descriptor = ResourceDescriptor(
                kind,
                resolve_subscription(adapter, locator.subscription_id),
                locator.resource_group,
                locator.name,
            )
        executor.submit(
            Operation.DELETE,
            descriptor.id,
            partial(
                adapter.begin_delete,
                kind,
                descriptor.subscription_id,
                descriptor.resource_group,
                descriptor.name,
            ),
        )
    logger.debug("Removed %s %s", kind.label, descriptor.id)
    return descriptor.id
