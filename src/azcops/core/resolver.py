"""Resource locator resolution.

Resolution turns a ``ResourceLocator`` into concrete ``ResourceDescriptor``
values, filling in a missing subscription with the default one and a
missing resource group with every group in the subscription. A name lookup
checks existence before fetching, so an absent resource yields an empty
result rather than an error, and a scan over all groups stops at the first
group that contains the name.

Resolution is sequential; groups are visited in the order the backend
enumerates them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol, Sequence, TypeVar

from azcops.core.locator import (
    ById,
    ResourceDescriptor,
    ResourceKind,
    ResourceLocator,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResourceLookupAdapter(Protocol):
    """Read-only management-plane lookups used by the resolver."""

    def default_subscription_id(self) -> str:
        """Return the caller's default subscription id."""
        ...

    def get_subscription_id(self, subscription_id: str) -> str:
        """Look up an explicit subscription and return its id."""
        ...

    def list_resource_groups(self, subscription_id: str) -> Iterable[str]:
        """Yield resource group names in backend enumeration order."""
        ...

    def get_resource_group(self, subscription_id: str, resource_group: str) -> str:
        """Look up one resource group and return its name."""
        ...

    def exists(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> bool:
        """Return True if the named resource exists."""
        ...

    def get(
        self, kind: ResourceKind, subscription_id: str, resource_group: str, name: str
    ) -> Mapping[str, Any]:
        """Return the state document of one resource."""
        ...

    def list(
        self, kind: ResourceKind, subscription_id: str, resource_group: str
    ) -> Iterable[Mapping[str, Any]]:
        """Yield the state documents of every resource of a kind in a group."""
        ...


def resolve_subscription(
    adapter: ResourceLookupAdapter,
    subscription_id: str | None,
    *,
    verify: bool = True,
) -> str:
    """
    Return the subscription id to operate in.

    Args:
        adapter: Lookup adapter.
        subscription_id: Explicit subscription, or None/empty for the default.
        verify: Look up an explicit subscription instead of trusting it.
    """
    if not subscription_id:
        logger.debug("Getting default subscription...")
        resolved = adapter.default_subscription_id()
    elif verify:
        resolved = adapter.get_subscription_id(subscription_id)
    else:
        resolved = subscription_id
    logger.debug("Using subscription: %s", resolved)
    return resolved


def _descriptor(
    kind: ResourceKind,
    subscription_id: str,
    resource_group: str,
    data: Mapping[str, Any],
) -> ResourceDescriptor:
    return ResourceDescriptor(
        kind=kind,
        subscription_id=subscription_id,
        resource_group=resource_group,
        name=str(data.get("name", "")),
        data=data,
    )


def resolve(
    adapter: ResourceLookupAdapter,
    locator: ResourceLocator,
    kind: ResourceKind,
) -> list[ResourceDescriptor]:
    """
    Resolve a locator into descriptors of ``kind``.

    - ``ById`` binds exactly one descriptor without any remote call.
    - ``ByName`` with a name returns at most one descriptor: the first
      group (in enumeration order) where the name exists.
    - ``ByName`` without a name returns every resource of the kind in the
      scope, in discovery order.

    Args:
        adapter: Lookup adapter.
        locator: Caller-supplied locator.
        kind: Resource kind to look for.

    Returns:
        A possibly empty list of descriptors.
    """
    if isinstance(locator, ById):
        logger.debug("Referencing %s by id: %s", kind.label, locator.resource_id)
        return [ResourceDescriptor.from_id(kind, locator.resource_id)]

    subscription_id = resolve_subscription(adapter, locator.subscription_id)

    groups: Iterable[str]
    if locator.resource_group:
        logger.debug("Getting specific resource group: %s", locator.resource_group)
        groups = [adapter.get_resource_group(subscription_id, locator.resource_group)]
    else:
        logger.debug("Getting all resource groups...")
        groups = adapter.list_resource_groups(subscription_id)

    if locator.name:
        for group in groups:
            if adapter.exists(kind, subscription_id, group, locator.name):
                logger.debug("Found %s %s in %s", kind.label, locator.name, group)
                data = adapter.get(kind, subscription_id, group, locator.name)
                return [_descriptor(kind, subscription_id, group, data)]
            logger.debug("%s %s does not exist in %s", kind.label, locator.name, group)
        return []

    found: list[ResourceDescriptor] = []
    for group in groups:
        logger.debug("Getting %s resources from %s...", kind.label, group)
        for data in adapter.list(kind, subscription_id, group):
            found.append(_descriptor(kind, subscription_id, group, data))
    return found


def collapse(results: Sequence[T]) -> T | list[T] | None:
    """
    Apply the output cardinality rule.

    Returns None for no results, the item itself for one result, and the
    full list (in discovery order) for more than one.
    """
    if not results:
        return None
    if len(results) == 1:
        return results[0]
    return list(results)
