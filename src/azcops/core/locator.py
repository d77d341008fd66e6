"""Resource kinds, locators and resolved descriptors.

A locator is what the caller supplies to identify a target: either a
fully-qualified ARM resource id (``ById``) or a name scoped to an optional
subscription and resource group (``ByName``). Resolving a locator produces
``ResourceDescriptor`` values bound to concrete coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union


class ResourceKind(Enum):
    """
    Resource kinds handled by the tool.

    Each value is the ARM provider type plus the API version used for
    existence checks.
    """

    CONTAINER_GROUP = ("Microsoft.ContainerInstance/containerGroups", "2023-05-01")
    CONTAINER_APP = ("Microsoft.App/containerApps", "2023-05-01")
    CONTAINER_APP_JOB = ("Microsoft.App/jobs", "2023-05-01")
    MANAGED_ENVIRONMENT = ("Microsoft.App/managedEnvironments", "2023-05-01")

    @property
    def provider_type(self) -> str:
        return self.value[0]

    @property
    def api_version(self) -> str:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


@dataclass(frozen=True)
class ById:
    """Locate a resource by its fully-qualified id."""

    resource_id: str


@dataclass(frozen=True)
class ByName:
    """
    Locate resources by name within a subscription and resource group.

    Every field is optional: a missing subscription means the default
    subscription, a missing resource group means every group in the
    subscription, and a missing name means every resource of the kind.
    """

    subscription_id: str | None = None
    resource_group: str | None = None
    name: str | None = None


ResourceLocator = Union[ById, ByName]


def build_locator(
    *,
    resource_id: str | None = None,
    subscription_id: str | None = None,
    resource_group: str | None = None,
    name: str | None = None,
) -> ResourceLocator:
    """
    Build a locator from flat, independently optional parameters.

    Raises:
        ValueError: If a resource id is combined with name-scope fields.
    """
    if resource_id:
        if name or resource_group or subscription_id:
            raise ValueError(
                "--id cannot be combined with --name, --resource-group "
                "or --subscription"
            )
        return ById(resource_id=resource_id)
    return ByName(
        subscription_id=subscription_id or None,
        resource_group=resource_group or None,
        name=name or None,
    )


def resource_id(
    kind: ResourceKind, subscription_id: str, resource_group: str, name: str
) -> str:
    """Return the ARM id of a resource of ``kind``."""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{kind.provider_type}/{name}"
    )


def parse_resource_id(value: str) -> dict[str, str]:
    """
    Split an ARM resource id into its components.

    Returns:
        A dict with ``subscription_id``, ``resource_group``, ``provider``,
        ``resource_type`` and ``name`` keys (missing parts are absent).

    Raises:
        ValueError: If the id does not start with ``/subscriptions/``.
    """
    parts = [p for p in value.strip().split("/") if p]
    if len(parts) < 2 or parts[0].lower() != "subscriptions":
        raise ValueError(f"Not an ARM resource id: {value!r}")

    out: dict[str, str] = {"subscription_id": parts[1]}
    lowered = [p.lower() for p in parts]
    if "resourcegroups" in lowered:
        idx = lowered.index("resourcegroups")
        if idx + 1 < len(parts):
            out["resource_group"] = parts[idx + 1]
    if "providers" in lowered:
        idx = lowered.index("providers")
        tail = parts[idx + 1 :]
        if len(tail) >= 3:
            out["provider"] = tail[0]
            out["resource_type"] = tail[1]
            out["name"] = tail[2]
    return out


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Concrete identity of a resolved resource plus its state document.

    ``data`` is ``None`` when the descriptor was bound from an id without a
    lookup; the state is fetched on first use.
    """

    kind: ResourceKind
    subscription_id: str
    resource_group: str
    name: str
    data: Mapping[str, Any] | None = None

    @property
    def id(self) -> str:
        return resource_id(
            self.kind, self.subscription_id, self.resource_group, self.name
        )

    @classmethod
    def from_id(cls, kind: ResourceKind, value: str) -> ResourceDescriptor:
        """
        Bind a descriptor to an id without checking that it exists.

        Raises:
            ValueError: If the id lacks a resource group or name, or names a
                resource of another kind.
        """
        parts = parse_resource_id(value)
        if "resource_group" not in parts or "name" not in parts:
            raise ValueError(f"Resource id does not name a resource: {value!r}")
        provider_type = f"{parts['provider']}/{parts['resource_type']}"
        if provider_type.lower() != kind.provider_type.lower():
            raise ValueError(
                f"Resource id is a {provider_type}, not a "
                f"{kind.provider_type}: {value!r}"
            )
        return cls(
            kind=kind,
            subscription_id=parts["subscription_id"],
            resource_group=parts["resource_group"],
            name=parts["name"],
        )
