"""Desired-state document models.

These models describe container groups, container apps, app jobs and the
fragments they are assembled from. They are immutable and free of Azure SDK
types; ``azcops.core.adapters.sdk`` translates them into SDK request models.

Fragments can be dumped to JSON-ready dicts and loaded back with
``from_dict`` so that CLI fragment commands and create commands can be
chained through files. ``from_dict`` accepts camelCase or snake_case keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Iterable, Mapping


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).replace("_", "").lower(): v for k, v in data.items()}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _items(raw: Iterable[Any] | None, loader) -> tuple:
    if not raw:
        return ()
    return tuple(loader(item) for item in raw)


def dump(obj: Any) -> Any:
    """Return a JSON-ready structure for a model (camelCase keys, no Nones)."""
    if is_dataclass(obj) and not isinstance(obj, type):
        out: dict[str, Any] = {}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            out[_camel(f.name)] = dump(value)
        return out
    if isinstance(obj, (list, tuple)):
        return [dump(item) for item in obj]
    return obj


@dataclass(frozen=True)
class EnvVar:
    """
    A container environment variable.

    Exactly one of ``value``, ``secret_ref`` (container apps) or
    ``secure_value`` (container instances) is expected to be set.
    """

    name: str
    value: str | None = None
    secret_ref: str | None = None
    secure_value: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EnvVar:
        d = _normalize(data)
        return cls(
            name=str(d["name"]),
            value=d.get("value"),
            secret_ref=d.get("secretref"),
            secure_value=d.get("securevalue"),
        )


@dataclass(frozen=True)
class Port:
    """A TCP/UDP port exposed by a container or container group."""

    port: int
    protocol: str = "TCP"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Port:
        d = _normalize(data)
        return cls(port=int(d["port"]), protocol=str(d.get("protocol") or "TCP"))


@dataclass(frozen=True)
class AppContainer:
    """
    A container of a container app, app job or job execution.

    ``cpu`` and ``memory`` are None when a stored container carries no
    resources; they are then left out of requests.
    """

    name: str
    image: str
    cpu: float | None = 0.5
    memory: str | None = "1Gi"
    command: tuple[str, ...] = ()
    env: tuple[EnvVar, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppContainer:
        d = _normalize(data)
        resources = _normalize(d.get("resources") or {})
        return cls(
            name=str(d["name"]),
            image=str(d["image"]),
            cpu=float(resources.get("cpu", d.get("cpu", 0.5))),
            memory=str(resources.get("memory", d.get("memory", "1Gi"))),
            command=tuple(d.get("command") or ()),
            env=_items(d.get("env"), EnvVar.from_dict),
        )


@dataclass(frozen=True)
class InstanceContainer:
    """A container of a container group."""

    name: str
    image: str
    cpu: float = 2.0
    memory_in_gb: float = 3.0
    command: tuple[str, ...] = ()
    env: tuple[EnvVar, ...] = ()
    ports: tuple[Port, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InstanceContainer:
        d = _normalize(data)
        return cls(
            name=str(d["name"]),
            image=str(d["image"]),
            cpu=float(d.get("cpu", 2.0)),
            memory_in_gb=float(d.get("memoryingb", 3.0)),
            command=tuple(d.get("command") or ()),
            env=_items(d.get("env") or d.get("environmentvariables"), EnvVar.from_dict),
            ports=_items(d.get("ports"), Port.from_dict),
        )


@dataclass(frozen=True)
class IdentitySpec:
    """Managed identity block: system-assigned and/or user-assigned ids."""

    system_assigned: bool = False
    user_assigned: tuple[str, ...] = ()

    @property
    def type(self) -> str:
        if self.system_assigned and self.user_assigned:
            return "SystemAssigned,UserAssigned"
        if self.system_assigned:
            return "SystemAssigned"
        return "UserAssigned"


@dataclass(frozen=True)
class RegistryCredential:
    """
    Image registry credentials.

    Either ``identity`` is set, or ``username`` plus ``password`` (container
    groups) / ``password_secret_ref`` (container apps and jobs).
    """

    server: str
    identity: str | None = None
    username: str | None = None
    password: str | None = None
    password_secret_ref: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RegistryCredential:
        d = _normalize(data)
        return cls(
            server=str(d["server"]),
            identity=d.get("identity"),
            username=d.get("username"),
            password=d.get("password"),
            password_secret_ref=d.get("passwordsecretref"),
        )


@dataclass(frozen=True)
class TrafficWeight:
    """Traffic split entry for a container app revision."""

    revision_name: str
    weight: int = 0
    label: str = ""
    latest_revision: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrafficWeight:
        d = _normalize(data)
        return cls(
            revision_name=str(d["revisionname"]),
            weight=int(d.get("weight", 0)),
            label=str(d.get("label") or ""),
            latest_revision=d.get("latestrevision"),
        )


@dataclass(frozen=True)
class IngressSpec:
    """Ingress configuration of a container app."""

    target_port: int
    external: bool = False
    exposed_port: int = 0
    transport: str = "Auto"
    traffic: tuple[TrafficWeight, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressSpec:
        d = _normalize(data)
        return cls(
            target_port=int(d["targetport"]),
            external=bool(d.get("external", False)),
            exposed_port=int(d.get("exposedport", 0)),
            transport=str(d.get("transport") or "Auto"),
            traffic=_items(d.get("traffic"), TrafficWeight.from_dict),
        )


@dataclass(frozen=True)
class IpAddressSpec:
    """Public or private networking block of a container group."""

    type: str = "Public"
    ports: tuple[Port, ...] = ()
    dns_name_label: str | None = None
    reuse_policy: str | None = None


@dataclass(frozen=True)
class AppTemplate:
    """Revision template of a container app."""

    containers: tuple[AppContainer, ...]
    revision_suffix: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppTemplate:
        d = _normalize(data)
        return cls(
            containers=_items(d.get("containers"), AppContainer.from_dict),
            revision_suffix=d.get("revisionsuffix"),
        )


@dataclass(frozen=True)
class JobTemplate:
    """Stored template of a container app job."""

    containers: tuple[AppContainer, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JobTemplate:
        d = _normalize(data)
        return cls(containers=_items(d.get("containers"), AppContainer.from_dict))


@dataclass(frozen=True)
class ExecutionTemplate:
    """Template submitted when starting one execution of a job."""

    containers: tuple[AppContainer, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExecutionTemplate:
        d = _normalize(data)
        return cls(containers=_items(d.get("containers"), AppContainer.from_dict))


@dataclass(frozen=True)
class ManualTrigger:
    """Manual trigger settings of an app job."""

    replica_completion_count: int = 1
    parallelism: int = 4


@dataclass(frozen=True)
class ContainerGroupDocument:
    """Desired state of a container group."""

    name: str
    location: str
    containers: tuple[InstanceContainer, ...]
    os_type: str = "Linux"
    restart_policy: str = "Always"
    sku: str = "Standard"
    ip_address: IpAddressSpec | None = None
    subnet_ids: tuple[str, ...] = ()
    registry_credentials: tuple[RegistryCredential, ...] = ()
    identity: IdentitySpec | None = None


@dataclass(frozen=True)
class ContainerAppDocument:
    """Desired state of a container app."""

    name: str
    location: str
    environment_id: str
    template: AppTemplate
    active_revisions_mode: str = "Multiple"
    ingress: IngressSpec | None = None
    registries: tuple[RegistryCredential, ...] = ()
    identity: IdentitySpec | None = None


@dataclass(frozen=True)
class AppJobDocument:
    """Desired state of a manually triggered container app job."""

    name: str
    location: str
    environment_id: str
    template: JobTemplate
    replica_timeout: int = 180
    replica_retry_limit: int = 0
    manual_trigger: ManualTrigger = field(default_factory=ManualTrigger)
    registries: tuple[RegistryCredential, ...] = ()
    identity: IdentitySpec | None = None
