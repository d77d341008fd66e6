"""Builders for desired-state documents and their fragments.

Each builder turns a flat set of independently optional parameters into a
document fragment from ``azcops.core.models``. Builders branch only on
whether a parameter was supplied, perform no I/O and always return the same
document for the same input.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence, Union

from azcops.core.models import (
    AppContainer,
    AppJobDocument,
    AppTemplate,
    ContainerAppDocument,
    ContainerGroupDocument,
    EnvVar,
    ExecutionTemplate,
    IdentitySpec,
    IngressSpec,
    InstanceContainer,
    IpAddressSpec,
    JobTemplate,
    ManualTrigger,
    Port,
    RegistryCredential,
    TrafficWeight,
)

logger = logging.getLogger(__name__)

SYSTEM_IDENTITY = "system"
DEFAULT_REUSE_POLICY = "NoReuse"

IP_ADDRESS_TYPES = ("Public", "Private")
REUSE_POLICIES = (
    "NoReuse",
    "ResourceGroupReuse",
    "SubscriptionReuse",
    "TenantReuse",
    "Unsecure",
)
TRANSPORTS = ("Auto", "Http", "Http2", "Tcp")
PROTOCOLS = ("TCP", "UDP")

EnvInput = Union[EnvVar, Mapping[str, Any]]


def _choice(value: str, allowed: Sequence[str], what: str) -> str:
    """Return the canonical spelling of ``value`` from ``allowed``."""
    for option in allowed:
        if option.lower() == value.lower():
            return option
    raise ValueError(f"Invalid {what}: {value!r} (expected one of {', '.join(allowed)})")


def build_identity(identities: Iterable[str] | None) -> IdentitySpec | None:
    """
    Build a managed-identity block.

    The literal ``"system"`` requests a system-assigned identity; any other
    non-empty value is a user-assigned identity resource id. Repeated ids
    collapse to a single entry.

    Returns:
        The identity block, or None when no identity was supplied.
    """
    system_assigned = False
    user_assigned: dict[str, None] = {}
    for identity in identities or ():
        if not identity:
            continue
        if identity == SYSTEM_IDENTITY:
            system_assigned = True
        else:
            user_assigned.setdefault(identity, None)
    if not system_assigned and not user_assigned:
        return None
    return IdentitySpec(
        system_assigned=system_assigned, user_assigned=tuple(user_assigned)
    )


def build_env_vars(
    items: Iterable[EnvInput] | None, *, secret_field: str = "secret_ref"
) -> tuple[EnvVar, ...]:
    """
    Build environment variables from ``EnvVar`` values or mappings.

    A plain value wins over a secret. ``secret_field`` names the secret
    flavor kept for this container type: ``"secret_ref"`` for container
    apps and jobs, ``"secure_value"`` for container instances. Items that
    carry neither a value nor the secret field are dropped.
    """
    out: list[EnvVar] = []
    for item in items or ():
        env = item if isinstance(item, EnvVar) else EnvVar.from_dict(item)
        if env.value is not None:
            out.append(EnvVar(name=env.name, value=env.value))
            continue
        secret = getattr(env, secret_field)
        if secret is not None:
            out.append(EnvVar(name=env.name, **{secret_field: secret}))
            continue
        logger.warning("Environment variable %s has no value; skipped", env.name)
    return tuple(out)


def normalize_env(fragment: Any) -> Any:
    """
    Apply ``build_env_vars`` to the containers of a loaded fragment.

    Containers and templates read from files go through the same env
    filtering as the ones built from flags. Other fragments are returned
    unchanged.
    """
    if isinstance(fragment, AppContainer):
        return replace(fragment, env=build_env_vars(fragment.env))
    if isinstance(fragment, InstanceContainer):
        return replace(
            fragment, env=build_env_vars(fragment.env, secret_field="secure_value")
        )
    if isinstance(fragment, (AppTemplate, JobTemplate, ExecutionTemplate)):
        return replace(
            fragment, containers=tuple(normalize_env(c) for c in fragment.containers)
        )
    return fragment


def build_port(port: int, protocol: str = "TCP") -> Port:
    """Build a container or container-group port."""
    return Port(port=int(port), protocol=_choice(protocol, PROTOCOLS, "protocol"))


def build_app_registry_credential(
    server: str,
    *,
    identity: str | None = None,
    username: str | None = None,
    password_secret_ref: str | None = None,
) -> RegistryCredential:
    """
    Build registry credentials for a container app or job.

    Either ``identity`` or ``username`` (with ``password_secret_ref``) must
    be given, not both.
    """
    if identity and username:
        raise ValueError("Use either an identity or a username, not both")
    if identity:
        return RegistryCredential(server=server, identity=identity)
    if not username:
        raise ValueError("Registry credentials need an identity or a username")
    return RegistryCredential(
        server=server, username=username, password_secret_ref=password_secret_ref
    )


def build_group_registry_credential(
    server: str,
    *,
    identity: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> RegistryCredential:
    """Build image registry credentials for a container group."""
    if identity and username:
        raise ValueError("Use either an identity or a username, not both")
    if identity:
        return RegistryCredential(server=server, identity=identity)
    if not username:
        raise ValueError("Registry credentials need an identity or a username")
    return RegistryCredential(server=server, username=username, password=password)


def build_traffic_weight(
    revision_name: str,
    *,
    weight: int = 0,
    label: str = "",
    latest_revision: bool | None = None,
) -> tuple[TrafficWeight, ...]:
    """Build a one-entry traffic list for an ingress."""
    return (
        TrafficWeight(
            revision_name=revision_name,
            weight=weight,
            label=label,
            latest_revision=latest_revision,
        ),
    )


def build_ingress(
    target_port: int,
    *,
    external: bool = False,
    exposed_port: int = 0,
    transport: str = "Auto",
    traffic: Iterable[TrafficWeight] = (),
) -> IngressSpec:
    """Build an ingress configuration."""
    return IngressSpec(
        target_port=target_port,
        external=external,
        exposed_port=exposed_port,
        transport=_choice(transport, TRANSPORTS, "transport"),
        traffic=tuple(traffic),
    )


def build_app_container(
    name: str,
    image: str,
    *,
    cpu: float,
    memory: str,
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> AppContainer:
    return AppContainer(
        name=name,
        image=image,
        cpu=cpu,
        memory=memory,
        command=tuple(command or ()),
        env=build_env_vars(env),
    )


def build_app_template(
    container_name: str,
    image: str,
    *,
    cpu: float = 0.5,
    memory: str = "1Gi",
    revision_suffix: str | None = None,
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> AppTemplate:
    """Build a single-container revision template for a container app."""
    container = build_app_container(
        container_name, image, cpu=cpu, memory=memory, command=command, env=env
    )
    return AppTemplate(containers=(container,), revision_suffix=revision_suffix)


def build_job_template(
    container_name: str,
    image: str,
    *,
    cpu: float = 1.5,
    memory: str = "3Gi",
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> JobTemplate:
    """Build a single-container template for an app job."""
    container = build_app_container(
        container_name, image, cpu=cpu, memory=memory, command=command, env=env
    )
    return JobTemplate(containers=(container,))


def build_execution_template(
    container_name: str,
    image: str,
    *,
    cpu: float = 1.5,
    memory: str = "3Gi",
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> ExecutionTemplate:
    """Build a single-container execution template for starting a job."""
    container = build_app_container(
        container_name, image, cpu=cpu, memory=memory, command=command, env=env
    )
    return ExecutionTemplate(containers=(container,))


def build_instance_container(
    name: str,
    image: str,
    *,
    cpu: float = 2.0,
    memory_in_gb: float = 3.0,
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
    ports: Iterable[Port] = (),
) -> InstanceContainer:
    """Build a container for a container group."""
    return InstanceContainer(
        name=name,
        image=image,
        cpu=cpu,
        memory_in_gb=memory_in_gb,
        command=tuple(command or ()),
        env=build_env_vars(env, secret_field="secure_value"),
        ports=tuple(ports),
    )


def build_public_network(
    resource_name: str,
    *,
    ports: Iterable[Port] = (),
    dns_name_label: str | None = None,
    reuse_policy: str | None = None,
) -> IpAddressSpec:
    """
    Build a public IP block.

    The DNS label defaults to the resource's own name and the label reuse
    policy defaults to ``NoReuse``.
    """
    return IpAddressSpec(
        type="Public",
        ports=tuple(ports),
        dns_name_label=dns_name_label or resource_name,
        reuse_policy=_choice(
            reuse_policy or DEFAULT_REUSE_POLICY, REUSE_POLICIES, "reuse policy"
        ),
    )


def build_private_network(
    subnet_ids: Iterable[str] | None,
    *,
    ports: Iterable[Port] = (),
) -> tuple[IpAddressSpec, tuple[str, ...]]:
    """
    Build a private IP block and its subnet associations.

    Returns:
        The IP block and one subnet id per supplied id.

    Raises:
        ValueError: If no subnet id is supplied.
    """
    subnets = tuple(s for s in subnet_ids or () if s)
    if not subnets:
        raise ValueError("A private IP address requires a subnet id")
    return IpAddressSpec(type="Private", ports=tuple(ports)), subnets


def build_container_group(
    name: str,
    containers: Sequence[InstanceContainer],
    *,
    location: str = "East US",
    os_type: str = "Linux",
    restart_policy: str = "Always",
    sku: str = "Standard",
    ip_address_type: str = "Public",
    ports: Iterable[Port] = (),
    registry_credentials: Iterable[RegistryCredential] = (),
    identities: Iterable[str] | None = None,
    dns_name_label: str | None = None,
    reuse_policy: str | None = None,
    subnet_ids: Iterable[str] | None = None,
) -> ContainerGroupDocument:
    """Build the desired state of a container group."""
    if not containers:
        raise ValueError("A container group needs at least one container")
    ip_type = _choice(ip_address_type, IP_ADDRESS_TYPES, "IP address type")
    subnets: tuple[str, ...] = ()
    if ip_type == "Public":
        ip_address = build_public_network(
            name, ports=ports, dns_name_label=dns_name_label, reuse_policy=reuse_policy
        )
    else:
        ip_address, subnets = build_private_network(subnet_ids, ports=ports)
    return ContainerGroupDocument(
        name=name,
        location=location,
        containers=tuple(containers),
        os_type=_choice(os_type, ("Linux", "Windows"), "OS type"),
        restart_policy=_choice(
            restart_policy, ("Always", "OnFailure", "Never"), "restart policy"
        ),
        sku=_choice(sku, ("Standard", "Confidential", "Dedicated"), "SKU"),
        ip_address=ip_address,
        subnet_ids=subnets,
        registry_credentials=tuple(registry_credentials),
        identity=build_identity(identities),
    )


def build_container_app(
    name: str,
    environment_id: str,
    template: AppTemplate,
    *,
    location: str = "East US",
    active_revisions_mode: str = "Multiple",
    ingress: IngressSpec | None = None,
    registries: Iterable[RegistryCredential] = (),
    identities: Iterable[str] | None = None,
) -> ContainerAppDocument:
    """Build the desired state of a container app."""
    return ContainerAppDocument(
        name=name,
        location=location,
        environment_id=environment_id,
        template=template,
        active_revisions_mode=_choice(
            active_revisions_mode, ("Multiple", "Single"), "revisions mode"
        ),
        ingress=ingress,
        registries=tuple(registries),
        identity=build_identity(identities),
    )


def build_app_job(
    name: str,
    environment_id: str,
    template: JobTemplate,
    *,
    location: str = "East US",
    registries: Iterable[RegistryCredential] = (),
    identities: Iterable[str] | None = None,
    replica_timeout: int = 180,
    replica_retry_limit: int = 0,
    replica_completion_count: int = 1,
    parallelism: int = 4,
) -> AppJobDocument:
    """Build the desired state of a manually triggered app job."""
    return AppJobDocument(
        name=name,
        location=location,
        environment_id=environment_id,
        template=template,
        replica_timeout=replica_timeout,
        replica_retry_limit=replica_retry_limit,
        manual_trigger=ManualTrigger(
            replica_completion_count=replica_completion_count,
            parallelism=parallelism,
        ),
        registries=tuple(registries),
        identity=build_identity(identities),
    )
