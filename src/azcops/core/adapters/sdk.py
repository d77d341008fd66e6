"""Translation between core documents and Azure SDK request models."""

from __future__ import annotations

from typing import Any, Iterable

from azure.mgmt.appcontainers import models as aca
from azure.mgmt.containerinstance import models as aci

from azcops.core.models import (
    AppContainer,
    AppJobDocument,
    ContainerAppDocument,
    ContainerGroupDocument,
    EnvVar,
    ExecutionTemplate,
    IdentitySpec,
    IngressSpec,
    InstanceContainer,
    JobTemplate,
    RegistryCredential,
)


def _app_env(env: Iterable[EnvVar]) -> list[aca.EnvironmentVar]:
    return [
        aca.EnvironmentVar(name=e.name, value=e.value, secret_ref=e.secret_ref)
        for e in env
    ]


def _resources(container: AppContainer) -> aca.ContainerResources | None:
    if container.cpu is None and container.memory is None:
        return None
    return aca.ContainerResources(cpu=container.cpu, memory=container.memory)


def _app_container(container: AppContainer) -> aca.Container:
    return aca.Container(
        name=container.name,
        image=container.image,
        command=list(container.command) or None,
        env=_app_env(container.env) or None,
        resources=_resources(container),
    )


def _execution_container(container: AppContainer) -> aca.JobExecutionContainer:
    return aca.JobExecutionContainer(
        name=container.name,
        image=container.image,
        command=list(container.command) or None,
        env=_app_env(container.env) or None,
        resources=_resources(container),
    )


def _app_registries(
    registries: Iterable[RegistryCredential],
) -> list[aca.RegistryCredentials] | None:
    out = [
        aca.RegistryCredentials(
            server=r.server,
            identity=r.identity,
            username=r.username,
            password_secret_ref=r.password_secret_ref,
        )
        for r in registries
    ]
    return out or None


def _app_identity(identity: IdentitySpec | None) -> aca.ManagedServiceIdentity | None:
    if identity is None:
        return None
    return aca.ManagedServiceIdentity(
        type=identity.type,
        user_assigned_identities={
            i: aca.UserAssignedIdentity() for i in identity.user_assigned
        }
        or None,
    )


def _ingress(ingress: IngressSpec | None) -> aca.Ingress | None:
    if ingress is None:
        return None
    traffic = [
        aca.TrafficWeight(
            revision_name=t.revision_name,
            weight=t.weight,
            label=t.label or None,
            latest_revision=t.latest_revision,
        )
        for t in ingress.traffic
    ]
    return aca.Ingress(
        external=ingress.external,
        target_port=ingress.target_port,
        exposed_port=ingress.exposed_port,
        transport=ingress.transport,
        traffic=traffic or None,
    )


def container_app_to_sdk(doc: ContainerAppDocument) -> aca.ContainerApp:
    return aca.ContainerApp(
        location=doc.location,
        identity=_app_identity(doc.identity),
        environment_id=doc.environment_id,
        configuration=aca.Configuration(
            active_revisions_mode=doc.active_revisions_mode,
            ingress=_ingress(doc.ingress),
            registries=_app_registries(doc.registries),
        ),
        template=aca.Template(
            revision_suffix=doc.template.revision_suffix,
            containers=[_app_container(c) for c in doc.template.containers],
        ),
    )


def app_job_to_sdk(doc: AppJobDocument) -> aca.Job:
    return aca.Job(
        location=doc.location,
        identity=_app_identity(doc.identity),
        environment_id=doc.environment_id,
        configuration=aca.JobConfiguration(
            trigger_type="Manual",
            replica_timeout=doc.replica_timeout,
            replica_retry_limit=doc.replica_retry_limit,
            manual_trigger_config=aca.JobConfigurationManualTriggerConfig(
                replica_completion_count=doc.manual_trigger.replica_completion_count,
                parallelism=doc.manual_trigger.parallelism,
            ),
            registries=_app_registries(doc.registries),
        ),
        template=aca.JobTemplate(
            containers=[_app_container(c) for c in doc.template.containers],
        ),
    )


def execution_template_to_sdk(template: ExecutionTemplate) -> aca.JobExecutionTemplate:
    return aca.JobExecutionTemplate(
        containers=[_execution_container(c) for c in template.containers],
    )


def job_template_from_sdk(job: Any) -> JobTemplate:
    """Read the stored template of an SDK ``Job`` into a ``JobTemplate``."""
    template = getattr(job, "template", None)
    containers = []
    for c in getattr(template, "containers", None) or []:
        resources = getattr(c, "resources", None)
        containers.append(
            AppContainer(
                name=c.name,
                image=c.image,
                cpu=getattr(resources, "cpu", None),
                memory=getattr(resources, "memory", None),
                command=tuple(c.command or ()),
                env=tuple(
                    EnvVar(name=e.name, value=e.value, secret_ref=e.secret_ref)
                    for e in c.env or ()
                ),
            )
        )
    return JobTemplate(containers=tuple(containers))


def _instance_container(container: InstanceContainer) -> aci.Container:
    env = [
        aci.EnvironmentVariable(
            name=e.name, value=e.value, secure_value=e.secure_value
        )
        for e in container.env
    ]
    ports = [aci.ContainerPort(port=p.port, protocol=p.protocol) for p in container.ports]
    return aci.Container(
        name=container.name,
        image=container.image,
        resources=aci.ResourceRequirements(
            requests=aci.ResourceRequests(
                memory_in_gb=container.memory_in_gb, cpu=container.cpu
            )
        ),
        command=list(container.command) or None,
        environment_variables=env or None,
        ports=ports or None,
    )


def _group_identity(identity: IdentitySpec | None) -> aci.ContainerGroupIdentity | None:
    if identity is None:
        return None
    kind = identity.type.replace(",", ", ")
    return aci.ContainerGroupIdentity(
        type=kind,
        user_assigned_identities={
            i: aci.UserAssignedIdentities() for i in identity.user_assigned
        }
        or None,
    )


def container_group_to_sdk(doc: ContainerGroupDocument) -> aci.ContainerGroup:
    ip_address = None
    if doc.ip_address is not None:
        ip_address = aci.IpAddress(
            type=doc.ip_address.type,
            ports=[aci.Port(port=p.port, protocol=p.protocol) for p in doc.ip_address.ports],
            dns_name_label=doc.ip_address.dns_name_label,
            auto_generated_domain_name_label_scope=doc.ip_address.reuse_policy,
        )
    credentials = [
        aci.ImageRegistryCredential(
            server=r.server,
            identity=r.identity,
            username=r.username,
            password=r.password,
        )
        for r in doc.registry_credentials
    ]
    return aci.ContainerGroup(
        location=doc.location,
        containers=[_instance_container(c) for c in doc.containers],
        os_type=doc.os_type,
        restart_policy=doc.restart_policy,
        sku=doc.sku,
        ip_address=ip_address,
        subnet_ids=[aci.ContainerGroupSubnetId(id=s) for s in doc.subnet_ids] or None,
        image_registry_credentials=credentials or None,
        identity=_group_identity(doc.identity),
    )
