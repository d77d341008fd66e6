"""Commands for managing container groups (container instances)."""

from pathlib import Path

import typer

from azcops.cli.common.context import AppContext, build_context
from azcops.cli.common.exits import die, exit_on_error
from azcops.cli.common.options import (
    CommandOpt,
    ContainerNameOpt,
    EnvOpt,
    IdentityOpt,
    IdOpt,
    ImageOpt,
    LocationOpt,
    NameOpt,
    RegistryFileOpt,
    RequiredResourceGroupOpt,
    ResourceGroupOpt,
    SubscriptionOpt,
    TableOpt,
    TimeoutOpt,
    YesOpt,
)
from azcops.cli.common.output import out
from azcops.cli.common.parsing import load_fragments, parse_env, parse_port
from azcops.cli.common.resources import remove_resources, show_resources
from azcops.core.builders import build_container_group, build_instance_container
from azcops.core.locator import ResourceKind
from azcops.core.models import InstanceContainer, RegistryCredential
from azcops.core.operations import create_resource

app = typer.Typer(
    help="Work with container groups",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context):
    """Initialize the container group context."""
    ctx.obj = build_context()


@app.command()
def get(
    ctx: typer.Context,
    resource_id: str | None = IdOpt,
    name: str | None = NameOpt,
    resource_group: str | None = ResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    table: bool = TableOpt,
):
    """
    Get container groups by id, or by name within a subscription / group.
    """
    appctx: AppContext = ctx.obj
    show_resources(
        appctx,
        ResourceKind.CONTAINER_GROUP,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        table=table,
        title="Container groups",
    )


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Container group name"),
    resource_group: str = RequiredResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    location: str | None = LocationOpt,
    container: list[Path] = typer.Option(
        [],
        "--container",
        help="Container file (from `fragment container`). This is reusable.",
        show_default=False,
    ),
    image: str | None = ImageOpt,
    container_name: str | None = ContainerNameOpt,
    cpu: float = typer.Option(2.0, "--cpu", help="CPU cores"),
    memory_gb: float = typer.Option(3.0, "--memory-gb", help="Memory in GB"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secure_env: list[str] = typer.Option(
        [],
        "--secure-env",
        help="Secure environment variable (NAME=VALUE). This is reusable.",
        show_default=False,
    ),
    container_port: list[str] = typer.Option(
        [],
        "--container-port",
        help="Port of the --image container (PORT[/PROTOCOL]). This is reusable.",
        show_default=False,
    ),
    port: list[str] = typer.Option(
        [],
        "--port",
        help="Group port (PORT[/PROTOCOL]). This is reusable.",
        show_default=False,
    ),
    os_type: str = typer.Option("Linux", "--os-type"),
    restart_policy: str = typer.Option("Always", "--restart-policy"),
    sku: str = typer.Option("Standard", "--sku"),
    ip_address_type: str = typer.Option("Public", "--ip-type", help="Public or Private"),
    dns_name_label: str | None = typer.Option(
        None, "--dns-label", help="DNS label (default: the group name)"
    ),
    reuse_policy: str | None = typer.Option(
        None, "--reuse-policy", help="DNS label reuse policy (default: NoReuse)"
    ),
    subnet_id: list[str] = typer.Option(
        [],
        "--subnet-id",
        help="Subnet id for a private group. This is reusable.",
        show_default=False,
    ),
    registry: list[Path] = RegistryFileOpt,
    identity: list[str] = IdentityOpt,
    timeout: float | None = TimeoutOpt,
):
    """
    Create or update a container group.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        containers = load_fragments(container, InstanceContainer.from_dict)
        if image:
            containers.append(
                build_instance_container(
                    container_name or name,
                    image,
                    cpu=cpu,
                    memory_in_gb=memory_gb,
                    command=command or None,
                    env=parse_env(env, secure_env, secret_field="secure_value"),
                    ports=[parse_port(p) for p in container_port],
                )
            )
        if not containers:
            die("Pass --container or --image", code=1)

        document = build_container_group(
            name,
            containers,
            location=location or appctx.settings.default_location,
            os_type=os_type,
            restart_policy=restart_policy,
            sku=sku,
            ip_address_type=ip_address_type,
            ports=[parse_port(p) for p in port],
            registry_credentials=load_fragments(registry, RegistryCredential.from_dict),
            identities=identity,
            dns_name_label=dns_name_label,
            reuse_policy=reuse_policy,
            subnet_ids=subnet_id,
        )

        with out.status(f"Creating container group {name}..."):
            state = create_resource(
                appctx.adapter,
                appctx.with_timeout(timeout),
                ResourceKind.CONTAINER_GROUP,
                document,
                resource_group,
                subscription,
            )

    out.success(f"Container group {name} is ready")
    out.json(state)


@app.command()
def remove(
    ctx: typer.Context,
    resource_id: str | None = IdOpt,
    name: str | None = NameOpt,
    resource_group: str | None = ResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    yes: bool = YesOpt,
    timeout: float | None = TimeoutOpt,
):
    """
    Remove container groups (by id, by name, or picked from a resource group).
    """
    appctx: AppContext = ctx.obj
    remove_resources(
        appctx,
        ResourceKind.CONTAINER_GROUP,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        yes=yes,
        timeout=timeout,
    )
