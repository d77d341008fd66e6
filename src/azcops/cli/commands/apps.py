"""Commands for managing container apps."""

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
    SecretEnvOpt,
    SubscriptionOpt,
    TableOpt,
    TimeoutOpt,
    YesOpt,
)
from azcops.cli.common.output import out
from azcops.cli.common.parsing import load_fragment, load_fragments, parse_env
from azcops.cli.common.resources import remove_resources, show_resources
from azcops.core.builders import build_app_template, build_container_app
from azcops.core.locator import ResourceKind
from azcops.core.models import AppTemplate, IngressSpec, RegistryCredential
from azcops.core.operations import create_resource

app = typer.Typer(
    help="Work with container apps",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context):
    """Initialize the container app context."""
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
    Get container apps by id, or by name within a subscription / group.
    """
    appctx: AppContext = ctx.obj
    show_resources(
        appctx,
        ResourceKind.CONTAINER_APP,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        table=table,
        title="Container apps",
    )


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Container app name"),
    resource_group: str = RequiredResourceGroupOpt,
    environment_id: str = typer.Option(
        ..., "--environment-id", help="Managed environment resource id"
    ),
    subscription: str | None = SubscriptionOpt,
    location: str | None = LocationOpt,
    template: Path | None = typer.Option(
        None, "--template", help="App template file (from `fragment app-template`)"
    ),
    image: str | None = ImageOpt,
    container_name: str | None = ContainerNameOpt,
    cpu: float = typer.Option(0.5, "--cpu", help="CPU cores"),
    memory: str = typer.Option("1Gi", "--memory", help="Memory, e.g. 1Gi"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    revision_suffix: str | None = typer.Option(None, "--revision-suffix"),
    ingress: Path | None = typer.Option(
        None, "--ingress", help="Ingress file (from `fragment ingress`)"
    ),
    registry: list[Path] = RegistryFileOpt,
    identity: list[str] = IdentityOpt,
    revisions_mode: str = typer.Option(
        "Multiple", "--revisions-mode", help="Multiple or Single"
    ),
    timeout: float | None = TimeoutOpt,
):
    """
    Create or update a container app.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        if template is not None:
            app_template = load_fragment(template, AppTemplate.from_dict)
        elif image:
            app_template = build_app_template(
                container_name or name,
                image,
                cpu=cpu,
                memory=memory,
                revision_suffix=revision_suffix,
                command=command or None,
                env=parse_env(env, secret_env),
            )
        else:
            die("Pass --template or --image", code=1)

        document = build_container_app(
            name,
            environment_id,
            app_template,
            location=location or appctx.settings.default_location,
            active_revisions_mode=revisions_mode,
            ingress=load_fragment(ingress, IngressSpec.from_dict) if ingress else None,
            registries=load_fragments(registry, RegistryCredential.from_dict),
            identities=identity,
        )

        with out.status(f"Creating container app {name}..."):
            state = create_resource(
                appctx.adapter,
                appctx.with_timeout(timeout),
                ResourceKind.CONTAINER_APP,
                document,
                resource_group,
                subscription,
            )

    out.success(f"Container app {name} is ready")
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
    Remove container apps (by id, by name, or picked from a resource group).
    """
    appctx: AppContext = ctx.obj
    remove_resources(
        appctx,
        ResourceKind.CONTAINER_APP,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        yes=yes,
        timeout=timeout,
    )
