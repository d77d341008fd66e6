"""Commands for managing container app jobs and their executions."""

import json
from pathlib import Path

import typer

from azcops.cli.common.context import AppContext, build_context
from azcops.cli.common.exits import die, exit_on_error, warn_exit
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
from azcops.cli.common.progress import execution_progress
from azcops.cli.common.resources import remove_resources, show_resources
from azcops.core.builders import build_app_job, build_job_template
from azcops.core.locator import ResourceKind
from azcops.core.models import (
    AppContainer,
    ExecutionTemplate,
    JobTemplate,
    RegistryCredential,
)
from azcops.core.operations import create_resource, get_job_executions, start_job
from azcops.core.resolver import collapse

app = typer.Typer(
    help="Work with container app jobs",
    no_args_is_help=True,
)

JobNameOpt = typer.Option(..., "--name", "-n", help="Job name")


@app.callback()
def _init(ctx: typer.Context):
    """Initialize the container app job context."""
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
    Get jobs by id, or by name within a subscription / group.
    """
    appctx: AppContext = ctx.obj
    show_resources(
        appctx,
        ResourceKind.CONTAINER_APP_JOB,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        table=table,
        title="Container app jobs",
    )


@app.command()
def create(
    ctx: typer.Context,
    name: str = JobNameOpt,
    resource_group: str = RequiredResourceGroupOpt,
    environment_id: str = typer.Option(
        ..., "--environment-id", help="Managed environment resource id"
    ),
    subscription: str | None = SubscriptionOpt,
    location: str | None = LocationOpt,
    template: Path | None = typer.Option(
        None, "--template", help="Job template file (from `fragment job-template`)"
    ),
    image: str | None = ImageOpt,
    container_name: str | None = ContainerNameOpt,
    cpu: float = typer.Option(1.5, "--cpu", help="CPU cores"),
    memory: str = typer.Option("3Gi", "--memory", help="Memory, e.g. 3Gi"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    registry: list[Path] = RegistryFileOpt,
    identity: list[str] = IdentityOpt,
    replica_timeout: int = typer.Option(180, "--replica-timeout", help="Seconds"),
    retry_limit: int = typer.Option(0, "--retry-limit"),
    completion_count: int = typer.Option(1, "--completion-count"),
    parallelism: int = typer.Option(4, "--parallelism"),
    timeout: float | None = TimeoutOpt,
):
    """
    Create or update a manually triggered job.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        if template is not None:
            job_template = load_fragment(template, JobTemplate.from_dict)
        elif image:
            job_template = build_job_template(
                container_name or name,
                image,
                cpu=cpu,
                memory=memory,
                command=command or None,
                env=parse_env(env, secret_env),
            )
        else:
            die("Pass --template or --image", code=1)

        document = build_app_job(
            name,
            environment_id,
            job_template,
            location=location or appctx.settings.default_location,
            registries=load_fragments(registry, RegistryCredential.from_dict),
            identities=identity,
            replica_timeout=replica_timeout,
            replica_retry_limit=retry_limit,
            replica_completion_count=completion_count,
            parallelism=parallelism,
        )

        with out.status(f"Creating job {name}..."):
            state = create_resource(
                appctx.adapter,
                appctx.with_timeout(timeout),
                ResourceKind.CONTAINER_APP_JOB,
                document,
                resource_group,
                subscription,
            )

    out.success(f"Job {name} is ready")
    out.json(state)


@app.command()
def start(
    ctx: typer.Context,
    name: str = JobNameOpt,
    resource_group: str = RequiredResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    template: Path | None = typer.Option(
        None,
        "--template",
        help="Execution template file (from `fragment execution-template`)",
    ),
    container: Path | None = typer.Option(
        None,
        "--container",
        help="Single replacement container file (from `fragment app-container`)",
    ),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    timeout: float | None = TimeoutOpt,
):
    """
    Start one execution of a job, optionally overriding its template.

    --command replaces the stored command; --env / --secret-env are added
    after the stored environment variables.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error():
        override = (
            load_fragment(template, ExecutionTemplate.from_dict) if template else None
        )
        replacement = (
            load_fragment(container, AppContainer.from_dict) if container else None
        )
        overrides_env = bool(env or secret_env)

        with out.status(f"Starting job {name}..."):
            execution = start_job(
                appctx.adapter,
                appctx.with_timeout(timeout),
                name,
                resource_group,
                subscription,
                override=override,
                container=replacement,
                command=command or None,
                env=parse_env(env, secret_env) if overrides_env else None,
            )

    out.success(f"Started job {name}: {execution.get('name', '')}")
    out.json(execution)


@app.command()
def executions(
    ctx: typer.Context,
    name: str = JobNameOpt,
    resource_group: str = RequiredResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    execution: str | None = typer.Option(
        None, "--execution", "-x", help="Only this execution (default: all)"
    ),
    table: bool = TableOpt,
):
    """
    Show execution details of a job.

    A failed detail lookup is reported for that execution only; the
    remaining executions are still fetched.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), execution_progress(name) as on_item:
        details = get_job_executions(
            appctx.adapter,
            appctx.fetcher(),
            name,
            resource_group,
            subscription,
            execution_name=execution,
            on_item=on_item,
        )

    if not details:
        warn_exit(f"No executions found for job {name}", code=0)

    failed = [d for d in details if not d.ok]
    if table:
        out.executions_table(details, title=f"Executions of {name}")
    else:
        for d in failed:
            out.error(d.error or d.execution_id)
        loaded = [json.loads(d.details) for d in details if d.ok and d.details]
        if loaded:
            out.json(collapse(loaded))

    if failed:
        raise typer.Exit(1)


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
    Remove jobs (by id, by name, or picked from a resource group).
    """
    appctx: AppContext = ctx.obj
    remove_resources(
        appctx,
        ResourceKind.CONTAINER_APP_JOB,
        resource_id=resource_id,
        subscription=subscription,
        resource_group=resource_group,
        name=name,
        yes=yes,
        timeout=timeout,
    )
