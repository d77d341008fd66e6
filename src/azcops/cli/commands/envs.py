"""Commands for container app managed environments."""

import typer

from azcops.cli.common.context import AppContext, build_context
from azcops.cli.common.exits import exit_on_error, warn_exit
from azcops.cli.common.options import (
    RequiredResourceGroupOpt,
    SubscriptionOpt,
    TableOpt,
)
from azcops.cli.common.output import out
from azcops.core.operations import get_environment

app = typer.Typer(
    help="Work with managed environments",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context):
    """Initialize the managed environment context."""
    ctx.obj = build_context()


@app.command()
def get(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Environment name"),
    resource_group: str = RequiredResourceGroupOpt,
    subscription: str | None = SubscriptionOpt,
    table: bool = TableOpt,
):
    """
    Get one managed environment.
    """
    appctx: AppContext = ctx.obj

    with exit_on_error(), out.status("Loading managed environment..."):
        state = get_environment(appctx.adapter, name, resource_group, subscription)

    if state is None:
        warn_exit(f"Managed environment {name} not found in {resource_group}", code=0)
    out.emit([state], table=table, title="Managed environments")
