"""Command for verifying credentials and the management client."""

import typer

from azcops.cli.common.context import AppContext, build_context
from azcops.cli.common.exits import exit_on_error
from azcops.cli.common.output import out
from azcops.core.errors import map_errors
from azcops.core.resolver import resolve_subscription


def connect(
    subscription: str | None = typer.Option(
        None, "--subscription", "-s", help="Subscription to verify"
    ),
):
    """
    Authenticate, build the management client and show the subscription in use.
    """
    with out.status("Connecting to Azure Resource Manager..."):
        appctx: AppContext = build_context(force=True)

    with exit_on_error(), map_errors("connect", subscription):
        subscription_id = resolve_subscription(appctx.adapter, subscription)

    out.success("Connected to Azure Resource Manager")
    out.kv(
        {
            "endpoint": appctx.settings.management_endpoint,
            "subscription": subscription_id,
            "identity": appctx.settings.managed_identity_client_id or "credential chain",
        }
    )
