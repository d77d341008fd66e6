"""Lookup and removal flows shared by the app, job and group commands."""

from __future__ import annotations

import typer

from azcops.cli.common.context import AppContext
from azcops.cli.common.exits import die, exit_on_error, ok_exit, warn_exit
from azcops.cli.common.output import out
from azcops.cli.tui import select_resources
from azcops.core.errors import (
    BackendRequestError,
    OperationTimedOut,
    UnexpectedError,
)
from azcops.core.locator import ByName, ResourceKind, build_locator
from azcops.core.operations import get_resources, remove_resource


def show_resources(
    appctx: AppContext,
    kind: ResourceKind,
    *,
    resource_id: str | None,
    subscription: str | None,
    resource_group: str | None,
    name: str | None,
    table: bool,
    title: str,
) -> None:
    """Resolve a locator and print whatever it matches."""
    with exit_on_error():
        locator = build_locator(
            resource_id=resource_id,
            subscription_id=subscription,
            resource_group=resource_group,
            name=name,
        )
        with out.status(f"Loading {kind.label} resources..."):
            states = get_resources(appctx.adapter, kind, locator)

    if not states:
        warn_exit(f"No {kind.label} found", code=0)
    out.emit(states, table=table, title=title)


def remove_resources(
    appctx: AppContext,
    kind: ResourceKind,
    *,
    resource_id: str | None,
    subscription: str | None,
    resource_group: str | None,
    name: str | None,
    yes: bool,
    timeout: float | None,
) -> None:
    """
    Remove one resource, or let the user pick several from a group.

    With ``--id`` or ``--name`` exactly that resource is removed. With only
    ``--resource-group`` the group's resources are listed for selection.
    Every removal is attempted even if an earlier one fails.
    """
    executor = appctx.with_timeout(timeout)

    with exit_on_error():
        locator = build_locator(
            resource_id=resource_id,
            subscription_id=subscription,
            resource_group=resource_group,
            name=name,
        )

    if isinstance(locator, ByName) and not locator.name:
        if not locator.resource_group:
            die("Pass --id, --name with --resource-group, or --resource-group alone")
        with exit_on_error(), out.status(f"Loading {kind.label} resources..."):
            states = get_resources(appctx.adapter, kind, locator)
        if not states:
            warn_exit(f"No {kind.label} found in {locator.resource_group}", code=0)
        picked = select_resources(states, what=f"{kind.label} resources")
        if not picked:
            warn_exit(f"No {kind.label} selected", code=0)
        locators = [
            ByName(locator.subscription_id, locator.resource_group, str(s["name"]))
            for s in picked
        ]
    else:
        locators = [locator]

    targets = [getattr(lc, "resource_id", None) or lc.name for lc in locators]
    out.header(f"{kind.label.capitalize()} to remove")
    for target in targets:
        out.print(f"  {target}")
    if not yes and not out.confirm(f"Remove {len(locators)} {kind.label}(s)?"):
        ok_exit("Cancelled")

    failed = 0
    with exit_on_error():
        for lc, target in zip(locators, targets):
            try:
                with out.status(f"Removing {target}..."):
                    removed = remove_resource(appctx.adapter, executor, kind, lc)
            except (BackendRequestError, OperationTimedOut, UnexpectedError) as exc:
                failed += 1
                out.error(str(exc))
                continue
            out.success(f"Removed {removed}")

    if failed:
        raise typer.Exit(1)
