"""Common CLI options for the CLI."""

import typer

SubscriptionOpt = typer.Option(
    None,
    "--subscription",
    "-s",
    help="Subscription id (default: AZURE_SUBSCRIPTION_ID or the first visible one)",
)

ResourceGroupOpt = typer.Option(
    None,
    "--resource-group",
    "-g",
    help="Resource group (default: search every group)",
)

RequiredResourceGroupOpt = typer.Option(
    ...,
    "--resource-group",
    "-g",
    help="Resource group",
)

NameOpt = typer.Option(
    None,
    "--name",
    "-n",
    help="Resource name (default: every resource in scope)",
)

IdOpt = typer.Option(
    None,
    "--id",
    help="Fully-qualified resource id (cannot be combined with name options)",
)

TableOpt = typer.Option(
    False,
    "--table",
    help="Render results as a table instead of JSON",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Do not ask for confirmation",
)

LocationOpt = typer.Option(
    None,
    "--location",
    "-l",
    help="Azure region (default: AZCOPS_LOCATION or East US)",
)

IdentityOpt = typer.Option(
    [],
    "--identity",
    help="'system' or a user-assigned identity id. This is reusable.",
    show_default=False,
)

RegistryFileOpt = typer.Option(
    [],
    "--registry",
    help="Registry credentials file (from `fragment`). This is reusable.",
    show_default=False,
)

EnvOpt = typer.Option(
    [],
    "--env",
    "-e",
    help="Environment variable (NAME=VALUE). This is reusable.",
    show_default=False,
)

SecretEnvOpt = typer.Option(
    [],
    "--secret-env",
    help="Environment variable backed by a secret (NAME=SECRET). This is reusable.",
    show_default=False,
)

CommandOpt = typer.Option(
    [],
    "--command",
    "-c",
    help="Container command part. Repeat for each argument.",
    show_default=False,
)

ImageOpt = typer.Option(None, "--image", help="Container image")

ContainerNameOpt = typer.Option(
    None,
    "--container-name",
    help="Container name (default: the resource name)",
)

TimeoutOpt = typer.Option(
    None,
    "--timeout",
    help="Give up waiting after this many seconds (default: AZCOPS_OPERATION_TIMEOUT)",
)

OutputFileOpt = typer.Option(
    None,
    "--output",
    "-o",
    help="Write the fragment to this file instead of stdout",
)
