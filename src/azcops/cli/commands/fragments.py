"""Commands that build document fragments as JSON.

Fragments are printed (or written with ``--output``) and read back by the
create and start commands, so nested settings such as ingress, registry
credentials or extra containers can be prepared one piece at a time.
These commands never contact Azure.
"""

import json
from pathlib import Path
from typing import Any

import typer

from azcops.cli.common.exits import exit_on_error
from azcops.cli.common.options import CommandOpt, EnvOpt, OutputFileOpt, SecretEnvOpt
from azcops.cli.common.output import out
from azcops.cli.common.parsing import load_fragments, parse_env, parse_port
from azcops.core import builders
from azcops.core.models import TrafficWeight, dump

app = typer.Typer(
    help="Build ingress, registry, template, container and port fragments",
    no_args_is_help=True,
)

ContainerNameOpt = typer.Option(..., "--container-name", help="Container name")
RequiredImageOpt = typer.Option(..., "--image", help="Container image")
ServerOpt = typer.Option(..., "--server", help="Registry server, e.g. myacr.azurecr.io")
RegistryIdentityOpt = typer.Option(
    None, "--identity", help="Identity used to pull (instead of a username)"
)
UsernameOpt = typer.Option(None, "--username", help="Registry username")
PortNumberOpt = typer.Option(..., "--port", help="Port number")
ProtocolOpt = typer.Option("TCP", "--protocol", help="TCP or UDP")


def _write(fragment: Any, output: Path | None) -> None:
    data = dump(fragment)
    if output is None:
        out.json(data)
        return
    output.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    out.success(f"Wrote {output}")


@app.command()
def ingress(
    target_port: int = typer.Option(..., "--target-port", help="Container port"),
    external: bool = typer.Option(False, "--external", help="Accept outside traffic"),
    exposed_port: int = typer.Option(0, "--exposed-port"),
    transport: str = typer.Option("Auto", "--transport", help="Auto, Http, Http2, Tcp"),
    traffic: list[Path] = typer.Option(
        [],
        "--traffic",
        help="Traffic weight file (from `fragment traffic-weight`). This is reusable.",
        show_default=False,
    ),
    output: Path | None = OutputFileOpt,
):
    """
    Build a container app ingress.
    """
    with exit_on_error():
        fragment = builders.build_ingress(
            target_port,
            external=external,
            exposed_port=exposed_port,
            transport=transport,
            traffic=load_fragments(traffic, TrafficWeight.from_dict),
        )
        _write(fragment, output)


@app.command("traffic-weight")
def traffic_weight(
    revision_name: str = typer.Option(..., "--revision-name"),
    weight: int = typer.Option(0, "--weight", help="Percentage of traffic"),
    label: str = typer.Option("", "--label"),
    latest_revision: bool | None = typer.Option(
        None, "--latest-revision/--no-latest-revision"
    ),
    output: Path | None = OutputFileOpt,
):
    """
    Build an ingress traffic weight.
    """
    with exit_on_error():
        fragment = builders.build_traffic_weight(
            revision_name, weight=weight, label=label, latest_revision=latest_revision
        )
        _write(fragment, output)


@app.command("app-registry")
def app_registry(
    server: str = ServerOpt,
    identity: str | None = RegistryIdentityOpt,
    username: str | None = UsernameOpt,
    password_secret_ref: str | None = typer.Option(
        None, "--password-secret-ref", help="Secret holding the registry password"
    ),
    output: Path | None = OutputFileOpt,
):
    """
    Build registry credentials for a container app or job.
    """
    with exit_on_error():
        fragment = builders.build_app_registry_credential(
            server,
            identity=identity,
            username=username,
            password_secret_ref=password_secret_ref,
        )
        _write(fragment, output)


@app.command("group-registry")
def group_registry(
    server: str = ServerOpt,
    identity: str | None = RegistryIdentityOpt,
    username: str | None = UsernameOpt,
    password: str | None = typer.Option(None, "--password", help="Registry password"),
    output: Path | None = OutputFileOpt,
):
    """
    Build image registry credentials for a container group.
    """
    with exit_on_error():
        fragment = builders.build_group_registry_credential(
            server, identity=identity, username=username, password=password
        )
        _write(fragment, output)


@app.command("app-template")
def app_template(
    container_name: str = ContainerNameOpt,
    image: str = RequiredImageOpt,
    cpu: float = typer.Option(0.5, "--cpu"),
    memory: str = typer.Option("1Gi", "--memory"),
    revision_suffix: str | None = typer.Option(None, "--revision-suffix"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build a container app revision template.
    """
    with exit_on_error():
        fragment = builders.build_app_template(
            container_name,
            image,
            cpu=cpu,
            memory=memory,
            revision_suffix=revision_suffix,
            command=command,
            env=parse_env(env, secret_env),
        )
        _write(fragment, output)


@app.command("job-template")
def job_template(
    container_name: str = ContainerNameOpt,
    image: str = RequiredImageOpt,
    cpu: float = typer.Option(1.5, "--cpu"),
    memory: str = typer.Option("3Gi", "--memory"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build a job template.
    """
    with exit_on_error():
        fragment = builders.build_job_template(
            container_name,
            image,
            cpu=cpu,
            memory=memory,
            command=command,
            env=parse_env(env, secret_env),
        )
        _write(fragment, output)


@app.command("execution-template")
def execution_template(
    container_name: str = ContainerNameOpt,
    image: str = RequiredImageOpt,
    cpu: float = typer.Option(1.5, "--cpu"),
    memory: str = typer.Option("3Gi", "--memory"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build an execution template for `job start --template`.
    """
    with exit_on_error():
        fragment = builders.build_execution_template(
            container_name,
            image,
            cpu=cpu,
            memory=memory,
            command=command,
            env=parse_env(env, secret_env),
        )
        _write(fragment, output)


@app.command("app-container")
def app_container(
    container_name: str = ContainerNameOpt,
    image: str = RequiredImageOpt,
    cpu: float = typer.Option(1.5, "--cpu"),
    memory: str = typer.Option("3Gi", "--memory"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secret_env: list[str] = SecretEnvOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build a single job container for `job start --container`.
    """
    with exit_on_error():
        fragment = builders.build_app_container(
            container_name,
            image,
            cpu=cpu,
            memory=memory,
            command=command,
            env=parse_env(env, secret_env),
        )
        _write(fragment, output)


@app.command()
def container(
    name: str = typer.Option(..., "--name", "-n", help="Container name"),
    image: str = RequiredImageOpt,
    cpu: float = typer.Option(2.0, "--cpu"),
    memory_gb: float = typer.Option(3.0, "--memory-gb"),
    command: list[str] = CommandOpt,
    env: list[str] = EnvOpt,
    secure_env: list[str] = typer.Option(
        [],
        "--secure-env",
        help="Secure environment variable (NAME=VALUE). This is reusable.",
        show_default=False,
    ),
    port: list[str] = typer.Option(
        [],
        "--port",
        help="Container port (PORT[/PROTOCOL]). This is reusable.",
        show_default=False,
    ),
    output: Path | None = OutputFileOpt,
):
    """
    Build a container for `group create --container`.
    """
    with exit_on_error():
        fragment = builders.build_instance_container(
            name,
            image,
            cpu=cpu,
            memory_in_gb=memory_gb,
            command=command,
            env=parse_env(env, secure_env, secret_field="secure_value"),
            ports=[parse_port(p) for p in port],
        )
        _write(fragment, output)


@app.command("container-port")
def container_port(
    port: int = PortNumberOpt,
    protocol: str = ProtocolOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build a container port.
    """
    with exit_on_error():
        _write(builders.build_port(port, protocol), output)


@app.command("group-port")
def group_port(
    port: int = PortNumberOpt,
    protocol: str = ProtocolOpt,
    output: Path | None = OutputFileOpt,
):
    """
    Build a container group port.
    """
    with exit_on_error():
        _write(builders.build_port(port, protocol), output)
