from types import SimpleNamespace

from azcops.core import builders
from azcops.core.adapters.sdk import (
    app_job_to_sdk,
    container_app_to_sdk,
    container_group_to_sdk,
    execution_template_to_sdk,
    job_template_from_sdk,
)
from azcops.core.models import AppContainer, EnvVar, ExecutionTemplate, Port


def test_container_group_maps_network_identity_and_env():
    container = builders.build_instance_container(
        "web",
        "nginx",
        env=[{"name": "A", "value": "1"}, {"name": "T", "secure_value": "s"}],
        ports=[Port(80)],
    )
    doc = builders.build_container_group(
        "demo", [container], ports=[Port(80)], identities=["system", "/ids/a"]
    )

    group = container_group_to_sdk(doc)

    assert group.location == "East US"
    assert group.ip_address.dns_name_label == "demo"
    assert group.ip_address.auto_generated_domain_name_label_scope == "NoReuse"
    assert group.identity.type == "SystemAssigned, UserAssigned"
    assert list(group.identity.user_assigned_identities) == ["/ids/a"]
    sdk_container = group.containers[0]
    assert sdk_container.resources.requests.cpu == 2.0
    assert sdk_container.resources.requests.memory_in_gb == 3.0
    assert [(e.name, e.value, e.secure_value) for e in sdk_container.environment_variables] == [
        ("A", "1", None),
        ("T", None, "s"),
    ]
    assert group.subnet_ids is None


def test_container_app_maps_ingress_and_registries():
    doc = builders.build_container_app(
        "app1",
        "/envs/e",
        builders.build_app_template("c", "img"),
        ingress=builders.build_ingress(8080, traffic=builders.build_traffic_weight("r1")),
        registries=[builders.build_app_registry_credential("acr.io", identity="/ids/a")],
    )

    app = container_app_to_sdk(doc)

    assert app.environment_id == "/envs/e"
    assert app.configuration.active_revisions_mode == "Multiple"
    assert app.configuration.ingress.target_port == 8080
    assert app.configuration.ingress.traffic[0].revision_name == "r1"
    assert app.configuration.registries[0].identity == "/ids/a"
    assert app.template.containers[0].resources.memory == "1Gi"
    assert app.identity is None


def test_app_job_is_manually_triggered():
    doc = builders.build_app_job("job1", "/envs/e", builders.build_job_template("c", "img"))

    job = app_job_to_sdk(doc)

    assert job.configuration.trigger_type == "Manual"
    assert job.configuration.replica_timeout == 180
    assert job.configuration.manual_trigger_config.parallelism == 4


def test_execution_template_and_stored_job_template():
    template = builders.build_execution_template(
        "c", "img", command=["run"], env=[{"name": "A", "secret_ref": "s"}]
    )

    sdk_template = execution_template_to_sdk(template)

    assert sdk_template.containers[0].command == ["run"]
    assert sdk_template.containers[0].env[0].secret_ref == "s"

    stored = SimpleNamespace(
        template=SimpleNamespace(
            containers=[
                SimpleNamespace(
                    name="c",
                    image="img",
                    command=None,
                    env=[SimpleNamespace(name="A", value="1", secret_ref=None)],
                    resources=SimpleNamespace(cpu=0.75, memory="1.5Gi"),
                )
            ]
        )
    )
    assert job_template_from_sdk(stored).containers == (
        AppContainer("c", "img", cpu=0.75, memory="1.5Gi", env=(EnvVar("A", "1"),)),
    )


def test_stored_container_without_resources_submits_none():
    stored = SimpleNamespace(
        template=SimpleNamespace(
            containers=[
                SimpleNamespace(
                    name="c", image="img", command=["run"], env=None, resources=None
                )
            ]
        )
    )

    [container] = job_template_from_sdk(stored).containers
    sdk_template = execution_template_to_sdk(ExecutionTemplate(containers=(container,)))

    assert (container.cpu, container.memory) == (None, None)
    assert sdk_template.containers[0].resources is None
