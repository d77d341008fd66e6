from azcops.core import builders
from azcops.core.models import (
    AppContainer,
    EnvVar,
    ExecutionTemplate,
    IngressSpec,
    InstanceContainer,
    RegistryCredential,
    dump,
)


def test_dump_uses_camel_case_and_drops_none():
    data = dump(builders.build_app_registry_credential("acr.io", identity="/ids/a"))

    assert data == {"server": "acr.io", "identity": "/ids/a"}


def test_ingress_fragment_can_be_read_back():
    ingress = builders.build_ingress(
        8080,
        external=True,
        traffic=builders.build_traffic_weight("app--v1", weight=100, latest_revision=True),
    )

    data = dump(ingress)

    assert data["targetPort"] == 8080
    assert data["traffic"][0]["revisionName"] == "app--v1"
    assert IngressSpec.from_dict(data) == ingress


def test_from_dict_accepts_snake_case_keys():
    credential = RegistryCredential.from_dict(
        {"server": "acr.io", "username": "me", "password_secret_ref": "pw"}
    )

    assert credential.password_secret_ref == "pw"


def test_app_container_reads_nested_resources():
    container = AppContainer.from_dict(
        {
            "name": "c",
            "image": "img",
            "resources": {"cpu": 1.5, "memory": "3Gi"},
            "env": [{"name": "A", "secretRef": "s"}],
        }
    )

    assert (container.cpu, container.memory) == (1.5, "3Gi")
    assert container.env == (EnvVar("A", secret_ref="s"),)


def test_execution_template_fragment_can_be_read_back():
    template = builders.build_execution_template(
        "c", "img", command=["run"], env=[{"name": "A", "value": "1"}]
    )

    assert ExecutionTemplate.from_dict(dump(template)) == template


def test_instance_container_reads_ports_and_secure_env():
    container = InstanceContainer.from_dict(
        {
            "name": "web",
            "image": "nginx",
            "memoryInGb": 1.5,
            "ports": [{"port": 53, "protocol": "UDP"}],
            "environmentVariables": [{"name": "T", "secureValue": "x"}],
        }
    )

    assert container.memory_in_gb == 1.5
    assert container.ports[0].protocol == "UDP"
    assert container.env[0].secure_value == "x"
