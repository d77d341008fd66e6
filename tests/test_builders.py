import logging

import pytest

from azcops.core import builders
from azcops.core.models import EnvVar, InstanceContainer, JobTemplate, Port


def _container() -> InstanceContainer:
    return builders.build_instance_container("web", "nginx")


def test_public_group_defaults_dns_label_to_name_and_no_reuse():
    doc = builders.build_container_group("demo", [_container()], ip_address_type="Public")

    assert doc.ip_address is not None
    assert doc.ip_address.type == "Public"
    assert doc.ip_address.dns_name_label == "demo"
    assert doc.ip_address.reuse_policy == "NoReuse"


def test_container_group_defaults():
    doc = builders.build_container_group("demo", [_container()])

    assert doc.location == "East US"
    assert (doc.os_type, doc.restart_policy, doc.sku) == ("Linux", "Always", "Standard")
    assert doc.identity is None
    assert doc.containers[0].cpu == 2.0
    assert doc.containers[0].memory_in_gb == 3.0


def test_private_group_records_one_subnet_per_id():
    doc = builders.build_container_group(
        "demo",
        [_container()],
        ip_address_type="private",
        subnet_ids=["/subnets/a", "/subnets/b"],
    )

    assert doc.ip_address.type == "Private"
    assert doc.ip_address.dns_name_label is None
    assert doc.subnet_ids == ("/subnets/a", "/subnets/b")


def test_private_network_requires_a_subnet():
    with pytest.raises(ValueError, match="subnet"):
        builders.build_container_group("demo", [_container()], ip_address_type="Private")


def test_identity_deduplicates_user_assigned_ids():
    identity = builders.build_identity(["/ids/a", "system", "/ids/a", "/ids/b"])

    assert identity.system_assigned is True
    assert identity.user_assigned == ("/ids/a", "/ids/b")
    assert identity.type == "SystemAssigned,UserAssigned"


def test_identity_is_none_without_input():
    assert builders.build_identity(None) is None
    assert builders.build_identity(["", ""]) is None


def test_env_vars_keep_value_or_secret_and_drop_empty_entries(caplog):
    with caplog.at_level(logging.WARNING, logger="azcops.core.builders"):
        env = builders.build_env_vars(
            [
                {"name": "A", "value": "1"},
                {"name": "B", "secretRef": "b-secret"},
                {"name": "C"},
                EnvVar(name="D", value="4", secret_ref="ignored"),
            ]
        )

    assert env == (
        EnvVar(name="A", value="1"),
        EnvVar(name="B", secret_ref="b-secret"),
        EnvVar(name="D", value="4"),
    )
    assert "C" in caplog.text


def test_instance_env_vars_use_secure_values():
    container = builders.build_instance_container(
        "web", "nginx", env=[{"name": "TOKEN", "secure_value": "s3cr3t"}]
    )

    assert container.env == (EnvVar(name="TOKEN", secure_value="s3cr3t"),)


def test_normalize_env_drops_empty_entries_from_loaded_templates():
    template = JobTemplate.from_dict(
        {
            "containers": [
                {
                    "name": "job",
                    "image": "busybox",
                    "env": [{"name": "A", "value": "1"}, {"name": "EMPTY"}],
                }
            ]
        }
    )

    normalized = builders.normalize_env(template)

    assert normalized.containers[0].env == (EnvVar(name="A", value="1"),)
    assert builders.normalize_env(Port(80)) == Port(80)


def test_registry_credentials_are_mutually_exclusive():
    by_identity = builders.build_app_registry_credential("acr.io", identity="/ids/a")
    by_user = builders.build_app_registry_credential(
        "acr.io", username="me", password_secret_ref="pw"
    )

    assert by_identity.identity == "/ids/a" and by_identity.username is None
    assert by_user.username == "me" and by_user.password_secret_ref == "pw"
    with pytest.raises(ValueError):
        builders.build_app_registry_credential("acr.io", identity="/ids/a", username="me")
    with pytest.raises(ValueError):
        builders.build_group_registry_credential("acr.io")


def test_ingress_and_traffic_defaults():
    traffic = builders.build_traffic_weight("app--v1")
    ingress = builders.build_ingress(8080, transport="http", traffic=traffic)

    assert traffic[0].weight == 0 and traffic[0].label == ""
    assert traffic[0].latest_revision is None
    assert ingress.external is False
    assert ingress.exposed_port == 0
    assert ingress.transport == "Http"


def test_invalid_choice_is_rejected():
    with pytest.raises(ValueError, match="transport"):
        builders.build_ingress(80, transport="quic")


def test_template_defaults():
    assert builders.build_app_template("c", "img").containers[0].memory == "1Gi"
    assert builders.build_app_template("c", "img").containers[0].cpu == 0.5
    job = builders.build_job_template("c", "img").containers[0]
    run = builders.build_execution_template("c", "img").containers[0]
    assert (job.cpu, job.memory) == (1.5, "3Gi")
    assert (run.cpu, run.memory) == (1.5, "3Gi")


def test_app_job_defaults():
    job = builders.build_app_job(
        "job1", "/envs/e", builders.build_job_template("c", "img")
    )

    assert job.replica_timeout == 180
    assert job.replica_retry_limit == 0
    assert job.manual_trigger.replica_completion_count == 1
    assert job.manual_trigger.parallelism == 4


def test_container_app_defaults_to_multiple_revisions():
    app = builders.build_container_app(
        "app1", "/envs/e", builders.build_app_template("c", "img")
    )

    assert app.active_revisions_mode == "Multiple"
    assert app.location == "East US"


def test_builders_are_deterministic():
    kwargs = dict(ports=[Port(80)], identities=["system"], dns_name_label="x")

    first = builders.build_container_group("demo", [_container()], **kwargs)
    second = builders.build_container_group("demo", [_container()], **kwargs)

    assert first == second
