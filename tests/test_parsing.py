import json

import pytest

from azcops.cli.common.parsing import (
    load_fragment,
    load_fragments,
    parse_env,
    parse_port,
    split_pair,
)
from azcops.core.models import (
    ExecutionTemplate,
    InstanceContainer,
    Port,
    RegistryCredential,
)


def test_split_pair_keeps_equals_in_value():
    assert split_pair("URL=a=b", option="--env") == ("URL", "a=b")


@pytest.mark.parametrize("value", ["broken", "=value"])
def test_split_pair_rejects_invalid_input(value: str):
    with pytest.raises(ValueError, match="--env"):
        split_pair(value, option="--env")


def test_parse_env_orders_values_before_secrets():
    env = parse_env(["A=1"], ["B=b-secret"], secret_field="secure_value")

    assert env == [
        {"name": "A", "value": "1"},
        {"name": "B", "secure_value": "b-secret"},
    ]


def test_parse_port_defaults_to_tcp():
    assert parse_port("80") == Port(80, "TCP")
    assert parse_port("53/udp") == Port(53, "UDP")
    with pytest.raises(ValueError, match="PORT"):
        parse_port("http")


def test_load_fragment_reads_json_object(tmp_path):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps({"server": "acr.io", "identity": "/ids/a"}))

    assert load_fragment(path, RegistryCredential.from_dict) == RegistryCredential(
        server="acr.io", identity="/ids/a"
    )


def test_load_fragments_accepts_lists_and_reports_missing_fields(tmp_path):
    many = tmp_path / "many.json"
    many.write_text(json.dumps([{"server": "a.io"}, {"server": "b.io"}]))
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"identity": "/ids/a"}))

    assert [r.server for r in load_fragments([many], RegistryCredential.from_dict)] == [
        "a.io",
        "b.io",
    ]
    with pytest.raises(ValueError, match="server"):
        load_fragments([broken], RegistryCredential.from_dict)


def test_load_fragment_rejects_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{nope")

    with pytest.raises(ValueError, match="not valid JSON"):
        load_fragment(path, RegistryCredential.from_dict)


def test_loaded_containers_drop_env_without_value(tmp_path):
    template = tmp_path / "template.json"
    template.write_text(
        json.dumps(
            {
                "containers": [
                    {
                        "name": "job",
                        "image": "busybox",
                        "env": [{"name": "EMPTY"}, {"name": "B", "secretRef": "b"}],
                    }
                ]
            }
        )
    )
    container = tmp_path / "container.json"
    container.write_text(
        json.dumps(
            {
                "name": "web",
                "image": "nginx",
                "env": [{"name": "TOKEN", "secureValue": "s"}, {"name": "EMPTY"}],
            }
        )
    )

    loaded = load_fragment(template, ExecutionTemplate.from_dict)
    [group_container] = load_fragments([container], InstanceContainer.from_dict)

    assert [e.name for e in loaded.containers[0].env] == ["B"]
    assert [e.name for e in group_container.env] == ["TOKEN"]
