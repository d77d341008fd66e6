import json

from typer.testing import CliRunner

from azcops.cli.cli import app

runner = CliRunner()


def test_fragment_registry_prints_json():
    result = runner.invoke(
        app, ["fragment", "app-registry", "--server", "acr.io", "--identity", "mi"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"server": "acr.io", "identity": "mi"}


def test_fragment_invalid_registry_exits_with_error():
    result = runner.invoke(app, ["fragment", "group-registry", "--server", "acr.io"])

    assert result.exit_code == 1


def test_fragment_traffic_weight_written_to_file_feeds_ingress(tmp_path):
    traffic = tmp_path / "traffic.json"
    ingress = tmp_path / "ingress.json"

    first = runner.invoke(
        app,
        [
            "fragment",
            "traffic-weight",
            "--revision-name",
            "r1",
            "--weight",
            "100",
            "--output",
            str(traffic),
        ],
    )
    second = runner.invoke(
        app,
        [
            "fragment",
            "ingress",
            "--target-port",
            "80",
            "--traffic",
            str(traffic),
            "--output",
            str(ingress),
        ],
    )

    assert first.exit_code == 0
    assert second.exit_code == 0
    data = json.loads(ingress.read_text())
    assert data["targetPort"] == 80
    assert data["transport"] == "Auto"
    assert data["traffic"] == [{"revisionName": "r1", "weight": 100, "label": ""}]


def test_fragment_container_applies_defaults_and_ports():
    result = runner.invoke(
        app,
        [
            "fragment",
            "container",
            "--name",
            "web",
            "--image",
            "nginx",
            "--port",
            "80",
            "--secure-env",
            "T=x",
        ],
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["cpu"] == 2.0
    assert data["memoryInGb"] == 3.0
    assert data["ports"] == [{"port": 80, "protocol": "TCP"}]
    assert data["env"] == [{"name": "T", "secureValue": "x"}]
