from azcops.core.config import Settings


def test_from_env_uses_defaults_for_empty_environment():
    settings = Settings.from_env({})

    assert settings.managed_identity_client_id is None
    assert settings.subscription_id is None
    assert settings.management_endpoint == "https://management.azure.com"
    assert settings.execution_api_version == "2023-04-01-preview"
    assert settings.default_location == "East US"
    assert settings.poll_interval == 5.0
    assert settings.operation_timeout is None
    assert settings.management_scope == "https://management.azure.com/.default"


def test_from_env_reads_overrides_and_strips_trailing_slash():
    settings = Settings.from_env(
        {
            "MANAGED_IDENTITY_CLIENT_ID": " 1111-2222 ",
            "AZURE_SUBSCRIPTION_ID": "sub-1",
            "AZCOPS_MANAGEMENT_ENDPOINT": "https://management.example.com/",
            "AZCOPS_LOCATION": "West Europe",
            "AZCOPS_POLL_INTERVAL": "2",
            "AZCOPS_OPERATION_TIMEOUT": "600",
        }
    )

    assert settings.managed_identity_client_id == "1111-2222"
    assert settings.subscription_id == "sub-1"
    assert settings.management_endpoint == "https://management.example.com"
    assert settings.management_scope == "https://management.example.com/.default"
    assert settings.default_location == "West Europe"
    assert settings.poll_interval == 2.0
    assert settings.operation_timeout == 600.0


def test_from_env_falls_back_on_invalid_numbers():
    settings = Settings.from_env(
        {"AZCOPS_POLL_INTERVAL": "soon", "AZCOPS_HTTP_TIMEOUT": "-3"}
    )

    assert settings.poll_interval == 5.0
    assert settings.http_timeout == 0.0


def test_zero_operation_timeout_means_no_deadline():
    assert Settings.from_env({"AZCOPS_OPERATION_TIMEOUT": "0"}).operation_timeout is None
