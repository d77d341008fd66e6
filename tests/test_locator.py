import pytest

from azcops.core.locator import (
    ById,
    ByName,
    ResourceDescriptor,
    ResourceKind,
    build_locator,
    parse_resource_id,
    resource_id,
)

APP_ID = (
    "/subscriptions/sub-1/resourceGroups/rg1"
    "/providers/Microsoft.App/containerApps/app1"
)


def test_build_locator_by_id():
    assert build_locator(resource_id=APP_ID) == ById(APP_ID)


def test_build_locator_by_name_normalizes_empty_fields():
    assert build_locator(subscription_id="", resource_group="", name="app1") == ByName(
        None, None, "app1"
    )


def test_build_locator_rejects_id_mixed_with_name_fields():
    with pytest.raises(ValueError, match="--id"):
        build_locator(resource_id=APP_ID, name="app1")


def test_resource_id_round_trips_through_parse():
    value = resource_id(ResourceKind.CONTAINER_APP, "sub-1", "rg1", "app1")

    assert value == APP_ID
    assert parse_resource_id(value) == {
        "subscription_id": "sub-1",
        "resource_group": "rg1",
        "provider": "Microsoft.App",
        "resource_type": "containerApps",
        "name": "app1",
    }


@pytest.mark.parametrize("value", ["", "/resourceGroups/rg1", "subscriptions"])
def test_parse_resource_id_rejects_non_arm_ids(value: str):
    with pytest.raises(ValueError):
        parse_resource_id(value)


def test_descriptor_from_id_requires_group_and_name():
    descriptor = ResourceDescriptor.from_id(ResourceKind.CONTAINER_APP, APP_ID)

    assert (descriptor.subscription_id, descriptor.resource_group, descriptor.name) == (
        "sub-1",
        "rg1",
        "app1",
    )
    assert descriptor.data is None
    assert descriptor.id == APP_ID

    with pytest.raises(ValueError):
        ResourceDescriptor.from_id(ResourceKind.CONTAINER_APP, "/subscriptions/sub-1")


def test_job_kind_uses_jobs_provider_type():
    assert ResourceKind.CONTAINER_APP_JOB.provider_type == "Microsoft.App/jobs"
    assert ResourceKind.CONTAINER_GROUP.label == "container group"


def test_descriptor_from_id_rejects_another_resource_kind():
    with pytest.raises(ValueError, match="Microsoft.App/containerApps"):
        ResourceDescriptor.from_id(ResourceKind.CONTAINER_GROUP, APP_ID)


def test_descriptor_from_id_matches_provider_type_case_insensitively():
    value = APP_ID.replace("Microsoft.App/containerApps", "microsoft.app/CONTAINERAPPS")

    descriptor = ResourceDescriptor.from_id(ResourceKind.CONTAINER_APP, value)

    assert descriptor.name == "app1"
