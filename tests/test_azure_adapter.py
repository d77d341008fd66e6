from types import SimpleNamespace

import pytest

from azcops.core.adapters.azure import AzureResourceAdapter
from azcops.core.auth import ClientCache
from azcops.core.config import Settings
from azcops.core.errors import PreconditionMissing
from azcops.core.locator import ResourceKind


class _Model:
    def __init__(self, **data):
        self.__dict__.update(data)

    def as_dict(self):
        return dict(self.__dict__)


class _Collection:
    def __init__(self, items):
        self.items = items
        self.calls: list[tuple] = []

    def list_by_resource_group(self, resource_group):
        self.calls.append(("list", resource_group))
        return iter(self.items)

    def get(self, resource_group, name):
        self.calls.append(("get", resource_group, name))
        return _Model(name=name)


class _Client:
    def __init__(self, settings: Settings, subscriptions=(), groups=(), exists=()):
        self.settings = settings
        self.apps = _Collection([_Model(name="app1")])
        self.jobs = _Collection([])
        self.groups_ops = _Collection([_Model(name="cg1")])
        self.checked: list[tuple[str, str]] = []
        existing = set(exists)

        def _check(resource_id, api_version):
            self.checked.append((resource_id, api_version))
            return resource_id in existing

        self.subscriptions = SimpleNamespace(
            subscriptions=SimpleNamespace(
                list=lambda: iter(
                    SimpleNamespace(subscription_id=s) for s in subscriptions
                ),
                get=lambda sid: SimpleNamespace(subscription_id=sid),
            )
        )
        self._resources = SimpleNamespace(
            resource_groups=SimpleNamespace(
                list=lambda: iter(SimpleNamespace(name=g) for g in groups),
                get=lambda name: SimpleNamespace(name=name),
            ),
            resources=SimpleNamespace(check_existence_by_id=_check),
        )

    def resources(self, subscription_id):
        return self._resources

    def container_apps(self, subscription_id):
        return SimpleNamespace(
            container_apps=self.apps, jobs=self.jobs, managed_environments=None
        )

    def container_instances(self, subscription_id):
        return SimpleNamespace(container_groups=self.groups_ops)


def test_default_subscription_prefers_configured_value():
    adapter = AzureResourceAdapter(
        _Client(Settings(subscription_id="sub-env"), subscriptions=["sub-a"])
    )

    assert adapter.default_subscription_id() == "sub-env"


def test_default_subscription_falls_back_to_first_listed():
    adapter = AzureResourceAdapter(_Client(Settings(), subscriptions=["sub-a", "sub-b"]))

    assert adapter.default_subscription_id() == "sub-a"


def test_exists_checks_the_resource_id_with_kind_api_version():
    app_id = "/subscriptions/s/resourceGroups/rg1/providers/Microsoft.App/containerApps/app1"
    client = _Client(Settings(), exists=[app_id])
    adapter = AzureResourceAdapter(client)

    assert adapter.exists(ResourceKind.CONTAINER_APP, "s", "rg1", "app1") is True
    assert adapter.exists(ResourceKind.CONTAINER_APP, "s", "rg1", "nope") is False
    assert client.checked[0] == (app_id, "2023-05-01")


def test_list_and_get_dispatch_by_kind():
    client = _Client(Settings(), groups=["rg1", "rg2"])
    adapter = AzureResourceAdapter(client)

    assert list(adapter.list_resource_groups("s")) == ["rg1", "rg2"]
    assert list(adapter.list(ResourceKind.CONTAINER_GROUP, "s", "rg1")) == [{"name": "cg1"}]
    assert adapter.get(ResourceKind.CONTAINER_APP, "s", "rg1", "app1") == {"name": "app1"}
    assert client.apps.calls == [("get", "rg1", "app1")]
    assert client.groups_ops.calls == [("list", "rg1")]


def test_from_cache_requires_a_connected_client():
    cache = ClientCache(Settings(), factory=lambda settings: _Client(settings))

    with pytest.raises(PreconditionMissing):
        AzureResourceAdapter.from_cache(cache)

    cache.get_client()
    assert isinstance(AzureResourceAdapter.from_cache(cache), AzureResourceAdapter)
