"""Authentication and management-client caching.

This module builds the credential chain used for every management-plane
call and wraps it in a ``ManagementClient`` handle. The handle is cached by
an explicit ``ClientCache`` object owned by the frontend, so a session
constructs the client once and reuses it until a forced refresh.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from azure.core.credentials import TokenCredential
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import (
    AzureCliCredential,
    AzurePowerShellCredential,
    ChainedTokenCredential,
    ManagedIdentityCredential,
)
from azure.mgmt.appcontainers import ContainerAppsAPIClient
from azure.mgmt.containerinstance import ContainerInstanceManagementClient
from azure.mgmt.resource import ResourceManagementClient, SubscriptionClient

from azcops.core.config import Settings
from azcops.core.errors import AuthenticationUnavailable, PreconditionMissing

logger = logging.getLogger(__name__)


def build_credential(settings: Settings) -> TokenCredential:
    """
    Return the credential used to reach the management plane.

    A configured managed-identity client id wins exclusively. Otherwise an
    ordered chain is tried: the Azure PowerShell session, the Azure CLI
    session, then the ambient managed identity. The chain stops at the
    first credential that yields a token.
    """
    if settings.managed_identity_client_id:
        logger.debug(
            "Using ManagedIdentityCredential with identity %s",
            settings.managed_identity_client_id,
        )
        return ManagedIdentityCredential(
            client_id=settings.managed_identity_client_id
        )
    logger.debug(
        "Using ChainedTokenCredential: AzurePowerShellCredential -> "
        "AzureCliCredential -> ManagedIdentityCredential"
    )
    return ChainedTokenCredential(
        AzurePowerShellCredential(),
        AzureCliCredential(),
        ManagedIdentityCredential(),
    )


class ManagementClient:
    """
    Authenticated handle over the Azure management SDK clients.

    SDK clients are created on first access and memoized per subscription.
    """

    def __init__(self, credential: TokenCredential, settings: Settings):
        self.credential = credential
        self.settings = settings
        self._subscriptions: SubscriptionClient | None = None
        self._resources: dict[str, ResourceManagementClient] = {}
        self._container_instances: dict[str, ContainerInstanceManagementClient] = {}
        self._container_apps: dict[str, ContainerAppsAPIClient] = {}

    def _client_kwargs(self) -> dict[str, object]:
        return {
            "base_url": self.settings.management_endpoint,
            "credential_scopes": [self.settings.management_scope],
        }

    @property
    def subscriptions(self) -> SubscriptionClient:
        if self._subscriptions is None:
            self._subscriptions = SubscriptionClient(
                self.credential, **self._client_kwargs()
            )
        return self._subscriptions

    def resources(self, subscription_id: str) -> ResourceManagementClient:
        if subscription_id not in self._resources:
            self._resources[subscription_id] = ResourceManagementClient(
                self.credential, subscription_id, **self._client_kwargs()
            )
        return self._resources[subscription_id]

    def container_instances(
        self, subscription_id: str
    ) -> ContainerInstanceManagementClient:
        if subscription_id not in self._container_instances:
            self._container_instances[subscription_id] = (
                ContainerInstanceManagementClient(
                    self.credential, subscription_id, **self._client_kwargs()
                )
            )
        return self._container_instances[subscription_id]

    def container_apps(self, subscription_id: str) -> ContainerAppsAPIClient:
        if subscription_id not in self._container_apps:
            self._container_apps[subscription_id] = ContainerAppsAPIClient(
                self.credential, subscription_id, **self._client_kwargs()
            )
        return self._container_apps[subscription_id]

    def access_token(self) -> str:
        """Return a bearer token for the management audience."""
        return self.credential.get_token(self.settings.management_scope).token


def connect_client(settings: Settings) -> ManagementClient:
    """
    Build a ``ManagementClient`` and verify that it can obtain a token.

    Raises:
        AuthenticationUnavailable: If no credential method yields a token.
    """
    credential = build_credential(settings)
    try:
        credential.get_token(settings.management_scope)
    except ClientAuthenticationError as exc:
        raise AuthenticationUnavailable(
            f"No credential produced a token: {exc.message or exc}",
            operation="connect",
        ) from exc
    logger.debug("Authenticated management client initialized")
    return ManagementClient(credential, settings)


class ClientCache:
    """
    Holds at most one ``ManagementClient`` for the life of a session.

    Construction is serialized by a lock. A failed construction leaves the
    cache untouched, so the next call retries.
    """

    def __init__(
        self,
        settings: Settings,
        factory: Callable[[Settings], ManagementClient] = connect_client,
    ):
        self.settings = settings
        self._factory = factory
        self._client: ManagementClient | None = None
        self._lock = threading.Lock()

    @property
    def populated(self) -> bool:
        return self._client is not None

    def get_client(self, force: bool = False) -> ManagementClient:
        """
        Return the cached client, constructing it when absent or forced.

        Args:
            force: Always construct a new client and replace the cached one.
        """
        with self._lock:
            if force or self._client is None:
                logger.debug("Storing a new management client in the cache")
                self._client = self._factory(self.settings)
            else:
                logger.debug("Management client is already cached")
            return self._client

    def require(self) -> ManagementClient:
        """
        Return the cached client without constructing one.

        Raises:
            PreconditionMissing: If no client has been cached yet.
        """
        client = self._client
        if client is None:
            raise PreconditionMissing(
                "Management client not found; connect first.",
            )
        return client
