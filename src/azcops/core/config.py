"""Runtime settings read from the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

MANAGED_IDENTITY_ENV = "MANAGED_IDENTITY_CLIENT_ID"
SUBSCRIPTION_ENV = "AZURE_SUBSCRIPTION_ID"
ENDPOINT_ENV = "AZCOPS_MANAGEMENT_ENDPOINT"
EXECUTION_API_VERSION_ENV = "AZCOPS_EXECUTION_API_VERSION"
LOCATION_ENV = "AZCOPS_LOCATION"
POLL_INTERVAL_ENV = "AZCOPS_POLL_INTERVAL"
OPERATION_TIMEOUT_ENV = "AZCOPS_OPERATION_TIMEOUT"
HTTP_TIMEOUT_ENV = "AZCOPS_HTTP_TIMEOUT"

DEFAULT_MANAGEMENT_ENDPOINT = "https://management.azure.com"
DEFAULT_EXECUTION_API_VERSION = "2023-04-01-preview"
DEFAULT_LOCATION = "East US"
DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    """Return a non-negative float from env, falling back on bad input."""
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return default


def _str_env(env: Mapping[str, str], name: str) -> str | None:
    value = (env.get(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """
    Settings shared by the client cache, executor and detail fetcher.

    Attributes:
        managed_identity_client_id: When set, authenticate exclusively
            with this user-assigned managed identity.
        subscription_id: Overrides the default subscription lookup.
        management_endpoint: Base URL of the management plane.
        execution_api_version: API version used for execution details.
        default_location: Location used when create calls omit one.
        poll_interval: Initial seconds between LRO status checks.
        operation_timeout: Optional deadline for an LRO, in seconds.
        http_timeout: Timeout for the execution-detail HTTP call.
    """

    managed_identity_client_id: str | None = None
    subscription_id: str | None = None
    management_endpoint: str = DEFAULT_MANAGEMENT_ENDPOINT
    execution_api_version: str = DEFAULT_EXECUTION_API_VERSION
    default_location: str = DEFAULT_LOCATION
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    operation_timeout: float | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    @property
    def management_scope(self) -> str:
        """Token scope for the management audience."""
        return f"{self.management_endpoint}/.default"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``env`` (defaults to ``os.environ``)."""
        env = os.environ if env is None else env
        timeout = _float_env(env, OPERATION_TIMEOUT_ENV, 0.0)
        return cls(
            managed_identity_client_id=_str_env(env, MANAGED_IDENTITY_ENV),
            subscription_id=_str_env(env, SUBSCRIPTION_ENV),
            management_endpoint=(
                _str_env(env, ENDPOINT_ENV) or DEFAULT_MANAGEMENT_ENDPOINT
            ).rstrip("/"),
            execution_api_version=_str_env(env, EXECUTION_API_VERSION_ENV)
            or DEFAULT_EXECUTION_API_VERSION,
            default_location=_str_env(env, LOCATION_ENV) or DEFAULT_LOCATION,
            poll_interval=_float_env(
                env, POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL_SECONDS
            ),
            operation_timeout=timeout or None,
            http_timeout=_float_env(env, HTTP_TIMEOUT_ENV, DEFAULT_HTTP_TIMEOUT_SECONDS),
        )
