"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from azcops.cli.common.exits import FATAL_EXIT_CODE, die
from azcops.core.adapters.azure import AzureResourceAdapter
from azcops.core.auth import ClientCache
from azcops.core.config import DEFAULT_POLL_INTERVAL_SECONDS, Settings
from azcops.core.errors import AuthenticationUnavailable, PreconditionMissing
from azcops.core.executions import ExecutionDetailFetcher
from azcops.core.lro import LroExecutor


@dataclass
class AppContext:
    """Settings, cached client and adapters shared by one invocation."""

    settings: Settings
    cache: ClientCache
    adapter: AzureResourceAdapter
    executor: LroExecutor

    def fetcher(self) -> ExecutionDetailFetcher:
        """Return an execution-detail fetcher using the cached credential."""
        return ExecutionDetailFetcher(self.settings, self.adapter.access_token)

    def with_timeout(self, timeout: float | None) -> LroExecutor:
        """Return the executor, or a copy with a per-command deadline."""
        if timeout is None:
            return self.executor
        return LroExecutor(
            poll_interval=self.executor.poll_interval,
            max_interval=self.executor.max_interval,
            timeout=timeout,
        )


def build_context(*, force: bool = False, settings: Settings | None = None) -> AppContext:
    """Build the application context with an authenticated client.

    Args:
        force: Always construct a fresh client.
        settings: Settings to use instead of the process environment.

    Returns:
        AppContext: Context with cache, adapter and LRO executor.
    """
    settings = settings or Settings.from_env()
    cache = ClientCache(settings)
    try:
        cache.get_client(force=force)
        adapter = AzureResourceAdapter.from_cache(cache)
    except (AuthenticationUnavailable, PreconditionMissing) as exc:
        die(str(exc), code=FATAL_EXIT_CODE)
    executor = LroExecutor(
        poll_interval=settings.poll_interval or DEFAULT_POLL_INTERVAL_SECONDS,
        timeout=settings.operation_timeout,
    )
    return AppContext(settings=settings, cache=cache, adapter=adapter, executor=executor)
