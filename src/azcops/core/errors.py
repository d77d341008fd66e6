"""Error taxonomy for container operations.

Every failure surfaced by the core is an ``AzcopsError`` subclass carrying
the operation name and target identifier, so frontends can report it
without inspecting SDK exception types. An empty lookup result is never an
error; resolvers return an empty list instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from azure.core.exceptions import HttpResponseError


class AzcopsError(RuntimeError):
    """Base class for all errors raised by the core."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        target: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target

    def __str__(self) -> str:
        prefix = ""
        if self.operation:
            prefix = f"{self.operation}"
            if self.target:
                prefix = f"{prefix} ({self.target})"
            prefix = f"{prefix}: "
        return f"{prefix}{self.message}"


class AuthenticationUnavailable(AzcopsError):
    """Raised when no credential method produced a usable token."""


class PreconditionMissing(AzcopsError):
    """Raised when an operation runs before a management client was cached."""


class BackendRequestError(AzcopsError):
    """Raised when the management API rejects a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        operation: str | None = None,
        target: str | None = None,
    ):
        super().__init__(message, operation=operation, target=target)
        self.status_code = status_code
        self.error_code = error_code


class ExternalCallFailed(AzcopsError):
    """Raised when the execution-detail HTTP call fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        operation: str | None = None,
        target: str | None = None,
    ):
        super().__init__(message, operation=operation, target=target)
        self.status_code = status_code
        self.url = url


class UnexpectedError(AzcopsError):
    """Raised for any failure that is not a backend request error."""


class OperationTimedOut(AzcopsError):
    """Raised when a long-running operation outlives its deadline."""


@contextmanager
def map_errors(operation: str, target: str | None = None) -> Iterator[None]:
    """
    Translate SDK and runtime exceptions into the core error taxonomy.

    ``AzcopsError`` instances pass through untouched. ``HttpResponseError``
    (including not-found and auth failures reported by the SDK) becomes
    ``BackendRequestError`` with the backend status and error code kept.
    Anything else becomes ``UnexpectedError``.

    Args:
        operation: Human-readable operation name used in messages.
        target: Identifier of the resource being acted on, if known.
    """
    try:
        yield
    except AzcopsError:
        raise
    except HttpResponseError as exc:
        error = getattr(exc, "error", None)
        raise BackendRequestError(
            exc.message or str(exc),
            status_code=exc.status_code,
            error_code=getattr(error, "code", None),
            operation=operation,
            target=target,
        ) from exc
    except Exception as exc:
        raise UnexpectedError(
            f"{type(exc).__name__}: {exc}",
            operation=operation,
            target=target,
        ) from exc
