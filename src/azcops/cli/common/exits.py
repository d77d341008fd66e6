"""Exit handling utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from azcops.cli.common.output import out
from azcops.core.errors import (
    AuthenticationUnavailable,
    AzcopsError,
    PreconditionMissing,
)

# Exit code for invocations that cannot proceed at all (no client, no auth).
FATAL_EXIT_CODE = 2


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


@contextmanager
def exit_on_error() -> Iterator[None]:
    """
    Turn core errors into CLI exits.

    Missing client or credentials end the invocation with
    ``FATAL_EXIT_CODE``; any other core error or invalid input exits 1.
    """
    try:
        yield
    except (PreconditionMissing, AuthenticationUnavailable) as exc:
        exit_from_exc(exc, message=str(exc), code=FATAL_EXIT_CODE)
    except AzcopsError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
