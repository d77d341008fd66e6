"""Parsing of flat CLI values into builder inputs.

This module translates repeated ``NAME=VALUE`` options and fragment files
(JSON written by the ``fragment`` commands) into the values the core
builders accept, so command modules only deal with typed inputs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

from azcops.core.builders import build_port, normalize_env
from azcops.core.models import Port

T = TypeVar("T")


def split_pair(item: str, *, option: str) -> tuple[str, str]:
    """
    Split a ``NAME=VALUE`` option value.

    Raises:
        ValueError: If the value has no ``=`` or an empty name.
    """
    if "=" not in item:
        raise ValueError(f"Invalid {option} value: '{item}' (expected NAME=VALUE)")
    key, value = item.split("=", 1)
    if not key.strip():
        raise ValueError(f"Invalid {option} value: '{item}' (empty name)")
    return key.strip(), value


def parse_env(
    values: Iterable[str],
    secrets: Iterable[str] = (),
    *,
    secret_field: str = "secret_ref",
) -> list[dict[str, str]]:
    """
    Build environment variable inputs from ``--env`` and secret options.

    Plain values come first, then secret-backed entries, each in the order
    given.

    Args:
        values: ``NAME=VALUE`` strings.
        secrets: ``NAME=SECRET`` strings.
        secret_field: ``"secret_ref"`` (apps, jobs) or ``"secure_value"``
            (container groups).
    """
    env = [
        {"name": name, "value": value}
        for name, value in (split_pair(v, option="--env") for v in values)
    ]
    env.extend(
        {"name": name, secret_field: secret}
        for name, secret in (split_pair(s, option="secret env") for s in secrets)
    )
    return env


def read_json(path: Path) -> Any:
    """
    Read a JSON fragment file.

    Raises:
        ValueError: If the file cannot be read or is not valid JSON.
    """
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc.strerror}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc.msg}") from exc


def _load(entry: Any, path: Path, loader: Callable[[Any], T]) -> T:
    if not isinstance(entry, dict):
        raise ValueError(f"{path} must contain a JSON object")
    try:
        return normalize_env(loader(entry))
    except KeyError as exc:
        raise ValueError(f"{path} is missing field {exc.args[0]!r}") from exc


def load_fragment(path: Path, loader: Callable[[Any], T]) -> T:
    """
    Load a fragment file with a model's ``from_dict``.

    Raises:
        ValueError: If the file is unreadable or misses required fields.
    """
    return _load(read_json(path), path, loader)


def load_fragments(paths: Iterable[Path], loader: Callable[[Any], T]) -> list[T]:
    """Load one fragment per file, or several from a file holding a list."""
    items: list[T] = []
    for path in paths:
        data = read_json(path)
        entries = data if isinstance(data, list) else [data]
        items.extend(_load(entry, path, loader) for entry in entries)
    return items


def parse_port(value: str) -> Port:
    """
    Parse ``PORT`` or ``PORT/PROTOCOL`` (protocol defaults to TCP).

    Raises:
        ValueError: If the port is not an integer or the protocol is unknown.
    """
    port, _, protocol = value.partition("/")
    try:
        number = int(port)
    except ValueError as exc:
        raise ValueError(f"Invalid port: '{value}' (expected PORT[/PROTOCOL])") from exc
    return build_port(number, protocol or "TCP")
