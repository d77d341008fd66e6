"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import questionary
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from azcops.core.executions import ExecutionDetail
from azcops.core.locator import parse_resource_id
from azcops.core.resolver import collapse

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def _prompt_style(accent: str, *, checkbox: bool = False) -> Style:
    """Questionary (prompt_toolkit) style highlighting answers in ``accent``."""
    rules = {
        "question": "bold ansibrightcyan",
        "separator": "ansibrightblack",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
        "disabled": "ansibrightblack",
    }
    for key in ("answer", "pointer", "highlighted", "selected"):
        rules[key] = f"bold {accent}"
    if checkbox:
        rules["checkbox"] = "ansibrightblack"
        rules["checkbox-selected"] = f"bold {accent}"
    return Style.from_dict(rules)


PROMPT_STYLE_SELECT = _prompt_style("ansibrightgreen", checkbox=True)
# Removals are confirmed in red.
PROMPT_STYLE_CONFIRM = _prompt_style("ansibrightred")


def _resource_group_of(state: Mapping[str, Any]) -> str:
    try:
        return parse_resource_id(str(state.get("id") or "")).get("resource_group", "")
    except ValueError:
        return ""


def _provisioning_state(state: Mapping[str, Any]) -> str:
    value = state.get("provisioning_state")
    if value is None:
        value = (state.get("properties") or {}).get("provisioning_state", "")
    return str(value or "")


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, JSON documents and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts so they stand out from command output."""
        return f"[azcops] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        err_console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with err_console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        err_console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        err_console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        err_console.print(f"[title]{title}[/]")

    def print(self, msg: str) -> None:
        """Print a raw Rich-formatted message."""
        err_console.print(msg)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            err_console.print(f"[meta]{k}[/]: {v}")

    def json(self, data: Any) -> None:
        """Print a JSON document to stdout."""
        console.print_json(data=data, default=str)

    def select_many(self, message: str, choices: list[Any]) -> list[Any]:
        """
        Prompt the user to select multiple items from a list.

        ``choices`` may be plain strings or ``questionary.Choice`` values.
        Returns the selected values (empty when cancelled).
        """
        if not choices:
            return []

        prompt = self._q_try(
            questionary.checkbox,
            self._q(message),
            choices=choices,
            style=PROMPT_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
            pointer="❯",
            checked_icon="▣",
            unchecked_icon="▢",
        )
        picked = prompt.ask()
        return list(picked or [])

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        err_console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=PROMPT_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def resources_table(
        self, states: Iterable[Mapping[str, Any]], title: str = "Resources"
    ) -> None:
        """
        Render resource state documents.

        Expects dicts with ``name``, ``id``, ``location`` and a provisioning
        state (top level or under ``properties``).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Resource group")
        t.add_column("Location", style="meta")
        t.add_column("State")

        for s in states:
            t.add_row(
                str(s.get("name", "")),
                _resource_group_of(s),
                str(s.get("location", "") or ""),
                _provisioning_state(s),
            )

        console.print(t)

    def executions_table(
        self, details: Iterable[ExecutionDetail], title: str = "Executions"
    ) -> None:
        """Render execution detail results (one row per execution)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Execution", style="ok")
        t.add_column("Result")

        for d in details:
            name = d.execution_id.rsplit("/", 1)[-1]
            t.add_row(name, "[ok]OK[/]" if d.ok else f"[err]FAIL[/] {d.error}")

        console.print(t)

    def emit(
        self,
        states: Sequence[Mapping[str, Any]],
        *,
        table: bool = False,
        title: str = "Resources",
    ) -> None:
        """
        Print lookup results.

        Nothing is printed for an empty result; JSON output is a single
        object for one result and a list otherwise.
        """
        if not states:
            return
        if table:
            self.resources_table(states, title=title)
            return
        self.json(collapse(states))


out = Out()
