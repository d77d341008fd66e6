"""Terminal UI utilities for azcops."""

from __future__ import annotations

from typing import Any, Mapping

import questionary

from azcops.cli.common.output import out

_MAX_NAME_WIDTH = 64

State = Mapping[str, Any]


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _resource_choice_title(state: State, *, name_width: int) -> str:
    """Format one resource as `<name>  (<location>)` with an aligned location column."""
    short_name = _truncate(str(state.get("name", "")), _MAX_NAME_WIDTH)
    location = state.get("location") or "-"
    return f"{short_name.ljust(name_width)}  ({location})"


def select_resources(states: list[State], what: str = "resources") -> list[State]:
    """Display a checkbox prompt to pick resources from a lookup result.

    Args:
        states: Resource state documents to choose from.
        what: Plural noun used in the prompt.

    Returns:
        The selected state documents, or an empty list if none selected.
    """
    shown_names = [_truncate(str(s.get("name", "")), _MAX_NAME_WIDTH) for s in states]
    name_width = max((len(name) for name in shown_names), default=0)

    choices = [
        questionary.Choice(
            title=_resource_choice_title(state, name_width=name_width),
            value=state,
        )
        for state in states
    ]
    return out.select_many(f"Select {what}:", choices)
