"""Execution-template merging for starting app jobs.

Starting a job may override its stored template wholesale, replace the
primary container's command, or add environment variables. The merge keeps
the stored template's image, name and resources where the caller did not
supply a full override.

Environment variable names are not deduplicated: an override entry and a
stored entry with the same name both end up in the result, override first.
Callers that need unique names must filter before submitting.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence, Union

from azcops.core.builders import EnvInput, build_env_vars
from azcops.core.models import AppContainer, ExecutionTemplate, JobTemplate

Template = Union[JobTemplate, ExecutionTemplate]


def _primary(template: Template) -> AppContainer:
    if not template.containers:
        raise ValueError("Job template has no containers")
    return template.containers[0]


def merge_execution_template(
    existing: Template,
    override: ExecutionTemplate | None = None,
    command: Sequence[str] | None = None,
    env: Iterable[EnvInput] | None = None,
) -> Template:
    """
    Merge start-time overrides into a job's stored template.

    1. A full ``override`` wins for image, name and resources; the stored
       primary container's environment entries that are not already in the
       override's primary container are appended after the override's own.
    2. Otherwise a non-empty ``command`` builds a fresh primary container
       from the stored image, name and resources, with the command
       replaced wholesale.
    3. An ``env`` override (with or without ``command``) appends the stored
       entries first, then every override entry. Without ``command`` the
       stored command is kept.
    4. With no override at all, ``existing`` is returned unchanged.

    Args:
        existing: The job's currently stored template.
        override: Complete replacement execution template.
        command: Replacement command for the primary container.
        env: Additional environment variables for the primary container.

    Returns:
        The template to submit; ``existing`` itself when nothing overrides.

    Raises:
        ValueError: If a template involved in the merge has no containers.
    """
    if override is None and not command and env is None:
        return existing

    stored = _primary(existing)

    if override is not None:
        first = _primary(override)
        appended = tuple(e for e in stored.env if e not in first.env)
        merged = replace(first, env=first.env + appended)
        return ExecutionTemplate(containers=(merged, *override.containers[1:]))

    container = AppContainer(
        name=stored.name,
        image=stored.image,
        cpu=stored.cpu,
        memory=stored.memory,
        command=tuple(command) if command else stored.command,
    )
    if env is not None:
        container = replace(container, env=stored.env + build_env_vars(env))
    return ExecutionTemplate(containers=(container,))


def as_execution_template(template: Template) -> ExecutionTemplate:
    """Return ``template`` in execution-template shape."""
    if isinstance(template, ExecutionTemplate):
        return template
    return ExecutionTemplate(containers=tuple(template.containers))
