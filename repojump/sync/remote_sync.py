"""Reconciliation of the registry against remote listings and the filesystem.

All functions mutate the in-memory ``Registry`` only; the caller persists it
once at the end of the command.
"""

from __future__ import annotations

import os
from typing import Callable, Iterable, Sequence, Union

from loguru import logger

from repojump.errors import AlreadyAttachedError, RepoNotFoundError
from repojump.matcher import in_group
from repojump.registry.models import Registry, RepoRecord

# A repository identity as reported by a provider: (group, name), or an
# already-qualified "group/name" string.
Identity = Union[tuple[str, str], str]


def qualify(identity: Identity) -> str:
    if isinstance(identity, str):
        return identity.strip("/")
    group, name = identity
    group = group.strip("/")
    return f"{group}/{name}" if group else name


def default_path(workspace: str, remote: str, name: str) -> str:
    """Where a clone of ``remote:name`` lives inside the workspace."""
    if not workspace:
        return ""
    return os.path.join(workspace, remote, *name.split("/"))


def attach(
    registry: Registry,
    remote: str,
    discovered: Iterable[Identity],
    now: int,
    workspace: str = "",
    group: str | None = None,
) -> list[RepoRecord]:
    """Insert every discovered identity the registry does not know yet.

    Existing records are left untouched. With ``group`` set, only
    identities inside that group (or its subgroups) are considered.

    Returns:
        The newly created records.
    """
    added: list[RepoRecord] = []
    for identity in discovered:
        name = qualify(identity)
        if not name:
            continue
        record = RepoRecord(
            remote=remote,
            name=name,
            path=default_path(workspace, remote, name),
            score=0.0,
            accessed=0,
            last_accessed=now,
        )
        if group and not in_group(record, group):
            continue
        if record.key in registry:
            continue
        registry.add(record)
        added.append(record)

    logger.info(f"Attached {len(added)} new repositories for remote {remote}")
    return added


def detach(
    registry: Registry,
    remote: str,
    identities: Sequence[Identity] | None = None,
) -> list[RepoRecord]:
    """Remove the named records of ``remote``, or all of them when omitted."""
    if identities is None:
        names = [r.name for r in registry.for_remote(remote)]
    else:
        names = [qualify(i) for i in identities]

    removed = []
    for name in names:
        record = registry.remove(remote, name)
        if record is not None:
            removed.append(record)

    logger.info(f"Detached {len(removed)} repositories from remote {remote}")
    return removed


def clean(registry: Registry, exists: Callable[[str], bool]) -> list[RepoRecord]:
    """Remove every record whose clone path fails the ``exists`` predicate."""
    removed = []
    for record in registry:
        if not exists(record.path):
            registry.remove(record.remote, record.name)
            removed.append(record)

    logger.info(f"Cleaned {len(removed)} repositories with missing clones")
    return removed


def attach_path(
    registry: Registry,
    remote: str,
    name: str,
    path: str,
    now: int,
) -> RepoRecord:
    """Bind an existing directory to ``remote:name``."""
    name = qualify(name)
    if registry.get(remote, name) is not None:
        raise AlreadyAttachedError(f"repository {remote}:{name} already exists")
    if registry.get_by_path(path) is not None:
        raise AlreadyAttachedError(
            f"path {path} is already bound to another repository, detach it first"
        )
    record = registry.add(
        RepoRecord(remote=remote, name=name, path=path, last_accessed=now)
    )
    logger.info(f"Attached {path} as {remote}:{name}")
    return record


def detach_path(registry: Registry, path: str) -> RepoRecord:
    """Unbind whatever record points at ``path``."""
    record = registry.get_by_path(path)
    if record is None:
        raise RepoNotFoundError("", path, f"path {path} is not bound to any repository")
    registry.remove(record.remote, record.name)
    logger.info(f"Detached {path} from {record.remote}:{record.name}")
    return record
