"""Keyword matcher — ranks registry records for list and jump commands.

A record matches when every keyword occurs, case-insensitively and in
order, in its display key ``remote/group/name``. Each keyword must start
after the end of the previous keyword's occurrence, the same way
directory-jump tools match path fragments.
"""

from __future__ import annotations

from typing import Sequence

from repojump.errors import EmptyRegistryError, NoMatchError
from repojump.registry.models import Registry, RepoQuery, RepoRecord


def matches_keywords(display_key: str, keywords: Sequence[str]) -> bool:
    haystack = display_key.lower()
    pos = 0
    for keyword in keywords:
        idx = haystack.find(keyword.lower(), pos)
        if idx < 0:
            return False
        pos = idx + len(keyword)
    return True


def in_group(record: RepoRecord, group: str) -> bool:
    """True when ``record`` lives in ``group`` or one of its subgroups."""
    group = group.strip("/")
    if not group:
        return True
    return record.group == group or record.group.startswith(group + "/")


def rank_key(record: RepoRecord) -> tuple:
    return (-record.score, -record.last_accessed, record.name, record.remote)


def query(
    registry: Registry,
    keywords: Sequence[str] = (),
    remote: str = "",
    group: str = "",
) -> list[RepoRecord]:
    """Return matching records, best first.

    Order: score descending, then last access descending, then qualified
    name ascending.
    """
    candidates = []
    for record in registry:
        if remote and record.remote != remote:
            continue
        if group and not in_group(record, group):
            continue
        if not matches_keywords(record.display_key, keywords):
            continue
        candidates.append(record)
    return sorted(candidates, key=rank_key)


def run_query(registry: Registry, q: RepoQuery) -> list[RepoRecord]:
    return query(registry, q.keywords, remote=q.remote, group=q.group)


def select_best(
    candidates: Sequence[RepoRecord],
    registry: Registry,
    keywords: Sequence[str] = (),
) -> RepoRecord:
    """Pick the single jump target from a ranked candidate list.

    Raises:
        EmptyRegistryError: The registry had no records at all.
        NoMatchError: Records exist but none survived filtering.
    """
    if len(registry) == 0:
        raise EmptyRegistryError()
    if not candidates:
        raise NoMatchError(keywords)
    return candidates[0]
