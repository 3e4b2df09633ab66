"""Command-layer operations consumed by the CLI.

Every mutating operation is a single locked load -> mutate -> save cycle,
so two shells never lose each other's updates. Network listing happens
before the lock is taken.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Callable, Sequence

import httpx
from loguru import logger

from repojump import matcher, scoring
from repojump.config import Config
from repojump.providers import create_provider
from repojump.registry.lock import with_lock
from repojump.registry.models import Registry, RepoQuery, RepoRecord
from repojump.registry.store import RegistryStore
from repojump.sync import remote_sync
from repojump.sync.remote_sync import Identity


def current_time() -> int:
    return int(time.time())


@dataclass
class Context:
    """Everything one invocation needs: config plus the store it implies."""

    config: Config
    store: RegistryStore

    @classmethod
    def from_config(cls, config: Config) -> "Context":
        return cls(config=config, store=RegistryStore(config.data_dir))

    def locked(self, body: Callable[[Registry], object]):
        return with_lock(
            self.store,
            body,
            timeout=self.config.lock_timeout,
        )


# ── Read-only ────────────────────────────────────────────────────────


def list_entries(ctx: Context, query: RepoQuery | None = None) -> list[RepoRecord]:
    """Ranked records matching ``query``; never writes."""
    registry = ctx.store.load()
    return matcher.run_query(registry, query or RepoQuery())


def list_groups(
    ctx: Context,
    remote: str,
    from_provider: bool = False,
    client: httpx.Client | None = None,
) -> list[str]:
    """Groups of ``remote`` known locally, or as reported by its provider."""
    remote_cfg = ctx.config.must_get_remote(remote)
    if from_provider:
        with create_provider(remote_cfg, client) as provider:
            return sorted(provider.list_groups())
    return ctx.store.load().groups(remote)


# ── Visits ───────────────────────────────────────────────────────────


def resolve_target(ctx: Context, query: RepoQuery, now: int | None = None) -> RepoRecord:
    """Pick the best match for ``query``, count the visit, and return it."""
    now = current_time() if now is None else now

    def body(registry: Registry) -> RepoRecord:
        candidates = matcher.run_query(registry, query)
        best = matcher.select_best(candidates, registry, query.keywords)
        return scoring.record_access(registry, best, now)

    record = ctx.locked(body)
    logger.debug(f"Resolved {' '.join(query.keywords) or '<best>'} to {record.display_key}")
    return record


def record_visit(ctx: Context, remote: str, name: str, now: int | None = None) -> RepoRecord:
    """Count a visit to the exact record ``remote:name``."""
    now = current_time() if now is None else now

    def body(registry: Registry) -> RepoRecord:
        return scoring.record_access(registry, registry.must_get(remote, name), now)

    return ctx.locked(body)


# ── Reconciliation ───────────────────────────────────────────────────


def attach_discovered(
    ctx: Context,
    remote: str,
    identities: Sequence[Identity],
    group: str | None = None,
    now: int | None = None,
) -> list[RepoRecord]:
    now = current_time() if now is None else now
    workspace = ctx.config.workspace
    return ctx.locked(
        lambda registry: remote_sync.attach(
            registry, remote, identities, now, workspace=workspace, group=group
        )
    )


def sync_remote(
    ctx: Context,
    remote: str,
    group: str | None = None,
    now: int | None = None,
    client: httpx.Client | None = None,
) -> list[RepoRecord]:
    """Discover the repositories of ``remote`` and attach the new ones.

    The provider is queried before the lock is taken; if it fails,
    nothing is written.
    """
    remote_cfg = ctx.config.must_get_remote(remote)
    with create_provider(remote_cfg, client) as provider:
        discovered = provider.list_repos(group)
    logger.info(f"Provider for {remote} reported {len(discovered)} repositories")
    return attach_discovered(ctx, remote, discovered, group=group, now=now)


def detach_remote(
    ctx: Context,
    remote: str,
    identities: Sequence[Identity] | None = None,
) -> list[RepoRecord]:
    return ctx.locked(lambda registry: remote_sync.detach(registry, remote, identities))


def clean_missing(
    ctx: Context,
    exists: Callable[[str], bool] = os.path.isdir,
    dry_run: bool = False,
) -> list[RepoRecord]:
    """Drop records whose clone directory no longer exists."""
    if dry_run:
        return [r for r in ctx.store.load() if not exists(r.path)]
    return ctx.locked(lambda registry: remote_sync.clean(registry, exists))


# ── Directory binding ────────────────────────────────────────────────


def attach_path(
    ctx: Context,
    remote: str,
    name: str,
    path: str,
    now: int | None = None,
) -> RepoRecord:
    now = current_time() if now is None else now
    path = os.path.abspath(path)
    return ctx.locked(lambda registry: remote_sync.attach_path(registry, remote, name, path, now))


def detach_path(ctx: Context, path: str) -> RepoRecord:
    path = os.path.abspath(path)
    return ctx.locked(lambda registry: remote_sync.detach_path(registry, path))
