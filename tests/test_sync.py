"""Tests for attach/detach/clean reconciliation."""

import os

import pytest

from repojump import scoring
from repojump.errors import AlreadyAttachedError, RepoNotFoundError
from repojump.registry.models import Registry, RepoRecord
from repojump.sync.remote_sync import (
    attach,
    attach_path,
    clean,
    default_path,
    detach,
    detach_path,
    qualify,
)

NOW = 1_700_000_000


def test_qualify():
    assert qualify(("teamA", "svc1")) == "teamA/svc1"
    assert qualify(("", "solo")) == "solo"
    assert qualify(("infra/net/", "vpc")) == "infra/net/vpc"
    assert qualify("teamA/svc1/") == "teamA/svc1"


def test_default_path():
    assert default_path("/ws", "github", "teamA/svc1") == os.path.join("/ws", "github", "teamA", "svc1")
    assert default_path("", "github", "teamA/svc1") == ""


def test_attach_new_records():
    reg = Registry()
    added = attach(reg, "github", [("teamA", "svc1"), ("teamA", "svc2")], NOW, workspace="/ws")
    assert [r.name for r in added] == ["teamA/svc1", "teamA/svc2"]

    svc1 = reg.get("github", "teamA/svc1")
    assert svc1.score == 0.0
    assert svc1.accessed == 0
    assert svc1.last_accessed == NOW
    assert svc1.path == default_path("/ws", "github", "teamA/svc1")


def test_attach_is_idempotent_and_never_lowers():
    reg = Registry()
    attach(reg, "github", [("teamA", "svc1")], NOW)
    record = reg.get("github", "teamA/svc1")
    scoring.record_access(reg, record, NOW + 5)
    scoring.record_access(reg, record, NOW + 6)
    snapshot = (record.score, record.accessed, record.last_accessed, record.path)

    added = attach(reg, "github", [("teamA", "svc1")], NOW + 100, workspace="/elsewhere")
    assert added == []
    assert len(reg) == 1
    assert (record.score, record.accessed, record.last_accessed, record.path) == snapshot


def test_attach_group_scoped():
    reg = Registry()
    discovered = [("infra", "dns"), ("infra/net", "vpc"), ("apps", "web"), ("infrastructure", "x")]
    added = attach(reg, "gitlab", discovered, NOW, group="infra")
    assert sorted(r.name for r in added) == ["infra/dns", "infra/net/vpc"]


def test_detach_named():
    reg = Registry()
    attach(reg, "github", [("teamA", "svc1"), ("teamA", "svc2")], NOW)
    attach(reg, "gitlab", [("teamA", "svc1")], NOW)

    removed = detach(reg, "github", [("teamA", "svc1"), "teamA/missing"])
    assert [r.name for r in removed] == ["teamA/svc1"]
    assert reg.get("github", "teamA/svc1") is None
    assert reg.get("gitlab", "teamA/svc1") is not None


def test_detach_whole_remote():
    reg = Registry()
    attach(reg, "github", [("teamA", "svc1"), ("teamA", "svc2")], NOW)
    attach(reg, "gitlab", [("infra", "dns")], NOW)

    removed = detach(reg, "github")
    assert len(removed) == 2
    assert [r.remote for r in reg] == ["gitlab"]


def test_detach_then_attach_resets_history():
    reg = Registry()
    attach(reg, "github", [("teamA", "svc1")], NOW)
    record = reg.get("github", "teamA/svc1")
    for i in range(3):
        scoring.record_access(reg, record, NOW + i)

    detach(reg, "github", ["teamA/svc1"])
    attach(reg, "github", [("teamA", "svc1")], NOW - 1000)

    fresh = reg.get("github", "teamA/svc1")
    assert fresh.score == 0.0
    assert fresh.accessed == 0
    assert fresh.last_accessed == NOW - 1000


def test_clean_removes_only_missing():
    reg = Registry()
    reg.add(RepoRecord("github", "keep", path="/present/keep", score=4.0, accessed=3))
    reg.add(RepoRecord("github", "gone", path="/absent/gone", score=8.0, accessed=7))
    reg.add(RepoRecord("gitlab", "kept", path="/present/kept", score=1.5, accessed=1))

    removed = clean(reg, lambda path: path.startswith("/present"))
    assert [r.name for r in removed] == ["gone"]
    assert reg.get("github", "keep").score == 4.0
    assert reg.get("github", "keep").accessed == 3
    assert reg.get("gitlab", "kept").score == 1.5
    assert reg.get("gitlab", "kept").accessed == 1


def test_attach_path():
    reg = Registry()
    record = attach_path(reg, "github", "teamA/svc1", "/src/svc1", NOW)
    assert record.path == "/src/svc1"
    assert record.last_accessed == NOW

    with pytest.raises(AlreadyAttachedError):
        attach_path(reg, "github", "teamA/svc1", "/src/other", NOW)
    with pytest.raises(AlreadyAttachedError):
        attach_path(reg, "github", "teamA/svc9", "/src/svc1", NOW)


def test_detach_path():
    reg = Registry()
    attach_path(reg, "github", "teamA/svc1", "/src/svc1", NOW)
    record = detach_path(reg, "/src/svc1")
    assert record.name == "teamA/svc1"
    assert len(reg) == 0

    with pytest.raises(RepoNotFoundError):
        detach_path(reg, "/src/svc1")
