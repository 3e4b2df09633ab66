"""Tests for keyword matching and ranking."""

import pytest

from repojump.errors import EmptyRegistryError, NoMatchError
from repojump.matcher import in_group, matches_keywords, query, select_best
from repojump.registry.models import Registry, RepoRecord


def _registry() -> Registry:
    reg = Registry()
    reg.add(RepoRecord("github", "teamA/svc1", score=5.0, last_accessed=100))
    reg.add(RepoRecord("github", "teamA/svc2", score=5.0, last_accessed=200))
    reg.add(RepoRecord("github", "teamB/web", score=9.0, last_accessed=50))
    reg.add(RepoRecord("gitlab", "infra/net/vpc", score=1.0, last_accessed=10))
    reg.add(RepoRecord("gitlab", "infra/dns", score=1.0, last_accessed=10))
    return reg


def test_matches_keywords_in_order():
    key = "github/teamA/svc1"
    assert matches_keywords(key, [])
    assert matches_keywords(key, ["svc1"])
    assert matches_keywords(key, ["TEAMa", "SVC"])
    assert matches_keywords(key, ["git", "team", "1"])
    assert not matches_keywords(key, ["svc", "team"])
    assert not matches_keywords(key, ["teamB"])


def test_keywords_do_not_overlap():
    assert matches_keywords("github/aa", ["a", "a"])
    assert not matches_keywords("github/ab", ["ab", "b"])


def test_in_group_prefix():
    vpc = RepoRecord("gitlab", "infra/net/vpc")
    assert in_group(vpc, "infra")
    assert in_group(vpc, "infra/net")
    assert in_group(vpc, "infra/net/")
    assert not in_group(vpc, "inf")
    assert not in_group(vpc, "net")


def test_query_ordering():
    names = [r.name for r in query(_registry())]
    # score desc, then last access desc, then name asc
    assert names == ["teamB/web", "teamA/svc2", "teamA/svc1", "infra/dns", "infra/net/vpc"]


def test_query_filters():
    reg = _registry()
    assert [r.name for r in query(reg, remote="gitlab")] == ["infra/dns", "infra/net/vpc"]
    assert [r.name for r in query(reg, group="teamA")] == ["teamA/svc2", "teamA/svc1"]
    assert [r.name for r in query(reg, ["net"], remote="gitlab")] == ["infra/net/vpc"]
    assert query(reg, ["svc"], remote="gitlab") == []


def test_select_best():
    reg = _registry()
    best = select_best(query(reg, ["svc"]), reg, ["svc"])
    assert best.name == "teamA/svc2"


def test_select_best_no_match():
    reg = _registry()
    with pytest.raises(NoMatchError) as exc_info:
        select_best(query(reg, ["teamC"]), reg, ["teamC"])
    assert exc_info.value.keywords == ["teamC"]


def test_select_best_empty_registry():
    reg = Registry()
    with pytest.raises(EmptyRegistryError):
        select_best(query(reg, ["anything"]), reg, ["anything"])
