"""Registry data models — repository records, the registry value, and queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from repojump.errors import RepoNotFoundError


def split_name(qualified_name: str) -> tuple[str, str]:
    """Split ``group/sub/name`` into ``("group/sub", "name")``."""
    group, _, base = qualified_name.rpartition("/")
    return group, base


@dataclass
class RepoRecord:
    """A single local clone tracked by the registry."""

    # Identity
    remote: str
    name: str  # Qualified name: group path + repository name

    # Location
    path: str = ""

    # Usage
    score: float = 0.0
    accessed: int = 0
    last_accessed: int = 0  # Unix epoch seconds

    @property
    def key(self) -> tuple[str, str]:
        return (self.remote, self.name)

    @property
    def group(self) -> str:
        return split_name(self.name)[0]

    @property
    def base(self) -> str:
        return split_name(self.name)[1]

    @property
    def display_key(self) -> str:
        return f"{self.remote}/{self.name}"


@dataclass
class Registry:
    """All records of one workspace, owned by a single command invocation."""

    records: dict[tuple[str, str], RepoRecord] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[RepoRecord]:
        return iter(list(self.records.values()))

    def __contains__(self, key: object) -> bool:
        return key in self.records

    def get(self, remote: str, name: str) -> RepoRecord | None:
        return self.records.get((remote, name))

    def must_get(self, remote: str, name: str) -> RepoRecord:
        record = self.get(remote, name)
        if record is None:
            raise RepoNotFoundError(remote, name)
        return record

    def get_by_path(self, path: str) -> RepoRecord | None:
        if not path:
            return None
        for record in self.records.values():
            if record.path and record.path == path:
                return record
        return None

    def add(self, record: RepoRecord) -> RepoRecord:
        self.records[record.key] = record
        return record

    def remove(self, remote: str, name: str) -> RepoRecord | None:
        return self.records.pop((remote, name), None)

    def for_remote(self, remote: str) -> list[RepoRecord]:
        return [r for r in self.records.values() if r.remote == remote]

    def remotes(self) -> list[str]:
        return sorted({r.remote for r in self.records.values()})

    def groups(self, remote: str) -> list[str]:
        """Return the distinct non-empty groups of a remote, sorted."""
        return sorted({r.group for r in self.for_remote(remote) if r.group})


@dataclass
class RepoQuery:
    """Query for ranking and filtering the registry."""

    keywords: list[str] = field(default_factory=list)
    remote: str = ""
    group: str = ""
