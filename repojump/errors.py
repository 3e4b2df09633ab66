"""Error taxonomy for repojump.

Library code raises these; ``repojump.cli`` turns them into console
messages and a non-zero exit status.
"""

from __future__ import annotations


class RepoJumpError(Exception):
    """Base class for every error the core can report."""


# ---------------------------------------------------------------------------
# Registry persistence
# ---------------------------------------------------------------------------


class DataCorruptError(RepoJumpError):
    """The snapshot file exists but its bytes cannot be decoded."""


class UnsupportedVersionError(RepoJumpError):
    """The snapshot declares a format version this build does not read."""

    def __init__(self, found: int, supported: int) -> None:
        self.found = found
        self.supported = supported
        super().__init__(f"unsupported snapshot version {found}, supports: {supported}")


class SaveFailedError(RepoJumpError):
    """Writing the snapshot failed; the previous snapshot is still intact."""


class LockTimeoutError(RepoJumpError):
    """The workspace lock could not be acquired in time."""

    def __init__(self, lock_path: str, waited: float) -> None:
        self.lock_path = lock_path
        self.waited = waited
        super().__init__(
            f"workspace is busy (lock: {lock_path}); gave up after {waited:.1f}s"
        )


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class EmptyRegistryError(RepoJumpError):
    """The registry holds no repositories at all."""

    def __init__(self) -> None:
        super().__init__("there is no repository in the registry yet, attach or sync one first")


class NoMatchError(RepoJumpError):
    """Filtering left no candidate."""

    def __init__(self, keywords: list[str] | tuple[str, ...] = ()) -> None:
        self.keywords = list(keywords)
        shown = " ".join(self.keywords) or "<none>"
        super().__init__(f"could not find repository matching {shown}")


class RepoNotFoundError(RepoJumpError):
    def __init__(self, remote: str, name: str, message: str = "") -> None:
        self.remote = remote
        self.name = name
        super().__init__(message or f"could not find repository {remote}:{name}")


class AlreadyAttachedError(RepoJumpError):
    """A key or a directory is already bound to a record."""


# ---------------------------------------------------------------------------
# Outside collaborators
# ---------------------------------------------------------------------------


class ProviderUnavailableError(RepoJumpError):
    """A remote provider listing failed."""

    def __init__(self, remote: str, reason: str) -> None:
        self.remote = remote
        self.reason = reason
        super().__init__(f"provider for remote {remote} is unavailable: {reason}")


class ConfigError(RepoJumpError):
    """Invalid or incomplete configuration."""
