"""Git operations — clone URLs and per-clone configuration."""

from __future__ import annotations

from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError, Repo
from loguru import logger

from repojump.config import CloneConfig, UserConfig


def clone_url(clone: CloneConfig, name: str) -> str:
    """Return the URL ``git clone`` would use for ``name`` on this remote."""
    if clone.use_ssh:
        return f"git@{clone.domain}:{name}.git"
    return f"https://{clone.domain}/{name}.git"


def is_git_repo(path: str | Path) -> bool:
    try:
        Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False
    return True


def get_origin_url(path: str | Path) -> str:
    """Return the origin remote URL for a local clone, or empty string."""
    try:
        repo = Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return ""
    if "origin" in [r.name for r in repo.remotes]:
        return repo.remotes.origin.url
    return ""


def configure_clone(
    path: str | Path,
    url: str = "",
    user: UserConfig | None = None,
) -> None:
    """Point ``origin`` at ``url`` and set the commit identity of a clone.

    Raises:
        ValueError: If ``path`` is not a git repository.
    """
    try:
        repo = Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise ValueError(f"Directory is not a Git repo: {path}")

    if url:
        if "origin" in [r.name for r in repo.remotes]:
            repo.remotes.origin.set_url(url)
        else:
            repo.create_remote("origin", url)
        logger.debug(f"Set origin of {path} to {url}")

    if user is not None:
        with repo.config_writer() as writer:
            writer.set_value("user", "name", user.name)
            writer.set_value("user", "email", user.email)
        logger.debug(f"Set user of {path} to {user.name} <{user.email}>")
