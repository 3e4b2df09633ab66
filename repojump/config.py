"""Configuration — workspace location, lock tuning and remote definitions.

Loaded from YAML::

    workspace: ~/dev
    lock_timeout: 10
    remotes:
      - name: github
        clone: {domain: github.com, use_ssh: true}
        user: {name: me, email: me@example.com}
        api: {provider: github, token: ${GITHUB_TOKEN}}
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from repojump.errors import ConfigError
from repojump.registry.lock import DEFAULT_TIMEOUT

CONFIG_ENV = "REPOJUMP_CONFIG_PATH"
DATA_ENV = "REPOJUMP_DATA_PATH"
DEFAULT_WORKSPACE = "~/dev"
PROVIDERS = ("github", "gitlab")


@dataclass
class CloneConfig:
    domain: str
    use_ssh: bool = False


@dataclass
class UserConfig:
    name: str
    email: str


@dataclass
class ApiConfig:
    provider: str  # github | gitlab
    token: str = ""
    url: str = ""  # Self-hosted API base; empty means the public service


@dataclass
class RemoteConfig:
    """A named git hosting source."""

    name: str
    clone: Optional[CloneConfig] = None
    user: Optional[UserConfig] = None
    api: Optional[ApiConfig] = None


@dataclass
class Config:
    workspace: str = ""
    data_dir: str = ""
    lock_timeout: float = DEFAULT_TIMEOUT
    remotes: list[RemoteConfig] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.workspace:
            self.workspace = expand(DEFAULT_WORKSPACE)
        if not self.data_dir:
            self.data_dir = str(get_data_dir())

    def get_remote(self, name: str) -> RemoteConfig | None:
        for remote in self.remotes:
            if remote.name == name:
                return remote
        return None

    def must_get_remote(self, name: str) -> RemoteConfig:
        remote = self.get_remote(name)
        if remote is None:
            raise ConfigError(f"could not find remote {name}")
        return remote


def expand(value: str) -> str:
    """Expand ``~`` and ``$VAR`` / ``${VAR}`` references."""
    return os.path.expanduser(os.path.expandvars(value))


def get_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return Path.home() / ".config" / "repojump" / "config.yaml"


def get_data_dir() -> Path:
    env_path = os.environ.get(DATA_ENV)
    if env_path:
        return Path(env_path)
    return Path.home() / ".local" / "share" / "repojump"


def load_config(path: str | Path | None = None) -> Config:
    """Load the YAML config file. A missing file yields the defaults."""
    config_path = Path(path) if path else get_config_path()
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return Config()
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"could not parse config {config_path}: {exc}") from exc

    return parse_config(data or {})


def parse_config(data: dict) -> Config:
    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping")

    remotes: list[RemoteConfig] = []
    seen: set[str] = set()
    for item in data.get("remotes") or []:
        remote = _parse_remote(item)
        if remote.name in seen:
            raise ConfigError(f"remote {remote.name} is duplicate in your config")
        seen.add(remote.name)
        remotes.append(remote)

    try:
        return Config(
            workspace=expand(str(data.get("workspace", DEFAULT_WORKSPACE))),
            lock_timeout=float(data.get("lock_timeout", DEFAULT_TIMEOUT)),
            remotes=remotes,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid config value: {exc}") from exc


def _parse_remote(item: object) -> RemoteConfig:
    if not isinstance(item, dict) or not item.get("name"):
        raise ConfigError(f"remote entry needs a name: {item!r}")

    remote = RemoteConfig(name=str(item["name"]))
    for section in ("clone", "user", "api"):
        value = item.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(f"remote {remote.name}: {section} must be a mapping, got {value!r}")

    clone = item.get("clone")
    if clone:
        if not clone.get("domain"):
            raise ConfigError(f"remote {remote.name}: clone.domain is required")
        remote.clone = CloneConfig(
            domain=clone["domain"],
            use_ssh=bool(clone.get("use_ssh", False)),
        )

    user = item.get("user")
    if user:
        remote.user = UserConfig(name=user.get("name", ""), email=user.get("email", ""))

    api = item.get("api")
    if api:
        provider = api.get("provider", "")
        if provider not in PROVIDERS:
            raise ConfigError(
                f"remote {remote.name}: unknown api provider {provider!r}, "
                f"expected one of {', '.join(PROVIDERS)}"
            )
        token = os.path.expandvars(str(api.get("token") or ""))
        if token.startswith("$"):
            # Unset environment variable
            token = ""
        remote.api = ApiConfig(
            provider=provider,
            token=token,
            url=api.get("url", ""),
        )
    return remote
