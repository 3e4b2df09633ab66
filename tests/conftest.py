"""Shared fixtures."""

import pytest

from repojump.commands import Context
from repojump.config import CloneConfig, Config, ApiConfig, RemoteConfig, UserConfig


@pytest.fixture
def config(tmp_path):
    workspace = tmp_path / "ws"
    workspace.mkdir()
    return Config(
        workspace=str(workspace),
        data_dir=str(tmp_path / "data"),
        lock_timeout=2.0,
        remotes=[
            RemoteConfig(
                name="github",
                clone=CloneConfig(domain="github.com", use_ssh=True),
                user=UserConfig(name="Dev", email="dev@example.com"),
                api=ApiConfig(provider="github", token="t0ken"),
            ),
            RemoteConfig(
                name="gitlab",
                clone=CloneConfig(domain="gitlab.com"),
                api=ApiConfig(provider="gitlab", token="gl-t0ken"),
            ),
            RemoteConfig(name="local"),
        ],
    )


@pytest.fixture
def ctx(config):
    return Context.from_config(config)
