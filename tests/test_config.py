"""Tests for config loading."""

import textwrap

import pytest

from repojump.config import Config, load_config, parse_config
from repojump.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("REPOJUMP_DATA_PATH", str(tmp_path / "data"))
    config = load_config(tmp_path / "nope.yaml")
    assert config.remotes == []
    assert config.workspace.endswith("dev")
    assert config.data_dir == str(tmp_path / "data")


def test_load_full_config(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")
    monkeypatch.delenv("UNSET_TOKEN", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        textwrap.dedent(
            """
            workspace: ~/code
            lock_timeout: 3
            remotes:
              - name: github
                clone: {domain: github.com, use_ssh: true}
                user: {name: Dev, email: dev@example.com}
                api: {provider: github, token: "${GITHUB_TOKEN}"}
              - name: corp
                api: {provider: gitlab, token: "${UNSET_TOKEN}", url: "https://git.corp/api/v4"}
              - name: scratch
            """
        )
    )

    config = load_config(path)
    assert not config.workspace.startswith("~")
    assert config.workspace.endswith("code")
    assert config.lock_timeout == 3.0

    github = config.must_get_remote("github")
    assert github.clone.use_ssh is True
    assert github.user.email == "dev@example.com"
    assert github.api.token == "ghp_secret"

    corp = config.must_get_remote("corp")
    assert corp.api.provider == "gitlab"
    assert corp.api.token == ""
    assert corp.api.url == "https://git.corp/api/v4"

    assert config.must_get_remote("scratch").api is None
    assert config.get_remote("nope") is None
    with pytest.raises(ConfigError):
        config.must_get_remote("nope")


def test_duplicate_remote():
    with pytest.raises(ConfigError):
        parse_config({"remotes": [{"name": "a"}, {"name": "a"}]})


def test_unknown_provider():
    with pytest.raises(ConfigError):
        parse_config({"remotes": [{"name": "a", "api": {"provider": "bitbucket"}}]})


def test_remote_needs_name():
    with pytest.raises(ConfigError):
        parse_config({"remotes": [{"clone": {"domain": "x"}}]})


@pytest.mark.parametrize(
    "section",
    [
        {"clone": "github.com"},
        {"user": "Dev"},
        {"api": "github"},
        {"api": ["github"]},
    ],
)
def test_remote_section_must_be_mapping(section):
    with pytest.raises(ConfigError):
        parse_config({"remotes": [{"name": "a", **section}]})


def test_bad_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("remotes: [unclosed")
    with pytest.raises(ConfigError):
        load_config(path)


def test_config_env_path(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("workspace: /srv/ws\n")
    monkeypatch.setenv("REPOJUMP_CONFIG_PATH", str(path))
    assert load_config().workspace == "/srv/ws"
    assert isinstance(load_config(), Config)
