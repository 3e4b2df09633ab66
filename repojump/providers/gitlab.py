"""GitLab REST API (v4) provider."""

from __future__ import annotations

from urllib.parse import quote

from repojump.errors import ConfigError
from repojump.providers.base import Provider, split_full_name


class GitLabProvider(Provider):
    DEFAULT_URL = "https://gitlab.com/api/v4"

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"PRIVATE-TOKEN": self.token}
        return {}

    def list_repos(self, group: str | None = None) -> list[tuple[str, str]]:
        if group:
            path = f"/groups/{quote(group, safe='')}/projects"
            params = {"include_subgroups": "true", "simple": "true"}
        elif self.token:
            path = "/projects"
            params = {"membership": "true", "simple": "true"}
        else:
            raise ConfigError(
                f"remote {self.remote}: listing repositories needs an api token or a group"
            )

        repos = []
        for item in self._get_pages(path, params):
            full_path = item.get("path_with_namespace") if isinstance(item, dict) else None
            if full_path:
                repos.append(split_full_name(full_path))
        return repos

    def list_groups(self) -> list[str]:
        return [
            item["full_path"]
            for item in self._get_pages("/groups", {"min_access_level": 10})
            if isinstance(item, dict) and item.get("full_path")
        ]
