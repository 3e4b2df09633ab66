"""GitHub REST API provider."""

from __future__ import annotations

from repojump.errors import ConfigError
from repojump.providers.base import Provider, split_full_name


class GitHubProvider(Provider):
    DEFAULT_URL = "https://api.github.com"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def list_repos(self, group: str | None = None) -> list[tuple[str, str]]:
        if group:
            # A group is either an organization or a user account.
            if group in self.list_groups():
                path = f"/orgs/{group}/repos"
            else:
                path = f"/users/{group}/repos"
        elif self.token:
            path = "/user/repos"
        else:
            # Anonymous listing without a group would walk every public repository.
            raise ConfigError(
                f"remote {self.remote}: listing repositories needs an api token or a group"
            )

        repos = []
        for item in self._get_pages(path):
            full_name = item.get("full_name") if isinstance(item, dict) else None
            if full_name:
                repos.append(split_full_name(full_name))
        return repos

    def list_groups(self) -> list[str]:
        if not self.token:
            return []
        return [
            item["login"]
            for item in self._get_pages("/user/orgs")
            if isinstance(item, dict) and item.get("login")
        ]
