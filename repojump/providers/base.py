"""Provider capability and the factory that picks a variant from config."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator

import httpx
from loguru import logger

from repojump.config import RemoteConfig
from repojump.errors import ConfigError, ProviderUnavailableError

DEFAULT_TIMEOUT = 15.0
PER_PAGE = 100
MAX_PAGES = 50


class Provider(ABC):
    """Read-only listing capability of a git hosting service.

    Parameters
    ----------
    remote : str
        Name of the configured remote, used in error messages.
    base_url : str
        API root, e.g. ``https://api.github.com``.
    token : str
        Access token; anonymous access when empty.
    client : httpx.Client | None
        Injected HTTP client (tests pass one built on ``httpx.MockTransport``).
    """

    def __init__(
        self,
        remote: str,
        base_url: str,
        token: str = "",
        client: httpx.Client | None = None,
    ) -> None:
        self.remote = remote
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=DEFAULT_TIMEOUT)

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Provider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @abstractmethod
    def list_repos(self, group: str | None = None) -> list[tuple[str, str]]:
        """Return ``(group, name)`` pairs, optionally restricted to one group."""

    @abstractmethod
    def list_groups(self) -> list[str]:
        """Return the group paths visible to the configured account."""

    def _headers(self) -> dict[str, str]:
        return {}

    def _get_pages(self, path: str, params: dict[str, Any] | None = None) -> Iterator[Any]:
        """Yield items from every page of a list endpoint."""
        query = dict(params or {})
        query["per_page"] = PER_PAGE
        for page in range(1, MAX_PAGES + 1):
            query["page"] = page
            items = self._get(path, query)
            if not isinstance(items, list):
                raise ProviderUnavailableError(self.remote, f"unexpected response from {path}")
            yield from items
            if len(items) < PER_PAGE:
                return

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} {params}")
        try:
            resp = self._client.get(url, params=params, headers=self._headers())
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                self.remote, f"{exc.response.status_code} from {path}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderUnavailableError(self.remote, str(exc)) from exc


def split_full_name(full_name: str) -> tuple[str, str]:
    group, _, name = full_name.rpartition("/")
    return group, name


def create_provider(remote: RemoteConfig, client: httpx.Client | None = None) -> Provider:
    """Build the provider variant configured for ``remote``."""
    from repojump.providers.github import GitHubProvider
    from repojump.providers.gitlab import GitLabProvider

    if remote.api is None:
        raise ConfigError(
            f"remote {remote.name} does not enable an api provider, please configure it first"
        )
    api = remote.api
    if api.provider == "github":
        return GitHubProvider(remote.name, api.url or GitHubProvider.DEFAULT_URL, api.token, client)
    if api.provider == "gitlab":
        return GitLabProvider(remote.name, api.url or GitLabProvider.DEFAULT_URL, api.token, client)
    raise ConfigError(f"remote {remote.name}: unsupported provider {api.provider}")
