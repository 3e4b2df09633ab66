"""Remote providers — list repositories and groups on a hosting service."""

from repojump.providers.base import Provider, create_provider

__all__ = ["Provider", "create_provider"]
