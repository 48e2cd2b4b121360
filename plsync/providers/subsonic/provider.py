"""Subsonic provider implementation.

Builds Subsonic API clients from the ``server`` configuration section and
validates that section up front.
"""

from __future__ import annotations
from typing import Any, Dict
from ..base import Provider, ProviderCapabilities
from .client import SubsonicAPIClient

_REQUIRED = ("url", "username", "password")


class SubsonicProvider(Provider):
    """Subsonic-compatible server provider."""

    @property
    def name(self) -> str:
        return "subsonic"

    @property
    def capabilities(self) -> ProviderCapabilities:
        # Reordering and mid-list inserts both go through a full replace
        return ProviderCapabilities(replace_playlist=True, positional_insert=False)

    def create_client(self, config: Dict[str, Any]) -> SubsonicAPIClient:
        """Create API client.

        Args:
            config: Server configuration dict with keys:
                - url: Server base URL (e.g., https://music.example.com)
                - username / password: Account credentials
                - api_version: Subsonic API version (default: 1.16.1)
                - client_name: Client identifier sent with each call
                - timeout: Request timeout in seconds (default: 30)
                - verify_ssl: Verify TLS certificates (default: True)

        Raises:
            ValueError: If required config missing
        """
        self.validate_config(config)
        return SubsonicAPIClient(
            base_url=config["url"],
            username=config["username"],
            password=config["password"],
            api_version=config.get("api_version") or "1.16.1",
            client_name=config.get("client_name") or "plsync",
            timeout=config.get("timeout", 30),
            verify_ssl=config.get("verify_ssl", True),
        )

    def validate_config(self, config: Dict[str, Any]) -> None:
        missing = [key for key in _REQUIRED if not config.get(key)]
        if missing:
            hints = ", ".join(f"PLSYNC__SERVER__{key.upper()}" for key in missing)
            raise ValueError(f"Server config missing required field(s): {', '.join(missing)} (set {hints})")
        if not str(config["url"]).startswith(("http://", "https://")):
            raise ValueError(f"Server url must start with http:// or https://, got '{config['url']}'")
