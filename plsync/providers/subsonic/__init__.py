"""Subsonic provider package.

- client.py: REST client for reading and rewriting playlists
- provider.py: Provider implementation (config validation, client factory)
"""

from .client import SubsonicAPIClient
from .provider import SubsonicProvider

__all__ = ["SubsonicAPIClient", "SubsonicProvider"]
