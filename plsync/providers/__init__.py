"""Provider abstraction public API.

Currently only Subsonic-compatible servers are implemented. Additional
providers can register by using register_provider() with a Provider instance.
"""

from .base import (
    Track,
    Playlist,
    ProviderCapabilities,
    RemoteServiceError,
    RemotePlaylistService,
    Provider,
    register_provider,
    get_provider_instance,
    available_provider_instances,
)

# Register Subsonic provider instance
from .subsonic import SubsonicProvider

register_provider(SubsonicProvider())


__all__ = [
    "Track",
    "Playlist",
    "ProviderCapabilities",
    "RemoteServiceError",
    "RemotePlaylistService",
    "Provider",
    "register_provider",
    "get_provider_instance",
    "available_provider_instances",
]
