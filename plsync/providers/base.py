"""Provider abstraction layer.

Defines provider-neutral domain models and the remote playlist contract the
sync coordinator talks to, so the core never depends on a concrete server API.

Key abstractions:
- Domain models: Track, Playlist
- RemotePlaylistService: remote ordered-list operations used by the coordinator
- Provider: client factory + configuration validation
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence, Tuple

# ---------------- Domain Models -----------------

@dataclass(frozen=True)
class Track:
    track_id: str  # provider-specific identifier
    title: str
    artist: str | None = None
    album: str | None = None
    duration_s: int | None = None
    track_number: int | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.track_id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration_s,
            "track": self.track_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Track:
        """Build a track from a server entry (``getPlaylist`` entry / song)."""
        duration = data.get("duration")
        number = data.get("track")
        return cls(
            track_id=str(data["id"]),
            title=data.get("title") or "",
            artist=data.get("artist"),
            album=data.get("album"),
            duration_s=int(duration) if duration is not None else None,
            track_number=int(number) if number is not None else None,
        )


@dataclass(frozen=True)
class Playlist:
    playlist_id: str
    name: str
    owner: str | None = None
    song_count: int = 0
    duration_s: int = 0
    public: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Playlist:
        return cls(
            playlist_id=str(data["id"]),
            name=data.get("name") or "",
            owner=data.get("owner"),
            song_count=int(data.get("songCount") or 0),
            duration_s=int(data.get("duration") or 0),
            public=bool(data.get("public", False)),
        )

# ---------------- Capability descriptor -----------------

@dataclass(frozen=True)
class ProviderCapabilities:
    # Whole-list overwrite; the only way some servers can reorder
    replace_playlist: bool = True
    # Insert at an arbitrary index without a full replace
    positional_insert: bool = False
    remove_by_index: bool = True
    create_playlist: bool = True

# ---------------- Errors -----------------

class RemoteServiceError(RuntimeError):
    """Remote server rejected a request or answered with a malformed payload."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message if code is None else f"error {code}: {message}")
        self.code = code
        self.message = message

# ---------------- Remote playlist contract -----------------

class RemotePlaylistService(Protocol):
    """Remote ordered-list operations consumed by the sync coordinator.

    Every mutation is self-describing (full target order or explicit index
    lists) so calls may be applied server-side in any arrival order.
    Implementations raise on failure; the caller decides how to surface it.
    """

    def replace_playlist_order(self, playlist_id: str, ordered_item_ids: Sequence[str]) -> None:
        """Overwrite the playlist with exactly this ordered id list."""
        ...  # pragma: no cover

    def insert_items(self, playlist_id: str, item_ids: Sequence[str], at_position: int) -> None:
        """Insert ids as a block before ``at_position``."""
        ...  # pragma: no cover

    def remove_items(self, playlist_id: str, positions: Sequence[int]) -> None:
        """Remove entries by index (indices refer to the pre-removal order)."""
        ...  # pragma: no cover

    def get_playlist(self, playlist_id: str) -> Tuple[Playlist, List[Track]]:
        """Fetch playlist metadata and its ordered tracks."""
        ...  # pragma: no cover

    def get_playlists(self) -> List[Playlist]:
        ...  # pragma: no cover

    def create_playlist(self, name: str, item_ids: Sequence[str]) -> str:
        """Create a playlist holding ``item_ids`` and return its id."""
        ...  # pragma: no cover

# ---------------- Provider Factory -----------------

class Provider(ABC):
    """Provider abstraction: client factory plus configuration validation.

    Example:
        provider = get_provider_instance('subsonic')
        provider.validate_config(config['server'])
        client = provider.create_client(config['server'])
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., 'subsonic')."""

    @property
    def capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities()

    @abstractmethod
    def create_client(self, config: Dict[str, Any]) -> RemotePlaylistService:
        """Create an API client from server configuration.

        Raises:
            ValueError: If config is invalid
        """

    @abstractmethod
    def validate_config(self, config: Dict[str, Any]) -> None:
        """Validate provider-specific configuration.

        Raises:
            ValueError: If required config keys missing or invalid
        """


# ---------------- Provider instance registry -----------------

_provider_instances: dict[str, Provider] = {}


def register_provider(provider: Provider) -> None:
    _provider_instances[provider.name] = provider


def get_provider_instance(name: str) -> Provider:
    """Get registered provider instance by name.

    Raises:
        KeyError: If provider not registered
    """
    return _provider_instances[name]


def available_provider_instances() -> list[str]:
    """Get list of available provider instance names."""
    return sorted(_provider_instances.keys())


__all__ = [
    'Track', 'Playlist', 'ProviderCapabilities', 'RemoteServiceError',
    'RemotePlaylistService', 'Provider',
    'register_provider', 'get_provider_instance', 'available_provider_instances',
]
