"""Subsonic API client.

Handles all HTTP requests to a Subsonic-compatible server (Subsonic,
Navidrome, Airsonic, ...). Every request carries salted-token credentials and
asks for JSON responses.

Playlist writes map onto the coarse operations the API offers:
  * ``createPlaylist`` with an existing ``playlistId`` overwrites the song
    list; this is the only way to reorder a playlist.
  * ``updatePlaylist`` can append songs (``songIdToAdd``) or drop entries by
    index (``songIndexToRemove``).
"""

from __future__ import annotations
import hashlib
import logging
import secrets
import string
from typing import Any, Dict, List, Sequence, Tuple

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from ..base import Playlist, RemoteServiceError, Track

logger = logging.getLogger(__name__)

_SALT_ALPHABET = string.ascii_letters + string.digits


def _as_list(value: Any) -> List[Dict[str, Any]]:
    """Normalize a JSON node that is a single object for one-element lists."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return list(value)


class SubsonicAPIClient:
    """Subsonic REST API client.

    Read calls are retried on transport errors; write calls are sent once and
    any failure is raised to the caller.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        api_version: str = "1.16.1",
        client_name: str = "plsync",
        timeout: float = 30,
        verify_ssl: bool = True,
    ):
        self.base_url = base_url.rstrip("/")
        self.username = str(username)
        self.password = str(password)
        self.api_version = api_version
        self.client_name = client_name
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    # ---------------- HTTP helpers -----------------

    def _auth_params(self) -> Dict[str, str]:
        salt = "".join(secrets.choice(_SALT_ALPHABET) for _ in range(12))
        token = hashlib.md5((self.password + salt).encode("utf-8")).hexdigest()
        return {
            "u": self.username,
            "t": token,
            "s": salt,
            "v": self.api_version,
            "c": self.client_name,
            "f": "json",
        }

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/rest/{endpoint}.view"

    def _parse(self, endpoint: str, r: requests.Response) -> Dict[str, Any]:
        """Unwrap the ``subsonic-response`` envelope.

        Raises:
            requests.HTTPError: On non-2xx status
            RemoteServiceError: On malformed payload or ``status: failed``
        """
        r.raise_for_status()
        try:
            payload = r.json()
        except ValueError as e:
            raise RemoteServiceError(f"Invalid JSON from {endpoint}: {e}") from e
        if not isinstance(payload, dict) or "subsonic-response" not in payload:
            raise RemoteServiceError(f"Unexpected response from {endpoint}: missing 'subsonic-response'")
        resp = payload["subsonic-response"]
        if resp.get("status") != "ok":
            error = resp.get("error") or {}
            raise RemoteServiceError(error.get("message") or "request failed", code=error.get("code"))
        return resp

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.5, max=10),
        reraise=True,
    )
    def _get(self, endpoint: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """Execute GET request with retry on transport errors.

        Args:
            endpoint: API method name without suffix (e.g., 'getPlaylist')
            params: Optional query parameters; list values repeat the key
        """
        query = {**self._auth_params(), **(params or {})}
        r = requests.get(self._url(endpoint), params=query, timeout=self.timeout, verify=self.verify_ssl)
        return self._parse(endpoint, r)

    def _post(self, endpoint: str, params: Sequence[Tuple[str, Any]]) -> Dict[str, Any]:
        """Execute form POST request (no retry).

        Args:
            endpoint: API method name
            params: Ordered key/value pairs; keys may repeat (songId, songIndexToRemove)
        """
        body = list(self._auth_params().items()) + [(k, str(v)) for k, v in params]
        r = requests.post(self._url(endpoint), data=body, timeout=self.timeout, verify=self.verify_ssl)
        return self._parse(endpoint, r)

    # ---------------- Read operations -----------------

    def ping(self) -> bool:
        return self._get("ping").get("status") == "ok"

    def get_playlists(self) -> List[Playlist]:
        resp = self._get("getPlaylists")
        items = _as_list((resp.get("playlists") or {}).get("playlist"))
        logger.debug(f"Fetched {len(items)} playlists")
        return [Playlist.from_dict(p) for p in items]

    def get_playlist(self, playlist_id: str) -> Tuple[Playlist, List[Track]]:
        """Fetch playlist metadata and ordered entries.

        Returns:
            (Playlist, tracks in server order)
        """
        resp = self._get("getPlaylist", {"id": playlist_id})
        data = resp.get("playlist")
        if not isinstance(data, dict):
            raise RemoteServiceError(f"Unexpected response from getPlaylist: no playlist '{playlist_id}'")
        tracks = [Track.from_dict(e) for e in _as_list(data.get("entry"))]
        logger.debug(f"Playlist {playlist_id} fetched {len(tracks)} entries")
        return Playlist.from_dict(data), tracks

    # ---------------- Write operations -----------------

    def replace_playlist_order(self, playlist_id: str, ordered_item_ids: Sequence[str]) -> None:
        """Overwrite a playlist's songs with exactly this ordered list."""
        params = [("playlistId", playlist_id)] + [("songId", sid) for sid in ordered_item_ids]
        self._post("createPlaylist", params)
        logger.info(f"Replaced playlist={playlist_id} order ({len(ordered_item_ids)} entries)")

    def insert_items(self, playlist_id: str, item_ids: Sequence[str], at_position: int) -> None:
        """Insert songs as a block before ``at_position``.

        The API can only append, so a mid-list insert reads the current order,
        splices and replaces the whole list.
        """
        _, current = self.get_playlist(playlist_id)
        if at_position >= len(current):
            params = [("playlistId", playlist_id)] + [("songIdToAdd", sid) for sid in item_ids]
            self._post("updatePlaylist", params)
            logger.info(f"Appended {len(item_ids)} entries to playlist={playlist_id}")
            return
        ids = [t.track_id for t in current]
        ids[at_position:at_position] = list(item_ids)
        self.replace_playlist_order(playlist_id, ids)

    def remove_items(self, playlist_id: str, positions: Sequence[int]) -> None:
        """Remove entries by index (ascending, pre-removal indices)."""
        params = [("playlistId", playlist_id)] + [("songIndexToRemove", i) for i in sorted(positions)]
        self._post("updatePlaylist", params)
        logger.info(f"Removed {len(positions)} entries from playlist={playlist_id}")

    def create_playlist(self, name: str, item_ids: Sequence[str]) -> str:
        """Create a new playlist and return its id ('' if the server omits it)."""
        params = [("name", name)] + [("songId", sid) for sid in item_ids]
        resp = self._post("createPlaylist", params)
        pl = resp.get("playlist")
        playlist_id = str(pl.get("id", "")) if isinstance(pl, dict) else ""
        logger.info(f"Created playlist '{name}' id={playlist_id or '?'} ({len(item_ids)} entries)")
        return playlist_id


__all__ = ["SubsonicAPIClient"]
