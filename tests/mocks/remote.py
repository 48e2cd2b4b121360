from __future__ import annotations
from typing import Any, Callable, Dict, List, Sequence, Tuple

from plsync.providers.base import Playlist, Track


class FakePlaylistService:
    """In-memory stand-in for a remote playlist server (no network).

    Records every call in ``calls``; operations listed in ``fail`` raise
    ``failure`` instead of applying.
    """

    def __init__(self, track_ids: Sequence[str] = (), name: str = 'Test Playlist'):
        self.remote_ids: List[str] = list(track_ids)
        self.name = name
        self.calls: List[Tuple[Any, ...]] = []
        self.fail: set[str] = set()
        self.failure: BaseException = ConnectionError('server unreachable')
        self.created: Dict[str, List[str]] = {}

    def _maybe_fail(self, op: str):
        if op in self.fail:
            raise self.failure

    def replace_playlist_order(self, playlist_id: str, ordered_item_ids: Sequence[str]) -> None:
        self.calls.append(('replace_playlist_order', playlist_id, list(ordered_item_ids)))
        self._maybe_fail('replace_playlist_order')
        self.remote_ids = list(ordered_item_ids)

    def insert_items(self, playlist_id: str, item_ids: Sequence[str], at_position: int) -> None:
        self.calls.append(('insert_items', playlist_id, list(item_ids), at_position))
        self._maybe_fail('insert_items')
        self.remote_ids[at_position:at_position] = list(item_ids)

    def remove_items(self, playlist_id: str, positions: Sequence[int]) -> None:
        self.calls.append(('remove_items', playlist_id, list(positions)))
        self._maybe_fail('remove_items')
        for index in sorted(positions, reverse=True):
            del self.remote_ids[index]

    def get_playlist(self, playlist_id: str):
        self.calls.append(('get_playlist', playlist_id))
        self._maybe_fail('get_playlist')
        playlist = Playlist(playlist_id=playlist_id, name=self.name, song_count=len(self.remote_ids))
        return playlist, [Track(track_id=tid, title=tid.upper()) for tid in self.remote_ids]

    def get_playlists(self):
        self.calls.append(('get_playlists',))
        return [Playlist(playlist_id='pl1', name=self.name, song_count=len(self.remote_ids))]

    def create_playlist(self, name: str, item_ids: Sequence[str]) -> str:
        self.calls.append(('create_playlist', name, list(item_ids)))
        self._maybe_fail('create_playlist')
        new_id = f'new{len(self.created) + 1}'
        self.created[new_id] = list(item_ids)
        return new_id


class ManualDispatcher:
    """Dispatcher that keeps every call in flight until the test completes it."""

    def __init__(self):
        self._next_id = 1
        self.pending: Dict[int, Tuple[Callable[[], Any], Callable, Callable]] = {}

    def dispatch(self, call, on_success, on_failure) -> int:
        call_id = self._next_id
        self._next_id += 1
        self.pending[call_id] = (call, on_success, on_failure)
        return call_id

    @property
    def in_flight(self) -> int:
        return len(self.pending)

    def complete(self, call_id: int) -> None:
        """Run a pending call now and deliver its outcome."""
        call, on_success, on_failure = self.pending.pop(call_id)
        try:
            result = call()
        except Exception as e:
            on_failure(e)
        else:
            on_success(result)

    def complete_all(self) -> None:
        for call_id in sorted(self.pending):
            self.complete(call_id)


class ImmediateDispatcher(ManualDispatcher):
    """Dispatcher completing each call synchronously inside dispatch()."""

    def dispatch(self, call, on_success, on_failure) -> int:
        call_id = super().dispatch(call, on_success, on_failure)
        self.complete(call_id)
        return call_id
