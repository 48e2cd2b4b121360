"""Optimistic local playlist edits mirrored to a remote server.

Every user gesture (drop, delete) is applied to the in-memory track list
synchronously and announced through ``selection_changed`` before any network
traffic happens. Exactly one remote call describing the edit is then
dispatched in the background:

    reorder (same playlist drop)  -> replace_playlist_order(full id list)
    external drop                 -> insert_items(ids, position)
    delete                        -> remove_items(pre-removal positions)

Remote failures are reported via ``sync_failed`` and never rolled back; the
local list stays the source of truth for the view until the next refresh.
Calls are not queued relative to each other, so the server may see them in
any order. That is acceptable because each call carries absolute state
(full order or explicit indices) rather than a relative delta.
"""

from __future__ import annotations
from typing import Any, Callable, Iterable, List, Optional, Sequence
from PySide6.QtCore import QObject, Signal
import logging

from ..providers.base import RemotePlaylistService, Track
from ..reorder import MoveResult, insert_block, move, remove_positions
from .dispatcher import RemoteCallDispatcher, ThreadedDispatcher
from .events import DropSource, MutationKind, SyncFailed, SyncState

logger = logging.getLogger(__name__)


class PlaylistSyncCoordinator(QObject):
    """Owns one loaded playlist's track list and keeps the server in step.

    Created when a playlist is opened, discarded when its view closes. Must
    only be used from the thread that owns the view.

    Signals:
        selection_changed: (positions: list[int], tracks: list[Track]) once per mutation
        collection_changed: Track list was replaced or mutated
        state_changed: New SyncState
        sync_finished: MutationKind of a remote call that succeeded
        sync_failed: SyncFailed for a remote call that failed
        playlist_created: Id of a playlist created from a selection
    """

    selection_changed = Signal(object, object)
    collection_changed = Signal()
    state_changed = Signal(object)
    sync_finished = Signal(object)
    sync_failed = Signal(object)
    playlist_created = Signal(str)

    def __init__(
        self,
        playlist_id: str,
        service: RemotePlaylistService,
        tracks: Iterable[Track] = (),
        dispatcher: Optional[RemoteCallDispatcher] = None,
        name: str | None = None,
        parent: Optional[QObject] = None,
    ):
        """Initialize coordinator.

        Args:
            playlist_id: Remote playlist identifier
            service: Remote playlist service (e.g. SubsonicAPIClient)
            tracks: Initial track order (as last loaded from the server)
            dispatcher: Runs remote calls; defaults to a ThreadedDispatcher
            name: Display name of the playlist
            parent: Parent QObject
        """
        super().__init__(parent)
        self.playlist_id = playlist_id
        self.name = name
        self.service = service
        self.tracks: List[Track] = list(tracks)
        self.dispatcher = dispatcher if dispatcher is not None else ThreadedDispatcher(self)
        self._state = SyncState.IDLE
        self._in_flight = 0
        # Bumped by every local edit; lets a late refresh detect it is stale
        self._generation = 0

    # ---------------- State -----------------

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def in_flight(self) -> int:
        """Number of remote calls dispatched but not yet completed."""
        return self._in_flight

    def _set_state(self, state: SyncState):
        if state != self._state:
            logger.debug(f"playlist={self.playlist_id} state {self._state.value} -> {state.value}")
            self._state = state
            self.state_changed.emit(state)

    def _settle(self):
        self._set_state(SyncState.REMOTE_SYNC_IN_FLIGHT if self._in_flight else SyncState.IDLE)

    def _begin_mutation(self):
        self._generation += 1
        self._set_state(SyncState.LOCAL_MUTATION_PENDING)

    def track_ids(self) -> List[str]:
        return [t.track_id for t in self.tracks]

    # ---------------- Local mutations -----------------

    def move_tracks(self, sources: Iterable[int], destination: int) -> MoveResult:
        """Reorder tracks within this playlist.

        Args:
            sources: Row positions being dragged
            destination: Pre-move row the block is dropped above

        Returns:
            MoveResult with the rows the moved tracks now occupy
        """
        sources = sorted(set(sources))
        if not sources:
            logger.debug("move_tracks called without sources; nothing to do")
            return MoveResult(range(destination, destination))

        self._begin_mutation()
        result = move(self.tracks, sources, destination)
        self._publish(result.positions, [self.tracks[i] for i in result.new_positions])

        ordered_ids = self.track_ids()
        logger.info(f"Reordered playlist={self.playlist_id} rows={sources} -> {result.positions}")
        self._send(MutationKind.REORDER, self.service.replace_playlist_order, self.playlist_id, ordered_ids)
        return result

    def insert_tracks(self, tracks: Sequence[Track], position: int) -> MoveResult:
        """Insert tracks coming from outside this playlist above ``position``."""
        tracks = list(tracks)
        if not tracks:
            logger.debug("insert_tracks called without tracks; nothing to do")
            return MoveResult(range(position, position))

        self._begin_mutation()
        result = insert_block(self.tracks, tracks, position)
        self._publish(result.positions, tracks)

        item_ids = [t.track_id for t in tracks]
        logger.info(f"Inserted {len(tracks)} tracks into playlist={self.playlist_id} at row {position}")
        self._send(MutationKind.INSERT, self.service.insert_items, self.playlist_id, item_ids, position)
        return result

    def remove_tracks(self, positions: Iterable[int]) -> List[Track]:
        """Remove tracks by row.

        Returns:
            Removed tracks in ascending row order
        """
        # Indices must describe the list before removal; that is what the server holds
        positions = sorted(set(positions))
        if not positions:
            logger.debug("remove_tracks called without positions; nothing to do")
            return []

        self._begin_mutation()
        removed = remove_positions(self.tracks, positions)
        self._publish(positions, removed)

        logger.info(f"Removed rows={positions} from playlist={self.playlist_id}")
        self._send(MutationKind.REMOVE, self.service.remove_items, self.playlist_id, positions)
        return removed

    def accept_drop(
        self,
        source: DropSource,
        row: int,
        positions: Iterable[int] = (),
        tracks: Sequence[Track] = (),
    ) -> MoveResult:
        """Apply a drop above ``row``.

        Args:
            source: Whether the drag started in this playlist (decided by the view)
            row: Row the items are dropped above
            positions: Dragged rows (same-playlist drops)
            tracks: Dragged tracks (external drops)
        """
        if source is DropSource.SAME_PLAYLIST:
            return self.move_tracks(positions, row)
        return self.insert_tracks(tracks, row)

    def _publish(self, positions: List[int], tracks: List[Track]):
        self.collection_changed.emit()
        self.selection_changed.emit(list(positions), list(tracks))

    # ---------------- Remote-only operations -----------------

    def create_playlist_from(self, positions: Iterable[int], name: str) -> int:
        """Create a new remote playlist holding the tracks at ``positions``.

        Returns:
            Dispatcher call id
        """
        item_ids = [self.tracks[i].track_id for i in sorted(set(positions))]
        logger.info(f"Creating playlist '{name}' from {len(item_ids)} tracks of playlist={self.playlist_id}")
        return self._send(
            MutationKind.CREATE_PLAYLIST,
            self.service.create_playlist,
            name,
            item_ids,
            on_result=lambda new_id: self.playlist_created.emit(new_id or ""),
        )

    def refresh(self) -> int:
        """Replace the local list with the server's current order (full sync).

        The result is discarded if a local edit happened while the read was
        in flight; the local list stays authoritative for the view.
        """
        logger.info(f"Refreshing playlist={self.playlist_id} from server")
        generation = self._generation
        return self._send(
            MutationKind.REFRESH,
            self.service.get_playlist,
            self.playlist_id,
            on_result=lambda result: self._apply_refresh(result, generation),
        )

    def _apply_refresh(self, result: Any, generation: int):
        playlist, tracks = result
        if generation != self._generation:
            logger.info(
                f"Discarding refresh of playlist={self.playlist_id}: "
                f"{self._generation - generation} local edit(s) since it was requested"
            )
            return
        self.name = playlist.name
        self.tracks = list(tracks)
        logger.info(f"Loaded playlist '{playlist.name}' ({len(self.tracks)} tracks)")
        self.collection_changed.emit()

    # ---------------- Dispatch -----------------

    def _send(
        self,
        kind: MutationKind,
        func: Callable[..., Any],
        *args: Any,
        on_result: Optional[Callable[[Any], None]] = None,
    ) -> int:
        """Dispatch one remote call without waiting for it."""

        def call():
            return func(*args)

        call.__name__ = f"{kind.value}:{getattr(func, '__name__', 'call')}"

        def on_success(result: Any):
            self._in_flight -= 1
            logger.debug(f"Remote {kind.value} for playlist={self.playlist_id} succeeded")
            if on_result is not None:
                on_result(result)
            self.sync_finished.emit(kind)
            self._settle()

        def on_failure(error: BaseException):
            self._in_flight -= 1
            logger.warning(f"Remote {kind.value} for playlist={self.playlist_id} failed: {error}")
            self.sync_failed.emit(SyncFailed(self.playlist_id, kind, error))
            self._settle()

        self._in_flight += 1
        self._set_state(SyncState.REMOTE_SYNC_IN_FLIGHT)
        return self.dispatcher.dispatch(call, on_success, on_failure)


__all__ = ["PlaylistSyncCoordinator"]
