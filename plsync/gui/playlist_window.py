"""Main window hosting a single playlist editor."""
from __future__ import annotations
from typing import Optional
from PySide6.QtWidgets import QMainWindow, QWidget
import logging

from ..sync import MutationKind, PlaylistSyncCoordinator, SyncState
from .playlist_view import PlaylistView

logger = logging.getLogger(__name__)


class PlaylistWindow(QMainWindow):
    """Window showing one playlist; closing it discards the coordinator."""

    def __init__(
        self,
        coordinator: PlaylistSyncCoordinator,
        confirm_remove: bool = True,
        shutdown_wait_ms: int = 5000,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.coordinator = coordinator
        self.shutdown_wait_ms = shutdown_wait_ms
        self.view = PlaylistView(coordinator, confirm_remove=confirm_remove, parent=self)
        self.setCentralWidget(self.view)
        self.resize(900, 600)

        self.view.status_message.connect(lambda text: self.statusBar().showMessage(text, 10000))
        coordinator.collection_changed.connect(self._update_title)
        coordinator.state_changed.connect(self._on_state_changed)
        coordinator.sync_finished.connect(self._on_sync_finished)
        self._update_title()

    def _update_title(self):
        name = self.coordinator.name
        self.setWindowTitle(f'Playlist "{name}"' if name else "No Playlist")

    def _on_state_changed(self, state: SyncState):
        if state is SyncState.REMOTE_SYNC_IN_FLIGHT:
            self.statusBar().showMessage("Saving to server...")
        elif state is SyncState.IDLE and self.statusBar().currentMessage() == "Saving to server...":
            self.statusBar().clearMessage()

    def _on_sync_finished(self, kind: MutationKind):
        if kind is MutationKind.REFRESH:
            logger.info(f"Showing {len(self.coordinator.tracks)} tracks")

    def closeEvent(self, event):
        # Let outstanding remote calls finish; they are not cancellable
        wait_all = getattr(self.coordinator.dispatcher, "wait_all", None)
        if wait_all is not None and self.coordinator.in_flight:
            logger.info(f"Waiting for {self.coordinator.in_flight} remote call(s) before closing")
            wait_all(self.shutdown_wait_ms)
        super().closeEvent(event)


__all__ = ["PlaylistWindow"]
