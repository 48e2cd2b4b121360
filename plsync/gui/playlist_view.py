"""Table view for editing one playlist.

Drag rows to reorder, drop tracks from another playlist view to insert them,
press Delete to remove. Selection follows the moved tracks: the coordinator
reports where they ended up and the view selects those rows.
"""
from __future__ import annotations
from typing import List, Optional, Sequence
from PySide6.QtCore import Qt, QItemSelection, QItemSelectionModel, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QAbstractItemView, QInputDialog, QMessageBox, QTableView, QWidget
import logging

from ..providers.base import Track
from ..sync import PlaylistSyncCoordinator, SyncFailed
from .models import PlaylistTracksModel

logger = logging.getLogger(__name__)


class PlaylistView(QTableView):
    """Playlist track table wired to a PlaylistSyncCoordinator.

    Signals:
        status_message: Text for the window status bar (sync failures etc.)
    """

    status_message = Signal(str)

    def __init__(self, coordinator: PlaylistSyncCoordinator, confirm_remove: bool = True, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.coordinator = coordinator
        self.confirm_remove = confirm_remove
        self.tracks_model = PlaylistTracksModel(coordinator, self)
        self.setModel(self.tracks_model)

        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDrop)
        self.setDragDropOverwriteMode(False)
        self.setDefaultDropAction(Qt.MoveAction)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setStretchLastSection(True)

        self._create_actions()

        coordinator.selection_changed.connect(self.select_tracks)
        coordinator.sync_failed.connect(self._on_sync_failed)
        coordinator.playlist_created.connect(self._on_playlist_created)
        self.selectionModel().selectionChanged.connect(self._update_actions)
        # A model reset drops the selection without emitting selectionChanged
        self.tracks_model.modelReset.connect(self._update_actions)

    def _create_actions(self):
        self.remove_action = QAction("Remove from Playlist", self)
        self.remove_action.setShortcuts([QKeySequence.Delete, QKeySequence(Qt.Key_Backspace)])
        self.remove_action.setShortcutContext(Qt.WidgetShortcut)
        self.remove_action.triggered.connect(lambda: self.remove_selected())
        self.addAction(self.remove_action)

        self.new_playlist_action = QAction("New Playlist from Selection...", self)
        self.new_playlist_action.triggered.connect(lambda: self.create_playlist_from_selection())
        self.addAction(self.new_playlist_action)

        self.setContextMenuPolicy(Qt.ActionsContextMenu)
        self._update_actions()

    def _update_actions(self, *args):
        has_selection = bool(self.selected_rows())
        self.remove_action.setEnabled(has_selection)
        self.new_playlist_action.setEnabled(has_selection)

    def selected_rows(self) -> List[int]:
        selection_model = self.selectionModel()
        if selection_model is None:
            return []
        return sorted({index.row() for index in selection_model.selectedRows()})

    def select_tracks(self, positions: Sequence[int], tracks: Sequence[Track]):
        """Select ``positions`` where they still hold the reported tracks.

        After a move or insert every reported row is selected; after a removal
        the reported rows hold other tracks, so the selection is cleared.
        """
        selection = QItemSelection()
        last_column = self.tracks_model.columnCount() - 1
        for row, track in zip(positions, tracks):
            if self.tracks_model.track_at(row) == track:
                selection.select(self.tracks_model.index(row, 0), self.tracks_model.index(row, last_column))
        self.selectionModel().select(selection, QItemSelectionModel.ClearAndSelect | QItemSelectionModel.Rows)
        logger.debug(f"Selection updated to rows {[i.row() for i in self.selectionModel().selectedRows()]}")

    def remove_selected(self, confirm: Optional[bool] = None) -> List[Track]:
        """Remove the selected tracks (asks first unless confirmation is off)."""
        rows = self.selected_rows()
        if not rows:
            return []
        if self.confirm_remove if confirm is None else confirm:
            box = QMessageBox(self)
            box.setIcon(QMessageBox.Warning)
            box.setText("Remove the selected tracks?")
            box.setInformativeText("The selected tracks will be removed from this playlist.")
            remove_button = box.addButton("Remove", QMessageBox.DestructiveRole)
            box.addButton(QMessageBox.Cancel)
            box.exec()
            if box.clickedButton() is not remove_button:
                return []
        return self.coordinator.remove_tracks(rows)

    def create_playlist_from_selection(self, name: Optional[str] = None) -> Optional[int]:
        rows = self.selected_rows()
        if not rows:
            return None
        if name is None:
            name, ok = QInputDialog.getText(self, "New Playlist", "Playlist name:")
            if not ok or not name.strip():
                return None
        return self.coordinator.create_playlist_from(rows, name.strip())

    def _on_sync_failed(self, event: SyncFailed):
        self.status_message.emit(event.message)

    def _on_playlist_created(self, playlist_id: str):
        self.status_message.emit(f"Created playlist {playlist_id}" if playlist_id else "Created playlist")


__all__ = ["PlaylistView"]
