"""Qt table model over a PlaylistSyncCoordinator's track list.

The model never mutates tracks itself: drops are translated into coordinator
calls and the model resets when the coordinator reports a change.
"""
from __future__ import annotations
from typing import Any, List, Optional
from PySide6.QtCore import Qt, QAbstractTableModel, QByteArray, QMimeData, QModelIndex
import json
import logging

from ..providers.base import Track
from ..sync import DropSource, PlaylistSyncCoordinator

logger = logging.getLogger(__name__)

# Rows dragged out of a playlist view: {"playlist_id": ..., "rows": [...]}
ROWS_MIME_TYPE = "application/x-plsync-rows"
# Track payload any view can insert: [{"id": ..., "title": ...}, ...]
TRACKS_MIME_TYPE = "application/x-plsync-tracks"

TrackRole = Qt.UserRole + 1


def _format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return ""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def _read_json(data: QMimeData, mime_type: str) -> Any:
    raw = bytes(data.data(mime_type).data())
    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError as e:
        logger.warning(f"Ignoring malformed {mime_type} payload: {e}")
        return None


class PlaylistTracksModel(QAbstractTableModel):
    """Model for a single playlist's tracks with drag & drop support."""

    def __init__(self, coordinator: PlaylistSyncCoordinator, parent=None):
        super().__init__(parent)
        self.coordinator = coordinator
        self.columns = [
            ('track_number', '#'),
            ('title', 'Title'),
            ('artist', 'Artist'),
            ('album', 'Album'),
            ('duration_s', 'Duration'),
        ]
        coordinator.collection_changed.connect(self._on_collection_changed)

    def _on_collection_changed(self):
        self.beginResetModel()
        self.endResetModel()

    @property
    def tracks(self) -> List[Track]:
        return self.coordinator.tracks

    def track_at(self, row: int) -> Optional[Track]:
        if 0 <= row < len(self.tracks):
            return self.tracks[row]
        return None

    def rowCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self.tracks)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self.columns)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            if 0 <= section < len(self.columns):
                return self.columns[section][1]
        return None

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        track = self.track_at(index.row())
        if track is None:
            return None
        col_name = self.columns[index.column()][0]

        if role == Qt.DisplayRole:
            value = getattr(track, col_name)
            if col_name == 'duration_s':
                return _format_duration(value)
            return "" if value is None else str(value)
        if role == TrackRole:
            return track
        return None

    # ---------------- Drag & drop -----------------

    def flags(self, index):
        if not index.isValid():
            # Between rows / below the last row
            return Qt.ItemIsDropEnabled
        # Rows themselves are not drop targets: only "drop above" is supported
        return Qt.ItemIsSelectable | Qt.ItemIsEnabled | Qt.ItemIsDragEnabled

    def supportedDropActions(self):
        return Qt.MoveAction | Qt.CopyAction

    def supportedDragActions(self):
        return Qt.MoveAction | Qt.CopyAction

    def mimeTypes(self):
        return [ROWS_MIME_TYPE, TRACKS_MIME_TYPE]

    def mimeData(self, indexes):
        rows = sorted({index.row() for index in indexes if index.isValid()})
        mime = QMimeData()
        payload = {"playlist_id": self.coordinator.playlist_id, "rows": rows}
        mime.setData(ROWS_MIME_TYPE, QByteArray(json.dumps(payload).encode("utf-8")))
        tracks = [self.tracks[r].to_dict() for r in rows]
        mime.setData(TRACKS_MIME_TYPE, QByteArray(json.dumps(tracks).encode("utf-8")))
        return mime

    def drop_source(self, data: QMimeData) -> Optional[DropSource]:
        """Classify a drag payload relative to this playlist.

        Returns:
            SAME_PLAYLIST for rows dragged from this playlist, EXTERNAL for
            tracks from anywhere else, None if the payload is unusable
        """
        if data.hasFormat(ROWS_MIME_TYPE):
            payload = _read_json(data, ROWS_MIME_TYPE)
            if isinstance(payload, dict) and payload.get("playlist_id") == self.coordinator.playlist_id:
                return DropSource.SAME_PLAYLIST
        if data.hasFormat(TRACKS_MIME_TYPE):
            return DropSource.EXTERNAL
        return None

    def canDropMimeData(self, data, action, row, column, parent):
        if parent.isValid():
            return False
        return self.drop_source(data) is not None

    def dropMimeData(self, data, action, row, column, parent):
        if action == Qt.IgnoreAction:
            return True
        if not self.canDropMimeData(data, action, row, column, parent):
            return False
        if row < 0 or row > len(self.tracks):
            row = len(self.tracks)

        source = self.drop_source(data)
        if source is DropSource.SAME_PLAYLIST:
            rows = _read_json(data, ROWS_MIME_TYPE).get("rows") or []
            logger.debug(f"Internal drop rows={rows} above row {row}")
            self.coordinator.accept_drop(source, row, positions=rows)
            return True

        entries = _read_json(data, TRACKS_MIME_TYPE)
        if not isinstance(entries, list):
            return False
        try:
            tracks = [Track.from_dict(e) for e in entries]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring drop with invalid track entries: {e}")
            return False
        logger.debug(f"External drop of {len(tracks)} tracks above row {row}")
        self.coordinator.accept_drop(DropSource.EXTERNAL, row, tracks=tracks)
        return True


__all__ = ["PlaylistTracksModel", "ROWS_MIME_TYPE", "TRACKS_MIME_TYPE", "TrackRole"]
