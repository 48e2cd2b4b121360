"""Qt application bootstrap.

Sets up QApplication, loads configuration, builds the server client and opens
a window for the requested playlist.
"""

import logging
from typing import Any, Dict, Optional
from PySide6.QtWidgets import QApplication, QMessageBox

from plsync.cli.shared import get_client
from plsync.config import _configure_logging, load_config
from plsync.sync import PlaylistSyncCoordinator
from .playlist_window import PlaylistWindow

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging for the GUI."""
    _configure_logging(level, fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(playlist_id: str, cfg: Optional[Dict[str, Any]] = None) -> int:
    """Main entry point for GUI application.

    Args:
        playlist_id: Playlist to open
        cfg: Configuration dict (loaded from environment if omitted)

    Returns:
        Exit code
    """
    cfg = cfg if cfg is not None else load_config()
    setup_logging(cfg.get('log_level', 'INFO'))
    logger.info(f"Starting plsync GUI for playlist {playlist_id}")

    app = QApplication.instance() or QApplication([])
    app.setApplicationName("plsync")

    try:
        client = get_client(cfg)
    except ValueError as e:
        QMessageBox.critical(None, "plsync", str(e))
        return 1

    sync_cfg = cfg.get('sync', {})
    coordinator = PlaylistSyncCoordinator(playlist_id, client)
    window = PlaylistWindow(
        coordinator,
        confirm_remove=sync_cfg.get('confirm_remove', True),
        shutdown_wait_ms=sync_cfg.get('shutdown_wait_ms', 5000),
    )
    window.show()
    coordinator.refresh()
    return app.exec()
