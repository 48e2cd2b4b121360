"""Pytest fixtures for test configuration.

Global test safety measures:
 - Run Qt offscreen so GUI tests work without a display
 - Never read a developer's .env (load_config skips it under pytest)
"""
import os

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest
from pathlib import Path
from typing import Any, Dict, List

from plsync.providers.base import Track
from tests.mocks.remote import FakePlaylistService, ManualDispatcher


def pytest_sessionstart(session):  # type: ignore[no-untyped-def]
    for key in [k for k in os.environ if k.startswith('PLSYNC__')]:
        del os.environ[key]


@pytest.fixture(scope='session')
def qapp():
    """Create QApplication instance for all Qt tests."""
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def letter_tracks() -> List[Track]:
    """Tracks A..E with ids a..e."""
    return [Track(track_id=c.lower(), title=c) for c in 'ABCDE']


@pytest.fixture
def fake_service(letter_tracks) -> FakePlaylistService:
    return FakePlaylistService([t.track_id for t in letter_tracks])


@pytest.fixture
def manual_dispatcher() -> ManualDispatcher:
    return ManualDispatcher()


@pytest.fixture
def coordinator(qapp, fake_service, letter_tracks, manual_dispatcher):
    from plsync.sync import PlaylistSyncCoordinator
    return PlaylistSyncCoordinator('pl1', fake_service, letter_tracks, dispatcher=manual_dispatcher, name='Test Playlist')


@pytest.fixture
def test_config(tmp_path: Path) -> Dict[str, Any]:
    """Provide a minimal test configuration as a dict."""
    return {
        'log_level': 'DEBUG',
        'provider': 'subsonic',
        'server': {
            'url': 'http://music.test',
            'username': 'alice',
            'password': 'secret',
            'api_version': '1.16.1',
            'client_name': 'plsync-tests',
            'timeout': 5,
            'verify_ssl': True,
        },
        'sync': {
            'confirm_remove': False,
            'shutdown_wait_ms': 100,
        },
    }
