"""Playlist sync coordination: optimistic local edits plus background remote calls."""

from .coordinator import PlaylistSyncCoordinator
from .dispatcher import RemoteCallDispatcher, RemoteCallWorker, ThreadedDispatcher
from .events import DropSource, MutationKind, SyncFailed, SyncState

__all__ = [
    "PlaylistSyncCoordinator",
    "RemoteCallDispatcher",
    "RemoteCallWorker",
    "ThreadedDispatcher",
    "DropSource",
    "MutationKind",
    "SyncFailed",
    "SyncState",
]
