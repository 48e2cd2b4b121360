"""Value types exchanged between the sync coordinator and its UI collaborators."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class SyncState(Enum):
    IDLE = "idle"
    LOCAL_MUTATION_PENDING = "local_mutation_pending"
    REMOTE_SYNC_IN_FLIGHT = "remote_sync_in_flight"


class MutationKind(Enum):
    REORDER = "reorder"
    INSERT = "insert"
    REMOVE = "remove"
    CREATE_PLAYLIST = "create_playlist"
    REFRESH = "refresh"


class DropSource(Enum):
    """Where dragged items came from; decided by the UI layer."""
    SAME_PLAYLIST = "same_playlist"
    EXTERNAL = "external"


@dataclass(frozen=True)
class SyncFailed:
    """A remote call failed after its local mutation was already applied.

    ``cause`` is opaque: transport, authorization and malformed-response
    errors all arrive here unchanged and are only meant for display.
    """
    playlist_id: str
    kind: MutationKind
    cause: BaseException

    @property
    def message(self) -> str:
        return f"Could not {self.kind.value.replace('_', ' ')} playlist on server: {self.cause}"


__all__ = ["SyncState", "MutationKind", "DropSource", "SyncFailed"]
