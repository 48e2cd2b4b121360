from __future__ import annotations
"""Command-line playlist edits.

Previews and (optionally) applies a reorder or removal on a remote playlist
without the GUI. The same move/remove primitives the desktop view uses are
applied to the server's current order, then the result is written back with
the matching remote operation:

  * move   -> replace_playlist_order (full ordered id list)
  * remove -> remove_items (pre-removal indices)

Preview by default; ``apply=True`` performs the remote write synchronously.
"""
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import logging

from ..providers.base import RemotePlaylistService
from ..reorder import move, remove_positions

logger = logging.getLogger(__name__)


@dataclass
class EditPreview:
    playlist_id: str
    playlist_name: str | None
    action: str
    current_count: int
    new_count: int
    positional_changes: int
    new_positions: List[int] = field(default_factory=list)
    new_order: List[str] = field(default_factory=list)
    changed: bool = False
    applied: bool = False


def _diff(current: Sequence[str], desired: Sequence[str]) -> Tuple[int, bool]:
    common = min(len(current), len(desired))
    positional_changes = sum(1 for i in range(common) if current[i] != desired[i])
    changed = positional_changes > 0 or len(current) != len(desired)
    return positional_changes, changed


def _check_positions(positions: Sequence[int], length: int, what: str) -> None:
    bad = [p for p in positions if p < 0 or p >= length]
    if bad:
        raise ValueError(f"{what} out of range for playlist with {length} tracks: {bad}")


def preview_move(
    client: RemotePlaylistService,
    playlist_id: str,
    sources: Sequence[int],
    destination: int,
    apply: bool = False,
) -> EditPreview:
    """Preview (and optionally apply) moving ``sources`` above ``destination``.

    Args:
        client: Remote playlist service
        playlist_id: Target playlist ID
        sources: Zero-based rows to move
        destination: Zero-based pre-move row to drop above (len appends)
        apply: Replace the remote order if True

    Raises:
        ValueError: If a position is outside the playlist
    """
    playlist, tracks = client.get_playlist(playlist_id)
    current = [t.track_id for t in tracks]
    _check_positions(sources, len(current), "Source positions")
    if not 0 <= destination <= len(current):
        raise ValueError(f"Destination {destination} out of range (0..{len(current)})")

    desired = list(current)
    result = move(desired, sources, destination)
    positional_changes, changed = _diff(current, desired)
    preview = EditPreview(
        playlist_id=playlist_id,
        playlist_name=playlist.name,
        action="move",
        current_count=len(current),
        new_count=len(desired),
        positional_changes=positional_changes,
        new_positions=result.positions,
        new_order=desired,
        changed=changed,
    )
    logger.info(
        f"preview move playlist={playlist_id} name='{playlist.name}' sources={sorted(set(sources))} "
        f"destination={destination} new_positions={result.positions} positional={positional_changes}"
    )
    if apply:
        if not changed:
            logger.info('No changes detected; skipping apply')
        else:
            client.replace_playlist_order(playlist_id, desired)
            logger.info(f"applied move playlist={playlist_id}")
            preview.applied = True
    return preview


def preview_remove(
    client: RemotePlaylistService,
    playlist_id: str,
    positions: Sequence[int],
    apply: bool = False,
) -> EditPreview:
    """Preview (and optionally apply) removing the tracks at ``positions``."""
    playlist, tracks = client.get_playlist(playlist_id)
    current = [t.track_id for t in tracks]
    ordered = sorted(set(positions))
    _check_positions(ordered, len(current), "Positions")

    desired = list(current)
    remove_positions(desired, ordered)
    positional_changes, changed = _diff(current, desired)
    preview = EditPreview(
        playlist_id=playlist_id,
        playlist_name=playlist.name,
        action="remove",
        current_count=len(current),
        new_count=len(desired),
        positional_changes=positional_changes,
        new_positions=ordered,
        new_order=desired,
        changed=changed,
    )
    logger.info(f"preview remove playlist={playlist_id} name='{playlist.name}' positions={ordered}")
    if apply and changed:
        client.remove_items(playlist_id, ordered)
        logger.info(f"applied remove playlist={playlist_id} removed={len(ordered)}")
        preview.applied = True
    return preview


__all__ = ["EditPreview", "preview_move", "preview_remove"]
