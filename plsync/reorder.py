"""Move/reindex primitives for ordered collections.

A playlist view reorders tracks by dragging a (possibly non-contiguous) set of
rows and dropping them above another row. The dropped rows always land as one
contiguous block, and the view needs to know where that block ended up so the
same logical tracks stay selected afterwards.

Destination convention: ``destination`` is an index into the collection
*before* the moved elements are taken out, in ``[0, len(collection)]``. The
block is inserted before whatever element sat at ``destination``;
``destination == len(collection)`` appends. This is what a table view reports
for a "drop above row N" gesture.

All functions mutate the given sequence in place and only return derived
position metadata. They never keep a reference to the collection.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, MutableSequence, Sequence, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class MoveResult:
    """Positions occupied by a moved or inserted block after the mutation.

    Attributes:
        new_positions: Contiguous ascending range of the block's new indices
    """
    new_positions: range

    @property
    def positions(self) -> List[int]:
        return list(self.new_positions)

    @property
    def is_empty(self) -> bool:
        return len(self.new_positions) == 0


def _ascending(positions: Iterable[int]) -> List[int]:
    return sorted(set(positions))


def move(collection: MutableSequence[T], sources: Iterable[int], destination: int) -> MoveResult:
    """Move the elements at ``sources`` to a block before ``destination``.

    Args:
        collection: Sequence to reorder in place
        sources: Positions of the elements to move (any order, duplicates ignored)
        destination: Pre-move index the block is inserted before

    Returns:
        MoveResult with the contiguous range the moved elements now occupy
    """
    ordered = _ascending(sources)
    if not ordered:
        return MoveResult(range(destination, destination))

    length = len(collection)
    assert 0 <= ordered[0] and ordered[-1] < length, f"source positions out of range: {ordered} (len={length})"
    assert 0 <= destination <= length, f"destination {destination} out of range (len={length})"

    # Each source before the destination shifts the block start left by one
    new_start = destination
    for index in ordered:
        if index < destination:
            new_start -= 1

    moving = set(ordered)
    block = [collection[i] for i in ordered]
    rest = [item for i, item in enumerate(collection) if i not in moving]
    collection[:] = rest[:new_start] + block + rest[new_start:]

    result = MoveResult(range(new_start, new_start + len(block)))
    logger.debug(f"move sources={ordered} destination={destination} -> {result.positions}")
    return result


def insert_block(collection: MutableSequence[T], items: Sequence[T], position: int) -> MoveResult:
    """Insert ``items`` contiguously before ``position``.

    Args:
        collection: Sequence to extend in place
        items: Elements to insert, in order
        position: Index the block is inserted before (``len`` appends)

    Returns:
        MoveResult covering the inserted elements
    """
    assert 0 <= position <= len(collection), f"insert position {position} out of range (len={len(collection)})"
    collection[position:position] = list(items)
    return MoveResult(range(position, position + len(items)))


def remove_positions(collection: MutableSequence[T], positions: Iterable[int]) -> List[T]:
    """Remove the elements at ``positions``.

    Returns:
        Removed elements in ascending position order
    """
    ordered = _ascending(positions)
    if ordered:
        assert 0 <= ordered[0] and ordered[-1] < len(collection), f"positions out of range: {ordered}"
    removed = [collection[i] for i in ordered]
    # Delete from the back so earlier indices stay valid
    for index in reversed(ordered):
        del collection[index]
    return removed


__all__ = ["MoveResult", "move", "insert_block", "remove_positions"]
