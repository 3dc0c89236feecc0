"""
Move Generator Module - Enumerates legal pours and their block-count effect.

Rules for a pour from a non-empty source into a different destination:

    - Empty destination: the source's top block is poured whole. Not
      allowed when the source holds a single block, since that only
      relabels containers. Block-neutral.
    - Non-empty destination: top colours must match and there must be
      room. As much of the top block as fits is poured. Block-decreasing
      when the whole block moves, block-neutral otherwise.
"""

from typing import List, NamedTuple, Optional, Tuple

from .canonical import canonicalize
from .move import Move, MoveKind
from .position import Position


class _Top(NamedTuple):
    """Summary of one container used to pair sources with destinations."""
    colour: Optional[int]
    size: int
    blocks: int
    room: int


def _summarize(position: Position, index: int) -> _Top:
    colour, size = position.top_block(index)
    return _Top(colour, size, position.blocks_in(index), position.room(index))


def _classify(source: int, destination: int, src: _Top, dst: _Top,
              capacity: int) -> Optional[Move]:
    """Apply the pour rules to a pair of container summaries."""
    if src.colour is None:
        return None

    if dst.colour is None:
        if src.blocks == 1:
            return None
        amount = min(src.size, capacity)
        return Move(source, destination, src.colour, amount, MoveKind.BLOCK_NEUTRAL)

    if dst.colour != src.colour or dst.room == 0:
        return None

    amount = min(src.size, dst.room)
    if amount == src.size:
        kind = MoveKind.BLOCK_DECREASING
    else:
        kind = MoveKind.BLOCK_NEUTRAL
    return Move(source, destination, src.colour, amount, kind)


def find_move(position: Position, source: int, destination: int) -> Optional[Move]:
    """
    Get the legal move for one ordered pair of containers.

    Args:
        position: Position the move is made in
        source: Index of the container poured from
        destination: Index of the container poured into

    Returns:
        Move, or None if the pair has no legal pour
    """
    if source == destination:
        return None
    return _classify(
        source, destination,
        _summarize(position, source), _summarize(position, destination),
        position.capacity,
    )


def find_all_moves(position: Position) -> List[Move]:
    """
    Find every legal move in a position.

    Args:
        position: Position to search

    Returns:
        Moves ordered by source index, then destination index
    """
    tops = [_summarize(position, index) for index in range(position.container_count)]
    capacity = position.capacity

    moves = []
    for source, src in enumerate(tops):
        if src.colour is None:
            continue
        for destination, dst in enumerate(tops):
            if destination == source:
                continue
            move = _classify(source, destination, src, dst, capacity)
            if move is not None:
                moves.append(move)
    return moves


def apply_move(position: Position, move: Move) -> Position:
    """
    Apply a move without changing container order.

    Args:
        position: Position the move was generated for
        move: Move to apply

    Returns:
        New Position
    """
    return position.pour(move.source, move.destination, move.amount)


def generate_moves(position: Position) -> List[Tuple[Move, Position]]:
    """
    Generate every legal move with its canonicalized result.

    Args:
        position: Canonical position to expand

    Returns:
        List of (move, canonical result position) pairs
    """
    return [
        (move, canonicalize(apply_move(position, move)))
        for move in find_all_moves(position)
    ]


def validate_move(position: Position, source: int, destination: int, amount: int) -> bool:
    """
    Check a proposed pour against the rules.

    The amount must equal what the rules pour for this pair: the whole
    top block, or as much as fits.

    Args:
        position: Position the move would be made in
        source: Index of the container poured from
        destination: Index of the container poured into
        amount: Number of objects proposed to move

    Returns:
        True if the pour is legal
    """
    count = position.container_count
    if not (0 <= source < count and 0 <= destination < count):
        return False
    move = find_move(position, source, destination)
    return move is not None and move.amount == amount
