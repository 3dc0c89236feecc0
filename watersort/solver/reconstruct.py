"""
Reconstruction Module - Recovers the move sequence behind a goal state.

Stored moves index containers of the parent's canonical position. Replay
runs them again from the caller's initial position, translating each one
into the caller's container numbering and re-deriving it with the move
generator, so a returned sequence is always checked end to end.
"""

import logging
from typing import List, Tuple

from .canonical import canonical_order, canonicalize
from .errors import InconsistentSolution
from .generator import apply_move, find_move
from .move import Move
from .position import Position
from .state import StateStore

logger = logging.getLogger(__name__)


def reconstruct(store: StateStore, handle: int) -> List[Move]:
    """
    Collect the moves leading from the root to a state.

    Args:
        store: State store of the finished search
        handle: Handle of the goal state

    Returns:
        Moves in forward order, each indexed against its parent's canonical position
    """
    return [store[h].move for h in store.path_to(handle)[1:]]


def replay(root: Position, store: StateStore, handle: int) -> Tuple[List[Move], List[Position]]:
    """
    Replay the path to a state from the caller's initial position.

    Args:
        root: Initial position in the caller's container order
        store: State store of the finished search
        handle: Handle of the goal state

    Returns:
        (moves, positions): moves in the caller's numbering, and the
        position before the first move followed by the position after each

    Raises:
        InconsistentSolution: If any step does not reproduce the stored
            search, or the final position is not solved
    """
    path = store.path_to(handle)
    if canonicalize(root) != store[path[0]].position:
        raise InconsistentSolution("Initial position does not match the search root")

    current = root
    moves: List[Move] = []
    positions: List[Position] = [root]

    for step, entry_handle in enumerate(path[1:], start=1):
        entry = store[entry_handle]
        stored = entry.move
        order = canonical_order(current)

        source = order[stored.source]
        destination = order[stored.destination]
        move = find_move(current, source, destination)
        if move != stored.reindexed(source, destination):
            raise InconsistentSolution(
                f"Step {step}: stored move {stored} is not legal as {source} -> {destination}"
            )

        current = apply_move(current, move)
        if canonicalize(current) != entry.position:
            raise InconsistentSolution(f"Step {step}: replay diverged from stored position")

        moves.append(move)
        positions.append(current)

    if not current.is_solved():
        raise InconsistentSolution(
            f"Replay of {len(moves)} moves ends in an unsolved position:\n{current.describe()}"
        )

    logger.debug(f"Replay verified {len(moves)} moves")
    return moves, positions
