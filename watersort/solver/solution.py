"""
Solution Module - Result of a search.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, List, Optional, Sequence, Tuple

from .move import Move
from .position import Position


class SearchStatus(Enum):
    """Terminal outcome of a search."""
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    ABORTED = "aborted"
    RESOURCE_EXHAUSTED = "resource_exhausted"


@dataclass
class SolutionMetrics:
    """
    Performance metrics for a search.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of states expanded
        states_stored: Number of states retained in the store
        duplicates_skipped: Successors dropped by the duplicate filter
        rounds: Rounds (or levels) completed
        seed: Seed used for the duplicate filter, if any
        strategy_name: Name of strategy that ran the search
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    states_stored: int = 0
    duplicates_skipped: int = 0
    rounds: int = 0
    seed: Optional[int] = None
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a strategy run.

    Moves are numbered by the caller's original container order.

    Attributes:
        status: Outcome of the search
        moves: Ordered moves from the initial position to the goal
        positions: Position before the first move, then after each move
        reason: Why the search stopped, for non-solved outcomes
        metrics: Performance statistics
    """
    status: SearchStatus
    moves: List[Move] = field(default_factory=list)
    positions: List[Position] = field(default_factory=list)
    reason: str = ""
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)

    @property
    def is_solved(self) -> bool:
        return self.status is SearchStatus.SOLVED

    @property
    def move_count(self) -> int:
        """Number of moves in solution."""
        return len(self.moves)

    @property
    def block_decreasing_count(self) -> int:
        return sum(1 for move in self.moves if move.is_block_decreasing)

    @property
    def block_neutral_count(self) -> int:
        return self.move_count - self.block_decreasing_count

    @property
    def final_position(self) -> Optional[Position]:
        """Position after the last move, or None if no positions recorded."""
        return self.positions[-1] if self.positions else None

    def get_move(self, index: int) -> Move:
        """
        Get move at specific index.

        Raises:
            IndexError: If index out of range
        """
        return self.moves[index]

    def get_position_after_move(self, index: int) -> Position:
        """
        Get position after executing move at index.

        Raises:
            IndexError: If index out of range
        """
        return self.positions[index + 1]

    def as_pairs(self) -> List[Tuple[int, int]]:
        """Moves as (source index, destination index) pairs."""
        return [move.pair for move in self.moves]

    def moves_string(self, palette: Sequence[Hashable] = ()) -> str:
        """
        List the moves one per line, numbered from 1.

        Args:
            palette: Colour identifiers indexed by colour code

        Returns:
            Multi-line string, e.g. "1: 0 -> 2: red x 3"
        """
        return "\n".join(
            f"{number}: {move.describe(palette)}"
            for number, move in enumerate(self.moves, start=1)
        )
