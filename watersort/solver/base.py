"""
Base Strategy Module - Abstract base class for search strategies.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .context import SolutionContext
from .generator import generate_moves
from .move import Move
from .position import Position
from .reconstruct import replay
from .solution import SearchStatus, Solution, SolutionMetrics
from .state import StateStore

logger = logging.getLogger(__name__)


class SolverStrategy(ABC):
    """
    Abstract base class for all search strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description
        timeout_sec: Default timeout for this strategy
    """
    name: str = "base"
    description: str = "Base strategy"
    timeout_sec: float = 60.0

    @abstractmethod
    def solve(self, context: SolutionContext) -> Solution:
        """
        Search for a solution to the context's position.

        Must check the context's budget between rounds and stop with an
        ABORTED solution when it is spent.

        Args:
            context: Solution context with position, budget, progress

        Returns:
            Solution with status, moves and metrics
        """
        pass

    def find_all_valid_moves(self, position: Position) -> List[Tuple[Move, Position]]:
        """
        Find every legal move and its canonical result.

        Args:
            position: Canonical position to expand

        Returns:
            List of (move, result position) pairs
        """
        return generate_moves(position)

    def _check_cancelled(self, context: SolutionContext, rounds_done: int = 0) -> Optional[str]:
        """
        Convenience method to check the search budget.

        Args:
            context: Solution context
            rounds_done: Rounds completed so far

        Returns:
            Reason to stop, or None
        """
        return context.abort_reason(rounds_done)

    def _build_solution(
        self,
        status: SearchStatus,
        context: SolutionContext,
        metrics: SolutionMetrics,
        start_time: float,
        store: Optional[StateStore] = None,
        goal: Optional[int] = None,
        reason: str = "",
    ) -> Solution:
        """
        Build Solution object from search results.

        A SOLVED result is replayed from the initial position before it
        is returned; see reconstruct.replay().
        """
        moves: List[Move] = []
        positions: List[Position] = [context.position]
        if status is SearchStatus.SOLVED and store is not None and goal is not None:
            moves, positions = replay(context.position, store, goal)

        metrics.computation_time_ms = (time.perf_counter() - start_time) * 1000
        metrics.strategy_name = self.name
        if store is not None:
            metrics.states_stored = len(store)

        if status is SearchStatus.SOLVED:
            logger.info(
                f"[{self.name}] solved in {len(moves)} moves "
                f"({metrics.states_stored} states, {metrics.computation_time_ms:.1f}ms)"
            )
        elif status is SearchStatus.UNSOLVABLE:
            logger.info(
                f"[{self.name}] no solution after exhausting {metrics.states_stored} states"
            )
        else:
            logger.warning(f"[{self.name}] stopped: {status.value} ({reason})")

        return Solution(
            status=status,
            moves=moves,
            positions=positions,
            reason=reason,
            metrics=metrics,
        )
