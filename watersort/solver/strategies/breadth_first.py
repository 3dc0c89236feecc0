"""
Breadth-First Strategy - Level-by-level search over total move count.

Explores every position reachable in d moves before any reachable in
d + 1, with exact duplicate detection. Finds the same optimum as the
bucket search without relying on the block-count structure, which makes
it the reference the bucket search is checked against.
"""

import logging
import time
from typing import List

from ..base import SolverStrategy
from ..canonical import canonicalize
from ..context import SolutionContext
from ..dedup import ExactFilter
from ..factory import register_strategy
from ..solution import SearchStatus, Solution, SolutionMetrics
from ..state import StateStore

logger = logging.getLogger(__name__)


@register_strategy
class BreadthFirstStrategy(SolverStrategy):
    """
    Plain breadth-first search with an exact visited set.

    Parameters:
        max_states: Ceiling on retained states before failing fast
    """
    name = "bfs"
    description = "Breadth-First (reference) - Fewest moves, exact visited set"
    timeout_sec = 60.0

    def __init__(self, max_states: int = 2_000_000):
        self.max_states = max_states

    def solve(self, context: SolutionContext) -> Solution:
        """
        Search level by level until a solved position appears.

        Args:
            context: Solution context with position and budget

        Returns:
            Solution with status, moves and metrics
        """
        start_time = time.perf_counter()
        metrics = SolutionMetrics()

        root = canonicalize(context.position)
        target_blocks = root.colour_count
        store = StateStore()
        root_handle = store.add(root, None, None, 0, 0)

        if root.is_solved():
            return self._build_solution(
                SearchStatus.SOLVED, context, metrics, start_time,
                store=store, goal=root_handle,
            )

        seen = ExactFilter()
        seen.test_and_set(root)
        frontier: List[int] = [root_handle]
        depth = 0

        while frontier:
            reason = self._check_cancelled(context, depth)
            if reason:
                return self._build_solution(
                    SearchStatus.ABORTED, context, metrics, start_time,
                    store=store, reason=reason,
                )

            next_frontier: List[int] = []
            for handle in frontier:
                entry = store[handle]
                metrics.states_explored += 1
                for move, child in self.find_all_valid_moves(entry.position):
                    if seen.test_and_set(child):
                        metrics.duplicates_skipped += 1
                        continue
                    if len(store) >= self.max_states:
                        return self._build_solution(
                            SearchStatus.RESOURCE_EXHAUSTED, context, metrics, start_time,
                            store=store,
                            reason=f"state ceiling of {self.max_states} reached",
                        )
                    if move.is_block_decreasing:
                        x, y = entry.x + 1, entry.y
                    else:
                        x, y = entry.x, entry.y + 1
                    child_handle = store.add(child, handle, move, x, y)
                    # Only a solved position has one block per colour
                    if child.block_count() == target_blocks:
                        metrics.rounds = depth + 1
                        return self._build_solution(
                            SearchStatus.SOLVED, context, metrics, start_time,
                            store=store, goal=child_handle,
                        )
                    next_frontier.append(child_handle)

            depth += 1
            metrics.rounds = depth
            logger.debug(f"[{self.name}] depth {depth}: {len(next_frontier)} new states")
            context.report_progress(0.0, f"depth {depth}, {len(store)} states")
            frontier = next_frontier

        return self._build_solution(
            SearchStatus.UNSOLVABLE, context, metrics, start_time,
            store=store, reason="reachable positions exhausted",
        )
