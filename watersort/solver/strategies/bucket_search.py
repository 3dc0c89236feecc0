"""
Bucket Search Strategy - Optimal search over the block-count grid.

Every legal move either lowers the total number of colour blocks by one
or leaves it unchanged, and a solved position has exactly one block per
colour. Any solution therefore makes exactly B0 - C block-decreasing
moves, where B0 is the initial block count and C the colour count, and
differs from other solutions only in its number of block-neutral moves.

States are filed in bucket (x, y) after x block-decreasing and y
block-neutral moves. Round y sweeps x upwards, so decreasing successors
land in a bucket that is still to be expanded this round and neutral
successors wait for round y + 1. The first round that fills bucket
(B0 - C, y) has the smallest y, and so the fewest total moves.
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from ..base import SolverStrategy
from ..canonical import canonicalize
from ..context import SolutionContext
from ..dedup import DEFAULT_FILTER_BITS, DuplicateFilter, create_filter, new_seed
from ..factory import register_strategy
from ..generator import generate_moves
from ..move import Move
from ..position import Position
from ..solution import SearchStatus, Solution, SolutionMetrics
from ..state import BucketGrid, StateStore

logger = logging.getLogger(__name__)

# Successors of one expanded state
Expansion = List[Tuple[Move, Position]]

DEFAULT_MAX_STATES = 20_000_000


def _expand_positions(positions: List[Position]) -> List[Expansion]:
    """Generate successors for a chunk of positions (runs on worker threads)."""
    return [generate_moves(position) for position in positions]


@register_strategy
class BucketSearchStrategy(SolverStrategy):
    """
    Round-by-round search across the (block-decreasing, block-neutral) grid.

    Algorithm:
        1. File the canonical initial position in bucket (0, 0)
        2. For round y = 0, 1, 2, ...:
           - For x = 0 .. B0 - C - 1, expand every state in (x, y)
           - Skip successors the duplicate filter has seen
           - File decreasing successors in (x + 1, y), neutral ones in (x, y + 1)
        3. Stop when (B0 - C, y) is non-empty (solved) or row y + 1
           received nothing (no solution exists)

    The goal bucket is never expanded. Budgets are checked between rounds.

    Parameters:
        seed: Seed for the duplicate filter hash, drawn fresh if None
        filter_kind: "bitarray" (fixed memory, rare false positives) or "exact"
        filter_bits: Bit array filter holds 2**filter_bits flags
        max_states: Ceiling on retained states before failing fast
        workers: Threads generating successors; 1 runs single-threaded
    """
    name = "bucket"
    description = "Bucket Search (optimal) - Fewest moves via block-count rounds"
    timeout_sec = 60.0

    def __init__(self, seed: Optional[int] = None, filter_kind: str = "bitarray",
                 filter_bits: int = DEFAULT_FILTER_BITS,
                 max_states: int = DEFAULT_MAX_STATES, workers: int = 1,
                 parallel_threshold: int = 64):
        """
        Initialize bucket search strategy.

        Args:
            seed: Duplicate filter seed; a run is repeatable for a given seed
            filter_kind: Duplicate filter implementation name
            filter_bits: Index width of the bit array filter (8-32)
            max_states: Maximum number of retained states
            workers: Worker threads for successor generation
            parallel_threshold: Smallest bucket handed to the worker pool
        """
        if max_states < 1:
            raise ValueError(f"max_states must be positive, got {max_states}")
        if workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")
        self.seed = seed
        self.filter_kind = filter_kind
        self.filter_bits = filter_bits
        self.max_states = max_states
        self.workers = workers
        self.parallel_threshold = parallel_threshold

    def solve(self, context: SolutionContext) -> Solution:
        """
        Find a solution with the fewest moves.

        Args:
            context: Solution context with position and budget

        Returns:
            Solution with status, moves and metrics
        """
        start_time = time.perf_counter()

        seed = self.seed if self.seed is not None else new_seed()
        metrics = SolutionMetrics(seed=seed)

        root = canonicalize(context.position)
        colours = root.colour_count
        initial_blocks = root.block_count()
        width = initial_blocks - colours

        store = StateStore()
        root_handle = store.add(root, None, None, 0, 0)

        logger.info(
            f"[{self.name}] {root.container_count} containers, {colours} colours, "
            f"capacity {root.capacity}, {initial_blocks} blocks "
            f"({width} block-decreasing moves needed), seed={seed}"
        )

        if width == 0:
            return self._build_solution(
                SearchStatus.SOLVED, context, metrics, start_time,
                store=store, goal=root_handle,
            )

        seen = create_filter(self.filter_kind, seed, self.filter_bits)
        seen.test_and_set(root)
        grid = BucketGrid(width)
        grid.file(0, 0, root_handle)

        executor = None
        if self.workers > 1:
            executor = ThreadPoolExecutor(max_workers=self.workers)

        try:
            y = 0
            furthest = 0
            while True:
                reason = self._check_cancelled(context, y)
                if reason:
                    return self._build_solution(
                        SearchStatus.ABORTED, context, metrics, start_time,
                        store=store, reason=reason,
                    )

                for x in range(width):
                    bucket = grid.bucket(x, y)
                    if not bucket:
                        continue
                    furthest = max(furthest, x)
                    if not self._expand_bucket(bucket, store, seen, grid, metrics, executor):
                        return self._build_solution(
                            SearchStatus.RESOURCE_EXHAUSTED, context, metrics, start_time,
                            store=store,
                            reason=f"state ceiling of {self.max_states} reached",
                        )

                metrics.rounds = y + 1
                logger.debug(
                    f"[{self.name}] round {y}: {grid.count(y)} states in row, "
                    f"{grid.count(y + 1)} queued, {len(store)} stored, "
                    f"{metrics.duplicates_skipped} duplicates"
                )

                goal_bucket = grid.bucket(width, y)
                if goal_bucket:
                    logger.debug(
                        f"[{self.name}] goal reached in round {y}: "
                        f"{width} decreasing + {y} neutral moves"
                    )
                    return self._build_solution(
                        SearchStatus.SOLVED, context, metrics, start_time,
                        store=store, goal=goal_bucket[0],
                    )

                if grid.row_is_empty(y + 1):
                    return self._build_solution(
                        SearchStatus.UNSOLVABLE, context, metrics, start_time,
                        store=store, reason="reachable positions exhausted",
                    )

                context.report_progress(
                    min(0.99, furthest / width),
                    f"round {y}, {len(store)} states",
                )
                grid.release_row(y)
                y += 1
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

    def _expand_bucket(
        self,
        bucket: List[int],
        store: StateStore,
        seen: DuplicateFilter,
        grid: BucketGrid,
        metrics: SolutionMetrics,
        executor: Optional[ThreadPoolExecutor],
    ) -> bool:
        """
        Expand every state of one bucket and file the new successors.

        Successors are generated first (on worker threads when enabled)
        and merged here in bucket order, so the filter and grid are only
        touched from this thread and the result matches a serial sweep.

        Returns:
            False if the state ceiling was reached
        """
        expansions = self._generate(bucket, store, executor)

        for handle, successors in zip(bucket, expansions):
            entry = store[handle]
            metrics.states_explored += 1
            for move, child in successors:
                if seen.test_and_set(child):
                    metrics.duplicates_skipped += 1
                    continue
                if len(store) >= self.max_states:
                    return False
                if move.is_block_decreasing:
                    x, y = entry.x + 1, entry.y
                else:
                    x, y = entry.x, entry.y + 1
                grid.file(x, y, store.add(child, handle, move, x, y))
        return True

    def _generate(
        self,
        bucket: List[int],
        store: StateStore,
        executor: Optional[ThreadPoolExecutor],
    ) -> List[Expansion]:
        """Generate successors for each state of a bucket, in bucket order."""
        positions = [store[handle].position for handle in bucket]
        if executor is None or len(positions) < self.parallel_threshold:
            return _expand_positions(positions)

        size = math.ceil(len(positions) / self.workers)
        chunks = [positions[i:i + size] for i in range(0, len(positions), size)]
        expansions: List[Expansion] = []
        for chunk_result in executor.map(_expand_positions, chunks):
            expansions.extend(chunk_result)
        return expansions
