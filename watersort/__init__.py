"""
Water Sort Solver

Finds a fewest-moves solution to a water sort puzzle.

Example:
    from watersort import solve_puzzle

    solution = solve_puzzle(
        [["red", "blue"], ["blue", "red"], []],
        capacity=2,
        settings={"filter_bits": 24},
    )
    print(solution.status, solution.as_pairs())
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Sequence

from .settings import DEFAULT_SETTINGS, context_kwargs, load_settings, strategy_kwargs
from . import solver
from .solver import *  # noqa: F401,F403
from .solver import Position, Solution, SolutionContext, create_strategy

logger = logging.getLogger(__name__)

__version__ = "0.1.0"


def solve_puzzle(
    containers: Sequence[Sequence[Hashable]],
    capacity: int,
    colour_count: Optional[int] = None,
    settings: Optional[Dict[str, Any]] = None,
    cancel_flag: Optional[threading.Event] = None,
    progress_callback: Optional[Callable[[float, str], None]] = None,
) -> Solution:
    """
    Solve a puzzle given as plain lists.

    Args:
        containers: One bottom-to-top sequence of colours per container
        capacity: Uniform container capacity N
        colour_count: Expected number of distinct colours, if known
        settings: Overrides merged over DEFAULT_SETTINGS; None reads
            watersort.json through load_settings()
        cancel_flag: Event that stops the search when set
        progress_callback: Called with (fraction, message) between rounds

    Returns:
        Solution with moves in the given container order

    Raises:
        InvalidPuzzle: If the puzzle contents are inconsistent
    """
    if settings is None:
        merged = load_settings()
    else:
        merged = DEFAULT_SETTINGS.copy()
        merged.update(settings)

    position = Position.from_lists(containers, capacity, colour_count)

    strategy_name = merged["strategy_name"]
    strategy = create_strategy(strategy_name, **strategy_kwargs(merged, strategy_name))

    context = SolutionContext(
        position=position,
        progress_callback=progress_callback,
        **context_kwargs(merged),
    )
    if cancel_flag is not None:
        context.cancel_flag = cancel_flag

    logger.debug(f"Solving with strategy '{strategy_name}':\n{position.describe()}")
    return strategy.solve(context)


__all__ = ["solve_puzzle"] + solver.__all__
