"""
Solver Package - Optimal move search for the water sort puzzle.

This package provides a pluggable strategy framework for solving water
sort puzzles: containers of fixed capacity hold coloured objects, the top
block of one container may be poured onto a matching colour or into an
empty container, and the goal is one full container per colour.

Public API:
    - Position: Immutable puzzle position
    - Move, MoveKind: A pour and its block-count effect
    - canonicalize(): Sort containers into canonical order
    - generate_moves(): Legal moves with their results
    - BitArrayFilter, ExactFilter: Duplicate filters
    - Solution, SolutionMetrics, SearchStatus: Search results
    - SolutionContext: Position, budget and cancellation for a search
    - SolverStrategy: Abstract base for strategies
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    from watersort.solver import create_strategy, Position, SolutionContext

    position = Position.from_lists(
        [["red", "blue"], ["blue", "red"], []], capacity=2
    )
    context = SolutionContext(position=position)

    strategy = create_strategy("bucket", seed=7)
    solution = strategy.solve(context)

    for move in solution.moves:
        print(move.describe(position.palette))
"""

# Core data structures
from .errors import SolverError, InvalidPuzzle, InconsistentSolution
from .position import Position
from .move import Move, MoveKind
from .canonical import canonicalize, canonical_order, is_canonical
from .generator import (
    apply_move,
    find_all_moves,
    find_move,
    generate_moves,
    validate_move,
)
from .dedup import BitArrayFilter, DuplicateFilter, ExactFilter, create_filter
from .state import BucketGrid, StateEntry, StateStore
from .reconstruct import reconstruct, replay
from .solution import SearchStatus, Solution, SolutionMetrics
from .context import SolutionContext

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_class,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

__all__ = [
    # Errors
    "SolverError",
    "InvalidPuzzle",
    "InconsistentSolution",
    # Data structures
    "Position",
    "Move",
    "MoveKind",
    "canonicalize",
    "canonical_order",
    "is_canonical",
    "apply_move",
    "find_all_moves",
    "find_move",
    "generate_moves",
    "validate_move",
    "BitArrayFilter",
    "DuplicateFilter",
    "ExactFilter",
    "create_filter",
    "BucketGrid",
    "StateEntry",
    "StateStore",
    "reconstruct",
    "replay",
    "SearchStatus",
    "Solution",
    "SolutionMetrics",
    "SolutionContext",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_class",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
]
