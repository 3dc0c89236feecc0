"""
Errors Module - Exceptions raised by the solver package.

Search outcomes such as an unsolvable puzzle, an aborted search or an
exhausted state ceiling are reported through SearchStatus, not raised.
"""


class SolverError(Exception):
    """Base class for solver exceptions."""


class InvalidPuzzle(SolverError, ValueError):
    """Puzzle contents are inconsistent with its capacity or colour count."""


class InconsistentSolution(SolverError):
    """A reconstructed move sequence failed its replay check."""
