"""
State Module - Retained search states and the 2-D bucket grid.

States live in an append-only store and are referred to by integer
handle. Parent links are handles too, so the search graph can be walked
backwards without the states owning one another.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .move import Move
from .position import Position


@dataclass(frozen=True)
class StateEntry:
    """
    A position reached during search.

    Attributes:
        position: Canonical position
        parent: Handle of the state this one was reached from, None for the root
        move: Move made in the parent's position, None for the root
        x: Block-decreasing moves from the root
        y: Block-neutral moves from the root
    """
    position: Position
    parent: Optional[int]
    move: Optional[Move]
    x: int
    y: int

    @property
    def depth(self) -> int:
        """Total moves from the root."""
        return self.x + self.y


class StateStore:
    """Append-only arena of StateEntry records addressed by handle."""

    def __init__(self):
        self._entries: List[StateEntry] = []

    def add(self, position: Position, parent: Optional[int], move: Optional[Move],
            x: int, y: int) -> int:
        """
        Append a state.

        Returns:
            Handle of the new state
        """
        self._entries.append(StateEntry(position, parent, move, x, y))
        return len(self._entries) - 1

    def __getitem__(self, handle: int) -> StateEntry:
        return self._entries[handle]

    def __len__(self) -> int:
        return len(self._entries)

    def path_to(self, handle: int) -> List[int]:
        """
        Walk parent links from a state back to the root.

        Args:
            handle: Handle of the final state

        Returns:
            Handles from the root to the given state, inclusive
        """
        path = []
        current: Optional[int] = handle
        while current is not None:
            path.append(current)
            current = self._entries[current].parent
        path.reverse()
        return path


class BucketGrid:
    """
    Buckets of state handles indexed by (x, y).

    x runs from 0 to width inclusive; rows are added as y grows.

    Attributes:
        width: Largest x value (block-decreasing moves needed to solve)
    """

    def __init__(self, width: int):
        self.width = width
        self._rows: Dict[int, List[List[int]]] = {}

    def _row(self, y: int) -> List[List[int]]:
        row = self._rows.get(y)
        if row is None:
            row = [[] for _ in range(self.width + 1)]
            self._rows[y] = row
        return row

    def file(self, x: int, y: int, handle: int) -> None:
        """Add a state handle to bucket (x, y)."""
        if not 0 <= x <= self.width:
            raise IndexError(f"x={x} outside [0, {self.width}]")
        self._row(y)[x].append(handle)

    def bucket(self, x: int, y: int) -> List[int]:
        """Handles filed under (x, y), in filing order."""
        row = self._rows.get(y)
        if row is None:
            return []
        return row[x]

    def count(self, y: int) -> int:
        """Number of handles filed in row y."""
        row = self._rows.get(y)
        if row is None:
            return 0
        return sum(len(bucket) for bucket in row)

    def row_is_empty(self, y: int) -> bool:
        return self.count(y) == 0

    def total(self) -> int:
        """Number of handles filed anywhere."""
        return sum(self.count(y) for y in self._rows)

    def release_row(self, y: int) -> None:
        """
        Drop the handle lists of a finished row.

        The states stay in the store for reconstruction.
        """
        self._rows.pop(y, None)

    def occupied(self) -> List[Tuple[int, int]]:
        """(x, y) coordinates of every non-empty bucket."""
        return [
            (x, y)
            for y, row in sorted(self._rows.items())
            for x, bucket in enumerate(row)
            if bucket
        ]
