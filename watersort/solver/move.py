"""
Move Module - Represents a single pour between two containers.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Hashable, Sequence


class MoveKind(Enum):
    """Effect of a move on the total colour-block count."""
    BLOCK_DECREASING = "decreasing"
    BLOCK_NEUTRAL = "neutral"


@dataclass(frozen=True)
class Move:
    """
    Represents a legal pour from one container into another.

    The whole top block of the source is poured, or as much of it as the
    destination has room for.

    Attributes:
        source: Index of the container poured from
        destination: Index of the container poured into
        colour: Colour code of the poured block
        amount: Number of objects moved
        kind: Whether the move lowers the block count by one
    """
    source: int
    destination: int
    colour: int
    amount: int
    kind: MoveKind

    @property
    def is_block_decreasing(self) -> bool:
        """True if this move merges a whole block into a matching one."""
        return self.kind is MoveKind.BLOCK_DECREASING

    @property
    def pair(self) -> tuple:
        """(source, destination) index pair."""
        return (self.source, self.destination)

    def reindexed(self, source: int, destination: int) -> 'Move':
        """Copy of this move addressed to other container indices."""
        return replace(self, source=source, destination=destination)

    def describe(self, palette: Sequence[Hashable] = ()) -> str:
        """
        Format the move with the caller's colour name.

        Args:
            palette: Colour identifiers indexed by colour code

        Returns:
            String such as "0 -> 2: red x 3"
        """
        if 0 <= self.colour < len(palette):
            colour = palette[self.colour]
        else:
            colour = self.colour
        return f"{self.source} -> {self.destination}: {colour} x {self.amount}"

    def __str__(self):
        return self.describe()
