"""
Position Module - Immutable representation of a water sort puzzle.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidPuzzle

# Tokens read as an empty slot in the text form
EMPTY_TOKENS = ("", "empty")


@dataclass(frozen=True)
class Position:
    """
    Immutable puzzle position.

    Each container is a tuple of integer colour codes listed from the
    bottom of the container to the top; cells above the last entry are
    empty space. Codes index into palette, which keeps the caller's
    colour identifiers for display and plays no part in equality.

    Attributes:
        containers: Tuple of containers, each a bottom-to-top tuple of codes
        capacity: Uniform container capacity N
        palette: Caller colour identifier for each code
    """
    containers: Tuple[Tuple[int, ...], ...]
    capacity: int
    palette: Tuple[Hashable, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_lists(
        cls,
        containers: Sequence[Sequence[Hashable]],
        capacity: int,
        colour_count: Optional[int] = None,
    ) -> 'Position':
        """
        Create a validated Position from bottom-to-top colour sequences.

        Colour identifiers may be any hashable value. They are mapped to
        dense codes in order of first appearance.

        Args:
            containers: One sequence per container, bottom to top
            capacity: Uniform container capacity N
            colour_count: Expected number of distinct colours, if known

        Returns:
            Position with the caller's container order preserved

        Raises:
            InvalidPuzzle: If the contents are inconsistent
        """
        codes: Dict[Hashable, int] = {}
        encoded = []
        for index, contents in enumerate(containers):
            row = []
            for colour in contents:
                if colour is None or colour == "":
                    raise InvalidPuzzle(
                        f"Container {index} has an empty slot below a colour"
                    )
                if colour not in codes:
                    codes[colour] = len(codes)
                row.append(codes[colour])
            encoded.append(tuple(row))

        palette = tuple(codes)
        position = cls(containers=tuple(encoded), capacity=capacity, palette=palette)
        position.validate(colour_count)
        return position

    @classmethod
    def from_strings(
        cls,
        lines: Iterable[str],
        capacity: int,
        colour_count: Optional[int] = None,
    ) -> 'Position':
        """
        Create a Position from comma-separated text, one line per container.

        Colours are listed from the top of the container downwards, the
        way a tube reads on screen. Blank or "empty" entries stand for
        empty slots above the liquid. Names are stripped and lower-cased.

        Example:
            Position.from_strings(["red, blue", "blue, red", ""], capacity=2)

        Args:
            lines: Container descriptions
            capacity: Uniform container capacity N
            colour_count: Expected number of distinct colours, if known

        Returns:
            Validated Position
        """
        containers = []
        for index, line in enumerate(lines):
            tokens = [token.strip().lower() for token in line.split(",")]
            top_down = []
            for token in tokens:
                if token in EMPTY_TOKENS:
                    if top_down:
                        raise InvalidPuzzle(
                            f"Container {index} has an empty slot below a colour: {line!r}"
                        )
                    continue
                top_down.append(token)
            containers.append(list(reversed(top_down)))
        return cls.from_lists(containers, capacity, colour_count)

    def validate(self, colour_count: Optional[int] = None) -> None:
        """
        Check the conservation rules for this puzzle instance.

        Args:
            colour_count: Expected number of distinct colours, if known

        Raises:
            InvalidPuzzle: On any inconsistency
        """
        if self.capacity < 1:
            raise InvalidPuzzle(f"Capacity must be at least 1, got {self.capacity}")

        for index, contents in enumerate(self.containers):
            if len(contents) > self.capacity:
                raise InvalidPuzzle(
                    f"Container {index} holds {len(contents)} objects, "
                    f"capacity is {self.capacity}"
                )

        totals = self.colour_totals()
        for code, total in sorted(totals.items()):
            if total != self.capacity:
                raise InvalidPuzzle(
                    f"Colour {self.colour_name(code)!r} has {total} objects, "
                    f"expected {self.capacity}"
                )

        if colour_count is not None and colour_count != len(totals):
            raise InvalidPuzzle(
                f"Puzzle has {len(totals)} colours, expected {colour_count}"
            )

    def colour_totals(self) -> Dict[int, int]:
        """Count objects of each colour code across all containers."""
        counter: Counter = Counter()
        for contents in self.containers:
            counter.update(contents)
        return dict(counter)

    def colour_name(self, code: int) -> Any:
        """Get the caller's identifier for a colour code."""
        if 0 <= code < len(self.palette):
            return self.palette[code]
        return code

    @property
    def container_count(self) -> int:
        """Number of containers, filled or not."""
        return len(self.containers)

    @property
    def colour_count(self) -> int:
        """Number of distinct colours present."""
        return len({code for contents in self.containers for code in contents})

    def is_empty(self, index: int) -> bool:
        return not self.containers[index]

    def room(self, index: int) -> int:
        """Free cells above the liquid in a container."""
        return self.capacity - len(self.containers[index])

    def blocks_in(self, index: int) -> int:
        """
        Count colour blocks in a single container.

        A block is a maximal run of the same colour.
        """
        return _count_blocks(self.containers[index])

    def block_count(self) -> int:
        """Total number of colour blocks over every container."""
        return sum(_count_blocks(contents) for contents in self.containers)

    def top_block(self, index: int) -> Tuple[Optional[int], int]:
        """
        Get the colour and size of the top block of a container.

        Returns:
            (colour, size), or (None, 0) for an empty container
        """
        contents = self.containers[index]
        if not contents:
            return None, 0
        colour = contents[-1]
        size = 1
        for code in reversed(contents[:-1]):
            if code != colour:
                break
            size += 1
        return colour, size

    def is_solved(self) -> bool:
        """
        Check the goal condition.

        Every container is either empty or filled to capacity with a
        single colour, and exactly one container is non-empty per colour.
        """
        filled = 0
        for contents in self.containers:
            if not contents:
                continue
            if len(contents) != self.capacity or len(set(contents)) != 1:
                return False
            filled += 1
        return filled == self.colour_count

    def pour(self, source: int, destination: int, amount: int) -> 'Position':
        """
        Move objects from the top of one container to another.

        The original position is unchanged. No rule checks are made here;
        the move generator decides which pours are legal.

        Args:
            source: Index of the container poured from
            destination: Index of the container poured into
            amount: Number of objects moved

        Returns:
            New Position in the same container order
        """
        containers = list(self.containers)
        moved = containers[source][len(containers[source]) - amount:]
        containers[source] = containers[source][:len(containers[source]) - amount]
        containers[destination] = containers[destination] + moved
        return Position(
            containers=tuple(containers),
            capacity=self.capacity,
            palette=self.palette,
        )

    def with_containers(self, containers: Tuple[Tuple[int, ...], ...]) -> 'Position':
        """Create a Position sharing this one's capacity and palette."""
        return Position(containers=containers, capacity=self.capacity, palette=self.palette)

    def to_lists(self) -> List[List[Any]]:
        """
        Convert to nested lists of the caller's colour identifiers.

        Returns:
            One bottom-to-top list per container
        """
        return [[self.colour_name(code) for code in contents] for contents in self.containers]

    def describe(self) -> str:
        """Render one line per container, bottom to top, for log output."""
        lines = []
        for index, contents in enumerate(self.containers):
            names = ", ".join(str(self.colour_name(code)) for code in contents)
            lines.append(f"{index}: ({names})")
        return "\n".join(lines)

    def __hash__(self):
        """Enable using Position as dict key or in sets."""
        return hash((self.containers, self.capacity))

    def __eq__(self, other):
        """Positions are equal when contents and capacity match."""
        if not isinstance(other, Position):
            return False
        return self.capacity == other.capacity and self.containers == other.containers


def _count_blocks(contents: Tuple[int, ...]) -> int:
    blocks = 0
    previous = None
    for code in contents:
        if code != previous:
            blocks += 1
            previous = code
    return blocks
