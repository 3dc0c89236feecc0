"""
Duplicate Filter Module - Membership tests for already-seen positions.

The bit array filter keeps one flag per hash index in a fixed-size numpy
array. Two positions that hash to the same index are treated as the same
position, so a new position can be skipped wrongly but a seen position is
never revisited. The exact filter stores the positions themselves.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Set, Type

import numpy as np

from .position import Position

logger = logging.getLogger(__name__)

MASK64 = (1 << 64) - 1

DEFAULT_FILTER_BITS = 32
MIN_FILTER_BITS = 8
MAX_FILTER_BITS = 32


def new_seed() -> int:
    """
    Draw a fresh 64-bit seed from operating system entropy.

    Returns:
        Seed to pass to a filter and to log for reruns
    """
    return int(np.random.SeedSequence().generate_state(1, dtype=np.uint64)[0])


class DuplicateFilter(ABC):
    """
    Abstract membership test over canonical positions.

    Attributes:
        name: Identifier used by create_filter()
        hits: Number of test_and_set() calls that found the position seen
    """
    name: str = "base"

    def __init__(self):
        self.hits = 0

    @abstractmethod
    def test_and_set(self, position: Position) -> bool:
        """
        Record a position and report whether it was already recorded.

        Args:
            position: Canonical position

        Returns:
            True if the position counts as seen (skip it), False if new
        """

    @abstractmethod
    def __len__(self) -> int:
        """Number of positions recorded."""

    @property
    @abstractmethod
    def nbytes(self) -> int:
        """Approximate memory held by the filter."""


class BitArrayFilter(DuplicateFilter):
    """
    Single-hash bit array over 2**bits flags.

    The index is a seeded multiplicative hash over the position's colour
    codes. Hash coefficients are drawn once from numpy's generator seeded
    with the given seed, so a run is repeatable for a given seed.

    Attributes:
        seed: Seed the hash coefficients were drawn from
        bits: Width of the hash index
    """
    name = "bitarray"

    def __init__(self, seed: int, bits: int = DEFAULT_FILTER_BITS):
        super().__init__()
        if not MIN_FILTER_BITS <= bits <= MAX_FILTER_BITS:
            raise ValueError(
                f"Filter bits must be in [{MIN_FILTER_BITS}, {MAX_FILTER_BITS}], got {bits}"
            )
        self.seed = seed
        self.bits = bits
        self._shift = 64 - bits

        rng = np.random.default_rng(seed)
        self._salt = int.from_bytes(rng.bytes(8), "little")
        self._multiplier = int.from_bytes(rng.bytes(8), "little") | 1
        self._increment = int.from_bytes(rng.bytes(8), "little")

        # One flag per index, packed eight to a byte
        self._flags = np.zeros((1 << bits) >> 3, dtype=np.uint8)
        self._count = 0

        logger.debug(
            f"Bit array filter: 2^{bits} flags ({self._flags.nbytes / 2**20:.0f} MiB), seed={seed}"
        )

    def index(self, position: Position) -> int:
        """
        Map a position to its flag index.

        Every colour code and container boundary is folded into a running
        value with the seeded coefficients, so which positions share an
        index depends on the seed.

        Args:
            position: Canonical position

        Returns:
            Integer in [0, 2**bits)
        """
        multiplier = self._multiplier
        value = self._salt
        for contents in position.containers:
            for code in contents:
                value = ((value ^ (code + 1)) * multiplier) & MASK64
            value = (value * multiplier + self._increment) & MASK64
        value ^= value >> 32
        return ((value * multiplier) & MASK64) >> self._shift

    def test_and_set(self, position: Position) -> bool:
        index = self.index(position)
        byte = index >> 3
        mask = 1 << (index & 7)
        if self._flags[byte] & mask:
            self.hits += 1
            return True
        self._flags[byte] |= mask
        self._count += 1
        return False

    def __len__(self) -> int:
        return self._count

    @property
    def nbytes(self) -> int:
        return int(self._flags.nbytes)

    @property
    def fill_ratio(self) -> float:
        """Fraction of flags set; the chance a new position is dropped."""
        return self._count / float(1 << self.bits)


class ExactFilter(DuplicateFilter):
    """
    Exact membership using a set of positions.

    No false positives. Memory grows with the number of positions seen.
    """
    name = "exact"

    def __init__(self, seed: Optional[int] = None, bits: int = DEFAULT_FILTER_BITS):
        super().__init__()
        self.seed = seed
        self._seen: Set[Position] = set()

    def test_and_set(self, position: Position) -> bool:
        if position in self._seen:
            self.hits += 1
            return True
        self._seen.add(position)
        return False

    def __len__(self) -> int:
        return len(self._seen)

    @property
    def nbytes(self) -> int:
        # Set table only; positions are shared with the state store
        return len(self._seen) * 16


_FILTERS: Dict[str, Type[DuplicateFilter]] = {
    BitArrayFilter.name: BitArrayFilter,
    ExactFilter.name: ExactFilter,
}


def create_filter(kind: str, seed: int, bits: int = DEFAULT_FILTER_BITS) -> DuplicateFilter:
    """
    Create a duplicate filter by name.

    Args:
        kind: "bitarray" or "exact"
        seed: Seed for hash coefficients
        bits: Index width for the bit array filter

    Returns:
        DuplicateFilter instance

    Raises:
        ValueError: If kind is not known
    """
    if kind not in _FILTERS:
        available = ", ".join(_FILTERS.keys())
        raise ValueError(f"Unknown filter: {kind}. Available: {available}")
    return _FILTERS[kind](seed=seed, bits=bits)
