"""
Canonical Module - Collapses positions that differ only in container order.

Containers are ordered by lexicographic comparison of their bottom-to-top
colour codes. An empty container is the empty tuple, so empty containers
always sort first. Container positions carry no meaning beyond their
contents, so the sorted form is the identity of a position.
"""

from typing import Tuple

from .position import Position


def canonical_order(position: Position) -> Tuple[int, ...]:
    """
    Get the permutation that sorts a position's containers.

    Entry i of the result is the index, in the given position, of the
    container placed at index i of the canonical form. The sort is stable,
    so identical containers keep their relative order.

    Args:
        position: Position in any container order

    Returns:
        Tuple of container indices
    """
    containers = position.containers
    return tuple(sorted(range(len(containers)), key=containers.__getitem__))


def canonicalize(position: Position) -> Position:
    """
    Sort a position's containers into canonical order.

    Idempotent: canonicalize(canonicalize(p)) == canonicalize(p).

    Args:
        position: Position in any container order

    Returns:
        The same object if already canonical, else a sorted copy
    """
    if is_canonical(position):
        return position
    return position.with_containers(tuple(sorted(position.containers)))


def is_canonical(position: Position) -> bool:
    """True if the containers are already in canonical order."""
    containers = position.containers
    return all(containers[i] <= containers[i + 1] for i in range(len(containers) - 1))
