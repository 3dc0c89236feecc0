"""
Position model tests: block counts, goal check, validation and text form.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from watersort.solver import InvalidPuzzle, Position

R, B = 0, 1


@pytest.mark.parametrize("containers, expected", [
    (((R, B, R, B), (B, R, B, R), (), ()), 8),
    (((R, R, R, R), (B, B, B, B), (), ()), 2),
    (((R, R), (B, B), (B, B, R), (R,)), 5),
    (((), (), (), ()), 0),
])
def test_block_count(containers, expected):
    """Blocks are maximal same-colour runs, counted per container."""
    position = Position(containers=containers, capacity=4)
    assert position.block_count() == expected


def test_top_block():
    position = Position(containers=((R, R, B, B), (B, R, R, R), ()), capacity=4)
    assert position.top_block(0) == (B, 2)
    assert position.top_block(1) == (R, 3)
    assert position.top_block(2) == (None, 0)
    assert position.blocks_in(1) == 2
    assert position.room(0) == 0
    assert position.room(2) == 4


@pytest.mark.parametrize("containers, solved", [
    (((), (R, R), (B, B)), True),
    (((R, R), (B, B)), True),
    (((R, R), (B,), (B,)), False),
    (((R, B), (B, R), ()), False),
    (((), (), ()), True),
])
def test_is_solved(containers, solved):
    position = Position(containers=containers, capacity=2)
    assert position.is_solved() is solved


def test_pour_returns_new_position():
    """Pouring never mutates the original position."""
    position = Position(containers=((R, B, B), (B,), ()), capacity=3)
    poured = position.pour(0, 1, 2)

    assert poured.containers == ((R,), (B, B, B), ())
    assert position.containers == ((R, B, B), (B,), ())


def test_from_lists_maps_colours_by_first_appearance():
    position = Position.from_lists([["red", "blue"], ["blue", "red"], []], capacity=2)

    assert position.palette == ("red", "blue")
    assert position.containers == ((0, 1), (1, 0), ())
    assert position.colour_count == 2
    assert position.container_count == 3
    assert position.to_lists() == [["red", "blue"], ["blue", "red"], []]


def test_equality_ignores_palette():
    first = Position.from_lists([["red", "blue"], ["blue", "red"]], capacity=2)
    second = Position.from_lists([[1, 2], [2, 1]], capacity=2)

    assert first == second
    assert hash(first) == hash(second)


@pytest.mark.parametrize("containers, capacity, colour_count", [
    ([["a", "a", "a"], ["b", "b"]], 2, None),        # over capacity
    ([["a", "a"], ["b"], ["a"]], 2, None),           # three a, one b
    ([["a", "b"], ["b", "a"]], 2, 3),                # declared colour count
    ([["a", None], ["a"]], 2, None),                 # gap in a container
    ([[]], 0, None),                                 # zero capacity
])
def test_invalid_puzzles(containers, capacity, colour_count):
    with pytest.raises(InvalidPuzzle):
        Position.from_lists(containers, capacity, colour_count)


def test_invalid_puzzle_is_value_error():
    with pytest.raises(ValueError):
        Position.from_lists([["a"]], capacity=2)


def test_from_strings_reads_top_first():
    """Text lines list colours from the top of the tube downwards."""
    position = Position.from_strings(["red, blue", "Blue ,  RED", ""], capacity=2)

    assert position.to_lists() == [["blue", "red"], ["red", "blue"], []]
    assert position.top_block(0) == (position.palette.index("red"), 1)


def test_from_strings_skips_empty_slots_above_liquid():
    position = Position.from_strings(["empty, red", "red, blue", "blue"], capacity=2)

    assert position.to_lists() == [["red"], ["blue", "red"], ["blue"]]


def test_from_strings_rejects_gap_below_colour():
    with pytest.raises(InvalidPuzzle):
        Position.from_strings(["red, , blue", "red, blue"], capacity=3)


def test_describe_lists_containers():
    position = Position.from_lists([["red", "blue"], ["blue", "red"], []], capacity=2)

    assert position.describe() == "0: (red, blue)\n1: (blue, red)\n2: ()"
