"""
Search strategy tests.

Covers:
1. Optimal move counts on brute-forceable puzzles
2. Agreement between the bucket search, the breadth-first strategy and an
   independent brute-force search
3. The four-colour scenario with 19 initial blocks
4. Unsolvable puzzles, budgets, cancellation and the state ceiling
5. Replay of returned move sequences
"""

import sys
import threading
import time
from collections import deque
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from watersort import solve_puzzle
from watersort.settings import DEFAULT_SETTINGS, save_settings
from watersort.solver import (
    InconsistentSolution,
    InvalidPuzzle,
    Move,
    MoveKind,
    Position,
    SearchStatus,
    SolutionContext,
    StateStore,
    canonicalize,
    create_strategy,
    find_move,
    get_default_strategy_name,
    get_strategy_class,
    get_strategy_info,
    get_strategy_names,
    reconstruct,
    register_strategy,
    replay,
    validate_move,
)
from watersort.solver.strategies import BucketSearchStrategy

TINY = [["a", "b"], ["b", "a"], []]

SMALL_PUZZLES = [
    TINY,
    [["a", "b", "a"], ["b", "a", "b"], []],
    [["a", "b", "c"], ["c", "a", "b"], ["b", "c", "a"], [], []],
    [["a", "a", "b"], ["b", "c", "c"], ["c", "b", "a"], []],
    [["a", "b", "b"], ["c", "a", "c"], ["b", "c", "a"], [], []],
]

# Four colours, capacity five, two empty containers, 19 colour blocks
SCENARIO = [
    ["a", "b", "a", "b", "a"],
    ["b", "a", "b", "a", "b"],
    ["c", "d", "c", "d", "c"],
    ["c", "d", "d", "c", "d"],
    [],
    [],
]


def _capacity(containers):
    return max(len(c) for c in containers)


def _position(containers):
    return Position.from_lists(containers, _capacity(containers))


def _solve(containers, name="bucket", **kwargs):
    strategy_args = {"filter_kind": "exact"} if name == "bucket" else {}
    strategy_args.update(kwargs)
    strategy = create_strategy(name, **strategy_args)
    return strategy.solve(SolutionContext(position=_position(containers)))


def _brute_force(containers):
    """
    Fewest moves by plain breadth-first search, written independently of
    the solver package. Returns None when no solution exists.
    """
    capacity = _capacity(containers)
    start = tuple(sorted(tuple(c) for c in containers))

    def solved(state):
        return all(not c or (len(c) == capacity and len(set(c)) == 1) for c in state)

    def successors(state):
        for i, src in enumerate(state):
            if not src:
                continue
            top = src[-1]
            size = 1
            while size < len(src) and src[-1 - size] == top:
                size += 1
            for j, dst in enumerate(state):
                if i == j or len(dst) == capacity:
                    continue
                if dst and dst[-1] != top:
                    continue
                amount = min(size, capacity - len(dst))
                new = list(state)
                new[i] = src[:-amount]
                new[j] = dst + src[-amount:]
                yield tuple(sorted(new))

    depth = {start: 0}
    queue = deque([start])
    while queue:
        state = queue.popleft()
        if solved(state):
            return depth[state]
        for nxt in successors(state):
            if nxt not in depth:
                depth[nxt] = depth[state] + 1
                queue.append(nxt)
    return None


def _assert_replays(containers, solution):
    """Replay returned moves from the caller's position and check the goal."""
    position = _position(containers)
    for move in solution.moves:
        assert validate_move(position, move.source, move.destination, move.amount)
        position = position.pour(move.source, move.destination, move.amount)
    assert position.is_solved()
    assert position == solution.final_position


# -- registry ----------------------------------------------------------------------


def test_strategies_registered():
    assert "bucket" in get_strategy_names()
    assert "bfs" in get_strategy_names()
    assert get_default_strategy_name() == "bucket"
    assert {info["name"] for info in get_strategy_info()} >= {"bucket", "bfs"}

    with pytest.raises(ValueError):
        create_strategy("greedy")


def test_registry_rejects_name_clash():
    assert get_strategy_class("bucket") is BucketSearchStrategy
    # re-registering the same class is harmless
    assert register_strategy(BucketSearchStrategy) is BucketSearchStrategy

    class Impostor(BucketSearchStrategy):
        name = "bucket"

    with pytest.raises(ValueError):
        register_strategy(Impostor)
    assert get_strategy_class("bucket") is BucketSearchStrategy


# -- optimality ------------------------------------------------------------------------


def test_tiny_puzzle_needs_three_moves():
    """Two colours, capacity two, one empty container."""
    solution = _solve(TINY)

    assert solution.status is SearchStatus.SOLVED
    assert solution.move_count == 3
    assert solution.block_decreasing_count == 2
    assert solution.block_neutral_count == 1
    assert len(solution.positions) == 4
    assert len(solution.as_pairs()) == 3
    _assert_replays(TINY, solution)


@pytest.mark.parametrize("containers", SMALL_PUZZLES)
def test_bucket_search_matches_brute_force(containers):
    expected = _brute_force(containers)
    solution = _solve(containers)

    if expected is None:
        assert solution.status is SearchStatus.UNSOLVABLE
    else:
        assert solution.status is SearchStatus.SOLVED
        assert solution.move_count == expected
        _assert_replays(containers, solution)


@pytest.mark.parametrize("containers", SMALL_PUZZLES)
def test_bucket_search_matches_breadth_first(containers):
    bucket = _solve(containers)
    bfs = _solve(containers, name="bfs")

    assert bucket.status is bfs.status
    assert bucket.move_count == bfs.move_count


@pytest.mark.parametrize("containers", SMALL_PUZZLES)
def test_block_decreasing_moves_fixed_by_block_count(containers):
    position = _position(containers)
    solution = _solve(containers)

    if solution.is_solved:
        assert solution.block_decreasing_count == position.block_count() - position.colour_count


@pytest.mark.slow
def test_four_colour_scenario():
    """Four colours, capacity five, two empty containers, 19 blocks."""
    position = _position(SCENARIO)
    assert position.block_count() == 19
    assert position.colour_count == 4

    solution = _solve(SCENARIO)
    reference = _solve(SCENARIO, name="bfs")

    assert solution.status is SearchStatus.SOLVED
    assert solution.block_decreasing_count == 15
    assert solution.move_count == reference.move_count
    assert solution.move_count == _brute_force(SCENARIO)
    # A 19-move solution exists: sort a/b through the empty containers, then c/d
    assert solution.move_count <= 19
    _assert_replays(SCENARIO, solution)


@pytest.mark.slow
def test_four_colour_scenario_with_bit_array_filter():
    solution = _solve(SCENARIO, filter_kind="bitarray", filter_bits=30, seed=2024)

    assert solution.status is SearchStatus.SOLVED
    assert solution.block_decreasing_count == 15
    assert solution.metrics.seed == 2024
    _assert_replays(SCENARIO, solution)


# -- outcomes --------------------------------------------------------------------------


@pytest.mark.parametrize("containers", [
    [["a", "b"], ["b", "a"]],
    [["a", "b", "a"], ["b", "a", "b"]],
    [["a", "b"], ["b", "c"], ["c", "a"]],
])
@pytest.mark.parametrize("name", ["bucket", "bfs"])
def test_deadlocked_puzzle_is_unsolvable(containers, name):
    solution = _solve(containers, name=name)

    assert solution.status is SearchStatus.UNSOLVABLE
    assert solution.moves == []
    assert solution.reason


def test_solved_puzzle_needs_no_moves():
    containers = [["a", "a"], [], ["b", "b"]]
    for name in ("bucket", "bfs"):
        solution = _solve(containers, name=name)
        assert solution.status is SearchStatus.SOLVED
        assert solution.moves == []
        assert solution.positions == [_position(containers)]


def test_cancelled_search_is_aborted():
    context = SolutionContext(position=_position(TINY))
    context.cancel_flag.set()

    solution = create_strategy("bucket", filter_kind="exact").solve(context)

    assert solution.status is SearchStatus.ABORTED
    assert solution.reason == "cancelled"
    assert solution.moves == []


def test_timeout_is_aborted():
    context = SolutionContext(
        position=_position(TINY), timeout_sec=1.0, start_time=time.time() - 10.0
    )
    solution = create_strategy("bucket", filter_kind="exact").solve(context)

    assert solution.status is SearchStatus.ABORTED
    assert "timeout" in solution.reason


def test_context_budget_queries():
    context = SolutionContext(position=_position(TINY), timeout_sec=30.0)
    assert not context.is_cancelled()
    assert 0.0 < context.remaining_time() <= 30.0

    late = SolutionContext(
        position=_position(TINY), timeout_sec=1.0, start_time=time.time() - 5.0
    )
    assert late.is_cancelled()
    assert late.remaining_time() < 0.0

    unbounded = SolutionContext(position=_position(TINY), timeout_sec=None)
    assert unbounded.remaining_time() is None
    unbounded.cancel_flag.set()
    assert unbounded.is_cancelled()


def test_round_budget():
    """The tiny puzzle is solved in round 1, so one round is not enough."""
    strategy = create_strategy("bucket", filter_kind="exact")

    short = strategy.solve(SolutionContext(position=_position(TINY), max_rounds=1))
    enough = strategy.solve(SolutionContext(position=_position(TINY), max_rounds=2))

    assert short.status is SearchStatus.ABORTED
    assert "round budget" in short.reason
    assert enough.status is SearchStatus.SOLVED


@pytest.mark.parametrize("name", ["bucket", "bfs"])
def test_state_ceiling_fails_fast(name):
    kwargs = {"filter_kind": "exact"} if name == "bucket" else {}
    solution = create_strategy(name, max_states=1, **kwargs).solve(
        SolutionContext(position=_position(TINY))
    )

    assert solution.status is SearchStatus.RESOURCE_EXHAUSTED
    assert solution.moves == []
    assert solution.metrics.states_stored == 1


def test_invalid_settings_rejected():
    with pytest.raises(ValueError):
        create_strategy("bucket", max_states=0)
    with pytest.raises(ValueError):
        create_strategy("bucket", workers=0)


# -- determinism and parallel mode --------------------------------------------------


def test_seeded_runs_repeat():
    puzzle = SMALL_PUZZLES[2]
    first = _solve(puzzle, filter_kind="bitarray", filter_bits=24, seed=11)
    second = _solve(puzzle, filter_kind="bitarray", filter_bits=24, seed=11)

    assert first.as_pairs() == second.as_pairs()
    assert first.metrics.states_stored == second.metrics.states_stored


def test_seed_chosen_when_absent():
    solution = _solve(TINY, filter_kind="bitarray", filter_bits=16)

    assert solution.metrics.seed is not None
    assert solution.is_solved


def test_parallel_expansion_matches_serial():
    puzzle = SMALL_PUZZLES[4]
    serial = _solve(puzzle)
    parallel = _solve(puzzle, workers=3, parallel_threshold=1)

    assert parallel.status is serial.status
    assert parallel.as_pairs() == serial.as_pairs()
    assert parallel.metrics.states_stored == serial.metrics.states_stored


def test_progress_reported_between_rounds():
    reports = []
    context = SolutionContext(
        position=_position(TINY),
        progress_callback=lambda percent, message: reports.append((percent, message)),
    )
    create_strategy("bucket", filter_kind="exact").solve(context)

    assert reports
    assert all(0.0 <= percent < 1.0 for percent, _ in reports)


def test_metrics_filled():
    solution = _solve(SMALL_PUZZLES[2])

    assert solution.metrics.strategy_name == "bucket"
    assert solution.metrics.states_explored > 0
    assert solution.metrics.states_stored > solution.metrics.states_explored - 1
    assert solution.metrics.rounds >= 1
    assert solution.metrics.computation_time_ms >= 0.0


# -- reconstruction -------------------------------------------------------------------


def test_moves_use_caller_container_numbering():
    """Moves refer to the given container order, not the canonical one."""
    containers = [["b", "a"], ["a", "b"], []]
    solution = _solve(containers)

    assert solution.is_solved
    _assert_replays(containers, solution)
    # The empty container is last here but first in canonical order
    assert solution.moves[0].destination == 2


def test_replay_rejects_illegal_stored_move():
    root = canonicalize(_position(TINY))
    store = StateStore()
    store.add(root, None, None, 0, 0)
    # Container 0 of the canonical root is the empty one
    bogus = Move(0, 1, 0, 1, MoveKind.BLOCK_DECREASING)
    handle = store.add(root, 0, bogus, 1, 0)

    with pytest.raises(InconsistentSolution):
        replay(_position(TINY), store, handle)


def test_replay_rejects_stored_move_with_wrong_colour():
    original = _position(TINY)
    root = canonicalize(original)
    store = StateStore()
    store.add(root, None, None, 0, 0)
    move = find_move(root, 1, 0)
    wrong = Move(move.source, move.destination, 1 - move.colour, move.amount, move.kind)
    handle = store.add(canonicalize(root.pour(1, 0, move.amount)), 0, wrong, 0, 1)

    with pytest.raises(InconsistentSolution):
        replay(original, store, handle)


def test_solution_accessors_follow_moves():
    solution = _solve(TINY)

    assert solution.get_move(0) is solution.moves[0]
    assert solution.get_position_after_move(0) == solution.positions[1]
    assert solution.get_position_after_move(solution.move_count - 1) == solution.final_position
    with pytest.raises(IndexError):
        solution.get_move(solution.move_count)


def test_replay_rejects_unsolved_end():
    original = _position(TINY)
    root = canonicalize(original)
    store = StateStore()
    store.add(root, None, None, 0, 0)
    move = find_move(root, 1, 0)
    handle = store.add(canonicalize(root.pour(1, 0, move.amount)), 0, move, 0, 1)

    assert reconstruct(store, handle) == [move]
    with pytest.raises(InconsistentSolution):
        replay(original, store, handle)


# -- top-level API ------------------------------------------------------------------------


def test_solve_puzzle_with_settings():
    solution = solve_puzzle(TINY, capacity=2, settings={"filter_bits": 20, "seed": 9})

    assert solution.is_solved
    assert solution.move_count == 3
    assert solution.metrics.seed == 9


def test_solve_puzzle_reads_settings_file(tmp_path, monkeypatch):
    settings = DEFAULT_SETTINGS.copy()
    settings.update({"filter_bits": 16, "seed": 21, "workers": 2})
    save_settings(settings, tmp_path / "watersort.json")
    monkeypatch.chdir(tmp_path)

    solution = solve_puzzle(TINY, capacity=2)

    assert solution.is_solved
    assert solution.move_count == 3
    assert solution.metrics.seed == 21


def test_explicit_settings_skip_settings_file(tmp_path, monkeypatch):
    (tmp_path / "watersort.json").write_text('{"strategy_name": "missing"}', encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    solution = solve_puzzle(TINY, capacity=2, settings={"strategy_name": "bfs"})

    assert solution.metrics.strategy_name == "bfs"


def test_solve_puzzle_with_bfs_strategy():
    solution = solve_puzzle(TINY, capacity=2, settings={"strategy_name": "bfs"})

    assert solution.is_solved
    assert solution.metrics.strategy_name == "bfs"


def test_solve_puzzle_rejects_invalid_puzzle():
    with pytest.raises(InvalidPuzzle):
        solve_puzzle([["a", "a"], ["b"]], capacity=2)


def test_solve_puzzle_honours_cancel_flag():
    flag = threading.Event()
    flag.set()
    solution = solve_puzzle(TINY, capacity=2, settings={"filter_bits": 16}, cancel_flag=flag)

    assert solution.status is SearchStatus.ABORTED


def test_moves_string_lists_numbered_moves():
    position = _position(TINY)
    solution = _solve(TINY)
    lines = solution.moves_string(position.palette).splitlines()

    assert len(lines) == 3
    assert lines[0].startswith("1: ")
    assert lines[0].endswith("x 1")
