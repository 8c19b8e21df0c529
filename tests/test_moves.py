import pytest

from PipsSolver.moves import ASSIGN, ROTATE, SWAP, Move, MoveLog, SolverInvariantError
from PipsSolver.puzzle import Domino

from conftest import make_puzzle, snapshot


def test_rotate_and_swap_always_push():
    log = MoveLog()
    d = Domino(id=0, pips_left=1, pips_right=2)
    assert log.try_push(Move(ROTATE, d))
    assert log.try_push(Move(SWAP, d))
    assert len(log) == 2
    assert d.facing() == 1 and d.as_tuple() == (2, 1)
    assert [m.label for m in log] == ["Rotate domino 1-2", "Swap domino 1-2"]


def test_pop_runs_inverse_in_lifo_order():
    log = MoveLog()
    d = Domino(id=0, pips_left=1, pips_right=2)
    log.try_push(Move(ROTATE, d))
    log.try_push(Move(SWAP, d))
    log.try_push(Move(ROTATE, d))

    assert log.pop().kind == ROTATE
    assert d.facing() == 1 and d.as_tuple() == (2, 1)
    assert log.pop().kind == SWAP
    assert d.as_tuple() == (1, 2)
    assert log.pop().kind == ROTATE
    assert d.rotation == 0
    assert len(log) == 0


def test_pop_empty_log_is_an_invariant_violation():
    with pytest.raises(SolverInvariantError):
        MoveLog().pop()


def test_failed_assign_leaves_log_and_domino_untouched():
    puzzle = make_puzzle(["p", "p"], ["sum 7 1 1 1 2"], [(2, 4)])
    domino = puzzle.dominoes[0]
    top = puzzle.grid.squares[0]
    log = MoveLog()
    log.try_push(Move(ROTATE, domino, top))
    before = snapshot(puzzle)

    assert not log.try_push(Move(ASSIGN, domino, top))
    assert len(log) == 1
    assert snapshot(puzzle) == before


def test_assign_records_placement():
    puzzle = make_puzzle(["p", "p"], ["sum 7 1 1 1 2"], [(3, 4)])
    domino = puzzle.dominoes[0]
    top, bottom = puzzle.grid.squares
    log = MoveLog()
    log.try_push(Move(ROTATE, domino, top))
    assert log.try_push(Move(ASSIGN, domino, top))

    move = log.moves[-1]
    assert move.neighbor is bottom
    assert move.values == (3, 4)
    assert move.label == "Assign domino 3-4 to square 1,1"
    assert log.assignments() == [move]


@pytest.mark.parametrize("kinds", [
    [ROTATE],
    [SWAP],
    [ROTATE, ASSIGN],
    [SWAP, ASSIGN],
    [ROTATE, ROTATE, SWAP, ROTATE],
])
def test_undo_restores_every_field(kinds):
    puzzle = make_puzzle(["pp", "pp"], ["eq 1 1 1 2", "sum 4 2 1 2 2"], [(2, 2), (1, 3)])
    domino = puzzle.dominoes[0]
    square = puzzle.grid.square_at(0, 0)
    before = snapshot(puzzle)

    log = MoveLog()
    for kind in kinds:
        log.try_push(Move(kind, domino, square))
    assert len(log) == len(kinds)

    log.undo_all()
    assert snapshot(puzzle) == before


def test_prune_marks_full_turn_without_assign():
    log = MoveLog()
    first = Domino(id=0, pips_left=1, pips_right=2)
    second = Domino(id=1, pips_left=3, pips_right=4)
    for _ in range(4):
        log.try_push(Move(ROTATE, first))
    log.try_push(Move(ROTATE, second))
    log.try_push(Move(ROTATE, second))

    assert log.prune_useless_sequences() == 4
    assert [m.pruned for m in log] == [True] * 4 + [False] * 2
    assert len(log.visible_moves()) == 2
    # not physically removed
    assert len(log) == 6


def test_prune_keeps_full_turn_followed_by_assign_of_same_domino():
    puzzle = make_puzzle(["pp"], [], [(1, 2)])
    domino = puzzle.dominoes[0]
    square = puzzle.grid.squares[0]
    log = MoveLog()
    for _ in range(4):
        log.try_push(Move(ROTATE, domino, square))
    assert log.try_push(Move(ASSIGN, domino, square))

    assert log.prune_useless_sequences() == 0
    assert len(log.visible_moves()) == 5


def test_prune_ignores_short_and_mixed_runs():
    log = MoveLog()
    a = Domino(id=0, pips_left=1, pips_right=2)
    b = Domino(id=1, pips_left=3, pips_right=4)
    for d in (a, a, b, a, a):
        log.try_push(Move(ROTATE, d))
    assert log.prune_useless_sequences() == 0


def test_prune_trailing_full_turn():
    log = MoveLog()
    d = Domino(id=0, pips_left=1, pips_right=2)
    log.try_push(Move(SWAP, d))
    for _ in range(4):
        log.try_push(Move(ROTATE, d))
    assert log.prune_useless_sequences() == 4
    assert [m.kind for m in log.visible_moves()] == [SWAP]
