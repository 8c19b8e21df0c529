import pytest

from PipsSolver.constraints import (
    EQUAL, GREATER_THAN, LESS_THAN, NONE, SUM,
    Constraint, PuzzleFormatError, parse_constraint,
)


def _state(c):
    return (c.remaining, c.squares_left, c.bound)


def _sum(target, squares):
    c = Constraint(kind=SUM, target=target)
    for _ in range(squares):
        c.cover()
    return c


def test_none_accepts_everything():
    c = Constraint()
    assert c.kind == NONE
    assert c.check(0) and c.check(6)
    assert c.check_pair(1, 5)


def test_greater_and_less_are_strict():
    gt = Constraint(kind=GREATER_THAN, target=4)
    lt = Constraint(kind=LESS_THAN, target=2)
    assert gt.check(5) and not gt.check(4)
    assert lt.check(1) and not lt.check(2)
    assert not gt.check_pair(5, 3)


def test_sum_partial_check_only_rejects_overshoot():
    c = _sum(7, 3)
    assert c.check(7)
    assert c.check(0)
    assert not c.check(8)


def test_sum_exact_when_values_cover_remaining_region():
    c = _sum(7, 2)
    assert c.check_pair(3, 4)
    assert not c.check_pair(2, 4)
    # one value, two squares left: partial
    assert c.check(2)

    single = _sum(4, 1)
    assert single.check(4)
    assert not single.check(3)


def test_equal_binds_and_unbinds():
    c = Constraint(kind=EQUAL)
    assert c.check(3) and c.check(5)

    bound_here = c.apply(3)
    assert bound_here
    assert c.check(3) and not c.check(5)

    # second placement does not rebind
    assert c.apply(3) is False
    c.revert(3, False)
    assert c.bound == 3

    c.revert(3, bound_here)
    assert c.bound is None
    assert c.check(5)


def test_equal_pair_needs_matching_halves():
    c = Constraint(kind=EQUAL)
    assert c.check_pair(2, 2)
    assert not c.check_pair(2, 3)
    c.apply(4)
    assert not c.check_pair(2, 2)
    assert c.check_pair(4, 4)


def test_sum_apply_revert_roundtrip():
    c = _sum(9, 3)
    before = _state(c)
    c.apply(4)
    assert (c.remaining, c.squares_left) == (5, 2)
    c.apply(5)
    assert (c.remaining, c.squares_left) == (0, 1)
    assert c.check(0) and not c.check(1)
    c.revert(5, False)
    c.revert(4, False)
    assert _state(c) == before


@pytest.mark.parametrize("kind,target", [(SUM, 6), (EQUAL, None), (GREATER_THAN, 2), (LESS_THAN, 3)])
def test_check_is_pure(kind, target):
    c = Constraint(kind=kind, target=target)
    c.cover()
    c.cover()
    before = _state(c)
    for v in range(7):
        c.check(v)
        c.check(v, count=2)
        c.check_pair(v, 6 - v)
    assert _state(c) == before


def test_constraint_needs_value():
    with pytest.raises(ValueError):
        Constraint(kind=SUM)
    with pytest.raises(ValueError):
        Constraint(kind="odd")


def test_parse_constraint():
    c, coords = parse_constraint("sum 12 5 5 5 6")
    assert c.kind == SUM and c.target == 12 and c.remaining == 12
    assert coords == [(4, 4), (4, 5)]

    c, coords = parse_constraint("eq 1 1 2 1")
    assert c.kind == EQUAL and c.target is None
    assert coords == [(0, 0), (1, 0)]

    c, coords = parse_constraint("> 4 3 1")
    assert c.kind == GREATER_THAN and c.target == 4
    assert coords == [(2, 0)]


@pytest.mark.parametrize("text", [
    "",
    "odd 1 1",
    "sum",
    "gt 4 3",
    "eq 1 1 2",
    "lt x 1 1",
])
def test_parse_constraint_rejects_malformed(text):
    with pytest.raises(PuzzleFormatError):
        parse_constraint(text)


def test_is_satisfied_by():
    assert Constraint(kind=SUM, target=7).is_satisfied_by([3, 4])
    assert not Constraint(kind=SUM, target=7).is_satisfied_by([3, 3])
    assert Constraint(kind=EQUAL).is_satisfied_by([2, 2, 2])
    assert not Constraint(kind=EQUAL).is_satisfied_by([2, 3])
    assert Constraint(kind=GREATER_THAN, target=4).is_satisfied_by([5, 6])
    assert not Constraint(kind=LESS_THAN, target=2).is_satisfied_by([1, 2])
