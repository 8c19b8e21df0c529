from pathlib import Path

import pytest

from PipsSolver.puzzle import PipsPuzzle
from PipsSolver.solver import BacktrackSolver, SolverConfig


DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "json"


def make_puzzle(grid, regions=(), dominoes=()):
    return PipsPuzzle({
        "grid": list(grid),
        "regions": list(regions),
        "dominoes": [list(d) for d in dominoes],
    })


def make_solver(puzzle):
    return BacktrackSolver(puzzle, SolverConfig(verbose=False))


def snapshot(puzzle):
    """Every mutable field the search touches"""
    dominoes = [(d.pips_left, d.pips_right, d.rotation, d.placed) for d in puzzle.dominoes]
    squares = [(s.domino.id if s.domino else None, s.value) for s in puzzle.grid.squares]
    constraints = [(c.remaining, c.squares_left, c.bound) for c in puzzle.grid.constraints()]
    return dominoes, squares, constraints


@pytest.fixture
def sample_puzzle():
    return PipsPuzzle.from_json(str(DATA_DIR / "sample.json"))


@pytest.fixture
def ring_puzzle():
    return PipsPuzzle.from_json(str(DATA_DIR / "ring.json"))
