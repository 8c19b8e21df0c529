"""
Pips Puzzle Solver Package

A depth-first backtracking solver for Pips domino puzzles, driven by a
reversible move log.
"""

from .constraints import Constraint, PuzzleFormatError, parse_constraint
from .puzzle import PipsPuzzle, GridGraph, Square, Domino
from .moves import Move, MoveLog, SolverInvariantError
from .solver import BacktrackSolver, SolverConfig
from .output import SolutionFormatter

__version__ = "1.0.0"
__all__ = [
    'Constraint',
    'PuzzleFormatError',
    'parse_constraint',
    'PipsPuzzle',
    'GridGraph',
    'Square',
    'Domino',
    'Move',
    'MoveLog',
    'SolverInvariantError',
    'BacktrackSolver',
    'SolverConfig',
    'SolutionFormatter'
]
