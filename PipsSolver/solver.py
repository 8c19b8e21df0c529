# solver.py
"""
Backtracking search engine for Pips puzzles

Strategy:
1. Pick the most constrained open square (single-square sums, bound equals, gt/lt)
2. Enumerate unplaced dominoes with a side that fits that square
3. Try each fitting side at the square in all four facings via the move log
4. Recurse; on failure undo through the move log and try the next option

The first solution found wins. Search order is fully deterministic.
"""

import sys
from typing import List, Optional
from dataclasses import dataclass

from .constraints import EQUAL, GREATER_THAN, LESS_THAN, SUM
from .moves import ASSIGN, FULL_TURN, ROTATE, SWAP, Move, MoveLog, SolverInvariantError
from .puzzle import Domino, PipsPuzzle, Square


@dataclass
class SolverConfig:
    verbose: bool = True
    # Print per-square tracing for frames shallower than this
    trace_depth: int = 3
    # Progress line every N search frames
    progress_interval: int = 1000


@dataclass
class Candidate:
    """An unplaced domino with at least one side that fits the selected square"""
    domino: Domino
    left_match: bool
    right_match: bool

    def sides_to_try(self) -> List[bool]:
        """Swap flags to try, in order; a double never needs its swap"""
        plan = []
        if self.left_match:
            plan.append(False)
        if self.right_match and not (self.left_match and self.domino.is_double()):
            plan.append(True)
        return plan


class BacktrackSolver:
    def __init__(self, puzzle: PipsPuzzle, config: Optional[SolverConfig] = None):
        self.puzzle = puzzle
        self.grid = puzzle.grid
        self.config = config or SolverConfig()
        self.verbose = self.config.verbose
        self.log = MoveLog()
        self.stats = {
            'total_attempts': 0,
            'assign_attempts': 0,
            'placements': 0,
            'backtracks': 0,
            'dead_ends': 0,
            'max_depth': 0,
            'pruned_moves': 0,
        }

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self) -> bool:
        if any(d.placed for d in self.puzzle.dominoes):
            raise SolverInvariantError("[solver] Dominoes already placed at start")
        if len(self.log):
            raise SolverInvariantError("[solver] Move log not empty at start")

        self._ensure_recursion_limit()

        if self.verbose:
            print(f"Starting backtracking solver: {self.puzzle}")

        result = self._search(0)

        if result:
            self.stats['pruned_moves'] = self.log.prune_useless_sequences()
        elif len(self.log):
            raise SolverInvariantError(
                f"[solver] Search failed but {len(self.log)} moves were not undone"
            )

        if self.verbose:
            print("\n✓ Puzzle solved!" if result else "\n✗ No solution found")
            self._print_stats()

        return result

    def reset(self) -> None:
        """Undo every move of a finished search, restoring the initial state"""
        self.log.undo_all()

    def _ensure_recursion_limit(self) -> None:
        # Two interpreter frames per placed domino, plus headroom for callers
        needed = 2 * len(self.puzzle.dominoes) + 200
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)

    # -------------------------------------------------------------------------
    # Square selection
    # -------------------------------------------------------------------------
    def pick_empty_square(self) -> Square:
        """
        First open square, in scan order, matching (by priority):
          1. sum with exactly one square left (value fully forced)
          2. eq already bound
          3. gt / lt
          4. anything
        """
        open_squares = self.grid.open_squares()
        if not open_squares:
            raise SolverInvariantError("[solver] pick_empty_square called with no open squares")

        for square in open_squares:
            c = square.constraint
            if c.kind == SUM and c.squares_left == 1:
                return square
        for square in open_squares:
            c = square.constraint
            if c.kind == EQUAL and c.bound is not None:
                return square
        for square in open_squares:
            if square.constraint.kind in (GREATER_THAN, LESS_THAN):
                return square
        return open_squares[0]

    def find_candidates(self, square: Square) -> List[Candidate]:
        """Unplaced dominoes whose side A or side B passes the square's constraint on its own"""
        candidates = []
        for domino in self.puzzle.dominoes:
            if domino.placed:
                continue
            left_match = square.constraint.check(domino.pips_left)
            right_match = square.constraint.check(domino.pips_right)
            if left_match or right_match:
                candidates.append(Candidate(domino, left_match, right_match))
        return candidates

    # -------------------------------------------------------------------------
    # Depth-first search
    # -------------------------------------------------------------------------
    def _search(self, depth: int) -> bool:
        self.stats['total_attempts'] += 1
        self.stats['max_depth'] = max(self.stats['max_depth'], depth)

        if self.verbose and self.stats['total_attempts'] % self.config.progress_interval == 0:
            cp = self.puzzle.get_completion_percentage()
            print(f"  Progress: {cp:.1%} | Attempts: {self.stats['total_attempts']} | "
                  f"Backtracks: {self.stats['backtracks']} | Depth: {depth}")

        remaining = self.puzzle.unplaced_dominoes()

        if self.grid.is_complete():
            if not remaining:
                return True
            self._dead_end(depth, f"grid full with {len(remaining)} dominoes left")
            return False

        if not remaining:
            self._dead_end(depth, "no dominoes left for open squares")
            return False

        square = self.pick_empty_square()
        candidates = self.find_candidates(square)
        if not candidates:
            self._dead_end(depth, f"nothing fits square {square.label()} ({square.constraint.describe()})")
            return False

        if self._tracing(depth):
            print(f"{'  ' * depth}Square {square.label()} ({square.constraint.describe()}): "
                  f"{len(candidates)} candidates")

        mark = len(self.log)
        for candidate in candidates:
            if self._try_candidate(square, candidate, depth):
                return True

        # Exhausted: drop this frame's rotations and swaps
        while len(self.log) > mark:
            self.log.pop()
        return False

    def _try_candidate(self, square: Square, candidate: Candidate, depth: int) -> bool:
        domino = candidate.domino

        for swapped in candidate.sides_to_try():
            if swapped:
                self.log.try_push(Move(SWAP, domino, square))

            for _ in range(FULL_TURN):
                self.stats['assign_attempts'] += 1
                if self.log.try_push(Move(ASSIGN, domino, square)):
                    self.stats['placements'] += 1
                    if self._tracing(depth):
                        print(f"{'  ' * depth}  {self.log.moves[-1].label}")

                    if self._search(depth + 1):
                        return True

                    self.log.pop()
                    self.stats['backtracks'] += 1
                    if self._tracing(depth):
                        print(f"{'  ' * depth}  Backtrack")

                # Next facing
                self.log.try_push(Move(ROTATE, domino, square))

        return False

    def _tracing(self, depth: int) -> bool:
        return self.verbose and depth < self.config.trace_depth

    def _dead_end(self, depth: int, reason: str) -> None:
        self.stats['dead_ends'] += 1
        if self._tracing(depth):
            print(f"{'  ' * depth}Dead end: {reason}")

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSolving Statistics:")
        print(f"  Search frames: {self.stats['total_attempts']}")
        print(f"  Assign attempts: {self.stats['assign_attempts']}")
        print(f"  Placements: {self.stats['placements']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        print(f"  Dead ends: {self.stats['dead_ends']}")
        print(f"  Max depth: {self.stats['max_depth']}")
        print(f"  Pruned moves: {self.stats['pruned_moves']}")
        print(f"  Final log: {len(self.log)} moves ({len(self.log.assignments())} assignments)")
