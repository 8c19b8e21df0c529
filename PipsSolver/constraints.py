"""
Region constraints for the Pips backtracking solver

A Constraint is shared by reference between every square of its region, so
the running state (remaining sum, bound equal value) is seen by all of them.

Key points:
 - check()/check_pair() are pure
 - apply()/revert() are the only mutators, called by domino assignment
 - SUM checks are exact only when the values cover the whole remaining region
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple


NONE = "none"
GREATER_THAN = "gt"
LESS_THAN = "lt"
EQUAL = "eq"
SUM = "sum"

KINDS = (NONE, GREATER_THAN, LESS_THAN, EQUAL, SUM)

# Accepted spellings in region text
_ALIASES = {
    "gt": GREATER_THAN,
    ">": GREATER_THAN,
    "lt": LESS_THAN,
    "<": LESS_THAN,
    "eq": EQUAL,
    "=": EQUAL,
    "sum": SUM,
}


class PuzzleFormatError(RuntimeError):
    """Structurally malformed puzzle input (detected before search)."""


@dataclass(eq=False)
class Constraint:
    """A predicate over the pip values placed on one region"""
    kind: str = NONE
    target: Optional[int] = None  # gt/lt threshold, original sum target
    size: int = 0  # squares covered
    remaining: Optional[int] = None  # sum: target minus placed values
    squares_left: int = 0  # sum: squares not yet filled
    bound: Optional[int] = None  # eq: first placed value

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"unknown constraint kind: {self.kind!r}")
        if self.kind in (GREATER_THAN, LESS_THAN, SUM) and self.target is None:
            raise ValueError(f"constraint {self.kind!r} needs a value")
        if self.remaining is None:
            self.remaining = self.target

    def cover(self) -> None:
        """Register one more square as part of this region"""
        self.size += 1
        self.squares_left += 1

    # ---------- checks (no side effects) ----------

    def check(self, value: int, count: int = 1) -> bool:
        """
        Would placing `value` (the total of `count` values placed at once)
        keep this constraint satisfiable?
        """
        if self.kind == GREATER_THAN:
            return value > self.target
        if self.kind == LESS_THAN:
            return value < self.target
        if self.kind == EQUAL:
            return self.bound is None or value == self.bound
        if self.kind == SUM:
            if count == self.squares_left:
                return self.remaining == value
            return self.remaining - value >= 0
        return True

    def check_pair(self, first: int, second: int) -> bool:
        """Combined check for one domino covering two squares of this region"""
        if self.kind == EQUAL:
            return first == second and self.check(first)
        if self.kind == SUM:
            return self.check(first + second, count=2)
        return self.check(first) and self.check(second)

    # ---------- mutation (assign / undo only) ----------

    def apply(self, value: int) -> bool:
        """
        Record `value` placed on one square of the region.
        Returns True if this call bound an EQUAL constraint.
        """
        if self.kind == EQUAL:
            if self.bound is None:
                self.bound = value
                return True
        elif self.kind == SUM:
            self.remaining -= value
            self.squares_left -= 1
        return False

    def revert(self, value: int, bound_here: bool) -> None:
        """Exact inverse of apply(value)"""
        if self.kind == EQUAL:
            if bound_here:
                self.bound = None
        elif self.kind == SUM:
            self.remaining += value
            self.squares_left += 1

    # ---------- presentation ----------

    def describe(self) -> str:
        if self.kind in (NONE, EQUAL):
            return self.kind
        return f"{self.kind} {self.target}"

    def is_satisfied_by(self, values: List[int]) -> bool:
        """Final validation of a fully filled region"""
        if self.kind == SUM:
            return sum(values) == self.target
        if self.kind == EQUAL:
            return len(set(values)) <= 1
        if self.kind == GREATER_THAN:
            return all(v > self.target for v in values)
        if self.kind == LESS_THAN:
            return all(v < self.target for v in values)
        return True

    def __repr__(self):
        if self.kind == SUM:
            return f"Constraint(sum {self.target}, remaining={self.remaining}, left={self.squares_left})"
        if self.kind == EQUAL:
            return f"Constraint(eq, bound={self.bound})"
        return f"Constraint({self.describe()})"


def parse_constraint(text: str) -> Tuple[Constraint, List[Tuple[int, int]]]:
    """
    Parse region text into a constraint and its 0-indexed (x, y) squares.

    Format: '<type> [<value>] <x1> <y1> <x2> <y2> ...', coordinates 1-indexed.
      'gt 4 3 1'          square (3,1) is greater than 4
      'sum 12 5 5 5 6'    squares (5,5) and (5,6) sum to 12
      'eq 1 1 2 1'        squares (1,1) and (2,1) are equal
    """
    parts = text.split()
    if not parts:
        raise PuzzleFormatError("[puzzle] Empty region definition")

    kind = _ALIASES.get(parts[0].lower())
    if kind is None:
        raise PuzzleFormatError(f"[puzzle] Unknown constraint type {parts[0]!r} in {text!r}")

    try:
        numbers = [int(p) for p in parts[1:]]
    except ValueError:
        raise PuzzleFormatError(f"[puzzle] Non-integer argument in region {text!r}") from None

    target = None
    if kind != EQUAL:
        if not numbers:
            raise PuzzleFormatError(f"[puzzle] Constraint {kind!r} needs a value: {text!r}")
        target, numbers = numbers[0], numbers[1:]

    if not numbers or len(numbers) % 2:
        raise PuzzleFormatError(f"[puzzle] Region {text!r} needs x y coordinate pairs")

    coords = [(numbers[i] - 1, numbers[i + 1] - 1) for i in range(0, len(numbers), 2)]
    return Constraint(kind=kind, target=target), coords
