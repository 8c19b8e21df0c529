"""
Core data structures for Pips puzzle representation: grid graph, dominoes, loader
"""
import json
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple
from dataclasses import dataclass, field

import numpy as np

from .constraints import Constraint, PuzzleFormatError, NONE, parse_constraint


# Facing of side B, indexed by rotation % 4
FACINGS = ("right", "bottom", "left", "top")

ACTIVE = "p"
BLANK = "b"


@dataclass
class Square:
    """An active square in the puzzle grid (blank squares have no Square)"""
    id: int
    x: int  # column, 0-indexed
    y: int  # row, 0-indexed
    constraint: Constraint = field(default_factory=Constraint)
    domino: Optional["Domino"] = field(default=None, repr=False)
    value: Optional[int] = None  # Pip value of the half on this square
    top: Optional["Square"] = field(default=None, repr=False)
    bottom: Optional["Square"] = field(default=None, repr=False)
    left: Optional["Square"] = field(default=None, repr=False)
    right: Optional["Square"] = field(default=None, repr=False)

    @property
    def occupied(self) -> bool:
        return self.domino is not None

    def neighbor(self, facing: int) -> Optional["Square"]:
        """Neighbor in the direction a domino with this facing points"""
        return getattr(self, FACINGS[facing % 4])

    def neighbors(self) -> List["Square"]:
        return [n for n in (self.top, self.bottom, self.left, self.right) if n is not None]

    def label(self) -> str:
        """1-indexed 'x,y' as used in puzzle files"""
        return f"{self.x + 1},{self.y + 1}"

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        return isinstance(other, Square) and self.id == other.id


@dataclass
class Domino:
    """
    Represents a domino piece.

    Side A (pips_left) stays on the square the domino is assigned to;
    side B (pips_right) points along the current facing.
    """
    id: int
    pips_left: int
    pips_right: int
    rotation: int = 0  # facing is rotation % 4: 0=right, 1=down, 2=left, 3=up
    placed: bool = False

    def as_tuple(self) -> Tuple[int, int]:
        return (self.pips_left, self.pips_right)

    def is_double(self) -> bool:
        return self.pips_left == self.pips_right

    def facing(self) -> int:
        return self.rotation % 4

    def rotate_clockwise(self) -> None:
        self.rotation += 1

    def rotate_counter_clockwise(self) -> None:
        self.rotation -= 1

    def swap_sides(self) -> None:
        self.pips_left, self.pips_right = self.pips_right, self.pips_left

    def try_assign(self, square: Square) -> Tuple[bool, Optional[Callable[[], None]]]:
        """
        Place side A on `square` and side B on the neighbor the domino faces.
        Returns (ok, undo). Nothing is mutated when ok is False.
        """
        neighbor = square.neighbor(self.facing())
        if neighbor is None or neighbor.occupied:
            return False, None

        if square.constraint is neighbor.constraint:
            if not square.constraint.check_pair(self.pips_left, self.pips_right):
                return False, None
        # Side A was already checked against `square` when picking candidates
        elif not neighbor.constraint.check(self.pips_right):
            return False, None

        return True, self.assign(square, neighbor)

    def assign(self, square: Square, neighbor: Square) -> Callable[[], None]:
        """Commit the placement and return its exact inverse"""
        first, second = self.pips_left, self.pips_right

        square.domino = self
        square.value = first
        neighbor.domino = self
        neighbor.value = second
        self.placed = True

        bound_first = square.constraint.apply(first)
        bound_second = neighbor.constraint.apply(second)

        def undo():
            neighbor.constraint.revert(second, bound_second)
            square.constraint.revert(first, bound_first)
            square.domino = None
            square.value = None
            neighbor.domino = None
            neighbor.value = None
            self.placed = False

        return undo

    def __repr__(self):
        return f"Domino({self.pips_left},{self.pips_right})"


class GridGraph:
    """
    Index grid of active squares with 4-way neighbor links.

    `layout[y, x]` holds the arena index of the square at (x, y), or -1 for blank.
    """

    def __init__(self, width: int, height: int, blanks: Iterable[Tuple[int, int]] = ()):
        if width <= 0 or height <= 0:
            raise PuzzleFormatError(f"[puzzle] Invalid grid dimensions {width}x{height}")

        self.width = width
        self.height = height
        self.layout = np.full((height, width), -1, dtype=np.int64)
        self.squares: List[Square] = []

        blank_set: Set[Tuple[int, int]] = set(blanks)
        for y in range(height):
            for x in range(width):
                if (x, y) in blank_set:
                    continue
                square = Square(id=len(self.squares), x=x, y=y)
                self.layout[y, x] = square.id
                self.squares.append(square)

        self._build_links()

    def _build_links(self) -> None:
        """Link each square to its orthogonal neighbors (set once, never changed)"""
        for square in self.squares:
            square.top = self.square_at(square.x, square.y - 1)
            square.bottom = self.square_at(square.x, square.y + 1)
            square.left = self.square_at(square.x - 1, square.y)
            square.right = self.square_at(square.x + 1, square.y)

    def square_at(self, x: int, y: int) -> Optional[Square]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        index = int(self.layout[y, x])
        return self.squares[index] if index >= 0 else None

    def attach(self, constraint: Constraint, coords: List[Tuple[int, int]]) -> None:
        """Point every listed square at the (shared) constraint"""
        for x, y in coords:
            square = self.square_at(x, y)
            if square is None:
                raise PuzzleFormatError(
                    f"[puzzle] Region square ({x + 1},{y + 1}) is outside the grid or blank"
                )
            if square.constraint.kind != NONE:
                raise PuzzleFormatError(
                    f"[puzzle] Square ({x + 1},{y + 1}) already belongs to a region"
                )
            square.constraint = constraint
            constraint.cover()

    def open_squares(self) -> List[Square]:
        """Unoccupied squares in scan order (row-major)"""
        return [s for s in self.squares if not s.occupied]

    def is_complete(self) -> bool:
        return all(s.occupied for s in self.squares)

    def constraints(self) -> List[Constraint]:
        """Distinct constraints in order of first appearance"""
        seen: Dict[int, Constraint] = {}
        for square in self.squares:
            seen.setdefault(id(square.constraint), square.constraint)
        return list(seen.values())

    def region_squares(self, constraint: Constraint) -> List[Square]:
        return [s for s in self.squares if s.constraint is constraint]

    def __repr__(self):
        return f"GridGraph({self.width}x{self.height}, squares={len(self.squares)})"


class PipsPuzzle:
    """A loaded puzzle: grid graph with constraints attached, plus the domino multiset"""

    def __init__(self, data: Dict, verbose: bool = False):
        self.data = data
        self.name = data.get("name", "")

        self.grid = self._parse_grid(data.get("grid"))

        regions = data.get("regions", [])
        if not isinstance(regions, list):
            raise PuzzleFormatError("[puzzle] 'regions' must be a list of region strings")

        self.regions: List[Constraint] = []
        for text in regions:
            if not isinstance(text, str):
                raise PuzzleFormatError(f"[puzzle] Region must be a string, got {text!r}")
            constraint, coords = parse_constraint(text)
            self.grid.attach(constraint, coords)
            self.regions.append(constraint)

        self.dominoes: List[Domino] = self._parse_dominoes(data.get("dominoes"))

        if verbose:
            print(f"Loaded {self}")

    @classmethod
    def from_json(cls, json_path: str, verbose: bool = False) -> "PipsPuzzle":
        """Load puzzle from JSON file"""
        with open(json_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise PuzzleFormatError(f"[puzzle] Invalid JSON in {json_path}: {e}") from e
        if not isinstance(data, dict):
            raise PuzzleFormatError(f"[puzzle] Top level of {json_path} must be an object")
        data.setdefault("name", str(json_path))
        return cls(data, verbose=verbose)

    @staticmethod
    def _parse_grid(rows) -> GridGraph:
        """Rows top to bottom; 'p' is an active square, 'b' a blank one"""
        if not rows or not isinstance(rows, list) or not isinstance(rows[0], str):
            raise PuzzleFormatError("[puzzle] 'grid' must be a non-empty list of row strings")

        width = len(rows[0])
        blanks = []
        for y, row in enumerate(rows):
            if not isinstance(row, str) or len(row) != width:
                raise PuzzleFormatError(f"[puzzle] Grid row {y + 1} must be a string of length {width}")
            for x, ch in enumerate(row.lower()):
                if ch == BLANK:
                    blanks.append((x, y))
                elif ch != ACTIVE:
                    raise PuzzleFormatError(f"[puzzle] Unknown grid character {ch!r} in row {y + 1}")

        return GridGraph(width, len(rows), blanks)

    @staticmethod
    def _parse_dominoes(raw) -> List[Domino]:
        if not isinstance(raw, list):
            raise PuzzleFormatError("[puzzle] 'dominoes' must be a list of [a, b] pairs")

        dominoes = []
        for i, pair in enumerate(raw):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise PuzzleFormatError(f"[puzzle] Domino #{i + 1} must be a pair, got {pair!r}")
            if not all(isinstance(v, int) and not isinstance(v, bool) and v >= 0 for v in pair):
                raise PuzzleFormatError(f"[puzzle] Domino #{i + 1} needs non-negative integer pips: {pair!r}")
            dominoes.append(Domino(id=i, pips_left=pair[0], pips_right=pair[1]))
        return dominoes

    def unplaced_dominoes(self) -> List[Domino]:
        return [d for d in self.dominoes if not d.placed]

    def is_complete(self) -> bool:
        """Check if puzzle is completely solved"""
        return self.grid.is_complete() and not self.unplaced_dominoes()

    def get_completion_percentage(self) -> float:
        """Get percentage of squares filled"""
        squares = self.grid.squares
        filled = sum(1 for s in squares if s.occupied)
        return filled / len(squares) if squares else 0.0

    def __repr__(self):
        return (f"PipsPuzzle({self.grid.width}x{self.grid.height}, squares={len(self.grid.squares)}, "
                f"regions={len(self.regions)}, dominoes={len(self.dominoes)})")
