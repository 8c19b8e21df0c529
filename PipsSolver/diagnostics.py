"""
Structural puzzle analysis: spot obviously impossible puzzles before searching

Warnings never block the search; the solver will simply report no solution.
"""
from typing import List

from .constraints import GREATER_THAN, LESS_THAN, SUM
from .puzzle import PipsPuzzle


def analyze_puzzle_structure(puzzle: PipsPuzzle) -> List[str]:
    warnings: List[str] = []
    squares = puzzle.grid.squares
    dominoes = puzzle.dominoes

    if len(squares) % 2:
        warnings.append(f"Odd number of active squares ({len(squares)}); no tiling exists")

    if len(dominoes) * 2 != len(squares):
        warnings.append(
            f"{len(dominoes)} dominoes cannot cover {len(squares)} squares exactly"
        )

    for square in squares:
        if not square.neighbors():
            warnings.append(f"Square {square.label()} has no neighbors")

    pips = [v for d in dominoes for v in d.as_tuple()]
    if not pips:
        return warnings
    low, high = min(pips), max(pips)

    for i, constraint in enumerate(puzzle.regions, 1):
        if constraint.kind == SUM:
            ceiling = constraint.size * high
            if not 0 <= constraint.target <= ceiling:
                warnings.append(
                    f"Region {i} ({constraint.describe()}) outside reachable range [0, {ceiling}]"
                )
        elif constraint.kind == GREATER_THAN and high <= constraint.target:
            warnings.append(f"Region {i} ({constraint.describe()}): no domino value is large enough")
        elif constraint.kind == LESS_THAN and low >= constraint.target:
            warnings.append(f"Region {i} ({constraint.describe()}): no domino value is small enough")

    return warnings


def print_report(puzzle: PipsPuzzle) -> List[str]:
    """Print the structure analysis and return the warnings"""
    warnings = analyze_puzzle_structure(puzzle)

    print("\n--- PUZZLE STRUCTURE ---")
    print(f"Grid: {puzzle.grid.width}x{puzzle.grid.height}, "
          f"{len(puzzle.grid.squares)} active squares, {len(puzzle.dominoes)} dominoes")
    for i, constraint in enumerate(puzzle.regions, 1):
        print(f"  Region {i}: {constraint.size} squares, constraint: {constraint.describe()}")

    if warnings:
        print(f"\n⚠ {len(warnings)} warning(s):")
        for w in warnings:
            print(f"  - {w}")
    else:
        print("  ✓ No structural problems found")

    return warnings
