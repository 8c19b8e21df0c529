#!/usr/bin/env python3
"""
Pips Solver - Main Entry Point

Usage:
    python -m PipsSolver.main data/json/puzzle.json
    python -m PipsSolver.main --all [data/json]
    python -m PipsSolver.main --quiet data/json/puzzle.json
    python -m PipsSolver.main            # Uses the configuration below
"""

import sys
from pathlib import Path

from .constraints import PuzzleFormatError
from .diagnostics import analyze_puzzle_structure, print_report
from .output import SolutionFormatter
from .puzzle import PipsPuzzle
from .solver import BacktrackSolver, SolverConfig

# ============================================================================
# CONFIGURATION
# ============================================================================
PUZZLE_PATH = "data/json/sample.json"    # Puzzle to solve by default
DATA_DIR = "data/json"                   # Where --all looks for puzzles
OUTPUT_DIR = "data/solutions"            # Base output directory
SOLVE_ALL = False                        # Set True to solve all JSON puzzles

TRACE_DEPTH = 3
# Search frames shallower than this print what they try

PROGRESS_INTERVAL = 1000
# Print a progress line every N search frames
# ============================================================================


def solve_puzzle(input_path: str, output_dir: str = None, verbose: bool = True):
    """
    Solve a single puzzle and save results.

    Args:
        input_path: Path to input JSON file
        output_dir: Directory for output files (default: OUTPUT_DIR/<puzzle_name>/)
        verbose: Print detailed solving progress

    Returns:
        (solved, puzzle, solver); puzzle and solver are None if the file was rejected
    """
    puzzle_name = Path(input_path).stem

    if output_dir is None:
        output_dir = Path(OUTPUT_DIR) / puzzle_name
    output_dir = Path(output_dir)

    if verbose:
        print(f"\n{'='*60}")
        print(f"Loading puzzle: {input_path}")
        print(f"Output directory: {output_dir}")
        print(f"{'='*60}")

    try:
        puzzle = PipsPuzzle.from_json(str(input_path), verbose=verbose)
    except (PuzzleFormatError, OSError) as e:
        print(f"\nError loading {input_path}: {e}")
        return False, None, None

    if verbose:
        print_report(puzzle)
    else:
        for warning in analyze_puzzle_structure(puzzle):
            print(f"  ⚠ {warning}")

    config = SolverConfig(verbose=verbose, trace_depth=TRACE_DEPTH, progress_interval=PROGRESS_INTERVAL)
    solver = BacktrackSolver(puzzle, config)

    try:
        solved = solver.solve()
    except KeyboardInterrupt:
        print(f"\n\n{'='*60}")
        print("⚠ Solving interrupted by user (Ctrl+C)")
        print(f"{'='*60}")
        print(f"\nProgress when stopped: {puzzle.get_completion_percentage():.1%} complete")
        solver._print_stats()
        return False, puzzle, solver

    if not solved:
        if verbose:
            print(f"\n{'='*60}")
            print("FAILED: No solution exists for this puzzle ✗")
            print(f"{'='*60}")
        return False, puzzle, solver

    if verbose:
        print(f"\n{'='*60}")
        print("SUCCESS! Puzzle solved ✓")
        print(f"{'='*60}")

    output_dir.mkdir(parents=True, exist_ok=True)
    SolutionFormatter.save_solution(puzzle, solver.log, solver.stats,
                                    str(output_dir / "solution.json"), verbose=verbose)
    SolutionFormatter.save_human_readable(puzzle, solver.log,
                                          str(output_dir / "solution.txt"), verbose=verbose)

    if verbose:
        print("\n" + SolutionFormatter.format_solution_human_readable(puzzle, solver.log))
        print(SolutionFormatter.format_grid_visualization(puzzle))

    return True, puzzle, solver


def solve_all_puzzles(data_dir: str = None, output_dir: str = None, verbose: bool = False):
    """
    Solve all puzzles in DATA_DIR (or a specified directory)
    """
    data_path = Path(data_dir or DATA_DIR)
    if not data_path.exists():
        print(f"Error: Directory not found: {data_path}")
        return []

    json_files = sorted(data_path.glob("*.json"))
    if not json_files:
        print(f"No JSON puzzles found in {data_path}")
        return []

    print(f"\nFound {len(json_files)} puzzle(s) to solve")

    results = []
    for i, json_file in enumerate(json_files, 1):
        print(f"\n[{i}/{len(json_files)}] Solving {json_file.name}...")

        target = Path(output_dir) / json_file.stem if output_dir else None
        solved, puzzle, solver = solve_puzzle(str(json_file), output_dir=target, verbose=verbose)

        results.append({
            'file': json_file.name,
            'solved': bool(solved),
            'squares': len(puzzle.grid.squares) if puzzle else None,
            'moves': len(solver.log.visible_moves()) if solver and solved else None,
            'backtracks': solver.stats['backtracks'] if solver else None,
        })
        print(f"  {'✓ SOLVED' if solved else '✗ FAILED'}")

    # ---------------------------
    # Print summary
    # ---------------------------
    solved_count = sum(1 for r in results if r['solved'])
    solve_rate = solved_count / len(results) * 100

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    print(f"Solved: {solved_count}/{len(results)} puzzles ({solve_rate:.1f}%)\n")
    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s}", end="")
        if r['solved']:
            print(f" - {r['squares']} squares, {r['moves']} moves, {r['backtracks']} backtracks")
        else:
            print(" - Failed")

    return results


def main(argv=None):
    """Main entry point"""
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = True
    if "--quiet" in args or "-q" in args:
        verbose = False
        args = [a for a in args if a not in ("--quiet", "-q")]

    if args and args[0] in ("--all", "-a"):
        results = solve_all_puzzles(args[1] if len(args) > 1 else None, verbose=verbose)
        return 0 if results and all(r['solved'] for r in results) else 1

    if args:
        input_file = args[0]
    elif SOLVE_ALL:
        print(f"SOLVE_ALL mode enabled - solving all puzzles in {DATA_DIR}/")
        results = solve_all_puzzles(verbose=verbose)
        return 0 if results and all(r['solved'] for r in results) else 1
    else:
        print(f"Using configured PUZZLE_PATH: {PUZZLE_PATH}")
        input_file = PUZZLE_PATH

    if not Path(input_file).exists():
        print(f"Error: File not found: {input_file}")
        return 1

    solved, _, _ = solve_puzzle(input_file, verbose=verbose)
    return 0 if solved else 1


if __name__ == "__main__":
    sys.exit(main())
