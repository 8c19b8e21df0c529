import json
from typing import Dict, List, Optional
from datetime import datetime

import numpy as np

from .moves import MoveLog
from .puzzle import PipsPuzzle


class SolutionFormatter:
    """Formats puzzle solutions for output"""

    @staticmethod
    def placements(log: MoveLog) -> List[Dict]:
        """
        Replay the assign moves of the log into domino -> square-pair records
        """
        placements = []
        for move in log.assignments():
            square, neighbor = move.square, move.neighbor
            placements.append({
                'domino_id': move.domino.id,
                'pips': list(move.values),
                'squares': [
                    {'x': square.x + 1, 'y': square.y + 1},
                    {'x': neighbor.x + 1, 'y': neighbor.y + 1},
                ],
                'orientation': "horizontal" if square.y == neighbor.y else "vertical",
            })
        return placements

    @staticmethod
    def region_validation(puzzle: PipsPuzzle) -> List[Dict]:
        """Check every region against the values currently on the board"""
        report = []
        for i, constraint in enumerate(puzzle.regions, 1):
            squares = puzzle.grid.region_squares(constraint)
            values = [s.value for s in squares if s.value is not None]
            complete = len(values) == len(squares)
            report.append({
                'region': i,
                'constraint': constraint.describe(),
                'squares': [s.label() for s in squares],
                'values': values,
                'satisfied': complete and constraint.is_satisfied_by(values),
            })
        return report

    @staticmethod
    def format_solution_json(puzzle: PipsPuzzle, log: MoveLog, stats: Dict) -> Dict:
        """
        Format solution as JSON
        """
        return {
            'puzzle_info': {
                'name': puzzle.name,
                'width': puzzle.grid.width,
                'height': puzzle.grid.height,
                'total_squares': len(puzzle.grid.squares),
                'total_regions': len(puzzle.regions),
                'total_dominoes': len(puzzle.dominoes),
                'solved': puzzle.is_complete(),
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': stats,
            'trace': [m.label for m in log.visible_moves()],
            'placements': SolutionFormatter.placements(log),
            'region_validation': SolutionFormatter.region_validation(puzzle),
        }

    @staticmethod
    def format_trace(log: MoveLog) -> str:
        """Numbered list of the moves that survived pruning"""
        lines = []
        for i, move in enumerate(log.visible_moves(), 1):
            lines.append(f"{i:3d}. {move.label}")
        return "\n".join(lines)

    @staticmethod
    def format_solution_human_readable(puzzle: PipsPuzzle, log: MoveLog) -> str:
        """
        Format solution as human-readable text
        """
        lines = []
        lines.append("=" * 60)
        lines.append("PIPS PUZZLE SOLUTION")
        lines.append("=" * 60)
        lines.append(f"\nPuzzle has {len(puzzle.grid.squares)} squares, {len(puzzle.regions)} regions")
        lines.append(f"Placed {len(log.assignments())} dominoes\n")

        lines.append("MOVE TRACE:")
        lines.append("-" * 60)
        lines.append(SolutionFormatter.format_trace(log))

        lines.append("\nDOMINO PLACEMENTS:")
        lines.append("-" * 60)
        for i, p in enumerate(SolutionFormatter.placements(log), 1):
            a, b = p['squares']
            lines.append(
                f"{i:2d}. Domino ({p['pips'][0]},{p['pips'][1]}) "
                f"at ({a['x']},{a['y']})-({b['x']},{b['y']}) "
                f"[{p['orientation']}]"
            )

        lines.append("\n" + "=" * 60)
        lines.append("REGION VALIDATION:")
        lines.append("-" * 60)
        for r in SolutionFormatter.region_validation(puzzle):
            satisfied = "✓" if r['satisfied'] else "✗"
            lines.append(f"Region {r['region']:2d}: {r['constraint']:10s} → values {r['values']} {satisfied}")

        lines.append("=" * 60)
        return "\n".join(lines)

    @staticmethod
    def format_grid_visualization(puzzle: PipsPuzzle) -> str:
        """
        Text grid: pip value for filled squares, '·' for open ones, blank for holes
        """
        grid = puzzle.grid
        if not grid.squares:
            return "Empty puzzle"

        picture = np.full((grid.height, grid.width), ' ', dtype='<U1')
        for square in grid.squares:
            picture[square.y, square.x] = str(square.value) if square.occupied else '·'

        lines = ["\nGRID VISUALIZATION:"]
        lines.append("-" * (grid.width * 2 + 3))
        for row in picture:
            lines.append("  " + " ".join(row))
        lines.append("-" * (grid.width * 2 + 3))
        return "\n".join(lines)

    @staticmethod
    def save_solution(puzzle: PipsPuzzle, log: MoveLog, stats: Dict, output_path: str,
                      verbose: Optional[bool] = True):
        """
        Save solution to JSON file
        """
        solution = SolutionFormatter.format_solution_json(puzzle, log, stats)

        with open(output_path, 'w') as f:
            json.dump(solution, f, indent=2)

        if verbose:
            print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(puzzle: PipsPuzzle, log: MoveLog, output_path: str,
                            verbose: Optional[bool] = True):
        """
        Save human-readable solution to text file
        """
        text = SolutionFormatter.format_solution_human_readable(puzzle, log)
        text += "\n\n" + SolutionFormatter.format_grid_visualization(puzzle)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)

        if verbose:
            print(f"✓ Human-readable solution saved to: {output_path}")
