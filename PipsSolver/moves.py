"""
Reversible search moves and the move log (a stack of applied moves)
"""
from typing import Callable, Iterator, List, Optional, Tuple
from dataclasses import dataclass, field

from .puzzle import Domino, Square


ROTATE = "rotate"
SWAP = "swap"
ASSIGN = "assign"

# A full turn of rotations without an assign is a no-op artifact of the search
FULL_TURN = 4


class SolverInvariantError(RuntimeError):
    """Internal invariant broken; indicates a bug, never retried."""


@dataclass
class Move:
    """One reversible search action: rotate, swap or assign a domino"""
    kind: str
    domino: Domino
    square: Optional[Square] = None
    label: str = ""
    pruned: bool = False
    undo: Optional[Callable[[], None]] = field(default=None, repr=False)
    # Filled in once an assign succeeds
    neighbor: Optional[Square] = field(default=None, repr=False)
    values: Optional[Tuple[int, int]] = None


class MoveLog:
    """Chronological record of applied moves; push and pop at the tail only"""

    def __init__(self):
        self.moves: List[Move] = []

    def __len__(self) -> int:
        return len(self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def try_push(self, move: Move) -> bool:
        """Apply `move` and record it. Only an assign can fail; a failed push changes nothing."""
        domino = move.domino
        pips = f"{domino.pips_left}-{domino.pips_right}"

        if move.kind == ROTATE:
            move.label = f"Rotate domino {pips}"
            domino.rotate_clockwise()
            move.undo = domino.rotate_counter_clockwise
        elif move.kind == SWAP:
            move.label = f"Swap domino {pips}"
            domino.swap_sides()
            move.undo = domino.swap_sides
        elif move.kind == ASSIGN:
            if move.square is None:
                raise SolverInvariantError("[moves] Assign move without a target square")
            ok, undo = domino.try_assign(move.square)
            if not ok:
                return False
            move.undo = undo
            move.neighbor = move.square.neighbor(domino.facing())
            move.values = domino.as_tuple()
            move.label = f"Assign domino {pips} to square {move.square.label()}"
        else:
            raise SolverInvariantError(f"[moves] Unknown move kind {move.kind!r}")

        self.moves.append(move)
        return True

    def pop(self) -> Move:
        """Remove the most recent move and run its inverse"""
        if not self.moves:
            raise SolverInvariantError("[moves] Pop from an empty move log")
        move = self.moves.pop()
        move.undo()
        return move

    def undo_all(self) -> int:
        count = 0
        while self.moves:
            self.pop()
            count += 1
        return count

    def prune_useless_sequences(self) -> int:
        """
        Mark every run of four rotations of one domino that is not followed by
        an assign of that domino. Marked moves stay in the log but are hidden
        from the trace. Returns the number of moves marked.
        """
        marked = 0
        i = 0
        while i + FULL_TURN <= len(self.moves):
            run = self.moves[i:i + FULL_TURN]
            domino = run[0].domino
            if all(m.kind == ROTATE and m.domino is domino and not m.pruned for m in run):
                following = self.moves[i + FULL_TURN] if i + FULL_TURN < len(self.moves) else None
                if following is None or following.kind != ASSIGN or following.domino is not domino:
                    for m in run:
                        m.pruned = True
                    marked += FULL_TURN
                    i += FULL_TURN
                    continue
            i += 1
        return marked

    def visible_moves(self) -> List[Move]:
        return [m for m in self.moves if not m.pruned]

    def assignments(self) -> List[Move]:
        return [m for m in self.moves if m.kind == ASSIGN]

    def __repr__(self):
        return f"MoveLog(moves={len(self.moves)}, visible={len(self.visible_moves())})"
