from typing import List, NamedTuple

from .board import (
    Board,
    Direction,
    Outcome,
    Player,
    Position,
    Quadrant,
    check_winner,
    rotate_quadrant,
)

QUADRANT_NAMES = {
    Quadrant.TOP_LEFT: "top-left",
    Quadrant.TOP_RIGHT: "top-right",
    Quadrant.BOTTOM_LEFT: "bottom-left",
    Quadrant.BOTTOM_RIGHT: "bottom-right",
}


class Move(NamedTuple):
    position: Position
    quadrant: Quadrant
    direction: Direction

    def describe(self) -> str:
        # 1-based coordinates, as shown to players
        turn = "clockwise" if self.direction == Direction.CW else "counter-clockwise"
        return (
            f"placed at ({self.position.x + 1}, {self.position.y + 1}), "
            f"rotated {QUADRANT_NAMES[self.quadrant]} {turn}"
        )


class MoveResult(NamedTuple):
    board: Board
    outcome: Outcome


def generate_moves(board: Board) -> List[Move]:
    out: List[Move] = []
    for pos in board.empty_cells():
        for q in Quadrant:
            out.append(Move(pos, q, Direction.CW))
            out.append(Move(pos, q, Direction.CCW))
    return out


def apply_move(board: Board,
               player: Player,
               position: Position,
               quadrant: Quadrant,
               direction: Direction) -> MoveResult:
    """Place ``player``'s stone, turn the quadrant and score the result.

    Raises ``InvalidCellError`` when ``position`` is occupied or off the
    board; ``board`` itself is never modified.
    """
    x, y = position
    placed = board.with_stone(x, y, player)
    b2 = rotate_quadrant(placed, quadrant, direction)
    return MoveResult(b2, check_winner(b2))


def play(board: Board, player: Player, mv: Move) -> MoveResult:
    return apply_move(board, player, mv.position, mv.quadrant, mv.direction)
