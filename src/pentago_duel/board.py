from enum import Enum, IntEnum
from typing import List, NamedTuple, Tuple

EMPTY = 0
SIZE = 6


class Player(IntEnum):
    WHITE = 1
    BLACK = 2


class Quadrant(IntEnum):
    TOP_LEFT = 0
    TOP_RIGHT = 1
    BOTTOM_LEFT = 2
    BOTTOM_RIGHT = 3


class Direction(IntEnum):
    CW = 1
    CCW = -1


class Outcome(Enum):
    ONGOING = "ongoing"
    WHITE_WINS = "white"
    BLACK_WINS = "black"
    DRAW = "draw"


class Position(NamedTuple):
    x: int
    y: int


class InvalidCellError(ValueError):
    """Target cell is occupied or off the board."""


def opponent(p: Player) -> Player:
    return Player.BLACK if p == Player.WHITE else Player.WHITE


def win_outcome(p: Player) -> Outcome:
    return Outcome.WHITE_WINS if p == Player.WHITE else Outcome.BLACK_WINS


def quadrant_origin(q: Quadrant) -> Tuple[int, int]:
    q = Quadrant(q)
    x0 = 0 if q % 2 == 0 else 3
    y0 = 0 if q < 2 else 3
    return x0, y0


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < SIZE and 0 <= y < SIZE


def _compute_segments() -> List[List[Tuple[int, int]]]:
    # every 5-cell window on the rows, columns and both diagonals, as (x, y)
    segments = []
    for y in range(SIZE):
        for x in range(SIZE - 4):
            segments.append([(x + k, y) for k in range(5)])
    for x in range(SIZE):
        for y in range(SIZE - 4):
            segments.append([(x, y + k) for k in range(5)])
    for y in range(SIZE - 4):
        for x in range(SIZE - 4):
            segments.append([(x + k, y + k) for k in range(5)])
        for x in range(4, SIZE):
            segments.append([(x - k, y + k) for k in range(5)])
    return segments


class Board:
    SEGMENTS = _compute_segments()

    def __init__(self) -> None:
        self.grid: List[List[int]] = [[EMPTY for _ in range(SIZE)] for _ in range(SIZE)]

    def copy(self) -> "Board":
        b = Board()
        b.grid = [row[:] for row in self.grid]
        return b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __repr__(self) -> str:
        rows = ["".join(".WB"[v] for v in row) for row in self.grid]
        return f"Board({'/'.join(rows)})"

    def at(self, x: int, y: int) -> int:
        return self.grid[y][x]

    def is_empty(self, x: int, y: int) -> bool:
        return in_bounds(x, y) and self.grid[y][x] == EMPTY

    def place(self, x: int, y: int, player: Player) -> None:
        if not in_bounds(x, y):
            raise InvalidCellError(f"Cell ({x}, {y}) out of range")
        if self.grid[y][x] != EMPTY:
            raise InvalidCellError(f"Cell ({x}, {y}) not empty")
        self.grid[y][x] = int(player)

    def with_stone(self, x: int, y: int, player: Player) -> "Board":
        b = self.copy()
        b.place(x, y, player)
        return b

    def rotated(self, q: Quadrant, d: Direction) -> "Board":
        return rotate_quadrant(self, q, d)

    def empty_cells(self) -> List[Position]:
        out = []
        for y in range(SIZE):
            for x in range(SIZE):
                if self.grid[y][x] == EMPTY:
                    out.append(Position(x, y))
        return out

    def stone_count(self) -> int:
        return sum(1 for row in self.grid for v in row if v != EMPTY)

    def check_five(self, player: Player) -> bool:
        p = int(player)
        for seg in Board.SEGMENTS:
            ok = True
            for x, y in seg:
                if self.grid[y][x] != p:
                    ok = False
                    break
            if ok:
                return True
        return False

    def full(self) -> bool:
        for row in self.grid:
            for v in row:
                if v == EMPTY:
                    return False
        return True

    def swapped_colors(self) -> "Board":
        b = Board()
        swap = {EMPTY: EMPTY, int(Player.WHITE): int(Player.BLACK), int(Player.BLACK): int(Player.WHITE)}
        b.grid = [[swap[v] for v in row] for row in self.grid]
        return b


def create_empty_board() -> Board:
    return Board()


def rotate_quadrant(board: Board, q: Quadrant, d: Direction) -> Board:
    """Return a copy of ``board`` with quadrant ``q`` turned 90 degrees.

    Clockwise sends local ``(x, y)`` to ``(2 - y, x)``; counter-clockwise
    sends it to ``(y, 2 - x)``. Cells outside the quadrant are untouched.
    """
    x0, y0 = quadrant_origin(q)
    sub = [[board.grid[y0 + y][x0 + x] for x in range(3)] for y in range(3)]
    rot = [[EMPTY] * 3 for _ in range(3)]
    if d == Direction.CW:
        for y in range(3):
            for x in range(3):
                rot[x][2 - y] = sub[y][x]
    elif d == Direction.CCW:
        for y in range(3):
            for x in range(3):
                rot[2 - x][y] = sub[y][x]
    else:
        raise ValueError("Invalid direction")
    out = board.copy()
    for y in range(3):
        for x in range(3):
            out.grid[y0 + y][x0 + x] = rot[y][x]
    return out


def check_winner(board: Board) -> Outcome:
    white = board.check_five(Player.WHITE)
    black = board.check_five(Player.BLACK)
    # one rotation can complete both colors at once; that is scored as a draw
    if white and black:
        return Outcome.DRAW
    if white:
        return Outcome.WHITE_WINS
    if black:
        return Outcome.BLACK_WINS
    if board.full():
        return Outcome.DRAW
    return Outcome.ONGOING
