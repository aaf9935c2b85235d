import sys
import time
import random
import logging
import argparse
from typing import Tuple

from pentago_duel.board import EMPTY, Direction, Outcome, Player, Position, Quadrant
from pentago_duel.game import Game, GameMode, Phase

COLS = "ABCDEF"
ROWS = "123456"


def render_board(g: Game) -> None:
    s = g.state
    grid = s.board.grid
    sep = "  +---+---+---+---+---+---+"
    print("    " + "   ".join(COLS))
    for y in range(6):
        if y in (0, 3):
            print(sep)
        line = []
        for x in range(6):
            v = grid[y][x]
            if s.pending == (x, y):
                ch = "*"
            elif v == EMPTY:
                ch = "."
            else:
                ch = "W" if v == int(Player.WHITE) else "B"
            line.append(ch)
        left = str(y + 1) + " | "
        mid = " | ".join(line[:3]) + " || " + " | ".join(line[3:])
        print(left + mid + " |")
    print(sep)
    if s.last_ai_move:
        print(s.last_ai_move)


def parse_cell(s: str) -> Position:
    s = s.strip().upper()
    if len(s) != 2 or s[0] not in COLS or s[1] not in ROWS:
        raise ValueError("Cell")
    return Position(COLS.index(s[0]), ROWS.index(s[1]))


def parse_rotation(s: str) -> Tuple[Quadrant, Direction]:
    parts = s.strip().upper().split()
    if len(parts) != 2:
        raise ValueError("Format")
    quad, direc = parts
    qmap = {"Q0": Quadrant.TOP_LEFT, "Q1": Quadrant.TOP_RIGHT, "Q2": Quadrant.BOTTOM_LEFT, "Q3": Quadrant.BOTTOM_RIGHT}
    if quad not in qmap:
        raise ValueError("Quadrant")
    dmap = {"CW": Direction.CW, "CCW": Direction.CCW}
    if direc not in dmap:
        raise ValueError("Direction")
    return qmap[quad], dmap[direc]


def print_help() -> None:
    print("Place phase:  <Cell> to stage a stone (A-F + 1-6, e.g. C3), then 'next'")
    print("Rotate phase: <Quadrant> <Direction>, e.g. 'Q1 CW'")
    print("Quadrants: Q0 top-left, Q1 top-right, Q2 bottom-left, Q3 bottom-right")
    print("Commands: cancel, reset, board, help, quit")


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", choices=["local", "ai"], default="ai")
    parser.add_argument("--human", choices=["white", "black"], default="white")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    mode = GameMode.AI if args.mode == "ai" else GameMode.LOCAL
    human = Player.WHITE if args.human == "white" else Player.BLACK
    g = Game(mode=mode, human_color=human, rng=random.Random(args.seed))
    print("Pentago CLI")
    print_help()
    render_board(g)

    while True:
        s = g.state
        if s.is_over:
            if s.outcome == Outcome.DRAW:
                print("Draw.")
            else:
                print("Winner: " + ("White" if s.outcome == Outcome.WHITE_WINS else "Black"))
            try:
                again = input("reset / quit > ").strip().lower()
            except EOFError:
                print()
                return 0
            if again in ("r", "reset"):
                g.reset()
                render_board(g)
                continue
            return 0

        task = g.pending_ai_task
        if task is not None:
            print("AI is thinking...")
            time.sleep(task.delay)
            task.fire()
            render_board(g)
            continue

        p = "W" if s.turn == Player.WHITE else "B"
        prompt = "place" if s.phase == Phase.PLACE else "rotate"
        try:
            line = input(f"[{p} {prompt}] > ").strip()
        except EOFError:
            print()
            return 0
        if not line:
            continue
        cmd = line.lower()
        if cmd in ("q", "quit", "exit"):
            print("Bye.")
            return 0
        if cmd in ("h", "help", "?"):
            print_help()
            continue
        if cmd in ("b", "board"):
            render_board(g)
            continue
        if cmd == "reset":
            g.reset()
        elif cmd in ("c", "cancel"):
            g.cancel()
        elif cmd in ("n", "next"):
            if not g.proceed_to_rotate():
                print("Stage a stone first.")
        else:
            try:
                if s.phase == Phase.PLACE:
                    ok = g.tap_cell(parse_cell(line))
                else:
                    ok = g.confirm_rotation(*parse_rotation(line))
            except ValueError as e:
                print(f"Invalid input: {e}")
                continue
            if not ok:
                print("Not allowed here.")
                continue
        render_board(g)


if __name__ == "__main__":
    sys.exit(main())
