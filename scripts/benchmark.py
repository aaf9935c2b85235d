import argparse
import random
import time
from statistics import mean

from pentago_duel.board import Board, Outcome, Player, create_empty_board, opponent
from pentago_duel.rules import generate_moves, play
from pentago_duel.ai.planner import choose_ai_move


def random_position(plies: int, seed: int = 42):
    rng = random.Random(seed)
    board = create_empty_board()
    side = Player.WHITE
    for _ in range(plies):
        mvs = generate_moves(board)
        if not mvs:
            break
        result = play(board, side, rng.choice(mvs))
        if result.outcome != Outcome.ONGOING:
            break
        board = result.board
        side = opponent(side)
    return board, side


def bench_position(board: Board, side: Player, repeats: int, seed: int):
    times = []
    for i in range(repeats):
        t0 = time.time()
        _ = choose_ai_move(board, side, rng=random.Random(seed + i))
        times.append(time.time() - t0)
    return {
        "time_s_avg": mean(times),
        "time_s_max": max(times),
        "candidates": len(generate_moves(board)),
    }


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--plies", type=int, nargs="+", default=[0, 6, 12, 18])
    parser.add_argument("--repeats", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    print("Pentago planner benchmark")
    for p in args.plies:
        board, side = random_position(p, seed=args.seed)
        res = bench_position(board, side, repeats=args.repeats, seed=args.seed)
        print(f"plies={p:>2}  to_move={'W' if side == Player.WHITE else 'B'}  "
              f"candidates={res['candidates']:>3}  avg={res['time_s_avg']:.3f}s  max={res['time_s_max']:.3f}s")


if __name__ == "__main__":
    main()
