"""
Heuristic move selection.

Takes an immediate win when one exists; otherwise picks the move that leaves
the opponent the fewest immediate winning replies, with a small random jitter
to break ties.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..board import Board, Player, opponent, win_outcome
from ..rules import Move, generate_moves, play

logger = logging.getLogger(__name__)


class NoLegalMovesError(RuntimeError):
    """The board has no empty cell left to play."""


@dataclass
class PlannerConfig:
    """Configuration for the planner."""
    threat_cutoff: int = 5  # Stop counting opponent wins once past this
    jitter: float = 0.01  # Tie-break noise is drawn from [0, jitter)


def immediate_win_move(board: Board, player: Player, moves: List[Move]) -> Optional[Move]:
    target = win_outcome(player)
    for mv in moves:
        if play(board, player, mv).outcome == target:
            return mv
    return None


def scan_replies(board: Board, player: Player, cutoff: int) -> Tuple[int, int]:
    """Return ``(wins, simulated)`` for ``player``'s replies on ``board``.

    Scanning stops as soon as ``wins`` exceeds ``cutoff``.
    """
    target = win_outcome(player)
    n = 0
    simulated = 0
    for mv in generate_moves(board):
        simulated += 1
        if play(board, player, mv).outcome == target:
            n += 1
            if n > cutoff:
                break
    return n, simulated


def count_winning_replies(board: Board, player: Player, cutoff: int) -> int:
    return scan_replies(board, player, cutoff)[0]


def choose_ai_move(board: Board,
                   ai_color: Player,
                   rng: Optional[random.Random] = None,
                   config: Optional[PlannerConfig] = None) -> Move:
    if config is None:
        config = PlannerConfig()
    if rng is None:
        rng = random.Random()
    candidates = generate_moves(board)
    if not candidates:
        raise NoLegalMovesError("No legal moves on a full board")

    mv = immediate_win_move(board, ai_color, candidates)
    if mv is not None:
        logger.debug("Immediate win for %s: %s", ai_color.name, mv.describe())
        return mv

    opp = opponent(ai_color)
    target = win_outcome(ai_color)
    best = rng.choice(candidates)
    best_score = -math.inf
    replies = 0
    for mv in candidates:
        after = play(board, ai_color, mv)
        if after.outcome == target:
            return mv
        threats, simulated = scan_replies(after.board, opp, config.threat_cutoff)
        replies += simulated
        score = -threats + rng.random() * config.jitter
        if score > best_score:
            best_score = score
            best = mv

    logger.debug(
        "Picked %s for %s: %d candidates, %d replies simulated (score %.4f)",
        best.describe(), ai_color.name, len(candidates), replies, best_score,
    )
    return best
