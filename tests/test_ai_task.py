import random

import pytest

from pentago_duel import game as game_mod
from pentago_duel.board import Direction, Outcome, Player, Position, Quadrant
from pentago_duel.game import Game, GameConfig, GameMode, Phase
from pentago_duel.rules import Move, generate_moves


class FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        h = FakeHandle(delay, callback)
        self.handles.append(h)
        return h


@pytest.fixture
def first_move_planner(monkeypatch):
    calls = []

    def fake(board, ai_color, rng=None, config=None):
        calls.append((board.copy(), ai_color))
        return generate_moves(board)[0]

    monkeypatch.setattr(game_mod, "choose_ai_move", fake)
    return calls


def test_local_game_never_schedules():
    g = Game(mode=GameMode.LOCAL)
    assert g.pending_ai_task is None
    g.tap_cell(Position(0, 0))
    g.proceed_to_rotate()
    g.confirm_rotation(Quadrant.TOP_LEFT, Direction.CW)
    assert g.pending_ai_task is None


def test_ai_moving_first_schedules_task(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.BLACK, config=GameConfig(ai_delay=0.5))
    task = g.pending_ai_task
    assert task is not None
    assert task.delay == 0.5
    mv = task.fire()
    assert mv == Move(Position(0, 0), Quadrant.TOP_LEFT, Direction.CW)
    assert g.state.board.stone_count() == 1
    assert g.state.turn == Player.BLACK
    assert g.state.last_ai_move == "AI: placed at (1, 1), rotated top-left clockwise"
    assert g.pending_ai_task is None
    assert len(first_move_planner) == 1


def test_task_fires_once(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.BLACK)
    task = g.pending_ai_task
    assert task.fire() is not None
    assert task.fire() is None
    assert g.state.board.stone_count() == 1
    assert len(first_move_planner) == 1


def test_reset_cancels_pending_task(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.BLACK)
    stale = g.pending_ai_task
    g.reset()
    assert stale.cancelled
    assert stale.fire() is None
    assert first_move_planner == []
    # the fresh state still wants an AI move, under a new task
    assert g.pending_ai_task is not None
    assert g.pending_ai_task is not stale
    assert g.state.board.stone_count() == 0


def test_mode_change_cancels_pending_task(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.BLACK)
    stale = g.pending_ai_task
    g.start_game(GameMode.LOCAL)
    assert stale.cancelled
    assert g.pending_ai_task is None
    assert stale.fire() is None
    assert g.state.board.stone_count() == 0


def test_stale_snapshot_is_not_applied(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.BLACK)
    task = g.pending_ai_task
    # bypass dispatch so the task is not cancelled, only outdated
    g.state = game_mod.reduce(g.state, game_mod.Reset())
    assert task.fire() is None
    assert first_move_planner == []


def test_scheduler_receives_and_cancels_handle(first_move_planner):
    sched = FakeScheduler()
    g = Game(mode=GameMode.AI, human_color=Player.BLACK, scheduler=sched)
    assert len(sched.handles) == 1
    h = sched.handles[0]
    assert h.delay == GameConfig().ai_delay
    g.reset()
    assert h.cancelled
    assert len(sched.handles) == 2
    sched.handles[1].callback()
    assert g.state.board.stone_count() == 1


def test_human_move_then_ai_reply(first_move_planner):
    g = Game(mode=GameMode.AI, human_color=Player.WHITE)
    assert g.pending_ai_task is None
    assert g.tap_cell(Position(5, 5))
    assert g.pending_ai_task is None
    assert g.proceed_to_rotate()
    assert g.confirm_rotation(Quadrant.TOP_LEFT, Direction.CW)
    assert g.state.turn == Player.BLACK
    task = g.pending_ai_task
    assert task is not None
    assert not g.tap_cell(Position(1, 1))
    assert g.pending_ai_task is task
    task.fire()
    assert g.state.turn == Player.WHITE
    assert g.state.phase == Phase.PLACE
    assert g.state.board.stone_count() == 2
    assert first_move_planner[0][1] == Player.BLACK


def test_no_task_after_game_over(monkeypatch):
    # the AI keeps to the bottom-right quadrant, away from white's row 0
    monkeypatch.setattr(game_mod, "choose_ai_move", lambda board, ai_color, rng=None, config=None: generate_moves(board)[-1])
    g = Game(mode=GameMode.AI, human_color=Player.WHITE)
    for x in range(4):
        g.tap_cell(Position(x, 0))
        g.proceed_to_rotate()
        g.confirm_rotation(Quadrant.BOTTOM_RIGHT, Direction.CW)
        g.pending_ai_task.fire()
    g.tap_cell(Position(4, 0))
    g.proceed_to_rotate()
    g.confirm_rotation(Quadrant.BOTTOM_LEFT, Direction.CW)
    assert g.state.outcome == Outcome.WHITE_WINS
    assert g.pending_ai_task is None


def test_real_planner_answers_human_move():
    g = Game(mode=GameMode.AI, human_color=Player.WHITE, rng=random.Random(5))
    g.tap_cell(Position(2, 2))
    g.proceed_to_rotate()
    g.confirm_rotation(Quadrant.BOTTOM_RIGHT, Direction.CW)
    mv = g.pending_ai_task.fire()
    assert mv is not None
    assert g.state.board.stone_count() == 2
    assert g.state.last_ai_move.startswith("AI: placed at")
