import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from .board import (
    Board,
    Direction,
    InvalidCellError,
    Outcome,
    Player,
    Position,
    Quadrant,
    create_empty_board,
    opponent,
)
from .rules import Move, apply_move
from .ai.planner import PlannerConfig, choose_ai_move

logger = logging.getLogger(__name__)


class Phase(Enum):
    PLACE = "place"
    ROTATE = "rotate"


class GameMode(Enum):
    LOCAL = "local"
    AI = "ai"


class NoPendingMoveError(RuntimeError):
    """A rotation was requested with no stone staged."""


class Rejected(Exception):
    """An intent that is not legal in the current state."""


@dataclass
class GameConfig:
    ai_delay: float = 0.25  # Seconds the AI "thinks" before moving


@dataclass(frozen=True)
class GameState:
    board: Board
    turn: Player = Player.WHITE
    phase: Phase = Phase.PLACE
    pending: Optional[Position] = None
    outcome: Outcome = Outcome.ONGOING
    mode: GameMode = GameMode.LOCAL
    ai_color: Optional[Player] = None
    last_ai_move: str = ""
    version: int = 0

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.ONGOING

    @property
    def is_ai_turn(self) -> bool:
        return self.mode == GameMode.AI and self.ai_color is not None and self.turn == self.ai_color

    @property
    def awaiting_ai(self) -> bool:
        return (
            self.is_ai_turn
            and not self.is_over
            and self.phase == Phase.PLACE
            and self.pending is None
        )


def initial_state(mode: GameMode = GameMode.LOCAL, ai_color: Optional[Player] = None) -> GameState:
    return GameState(board=create_empty_board(), mode=mode, ai_color=ai_color)


# --- actions

@dataclass(frozen=True)
class TapCell:
    position: Position


@dataclass(frozen=True)
class ProceedToRotate:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class ConfirmRotation:
    quadrant: Quadrant
    direction: Direction


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class StartGame:
    mode: GameMode
    human_color: Player = Player.WHITE


@dataclass(frozen=True)
class ApplyAiMove:
    move: Move


Action = Union[TapCell, ProceedToRotate, Cancel, ConfirmRotation, Reset, StartGame, ApplyAiMove]


def _next(state: GameState, **changes: Any) -> GameState:
    return replace(state, version=state.version + 1, **changes)


def _commit(state: GameState, move: Move) -> GameState:
    result = apply_move(state.board, state.turn, move.position, move.quadrant, move.direction)
    turn = state.turn if result.outcome != Outcome.ONGOING else opponent(state.turn)
    return _next(
        state,
        board=result.board,
        turn=turn,
        phase=Phase.PLACE,
        pending=None,
        outcome=result.outcome,
    )


def _human_step(state: GameState, action: Action) -> GameState:
    if state.is_over:
        raise Rejected("game is over")
    if state.is_ai_turn:
        raise Rejected("waiting for the AI")

    if isinstance(action, TapCell):
        if state.phase != Phase.PLACE:
            raise Rejected("not in place phase")
        x, y = action.position
        if not state.board.is_empty(x, y):
            raise InvalidCellError(f"Cell ({x}, {y}) not available")
        return _next(state, pending=Position(x, y))

    if isinstance(action, ProceedToRotate):
        if state.phase != Phase.PLACE:
            raise Rejected("not in place phase")
        if state.pending is None:
            raise NoPendingMoveError("no stone staged")
        return _next(state, phase=Phase.ROTATE)

    if isinstance(action, Cancel):
        if state.phase == Phase.ROTATE:
            return _next(state, phase=Phase.PLACE)
        if state.pending is None:
            raise Rejected("nothing to cancel")
        return _next(state, pending=None)

    if isinstance(action, ConfirmRotation):
        if state.phase != Phase.ROTATE:
            raise Rejected("not in rotate phase")
        if state.pending is None:
            raise NoPendingMoveError("no stone staged")
        return _commit(state, Move(state.pending, Quadrant(action.quadrant), Direction(action.direction)))

    raise Rejected(f"unknown action {action!r}")


def reduce(state: GameState, action: Action) -> GameState:
    """Return the state after ``action``.

    A rejected action returns ``state`` itself, so callers can test
    acceptance with ``new is not state``.
    """
    if isinstance(action, Reset):
        return replace(initial_state(state.mode, state.ai_color), version=state.version + 1)

    if isinstance(action, StartGame):
        ai_color = opponent(action.human_color) if action.mode == GameMode.AI else None
        return replace(initial_state(action.mode, ai_color), version=state.version + 1)

    try:
        if isinstance(action, ApplyAiMove):
            if not state.awaiting_ai:
                raise Rejected("no AI move due")
            new = _commit(state, action.move)
            return replace(new, last_ai_move=f"AI: {action.move.describe()}")
        return _human_step(state, action)
    except (Rejected, NoPendingMoveError, ValueError) as e:
        # InvalidCellError and bad quadrant/direction values are ValueErrors
        logger.debug("Rejected %s: %s", type(action).__name__, e)
        return state


Scheduler = Callable[[float, Callable[[], Any]], Any]


class AiTask:
    """One deferred AI move, bound to the state it was scheduled from."""

    def __init__(self, game: "Game", snapshot: GameState, delay: float) -> None:
        self.game = game
        self.snapshot = snapshot
        self.delay = delay
        self.cancelled = False
        self.fired = False
        self.handle: Any = None

    @property
    def live(self) -> bool:
        return not self.cancelled and not self.fired

    def cancel(self) -> None:
        if not self.live:
            return
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()
        logger.debug("Cancelled AI task for version %d", self.snapshot.version)

    def fire(self) -> Optional[Move]:
        if not self.live:
            return None
        self.fired = True
        if self.handle is not None:
            self.handle.cancel()
        if self.game.state.version != self.snapshot.version:
            logger.debug("Dropped stale AI task for version %d", self.snapshot.version)
            return None
        return self.game._run_ai(self)


class Game:
    """Authoritative game state plus the deferred AI trigger."""

    def __init__(self,
                 mode: GameMode = GameMode.LOCAL,
                 human_color: Player = Player.WHITE,
                 config: Optional[GameConfig] = None,
                 planner_config: Optional[PlannerConfig] = None,
                 rng: Optional[random.Random] = None,
                 scheduler: Optional[Scheduler] = None) -> None:
        self.config = config or GameConfig()
        self.planner_config = planner_config or PlannerConfig()
        self.rng = rng if rng is not None else random.Random()
        self.scheduler = scheduler
        self.state = initial_state()
        self.pending_ai_task: Optional[AiTask] = None
        self.dispatch(StartGame(mode, human_color))

    def dispatch(self, action: Action) -> bool:
        new = reduce(self.state, action)
        if new is self.state:
            return False
        self._cancel_ai_task()
        self.state = new
        self._schedule_ai_task()
        return True

    def tap_cell(self, position: Position) -> bool:
        return self.dispatch(TapCell(Position(*position)))

    def proceed_to_rotate(self) -> bool:
        return self.dispatch(ProceedToRotate())

    def cancel(self) -> bool:
        return self.dispatch(Cancel())

    def confirm_rotation(self, quadrant: Quadrant, direction: Direction) -> bool:
        return self.dispatch(ConfirmRotation(quadrant, direction))

    def reset(self) -> bool:
        return self.dispatch(Reset())

    def start_game(self, mode: GameMode, human_color: Player = Player.WHITE) -> bool:
        return self.dispatch(StartGame(mode, human_color))

    def _cancel_ai_task(self) -> None:
        if self.pending_ai_task is not None:
            self.pending_ai_task.cancel()
            self.pending_ai_task = None

    def _schedule_ai_task(self) -> None:
        if not self.state.awaiting_ai:
            return
        task = AiTask(self, self.state, self.config.ai_delay)
        self.pending_ai_task = task
        if self.scheduler is not None:
            task.handle = self.scheduler(task.delay, task.fire)
        logger.debug("Scheduled AI task for version %d", self.state.version)

    def _run_ai(self, task: AiTask) -> Optional[Move]:
        if self.pending_ai_task is task:
            self.pending_ai_task = None
        snap = task.snapshot
        mv = choose_ai_move(snap.board, snap.ai_color, rng=self.rng, config=self.planner_config)
        if not self.dispatch(ApplyAiMove(mv)):
            return None
        return mv
