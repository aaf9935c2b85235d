import asyncio
import logging
import os
from typing import Dict, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pentago_duel.board import EMPTY, Direction, Player, Position, Quadrant
from pentago_duel.game import Game, GameConfig, GameMode
from pentago_duel.rules import generate_moves

logger = logging.getLogger("pentago_duel.server")

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

GAMES: Dict[str, Game] = {}


class NewGameRequest(BaseModel):
    mode: str = "local"
    human_color: str = "white"


class TapRequest(BaseModel):
    cell: str


class RotateRequest(BaseModel):
    quadrant: str
    direction: str


COLS = "ABCDEF"
ROWS = "123456"
QMAP_STR_TO_ENUM = {
    "Q0": Quadrant.TOP_LEFT,
    "Q1": Quadrant.TOP_RIGHT,
    "Q2": Quadrant.BOTTOM_LEFT,
    "Q3": Quadrant.BOTTOM_RIGHT,
}
DMAP_STR_TO_ENUM = {"CW": Direction.CW, "CCW": Direction.CCW}
MODES = {"local": GameMode.LOCAL, "ai": GameMode.AI}
COLORS = {"white": Player.WHITE, "black": Player.BLACK}
STONES = {int(Player.WHITE): "W", int(Player.BLACK): "B"}


def game_config() -> GameConfig:
    delay_ms = os.environ.get("PENTAGO_AI_DELAY_MS")
    if delay_ms is None:
        return GameConfig()
    try:
        ms = int(delay_ms)
    except ValueError:
        logger.warning("Ignoring PENTAGO_AI_DELAY_MS=%r, not an integer", delay_ms)
        return GameConfig()
    return GameConfig(ai_delay=max(0, ms) / 1000.0)


def loop_scheduler(delay: float, callback):
    # call from the event loop; every endpoint that touches a game is async
    return asyncio.get_running_loop().call_later(delay, callback)


def cell_name(pos: Position) -> str:
    return f"{COLS[pos.x]}{ROWS[pos.y]}"


def color_name(p: Optional[Player]) -> Optional[str]:
    if p is None:
        return None
    return "W" if p == Player.WHITE else "B"


def to_state(g: Game) -> dict:
    s = g.state
    grid = [[EMPTY if v == EMPTY else STONES[v] for v in row] for row in s.board.grid]
    return {
        "grid": grid,
        "turn": color_name(s.turn),
        "phase": s.phase.value,
        "pending": cell_name(s.pending) if s.pending is not None else None,
        "outcome": s.outcome.value,
        "mode": s.mode.value,
        "ai_color": color_name(s.ai_color),
        "last_ai_move": s.last_ai_move,
        "awaiting_ai": s.awaiting_ai,
    }


def parse_cell(cell: str) -> Position:
    s = cell.strip().upper()
    if len(s) != 2 or s[0] not in COLS or s[1] not in ROWS:
        raise ValueError("invalid cell")
    return Position(COLS.index(s[0]), ROWS.index(s[1]))


def parse_rotation(req: RotateRequest) -> tuple[Quadrant, Direction]:
    q = QMAP_STR_TO_ENUM.get(req.quadrant.strip().upper())
    d = DMAP_STR_TO_ENUM.get(req.direction.strip().upper())
    if q is None:
        raise ValueError("invalid quadrant")
    if d is None:
        raise ValueError("invalid direction")
    return q, d


def get_game(gid: str) -> Game:
    g = GAMES.get(gid)
    if g is None:
        raise HTTPException(404, "unknown game")
    return g


@app.post("/new")
async def new_game(req: Optional[NewGameRequest] = None):
    req = req or NewGameRequest()
    mode = MODES.get(req.mode.lower())
    human = COLORS.get(req.human_color.lower())
    if mode is None:
        raise HTTPException(400, "invalid mode")
    if human is None:
        raise HTTPException(400, "invalid color")
    g = Game(mode=mode, human_color=human, config=game_config(), scheduler=loop_scheduler)
    gid = uuid4().hex
    GAMES[gid] = g
    logger.info("New %s game %s (human plays %s)", mode.value, gid, human.name)
    return {"game_id": gid, "state": to_state(g)}


@app.get("/state/{gid}")
async def state(gid: str):
    return {"state": to_state(get_game(gid))}


@app.get("/moves/{gid}")
async def moves(gid: str):
    g = get_game(gid)
    out = [
        f"{cell_name(m.position)} Q{int(m.quadrant)} {m.direction.name}"
        for m in generate_moves(g.state.board)
    ]
    return {"count": len(out), "moves": out}


@app.post("/tap/{gid}")
async def tap(gid: str, req: TapRequest):
    g = get_game(gid)
    try:
        pos = parse_cell(req.cell)
    except ValueError as e:
        raise HTTPException(400, str(e))
    accepted = g.tap_cell(pos)
    return {"accepted": accepted, "state": to_state(g)}


@app.post("/proceed/{gid}")
async def proceed(gid: str):
    g = get_game(gid)
    accepted = g.proceed_to_rotate()
    return {"accepted": accepted, "state": to_state(g)}


@app.post("/cancel/{gid}")
async def cancel(gid: str):
    g = get_game(gid)
    accepted = g.cancel()
    return {"accepted": accepted, "state": to_state(g)}


@app.post("/rotate/{gid}")
async def rotate(gid: str, req: RotateRequest):
    g = get_game(gid)
    try:
        q, d = parse_rotation(req)
    except ValueError as e:
        raise HTTPException(400, str(e))
    accepted = g.confirm_rotation(q, d)
    return {"accepted": accepted, "state": to_state(g)}


@app.post("/reset/{gid}")
async def reset(gid: str):
    g = get_game(gid)
    accepted = g.reset()
    return {"accepted": accepted, "state": to_state(g)}


@app.post("/bot/{gid}")
async def bot(gid: str):
    g = get_game(gid)
    task = g.pending_ai_task
    if task is None:
        raise HTTPException(409, "no AI move pending")
    mv = task.fire()
    if mv is None:
        raise HTTPException(409, "no AI move pending")
    move_str = f"{cell_name(mv.position)} Q{int(mv.quadrant)} {mv.direction.name}"
    logger.info("Game %s: AI played %s", gid, move_str)
    return {"move": move_str, "state": to_state(g)}


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_server()
