from __future__ import annotations

import logging
import os
import sys
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from game import (  # noqa: E402
    Board,
    GameSession,
    GameState,
    LevelBuilder,
    SetupError,
    Settings,
    is_won,
    load_settings,
    victory_message,
)
from sokoban_core.cli import KEY_TO_DIRECTION  # noqa: E402
from sokoban_core.board import DIRECTIONS  # noqa: E402

logger = logging.getLogger(__name__)

SETTINGS = load_settings()

app = Flask(__name__)


@dataclass
class _Entry:
    session: GameSession
    lock: threading.Lock = field(default_factory=threading.Lock)


# Sessions live in memory only. Past MAX_SESSIONS the least recently used one is dropped.
MAX_SESSIONS = int(os.getenv("SOKOBAN_MAX_SESSIONS", "256"))
_SESSIONS: "OrderedDict[str, _Entry]" = OrderedDict()
_SESSIONS_LOCK = threading.Lock()


def board_to_json(b: Board) -> Dict[str, Any]:
    return {"width": int(b.width), "height": int(b.height), "grid": list(b.grid)}


def state_to_json(s: GameState, session: Optional[GameSession] = None) -> Dict[str, Any]:
    boxes: List[Dict[str, Any]] = []
    for box_id, (r, c) in s.boxes:
        entry: Dict[str, Any] = {"id": int(box_id), "pos": [int(r), int(c)]}
        if session is not None:
            entry["group"] = min(session.registry.group_members(box_id))
        boxes.append(entry)
    return {
        "board": board_to_json(s.board),
        "boxes": boxes,
        "player": [int(s.player[0]), int(s.player[1])],
        "moveCounter": int(s.move_counter),
        "won": is_won(s),
    }


def _pairs(body: Dict[str, Any], key: str, arity: int) -> List[Tuple[int, ...]]:
    raw = body.get(key, [])
    if not isinstance(raw, list):
        raise ValueError(f"{key} must be a list")
    out: List[Tuple[int, ...]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != arity:
            raise ValueError(f"each {key} entry needs {arity} integers")
        out.append(tuple(int(v) for v in item))
    return out


def level_from_json(body: Dict[str, Any], settings: Settings = SETTINGS) -> GameSession:
    """Builds a session from a JSON level description. Raises SetupError or ValueError."""
    settings = settings.with_overrides(
        rows=body.get("rows"),
        cols=body.get("cols"),
        history_capacity=body.get("history"),
    )
    builder = LevelBuilder.from_settings(settings)
    for r1, c1, r2, c2 in _pairs(body, "wallBlocks", 4):
        builder.add_walls(r1, c1, r2, c2)
    for r, c in _pairs(body, "walls", 2):
        builder.add_wall(r, c)
    for r, c in _pairs(body, "storage", 2):
        builder.add_storage(r, c)
    for r, c in _pairs(body, "boxes", 2):
        builder.add_box(r, c)
    for r1, c1, r2, c2 in _pairs(body, "links", 4):
        builder.link(r1, c1, r2, c2)
    player = body.get("player")
    if not isinstance(player, (list, tuple)) or len(player) != 2:
        raise ValueError("player must be [row, col]")
    return builder.start(int(player[0]), int(player[1]))


def _lookup(body: Dict[str, Any]) -> Optional[_Entry]:
    sid = body.get("sessionId")
    if not isinstance(sid, str):
        return None
    with _SESSIONS_LOCK:
        entry = _SESSIONS.get(sid)
        if entry is not None:
            _SESSIONS.move_to_end(sid)
        return entry


def _missing_session() -> Any:
    return jsonify({"ok": False, "error": "unknown session"}), 404


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        session = level_from_json(body)
    except (SetupError, ValueError, TypeError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    sid = uuid.uuid4().hex
    with _SESSIONS_LOCK:
        _SESSIONS[sid] = _Entry(session)
        while len(_SESSIONS) > MAX_SESSIONS:
            evicted, _ = _SESSIONS.popitem(last=False)
            logger.info("evicted session %s", evicted)
    logger.info("new session %s", sid)
    return jsonify({"ok": True, "sessionId": sid, "state": state_to_json(session.state, session)})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    entry = _lookup(body)
    if entry is None:
        return _missing_session()
    direction = str(body.get("direction", ""))
    direction = KEY_TO_DIRECTION.get(direction, direction)
    if direction not in DIRECTIONS:
        return jsonify({"ok": False, "error": f"unknown direction {direction!r}"}), 400
    with entry.lock:
        result = entry.session.move(direction)
        state = entry.session.state
        payload: Dict[str, Any] = {
            "ok": True,
            "moved": result.moved,
            "rejected": result.rejected,
            "won": result.won,
            "boxMoves": [
                {"id": int(b), "from": [src[0], src[1]], "to": [dst[0], dst[1]]}
                for b, src, dst in result.box_moves
            ],
            "state": state_to_json(state, entry.session),
        }
        if result.won:
            payload["message"] = victory_message(state.move_counter)
    return jsonify(payload)


@app.post("/api/undo")
def api_undo() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    entry = _lookup(body)
    if entry is None:
        return _missing_session()
    with entry.lock:
        undone = entry.session.undo()
        state = entry.session.state
        return jsonify({"ok": True, "undone": undone, "state": state_to_json(state, entry.session)})


@app.post("/api/reset")
def api_reset() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    entry = _lookup(body)
    if entry is None:
        return _missing_session()
    with entry.lock:
        entry.session.reset()
        state = entry.session.state
        return jsonify({"ok": True, "state": state_to_json(state, entry.session)})


@app.post("/api/state")
def api_state() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    entry = _lookup(body)
    if entry is None:
        return _missing_session()
    with entry.lock:
        return jsonify({"ok": True, "state": state_to_json(entry.session.state, entry.session)})


@app.post("/api/counter")
def api_counter() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    entry = _lookup(body)
    if entry is None:
        return _missing_session()
    with entry.lock:
        return jsonify({
            "ok": True,
            "moveCounter": entry.session.move_counter,
            "message": entry.session.counter_message(),
        })


@app.post("/api/close")
def api_close() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    sid = body.get("sessionId")
    with _SESSIONS_LOCK:
        entry = _SESSIONS.pop(sid, None) if isinstance(sid, str) else None
    if entry is None:
        return _missing_session()
    logger.info("closed session %s", sid)
    return jsonify({"ok": True})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    from sokoban_core.config import configure_logging

    configure_logging(SETTINGS)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="127.0.0.1", port=port, debug=debug)
