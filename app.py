from __future__ import annotations

import os
import threading
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request

from mahjongg_core.board import SelectedTile
from mahjongg_core.config import RulesConfig, configure_logging
from mahjongg_core.session import Session, SessionSnapshot
from mahjongg_core.transport import OutboxTransport

app = Flask(__name__)

# One session per bridge process. Flask may serve requests on several threads,
# while the session expects events one at a time.
_lock = threading.Lock()
_outbox = OutboxTransport()
_session = Session(_outbox, rules=RulesConfig.from_env())


def reset_session(clock: Optional[Callable[[], int]] = None) -> Session:
    """Replaces the hosted session (and its outbox) with a fresh one."""
    global _outbox, _session
    with _lock:
        _outbox = OutboxTransport()
        _session = Session(_outbox, rules=RulesConfig.from_env(), clock=clock)
        return _session


def selected_to_json(t: SelectedTile) -> Dict[str, Any]:
    return {"layer": t.layer, "row": t.row, "column": t.column, "type": t.type}


def snapshot_to_json(s: SessionSnapshot) -> Dict[str, Any]:
    return {
        "pid": s.pid,
        "gameState": s.game_state.value,
        "gameOutcome": s.game_outcome,
        "timeSinceLastMatch": int(s.time_since_last_match),
        "layout": s.board.to_lists(),
        "scores": {"player": int(s.scores.player), "opponent": int(s.scores.opponent)},
        "selectedTiles": [selected_to_json(t) for t in s.selected_tiles],
    }


# ---------- Session API ----------

@app.get("/api/state")
def api_state() -> Any:
    with _lock:
        snap = _session.snapshot()
    return jsonify({"ok": True, "state": snapshot_to_json(snap)})


@app.post("/api/click")
def api_click() -> Any:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({"ok": False, "error": "JSON object body required"}), 400
    try:
        layer = int(body["layer"])
        row = int(body["row"])
        column = int(body["column"])
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad click: {e}"}), 400
    with _lock:
        _session.on_tile_click(layer, row, column)
        snap = _session.snapshot()
    return jsonify({"ok": True, "state": snapshot_to_json(snap)})


@app.post("/api/message")
def api_message() -> Any:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({"ok": False, "error": "JSON object body required"}), 400
    raw = body.get("message")
    if not isinstance(raw, str):
        return jsonify({"ok": False, "error": "message required"}), 400
    with _lock:
        _session.on_message(raw)
        snap = _session.snapshot()
    return jsonify({"ok": True, "state": snapshot_to_json(snap)})


@app.get("/api/outbox")
def api_outbox() -> Any:
    with _lock:
        messages = _outbox.drain()
    return jsonify({"ok": True, "messages": messages})


@app.post("/api/reset")
def api_reset() -> Any:
    session = reset_session()
    return jsonify({"ok": True, "state": snapshot_to_json(session.snapshot())})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging()
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
