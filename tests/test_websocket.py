"""WebSocket integration tests for real-time gameplay."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from classic_snake.server.app import create_app
from classic_snake.snake import Direction


@pytest.fixture()
def tc():
    """Starlette sync TestClient. The context manager keeps a single event
    loop alive for REST calls, WebSocket connections and tick loops."""
    with TestClient(create_app()) as client:
        yield client


def _create_game(tc, **body) -> str:
    resp = tc.post("/games", json=body)
    assert resp.status_code == 201
    return resp.json()["game_id"]


def _receive_until(ws, predicate, limit: int = 500) -> dict:
    for _ in range(limit):
        msg = json.loads(ws.receive_text())
        if predicate(msg):
            return msg
    raise AssertionError("Expected message never arrived.")


class TestPlayWebSocket:
    def test_connect_receives_snapshot(self, tc):
        game_id = _create_game(tc)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            state = json.loads(ws.receive_text())
            assert state["game_id"] == game_id
            assert state["state"] == "idle"
            assert state["snake"]["body"] == [[3, 1], [2, 1], [1, 1]]
            assert state["food"] is not None
            assert state["events"] == []

    def test_nonexistent_game_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/games/nonexistent/play",
        ):
            pass

    def test_start_broadcasts_events(self, tc):
        game_id = _create_game(tc, tick_rate_ms=200)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            msg = json.loads(ws.receive_text())
            assert msg["state"] == "running"
            events = [e["event"] for e in msg["events"]]
            assert events == ["score_updated", "game_started"]

    def test_malformed_messages_ignored(self, tc):
        game_id = _create_game(tc, tick_rate_ms=200)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text("not json")
            ws.send_text(json.dumps(["a", "list"]))
            ws.send_text(json.dumps({"action": "direction", "direction": 5}))
            ws.send_text(json.dumps({"action": "unknown"}))
            ws.send_text(json.dumps({"action": "start"}))
            msg = _receive_until(ws, lambda m: m["state"] == "running")
            assert msg["state"] == "running"

    def test_direction_and_pause(self, tc):
        game_id = _create_game(tc, tick_rate_ms=200)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            _receive_until(ws, lambda m: m["state"] == "running")
            ws.send_text(json.dumps({"action": "direction", "direction": "down"}))
            ws.send_text(json.dumps({"action": "pause", "paused": True}))
            msg = _receive_until(ws, lambda m: m["state"] == "paused")
            assert msg["paused"]

        session = tc.app.state.session_manager.get_session(game_id)
        assert session.engine.next_direction == Direction.DOWN

    def test_game_over_event_broadcast(self, tc):
        game_id = _create_game(tc, grid_width=5, grid_height=3, tick_rate_ms=10)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            msg = _receive_until(ws, lambda m: m["state"] == "game_over")
            assert "game_over" in [e["event"] for e in msg["events"]]
            assert msg["over"]

    def test_new_game_resets_to_idle(self, tc):
        game_id = _create_game(tc, tick_rate_ms=200)
        with tc.websocket_connect(f"/games/{game_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "start"}))
            _receive_until(ws, lambda m: m["state"] == "running")
            ws.send_text(json.dumps({"action": "new_game"}))
            msg = _receive_until(ws, lambda m: m["state"] == "idle")
            assert msg["tick"] == 0
            assert msg["score"] == 0

    def test_two_clients_share_state(self, tc):
        game_id = _create_game(tc, tick_rate_ms=200)
        with tc.websocket_connect(
            f"/games/{game_id}/play",
        ) as ws0, tc.websocket_connect(f"/games/{game_id}/play") as ws1:
            ws0.receive_text()
            ws1.receive_text()
            ws0.send_text(json.dumps({"action": "start"}))
            msg = _receive_until(ws1, lambda m: m["state"] == "running")
            assert msg["game_id"] == game_id
