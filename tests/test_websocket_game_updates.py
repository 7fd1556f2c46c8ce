from __future__ import annotations


def test_ws_game_updates_broadcast(client_and_redis) -> None:  # type: ignore[no-untyped-def]
    client, _ = client_and_redis

    state = client.post("/game", json={"player_id": "ws", "seed": 3}).json()
    game_id = state["game_id"]

    with client.websocket_connect(f"/ws/game/{game_id}") as ws:
        res = client.post(f"/game/{game_id}/new")
        assert res.status_code == 200

        msg = ws.receive_json()
        assert msg["type"] == "game_updated"
        assert msg["game_id"] == game_id
        assert msg["status"] == "playing"
        assert msg["events"][0] == "GAME_STARTED"
