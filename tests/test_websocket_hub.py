from __future__ import annotations

import pytest

from merge2048.websocket_hub import GameUpdatesHub


class _FakeSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.broken = broken
        self.accepted = False
        self.sent: list[dict[str, object]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, payload: dict[str, object]) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(payload)


@pytest.mark.asyncio
async def test_broadcast_reaches_room_and_drops_dead_sockets() -> None:
    hub = GameUpdatesHub()
    good, dead, elsewhere = _FakeSocket(), _FakeSocket(broken=True), _FakeSocket()

    await hub.connect("g1", good)  # type: ignore[arg-type]
    await hub.connect("g1", dead)  # type: ignore[arg-type]
    await hub.connect("g2", elsewhere)  # type: ignore[arg-type]
    assert good.accepted and hub.subscriber_count("g1") == 2

    delivered = await hub.game_updated("g1", status="playing", score=12, event_types=["TILE_MERGED"])

    assert delivered == 1
    assert good.sent == [
        {"type": "game_updated", "game_id": "g1", "status": "playing", "score": 12, "events": ["TILE_MERGED"]}
    ]
    assert elsewhere.sent == []
    assert hub.subscriber_count("g1") == 1


@pytest.mark.asyncio
async def test_disconnect_empties_room() -> None:
    hub = GameUpdatesHub()
    ws = _FakeSocket()
    await hub.connect("g1", ws)  # type: ignore[arg-type]
    await hub.disconnect("g1", ws)  # type: ignore[arg-type]
    await hub.disconnect("g1", ws)  # type: ignore[arg-type]

    assert hub.subscriber_count("g1") == 0
    assert await hub.broadcast("g1", {"type": "noop"}) == 0
