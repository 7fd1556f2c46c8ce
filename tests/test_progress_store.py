from __future__ import annotations

import fakeredis

from merge2048 import progress_store
from merge2048.progress_store import get_best_score, get_progress, record_score, unlock_bios


def test_record_score_only_keeps_improvements() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    assert get_best_score(r=r, player_id="p1") == 0
    assert record_score(r=r, player_id="p1", score=120) is True
    assert record_score(r=r, player_id="p1", score=80) is False
    assert get_best_score(r=r, player_id="p1") == 120


def test_unlock_bios_reports_first_unlocks_only() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)

    assert unlock_bios(r=r, player_id="p1", values=[8, 4, 8]) == [4, 8]
    assert unlock_bios(r=r, player_id="p1", values=[8, 16]) == [16]
    # Values without a bio are ignored.
    assert unlock_bios(r=r, player_id="p1", values=[4096]) == []

    assert get_progress(r=r, player_id="p1").unlocked_bios == [4, 8, 16]


def test_record_score_retries_when_another_game_writes_first(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    server = fakeredis.FakeServer()
    r = fakeredis.FakeRedis(server=server, decode_responses=True)
    other_game = fakeredis.FakeRedis(server=server, decode_responses=True)
    record_score(r=r, player_id="p1", score=100)

    real_read = progress_store._read_best
    calls = {"n": 0}

    def _read_then_interleave(client, key):  # type: ignore[no-untyped-def]
        value = real_read(client, key)
        calls["n"] += 1
        if calls["n"] == 1:
            # Another game of the same player lands its score after our read.
            assert record_score(r=other_game, player_id="p1", score=200) is True
        return value

    monkeypatch.setattr(progress_store, "_read_best", _read_then_interleave)

    assert record_score(r=r, player_id="p1", score=150) is False
    assert calls["n"] >= 2
    assert get_best_score(r=r, player_id="p1") == 200
