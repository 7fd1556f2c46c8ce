"""Play headless games with a random policy and print summary statistics.

Useful for eyeballing tuning changes (fever multiplier, combo window, spawn odds)
without a UI. The engine clock is simulated: each move advances it by `--step` seconds.

Usage:
    uv run python scripts/autoplay.py --games 200 --seed 7 --step 0.4

This script is deterministic for a given seed.
"""

from __future__ import annotations

import argparse
import random
from collections import Counter
from dataclasses import dataclass

from merge2048.config import config_from_env
from merge2048.engine.game import GameEngine
from merge2048.engine.session import GameStatus
from merge2048.engine.tiles import Direction


@dataclass(frozen=True)
class GameSummary:
    score: int
    highest_tile: int
    moves: int
    won: bool
    fever_moves: int


def play_one(*, seed: int, step: float, max_moves: int) -> GameSummary:
    engine = GameEngine(config_from_env(), seed=seed)
    policy = random.Random(seed ^ 0x5EED)
    now = 0.0
    engine.new_game(now=now)
    fever_moves = 0

    directions = list(Direction)
    for _ in range(max_moves):
        if engine.session.status == GameStatus.game_over:
            break
        now += step
        if engine.session.fever_active:
            fever_moves += 1
        engine.apply_move(policy.choice(directions), now=now)

    s = engine.session
    return GameSummary(score=s.score, highest_tile=s.highest_tile, moves=s.moves, won=s.has_won, fever_moves=fever_moves)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--games", type=int, default=100)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--step", type=float, default=0.5, help="simulated seconds between moves")
    parser.add_argument("--max-moves", type=int, default=10_000)
    args = parser.parse_args()

    summaries = [play_one(seed=args.seed + i, step=args.step, max_moves=args.max_moves) for i in range(args.games)]

    scores = [g.score for g in summaries]
    tiles = Counter(g.highest_tile for g in summaries)
    print(f"games: {len(summaries)}")
    print(f"mean score: {sum(scores) / len(scores):.1f}  max score: {max(scores)}")
    print(f"mean moves: {sum(g.moves for g in summaries) / len(summaries):.1f}")
    print(f"wins: {sum(g.won for g in summaries)}")
    print(f"moves made during fever: {sum(g.fever_moves for g in summaries)}")
    print("highest tile distribution:")
    for value in sorted(tiles):
        print(f"  {value:>5}: {tiles[value]}")


if __name__ == "__main__":
    main()
