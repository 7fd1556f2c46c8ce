from __future__ import annotations

import os
from dataclasses import dataclass, fields


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Game-design tuning for one engine instance.

    Times are in seconds and compared against the `now` values callers pass in.
    """

    size: int = 4
    target_value: int = 2048
    four_probability: float = 0.1
    lookahead: int = 2
    start_tiles: int = 2

    # Combo / fever.
    combo_window: float = 1.5
    combo_break_min: int = 3
    fever_threshold: int = 5
    fever_multiplier: int = 2
    fever_timeout: float = 2.0

    # Danger thresholds, expressed as "this many empty cells or fewer".
    danger_warning: int = 4
    danger_critical: int = 2
    danger_imminent: int = 1

    milestones: tuple[int, ...] = (128, 256, 512, 1024, 2048)
    big_merge_threshold: int = 256

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ValueError("size must be at least 2")
        if not 0.0 <= self.four_probability <= 1.0:
            raise ValueError("four_probability must be between 0 and 1")
        if self.target_value < 4 or self.target_value & (self.target_value - 1):
            raise ValueError("target_value must be a power of two >= 4")
        if self.lookahead < 1:
            raise ValueError("lookahead must be at least 1")
        if not 0 < self.start_tiles <= self.size * self.size:
            raise ValueError("start_tiles must fit on the board")
        if self.combo_window <= 0 or self.fever_timeout <= 0:
            raise ValueError("combo_window and fever_timeout must be positive")
        if self.fever_threshold < 1:
            raise ValueError("fever_threshold must be at least 1")
        if self.fever_multiplier < 1:
            raise ValueError("fever_multiplier must be at least 1")
        if not self.danger_warning > self.danger_critical > self.danger_imminent >= 0:
            raise ValueError("danger thresholds must satisfy warning > critical > imminent >= 0")


ENV_PREFIX = "MERGE2048_"


def config_from_env(*, base: EngineConfig | None = None) -> EngineConfig:
    """Build an EngineConfig, overriding fields from `MERGE2048_<FIELD>` env vars.

    `MERGE2048_MILESTONES` is a comma-separated list of values.
    """

    base = base or EngineConfig()
    overrides: dict[str, object] = {}

    for f in fields(EngineConfig):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None or not raw.strip():
            continue
        current = getattr(base, f.name)
        if isinstance(current, tuple):
            overrides[f.name] = tuple(int(s) for s in raw.split(",") if s.strip())
        elif isinstance(current, float):
            overrides[f.name] = float(raw)
        else:
            overrides[f.name] = int(raw)

    if not overrides:
        return base

    values = {f.name: getattr(base, f.name) for f in fields(EngineConfig)}
    values.update(overrides)
    return EngineConfig(**values)  # type: ignore[arg-type]
