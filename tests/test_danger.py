from __future__ import annotations

import pytest

from merge2048.engine.danger import DangerLevel, classify_danger


@pytest.mark.parametrize(
    ("empty", "level"),
    [
        (16, DangerLevel.safe),
        (5, DangerLevel.safe),
        (4, DangerLevel.warning),
        (3, DangerLevel.warning),
        (2, DangerLevel.critical),
        (1, DangerLevel.imminent),
        (0, DangerLevel.imminent),
    ],
)
def test_default_thresholds(empty: int, level: DangerLevel) -> None:
    assert classify_danger(empty) == level


def test_custom_thresholds() -> None:
    assert classify_danger(6, warning=8, critical=5, imminent=2) == DangerLevel.warning
    assert classify_danger(3, warning=8, critical=5, imminent=2) == DangerLevel.critical
