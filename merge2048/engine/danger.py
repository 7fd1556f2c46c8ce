from __future__ import annotations

from enum import StrEnum


class DangerLevel(StrEnum):
    safe = "safe"
    warning = "warning"
    critical = "critical"
    imminent = "imminent"


def classify_danger(empty_count: int, *, warning: int = 4, critical: int = 2, imminent: int = 1) -> DangerLevel:
    """Map an empty-cell count to a danger level. Stateless: no hysteresis."""

    if empty_count <= imminent:
        return DangerLevel.imminent
    if empty_count <= critical:
        return DangerLevel.critical
    if empty_count <= warning:
        return DangerLevel.warning
    return DangerLevel.safe
