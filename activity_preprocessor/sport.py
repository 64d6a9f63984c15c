"""Sport names and the moving-speed thresholds used for pace calculation."""

from __future__ import annotations

from typing import Optional

SPORT_GENERIC = "generic"
SPORT_RUNNING = "running"
SPORT_WALKING = "walking"
SPORT_HIKING = "hiking"
SPORT_CYCLING = "cycling"
SPORT_E_BIKING = "e_biking"
SPORT_SWIMMING = "swimming"
SPORT_ROWING = "rowing"

# Minimum speed (m/s) above which a sample counts as moving.
GENERIC_MOVING_THRESHOLD_M_PER_S = 0.1
MOVING_THRESHOLDS_M_PER_S = {
    SPORT_RUNNING: 0.5,
    SPORT_WALKING: 0.3,
    SPORT_HIKING: 0.3,
    SPORT_CYCLING: 1.4,
    SPORT_E_BIKING: 1.4,
    SPORT_SWIMMING: 0.1,
    SPORT_ROWING: 0.5,
}


def moving_threshold(sport: str) -> float:
    """Return the moving threshold for ``sport``, matched case-insensitively."""

    key = (sport or SPORT_GENERIC).strip().lower().replace(" ", "_")
    return MOVING_THRESHOLDS_M_PER_S.get(key, GENERIC_MOVING_THRESHOLD_M_PER_S)


def is_considered_moving(sport: str, speed: Optional[float]) -> bool:
    """Return whether an athlete doing ``sport`` at ``speed`` m/s is moving.

    A missing speed counts as moving so that callers can fall back to the
    distance and elapsed time between samples.
    """

    if speed is None:
        return True
    return speed > moving_threshold(sport)
