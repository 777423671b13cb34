"""Simulated pickup tracker: fixed progress steps, one per interval."""

import time
from collections.abc import Callable

TRACKING_STEPS = (
    "Truck left depot",
    "Truck on main road",
    "Truck approaching your ward",
    "Truck 1 street away",
    "Truck has reached your street",
)
START_MESSAGE = "Starting tracking..."
FINISHED_MESSAGE = "Tracking finished. If pickup not done, please submit a new report."


def run_tracking(
    emit: Callable[[str], None],
    interval: float = 1.6,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Emit the start message, each step after interval seconds, then the finish message."""
    emit(START_MESSAGE)
    for step in TRACKING_STEPS:
        sleep(interval)
        emit(step)
    sleep(interval)
    emit(FINISHED_MESSAGE)
