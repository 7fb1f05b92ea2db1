"""Adaptive difficulty estimation from a window of recent attempts."""

from typing import Any

from joyverse.models.attempt import Tier, parse_attempts

MIN_HISTORY = 3
WINDOW_SIZE = 5

# Attempts recorded without timing count as an average-paced answer
UNTIMED_ATTEMPT_MS = 5000


def estimate(history: Any) -> Tier:
    """
    Map the most recent attempts to a difficulty tier.

    @param history - Attempts in chronological order
    @returns HARD when accurate, quick and fluent; EASY when inaccurate,
        hesitant or slow; MEDIUM otherwise or with fewer than 3 attempts
    """
    history = parse_attempts(history)
    if len(history) < MIN_HISTORY:
        return Tier.MEDIUM

    window = history[-WINDOW_SIZE:]
    size = len(window)
    accuracy = sum(1 for attempt in window if attempt.correct) / size
    avg_time = sum(attempt.time_spent or UNTIMED_ATTEMPT_MS for attempt in window) / size
    avg_hesitations = sum(attempt.hesitations for attempt in window) / size

    if accuracy >= 0.8 and avg_time < 5000 and avg_hesitations < 2:
        return Tier.HARD
    if accuracy < 0.5 or avg_hesitations > 3 or avg_time > 8000:
        return Tier.EASY
    return Tier.MEDIUM
