"""Position-by-position letter alignment of target and typed words."""

from dataclasses import dataclass, field
from itertools import zip_longest
from typing import Iterator, Sequence

from joyverse.models.attempt import Attempt

RECENT_ATTEMPTS = 3
RECENT_WEIGHT = 2


def align(target: str, typed: str) -> Iterator[tuple[str, str]]:
    """
    Pair up target and typed characters, lowercased.

    Pairs run to the longer of the two strings; the shorter one is padded
    with blanks (empty strings).
    """
    return zip_longest(str(target).lower(), str(typed).lower(), fillvalue="")


def problem_letter_scores(history: Sequence[Attempt]) -> dict[str, int]:
    """
    Weighted error score per target letter over the incorrect attempts.

    Errors in the last three attempts count double. Extra typed characters
    beyond the end of the target are not scored.

    @param history - Attempts in chronological order
    @returns Letter -> score, in first-encounter order
    """
    scores: dict[str, int] = {}
    recent_from = len(history) - RECENT_ATTEMPTS

    for index, attempt in enumerate(history):
        if attempt.correct:
            continue
        weight = RECENT_WEIGHT if index >= recent_from else 1
        for expected, actual in align(attempt.word, attempt.input):
            if expected and expected != actual:
                scores[expected] = scores.get(expected, 0) + weight

    return scores


def rank_by_count(counts: dict[str, int]) -> list[str]:
    """Keys by descending count; ties keep insertion order."""
    return sorted(counts, key=lambda key: counts[key], reverse=True)


@dataclass
class LetterStats:
    """Per-letter ok/error tallies and confusions over an attempt list."""

    ok: dict[str, int] = field(default_factory=dict)
    errors: dict[str, int] = field(default_factory=dict)
    confusions: dict[str, dict[str, int]] = field(default_factory=dict)


def count_letters(attempts: Sequence[Attempt]) -> LetterStats:
    """
    Tally every aligned target letter of every attempt, correct or not.

    A mismatch against a non-blank typed character is also recorded as a
    confusion keyed by (target letter, typed letter).
    """
    stats = LetterStats()

    for attempt in attempts:
        for expected, actual in align(attempt.word, attempt.input):
            if not expected:
                continue
            if expected == actual:
                stats.ok[expected] = stats.ok.get(expected, 0) + 1
                continue
            stats.errors[expected] = stats.errors.get(expected, 0) + 1
            if actual:
                typed_as = stats.confusions.setdefault(expected, {})
                typed_as[actual] = typed_as.get(actual, 0) + 1

    return stats
