"""Performance analysis of a typing attempt history."""

import math
import random
from typing import Any

from joyverse.engine import messages
from joyverse.engine.letters import LetterStats, count_letters, rank_by_count
from joyverse.models.analytics import (
    AnalysisResult,
    ConfusionPattern,
    EmotionalState,
    PerformanceMetrics,
    Severity,
)
from joyverse.models.attempt import Attempt, parse_attempts

RECENT_WINDOW = 5
CONFUSIONS_PER_LETTER = 2

FRUSTRATION_HESITATIONS = 2.5
FRUSTRATION_TIME_MS = 7000


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_tenth_half_up(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def accuracy_percent(attempts: list[Attempt]) -> float:
    """Share of correct attempts as a percentage; 0 for no attempts."""
    if not attempts:
        return 0.0
    return sum(1 for attempt in attempts if attempt.correct) / len(attempts) * 100


def confusion_patterns(stats: LetterStats) -> list[ConfusionPattern]:
    """Top two mistaken-for letters of each confused target letter."""
    patterns = []
    for letter, typed_as in stats.confusions.items():
        for typed in rank_by_count(typed_as)[:CONFUSIONS_PER_LETTER]:
            if typed != letter:
                patterns.append(
                    ConfusionPattern(letter=letter, confused_with=typed, frequency=typed_as[typed])
                )
    return patterns


def classify(accuracy: int, avg_hesitations: float, avg_time_spent: float) -> tuple[Severity, EmotionalState]:
    """
    Severity and emotional state from accuracy and pacing.

    Slow or hesitant typing reads as frustration whatever the accuracy,
    including an otherwise excelling child.
    """
    if accuracy < 60:
        severity, state = Severity.SEVERE, EmotionalState.STRUGGLING
    elif accuracy < 80:
        severity, state = Severity.MODERATE, EmotionalState.CHALLENGED
    elif accuracy >= 90:
        severity, state = Severity.MILD, EmotionalState.EXCELLING
    else:
        severity, state = Severity.MILD, EmotionalState.CONFIDENT

    if avg_hesitations > FRUSTRATION_HESITATIONS or avg_time_spent > FRUSTRATION_TIME_MS:
        state = EmotionalState.FRUSTRATED

    return severity, state


def recommend(
    problematic_letters: list[str],
    patterns: list[ConfusionPattern],
    accuracy: int,
    avg_hesitations: float,
    avg_time_spent: float,
) -> list[str]:
    """Advisory texts, always checked in the same order."""
    recommendations = []

    if problematic_letters:
        letters = ", ".join(problematic_letters[:5]).upper()
        recommendations.append(messages.FOCUS_LETTERS.format(letters=letters))

    if patterns:
        pairs = ", ".join(f"{p.confused_with}/{p.letter}" for p in patterns[:3]).upper()
        recommendations.append(messages.DISTINGUISH_PAIRS.format(pairs=pairs))

    if avg_hesitations > 2:
        recommendations.append(messages.LETTER_CARDS)
        recommendations.append(messages.SHORTER_SESSIONS)

    if accuracy >= 90:
        recommendations.append(messages.READY_FOR_CHALLENGE)
    elif accuracy < 70:
        recommendations.append(messages.SIMPLER_WORDS)
        recommendations.append(messages.MULTISENSORY)

    if avg_time_spent > 7000:
        recommendations.append(messages.SOUND_IT_OUT)
    elif avg_time_spent < 3000:
        recommendations.append(messages.GREAT_SPEED)

    return recommendations


def analyze(attempts: Any, rng: random.Random | None = None) -> AnalysisResult:
    """
    Analyze an attempt history.

    Pure apart from the encouragement pick, which draws from ``rng``.
    Malformed input is treated as an empty history.

    @param attempts - Attempts in chronological order
    @param rng - Random source for the encouragement message
    @returns Accuracy, letter statistics, emotional state and advice
    """
    attempts = parse_attempts(attempts)
    total = len(attempts)
    if not total:
        return AnalysisResult(
            encouragement=messages.encouragement_for(EmotionalState.CONFIDENT, rng),
        )

    overall_accuracy = round_half_up(accuracy_percent(attempts))

    total_hesitations = sum(attempt.hesitations for attempt in attempts)
    avg_time_spent = sum(attempt.time_spent for attempt in attempts) / total
    avg_hesitations = total_hesitations / total

    stats = count_letters(attempts)
    problematic_letters = rank_by_count(stats.errors)
    strengths = [
        letter for letter in rank_by_count(stats.ok)
        if stats.ok[letter] >= stats.errors.get(letter, 0)
    ]
    patterns = confusion_patterns(stats)

    severity, emotional_state = classify(overall_accuracy, avg_hesitations, avg_time_spent)

    recent_accuracy = accuracy_percent(attempts[-RECENT_WINDOW:])

    return AnalysisResult(
        overall_accuracy=overall_accuracy,
        problematic_letters=problematic_letters,
        strengths=strengths,
        confusion_patterns=patterns,
        severity=severity,
        emotional_state=emotional_state,
        recommendations=recommend(
            problematic_letters, patterns, overall_accuracy, avg_hesitations, avg_time_spent
        ),
        encouragement=messages.encouragement_for(emotional_state, rng),
        performance_metrics=PerformanceMetrics(
            avg_time_spent=round_half_up(avg_time_spent),
            total_hesitations=total_hesitations,
            avg_hesitations=round_tenth_half_up(avg_hesitations),
            recent_accuracy=round_half_up(recent_accuracy),
            is_improving=recent_accuracy > overall_accuracy,
        ),
    )
