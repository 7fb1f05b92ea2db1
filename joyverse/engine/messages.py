"""Fixed recommendation and encouragement texts."""

import random

from joyverse.models.analytics import EmotionalState

FOCUS_LETTERS = "🎯 Focus practice on these letters: {letters}"
DISTINGUISH_PAIRS = "🔄 Work on distinguishing: {pairs}"
LETTER_CARDS = "⏸️ Use visual letter cards to reduce hesitation"
SHORTER_SESSIONS = "💝 Practice in shorter, more frequent sessions"
READY_FOR_CHALLENGE = "🌟 Excellent progress! Ready for more challenging words"
SIMPLER_WORDS = "🌱 Start with simpler 3-letter words for confidence"
MULTISENSORY = "👁️ Use multisensory techniques (trace letters while saying them)"
SOUND_IT_OUT = "🐢 Take time to sound out each letter - no rush!"
GREAT_SPEED = "⚡ Great speed! Focus on accuracy next"

ENCOURAGEMENT = {
    EmotionalState.EXCELLING: (
        "🌟 Outstanding work! You're a typing superstar!",
        "🚀 Incredible progress! Keep up the amazing effort!",
        "🏆 You're mastering these letters beautifully!",
    ),
    EmotionalState.CONFIDENT: (
        "💪 Great job! You're doing really well!",
        "⭐ Nice progress! Keep practicing!",
        "🎯 You're on the right track!",
    ),
    EmotionalState.CHALLENGED: (
        "🌈 You're learning and improving every day!",
        "💝 Keep going! Every practice helps!",
        "🌱 You're making steady progress!",
    ),
    EmotionalState.STRUGGLING: (
        "💙 Learning takes time - you're doing great!",
        "🌟 Every attempt makes you stronger!",
        "🤗 It's okay to find this challenging - keep trying!",
    ),
    EmotionalState.FRUSTRATED: (
        "💝 Take a break if needed - you're doing your best!",
        "🌈 Remember, progress isn't always linear!",
        "🫂 You're working hard, and that's what matters!",
    ),
}

INITIAL_WORD_GREETING = "Welcome! Let's start your typing adventure!"

INSIGHT_EASIER = "Selected easier word to build confidence"
INSIGHT_CHALLENGING = "Selected challenging word to advance skills"
INSIGHT_BALANCED = "Selected balanced word for steady progress"


def encouragement_for(emotional_state: str, rng: random.Random | None = None) -> str:
    """
    Pick an encouragement message for an emotional state.

    @param emotional_state - EmotionalState or its string value
    @param rng - Random source, for reproducible picks
    @returns A message from the state's pool, or from the confident pool
        when the state is unknown
    """
    try:
        pool = ENCOURAGEMENT[EmotionalState(emotional_state)]
    except ValueError:
        pool = ENCOURAGEMENT[EmotionalState.CONFIDENT]
    return (rng or random).choice(pool)


def insight_for(recent_accuracy: float) -> str:
    """Explain a word choice from the accuracy of the last few attempts."""
    if recent_accuracy < 60:
        return INSIGHT_EASIER
    if recent_accuracy > 85:
        return INSIGHT_CHALLENGING
    return INSIGHT_BALANCED
