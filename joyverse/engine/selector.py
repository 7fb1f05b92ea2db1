"""Next-word selection targeting the letters a child mis-types most."""

import random
from typing import Any, Iterable, Sequence

from joyverse.core.logging import get_logger
from joyverse.engine import difficulty
from joyverse.engine.letters import problem_letter_scores, rank_by_count
from joyverse.engine.word_bank import ALL_WORDS, words_for
from joyverse.models.attempt import Tier, parse_attempts

logger = get_logger(__name__)

TARGET_LETTERS = 3


def candidate_pool(tier: Tier, used_words: Iterable[str]) -> list[str]:
    """
    Words still available for a tier.

    Falls back to the whole bank minus used words when the tier is exhausted,
    then to the whole bank when every word has been used.
    """
    used = {str(word).lower() for word in used_words}

    candidates = [word for word in words_for(tier) if word not in used]
    if not candidates:
        candidates = [word for word in ALL_WORDS if word not in used]
    if not candidates:
        candidates = list(ALL_WORDS)
    return candidates


def select(
    history: Any,
    used_words: Sequence[str] | None = None,
    requested_difficulty: Tier | str | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Pick the next practice word.

    @param history - Attempts in chronological order
    @param used_words - Words already shown this session (any case)
    @param requested_difficulty - Tier to draw from; estimated from history when omitted
    @param rng - Random source, for reproducible picks
    @returns A word from the bank
    """
    rng = rng or random
    history = parse_attempts(history)

    try:
        tier = Tier(requested_difficulty) if requested_difficulty else difficulty.estimate(history)
    except ValueError:
        tier = difficulty.estimate(history)
    candidates = candidate_pool(tier, used_words or [])

    scores = problem_letter_scores(history)
    for letter in rank_by_count(scores)[:TARGET_LETTERS]:
        subset = [word for word in candidates if letter in word]
        if subset:
            logger.debug("Targeting problem letter %r (%s tier)", letter, tier.value)
            return rng.choice(subset)

    return rng.choice(candidates)
