"""Tiered practice vocabulary (3-7 letters, dyslexia-friendly)."""

from joyverse.models.attempt import Tier


def _dedupe(words: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(words))


TYPING_WORDS: dict[Tier, tuple[str, ...]] = {
    Tier.EASY: _dedupe([
        "cat", "dog", "sun", "bed", "leg", "pie", "bee", "sea", "tea", "pea",
        "lip", "lid", "bib", "did", "dad", "bad", "pad", "lad",
        "bat", "pat", "tap", "nap", "pan", "man", "fan", "van", "jam", "yam",
        "sip", "tip", "dip", "pip", "rip", "zip", "mop", "pop",
    ]),
    Tier.MEDIUM: _dedupe([
        "bell", "dell", "pill", "bill", "peel", "deep", "beep", "peep", "pipe", "pale",
        "bale", "bail", "pail", "leap", "deal",
        "was", "saw", "no", "on", "top", "pot", "ten", "net",
        "thin", "chin", "ship", "shop", "cash", "dash", "wish", "fish",
        "mild", "wild", "kind", "mind", "bend", "lend", "send", "tend",
    ]),
    Tier.HARD: _dedupe([
        "pedal", "piped", "biped", "belle", "bleed", "bled", "idle", "bide", "pile", "piled",
        "deli", "bead", "lied", "bile",
        "dared", "bread", "brand", "grand", "blend", "trend", "flipped", "dripped",
        "thick", "think", "thank", "chunk", "shrimp", "crash", "flash", "splash",
        "below", "elbow", "window", "yellow", "mirror", "pillow", "shadow", "follow",
    ]),
}

# Flattened view, tier order, each word once
ALL_WORDS: tuple[str, ...] = _dedupe(
    [word for tier in Tier for word in TYPING_WORDS[tier]]
)


def words_for(tier: Tier | str) -> tuple[str, ...]:
    """
    Get the words of a difficulty tier.

    @param tier - Tier or its string value
    @returns Words of the tier, or the full bank for an unknown tier
    """
    try:
        return TYPING_WORDS[Tier(tier)]
    except ValueError:
        return ALL_WORDS


def tier_of(word: str) -> Tier | None:
    """Get the tier a word belongs to, case-insensitively."""
    needle = str(word).lower()
    for tier, words in TYPING_WORDS.items():
        if needle in words:
            return tier
    return None
