from joyverse.engine.word_bank import ALL_WORDS, TYPING_WORDS, tier_of, words_for
from joyverse.models.attempt import Tier


def test_tiers_are_disjoint():
    easy, medium, hard = (set(TYPING_WORDS[tier]) for tier in Tier)
    assert not easy & medium
    assert not easy & hard
    assert not medium & hard


def test_all_words_lists_each_word_once():
    assert len(ALL_WORDS) == len(set(ALL_WORDS))
    assert set(ALL_WORDS) == set().union(*TYPING_WORDS.values())


def test_duplicate_entries_within_a_tier_are_dropped():
    assert TYPING_WORDS[Tier.EASY].count("lip") == 1


def test_words_for_accepts_strings_and_unknown_tiers():
    assert words_for("hard") == TYPING_WORDS[Tier.HARD]
    assert words_for("impossible") == ALL_WORDS


def test_tier_of_is_case_insensitive():
    assert tier_of("CAT") == Tier.EASY
    assert tier_of("Window") == Tier.HARD
    assert tier_of("zebra") is None
