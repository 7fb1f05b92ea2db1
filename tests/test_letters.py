from joyverse.engine.letters import align, count_letters, problem_letter_scores, rank_by_count


def test_align_pads_the_shorter_string_and_lowercases():
    assert list(align("Cat", "cA")) == [("c", "c"), ("a", "a"), ("t", "")]
    assert list(align("at", "ATE")) == [("a", "a"), ("t", "t"), ("", "e")]


def test_recent_errors_weigh_double(make_attempt):
    history = [
        make_attempt("cat", "bat"),
        make_attempt("sun"),
        make_attempt("bed"),
        make_attempt("leg"),
        make_attempt("dog", "dig"),
    ]
    assert problem_letter_scores(history) == {"c": 1, "o": 2}


def test_correct_attempts_and_extra_typed_letters_are_not_scored(make_attempt):
    history = [
        make_attempt("cat", "cot", correct=True),
        make_attempt("at", "atx"),
        make_attempt("pot", "po"),
    ]
    assert problem_letter_scores(history) == {"t": 2}


def test_rank_by_count_keeps_first_seen_order_on_ties():
    assert rank_by_count({"d": 1, "b": 3, "p": 1, "q": 3}) == ["b", "q", "d", "p"]


def test_count_letters_tallies_ok_errors_and_confusions(make_attempt):
    attempts = [make_attempt("cat", typed) for typed in ("cat", "bat", "cat", "kat", "cat")]

    stats = count_letters(attempts)

    assert stats.errors == {"c": 2}
    assert stats.ok == {"c": 3, "a": 5, "t": 5}
    assert stats.confusions == {"c": {"b": 1, "k": 1}}


def test_missing_typed_letters_are_errors_without_confusion(make_attempt):
    stats = count_letters([make_attempt("ship", "sh")])
    assert stats.errors == {"i": 1, "p": 1}
    assert stats.confusions == {}
