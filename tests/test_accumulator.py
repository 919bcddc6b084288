from quickwords.services.accumulator import MAX_WORD_LENGTH, WordAccumulator


def test_case_insensitive_duplicate_is_rejected() -> None:
    words = WordAccumulator()

    assert words.try_add("Cat") is True
    assert words.try_add("cat") is False
    assert words.snapshot() == ("Cat",)


def test_discovery_order_is_preserved() -> None:
    words = WordAccumulator()
    for candidate in ["fruit", "red", "Fruit", "berry", "RED", "sweet"]:
        words.try_add(candidate)

    assert words.snapshot() == ("fruit", "red", "berry", "sweet")
    assert list(words) == ["fruit", "red", "berry", "sweet"]
    assert len(words) == 4


def test_invalid_candidates_are_rejected() -> None:
    words = WordAccumulator()

    assert words.try_add("") is False
    assert words.try_add("x" * (MAX_WORD_LENGTH + 1)) is False
    assert words.try_add("ice cream") is False
    assert words.try_add("x" * MAX_WORD_LENGTH) is True
    assert words.try_add("well-known") is True
    assert len(words) == 2


def test_reset_clears_entries_and_memory() -> None:
    words = WordAccumulator()
    words.try_add("dog")
    words.reset()

    assert words.snapshot() == ()
    assert "dog" not in words
    assert words.try_add("Dog") is True


def test_membership_ignores_case() -> None:
    words = WordAccumulator()
    words.try_add("Straße")

    assert "STRASSE" in words
    assert 3 not in words


def test_snapshot_is_detached() -> None:
    words = WordAccumulator()
    words.try_add("a")
    before = words.snapshot()
    words.try_add("b")

    assert before == ("a",)
