"""Ordered, case-insensitive set of the words found for one topic."""

from __future__ import annotations

from collections.abc import Iterator

MAX_WORD_LENGTH = 100


class WordAccumulator:
    """Append-only word list that rejects case-insensitive duplicates."""

    def __init__(self) -> None:
        self._words: list[str] = []
        self._seen: set[str] = set()

    def try_add(self, candidate: str) -> bool:
        """Append ``candidate`` if it is a valid, unseen word.

        Valid means non-empty, at most ``MAX_WORD_LENGTH`` characters and free
        of whitespace; the last rule is the Word invariant (no embedded
        whitespace), stricter than a plain length and duplicate check. Returns
        whether the word was added.
        """

        if not candidate or len(candidate) > MAX_WORD_LENGTH:
            return False
        if any(char.isspace() for char in candidate):
            return False

        key = candidate.casefold()
        if key in self._seen:
            return False

        self._seen.add(key)
        self._words.append(candidate)
        return True

    def reset(self) -> None:
        self._words.clear()
        self._seen.clear()

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.casefold() in self._seen
