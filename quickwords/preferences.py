"""User preferences read by the generation controller."""

from __future__ import annotations

MIN_TURNS = 3
MAX_TURNS = 10
DEFAULT_TURNS = 5


class Preferences:
    """In-memory store for the number of turns run per topic.

    Writes are clamped to ``[MIN_TURNS, MAX_TURNS]``. An unset (or zero) value
    reads back as the default.
    """

    def __init__(self, default_max_turns: int = DEFAULT_TURNS) -> None:
        self._default = _clamp(default_max_turns)
        self._max_turns = 0

    @property
    def max_turns(self) -> int:
        return self._max_turns or self._default

    @max_turns.setter
    def max_turns(self, value: int) -> None:
        self._max_turns = _clamp(value)


def _clamp(value: int) -> int:
    return max(MIN_TURNS, min(MAX_TURNS, int(value)))
