from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from circuit_racer.core.errors import EmptyCircuitError, InvalidRankingError
from circuit_racer.core.types import CircuitName


@dataclass(frozen=True, slots=True)
class Circuit:
    """The closed loop of turn rankings making up one lap.

    Indexing is circular: looking past the last turn continues at the first.
    """

    turns: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.turns:
            raise EmptyCircuitError
        for index, ranking in enumerate(self.turns):
            if ranking < 1:
                raise InvalidRankingError(index, ranking)

    @classmethod
    def from_rankings(cls, rankings: Iterable[int]) -> Circuit:
        return cls(tuple(rankings))

    def length(self) -> int:
        return len(self.turns)

    def difficulty_at(self, index: int) -> int:
        return self.turns[index % len(self.turns)]

    def max_difficulty(self) -> int:
        return max(self.turns)

    def window(self, start: int, size: int) -> list[int]:
        """Rankings of `size` consecutive turns from `start`, wrapping at the end."""
        return [self.difficulty_at(start + offset) for offset in range(size)]


CircuitFactory = Callable[[], Circuit]

STANDARD_TURNS = (
    1, 2, 1, 1, 1, 2, 1, 1, 3, 1, 1, 3, 1, 1,
    5, 1, 1, 4, 1, 3, 1, 1, 3, 1, 1, 1, 3, 1,
)  # fmt: skip

CIRCUIT_DEFINITIONS: dict[CircuitName, CircuitFactory] = {
    "standard": lambda: Circuit(STANDARD_TURNS),
    "oval": lambda: Circuit((1, 1, 1, 2, 3, 2, 1, 1, 1, 1, 2, 3, 2, 1)),
    "hairpins": lambda: Circuit(
        (1, 2, 4, 6, 1, 1, 3, 5, 1, 2, 1, 6, 4, 1, 1, 3, 1, 5, 2, 1),
    ),
}
