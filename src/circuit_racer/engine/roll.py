from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from circuit_racer.core import LOGGER_NAME

if TYPE_CHECKING:
    import random

logger = logging.getLogger(f"{LOGGER_NAME}.roll")

# Seven faces, 0 through 6. The die is called a d6 but the reference balance
# was tuned against this wider range, so it stays the default.
DEFAULT_DIE_LOW = 0
DEFAULT_DIE_HIGH = 6


@dataclass(slots=True)
class Dice:
    """Randomness provider handed to the turn resolver.

    Tests pass a MagicMock as `rng` and script `rng.randint.side_effect`.
    """

    rng: random.Random
    low: int = DEFAULT_DIE_LOW
    high: int = DEFAULT_DIE_HIGH

    def __post_init__(self) -> None:
        if self.low > self.high:
            msg = f"Die range is empty: low={self.low} > high={self.high}"
            raise ValueError(msg)

    @property
    def faces(self) -> int:
        return self.high - self.low + 1

    def roll(self) -> int:
        value = self.rng.randint(self.low, self.high)
        logger.debug("Dice Roll: %s (range %s-%s)", value, self.low, self.high)
        return value
