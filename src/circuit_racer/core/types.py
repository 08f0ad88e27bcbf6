from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Brain = Literal[
    "Nocombat",
    "Aggressive",
    "Beast",
    "Deathwish",
    "Lurker",
    "Slug",
]

CircuitName = Literal["standard", "oval", "hairpins"]

Decision = Literal["slow_down", "speed_up", "keep", "pitstop"]

ErrorCode = Literal["MAX_TICKS_REACHED"]

MIN_SPEED = -2
MAX_SPEED = 3


@dataclass(frozen=True, slots=True)
class Human:
    """Controlled from the console."""


@dataclass(frozen=True, slots=True)
class NPC:
    brain: Brain


AI = Human | NPC
