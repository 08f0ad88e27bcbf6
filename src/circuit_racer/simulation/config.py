"""Race configuration schema using msgspec."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import TYPE_CHECKING

import msgspec

from circuit_racer.core.circuit import CIRCUIT_DEFINITIONS
from circuit_racer.core.errors import ConfigError
from circuit_racer.core.state import RaceRules, apply_house_rules
from circuit_racer.core.types import Brain, CircuitName
from circuit_racer.engine.scenario import RacerConfig

if TYPE_CHECKING:
    from collections.abc import Iterator

    from circuit_racer.core.circuit import Circuit

RuleValue = int | float | str | bool


class RacerEntry(msgspec.Struct, frozen=True):
    name: str
    # Omitted for the human driver
    brain: Brain | None = None

    def to_racer_config(self) -> RacerConfig:
        return RacerConfig(self.name, self.brain)


DEFAULT_NPCS: tuple[RacerEntry, ...] = (
    RacerEntry("Roger", "Slug"),
    RacerEntry("Brian", "Nocombat"),
    RacerEntry("Nick", "Nocombat"),
    RacerEntry("Lionel", "Nocombat"),
    RacerEntry("Max", "Aggressive"),
)


class RaceConfig(msgspec.Struct, frozen=True):
    """
    Immutable representation of a single race setup.
    """

    racers: tuple[RacerEntry, ...]
    circuit: CircuitName = "standard"
    seed: int | None = None
    rules: dict[str, RuleValue] = msgspec.field(default_factory=dict)

    def compute_hash(self) -> str:
        """Compute stable SHA-256 hash of this configuration."""
        canonical = json.dumps(
            {
                "racers": [[r.name, r.brain] for r in self.racers],
                "circuit": self.circuit,
                "seed": self.seed,
                "rules": dict(sorted(self.rules.items())) if self.rules else {},
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def build_rules(self) -> RaceRules:
        return apply_house_rules(RaceRules(), self.rules)

    def racer_configs(self) -> list[RacerConfig]:
        if not self.racers:
            msg = "A race needs at least one racer."
            raise ConfigError(msg)
        return [r.to_racer_config() for r in self.racers]

    @property
    def repr(self) -> str:
        """String representation for logging."""
        names = ", ".join(r.name for r in self.racers)
        return f"{names} on {self.circuit} (Seed: {self.seed})"


class PartialRaceConfig(msgspec.Struct):
    """
    Partial configuration for loading from TOML files.
    """

    racers: list[RacerEntry] | None = None
    circuit: CircuitName | None = None
    seed: int | None = None
    rules: dict[str, RuleValue] | None = None

    @classmethod
    def from_toml(cls, path: Path) -> PartialRaceConfig:
        with path.open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)


class BatchConfig(msgspec.Struct):
    """
    TOML-backed configuration for batches of NPC-only races.
    """

    racers: list[RacerEntry] = msgspec.field(
        default_factory=lambda: list(DEFAULT_NPCS),
    )
    circuit: CircuitName = "standard"
    runs: int = 100
    seed_offset: int = 0
    rules: dict[str, RuleValue] = msgspec.field(default_factory=dict)

    @classmethod
    def from_toml(cls, path: str | Path) -> BatchConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)

    def race_configs(self) -> Iterator[RaceConfig]:
        """One RaceConfig per run, seeded consecutively from `seed_offset`."""
        humans = [r.name for r in self.racers if r.brain is None]
        if humans:
            msg = f"Batch races are NPC-only; give {', '.join(humans)} a brain."
            raise ConfigError(msg)
        for i in range(self.runs):
            yield RaceConfig(
                racers=tuple(self.racers),
                circuit=self.circuit,
                seed=self.seed_offset + i,
                rules=self.rules,
            )


def build_circuit(name: str) -> Circuit:
    if name not in CIRCUIT_DEFINITIONS:
        msg = f"Unknown circuit '{name}'. Known circuits: {', '.join(CIRCUIT_DEFINITIONS)}"
        raise ConfigError(msg)
    return CIRCUIT_DEFINITIONS[name]()
