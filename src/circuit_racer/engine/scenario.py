from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from circuit_racer.core.errors import ConfigError
from circuit_racer.core.racer import Position, Racer
from circuit_racer.core.state import RaceRules, RaceState
from circuit_racer.core.types import NPC, Human
from circuit_racer.engine.race_engine import RaceEngine, TickCallback
from circuit_racer.engine.roll import Dice

if TYPE_CHECKING:
    from circuit_racer.ai.agent import Agent
    from circuit_racer.core.circuit import Circuit
    from circuit_racer.core.state import TickReport
    from circuit_racer.core.types import AI, Brain

# Steps moved by a racer at full speed
LONGEST_MOVE = 3


@dataclass
class RacerConfig:
    name: str
    # None means a human at the console
    brain: Brain | None = None
    start_lap: int = 0
    start_turn: int = 0

    @property
    def ai(self) -> AI:
        return Human() if self.brain is None else NPC(self.brain)

    def build(self) -> Racer:
        return Racer(
            self.name,
            self.ai,
            position=Position(lap=self.start_lap, turn=self.start_turn),
        )


@dataclass
class RaceScenario:
    """Wires racers, circuit, rules and dice into a ready-to-run engine."""

    racers_config: list[RacerConfig]
    circuit: Circuit
    rules: RaceRules = field(default_factory=RaceRules)
    seed: int | None = None
    # Overrides the seeded generator, e.g. with a scripted mock
    rng: random.Random | None = None
    agents: dict[int, Agent] = field(default_factory=dict)
    on_tick: TickCallback | None = None
    verbose: bool = True
    engine: RaceEngine = field(init=False)

    def __post_init__(self) -> None:
        if not self.racers_config:
            msg = "A race needs at least one racer."
            raise ConfigError(msg)

        if self.circuit.length() < LONGEST_MOVE and not self.rules.carry_lap_remainder:
            msg = (
                f"A {self.circuit.length()}-turn circuit is shorter than the longest "
                f"move ({LONGEST_MOVE} steps); enable carry_lap_remainder to race on it."
            )
            raise ConfigError(msg)

        racers = [cfg.build() for cfg in self.racers_config]
        for cfg in self.racers_config:
            if cfg.start_turn >= self.circuit.length():
                msg = (
                    f"{cfg.name} starts on turn {cfg.start_turn} but the circuit "
                    f"only has {self.circuit.length()} turns."
                )
                raise ConfigError(msg)

        rng = random.Random(self.seed) if self.rng is None else self.rng
        dice = Dice(
            rng,
            low=self.rules.die_low,
            high=self.rules.die_high,
        )
        self.engine = RaceEngine(
            RaceState(racers, self.circuit, rules=self.rules),
            dice,
            agents=self.agents,
            on_tick=self.on_tick,
            verbose=self.verbose,
        )

    @property
    def state(self) -> RaceState:
        return self.engine.state

    def run_tick(self) -> TickReport:
        return self.engine.run_tick()

    def run_race(self) -> None:
        self.engine.run_race()
