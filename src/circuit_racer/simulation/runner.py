"""Core simulation execution logic."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from circuit_racer.engine.scenario import RaceScenario
from circuit_racer.simulation.config import build_circuit

if TYPE_CHECKING:
    from circuit_racer.core.types import ErrorCode
    from circuit_racer.simulation.config import RaceConfig


@dataclass(slots=True)
class RaceResult:
    """Result of a single race simulation."""

    config_hash: str
    seed: int | None
    execution_time_ms: float
    error_code: ErrorCode | None
    tick_count: int
    winner: str | None
    wrecked: list[str]
    standings: list[str]

    @property
    def aborted(self) -> bool:
        return self.error_code is not None


def run_single_race(config: RaceConfig) -> RaceResult:
    """
    Execute one race without output and summarise how it went.
    """
    start_time = time.perf_counter()

    scenario = RaceScenario(
        racers_config=config.racer_configs(),
        circuit=build_circuit(config.circuit),
        rules=config.build_rules(),
        seed=config.seed,
        verbose=False,
    )
    scenario.run_race()

    engine = scenario.engine
    winner = engine.winner
    return RaceResult(
        config_hash=config.compute_hash(),
        seed=config.seed,
        execution_time_ms=(time.perf_counter() - start_time) * 1000,
        error_code=engine.state.error_code,
        tick_count=engine.state.tick,
        winner=winner.name if winner else None,
        wrecked=[r.name for r in engine.state.racers if not r.alive],
        standings=[r.name for r in engine.standings()],
    )
