from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from circuit_racer.ai.agent import DecisionContext, RacerSnapshot, agent_for
from circuit_racer.core import LOGGER_NAME
from circuit_racer.core.state import LogContext, TickReport
from circuit_racer.engine.logging import ContextAdapter

if TYPE_CHECKING:
    from circuit_racer.ai.agent import Agent
    from circuit_racer.core.racer import Racer
    from circuit_racer.core.state import RaceState
    from circuit_racer.core.types import Decision
    from circuit_racer.engine.roll import Dice


TickCallback = Callable[["RaceEngine", TickReport], None]


@dataclass
class RaceEngine:
    """Runs the race loop.

    Each tick is resolved in two phases. First every live racer's controller
    decides against one frozen snapshot of the field. Then the engine applies
    the decisions and resolves the turns one racer at a time, in index order.
    Racers are only ever touched through their index in `state.racers`.
    """

    state: RaceState
    dice: Dice
    log_context: LogContext = field(default_factory=LogContext)
    agents: dict[int, Agent] = field(default_factory=dict)

    # Callback for external observers (display, telemetry)
    on_tick: TickCallback | None = None
    verbose: bool = True
    _logger: ContextAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Fills in missing controllers and gives every racer full HP."""
        self._logger = ContextAdapter(logging.getLogger(f"{LOGGER_NAME}.engine"), self)

        for idx, racer in enumerate(self.state.racers):
            _ = self.agents.setdefault(idx, agent_for(racer.ai))
            racer.reset_hp(self.state.circuit)

    # --- Main Loop ---
    def run_race(self) -> None:
        while self.state.race_active:
            if self.state.tick >= self.state.rules.max_ticks:
                self.state.error_code = "MAX_TICKS_REACHED"
                self.log_warning(
                    f"Race abandoned: exceeded {self.state.rules.max_ticks} ticks.",
                )
                self.end_race()
                break
            _ = self.run_tick()

    def run_tick(self) -> TickReport:
        self.state.tick += 1
        self.log_context.new_tick()
        self.log_context.start_turn_log("_")
        self.log_info(f"=== START TICK {self.state.tick} ===")

        decisions = self.plan_tick()

        for idx, decision in decisions.items():
            racer = self.state.racers[idx]
            self.log_context.start_turn_log(self.racer_repr(idx))

            self._apply_decision(idx, decision)
            outcome = racer.make_turn(
                self.state.circuit,
                self.dice,
                carry_remainder=self.state.rules.carry_lap_remainder,
            )
            if outcome is not None:
                self.log_debug(
                    f"Dice Roll: {outcome.roll} vs {outcome.need} "
                    f"-> {'made it' if outcome.success else 'failed'}, "
                    f"moved {outcome.steps}",
                )

            if racer.position.lap >= self.state.rules.laps:
                self._declare_winner(idx)
                break

        if self.state.race_active and not self.state.any_alive():
            self.log_info("Every car is wrecked.")
            self.end_race()

        report = self.collect_logs()
        if self.on_tick:
            self.on_tick(self, report)
        return report

    def plan_tick(self) -> dict[int, Decision]:
        """Ask each live racer's controller for a decision, all from the same snapshot."""
        snapshot = self.snapshot()
        circuit = self.state.circuit
        decisions: dict[int, Decision] = {}
        for idx, racer in enumerate(self.state.racers):
            if not racer.alive:
                continue
            ctx = DecisionContext(
                racer_idx=idx,
                snapshot=snapshot,
                circuit=circuit,
                can_pitstop=racer.can_pitstop(circuit),
            )
            decisions[idx] = self.get_agent(idx).decide(ctx)
        return decisions

    def _apply_decision(self, idx: int, decision: Decision) -> None:
        racer = self.state.racers[idx]
        match decision:
            case "slow_down":
                racer.slow_down()
            case "speed_up":
                racer.speed_up()
            case "pitstop":
                if racer.can_pitstop(self.state.circuit):
                    racer.pitstop(self.state.circuit)
                else:
                    self.log_warning(
                        f"{self.racer_repr(idx)} cannot reach the pits from "
                        f"turn {racer.position.turn}; ignoring pitstop.",
                    )
            case "keep":
                pass

    def collect_logs(self) -> TickReport:
        """Drain one log bucket from every racer, eliminated or not."""
        return TickReport(
            tick=self.state.tick,
            logs=tuple(tuple(racer.get_log()) for racer in self.state.racers),
        )

    # --- Race end ---
    def _declare_winner(self, idx: int) -> None:
        self.state.winner_idx = idx
        self.log_info(f"!!! {self.racer_repr(idx)} wins !!!")
        self.end_race()

    def end_race(self) -> None:
        if not self.state.race_active:
            return
        self.state.race_active = False
        self.log_info("Race ended! 🏁")
        self.log_final_standings()

    def standings(self) -> list[Racer]:
        length = self.state.circuit.length()
        return sorted(
            self.state.racers,
            key=lambda r: r.total_steps(length),
            reverse=True,
        )

    def log_final_standings(self) -> None:
        if not self.verbose:
            return
        self.log_info(f"{'':>15}=== LEADERBOARD ===")
        winner = self.winner
        for rank, racer in enumerate(self.standings(), start=1):
            if racer is winner:
                status = "🏆"
            elif not racer.alive:
                status = "💀 Wrecked"
            else:
                status = ""
            self.log_info(
                f"{rank:>2} - {racer.name:<10} Lap: {racer.position.lap + 1:<3} "
                f"Turn: {racer.position.turn:<4} {status}",
            )

    # --- Accessors ---
    @property
    def winner(self) -> Racer | None:
        if self.state.winner_idx is None:
            return None
        return self.state.racers[self.state.winner_idx]

    def snapshot(self) -> tuple[RacerSnapshot, ...]:
        return tuple(
            RacerSnapshot.of(idx, racer) for idx, racer in enumerate(self.state.racers)
        )

    def get_agent(self, racer_idx: int) -> Agent:
        return self.agents[racer_idx]

    def get_racer(self, idx: int) -> Racer:
        return self.state.racers[idx]

    def racer_repr(self, idx: int) -> str:
        return f"{idx}:{self.state.racers[idx].name}"

    # -- Logging --
    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Core logging helper; respects engine verbosity."""
        if not self.verbose:
            return
        self._logger.log(level, msg, *args, **kwargs)

    def log_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def log_info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def log_warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)
