from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from circuit_racer.core.errors import ConfigError
from circuit_racer.engine.roll import DEFAULT_DIE_HIGH, DEFAULT_DIE_LOW

if TYPE_CHECKING:
    from collections.abc import Mapping

    from circuit_racer.core.circuit import Circuit
    from circuit_racer.core.racer import Racer
    from circuit_racer.core.types import ErrorCode


@dataclass(slots=True)
class RaceRules:
    """House rules. Every field can be overridden from config or `-H key=value`."""

    laps: int = 3
    die_low: int = DEFAULT_DIE_LOW
    die_high: int = DEFAULT_DIE_HIGH
    # Keep the steps past the start/finish line instead of resetting to turn 0.
    carry_lap_remainder: bool = False
    max_ticks: int = 500


def apply_house_rules(
    rules: RaceRules,
    overrides: Mapping[str, int | float | str | bool],
) -> RaceRules:
    known = {f.name: f for f in fields(rules)}
    for key, value in overrides.items():
        if key not in known:
            msg = f"Unknown house rule '{key}'. Known rules: {', '.join(known)}"
            raise ConfigError(msg)
        if known[key].type == "bool":
            value = _as_bool(key, value)
        elif isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, bool) or not isinstance(value, int):
            msg = f"House rule '{key}' expects an integer, got {value!r}"
            raise ConfigError(msg)
        setattr(rules, key, value)
    if rules.laps < 1:
        msg = f"A race needs at least one lap, got laps={rules.laps}"
        raise ConfigError(msg)
    if rules.die_low > rules.die_high:
        msg = f"Die range is empty: die_low={rules.die_low} > die_high={rules.die_high}"
        raise ConfigError(msg)
    if rules.max_ticks < 1:
        msg = f"max_ticks must be at least 1, got {rules.max_ticks}"
        raise ConfigError(msg)
    return rules


def _as_bool(key: str, value: int | float | str | bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "yes", "on", "1"}:
        return True
    if isinstance(value, str) and value.lower() in {"false", "no", "off", "0"}:
        return False
    if isinstance(value, int) and value in {0, 1}:
        return bool(value)
    msg = f"House rule '{key}' expects true/false, got {value!r}"
    raise ConfigError(msg)


@dataclass(slots=True)
class RaceState:
    racers: list[Racer]
    circuit: Circuit
    rules: RaceRules = field(default_factory=RaceRules)
    tick: int = 0
    race_active: bool = True
    winner_idx: int | None = None
    error_code: ErrorCode | None = None

    @property
    def race_over(self) -> bool:
        return not self.race_active

    def any_alive(self) -> bool:
        return any(r.alive for r in self.racers)


@dataclass(frozen=True, slots=True)
class TickReport:
    """Events of one tick, one list of messages per racer index."""

    tick: int
    logs: tuple[tuple[str, ...], ...]

    def lines(self) -> list[str]:
        return [msg for racer_log in self.logs for msg in racer_log if msg]


@dataclass(slots=True)
class LogContext:
    """Per-race logging state."""

    tick: int = 0
    tick_log_count: int = 0
    current_racer_repr: str = "_"

    def new_tick(self):
        self.tick += 1

    def start_turn_log(self, racer_repr: str):
        self.tick_log_count = 0
        self.current_racer_repr = racer_repr

    def inc_log_count(self):
        self.tick_log_count += 1
