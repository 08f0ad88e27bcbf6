from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from circuit_racer.core import LOGGER_NAME
from circuit_racer.core.errors import LapOverflowError
from circuit_racer.core.labels import speed_label, turn_label
from circuit_racer.core.types import AI, MAX_SPEED, MIN_SPEED, Human

if TYPE_CHECKING:
    from circuit_racer.core.circuit import Circuit
    from circuit_racer.engine.roll import Dice

logger = logging.getLogger(f"{LOGGER_NAME}.racer")


@dataclass(slots=True)
class Position:
    """A position in laps and turns."""

    lap: int = 0
    turn: int = 0


@dataclass(frozen=True, slots=True)
class TurnOutcome:
    """Result of one call to `Racer.make_turn`."""

    roll: int
    need: int
    steps: int  # steps actually moved

    @property
    def diff(self) -> int:
        return self.roll - self.need

    @property
    def success(self) -> bool:
        return self.diff >= 0


@dataclass(slots=True)
class Racer:
    """A car on the circuit and everything it knows about itself.

    New racers start at lap 0, turn 0, crawling, with no HP until
    `reset_hp` is called. Events are collected per turn in `log`; the race
    loop drains one bucket per tick through `get_log`.
    """

    name: str
    ai: AI = field(default_factory=Human)
    hp: int = 0
    position: Position = field(default_factory=Position)
    speed: int = MIN_SPEED
    alive: bool = True
    turn_index: int = 0
    log: list[list[str]] = field(default_factory=lambda: [[]])

    def __str__(self) -> str:
        return (
            f"{self.name} is {speed_label(self.speed)} "
            f"through lap {self.position.lap + 1}!"
        )

    @property
    def shortname(self) -> str:
        return self.name[:1]

    def _record(self, msg: str) -> None:
        self.log[self.turn_index].append(msg)
        logger.debug(msg)

    # --- HP ---
    def reset_hp(self, circuit: Circuit) -> None:
        """Set HP to two more than the hardest turn of the circuit."""
        self.hp = circuit.max_difficulty() + 2

    def take_damage(self, value: int) -> None:
        self.hp -= value
        plural = "" if value == 1 else "s"
        self._record(f"{self.name}'s car takes {value} point{plural} of damage!")
        if self.hp <= 0:
            self._record(
                f"{self.name}'s car is totalled! {self.name} is out of the race!",
            )
            self.alive = False
            self.hp = 0

    # --- Speed ---
    def speed_up(self) -> None:
        if self.speed < MAX_SPEED:
            self.speed += 1
            self._record(
                f"{self.name} speeds up to '{speed_label(self.speed)}' speed!",
            )

    def slow_down(self) -> None:
        if self.speed > MIN_SPEED:
            self.speed -= 1
            self._record(
                f"{self.name} slows down to '{speed_label(self.speed)}' speed!",
            )

    def move_range(self) -> int:
        """Steps taken on a successful turn: 1 when slow, 2 when cruising, 3 when fast."""
        if self.speed < 0:
            return 1
        if self.speed == 0:
            return 2
        return 3

    # --- Pitstop ---
    def can_pitstop(self, circuit: Circuit) -> bool:
        """The pits are reachable when the rest of the lap fits in the move range."""
        return self.move_range() + self.position.turn >= circuit.length()

    def pitstop(self, circuit: Circuit) -> None:
        self.reset_hp(circuit)
        self.speed = MIN_SPEED
        self._record(f"{self.name} pulls into the pits!")

    # --- Movement ---
    def total_steps(self, circuit_length: int) -> int:
        return self.position.lap * circuit_length + self.position.turn

    def move_steps(
        self,
        steps: int,
        circuit_length: int,
        *,
        carry_remainder: bool = False,
    ) -> None:
        """Advance along the circuit.

        Crossing the start/finish line bumps the lap and puts the racer back
        on turn 0; any excess steps are dropped. With `carry_remainder` the
        excess is kept and every line crossing counts.
        """
        if steps < 0:
            msg = f"Cannot move a negative number of steps ({steps})."
            raise ValueError(msg)

        target = self.position.turn + steps

        if carry_remainder:
            laps_crossed, self.position.turn = divmod(target, circuit_length)
            for _ in range(laps_crossed):
                self._cross_line()
            return

        if target >= 2 * circuit_length:
            raise LapOverflowError(self.position.turn, steps, circuit_length)

        self.position.turn = target
        if self.position.turn >= circuit_length:
            self._cross_line()
            self.position.turn = 0

    def _cross_line(self) -> None:
        self.position.lap += 1
        self._record(
            f"{self.name} crosses the start/finish line, "
            f"entering lap {self.position.lap + 1}!",
        )

    # --- Turn resolution ---
    def next_turn(self, circuit: Circuit) -> int:
        """Hardest turn ranking within the racer's move range."""
        return max(circuit.window(self.position.turn, self.move_range()))

    def eval_difficulty(self, circuit: Circuit) -> int:
        """The roll needed to make the next turn."""
        return self.speed + self.next_turn(circuit)

    def make_turn(
        self,
        circuit: Circuit,
        dice: Dice,
        *,
        carry_remainder: bool = False,
    ) -> TurnOutcome | None:
        """Attempt the upcoming turns.

        Success moves the full range. Failure costs HP equal to the shortfall
        and, if the car survives, moves one step less. Eliminated racers do
        nothing. A move that would span two lap boundaries raises
        `LapOverflowError` before anything is logged or damaged.
        """
        if not self.alive:
            logger.debug("Skipping turn because %s is out of the race.", self.name)
            return None

        need = self.eval_difficulty(circuit)
        roll = dice.roll()
        diff = roll - need
        step = self.move_range()
        label = turn_label(self.next_turn(circuit))

        if diff >= 0:
            moved = step
        else:
            moved = step - 1 if self.hp + diff > 0 else 0

        # Nothing is recorded until the move is known to fit.
        if not carry_remainder and self.position.turn + moved >= 2 * circuit.length():
            raise LapOverflowError(self.position.turn, moved, circuit.length())

        if diff >= 0:
            self._record(f"{self.name} makes the {label} turn!")
        else:
            self._record(f"{self.name} fails the {label} turn!")
            self.take_damage(-diff)

        if moved:
            self.move_steps(moved, circuit.length(), carry_remainder=carry_remainder)

        return TurnOutcome(roll=roll, need=need, steps=moved)

    # --- Log ---
    def get_log(self) -> list[str]:
        """Hand out this turn's events and open a fresh bucket for the next one.

        A turn without events reads as a single empty line.
        """
        if len(self.log) <= self.turn_index:
            return [""]
        entries = self.log[self.turn_index]
        self.turn_index += 1
        self.log.append([])
        return list(entries) or [""]
