from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, override

from circuit_racer.core.types import NPC, Brain, Decision, Human

if TYPE_CHECKING:
    from circuit_racer.core.circuit import Circuit
    from circuit_racer.core.racer import Racer
    from circuit_racer.core.types import AI


@dataclass(frozen=True, slots=True)
class RacerSnapshot:
    """Read-only view of one racer, taken before anyone acts."""

    idx: int
    name: str
    lap: int
    turn: int
    speed: int
    hp: int
    alive: bool

    @classmethod
    def of(cls, idx: int, racer: Racer) -> RacerSnapshot:
        return cls(
            idx=idx,
            name=racer.name,
            lap=racer.position.lap,
            turn=racer.position.turn,
            speed=racer.speed,
            hp=racer.hp,
            alive=racer.alive,
        )


@dataclass(frozen=True, slots=True)
class DecisionContext:
    racer_idx: int
    snapshot: tuple[RacerSnapshot, ...]
    circuit: Circuit
    can_pitstop: bool

    @property
    def me(self) -> RacerSnapshot:
        return self.snapshot[self.racer_idx]

    def rivals(self) -> list[RacerSnapshot]:
        return [s for s in self.snapshot if s.idx != self.racer_idx and s.alive]


class Agent:
    """Base Agent class."""

    def decide(self, ctx: DecisionContext) -> Decision:
        _ = ctx
        return "keep"


PromptCallback = Callable[[DecisionContext], Decision]


@dataclass
class HumanAgent(Agent):
    """Asks whoever sits at the console through `prompt`."""

    prompt: PromptCallback

    @override
    def decide(self, ctx: DecisionContext) -> Decision:
        return self.prompt(ctx)


BrainBehavior = Callable[[DecisionContext], Decision]


def _idle(ctx: DecisionContext) -> Decision:
    _ = ctx
    return "keep"


# Every brain currently holds its speed. Entries are looked up per tag so a
# brain can get its own behaviour without touching the engine.
BRAIN_BEHAVIORS: dict[Brain, BrainBehavior] = {
    "Nocombat": _idle,
    "Aggressive": _idle,
    "Beast": _idle,
    "Deathwish": _idle,
    "Lurker": _idle,
    "Slug": _idle,
}


@dataclass
class BrainAgent(Agent):
    brain: Brain

    @override
    def decide(self, ctx: DecisionContext) -> Decision:
        return BRAIN_BEHAVIORS[self.brain](ctx)


def agent_for(ai: AI, prompt: PromptCallback | None = None) -> Agent:
    """Build the controller for an AI tag.

    Humans without a prompt fall back to the base Agent, which never acts.
    """
    match ai:
        case NPC(brain=brain):
            return BrainAgent(brain)
        case Human():
            return HumanAgent(prompt) if prompt is not None else Agent()
