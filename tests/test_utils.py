from unittest.mock import MagicMock

from circuit_racer.ai.agent import Agent
from circuit_racer.core.circuit import STANDARD_TURNS, Circuit
from circuit_racer.core.racer import Racer
from circuit_racer.core.state import RaceRules, RaceState, TickReport
from circuit_racer.engine import scenario as race_scenario
from circuit_racer.engine.race_engine import RaceEngine
from circuit_racer.engine.roll import Dice
from circuit_racer.engine.scenario import RacerConfig

__all__ = ["RaceScenario", "RacerConfig", "scripted_dice"]


def scripted_dice(*rolls: int) -> Dice:
    """A Dice whose rolls come out in the given order."""
    rng = MagicMock()
    rng.randint.side_effect = list(rolls)
    return Dice(rng)


class RaceScenario:
    """
    A reusable harness around the package's RaceScenario with a scripted RNG.
    """

    def __init__(
        self,
        racers_config: list[RacerConfig],
        dice_rolls: list[int] | None = None,
        circuit: Circuit | None = None,
        rules: RaceRules | None = None,
        agents: dict[int, Agent] | None = None,
    ):
        # 1. Mock the RNG
        self.mock_rng: MagicMock = MagicMock()

        # 2. Build the race the same way the CLI does
        self.circuit: Circuit = circuit or Circuit(STANDARD_TURNS)
        self.scenario: race_scenario.RaceScenario = race_scenario.RaceScenario(
            racers_config,
            self.circuit,
            rules=rules or RaceRules(),
            agents=agents or {},
            rng=self.mock_rng,
        )
        self.engine: RaceEngine = self.scenario.engine

        if dice_rolls:
            self.set_dice_rolls(dice_rolls)

    @property
    def state(self) -> RaceState:
        return self.engine.state

    def set_dice_rolls(self, rolls: list[int]):
        """Script the dice rolls (e.g., [1, 6])."""
        self.mock_rng.randint.side_effect = rolls  # pyright: ignore[reportAny]

    def always_roll(self, value: int):
        self.mock_rng.randint.side_effect = None
        self.mock_rng.randint.return_value = value

    def run_tick(self) -> TickReport:
        return self.engine.run_tick()

    def run_ticks(self, n: int) -> list[TickReport]:
        return [self.engine.run_tick() for _ in range(n)]

    def get_racer(self, idx: int) -> Racer:
        return self.engine.get_racer(idx)
