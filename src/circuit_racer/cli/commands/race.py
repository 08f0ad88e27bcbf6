"""CLI command for an interactive race at the console."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import TYPE_CHECKING, Annotated

import cappa
import msgspec
from rich.console import Console
from rich.prompt import Prompt

from circuit_racer.ai.agent import HumanAgent
from circuit_racer.cli.converters import parse_house_rules, validate_circuit_name
from circuit_racer.cli.display import leaderboard_table, render_board, render_tick
from circuit_racer.core.errors import ConfigError
from circuit_racer.core.types import CircuitName, Human
from circuit_racer.engine.logging import configure_logging
from circuit_racer.engine.scenario import RaceScenario
from circuit_racer.simulation.config import (
    DEFAULT_NPCS,
    PartialRaceConfig,
    RaceConfig,
    RacerEntry,
    build_circuit,
)

if TYPE_CHECKING:
    from circuit_racer.ai.agent import Agent, DecisionContext, PromptCallback
    from circuit_racer.core.state import TickReport
    from circuit_racer.core.types import Decision
    from circuit_racer.engine.race_engine import RaceEngine

logger = logging.getLogger(__name__)

CHOICES: dict[str, Decision] = {
    "1": "slow_down",
    "2": "speed_up",
    "3": "keep",
    "h": "pitstop",
}


def console_prompt(console: Console) -> PromptCallback:
    """Build a prompt that asks the human driver what to do this tick."""

    def _ask(ctx: DecisionContext) -> Decision:
        me = ctx.me
        options = [
            f"[bold]{me.name}[/bold]",
            "1 - Decrease Speed",
            "2 - Increase Speed",
            "3 - Keep Your Speed",
        ]
        choices = ["1", "2", "3"]
        if ctx.can_pitstop:
            options.append("H - Pitstop (resets your health and speed)")
            choices.append("h")
        console.print("\n".join(options))
        answer = Prompt.ask(
            "Your move",
            console=console,
            choices=choices,
            default="3",
            case_sensitive=False,
            show_choices=False,
        )
        return CHOICES[answer.lower()]

    return _ask


def run_console_race(
    config: RaceConfig,
    console: Console,
    *,
    prompt: PromptCallback | None = None,
    delay: float = 0.5,
) -> RaceEngine:
    """
    Run a race, drawing the board after every tick.

    Args:
        config: The race configuration.
        console: Where to draw.
        prompt: Asks human drivers for their decision.
        delay: Pause between ticks once no human is left driving.
    """
    racer_configs = config.racer_configs()
    agents: dict[int, Agent] = {}
    if prompt is not None:
        agents = {
            idx: HumanAgent(prompt)
            for idx, cfg in enumerate(racer_configs)
            if cfg.brain is None
        }

    def on_tick(engine: RaceEngine, report: TickReport) -> None:
        render_tick(console, engine, report)
        humans_driving = any(
            r.alive and isinstance(r.ai, Human) for r in engine.state.racers
        )
        if engine.state.race_active and not humans_driving:
            time.sleep(delay)

    scenario = RaceScenario(
        racers_config=racer_configs,
        circuit=build_circuit(config.circuit),
        rules=config.build_rules(),
        seed=config.seed,
        agents=agents,
        on_tick=on_tick,
    )

    logger.info(config.repr)
    render_board(console, scenario.engine)
    try:
        scenario.run_race()
    except Exception:
        logger.exception("Race Error")
        raise

    engine = scenario.engine
    if engine.winner is not None:
        console.print(f"[bold #ffaf00]{engine.winner.name} wins![/]")
    elif engine.state.error_code is not None:
        console.print(f"[bold red]Race abandoned ({engine.state.error_code}).[/]")
    else:
        console.print("[bold red]Nobody made it to the finish.[/]")
    console.print(leaderboard_table(engine))
    return engine


@cappa.command(
    name="race",
    help="Race against the NPCs at the console.",
)
@dataclass
class RaceCommand:
    name: Annotated[
        str | None,
        cappa.Arg(short="-n", long="--name", help="Your driver's name."),
    ] = None
    spectate: Annotated[
        bool,
        cappa.Arg(long="--spectate", help="Let the NPCs race on their own."),
    ] = False
    circuit: Annotated[
        CircuitName | None,
        cappa.Arg(
            short="-t",
            long="--circuit",
            parse=validate_circuit_name,
            help="Circuit name.",
        ),
    ] = None
    seed: Annotated[
        int | None,
        cappa.Arg(short="-s", long="--seed", help="RNG seed."),
    ] = None
    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    house_rules: Annotated[
        list[str] | None,
        cappa.Arg(
            short="-H",
            long="--houserule",
            num_args=-1,
            help="House rules as key=value.",
        ),
    ] = None
    delay: Annotated[
        float,
        cappa.Arg(long="--delay", help="Seconds between ticks with no human driving."),
    ] = 0.5
    verbose: Annotated[
        bool,
        cappa.Arg(short="-v", long="--verbose", help="Show engine logs."),
    ] = False

    def build_config(self, console: Console) -> RaceConfig:
        racers: list[RacerEntry] = list(DEFAULT_NPCS)
        circuit: CircuitName = "standard"
        seed: int | None = None
        rules: dict[str, int | float | str | bool] = {}

        # 1. Load File (Low Priority)
        if self.config_file:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise cappa.Exit(msg, code=1)
            try:
                file_conf = PartialRaceConfig.from_toml(self.config_file)
            except msgspec.DecodeError as e:
                msg = f"Invalid TOML config: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904

            if file_conf.racers:
                racers = file_conf.racers
            if file_conf.circuit:
                circuit = file_conf.circuit
            if file_conf.seed is not None:
                seed = file_conf.seed
            if file_conf.rules:
                rules.update(file_conf.rules)

        # 2. CLI Args (High Priority)
        if self.circuit:
            circuit = self.circuit
        if self.seed is not None:
            seed = self.seed
        if self.house_rules:
            rules.update(parse_house_rules(self.house_rules))

        # 3. The human driver goes first, unless spectating
        if self.spectate:
            racers = [r for r in racers if r.brain is not None]
        elif not any(r.brain is None for r in racers):
            name = self.name or Prompt.ask("Pick a name!", console=console)
            racers.insert(0, RacerEntry(name.strip() or "Driver"))

        return RaceConfig(
            racers=tuple(racers),
            circuit=circuit,
            seed=seed,
            rules=rules,
        )

    def __call__(self):
        configure_logging(logging.DEBUG if self.verbose else logging.WARNING)
        console = Console()
        config = self.build_config(console)

        try:
            run_console_race(
                config,
                console,
                prompt=console_prompt(console),
                delay=self.delay,
            )
        except ConfigError as e:
            raise cappa.Exit(str(e), code=1) from e
