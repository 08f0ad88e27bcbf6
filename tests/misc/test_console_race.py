import io

import cappa
import pytest
from rich.console import Console

from circuit_racer.ai.agent import DecisionContext, RacerSnapshot
from circuit_racer.cli.commands import race as race_command
from circuit_racer.cli.commands.race import RaceCommand
from circuit_racer.core.circuit import Circuit
from circuit_racer.core.racer import Racer
from circuit_racer.simulation.config import DEFAULT_NPCS, RaceConfig, RacerEntry


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120, force_terminal=False), buffer


def test_spectated_race_runs_to_the_end():
    console, buffer = _console()
    config = RaceConfig(racers=DEFAULT_NPCS, circuit="oval", seed=7, rules={"laps": 1})

    engine = race_command.run_console_race(config, console, delay=0)

    assert engine.state.race_over
    output = buffer.getvalue()
    assert "Leaderboard" in output
    assert "Tick 1" in output


def test_human_driver_is_asked_every_tick():
    console, _ = _console()
    asked: list[DecisionContext] = []

    def prompt(ctx: DecisionContext):
        asked.append(ctx)
        return "keep"

    config = RaceConfig(
        racers=(RacerEntry("Ada"), RacerEntry("Roger", "Slug")),
        circuit="oval",
        seed=3,
        rules={"laps": 1, "max_ticks": 4},
    )

    engine = race_command.run_console_race(config, console, prompt=prompt, delay=0)

    assert asked
    assert all(ctx.me.name == "Ada" for ctx in asked)
    assert len(asked) <= engine.state.tick


def test_console_prompt_maps_answers(monkeypatch):
    console, _ = _console()
    monkeypatch.setattr(race_command.Prompt, "ask", lambda *args, **kwargs: "H")
    ask = race_command.console_prompt(console)

    ctx = DecisionContext(
        racer_idx=0,
        snapshot=(RacerSnapshot.of(0, Racer("Ada")),),
        circuit=Circuit((1, 1)),
        can_pitstop=True,
    )

    assert ask(ctx) == "pitstop"


def test_bad_house_rule_exits_cleanly():
    command = RaceCommand(spectate=True, house_rules=["die_low=7"], delay=0)

    with pytest.raises(cappa.Exit) as exc_info:
        command()

    assert exc_info.value.code == 1
