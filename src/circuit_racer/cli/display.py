"""Terminal rendering of the circuit, the racers and their logs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from circuit_racer.core.labels import speed_label
from circuit_racer.engine.logging import RaceLogHighlighter

if TYPE_CHECKING:
    from rich.console import Console

    from circuit_racer.core.circuit import Circuit
    from circuit_racer.core.racer import Racer
    from circuit_racer.core.state import TickReport
    from circuit_racer.engine.race_engine import RaceEngine

TURN_COLORS: dict[int, str] = {
    1: "white",
    2: "blue",
    3: "cyan",
    4: "magenta",
    5: "yellow",
    6: "red",
}

HIGHLIGHTER = RaceLogHighlighter()


def turn_style(ranking: int, *, bright: bool = False) -> str:
    color = TURN_COLORS.get(ranking, "default")
    return f"bold {color}" if bright else color


def circuit_strip(circuit: Circuit) -> Text:
    """One coloured '#' per turn."""
    text = Text()
    for ranking in circuit.turns:
        text.append("#", style=turn_style(ranking, bright=True))
    return text


def range_bar(circuit: Circuit, racer: Racer) -> Text:
    """
    The racer's initial at its position followed by an arrow covering its
    move range, coloured by the hardest turn in that range.

        A-->
         B>
    """
    length = circuit.length()
    turn = racer.position.turn
    reach = racer.move_range()
    arrow_style = turn_style(racer.next_turn(circuit), bright=True)

    text = Text()
    for i in range(turn):
        text.append("#", style=turn_style(circuit.difficulty_at(i)))
    text.append(racer.shortname, style="bold" if racer.alive else "strike red")
    arrow = "-" * (reach - 1) + ">"
    text.append(arrow[: max(length - turn - 1, 0)], style=arrow_style)
    for i in range(turn + reach + 1, length):
        text.append("#", style=turn_style(circuit.difficulty_at(i)))
    return text


def progress_bar(racer: Racer, laps: int, circuit_length: int) -> Text:
    """
    Every step of every lap, filled up to the racer's position.

    lap 2 turn 1 on a 9-turn circuit gives
    |#########|##-------|
    """
    done = racer.total_steps(circuit_length)
    fill = "bold blue" if racer.alive else "red"
    text = Text()
    for lap in range(laps):
        text.append("|")
        for turn in range(circuit_length):
            if lap * circuit_length + turn <= done:
                text.append("#", style=fill)
            else:
                text.append("-")
    text.append("|")
    return text


def info_line(racer: Racer, laps: int, circuit: Circuit) -> Text:
    text = Text.assemble(
        (racer.name, "bold"),
        "\tHP ",
        (str(racer.hp), "bold red"),
        "\tSpeed ",
        (speed_label(racer.speed), "bold green"),
        "\tLap ",
        (str(racer.position.lap + 1), "yellow"),
        "\tSteps Left ",
        (str(circuit.length() - racer.position.turn), "yellow"),
        "\n",
    )
    text.append_text(progress_bar(racer, laps, circuit.length()))
    return text


def render_log(report: TickReport) -> Text:
    text = Text("\n".join(report.lines()))
    HIGHLIGHTER.highlight(text)
    return text


def render_board(console: Console, engine: RaceEngine) -> None:
    circuit = engine.state.circuit
    laps = engine.state.rules.laps
    console.print(circuit_strip(circuit))
    for racer in engine.state.racers:
        console.print(range_bar(circuit, racer))
    console.print()
    for racer in engine.state.racers:
        console.print(info_line(racer, laps, circuit))
    console.print()


def render_tick(console: Console, engine: RaceEngine, report: TickReport) -> None:
    console.clear()
    console.rule(f"Tick {report.tick}")
    console.print(render_log(report))
    console.print()
    render_board(console, engine)


def leaderboard_table(engine: RaceEngine) -> Table:
    table = Table(title="Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("Racer")
    table.add_column("Lap", justify="right")
    table.add_column("Turn", justify="right")
    table.add_column("Status")

    winner = engine.winner
    for rank, racer in enumerate(engine.standings(), start=1):
        if racer is winner:
            status = "🏆 Winner"
        elif not racer.alive:
            status = "💀 Wrecked"
        else:
            status = str(racer)
        table.add_row(
            str(rank),
            racer.name,
            str(racer.position.lap + 1),
            str(racer.position.turn),
            status,
        )
    return table
