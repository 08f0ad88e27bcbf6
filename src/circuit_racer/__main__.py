from __future__ import annotations

from dataclasses import dataclass

import cappa

from circuit_racer.cli.commands.batch import BatchCommand  # noqa: TC001
from circuit_racer.cli.commands.race import (
    RaceCommand,  # noqa: TC001 # cappa needs to know about this at runtime
)


@dataclass
class Main:
    subcommand: cappa.Subcommands[RaceCommand | BatchCommand]


def main():
    cappa.invoke(Main)


if __name__ == "__main__":
    main()
