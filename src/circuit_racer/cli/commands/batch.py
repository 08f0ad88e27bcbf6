"""CLI command for batches of NPC-only races."""

from __future__ import annotations

import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import Annotated

import cappa
import msgspec
from tqdm import tqdm

from circuit_racer.core.errors import ConfigError
from circuit_racer.simulation.config import BatchConfig
from circuit_racer.simulation.runner import run_single_race


@cappa.command(
    name="batch",
    help="Run many NPC-only races and report how often each racer wins or wrecks.",
)
@dataclass
class BatchCommand:
    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    runs: Annotated[
        int | None,
        cappa.Arg(short="-r", long="--runs", help="Override: number of races."),
    ] = None
    seed_offset: Annotated[
        int | None,
        cappa.Arg(long="--seed-offset", help="Starting seed value."),
    ] = None

    def load_config(self) -> BatchConfig:
        if self.config_file is None:
            config = BatchConfig()
        elif not self.config_file.exists():
            msg = f"Config file not found: {self.config_file}"
            raise cappa.Exit(msg, code=1)
        else:
            try:
                config = BatchConfig.from_toml(self.config_file)
            except msgspec.DecodeError as e:
                msg = f"Invalid TOML config: {e}"
                raise cappa.Exit(msg, code=1)  # noqa: B904

        # CLI overrides
        if self.runs is not None:
            config.runs = self.runs
        if self.seed_offset is not None:
            config.seed_offset = self.seed_offset
        return config

    def __call__(self) -> int:
        config = self.load_config()

        tqdm.write(f"Racers: {', '.join(r.name for r in config.racers)}")
        tqdm.write(f"Circuit: {config.circuit}")
        tqdm.write(f"Runs: {config.runs}")
        tqdm.write("")

        wins: Counter[str] = Counter()
        wrecks: Counter[str] = Counter()
        aborted = 0
        total_ticks = 0
        completed = 0

        try:
            with tqdm(
                desc="Racing",
                unit="race",
                total=config.runs,
                dynamic_ncols=True,
            ) as pbar:
                for race_config in config.race_configs():
                    result = run_single_race(race_config)
                    if result.aborted:
                        aborted += 1
                    else:
                        completed += 1
                        total_ticks += result.tick_count
                        if result.winner:
                            wins[result.winner] += 1
                    wrecks.update(result.wrecked)
                    pbar.update(1)
        except ConfigError as e:
            raise cappa.Exit(str(e), code=1) from e

        avg_ticks = total_ticks / completed if completed else 0.0
        tqdm.write(f"\nCompleted: {completed}  Aborted: {aborted}")
        tqdm.write(f"Average ticks per race: {avg_ticks:.1f}")
        for racer in config.racers:
            tqdm.write(
                f"  {racer.name:<10} wins: {wins[racer.name]:<5} "
                f"wrecked: {wrecks[racer.name]}",
            )
        no_winner = completed - sum(wins.values())
        if no_winner:
            tqdm.write(f"  {'(nobody)':<10} wins: {no_winner}")

        return 0


def main():
    """Entry point for running the batch command on its own."""
    cappa.invoke(BatchCommand)


if __name__ == "__main__":
    sys.exit(main())
