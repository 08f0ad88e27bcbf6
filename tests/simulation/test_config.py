import pytest

from circuit_racer.core.errors import ConfigError
from circuit_racer.core.state import RaceRules, apply_house_rules
from circuit_racer.simulation.config import (
    DEFAULT_NPCS,
    BatchConfig,
    PartialRaceConfig,
    RaceConfig,
    RacerEntry,
    build_circuit,
)
from circuit_racer.simulation.runner import run_single_race

BATCH_TOML = """
circuit = "oval"
runs = 3
seed_offset = 10

[rules]
laps = 1

[[racers]]
name = "Roger"
brain = "Slug"

[[racers]]
name = "Max"
brain = "Aggressive"
"""


def test_batch_config_from_toml(tmp_path):
    path = tmp_path / "batch.toml"
    path.write_text(BATCH_TOML)

    config = BatchConfig.from_toml(path)

    assert config.circuit == "oval"
    assert config.runs == 3
    assert config.rules == {"laps": 1}
    assert config.racers == [RacerEntry("Roger", "Slug"), RacerEntry("Max", "Aggressive")]
    assert [c.seed for c in config.race_configs()] == [10, 11, 12]


def test_batch_config_defaults_to_the_npc_field():
    config = BatchConfig()

    assert config.racers == list(DEFAULT_NPCS)
    assert config.circuit == "standard"


def test_batch_rejects_human_drivers():
    config = BatchConfig(racers=[RacerEntry("Ada"), RacerEntry("Roger", "Slug")])

    with pytest.raises(ConfigError, match="Ada"):
        list(config.race_configs())


def test_partial_race_config_from_toml(tmp_path):
    path = tmp_path / "race.toml"
    path.write_text(
        'seed = 3\n[[racers]]\nname = "Ada"\n[[racers]]\nname = "Nick"\nbrain = "Nocombat"\n',
    )

    config = PartialRaceConfig.from_toml(path)

    assert config.seed == 3
    assert config.circuit is None
    assert config.racers == [RacerEntry("Ada"), RacerEntry("Nick", "Nocombat")]


def test_race_config_builds_racers_and_rules():
    config = RaceConfig(
        racers=(RacerEntry("Ada"), RacerEntry("Roger", "Slug")),
        rules={"laps": 5, "carry_lap_remainder": True},
    )

    rules = config.build_rules()
    racer_configs = config.racer_configs()

    assert rules.laps == 5
    assert rules.carry_lap_remainder is True
    assert rules.die_high == 6
    assert [c.brain for c in racer_configs] == [None, "Slug"]


def test_race_config_hash_depends_on_the_seed():
    a = RaceConfig(racers=DEFAULT_NPCS, seed=1)
    b = RaceConfig(racers=DEFAULT_NPCS, seed=1)
    c = RaceConfig(racers=DEFAULT_NPCS, seed=2)

    assert a.compute_hash() == b.compute_hash()
    assert a.compute_hash() != c.compute_hash()


def test_empty_roster_is_rejected():
    with pytest.raises(ConfigError):
        RaceConfig(racers=()).racer_configs()


def test_unknown_house_rule_is_rejected():
    with pytest.raises(ConfigError, match="Unknown house rule 'turbo'"):
        apply_house_rules(RaceRules(), {"turbo": 1})


def test_house_rules_coerce_values():
    rules = apply_house_rules(
        RaceRules(),
        {"carry_lap_remainder": "yes", "die_low": -1.0, "max_ticks": 50},
    )

    assert rules.carry_lap_remainder is True
    assert rules.die_low == -1
    assert rules.max_ticks == 50


@pytest.mark.parametrize(
    "overrides",
    [
        {"laps": 0},
        {"laps": "three"},
        {"carry_lap_remainder": "maybe"},
        {"laps": 2.5},
        {"die_low": 7},
        {"die_low": 3, "die_high": 2},
        {"max_ticks": 0},
    ],
)
def test_bad_house_rule_values(overrides):
    with pytest.raises(ConfigError):
        apply_house_rules(RaceRules(), overrides)


def test_empty_die_range_is_a_config_error():
    with pytest.raises(ConfigError, match="die_low=7 > die_high=6"):
        apply_house_rules(RaceRules(), {"die_low": 7})


def test_race_needs_at_least_one_tick():
    with pytest.raises(ConfigError, match="max_ticks"):
        RaceConfig(racers=DEFAULT_NPCS, rules={"max_ticks": -1}).build_rules()


def test_unknown_circuit():
    with pytest.raises(ConfigError, match="Unknown circuit"):
        build_circuit("monaco")


def test_single_race_is_reproducible_from_its_seed():
    config = RaceConfig(racers=DEFAULT_NPCS, circuit="oval", seed=1234)

    first = run_single_race(config)
    second = run_single_race(config)

    assert first.tick_count > 0
    assert first.tick_count == second.tick_count
    assert first.winner == second.winner
    assert first.standings == second.standings
    assert first.wrecked == second.wrecked
    assert first.config_hash == config.compute_hash()
