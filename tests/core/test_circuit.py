import pytest

from circuit_racer.core.circuit import CIRCUIT_DEFINITIONS, STANDARD_TURNS, Circuit
from circuit_racer.core.errors import EmptyCircuitError, InvalidRankingError


def test_difficulty_at_wraps_around_the_lap():
    circuit = Circuit((1, 2, 3))

    assert circuit.length() == 3
    assert [circuit.difficulty_at(i) for i in range(7)] == [1, 2, 3, 1, 2, 3, 1]


def test_window_past_the_last_turn_continues_at_the_first():
    circuit = Circuit((4, 1, 1, 2, 6))

    assert circuit.window(3, 3) == [2, 6, 4]
    assert circuit.window(0, 1) == [4]


def test_max_difficulty():
    assert Circuit((1, 3, 5, 2)).max_difficulty() == 5
    assert Circuit((2,)).max_difficulty() == 2


def test_empty_circuit_is_rejected():
    with pytest.raises(EmptyCircuitError):
        Circuit(())

    with pytest.raises(EmptyCircuitError):
        Circuit.from_rankings([])


def test_non_positive_ranking_is_rejected():
    with pytest.raises(InvalidRankingError) as excinfo:
        Circuit((1, 2, 0, 3))

    assert excinfo.value.index == 2
    assert excinfo.value.ranking == 0


def test_circuit_is_immutable():
    circuit = Circuit((1, 2))

    with pytest.raises(AttributeError):
        circuit.turns = (3, 4)  # pyright: ignore[reportAttributeAccessIssue]


def test_standard_circuit_matches_reference_layout():
    circuit = CIRCUIT_DEFINITIONS["standard"]()

    assert circuit.turns == STANDARD_TURNS
    assert circuit.length() == 28
    assert circuit.max_difficulty() == 5


@pytest.mark.parametrize("name", list(CIRCUIT_DEFINITIONS))
def test_every_named_circuit_builds(name):
    circuit = CIRCUIT_DEFINITIONS[name]()

    assert circuit.length() >= 3
    assert all(1 <= ranking <= 6 for ranking in circuit.turns)
