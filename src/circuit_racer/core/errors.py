class CircuitRacerError(Exception):
    """Base class for all errors raised by circuit_racer."""


class EmptyCircuitError(CircuitRacerError, ValueError):
    def __init__(self) -> None:
        super().__init__("A circuit needs at least one turn.")


class InvalidRankingError(CircuitRacerError, ValueError):
    def __init__(self, index: int, ranking: int) -> None:
        super().__init__(
            f"Turn {index} has ranking {ranking}; rankings must be positive.",
        )
        self.index = index
        self.ranking = ranking


class LapOverflowError(CircuitRacerError, ValueError):
    """A single move would cross the start/finish line more than once."""

    def __init__(self, turn: int, steps: int, circuit_length: int) -> None:
        super().__init__(
            f"Moving {steps} steps from turn {turn} spans more than one lap "
            f"of a {circuit_length}-turn circuit.",
        )
        self.turn = turn
        self.steps = steps
        self.circuit_length = circuit_length


class ConfigError(CircuitRacerError):
    """Invalid race setup (unknown circuit, unknown house rule, empty roster)."""
