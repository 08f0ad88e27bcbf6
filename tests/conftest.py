import pytest
from tests.test_utils import RaceScenario


@pytest.fixture
def scenario():
    """Factory fixture to create scenarios."""

    def _builder(racers_config, dice_rolls=None, **kwargs):
        return RaceScenario(racers_config, dice_rolls, **kwargs)

    return _builder
