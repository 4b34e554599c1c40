"""
Shared pytest fixtures for tie sheet engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tiesheet.models import Team, Player
from tiesheet.settings import BracketSettings


def seeded_teams(count):
    """Teams T1..Tn seeded 1..n."""
    return [Team(id=f"t{i}", name=f"Team {i}", seed=i) for i in range(1, count + 1)]


@pytest.fixture
def make_teams():
    """Factory for seeded team lists of any size."""
    return seeded_teams


@pytest.fixture
def four_teams():
    return seeded_teams(4)


@pytest.fixture
def five_teams():
    return seeded_teams(5)


@pytest.fixture
def eight_teams():
    return seeded_teams(8)


@pytest.fixture
def team_with_players():
    """A team carrying a roster of players."""
    return Team(
        id="eagles",
        name="Eagles",
        seed=1,
        players=[
            Player(id="p1", name="Alice", position="Setter", number="7"),
            Player(id="p2", name="Bob"),
        ],
    )


@pytest.fixture
def cascade_settings():
    return BracketSettings(cascade_invalidation=True)


@pytest.fixture(autouse=True)
def clear_settings_env(monkeypatch):
    """Keep TIESHEET_* variables from the host out of the tests."""
    for name in ('TIESHEET_CASCADE_INVALIDATION', 'TIESHEET_RESEED_MISMATCH', 'TIESHEET_SETTINGS_FILE'):
        monkeypatch.delenv(name, raising=False)
