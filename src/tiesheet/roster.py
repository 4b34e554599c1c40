"""
Team list helpers: loading, adding and removing teams before a bracket
is built or reseeded.
"""
import uuid
import logging
import yaml

from tiesheet.models import Team

logger = logging.getLogger(__name__)


def load_teams(file_path):
    """
    Load a team list from YAML. The file holds a list of team mappings
    (id, name, seed, players), or a mapping with a 'teams' key.
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    if isinstance(data, dict):
        data = data.get('teams') or []
    if not isinstance(data, list):
        raise ValueError(f"{file_path} must contain a list of teams")
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"{file_path}: team entry must be a mapping, got {entry!r}")
    teams = [Team.from_dict(entry) for entry in data]
    logger.debug(f"Loaded {len(teams)} teams from {file_path}")
    return teams


def add_team(teams, name, seed=None, players=None):
    """Add a new team; unseeded teams go to the back of the seeding."""
    name = (name or '').strip()
    if not name:
        raise ValueError("Team name is required")
    team = Team(
        id=str(uuid.uuid4()),
        name=name,
        seed=seed if seed is not None else len(teams) + 1,
        players=players,
    )
    return list(teams) + [team]


def add_existing_team(teams, team):
    """Add a stored team unless it is already on the list."""
    if any(t.id == team.id for t in teams):
        return list(teams)
    if team.seed is None:
        team = Team(team.id, team.name, len(teams) + 1, team.players)
    return list(teams) + [team]


def remove_team(teams, team_id):
    return [team for team in teams if team.id != team_id]


def sort_roster(teams):
    """Listing order: by seed then name, unseeded teams first."""
    return sorted(teams, key=lambda t: (t.seed is not None, t.seed or 0, t.name))
