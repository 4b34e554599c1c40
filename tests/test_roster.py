"""
Tests for team list helpers.
"""
import pytest
import sys
import os
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tiesheet.models import Team
from tiesheet.roster import load_teams, add_team, add_existing_team, remove_team, sort_roster


class TestAddRemoveTeams:
    """Tests for building up a roster."""

    def test_add_team_assigns_next_seed(self, four_teams):
        teams = add_team(four_teams, "  Newcomers ")
        assert len(teams) == 5
        assert teams[-1].name == "Newcomers"
        assert teams[-1].seed == 5
        assert teams[-1].id
        assert len(four_teams) == 4

    def test_add_team_keeps_given_seed(self):
        teams = add_team([], "Eagles", seed=3)
        assert teams[0].seed == 3

    def test_add_team_ids_unique(self):
        teams = add_team(add_team([], "A"), "B")
        assert teams[0].id != teams[1].id

    def test_add_team_blank_name(self):
        with pytest.raises(ValueError):
            add_team([], "   ")

    def test_add_existing_team(self, four_teams):
        stored = Team("db-1", "Hawks")
        teams = add_existing_team(four_teams, stored)
        assert teams[-1].id == "db-1"
        assert teams[-1].seed == 5

    def test_add_existing_team_keeps_seed(self, four_teams):
        teams = add_existing_team(four_teams, Team("db-1", "Hawks", 9))
        assert teams[-1].seed == 9

    def test_add_existing_team_skips_duplicate(self, four_teams):
        teams = add_existing_team(four_teams, Team("t2", "Team 2", 2))
        assert teams == four_teams

    def test_remove_team(self, four_teams):
        teams = remove_team(four_teams, "t3")
        assert [t.id for t in teams] == ["t1", "t2", "t4"]

    def test_remove_missing_team(self, four_teams):
        assert remove_team(four_teams, "nope") == four_teams

    def test_sort_roster(self):
        teams = [Team("a", "Zebras", 2), Team("b", "Ants"), Team("c", "Bees", 1), Team("d", "Apes", 2)]
        assert [t.id for t in sort_roster(teams)] == ["b", "c", "d", "a"]


class TestLoadTeams:
    """Tests for loading a team list from YAML."""

    def test_load_list(self, tmp_path):
        teams_file = tmp_path / "teams.yaml"
        teams_file.write_text(yaml.dump([
            {'id': "t1", 'name': "Eagles", 'seed': 1,
             'players': [{'id': "p1", 'name': "Alice", 'number': "7"}]},
            {'id': "t2", 'name': "Hawks"},
        ], default_flow_style=False))

        teams = load_teams(str(teams_file))

        assert [t.name for t in teams] == ["Eagles", "Hawks"]
        assert teams[0].players[0].number == "7"
        assert teams[1].seed is None

    def test_load_mapping(self, tmp_path):
        teams_file = tmp_path / "teams.yaml"
        teams_file.write_text("teams:\n  - name: Eagles\n    seed: 2\n")
        teams = load_teams(str(teams_file))
        assert teams[0].seed == 2

    def test_load_empty(self, tmp_path):
        teams_file = tmp_path / "teams.yaml"
        teams_file.write_text("")
        assert load_teams(str(teams_file)) == []

    def test_load_invalid(self, tmp_path):
        teams_file = tmp_path / "teams.yaml"
        teams_file.write_text("just a string\n")
        with pytest.raises(ValueError):
            load_teams(str(teams_file))

    def test_load_plain_names(self, tmp_path):
        """Test a list of bare names is rejected rather than crashing."""
        teams_file = tmp_path / "teams.yaml"
        teams_file.write_text("- Eagles\n- Hawks\n")
        with pytest.raises(ValueError):
            load_teams(str(teams_file))
