import os
import sys
import logging
from tiesheet.elimination import build_bracket, get_bracket_summary
from tiesheet.roster import load_teams
from tiesheet.settings import load_settings


def format_bracket(bracket):
    """Render a bracket as plain text lines, one block per round."""
    lines = []
    for round_index, round_ in enumerate(bracket.rounds):
        if lines:
            lines.append("")  # Blank line between rounds
        lines.append(f"# {round_.name}")
        empty_label = 'BYE' if round_index == 0 else 'TBD'
        for match in round_.matches:
            names = [team.name if team else empty_label for team in match.teams]
            line = f"{match.id}: {names[0]} vs {names[1]}"
            if match.winning_team is not None:
                line += f" (winner: {match.winning_team.name})"
            lines.append(line)
    return lines


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    # Use command line argument if provided, otherwise use default path
    teams_file = sys.argv[1] if len(sys.argv) > 1 else os.path.join(base_dir, 'data', 'teams.yaml')

    teams = load_teams(teams_file)
    settings = load_settings()

    bracket = build_bracket(teams, settings)
    if bracket is None:
        print(f"No teams loaded. Check {teams_file}")
        return
    if not bracket.rounds:
        print(f"Only one team entered ({teams[0].name}), no matches to play.")
        return

    for line in format_bracket(bracket):
        print(line)

    summary = get_bracket_summary(bracket)
    print()
    print(f"{summary['total_teams']} teams, bracket of {summary['bracket_size']}, {summary['byes']} byes")


if __name__ == '__main__':
    main()
