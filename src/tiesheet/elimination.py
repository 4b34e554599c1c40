"""
Single elimination bracket generation, winner advancement and reseeding.
"""
import math
import logging
from typing import List, Optional, Tuple

from tiesheet.errors import InvalidSelectionError, StructuralMismatchError
from tiesheet.models import Bracket, Match, Round, Team
from tiesheet.settings import DEFAULT_SETTINGS, BracketSettings

logger = logging.getLogger(__name__)


def get_round_name(round_index: int, round_count: int, final_name: str = "Final") -> str:
    """Get the display name of a round from its position in the bracket."""
    if round_index == round_count - 1:
        return final_name
    return f"Round {round_index + 1}"


def get_match_id(round_index: int, match_index: int) -> str:
    return f"r{round_index + 1}-m{match_index + 1}"


def calculate_round_count(num_teams: int) -> int:
    """Calculate the number of rounds, ceil(log2(num_teams))."""
    if num_teams <= 1:
        return 0
    return math.ceil(math.log2(num_teams))


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** calculate_round_count(num_teams)


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_teams)
    return bracket_size - num_teams


def sort_teams_by_seed(teams: List[Team]) -> List[Team]:
    """
    Order teams for seeding, lowest seed first.
    Unseeded teams count as seed 0; equal seeds keep their input order.
    """
    return sorted(teams, key=lambda team: team.sort_seed)


def standard_pairings(sorted_teams: List[Team], bracket_size: int) -> List[Tuple[Optional[Team], Optional[Team]]]:
    """
    Pair sorted teams for the first round: match i plays sorted index i
    against sorted index bracket_size - 1 - i. Indices past the end of
    the team list are empty slots (byes).

    For 8 slots and 5 teams: (1, BYE), (2, BYE), (3, BYE), (4, 5)
    """
    num_teams = len(sorted_teams)
    pairings = []
    for i in range(bracket_size // 2):
        top = i
        bottom = bracket_size - 1 - i
        pairings.append((
            sorted_teams[top] if top < num_teams else None,
            sorted_teams[bottom] if bottom < num_teams else None,
        ))
    return pairings


def build_bracket(teams: List[Team], settings: Optional[BracketSettings] = None) -> Optional[Bracket]:
    """
    Build a new bracket from a team list.

    Returns None when there are no teams. A single team yields a Bracket
    with no rounds, since there is nothing to play.
    Byes are left for the user to resolve; the team facing an empty slot
    only advances once its win is recorded.
    """
    settings = settings or DEFAULT_SETTINGS
    if not teams:
        logger.debug("No teams provided, no bracket generated")
        return None

    sorted_teams = sort_teams_by_seed(teams)
    num_teams = len(sorted_teams)
    round_count = calculate_round_count(num_teams)
    bracket_size = calculate_bracket_size(num_teams)

    if round_count == 0:
        logger.info("Single team bracket, no rounds to play")
        return Bracket()

    rounds = []

    # First round with initial matchups
    first_round_matches = [
        Match(get_match_id(0, i), pair)
        for i, pair in enumerate(standard_pairings(sorted_teams, bracket_size))
    ]
    rounds.append(Round(get_round_name(0, round_count, settings.final_round_name), first_round_matches))

    # Subsequent rounds wait for winners
    for round_index in range(1, round_count):
        num_matches = bracket_size // 2 ** (round_index + 1)
        rounds.append(Round(
            get_round_name(round_index, round_count, settings.final_round_name),
            [Match(get_match_id(round_index, i)) for i in range(num_matches)],
        ))

    logger.info(f"Built bracket for {num_teams} teams: {round_count} rounds, "
                f"{calculate_byes(num_teams)} byes")
    return Bracket(rounds)


def _reject_selection(message: str) -> InvalidSelectionError:
    logger.warning(f"Rejected winner selection: {message}")
    return InvalidSelectionError(message)


def _validate_selection(bracket: Bracket, round_index, match_index, slot_index) -> None:
    if bracket is None:
        raise _reject_selection("no bracket to update")
    for label, value in (('round', round_index), ('match', match_index), ('slot', slot_index)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise _reject_selection(f"{label} index must be an integer, got {value!r}")
    if not 0 <= round_index < len(bracket.rounds):
        raise _reject_selection(f"round index {round_index} out of range (bracket has {len(bracket.rounds)} rounds)")
    matches = bracket.rounds[round_index].matches
    if not 0 <= match_index < len(matches):
        raise _reject_selection(
            f"match index {match_index} out of range ({bracket.rounds[round_index].name} has {len(matches)} matches)"
        )
    if slot_index not in (0, 1):
        raise _reject_selection(f"slot index must be 0 or 1, got {slot_index}")
    if matches[match_index].teams[slot_index] is None:
        raise _reject_selection(f"slot {slot_index} of match {matches[match_index].id} is empty")


def _propagate(bracket: Bracket, round_index: int, match_index: int, team: Optional[Team],
               cascade: bool) -> Bracket:
    """
    Write a match's winning team into the slot it feeds in the next round.

    With cascade, a changed occupant voids the receiving match's result,
    and the emptied winner slot is carried forward the same way.
    """
    while round_index < bracket.final_round_index:
        next_round = round_index + 1
        next_match_index = match_index // 2
        next_slot = match_index % 2

        next_match = bracket.match(next_round, next_match_index)
        previous = next_match.teams[next_slot]
        updated = next_match.with_slot(next_slot, team)
        logger.debug(f"Advanced {team.name if team else 'nobody'} to {next_match.id} slot {next_slot}")

        if not cascade or previous == team or next_match.winner is None:
            return bracket.with_match(next_round, next_match_index, updated)

        logger.debug(f"Cleared result of {next_match.id} after its slot {next_slot} changed")
        bracket = bracket.with_match(next_round, next_match_index, updated.with_winner(None))
        round_index, match_index, team = next_round, next_match_index, None

    return bracket


def select_winner(bracket: Bracket, round_index: int, match_index: int, slot_index: int,
                  settings: Optional[BracketSettings] = None) -> Bracket:
    """
    Record the team in ``slot_index`` as the winner of a match and move it
    into its slot in the next round.

    The input bracket is left untouched; a new Bracket is returned.
    Raises InvalidSelectionError for indices outside the bracket or an
    empty slot.
    """
    settings = settings or DEFAULT_SETTINGS
    _validate_selection(bracket, round_index, match_index, slot_index)

    match = bracket.match(round_index, match_index)
    winning_team = match.teams[slot_index]
    updated = bracket.with_match(round_index, match_index, match.with_winner(slot_index))

    if round_index == updated.final_round_index:
        logger.info(f"{winning_team.name} wins the {updated.rounds[round_index].name}")
        return updated

    return _propagate(updated, round_index, match_index, winning_team, settings.cascade_invalidation)


def apply_selection(bracket: Bracket, event, settings: Optional[BracketSettings] = None) -> Bracket:
    """Apply a SelectionEvent to a bracket."""
    return select_winner(bracket, event.round_index, event.match_index, event.slot_index, settings)


def reseed_bracket(bracket: Optional[Bracket], teams: List[Team],
                   settings: Optional[BracketSettings] = None) -> Optional[Bracket]:
    """
    Re-pair the first round from an updated team list, keeping the
    bracket's existing shape. All results and every team placed in later
    rounds are discarded.

    When the roster needs a different bracket size the outcome follows
    ``settings.reseed_mismatch``:
    - 'reject': raise StructuralMismatchError
    - 'regenerate': build a fresh bracket for the new roster
    - 'stale': keep the old shape while every team still fits
    """
    settings = settings or DEFAULT_SETTINGS
    if bracket is None or not teams:
        logger.debug("Nothing to reseed, no bracket returned")
        return None

    sorted_teams = sort_teams_by_seed(teams)
    num_teams = len(sorted_teams)
    first_round = bracket.rounds[0] if bracket.rounds else None
    existing_matches = len(first_round.matches) if first_round else 0
    bracket_size = existing_matches * 2
    needed_matches = calculate_bracket_size(num_teams) // 2

    if needed_matches != existing_matches:
        message = (f"{num_teams} teams need {needed_matches} first round matches, "
                   f"bracket has {existing_matches}")
        if settings.reseed_mismatch == 'regenerate':
            logger.info(f"{message}; regenerating bracket")
            return build_bracket(teams, settings)
        if settings.reseed_mismatch == 'reject' or num_teams > bracket_size:
            raise StructuralMismatchError(message)
        logger.warning(f"{message}; keeping existing shape")

    rounds = []
    if first_round is not None:
        pairings = standard_pairings(sorted_teams, bracket_size)
        rounds.append(Round(
            first_round.name,
            [Match(match.id, pair) for match, pair in zip(first_round.matches, pairings)],
        ))

    # Reset subsequent rounds
    for later_round in bracket.rounds[1:]:
        rounds.append(Round(later_round.name, [Match(match.id) for match in later_round.matches]))

    logger.info(f"Reseeded bracket with {num_teams} teams")
    return Bracket(rounds)


def get_champion(bracket: Optional[Bracket]) -> Optional[Team]:
    """Return the winner of the final match, if one has been recorded."""
    if bracket is None or not bracket.rounds or not bracket.rounds[-1].matches:
        return None
    return bracket.rounds[-1].matches[0].winning_team


def get_bracket_summary(bracket: Optional[Bracket]) -> dict:
    """
    Get bracket statistics for display.
    """
    if bracket is None or not bracket.rounds:
        return {
            'total_teams': 0,
            'bracket_size': 0,
            'total_rounds': 0,
            'byes': 0,
            'matches_per_round': {},
            'decided_per_round': {},
            'champion': None
        }

    first_round = bracket.rounds[0]
    total_teams = sum(1 for m in first_round.matches for team in m.teams if team is not None)
    byes = sum(1 for m in first_round.matches if m.is_bye)

    # Count actual matches (both teams known) per round
    matches_per_round = {}
    decided_per_round = {}
    for round_ in bracket.rounds:
        matches_per_round[round_.name] = sum(1 for m in round_.matches if None not in m.teams)
        decided_per_round[round_.name] = sum(1 for m in round_.matches if m.winner is not None)

    return {
        'total_teams': total_teams,
        'bracket_size': len(first_round.matches) * 2,
        'total_rounds': len(bracket.rounds),
        'byes': byes,
        'matches_per_round': matches_per_round,
        'decided_per_round': decided_per_round,
        'champion': get_champion(bracket)
    }
