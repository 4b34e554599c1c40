import uuid

from tiesheet.errors import StructuralMismatchError


class Player:
    def __init__(self, id, name, position=None, number=None):
        self.id = id
        self.name = name
        self.position = position
        self.number = number

    def __eq__(self, other):
        if not isinstance(other, Player):
            return NotImplemented
        return (self.id, self.name, self.position, self.number) == \
            (other.id, other.name, other.position, other.number)

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name}, position={self.position}, number={self.number})"

    def to_dict(self):
        data = {'id': self.id, 'name': self.name}
        if self.position is not None:
            data['position'] = self.position
        if self.number is not None:
            data['number'] = self.number
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('id') or str(uuid.uuid4()),
            name=data.get('name', ''),
            position=data.get('position'),
            number=data.get('number'),
        )


class Team:
    def __init__(self, id, name, seed=None, players=None):
        self.id = id
        self.name = name
        self.seed = seed
        self.players = tuple(players) if players else ()

    @property
    def sort_seed(self):
        """Seed used for bracket ordering; unseeded teams count as 0."""
        return self.seed or 0

    def __eq__(self, other):
        if not isinstance(other, Team):
            return NotImplemented
        return (self.id, self.name, self.seed, self.players) == \
            (other.id, other.name, other.seed, other.players)

    def __repr__(self):
        return f"Team(id={self.id}, name={self.name}, seed={self.seed})"

    def to_dict(self):
        data = {'id': self.id, 'name': self.name}
        if self.seed is not None:
            data['seed'] = self.seed
        if self.players:
            data['players'] = [player.to_dict() for player in self.players]
        return data

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError(f"Team entry must be a mapping, got {data!r}")
        name = str(data.get('name') or '').strip()
        if not name:
            raise ValueError("Team name is required")
        seed = data.get('seed')
        if seed is None or seed == '':
            seed = None
        elif isinstance(seed, bool) or (isinstance(seed, float) and not seed.is_integer()):
            raise ValueError(f"Seed for {name} must be an integer, got {seed!r}")
        else:
            seed = int(seed)
        return cls(
            id=data.get('id') or data.get('_id') or str(uuid.uuid4()),
            name=name,
            seed=seed,
            players=[Player.from_dict(p) for p in data.get('players') or []],
        )


class Match:
    """
    A pairing of two slots. Each slot holds a Team or None (to be
    determined, or a bye in the first round). ``winner`` is the index of
    the winning slot, or None while undecided.
    """

    def __init__(self, id, teams=(None, None), winner=None):
        teams = tuple(teams)
        if len(teams) != 2:
            raise StructuralMismatchError(f"Match {id} must have exactly 2 slots, got {len(teams)}")
        if winner not in (None, 0, 1) or isinstance(winner, bool):
            raise StructuralMismatchError(f"Match {id} has invalid winner slot {winner!r}")
        self.id = id
        self.teams = teams
        self.winner = winner

    @property
    def winning_team(self):
        if self.winner is None:
            return None
        return self.teams[self.winner]

    @property
    def is_bye(self):
        return (self.teams[0] is None) != (self.teams[1] is None)

    def with_slot(self, slot_index, team):
        teams = list(self.teams)
        teams[slot_index] = team
        return Match(self.id, teams, self.winner)

    def with_winner(self, winner):
        return Match(self.id, self.teams, winner)

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return (self.id, self.teams, self.winner) == (other.id, other.teams, other.winner)

    def __repr__(self):
        return f"Match(id={self.id}, teams={self.teams}, winner={self.winner})"

    def to_dict(self):
        data = {
            'id': self.id,
            'teams': [team.to_dict() if team is not None else None for team in self.teams],
        }
        if self.winner is not None:
            data['winner'] = self.winner
        return data

    @classmethod
    def from_dict(cls, data):
        teams = data.get('teams') or []
        for slot in teams:
            if slot is not None and not isinstance(slot, dict):
                raise StructuralMismatchError(
                    f"Match {data.get('id')} slot must be a team mapping or empty, got {slot!r}"
                )
        return cls(
            id=data.get('id'),
            teams=[Team.from_dict(t) if t else None for t in teams],
            winner=data.get('winner'),
        )


class Round:
    def __init__(self, name, matches=()):
        self.name = name
        self.matches = tuple(matches)

    def with_match(self, match_index, match):
        matches = list(self.matches)
        matches[match_index] = match
        return Round(self.name, matches)

    def __eq__(self, other):
        if not isinstance(other, Round):
            return NotImplemented
        return (self.name, self.matches) == (other.name, other.matches)

    def __repr__(self):
        return f"Round(name={self.name}, matches={len(self.matches)})"

    def to_dict(self):
        return {'name': self.name, 'matches': [m.to_dict() for m in self.matches]}

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data.get('name', ''),
            matches=[Match.from_dict(m) for m in data.get('matches') or []],
        )


class Bracket:
    """
    Ordered rounds of a single elimination tie sheet, first round first
    and Final last. Brackets are never edited in place: the ``with_*``
    helpers return a new Bracket sharing every untouched Round.
    """

    def __init__(self, rounds=()):
        self.rounds = tuple(rounds)

    @property
    def final_round_index(self):
        return len(self.rounds) - 1

    def match(self, round_index, match_index):
        return self.rounds[round_index].matches[match_index]

    def with_match(self, round_index, match_index, match):
        rounds = list(self.rounds)
        rounds[round_index] = rounds[round_index].with_match(match_index, match)
        return Bracket(rounds)

    def __eq__(self, other):
        if not isinstance(other, Bracket):
            return NotImplemented
        return self.rounds == other.rounds

    def __repr__(self):
        return f"Bracket(rounds={[r.name for r in self.rounds]})"

    def to_dict(self):
        return {'rounds': [r.to_dict() for r in self.rounds]}

    @classmethod
    def from_dict(cls, data):
        bracket = cls(rounds=[Round.from_dict(r) for r in data.get('rounds') or []])
        validate_bracket_shape(bracket)
        return bracket


class SelectionEvent:
    def __init__(self, round_index, match_index, slot_index):
        self.round_index = round_index
        self.match_index = match_index
        self.slot_index = slot_index

    def __eq__(self, other):
        if not isinstance(other, SelectionEvent):
            return NotImplemented
        return (self.round_index, self.match_index, self.slot_index) == \
            (other.round_index, other.match_index, other.slot_index)

    def __repr__(self):
        return (f"SelectionEvent(round_index={self.round_index}, "
                f"match_index={self.match_index}, slot_index={self.slot_index})")

    def to_dict(self):
        return {
            'roundIndex': self.round_index,
            'matchIndex': self.match_index,
            'slotIndex': self.slot_index,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            round_index=data.get('roundIndex'),
            match_index=data.get('matchIndex'),
            slot_index=data.get('slotIndex'),
        )


def validate_bracket_shape(bracket):
    """
    Check that every round after the first holds exactly half the matches
    of the round before it, ending in a single Final match, and that every
    recorded winner occupies its slot.
    """
    if not bracket.rounds:
        return
    first_count = len(bracket.rounds[0].matches)
    if first_count == 0 or first_count & (first_count - 1):
        raise StructuralMismatchError(
            f"First round must hold a power-of-two number of matches, got {first_count}"
        )
    for round_index in range(1, len(bracket.rounds)):
        expected = len(bracket.rounds[round_index - 1].matches) // 2
        actual = len(bracket.rounds[round_index].matches)
        if actual != expected:
            raise StructuralMismatchError(
                f"Round {round_index + 1} must hold {expected} matches, got {actual}"
            )
    if len(bracket.rounds[-1].matches) != 1:
        raise StructuralMismatchError("Final round must hold exactly one match")
    for round_ in bracket.rounds:
        for match in round_.matches:
            if match.winner is not None and match.teams[match.winner] is None:
                raise StructuralMismatchError(
                    f"Match {match.id} records slot {match.winner} as winner but the slot is empty"
                )
