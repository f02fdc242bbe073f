import random
from collections import Counter
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from tournament.models import Round, build_round

Team = List[str]
FirstMatch = Tuple[Sequence[str], Sequence[str]]


class RotationHistory:
    """Running tally of who played, with whom and against whom."""

    def __init__(self, order: List[str]):
        self.order = order
        self.played = Counter()
        self.partners = Counter()
        self.opponents = Counter()
        self.last_on_court = set()

    def record(self, team_a: Sequence[str], team_b: Sequence[str]):
        for p in list(team_a) + list(team_b):
            self.played[p] += 1
        self.partners[frozenset(team_a)] += 1
        self.partners[frozenset(team_b)] += 1
        for a in team_a:
            for b in team_b:
                self.opponents[frozenset((a, b))] += 1
        self.last_on_court = set(team_a) | set(team_b)

    def replay(self, rounds: Sequence[Round]):
        for rnd in rounds:
            for m in rnd.matches:
                self.record(m.team_a, m.team_b)

    def _cost(self, four: Tuple[str, ...], team_a: Tuple[str, str], team_b: Tuple[str, str]):
        rest_cost = sum(self.played[p] for p in four)
        partner_cost = self.partners[frozenset(team_a)] + self.partners[frozenset(team_b)]
        opponent_cost = sum(self.opponents[frozenset((a, b))] for a in team_a for b in team_b)
        back_to_back = sum(1 for p in four if p in self.last_on_court)
        return rest_cost, partner_cost, opponent_cost, back_to_back

    def best_match(self) -> Tuple[Team, Team]:
        best = None
        for four in combinations(self.order, 4):
            a, b, c, d = four
            for team_a, team_b in (((a, b), (c, d)), ((a, c), (b, d)), ((a, d), (b, c))):
                cost = self._cost(four, team_a, team_b)
                if best is None or cost < best[0]:
                    best = (cost, team_a, team_b)
        return list(best[1]), list(best[2])


def generate_americano_rounds(
    players: List[str],
    num_rounds: int,
    first_match: Optional[FirstMatch] = None,
    rng: Optional[random.Random] = None,
    previous: Sequence[Round] = (),
) -> List[Round]:
    """Generate Americano rounds where partners and opponents rotate.

    One court per round. Each round goes to the four players who have played
    least, split so that repeated partnerships and match-ups stay rare.
    ``previous`` rounds count towards that history and new rounds are numbered
    after them.
    """
    rng = rng or random.Random()
    order = list(players)
    rng.shuffle(order)

    history = RotationHistory(order)
    history.replay(previous)
    start = len(previous) + 1

    rounds = []
    for round_number in range(start, start + num_rounds):
        if round_number == start and first_match is not None:
            team_a, team_b = list(first_match[0]), list(first_match[1])
        else:
            team_a, team_b = history.best_match()
        history.record(team_a, team_b)
        rounds.append(build_round(round_number, players, team_a, team_b))
    return rounds


def form_fixed_pairs(
    players: List[str],
    first_match: Optional[FirstMatch] = None,
    rng: Optional[random.Random] = None,
) -> List[Tuple[str, str]]:
    rng = rng or random.Random()
    pairs = []
    if first_match is not None:
        pairs = [tuple(first_match[0]), tuple(first_match[1])]
    taken = {p for pair in pairs for p in pair}
    rest = [p for p in players if p not in taken]
    rng.shuffle(rest)
    pairs += [(rest[i], rest[i + 1]) for i in range(0, len(rest) - 1, 2)]
    return pairs


def fixed_pairs_of(rounds: Sequence[Round]) -> List[Tuple[str, str]]:
    """Recover the fixed partnerships of a Team Americano schedule."""
    pairs = []
    known = set()
    for rnd in rounds:
        for m in rnd.matches:
            for team in (m.team_a, m.team_b):
                if frozenset(team) not in known:
                    known.add(frozenset(team))
                    pairs.append(tuple(team))
    return pairs


def _substitute(team: Tuple[str, str], out: str, floater: str) -> List[str]:
    return [floater if p == out else p for p in team]


def generate_team_rounds(
    players: List[str],
    num_rounds: int,
    first_match: Optional[FirstMatch] = None,
    rng: Optional[random.Random] = None,
    pairs: Optional[List[Tuple[str, str]]] = None,
    previous: Sequence[Round] = (),
) -> List[Round]:
    """Team Americano: partners never change, opponents rotate round-robin.

    With an odd roster the player left without a partner is the floater. The
    floater steps in for the busiest player on court whenever they have played
    fewer matches, so partnerships only break around the floater.
    """
    rng = rng or random.Random()
    if pairs is None:
        pairs = form_fixed_pairs(players, first_match, rng)
    paired = {p for pair in pairs for p in pair}
    floaters = [p for p in players if p not in paired]
    floater = floaters[0] if floaters else None

    played = Counter()
    meetings = Counter()
    individual = Counter()
    last = set()

    def record(pa, pb, on_court):
        nonlocal last
        played[pa] += 1
        played[pb] += 1
        meetings[frozenset((pa, pb))] += 1
        individual.update(on_court)
        last = {pa, pb}

    for rnd in previous:
        for m in rnd.matches:
            record(tuple(m.team_a), tuple(m.team_b), m.players)

    start = len(previous) + 1
    rounds = []
    for round_number in range(start, start + num_rounds):
        pinned = round_number == start and first_match is not None
        if pinned:
            pa, pb = pairs[0], pairs[1]
        else:
            pa, pb = min(
                combinations(pairs, 2),
                key=lambda m: (
                    meetings[frozenset(m)],
                    played[m[0]] + played[m[1]],
                    (m[0] in last) + (m[1] in last),
                ),
            )
        team_a, team_b = list(pa), list(pb)
        if floater is not None and not pinned:
            busiest = max(team_a + team_b, key=lambda p: individual[p])
            if individual[floater] < individual[busiest]:
                team_a = _substitute(pa, busiest, floater)
                team_b = _substitute(pb, busiest, floater)
        record(pa, pb, team_a + team_b)
        rounds.append(build_round(round_number, players, team_a, team_b))
    return rounds
