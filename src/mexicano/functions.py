import random
from typing import List, Optional, Sequence, Tuple

from tournament.models import PlayerStats, Round, Tournament, build_round


def generate_mexicano_first_round(
    players: List[str],
    first_match: Optional[Tuple[Sequence[str], Sequence[str]]] = None,
    rng: Optional[random.Random] = None,
) -> List[Round]:
    """Only round 1 exists up front; it is random unless pinned."""
    if first_match is not None:
        team_a, team_b = list(first_match[0]), list(first_match[1])
    else:
        rng = rng or random.Random()
        drawn = rng.sample(players, 4)
        team_a, team_b = [drawn[0], drawn[2]], [drawn[1], drawn[3]]
    return [build_round(1, players, team_a, team_b)]


def generate_mexicano_round(tournament: Tournament, standings: List[PlayerStats]) -> Round:
    """
    Generate the next Mexicano round from the current standings:
    players who played least go first, ordered by rank within that,
    then rank 1 & 3 partner together vs rank 2 & 4.
    """
    rank = {s.name: i for i, s in enumerate(standings)}
    played = {s.name: s.matches_played for s in standings}

    queue = sorted(tournament.players, key=lambda p: (played.get(p, 0), rank.get(p, len(rank))))
    p1, p2, p3, p4 = sorted(queue[:4], key=lambda p: rank.get(p, len(rank)))

    round_number = len(tournament.rounds) + 1
    return build_round(round_number, tournament.players, [p1, p3], [p2, p4])
