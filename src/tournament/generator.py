"""Round generation for every format.

``generate`` is the single entry point used by the lifecycle. It refuses
rosters that break the format rules with ``MalformedRosterError``; the
lifecycle validates first and reports the same reasons as ``ValidationError``.
"""

import logging
import random
from math import comb
from typing import Dict, List, Optional, Sequence, Tuple

from americano.functions import fixed_pairs_of, generate_americano_rounds, generate_team_rounds
from americano.mix import EXTENDED_ROUNDS, SCHEDULES, generate_mix_rounds
from mexicano.functions import generate_mexicano_first_round
from tournament.errors import MalformedRosterError, ValidationError
from tournament.models import (
    GENDERS,
    MAX_PLAYERS,
    MIN_PLAYERS,
    MIX_ALLOWED_PLAYERS,
    TEAM_TYPES,
    Round,
    Tournament,
    max_score,
)

logger = logging.getLogger(__name__)

FirstMatch = Tuple[Sequence[str], Sequence[str]]

STANDARD_ROUNDS = {4: 6, 5: 10, 6: 15, 7: 21, 8: 14, 9: 18, 10: 15, 11: 22, 12: 33}


def _team_rounds(player_count: int) -> int:
    # repeated round-robins between the fixed pairs
    matchups = comb(player_count // 2, 2)
    cycles = 6 if matchups == 1 else 2
    return matchups * cycles


def calculate_rounds(player_count: int, team_type: str = "standard") -> int:
    """Planned number of rounds; 0 for an unsupported roster size."""
    if team_type == "mix":
        schedule = SCHEDULES.get(player_count)
        return len(schedule) if schedule else 0
    if team_type == "team":
        if not MIN_PLAYERS <= player_count <= MAX_PLAYERS:
            return 0
        # an odd roster leaves one floater outside the pairs
        return _team_rounds(player_count - player_count % 2)
    return STANDARD_ROUNDS.get(player_count, 0)


def roster_problem(players: List[str], team_type: str, genders: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Why a roster cannot be scheduled for ``team_type``, or None when it can."""
    if team_type not in TEAM_TYPES:
        return f"Unknown team type '{team_type}'"
    if any(not p for p in players):
        return "Player name is required"
    lowered = [p.lower() for p in players]
    if len(set(lowered)) != len(lowered):
        return "Duplicate player names found. Each player must have a unique name."

    count = len(players)
    if team_type != "mix":
        if not MIN_PLAYERS <= count <= MAX_PLAYERS:
            return f"{team_type.capitalize()} requires {MIN_PLAYERS} to {MAX_PLAYERS} players (currently {count})"
        return None

    if count not in MIX_ALLOWED_PLAYERS:
        return f"Mix Americano requires exactly 6 or 8 players (currently {count})"
    if not genders or set(genders) != set(players):
        return "Every Mix Americano player needs a gender"
    if any(g not in GENDERS for g in genders.values()):
        return "Gender must be 'male' or 'female'"
    required = count // 2
    men = sum(1 for p in players if genders[p] == "male")
    women = count - men
    if men != required:
        return f"Mix Americano with {count} players requires exactly {required} men (currently {men})"
    if women != required:
        return f"Mix Americano with {count} players requires exactly {required} women (currently {women})"
    return None


def first_match_problem(
    players: List[str],
    team_type: str,
    first_match: FirstMatch,
    genders: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    team_a, team_b = (list(t) for t in first_match)
    if len(team_a) != 2 or len(team_b) != 2:
        return "Each team needs exactly 2 players"
    chosen = team_a + team_b
    if len(set(chosen)) != 4:
        return "A player cannot appear twice in the first match"
    unknown = [p for p in chosen if p not in players]
    if unknown:
        return f"Player '{unknown[0]}' is not in this tournament"
    if team_type == "mix":
        for team in (team_a, team_b):
            if sorted(genders[p] for p in team) != ["female", "male"]:
                return "Each team must have exactly 1 man and 1 woman"
    return None


def generate(
    players: List[str],
    team_type: str,
    point_type: str,
    genders: Optional[Dict[str, str]] = None,
    first_match: Optional[FirstMatch] = None,
    rng: Optional[random.Random] = None,
) -> List[Round]:
    """Build the schedule for a fresh roster.

    standard/team/mix get the whole tournament up front; mexicano only gets
    round 1, later rounds follow the standings (see ``lifecycle.close_round``).
    """
    problem = roster_problem(players, team_type, genders)
    if problem is None and first_match is not None:
        problem = first_match_problem(players, team_type, first_match, genders)
    if problem is not None:
        raise MalformedRosterError(problem)
    if max_score(point_type) is None:
        raise ValidationError(f"Unknown point type '{point_type}'")

    rng = rng or random.Random()
    total = calculate_rounds(len(players), team_type)

    if team_type == "mix":
        rounds = generate_mix_rounds(players, genders, first_match, rng)
    elif team_type == "team":
        rounds = generate_team_rounds(players, total, first_match, rng)
    elif team_type == "mexicano":
        rounds = generate_mexicano_first_round(players, first_match, rng)
    else:
        rounds = generate_americano_rounds(players, total, first_match, rng)

    logger.debug(f"Generated {len(rounds)} rounds for {len(players)} players ({team_type})")
    return rounds


def extension_rounds(tournament: Tournament, rng: Optional[random.Random] = None) -> List[Round]:
    """Second set of rounds appended after the current schedule."""
    rng = rng or random.Random()
    players = tournament.players
    start = len(tournament.rounds) + 1

    if tournament.team_type == "mix":
        if len(players) not in EXTENDED_ROUNDS:
            raise ValidationError("Mix Americano with 8 players already plays a full cycle")
        return generate_mix_rounds(players, tournament.player_genders, rng=rng, start=start)
    if tournament.team_type == "mexicano":
        raise ValidationError("Mexicano rounds are added one at a time by closing the current round")

    total = calculate_rounds(len(players), tournament.team_type)
    if tournament.team_type == "team":
        # pairs cannot be told apart from floater stand-ins on an odd roster
        pairs = fixed_pairs_of(tournament.rounds) if len(players) % 2 == 0 else None
        return generate_team_rounds(
            players, total, rng=rng,
            pairs=pairs,
            previous=tournament.rounds,
        )
    return generate_americano_rounds(players, total, rng=rng, previous=tournament.rounds)
