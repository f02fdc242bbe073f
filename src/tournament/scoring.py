"""Zero-sum scoring.

The organiser enters one side's score; the other side always receives the
rest of the pool, so ``score_a + score_b == max_score`` for every scored match.
"""

from tournament.errors import ScoreRangeError, TournamentEndedError, ValidationError
from tournament.models import Match, Round, Tournament


def _match_for_update(tournament: Tournament, round_number: int, match_id: str) -> Match:
    if tournament.is_ended:
        raise TournamentEndedError("Tournament is already completed. Scores cannot be changed.")
    match = tournament.find_match(round_number, match_id)
    if match is None:
        raise ValidationError(f"Match '{match_id}' not found in round {round_number}")
    return match


def set_score(tournament: Tournament, round_number: int, match_id: str, team: str, value: int) -> Match:
    """Score ``team`` ("A" or "B") with ``value``; mutates the match of ``tournament`` in place."""
    match = _match_for_update(tournament, round_number, match_id)
    pool = tournament.max_score
    if pool is None:
        raise ValidationError(f"Unknown point type '{tournament.point_type}'")
    if team not in ("A", "B"):
        raise ValidationError("Team must be 'A' or 'B'")
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= pool:
        raise ScoreRangeError(f"Score must be between 0 and {pool}")

    if team == "A":
        match.score_a, match.score_b = value, pool - value
    else:
        match.score_a, match.score_b = pool - value, value
    match.is_completed = True
    return match


def reset_score(tournament: Tournament, round_number: int, match_id: str) -> Match:
    match = _match_for_update(tournament, round_number, match_id)
    clear(match)
    return match


def clear(match: Match):
    match.score_a = None
    match.score_b = None
    match.is_completed = False


def reset_all(tournament: Tournament):
    for rnd in tournament.rounds:
        for match in rnd.matches:
            clear(match)


def is_round_complete(rnd: Round) -> bool:
    return rnd.is_complete
