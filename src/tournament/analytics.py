"""Read-only analytics over a tournament snapshot.

Nothing here mutates its input; the same snapshot always produces the same
output in the same order.
"""

import unicodedata
from typing import Dict, List

from tournament.models import (
    PlayerPairingStats,
    PlayerStats,
    RoundMatch,
    Tournament,
    compensation_multiplier,
)

SORT_BY_POINTS = "points"
SORT_BY_WINS = "wins"


def calculate_player_stats(tournament: Tournament) -> Dict[str, PlayerStats]:
    stats = {p: PlayerStats(name=p) for p in tournament.players}

    for rnd in tournament.rounds:
        for match in rnd.matches:
            if not match.is_completed or match.score_a is None or match.score_b is None:
                continue
            tie = match.score_a == match.score_b
            for team, score_for, score_against in (
                (match.team_a, match.score_a, match.score_b),
                (match.team_b, match.score_b, match.score_a),
            ):
                for pid in team:
                    s = stats.get(pid)
                    if s is None:
                        continue
                    s.matches_played += 1
                    s.total_points += score_for
                    if tie:
                        s.ties += 1
                    elif score_for > score_against:
                        s.wins += 1
                    else:
                        s.losses += 1

    max_played = max((s.matches_played for s in stats.values()), default=0)
    multiplier = compensation_multiplier(tournament.point_type)
    for s in stats.values():
        s.compensation_points = (max_played - s.matches_played) * multiplier
        s.final_score = s.total_points + s.compensation_points
    return stats


def compute_leaderboard(tournament: Tournament, sort_by: str = SORT_BY_POINTS) -> List[PlayerStats]:
    """Ranked player statistics.

    ``points``: final score, then wins, then total points.
    ``wins``: wins, then final score; remaining ties keep roster order.
    """
    standings = list(calculate_player_stats(tournament).values())
    if sort_by == SORT_BY_WINS:
        standings.sort(key=lambda s: (-s.wins, -s.final_score))
    else:
        standings.sort(key=lambda s: (-s.final_score, -s.wins, -s.total_points))
    return standings


def _fold(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _name_key(name: str):
    # accents and case only break ties between otherwise equal names
    return _fold(name), name.casefold(), name


def _outcome(match, side: str) -> str:
    if not match.is_completed or match.score_a is None or match.score_b is None:
        return "pending"
    own, other = (match.score_a, match.score_b) if side == "A" else (match.score_b, match.score_a)
    # a tie counts as a loss here
    return "win" if own > other else "loss"


def compute_pairing_stats(tournament: Tournament, selected_player: str) -> List[PlayerPairingStats]:
    """Partner and opponent record of ``selected_player`` against everyone else."""
    stats = {p: PlayerPairingStats(name=p) for p in tournament.players if p != selected_player}

    for rnd in tournament.rounds:
        for match in rnd.matches:
            side = match.side_of(selected_player)
            if side is None:
                continue
            outcome = _outcome(match, side)
            partners, opponents = (match.team_a, match.team_b) if side == "A" else (match.team_b, match.team_a)
            for p in partners:
                if p in stats:
                    stats[p].partner_count += 1
                    stats[p].partner_results.append(outcome)
            for p in opponents:
                if p in stats:
                    stats[p].versus_count += 1
                    stats[p].versus_results.append(outcome)

    return sorted(stats.values(), key=lambda s: _name_key(s.name))


def rounds_involving(tournament: Tournament, player: str) -> List[RoundMatch]:
    found = []
    for rnd in sorted(tournament.rounds, key=lambda r: r.round_number):
        for match in rnd.matches:
            if match.side_of(player) is not None:
                found.append(RoundMatch(rnd.round_number, match))
    return found


def rounds_between(tournament: Tournament, player_a: str, player_b: str) -> Dict[str, List[RoundMatch]]:
    """Rounds where the two played together, and rounds where they faced each other."""
    partner_rounds, versus_rounds = [], []
    for entry in rounds_involving(tournament, player_a):
        side_a = entry.match.side_of(player_a)
        side_b = entry.match.side_of(player_b)
        if side_b is None:
            continue
        if side_a == side_b:
            partner_rounds.append(entry)
        else:
            versus_rounds.append(entry)
    return {"partnerRounds": partner_rounds, "versusRounds": versus_rounds}
