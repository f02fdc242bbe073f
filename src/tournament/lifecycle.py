"""Tournament lifecycle: the only code that changes a tournament.

Every operation works on a copy and returns the new snapshot. When an
operation is rejected the exception propagates and the snapshot the caller
holds is untouched.

Edits are either *safe* (applied in place, schedule and scores kept) or
*structural* (the roster, a mix gender, or the first match changes, so the
schedule is regenerated and every score is reset).
"""

import copy
import logging
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from mexicano.functions import generate_mexicano_round
from tournament.analytics import compute_leaderboard
from tournament.commands import (
    STRUCTURAL,
    AddPlayers,
    AdjustLineup,
    CloseRound,
    EndTournament,
    ExtendTournament,
    RemovePlayer,
    RenamePlayer,
    ResetScore,
    SetScore,
    UpdateInfo,
    UpdateMixPlayers,
)
from tournament.errors import NotFoundError, TournamentEndedError, ValidationError
from tournament.generator import calculate_rounds, extension_rounds, generate, roster_problem
from tournament.models import (
    MAX_NAME_LENGTH,
    TEAM_TYPES,
    Tournament,
    generate_id,
    max_score,
    sanitize_name,
    utc_now,
)
from tournament.scoring import reset_all, reset_score, set_score

logger = logging.getLogger(__name__)


def _clean_name(name: str) -> str:
    cleaned = sanitize_name(name or "")
    if not 1 <= len(cleaned) <= MAX_NAME_LENGTH:
        raise ValidationError(f"Tournament name must be 1 to {MAX_NAME_LENGTH} characters")
    return cleaned


def _clean_players(names: Sequence[str]) -> List[str]:
    cleaned = [sanitize_name(n or "") for n in names]
    if any(not n for n in cleaned):
        raise ValidationError("Player name is required")
    return cleaned


def _clean_first_match(first_match):
    if first_match is None:
        return None
    return tuple([sanitize_name(p or "") for p in team] for team in first_match)


def _check_point_type(point_type: str):
    if max_score(point_type) is None:
        raise ValidationError(f"Unknown point type '{point_type}'")


def _check_roster(players: List[str], team_type: str, genders: Optional[Dict[str, str]]):
    problem = roster_problem(players, team_type, genders)
    if problem is not None:
        raise ValidationError(problem)


def create_tournament(
    name: str,
    team_type: str,
    point_type: str,
    players: Sequence[str],
    genders: Optional[Dict[str, str]] = None,
    first_match: Optional[Tuple[Sequence[str], Sequence[str]]] = None,
    rng: Optional[random.Random] = None,
) -> Tournament:
    name = _clean_name(name)
    if team_type not in TEAM_TYPES:
        raise ValidationError(f"Unknown team type '{team_type}'")
    _check_point_type(point_type)

    players = _clean_players(players)
    if team_type == "mix":
        genders = {sanitize_name(k): v for k, v in (genders or {}).items()}
    else:
        genders = None
    _check_roster(players, team_type, genders)

    rounds = generate(players, team_type, point_type, genders, _clean_first_match(first_match), rng)
    tournament = Tournament(
        id=generate_id(),
        name=name,
        team_type=team_type,
        point_type=point_type,
        players=players,
        rounds=rounds,
        player_genders=genders,
    )
    logger.info(f"Created tournament {tournament.id} ({team_type}, {len(players)} players, {len(rounds)} rounds)")
    return tournament


def is_structural(tournament: Tournament, command) -> bool:
    """True when ``command`` forces a new schedule and a score reset."""
    if isinstance(command, UpdateMixPlayers):
        names = [sanitize_name(n) for n, _ in command.players]
        genders = {sanitize_name(n): g for n, g in command.players}
        return names != tournament.players or genders != (tournament.player_genders or {})
    return isinstance(command, STRUCTURAL)


def _regenerate(
    t: Tournament,
    players: List[str],
    genders: Optional[Dict[str, str]],
    rng: random.Random,
    first_match=None,
):
    t.rounds = generate(players, t.team_type, t.point_type, genders, first_match, rng)
    t.players = players
    t.player_genders = genders
    t.has_extended = False
    logger.info(f"Regenerated tournament {t.id}: {len(players)} players, {len(t.rounds)} rounds, scores reset")


# -- Safe edits ---------------------------------------------------------------

def _rename_player(t: Tournament, cmd: RenamePlayer, rng: random.Random):
    new_name = sanitize_name(cmd.new_name or "")
    if not new_name:
        raise ValidationError("Player name is required")
    if cmd.old_name not in t.players:
        raise ValidationError(f"Player '{cmd.old_name}' is not in this tournament")
    if any(p != cmd.old_name and p.lower() == new_name.lower() for p in t.players):
        raise ValidationError(f"Player \"{new_name}\" already exists. Each player must have a unique name.")
    if new_name == cmd.old_name:
        return

    def swap(names):
        return [new_name if p == cmd.old_name else p for p in names]

    t.players = swap(t.players)
    if t.player_genders is not None:
        t.player_genders = {(new_name if k == cmd.old_name else k): v for k, v in t.player_genders.items()}
    for rnd in t.rounds:
        rnd.resting_players = swap(rnd.resting_players)
        for match in rnd.matches:
            match.team_a = swap(match.team_a)
            match.team_b = swap(match.team_b)


def _update_info(t: Tournament, cmd: UpdateInfo, rng: random.Random):
    if cmd.name is not None:
        t.name = _clean_name(cmd.name)
    if cmd.point_type is None or cmd.point_type == t.point_type:
        return
    _check_point_type(cmd.point_type)
    if t.has_any_scored_round():
        if not cmd.reset_scores:
            raise ValidationError("Changing the point type resets all scores; confirm with reset_scores")
        reset_all(t)
        logger.info(f"Point type of {t.id} changed to {cmd.point_type}, scores reset")
    t.point_type = cmd.point_type


# -- Structural edits ---------------------------------------------------------

def _add_players(t: Tournament, cmd: AddPlayers, rng: random.Random):
    if t.team_type == "mix":
        raise ValidationError("Mix Americano players need a gender; update the mix roster instead")
    names = _clean_players(cmd.names)
    if not names:
        raise ValidationError("No players to add")
    lowered = [n.lower() for n in names]
    if len(set(lowered)) != len(lowered):
        raise ValidationError("Duplicate names found in input. Each player must have a unique name.")
    existing = {p.lower() for p in t.players}
    clash = [n for n in names if n.lower() in existing]
    if clash:
        raise ValidationError(f"Player \"{clash[0]}\" already exists. Each player must have a unique name.")

    players = t.players + names
    _check_roster(players, t.team_type, None)
    _regenerate(t, players, None, rng)


def _remove_player(t: Tournament, cmd: RemovePlayer, rng: random.Random):
    if t.team_type == "mix":
        raise ValidationError("Mix Americano needs a balanced roster; update the mix roster instead")
    if cmd.name not in t.players:
        raise ValidationError(f"Player '{cmd.name}' is not in this tournament")
    players = [p for p in t.players if p != cmd.name]
    _check_roster(players, t.team_type, None)
    _regenerate(t, players, None, rng)


def _update_mix_players(t: Tournament, cmd: UpdateMixPlayers, rng: random.Random):
    if t.team_type != "mix":
        raise ValidationError("Only Mix Americano tournaments have a gendered roster")
    if not is_structural(t, cmd):
        return
    players = _clean_players([n for n, _ in cmd.players])
    genders = {sanitize_name(n): g for n, g in cmd.players}
    _check_roster(players, t.team_type, genders)
    _regenerate(t, players, genders, rng)


def _adjust_lineup(t: Tournament, cmd: AdjustLineup, rng: random.Random):
    _check_roster(t.players, t.team_type, t.player_genders)
    first_match = _clean_first_match((cmd.team_a, cmd.team_b))
    _regenerate(t, list(t.players), t.player_genders, rng, first_match)


# -- Scores and progress ------------------------------------------------------

def _set_score(t: Tournament, cmd: SetScore, rng: random.Random):
    set_score(t, cmd.round_number, cmd.match_id, cmd.team, cmd.value)


def _reset_score(t: Tournament, cmd: ResetScore, rng: random.Random):
    reset_score(t, cmd.round_number, cmd.match_id)


def _close_round(t: Tournament, cmd: CloseRound, rng: random.Random):
    """Mexicano: standings of the finished round seed the next one."""
    if t.team_type != "mexicano":
        raise ValidationError("Only Mexicano rounds are generated from the standings")
    if not t.rounds or not t.rounds[-1].is_complete:
        raise ValidationError("Finish the current round before starting the next one")
    if len(t.rounds) >= calculate_rounds(len(t.players), t.team_type):
        raise ValidationError("All rounds have been played")

    standings = compute_leaderboard(t)
    t.rounds.append(generate_mexicano_round(t, standings))
    logger.info(f"Tournament {t.id}: generated round {len(t.rounds)} from standings")


def _extend(t: Tournament, cmd: ExtendTournament, rng: random.Random):
    if t.has_extended:
        raise ValidationError("Tournament has already been extended")
    skipped = [r.round_number for r in t.rounds if not r.is_complete]
    if skipped:
        raise ValidationError("You need to complete all rounds before adding more rounds", details=skipped)
    t.rounds = t.rounds + extension_rounds(t, rng)
    t.has_extended = True
    logger.info(f"Tournament {t.id} extended to {len(t.rounds)} rounds")


def _end(t: Tournament, cmd: EndTournament, rng: random.Random):
    t.is_ended = True
    t.completed_at = utc_now()
    logger.info(f"Tournament {t.id} ended")


_HANDLERS: Dict[type, Callable] = {
    RenamePlayer: _rename_player,
    UpdateInfo: _update_info,
    AddPlayers: _add_players,
    RemovePlayer: _remove_player,
    UpdateMixPlayers: _update_mix_players,
    AdjustLineup: _adjust_lineup,
    SetScore: _set_score,
    ResetScore: _reset_score,
    CloseRound: _close_round,
    ExtendTournament: _extend,
    EndTournament: _end,
}


def apply(tournament: Tournament, command, rng: Optional[random.Random] = None) -> Tournament:
    """Apply ``command`` and return the new snapshot; ``tournament`` itself is never modified."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise ValidationError(f"Unsupported command {type(command).__name__}")
    if tournament.is_ended:
        raise TournamentEndedError()

    updated = copy.deepcopy(tournament)
    try:
        handler(updated, command, rng or random.Random())
    except ValidationError as e:
        logger.debug(f"Rejected {type(command).__name__} on {tournament.id}: {e.reason}")
        raise
    return updated


def close_round(tournament: Tournament) -> Tournament:
    """Close the current Mexicano round: standings first, then the next round."""
    return apply(tournament, CloseRound())


def with_share_id(tournament: Tournament, share_id: str) -> Tournament:
    """Record a published share id; allowed on ended tournaments too."""
    updated = copy.deepcopy(tournament)
    updated.share_id = share_id
    return updated


async def load_tournament(store, tournament_id: str) -> Tournament:
    tournament = await store.load(tournament_id)
    if tournament is None:
        raise NotFoundError("Tournament not found")
    return tournament


async def delete_tournament(store, tournament_id: str):
    """Always permitted, ended or not; deleting an unknown id is a no-op."""
    await store.delete(tournament_id)
    logger.info(f"Deleted tournament {tournament_id}")
