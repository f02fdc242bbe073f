from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from share.functions import share_tournament, share_url
from share.router import get_share_store
from tournament.analytics import (
    SORT_BY_POINTS,
    compute_leaderboard,
    compute_pairing_stats,
    rounds_between,
    rounds_involving,
)
from tournament.commands import (
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
from tournament.errors import ValidationError
from tournament.lifecycle import (
    apply,
    create_tournament,
    delete_tournament,
    load_tournament,
    with_share_id,
)
from tournament.models import point_type_label
from tournament.storage import SqlTournamentStore

router = APIRouter(prefix="/tournaments", tags=["Tournaments"])

Gender = Literal["male", "female"]


def get_tournament_store():
    return SqlTournamentStore()


# -- Request bodies ------------------------------------------------------------

class FirstMatchIn(BaseModel):
    teamA: List[str]
    teamB: List[str]


class CreateTournamentIn(BaseModel):
    name: str
    teamType: Literal["standard", "mix", "team", "mexicano"]
    pointType: str
    players: List[str]
    playerGenders: Optional[Dict[str, Gender]] = None
    firstMatch: Optional[FirstMatchIn] = None


class UpdateInfoIn(BaseModel):
    name: Optional[str] = None
    pointType: Optional[str] = None
    resetScores: bool = False


class RenamePlayerIn(BaseModel):
    oldName: str
    newName: str


class AddPlayersIn(BaseModel):
    names: List[str]


class RemovePlayerIn(BaseModel):
    name: str


class MixPlayerIn(BaseModel):
    name: str
    gender: Gender


class MixPlayersIn(BaseModel):
    players: List[MixPlayerIn]


class ScoreIn(BaseModel):
    team: Literal["A", "B"]
    value: int


# -- Helpers -------------------------------------------------------------------

async def _apply(tid: str, command, store) -> dict:
    tournament = await load_tournament(store, tid)
    updated = apply(tournament, command)
    await store.save(updated)
    return updated.to_dict()


def _detail(tournament) -> dict:
    return dict(
        tournament.to_dict(),
        teamTypeName=tournament.team_type_name,
        pointTypeLabel=point_type_label(tournament.point_type),
        completedRounds=tournament.completed_rounds(),
        skippedRounds=tournament.skipped_rounds(),
    )


def _check_player(tournament, player: str):
    if player not in tournament.players:
        raise ValidationError(f"Player '{player}' is not in this tournament")


# -- Routes --------------------------------------------------------------------

@router.get("")
async def list_tournaments(store=Depends(get_tournament_store)):
    return [t.to_dict() for t in await store.load_all()]


@router.post("", status_code=201)
async def create(body: CreateTournamentIn, store=Depends(get_tournament_store)):
    first_match = (body.firstMatch.teamA, body.firstMatch.teamB) if body.firstMatch else None
    tournament = create_tournament(
        body.name, body.teamType, body.pointType, body.players,
        genders=body.playerGenders, first_match=first_match,
    )
    await store.save(tournament)
    return tournament.to_dict()


@router.get("/{tid}")
async def get_tournament(tid: str, store=Depends(get_tournament_store)):
    return _detail(await load_tournament(store, tid))


@router.delete("/{tid}")
async def delete(tid: str, store=Depends(get_tournament_store)):
    await delete_tournament(store, tid)
    return {"success": True}


@router.patch("/{tid}")
async def update_info(tid: str, body: UpdateInfoIn, store=Depends(get_tournament_store)):
    return await _apply(tid, UpdateInfo(body.name, body.pointType, body.resetScores), store)


@router.post("/{tid}/players/rename")
async def rename_player(tid: str, body: RenamePlayerIn, store=Depends(get_tournament_store)):
    return await _apply(tid, RenamePlayer(body.oldName, body.newName), store)


@router.post("/{tid}/players/add")
async def add_players(tid: str, body: AddPlayersIn, store=Depends(get_tournament_store)):
    return await _apply(tid, AddPlayers(tuple(body.names)), store)


@router.post("/{tid}/players/remove")
async def remove_player(tid: str, body: RemovePlayerIn, store=Depends(get_tournament_store)):
    return await _apply(tid, RemovePlayer(body.name), store)


@router.put("/{tid}/mix-players")
async def update_mix_players(tid: str, body: MixPlayersIn, store=Depends(get_tournament_store)):
    players = tuple((p.name, p.gender) for p in body.players)
    return await _apply(tid, UpdateMixPlayers(players), store)


@router.post("/{tid}/lineup")
async def adjust_lineup(tid: str, body: FirstMatchIn, store=Depends(get_tournament_store)):
    return await _apply(tid, AdjustLineup(tuple(body.teamA), tuple(body.teamB)), store)


@router.post("/{tid}/rounds/{round_number}/matches/{match_id}/score")
async def submit_score(
    tid: str, round_number: int, match_id: str, body: ScoreIn,
    store=Depends(get_tournament_store),
):
    return await _apply(tid, SetScore(round_number, match_id, body.team, body.value), store)


@router.delete("/{tid}/rounds/{round_number}/matches/{match_id}/score")
async def reset_score(tid: str, round_number: int, match_id: str, store=Depends(get_tournament_store)):
    return await _apply(tid, ResetScore(round_number, match_id), store)


@router.post("/{tid}/close-round")
async def close_round(tid: str, store=Depends(get_tournament_store)):
    return await _apply(tid, CloseRound(), store)


@router.post("/{tid}/extend")
async def extend(tid: str, store=Depends(get_tournament_store)):
    return await _apply(tid, ExtendTournament(), store)


@router.post("/{tid}/end")
async def end(tid: str, store=Depends(get_tournament_store)):
    return await _apply(tid, EndTournament(), store)


@router.get("/{tid}/leaderboard")
async def leaderboard(
    tid: str,
    sort_by: Literal["points", "wins"] = SORT_BY_POINTS,
    store=Depends(get_tournament_store),
):
    tournament = await load_tournament(store, tid)
    standings = compute_leaderboard(tournament, sort_by)
    return {
        "sortBy": sort_by,
        "standings": [dict(s.to_dict(), rank=i + 1) for i, s in enumerate(standings)],
    }


@router.get("/{tid}/pairings/{player}")
async def pairings(tid: str, player: str, store=Depends(get_tournament_store)):
    tournament = await load_tournament(store, tid)
    _check_player(tournament, player)
    return [s.to_dict() for s in compute_pairing_stats(tournament, player)]


@router.get("/{tid}/players/{player}/rounds")
async def player_rounds(tid: str, player: str, store=Depends(get_tournament_store)):
    tournament = await load_tournament(store, tid)
    _check_player(tournament, player)
    return [r.to_dict() for r in rounds_involving(tournament, player)]


@router.get("/{tid}/head-to-head")
async def head_to_head(tid: str, a: str, b: str, store=Depends(get_tournament_store)):
    tournament = await load_tournament(store, tid)
    _check_player(tournament, a)
    _check_player(tournament, b)
    between = rounds_between(tournament, a, b)
    return {key: [r.to_dict() for r in entries] for key, entries in between.items()}


@router.post("/{tid}/share")
async def share(
    tid: str,
    store=Depends(get_tournament_store),
    share_store=Depends(get_share_store),
):
    tournament = await load_tournament(store, tid)
    share_id = await share_tournament(tournament.to_dict(), share_store)
    # the local snapshot only changes once the publish succeeded
    if share_id != tournament.share_id:
        await store.save(with_share_id(tournament, share_id))
    return {"success": True, "shareId": share_id, "shareUrl": share_url(share_id)}
