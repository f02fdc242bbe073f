"""Commands accepted by ``lifecycle.apply``.

One dataclass per edit an organiser can make. Whether a command is safe
(in place) or structural (regenerate + reset) is decided in
``lifecycle.is_structural``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class RenamePlayer:
    old_name: str
    new_name: str


@dataclass(frozen=True)
class UpdateInfo:
    name: Optional[str] = None
    point_type: Optional[str] = None
    reset_scores: bool = False


@dataclass(frozen=True)
class AddPlayers:
    names: Tuple[str, ...]


@dataclass(frozen=True)
class RemovePlayer:
    name: str


@dataclass(frozen=True)
class UpdateMixPlayers:
    players: Tuple[Tuple[str, str], ...]  # (name, gender)


@dataclass(frozen=True)
class AdjustLineup:
    """Regenerate the schedule around a pinned first match."""

    team_a: Tuple[str, str]
    team_b: Tuple[str, str]


@dataclass(frozen=True)
class SetScore:
    round_number: int
    match_id: str
    team: str
    value: int


@dataclass(frozen=True)
class ResetScore:
    round_number: int
    match_id: str


@dataclass(frozen=True)
class CloseRound:
    pass


@dataclass(frozen=True)
class ExtendTournament:
    pass


@dataclass(frozen=True)
class EndTournament:
    pass


STRUCTURAL = (AddPlayers, RemovePlayer, UpdateMixPlayers, AdjustLineup)
