from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

# Wire format of a published tournament; mirrors Tournament.to_dict()


class MatchSchema(BaseModel):
    model_config = ConfigDict(strict=True)

    id: str
    teamA: List[str]
    teamB: List[str]
    scoreA: Optional[int]
    scoreB: Optional[int]
    isCompleted: bool


class RoundSchema(BaseModel):
    model_config = ConfigDict(strict=True)

    roundNumber: int
    matches: List[MatchSchema]
    restingPlayers: List[str]


class TournamentSnapshot(BaseModel):
    model_config = ConfigDict(strict=True)

    id: str
    name: str
    teamType: Literal["standard", "mix", "team", "mexicano"]
    pointType: str
    players: List[str]
    playerGenders: Optional[Dict[str, Literal["male", "female"]]] = None
    rounds: List[RoundSchema]
    createdAt: str
    hasExtended: Optional[bool] = None
    isEnded: Optional[bool] = None
    completedAt: Optional[str] = None
    shareId: Optional[str] = None


def flatten_errors(errors: list) -> list:
    return [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in errors
    ]
