import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

TEAM_TYPES = ("standard", "mix", "team", "mexicano")
GENDERS = ("male", "female")

TEAM_TYPE_NAMES = {
    "standard": "Standard Americano",
    "mix": "Mix Americano",
    "team": "Team Americano",
    "mexicano": "Standard Mexicano",
}

# point type -> (max score, compensation multiplier)
POINT_TYPES = {
    "21": (21, 10),
    "16": (16, 8),
    "best4": (4, 2),
    "best5": (5, 2),
}

POINT_TYPE_LABELS = {
    "21": "21 points",
    "16": "16 points",
    "best4": "Best of 4",
    "best5": "Best of 5",
}

DEFAULT_MULTIPLIER = 10

MIN_PLAYERS = 4
MAX_PLAYERS = 12
MIX_ALLOWED_PLAYERS = (6, 8)
MAX_NAME_LENGTH = 64


def generate_id():
    return str(uuid.uuid4())[:8]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def max_score(point_type: str) -> Optional[int]:
    entry = POINT_TYPES.get(point_type)
    return entry[0] if entry else None


def compensation_multiplier(point_type: str) -> int:
    entry = POINT_TYPES.get(point_type)
    return entry[1] if entry else DEFAULT_MULTIPLIER


def point_type_label(point_type: str) -> str:
    return POINT_TYPE_LABELS.get(point_type, point_type)


def sanitize_name(value: str) -> str:
    """Strip markup and script fragments from user supplied names."""
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"javascript:", "", value, flags=re.IGNORECASE)
    value = re.sub(r"on\w+=", "", value, flags=re.IGNORECASE)
    return value.strip()


@dataclass
class Match:
    id: str
    team_a: List[str]
    team_b: List[str]
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    is_completed: bool = False

    @property
    def players(self) -> List[str]:
        return self.team_a + self.team_b

    def side_of(self, player: str) -> Optional[str]:
        if player in self.team_a:
            return "A"
        if player in self.team_b:
            return "B"
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "teamA": list(self.team_a),
            "teamB": list(self.team_b),
            "scoreA": self.score_a,
            "scoreB": self.score_b,
            "isCompleted": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Match":
        return cls(
            id=data["id"],
            team_a=list(data["teamA"]),
            team_b=list(data["teamB"]),
            score_a=data.get("scoreA"),
            score_b=data.get("scoreB"),
            is_completed=bool(data.get("isCompleted", False)),
        )


@dataclass
class Round:
    round_number: int
    matches: List[Match]
    resting_players: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return bool(self.matches) and all(m.is_completed for m in self.matches)

    def to_dict(self) -> dict:
        return {
            "roundNumber": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
            "restingPlayers": list(self.resting_players),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Round":
        return cls(
            round_number=data["roundNumber"],
            matches=[Match.from_dict(m) for m in data["matches"]],
            resting_players=list(data.get("restingPlayers", [])),
        )


def build_round(round_number: int, players: List[str], team_a: List[str], team_b: List[str]) -> Round:
    """Single-court round; everyone not on court rests."""
    on_court = set(team_a) | set(team_b)
    return Round(
        round_number=round_number,
        matches=[Match(id=generate_id(), team_a=list(team_a), team_b=list(team_b))],
        resting_players=[p for p in players if p not in on_court],
    )


@dataclass
class Tournament:
    id: str
    name: str
    team_type: str
    point_type: str
    players: List[str] = field(default_factory=list)
    rounds: List[Round] = field(default_factory=list)
    player_genders: Optional[Dict[str, str]] = None
    created_at: str = field(default_factory=utc_now)
    has_extended: bool = False
    is_ended: bool = False
    completed_at: Optional[str] = None
    share_id: Optional[str] = None

    @property
    def max_score(self) -> Optional[int]:
        return max_score(self.point_type)

    @property
    def team_type_name(self) -> str:
        return TEAM_TYPE_NAMES.get(self.team_type, self.team_type)

    def find_match(self, round_number: int, match_id: str) -> Optional[Match]:
        for rnd in self.rounds:
            if rnd.round_number != round_number:
                continue
            for match in rnd.matches:
                if match.id == match_id:
                    return match
        return None

    def has_any_scored_round(self) -> bool:
        return any(m.is_completed for r in self.rounds for m in r.matches)

    def completed_rounds(self) -> int:
        return sum(1 for r in self.rounds if r.is_complete)

    def skipped_rounds(self) -> List[int]:
        """Incomplete round numbers, reported once the final round has a result."""
        if not self.rounds or not self.rounds[-1].is_complete:
            return []
        return [r.round_number for r in self.rounds if not r.is_complete]

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "teamType": self.team_type,
            "pointType": self.point_type,
            "players": list(self.players),
            "rounds": [r.to_dict() for r in self.rounds],
            "createdAt": self.created_at,
            "hasExtended": self.has_extended,
            "isEnded": self.is_ended,
        }
        if self.player_genders is not None:
            data["playerGenders"] = dict(self.player_genders)
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        if self.share_id is not None:
            data["shareId"] = self.share_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Tournament":
        genders = data.get("playerGenders")
        return cls(
            id=data["id"],
            name=data["name"],
            team_type=data["teamType"],
            point_type=data["pointType"],
            players=list(data["players"]),
            rounds=[Round.from_dict(r) for r in data.get("rounds", [])],
            player_genders=dict(genders) if genders is not None else None,
            created_at=data.get("createdAt") or utc_now(),
            has_extended=bool(data.get("hasExtended", False)),
            is_ended=bool(data.get("isEnded", False)),
            completed_at=data.get("completedAt"),
            share_id=data.get("shareId"),
        )


@dataclass
class PlayerStats:
    name: str
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    total_points: int = 0
    compensation_points: int = 0
    final_score: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "matchesPlayed": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "totalPoints": self.total_points,
            "compensationPoints": self.compensation_points,
            "finalScore": self.final_score,
        }


@dataclass
class PlayerPairingStats:
    name: str
    partner_count: int = 0
    partner_results: List[str] = field(default_factory=list)  # win | loss | pending
    versus_count: int = 0
    versus_results: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "partnerCount": self.partner_count,
            "partnerResults": list(self.partner_results),
            "versusCount": self.versus_count,
            "versusResults": list(self.versus_results),
        }


@dataclass
class RoundMatch:
    round_number: int
    match: Match

    def to_dict(self) -> dict:
        return {"roundNumber": self.round_number, "match": self.match.to_dict()}
