"""API-specific request and response models."""

import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from models import HoleCount, UserProfile


def _unique_players(players: List[str]) -> List[str]:
    seen = set()
    for uid in players:
        if uid in seen:
            raise ValueError(f"Player {uid} is listed more than once")
        seen.add(uid)
    return players


class PlayerTotal(BaseModel):
    uid: str
    total: int


class RoundSummaryResponse(BaseModel):
    """Lightweight round for list views."""
    id: str
    course_name: str
    date: dt.date
    hole_count: int
    par: Optional[int] = None
    players: List[str]
    winner: Optional[str] = None
    totals: List[PlayerTotal]


class CreateRoundRequest(BaseModel):
    """A finished scorecard.

    Either `course_id` (a stored course, copied into the round) or
    `course_name` (free text) must be given. Scores are keyed by player uid
    and listed in the order players were selected.
    """
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    date: Optional[dt.date] = None
    hole_count: HoleCount = 18
    players: List[str] = Field(min_length=1)
    scores: Dict[str, List[int]]

    @field_validator('players')
    @classmethod
    def validate_players(cls, v):
        return _unique_players(v)


class UpdateRoundRequest(BaseModel):
    """A corrected scorecard for an existing round.

    The course and hole count stay as recorded. Leaving out `players`
    keeps the round's current players.
    """
    date: Optional[dt.date] = None
    players: Optional[List[str]] = Field(None, min_length=1)
    scores: Dict[str, List[int]]

    @field_validator('players')
    @classmethod
    def validate_players(cls, v):
        return _unique_players(v) if v is not None else v


class LeaderboardEntry(BaseModel):
    uid: str
    name: str
    photo_url: Optional[str] = None
    wins: int
    rounds_played: int
    win_rate: int
    birdies_per_round: float

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "LeaderboardEntry":
        return cls(
            uid=profile.uid,
            name=profile.name,
            photo_url=profile.photo_url,
            wins=profile.stats.wins,
            rounds_played=profile.stats.rounds_played,
            win_rate=profile.win_rate(),
            birdies_per_round=profile.birdies_per_round(),
        )


class PlayerSummary(BaseModel):
    rounds_played: int
    wins: int
    best_score: Optional[int] = None
    average_score: float
    birdies: int
    win_rate: int
    birdies_per_round: float


class DashboardResponse(BaseModel):
    """Everything the dashboard page shows for the signed-in member."""
    profile: UserProfile
    summary: PlayerSummary
    leaderboard: List[LeaderboardEntry]
    recent_rounds: List[RoundSummaryResponse]


class HistoryResponse(BaseModel):
    rounds: List[RoundSummaryResponse]
    course_names: List[str]
    dates: List[dt.date]


class SessionResponse(BaseModel):
    state: str
    uid: Optional[str] = None
    display_name: Optional[str] = None
