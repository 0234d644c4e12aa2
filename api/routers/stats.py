"""Stats/dashboard API endpoints."""

import datetime as dt
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from analytics import (
    RoundFilters,
    build_leaderboard,
    dashboard_summary,
    filter_rounds,
    score_trend,
    unique_course_names,
    unique_dates,
)
from api.config import Settings, get_settings
from api.dependencies import get_db, require_principal
from api.routers.rounds import summarize_round
from api.schemas import (
    DashboardResponse,
    HistoryResponse,
    LeaderboardEntry,
    PlayerSummary,
)
from auth import Principal
from database.db_manager import DatabaseManager

router = APIRouter()


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profiles = await db.profiles.list_profiles()
    top = build_leaderboard(profiles, limit or settings.leaderboard_size)
    return [LeaderboardEntry.from_profile(p) for p in top]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    profile = await db.profiles.get_profile(principal.uid)
    if not profile:
        raise HTTPException(404, "Profile not found")

    profiles = await db.profiles.list_profiles()
    recent = await db.rounds.list_recent(settings.recent_rounds)

    return DashboardResponse(
        profile=profile,
        summary=PlayerSummary(**dashboard_summary(profile)),
        leaderboard=[
            LeaderboardEntry.from_profile(p)
            for p in build_leaderboard(profiles, settings.leaderboard_size)
        ],
        recent_rounds=[summarize_round(r) for r in recent],
    )


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    course: str = Query("", description="Substring of the course name"),
    player: str = Query("", description="Substring of a player's name"),
    date: Optional[dt.date] = Query(None),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Recent rounds with the history page filters applied.

    The dropdown options come from the unfiltered list.
    """
    rounds = await db.rounds.list_recent(settings.history_rounds)
    profiles = await db.profiles.list_profiles()
    filtered = filter_rounds(
        rounds, profiles, RoundFilters(course=course, player=player, date=date)
    )
    return HistoryResponse(
        rounds=[summarize_round(r) for r in filtered],
        course_names=unique_course_names(rounds),
        dates=unique_dates(rounds),
    )


@router.get("/trend/{uid}")
async def get_score_trend(uid: str, db: DatabaseManager = Depends(get_db)):
    """A player's totals round by round, oldest first."""
    rounds = await db.rounds.list_for_player(uid)
    return score_trend(list(reversed(rounds)), uid)
