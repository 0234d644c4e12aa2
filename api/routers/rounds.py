"""Round API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Dict, Iterable, List, Optional

from analytics import player_totals, round_summary, stats_after_round, stats_from_rounds
from api.config import Settings, get_settings
from api.dependencies import get_db, require_principal
from api.schemas import (
    CreateRoundRequest,
    PlayerTotal,
    RoundSummaryResponse,
    UpdateRoundRequest,
)
from auth import Principal
from database.db_manager import DatabaseManager
from forms import RoundDraft
from forms.round_draft import MAX_STROKES, MIN_STROKES
from models import LegacyCourseName, Round, UNSET_STROKES, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


def summarize_round(r: Round) -> RoundSummaryResponse:
    """Project a full Round into a list row."""
    return RoundSummaryResponse(
        id=r.id,
        course_name=r.course_name,
        date=r.date,
        hole_count=r.hole_count,
        par=r.get_par(),
        players=r.players,
        winner=r.winner,
        totals=[PlayerTotal(**t) for t in player_totals(r.players, r.scores)],
    )


async def _load_round(db: DatabaseManager, round_id: str) -> Round:
    try:
        round_ = await db.rounds.get_round(round_id)
    except ValueError:
        round_ = None
    if not round_:
        raise HTTPException(404, "Round not found")
    return round_


@router.get("", response_model=List[RoundSummaryResponse])
async def list_recent_rounds(
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    rounds = await db.rounds.list_recent(limit or settings.recent_rounds)
    return [summarize_round(r) for r in rounds]


@router.get("/mine", response_model=List[RoundSummaryResponse])
async def list_my_rounds(
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.list_for_player(principal.uid)
    return [summarize_round(r) for r in rounds]


@router.get("/{round_id}", response_model=Round)
async def get_round(round_id: str, db: DatabaseManager = Depends(get_db)):
    return await _load_round(db, round_id)


@router.get("/{round_id}/summary")
async def get_round_summary(round_id: str, db: DatabaseManager = Depends(get_db)):
    """Totals, score types and winner for one round."""
    return round_summary(await _load_round(db, round_id))


async def _select_players(
    db: DatabaseManager, draft: RoundDraft, uids: List[str]
) -> Dict[str, UserProfile]:
    profiles = {}
    for uid in uids:
        profile = await db.profiles.get_profile(uid)
        if not profile:
            raise HTTPException(400, f"Unknown player: {uid}")
        profiles[uid] = profile
        draft.toggle_player(uid)
    return profiles


def _fill_scores(draft: RoundDraft, scores: Dict[str, List[int]]) -> None:
    """Copy submitted strokes onto the draft. 0 leaves a hole unset."""
    for uid, holes in scores.items():
        if uid not in draft.players:
            raise HTTPException(400, f"Scores given for a player not in the round: {uid}")
        if len(holes) != draft.hole_count:
            raise HTTPException(
                422, f"Player {uid} has {len(holes)} hole scores, expected {draft.hole_count}"
            )
        for index, strokes in enumerate(holes):
            if strokes == UNSET_STROKES:
                continue
            if not draft.set_score(uid, index, strokes):
                raise HTTPException(
                    422,
                    f"Strokes must be between {MIN_STROKES} and {MAX_STROKES}: "
                    f"player {uid}, hole {index + 1}",
                )


async def _refresh_stats(db: DatabaseManager, uids: Iterable[str]) -> None:
    """Recompute stats from every round each player still has on record."""
    for uid in uids:
        rounds = await db.rounds.list_for_player(uid)
        await db.profiles.update_stats(uid, stats_from_rounds(reversed(rounds), uid))


@router.post("", response_model=Round, status_code=201)
async def create_round(
    req: CreateRoundRequest,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Save a finished scorecard.

    The winner is worked out here, never taken from the client, and every
    player's stats are updated once the round is stored.
    """
    draft = RoundDraft(hole_count=req.hole_count, date=req.date)

    if req.course_id:
        try:
            course = await db.courses.get_course(req.course_id)
        except ValueError:
            course = None
        if not course:
            raise HTTPException(404, "Course not found")
        draft.set_course(course.snapshot())
    elif (req.course_name or "").strip():
        draft.set_course(LegacyCourseName(name=req.course_name.strip()))

    profiles = await _select_players(db, draft, req.players)
    _fill_scores(draft, req.scores)

    message = draft.validate()
    if message:
        raise HTTPException(400, message)

    saved = await db.rounds.create_round(draft.to_round())

    for uid in saved.players:
        stats = stats_after_round(profiles[uid].stats, saved, uid)
        await db.profiles.update_stats(uid, stats)

    logger.info(
        "Round %s saved by %s, winner %s", saved.id, principal.uid, saved.winner
    )
    return saved


@router.put("/{round_id}", response_model=Round)
async def update_round(
    round_id: str,
    req: UpdateRoundRequest,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Correct a saved scorecard. Only someone who played in it may do so.

    Course and hole count are kept. The winner is worked out again and the
    stats of everyone who was or now is in the round are rebuilt from
    their stored rounds.
    """
    existing = await _load_round(db, round_id)
    if principal.uid not in existing.players:
        raise HTTPException(403, "Only players in this round can edit it")

    draft = RoundDraft(hole_count=existing.hole_count, date=req.date or existing.date)
    draft.set_course(existing.course)
    await _select_players(db, draft, req.players or existing.players)
    _fill_scores(draft, req.scores)

    message = draft.validate()
    if message:
        raise HTTPException(400, message)

    updated = await db.rounds.update_round(round_id, draft.to_round())
    if not updated:
        raise HTTPException(404, "Round not found")

    affected = list(dict.fromkeys(existing.players + updated.players))
    await _refresh_stats(db, affected)

    logger.info(
        "Round %s corrected by %s, winner %s", round_id, principal.uid, updated.winner
    )
    return updated


@router.delete("/{round_id}", status_code=204)
async def delete_round(
    round_id: str,
    principal: Principal = Depends(require_principal),
    db: DatabaseManager = Depends(get_db),
):
    """Remove a round and rebuild its players' stats without it.

    Only someone who played in it may do so.
    """
    round_ = await _load_round(db, round_id)
    if principal.uid not in round_.players:
        raise HTTPException(403, "Only players in this round can delete it")
    if not await db.rounds.delete_round(round_id):
        raise HTTPException(404, "Round not found")
    await _refresh_stats(db, round_.players)
    logger.info("Round %s deleted by %s", round_id, principal.uid)
