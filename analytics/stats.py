from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.profile import NO_BEST_SCORE, PlayerStats, UserProfile
from models.round import Round

from .scoring import BIRDIE, determine_winner, score_label, score_type_counts, total_score


def win_rate(profile: UserProfile) -> int:
    return profile.win_rate()


def birdies_per_round(profile: UserProfile) -> float:
    return profile.birdies_per_round()


def count_birdies(holes: Iterable[Optional[int]]) -> int:
    """Holes labelled birdie under the par-4 mapping."""
    return sum(1 for strokes in holes if score_label(strokes) == BIRDIE)


def stats_after_round(stats: PlayerStats, round_obj: Round, uid: str) -> PlayerStats:
    """
    Fold one finished round into a player's running stats.

    - rounds_played and (for the winner) wins go up by one
    - birdies counts 3-stroke holes
    - best_score keeps the lowest total, replacing the 999 placeholder
    - average_score is the running mean, one decimal
    """
    score = round_obj.player_score(uid)
    if score is None:
        raise ValueError(f"Player {uid} did not play in round {round_obj.id}")
    if not score.is_complete():
        raise ValueError(f"Round for player {uid} is missing hole scores")

    total = total_score(score.holes)
    played = stats.rounds_played + 1
    previous_sum = stats.average_score * stats.rounds_played
    best = total if stats.best_score == NO_BEST_SCORE else min(stats.best_score, total)

    return PlayerStats(
        wins=stats.wins + (1 if round_obj.winner == uid else 0),
        birdies=stats.birdies + count_birdies(score.holes),
        best_score=best,
        average_score=round((previous_sum + total) / played, 1),
        rounds_played=played,
    )


def stats_from_rounds(rounds: Iterable[Round], uid: str) -> PlayerStats:
    """Rebuild a player's stats from scratch, folding rounds oldest first.

    Rounds the player is not in, or left unfinished, are skipped.
    """
    stats = PlayerStats()
    for round_obj in rounds:
        score = round_obj.player_score(uid)
        if score is None or not score.is_complete():
            continue
        stats = stats_after_round(stats, round_obj, uid)
    return stats


def round_summary(round_obj: Round) -> Dict[str, Any]:
    """Per-player totals and the winner for a single round."""
    players = []
    for score in round_obj.ordered_scores():
        players.append(
            {
                "uid": score.uid,
                "total": total_score(score.holes),
                "complete": score.is_complete(),
                "score_types": score_type_counts(score.holes),
            }
        )

    winner = round_obj.winner
    if winner is None and round_obj.players:
        winner = determine_winner(round_obj.players, round_obj.scores)

    par = round_obj.get_par()
    return {
        "round_id": round_obj.id,
        "course_name": round_obj.course_name,
        "date": round_obj.date,
        "par": par,
        "winner": winner,
        "complete": round_obj.is_complete(),
        "players": players,
    }


def score_trend(rounds: Iterable[Round], uid: str) -> List[Dict[str, Any]]:
    """Return one player's total by round, in the order given."""
    results: List[Dict[str, Any]] = []
    for index, round_obj in enumerate(rounds, start=1):
        score = round_obj.player_score(uid)
        if score is None:
            continue
        total = total_score(score.holes)
        par = round_obj.get_par()
        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "date": round_obj.date,
                "total_score": total,
                "to_par": total - par if par is not None and score.is_complete() else None,
            }
        )
    return results


def dashboard_summary(profile: UserProfile) -> Dict[str, Any]:
    """Numbers for the profile card on the dashboard."""
    return {
        "rounds_played": profile.stats.rounds_played,
        "wins": profile.stats.wins,
        "best_score": profile.best_score_or_none(),
        "average_score": profile.stats.average_score,
        "birdies": profile.stats.birdies,
        "win_rate": profile.win_rate(),
        "birdies_per_round": profile.birdies_per_round(),
    }
