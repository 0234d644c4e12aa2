"""Scorecard arithmetic: totals, winners and per-hole labels.

Every hole is labelled against a fixed par of 4. Courses only store an
aggregate par, so there is no per-hole par to compare against.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from models.round import PlayerScore

HOLE_IN_ONE = "hole in one"
EAGLE = "eagle"
BIRDIE = "birdie"
PAR = "par"
BOGEY = "bogey"
DOUBLE_BOGEY_OR_WORSE = "double bogey or worse"
NO_LABEL = "no label"

SCORE_LABELS = [HOLE_IN_ONE, EAGLE, BIRDIE, PAR, BOGEY, DOUBLE_BOGEY_OR_WORSE]

_LABEL_BY_STROKES = {
    1: HOLE_IN_ONE,
    2: EAGLE,
    3: BIRDIE,
    4: PAR,
    5: BOGEY,
}

ScoreLines = Union[Mapping[str, Sequence[int]], Iterable[PlayerScore]]


def total_score(holes: Iterable[Optional[int]]) -> int:
    """Sum of strokes; unset (0/None) holes count as 0.

    An incomplete card therefore under-reports. Callers that rank players
    should check completeness first.
    """
    return sum(max(h or 0, 0) for h in holes)


def _holes_by_player(scores: ScoreLines) -> Dict[str, Sequence[int]]:
    if isinstance(scores, Mapping):
        return dict(scores)
    return {s.uid: s.holes for s in scores}


def player_totals(players: Sequence[str], scores: ScoreLines) -> List[Dict]:
    """Totals in player order. Players without a score line total 0."""
    holes_by_player = _holes_by_player(scores)
    return [
        {"uid": uid, "total": total_score(holes_by_player.get(uid, []))}
        for uid in players
    ]


def determine_winner(players: Sequence[str], scores: ScoreLines) -> str:
    """Player with the lowest total.

    A tie goes to whichever tied player comes first in `players`; no tie
    is reported.
    """
    if not players:
        raise ValueError("Cannot determine a winner without players")

    totals = player_totals(players, scores)
    winner = totals[0]
    for current in totals[1:]:
        if current["total"] < winner["total"]:
            winner = current
    return winner["uid"]


def score_label(strokes: Optional[int]) -> str:
    """Name for a single hole score, assuming par 4."""
    if not strokes or strokes < 0:
        return NO_LABEL
    if strokes >= 6:
        return DOUBLE_BOGEY_OR_WORSE
    return _LABEL_BY_STROKES[strokes]


def score_type_counts(holes: Iterable[Optional[int]]) -> Dict[str, int]:
    """How many holes fall under each label. Unset holes are skipped."""
    counts = {name: 0 for name in SCORE_LABELS}
    for strokes in holes:
        label = score_label(strokes)
        if label != NO_LABEL:
            counts[label] += 1
    return counts
