"""In-progress scorecard for a new round.

Keeps the selected players and their per-hole strokes until the card is
complete, then produces a validated Round with the winner filled in.
"""

import datetime as dt
from typing import Dict, List, Optional, Union

from analytics.scoring import determine_winner, player_totals
from forms.state import ScreenState
from models import (
    CourseSnapshot,
    HoleCount,
    LegacyCourseName,
    PlayerScore,
    Round,
    UNSET_STROKES,
)

MIN_PLAYERS = 2
MIN_STROKES = 1
MAX_STROKES = 10

COURSE_REQUIRED = "Please enter a course name"
TOO_FEW_PLAYERS = "Please select at least {n} players"
SCORES_INCOMPLETE = "Please fill in all scores for selected players"


class RoundDraft:
    """Mutable scorecard behind the new-round screen."""

    def __init__(
        self,
        hole_count: HoleCount = 18,
        date: Optional[dt.date] = None,
        min_players: int = MIN_PLAYERS,
    ):
        self.course: Optional[Union[CourseSnapshot, LegacyCourseName]] = None
        self.date = date or dt.date.today()
        self.hole_count = hole_count
        self.min_players = min_players
        self.players: List[str] = []
        self.scores: Dict[str, List[int]] = {}
        self.state = ScreenState.idle()

    # ================================================================
    # Course and date
    # ================================================================

    def set_course(self, course: Union[CourseSnapshot, LegacyCourseName]) -> None:
        """Pick the course; a snapshot also fixes the hole count."""
        self.course = course
        if isinstance(course, CourseSnapshot) and course.holes != self.hole_count:
            self.set_hole_count(course.holes)

    def set_course_name(self, name: str) -> None:
        name = name.strip()
        self.course = LegacyCourseName(name=name) if name else None

    def set_hole_count(self, hole_count: HoleCount) -> None:
        """Change the hole count. Every player's strokes start over."""
        self.hole_count = hole_count
        self.scores = {uid: self._blank_card() for uid in self.players}

    # ================================================================
    # Players and scores
    # ================================================================

    def _blank_card(self) -> List[int]:
        return [UNSET_STROKES] * self.hole_count

    def toggle_player(self, uid: str) -> bool:
        """Add or remove a player. Returns True if the player is now selected."""
        if uid in self.players:
            self.players.remove(uid)
            self.scores.pop(uid, None)
            return False
        self.players.append(uid)
        self.scores[uid] = self._blank_card()
        return True

    def set_score(self, uid: str, hole_index: int, strokes: int) -> bool:
        """Record strokes for one hole. Out-of-range input is ignored."""
        if uid not in self.scores:
            return False
        if not 0 <= hole_index < self.hole_count:
            return False
        if not MIN_STROKES <= strokes <= MAX_STROKES:
            return False
        self.scores[uid][hole_index] = strokes
        return True

    def totals(self) -> Dict[str, int]:
        return {
            t["uid"]: t["total"] for t in player_totals(self.players, self.scores)
        }

    def leader(self) -> Optional[str]:
        """Current lowest total, first selected player on ties."""
        if not self.players:
            return None
        return determine_winner(self.players, self.scores)

    def is_complete(self) -> bool:
        return all(
            UNSET_STROKES not in self.scores.get(uid, []) for uid in self.players
        )

    # ================================================================
    # Submit
    # ================================================================

    def validate(self) -> Optional[str]:
        """First problem that blocks saving, or None.

        The message is also put on `state` so the screen can show it.
        """
        if self.course is None or not self.course.name.strip():
            message = COURSE_REQUIRED
        elif len(self.players) < self.min_players:
            message = TOO_FEW_PLAYERS.format(n=self.min_players)
        elif not self.is_complete():
            message = SCORES_INCOMPLETE
        else:
            message = None

        self.state = ScreenState.error(message) if message else ScreenState.idle()
        return message

    def to_round(self) -> Round:
        """Build the Round to save. Raises ValueError if the card is not ready."""
        message = self.validate()
        if message:
            raise ValueError(message)

        scores = [PlayerScore(uid=uid, holes=list(self.scores[uid])) for uid in self.players]
        par = self.course.par if isinstance(self.course, CourseSnapshot) else None
        return Round(
            course=self.course,
            date=self.date,
            players=list(self.players),
            scores=scores,
            winner=determine_winner(self.players, self.scores),
            hole_count=self.hole_count,
            par=par,
        )
