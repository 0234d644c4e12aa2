import datetime as dt
from pydantic import BaseModel, Field, model_validator
from typing import Annotated, List, Literal, Optional, Union

from .base import BaseGolfModel
from .course import HoleCount

# A hole entry of 0 means the score has not been entered yet.
UNSET_STROKES = 0

Strokes = Annotated[int, Field(ge=0, le=10)]


class LegacyCourseName(BaseModel):
    """Rounds recorded before courses existed only kept the typed-in name."""
    kind: Literal["legacy"] = "legacy"
    name: str


class CourseSnapshot(BaseModel):
    """Course details copied into a round when it is created."""
    kind: Literal["snapshot"] = "snapshot"
    course_id: Optional[str] = None
    name: str
    holes: HoleCount
    par: int = Field(gt=0)
    address: Optional[str] = None


CourseRef = Annotated[
    Union[LegacyCourseName, CourseSnapshot], Field(discriminator="kind")
]


class PlayerScore(BaseModel):
    """One player's strokes, one entry per hole in playing order."""
    uid: str
    holes: List[Strokes] = Field(default_factory=list)

    def is_complete(self) -> bool:
        return bool(self.holes) and all(h != UNSET_STROKES for h in self.holes)


class Round(BaseGolfModel):
    """A round played by some of the group at one course on one day."""
    id: Optional[str] = None
    course: CourseRef
    date: dt.date
    players: List[str] = Field(min_length=1)
    scores: List[PlayerScore] = Field(default_factory=list)
    winner: Optional[str] = None
    hole_count: HoleCount = 18
    par: Optional[int] = Field(None, gt=0)
    created_at: Optional[dt.datetime] = None

    @model_validator(mode='after')
    def validate_scorecard(self):
        if len(set(self.players)) != len(self.players):
            raise ValueError("A player can only be added to a round once")

        score_uids = [s.uid for s in self.scores]
        if len(set(score_uids)) != len(score_uids):
            raise ValueError("Each player can only have one score line")
        if set(score_uids) != set(self.players):
            raise ValueError("Score lines must match the round's players")

        for score in self.scores:
            if len(score.holes) != self.hole_count:
                raise ValueError(
                    f"Player {score.uid} has {len(score.holes)} hole scores, "
                    f"expected {self.hole_count}"
                )

        if isinstance(self.course, CourseSnapshot) and self.course.holes != self.hole_count:
            raise ValueError(
                f"Course has {self.course.holes} holes but round has {self.hole_count}"
            )

        if self.winner is not None and self.winner not in self.players:
            raise ValueError(f"Winner {self.winner} did not play in this round")
        return self

    @property
    def course_name(self) -> str:
        return self.course.name

    @property
    def course_id(self) -> Optional[str]:
        if isinstance(self.course, CourseSnapshot):
            return self.course.course_id
        return None

    def get_par(self) -> Optional[int]:
        """Par from the round, or from the course snapshot when not copied."""
        if self.par is not None:
            return self.par
        if isinstance(self.course, CourseSnapshot):
            return self.course.par
        return None

    def player_score(self, uid: str) -> Optional[PlayerScore]:
        for score in self.scores:
            if score.uid == uid:
                return score
        return None

    def ordered_scores(self) -> List[PlayerScore]:
        """Score lines in the round's player order."""
        by_uid = {s.uid: s for s in self.scores}
        return [by_uid[uid] for uid in self.players]

    def is_complete(self) -> bool:
        """Check if every player has a score on every hole."""
        return bool(self.scores) and all(s.is_complete() for s in self.scores)
