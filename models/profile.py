from pydantic import Field, field_validator, model_validator
from typing import Optional

from .base import BaseGolfModel
from .errors import GolfValidationError

# Stored best score until a player finishes a round.
NO_BEST_SCORE = 999


class PlayerStats(BaseGolfModel):
    """Running totals shown on the dashboard and profile pages."""
    wins: int = Field(0, ge=0)
    birdies: int = Field(0, ge=0)
    best_score: int = NO_BEST_SCORE
    average_score: float = Field(0.0, ge=0)
    rounds_played: int = Field(0, ge=0)

    @model_validator(mode='after')
    def validate_wins_within_rounds(self):
        if self.wins > self.rounds_played:
            raise ValueError(
                f"Wins ({self.wins}) cannot exceed rounds played ({self.rounds_played})"
            )
        return self


class UserProfile(BaseGolfModel):
    """A member of the group, keyed by the identity provider's user id."""
    uid: str
    name: str
    photo_url: Optional[str] = None
    home_course: Optional[str] = None
    handicap: Optional[float] = None
    stats: PlayerStats = Field(default_factory=PlayerStats)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    def win_rate(self) -> int:
        """Wins as a whole-number percentage of rounds played."""
        if not self.stats.rounds_played:
            return 0
        return round(self.stats.wins / self.stats.rounds_played * 100)

    def birdies_per_round(self) -> float:
        if not self.stats.rounds_played:
            return 0.0
        return round(self.stats.birdies / self.stats.rounds_played, 1)

    def best_score_or_none(self) -> Optional[int]:
        if self.stats.best_score == NO_BEST_SCORE:
            return None
        return self.stats.best_score


class ProfileUpdate(BaseGolfModel):
    """Fields a player may edit on their own profile."""
    name: Optional[str] = None
    photo_url: Optional[str] = None
    home_course: Optional[str] = None
    handicap: Optional[float] = None

    def to_fields(self) -> dict:
        """Normalize the edit into column updates.

        A blank home course clears it, and so does a missing handicap.
        """
        fields = {}
        if self.name is not None:
            name = self.name.strip()
            if not name:
                raise GolfValidationError("Name is required")
            fields["name"] = name
        if self.photo_url is not None:
            fields["photo_url"] = self.photo_url
        fields["home_course"] = (self.home_course or "").strip() or None
        fields["handicap"] = self.handicap
        return fields
