from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional, TYPE_CHECKING

from .base import BaseGolfModel
from .errors import GolfValidationError

if TYPE_CHECKING:
    from .round import CourseSnapshot

HoleCount = Literal[9, 18, 27, 36]

# Fields a course can never be without once created.
REQUIRED_COURSE_FIELDS = ("name", "location", "holes", "par")


def check_rating(v: Optional[float]) -> Optional[float]:
    # 0 is stored when no rating was entered
    if v and not 50.0 <= v <= 100.0:
        raise ValueError(f"Course rating {v} outside range (50-100)")
    return v


def check_slope(v: Optional[int]) -> Optional[int]:
    if v and not 55 <= v <= 155:
        raise ValueError(f"Slope {v} outside USGA range (55-155)")
    return v


class Location(BaseModel):
    """Where a course is. Zero latitude/longitude means not geocoded yet."""
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0

    def is_geocoded(self) -> bool:
        return not (self.lat == 0 and self.lng == 0)


class Course(BaseGolfModel):
    """A course created by one member and optionally shared with the group."""
    id: Optional[str] = None
    name: str
    location: Location = Field(default_factory=Location)
    holes: HoleCount = 18
    par: int = Field(72, gt=0)
    rating: Optional[float] = None
    slope: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)
    phone: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    is_public: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Course name is required")
        return v

    validate_rating = field_validator('rating')(check_rating)
    validate_slope = field_validator('slope')(check_slope)

    def add_amenity(self, label: str) -> bool:
        """Append an amenity unless it is blank or already listed."""
        label = label.strip()
        if not label or label in self.amenities:
            return False
        self.amenities = [*self.amenities, label]
        return True

    def remove_amenity(self, label: str) -> None:
        self.amenities = [a for a in self.amenities if a != label]

    def snapshot(self) -> "CourseSnapshot":
        """Copy of the fields a round keeps even if this course changes."""
        from .round import CourseSnapshot
        return CourseSnapshot(
            course_id=self.id,
            name=self.name,
            holes=self.holes,
            par=self.par,
            address=self.location.address or None,
        )


class CourseInput(BaseGolfModel):
    """Create/update payload as submitted by the course form."""
    model_config = ConfigDict(extra='ignore', validate_assignment=True)

    name: Optional[str] = None
    location: Optional[Location] = None
    holes: Optional[HoleCount] = None
    par: Optional[int] = Field(None, gt=0)
    rating: Optional[float] = None
    slope: Optional[int] = None
    amenities: Optional[List[str]] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    is_public: Optional[bool] = None

    validate_rating = field_validator('rating')(check_rating)
    validate_slope = field_validator('slope')(check_slope)

    def missing_required_fields(self) -> List[str]:
        missing = []
        if not (self.name or "").strip():
            missing.append("name")
        if self.location is None or not self.location.address.strip():
            missing.append("location")
        if self.holes is None:
            missing.append("holes")
        if self.par is None:
            missing.append("par")
        return missing

    def to_updates(self) -> dict:
        """Only the fields the caller actually supplied.

        Clearing a required field (sending null, or a blank name) is
        rejected with GolfValidationError.
        """
        updates = self.model_dump(exclude_unset=True)
        cleared = [f for f in REQUIRED_COURSE_FIELDS if f in updates and updates[f] is None]
        if cleared:
            raise GolfValidationError(f"Required fields cannot be cleared: {', '.join(cleared)}")
        if "name" in updates and not updates["name"].strip():
            raise GolfValidationError("Course name is required")
        if "location" in updates and self.location is not None:
            updates["location"] = self.location
        return updates
