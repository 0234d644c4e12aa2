from typing import Optional

from forms.state import ScreenState
from models import Course, CourseInput, Location
from places.geocoder import Place

NOT_SIGNED_IN = "You must be logged in to save a course"
NAME_REQUIRED = "Course name is required"
LOCATION_REQUIRED = "Please select a location for the course"
HOLES_REQUIRED = "Please specify the number of holes"
PAR_REQUIRED = "Please specify the par for the course"
PLACE_NOT_FOUND = "Could not find location. Please try again."


class CourseForm:
    """Create/edit form for a course, before it is sent to the store."""

    def __init__(self, course: Optional[Course] = None):
        if course is None:
            self.data = CourseInput(holes=18, par=72, amenities=[], is_public=False)
        else:
            self.data = CourseInput(**course.model_dump(exclude={"id", "created_at", "updated_at", "created_by"}))
        self.state = ScreenState.idle()

    def set_field(self, name: str, value) -> bool:
        """One edit from the form. A rejected value shows in the error banner."""
        message = self.data.update_field(name, value)
        self.state = ScreenState.error(message) if message else ScreenState.idle()
        return message is None

    @property
    def amenities(self):
        return self.data.amenities or []

    def add_amenity(self, label: str) -> bool:
        label = label.strip()
        if not label or label in self.amenities:
            return False
        self.data.amenities = [*self.amenities, label]
        return True

    def remove_amenity(self, label: str) -> None:
        self.data.amenities = [a for a in self.amenities if a != label]

    def apply_place(self, place: Optional[Place]) -> bool:
        """Take the address and coordinates from a geocoder result."""
        if place is None:
            self.state = ScreenState.error(PLACE_NOT_FOUND)
            return False
        self.data.location = place.to_location()
        self.state = ScreenState.idle()
        return True

    def validate(self, user_id: Optional[str] = None) -> Optional[str]:
        """First message that blocks saving, or None. Also sets `state`."""
        location: Optional[Location] = self.data.location
        if not user_id:
            message = NOT_SIGNED_IN
        elif not (self.data.name or "").strip():
            message = NAME_REQUIRED
        elif location is None or not location.address.strip():
            message = LOCATION_REQUIRED
        elif not self.data.holes:
            message = HOLES_REQUIRED
        elif not self.data.par:
            message = PAR_REQUIRED
        else:
            message = None

        self.state = ScreenState.error(message) if message else ScreenState.idle()
        return message
