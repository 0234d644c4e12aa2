from forms.state import ScreenState, Status
from forms.round_draft import RoundDraft
from forms.course_form import CourseForm

__all__ = ["CourseForm", "RoundDraft", "ScreenState", "Status"]
