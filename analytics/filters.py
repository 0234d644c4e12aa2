"""Leaderboard ranking and list filtering over already-fetched records."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from models.course import Course
from models.profile import UserProfile
from models.round import Round

LEADERBOARD_SIZE = 5

# Sorts after every ordinary character in the store's binary collation.
PREFIX_SENTINEL = "\uf8ff"


def build_leaderboard(
    profiles: Iterable[UserProfile], limit: int = LEADERBOARD_SIZE
) -> List[UserProfile]:
    """Most wins first.

    The sort is stable, so players on equal wins keep the order they were
    passed in. ProfileRepositoryDB.list_profiles returns them by name.
    """
    ranked = sorted(profiles, key=lambda p: p.stats.wins, reverse=True)
    return ranked[:limit]


class RoundFilters(BaseModel):
    """History page filters. Empty values are not applied."""
    course: str = ""
    player: str = ""
    date: Optional[dt.date] = None

    def is_empty(self) -> bool:
        return not self.course and not self.player and self.date is None


def find_player(profiles: Iterable[UserProfile], text: str) -> Optional[UserProfile]:
    """First profile whose name contains `text`, ignoring case."""
    needle = text.lower()
    for profile in profiles:
        if needle in profile.name.lower():
            return profile
    return None


def filter_rounds(
    rounds: Sequence[Round],
    profiles: Sequence[UserProfile],
    filters: RoundFilters,
) -> List[Round]:
    """Apply every non-empty filter; a round must pass all of them.

    A player search that matches nobody leaves the list unfiltered.
    """
    filtered = list(rounds)

    if filters.course:
        needle = filters.course.lower()
        filtered = [r for r in filtered if needle in r.course_name.lower()]

    if filters.player:
        target = find_player(profiles, filters.player)
        if target is not None:
            filtered = [r for r in filtered if target.uid in r.players]

    if filters.date is not None:
        filtered = [r for r in filtered if r.date == filters.date]

    return filtered


def unique_course_names(rounds: Iterable[Round]) -> List[str]:
    """Course names for the filter dropdown, first appearance first."""
    seen = {}
    for r in rounds:
        seen.setdefault(r.course_name, None)
    return list(seen)


def unique_dates(rounds: Iterable[Round]) -> List[dt.date]:
    """Dates for the filter dropdown, newest first."""
    return sorted({r.date for r in rounds}, reverse=True)


def prefix_range(term: str) -> Tuple[str, str]:
    """Half-open [lower, upper) bounds matching names that start with `term`.

    Case-sensitive: "Pine" does not match "pinehurst".
    """
    return term, term + PREFIX_SENTINEL


def search_courses_locally(courses: Iterable[Course], term: str) -> List[Course]:
    """Case-insensitive match on name or address for a list already loaded."""
    if not term:
        return list(courses)
    needle = term.lower()
    return [
        c for c in courses
        if needle in c.name.lower() or needle in c.location.address.lower()
    ]
