from .filters import (
    RoundFilters,
    build_leaderboard,
    filter_rounds,
    prefix_range,
    search_courses_locally,
    unique_course_names,
    unique_dates,
)
from .scoring import (
    determine_winner,
    player_totals,
    score_label,
    score_type_counts,
    total_score,
)
from .stats import (
    birdies_per_round,
    dashboard_summary,
    round_summary,
    score_trend,
    stats_after_round,
    stats_from_rounds,
    win_rate,
)

__all__ = [
    "RoundFilters",
    "build_leaderboard",
    "filter_rounds",
    "prefix_range",
    "search_courses_locally",
    "unique_course_names",
    "unique_dates",
    "determine_winner",
    "player_totals",
    "score_label",
    "score_type_counts",
    "total_score",
    "birdies_per_round",
    "dashboard_summary",
    "round_summary",
    "score_trend",
    "stats_after_round",
    "stats_from_rounds",
    "win_rate",
]
