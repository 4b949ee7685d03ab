from courtscheduler.models.season_config import (
    CourtGroup,
    SeasonConfig,
    consecutive_pairs,
    default_court_groups,
)
from courtscheduler.models.schedule import Schedule

__all__ = [
    "CourtGroup",
    "SeasonConfig",
    "Schedule",
    "consecutive_pairs",
    "default_court_groups",
]
