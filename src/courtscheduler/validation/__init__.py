from courtscheduler.validation.schedule_validator import (
    ScheduleValidator,
    ValidationReport,
    Violation,
    ViolationKind,
    check_season_feasibility,
    create_schedule_validator,
    validate_schedule,
)

__all__ = [
    "ScheduleValidator",
    "ValidationReport",
    "Violation",
    "ViolationKind",
    "check_season_feasibility",
    "create_schedule_validator",
    "validate_schedule",
]
