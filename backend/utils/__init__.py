from .time import (
    utc_now,
    today_in_compliance_tz,
    week_start_date,
    week_dates,
    next_day,
    time_to_minutes,
)

__all__ = [
    "utc_now",
    "today_in_compliance_tz",
    "week_start_date",
    "week_dates",
    "next_day",
    "time_to_minutes",
]
