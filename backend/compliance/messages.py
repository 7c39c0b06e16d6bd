"""
Error messages and remediation guidance for compliance rules.

Messages are read by employees as young as 12, so they say plainly what
went wrong and how to fix it. Templates use ``str.format`` placeholders;
dates and times are formatted for display before substitution.
"""

from dataclasses import dataclass
from datetime import date


def format_date(iso_date: str) -> str:
    """Format an ISO date for display, e.g. "Monday, January 15"."""
    d = date.fromisoformat(iso_date)
    return f"{d:%A, %B} {d.day}"


def format_time(value: str) -> str:
    """Format "HH:MM" for display, e.g. "3:30 PM"."""
    parts = value.split(":")
    hour = int(parts[0])
    minute = int(parts[1]) if len(parts) > 1 else 0
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


@dataclass(frozen=True)
class RuleMessage:
    message: str
    remediation: str

    def format_message(self, **params) -> str:
        return self.message.format(**params)

    def format_remediation(self, **params) -> str:
        return self.remediation.format(**params)


_SCHOOL_HOURS_REMEDIATION = (
    "Please adjust start/end times to be outside 7:00 AM - 3:00 PM, "
    "or mark this as a non-school day with an explanatory note."
)

# ============================================================================
# Documentation
# ============================================================================

PARENTAL_CONSENT_REQUIRED = RuleMessage(
    message=(
        "Parental consent required: {employee_name} is under 18 and requires a valid "
        "parental consent form on file before submitting timesheets."
    ),
    remediation="Please contact your supervisor to upload the parental consent form.",
)

PARENTAL_CONSENT_REVOKED = RuleMessage(
    message=(
        "Parental consent has been revoked. Your account access has been suspended "
        "until new consent is provided."
    ),
    remediation="Please have your parent/guardian provide new consent to your supervisor.",
)

WORK_PERMIT_REQUIRED = RuleMessage(
    message=(
        "Work permit required: Massachusetts law requires a Youth Employment Permit for "
        "workers ages 14-17. You are currently {age} years old."
    ),
    remediation=(
        "Please obtain a work permit from your school and have your supervisor upload it "
        "before submitting."
    ),
)

WORK_PERMIT_EXPIRED = RuleMessage(
    message=(
        "Work permit expired: Your work permit expired on {expires_at}. You cannot submit "
        "timesheets until a valid permit is on file."
    ),
    remediation="Please obtain a new work permit from your school and have your supervisor upload it.",
)

SAFETY_TRAINING_REQUIRED = RuleMessage(
    message=(
        "Safety training required: You must complete safety training before submitting "
        "your first timesheet."
    ),
    remediation="Please contact your supervisor to complete and document your safety training.",
)

# ============================================================================
# Hour limits
# ============================================================================

DAILY_LIMIT_12_13 = RuleMessage(
    message=(
        "Daily hour limit exceeded: Ages 12-13 may work a maximum of {limit:g} hours per day. "
        "You entered {hours:.1f} hours on {date}."
    ),
    remediation="Please reduce hours to {limit:g} or less for that day.",
)

WEEKLY_LIMIT_12_13 = RuleMessage(
    message=(
        "Weekly hour limit exceeded: Ages 12-13 may work a maximum of {limit:g} hours per week. "
        "Your total is {hours:.1f} hours."
    ),
    remediation="Please reduce your total weekly hours to {limit:g} or less.",
)

SCHOOL_DAY_LIMIT_14_15 = RuleMessage(
    message=(
        "School day hour limit exceeded: Ages 14-15 may work a maximum of {limit:g} hours on "
        "school days. You entered {hours:.1f} hours on {date}."
    ),
    remediation=(
        "Please reduce hours to {limit:g} or less, or verify this is not a school day and "
        "update the school day designation with a note."
    ),
)

SCHOOL_WEEK_LIMIT_14_15 = RuleMessage(
    message=(
        "School week hour limit exceeded: Ages 14-15 may work a maximum of {limit:g} hours "
        "during school weeks. Your total is {hours:.1f} hours."
    ),
    remediation="Please reduce your total weekly hours to {limit:g} or less.",
)

NON_SCHOOL_DAY_LIMIT_14_15 = RuleMessage(
    message=(
        "Daily hour limit exceeded: Ages 14-15 may work a maximum of {limit:g} hours on "
        "non-school days. You entered {hours:.1f} hours on {date}."
    ),
    remediation="Please reduce hours to {limit:g} or less for that day.",
)

NON_SCHOOL_WEEK_LIMIT_14_15 = RuleMessage(
    message=(
        "Weekly hour limit exceeded: Ages 14-15 may work a maximum of {limit:g} hours during "
        "non-school weeks. Your total is {hours:.1f} hours."
    ),
    remediation="Please reduce your total weekly hours to {limit:g} or less.",
)

DAILY_LIMIT_16_17 = RuleMessage(
    message=(
        "Daily hour limit exceeded: Ages 16-17 may work a maximum of {limit:g} hours per day. "
        "You entered {hours:.1f} hours on {date}."
    ),
    remediation="Please reduce hours to {limit:g} or less for that day.",
)

WEEKLY_LIMIT_16_17 = RuleMessage(
    message=(
        "Weekly hour limit exceeded: Ages 16-17 may work a maximum of {limit:g} hours per week. "
        "Your total is {hours:.1f} hours."
    ),
    remediation="Please reduce your total weekly hours to {limit:g} or less.",
)

DAY_COUNT_LIMIT_16_17 = RuleMessage(
    message=(
        "Day count limit exceeded: Ages 16-17 may work a maximum of {limit} days per week. "
        "You have entries on {days_worked} days."
    ),
    remediation="Please remove entries so you work no more than {limit} days this week.",
)

# ============================================================================
# Time windows
# ============================================================================

SCHOOL_HOURS_12_13 = RuleMessage(
    message=(
        "School hours violation: Ages 12-13 cannot work during school hours (7:00 AM - 3:00 PM) "
        "on school days. You logged work from {start_time} to {end_time} on {date}."
    ),
    remediation=_SCHOOL_HOURS_REMEDIATION,
)

SCHOOL_HOURS_14_15 = RuleMessage(
    message=(
        "School hours violation: Ages 14-15 cannot work during school hours (7:00 AM - 3:00 PM) "
        "on school days. You logged work from {start_time} to {end_time} on {date}."
    ),
    remediation=_SCHOOL_HOURS_REMEDIATION,
)

SCHOOL_HOURS_16_17 = RuleMessage(
    message=(
        "School hours violation: Ages 16-17 cannot work during school hours (7:00 AM - 3:00 PM) "
        "on school days. You logged work from {start_time} to {end_time} on {date}."
    ),
    remediation=_SCHOOL_HOURS_REMEDIATION,
)

WORK_WINDOW_14_15 = RuleMessage(
    message=(
        "Work window violation: Ages 14-15 may only work between 7:00 AM and {window_end}"
        "{summer_note}. You logged work from {start_time} to {end_time} on {date}."
    ),
    remediation="Please adjust your times to be between 7:00 AM and {window_end}.",
)

SCHOOL_NIGHT_16_17 = RuleMessage(
    message=(
        "School night violation: Ages 16-17 cannot work past 10:00 PM on nights before school "
        "days. You logged work ending at {end_time} on {date}."
    ),
    remediation="Please adjust your end time to be before 10:00 PM.",
)

WORK_WINDOW_16_17 = RuleMessage(
    message=(
        "Work window violation: Ages 16-17 may only work between 6:00 AM and 11:30 PM. "
        "You logged work from {start_time} to {end_time} on {date}."
    ),
    remediation="Please adjust your times to be between 6:00 AM and 11:30 PM.",
)

# ============================================================================
# Task restrictions
# ============================================================================

TASK_AGE_RESTRICTION = RuleMessage(
    message=(
        "Task age restriction: Task {task_code} ({task_name}) requires a minimum age of "
        "{min_age}. You were {age} years old on {date}."
    ),
    remediation=(
        "Please remove this task from your timesheet or speak with your supervisor about "
        "reassignment."
    ),
)

POWER_MACHINERY = RuleMessage(
    message=(
        "Power machinery restriction: Task {task_code} ({task_name}) involves power machinery, "
        "which is prohibited for workers under 18."
    ),
    remediation="Please remove this task from your timesheet. Power machinery work is not permitted for minors.",
)

DRIVING = RuleMessage(
    message=(
        "Driving restriction: Task {task_code} ({task_name}) requires driving, which is "
        "prohibited for workers under 18."
    ),
    remediation="Please remove this task from your timesheet. Driving tasks are not permitted for minors.",
)

SOLO_CASH_HANDLING = RuleMessage(
    message=(
        "Cash handling restriction: Task {task_code} ({task_name}) involves solo cash handling, "
        "which is prohibited for workers under 14. You are {age} years old."
    ),
    remediation=(
        "Please remove this task from your timesheet or speak with your supervisor about "
        "supervised cash handling."
    ),
)

HAZARDOUS_TASK = RuleMessage(
    message=(
        "Hazardous task restriction: Task {task_code} ({task_name}) is classified as hazardous "
        "and prohibited for workers under 18."
    ),
    remediation="Please remove this task from your timesheet. Hazardous work is not permitted for minors.",
)

SUPERVISOR_ATTESTATION = RuleMessage(
    message=(
        "Supervisor attestation required: Task {task_code} ({task_name}) on {date} requires a "
        "supervisor to be present. No supervisor name was recorded."
    ),
    remediation="Please edit the entry and add the name of the supervisor who was present during this task.",
)

# ============================================================================
# Breaks
# ============================================================================

MEAL_BREAK_REQUIRED = RuleMessage(
    message=(
        "Meal break required: You worked {hours:.1f} hours on {date}. Workers under 18 must "
        "take a {break_minutes}-minute meal break when working more than {threshold:g} hours."
    ),
    remediation=(
        "Please confirm that you took a {break_minutes}-minute meal break by checking the meal "
        "break confirmation box for that day."
    ),
)
