"""Due-date arithmetic for recurring tasks.

A recurring task carries a rule (``Every(interval, unit)``) and an optional
month/week constraint. Unconstrained rules roll forward from the day the task
was actually completed, so a late completion does not stack up a backlog.
Constrained rules walk forward one period at a time from the current due date,
landing on the constrained month and week-of-month each step.
"""

from datetime import date

from .core.models import Every, NoRepeat, RecurrenceConstraint, RecurrenceRule, Task
from .lib.dates import MONTH_NAMES, add_days, add_months, add_years, week_start_day

__all__ = [
    "MAX_ADVANCE_STEPS",
    "active_constraint",
    "compute_initial_due_date",
    "compute_next_due_date",
    "planned_label",
    "recurrence_label",
]

MAX_ADVANCE_STEPS = 10_000


def _interval(rule: Every) -> int:
    return max(1, rule.interval)


def active_constraint(
    rule: RecurrenceRule, constraint: RecurrenceConstraint | None
) -> RecurrenceConstraint | None:
    """Return the part of `constraint` the rule honors, or None when nothing applies.

    Year rules take a month and, with it, a week. Month rules take only a week.
    Day and week rules ignore constraints entirely.
    """
    if constraint is None:
        return None
    match rule:
        case Every(unit="year") if constraint.month is not None:
            return RecurrenceConstraint(month=constraint.month, week=constraint.week)
        case Every(unit="month") if constraint.week is not None:
            return RecurrenceConstraint(week=constraint.week)
        case _:
            return None


def _advance_constrained(due: date, rule: Every, constraint: RecurrenceConstraint) -> date:
    if rule.unit == "year":
        year = due.year + _interval(rule)
        month = constraint.month or due.month
        day = week_start_day(year, month, constraint.week) if constraint.week else 1
        return date(year, month, day)

    moved = add_months(due, _interval(rule))
    if constraint.week:
        return moved.replace(day=week_start_day(moved.year, moved.month, constraint.week))
    return moved


def _anchor(base: date, rule: Every) -> date:
    interval = _interval(rule)
    match rule.unit:
        case "day":
            return add_days(base, interval)
        case "week":
            return add_days(base, 7 * interval)
        case "month":
            return add_months(base, interval)
        case "year":
            return add_years(base, interval)


def compute_initial_due_date(
    start: date, rule: RecurrenceRule, constraint: RecurrenceConstraint | None = None
) -> date | None:
    """First due date for a newly created (or reconfigured) recurring task."""
    if isinstance(rule, NoRepeat):
        return None
    active = active_constraint(rule, constraint)
    if active is None:
        return start

    if rule.unit == "year":
        month = active.month or start.month
        day = week_start_day(start.year, month, active.week) if active.week else 1
        candidate = date(start.year, month, day)
    else:
        candidate = start.replace(day=week_start_day(start.year, start.month, active.week or 1))

    for _ in range(MAX_ADVANCE_STEPS):
        if candidate >= start:
            break
        candidate = _advance_constrained(candidate, rule, active)
    return candidate


def compute_next_due_date(
    current_due: date,
    rule: RecurrenceRule,
    completion: date,
    constraint: RecurrenceConstraint | None = None,
) -> date | None:
    """Due date after completing a task on `completion` that was due on `current_due`."""
    if isinstance(rule, NoRepeat):
        return None

    active = active_constraint(rule, constraint)
    if active is not None:
        nxt = _advance_constrained(current_due, rule, active)
        for _ in range(MAX_ADVANCE_STEPS):
            if nxt > completion:
                break
            nxt = _advance_constrained(nxt, rule, active)
        return nxt

    nxt = _anchor(completion, rule)
    for _ in range(MAX_ADVANCE_STEPS):
        if nxt > current_due:
            break
        nxt = _anchor(nxt, rule)
    return nxt


def _month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return f"Month {month}"


def recurrence_label(task: Task) -> str:
    rule = task.recurrence
    if isinstance(rule, NoRepeat):
        return "One-time"
    interval, unit = rule.interval, rule.unit

    if unit == "year" and task.recurrence_month:
        month = _month_name(task.recurrence_month)
        week = f" (week {task.recurrence_week})" if task.recurrence_week else ""
        if interval == 1:
            return f"Every {month}{week}"
        return f"Every {interval} years in {month}{week}"

    if unit == "month" and task.recurrence_week:
        if interval == 1:
            return f"Every month (week {task.recurrence_week})"
        return f"Every {interval} months (week {task.recurrence_week})"

    if interval == 1:
        return f"Every {unit}"
    return f"Every {interval} {unit}s"


def planned_label(task: Task) -> str | None:
    if task.is_recurring or not task.planned_month:
        return None
    month = _month_name(task.planned_month)
    if task.planned_week:
        return f"Planned: {month} (week {task.planned_week})"
    return f"Planned: {month}"
