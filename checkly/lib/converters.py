"""Plain-dict encoding of AppState for the persisted JSON blob.

Dates are stored as YYYY-MM-DD, timestamps as ISO datetimes, and the
recurrence rule as ``{"kind": "none"}`` or ``{"kind": "every", "interval", "unit"}``.
"""

from datetime import date, datetime
from typing import Any

from checkly.core.models import (
    UNITS,
    AppState,
    Category,
    DailyGoalLog,
    Every,
    GoalDefinition,
    NoRepeat,
    RecurrenceRule,
    Settings,
    Task,
)

from .dates import from_iso, to_iso

Row = dict[str, Any]


def _date_or_none(val) -> date | None:
    if isinstance(val, str) and val:
        return from_iso(val)
    return None


def _datetime_or_none(val) -> datetime | None:
    """Parse an optional datetime that may be an ISO string or a numeric timestamp."""
    if isinstance(val, str) and val:
        return datetime.fromisoformat(val)
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        # legacy blobs stored epoch milliseconds
        return datetime.fromtimestamp(val / 1000 if val > 1e11 else val)
    return None


def _int_or_none(val) -> int | None:
    if val is None or val == "":
        return None
    return int(val)


def _ranged_or_none(val, high: int) -> int | None:
    """Month (1-12) or week (1-5) field; anything outside 1..high is dropped."""
    num = _int_or_none(val)
    return num if num is not None and 1 <= num <= high else None


def rule_to_dict(rule: RecurrenceRule) -> Row:
    if isinstance(rule, Every):
        return {"kind": "every", "interval": rule.interval, "unit": rule.unit}
    return {"kind": "none"}


def rule_from_dict(row: Row | None) -> RecurrenceRule:
    if not row or row.get("kind") != "every":
        return NoRepeat()
    unit = row["unit"]
    if unit not in UNITS:
        raise ValueError(f"unknown recurrence unit: {unit!r}")
    return Every(interval=max(1, int(row.get("interval", 1))), unit=unit)


def task_to_dict(task: Task) -> Row:
    return {
        "id": task.id,
        "title": task.title,
        "category_id": task.category_id,
        "notes": task.notes,
        "created_at": task.created_at.isoformat() if task.created_at else None,
        "recurrence": rule_to_dict(task.recurrence),
        "due_date": to_iso(task.due_date) if task.due_date else None,
        "planned_month": task.planned_month,
        "planned_week": task.planned_week,
        "next_due_date": to_iso(task.next_due_date) if task.next_due_date else None,
        "recurrence_month": task.recurrence_month,
        "recurrence_week": task.recurrence_week,
        "last_completed_at": task.last_completed_at.isoformat() if task.last_completed_at else None,
        "completed_at": task.completed_at.isoformat() if task.completed_at else None,
        "archived": task.archived,
    }


def task_from_dict(row: Row) -> Task:
    return Task(
        id=str(row["id"]),
        title=str(row["title"]),
        category_id=str(row.get("category_id") or ""),
        notes=row.get("notes") or None,
        created_at=_datetime_or_none(row.get("created_at")),
        recurrence=rule_from_dict(row.get("recurrence")),
        due_date=_date_or_none(row.get("due_date")),
        planned_month=_ranged_or_none(row.get("planned_month"), 12),
        planned_week=_ranged_or_none(row.get("planned_week"), 5),
        next_due_date=_date_or_none(row.get("next_due_date")),
        recurrence_month=_ranged_or_none(row.get("recurrence_month"), 12),
        recurrence_week=_ranged_or_none(row.get("recurrence_week"), 5),
        last_completed_at=_datetime_or_none(row.get("last_completed_at")),
        completed_at=_datetime_or_none(row.get("completed_at")),
        archived=bool(row.get("archived", False)),
    )


def goal_to_dict(goal: GoalDefinition) -> Row:
    return {
        "id": goal.id,
        "title": goal.title,
        "active": goal.active,
        "sort_order": goal.sort_order,
    }


def goal_from_dict(row: Row) -> GoalDefinition:
    return GoalDefinition(
        id=str(row["id"]),
        title=str(row["title"]),
        active=bool(row.get("active", True)),
        sort_order=int(row.get("sort_order", 0)),
    )


def log_to_dict(log: DailyGoalLog) -> Row:
    return {
        "date": to_iso(log.date),
        "goal_id": log.goal_id,
        "completed": log.completed,
        "completed_at": log.completed_at.isoformat() if log.completed_at else None,
    }


def log_from_dict(row: Row) -> DailyGoalLog:
    return DailyGoalLog(
        date=from_iso(row["date"]),
        goal_id=str(row["goal_id"]),
        completed=bool(row.get("completed", False)),
        completed_at=_datetime_or_none(row.get("completed_at")),
    )


def state_to_dict(state: AppState) -> Row:
    return {
        "version": state.version,
        "categories": [
            {"id": c.id, "name": c.name, "sort_order": c.sort_order} for c in state.categories
        ],
        "tasks": [task_to_dict(t) for t in state.tasks],
        "goals": [goal_to_dict(g) for g in state.goals],
        "goal_logs": [log_to_dict(log) for log in state.goal_logs],
        "settings": {"strict_mode": state.settings.strict_mode},
    }


def state_from_dict(row: Row) -> AppState:
    """Rebuild an AppState. Raises KeyError/TypeError/ValueError on a malformed blob."""
    settings = row.get("settings") or {}
    return AppState(
        version=int(row["version"]),
        categories=tuple(
            Category(id=str(c["id"]), name=str(c["name"]), sort_order=int(c.get("sort_order", 0)))
            for c in row.get("categories", [])
        ),
        tasks=tuple(task_from_dict(t) for t in row.get("tasks", [])),
        goals=tuple(goal_from_dict(g) for g in row.get("goals", [])),
        goal_logs=tuple(log_from_dict(log) for log in row.get("goal_logs", [])),
        settings=Settings(strict_mode=bool(settings.get("strict_mode", False))),
    )
