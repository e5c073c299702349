import dataclasses
import uuid
from datetime import date

from fncli import cli

from . import config, storage
from .categories import find_category, sorted_categories
from .core.errors import NotFoundError, ValidationError
from .core.models import (
    UNITS,
    AppState,
    Every,
    NoRepeat,
    RecurrenceConstraint,
    RecurrenceRule,
    Task,
)
from .lib import clock
from .lib.dates import parse_due_date
from .lib.errors import echo, exit_error
from .lib.format import format_status
from .lib.fuzzy import find_in_pool
from .recurrence import compute_initial_due_date, compute_next_due_date, recurrence_label

__all__ = [
    "add_task",
    "archive_task",
    "complete_task",
    "delete_task",
    "find_task",
    "get_active_tasks",
    "get_anytime",
    "get_due_today",
    "get_overdue",
    "get_planned_recurring",
    "new_task",
    "reconfigure_recurrence",
    "update_task",
]


# ── domain ───────────────────────────────────────────────────────────────────


def _replace_task(state: AppState, task_id: str, **patch) -> AppState:
    return dataclasses.replace(
        state,
        tasks=tuple(dataclasses.replace(t, **patch) if t.id == task_id else t for t in state.tasks),
    )


def _constraint_fields(
    rule: RecurrenceRule, month: int | None, week: int | None
) -> tuple[int | None, int | None]:
    """Keep month only for yearly rules, week only for monthly or yearly-with-month rules."""
    if not isinstance(rule, Every):
        return None, None
    rec_month = month if rule.unit == "year" and month else None
    uses_week = rule.unit == "month" or (rule.unit == "year" and rec_month is not None)
    rec_week = week if uses_week and week else None
    return rec_month, rec_week


def new_task(
    title: str,
    category_id: str,
    recurrence: RecurrenceRule = NoRepeat(),
    *,
    start: date | None = None,
    notes: str | None = None,
    due_date: date | None = None,
    planned_month: int | None = None,
    planned_week: int | None = None,
    recurrence_month: int | None = None,
    recurrence_week: int | None = None,
) -> Task:
    """Build a task creation request, splitting one-time and recurring fields.

    One-time tasks keep `due_date`, or a planned month (and week) when undated.
    Recurring tasks get their first `next_due_date` from `start` (default today).
    """
    if isinstance(recurrence, Every):
        recurrence = Every(interval=max(1, recurrence.interval), unit=recurrence.unit)
        rec_month, rec_week = _constraint_fields(recurrence, recurrence_month, recurrence_week)
        start = start or clock.today()
        next_due = compute_initial_due_date(
            start, recurrence, RecurrenceConstraint(month=rec_month, week=rec_week)
        )
        return Task(
            id="",
            title=title.strip(),
            category_id=category_id,
            recurrence=recurrence,
            notes=notes or None,
            next_due_date=next_due or start,
            recurrence_month=rec_month,
            recurrence_week=rec_week,
        )

    month = planned_month if due_date is None and planned_month else None
    return Task(
        id="",
        title=title.strip(),
        category_id=category_id,
        recurrence=NoRepeat(),
        notes=notes or None,
        due_date=due_date,
        planned_month=month,
        planned_week=planned_week if month and planned_week else None,
    )


def add_task(state: AppState, task: Task) -> AppState:
    created = dataclasses.replace(task, id=str(uuid.uuid4()), created_at=clock.now())
    return dataclasses.replace(state, tasks=(*state.tasks, created))


def update_task(state: AppState, task_id: str, **patch) -> AppState:
    """Shallow-merge `patch` into the task. Unknown ids leave the state as is."""
    return _replace_task(state, task_id, **patch)


def reconfigure_recurrence(
    state: AppState,
    task_id: str,
    rule: RecurrenceRule,
    today: date,
    month: int | None = None,
    week: int | None = None,
) -> AppState:
    """Replace a task's rule and constraint wholesale and restart its schedule from `today`."""
    if isinstance(rule, Every):
        rule = Every(interval=max(1, rule.interval), unit=rule.unit)
    rec_month, rec_week = _constraint_fields(rule, month, week)
    next_due = compute_initial_due_date(
        today, rule, RecurrenceConstraint(month=rec_month, week=rec_week)
    )
    return _replace_task(
        state,
        task_id,
        recurrence=rule,
        recurrence_month=rec_month,
        recurrence_week=rec_week,
        next_due_date=next_due,
    )


def delete_task(state: AppState, task_id: str) -> AppState:
    return dataclasses.replace(state, tasks=tuple(t for t in state.tasks if t.id != task_id))


def archive_task(state: AppState, task_id: str) -> AppState:
    return _replace_task(state, task_id, archived=True)


def _complete(task: Task, today: date) -> Task:
    if task.is_recurring and task.next_due_date:
        next_due = compute_next_due_date(
            task.next_due_date, task.recurrence, today, task.constraint
        )
        return dataclasses.replace(task, last_completed_at=clock.now(), next_due_date=next_due)
    return dataclasses.replace(task, completed_at=clock.now())


def complete_task(state: AppState, task_id: str, today: date) -> AppState:
    """Roll a recurring task forward, or stamp a one-time task as done."""
    return dataclasses.replace(
        state,
        tasks=tuple(_complete(t, today) if t.id == task_id else t for t in state.tasks),
    )


def _open_tasks(state: AppState) -> list[Task]:
    return [t for t in state.tasks if not t.archived and t.completed_at is None]


def get_due_today(state: AppState, today: date) -> list[Task]:
    return [t for t in _open_tasks(state) if t.live_due_date == today]


def get_overdue(state: AppState, today: date) -> list[Task]:
    return [
        t for t in _open_tasks(state) if t.live_due_date is not None and t.live_due_date < today
    ]


def get_anytime(state: AppState) -> list[Task]:
    return [
        t
        for t in _open_tasks(state)
        if not t.is_recurring and t.due_date is None and not t.planned_month
    ]


def get_planned_recurring(state: AppState) -> list[Task]:
    return [
        t
        for t in _open_tasks(state)
        if t.is_recurring and (t.recurrence_month or t.recurrence_week)
    ]


def get_active_tasks(state: AppState) -> list[Task]:
    return [t for t in state.tasks if not t.archived]


def find_task(state: AppState, ref: str, include_done: bool = False) -> Task | None:
    pool = get_active_tasks(state)
    if not include_done:
        pool = [t for t in pool if t.completed_at is None]
    return find_in_pool(ref, pool)


# ── cli ──────────────────────────────────────────────────────────────────────


def _resolve(state: AppState, ref: list[str], include_done: bool = False) -> Task:
    item_ref = " ".join(ref) if ref else ""
    if not item_ref:
        raise ValidationError("Usage: checkly <command> <task>")
    task = find_task(state, item_ref, include_done=include_done)
    if not task:
        raise NotFoundError(f"No task found: '{item_ref}'")
    return task


def _resolve_category(state: AppState, category: str | None) -> str:
    if category:
        found = find_category(state, category)
        if not found:
            raise NotFoundError(f"No category found: '{category}'")
        return found.id
    default = config.get_default_category()
    if default and find_category(state, default):
        return default
    ordered = sorted_categories(state)
    return ordered[0].id if ordered else ""


def _parse_rule(every: int, unit: str) -> RecurrenceRule:
    if not every:
        return NoRepeat()
    if unit not in UNITS:
        raise ValidationError(f"Unknown unit '{unit}', use one of: {', '.join(UNITS)}")
    return Every(interval=every, unit=unit)


def _check_range(name: str, value: int, high: int) -> int | None:
    if not value:
        return None
    if not 1 <= value <= high:
        raise ValidationError(f"--{name} must be between 1 and {high}")
    return value


def _parse_due(due: str) -> date:
    parsed = parse_due_date(due)
    if parsed is None:
        exit_error(f"Could not parse due date: '{due}'")
    return parsed


@cli(
    "checkly",
    name="add",
    flags={"category": ["-c", "--category"], "due": ["-d", "--due"], "every": ["-e", "--every"]},
)
def add_cmd(
    title: list[str],
    category: str | None = None,
    due: str | None = None,
    every: int = 0,
    unit: str = "week",
    month: int = 0,
    week: int = 0,
    notes: str | None = None,
):
    """Add a task (one-time, or recurring with --every N --unit day|week|month|year)"""
    title_str = " ".join(title) if title else ""
    if not title_str.strip():
        exit_error("Usage: checkly add <title>")
    rule = _parse_rule(every, unit)
    month_val = _check_range("month", month, 12)
    week_val = _check_range("week", week, 5)
    due_date = _parse_due(due) if due else None

    state = storage.load_state()
    task = new_task(
        title_str,
        _resolve_category(state, category),
        rule,
        start=due_date if isinstance(rule, Every) and due_date else clock.today(),
        notes=notes,
        due_date=due_date if isinstance(rule, NoRepeat) else None,
        planned_month=month_val,
        planned_week=week_val,
        recurrence_month=month_val,
        recurrence_week=week_val,
    )
    state = add_task(state, task)
    storage.save_state(state)
    created = state.tasks[-1]
    suffix = f"  {created.live_due_date.isoformat()}" if created.live_due_date else ""
    echo(format_status("□", f"{created.title}{suffix}", created.id))


@cli("checkly", name="done")
def done_cmd(ref: list[str]):
    """Complete a task"""
    state = storage.load_state()
    task = _resolve(state, ref)
    state = complete_task(state, task.id, clock.today())
    storage.save_state(state)
    updated = next(t for t in state.tasks if t.id == task.id)
    if updated.is_recurring and updated.next_due_date:
        next_due = updated.next_due_date.isoformat()
        echo(format_status("✓", f"{task.title}  next: {next_due}", task.id))
    else:
        echo(format_status("✓", task.title, task.id))


@cli("checkly", name="rm")
def rm_cmd(ref: list[str]):
    """Delete a task"""
    state = storage.load_state()
    task = _resolve(state, ref, include_done=True)
    storage.save_state(delete_task(state, task.id))
    echo(format_status("✗", task.title, task.id))


@cli("checkly", name="archive")
def archive_cmd(ref: list[str]):
    """Archive a task"""
    state = storage.load_state()
    task = _resolve(state, ref, include_done=True)
    storage.save_state(archive_task(state, task.id))
    echo(format_status("▫", task.title, task.id))


@cli("checkly", name="edit", flags={"category": ["-c", "--category"], "due": ["-d", "--due"]})
def edit_cmd(
    ref: list[str],
    title: str | None = None,
    category: str | None = None,
    due: str | None = None,
    notes: str | None = None,
    month: int = 0,
    week: int = 0,
):
    """Edit title, category, notes, due date or planned month/week"""
    state = storage.load_state()
    task = _resolve(state, ref, include_done=True)
    patch: dict[str, object] = {}
    if title is not None:
        if not title.strip():
            exit_error("Error: title cannot be empty")
        patch["title"] = title.strip()
    if category is not None:
        patch["category_id"] = _resolve_category(state, category)
    if notes is not None:
        patch["notes"] = notes or None

    if task.is_recurring:
        if due is not None or month or week:
            exit_error("Use 'checkly repeat' to change the schedule of a recurring task")
    else:
        due_date = task.due_date
        if due is not None:
            due_date = _parse_due(due) if due else None
            patch["due_date"] = due_date
        if due_date is not None:
            patch["planned_month"] = None
            patch["planned_week"] = None
        elif month:
            patch["planned_month"] = _check_range("month", month, 12)
            patch["planned_week"] = _check_range("week", week, 5)

    if not patch:
        exit_error("Nothing to edit. Use --title, --category, --due, --notes, --month or --week.")
    storage.save_state(update_task(state, task.id, **patch))
    echo(format_status("□", str(patch.get("title", task.title)), task.id))


@cli("checkly", name="repeat", flags={"every": ["-e", "--every"]})
def repeat_cmd(ref: list[str], every: int = 1, unit: str = "week", month: int = 0, week: int = 0):
    """Change how a recurring task repeats, restarting its schedule from today"""
    rule = _parse_rule(max(1, every), unit)
    month_val = _check_range("month", month, 12)
    week_val = _check_range("week", week, 5)
    state = storage.load_state()
    task = _resolve(state, ref)
    if not task.is_recurring:
        exit_error(f"'{task.title}' is a one-time task")
    state = reconfigure_recurrence(state, task.id, rule, clock.today(), month_val, week_val)
    storage.save_state(state)
    updated = next(t for t in state.tasks if t.id == task.id)
    next_due = updated.next_due_date.isoformat() if updated.next_due_date else "-"
    label = recurrence_label(updated)
    echo(format_status("↻", f"{task.title}  {label}  next: {next_due}", task.id))
