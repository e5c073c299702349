from datetime import date

from fncli import cli

from . import storage
from .categories import category_name
from .core.models import AppState, Task
from .goals import ensure_today_goal_logs, goals_for_today
from .lib import ansi, clock
from .lib.dates import format_nice
from .lib.errors import echo
from .lib.format import format_goal, format_task
from .recurrence import planned_label, recurrence_label
from .tasks import (
    get_active_tasks,
    get_anytime,
    get_due_today,
    get_overdue,
    get_planned_recurring,
)

__all__ = ["render_tasks", "render_today"]


def _section(title: str, count: str | None = None) -> str:
    suffix = f"  {ansi.muted(count)}" if count else ""
    return f"\n{ansi.bold(title.upper())}{suffix}"


def _task_line(state: AppState, task: Task, today: date, detail: str | None = None) -> str:
    info = [category_name(state, task.category_id)]
    if detail:
        info.append(detail)
    return "  " + format_task(task, today, detail=" · ".join(info))


def render_today(state: AppState, today: date) -> str:
    lines = [ansi.muted(format_nice(today)), ansi.bold("Today")]

    goals = goals_for_today(state, today)
    done = sum(1 for g in goals if g.log and g.log.completed)
    lines.append(_section("Daily goals", f"{done}/{len(goals)} done"))
    lines.extend(
        "  " + format_goal(g.goal.title, bool(g.log and g.log.completed)) for g in goals
    )
    if not goals:
        lines.append(ansi.muted("  no active goals. add one: checkly goal add <title>"))

    due = get_due_today(state, today)
    lines.append(_section("Due today", f"{len(due)} items"))
    lines.extend(_task_line(state, t, today) for t in due)
    if not due:
        lines.append(ansi.muted("  nothing due today"))

    overdue = get_overdue(state, today)
    if overdue:
        lines.append(_section("Overdue", str(len(overdue))))
        lines.extend(_task_line(state, t, today) for t in overdue)
    return "\n".join(lines)


def render_tasks(state: AppState, today: date) -> str:
    active = get_active_tasks(state)
    lines = [ansi.bold("Tasks"), _section("All tasks", str(len(active)))]
    lines.extend(
        _task_line(state, t, today, planned_label(t) or recurrence_label(t)) for t in active
    )
    if not active:
        lines.append(ansi.muted("  no tasks yet. add one: checkly add <title>"))

    planned = get_planned_recurring(state)
    lines.append(_section("Planned recurring"))
    lines.extend(_task_line(state, t, today, recurrence_label(t)) for t in planned)
    if not planned:
        lines.append(ansi.muted("  no planned recurring tasks"))

    anytime = get_anytime(state)
    lines.append(_section("Anytime"))
    lines.extend(_task_line(state, t, today) for t in anytime)
    if not anytime:
        lines.append(ansi.muted("  no anytime tasks"))
    return "\n".join(lines)


def dashboard() -> None:
    today = clock.today()
    state = storage.load_state()
    seeded = ensure_today_goal_logs(state, today)
    if seeded is not state:
        storage.save_state(seeded)
    echo(render_today(seeded, today))


@cli("checkly", name="today")
def today_cmd():
    """Show today's goals and due tasks"""
    dashboard()


@cli("checkly", name="tasks")
def tasks_cmd():
    """Show all tasks, planned recurring tasks and anytime tasks"""
    echo(render_tasks(storage.load_state(), clock.today()))
