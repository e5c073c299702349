import dataclasses
import uuid
from datetime import date

from fncli import cli

from . import storage
from .core.errors import NotFoundError
from .core.models import AppState, DailyGoalLog, GoalDefinition, TodayGoal
from .lib import clock
from .lib.errors import echo, exit_error
from .lib.format import format_goal, format_status
from .lib.fuzzy import find_in_pool

__all__ = [
    "add_goal",
    "delete_goal",
    "ensure_today_goal_logs",
    "find_goal",
    "goals_for_today",
    "sorted_goals",
    "toggle_goal_for_today",
    "update_goal",
]


# ── domain ───────────────────────────────────────────────────────────────────


def sorted_goals(state: AppState) -> list[GoalDefinition]:
    return sorted(state.goals, key=lambda g: g.sort_order)


def add_goal(state: AppState, title: str) -> AppState:
    max_sort = max([0, *(g.sort_order for g in state.goals)])
    goal = GoalDefinition(
        id=str(uuid.uuid4()),
        title=title.strip(),
        active=True,
        sort_order=max_sort + 1,
    )
    return dataclasses.replace(state, goals=(*state.goals, goal))


def update_goal(state: AppState, goal_id: str, **patch) -> AppState:
    return dataclasses.replace(
        state,
        goals=tuple(dataclasses.replace(g, **patch) if g.id == goal_id else g for g in state.goals),
    )


def delete_goal(state: AppState, goal_id: str) -> AppState:
    """Remove a goal along with every daily log recorded for it."""
    return dataclasses.replace(
        state,
        goals=tuple(g for g in state.goals if g.id != goal_id),
        goal_logs=tuple(log for log in state.goal_logs if log.goal_id != goal_id),
    )


def ensure_today_goal_logs(state: AppState, today: date) -> AppState:
    """Add an open log for each active goal that has none for `today`.

    Returns `state` itself when nothing is missing, so repeat calls are free.
    """
    logged = {log.goal_id for log in state.goal_logs if log.date == today}
    missing = tuple(
        DailyGoalLog(date=today, goal_id=g.id, completed=False)
        for g in state.goals
        if g.active and g.id not in logged
    )
    if not missing:
        return state
    return dataclasses.replace(state, goal_logs=(*state.goal_logs, *missing))


def _toggle(log: DailyGoalLog) -> DailyGoalLog:
    completed = not log.completed
    return dataclasses.replace(
        log, completed=completed, completed_at=clock.now() if completed else None
    )


def toggle_goal_for_today(state: AppState, today: date, goal_id: str) -> AppState:
    """Flip today's log for the goal. Without a log for (goal, today) nothing changes."""
    return dataclasses.replace(
        state,
        goal_logs=tuple(
            _toggle(log) if log.date == today and log.goal_id == goal_id else log
            for log in state.goal_logs
        ),
    )


def goals_for_today(state: AppState, today: date) -> list[TodayGoal]:
    by_goal = {log.goal_id: log for log in state.goal_logs if log.date == today}
    return [
        TodayGoal(goal=g, log=by_goal.get(g.id)) for g in sorted_goals(state) if g.active
    ]


def find_goal(state: AppState, ref: str) -> GoalDefinition | None:
    return find_in_pool(ref, sorted_goals(state))


# ── cli ──────────────────────────────────────────────────────────────────────


def _resolve(state: AppState, ref: list[str]) -> GoalDefinition:
    goal_ref = " ".join(ref) if ref else ""
    if not goal_ref:
        exit_error("Usage: checkly goal <command> <goal>")
    goal = find_goal(state, goal_ref)
    if not goal:
        raise NotFoundError(f"No goal found: '{goal_ref}'")
    return goal


@cli("checkly", name="check")
def check_cmd(ref: list[str]):
    """Toggle a daily goal for today"""
    today = clock.today()
    state = storage.load_state()
    goal = _resolve(state, ref)
    if not goal.active:
        exit_error(f"'{goal.title}' is inactive. Turn it on with: checkly goal on {goal.title}")
    state = toggle_goal_for_today(ensure_today_goal_logs(state, today), today, goal.id)
    storage.save_state(state)
    log = next(lg for lg in state.goal_logs if lg.date == today and lg.goal_id == goal.id)
    echo(format_goal(goal.title, log.completed))


@cli("checkly goal", name="ls", default=True)
def ls():
    """List all goals"""
    state = storage.load_state()
    goals = sorted_goals(state)
    if not goals:
        echo("no goals")
        return
    for g in goals:
        status = "" if g.active else "  (off)"
        echo(format_status("•", f"{g.title}{status}", g.id))


@cli("checkly goal", name="add")
def add(title: list[str]):
    """Add a daily goal"""
    title_str = " ".join(title) if title else ""
    if not title_str.strip():
        exit_error("Usage: checkly goal add <title>")
    state = storage.update(lambda s: add_goal(s, title_str))
    goal = state.goals[-1]
    echo(format_status("□", goal.title, goal.id))


@cli("checkly goal", name="rm")
def rm(ref: list[str]):
    """Delete a goal and its history"""
    state = storage.load_state()
    goal = _resolve(state, ref)
    storage.save_state(delete_goal(state, goal.id))
    echo(format_status("✗", goal.title, goal.id))


@cli("checkly goal", name="rename")
def rename(ref: str, title: str):
    """Rename a goal"""
    if not title.strip():
        exit_error("Error: title cannot be empty")
    state = storage.load_state()
    goal = _resolve(state, [ref])
    storage.save_state(update_goal(state, goal.id, title=title.strip()))
    echo(format_status("□", title.strip(), goal.id))


def _set_active(ref: list[str], active: bool) -> None:
    state = storage.load_state()
    goal = _resolve(state, ref)
    storage.save_state(update_goal(state, goal.id, active=active))
    echo(format_status("•", f"{goal.title}  {'on' if active else 'off'}", goal.id))


@cli("checkly goal", name="on")
def on(ref: list[str]):
    """Activate a goal"""
    _set_active(ref, True)


@cli("checkly goal", name="off")
def off(ref: list[str]):
    """Deactivate a goal"""
    _set_active(ref, False)
