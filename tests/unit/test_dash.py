from datetime import date

from checkly.core.models import AppState, Category, DailyGoalLog, Every, GoalDefinition, Task
from checkly.dash import render_tasks, render_today
from checkly.settings import render_settings, toggle_strict_mode

TODAY = date(2024, 3, 15)


def _state() -> AppState:
    return AppState(
        version=1,
        categories=(
            Category(id="cat_house", name="House", sort_order=1),
            Category(id="cat_finance", name="Finance", sort_order=2),
        ),
        tasks=(
            Task(
                id="t1",
                title="Take out trash",
                category_id="cat_house",
                recurrence=Every(1, "week"),
                next_due_date=TODAY,
            ),
            Task(
                id="t2",
                title="Pay rent",
                category_id="cat_finance",
                due_date=date(2024, 3, 10),
            ),
            Task(id="t3", title="Fix shelf", category_id="cat_house"),
            Task(
                id="t4",
                title="Clean gutters",
                category_id="cat_house",
                recurrence=Every(1, "year"),
                next_due_date=date(2024, 10, 1),
                recurrence_month=10,
            ),
        ),
        goals=(
            GoalDefinition(id="g1", title="Read 10 pages", active=True, sort_order=1),
            GoalDefinition(id="g2", title="Stretch", active=True, sort_order=2),
            GoalDefinition(id="g3", title="Old goal", active=False, sort_order=3),
        ),
        goal_logs=(DailyGoalLog(date=TODAY, goal_id="g1", completed=True),),
    )


def test_render_today():
    out = render_today(_state(), TODAY)
    assert out.startswith("Friday, Mar 15\nToday")
    assert "DAILY GOALS  1/2 done" in out
    assert "✓ Read 10 pages" in out
    assert "□ Stretch" in out
    assert "Old goal" not in out
    assert "DUE TODAY  1 items" in out
    assert "Take out trash today · House" in out
    assert "OVERDUE  1" in out
    assert "Pay rent 5d late · Finance" in out
    assert "Fix shelf" not in out


def test_render_today_without_overdue():
    state = _state()
    state = AppState(version=1, categories=state.categories, goals=state.goals)
    out = render_today(state, TODAY)
    assert "OVERDUE" not in out
    assert "nothing due today" in out


def test_render_tasks():
    out = render_tasks(_state(), TODAY)
    assert "ALL TASKS  4" in out
    assert "Every week" in out
    assert "PLANNED RECURRING" in out
    assert "Every October" in out
    assert "ANYTIME" in out
    anytime = out.split("ANYTIME", 1)[1]
    assert "Fix shelf" in anytime
    assert "Pay rent" not in anytime


def test_render_settings_and_strict_mode():
    state = toggle_strict_mode(_state())
    out = render_settings(state)
    assert "■ Read 10 pages" in out
    assert "□ Old goal" in out
    assert "House  Finance" in out
    assert "strict mode: on" in out
    assert toggle_strict_mode(state).settings.strict_mode is False
