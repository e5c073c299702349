from datetime import date, datetime

import pytest

from checkly.core.models import (
    AppState,
    Category,
    DailyGoalLog,
    Every,
    GoalDefinition,
    NoRepeat,
    Settings,
    Task,
)
from checkly.lib.converters import (
    _datetime_or_none,
    rule_from_dict,
    rule_to_dict,
    state_from_dict,
    state_to_dict,
    task_from_dict,
    task_to_dict,
)


def test_rule_to_dict():
    assert rule_to_dict(NoRepeat()) == {"kind": "none"}
    assert rule_to_dict(Every(2, "month")) == {"kind": "every", "interval": 2, "unit": "month"}


def test_rule_from_dict():
    assert rule_from_dict(None) == NoRepeat()
    assert rule_from_dict({"kind": "none"}) == NoRepeat()
    assert rule_from_dict({"kind": "every", "interval": 3, "unit": "day"}) == Every(3, "day")


def test_rule_from_dict_floors_interval():
    assert rule_from_dict({"kind": "every", "interval": 0, "unit": "week"}) == Every(1, "week")


def test_rule_from_dict_unknown_unit():
    with pytest.raises(ValueError):
        rule_from_dict({"kind": "every", "interval": 1, "unit": "fortnight"})


def test_task_dict_layout():
    task = Task(
        id="t1",
        title="Pay credit card",
        category_id="cat_finance",
        created_at=datetime(2024, 3, 15, 9, 30),
        recurrence=Every(1, "month"),
        next_due_date=date(2024, 4, 8),
        recurrence_week=2,
    )
    row = task_to_dict(task)
    assert row["next_due_date"] == "2024-04-08"
    assert row["created_at"] == "2024-03-15T09:30:00"
    assert row["recurrence"] == {"kind": "every", "interval": 1, "unit": "month"}
    assert row["due_date"] is None
    assert task_from_dict(row) == task


def test_task_from_minimal_row():
    task = task_from_dict({"id": "t1", "title": "x"})
    assert task.recurrence == NoRepeat()
    assert task.category_id == ""
    assert task.due_date is None
    assert task.archived is False


def test_datetime_accepts_epoch_millis():
    ts = datetime(2024, 3, 15, 9, 30)
    millis = ts.timestamp() * 1000
    assert _datetime_or_none(millis) == ts
    assert _datetime_or_none(ts.timestamp()) == ts
    assert _datetime_or_none("") is None
    assert _datetime_or_none(None) is None


def test_state_round_trip():
    state = AppState(
        version=1,
        categories=(Category(id="cat_house", name="House", sort_order=1),),
        tasks=(Task(id="t1", title="x", category_id="cat_house", due_date=date(2024, 3, 15)),),
        goals=(GoalDefinition(id="g1", title="Read", active=False, sort_order=4),),
        goal_logs=(
            DailyGoalLog(
                date=date(2024, 3, 15),
                goal_id="g1",
                completed=True,
                completed_at=datetime(2024, 3, 15, 8, 0),
            ),
        ),
        settings=Settings(strict_mode=True),
    )
    assert state_from_dict(state_to_dict(state)) == state


def test_state_from_dict_requires_version():
    with pytest.raises(KeyError):
        state_from_dict({"tasks": []})


def test_task_from_dict_drops_out_of_range_month_and_week():
    task = task_from_dict(
        {
            "id": "t1",
            "title": "x",
            "recurrence": {"kind": "every", "interval": 1, "unit": "year"},
            "next_due_date": "2024-10-01",
            "recurrence_month": 13,
            "recurrence_week": -2,
            "planned_month": 0,
            "planned_week": 6,
        }
    )
    assert task.recurrence_month is None
    assert task.recurrence_week is None
    assert task.planned_month is None
    assert task.planned_week is None


def test_task_from_dict_keeps_in_range_month_and_week():
    task = task_from_dict({"id": "t1", "title": "x", "planned_month": "12", "planned_week": 5})
    assert task.planned_month == 12
    assert task.planned_week == 5
