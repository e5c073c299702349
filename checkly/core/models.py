import dataclasses
from datetime import date, datetime
from typing import Literal

Unit = Literal["day", "week", "month", "year"]

UNITS: tuple[Unit, ...] = ("day", "week", "month", "year")


@dataclasses.dataclass(frozen=True)
class NoRepeat:
    pass


@dataclasses.dataclass(frozen=True)
class Every:
    interval: int
    unit: Unit


RecurrenceRule = NoRepeat | Every


@dataclasses.dataclass(frozen=True)
class RecurrenceConstraint:
    month: int | None = None
    week: int | None = None


@dataclasses.dataclass(frozen=True)
class Category:
    id: str
    name: str
    sort_order: int


@dataclasses.dataclass(frozen=True)
class Task:
    id: str
    title: str
    category_id: str
    created_at: datetime | None = None
    recurrence: RecurrenceRule = NoRepeat()
    notes: str | None = None
    due_date: date | None = None
    planned_month: int | None = None
    planned_week: int | None = None
    next_due_date: date | None = None
    recurrence_month: int | None = None
    recurrence_week: int | None = None
    last_completed_at: datetime | None = None
    completed_at: datetime | None = None
    archived: bool = False

    @property
    def is_recurring(self) -> bool:
        return isinstance(self.recurrence, Every)

    @property
    def constraint(self) -> RecurrenceConstraint:
        return RecurrenceConstraint(month=self.recurrence_month, week=self.recurrence_week)

    @property
    def live_due_date(self) -> date | None:
        """The date the task is due on: next_due_date if recurring, else due_date."""
        return self.next_due_date if self.is_recurring else self.due_date


@dataclasses.dataclass(frozen=True)
class GoalDefinition:
    id: str
    title: str
    active: bool
    sort_order: int


@dataclasses.dataclass(frozen=True)
class DailyGoalLog:
    date: date
    goal_id: str
    completed: bool
    completed_at: datetime | None = None


@dataclasses.dataclass(frozen=True)
class TodayGoal:
    goal: GoalDefinition
    log: DailyGoalLog | None = None


@dataclasses.dataclass(frozen=True)
class Settings:
    strict_mode: bool = False


@dataclasses.dataclass(frozen=True)
class AppState:
    version: int
    categories: tuple[Category, ...] = ()
    tasks: tuple[Task, ...] = ()
    goals: tuple[GoalDefinition, ...] = ()
    goal_logs: tuple[DailyGoalLog, ...] = ()
    settings: Settings = Settings()
