import json
import uuid
from collections.abc import Callable

from . import db
from .core.models import AppState, Category, Every, GoalDefinition, Settings, Task
from .lib import clock
from .lib.converters import state_from_dict, state_to_dict

__all__ = [
    "STATE_VERSION",
    "STORAGE_KEY",
    "load_state",
    "reset_state",
    "save_state",
    "seed_state",
    "update",
]

STORAGE_KEY = "checkly_state_v1"
STATE_VERSION = 1

_SEED_CATEGORIES = (
    ("cat_house", "House"),
    ("cat_personal", "Personal"),
    ("cat_health", "Health"),
    ("cat_finance", "Finance"),
    ("cat_errands", "Errands"),
    ("cat_other", "Other"),
)

_SEED_GOALS = (
    ("g1", "Workout / Move 30+ min"),
    ("g2", "Drink water goal"),
    ("g3", "Read 10 pages"),
    ("g4", "Eat on plan"),
    ("g5", "Plan tomorrow (5 min)"),
)

_SEED_TASKS = (
    ("Take out trash", "cat_house", Every(1, "week")),
    ("Vacuum main areas", "cat_house", Every(1, "week")),
    ("Clean bathrooms", "cat_house", Every(2, "week")),
    ("Replace furnace filter", "cat_house", Every(3, "month")),
    ("Pay credit card", "cat_finance", Every(1, "month")),
)


def seed_state() -> AppState:
    """Fresh state for first launch: stock categories and goals, a few weekly chores due today."""
    now = clock.now()
    today = clock.today()
    return AppState(
        version=STATE_VERSION,
        categories=tuple(
            Category(id=cid, name=name, sort_order=i)
            for i, (cid, name) in enumerate(_SEED_CATEGORIES, start=1)
        ),
        tasks=tuple(
            Task(
                id=str(uuid.uuid4()),
                title=title,
                category_id=category_id,
                created_at=now,
                recurrence=rule,
                next_due_date=today,
            )
            for title, category_id, rule in _SEED_TASKS
        ),
        goals=tuple(
            GoalDefinition(id=gid, title=title, active=True, sort_order=i)
            for i, (gid, title) in enumerate(_SEED_GOALS, start=1)
        ),
        goal_logs=(),
        settings=Settings(strict_mode=False),
    )


def _read_state() -> AppState | None:
    with db.get_db() as conn:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (STORAGE_KEY,)).fetchone()
    if not row:
        return None
    try:
        data = json.loads(row[0])
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or not data.get("version"):
        return None
    try:
        return state_from_dict(data)
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError):
        return None


def load_state() -> AppState:
    """Load the persisted state. Anything missing, unparseable, or unversioned yields the seed.

    A seed is saved as soon as it is produced so its task ids stay stable across commands.
    """
    state = _read_state()
    if state is None:
        state = seed_state()
        save_state(state)
    return state


def save_state(state: AppState) -> None:
    payload = json.dumps(state_to_dict(state))
    with db.get_db() as conn:
        conn.execute(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
            (STORAGE_KEY, payload),
        )


def reset_state() -> None:
    with db.get_db() as conn:
        conn.execute("DELETE FROM kv WHERE key = ?", (STORAGE_KEY,))


def update(*transitions: Callable[[AppState], AppState]) -> AppState:
    """Load, apply `transitions` in order, persist once, and return the resulting snapshot."""
    state = load_state()
    for transition in transitions:
        state = transition(state)
    save_state(state)
    return state
