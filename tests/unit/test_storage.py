import dataclasses
import json
from datetime import date

from checkly import db, storage
from checkly.core.models import Every
from checkly.goals import add_goal
from checkly.storage import STORAGE_KEY, load_state, reset_state, save_state, seed_state
from checkly.tasks import complete_task


def _write_raw(value: str) -> None:
    with db.get_db() as conn:
        conn.execute("INSERT INTO kv (key, value) VALUES (?, ?)", (STORAGE_KEY, value))


def test_seed_state(fixed_today):
    state = seed_state()
    assert state.version == 1
    assert [c.name for c in state.categories][:2] == ["House", "Personal"]
    assert len(state.categories) == 6
    assert [g.id for g in state.goals] == ["g1", "g2", "g3", "g4", "g5"]
    assert all(g.active for g in state.goals)
    assert len(state.tasks) == 5
    assert all(t.next_due_date == fixed_today for t in state.tasks)
    assert all(isinstance(t.recurrence, Every) for t in state.tasks)
    assert state.goal_logs == ()
    assert state.settings.strict_mode is False


def test_load_without_saved_state_returns_seed(tmp_checkly_dir, fixed_today):
    state = load_state()
    assert len(state.goals) == 5
    assert len(state.tasks) == 5


def test_save_then_load_round_trips(tmp_checkly_dir, fixed_today):
    state = add_goal(seed_state(), "stretch")
    save_state(state)
    assert load_state() == state


def test_save_overwrites_previous(tmp_checkly_dir, fixed_today):
    save_state(seed_state())
    state = dataclasses.replace(seed_state(), tasks=())
    save_state(state)
    assert load_state().tasks == ()


def test_unparseable_blob_falls_back_to_seed(tmp_checkly_dir, fixed_today):
    _write_raw("{not json")
    assert len(load_state().goals) == 5


def test_unversioned_blob_falls_back_to_seed(tmp_checkly_dir, fixed_today):
    _write_raw(json.dumps({"tasks": [], "goals": []}))
    assert len(load_state().goals) == 5


def test_malformed_blob_falls_back_to_seed(tmp_checkly_dir, fixed_today):
    _write_raw(json.dumps({"version": 1, "tasks": [{"title": "no id"}]}))
    assert len(load_state().tasks) == 5


def test_non_object_blob_falls_back_to_seed(tmp_checkly_dir, fixed_today):
    _write_raw(json.dumps([1, 2, 3]))
    assert len(load_state().goals) == 5


def test_reset_state_restores_seed(tmp_checkly_dir, fixed_today):
    save_state(dataclasses.replace(seed_state(), goals=()))
    assert load_state().goals == ()

    reset_state()

    assert len(load_state().goals) == 5


def test_update_applies_in_order_and_persists(tmp_checkly_dir, fixed_today):
    save_state(dataclasses.replace(seed_state(), goals=()))

    result = storage.update(lambda s: add_goal(s, "first"), lambda s: add_goal(s, "second"))

    assert [g.title for g in result.goals] == ["first", "second"]
    assert [g.sort_order for g in result.goals] == [1, 2]
    assert load_state() == result


def test_huge_timestamp_falls_back_to_seed(tmp_checkly_dir, fixed_today):
    _write_raw(json.dumps({"version": 1, "tasks": [{"id": "a", "title": "x", "created_at": 1e30}]}))
    assert len(load_state().tasks) == 5


def test_out_of_range_constraint_loads_and_completes(tmp_checkly_dir, fixed_today):
    row = {
        "id": "a",
        "title": "Clean gutters",
        "recurrence": {"kind": "every", "interval": 1, "unit": "year"},
        "next_due_date": "2024-03-15",
        "recurrence_month": 13,
    }
    _write_raw(json.dumps({"version": 1, "tasks": [row]}))

    state = complete_task(load_state(), "a", fixed_today)

    assert state.tasks[0].next_due_date == date(2025, 3, 15)


def test_seed_is_persisted_on_first_load(tmp_checkly_dir, fixed_today):
    first = load_state()
    assert [t.id for t in load_state().tasks] == [t.id for t in first.tasks]
    with db.get_db() as conn:
        row = conn.execute("SELECT value FROM kv WHERE key = ?", (STORAGE_KEY,)).fetchone()
    assert row is not None


def test_bad_blob_is_replaced_by_saved_seed(tmp_checkly_dir, fixed_today):
    _write_raw("{not json")
    first = load_state()
    assert load_state() == first
