import inspect
import sqlite3
from collections.abc import Callable
from contextlib import contextmanager
from pathlib import Path

from . import config, migrations

MIGRATIONS_TABLE = "_migrations"

MigrationFn = Callable[[sqlite3.Connection], None]
Migration = tuple[str, MigrationFn]


@contextmanager
def get_db(db_path: Path | None = None):
    db_path = db_path if db_path else config.DB_PATH
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def load_migrations() -> list[Migration]:
    found: list[Migration] = [
        (name.replace("migration_", "", 1), fn)
        for name, fn in inspect.getmembers(migrations, inspect.isfunction)
        if name.startswith("migration_")
    ]
    return sorted(found, key=lambda x: x[0])


def _apply_migrations(conn: sqlite3.Connection) -> None:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} "
        "(id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL UNIQUE,"
        " applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
    )
    conn.commit()

    rows = conn.execute(f"SELECT name FROM {MIGRATIONS_TABLE}").fetchall()  # noqa: S608
    applied = {row[0] for row in rows}
    for name, migration in load_migrations():
        if name in applied:
            continue
        try:
            migration(conn)
            conn.execute(
                f"INSERT OR IGNORE INTO {MIGRATIONS_TABLE} (name) VALUES (?)",  # noqa: S608
                (name,),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise


def init(db_path: Path | None = None) -> None:
    db_path = db_path if db_path else config.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_db(db_path) as conn:
        _apply_migrations(conn)
