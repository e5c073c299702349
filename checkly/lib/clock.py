"""Local wall clock. Everything that needs "today" goes through here so tests can pin it."""

from datetime import date, datetime

__all__ = ["now", "today"]


def today() -> date:
    return date.today()


def now() -> datetime:
    return datetime.now()
