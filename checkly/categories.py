from fncli import cli

from . import config, storage
from .core.models import AppState, Category
from .lib.errors import echo

__all__ = ["category_name", "find_category", "sorted_categories"]


def sorted_categories(state: AppState) -> list[Category]:
    return sorted(state.categories, key=lambda c: c.sort_order)


def category_name(state: AppState, category_id: str) -> str:
    return next((c.name for c in state.categories if c.id == category_id), "Unknown")


def find_category(state: AppState, ref: str) -> Category | None:
    """Match a category by id or case-insensitive name."""
    ref_lower = ref.strip().lower()
    return next(
        (c for c in state.categories if c.id == ref or c.name.lower() == ref_lower),
        None,
    )


@cli("checkly", name="categories")
def categories_cmd():
    """List categories (* marks the default for new tasks)"""
    state = storage.load_state()
    default = config.get_default_category()
    for c in sorted_categories(state):
        marker = " *" if c.id == default else ""
        echo(f"  {c.name}{marker}")
