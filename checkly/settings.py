import dataclasses

from fncli import cli

from . import config, storage
from .categories import find_category, sorted_categories
from .core.errors import NotFoundError
from .core.models import AppState
from .goals import sorted_goals
from .lib import ansi
from .lib.errors import echo

__all__ = ["render_settings", "toggle_strict_mode"]


def toggle_strict_mode(state: AppState) -> AppState:
    settings = dataclasses.replace(state.settings, strict_mode=not state.settings.strict_mode)
    return dataclasses.replace(state, settings=settings)


def render_settings(state: AppState) -> str:
    lines = [ansi.bold("Settings"), "", ansi.bold("DAILY GOALS")]
    for g in sorted_goals(state):
        mark = "■" if g.active else "□"
        lines.append(f"  {mark} {g.title}")
    lines.append("")
    lines.append(ansi.bold("CATEGORIES"))
    lines.append("  " + "  ".join(c.name for c in sorted_categories(state)))
    lines.append("")
    lines.append(f"strict mode: {'on' if state.settings.strict_mode else 'off'}")
    return "\n".join(lines)


@cli("checkly settings", name="show", default=True)
def show():
    """Show goals, categories and preferences"""
    echo(render_settings(storage.load_state()))


@cli("checkly settings", name="strict")
def strict():
    """Toggle strict mode"""
    state = storage.update(toggle_strict_mode)
    echo(f"strict mode: {'on' if state.settings.strict_mode else 'off'}")


@cli("checkly settings", name="category")
def category(name: str):
    """Set the default category for new tasks"""
    found = find_category(storage.load_state(), name)
    if not found:
        raise NotFoundError(f"No category found: '{name}'")
    config.set_default_category(found.id)
    echo(f"default category: {found.name}")


@cli("checkly settings", name="reset")
def reset(yes: bool = False):
    """Erase all data and start over from the default seed"""
    if not yes:
        echo("this erases every task, goal and log. re-run with --yes to confirm")
        return
    storage.reset_state()
    echo("reset to defaults")
