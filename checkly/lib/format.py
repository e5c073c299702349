from datetime import date

from checkly.core.models import Task

from . import ansi

__all__ = ["format_due", "format_goal", "format_status", "format_task"]


def format_due(due: date | None, today: date) -> str:
    """Relative due label: 'today', 'tomorrow', '3d late', or the ISO date."""
    if due is None:
        return ""
    delta = (due - today).days
    if delta == 0:
        return ansi.yellow("today")
    if delta == 1:
        return "tomorrow"
    if delta < 0:
        return ansi.red(f"{-delta}d late")
    return ansi.muted(due.isoformat())


def format_task(task: Task, today: date, detail: str | None = None, show_id: bool = True) -> str:
    """Format a task row. Returns: □ title [due] [· detail] [id]"""
    mark = ansi.green("✓") if task.completed_at else "□"
    title = ansi.strike(task.title) if task.completed_at else task.title
    parts = [mark, title]
    due = format_due(task.live_due_date, today)
    if due:
        parts.append(due)
    if detail:
        parts.append(ansi.muted(f"· {detail}"))
    if show_id:
        parts.append(ansi.muted(f"[{task.id[:8]}]"))
    return " ".join(parts)


def format_goal(title: str, completed: bool) -> str:
    if completed:
        return f"{ansi.green('✓')} {ansi.muted(title)}"
    return f"□ {title}"


def format_status(symbol: str, content: str, item_id: str | None = None) -> str:
    """Format status message for action confirmations."""
    if item_id:
        return f"{symbol} {content} {ansi.muted(f'[{item_id[:8]}]')}"
    return f"{symbol} {content}"
