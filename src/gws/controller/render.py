"""
Theme-free row classification for each view, plus plain-text rendering.

A renderer maps Row.kind / Row.state / Row.selected / Row.moving to glyphs and
colors. render_* turns rows into the plain lines the CLI prints.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from gws import engine
from gws.models import CategoryNode, ProjectNode, TaskNode, TaskState

from .app import App, View
from .themes import THEME_NAMES


class RowKind(str, Enum):
    AGENDA_TASK = "agenda-task"
    CATEGORY = "category"
    PROJECT = "project"
    TASK = "task"
    NOTE = "note"
    THEME = "theme"
    SETTINGS_CATEGORY = "settings-category"


@dataclass
class Row:
    kind: RowKind
    depth: int
    text: str
    selected: bool = False
    moving: bool = False
    state: Optional[TaskState] = None
    detail: str = ""


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def classify_agenda_rows(app: App) -> List[Row]:
    moving = app.is_moving()
    rows = []
    for idx, item in enumerate(app.agenda_items):
        selected = idx == app.agenda_cursor
        rows.append(
            Row(
                kind=RowKind.AGENDA_TASK,
                depth=0,
                text=item.task.text,
                selected=selected,
                moving=selected and moving,
                state=item.task.state,
                detail=item.project_name,
            )
        )
    return rows


def classify_tree_rows(app: App) -> List[Row]:
    moving = app.is_moving()
    rows = []
    for idx, node in enumerate(app.tree_nodes):
        selected = idx == app.backlog_cursor
        kind = node.kind
        state = None
        if isinstance(kind, CategoryNode):
            row_kind = RowKind.CATEGORY
        elif isinstance(kind, ProjectNode):
            row_kind = RowKind.PROJECT
        elif isinstance(kind, TaskNode):
            row_kind = RowKind.TASK
            task = engine.get_task(app.doc, kind.cat_idx, kind.proj_idx, kind.task_idx)
            state = task.state if task else None
        else:
            row_kind = RowKind.NOTE
        rows.append(
            Row(
                kind=row_kind,
                depth=node.depth,
                text=node.display,
                selected=selected,
                moving=selected and moving,
                state=state,
            )
        )
    return rows


def classify_settings_rows(app: App) -> List[Row]:
    moving = app.is_moving()
    rows = [
        Row(
            kind=RowKind.THEME,
            depth=0,
            text=f"Theme: {app.theme_name}",
            selected=app.settings_cursor == 0,
            detail=f"{app.theme_index + 1}/{len(THEME_NAMES)}",
        )
    ]
    for idx, category in enumerate(app.doc.categories):
        selected = app.settings_cursor == idx + 1
        count = len(category.projects)
        rows.append(
            Row(
                kind=RowKind.SETTINGS_CATEGORY,
                depth=0,
                text=category.name,
                selected=selected,
                moving=selected and moving,
                detail=f"{count} project{'' if count == 1 else 's'}",
            )
        )
    return rows


# ---------------------------------------------------------------------------
# Plain-text rendering
# ---------------------------------------------------------------------------

def _prefix(row: Row) -> str:
    if row.moving:
        return " ↕ "
    if row.selected:
        return " ▸ "
    return "   "


def render_agenda(app: App) -> List[str]:
    rows = classify_agenda_rows(app)
    if not rows:
        return ["  No active tasks. Press Tab to go to Backlog."]
    return [f"{_prefix(r)}{r.state.symbol} {r.text} ({r.detail})" for r in rows]


def render_tree(app: App) -> List[str]:
    rows = classify_tree_rows(app)
    if not rows:
        return ["  No categories. Press 'a' to add one."]
    lines = []
    for row in rows:
        dot = f"{row.state.symbol} " if row.state else ""
        lines.append(f"{_prefix(row)}{'    ' * row.depth}{dot}{row.text}")
    return lines


def render_settings(app: App) -> List[str]:
    lines = []
    for row in classify_settings_rows(app):
        lines.append(f"{_prefix(row)}{row.text}  ({row.detail})")
    return lines


def render_view(app: App) -> List[str]:
    if app.view == View.AGENDA:
        return render_agenda(app)
    if app.view == View.BACKLOG:
        return render_tree(app)
    return render_settings(app)
