from .app import (
    AgendaItemMove,
    App,
    CategoryMove,
    Dialog,
    MoveKind,
    ProjectMove,
    TaskMove,
    View,
)
from .keys import Action, handle_key
from .render import (
    Row,
    RowKind,
    classify_agenda_rows,
    classify_settings_rows,
    classify_tree_rows,
    render_agenda,
    render_settings,
    render_tree,
    render_view,
)
from .themes import THEME_NAMES, theme_index

__all__ = [
    "App",
    "View",
    "Dialog",
    "MoveKind",
    "TaskMove",
    "ProjectMove",
    "CategoryMove",
    "AgendaItemMove",
    "Action",
    "handle_key",
    "Row",
    "RowKind",
    "classify_agenda_rows",
    "classify_tree_rows",
    "classify_settings_rows",
    "render_agenda",
    "render_tree",
    "render_settings",
    "render_view",
    "THEME_NAMES",
    "theme_index",
]
