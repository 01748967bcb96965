"""
gws - Getting Work Sorted.

Main API:
    from gws import parse_content, serialize, App

    # Parse a todo file
    doc = parse_content(Path("todo.md").read_text(encoding="utf-8"))

    # Edit it through the engine
    auto_promote(doc)
    add_task(doc, 0, 0, "Call the plumber")

    # Or drive it interactively
    app = App(doc, Path("todo.md"))
    app.move_down()
    app.promote_selected_agenda()

    # Write back
    atomic_write(Path("todo.md"), app.serialize())
"""

from .models import (
    AgendaItem,
    Category,
    CollapseState,
    Document,
    Project,
    Task,
    TaskState,
    TreeNode,
)
from .parsers import parse, parse_content, parse_file, serialize
from .engine import (
    add_task,
    archive_done,
    auto_promote,
    build_agenda,
    demote_task,
    promote_task,
)
from .controller import Action, App, Dialog, View, handle_key
from .storage import StorageError, atomic_write, ensure_file, read_text

__version__ = "0.3.0"

__all__ = [
    "TaskState",
    "Task",
    "Project",
    "Category",
    "Document",
    "AgendaItem",
    "TreeNode",
    "CollapseState",
    "parse",
    "parse_content",
    "parse_file",
    "serialize",
    "auto_promote",
    "archive_done",
    "promote_task",
    "demote_task",
    "build_agenda",
    "add_task",
    "App",
    "View",
    "Dialog",
    "Action",
    "handle_key",
    "StorageError",
    "read_text",
    "atomic_write",
    "ensure_file",
]
