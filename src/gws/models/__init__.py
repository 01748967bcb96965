from .document import (
    ACTIVE_PROJECT_SYMBOL,
    NOTE_INDENT,
    TASK_SYMBOLS,
    Category,
    Document,
    Project,
    Task,
    TaskState,
)
from .views import (
    AgendaItem,
    CategoryNode,
    NoteNode,
    ProjectNode,
    TaskNode,
    TreeNode,
    TreeNodeKind,
)
from .collapse import CollapseState

__all__ = [
    "ACTIVE_PROJECT_SYMBOL",
    "NOTE_INDENT",
    "TASK_SYMBOLS",
    "TaskState",
    "Task",
    "Project",
    "Category",
    "Document",
    "AgendaItem",
    "CategoryNode",
    "ProjectNode",
    "TaskNode",
    "NoteNode",
    "TreeNode",
    "TreeNodeKind",
    "CollapseState",
]
