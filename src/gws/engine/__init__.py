from .lifecycle import (
    SECTION_ORDER,
    archive_done,
    auto_promote,
    build_agenda,
    demote_task,
    promote_task,
    section_order,
)
from .lookup import get_at, get_category, get_note, get_project, get_task
from .structure import (
    add_category,
    add_project,
    add_task,
    add_task_note,
    delete_project,
    delete_task,
    delete_task_note,
    edit_task_note,
    move_project_to_category,
    relocate_category,
    relocate_task,
    remove_category,
    rename_category,
    rename_project,
    rename_task,
    rerank_category,
    rerank_project,
    rerank_task,
    toggle_project_active,
)

__all__ = [
    "SECTION_ORDER",
    "section_order",
    "auto_promote",
    "archive_done",
    "promote_task",
    "demote_task",
    "build_agenda",
    "get_at",
    "get_category",
    "get_project",
    "get_task",
    "get_note",
    "add_task",
    "delete_task",
    "rename_task",
    "add_task_note",
    "edit_task_note",
    "delete_task_note",
    "rerank_task",
    "relocate_task",
    "add_project",
    "delete_project",
    "rename_project",
    "toggle_project_active",
    "rerank_project",
    "move_project_to_category",
    "add_category",
    "remove_category",
    "rename_category",
    "rerank_category",
    "relocate_category",
]
