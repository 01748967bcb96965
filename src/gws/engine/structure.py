"""
Structural edits over a Document: add, rename, delete, rerank and move for
tasks, notes, projects and categories.

Every function takes the document plus explicit indices. An address that no
longer exists is a no-op reported as failure (False or None); nothing here
raises for bad indices.
"""

import logging
from typing import List, Optional, Tuple, TypeVar

from gws.models import NOTE_INDENT, Category, Document, Project, Task, TaskState

from .lookup import get_category, get_project, get_task

log = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Sequence helpers
# ---------------------------------------------------------------------------

def _swap_neighbour(items: List[T], idx: int, direction: int) -> Optional[int]:
    """Swap items[idx] with its neighbour; None at a boundary."""
    new_idx = idx + direction
    if not (0 <= idx < len(items)) or not (0 <= new_idx < len(items)):
        return None
    items[idx], items[new_idx] = items[new_idx], items[idx]
    return new_idx


def _relocate(items: List[T], from_idx: int, to_idx: int) -> Optional[int]:
    """Remove items[from_idx] and reinsert it at to_idx (clamped)."""
    if not 0 <= from_idx < len(items):
        return None
    item = items.pop(from_idx)
    idx = min(max(to_idx, 0), len(items))
    items.insert(idx, item)
    return idx


def _delete_at(items: List[T], idx: int) -> bool:
    if 0 <= idx < len(items):
        del items[idx]
        return True
    return False


# ---------------------------------------------------------------------------
# Tasks and notes
# ---------------------------------------------------------------------------

def add_task(doc: Document, cat_idx: int, proj_idx: int, text: str) -> bool:
    """Append a new Todo task to a project."""
    project = get_project(doc, cat_idx, proj_idx)
    if project is None:
        return False
    project.tasks.append(Task(TaskState.TODO, text))
    return True


def delete_task(doc: Document, cat_idx: int, proj_idx: int, task_idx: int) -> bool:
    project = get_project(doc, cat_idx, proj_idx)
    return project is not None and _delete_at(project.tasks, task_idx)


def rename_task(doc: Document, cat_idx: int, proj_idx: int, task_idx: int, new_text: str) -> bool:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    if task is None:
        return False
    task.text = new_text
    return True


def add_task_note(doc: Document, cat_idx: int, proj_idx: int, task_idx: int, note: str) -> bool:
    """Append a note; it is stored with the two-space indent it is written with."""
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    if task is None:
        return False
    task.notes.append(NOTE_INDENT + note)
    return True


def edit_task_note(
    doc: Document, cat_idx: int, proj_idx: int, task_idx: int, note_idx: int, text: str
) -> bool:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    if task is None or not 0 <= note_idx < len(task.notes):
        return False
    task.notes[note_idx] = NOTE_INDENT + text
    return True


def delete_task_note(
    doc: Document, cat_idx: int, proj_idx: int, task_idx: int, note_idx: int
) -> bool:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    return task is not None and _delete_at(task.notes, note_idx)


def rerank_task(
    doc: Document, cat_idx: int, proj_idx: int, task_idx: int, direction: int
) -> Optional[int]:
    """Swap a task with its neighbour (direction -1 = up, 1 = down)."""
    project = get_project(doc, cat_idx, proj_idx)
    if project is None:
        return None
    return _swap_neighbour(project.tasks, task_idx, direction)


def relocate_task(
    doc: Document, cat_idx: int, proj_idx: int, from_idx: int, to_idx: int
) -> Optional[int]:
    project = get_project(doc, cat_idx, proj_idx)
    if project is None:
        return None
    return _relocate(project.tasks, from_idx, to_idx)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def add_project(doc: Document, cat_idx: int, name: str, active: bool) -> bool:
    category = get_category(doc, cat_idx)
    if category is None:
        return False
    category.projects.append(Project(name=name, active=active))
    return True


def delete_project(doc: Document, cat_idx: int, proj_idx: int) -> bool:
    category = get_category(doc, cat_idx)
    return category is not None and _delete_at(category.projects, proj_idx)


def rename_project(doc: Document, cat_idx: int, proj_idx: int, new_name: str) -> bool:
    project = get_project(doc, cat_idx, proj_idx)
    if project is None:
        return False
    project.name = new_name
    return True


def toggle_project_active(doc: Document, cat_idx: int, proj_idx: int) -> bool:
    project = get_project(doc, cat_idx, proj_idx)
    if project is None:
        return False
    project.active = not project.active
    return True


def rerank_project(doc: Document, cat_idx: int, proj_idx: int, direction: int) -> Optional[int]:
    category = get_category(doc, cat_idx)
    if category is None:
        return None
    return _swap_neighbour(category.projects, proj_idx, direction)


def move_project_to_category(
    doc: Document, from_cat: int, proj_idx: int, to_cat: int, insert_idx: int
) -> Optional[Tuple[int, int]]:
    """
    Move a project to position insert_idx of another category.

    insert_idx is clamped to the target's length. Returns the project's new
    (cat_idx, proj_idx), or None if either address is invalid.
    """
    source = get_category(doc, from_cat)
    target = get_category(doc, to_cat)
    if source is None or target is None or not 0 <= proj_idx < len(source.projects):
        return None
    project = source.projects.pop(proj_idx)
    idx = min(max(insert_idx, 0), len(target.projects))
    target.projects.insert(idx, project)
    log.debug("Moved project %r to category %d at %d", project.name, to_cat, idx)
    return to_cat, idx


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def add_category(doc: Document, name: str) -> int:
    """Append a category and return its index."""
    doc.categories.append(Category(name=name))
    return len(doc.categories) - 1


def remove_category(doc: Document, cat_idx: int) -> bool:
    return _delete_at(doc.categories, cat_idx)


def rename_category(doc: Document, cat_idx: int, new_name: str) -> bool:
    category = get_category(doc, cat_idx)
    if category is None:
        return False
    category.name = new_name
    return True


def rerank_category(doc: Document, cat_idx: int, direction: int) -> Optional[int]:
    return _swap_neighbour(doc.categories, cat_idx, direction)


def relocate_category(doc: Document, from_idx: int, to_idx: int) -> Optional[int]:
    return _relocate(doc.categories, from_idx, to_idx)
