"""Resolve structural addresses to document entities (None when out of range)."""

from typing import List, Optional, TypeVar

from gws.models import Category, Document, Project, Task

T = TypeVar("T")


def get_at(items: List[T], idx: int) -> Optional[T]:
    """List lookup that treats negative indices as out of range."""
    if 0 <= idx < len(items):
        return items[idx]
    return None


def get_category(doc: Document, cat_idx: int) -> Optional[Category]:
    return get_at(doc.categories, cat_idx)


def get_project(doc: Document, cat_idx: int, proj_idx: int) -> Optional[Project]:
    category = get_category(doc, cat_idx)
    return get_at(category.projects, proj_idx) if category else None


def get_task(doc: Document, cat_idx: int, proj_idx: int, task_idx: int) -> Optional[Task]:
    project = get_project(doc, cat_idx, proj_idx)
    return get_at(project.tasks, task_idx) if project else None


def get_note(
    doc: Document, cat_idx: int, proj_idx: int, task_idx: int, note_idx: int
) -> Optional[str]:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    return get_at(task.notes, note_idx) if task else None
