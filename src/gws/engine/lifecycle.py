"""
Task lifecycle operations: state transitions, auto-promotion, archiving and
the agenda projection.
"""

import copy
import logging
from typing import Dict, List

from gws.models import AgendaItem, Document, TaskState

from .lookup import get_task

log = logging.getLogger(__name__)

# Agenda grouping: what is being worked on first, then what is next, then
# what was just finished, then everything else.
SECTION_ORDER: Dict[TaskState, int] = {
    TaskState.IN_PROGRESS: 0,
    TaskState.ON_DECK: 1,
    TaskState.DONE: 2,
    TaskState.TODO: 3,
}


def section_order(state: TaskState) -> int:
    return SECTION_ORDER[state]


def auto_promote(doc: Document) -> None:
    """
    Give every active project a current task.

    For each active project, scan tasks top-down skipping Done ones. If the
    first remaining task is already On Deck or In Progress nothing changes;
    if it is Todo it becomes On Deck. At most one task per project moves, so
    a second call is a no-op.
    """
    for category in doc.categories:
        for project in category.projects:
            if not project.active:
                continue
            for task in project.tasks:
                if task.state == TaskState.DONE:
                    continue
                if task.state == TaskState.TODO:
                    task.state = TaskState.ON_DECK
                    log.debug("Auto-promoted %r in %r", task.text, project.name)
                break


def archive_done(doc: Document) -> int:
    """
    Move every Done task into the archive.

    Archived tasks become ``- ✅ <text>`` lines prepended (in document order)
    to the existing archive. Returns how many tasks were archived.
    """
    archived: List[str] = []
    for category in doc.categories:
        for project in category.projects:
            kept = []
            for task in project.tasks:
                if task.state == TaskState.DONE:
                    archived.append(f"- {TaskState.DONE.symbol} {task.text}")
                else:
                    kept.append(task)
            project.tasks = kept

    doc.archive = archived + doc.archive
    return len(archived)


def promote_task(doc: Document, cat_idx: int, proj_idx: int, task_idx: int) -> bool:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    if task is None:
        return False
    new_state = task.state.promote()
    if new_state == task.state:
        return False
    task.state = new_state
    return True


def demote_task(doc: Document, cat_idx: int, proj_idx: int, task_idx: int) -> bool:
    task = get_task(doc, cat_idx, proj_idx, task_idx)
    if task is None:
        return False
    new_state = task.state.demote()
    if new_state == task.state:
        return False
    task.state = new_state
    return True


def build_agenda(doc: Document) -> List[AgendaItem]:
    """
    Flatten every task of every active project into agenda items.

    Items are grouped by SECTION_ORDER. The sort is stable, so inside a group
    the document order (category, project, task) is kept.
    """
    items: List[AgendaItem] = []
    for cat_idx, category in enumerate(doc.categories):
        for proj_idx, project in enumerate(category.projects):
            if not project.active:
                continue
            for task_idx, task in enumerate(project.tasks):
                items.append(
                    AgendaItem(
                        project_name=project.name,
                        task=copy.deepcopy(task),
                        category_idx=cat_idx,
                        project_idx=proj_idx,
                        task_idx=task_idx,
                    )
                )

    items.sort(key=lambda item: section_order(item.task.state))
    return items
