"""
Read-only projections derived from a Document.

Neither view is owned by the document: both are rebuilt from scratch after
every mutation and hold copies, not references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .document import Task


@dataclass
class AgendaItem:
    """A snapshot of one task from an active project, plus its address."""

    project_name: str
    task: Task
    category_idx: int
    project_idx: int
    task_idx: int

    @property
    def address(self) -> tuple[int, int, int]:
        return (self.category_idx, self.project_idx, self.task_idx)


# Tree node kinds. Frozen so they compare and hash by variant + indices,
# which is how a focused node is found again after the tree is rebuilt.

@dataclass(frozen=True)
class CategoryNode:
    cat_idx: int


@dataclass(frozen=True)
class ProjectNode:
    cat_idx: int
    proj_idx: int


@dataclass(frozen=True)
class TaskNode:
    cat_idx: int
    proj_idx: int
    task_idx: int


@dataclass(frozen=True)
class NoteNode:
    cat_idx: int
    proj_idx: int
    task_idx: int
    note_idx: int


TreeNodeKind = Union[CategoryNode, ProjectNode, TaskNode, NoteNode]


@dataclass
class TreeNode:
    """One visible row of the backlog tree."""

    kind: TreeNodeKind
    depth: int
    display: str
