"""
Core document data models.

A todo file is a Document holding an ordered list of Categories, each holding
Projects, each holding Tasks. Everything is addressed by position (category,
project, task and note indices) rather than by ID: the file carries no IDs and
the tree is rebuilt after every edit.

Free text the parser cannot classify is kept verbatim (preamble, project and
task notes, archive lines) so that a parse → serialize round trip is lossless.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TaskState(str, Enum):
    """Lifecycle state of a task. Each state serializes as a single glyph."""

    TODO = "todo"
    ON_DECK = "on-deck"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @property
    def symbol(self) -> str:
        return _STATE_TO_SYMBOL[self]

    @property
    def label(self) -> str:
        return _STATE_TO_LABEL[self]

    def promote(self) -> TaskState:
        """Todo → On Deck → In Progress → Done → Todo."""
        return _PROMOTE[self]

    def demote(self) -> TaskState:
        """Exact inverse of promote()."""
        return _DEMOTE[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional[TaskState]:
        return SYMBOL_TO_STATE.get(symbol)

    def __str__(self) -> str:
        return f"{self.symbol} {self.label}"


_STATE_TO_SYMBOL = {
    TaskState.TODO: "🔴",
    TaskState.ON_DECK: "🔵",
    TaskState.IN_PROGRESS: "🔶",
    TaskState.DONE: "✅",
}

_STATE_TO_LABEL = {
    TaskState.TODO: "Todo",
    TaskState.ON_DECK: "On Deck",
    TaskState.IN_PROGRESS: "In Progress",
    TaskState.DONE: "Done",
}

_PROMOTE = {
    TaskState.TODO: TaskState.ON_DECK,
    TaskState.ON_DECK: TaskState.IN_PROGRESS,
    TaskState.IN_PROGRESS: TaskState.DONE,
    TaskState.DONE: TaskState.TODO,
}

_DEMOTE = {new: old for old, new in _PROMOTE.items()}

SYMBOL_TO_STATE = {v: k for k, v in _STATE_TO_SYMBOL.items()}

# Parse order matters only in that every glyph is tried; keep it stable.
TASK_SYMBOLS = tuple(_STATE_TO_SYMBOL[s] for s in TaskState)

# Marks an active project heading ("### 🔶 Name").
ACTIVE_PROJECT_SYMBOL = TaskState.IN_PROGRESS.symbol

# Task notes are written with this prefix and displayed without it.
NOTE_INDENT = "  "


@dataclass
class Task:
    """A single actionable item."""

    state: TaskState
    text: str
    notes: List[str] = field(default_factory=list)


@dataclass
class Project:
    """
    A named unit of work. Only active projects contribute to the agenda.

    ``notes`` are the free-text lines between the heading and the first task.
    """

    name: str
    active: bool = False
    notes: List[str] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)


@dataclass
class Category:
    """Top-level grouping of projects (a ``## Name`` heading)."""

    name: str
    projects: List[Project] = field(default_factory=list)


@dataclass
class Document:
    """
    A fully parsed todo file.

    ``archive`` holds the raw lines under ``## Done``; they are never parsed
    into tasks. ``trailing`` holds the blank lines that ended the file.
    """

    preamble: List[str] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    archive: List[str] = field(default_factory=list)
    trailing: List[str] = field(default_factory=list)

    @classmethod
    def template(cls) -> Document:
        """Starter document written when no todo file exists yet."""
        return cls(
            categories=[
                Category(
                    name="Inbox",
                    projects=[
                        Project(
                            name="Tasks",
                            active=True,
                            tasks=[Task(TaskState.TODO, "Your first task")],
                        )
                    ],
                )
            ]
        )

    def all_tasks(self) -> List[Task]:
        """Every task in category-major, project-major order."""
        return [
            task
            for category in self.categories
            for project in category.projects
            for task in project.tasks
        ]
