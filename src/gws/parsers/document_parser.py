"""
Parser for gws todo files.

Main API:
    parse_content(text) → Document
    parse_file(path)    → Document

The format is line oriented:

    <preamble lines>
    ## Category
    ### 🔶 Active project
    Project note
    - 🔴 Task text
      Indented task note
    ### Inactive project
    ## Done
    <archive lines, kept verbatim>

Parsing never fails. Lines that fit nowhere are kept as preamble or notes,
and older files (project headings prefixed with any task glyph, projects with
no enclosing category) are still accepted.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from gws.models import (
    ACTIVE_PROJECT_SYMBOL,
    TASK_SYMBOLS,
    Category,
    Document,
    Project,
    Task,
    TaskState,
)

log = logging.getLogger(__name__)

ARCHIVE_HEADING = "## Done"

# Category used for projects that appear before any "## " heading.
UNCATEGORIZED = "Uncategorized"


# ---------------------------------------------------------------------------
# Line classifiers
# ---------------------------------------------------------------------------

def parse_task_line(line: str) -> Optional[Task]:
    """Return a Task for ``- <glyph> <text>``, or None."""
    stripped = line.strip()
    if not stripped.startswith("- "):
        return None
    content = stripped[2:]
    for symbol in TASK_SYMBOLS:
        if content.startswith(symbol):
            return Task(TaskState.from_symbol(symbol), content[len(symbol):].lstrip())
    return None


def parse_category_heading(line: str) -> Optional[str]:
    """Return the category name for ``## Name`` (never for ``## Done``)."""
    stripped = line.strip()
    if not stripped.startswith("## "):
        return None
    name = stripped[3:].strip()
    if name.lower() == "done":
        return None
    return name


def parse_project_heading(line: str) -> Optional[Tuple[bool, str]]:
    """
    Return (active, name) for a ``### `` heading, or None.

    ``### 🔶 Name`` is active and ``### Name`` inactive. Older files prefixed
    project names with any task glyph; only the in-progress glyph means
    active, and the glyph is dropped from the name either way.
    """
    stripped = line.strip()
    if stripped == "###":
        # An unnamed inactive project, as written back for "### 🔴".
        return False, ""
    if not stripped.startswith("### "):
        return None
    content = stripped[4:]

    for symbol in TASK_SYMBOLS:
        if content.startswith(symbol):
            return symbol == ACTIVE_PROJECT_SYMBOL, content[len(symbol):].lstrip()

    return False, content.strip()


def is_archive_heading(line: str) -> bool:
    return line.strip() == ARCHIVE_HEADING


def is_note_line(line: str) -> bool:
    """True for a line indented by two spaces or a tab that isn't a task."""
    if not line.strip():
        return False
    return line.startswith(("  ", "\t")) and parse_task_line(line) is None


def _split_lines(content: str) -> List[str]:
    """
    Split on newlines only, dropping a trailing carriage return per line.

    Form feeds and Unicode line separators stay inside their line.
    """
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


# ---------------------------------------------------------------------------
# Main parse API
# ---------------------------------------------------------------------------

def parse_content(content: str) -> Document:
    """
    Parse todo-file text into a Document.

    Single top-to-bottom scan. State is the open category, the open project
    and whether the ``## Done`` archive has started.
    """
    doc = Document()
    current_category: Optional[Category] = None
    current_project: Optional[Project] = None
    in_archive = False

    def flush_project() -> None:
        nonlocal current_project
        if current_project is not None and current_category is not None:
            current_category.projects.append(current_project)
        current_project = None

    def flush_category() -> None:
        nonlocal current_category
        flush_project()
        if current_category is not None:
            doc.categories.append(current_category)
        current_category = None

    for line in _split_lines(content):
        if in_archive:
            doc.archive.append(line)
            continue

        if is_archive_heading(line):
            flush_category()
            in_archive = True
            continue

        name = parse_category_heading(line)
        if name is not None:
            flush_category()
            current_category = Category(name=name)
            continue

        heading = parse_project_heading(line)
        if heading is not None:
            flush_project()
            if current_category is None:
                current_category = Category(name=UNCATEGORIZED)
            active, name = heading
            current_project = Project(name=name, active=active)
            continue

        if current_project is not None:
            _parse_project_line(current_project, line)
        elif current_category is None:
            doc.preamble.append(line)
        # Otherwise: stray text between a category heading and its first
        # project. There is nowhere to keep it.

    flush_category()

    # Blank lines ending the archive are tracked separately so the file's
    # final spacing survives a round trip.
    trailing: List[str] = []
    while doc.archive and not doc.archive[-1].strip():
        trailing.append(doc.archive.pop())
    trailing.reverse()
    doc.trailing = trailing

    return doc


def _parse_project_line(project: Project, line: str) -> None:
    """Classify a line inside an open project: task, note, or separator."""
    task = parse_task_line(line)
    if task is not None:
        project.tasks.append(task)
        return

    if not line.strip():
        return

    if not project.tasks:
        project.notes.append(line)
    elif is_note_line(line):
        project.tasks[-1].notes.append(line)
    else:
        # Unindented text after the tasks started: old files put free text
        # here, so keep it with the last task rather than dropping it.
        log.debug("Treating unindented line as a note: %r", line)
        project.tasks[-1].notes.append(line)


def parse_file(file_path: Path) -> Document:
    """Parse a todo file from disk."""
    return parse_content(file_path.read_text(encoding="utf-8"))


# Short alias matching serialize().
parse = parse_content
