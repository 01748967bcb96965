"""
Serializer for gws todo files: the inverse of document_parser.parse_content.

For every Document the parser can produce, parsing the serialized text gives
back an equal Document. Archive and preamble lines are written verbatim.
"""

from typing import List

from gws.models import ACTIVE_PROJECT_SYMBOL, Category, Document, Project, Task

from .document_parser import ARCHIVE_HEADING


def format_task(task: Task) -> List[str]:
    """A task line followed by its notes (notes keep their stored indent)."""
    return [f"- {task.state.symbol} {task.text}", *task.notes]


def format_project_heading(project: Project) -> str:
    if project.active:
        return f"### {ACTIVE_PROJECT_SYMBOL} {project.name}"
    return f"### {project.name}"


def format_category(category: Category) -> List[str]:
    lines = [f"## {category.name}"]
    for project in category.projects:
        lines.append("")
        lines.append(format_project_heading(project))
        lines.extend(project.notes)
        for task in project.tasks:
            lines.extend(format_task(task))
    return lines


def serialize(doc: Document) -> str:
    """
    Render a Document as todo-file text.

    Every emitted line ends with a newline. The preamble already carries
    whatever blank lines preceded the first heading, so no separator is
    added after it; later categories and the archive get one blank line
    (the parser drops blank lines inside categories).
    """
    lines: List[str] = list(doc.preamble)

    for idx, category in enumerate(doc.categories):
        if idx > 0:
            lines.append("")
        lines.extend(format_category(category))

    if doc.archive or doc.trailing:
        if doc.categories:
            lines.append("")
        lines.append(ARCHIVE_HEADING)
        lines.extend(doc.archive)
        lines.extend(doc.trailing)

    if not lines:
        return ""
    return "\n".join(lines) + "\n"
