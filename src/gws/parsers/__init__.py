from .document_parser import (
    ARCHIVE_HEADING,
    UNCATEGORIZED,
    is_archive_heading,
    is_note_line,
    parse,
    parse_category_heading,
    parse_content,
    parse_file,
    parse_project_heading,
    parse_task_line,
)
from .serializer import format_category, format_project_heading, format_task, serialize

__all__ = [
    "ARCHIVE_HEADING",
    "UNCATEGORIZED",
    "parse",
    "parse_content",
    "parse_file",
    "parse_task_line",
    "parse_category_heading",
    "parse_project_heading",
    "is_archive_heading",
    "is_note_line",
    "serialize",
    "format_task",
    "format_project_heading",
    "format_category",
]
