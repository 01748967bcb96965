"""
File-system access for the todo file and its sidecar state file.

Every failure is raised as StorageError so callers have one thing to catch;
the in-memory document is never touched here.
"""

import logging
import os
from pathlib import Path

from gws.models import CollapseState, Document
from gws.parsers import serialize

log = logging.getLogger(__name__)

STATE_SUFFIX = ".state"
TMP_SUFFIX = ".tmp"


class StorageError(OSError):
    """A read, write or rename at the storage boundary failed."""

    def __init__(self, message: str, path: Path):
        super().__init__(f"{message}: {path}")
        self.path = path


def read_text(path: Path) -> str:
    """Read a UTF-8 file. Raises StorageError (FileNotFoundError is kept as the cause)."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError("Failed to read todo file", path) from e


def atomic_write(path: Path, text: str) -> None:
    """
    Write text to path without ever leaving it half written.

    The content goes to ``<name>.tmp`` in the same directory first and is then
    renamed over the target.
    """
    tmp_path = path.with_name(path.name + TMP_SUFFIX)
    try:
        tmp_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise StorageError("Failed to write temp file", tmp_path) from e
    try:
        os.replace(tmp_path, path)
    except OSError as e:
        raise StorageError("Failed to rename temp file", path) from e
    log.info("Saved %s", path)


def write_document(path: Path, doc: Document) -> None:
    atomic_write(path, serialize(doc))


def ensure_file(path: Path) -> str:
    """
    Return the todo file's content, creating it from the template if missing.

    Parent directories are created as needed.
    """
    if path.exists():
        return read_text(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError("Failed to create directory", path.parent) from e

    content = serialize(Document.template())
    atomic_write(path, content)
    log.info("Created %s from template", path)
    return content


# ---------------------------------------------------------------------------
# Sidecar state
# ---------------------------------------------------------------------------

def state_file_path(path: Path) -> Path:
    """``todo.md`` → ``todo.state``; ``todo.state`` → ``todo.state.state``."""
    if path.suffix == STATE_SUFFIX:
        return path.with_name(path.name + STATE_SUFFIX)
    return path.with_suffix(STATE_SUFFIX)


def load_collapse_state(path: Path) -> CollapseState:
    """Load the sidecar for a todo file; a missing or unreadable one is empty."""
    state_path = state_file_path(path)
    try:
        content = state_path.read_text(encoding="utf-8")
    except OSError:
        log.debug("No readable state file at %s", state_path)
        return CollapseState()
    return CollapseState.deserialize(content)


def save_collapse_state(path: Path, state: CollapseState) -> None:
    state_path = state_file_path(path)
    try:
        state_path.write_text(state.serialize(), encoding="utf-8")
    except OSError as e:
        raise StorageError("Failed to write state file", state_path) from e
