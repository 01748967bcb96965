from .files import (
    StorageError,
    atomic_write,
    ensure_file,
    load_collapse_state,
    read_text,
    save_collapse_state,
    state_file_path,
    write_document,
)

__all__ = [
    "StorageError",
    "read_text",
    "atomic_write",
    "write_document",
    "ensure_file",
    "state_file_path",
    "load_collapse_state",
    "save_collapse_state",
]
