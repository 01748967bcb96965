"""
gws - Getting Work Sorted: a plain-text GTD task manager

Usage:
    gws [--file PATH] [--log-level LEVEL] agenda
    gws [--file PATH] tree
    gws [--file PATH] add-task <category> <project> <text>
    gws [--file PATH] promote <category> <project> <task>
    gws [--file PATH] demote <category> <project> <task>
    gws [--file PATH] archive
    gws [--file PATH] shell
    gws [--file PATH] init

Indices are 0-based positions as shown by `gws tree`.

Examples:
    gws init
    gws add-task 0 0 "Call the plumber"
    gws promote 0 0 1
    gws --file ~/notes/todo.md shell
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from gws import engine
from gws.config import Settings, load_settings
from gws.controller import Action, App, Dialog, handle_key, render_view
from gws.models import Document, TaskState
from gws.parsers import parse_content
from gws.storage import (
    StorageError,
    atomic_write,
    ensure_file,
    load_collapse_state,
    read_text,
    save_collapse_state,
    write_document,
)
from gws.watcher import FileWatcher

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# --- helpers ---

def _load(path: Path) -> Document:
    """Parse the todo file, exiting with an error if it can't be read."""
    try:
        return parse_content(read_text(path))
    except StorageError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _save(path: Path, doc: Document) -> None:
    try:
        write_document(path, doc)
    except StorageError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _task_address(args) -> tuple:
    return args.category, args.project, args.task


# --- read-only commands ---

def agenda_cmd(settings: Settings, args):
    """Print the agenda grouped by state. The file is not modified."""
    doc = _load(settings.file)
    engine.auto_promote(doc)
    items = engine.build_agenda(doc)
    if not items:
        print("No active tasks.")
        return

    current = None
    for item in items:
        if item.task.state != current:
            current = item.task.state
            print(f"{current.label}:")
        ci, pi, ti = item.address
        print(f"  {current.symbol} {item.task.text} ({item.project_name})  [{ci} {pi} {ti}]")


def tree_cmd(settings: Settings, args):
    """Print the backlog tree, honoring the saved collapse state."""
    app = App(_load(settings.file), settings.file)
    app.apply_collapse_state(load_collapse_state(settings.file))
    if not app.tree_nodes:
        print("No categories.")
        return

    for node in app.tree_nodes:
        indent = "    " * node.depth
        kind = node.kind
        if node.depth == 2:
            task = engine.get_task(app.doc, kind.cat_idx, kind.proj_idx, kind.task_idx)
            print(f"{indent}{task.state.symbol} {node.display}  [{kind.task_idx}]")
        elif node.depth == 1:
            print(f"{indent}{node.display}  [{kind.proj_idx}]")
        elif node.depth == 0:
            print(f"{indent}{node.display}  [{kind.cat_idx}]")
        else:
            print(f"{indent}{node.display}")


# --- mutating commands ---

def add_task_cmd(settings: Settings, args):
    doc = _load(settings.file)
    if not engine.add_task(doc, args.category, args.project, args.text):
        print(f"Error: No project at {args.category} {args.project}")
        sys.exit(1)
    _save(settings.file, doc)
    print(f"Added: {TaskState.TODO.symbol} {args.text}")


def _step_task_cmd(settings: Settings, args, step, verb: str):
    doc = _load(settings.file)
    address = _task_address(args)
    if not step(doc, *address):
        print(f"Error: No task at {' '.join(str(i) for i in address)}")
        sys.exit(1)
    _save(settings.file, doc)
    task = engine.get_task(doc, *address)
    print(f"{verb}: {task.state.symbol} {task.text} ({task.state.label})")


def promote_cmd(settings: Settings, args):
    _step_task_cmd(settings, args, engine.promote_task, "Promoted")


def demote_cmd(settings: Settings, args):
    _step_task_cmd(settings, args, engine.demote_task, "Demoted")


def archive_cmd(settings: Settings, args):
    """Move every done task into the ## Done archive."""
    doc = _load(settings.file)
    count = engine.archive_done(doc)
    if count == 0:
        print("No tasks to archive.")
        return
    _save(settings.file, doc)
    print(f"Archived {count} task(s)")


def init_cmd(settings: Settings, args):
    """Create the todo file from the template if it doesn't exist."""
    path = settings.file
    existed = path.exists()
    try:
        ensure_file(path)
    except StorageError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"{'Exists' if existed else 'Created'}: {path}")


# --- shell ---

SHELL_HELP = """\
Type one or more keys separated by spaces, e.g. `j j p` or `tab`.
Named keys: enter esc tab space backspace delete left right up down ctrl+c
In a text dialog the whole line is the new text (empty line cancels).
In a confirm dialog answer y or n. `help` shows this, `quit` exits."""


def _print_screen(app: App) -> None:
    print(f"\n== {app.view.value.capitalize()}{' *' if app.dirty else ''} ==")
    for line in render_view(app):
        print(line)
    if app.dialog != Dialog.NONE:
        if app.dialog.is_confirm:
            print(f"[{app.dialog.value}] (y/n)")
        else:
            print(f"[{app.dialog.value}] {app.input_buffer}")
    if app.status_msg:
        print(f"-- {app.status_msg}")


class Shell:
    """
    Line-oriented driver for the controller.

    Each loop iteration polls the watcher, renders the current view, reads
    one line of input and feeds it to handle_key.
    """

    def __init__(self, settings: Settings, input_fn=input) -> None:
        self.settings = settings
        self.path = settings.file
        self._input = input_fn
        content = ensure_file(self.path)
        self.app = App(parse_content(content), self.path)
        self.app.apply_collapse_state(load_collapse_state(self.path))
        self.watcher = FileWatcher(self.path, settings.poll_interval)

    def run(self) -> None:
        print("Interactive mode. Type 'help' for keys, 'quit' to exit.")
        app = self.app
        while app.running:
            if self.watcher.has_changed():
                app.handle_external_change(lambda: read_text(self.path))
            app.update_scroll(max(shutil.get_terminal_size().lines - 4, 1))
            _print_screen(app)

            try:
                line = self._input("gws> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            self.handle_line(line)

        self.shutdown()

    def handle_line(self, line: str) -> None:
        app = self.app
        if app.dialog != Dialog.NONE and not app.dialog.is_confirm:
            self._submit_text(line)
            return

        words = line.split()
        if words in (["help"], ["?"]):
            print(SHELL_HELP)
            return
        if words in (["quit"], ["exit"]):
            app.running = False
            return

        for key in words:
            self.perform(handle_key(app, key))
            if not app.running:
                break

    def _submit_text(self, line: str) -> None:
        """Replace the dialog buffer with the line and confirm it."""
        app = self.app
        if not line.strip():
            handle_key(app, "esc")
            return
        app.open_dialog(app.dialog)
        for char in line:
            handle_key(app, char)
        handle_key(app, "enter")

    def perform(self, action: Action) -> None:
        if action == Action.SAVE:
            self.save()
        elif action == Action.RELOAD:
            self.reload()
        elif action == Action.QUIT:
            self.app.running = False

    def save(self) -> bool:
        try:
            atomic_write(self.path, self.app.serialize())
        except StorageError as e:
            self.app.status_msg = f"Save failed: {e}"
            log.error("Save failed: %s", e)
            return False
        self.watcher.mark_synced()
        self.app.mark_saved()
        return True

    def reload(self) -> None:
        try:
            content = read_text(self.path)
        except StorageError as e:
            self.app.status_msg = f"Reload failed: {e}"
            log.error("Reload failed: %s", e)
            return
        self.app.reload(content)
        self.watcher.mark_synced()

    def shutdown(self) -> None:
        """Save if dirty, then persist the collapse state (best effort)."""
        if self.app.dirty and not self.save():
            print(f"Error: {self.app.status_msg}", file=sys.stderr)
        try:
            save_collapse_state(self.path, self.app.collapse)
        except StorageError:
            log.warning("Could not save collapse state", exc_info=True)


def shell_cmd(settings: Settings, args):
    try:
        shell = Shell(settings)
    except StorageError as e:
        log.error("Startup failed: %s", e)
        print(f"Error: {e}")
        sys.exit(1)
    shell.run()


# --- main ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gws",
        description="Getting Work Sorted: a plain-text GTD task manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--file", help="Path to the todo file (default: ~/.gws/todo.md)")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("agenda", help="Show the agenda").set_defaults(func=agenda_cmd)
    subparsers.add_parser("tree", help="Show the backlog tree").set_defaults(func=tree_cmd)

    add_p = subparsers.add_parser("add-task", help="Add a Todo task to a project")
    add_p.add_argument("category", type=int, help="Category index")
    add_p.add_argument("project", type=int, help="Project index within the category")
    add_p.add_argument("text", help="Task text")
    add_p.set_defaults(func=add_task_cmd)

    for name, func, help_text in (
        ("promote", promote_cmd, "Advance a task's state"),
        ("demote", demote_cmd, "Move a task's state back"),
    ):
        step_p = subparsers.add_parser(name, help=help_text)
        step_p.add_argument("category", type=int, help="Category index")
        step_p.add_argument("project", type=int, help="Project index within the category")
        step_p.add_argument("task", type=int, help="Task index within the project")
        step_p.set_defaults(func=func)

    subparsers.add_parser("archive", help="Archive done tasks").set_defaults(func=archive_cmd)
    subparsers.add_parser("shell", help="Interactive mode").set_defaults(func=shell_cmd)
    subparsers.add_parser("init", help="Create the todo file").set_defaults(func=init_cmd)
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        settings = load_settings(file=args.file, log_level=args.log_level)
    except ValidationError as e:
        print(f"Error: Invalid settings: {e}")
        sys.exit(1)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)
    log.debug("Using todo file %s", settings.file)
    args.func(settings, args)


if __name__ == "__main__":
    main()
