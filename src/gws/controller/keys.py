"""
Key-to-command mapping.

Keys are plain strings: single characters ("j", "G", " " or "space") or
names ("enter", "esc", "tab", "backspace", "delete", "left", "right", "up",
"down", "ctrl+c"). Dialogs take priority, then move mode, then the keys of
the current view. handle_key returns the environment action, if any, that
the caller has to perform.
"""

from enum import Enum

from gws.models import CategoryNode, NoteNode, ProjectNode, TaskNode

from .app import App, Dialog, View


class Action(str, Enum):
    NONE = "none"
    SAVE = "save"
    RELOAD = "reload"
    QUIT = "quit"


_ALIASES = {" ": "space"}

DOWN_KEYS = ("j", "down")
UP_KEYS = ("k", "up")


def handle_key(app: App, key: str) -> Action:
    key = _ALIASES.get(key, key)
    if app.dialog != Dialog.NONE:
        return _handle_dialog_key(app, key)
    if app.is_moving():
        return _handle_move_key(app, key)

    action = _handle_global_key(app, key)
    if action is not None:
        return action

    if app.view == View.AGENDA:
        _handle_agenda_key(app, key)
    elif app.view == View.BACKLOG:
        _handle_backlog_key(app, key)
    else:
        _handle_settings_key(app, key)
    return Action.NONE


# ---------------------------------------------------------------------------
# Move mode and global keys
# ---------------------------------------------------------------------------

def _handle_move_key(app: App, key: str) -> Action:
    if key in DOWN_KEYS:
        app.move_step(1)
    elif key in UP_KEYS:
        app.move_step(-1)
    elif key == "enter":
        app.accept_move()
    elif key == "esc":
        app.cancel_move()
    return Action.NONE


def _handle_global_key(app: App, key: str):
    if key in ("q", "ctrl+c"):
        return Action.QUIT
    if key == "tab":
        app.cycle_view()
        return Action.NONE
    if key == "s":
        return Action.SAVE
    if key == "R":
        return Action.RELOAD
    return None


def _handle_navigation_key(app: App, key: str) -> bool:
    if key in DOWN_KEYS:
        app.move_down()
    elif key in UP_KEYS:
        app.move_up()
    elif key == "g":
        app.move_top()
    elif key == "G":
        app.move_bottom()
    elif key == "l":
        app.center_cursor(app.visible_height)
    else:
        return False
    return True


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

def _handle_agenda_key(app: App, key: str) -> None:
    if _handle_navigation_key(app, key):
        return
    if key == "m":
        app.start_move()
    elif key == "p":
        app.promote_selected_agenda()
    elif key == "x":
        app.demote_selected_agenda()
    elif key == "r":
        app.run_auto_promote()
    elif key == "A":
        app.open_dialog(Dialog.CONFIRM_ARCHIVE)
    elif key == "enter":
        app.jump_to_backlog_task()


def _handle_backlog_key(app: App, key: str) -> None:
    if _handle_navigation_key(app, key):
        return
    node = app.current_tree_node()
    kind = node.kind if node else None

    if key == "space":
        app.toggle_collapse()
    elif key == "p":
        app.promote_selected_backlog()
    elif key == "x":
        app.demote_selected_backlog()
    elif key == "m":
        app.start_move()
    elif key == "r":
        app.run_auto_promote()
    elif key == "A":
        app.open_dialog(Dialog.CONFIRM_ARCHIVE)
    elif kind is None:
        return
    elif key == "a":
        app.open_dialog(Dialog.ADD_PROJECT if isinstance(kind, CategoryNode) else Dialog.ADD_TASK)
    elif key == "e":
        if isinstance(kind, TaskNode):
            dialog = Dialog.EDIT_TASK
        elif isinstance(kind, ProjectNode):
            dialog = Dialog.EDIT_PROJECT
        elif isinstance(kind, CategoryNode):
            dialog = Dialog.EDIT_CATEGORY
        else:
            dialog = Dialog.EDIT_EXISTING_NOTE
        app.open_dialog(dialog, app.focused_edit_text())
    elif key == "d":
        if isinstance(kind, (TaskNode, ProjectNode, NoteNode)):
            app.open_dialog(Dialog.CONFIRM_DELETE)
    elif key == "n":
        if isinstance(kind, TaskNode):
            app.open_dialog(Dialog.EDIT_NOTE)


def _handle_settings_key(app: App, key: str) -> None:
    on_theme_row = app.settings_cursor == 0

    if key in DOWN_KEYS:
        app.move_down()
    elif key in UP_KEYS:
        app.move_up()
    elif key in ("h", "left") and on_theme_row:
        app.prev_theme()
    elif key in ("l", "right") and on_theme_row:
        app.next_theme()
    elif key == "l":
        app.center_cursor(app.visible_height)
    elif key == "a":
        app.open_dialog(Dialog.ADD_CATEGORY)
    elif key == "e":
        if app.settings_category_idx() is not None:
            app.open_dialog(Dialog.EDIT_CATEGORY, app.focused_edit_text())
    elif key == "d":
        if app.settings_category_idx() is not None and app.doc.categories:
            app.open_dialog(Dialog.CONFIRM_DELETE_CATEGORY)
    elif key == "m":
        app.start_move()


# ---------------------------------------------------------------------------
# Dialogs
# ---------------------------------------------------------------------------

def _handle_dialog_key(app: App, key: str) -> Action:
    if app.dialog.is_confirm:
        if key in ("y", "Y"):
            app.confirm_dialog()
        elif key in ("n", "N", "esc"):
            app.close_dialog()
        return Action.NONE

    if key == "esc":
        app.close_dialog()
    elif key == "enter":
        app.confirm_dialog()
    elif key == "backspace":
        app.input_backspace()
    elif key == "delete":
        app.input_delete()
    elif key == "left":
        app.input_move_left()
    elif key == "right":
        app.input_move_right()
    elif key == "space":
        app.input_char(" ")
    elif len(key) == 1:
        app.input_char(key)
    return Action.NONE
