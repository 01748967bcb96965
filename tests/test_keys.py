"""
Tests for controller/keys.py: key dispatch per view, dialogs and move mode.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from gws.controller import Action, App, Dialog, View, handle_key
from gws.models import TaskNode, TaskState
from gws.parsers import parse


SAMPLE = """\
## Work
### 🔶 Alpha
- 🔴 a1
- 🔴 a2
  note on a2
### Beta
- 🔴 b1
## Home
### 🔶 Chores
- 🔵 c1
- 🔴 c2
"""


@pytest.fixture
def app():
    return App(parse(SAMPLE))


def press(app, *keys):
    return [handle_key(app, key) for key in keys]


# ---------------------------------------------------------------------------
# Global keys
# ---------------------------------------------------------------------------

class TestGlobalKeys:
    @pytest.mark.parametrize("key", ["q", "ctrl+c"])
    def test_quit(self, app, key):
        assert handle_key(app, key) == Action.QUIT

    def test_save_and_reload(self, app):
        assert handle_key(app, "s") == Action.SAVE
        assert handle_key(app, "R") == Action.RELOAD

    def test_tab_cycles(self, app):
        assert handle_key(app, "tab") == Action.NONE
        assert app.view == View.BACKLOG

    def test_unknown_key(self, app):
        assert handle_key(app, "z") == Action.NONE
        assert app.agenda_cursor == 0


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

class TestAgendaKeys:
    def test_navigation(self, app):
        press(app, "j", "down")
        assert app.agenda_cursor == 2
        press(app, "k")
        assert app.agenda_cursor == 1
        press(app, "G")
        assert app.agenda_cursor == 3
        press(app, "g")
        assert app.agenda_cursor == 0

    def test_promote_and_demote(self, app):
        press(app, "p")
        assert app.doc.categories[0].projects[0].tasks[0].state == TaskState.IN_PROGRESS
        press(app, "x", "x")
        assert app.doc.categories[0].projects[0].tasks[0].state == TaskState.TODO

    def test_archive_asks_first(self, app):
        press(app, "A")
        assert app.dialog == Dialog.CONFIRM_ARCHIVE

    def test_enter_jumps_to_backlog(self, app):
        press(app, "j", "enter")
        assert app.view == View.BACKLOG
        assert app.current_tree_node().kind == TaskNode(1, 0, 0)

    def test_move(self, app):
        press(app, "m")
        assert app.is_moving()


class TestBacklogKeys:
    @pytest.fixture
    def backlog(self, app):
        app.view = View.BACKLOG
        return app

    def test_space_toggles_collapse(self, backlog):
        press(backlog, " ")
        assert 0 in backlog.collapse.collapsed_categories
        press(backlog, "space")
        assert backlog.collapse.collapsed_categories == set()

    def test_add_on_category_adds_project(self, backlog):
        press(backlog, "a")
        assert backlog.dialog == Dialog.ADD_PROJECT

    def test_add_on_task_adds_task(self, backlog):
        press(backlog, "j", "j", "a")
        assert backlog.dialog == Dialog.ADD_TASK

    @pytest.mark.parametrize(
        "cursor, dialog, text",
        [
            (0, Dialog.EDIT_CATEGORY, "Work"),
            (1, Dialog.EDIT_PROJECT, "Alpha"),
            (2, Dialog.EDIT_TASK, "a1"),
            (4, Dialog.EDIT_EXISTING_NOTE, "note on a2"),
        ],
    )
    def test_edit_prefills(self, backlog, cursor, dialog, text):
        backlog.backlog_cursor = cursor
        press(backlog, "e")
        assert backlog.dialog == dialog
        assert backlog.input_buffer == text
        assert backlog.input_cursor == len(text)

    def test_delete_asks_first(self, backlog):
        backlog.backlog_cursor = 2
        press(backlog, "d")
        assert backlog.dialog == Dialog.CONFIRM_DELETE

    def test_delete_on_category_does_nothing(self, backlog):
        press(backlog, "d")
        assert backlog.dialog == Dialog.NONE

    def test_note_only_on_task(self, backlog):
        backlog.backlog_cursor = 1
        press(backlog, "n")
        assert backlog.dialog == Dialog.NONE
        backlog.backlog_cursor = 2
        press(backlog, "n")
        assert backlog.dialog == Dialog.EDIT_NOTE

    def test_project_promote_toggles_active(self, backlog):
        backlog.backlog_cursor = 5
        press(backlog, "p")
        assert backlog.doc.categories[0].projects[1].active

    def test_add_task_flow(self, backlog):
        press(backlog, "j", "j", "a", "n", "e", "w", "space", "1", "enter")
        texts = [t.text for t in backlog.doc.categories[0].projects[0].tasks]
        assert texts == ["a1", "a2", "new 1"]
        assert backlog.dialog == Dialog.NONE
        assert backlog.dirty

    def test_keys_on_empty_tree(self):
        app = App(parse(""))
        app.view = View.BACKLOG
        press(app, "a", "e", "d", "n", "p", " ")
        assert app.dialog == Dialog.NONE


class TestSettingsKeys:
    @pytest.fixture
    def settings(self, app):
        app.view = View.SETTINGS
        return app

    def test_theme_row(self, settings):
        press(settings, "l")
        assert settings.theme_name == "Dracula"
        press(settings, "right", "h")
        assert settings.theme_name == "Dracula"
        press(settings, "left", "left")
        assert settings.theme_name == "Solarized Light"

    def test_h_and_l_ignored_off_theme_row(self, settings):
        press(settings, "j", "h", "l")
        assert settings.theme_name == "Default"
        assert settings.settings_cursor == 1

    def test_add_category(self, settings):
        press(settings, "a")
        assert settings.dialog == Dialog.ADD_CATEGORY

    def test_edit_and_delete_need_a_category(self, settings):
        press(settings, "e", "d")
        assert settings.dialog == Dialog.NONE
        press(settings, "j", "e")
        assert settings.dialog == Dialog.EDIT_CATEGORY
        assert settings.input_buffer == "Work"

    def test_delete_category_flow(self, settings):
        press(settings, "j", "j", "d")
        assert settings.dialog == Dialog.CONFIRM_DELETE_CATEGORY
        press(settings, "y")
        assert [c.name for c in settings.doc.categories] == ["Work"]

    def test_move_category_flow(self, settings):
        press(settings, "j", "m", "j", "enter")
        assert [c.name for c in settings.doc.categories] == ["Home", "Work"]
        assert not settings.is_moving()


# ---------------------------------------------------------------------------
# Dialogs and move mode
# ---------------------------------------------------------------------------

class TestDialogKeys:
    def test_text_dialog_swallows_global_keys(self, app):
        app.open_dialog(Dialog.ADD_CATEGORY)
        assert press(app, "q", "s", "tab") == [Action.NONE] * 3
        assert app.input_buffer == "qs"
        assert app.view == View.AGENDA

    def test_editing_keys(self, app):
        app.open_dialog(Dialog.ADD_CATEGORY, "abc")
        press(app, "left", "left", "delete", "right", "backspace")
        assert app.input_buffer == "a"

    def test_esc_cancels(self, app):
        app.open_dialog(Dialog.ADD_CATEGORY, "abc")
        press(app, "esc")
        assert app.dialog == Dialog.NONE
        assert len(app.doc.categories) == 2

    def test_confirm_dialog(self, app):
        app.doc.categories[0].projects[0].tasks[0].state = TaskState.DONE
        app.open_dialog(Dialog.CONFIRM_ARCHIVE)
        press(app, "x", "enter")
        assert app.dialog == Dialog.CONFIRM_ARCHIVE
        press(app, "N")
        assert app.dialog == Dialog.NONE
        assert app.doc.archive == []

        press(app, "A", "Y")
        assert app.doc.archive == ["- ✅ a1"]


class TestMoveModeKeys:
    def test_other_keys_are_ignored(self, app):
        app.view = View.BACKLOG
        app.backlog_cursor = 2
        press(app, "m")
        assert press(app, "q", "tab", "p") == [Action.NONE] * 3
        assert app.view == View.BACKLOG
        assert app.is_moving()

    def test_step_and_cancel(self, app):
        app.view = View.BACKLOG
        app.backlog_cursor = 2
        press(app, "m", "j")
        assert [t.text for t in app.doc.categories[0].projects[0].tasks] == ["a2", "a1"]
        press(app, "esc")
        assert [t.text for t in app.doc.categories[0].projects[0].tasks] == ["a1", "a2"]
        assert not app.is_moving()
