"""
Interactive core: owns one Document plus everything a UI keeps around it.

State held here:
    - the current view (Agenda, Backlog, Settings) and modal dialog
    - the two projections (agenda items, flat tree nodes), each rebuilt from
      the document after every mutation
    - a cursor and scroll offset per view
    - the collapse sets and selected theme
    - the in-flight move, if any
    - a single-line text buffer for dialogs

Every mutation goes through gws.engine. Afterwards the projections are
rebuilt and the focused tree node is found again by its kind (variant plus
indices); if it no longer exists the cursor is clamped.

No I/O happens here. Saving, reading and watching are done by the caller.
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from gws import engine
from gws.models import (
    AgendaItem,
    CategoryNode,
    CollapseState,
    Document,
    NoteNode,
    ProjectNode,
    TaskNode,
    TreeNode,
    TreeNodeKind,
)
from gws.parsers import parse_content, serialize

from .themes import THEME_NAMES, theme_index

log = logging.getLogger(__name__)

EXPANDED = "▼"
COLLAPSED = "►"
ACTIVE_MARKER = "🔶 "
MOVE_HINT = "Moving... j/k to reorder, Enter to accept, Esc to cancel"


class View(str, Enum):
    AGENDA = "agenda"
    BACKLOG = "backlog"
    SETTINGS = "settings"


_NEXT_VIEW = {
    View.AGENDA: View.BACKLOG,
    View.BACKLOG: View.SETTINGS,
    View.SETTINGS: View.AGENDA,
}

_CURSOR_ATTR = {
    View.AGENDA: "agenda_cursor",
    View.BACKLOG: "backlog_cursor",
    View.SETTINGS: "settings_cursor",
}

_SCROLL_ATTR = {
    View.AGENDA: "agenda_scroll",
    View.BACKLOG: "backlog_scroll",
    View.SETTINGS: "settings_scroll",
}


class Dialog(str, Enum):
    NONE = "none"
    ADD_TASK = "add-task"
    ADD_PROJECT = "add-project"
    EDIT_TASK = "edit-task"
    EDIT_PROJECT = "edit-project"
    EDIT_NOTE = "edit-note"
    EDIT_EXISTING_NOTE = "edit-existing-note"
    CONFIRM_DELETE = "confirm-delete"
    CONFIRM_ARCHIVE = "confirm-archive"
    ADD_CATEGORY = "add-category"
    EDIT_CATEGORY = "edit-category"
    CONFIRM_DELETE_CATEGORY = "confirm-delete-category"

    @property
    def is_confirm(self) -> bool:
        return self in CONFIRM_DIALOGS


CONFIRM_DIALOGS = frozenset(
    {Dialog.CONFIRM_DELETE, Dialog.CONFIRM_ARCHIVE, Dialog.CONFIRM_DELETE_CATEGORY}
)


# ---------------------------------------------------------------------------
# Move records: what is being moved and where it started
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskMove:
    cat_idx: int
    proj_idx: int
    original_task_idx: int


@dataclass(frozen=True)
class ProjectMove:
    original_cat_idx: int
    original_proj_idx: int


@dataclass(frozen=True)
class CategoryMove:
    original_cat_idx: int


@dataclass(frozen=True)
class AgendaItemMove:
    original_idx: int


MoveKind = Union[TaskMove, ProjectMove, CategoryMove, AgendaItemMove]


def _clamp(cursor: int, length: int) -> int:
    if length == 0:
        return 0
    return min(max(cursor, 0), length - 1)


def _indicator(collapsed: bool) -> str:
    return COLLAPSED if collapsed else EXPANDED


class App:
    """
    Navigation and editing state machine over a single Document.

    Usage:
        app = App(parse_content(text), path)
        app.apply_collapse_state(load_collapse_state(path))
        app.move_down()
        app.promote_selected_agenda()
        if app.dirty:
            write(app.serialize())
            app.mark_saved()
    """

    def __init__(self, doc: Document, file_path: Optional[Path] = None) -> None:
        engine.auto_promote(doc)
        self.doc = doc
        self.file_path = file_path
        self.view = View.AGENDA
        self.dialog = Dialog.NONE
        self.dirty = False
        self.running = True
        self.status_msg = ""

        self.agenda_items: List[AgendaItem] = engine.build_agenda(doc)
        self.agenda_cursor = 0
        self.agenda_scroll = 0

        self.tree_nodes: List[TreeNode] = []
        self.backlog_cursor = 0
        self.backlog_scroll = 0
        self.collapse = CollapseState()

        self.settings_cursor = 0
        self.settings_scroll = 0

        self.theme_index = 0
        self.moving: Optional[MoveKind] = None
        self.visible_height = 0

        self.input_buffer = ""
        self.input_cursor = 0

        self.rebuild_tree()

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def rebuild_tree(self) -> None:
        """Depth-first walk of the document, skipping collapsed subtrees."""
        nodes: List[TreeNode] = []
        collapse = self.collapse

        for ci, category in enumerate(self.doc.categories):
            cat_collapsed = ci in collapse.collapsed_categories
            nodes.append(
                TreeNode(CategoryNode(ci), 0, f"{_indicator(cat_collapsed)} {category.name}")
            )
            if cat_collapsed:
                continue

            for pi, project in enumerate(category.projects):
                proj_collapsed = (ci, pi) in collapse.collapsed_projects
                marker = ACTIVE_MARKER if project.active else ""
                nodes.append(
                    TreeNode(
                        ProjectNode(ci, pi),
                        1,
                        f"{_indicator(proj_collapsed)} {marker}{project.name}",
                    )
                )
                if proj_collapsed:
                    continue

                for ti, task in enumerate(project.tasks):
                    nodes.append(TreeNode(TaskNode(ci, pi, ti), 2, task.text))
                    if (ci, pi, ti) in collapse.collapsed_tasks:
                        continue
                    for ni, note in enumerate(task.notes):
                        nodes.append(TreeNode(NoteNode(ci, pi, ti, ni), 3, note.strip()))

        self.tree_nodes = nodes
        self.backlog_cursor = _clamp(self.backlog_cursor, len(nodes))

    def restore_cursor(self, kind: TreeNodeKind) -> None:
        """Focus the node with this kind, or clamp if it is gone."""
        for i, node in enumerate(self.tree_nodes):
            if node.kind == kind:
                self.backlog_cursor = i
                return
        self.backlog_cursor = _clamp(self.backlog_cursor, len(self.tree_nodes))

    def refresh_agenda(self) -> None:
        """Auto-promote, then rebuild the agenda from the document."""
        engine.auto_promote(self.doc)
        self.agenda_items = engine.build_agenda(self.doc)
        self.agenda_cursor = _clamp(self.agenda_cursor, len(self.agenda_items))

    def current_tree_node(self) -> Optional[TreeNode]:
        return engine.get_at(self.tree_nodes, self.backlog_cursor)

    def current_agenda_item(self) -> Optional[AgendaItem]:
        return engine.get_at(self.agenda_items, self.agenda_cursor)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return getattr(self, _CURSOR_ATTR[self.view])

    @cursor.setter
    def cursor(self, value: int) -> None:
        setattr(self, _CURSOR_ATTR[self.view], value)

    def _view_length(self) -> int:
        if self.view == View.AGENDA:
            return len(self.agenda_items)
        if self.view == View.BACKLOG:
            return len(self.tree_nodes)
        return self.settings_total()

    def move_down(self) -> None:
        length = self._view_length()
        if length:
            self.cursor = (self.cursor + 1) % length

    def move_up(self) -> None:
        length = self._view_length()
        if length:
            self.cursor = (self.cursor - 1) % length

    def move_top(self) -> None:
        self.cursor = 0

    def move_bottom(self) -> None:
        length = self._view_length()
        if length:
            self.cursor = length - 1

    def update_scroll(self, visible_height: int) -> None:
        """Adjust the current view's scroll so the cursor stays visible."""
        self.visible_height = visible_height
        attr = _SCROLL_ATTR[self.view]
        if self._view_length() == 0 or visible_height == 0:
            setattr(self, attr, 0)
            return
        cursor = self.cursor
        scroll = getattr(self, attr)
        if cursor >= scroll + visible_height:
            setattr(self, attr, cursor - visible_height + 1)
        elif cursor < scroll:
            setattr(self, attr, cursor)

    def center_cursor(self, visible_height: int) -> None:
        setattr(self, _SCROLL_ATTR[self.view], max(0, self.cursor - visible_height // 2))

    def cycle_view(self) -> None:
        self.view = _NEXT_VIEW[self.view]

    def jump_to_backlog_task(self) -> None:
        """Switch to the Backlog focused on the agenda's selected task."""
        item = self.current_agenda_item()
        if item is None:
            return
        ci, pi, ti = item.address

        self.collapse.collapsed_categories.discard(ci)
        self.collapse.collapsed_projects.discard((ci, pi))
        self.rebuild_tree()
        self.restore_cursor(TaskNode(ci, pi, ti))

        self.view = View.BACKLOG
        self.update_scroll(self.visible_height)

    def toggle_collapse(self) -> None:
        node = self.current_tree_node()
        if node is None:
            return
        kind = node.kind
        if isinstance(kind, CategoryNode):
            self.collapse.toggle_category(kind.cat_idx)
        elif isinstance(kind, ProjectNode):
            self.collapse.toggle_project(kind.cat_idx, kind.proj_idx)
        elif isinstance(kind, TaskNode):
            self.collapse.toggle_task(kind.cat_idx, kind.proj_idx, kind.task_idx)
        self.rebuild_tree()
        self.restore_cursor(kind)

    # ------------------------------------------------------------------
    # Agenda mutations
    # ------------------------------------------------------------------

    def promote_selected_agenda(self) -> None:
        self._step_agenda_task(engine.promote_task, "Task promoted")

    def demote_selected_agenda(self) -> None:
        self._step_agenda_task(engine.demote_task, "Task demoted")

    def _step_agenda_task(self, step: Callable[..., bool], message: str) -> None:
        # The agenda is not rebuilt here: the item's snapshot is updated in
        # place so a task promoted to Done stays visible until a refresh.
        item = self.current_agenda_item()
        if item is None or not step(self.doc, *item.address):
            return
        self.dirty = True
        item.task = copy.deepcopy(engine.get_task(self.doc, *item.address))
        self.status_msg = message
        self.rebuild_tree()

    # ------------------------------------------------------------------
    # Backlog mutations
    # ------------------------------------------------------------------

    def promote_selected_backlog(self) -> None:
        self._step_backlog_node(engine.promote_task, "Task promoted")

    def demote_selected_backlog(self) -> None:
        self._step_backlog_node(engine.demote_task, "Task demoted")

    def _step_backlog_node(self, step: Callable[..., bool], message: str) -> None:
        """Tasks change state; projects toggle active either way."""
        node = self.current_tree_node()
        if node is None:
            return
        kind = node.kind
        if isinstance(kind, TaskNode):
            if step(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx):
                self.dirty = True
                self.status_msg = message
        elif isinstance(kind, ProjectNode):
            if engine.toggle_project_active(self.doc, kind.cat_idx, kind.proj_idx):
                self.dirty = True
                project = engine.get_project(self.doc, kind.cat_idx, kind.proj_idx)
                self.status_msg = "Project activated" if project.active else "Project deactivated"
        self._refresh(kind)

    def run_auto_promote(self) -> None:
        engine.auto_promote(self.doc)
        self.dirty = True
        self.status_msg = "Auto-promote complete"
        self.refresh_agenda()
        self.rebuild_tree()

    def archive_done(self) -> None:
        count = engine.archive_done(self.doc)
        self.dirty = True
        self.status_msg = f"Archived {count} done task{'' if count == 1 else 's'}"
        self.refresh_agenda()
        self.rebuild_tree()

    def add_task_to_focused(self) -> None:
        """Append a Todo task (buffer text) to the focused node's project."""
        text = self.input_buffer.strip()
        node = self.current_tree_node()
        if not text or node is None or isinstance(node.kind, CategoryNode):
            return
        kind = node.kind
        if engine.add_task(self.doc, kind.cat_idx, kind.proj_idx, text):
            self.dirty = True
            self.status_msg = "Task added"
            self._refresh(kind)

    def add_project_to_focused(self) -> None:
        """Append an active project (buffer text) to the focused node's category."""
        name = self.input_buffer.strip()
        node = self.current_tree_node()
        if not name or node is None:
            return
        if engine.add_project(self.doc, node.kind.cat_idx, name, True):
            self.dirty = True
            self.status_msg = "Project added"
            self._refresh(node.kind)

    def add_note_to_focused(self) -> None:
        note = self.input_buffer.strip()
        node = self.current_tree_node()
        if not note or node is None or not isinstance(node.kind, TaskNode):
            return
        kind = node.kind
        if engine.add_task_note(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, note):
            self.dirty = True
            self.status_msg = "Note added"
            self._refresh(kind)

    def apply_edit(self) -> None:
        """Rename the focused task, project or category, or rewrite the focused note."""
        text = self.input_buffer.strip()
        node = self.current_tree_node()
        if not text or node is None:
            return
        kind = node.kind
        if isinstance(kind, TaskNode):
            changed = engine.rename_task(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, text)
            message = "Task renamed"
        elif isinstance(kind, ProjectNode):
            changed = engine.rename_project(self.doc, kind.cat_idx, kind.proj_idx, text)
            message = "Project renamed"
        elif isinstance(kind, CategoryNode):
            changed = engine.rename_category(self.doc, kind.cat_idx, text)
            message = "Category renamed"
        else:
            changed = engine.edit_task_note(
                self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, kind.note_idx, text
            )
            message = "Note updated"
        if changed:
            self.dirty = True
            self.status_msg = message
        self._refresh(kind)

    def delete_focused(self) -> None:
        """Delete the focused task, project or note. Categories are deleted from Settings."""
        node = self.current_tree_node()
        if node is None:
            return
        kind = node.kind
        if isinstance(kind, TaskNode):
            deleted = engine.delete_task(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx)
            message = "Task deleted"
        elif isinstance(kind, ProjectNode):
            deleted = engine.delete_project(self.doc, kind.cat_idx, kind.proj_idx)
            message = "Project deleted"
        elif isinstance(kind, NoteNode):
            deleted = engine.delete_task_note(
                self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, kind.note_idx
            )
            message = "Note deleted"
        else:
            return
        if deleted:
            self.dirty = True
            self.status_msg = message
        self.refresh_agenda()
        self.rebuild_tree()

    def rerank_focused(self, direction: int) -> bool:
        """
        Swap the focused task or project with its neighbour.

        A project already at the edge of its category crosses into the
        adjacent one: the end of the previous category when moving up, the
        start of the next when moving down.
        """
        node = self.current_tree_node()
        if node is None:
            return False
        kind = node.kind
        new_kind: Optional[TreeNodeKind] = None

        if isinstance(kind, TaskNode):
            new_idx = engine.rerank_task(
                self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, direction
            )
            if new_idx is not None:
                new_kind = TaskNode(kind.cat_idx, kind.proj_idx, new_idx)
        elif isinstance(kind, ProjectNode):
            new_idx = engine.rerank_project(self.doc, kind.cat_idx, kind.proj_idx, direction)
            if new_idx is not None:
                new_kind = ProjectNode(kind.cat_idx, new_idx)
            else:
                new_kind = self._move_project_across(kind, direction)

        if new_kind is None:
            return False
        self.dirty = True
        self._refresh(new_kind)
        return True

    def _move_project_across(self, kind: ProjectNode, direction: int) -> Optional[ProjectNode]:
        ci = kind.cat_idx
        if direction < 0 and ci > 0:
            target, insert_idx = ci - 1, len(self.doc.categories[ci - 1].projects)
        elif direction > 0 and ci + 1 < len(self.doc.categories):
            target, insert_idx = ci + 1, 0
        else:
            return None
        moved = engine.move_project_to_category(self.doc, ci, kind.proj_idx, target, insert_idx)
        if moved is None:
            return None
        # Keep the moved project visible so it stays focused.
        self.collapse.collapsed_categories.discard(target)
        return ProjectNode(*moved)

    def _refresh(self, focus: TreeNodeKind) -> None:
        self.refresh_agenda()
        self.rebuild_tree()
        self.restore_cursor(focus)

    # ------------------------------------------------------------------
    # Move mode
    # ------------------------------------------------------------------

    def is_moving(self) -> bool:
        return self.moving is not None

    def start_move(self) -> None:
        """Pick up the focused task, project, category or agenda item."""
        move: Optional[MoveKind] = None
        if self.view == View.BACKLOG:
            node = self.current_tree_node()
            kind = node.kind if node else None
            if isinstance(kind, TaskNode):
                move = TaskMove(kind.cat_idx, kind.proj_idx, kind.task_idx)
            elif isinstance(kind, ProjectNode):
                move = ProjectMove(kind.cat_idx, kind.proj_idx)
        elif self.view == View.SETTINGS:
            cat_idx = self.settings_category_idx()
            if cat_idx is not None and cat_idx < len(self.doc.categories):
                move = CategoryMove(cat_idx)
        elif self.agenda_items:
            move = AgendaItemMove(self.agenda_cursor)

        if move is not None:
            self.moving = move
            self.status_msg = MOVE_HINT

    def move_step(self, direction: int) -> None:
        """Move the picked-up entity one step; the document changes immediately."""
        if self.view == View.AGENDA:
            self._rerank_agenda(direction)
        elif self.view == View.BACKLOG:
            self.rerank_focused(direction)
        else:
            self.rerank_category(direction)

    def _rerank_agenda(self, direction: int) -> None:
        # Reorders the projection only; the document is untouched.
        cur = self.agenda_cursor
        new_idx = cur + direction
        if not self.agenda_items or not 0 <= new_idx < len(self.agenda_items):
            return
        items = self.agenda_items
        items[cur], items[new_idx] = items[new_idx], items[cur]
        self.agenda_cursor = new_idx

    def accept_move(self) -> None:
        if self.moving is None:
            return
        was_agenda = isinstance(self.moving, AgendaItemMove)
        self.moving = None
        self.dirty = True
        self.status_msg = "Moved"
        if not was_agenda:
            self.refresh_agenda()

    def cancel_move(self) -> None:
        """Leave move mode, putting the entity back where it was picked up."""
        move = self.moving
        if move is None:
            return
        self.moving = None
        focus: Optional[TreeNodeKind] = None

        if isinstance(move, TaskMove):
            node = self.current_tree_node()
            if node is not None and isinstance(node.kind, TaskNode):
                engine.relocate_task(
                    self.doc, move.cat_idx, move.proj_idx, node.kind.task_idx, move.original_task_idx
                )
            focus = TaskNode(move.cat_idx, move.proj_idx, move.original_task_idx)
        elif isinstance(move, ProjectMove):
            node = self.current_tree_node()
            if node is not None and isinstance(node.kind, ProjectNode):
                moved = engine.move_project_to_category(
                    self.doc,
                    node.kind.cat_idx,
                    node.kind.proj_idx,
                    move.original_cat_idx,
                    move.original_proj_idx,
                )
                if moved is not None:
                    focus = ProjectNode(*moved)
        elif isinstance(move, CategoryMove):
            current = self.settings_category_idx()
            if current is not None:
                new_idx = engine.relocate_category(self.doc, current, move.original_cat_idx)
                if new_idx is not None:
                    order = list(range(len(self.doc.categories)))
                    order.insert(new_idx, order.pop(current))
                    self.collapse.remap_categories(order)
            self.settings_cursor = move.original_cat_idx + 1
        else:
            # Rebuilding the agenda below restores the document order.
            self.agenda_cursor = move.original_idx

        self.status_msg = "Move cancelled"
        self.refresh_agenda()
        self.rebuild_tree()
        if focus is not None:
            self.restore_cursor(focus)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def settings_total(self) -> int:
        """Row 0 is the theme row; rows 1.. are categories."""
        return 1 + len(self.doc.categories)

    def settings_category_idx(self) -> Optional[int]:
        if self.settings_cursor == 0:
            return None
        return self.settings_cursor - 1

    def add_category_from_input(self) -> None:
        name = self.input_buffer.strip()
        if not name:
            return
        engine.add_category(self.doc, name)
        self.dirty = True
        self.status_msg = "Category added"
        self.rebuild_tree()

    def rename_category_from_input(self) -> None:
        name = self.input_buffer.strip()
        cat_idx = self.settings_category_idx()
        if not name or cat_idx is None:
            return
        if engine.rename_category(self.doc, cat_idx, name):
            self.dirty = True
            self.status_msg = "Category renamed"
            self.rebuild_tree()

    def delete_selected_category(self) -> None:
        cat_idx = self.settings_category_idx()
        count = len(self.doc.categories)
        if cat_idx is None or not engine.remove_category(self.doc, cat_idx):
            return
        self.collapse.remap_categories([i for i in range(count) if i != cat_idx])
        self.dirty = True
        self.status_msg = "Category deleted"
        self.refresh_agenda()
        self.rebuild_tree()
        self.settings_cursor = _clamp(self.settings_cursor, self.settings_total())

    def rerank_category(self, direction: int) -> None:
        cat_idx = self.settings_category_idx()
        if cat_idx is None:
            return
        new_idx = engine.rerank_category(self.doc, cat_idx, direction)
        if new_idx is None:
            return
        order = list(range(len(self.doc.categories)))
        order[cat_idx], order[new_idx] = new_idx, cat_idx
        self.collapse.remap_categories(order)
        self.settings_cursor = new_idx + 1
        self.dirty = True
        self.refresh_agenda()
        self.rebuild_tree()

    @property
    def theme_name(self) -> str:
        return THEME_NAMES[self.theme_index]

    def next_theme(self) -> None:
        self.theme_index = (self.theme_index + 1) % len(THEME_NAMES)
        self.collapse.theme_name = self.theme_name

    def prev_theme(self) -> None:
        self.theme_index = (self.theme_index - 1) % len(THEME_NAMES)
        self.collapse.theme_name = self.theme_name

    def apply_collapse_state(self, state: CollapseState) -> None:
        """Install state loaded from the sidecar file, theme included."""
        self.collapse = state
        self.theme_index = theme_index(state.theme_name)
        self.rebuild_tree()

    # ------------------------------------------------------------------
    # Dialogs and the text buffer
    # ------------------------------------------------------------------

    def open_dialog(self, dialog: Dialog, text: str = "") -> None:
        self.dialog = dialog
        self.input_buffer = text
        self.input_cursor = len(text)

    def close_dialog(self) -> None:
        self.dialog = Dialog.NONE
        self.input_buffer = ""
        self.input_cursor = 0

    def confirm_dialog(self) -> None:
        """Run the one mutation the open dialog stands for, then close it."""
        dialog = self.dialog
        if dialog == Dialog.EDIT_CATEGORY:
            if self.view == View.SETTINGS:
                self.rename_category_from_input()
            else:
                self.apply_edit()
        else:
            handler = {
                Dialog.ADD_TASK: self.add_task_to_focused,
                Dialog.ADD_PROJECT: self.add_project_to_focused,
                Dialog.EDIT_TASK: self.apply_edit,
                Dialog.EDIT_PROJECT: self.apply_edit,
                Dialog.EDIT_EXISTING_NOTE: self.apply_edit,
                Dialog.EDIT_NOTE: self.add_note_to_focused,
                Dialog.ADD_CATEGORY: self.add_category_from_input,
                Dialog.CONFIRM_DELETE: self.delete_focused,
                Dialog.CONFIRM_ARCHIVE: self.archive_done,
                Dialog.CONFIRM_DELETE_CATEGORY: self.delete_selected_category,
            }.get(dialog)
            if handler is not None:
                handler()
        self.close_dialog()

    def focused_edit_text(self) -> str:
        """Current text of the focused entity, used to pre-fill edit dialogs."""
        if self.view == View.SETTINGS:
            cat_idx = self.settings_category_idx()
            category = engine.get_category(self.doc, cat_idx) if cat_idx is not None else None
            return category.name if category else ""

        node = self.current_tree_node()
        if node is None:
            return ""
        kind = node.kind
        if isinstance(kind, TaskNode):
            task = engine.get_task(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx)
            return task.text if task else ""
        if isinstance(kind, ProjectNode):
            project = engine.get_project(self.doc, kind.cat_idx, kind.proj_idx)
            return project.name if project else ""
        if isinstance(kind, CategoryNode):
            category = engine.get_category(self.doc, kind.cat_idx)
            return category.name if category else ""
        note = engine.get_note(self.doc, kind.cat_idx, kind.proj_idx, kind.task_idx, kind.note_idx)
        return note.strip() if note else ""

    def input_char(self, char: str) -> None:
        buf, cur = self.input_buffer, self.input_cursor
        self.input_buffer = buf[:cur] + char + buf[cur:]
        self.input_cursor += len(char)

    def input_backspace(self) -> None:
        if self.input_cursor > 0:
            buf, cur = self.input_buffer, self.input_cursor
            self.input_buffer = buf[: cur - 1] + buf[cur:]
            self.input_cursor -= 1

    def input_delete(self) -> None:
        buf, cur = self.input_buffer, self.input_cursor
        if cur < len(buf):
            self.input_buffer = buf[:cur] + buf[cur + 1:]

    def input_move_left(self) -> None:
        if self.input_cursor > 0:
            self.input_cursor -= 1

    def input_move_right(self) -> None:
        if self.input_cursor < len(self.input_buffer):
            self.input_cursor += 1

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        return serialize(self.doc)

    def reload(self, content: str) -> None:
        """Replace the document wholesale; unsaved edits are discarded."""
        self.doc = parse_content(content)
        self.dirty = False
        self.moving = None
        self.status_msg = "Reloaded from disk"
        self.refresh_agenda()
        self.rebuild_tree()
        log.info("Reloaded document (%d categories)", len(self.doc.categories))

    def mark_saved(self) -> None:
        self.dirty = False
        self.status_msg = "Saved"

    def handle_external_change(self, read_text: Callable[[], str]) -> bool:
        """
        React to the file changing on disk.

        Reloads only when there are no unsaved edits; otherwise the disk
        copy is left alone and a status message says so. Returns True if the
        document was reloaded.
        """
        if self.dirty:
            self.status_msg = "External change detected (unsaved changes)"
            log.info("External change ignored: unsaved local edits")
            return False
        try:
            content = read_text()
        except OSError as e:
            self.status_msg = f"Reload failed: {e}"
            log.warning("Reload after external change failed: %s", e)
            return False
        self.reload(content)
        return True
