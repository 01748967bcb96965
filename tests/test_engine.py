"""
Tests for the engine: lifecycle (auto-promote, archive, agenda, promote /
demote) and structural edits (CRUD, rerank, cross-category moves).
"""

import copy
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from gws import engine
from gws.models import TaskState
from gws.parsers import parse


SAMPLE = """\
## Work

### 🔶 Project Alpha
- 🔴 First todo
- 🔴 Second todo

### 🔶 Project Beta
- 🔵 Already on deck
- 🔴 A todo

### Inactive Project
- 🔴 Should not be touched
"""


@pytest.fixture
def doc():
    return parse(SAMPLE)


def _texts(project):
    return [t.text for t in project.tasks]


# ---------------------------------------------------------------------------
# TaskState transitions
# ---------------------------------------------------------------------------

class TestTaskState:
    def test_promote_cycle(self):
        assert TaskState.TODO.promote() == TaskState.ON_DECK
        assert TaskState.ON_DECK.promote() == TaskState.IN_PROGRESS
        assert TaskState.IN_PROGRESS.promote() == TaskState.DONE
        assert TaskState.DONE.promote() == TaskState.TODO

    def test_demote_inverts_promote(self):
        for state in TaskState:
            assert state.promote().demote() == state
            assert state.demote().promote() == state

    def test_section_order(self):
        ordered = sorted(TaskState, key=engine.section_order)
        assert ordered == [
            TaskState.IN_PROGRESS,
            TaskState.ON_DECK,
            TaskState.DONE,
            TaskState.TODO,
        ]

    def test_symbols(self):
        assert TaskState.from_symbol("🔶") == TaskState.IN_PROGRESS
        assert TaskState.from_symbol("x") is None
        assert str(TaskState.ON_DECK) == "🔵 On Deck"


# ---------------------------------------------------------------------------
# auto_promote
# ---------------------------------------------------------------------------

class TestAutoPromote:
    def test_basic(self, doc):
        engine.auto_promote(doc)
        alpha, beta, inactive = doc.categories[0].projects
        assert alpha.tasks[0].state == TaskState.ON_DECK
        assert alpha.tasks[1].state == TaskState.TODO
        assert beta.tasks[0].state == TaskState.ON_DECK
        assert beta.tasks[1].state == TaskState.TODO
        assert inactive.tasks[0].state == TaskState.TODO

    def test_idempotent(self, doc):
        engine.auto_promote(doc)
        after_first = copy.deepcopy(doc)
        engine.auto_promote(doc)
        assert doc == after_first

    def test_skips_done_tasks(self):
        doc = parse("## W\n### 🔶 P\n- ✅ done\n- 🔴 next\n- 🔴 later\n")
        engine.auto_promote(doc)
        states = [t.state for t in doc.categories[0].projects[0].tasks]
        assert states == [TaskState.DONE, TaskState.ON_DECK, TaskState.TODO]

    def test_in_progress_blocks_promotion(self):
        doc = parse("## W\n### 🔶 P\n- 🔶 current\n- 🔴 next\n")
        engine.auto_promote(doc)
        assert doc.categories[0].projects[0].tasks[1].state == TaskState.TODO

    def test_at_most_one_task_per_project(self):
        doc = parse("## W\n### 🔶 P\n- 🔴 a\n- 🔴 b\n- 🔴 c\n")
        before = copy.deepcopy(doc)
        engine.auto_promote(doc)
        changed = [
            i for i, (old, new) in enumerate(
                zip(before.all_tasks(), doc.all_tasks())
            ) if old.state != new.state
        ]
        assert changed == [0]

    def test_all_done_project_unchanged(self):
        doc = parse("## W\n### 🔶 P\n- ✅ a\n- ✅ b\n")
        before = copy.deepcopy(doc)
        engine.auto_promote(doc)
        assert doc == before


# ---------------------------------------------------------------------------
# archive_done
# ---------------------------------------------------------------------------

class TestArchiveDone:
    def test_moves_done_tasks_to_archive(self):
        doc = parse(
            "## Work\n\n### 🔶 Project\n- ✅ Already done\n- 🔴 Not done\n\n"
            "## Done\n- ✅ Old archive\n"
        )
        count = engine.archive_done(doc)
        assert count == 1
        assert _texts(doc.categories[0].projects[0]) == ["Not done"]
        assert doc.archive == ["- ✅ Already done", "- ✅ Old archive"]

    def test_order_is_category_then_project_then_task(self):
        doc = parse(
            "## A\n### P1\n- ✅ a1\n- 🔴 keep\n- ✅ a2\n### P2\n- ✅ a3\n"
            "## B\n### 🔶 P3\n- ✅ b1\n"
            "## Done\n- ✅ older\n"
        )
        engine.archive_done(doc)
        assert doc.archive == [
            "- ✅ a1",
            "- ✅ a2",
            "- ✅ a3",
            "- ✅ b1",
            "- ✅ older",
        ]
        assert [t.text for t in doc.all_tasks()] == ["keep"]

    def test_archives_inactive_projects_too(self):
        doc = parse("## W\n### Inactive\n- ✅ x\n")
        assert engine.archive_done(doc) == 1
        assert doc.archive == ["- ✅ x"]

    def test_nothing_to_archive(self, doc):
        before = copy.deepcopy(doc)
        assert engine.archive_done(doc) == 0
        assert doc == before

    def test_notes_are_not_archived(self):
        doc = parse("## W\n### P\n- ✅ x\n  detail\n")
        engine.archive_done(doc)
        assert doc.archive == ["- ✅ x"]


# ---------------------------------------------------------------------------
# promote_task / demote_task
# ---------------------------------------------------------------------------

class TestPromoteDemote:
    def test_promote(self, doc):
        assert engine.promote_task(doc, 0, 0, 0)
        assert doc.categories[0].projects[0].tasks[0].state == TaskState.ON_DECK

    def test_demote(self, doc):
        assert engine.demote_task(doc, 0, 1, 0)
        assert doc.categories[0].projects[1].tasks[0].state == TaskState.TODO

    def test_demote_wraps_todo_to_done(self, doc):
        assert engine.demote_task(doc, 0, 0, 0)
        assert doc.categories[0].projects[0].tasks[0].state == TaskState.DONE

    @pytest.mark.parametrize("address", [(9, 0, 0), (0, 9, 0), (0, 0, 9), (-1, 0, 0), (0, 0, -1)])
    def test_invalid_address(self, doc, address):
        before = copy.deepcopy(doc)
        assert not engine.promote_task(doc, *address)
        assert not engine.demote_task(doc, *address)
        assert doc == before


# ---------------------------------------------------------------------------
# build_agenda
# ---------------------------------------------------------------------------

class TestBuildAgenda:
    def test_parse_promote_then_agenda(self):
        doc = parse("## Work\n\n### 🔶 P\n- 🔴 a\n- 🔴 b\n")
        engine.auto_promote(doc)
        tasks = doc.categories[0].projects[0].tasks
        assert tasks[0].state == TaskState.ON_DECK
        assert tasks[1].state == TaskState.TODO
        agenda = engine.build_agenda(doc)
        assert len(agenda) == 2
        assert agenda[0].task.text == "a"
        assert agenda[0].project_name == "P"
        assert agenda[0].address == (0, 0, 0)

    def test_excludes_inactive_projects(self, doc):
        engine.auto_promote(doc)
        agenda = engine.build_agenda(doc)
        assert len(agenda) == 4
        assert all(item.project_name != "Inactive Project" for item in agenda)

    def test_grouped_and_stable(self):
        doc = parse(
            "## A\n### 🔶 P\n- 🔴 t1\n- ✅ d1\n- 🔵 o1\n- 🔶 i1\n"
            "## B\n### 🔶 Q\n- 🔶 i2\n- 🔴 t2\n- 🔵 o2\n- ✅ d2\n"
        )
        agenda = engine.build_agenda(doc)
        assert [item.task.text for item in agenda] == [
            "i1", "i2", "o1", "o2", "d1", "d2", "t1", "t2",
        ]

    def test_items_are_snapshots(self, doc):
        agenda = engine.build_agenda(doc)
        doc.categories[0].projects[0].tasks[0].text = "changed"
        assert all(item.task.text != "changed" for item in agenda)
        for item in agenda:
            assert item.task is not doc.categories[item.category_idx].projects[
                item.project_idx].tasks[item.task_idx]

    def test_empty_document(self):
        assert engine.build_agenda(parse("")) == []


# ---------------------------------------------------------------------------
# Tasks and notes
# ---------------------------------------------------------------------------

class TestTaskCrud:
    def test_add_task(self, doc):
        assert engine.add_task(doc, 0, 0, "New task")
        last = doc.categories[0].projects[0].tasks[-1]
        assert last.state == TaskState.TODO
        assert last.text == "New task"

    def test_add_task_invalid(self, doc):
        assert not engine.add_task(doc, 99, 0, "Nope")
        assert not engine.add_task(doc, 0, 99, "Nope")

    def test_delete_task(self, doc):
        assert engine.delete_task(doc, 0, 0, 0)
        assert _texts(doc.categories[0].projects[0]) == ["Second todo"]
        assert not engine.delete_task(doc, 0, 0, 5)

    def test_rename_task(self, doc):
        assert engine.rename_task(doc, 0, 0, 0, "Renamed")
        assert doc.categories[0].projects[0].tasks[0].text == "Renamed"
        assert not engine.rename_task(doc, 0, 0, 9, "x")

    def test_notes(self, doc):
        assert engine.add_task_note(doc, 0, 0, 0, "A note")
        task = doc.categories[0].projects[0].tasks[0]
        assert task.notes == ["  A note"]

        assert engine.edit_task_note(doc, 0, 0, 0, 0, "Edited")
        assert task.notes == ["  Edited"]
        assert not engine.edit_task_note(doc, 0, 0, 0, 1, "x")

        assert engine.delete_task_note(doc, 0, 0, 0, 0)
        assert task.notes == []
        assert not engine.delete_task_note(doc, 0, 0, 0, 0)


class TestRerankTask:
    def test_swap_down(self):
        doc = parse("## W\n### P\n- 🔵 first\n- 🔴 second\n")
        assert engine.rerank_task(doc, 0, 0, 0, 1) == 1
        tasks = doc.categories[0].projects[0].tasks
        assert [t.text for t in tasks] == ["second", "first"]
        assert [t.state for t in tasks] == [TaskState.TODO, TaskState.ON_DECK]

    def test_swap_up(self, doc):
        assert engine.rerank_task(doc, 0, 0, 1, -1) == 0
        assert _texts(doc.categories[0].projects[0]) == ["Second todo", "First todo"]

    def test_boundaries(self, doc):
        before = copy.deepcopy(doc)
        assert engine.rerank_task(doc, 0, 0, 0, -1) is None
        assert engine.rerank_task(doc, 0, 0, 1, 1) is None
        assert doc == before

    def test_relocate_task(self):
        doc = parse("## W\n### P\n- 🔴 a\n- 🔴 b\n- 🔴 c\n")
        assert engine.relocate_task(doc, 0, 0, 2, 0) == 0
        assert _texts(doc.categories[0].projects[0]) == ["c", "a", "b"]
        assert engine.relocate_task(doc, 0, 0, 0, 99) == 2
        assert _texts(doc.categories[0].projects[0]) == ["a", "b", "c"]
        assert engine.relocate_task(doc, 0, 0, 3, 0) is None


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class TestProjects:
    def test_add_and_delete(self, doc):
        count = len(doc.categories[0].projects)
        assert engine.add_project(doc, 0, "New Project", True)
        assert len(doc.categories[0].projects) == count + 1
        assert doc.categories[0].projects[-1].active

        assert engine.delete_project(doc, 0, count)
        assert len(doc.categories[0].projects) == count
        assert not engine.delete_project(doc, 0, count)
        assert not engine.add_project(doc, 5, "x", False)

    def test_rename(self, doc):
        assert engine.rename_project(doc, 0, 0, "Renamed Proj")
        assert doc.categories[0].projects[0].name == "Renamed Proj"

    def test_toggle_active(self, doc):
        assert not doc.categories[0].projects[2].active
        assert engine.toggle_project_active(doc, 0, 2)
        assert doc.categories[0].projects[2].active
        assert engine.toggle_project_active(doc, 0, 2)
        assert not doc.categories[0].projects[2].active
        assert not engine.toggle_project_active(doc, 0, 3)

    def test_rerank(self, doc):
        assert engine.rerank_project(doc, 0, 0, 1) == 1
        names = [p.name for p in doc.categories[0].projects]
        assert names[:2] == ["Project Beta", "Project Alpha"]
        assert engine.rerank_project(doc, 0, 0, -1) is None
        assert engine.rerank_project(doc, 0, 2, 1) is None

    def test_move_to_category(self):
        doc = parse("## A\n### P1\n### P2\n## B\n### Q1\n")
        assert engine.move_project_to_category(doc, 0, 1, 1, 0) == (1, 0)
        assert [p.name for p in doc.categories[0].projects] == ["P1"]
        assert [p.name for p in doc.categories[1].projects] == ["P2", "Q1"]

    def test_move_to_category_clamps_insert_index(self):
        doc = parse("## A\n### P1\n## B\n### Q1\n")
        assert engine.move_project_to_category(doc, 0, 0, 1, 99) == (1, 1)
        assert [p.name for p in doc.categories[1].projects] == ["Q1", "P1"]

    def test_move_to_category_invalid(self):
        doc = parse("## A\n### P1\n## B\n")
        before = copy.deepcopy(doc)
        assert engine.move_project_to_category(doc, 0, 5, 1, 0) is None
        assert engine.move_project_to_category(doc, 0, 0, 7, 0) is None
        assert doc == before


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class TestCategories:
    def test_crud(self, doc):
        count = len(doc.categories)
        assert engine.add_category(doc, "New Cat") == count
        assert engine.rename_category(doc, count, "Renamed Cat")
        assert doc.categories[count].name == "Renamed Cat"

        assert engine.rerank_category(doc, count, -1) == count - 1
        assert doc.categories[0].name == "Renamed Cat"

        assert engine.remove_category(doc, 0)
        assert len(doc.categories) == count
        assert not engine.remove_category(doc, 5)

    def test_rerank_boundaries(self):
        doc = parse("## A\n## B\n")
        assert engine.rerank_category(doc, 0, -1) is None
        assert engine.rerank_category(doc, 1, 1) is None

    def test_relocate(self):
        doc = parse("## A\n## B\n## C\n")
        assert engine.relocate_category(doc, 0, 2) == 2
        assert [c.name for c in doc.categories] == ["B", "C", "A"]
        assert engine.relocate_category(doc, -1, 0) is None
