"""
Collapsed-subtree state for the backlog tree, persisted in a sidecar file.

Sidecar format, one record per line, order independent:

    theme:<name>
    cat:<cat>
    proj:<cat>,<proj>
    task:<cat>,<proj>,<task>

Unknown or malformed lines are ignored on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple


def _parse_indices(value: str, count: int) -> Optional[Tuple[int, ...]]:
    """Parse ``count`` comma-separated non-negative ints, or None."""
    parts = value.split(",")
    if len(parts) != count:
        return None
    try:
        indices = tuple(int(p) for p in parts)
    except ValueError:
        return None
    if any(i < 0 for i in indices):
        return None
    return indices


@dataclass
class CollapseState:
    collapsed_categories: Set[int] = field(default_factory=set)
    collapsed_projects: Set[Tuple[int, int]] = field(default_factory=set)
    collapsed_tasks: Set[Tuple[int, int, int]] = field(default_factory=set)
    theme_name: str = ""

    def toggle_category(self, cat_idx: int) -> None:
        self.collapsed_categories ^= {cat_idx}

    def toggle_project(self, cat_idx: int, proj_idx: int) -> None:
        self.collapsed_projects ^= {(cat_idx, proj_idx)}

    def toggle_task(self, cat_idx: int, proj_idx: int, task_idx: int) -> None:
        self.collapsed_tasks ^= {(cat_idx, proj_idx, task_idx)}

    def remap_categories(self, order: List[int]) -> None:
        """
        Re-key entries after the categories were reordered or removed.

        ``order[new_idx]`` is the old index of the category now at
        ``new_idx``. Entries for categories missing from ``order`` are dropped.
        """
        new_index = {old: new for new, old in enumerate(order)}
        self.collapsed_categories = {
            new_index[ci] for ci in self.collapsed_categories if ci in new_index
        }
        self.collapsed_projects = {
            (new_index[ci], pi) for ci, pi in self.collapsed_projects if ci in new_index
        }
        self.collapsed_tasks = {
            (new_index[ci], pi, ti) for ci, pi, ti in self.collapsed_tasks if ci in new_index
        }

    def serialize(self) -> str:
        lines: List[str] = []
        if self.theme_name:
            lines.append(f"theme:{self.theme_name}")
        for ci in sorted(self.collapsed_categories):
            lines.append(f"cat:{ci}")
        for ci, pi in sorted(self.collapsed_projects):
            lines.append(f"proj:{ci},{pi}")
        for ci, pi, ti in sorted(self.collapsed_tasks):
            lines.append(f"task:{ci},{pi},{ti}")
        return "\n".join(lines)

    @classmethod
    def deserialize(cls, content: str) -> CollapseState:
        state = cls()
        for line in content.splitlines():
            line = line.strip()
            key, sep, value = line.partition(":")
            if not sep:
                continue
            if key == "theme":
                state.theme_name = value
            elif key == "cat":
                parsed = _parse_indices(value, 1)
                if parsed:
                    state.collapsed_categories.add(parsed[0])
            elif key == "proj":
                parsed = _parse_indices(value, 2)
                if parsed:
                    state.collapsed_projects.add(parsed)
            elif key == "task":
                parsed = _parse_indices(value, 3)
                if parsed:
                    state.collapsed_tasks.add(parsed)
        return state
