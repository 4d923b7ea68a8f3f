"""
Page builder: add, edit, hide, reorder and remove storefront sections.
"""

from typing import Any, List, Literal, Mapping, Optional, TypeVar

from shopgenie.models.sections import ProfileSection, SectionType, build_content
from shopgenie.models.store import Store
from shopgenie.services.collection import StoreCollection
from shopgenie.services.notifications import NotificationChannel

T = TypeVar("T")

Direction = Literal["up", "down"]


def swap_adjacent(items: List[T], index: int, direction: Direction) -> List[T]:
    """
    Swap items[index] with its neighbour above ("up") or below ("down").

    Returns the list unchanged (same object) when the index is out of range
    or the neighbour would fall outside the list.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction '{direction}', expected 'up' or 'down'")
    target = index - 1 if direction == "up" else index + 1
    if not (0 <= index < len(items)) or not (0 <= target < len(items)):
        return items
    swapped = list(items)
    swapped[index], swapped[target] = swapped[target], swapped[index]
    return swapped


class SectionService:

    def __init__(self, collection: StoreCollection, notifier: NotificationChannel):
        self.collection = collection
        self.notifier = notifier

    def _sections(self) -> Optional[List[ProfileSection]]:
        store = self.collection.find(self.collection.active_id)
        return store.sections if store else None

    def _replace_sections(self, sections: List[ProfileSection]) -> bool:
        return self.collection.update_active_store(
            lambda store: store.model_copy(update={"sections": sections})
        )

    def add_section(self, section_type: SectionType | str, initial_content: Optional[Mapping[str, Any]] = None) -> Optional[ProfileSection]:
        """Append a block of `section_type` with default content plus `initial_content`."""
        section_type = SectionType(section_type)
        section = ProfileSection(type=section_type, content=build_content(section_type, initial_content))
        sections = self._sections()
        if sections is None:
            return None
        self._replace_sections([*sections, section])
        self.notifier.notify(f"Added {section_type.value} block")
        return section

    def remove_section(self, section_id: str) -> bool:
        sections = self._sections()
        if sections is None or not any(s.id == section_id for s in sections):
            return False
        self._replace_sections([s for s in sections if s.id != section_id])
        self.notifier.notify("Section removed")
        return True

    def update_section(self, section_id: str, content: Mapping[str, Any]) -> bool:
        """
        Merge `content` into a section's content. Silent: the builder calls
        this on every keystroke.
        """
        def apply(store: Store) -> Store:
            return store.model_copy(update={"sections": [
                s.model_copy(update={"content": s.content.merged(content)}) if s.id == section_id else s
                for s in store.sections
            ]})

        sections = self._sections()
        if sections is None or not any(s.id == section_id for s in sections):
            return False
        return self.collection.update_active_store(apply)

    def toggle_section_visibility(self, section_id: str) -> bool:
        sections = self._sections()
        target = next((s for s in sections or [] if s.id == section_id), None)
        if target is None:
            return False
        self._replace_sections([
            s.model_copy(update={"is_visible": not s.is_visible}) if s.id == section_id else s
            for s in sections
        ])
        self.notifier.notify("Section hidden" if target.is_visible else "Section visible", "info")
        return True

    def move_section(self, section_id: str, direction: Direction) -> bool:
        """Swap a section with its neighbour. No-op at either end or for an unknown id."""
        sections = self._sections()
        if sections is None:
            return False
        index = next((i for i, s in enumerate(sections) if s.id == section_id), -1)
        if index < 0:
            return False
        moved = swap_adjacent(sections, index, direction)
        if moved is sections:
            return False
        return self._replace_sections(moved)
