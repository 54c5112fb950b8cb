from __future__ import annotations

import logging
from typing import Iterable, Optional

from chronicles.application.dtos import LoadoutResult
from chronicles.application.errors import NotFoundError
from chronicles.domain.models.character import LOADOUT_SLOTS, MAX_EQUIPPED_STORYBOOKS, Character
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.repositories import StorybookRepository


logger = logging.getLogger(__name__)


class LoadoutService:
    """Storybook slots 1..5; equipping never changes stats, only training and event weights."""

    def __init__(self, storybook_repo: Optional[StorybookRepository] = None) -> None:
        self.storybook_repo = storybook_repo

    def _lookup(self, storybook_id: int) -> Storybook:
        storybook = self.storybook_repo.get(int(storybook_id)) if self.storybook_repo is not None else None
        if storybook is None:
            raise NotFoundError("Storybook", storybook_id)
        return storybook

    def equip(self, character: Character, storybook_id: int, slot: int) -> LoadoutResult:
        storybook = self._lookup(storybook_id)
        return self.equip_storybook(character, storybook, slot)

    @staticmethod
    def equip_storybook(character: Character, storybook: Storybook, slot: int) -> LoadoutResult:
        slot = int(slot)
        if slot not in LOADOUT_SLOTS:
            return LoadoutResult(False, f"Slot must be between {LOADOUT_SLOTS[0]} and {LOADOUT_SLOTS[-1]}.")
        if not character.equip_storybook(storybook, slot):
            return LoadoutResult(False, f"You can equip at most {MAX_EQUIPPED_STORYBOOKS} storybooks.")
        return LoadoutResult(True, f"{storybook.name} equipped in slot {slot}.")

    @staticmethod
    def unequip(character: Character, slot: int) -> LoadoutResult:
        if not character.unequip_slot(slot):
            return LoadoutResult(False, f"Slot {int(slot)} is already empty.")
        return LoadoutResult(True, f"Slot {int(slot)} cleared.")

    def set_loadout(self, character: Character, entries: Iterable[tuple[int, int]]) -> LoadoutResult:
        """Replace the loadout with ``(storybook_id, slot)`` pairs; pairs with invalid slots are skipped."""
        entries = list(entries)
        if len(entries) > MAX_EQUIPPED_STORYBOOKS:
            return LoadoutResult(False, f"A loadout holds at most {MAX_EQUIPPED_STORYBOOKS} storybooks.")
        resolved = [(self._lookup(storybook_id), int(slot)) for storybook_id, slot in entries]
        character.equipped = []
        equipped = 0
        for storybook, slot in resolved:
            if slot not in LOADOUT_SLOTS:
                logger.debug("Skipping loadout entry with invalid slot", extra={"storybook_id": storybook.id, "slot": slot})
                continue
            if character.equip_storybook(storybook, slot):
                equipped += 1
        return LoadoutResult(True, f"Loadout updated with {equipped} storybook(s).")
