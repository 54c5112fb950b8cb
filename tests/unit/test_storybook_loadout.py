import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.errors import NotFoundError
from chronicles.application.services.loadout_service import LoadoutService
from chronicles.domain.models.character import Character
from chronicles.domain.models.storybook import Storybook
from chronicles.infrastructure.db.inmemory.repos import InMemoryStorybookRepository


class LoadoutServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.service = LoadoutService(InMemoryStorybookRepository())
        self.character = Character(id=1, name="Ayla")

    def test_equip_places_book_in_slot_without_touching_stats(self) -> None:
        result = self.service.equip(self.character, 1, 3)

        self.assertTrue(result.success)
        self.assertEqual([1], self.character.equipped_storybook_ids())
        self.assertEqual(1, self.character.storybook_in_slot(3).id)
        self.assertEqual(60, self.character.total_power)

    def test_reequipping_a_book_moves_it(self) -> None:
        self.service.equip(self.character, 1, 1)
        self.service.equip(self.character, 1, 4)

        self.assertIsNone(self.character.storybook_in_slot(1))
        self.assertEqual(1, self.character.storybook_in_slot(4).id)
        self.assertEqual(1, len(self.character.equipped))

    def test_equipping_an_occupied_slot_replaces_the_book(self) -> None:
        self.service.equip(self.character, 1, 2)
        self.service.equip(self.character, 2, 2)

        self.assertEqual([2], self.character.equipped_storybook_ids())

    def test_invalid_slot_is_rejected(self) -> None:
        for slot in (0, 6):
            with self.subTest(slot=slot):
                result = self.service.equip(self.character, 1, slot)
                self.assertFalse(result.success)
        self.assertEqual([], self.character.equipped)

    def test_full_loadout_only_accepts_replacements(self) -> None:
        for slot in range(1, 6):
            self.character.equip_storybook(Storybook(id=100 + slot, name=f"Book {slot}"), slot)

        result = LoadoutService.equip_storybook(self.character, Storybook(id=200, name="Extra"), 5)

        self.assertTrue(result.success)
        self.assertEqual(5, len(self.character.equipped))
        self.assertEqual(200, self.character.storybook_in_slot(5).id)
        self.assertFalse(LoadoutService.equip_storybook(self.character, Storybook(id=300, name="Overflow"), 6).success)

    def test_unequip_clears_slot(self) -> None:
        self.service.equip(self.character, 2, 1)

        self.assertTrue(self.service.unequip(self.character, 1).success)
        self.assertFalse(self.service.unequip(self.character, 1).success)
        self.assertEqual([], self.character.equipped)

    def test_set_loadout_replaces_everything_and_skips_bad_slots(self) -> None:
        self.service.equip(self.character, 5, 5)

        result = self.service.set_loadout(self.character, [(1, 1), (2, 9), (3, 2)])

        self.assertTrue(result.success)
        self.assertEqual([1, 3], self.character.equipped_storybook_ids())

    def test_set_loadout_rejects_more_than_five_entries(self) -> None:
        result = self.service.set_loadout(self.character, [(book, book) for book in range(1, 6)] + [(1, 1)])
        self.assertFalse(result.success)

    def test_unknown_storybook_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.equip(self.character, 404, 1)


if __name__ == "__main__":
    unittest.main()
