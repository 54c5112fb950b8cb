import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.services.progression_service import ProgressionService
from chronicles.domain.events import LevelUpApplied
from chronicles.domain.models.character import Character, CharacterClass
from chronicles.domain.models.stats import StatType


def _character_with_power(power_per_stat: int, reputation: int = 0) -> Character:
    character = Character(id=1, name="Ayla", reputation=reputation)
    for stat in StatType:
        character.set_stat(stat, power_per_stat)
    return character


class ProgressionServiceTests(unittest.TestCase):
    def test_experience_curve_is_quadratic(self) -> None:
        self.assertEqual(50, ProgressionService.experience_required_for_level(1))
        self.assertEqual(200, ProgressionService.experience_required_for_level(2))
        self.assertEqual(450, ProgressionService.experience_required_for_level(3))

    def test_level_one_needs_two_hundred_experience(self) -> None:
        character = Character(id=1, name="Ayla", experience=199)
        service = ProgressionService()

        summary = service.check_level_up(character)

        self.assertFalse(summary.leveled_up)
        self.assertEqual(1, character.level)
        self.assertEqual(200, service.experience_for_next_level(character))

    def test_level_up_raises_caps_and_refills(self) -> None:
        published: list[object] = []
        character = Character(
            id=7,
            name="Ayla",
            experience=200,
            current_health=40,
            current_energy=10,
        )

        summary = ProgressionService(event_publisher=published.append).check_level_up(character)

        self.assertTrue(summary.leveled_up)
        self.assertEqual(2, character.level)
        self.assertEqual(110, character.max_health)
        self.assertEqual(105, character.max_energy)
        self.assertEqual(110, character.current_health)
        self.assertEqual(105, character.current_energy)
        self.assertEqual(200, character.experience)
        self.assertEqual(1, len(published))
        self.assertIsInstance(published[0], LevelUpApplied)
        self.assertEqual(2, published[0].to_level)

    def test_only_one_level_is_gained_per_check(self) -> None:
        character = Character(id=1, name="Ayla", experience=5000)
        ProgressionService().check_level_up(character)
        self.assertEqual(2, character.level)

    def test_final_score_formula(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, gold=125, reputation=4, level=3)

        score = ProgressionService.final_score(character, victory_count=2)

        self.assertEqual(80 * 10 + 3 * 100 + 12 + 4 * 5 + 2 * 50, score)

    def test_ending_ladder(self) -> None:
        cases = [
            (_character_with_power(84, reputation=100), "Legendary Hero"),
            (_character_with_power(84, reputation=99), "Renowned Champion"),
            (_character_with_power(67), "Renowned Champion"),
            (_character_with_power(50), "Accomplished Adventurer"),
            (_character_with_power(34), "Seasoned Traveler"),
            (_character_with_power(10), "Humble Wanderer"),
        ]
        for character, expected in cases:
            with self.subTest(power=character.total_power, reputation=character.reputation):
                self.assertEqual(expected, ProgressionService.determine_ending(character))

    def test_final_summary_counts_victories(self) -> None:
        character = _character_with_power(10)
        summary = ProgressionService().build_final_summary(character, victory_count=3)
        self.assertEqual(3, summary.victories)
        self.assertEqual("Humble Wanderer", summary.ending)
        self.assertEqual(60 * 10 + 100 + 150, summary.final_score)


if __name__ == "__main__":
    unittest.main()
