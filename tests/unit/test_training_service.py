import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.errors import NotFoundError
from chronicles.application.services.narrative_tables import (
    TRAINING_BONUS_NARRATIVES,
    TRAINING_SEASONAL_SUFFIX,
)
from chronicles.application.services.random_source import ReplayRandomSource
from chronicles.application.services.training_service import INSUFFICIENT_ENERGY, TrainingService
from chronicles.domain.models.character import Character, CharacterClass
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario
from chronicles.infrastructure.db.inmemory.repos import InMemorySkillRepository, InMemoryTrainingScenarioRepository


STRENGTH_TRAINING = 1
INTELLIGENCE_TRAINING = 3
MASTERS_GUIDANCE = 16


class TrainingServiceTests(unittest.TestCase):
    def _service(self, rng: ReplayRandomSource) -> TrainingService:
        return TrainingService(rng, InMemoryTrainingScenarioRepository())

    def test_successful_training_applies_gains_and_experience(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, id=1)
        rng = ReplayRandomSource(floats=[0.99, 0.0, 0.0, 0.99])

        result = self._service(rng).resolve_training(character, STRENGTH_TRAINING)

        self.assertTrue(result.success)
        self.assertEqual(5, result.primary_gain)
        self.assertEqual(2, result.secondary_gain)
        self.assertFalse(result.bonus_triggered)
        self.assertEqual(15, result.experience_gained)
        self.assertEqual(15, result.energy_spent)
        self.assertEqual(25, character.strength)
        self.assertEqual(20, character.endurance)
        self.assertEqual(15, character.experience)
        self.assertEqual(85, character.current_energy)
        self.assertEqual(["Strength", "Endurance"], [change.name for change in result.stat_changes])
        self.assertEqual((0, 0), rng.remaining)

    def test_failed_training_injures_and_keeps_energy_spent(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, id=1)
        rng = ReplayRandomSource(ints=[0], floats=[0.0])

        result = self._service(rng).resolve_training(character, STRENGTH_TRAINING)

        self.assertFalse(result.success)
        self.assertTrue(result.injured)
        self.assertEqual(15, result.energy_spent)
        self.assertEqual(85, character.current_energy)
        self.assertEqual(92, character.current_health)
        self.assertEqual(20, character.strength)
        self.assertEqual(0, character.experience)
        self.assertIn("Strength Training", result.narrative)

    def test_insufficient_energy_draws_nothing(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, id=1, current_energy=10)
        rng = ReplayRandomSource()

        result = self._service(rng).resolve_training(character, STRENGTH_TRAINING)

        self.assertFalse(result.success)
        self.assertEqual(INSUFFICIENT_ENERGY, result.narrative)
        self.assertEqual(10, character.current_energy)
        self.assertEqual([], rng.history)

    def test_level_requirement_blocks_training(self) -> None:
        scenario = TrainingScenario(id=9, name="Duelling", primary_stat=StatType.AGILITY, required_level=3)
        service = TrainingService(ReplayRandomSource(), InMemoryTrainingScenarioRepository([scenario]))
        character = Character.for_class("Sable", CharacterClass.ROGUE, id=1)

        result = service.resolve_training(character, 9)

        self.assertFalse(result.success)
        self.assertIn("level 3", result.narrative)
        self.assertEqual(100, character.current_energy)

    def test_seasonal_and_storybook_multipliers_stack_with_bonus(self) -> None:
        character = Character.for_class("Iri", CharacterClass.MAGE, id=1, current_month=9)
        character.equip_storybook(Storybook(id=3, name="Tome", intelligence_bonus=20), 1)
        rng = ReplayRandomSource(ints=[0], floats=[0.99, 0.0, 0.0, 0.0])

        result = self._service(rng).resolve_training(character, INTELLIGENCE_TRAINING)

        self.assertTrue(result.success)
        self.assertTrue(result.bonus_triggered)
        self.assertEqual(7 + 3, result.primary_gain)
        self.assertEqual(2, result.secondary_gain)
        self.assertEqual(32, character.intelligence)
        self.assertEqual(22, result.stat_changes[0].old_value)
        self.assertEqual(32, result.stat_changes[0].new_value)
        self.assertIn(TRAINING_SEASONAL_SUFFIX.strip(), result.narrative)
        self.assertIn(TRAINING_BONUS_NARRATIVES[0], result.narrative)

    def test_training_boost_skill_scales_primary_gain(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, id=1)
        character.grant_skill(InMemorySkillRepository().get(MASTERS_GUIDANCE))
        rng = ReplayRandomSource(floats=[0.99, 0.0, 0.0, 0.99])

        result = self._service(rng).resolve_training(character, STRENGTH_TRAINING)

        self.assertEqual(int(5 * 1.2) + 1, result.primary_gain)
        self.assertEqual(27, character.strength)

    def test_unknown_scenario_raises_not_found(self) -> None:
        character = Character.for_class("Bran", CharacterClass.WARRIOR, id=1)
        with self.assertRaises(NotFoundError):
            self._service(ReplayRandomSource()).resolve_training(character, 404)

    def test_available_training_flags_seasonal_bonus(self) -> None:
        character = Character.for_class("Iri", CharacterClass.MAGE, id=1, current_month=10)

        views = self._service(ReplayRandomSource()).list_available(character)

        flagged = {view.id for view in views if view.has_seasonal_bonus}
        self.assertEqual(6, len(views))
        self.assertEqual({INTELLIGENCE_TRAINING}, flagged)


if __name__ == "__main__":
    unittest.main()
