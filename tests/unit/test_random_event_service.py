import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.errors import NotFoundError
from chronicles.application.services.random_event_service import (
    CHOICE_LOCKED,
    RandomEventService,
    game_event_record,
    weighted_pick,
)
from chronicles.application.services.random_source import ReplayRandomSource
from chronicles.domain.events import SkillGranted
from chronicles.domain.models.character import Character, CharacterClass
from chronicles.domain.models.event import ActionType
from chronicles.infrastructure.db.inmemory.repos import (
    InMemoryRandomEventRepository,
    InMemorySkillRepository,
    InMemoryStorybookRepository,
)


FORTUNE_BOOK = 4


class WeightedPickTests(unittest.TestCase):
    def test_cumulative_roulette_picks_in_list_order(self) -> None:
        weighted = [("first", 1.0), ("second", 3.0)]
        self.assertEqual("second", weighted_pick(ReplayRandomSource(floats=[0.875]), weighted))
        self.assertEqual("first", weighted_pick(ReplayRandomSource(floats=[0.2]), weighted))

    def test_empty_or_weightless_candidates_pick_nothing_without_drawing(self) -> None:
        rng = ReplayRandomSource()
        self.assertIsNone(weighted_pick(rng, []))
        self.assertIsNone(weighted_pick(rng, [("only", 0.0)]))
        self.assertEqual([], rng.history)


class RandomEventServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storybooks = InMemoryStorybookRepository()
        self.published: list[object] = []

    def _service(self, rng: ReplayRandomSource) -> RandomEventService:
        return RandomEventService(
            InMemoryRandomEventRepository(),
            rng,
            storybook_repo=self.storybooks,
            skill_repo=InMemorySkillRepository(),
            event_publisher=self.published.append,
        )

    def _warrior(self) -> Character:
        return Character.for_class("Bran", CharacterClass.WARRIOR, id=1)

    def test_storybook_events_need_the_book_equipped(self) -> None:
        character = self._warrior()
        service = self._service(ReplayRandomSource())

        without_book = {event.id for event in service.eligible_events(character, ActionType.EXPLORE)}
        character.equip_storybook(self.storybooks.get(FORTUNE_BOOK), 1)
        with_book = {event.id for event in service.eligible_events(character, ActionType.EXPLORE)}

        self.assertEqual({1, 2, 3}, without_book)
        self.assertEqual({1, 2, 3, 11}, with_book)

    def test_equipped_storybook_multiplies_event_weight(self) -> None:
        character = self._warrior()
        character.equip_storybook(self.storybooks.get(FORTUNE_BOOK), 1)
        service = self._service(ReplayRandomSource())
        event = InMemoryRandomEventRepository().get(11)

        weight = service.event_weight(event, character)

        self.assertAlmostEqual(0.08 * 0.80 * 2.0 * (1 + 12 / 500), weight)

    def test_rarity_preference_boosts_uncommon_events(self) -> None:
        character = self._warrior()
        service = self._service(ReplayRandomSource())
        event = InMemoryRandomEventRepository().get(2)

        plain = service.event_weight(event, character)
        boosted = service.event_weight(event, character, prefer_higher_rarity=True)

        self.assertAlmostEqual(plain * 1.5, boosted)

    def test_try_trigger_event_returns_view_with_hidden_choices(self) -> None:
        character = self._warrior()
        service = self._service(ReplayRandomSource(floats=[0.99]))

        view = service.try_trigger_event(character, ActionType.EXPLORE)

        self.assertIsNotNone(view)
        self.assertEqual("Ambush!", view.title)
        hidden = {choice.id: choice.is_hidden for choice in view.choices}
        self.assertEqual({6: False, 7: False, 8: True}, hidden)

    def test_choice_without_check_applies_success_payload(self) -> None:
        character = self._warrior()

        result = self._service(ReplayRandomSource()).process_choice(character, 1, 1)

        self.assertTrue(result.success)
        self.assertIsNone(result.check_succeeded)
        self.assertIsNone(result.roll_result)
        self.assertEqual(23, character.strength)
        self.assertEqual(10, character.intelligence)
        self.assertEqual(20, character.experience)

    def test_failed_check_applies_failure_payload_without_experience(self) -> None:
        character = self._warrior()

        result = self._service(ReplayRandomSource(ints=[45])).process_choice(character, 1, 3)

        self.assertTrue(result.success)
        self.assertFalse(result.check_succeeded)
        self.assertEqual(45, result.roll_result)
        self.assertEqual(50, result.check_difficulty)
        self.assertEqual("The stranger is offended and disappears.", result.narrative)
        self.assertEqual(8, character.charisma)
        self.assertEqual(0, character.reputation)

    def test_check_adds_a_tenth_of_the_stat_to_the_roll(self) -> None:
        character = self._warrior()

        result = self._service(ReplayRandomSource(ints=[49])).process_choice(character, 1, 3)

        self.assertTrue(result.check_succeeded)
        self.assertEqual(15, character.charisma)
        self.assertEqual(10, character.reputation)

    def test_locked_choice_changes_nothing(self) -> None:
        character = self._warrior()
        rng = ReplayRandomSource()

        result = self._service(rng).process_choice(character, 3, 8)

        self.assertFalse(result.success)
        self.assertEqual(CHOICE_LOCKED, result.narrative)
        self.assertEqual(10, character.charisma)
        self.assertEqual([], rng.history)

    def test_follow_up_event_is_returned(self) -> None:
        character = self._warrior()

        result = self._service(ReplayRandomSource()).process_choice(character, 2, 5)

        self.assertIsNotNone(result.follow_up_event)
        self.assertEqual(5, result.follow_up_event.id)
        self.assertEqual(9, character.intelligence)

    def test_battle_trigger_is_reported(self) -> None:
        character = self._warrior()

        result = self._service(ReplayRandomSource(ints=[90])).process_choice(character, 3, 6)

        self.assertTrue(result.check_succeeded)
        self.assertEqual(3, result.trigger_battle_id)

    def test_skill_grant_is_applied_once_and_published(self) -> None:
        character = self._warrior()
        character.equip_storybook(self.storybooks.get(FORTUNE_BOOK), 1)
        service = self._service(ReplayRandomSource())

        first = service.process_choice(character, 11, 23)
        second = service.process_choice(character, 11, 23)

        self.assertEqual("Fortune's Favor", first.granted_skill)
        self.assertIn("You learned the skill: Fortune's Favor!", first.narrative)
        self.assertIsNone(second.granted_skill)
        self.assertEqual(1, len(character.skills))
        self.assertEqual("Event: Gambler's Coin", character.skills[0].acquisition_source)
        granted = [event for event in self.published if isinstance(event, SkillGranted)]
        self.assertEqual(1, len(granted))
        self.assertEqual(40, character.gold)

    def test_unknown_event_or_choice_raises(self) -> None:
        character = self._warrior()
        service = self._service(ReplayRandomSource())
        with self.assertRaises(NotFoundError):
            service.process_choice(character, 999, 1)
        with self.assertRaises(NotFoundError):
            service.process_choice(character, 1, 999)

    def test_game_event_record_summarizes_changes(self) -> None:
        character = self._warrior()
        result = self._service(ReplayRandomSource(ints=[45])).process_choice(character, 1, 3)

        record = game_event_record(character, 1, 3, result)

        self.assertEqual(1, record.event_id)
        self.assertEqual(3, record.choice_id)
        self.assertFalse(record.check_succeeded)
        self.assertEqual(45, record.roll_result)
        self.assertIn("Charisma", record.result_summary)


if __name__ == "__main__":
    unittest.main()
