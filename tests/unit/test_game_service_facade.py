import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application import dtos
from chronicles.application.contract import COMMAND_INTENTS, CONTRACT_DTO_TYPES, QUERY_INTENTS
from chronicles.application.errors import InvalidActionError, NotFoundError
from chronicles.application.services.game_service import GameService
from chronicles.bootstrap import EngineSettings, build_inmemory_game_service
from chronicles.domain.models.history import BattleResult
from chronicles.domain.models.session import GameState


GIANT_RAT = 2
BRAVE_BOOK = 1
FORTUNE_BOOK = 4


class GameServiceFacadeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.game = build_inmemory_game_service(EngineSettings(rng_seed="5", mini_events_enabled=False))
        self.state = self.game.create_session("Iri's Chronicle", "Iri", "Mage", [BRAVE_BOOK, FORTUNE_BOOK])
        self.session_id = self.state.session_id
        self.character_id = self.state.character.id

    def test_contract_intents_exist_on_facade(self) -> None:
        for intent in (*COMMAND_INTENTS, *QUERY_INTENTS):
            with self.subTest(intent=intent):
                self.assertTrue(callable(getattr(GameService, intent, None)))
        for name in CONTRACT_DTO_TYPES:
            with self.subTest(dto=name):
                self.assertTrue(hasattr(dtos, name))

    def test_create_session_applies_class_stats_and_storybook_bonuses(self) -> None:
        view = self.state.character

        self.assertEqual(GameState.IN_PROGRESS.value, self.state.state)
        self.assertEqual("Mage", view.character_class)
        self.assertEqual(8 + 5, view.strength)
        self.assertEqual(10 + 3, view.endurance)
        self.assertEqual(14 + 5, view.charisma)
        self.assertEqual(14 + 10, view.luck)
        self.assertEqual([1, 2], [book.slot for book in view.storybooks])
        self.assertEqual(5, len(self.state.available_actions))
        self.assertEqual(6, len(self.state.training))
        self.assertEqual("Winter", self.state.season.season)

    def test_turn_is_persisted_with_message_log(self) -> None:
        result = self.game.resolve_turn(self.session_id, "Rest")

        state = self.game.get_state(self.session_id)
        self.assertTrue(result.success)
        self.assertEqual(1, state.character.total_turns)
        self.assertEqual(2, state.character.current_month)
        entries = self.game.message_log_repo.list_for_session(self.session_id)
        self.assertEqual(1, len(entries))
        self.assertEqual("action", entries[0].kind)
        self.assertEqual(1, entries[0].month)

    def test_unknown_action_raises(self) -> None:
        with self.assertRaises(InvalidActionError):
            self.game.resolve_turn(self.session_id, "Dance")

    def test_unknown_session_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            self.game.get_state(999)

    def test_training_spends_energy_even_when_injured(self) -> None:
        self.game.resolve_training(self.character_id, 1)

        state = self.game.get_state(self.session_id)
        self.assertEqual(85, state.character.current_energy)
        self.assertEqual(0, state.character.total_turns)

    def test_battle_is_logged(self) -> None:
        outcome = self.game.resolve_battle(self.character_id, GIANT_RAT)

        history = self.game.battle_history(self.character_id)
        self.assertNotEqual(BattleResult.FLED, outcome.result)
        self.assertEqual(1, len(history))
        self.assertEqual(GIANT_RAT, history[0].enemy_id)
        self.assertEqual(85, self.game.get_state(self.session_id).character.current_energy)

    def test_event_choice_is_persisted_and_recorded(self) -> None:
        result = self.game.resolve_event_choice(self.character_id, 1, 1)

        state = self.game.get_state(self.session_id)
        self.assertTrue(result.success)
        self.assertEqual(13 + 3, state.character.strength)
        self.assertEqual(20, state.character.experience)
        self.assertEqual(1, len(self.game.game_event_repo.list_for_character(self.character_id)))
        kinds = [entry.kind for entry in self.game.message_log_repo.list_for_session(self.session_id)]
        self.assertEqual(["positive"], kinds)

    def test_locked_choice_is_not_persisted(self) -> None:
        result = self.game.resolve_event_choice(self.character_id, 7, 15)

        self.assertFalse(result.success)
        self.assertEqual([], self.game.game_event_repo.list_for_character(self.character_id))

    def test_loadout_changes_are_persisted(self) -> None:
        self.assertTrue(self.game.equip_storybook(self.character_id, 2, 3).success)
        self.assertEqual(3, len(self.game.get_state(self.session_id).character.storybooks))

        self.assertTrue(self.game.unequip_storybook(self.character_id, 3).success)
        self.assertEqual(2, len(self.game.get_state(self.session_id).character.storybooks))

        self.assertTrue(self.game.set_loadout(self.character_id, [(5, 5)]).success)
        books = self.game.get_state(self.session_id).character.storybooks
        self.assertEqual([(5, 5)], [(book.id, book.slot) for book in books])

    def test_queries_scope_content_to_the_character(self) -> None:
        enemies = self.game.list_enemies(self.character_id)
        events = self.game.list_events(self.character_id, "Explore")

        self.assertTrue(all(enemy.difficulty_tier <= 4 for enemy in enemies))
        self.assertIn("Gambler's Coin", [event.title for event in events])
        self.assertEqual([], self.game.list_events(self.character_id, "Dance"))
        self.assertEqual(5, len(self.game.list_storybooks()))
        self.assertEqual([self.session_id], [session.id for session in self.game.list_sessions()])


if __name__ == "__main__":
    unittest.main()
