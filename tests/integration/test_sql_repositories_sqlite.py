import sys
from pathlib import Path
import unittest
from unittest import mock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import Character, CharacterClass, CharacterSkill, EquippedStorybook
from chronicles.domain.models.event import ActionType
from chronicles.domain.models.history import BattleLogRecord, BattleResult, GameEventRecord, MessageLogEntry
from chronicles.domain.models.session import GameSession, GameState
from chronicles.infrastructure.db.sql import atomic_persistence, migrate, repos


class SqlRepositoryRoundTripTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite:///:memory:",
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)
        with self.engine.begin() as conn:
            migrate.apply_schema(conn, "sqlite")
            migrate.seed_default_content(conn)

        for module in (repos, atomic_persistence):
            patcher = mock.patch.object(module, "SessionLocal", self.SessionLocal)
            patcher.start()
            self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_content_catalogue_is_readable(self) -> None:
        storybooks = repos.SqlStorybookRepository().list_all()
        rat = repos.SqlEnemyRepository().get(2)
        power_strike = repos.SqlSkillRepository().get(7)
        gamble = repos.SqlRandomEventRepository().get(11)

        self.assertEqual(5, len(storybooks))
        self.assertEqual("Giant Rat", rat.name)
        self.assertEqual(40, rat.health)
        self.assertEqual("Power Strike", power_strike.name)
        self.assertEqual("Gambler's Coin", gamble.title)
        self.assertIn(23, [choice.id for choice in gamble.choices])
        self.assertEqual(6, len(repos.SqlTrainingScenarioRepository().list_for_level(1)))
        self.assertIsNone(repos.SqlEnemyRepository().get(999))

    def test_enemy_eligibility_matches_level_window(self) -> None:
        enemies = repos.SqlEnemyRepository().list_eligible(1, Season.WINTER)

        self.assertTrue(enemies)
        self.assertTrue(all(enemy.difficulty_tier <= 4 for enemy in enemies))

    def test_event_eligibility_honours_storybook(self) -> None:
        events = repos.SqlRandomEventRepository()

        without_book = {event.id for event in events.list_eligible(ActionType.EXPLORE, Season.WINTER, [])}
        with_book = {event.id for event in events.list_eligible(ActionType.EXPLORE, Season.WINTER, [4])}

        self.assertNotIn(11, without_book)
        self.assertEqual(without_book | {11}, with_book)

    def test_character_round_trip_keeps_loadout_and_skills(self) -> None:
        storybook = repos.SqlStorybookRepository().get(3)
        skill = repos.SqlSkillRepository().get(11)
        session_repo = repos.SqlGameSessionRepository()
        game_session = session_repo.create(GameSession(id=None, name="Chronicle", state=GameState.IN_PROGRESS))

        character = Character(
            id=None,
            name="Ayla",
            character_class=CharacterClass.ROGUE,
            session_id=game_session.id,
            gold=12,
        )
        character.equipped = [EquippedStorybook(slot=2, storybook=storybook)]
        character.skills = [CharacterSkill(skill=skill, acquired_on_turn=4, acquisition_source="event:11")]
        character_repo = repos.SqlCharacterRepository()
        created = character_repo.create(character)

        loaded = character_repo.get(created.id)
        self.assertEqual("Ayla", loaded.name)
        self.assertEqual(CharacterClass.ROGUE, loaded.character_class)
        self.assertEqual(12, loaded.gold)
        self.assertEqual([(2, 3)], [(entry.slot, entry.storybook.id) for entry in loaded.equipped])
        self.assertEqual([11], [entry.skill.id for entry in loaded.skills])
        self.assertEqual(4, loaded.skills[0].acquired_on_turn)

        loaded.gold = 30
        loaded.equipped = []
        character_repo.save(loaded)

        reloaded = character_repo.get(created.id)
        self.assertEqual(30, reloaded.gold)
        self.assertEqual([], reloaded.equipped)

    def test_session_round_trip(self) -> None:
        session_repo = repos.SqlGameSessionRepository()
        created = session_repo.create(GameSession(id=None, name="Chronicle", unlocked_storybook_ids=[1, 4]))

        created.state = GameState.COMPLETED
        created.final_score = 420
        created.ending = "Humble Wanderer"
        session_repo.save(created)

        loaded = session_repo.get(created.id)
        self.assertEqual(GameState.COMPLETED, loaded.state)
        self.assertEqual(420, loaded.final_score)
        self.assertEqual([1, 4], loaded.unlocked_storybook_ids)
        self.assertEqual([created.id], [item.id for item in session_repo.list_all()])

    def test_history_logs_round_trip(self) -> None:
        battles = repos.SqlBattleLogRepository()
        events = repos.SqlGameEventRepository()
        messages = repos.SqlMessageLogRepository()

        battles.append(
            BattleLogRecord(
                character_id=1,
                enemy_id=2,
                result=BattleResult.VICTORY,
                narrative="The rat falls.",
                rounds_count=6,
                character_power=79,
                enemy_power=55,
                experience_gained=20,
                gold_gained=6,
                reputation_gained=3,
                health_lost=30,
                energy_spent=15,
                year=1,
                month=3,
                turn=2,
            )
        )
        events.append(
            GameEventRecord(
                character_id=1,
                event_id=7,
                choice_id=15,
                year=1,
                month=3,
                turn=2,
                check_succeeded=False,
                roll_result=12,
                result_summary="Rebuffed",
            )
        )
        messages.append(MessageLogEntry(session_id=1, message="You rest.", kind="action", year=1, month=3))

        self.assertEqual(1, battles.victory_count(1))
        self.assertEqual(0, battles.victory_count(2))
        self.assertEqual(6, battles.list_for_character(1)[0].rounds_count)
        self.assertIs(False, events.list_for_character(1)[0].check_succeeded)
        self.assertEqual(["You rest."], [entry.message for entry in messages.list_for_session(1)])


if __name__ == "__main__":
    unittest.main()
