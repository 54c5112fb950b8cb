import sys
from pathlib import Path
import unittest
from unittest import mock

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles import bootstrap
from chronicles.bootstrap import EngineSettings
from chronicles.domain.models.history import MessageLogEntry
from chronicles.infrastructure.db.sql import atomic_persistence, migrate, repos
from chronicles.infrastructure.db.sql.atomic_persistence import save_character_and_session_atomic


class SqlAtomicPersistenceTests(unittest.TestCase):
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

        self.game = bootstrap._build_sql_game_service(EngineSettings(rng_seed="11", mini_events_enabled=False))
        self.state = self.game.create_session("Ayla's Chronicle", "Ayla", "Warrior", [1])
        self.session_id = self.state.session_id
        self.character_id = self.state.character.id

    def tearDown(self) -> None:
        self.engine.dispose()

    def _count(self, table: str) -> int:
        with self.engine.connect() as conn:
            return int(conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar())

    def test_created_session_reloads_from_database(self) -> None:
        state = self.game.get_state(self.session_id)

        self.assertEqual("Ayla", state.character.name)
        self.assertEqual(20 + 5, state.character.strength)
        self.assertEqual([1], [book.id for book in state.character.storybooks])

    def test_turn_commits_character_session_and_message_log(self) -> None:
        self.game.resolve_turn(self.session_id, "Rest")

        state = self.game.get_state(self.session_id)
        self.assertEqual(1, state.character.total_turns)
        self.assertEqual(2, state.character.current_month)
        self.assertEqual(1, self._count("message_log"))

    def test_battle_commits_battle_log(self) -> None:
        self.game.resolve_battle(self.character_id, 2)

        self.assertEqual(1, self._count("battle_log"))
        self.assertEqual(85, self.game.get_state(self.session_id).character.current_energy)

    def test_failing_operation_rolls_back_the_whole_save(self) -> None:
        character = repos.SqlCharacterRepository().get(self.character_id)
        game_session = repos.SqlGameSessionRepository().get(self.session_id)
        character.gold = 999
        character.equipped = []
        game_session.final_score = 12
        entry = MessageLogEntry(session_id=self.session_id, message="lost", kind="action", year=1, month=1)

        def _fail(_session) -> None:
            raise RuntimeError("write failed")

        with self.assertRaises(RuntimeError):
            save_character_and_session_atomic(
                character,
                game_session,
                [repos.SqlMessageLogRepository().build_append_operation(entry), _fail],
            )

        reloaded = repos.SqlCharacterRepository().get(self.character_id)
        self.assertEqual(0, reloaded.gold)
        self.assertEqual([1], [item.storybook.id for item in reloaded.equipped])
        self.assertIsNone(repos.SqlGameSessionRepository().get(self.session_id).final_score)
        self.assertEqual(0, self._count("message_log"))


if __name__ == "__main__":
    unittest.main()
