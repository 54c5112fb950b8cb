import os
import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles import bootstrap
from chronicles.application.services.game_service import GameService
from chronicles.bootstrap import EngineSettings, create_game_service


class EngineSettingsTests(unittest.TestCase):
    def test_from_env_reads_engine_variables(self) -> None:
        env = {
            "CHRONICLES_DATABASE_URL": "sqlite:///tmp/chronicles.db",
            "CHRONICLES_RNG_SEED": "42",
            "CHRONICLES_MINI_EVENTS": "off",
            "CHRONICLES_MINI_EVENT_CHANCE": "0.5",
            "CHRONICLES_DB_CONNECT_PROBE_TIMEOUT_S": "1.5",
        }
        with mock.patch.dict(os.environ, env, clear=False):
            settings = EngineSettings.from_env()

        self.assertEqual("sqlite:///tmp/chronicles.db", settings.database_url)
        self.assertEqual("42", settings.rng_seed)
        self.assertFalse(settings.mini_events_enabled)
        self.assertEqual(0.0, settings.effective_mini_event_chance)
        self.assertEqual(1.5, settings.probe_timeout_s)

    def test_defaults_without_environment(self) -> None:
        settings = EngineSettings.from_env()

        self.assertIsNone(settings.database_url)
        self.assertIsNone(settings.rng_seed)
        self.assertTrue(settings.mini_events_enabled)
        self.assertEqual(0.20, settings.effective_mini_event_chance)

    def test_integer_and_text_seeds_are_reproducible(self) -> None:
        for seed in ("42", "moonrise"):
            with self.subTest(seed=seed):
                left = EngineSettings(rng_seed=seed).build_random_source()
                right = EngineSettings(rng_seed=seed).build_random_source()
                self.assertEqual(
                    [left.uniform_int(1000) for _ in range(5)],
                    [right.uniform_int(1000) for _ in range(5)],
                )
        self.assertEqual(42, EngineSettings(rng_seed=" 42 ").build_random_source().seed)


class CreateGameServiceTests(unittest.TestCase):
    def test_without_database_url_uses_in_memory_repositories(self) -> None:
        game = create_game_service(EngineSettings())

        self.assertIsInstance(game, GameService)
        self.assertEqual("InMemoryCharacterRepository", type(game.character_repo).__name__)

    def test_unreachable_local_mysql_falls_back(self) -> None:
        settings = EngineSettings(database_url="mysql+mysqlconnector://user:pw@localhost:3306/chronicles")
        with mock.patch.object(bootstrap, "_looks_like_local_mysql_unreachable", return_value=True), mock.patch(
            "builtins.print"
        ) as printed:
            game = create_game_service(settings)

        self.assertEqual("InMemoryCharacterRepository", type(game.character_repo).__name__)
        printed.assert_called_once()

    def test_sql_bootstrap_failure_falls_back(self) -> None:
        settings = EngineSettings(database_url="sqlite:///unused.db")
        with mock.patch.object(
            bootstrap, "_build_sql_game_service", side_effect=RuntimeError("Database bootstrap probe failed")
        ), mock.patch("builtins.print") as printed:
            game = create_game_service(settings)

        self.assertEqual("InMemoryCharacterRepository", type(game.character_repo).__name__)
        self.assertIn("falling back to in-memory", printed.call_args[0][0])

    def test_non_mysql_urls_are_not_probed(self) -> None:
        self.assertFalse(bootstrap._looks_like_local_mysql_unreachable("sqlite:///chronicles.db", 0.1))
        self.assertFalse(bootstrap._looks_like_local_mysql_unreachable("mysql+mysqlconnector://u:p@db.example:3306/x", 0.1))


if __name__ == "__main__":
    unittest.main()
