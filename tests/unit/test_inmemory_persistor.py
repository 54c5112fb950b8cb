import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.domain.models.character import Character
from chronicles.domain.models.history import MessageLogEntry
from chronicles.domain.models.session import GameSession
from chronicles.infrastructure.db.inmemory.repos import (
    InMemoryCharacterRepository,
    InMemoryGameSessionRepository,
    InMemoryMessageLogRepository,
)
from chronicles.infrastructure.inmemory.atomic_persistence import create_inmemory_atomic_persistor


class InMemoryAtomicPersistenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.characters = InMemoryCharacterRepository()
        self.sessions = InMemoryGameSessionRepository()
        self.messages = InMemoryMessageLogRepository()
        self.session = self.sessions.create(GameSession(id=None, name="Chronicle"))
        self.character = self.characters.create(Character(id=None, name="Ayla", session_id=self.session.id))
        self.persist = create_inmemory_atomic_persistor(self.characters, self.sessions, self.messages)

    def _entry(self, message: str) -> MessageLogEntry:
        return MessageLogEntry(session_id=self.session.id, message=message, kind="action", year=1, month=1)

    def test_commits_character_session_and_operations(self) -> None:
        self.character.gold = 25
        self.session.name = "Renamed"

        self.persist(self.character, self.session, [self.messages.build_append_operation(self._entry("ok"))])

        self.assertEqual(25, self.characters.get(self.character.id).gold)
        self.assertEqual("Renamed", self.sessions.get(self.session.id).name)
        self.assertEqual(["ok"], [entry.message for entry in self.messages.list_for_session(self.session.id)])

    def test_rolls_back_everything_when_an_operation_fails(self) -> None:
        self.character.gold = 99

        def _fail(_session) -> None:
            raise RuntimeError("write failed")

        with self.assertRaises(RuntimeError):
            self.persist(
                self.character,
                self.session,
                [self.messages.build_append_operation(self._entry("lost")), _fail],
            )

        self.assertEqual(0, self.characters.get(self.character.id).gold)
        self.assertEqual([], self.messages.list_for_session(self.session.id))

    def test_session_is_optional(self) -> None:
        self.character.reputation = 4
        self.persist(self.character, None)
        self.assertEqual(4, self.characters.get(self.character.id).reputation)

    def test_stored_objects_are_isolated_from_callers(self) -> None:
        loaded = self.characters.get(self.character.id)
        loaded.gold = 500
        self.assertEqual(0, self.characters.get(self.character.id).gold)


if __name__ == "__main__":
    unittest.main()
