import logging
import os
import socket
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from chronicles.application.services.balance_tables import MINI_EVENT_CHANCE
from chronicles.application.services.event_bus import EventBus
from chronicles.application.services.game_service import GameService
from chronicles.application.services.random_source import RandomSource, SeededRandomSource
from chronicles.application.services.seed_policy import seed_from_setting
from chronicles.infrastructure.db.inmemory.repos import (
    InMemoryBattleLogRepository,
    InMemoryCharacterRepository,
    InMemoryEnemyRepository,
    InMemoryGameEventRepository,
    InMemoryGameSessionRepository,
    InMemoryMessageLogRepository,
    InMemoryRandomEventRepository,
    InMemorySkillRepository,
    InMemoryStorybookRepository,
    InMemoryTrainingScenarioRepository,
)
from chronicles.infrastructure.inmemory.atomic_persistence import create_inmemory_atomic_persistor


logger = logging.getLogger(__name__)

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineSettings:
    database_url: Optional[str] = None
    rng_seed: Optional[str] = None
    mini_events_enabled: bool = True
    mini_event_chance: float = MINI_EVENT_CHANCE
    probe_timeout_s: float = 0.35

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            database_url=os.getenv("CHRONICLES_DATABASE_URL") or None,
            rng_seed=os.getenv("CHRONICLES_RNG_SEED") or None,
            mini_events_enabled=os.getenv("CHRONICLES_MINI_EVENTS", "1").strip().lower() not in _FALSE_VALUES,
            mini_event_chance=float(os.getenv("CHRONICLES_MINI_EVENT_CHANCE", str(MINI_EVENT_CHANCE))),
            probe_timeout_s=float(os.getenv("CHRONICLES_DB_CONNECT_PROBE_TIMEOUT_S", "0.35")),
        )

    @property
    def effective_mini_event_chance(self) -> float:
        return self.mini_event_chance if self.mini_events_enabled else 0.0

    def build_random_source(self) -> RandomSource:
        return SeededRandomSource(seed_from_setting(self.rng_seed))


def _looks_like_local_mysql_unreachable(database_url: str, timeout: float) -> bool:
    if not database_url:
        return False

    parsed = urlparse(database_url)
    if not parsed.scheme.startswith("mysql"):
        return False

    host = (parsed.hostname or "").strip().lower()
    if host not in {"localhost", "127.0.0.1", "::1"}:
        return False

    port = parsed.port or 3306
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return False
    except OSError:
        return True


def build_inmemory_game_service(settings: Optional[EngineSettings] = None) -> GameService:
    settings = settings or EngineSettings()
    character_repo = InMemoryCharacterRepository()
    session_repo = InMemoryGameSessionRepository()
    battle_log_repo = InMemoryBattleLogRepository()
    game_event_repo = InMemoryGameEventRepository()
    message_log_repo = InMemoryMessageLogRepository()

    return GameService(
        session_repo=session_repo,
        character_repo=character_repo,
        enemy_repo=InMemoryEnemyRepository(),
        event_repo=InMemoryRandomEventRepository(),
        training_repo=InMemoryTrainingScenarioRepository(),
        skill_repo=InMemorySkillRepository(),
        storybook_repo=InMemoryStorybookRepository(),
        battle_log_repo=battle_log_repo,
        game_event_repo=game_event_repo,
        message_log_repo=message_log_repo,
        rng=settings.build_random_source(),
        atomic_state_persistor=create_inmemory_atomic_persistor(
            character_repo,
            session_repo,
            battle_log_repo,
            game_event_repo,
            message_log_repo,
        ),
        event_bus=EventBus(),
        mini_event_chance=settings.effective_mini_event_chance,
    )


def _build_sql_game_service(settings: EngineSettings) -> GameService:
    from chronicles.infrastructure.db.sql.repos import (
        SqlBattleLogRepository,
        SqlCharacterRepository,
        SqlEnemyRepository,
        SqlGameEventRepository,
        SqlGameSessionRepository,
        SqlMessageLogRepository,
        SqlRandomEventRepository,
        SqlSkillRepository,
        SqlStorybookRepository,
        SqlTrainingScenarioRepository,
    )
    from chronicles.infrastructure.db.sql.atomic_persistence import save_character_and_session_atomic

    storybook_repo = SqlStorybookRepository()

    # Force an early connectivity check so fallback happens before the first prompt.
    try:
        storybook_repo.list_all()
    except Exception as exc:
        raise RuntimeError(f"Database bootstrap probe failed: {exc}") from exc

    return GameService(
        session_repo=SqlGameSessionRepository(),
        character_repo=SqlCharacterRepository(),
        enemy_repo=SqlEnemyRepository(),
        event_repo=SqlRandomEventRepository(),
        training_repo=SqlTrainingScenarioRepository(),
        skill_repo=SqlSkillRepository(),
        storybook_repo=storybook_repo,
        battle_log_repo=SqlBattleLogRepository(),
        game_event_repo=SqlGameEventRepository(),
        message_log_repo=SqlMessageLogRepository(),
        rng=settings.build_random_source(),
        atomic_state_persistor=save_character_and_session_atomic,
        event_bus=EventBus(),
        mini_event_chance=settings.effective_mini_event_chance,
    )


def create_game_service(settings: Optional[EngineSettings] = None) -> GameService:
    settings = settings or EngineSettings.from_env()
    database_url = settings.database_url
    if database_url:
        if _looks_like_local_mysql_unreachable(database_url, settings.probe_timeout_s):
            print("MySQL appears unreachable, falling back to in-memory.")
            return build_inmemory_game_service(settings)
        try:
            return _build_sql_game_service(settings)
        except Exception as exc:
            logger.warning("Database unavailable, using in-memory repositories", extra={"reason": str(exc)})
            print(f"Database unavailable, falling back to in-memory. Reason: {exc}")

    return build_inmemory_game_service(settings)
