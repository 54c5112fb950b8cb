import copy
from typing import Dict, Iterable, List, Optional

from chronicles.application.services.balance_tables import eligible_enemy_tier_range
from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import Character
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import ActionType, RandomEvent
from chronicles.domain.models.history import BattleLogRecord, BattleResult, GameEventRecord, MessageLogEntry
from chronicles.domain.models.session import GameSession
from chronicles.domain.models.skill import Skill
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario
from chronicles.domain.repositories import (
    BattleLogRepository,
    CharacterRepository,
    EnemyRepository,
    GameEventRepository,
    GameSessionRepository,
    MessageLogRepository,
    RandomEventRepository,
    SkillRepository,
    StorybookRepository,
    TrainingScenarioRepository,
)
from chronicles.infrastructure.db.inmemory import seed_content


class InMemoryCharacterRepository(CharacterRepository):
    def __init__(self, initial: Optional[Dict[int, Character]] = None) -> None:
        self._characters = dict(initial or {})

    def get(self, character_id: int) -> Character | None:
        character = self._characters.get(character_id)
        return copy.deepcopy(character) if character is not None else None

    def list_all(self) -> List[Character]:
        return [copy.deepcopy(character) for character in self._characters.values()]

    def save(self, character: Character) -> None:
        self._characters[character.id] = copy.deepcopy(character)

    def create(self, character: Character) -> Character:
        next_id = max(self._characters.keys(), default=0) + 1
        character.id = next_id
        self._characters[next_id] = copy.deepcopy(character)
        return character


class InMemoryGameSessionRepository(GameSessionRepository):
    def __init__(self, initial: Optional[Dict[int, GameSession]] = None) -> None:
        self._sessions = dict(initial or {})

    def get(self, session_id: int) -> GameSession | None:
        session = self._sessions.get(session_id)
        return copy.deepcopy(session) if session is not None else None

    def save(self, session: GameSession) -> None:
        self._sessions[session.id] = copy.deepcopy(session)

    def create(self, session: GameSession) -> GameSession:
        next_id = max(self._sessions.keys(), default=0) + 1
        session.id = next_id
        self._sessions[next_id] = copy.deepcopy(session)
        return session

    def list_all(self) -> List[GameSession]:
        return [copy.deepcopy(self._sessions[key]) for key in sorted(self._sessions)]


class InMemoryEnemyRepository(EnemyRepository):
    def __init__(self, enemies: Optional[Iterable[EnemyTemplate]] = None) -> None:
        source = seed_content.default_enemies() if enemies is None else enemies
        self._enemies = {enemy.id: enemy for enemy in source}

    def get(self, enemy_id: int) -> EnemyTemplate | None:
        return self._enemies.get(enemy_id)

    def list_eligible(self, level: int, season: Season) -> List[EnemyTemplate]:
        low, high = eligible_enemy_tier_range(level)
        return [
            enemy
            for enemy in self.list_in_tier_range(low, high)
            if enemy.appears_in(season)
        ]

    def list_in_tier_range(self, min_tier: int, max_tier: int) -> List[EnemyTemplate]:
        return sorted(
            (
                enemy
                for enemy in self._enemies.values()
                if enemy.is_active and min_tier <= enemy.difficulty_tier <= max_tier
            ),
            key=lambda enemy: (enemy.difficulty_tier, enemy.id),
        )

    def list_by_tier(self, tier: int) -> List[EnemyTemplate]:
        return self.list_in_tier_range(tier, tier)


class InMemoryRandomEventRepository(RandomEventRepository):
    def __init__(self, events: Optional[Iterable[RandomEvent]] = None) -> None:
        source = seed_content.default_events() if events is None else events
        self._events = {event.id: event for event in source}

    def get(self, event_id: int) -> RandomEvent | None:
        return self._events.get(event_id)

    def list_eligible(
        self,
        action: ActionType,
        season: Season,
        equipped_storybook_ids: Iterable[int],
    ) -> List[RandomEvent]:
        equipped = list(equipped_storybook_ids or ())
        return [
            self._events[key]
            for key in sorted(self._events)
            if self._events[key].is_active
            and self._events[key].triggers_on(action, season)
            and self._events[key].available_with(equipped)
        ]


class InMemoryTrainingScenarioRepository(TrainingScenarioRepository):
    def __init__(self, scenarios: Optional[Iterable[TrainingScenario]] = None) -> None:
        source = seed_content.default_training_scenarios() if scenarios is None else scenarios
        self._scenarios = {scenario.id: scenario for scenario in source}

    def get(self, scenario_id: int) -> TrainingScenario | None:
        return self._scenarios.get(scenario_id)

    def list_for_level(self, level: int) -> List[TrainingScenario]:
        return [
            self._scenarios[key]
            for key in sorted(self._scenarios)
            if self._scenarios[key].is_active and self._scenarios[key].required_level <= int(level)
        ]


class InMemorySkillRepository(SkillRepository):
    def __init__(self, skills: Optional[Iterable[Skill]] = None) -> None:
        source = seed_content.default_skills() if skills is None else skills
        self._skills = {skill.id: skill for skill in source}

    def get(self, skill_id: int) -> Skill | None:
        return self._skills.get(skill_id)

    def list_all(self) -> List[Skill]:
        return [self._skills[key] for key in sorted(self._skills)]


class InMemoryStorybookRepository(StorybookRepository):
    def __init__(self, storybooks: Optional[Iterable[Storybook]] = None) -> None:
        source = seed_content.default_storybooks() if storybooks is None else storybooks
        self._storybooks = {storybook.id: storybook for storybook in source}

    def get(self, storybook_id: int) -> Storybook | None:
        return self._storybooks.get(storybook_id)

    def list_all(self) -> List[Storybook]:
        return [self._storybooks[key] for key in sorted(self._storybooks)]


class InMemoryBattleLogRepository(BattleLogRepository):
    _MAX_RECORDS = 5000

    def __init__(self) -> None:
        self._records: list[BattleLogRecord] = []

    def append(self, record: BattleLogRecord) -> None:
        self._records.append(record)
        if len(self._records) > self._MAX_RECORDS:
            del self._records[:-self._MAX_RECORDS]

    def victory_count(self, character_id: int) -> int:
        return sum(
            1
            for record in self._records
            if record.character_id == int(character_id) and record.result == BattleResult.VICTORY
        )

    def list_for_character(self, character_id: int) -> List[BattleLogRecord]:
        return [record for record in self._records if record.character_id == int(character_id)]


class InMemoryGameEventRepository(GameEventRepository):
    def __init__(self) -> None:
        self._records: list[GameEventRecord] = []

    def append(self, record: GameEventRecord) -> None:
        self._records.append(record)

    def list_for_character(self, character_id: int) -> List[GameEventRecord]:
        return [record for record in self._records if record.character_id == int(character_id)]


class InMemoryMessageLogRepository(MessageLogRepository):
    def __init__(self) -> None:
        self._entries: list[MessageLogEntry] = []

    def append(self, entry: MessageLogEntry) -> None:
        self._entries.append(entry)

    def list_for_session(self, session_id: int) -> List[MessageLogEntry]:
        return [entry for entry in self._entries if entry.session_id == int(session_id)]
