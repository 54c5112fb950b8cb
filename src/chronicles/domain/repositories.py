from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import Character
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import ActionType, RandomEvent
from chronicles.domain.models.history import BattleLogRecord, GameEventRecord, MessageLogEntry
from chronicles.domain.models.session import GameSession
from chronicles.domain.models.skill import Skill
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario


class CharacterRepository(ABC):
    @abstractmethod
    def get(self, character_id: int) -> Optional[Character]:
        """Load a character together with its loadout and acquired skills."""
        raise NotImplementedError

    @abstractmethod
    def save(self, character: Character) -> None:
        raise NotImplementedError

    @abstractmethod
    def create(self, character: Character) -> Character:
        raise NotImplementedError


class GameSessionRepository(ABC):
    @abstractmethod
    def get(self, session_id: int) -> Optional[GameSession]:
        raise NotImplementedError

    @abstractmethod
    def save(self, session: GameSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def create(self, session: GameSession) -> GameSession:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[GameSession]:
        raise NotImplementedError


class EnemyRepository(ABC):
    @abstractmethod
    def get(self, enemy_id: int) -> Optional[EnemyTemplate]:
        raise NotImplementedError

    @abstractmethod
    def list_eligible(self, level: int, season: Season) -> List[EnemyTemplate]:
        raise NotImplementedError

    @abstractmethod
    def list_in_tier_range(self, min_tier: int, max_tier: int) -> List[EnemyTemplate]:
        raise NotImplementedError

    @abstractmethod
    def list_by_tier(self, tier: int) -> List[EnemyTemplate]:
        raise NotImplementedError


class RandomEventRepository(ABC):
    @abstractmethod
    def get(self, event_id: int) -> Optional[RandomEvent]:
        """Load an event with all of its choices."""
        raise NotImplementedError

    @abstractmethod
    def list_eligible(
        self,
        action: ActionType,
        season: Season,
        equipped_storybook_ids: Iterable[int],
    ) -> List[RandomEvent]:
        raise NotImplementedError


class TrainingScenarioRepository(ABC):
    @abstractmethod
    def get(self, scenario_id: int) -> Optional[TrainingScenario]:
        raise NotImplementedError

    @abstractmethod
    def list_for_level(self, level: int) -> List[TrainingScenario]:
        raise NotImplementedError


class SkillRepository(ABC):
    @abstractmethod
    def get(self, skill_id: int) -> Optional[Skill]:
        raise NotImplementedError


class StorybookRepository(ABC):
    @abstractmethod
    def get(self, storybook_id: int) -> Optional[Storybook]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Storybook]:
        raise NotImplementedError


class BattleLogRepository(ABC):
    @abstractmethod
    def append(self, record: BattleLogRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def victory_count(self, character_id: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def list_for_character(self, character_id: int) -> List[BattleLogRecord]:
        raise NotImplementedError

    def build_append_operation(self, record: BattleLogRecord) -> Callable[[object], None]:
        """Deferred append run inside the atomic persistor; the argument is the open transaction, if any."""
        return lambda _session: self.append(record)


class GameEventRepository(ABC):
    @abstractmethod
    def append(self, record: GameEventRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_character(self, character_id: int) -> List[GameEventRecord]:
        raise NotImplementedError

    def build_append_operation(self, record: GameEventRecord) -> Callable[[object], None]:
        return lambda _session: self.append(record)


class MessageLogRepository(ABC):
    @abstractmethod
    def append(self, entry: MessageLogEntry) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_session(self, session_id: int) -> List[MessageLogEntry]:
        raise NotImplementedError

    def build_append_operation(self, entry: MessageLogEntry) -> Callable[[object], None]:
        return lambda _session: self.append(entry)
