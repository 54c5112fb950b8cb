from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence

from chronicles.application.dtos import (
    BattleOutcome,
    EnemyView,
    EventChoiceResult,
    GameStateView,
    LoadoutResult,
    RandomEventView,
    StatChange,
    TrainingResult,
    TrainingScenarioView,
    TurnResult,
)
from chronicles.application.errors import NotFoundError
from chronicles.application.services.balance_tables import MINI_EVENT_CHANCE
from chronicles.application.services.battle_service import BattleService, battle_log_record
from chronicles.application.services.event_bus import EventBus
from chronicles.application.services.loadout_service import LoadoutService
from chronicles.application.services.mini_event_service import MiniEventService
from chronicles.application.services.progression_service import ProgressionService
from chronicles.application.services.random_event_service import RandomEventService, game_event_record
from chronicles.application.services.random_source import RandomSource, SeededRandomSource
from chronicles.application.services.session_service import SessionService
from chronicles.application.services.training_service import TrainingService
from chronicles.application.services.turn_service import TurnService
from chronicles.domain.models.character import Character, CharacterClass
from chronicles.domain.models.event import ActionType
from chronicles.domain.models.history import BattleLogRecord, BattleResult, MessageLogEntry
from chronicles.domain.models.session import GameSession
from chronicles.domain.models.storybook import Storybook
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


logger = logging.getLogger(__name__)

Operation = Callable[[object], None]


def _changes_json(changes: Iterable[StatChange]) -> Optional[str]:
    rows = [change.to_dict() for change in changes]
    return json.dumps(rows) if rows else None


class GameService:
    """Engine facade: loads state, runs one operation, then persists it in a single write."""

    def __init__(
        self,
        *,
        session_repo: GameSessionRepository,
        character_repo: CharacterRepository,
        enemy_repo: EnemyRepository,
        event_repo: RandomEventRepository,
        training_repo: TrainingScenarioRepository,
        skill_repo: SkillRepository,
        storybook_repo: StorybookRepository,
        battle_log_repo: BattleLogRepository,
        game_event_repo: GameEventRepository,
        message_log_repo: Optional[MessageLogRepository] = None,
        rng: Optional[RandomSource] = None,
        atomic_state_persistor: Callable[..., None] | None = None,
        event_bus: Optional[EventBus] = None,
        mini_event_chance: float = MINI_EVENT_CHANCE,
    ) -> None:
        self.session_repo = session_repo
        self.character_repo = character_repo
        self.storybook_repo = storybook_repo
        self.battle_log_repo = battle_log_repo
        self.game_event_repo = game_event_repo
        self.message_log_repo = message_log_repo
        self.atomic_state_persistor = atomic_state_persistor
        self.event_bus = event_bus or EventBus()
        self.rng = rng or SeededRandomSource()

        publish = self.event_bus.publish
        self.progression_service = ProgressionService(event_publisher=publish)
        self.training_service = TrainingService(self.rng, training_repo)
        self.battle_service = BattleService(
            self.rng,
            enemy_repo,
            progression=self.progression_service,
            event_publisher=publish,
        )
        self.event_service = RandomEventService(
            event_repo,
            self.rng,
            storybook_repo=storybook_repo,
            skill_repo=skill_repo,
            event_publisher=publish,
        )
        self.mini_event_service = MiniEventService(self.rng, chance=mini_event_chance) if mini_event_chance > 0 else None
        self.turn_service = TurnService(
            self.rng,
            training=self.training_service,
            battles=self.battle_service,
            events=self.event_service,
            progression=self.progression_service,
            mini_events=self.mini_event_service,
            battle_logs=battle_log_repo,
            event_publisher=publish,
        )
        self.session_service = SessionService(
            session_repo,
            character_repo,
            storybook_repo=storybook_repo,
            battle_logs=battle_log_repo,
            progression=self.progression_service,
            training=self.training_service,
        )
        self.loadout_service = LoadoutService(storybook_repo)

    def _require_character(self, character_id: int) -> Character:
        character = self.character_repo.get(int(character_id))
        if character is None:
            raise NotFoundError("Character", character_id)
        return character

    def _session_for(self, character: Character) -> Optional[GameSession]:
        if character.session_id is None:
            return None
        return self.session_repo.get(character.session_id)

    def _persist(
        self,
        character: Character,
        session: Optional[GameSession],
        operations: Sequence[Operation] = (),
    ) -> None:
        if self.atomic_state_persistor is not None:
            self.atomic_state_persistor(character, session, list(operations))
            return
        self.character_repo.save(character)
        if session is not None:
            self.session_repo.save(session)
        for operation in operations:
            operation(None)

    def _battle_operation(self, record: BattleLogRecord) -> Operation:
        return self.battle_log_repo.build_append_operation(record)

    def _message_operation(
        self,
        session: Optional[GameSession],
        message: str,
        kind: str,
        year: int,
        month: int,
        changes: Iterable[StatChange],
    ) -> list[Operation]:
        if self.message_log_repo is None or session is None or session.id is None:
            return []
        entry = MessageLogEntry(
            session_id=session.id,
            message=message,
            kind=kind,
            year=year,
            month=month,
            stat_changes_json=_changes_json(changes),
        )
        return [self.message_log_repo.build_append_operation(entry)]

    # Session lifecycle

    def create_session(
        self,
        name: str,
        character_name: str,
        character_class: CharacterClass | str,
        storybook_ids: Iterable[int] = (),
    ) -> GameStateView:
        session, _ = self.session_service.create_session(name, character_name, character_class, storybook_ids)
        return self.session_service.get_state(session.id)

    def get_state(self, session_id: int) -> GameStateView:
        return self.session_service.get_state(session_id)

    def list_sessions(self) -> list[GameSession]:
        return self.session_repo.list_all()

    def list_storybooks(self) -> list[Storybook]:
        return self.storybook_repo.list_all()

    def list_training(self, character_id: int) -> list[TrainingScenarioView]:
        return self.training_service.list_available(self._require_character(character_id))

    def list_enemies(self, character_id: int) -> list[EnemyView]:
        return self.battle_service.list_available_enemies(self._require_character(character_id))

    def list_events(self, character_id: int, action: ActionType | str) -> list[RandomEventView]:
        parsed = ActionType.parse(action)
        if parsed is None:
            return []
        return self.event_service.list_available_events(self._require_character(character_id), parsed)

    def battle_history(self, character_id: int) -> list[BattleLogRecord]:
        return self.battle_log_repo.list_for_character(int(character_id))

    # Engine operations

    def resolve_turn(self, session_id: int, action: ActionType | str, target_id: Optional[int] = None) -> TurnResult:
        session, character = self.session_service.load(session_id)
        year, month, turn = character.current_year, character.current_month, character.total_turns
        result = self.turn_service.resolve_turn(session, character, action, target_id)
        if result.character is None:
            return result

        operations: list[Operation] = []
        if result.battle is not None and result.battle.result != BattleResult.FLED:
            record = battle_log_record(character, result.battle.enemy.id, result.battle)
            operations.append(self._battle_operation(replace(record, year=year, month=month, turn=turn)))
        operations.extend(self._message_operation(session, result.narrative, "action", year, month, result.stat_changes))
        self._persist(character, session, operations)
        logger.info(
            "Turn resolved",
            extra={
                "session_id": session.id,
                "action": result.action,
                "success": result.success,
                "turn": character.total_turns,
            },
        )
        return result

    def resolve_training(self, character_id: int, scenario_id: int) -> TrainingResult:
        character = self._require_character(character_id)
        result = self.training_service.resolve_training(character, scenario_id)
        if result.energy_spent:
            self._persist(character, self._session_for(character))
        return result

    def resolve_battle(self, character_id: int, enemy_id: Optional[int] = None) -> BattleOutcome:
        character = self._require_character(character_id)
        outcome = self.battle_service.resolve_battle(character, enemy_id)
        if outcome.result == BattleResult.FLED:
            return outcome
        record = battle_log_record(character, outcome.enemy.id, outcome)
        self._persist(character, self._session_for(character), [self._battle_operation(record)])
        return outcome

    def resolve_event_choice(self, character_id: int, event_id: int, choice_id: int) -> EventChoiceResult:
        character = self._require_character(character_id)
        result = self.event_service.process_choice(character, event_id, choice_id)
        if not result.success:
            return result
        session = self._session_for(character)
        operations: list[Operation] = [
            self.game_event_repo.build_append_operation(game_event_record(character, event_id, choice_id, result))
        ]
        kind = "negative" if result.check_succeeded is False else "positive"
        operations.extend(
            self._message_operation(
                session,
                result.narrative,
                kind,
                character.current_year,
                character.current_month,
                result.stat_changes,
            )
        )
        self._persist(character, session, operations)
        return result

    # Loadout

    def equip_storybook(self, character_id: int, storybook_id: int, slot: int) -> LoadoutResult:
        character = self._require_character(character_id)
        result = self.loadout_service.equip(character, storybook_id, slot)
        if result.success:
            self._persist(character, self._session_for(character))
        return result

    def unequip_storybook(self, character_id: int, slot: int) -> LoadoutResult:
        character = self._require_character(character_id)
        result = self.loadout_service.unequip(character, slot)
        if result.success:
            self._persist(character, self._session_for(character))
        return result

    def set_loadout(self, character_id: int, entries: Iterable[tuple[int, int]]) -> LoadoutResult:
        character = self._require_character(character_id)
        result = self.loadout_service.set_loadout(character, entries)
        if result.success:
            self._persist(character, self._session_for(character))
        return result
