from __future__ import annotations

import logging
from typing import Iterable, Optional

from chronicles.application.dtos import FinalSummary, GameStateView, SeasonInfoView
from chronicles.application.errors import NotFoundError
from chronicles.application.mappers.view_mapper import to_character_view
from chronicles.application.services.narrative_tables import SEASON_DESCRIPTIONS
from chronicles.application.services.progression_service import ProgressionService
from chronicles.application.services.training_service import TrainingService
from chronicles.domain.models.character import LOADOUT_SLOTS, Character, CharacterClass
from chronicles.domain.models.event import ActionType
from chronicles.domain.models.session import GameSession, GameState
from chronicles.domain.repositories import (
    BattleLogRepository,
    CharacterRepository,
    GameSessionRepository,
    StorybookRepository,
)


logger = logging.getLogger(__name__)


class SessionService:
    def __init__(
        self,
        session_repo: GameSessionRepository,
        character_repo: CharacterRepository,
        *,
        storybook_repo: Optional[StorybookRepository] = None,
        battle_logs: Optional[BattleLogRepository] = None,
        progression: Optional[ProgressionService] = None,
        training: Optional[TrainingService] = None,
    ) -> None:
        self.session_repo = session_repo
        self.character_repo = character_repo
        self.storybook_repo = storybook_repo
        self.battle_logs = battle_logs
        self.progression = progression or ProgressionService()
        self.training = training

    def load(self, session_id: int) -> tuple[GameSession, Character]:
        session = self.session_repo.get(int(session_id))
        if session is None:
            raise NotFoundError("Session", session_id)
        if session.character_id is None:
            raise NotFoundError("Character", None)
        character = self.character_repo.get(session.character_id)
        if character is None:
            raise NotFoundError("Character", session.character_id)
        return session, character

    def create_session(
        self,
        name: str,
        character_name: str,
        character_class: CharacterClass | str,
        storybook_ids: Iterable[int] = (),
    ) -> tuple[GameSession, Character]:
        character = Character.for_class(character_name, CharacterClass.parse(character_class))
        for slot, storybook_id in zip(LOADOUT_SLOTS, storybook_ids):
            storybook = self.storybook_repo.get(int(storybook_id)) if self.storybook_repo is not None else None
            if storybook is None:
                raise NotFoundError("Storybook", storybook_id)
            character.equip_storybook(storybook, slot)
            for stat, bonus in storybook.stat_bonuses().items():
                character.add_stat(stat, bonus)

        session = self.session_repo.create(GameSession(id=None, name=name))
        character.session_id = session.id
        character = self.character_repo.create(character)
        session.character_id = character.id
        session.start()
        self.session_repo.save(session)
        logger.info(
            "Session created",
            extra={"session_id": session.id, "character_id": character.id, "class": character.character_class.value},
        )
        return session, character

    def victory_count(self, character: Character) -> int:
        if self.battle_logs is None or character.id is None:
            return 0
        return self.battle_logs.victory_count(character.id)

    def get_state(self, session_id: int) -> GameStateView:
        session, character = self.load(session_id)
        finished = session.is_finished or character.is_game_complete
        final_summary = None
        if session.state == GameState.COMPLETED and session.final_score is not None:
            final_summary = FinalSummary(
                final_score=int(session.final_score),
                ending=session.ending or "",
                victories=self.victory_count(character),
            )
        training = tuple(self.training.list_available(character)) if self.training is not None and not finished else ()
        return GameStateView(
            session_id=session.id,
            session_name=session.name,
            state=session.state.value,
            character=to_character_view(
                character,
                experience_for_next_level=self.progression.experience_for_next_level(character),
            ),
            season=SeasonInfoView(character.season.value, SEASON_DESCRIPTIONS[character.season]),
            available_actions=() if finished else tuple(action.value for action in ActionType),
            training=training,
            final_summary=final_summary,
        )
