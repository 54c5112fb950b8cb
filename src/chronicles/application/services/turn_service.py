from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from chronicles.application.dtos import (
    BattleOutcome,
    FinalSummary,
    RandomEventView,
    StatChange,
    TrainingResult,
    TurnResult,
)
from chronicles.application.errors import InvalidActionError
from chronicles.application.mappers.view_mapper import to_character_view
from chronicles.application.services.balance_tables import (
    EXPLORE_GOLD_LUCK_DIVISOR,
    EXPLORE_GOLD_RANGE,
    EXPLORE_STAT_GAIN,
    EXPLORE_STAT_GAIN_CHANCE,
    REST_ENERGY_BASE,
    REST_ENERGY_BONUS_RANGE,
    REST_EVENT_CHANCE,
    STUDY_BASE_GAIN,
    STUDY_ENERGY_COST,
    STUDY_EXPERIENCE,
    STUDY_GAIN_RANGE,
    STUDY_SEASONAL_MULTIPLIER,
    TRAIN_EVENT_CHANCE,
    rest_health_gain,
)
from chronicles.application.services.battle_service import BattleService
from chronicles.application.services.bonus_skills import apply_bonus, apply_health_regen
from chronicles.application.services.mini_event_service import MiniEventService
from chronicles.application.services.narrative_tables import (
    EXPLORE_GOLD_NARRATIVE,
    EXPLORE_NARRATIVES,
    EXPLORE_STAT_NARRATIVE,
    JOURNEY_ENDED,
    REST_NARRATIVES,
    STUDY_NARRATIVES,
)
from chronicles.application.services.progression_service import ProgressionService
from chronicles.application.services.random_event_service import RandomEventService
from chronicles.application.services.random_source import RandomSource
from chronicles.application.services.stat_effects import apply_resource_delta, apply_stat_delta
from chronicles.application.services.training_service import TrainingService
from chronicles.domain.events import GameCompleted, TurnAdvanced
from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import Character
from chronicles.domain.models.event import ActionType
from chronicles.domain.models.history import BattleResult
from chronicles.domain.models.session import GameSession
from chronicles.domain.models.skill import BonusEffect
from chronicles.domain.models.stats import StatType
from chronicles.domain.repositories import BattleLogRepository


logger = logging.getLogger(__name__)

NO_SCENARIO_SELECTED = "No training scenario selected."
NOT_ENOUGH_ENERGY_TO_STUDY = "Not enough energy to study. Rest first."
STUDY_BONUS_SEASONS = (Season.AUTUMN, Season.WINTER)


@dataclass
class _ActionOutcome:
    success: bool
    narrative: str
    changes: list[StatChange] = field(default_factory=list)
    event: Optional[RandomEventView] = None
    battle: Optional[BattleOutcome] = None
    training: Optional[TrainingResult] = None


class TurnService:
    def __init__(
        self,
        rng: RandomSource,
        *,
        training: TrainingService,
        battles: BattleService,
        events: RandomEventService,
        progression: Optional[ProgressionService] = None,
        mini_events: Optional[MiniEventService] = None,
        battle_logs: Optional[BattleLogRepository] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self._rng = rng
        self.training = training
        self.battles = battles
        self.events = events
        self.progression = progression or ProgressionService(event_publisher=event_publisher)
        self.mini_events = mini_events
        self.battle_logs = battle_logs
        self.event_publisher = event_publisher

    def _publish(self, event: object) -> None:
        if self.event_publisher is not None:
            self.event_publisher(event)

    def resolve_turn(
        self,
        session: GameSession,
        character: Character,
        action: ActionType,
        target_id: Optional[int] = None,
    ) -> TurnResult:
        parsed = ActionType.parse(action)
        if parsed is None:
            raise InvalidActionError(action)
        action = parsed
        if character.is_game_complete or session.is_finished:
            return TurnResult(success=False, narrative=JOURNEY_ENDED, action=action.value)

        handler = {
            ActionType.TRAIN: self._train,
            ActionType.REST: self._rest,
            ActionType.EXPLORE: self._explore,
            ActionType.BATTLE: self._battle,
            ActionType.STUDY: self._study,
        }[action]
        outcome = handler(character, target_id)

        if not outcome.success:
            return TurnResult(
                success=False,
                narrative=outcome.narrative,
                action=action.value,
                stat_changes=tuple(outcome.changes),
                battle=outcome.battle,
                training=outcome.training,
                character=self._view(character),
            )

        lines = [outcome.narrative]
        regen_changes, regen_lines = apply_health_regen(character)
        outcome.changes.extend(regen_changes)
        lines.extend(regen_lines)

        if self.mini_events is not None:
            mini = self.mini_events.maybe_trigger(character)
            if mini is not None:
                outcome.changes.append(mini.stat_change)
                lines.append(mini.narrative)

        character.advance_turn()
        self._publish(
            TurnAdvanced(
                character_id=character.id,
                action=action.value,
                turn_after=character.total_turns,
                year=character.current_year,
                month=character.current_month,
            )
        )

        final_summary: Optional[FinalSummary] = None
        completed = False
        if character.is_game_complete:
            final_summary = self._complete(session, character, outcome.battle)
            completed = final_summary is not None

        return TurnResult(
            success=True,
            narrative=" ".join(line for line in lines if line),
            action=action.value,
            stat_changes=tuple(outcome.changes),
            triggered_event=outcome.event,
            battle=outcome.battle,
            training=outcome.training,
            character=self._view(character),
            turn_advanced=True,
            game_completed=completed,
            final_summary=final_summary,
        )

    def _view(self, character: Character):
        return to_character_view(character, experience_for_next_level=self.progression.experience_for_next_level(character))

    def _complete(self, session: GameSession, character: Character, battle: Optional[BattleOutcome]) -> Optional[FinalSummary]:
        victories = 0
        if self.battle_logs is not None and character.id is not None:
            victories = self.battle_logs.victory_count(character.id)
        if battle is not None and battle.result == BattleResult.VICTORY:
            victories += 1
        summary = self.progression.build_final_summary(character, victories)
        if not session.complete(final_score=summary.final_score, ending=summary.ending):
            return None
        logger.info(
            "Journey completed",
            extra={"session_id": session.id, "final_score": summary.final_score, "ending": summary.ending},
        )
        self._publish(
            GameCompleted(
                session_id=session.id,
                character_id=character.id,
                final_score=summary.final_score,
                ending=summary.ending,
            )
        )
        return summary

    def _train(self, character: Character, target_id: Optional[int]) -> _ActionOutcome:
        if target_id is None:
            return _ActionOutcome(False, NO_SCENARIO_SELECTED)
        result = self.training.resolve_training(character, int(target_id))
        outcome = _ActionOutcome(result.success, result.narrative, list(result.stat_changes), training=result)
        if result.success and self._rng.chance(TRAIN_EVENT_CHANCE):
            outcome.event = self.events.try_trigger_event(character, ActionType.TRAIN)
        return outcome

    def _rest(self, character: Character, target_id: Optional[int]) -> _ActionOutcome:
        low, high = REST_ENERGY_BONUS_RANGE
        energy_gain = apply_bonus(character, BonusEffect.ENERGY_GAIN, REST_ENERGY_BASE + self._rng.uniform_int(low, high))
        changes = [
            change
            for change in (
                apply_resource_delta(character, "Energy", energy_gain),
                apply_resource_delta(character, "Health", rest_health_gain(character.endurance)),
            )
            if change is not None
        ]
        outcome = _ActionOutcome(True, REST_NARRATIVES[character.season], changes)
        if self._rng.chance(REST_EVENT_CHANCE):
            outcome.event = self.events.try_trigger_event(character, ActionType.REST)
            if outcome.event is not None:
                outcome.narrative += f" During your rest, something unexpected happens: {outcome.event.title}"
        return outcome

    def _explore(self, character: Character, target_id: Optional[int]) -> _ActionOutcome:
        outcome = _ActionOutcome(True, EXPLORE_NARRATIVES[character.season])
        outcome.event = self.events.try_trigger_event(character, ActionType.EXPLORE, prefer_higher_rarity=True)
        if outcome.event is not None:
            outcome.narrative += f" You encounter: {outcome.event.title}"
            return outcome

        low, high = EXPLORE_GOLD_RANGE
        gold = apply_bonus(character, BonusEffect.GOLD_GAIN, self._rng.uniform_int(low, high) + int(character.luck) // EXPLORE_GOLD_LUCK_DIVISOR)
        change = apply_resource_delta(character, "Gold", gold)
        if change is not None:
            outcome.changes.append(change)
            outcome.narrative += " " + EXPLORE_GOLD_NARRATIVE.format(amount=change.change)

        if self._rng.chance(EXPLORE_STAT_GAIN_CHANCE):
            stat = self._rng.pick(tuple(StatType))
            change = apply_stat_delta(character, stat, EXPLORE_STAT_GAIN)
            if change is not None and change.change:
                outcome.changes.append(change)
                outcome.narrative += " " + EXPLORE_STAT_NARRATIVE.format(amount=change.change, stat=stat.value)
        return outcome

    def _battle(self, character: Character, target_id: Optional[int]) -> _ActionOutcome:
        battle = self.battles.resolve_battle(character, target_id)
        return _ActionOutcome(battle.success, battle.narrative, list(battle.stat_changes), battle=battle)

    def _study(self, character: Character, target_id: Optional[int]) -> _ActionOutcome:
        if character.current_energy < STUDY_ENERGY_COST:
            return _ActionOutcome(False, NOT_ENOUGH_ENERGY_TO_STUDY)
        changes = [apply_resource_delta(character, "Energy", -STUDY_ENERGY_COST)]
        low, high = STUDY_GAIN_RANGE
        gain = STUDY_BASE_GAIN + self._rng.uniform_int(low, high)
        if character.season in STUDY_BONUS_SEASONS:
            gain = int(gain * STUDY_SEASONAL_MULTIPLIER)
        changes.append(apply_stat_delta(character, StatType.INTELLIGENCE, gain))
        changes.append(apply_resource_delta(character, "Experience", STUDY_EXPERIENCE))
        narrative = f"{STUDY_NARRATIVES[character.season]} (+{gain} Intelligence)"
        return _ActionOutcome(True, narrative, [change for change in changes if change is not None])
