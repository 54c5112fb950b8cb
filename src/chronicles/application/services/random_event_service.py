from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, TypeVar

from chronicles.application.dtos import EventChoiceResult, RandomEventView, StatChange
from chronicles.application.errors import NotFoundError
from chronicles.application.mappers.view_mapper import to_event_view
from chronicles.application.services.balance_tables import (
    EVENT_LUCK_DIVISOR,
    RARITY_WEIGHT_BOOST,
    STORYBOOK_EVENT_WEIGHT_FACTOR,
)
from chronicles.application.services.bonus_skills import effective_luck
from chronicles.application.services.random_source import RandomSource
from chronicles.application.services.stat_effects import (
    apply_resource_delta,
    apply_stat_delta,
    summarize_changes,
)
from chronicles.domain.events import SkillGranted
from chronicles.domain.models.character import Character
from chronicles.domain.models.event import ActionType, ChoicePayload, RandomEvent
from chronicles.domain.models.history import GameEventRecord
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.repositories import RandomEventRepository, SkillRepository, StorybookRepository


logger = logging.getLogger(__name__)

T = TypeVar("T")

CHOICE_LOCKED = "You do not meet the requirements for that choice."


def weighted_pick(rng: RandomSource, weighted: Sequence[tuple[T, float]]) -> Optional[T]:
    """Cumulative-weight roulette in list order; the first entry whose running sum exceeds the draw wins."""
    total = sum(weight for _, weight in weighted)
    if not weighted or total <= 0:
        return None
    roll = rng.uniform_float01() * total
    cumulative = 0.0
    for item, weight in weighted:
        cumulative += weight
        if roll < cumulative:
            return item
    return None


class RandomEventService:
    def __init__(
        self,
        event_repo: RandomEventRepository,
        rng: RandomSource,
        *,
        storybook_repo: Optional[StorybookRepository] = None,
        skill_repo: Optional[SkillRepository] = None,
        event_publisher=None,
    ) -> None:
        self.event_repo = event_repo
        self.storybook_repo = storybook_repo
        self.skill_repo = skill_repo
        self._rng = rng
        self._event_publisher = event_publisher

    def _storybook(self, character: Character, storybook_id: int) -> Optional[Storybook]:
        for storybook in character.equipped_storybooks():
            if storybook.id == storybook_id:
                return storybook
        if self.storybook_repo is not None:
            return self.storybook_repo.get(storybook_id)
        return None

    def _skill_names(self, events: Iterable[RandomEvent]) -> dict[int, str]:
        names: dict[int, str] = {}
        if self.skill_repo is None:
            return names
        for event in events:
            for choice in event.choices:
                for payload in (choice.success, choice.failure):
                    skill_id = getattr(payload, "grant_skill_id", None)
                    if skill_id is None or skill_id in names:
                        continue
                    skill = self.skill_repo.get(skill_id)
                    if skill is not None:
                        names[skill_id] = skill.name
        return names

    def to_view(self, event: RandomEvent, character: Character) -> RandomEventView:
        source = None
        if event.storybook_id is not None:
            storybook = self._storybook(character, event.storybook_id)
            source = storybook.name if storybook is not None else None
        return to_event_view(event, character, source_storybook=source, skill_names=self._skill_names([event]))

    def event_weight(self, event: RandomEvent, character: Character, *, prefer_higher_rarity: bool = False) -> float:
        weight = float(event.base_probability)
        if event.storybook_id is not None:
            storybook = self._storybook(character, event.storybook_id)
            if storybook is not None:
                weight *= storybook.event_trigger_chance * STORYBOOK_EVENT_WEIGHT_FACTOR
        weight *= 1.0 + effective_luck(character) / EVENT_LUCK_DIVISOR
        if prefer_higher_rarity:
            weight *= RARITY_WEIGHT_BOOST.get(event.rarity, 1.0)
        return weight

    def eligible_events(
        self,
        character: Character,
        action: ActionType,
        equipped_item_ids: Optional[Iterable[int]] = None,
    ) -> list[RandomEvent]:
        item_ids = list(character.equipped_storybook_ids() if equipped_item_ids is None else equipped_item_ids)
        candidates = self.event_repo.list_eligible(action, character.season, item_ids)
        return [event for event in candidates if event.requirements.is_met_by(character)]

    def select_event(
        self,
        character: Character,
        action: ActionType,
        equipped_item_ids: Optional[Iterable[int]] = None,
        *,
        prefer_higher_rarity: bool = False,
    ) -> Optional[RandomEvent]:
        eligible = self.eligible_events(character, action, equipped_item_ids)
        if not eligible:
            return None
        weighted = [
            (event, self.event_weight(event, character, prefer_higher_rarity=prefer_higher_rarity))
            for event in eligible
        ]
        return weighted_pick(self._rng, weighted)

    def try_trigger_event(
        self,
        character: Character,
        action: ActionType,
        equipped_item_ids: Optional[Iterable[int]] = None,
        *,
        prefer_higher_rarity: bool = False,
    ) -> Optional[RandomEventView]:
        selected = self.select_event(
            character,
            action,
            equipped_item_ids,
            prefer_higher_rarity=prefer_higher_rarity,
        )
        if selected is None:
            return None
        full_event = self.event_repo.get(selected.id) or selected
        logger.info(
            "Random event triggered",
            extra={"character_id": character.id, "event_id": full_event.id, "action": action.value},
        )
        return self.to_view(full_event, character)

    def list_available_events(self, character: Character, action: ActionType) -> list[RandomEventView]:
        return [self.to_view(event, character) for event in self.eligible_events(character, action)]

    def _apply_payload(self, character: Character, payload: ChoicePayload, *, include_experience: bool) -> list[StatChange]:
        changes: list[StatChange] = []
        for stat in StatType:
            change = apply_stat_delta(character, stat, payload.stat_delta(stat))
            if change is not None:
                changes.append(change)
        resources = [("Energy", payload.energy), ("Health", payload.health), ("Gold", payload.gold), ("Reputation", payload.reputation)]
        if include_experience:
            resources.append(("Experience", payload.experience))
        for name, delta in resources:
            change = apply_resource_delta(character, name, delta)
            if change is not None:
                changes.append(change)
        return changes

    def _grant_skill(self, character: Character, skill_id: Optional[int], event_title: str) -> Optional[str]:
        if skill_id is None or self.skill_repo is None or character.has_skill(skill_id):
            return None
        skill = self.skill_repo.get(skill_id)
        if skill is None:
            logger.debug("Skill grant skipped for unknown skill", extra={"skill_id": skill_id})
            return None
        source = f"Event: {event_title}"
        if not character.grant_skill(skill, source=source, turn=character.total_turns):
            return None
        if self._event_publisher is not None:
            self._event_publisher(
                SkillGranted(
                    character_id=character.id,
                    skill_id=skill.id,
                    skill_name=skill.name,
                    source=source,
                    turn=character.total_turns,
                )
            )
        return skill.name

    def process_choice(self, character: Character, event_id: int, choice_id: int) -> EventChoiceResult:
        event = self.event_repo.get(int(event_id))
        if event is None:
            raise NotFoundError("Event", event_id)
        choice = event.find_choice(choice_id)
        if choice is None:
            raise NotFoundError("Choice", choice_id)
        if not choice.requirements.is_met_by(character):
            return EventChoiceResult(success=False, narrative=CHOICE_LOCKED, check_difficulty=int(choice.check_difficulty))

        check_succeeded: Optional[bool] = None
        roll_result: Optional[int] = None
        if choice.has_check and choice.check_stat is not None:
            roll_result = self._rng.dice_sum(100)
            check_succeeded = roll_result + character.get_stat(choice.check_stat) // 10 >= int(choice.check_difficulty)

        if check_succeeded is False:
            payload = choice.failure_payload()
            description = payload.description
            changes = self._apply_payload(character, payload, include_experience=False)
        else:
            payload = choice.success
            description = payload.description
            changes = self._apply_payload(character, payload, include_experience=True)

        granted = self._grant_skill(character, payload.grant_skill_id, event.title)
        if granted:
            description += f" You learned the skill: {granted}!"

        follow_up_view = None
        if choice.follow_up_event_id is not None:
            follow_up = self.event_repo.get(choice.follow_up_event_id)
            if follow_up is not None:
                follow_up_view = self.to_view(follow_up, character)

        return EventChoiceResult(
            success=True,
            narrative=description,
            stat_changes=tuple(changes),
            check_succeeded=check_succeeded,
            roll_result=roll_result,
            check_difficulty=int(choice.check_difficulty),
            follow_up_event=follow_up_view,
            trigger_battle_id=choice.trigger_battle_id,
            granted_skill=granted,
        )


def game_event_record(character: Character, event_id: int, choice_id: int, result: EventChoiceResult) -> GameEventRecord:
    return GameEventRecord(
        character_id=character.id,
        event_id=int(event_id),
        choice_id=int(choice_id),
        year=character.current_year,
        month=character.current_month,
        turn=character.total_turns,
        check_succeeded=result.check_succeeded,
        roll_result=result.roll_result,
        result_summary=summarize_changes(result.stat_changes),
    )
