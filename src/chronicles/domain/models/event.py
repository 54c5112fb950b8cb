from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.rarity import Rarity
from chronicles.domain.models.requirements import NO_REQUIREMENTS, StatRequirements
from chronicles.domain.models.stats import StatType


DEFAULT_FAILURE_DESCRIPTION = "Your attempt failed."
DEFAULT_BASE_PROBABILITY = 0.1


class ActionType(str, Enum):
    TRAIN = "Train"
    REST = "Rest"
    EXPLORE = "Explore"
    BATTLE = "Battle"
    STUDY = "Study"

    @classmethod
    def parse(cls, raw: object) -> Optional["ActionType"]:
        if isinstance(raw, ActionType):
            return raw
        text = str(raw or "").strip().lower()
        for action in cls:
            if action.value.lower() == text:
                return action
        return None


class EventOutcome(str, Enum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class ChoicePayload:
    description: str = ""
    strength: int = 0
    agility: int = 0
    intelligence: int = 0
    endurance: int = 0
    charisma: int = 0
    luck: int = 0
    energy: int = 0
    health: int = 0
    gold: int = 0
    reputation: int = 0
    experience: int = 0
    grant_skill_id: Optional[int] = None

    def stat_delta(self, stat: StatType) -> int:
        return int(getattr(self, stat.attribute, 0) or 0)


@dataclass(frozen=True)
class EventChoice:
    id: int
    text: str
    success: ChoicePayload = field(default_factory=ChoicePayload)
    failure: Optional[ChoicePayload] = None
    check_stat: Optional[StatType] = None
    check_difficulty: int = 0
    requirements: StatRequirements = NO_REQUIREMENTS
    follow_up_event_id: Optional[int] = None
    trigger_battle_id: Optional[int] = None
    display_order: int = 0

    @property
    def has_check(self) -> bool:
        return self.check_stat is not None and int(self.check_difficulty) > 0

    def failure_payload(self) -> ChoicePayload:
        if self.failure is not None:
            return self.failure
        return ChoicePayload(description=DEFAULT_FAILURE_DESCRIPTION)


@dataclass(frozen=True)
class RandomEvent:
    id: int
    title: str
    description: str = ""
    storybook_id: Optional[int] = None
    rarity: Rarity = Rarity.COMMON
    outcome: EventOutcome = EventOutcome.NEUTRAL
    trigger_actions: tuple[ActionType, ...] = field(default_factory=tuple)
    trigger_seasons: tuple[Season, ...] = field(default_factory=tuple)
    base_probability: float = DEFAULT_BASE_PROBABILITY
    requirements: StatRequirements = NO_REQUIREMENTS
    choices: tuple[EventChoice, ...] = field(default_factory=tuple)
    is_active: bool = True

    def triggers_on(self, action: ActionType, season: Season) -> bool:
        if action not in self.trigger_actions:
            return False
        return not self.trigger_seasons or season in self.trigger_seasons

    def available_with(self, equipped_storybook_ids) -> bool:
        return self.storybook_id is None or self.storybook_id in set(equipped_storybook_ids or ())

    def find_choice(self, choice_id: int) -> Optional[EventChoice]:
        for choice in self.choices:
            if choice.id == int(choice_id):
                return choice
        return None

    def ordered_choices(self) -> list[EventChoice]:
        return sorted(self.choices, key=lambda choice: (choice.display_order, choice.id))


def parse_action_list(raw) -> tuple[ActionType, ...]:
    if raw is None:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    actions: list[ActionType] = []
    for part in parts:
        action = ActionType.parse(part)
        if action is not None and action not in actions:
            actions.append(action)
    return tuple(actions)
