from __future__ import annotations

from dataclasses import dataclass

from chronicles.domain.models.stats import StatType


DEFAULT_EVENT_TRIGGER_CHANCE = 0.15


@dataclass(frozen=True)
class Storybook:
    id: int
    name: str
    description: str = ""
    theme: str = ""
    strength_bonus: int = 0
    agility_bonus: int = 0
    intelligence_bonus: int = 0
    endurance_bonus: int = 0
    charisma_bonus: int = 0
    luck_bonus: int = 0
    event_trigger_chance: float = DEFAULT_EVENT_TRIGGER_CHANCE
    is_unlockable: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.event_trigger_chance) <= 1.0:
            raise ValueError("Storybook event trigger chance must be within [0, 1]")

    def bonus_for(self, stat: StatType) -> int:
        return int(getattr(self, f"{stat.attribute}_bonus", 0) or 0)

    def stat_bonuses(self) -> dict[StatType, int]:
        return {stat: self.bonus_for(stat) for stat in StatType if self.bonus_for(stat)}
