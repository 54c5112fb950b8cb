from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.stats import StatType


@dataclass(frozen=True)
class TrainingScenario:
    id: int
    name: str
    primary_stat: StatType
    description: str = ""
    secondary_stat: Optional[StatType] = None
    tertiary_stat: Optional[StatType] = None
    base_stat_gain: int = 5
    secondary_stat_gain: int = 2
    tertiary_stat_gain: int = 1
    energy_cost: int = 20
    bonus_chance: float = 0.1
    bonus_stat_gain: int = 3
    failure_chance: float = 0.05
    failure_health_penalty: int = 10
    bonus_seasons: tuple[Season, ...] = field(default_factory=tuple)
    seasonal_bonus_multiplier: float = 1.2
    experience_gain: int = 10
    required_level: int = 1
    narrative: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        if int(self.energy_cost) < 0:
            raise ValueError("Energy cost cannot be negative")
        for label, probability in (("bonus", self.bonus_chance), ("failure", self.failure_chance)):
            if not 0.0 <= float(probability) <= 1.0:
                raise ValueError(f"Training {label} chance must be within [0, 1]")

    def seasonal_multiplier(self, season: Season) -> float:
        if season in self.bonus_seasons:
            return float(self.seasonal_bonus_multiplier)
        return 1.0
