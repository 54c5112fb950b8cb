from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from chronicles.domain.models.rarity import Rarity
from chronicles.domain.models.stats import StatType


class SkillType(str, Enum):
    PASSIVE = "Passive"
    ACTIVE = "Active"
    BONUS = "Bonus"


class PassiveEffect(str, Enum):
    EVASION = "Evasion"
    CRITICAL_CHANCE = "CriticalChance"
    DAMAGE_REDUCTION = "DamageReduction"
    LIFE_STEAL = "LifeSteal"
    COUNTER_ATTACK = "CounterAttack"
    THORNS = "Thorns"


class BonusEffect(str, Enum):
    GOLD_GAIN = "GoldGain"
    EXPERIENCE_GAIN = "ExperienceGain"
    ENERGY_GAIN = "EnergyGain"
    HEALTH_REGEN = "HealthRegen"
    LUCK_BOOST = "LuckBoost"
    TRAINING_BOOST = "TrainingBoost"


@dataclass(frozen=True)
class PassiveSkill:
    id: int
    name: str
    effect: PassiveEffect
    value: float
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    kind: SkillType = SkillType.PASSIVE

    def __post_init__(self) -> None:
        if float(self.value) < 0:
            raise ValueError("Passive skill value cannot be negative")


@dataclass(frozen=True)
class ActiveSkill:
    id: int
    name: str
    trigger_chance: float
    base_damage: int
    scaling_stat: StatType
    scaling_multiplier: float
    narrative: str = ""
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    kind: SkillType = SkillType.ACTIVE

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.trigger_chance) <= 1.0:
            raise ValueError("Active skill trigger chance must be within [0, 1]")


@dataclass(frozen=True)
class BonusSkill:
    id: int
    name: str
    effect: BonusEffect
    percentage: float = 0.0
    flat_value: int = 0
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    kind: SkillType = SkillType.BONUS


Skill = Union[PassiveSkill, ActiveSkill, BonusSkill]
