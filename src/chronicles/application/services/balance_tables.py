from __future__ import annotations

from chronicles.domain.models.character import CharacterClass
from chronicles.domain.models.rarity import Rarity
from chronicles.domain.models.stats import StatType


MAX_LEVEL = 50
LEVEL_XP_FACTOR = 50
LEVEL_UP_MAX_HEALTH_GAIN = 10
LEVEL_UP_MAX_ENERGY_GAIN = 5

BATTLE_ENERGY_COST = 15
BATTLE_TIME_LIMIT_MS = 60_000
BASE_ATTACK_INTERVAL_MS = 5_000
MIN_ATTACK_INTERVAL_MS = 500
CRITICAL_MULTIPLIER = 1.5
DEFENSE_DIVISOR = 5
DAMAGE_REDUCTION_CAP_PERCENT = 75.0
PLAYER_DAMAGE_SCALE = 0.3
PLAYER_DAMAGE_BONUS_RANGE = (5, 15)
ENEMY_DAMAGE_SCALE = 0.25
ENEMY_DAMAGE_BONUS_RANGE = (3, 12)
TIER_EXPERIENCE_BONUS = 0.1
OVERLEVEL_TIER_MARGIN = 2
OVERLEVEL_EXPERIENCE_FACTOR = 0.5

REST_ENERGY_BASE = 50
REST_ENERGY_BONUS_RANGE = (0, 21)
REST_HEALTH_BASE = 15
REST_HEALTH_ENDURANCE_DIVISOR = 25
REST_EVENT_CHANCE = 0.15
TRAIN_EVENT_CHANCE = 0.25

EXPLORE_GOLD_RANGE = (5, 16)
EXPLORE_GOLD_LUCK_DIVISOR = 20
EXPLORE_STAT_GAIN_CHANCE = 0.20
EXPLORE_STAT_GAIN = 1

STUDY_ENERGY_COST = 10
STUDY_BASE_GAIN = 2
STUDY_GAIN_RANGE = (0, 3)
STUDY_EXPERIENCE = 10
STUDY_SEASONAL_MULTIPLIER = 1.2

MINI_EVENT_CHANCE = 0.20
MINI_EVENT_POSITIVE_CHANCE = 0.70

TRAINING_VARIANCE = 0.25
TRAINING_BONUS_LUCK_DIVISOR = 1000.0
EVENT_LUCK_DIVISOR = 500.0
CRITICAL_LUCK_DIVISOR = 500.0
STORYBOOK_EVENT_WEIGHT_FACTOR = 2.0

RARITY_WEIGHT_BOOST = {
    Rarity.COMMON: 1.0,
    Rarity.UNCOMMON: 1.5,
    Rarity.RARE: 2.0,
    Rarity.EPIC: 2.5,
    Rarity.LEGENDARY: 3.0,
}

COMBAT_POWER_WEIGHTS = {
    CharacterClass.WARRIOR: {StatType.STRENGTH: 1.5, StatType.ENDURANCE: 1.3},
    CharacterClass.MAGE: {StatType.INTELLIGENCE: 1.5, StatType.AGILITY: 1.2},
    CharacterClass.ROGUE: {StatType.AGILITY: 1.5, StatType.STRENGTH: 1.2},
    CharacterClass.CLERIC: {StatType.INTELLIGENCE: 1.3, StatType.ENDURANCE: 1.3},
    CharacterClass.RANGER: {StatType.AGILITY: 1.4, StatType.STRENGTH: 1.3},
}
COMBAT_POWER_LUCK_WEIGHT = 0.5

ENDING_LADDER: tuple[tuple[int, int, str], ...] = (
    (500, 100, "Legendary Hero"),
    (400, 0, "Renowned Champion"),
    (300, 0, "Accomplished Adventurer"),
    (200, 0, "Seasoned Traveler"),
)
DEFAULT_ENDING = "Humble Wanderer"


def xp_required_for_level(level: int) -> int:
    normalized = max(1, int(level))
    return normalized * normalized * LEVEL_XP_FACTOR


def attack_interval_ms(agility: int) -> int:
    return max(MIN_ATTACK_INTERVAL_MS, int(BASE_ATTACK_INTERVAL_MS / (1 + max(0, int(agility)) / 100)))


def rest_health_gain(endurance: int) -> int:
    return REST_HEALTH_BASE + max(0, int(endurance)) // REST_HEALTH_ENDURANCE_DIVISOR


def random_battle_tier_range(level: int) -> tuple[int, int]:
    return max(1, int(level) // 2), min(10, int(level) + 2)


def eligible_enemy_tier_range(level: int) -> tuple[int, int]:
    return int(level) - 2, int(level) + 3
