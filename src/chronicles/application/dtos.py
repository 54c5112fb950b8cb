from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional

from chronicles.domain.models.history import BattleResult


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _plain(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _plain(val) for key, val in value.items()}
    return value


class _Serializable:
    def to_dict(self) -> dict[str, Any]:
        return _plain(self)


@dataclass(frozen=True)
class StatChange(_Serializable):
    name: str
    old_value: int
    new_value: int
    change: int


@dataclass(frozen=True)
class LevelUpSummary(_Serializable):
    leveled_up: bool
    old_level: int
    new_level: int
    old_max_health: int
    new_max_health: int
    old_max_energy: int
    new_max_energy: int


@dataclass(frozen=True)
class FinalSummary(_Serializable):
    final_score: int
    ending: str
    victories: int


@dataclass(frozen=True)
class TrainingResult(_Serializable):
    success: bool
    narrative: str
    stat_changes: tuple[StatChange, ...] = ()
    primary_gain: int = 0
    secondary_gain: int = 0
    tertiary_gain: int = 0
    bonus_triggered: bool = False
    injured: bool = False
    energy_spent: int = 0
    experience_gained: int = 0


@dataclass(frozen=True)
class EnemyView(_Serializable):
    id: int
    name: str
    description: str
    strength: int
    agility: int
    intelligence: int
    endurance: int
    health: int
    difficulty_tier: int
    enemy_type: str


@dataclass(frozen=True)
class BattleRound(_Serializable):
    index: int
    time_ms: int
    attacker: str
    action: str
    damage: int
    player_health: int
    enemy_health: int
    skill_name: Optional[str] = None
    critical: bool = False
    evaded: bool = False
    counter_damage: int = 0


@dataclass(frozen=True)
class BattleOutcome(_Serializable):
    result: BattleResult
    narrative: str
    rounds: tuple[BattleRound, ...]
    experience_gained: int
    gold_gained: int
    reputation_gained: int
    health_lost: int
    energy_spent: int
    enemy: EnemyView
    character_power: int = 0
    enemy_power: int = 0
    elapsed_ms: int = 0
    stat_changes: tuple[StatChange, ...] = ()
    level_up: Optional[LevelUpSummary] = None

    @property
    def success(self) -> bool:
        return self.result != BattleResult.FLED


@dataclass(frozen=True)
class ChoiceRewardsView(_Serializable):
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
    skill_name: Optional[str] = None


@dataclass(frozen=True)
class EventChoiceView(_Serializable):
    id: int
    text: str
    is_hidden: bool
    check_stat: Optional[str]
    check_difficulty: int
    requirement_hint: Optional[str]
    rewards: ChoiceRewardsView
    failure_rewards: Optional[ChoiceRewardsView] = None
    follow_up_event_id: Optional[int] = None


@dataclass(frozen=True)
class RandomEventView(_Serializable):
    id: int
    title: str
    description: str
    rarity: str
    outcome: str
    source_storybook: Optional[str]
    choices: tuple[EventChoiceView, ...] = ()


@dataclass(frozen=True)
class EventChoiceResult(_Serializable):
    success: bool
    narrative: str
    stat_changes: tuple[StatChange, ...] = ()
    check_succeeded: Optional[bool] = None
    roll_result: Optional[int] = None
    check_difficulty: int = 0
    follow_up_event: Optional[RandomEventView] = None
    trigger_battle_id: Optional[int] = None
    granted_skill: Optional[str] = None


@dataclass(frozen=True)
class StorybookView(_Serializable):
    id: int
    name: str
    theme: str
    slot: Optional[int]
    bonuses: dict[str, int] = field(default_factory=dict)
    event_trigger_chance: float = 0.0


@dataclass(frozen=True)
class CharacterView(_Serializable):
    id: Optional[int]
    name: str
    character_class: str
    strength: int
    agility: int
    intelligence: int
    endurance: int
    charisma: int
    luck: int
    current_energy: int
    max_energy: int
    current_health: int
    max_health: int
    level: int
    experience: int
    experience_for_next_level: int
    gold: int
    reputation: int
    current_year: int
    current_month: int
    total_turns: int
    season: str
    total_power: int
    is_game_complete: bool
    storybooks: tuple[StorybookView, ...] = ()
    skills: tuple[str, ...] = ()


@dataclass(frozen=True)
class TurnResult(_Serializable):
    success: bool
    narrative: str
    action: str
    stat_changes: tuple[StatChange, ...] = ()
    triggered_event: Optional[RandomEventView] = None
    battle: Optional[BattleOutcome] = None
    training: Optional[TrainingResult] = None
    character: Optional[CharacterView] = None
    turn_advanced: bool = False
    game_completed: bool = False
    final_summary: Optional[FinalSummary] = None


@dataclass(frozen=True)
class TrainingScenarioView(_Serializable):
    id: int
    name: str
    description: str
    primary_stat: str
    secondary_stat: Optional[str]
    tertiary_stat: Optional[str]
    base_stat_gain: int
    energy_cost: int
    bonus_chance: float
    experience_gain: int
    has_seasonal_bonus: bool


@dataclass(frozen=True)
class SeasonInfoView(_Serializable):
    season: str
    description: str


@dataclass(frozen=True)
class GameStateView(_Serializable):
    session_id: Optional[int]
    session_name: str
    state: str
    character: CharacterView
    season: SeasonInfoView
    available_actions: tuple[str, ...]
    training: tuple[TrainingScenarioView, ...] = ()
    final_summary: Optional[FinalSummary] = None


@dataclass(frozen=True)
class LoadoutResult(_Serializable):
    success: bool
    message: str
