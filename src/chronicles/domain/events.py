from dataclasses import dataclass
from typing import Optional


@dataclass
class TurnAdvanced:
    character_id: Optional[int]
    action: str
    turn_after: int
    year: int
    month: int


@dataclass
class LevelUpApplied:
    character_id: Optional[int]
    from_level: int
    to_level: int
    max_health: int
    max_energy: int


@dataclass
class BattleConcluded:
    character_id: Optional[int]
    enemy_id: int
    result: str
    rounds: int
    turn: int


@dataclass
class SkillGranted:
    character_id: Optional[int]
    skill_id: int
    skill_name: str
    source: str
    turn: int


@dataclass
class GameCompleted:
    session_id: Optional[int]
    character_id: Optional[int]
    final_score: int
    ending: str
