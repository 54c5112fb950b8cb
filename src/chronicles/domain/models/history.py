from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BattleResult(str, Enum):
    VICTORY = "Victory"
    DEFEAT = "Defeat"
    DRAW = "Draw"
    FLED = "Fled"


@dataclass(frozen=True)
class BattleLogRecord:
    character_id: Optional[int]
    enemy_id: int
    result: BattleResult
    narrative: str
    rounds_count: int
    character_power: int
    enemy_power: int
    experience_gained: int
    gold_gained: int
    reputation_gained: int
    health_lost: int
    energy_spent: int
    year: int
    month: int
    turn: int


@dataclass(frozen=True)
class GameEventRecord:
    character_id: Optional[int]
    event_id: int
    choice_id: int
    year: int
    month: int
    turn: int
    check_succeeded: Optional[bool]
    roll_result: Optional[int]
    result_summary: str


@dataclass(frozen=True)
class MessageLogEntry:
    session_id: Optional[int]
    message: str
    kind: str
    year: int
    month: int
    stat_changes_json: Optional[str] = None
