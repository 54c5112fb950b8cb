from __future__ import annotations

from dataclasses import dataclass, field

from chronicles.domain.models.calendar import Season


MIN_TIER = 1
MAX_TIER = 10


@dataclass(frozen=True)
class EnemyTemplate:
    id: int
    name: str
    strength: int
    agility: int
    intelligence: int
    endurance: int
    health: int
    difficulty_tier: int = 1
    description: str = ""
    enemy_type: str = "Creature"
    experience_reward: int = 0
    gold_reward: int = 0
    reputation_reward: int = 0
    seasons: tuple[Season, ...] = field(default_factory=tuple)
    abilities: tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True

    def __post_init__(self) -> None:
        if not MIN_TIER <= int(self.difficulty_tier) <= MAX_TIER:
            raise ValueError(f"Enemy tier must be between {MIN_TIER} and {MAX_TIER}")
        if int(self.health) <= 0:
            raise ValueError("Enemy health must be positive")

    @property
    def power(self) -> int:
        return self.strength + self.agility + self.intelligence + self.endurance

    def appears_in(self, season: Season) -> bool:
        return not self.seasons or season in self.seasons
