from __future__ import annotations

from chronicles.application.dtos import FinalSummary, LevelUpSummary
from chronicles.application.services.balance_tables import (
    DEFAULT_ENDING,
    ENDING_LADDER,
    LEVEL_UP_MAX_ENERGY_GAIN,
    LEVEL_UP_MAX_HEALTH_GAIN,
    MAX_LEVEL,
    xp_required_for_level,
)
from chronicles.domain.events import LevelUpApplied
from chronicles.domain.models.character import Character
from chronicles.domain.models.progression import ExperiencePoints, Level


class ProgressionService:
    def __init__(self, event_publisher=None) -> None:
        self._event_publisher = event_publisher

    @staticmethod
    def experience_required_for_level(level: int) -> int:
        return xp_required_for_level(Level(int(level)).value)

    def experience_for_next_level(self, character: Character) -> int:
        if int(character.level) >= MAX_LEVEL:
            return 0
        return self.experience_required_for_level(int(character.level) + 1)

    def check_level_up(self, character: Character) -> LevelUpSummary:
        old_level = int(character.level)
        old_max_health = int(character.max_health)
        old_max_energy = int(character.max_energy)
        experience = ExperiencePoints(max(0, int(character.experience or 0)))

        required = self.experience_for_next_level(character)
        if old_level >= MAX_LEVEL or experience.value < required:
            return LevelUpSummary(
                leveled_up=False,
                old_level=old_level,
                new_level=old_level,
                old_max_health=old_max_health,
                new_max_health=old_max_health,
                old_max_energy=old_max_energy,
                new_max_energy=old_max_energy,
            )

        character.level = old_level + 1
        character.max_health = old_max_health + LEVEL_UP_MAX_HEALTH_GAIN
        character.max_energy = old_max_energy + LEVEL_UP_MAX_ENERGY_GAIN
        character.current_health = character.max_health
        character.current_energy = character.max_energy

        if self._event_publisher is not None:
            self._event_publisher(
                LevelUpApplied(
                    character_id=character.id,
                    from_level=old_level,
                    to_level=character.level,
                    max_health=character.max_health,
                    max_energy=character.max_energy,
                )
            )
        return LevelUpSummary(
            leveled_up=True,
            old_level=old_level,
            new_level=character.level,
            old_max_health=old_max_health,
            new_max_health=character.max_health,
            old_max_energy=old_max_energy,
            new_max_energy=character.max_energy,
        )

    @staticmethod
    def final_score(character: Character, victory_count: int) -> int:
        score = character.total_power * 10
        score += int(character.level) * 100
        score += int(character.gold) // 10
        score += int(character.reputation) * 5
        score += max(0, int(victory_count)) * 50
        return score

    @staticmethod
    def determine_ending(character: Character) -> str:
        power = character.total_power
        for min_power, min_reputation, ending in ENDING_LADDER:
            if power >= min_power and int(character.reputation) >= min_reputation:
                return ending
        return DEFAULT_ENDING

    def build_final_summary(self, character: Character, victory_count: int) -> FinalSummary:
        return FinalSummary(
            final_score=self.final_score(character, victory_count),
            ending=self.determine_ending(character),
            victories=max(0, int(victory_count)),
        )
