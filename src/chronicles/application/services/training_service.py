from __future__ import annotations

import logging
from typing import Optional

from chronicles.application.dtos import StatChange, TrainingResult, TrainingScenarioView
from chronicles.application.errors import NotFoundError
from chronicles.application.mappers.view_mapper import to_training_view
from chronicles.application.services.balance_tables import TRAINING_BONUS_LUCK_DIVISOR, TRAINING_VARIANCE
from chronicles.application.services.bonus_skills import bonus_totals, effective_luck
from chronicles.application.services.narrative_tables import (
    TRAINING_BONUS_NARRATIVES,
    TRAINING_FAILURE_NARRATIVES,
    TRAINING_SEASONAL_SUFFIX,
)
from chronicles.application.services.random_source import RandomSource
from chronicles.domain.models.character import Character
from chronicles.domain.models.skill import BonusEffect
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.training import TrainingScenario
from chronicles.domain.repositories import TrainingScenarioRepository


logger = logging.getLogger(__name__)

INSUFFICIENT_ENERGY = "Not enough energy to train. Rest to recover energy."


class TrainingService:
    def __init__(self, rng: RandomSource, scenario_repo: Optional[TrainingScenarioRepository] = None) -> None:
        self._rng = rng
        self.scenario_repo = scenario_repo

    def resolve_training(self, character: Character, scenario_id: int) -> TrainingResult:
        if self.scenario_repo is None:
            raise NotFoundError("Training scenario", scenario_id)
        scenario = self.scenario_repo.get(int(scenario_id))
        if scenario is None:
            raise NotFoundError("Training scenario", scenario_id)
        return self.execute(character, scenario)

    def list_available(self, character: Character) -> list[TrainingScenarioView]:
        if self.scenario_repo is None:
            return []
        season = character.season
        return [
            to_training_view(scenario, has_seasonal_bonus=scenario.seasonal_multiplier(season) > 1.0)
            for scenario in self.scenario_repo.list_for_level(character.level)
        ]

    @staticmethod
    def equipment_multiplier(character: Character, stat: StatType) -> float:
        bonus = 1.0
        for storybook in character.equipped_storybooks():
            bonus += storybook.bonus_for(stat) / 100.0
        return bonus

    def _variance(self) -> float:
        return 1.0 + self._rng.uniform_float01() * TRAINING_VARIANCE

    def _gain_stat(self, character: Character, stat: StatType, amount: int) -> StatChange:
        before = character.get_stat(stat)
        character.add_stat(stat, amount)
        after = character.get_stat(stat)
        return StatChange(stat.value, before, after, after - before)

    def execute(self, character: Character, scenario: TrainingScenario) -> TrainingResult:
        if character.current_energy < scenario.energy_cost:
            return TrainingResult(success=False, narrative=INSUFFICIENT_ENERGY)
        if character.level < scenario.required_level:
            return TrainingResult(
                success=False,
                narrative=f"This training requires level {scenario.required_level}. Keep growing stronger!",
            )

        character.current_energy -= scenario.energy_cost

        if self._rng.chance(scenario.failure_chance):
            before = character.current_health
            character.set_health(before - scenario.failure_health_penalty)
            narrative = self._rng.pick(TRAINING_FAILURE_NARRATIVES).format(name=scenario.name)
            logger.info("Training injury", extra={"character_id": character.id, "scenario_id": scenario.id})
            return TrainingResult(
                success=False,
                narrative=narrative,
                stat_changes=(StatChange("Health", before, character.current_health, character.current_health - before),),
                injured=True,
                energy_spent=scenario.energy_cost,
            )

        seasonal = scenario.seasonal_multiplier(character.season)
        equipment = self.equipment_multiplier(character, scenario.primary_stat)
        primary_gain = int(scenario.base_stat_gain * seasonal * equipment * self._variance())
        boost_percent, boost_flat = bonus_totals(character, BonusEffect.TRAINING_BOOST)
        if boost_percent or boost_flat:
            primary_gain = int(primary_gain * (1 + boost_percent / 100.0)) + boost_flat

        changes = [self._gain_stat(character, scenario.primary_stat, primary_gain)]

        secondary_gain = 0
        if scenario.secondary_stat is not None:
            secondary_gain = int(scenario.secondary_stat_gain * seasonal * self._variance())
            changes.append(self._gain_stat(character, scenario.secondary_stat, secondary_gain))

        tertiary_gain = 0
        if scenario.tertiary_stat is not None:
            tertiary_gain = int(scenario.tertiary_stat_gain * seasonal * self._variance())
            changes.append(self._gain_stat(character, scenario.tertiary_stat, tertiary_gain))

        lines = [scenario.narrative or f"You complete your {scenario.name} training."]
        if seasonal > 1.0:
            lines[0] += TRAINING_SEASONAL_SUFFIX

        bonus_triggered = self._rng.chance(scenario.bonus_chance + effective_luck(character) / TRAINING_BONUS_LUCK_DIVISOR)
        if bonus_triggered:
            character.add_stat(scenario.primary_stat, scenario.bonus_stat_gain)
            primary_gain += scenario.bonus_stat_gain
            recorded = changes[0]
            after = character.get_stat(scenario.primary_stat)
            changes[0] = StatChange(recorded.name, recorded.old_value, after, after - recorded.old_value)
            lines.append(self._rng.pick(TRAINING_BONUS_NARRATIVES))

        character.experience += scenario.experience_gain

        return TrainingResult(
            success=True,
            narrative=" ".join(lines),
            stat_changes=tuple(changes),
            primary_gain=primary_gain,
            secondary_gain=secondary_gain,
            tertiary_gain=tertiary_gain,
            bonus_triggered=bonus_triggered,
            injured=False,
            energy_spent=scenario.energy_cost,
            experience_gained=scenario.experience_gain,
        )
