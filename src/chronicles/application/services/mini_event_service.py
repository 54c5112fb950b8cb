from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from chronicles.application.dtos import StatChange
from chronicles.application.services.balance_tables import MINI_EVENT_CHANCE, MINI_EVENT_POSITIVE_CHANCE
from chronicles.application.services.narrative_tables import (
    NEGATIVE_RESOURCE_NARRATIVES,
    NEGATIVE_STAT_NARRATIVES,
    POSITIVE_RESOURCE_NARRATIVES,
    POSITIVE_STAT_NARRATIVES,
)
from chronicles.application.services.random_source import RandomSource
from chronicles.application.services.stat_effects import apply_resource_delta, apply_stat_delta
from chronicles.domain.models.character import Character
from chronicles.domain.models.stats import StatType


logger = logging.getLogger(__name__)

_STATS = tuple(StatType)


@dataclass(frozen=True)
class MiniEventResult:
    narrative: str
    stat_change: StatChange
    positive: bool


class MiniEventService:
    """Small flavour events that may follow a successful action."""

    def __init__(self, rng: RandomSource, chance: float = MINI_EVENT_CHANCE) -> None:
        self._rng = rng
        self.chance = max(0.0, float(chance))

    def maybe_trigger(self, character: Character) -> Optional[MiniEventResult]:
        if self.chance <= 0 or not self._rng.chance(self.chance):
            return None
        if self._rng.chance(MINI_EVENT_POSITIVE_CHANCE):
            result = self._positive(character)
        else:
            result = self._negative(character)
        if result is not None:
            logger.debug(
                "Mini event applied",
                extra={"character_id": character.id, "stat": result.stat_change.name, "change": result.stat_change.change},
            )
        return result

    def _stat_result(self, character: Character, stat: StatType, delta: int, positive: bool) -> Optional[MiniEventResult]:
        change = apply_stat_delta(character, stat, delta)
        if change is None or change.change == 0:
            return None
        table = POSITIVE_STAT_NARRATIVES if positive else NEGATIVE_STAT_NARRATIVES
        return MiniEventResult(table[stat].format(amount=abs(change.change)), change, positive)

    def _resource_result(self, character: Character, name: str, delta: int, positive: bool) -> Optional[MiniEventResult]:
        change = apply_resource_delta(character, name, delta)
        if change is None or change.change == 0:
            return None
        table = POSITIVE_RESOURCE_NARRATIVES if positive else NEGATIVE_RESOURCE_NARRATIVES
        narrative = self._rng.pick(table[name]).format(amount=abs(change.change))
        return MiniEventResult(narrative, change, positive)

    def _positive(self, character: Character) -> Optional[MiniEventResult]:
        kind = self._rng.uniform_int(5)
        if kind == 0:
            stat = self._rng.pick(_STATS)
            return self._stat_result(character, stat, self._rng.uniform_int(2, 5), True)
        if kind == 1:
            amount = self._rng.uniform_int(10, 30) + int(character.luck) // 10
            return self._resource_result(character, "Gold", amount, True)
        if kind == 2:
            return self._resource_result(character, "Energy", self._rng.uniform_int(10, 25), True)
        if kind == 3:
            return self._resource_result(character, "Reputation", self._rng.uniform_int(3, 8), True)
        return self._resource_result(character, "Experience", self._rng.uniform_int(10, 25), True)

    def _negative(self, character: Character) -> Optional[MiniEventResult]:
        kind = self._rng.uniform_int(4)
        if kind == 0:
            stat = self._rng.pick(_STATS)
            return self._stat_result(character, stat, -self._rng.uniform_int(1, 3), False)
        if kind == 1:
            loss = self._rng.uniform_int(5, 15)
            if character.gold < loss:
                return None
            return self._resource_result(character, "Gold", -loss, False)
        if kind == 2:
            loss = self._rng.uniform_int(5, 15)
            if character.current_energy <= loss:
                return None
            return self._resource_result(character, "Energy", -loss, False)
        loss = self._rng.uniform_int(3, 10)
        if character.current_health <= loss + 10:
            return None
        return self._resource_result(character, "Health", -loss, False)
