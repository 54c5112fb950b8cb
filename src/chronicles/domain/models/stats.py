from __future__ import annotations

from enum import Enum
from typing import Optional


STAT_MIN = 0
STAT_MAX = 999


class StatType(str, Enum):
    STRENGTH = "Strength"
    AGILITY = "Agility"
    INTELLIGENCE = "Intelligence"
    ENDURANCE = "Endurance"
    CHARISMA = "Charisma"
    LUCK = "Luck"

    @property
    def attribute(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, raw: object) -> Optional["StatType"]:
        """Resolve a stat from its display name, attribute name or enum member name."""
        if isinstance(raw, StatType):
            return raw
        text = str(raw or "").strip()
        if not text:
            return None
        lowered = text.lower()
        for stat in cls:
            if lowered in {stat.value.lower(), stat.attribute}:
                return stat
        return None


CORE_STATS: tuple[StatType, ...] = tuple(StatType)


def clamp_stat(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, int(value)))
