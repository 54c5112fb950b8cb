from __future__ import annotations

from enum import Enum


class Rarity(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"

    @classmethod
    def parse(cls, raw: object, default: "Rarity | None" = None) -> "Rarity":
        text = str(raw or "").strip().lower()
        for rarity in cls:
            if rarity.value.lower() == text:
                return rarity
        return default or cls.COMMON
