from __future__ import annotations

from enum import Enum
from typing import Iterable


MONTHS_PER_YEAR = 12
GAME_LENGTH_TURNS = 120


class Season(str, Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"

    @classmethod
    def for_month(cls, month: int) -> "Season":
        month = int(month)
        if 3 <= month <= 5:
            return cls.SPRING
        if 6 <= month <= 8:
            return cls.SUMMER
        if 9 <= month <= 11:
            return cls.AUTUMN
        return cls.WINTER

    @classmethod
    def parse(cls, raw: object) -> "Season | None":
        text = str(raw or "").strip().lower()
        for season in cls:
            if season.value.lower() == text:
                return season
        return None


def parse_season_list(raw: str | Iterable[object] | None) -> tuple[Season, ...]:
    """Parse a comma separated season list; unknown names are skipped."""
    if raw is None:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    seasons: list[Season] = []
    for part in parts:
        season = Season.parse(part)
        if season is not None and season not in seasons:
            seasons.append(season)
    return tuple(seasons)


def next_month(year: int, month: int) -> tuple[int, int]:
    if int(month) >= MONTHS_PER_YEAR:
        return int(year) + 1, 1
    return int(year), int(month) + 1
