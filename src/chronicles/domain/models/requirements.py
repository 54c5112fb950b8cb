from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from chronicles.domain.models.stats import StatType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatRequirements:
    """Minimum stat thresholds gating an event or a choice."""

    thresholds: tuple[tuple[StatType, int], ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, values: Mapping[StatType, int]) -> "StatRequirements":
        return cls(thresholds=tuple((stat, int(value)) for stat, value in values.items()))

    def __bool__(self) -> bool:
        return bool(self.thresholds)

    def as_dict(self) -> dict[str, int]:
        return {stat.value: value for stat, value in self.thresholds}

    def is_met_by(self, character) -> bool:
        return all(character.get_stat(stat) >= value for stat, value in self.thresholds)

    def hint(self) -> str | None:
        if not self.thresholds:
            return None
        parts = ", ".join(f"{stat.value} {value}+" for stat, value in self.thresholds)
        return f"Requires: {parts}"


NO_REQUIREMENTS = StatRequirements()


def parse_stat_requirements(raw: Any) -> StatRequirements:
    """Parse authored requirement data.

    Accepts a JSON object string or a mapping of stat name to threshold. Anything that cannot be
    read as such is treated as no requirement at all. Unknown stat names are ignored.
    """
    if raw is None or isinstance(raw, StatRequirements):
        return raw or NO_REQUIREMENTS
    payload: Any = raw
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        if not text.strip():
            return NO_REQUIREMENTS
        try:
            payload = json.loads(text)
        except ValueError:
            logger.debug("Ignoring malformed stat requirements", extra={"raw": text})
            return NO_REQUIREMENTS
    if not isinstance(payload, Mapping):
        logger.debug("Ignoring non-object stat requirements", extra={"raw": repr(raw)})
        return NO_REQUIREMENTS

    thresholds: dict[StatType, int] = {}
    for key, value in payload.items():
        stat = StatType.parse(key)
        if stat is None:
            continue
        if isinstance(value, bool):
            return NO_REQUIREMENTS
        try:
            thresholds[stat] = int(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring stat requirements with non-integer threshold", extra={"raw": repr(raw)})
            return NO_REQUIREMENTS
    return StatRequirements.from_mapping(thresholds)
