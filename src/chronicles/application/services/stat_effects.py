from __future__ import annotations

from typing import Iterable, Optional

from chronicles.application.dtos import StatChange
from chronicles.domain.models.character import Character
from chronicles.domain.models.stats import StatType


RESOURCE_NAMES = ("Energy", "Health", "Gold", "Reputation", "Experience")


def apply_stat_delta(character: Character, stat: StatType, delta: int) -> Optional[StatChange]:
    if not int(delta):
        return None
    before = character.get_stat(stat)
    character.add_stat(stat, int(delta))
    after = character.get_stat(stat)
    return StatChange(stat.value, before, after, after - before)


def _read_resource(character: Character, name: str) -> int:
    if name == "Energy":
        return int(character.current_energy)
    if name == "Health":
        return int(character.current_health)
    if name == "Gold":
        return int(character.gold)
    if name == "Reputation":
        return int(character.reputation)
    if name == "Experience":
        return int(character.experience)
    raise ValueError(f"Unknown resource: {name}")


def _write_resource(character: Character, name: str, value: int) -> None:
    if name == "Energy":
        character.set_energy(value)
    elif name == "Health":
        character.set_health(value)
    elif name == "Gold":
        character.gold = max(0, int(value))
    elif name == "Reputation":
        character.reputation = int(value)
    elif name == "Experience":
        character.experience = max(0, int(value))
    else:
        raise ValueError(f"Unknown resource: {name}")


def apply_resource_delta(character: Character, name: str, delta: int) -> Optional[StatChange]:
    """Apply a clamped change to Energy, Health, Gold, Reputation or Experience."""
    if not int(delta):
        return None
    before = _read_resource(character, name)
    _write_resource(character, name, before + int(delta))
    after = _read_resource(character, name)
    return StatChange(name, before, after, after - before)


def summarize_changes(changes: Iterable[StatChange]) -> str:
    parts = [f"{change.name}: {'+' if change.change >= 0 else ''}{change.change}" for change in changes]
    return ", ".join(parts) if parts else "No changes."
