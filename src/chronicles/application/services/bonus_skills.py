from __future__ import annotations

from chronicles.application.dtos import StatChange
from chronicles.domain.models.character import Character
from chronicles.domain.models.skill import BonusEffect, PassiveEffect, SkillType


def bonus_totals(character: Character, effect: BonusEffect) -> tuple[float, int]:
    percent = 0.0
    flat = 0
    for skill in character.skills_of_kind(SkillType.BONUS):
        if skill.effect == effect:
            percent += float(skill.percentage)
            flat += int(skill.flat_value)
    return percent, flat


def apply_bonus(character: Character, effect: BonusEffect, amount: int) -> int:
    """Scale a positive gain by the character's bonus skills for ``effect``."""
    if int(amount) <= 0:
        return int(amount)
    percent, flat = bonus_totals(character, effect)
    if not percent and not flat:
        return int(amount)
    return int(int(amount) * (1 + percent / 100.0)) + flat


def passive_total(character: Character, effect: PassiveEffect) -> float:
    return sum(float(skill.value) for skill in character.skills_of_kind(SkillType.PASSIVE) if skill.effect == effect)


def effective_luck(character: Character) -> float:
    percent, flat = bonus_totals(character, BonusEffect.LUCK_BOOST)
    return int(character.luck) * (1 + percent / 100.0) + flat


def apply_health_regen(character: Character) -> tuple[list[StatChange], list[str]]:
    changes: list[StatChange] = []
    lines: list[str] = []
    for skill in character.skills_of_kind(SkillType.BONUS):
        if skill.effect != BonusEffect.HEALTH_REGEN or int(skill.flat_value) <= 0:
            continue
        if character.current_health >= character.max_health:
            break
        before = character.current_health
        character.set_health(before + int(skill.flat_value))
        restored = character.current_health - before
        if restored > 0:
            changes.append(StatChange("Health", before, character.current_health, restored))
            lines.append(f"Your {skill.name} restores {restored} health.")
    return changes, lines
