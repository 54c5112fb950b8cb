"""Conversions between database rows and domain models."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from typing import Any, Optional

from chronicles.domain.models.calendar import parse_season_list
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import (
    ChoicePayload,
    EventChoice,
    EventOutcome,
    RandomEvent,
    parse_action_list,
)
from chronicles.domain.models.rarity import Rarity
from chronicles.domain.models.requirements import StatRequirements, parse_stat_requirements
from chronicles.domain.models.skill import (
    ActiveSkill,
    BonusEffect,
    BonusSkill,
    PassiveEffect,
    PassiveSkill,
    Skill,
    SkillType,
)
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario


logger = logging.getLogger(__name__)

_PAYLOAD_FIELDS = {item.name for item in fields(ChoicePayload)}


def _join(values) -> str:
    return ",".join(value.value for value in values)


def _stat_or_none(raw) -> Optional[StatType]:
    return StatType.parse(raw) if raw else None


def _requirements_json(requirements: StatRequirements) -> Optional[str]:
    return json.dumps(requirements.as_dict()) if requirements else None


def payload_to_json(payload: Optional[ChoicePayload]) -> Optional[str]:
    if payload is None:
        return None
    values = {key: value for key, value in asdict(payload).items() if value not in (0, None, "")}
    return json.dumps(values)


def payload_from_json(raw: Any) -> Optional[ChoicePayload]:
    if raw is None or raw == "":
        return None
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except ValueError:
        logger.debug("Ignoring malformed choice payload", extra={"raw": raw})
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring non-object choice payload", extra={"raw": repr(raw)})
        return None
    return ChoicePayload(**{key: value for key, value in data.items() if key in _PAYLOAD_FIELDS})


# Storybooks


def storybook_params(storybook: Storybook) -> dict[str, Any]:
    return {
        "storybook_id": storybook.id,
        "name": storybook.name,
        "description": storybook.description,
        "theme": storybook.theme,
        "strength_bonus": storybook.strength_bonus,
        "agility_bonus": storybook.agility_bonus,
        "intelligence_bonus": storybook.intelligence_bonus,
        "endurance_bonus": storybook.endurance_bonus,
        "charisma_bonus": storybook.charisma_bonus,
        "luck_bonus": storybook.luck_bonus,
        "event_trigger_chance": storybook.event_trigger_chance,
        "is_unlockable": int(storybook.is_unlockable),
    }


def row_to_storybook(row) -> Storybook:
    return Storybook(
        id=row.storybook_id,
        name=row.name,
        description=row.description or "",
        theme=row.theme or "",
        strength_bonus=row.strength_bonus or 0,
        agility_bonus=row.agility_bonus or 0,
        intelligence_bonus=row.intelligence_bonus or 0,
        endurance_bonus=row.endurance_bonus or 0,
        charisma_bonus=row.charisma_bonus or 0,
        luck_bonus=row.luck_bonus or 0,
        event_trigger_chance=float(row.event_trigger_chance or 0.0),
        is_unlockable=bool(row.is_unlockable),
    )


# Skills


def skill_params(skill: Skill) -> dict[str, Any]:
    params: dict[str, Any] = {
        "skill_id": skill.id,
        "name": skill.name,
        "skill_type": skill.kind.value,
        "description": skill.description,
        "rarity": skill.rarity.value,
        "passive_effect": None,
        "passive_value": None,
        "trigger_chance": None,
        "base_damage": None,
        "scaling_stat": None,
        "scaling_multiplier": None,
        "narrative": None,
        "bonus_effect": None,
        "bonus_percentage": None,
        "bonus_flat": None,
    }
    if isinstance(skill, PassiveSkill):
        params.update(passive_effect=skill.effect.value, passive_value=skill.value)
    elif isinstance(skill, ActiveSkill):
        params.update(
            trigger_chance=skill.trigger_chance,
            base_damage=skill.base_damage,
            scaling_stat=skill.scaling_stat.value,
            scaling_multiplier=skill.scaling_multiplier,
            narrative=skill.narrative,
        )
    else:
        params.update(bonus_effect=skill.effect.value, bonus_percentage=skill.percentage, bonus_flat=skill.flat_value)
    return params


def row_to_skill(row) -> Optional[Skill]:
    rarity = Rarity.parse(row.rarity)
    description = row.description or ""
    if row.skill_type == SkillType.PASSIVE.value:
        return PassiveSkill(
            id=row.skill_id,
            name=row.name,
            effect=PassiveEffect(row.passive_effect),
            value=float(row.passive_value or 0.0),
            description=description,
            rarity=rarity,
        )
    if row.skill_type == SkillType.ACTIVE.value:
        return ActiveSkill(
            id=row.skill_id,
            name=row.name,
            trigger_chance=float(row.trigger_chance or 0.0),
            base_damage=int(row.base_damage or 0),
            scaling_stat=StatType.parse(row.scaling_stat) or StatType.STRENGTH,
            scaling_multiplier=float(row.scaling_multiplier or 0.0),
            narrative=row.narrative or "",
            description=description,
            rarity=rarity,
        )
    if row.skill_type == SkillType.BONUS.value:
        return BonusSkill(
            id=row.skill_id,
            name=row.name,
            effect=BonusEffect(row.bonus_effect),
            percentage=float(row.bonus_percentage or 0.0),
            flat_value=int(row.bonus_flat or 0),
            description=description,
            rarity=rarity,
        )
    logger.debug("Skipping skill with unknown type", extra={"skill_id": row.skill_id, "skill_type": row.skill_type})
    return None


# Enemies


def enemy_params(enemy: EnemyTemplate) -> dict[str, Any]:
    return {
        "enemy_id": enemy.id,
        "name": enemy.name,
        "description": enemy.description,
        "strength": enemy.strength,
        "agility": enemy.agility,
        "intelligence": enemy.intelligence,
        "endurance": enemy.endurance,
        "health": enemy.health,
        "difficulty_tier": enemy.difficulty_tier,
        "enemy_type": enemy.enemy_type,
        "experience_reward": enemy.experience_reward,
        "gold_reward": enemy.gold_reward,
        "reputation_reward": enemy.reputation_reward,
        "seasons": _join(enemy.seasons) or None,
        "abilities": json.dumps(list(enemy.abilities)) if enemy.abilities else None,
        "is_active": int(enemy.is_active),
    }


def row_to_enemy(row) -> EnemyTemplate:
    abilities: tuple[str, ...] = ()
    if row.abilities:
        try:
            abilities = tuple(str(item) for item in json.loads(row.abilities))
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed enemy abilities", extra={"enemy_id": row.enemy_id})
    return EnemyTemplate(
        id=row.enemy_id,
        name=row.name,
        description=row.description or "",
        strength=row.strength,
        agility=row.agility,
        intelligence=row.intelligence,
        endurance=row.endurance,
        health=row.health,
        difficulty_tier=row.difficulty_tier,
        enemy_type=row.enemy_type or "Creature",
        experience_reward=row.experience_reward or 0,
        gold_reward=row.gold_reward or 0,
        reputation_reward=row.reputation_reward or 0,
        seasons=parse_season_list(row.seasons),
        abilities=abilities,
        is_active=bool(row.is_active),
    )


# Training


def scenario_params(scenario: TrainingScenario) -> dict[str, Any]:
    return {
        "scenario_id": scenario.id,
        "name": scenario.name,
        "description": scenario.description,
        "primary_stat": scenario.primary_stat.value,
        "secondary_stat": scenario.secondary_stat.value if scenario.secondary_stat else None,
        "tertiary_stat": scenario.tertiary_stat.value if scenario.tertiary_stat else None,
        "base_stat_gain": scenario.base_stat_gain,
        "secondary_stat_gain": scenario.secondary_stat_gain,
        "tertiary_stat_gain": scenario.tertiary_stat_gain,
        "energy_cost": scenario.energy_cost,
        "bonus_chance": scenario.bonus_chance,
        "bonus_stat_gain": scenario.bonus_stat_gain,
        "failure_chance": scenario.failure_chance,
        "failure_health_penalty": scenario.failure_health_penalty,
        "bonus_seasons": _join(scenario.bonus_seasons) or None,
        "seasonal_bonus_multiplier": scenario.seasonal_bonus_multiplier,
        "experience_gain": scenario.experience_gain,
        "required_level": scenario.required_level,
        "narrative": scenario.narrative,
        "is_active": int(scenario.is_active),
    }


def row_to_scenario(row) -> TrainingScenario:
    return TrainingScenario(
        id=row.scenario_id,
        name=row.name,
        description=row.description or "",
        primary_stat=StatType.parse(row.primary_stat) or StatType.STRENGTH,
        secondary_stat=_stat_or_none(row.secondary_stat),
        tertiary_stat=_stat_or_none(row.tertiary_stat),
        base_stat_gain=row.base_stat_gain,
        secondary_stat_gain=row.secondary_stat_gain,
        tertiary_stat_gain=row.tertiary_stat_gain,
        energy_cost=row.energy_cost,
        bonus_chance=float(row.bonus_chance),
        bonus_stat_gain=row.bonus_stat_gain,
        failure_chance=float(row.failure_chance),
        failure_health_penalty=row.failure_health_penalty,
        bonus_seasons=parse_season_list(row.bonus_seasons),
        seasonal_bonus_multiplier=float(row.seasonal_bonus_multiplier),
        experience_gain=row.experience_gain,
        required_level=row.required_level,
        narrative=row.narrative or "",
        is_active=bool(row.is_active),
    )


# Events


def event_params(event: RandomEvent) -> dict[str, Any]:
    return {
        "event_id": event.id,
        "title": event.title,
        "description": event.description,
        "storybook_id": event.storybook_id,
        "rarity": event.rarity.value,
        "outcome": event.outcome.value,
        "trigger_actions": _join(event.trigger_actions) or None,
        "trigger_seasons": _join(event.trigger_seasons) or None,
        "base_probability": event.base_probability,
        "requirements_json": _requirements_json(event.requirements),
        "is_active": int(event.is_active),
    }


def choice_params(event_id: int, choice: EventChoice) -> dict[str, Any]:
    return {
        "choice_id": choice.id,
        "event_id": event_id,
        "choice_text": choice.text,
        "display_order": choice.display_order,
        "requirements_json": _requirements_json(choice.requirements),
        "check_stat": choice.check_stat.value if choice.check_stat else None,
        "check_difficulty": choice.check_difficulty,
        "follow_up_event_id": choice.follow_up_event_id,
        "trigger_battle_id": choice.trigger_battle_id,
        "success_json": payload_to_json(choice.success),
        "failure_json": payload_to_json(choice.failure),
    }


def row_to_choice(row) -> EventChoice:
    return EventChoice(
        id=row.choice_id,
        text=row.choice_text,
        success=payload_from_json(row.success_json) or ChoicePayload(),
        failure=payload_from_json(row.failure_json),
        check_stat=_stat_or_none(row.check_stat),
        check_difficulty=row.check_difficulty or 0,
        requirements=parse_stat_requirements(row.requirements_json),
        follow_up_event_id=row.follow_up_event_id,
        trigger_battle_id=row.trigger_battle_id,
        display_order=row.display_order or 0,
    )


def row_to_event(row, choices: tuple[EventChoice, ...]) -> RandomEvent:
    try:
        outcome = EventOutcome(row.outcome)
    except ValueError:
        outcome = EventOutcome.NEUTRAL
    return RandomEvent(
        id=row.event_id,
        title=row.title,
        description=row.description or "",
        storybook_id=row.storybook_id,
        rarity=Rarity.parse(row.rarity),
        outcome=outcome,
        trigger_actions=parse_action_list(row.trigger_actions),
        trigger_seasons=parse_season_list(row.trigger_seasons),
        base_probability=float(row.base_probability),
        requirements=parse_stat_requirements(row.requirements_json),
        choices=choices,
        is_active=bool(row.is_active),
    )
