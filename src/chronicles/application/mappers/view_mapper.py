from __future__ import annotations

from typing import Optional

from chronicles.application.dtos import (
    CharacterView,
    ChoiceRewardsView,
    EnemyView,
    EventChoiceView,
    RandomEventView,
    StorybookView,
    TrainingScenarioView,
)
from chronicles.domain.models.character import Character
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import ChoicePayload, EventChoice, RandomEvent
from chronicles.domain.models.training import TrainingScenario


def to_character_view(character: Character, *, experience_for_next_level: int) -> CharacterView:
    storybooks = tuple(
        StorybookView(
            id=entry.storybook.id,
            name=entry.storybook.name,
            theme=entry.storybook.theme,
            slot=entry.slot,
            bonuses={stat.value: value for stat, value in entry.storybook.stat_bonuses().items()},
            event_trigger_chance=entry.storybook.event_trigger_chance,
        )
        for entry in sorted(character.equipped, key=lambda entry: entry.slot)
    )
    return CharacterView(
        id=character.id,
        name=character.name,
        character_class=character.character_class.value,
        strength=character.strength,
        agility=character.agility,
        intelligence=character.intelligence,
        endurance=character.endurance,
        charisma=character.charisma,
        luck=character.luck,
        current_energy=character.current_energy,
        max_energy=character.max_energy,
        current_health=character.current_health,
        max_health=character.max_health,
        level=character.level,
        experience=character.experience,
        experience_for_next_level=int(experience_for_next_level),
        gold=character.gold,
        reputation=character.reputation,
        current_year=character.current_year,
        current_month=character.current_month,
        total_turns=character.total_turns,
        season=character.season.value,
        total_power=character.total_power,
        is_game_complete=character.is_game_complete,
        storybooks=storybooks,
        skills=tuple(entry.skill.name for entry in character.skills),
    )


def to_enemy_view(enemy: EnemyTemplate) -> EnemyView:
    return EnemyView(
        id=enemy.id,
        name=enemy.name,
        description=enemy.description,
        strength=enemy.strength,
        agility=enemy.agility,
        intelligence=enemy.intelligence,
        endurance=enemy.endurance,
        health=enemy.health,
        difficulty_tier=enemy.difficulty_tier,
        enemy_type=enemy.enemy_type,
    )


def to_rewards_view(payload: ChoicePayload, *, skill_name: Optional[str], include_experience: bool = True) -> ChoiceRewardsView:
    return ChoiceRewardsView(
        strength=payload.strength,
        agility=payload.agility,
        intelligence=payload.intelligence,
        endurance=payload.endurance,
        charisma=payload.charisma,
        luck=payload.luck,
        energy=payload.energy,
        health=payload.health,
        gold=payload.gold,
        reputation=payload.reputation,
        experience=payload.experience if include_experience else 0,
        skill_name=skill_name,
    )


def to_choice_view(choice: EventChoice, character: Character, *, skill_names: dict[int, str]) -> EventChoiceView:
    failure_rewards = None
    if choice.has_check:
        failure = choice.failure_payload()
        failure_rewards = to_rewards_view(
            failure,
            skill_name=skill_names.get(failure.grant_skill_id) if failure.grant_skill_id is not None else None,
            include_experience=False,
        )
    success_skill = choice.success.grant_skill_id
    return EventChoiceView(
        id=choice.id,
        text=choice.text,
        is_hidden=not choice.requirements.is_met_by(character),
        check_stat=choice.check_stat.value if choice.check_stat is not None else None,
        check_difficulty=int(choice.check_difficulty),
        requirement_hint=choice.requirements.hint(),
        rewards=to_rewards_view(
            choice.success,
            skill_name=skill_names.get(success_skill) if success_skill is not None else None,
        ),
        failure_rewards=failure_rewards,
        follow_up_event_id=choice.follow_up_event_id,
    )


def to_event_view(
    event: RandomEvent,
    character: Character,
    *,
    source_storybook: Optional[str] = None,
    skill_names: Optional[dict[int, str]] = None,
) -> RandomEventView:
    names = dict(skill_names or {})
    return RandomEventView(
        id=event.id,
        title=event.title,
        description=event.description,
        rarity=event.rarity.value,
        outcome=event.outcome.value,
        source_storybook=source_storybook,
        choices=tuple(to_choice_view(choice, character, skill_names=names) for choice in event.ordered_choices()),
    )


def to_training_view(scenario: TrainingScenario, *, has_seasonal_bonus: bool) -> TrainingScenarioView:
    return TrainingScenarioView(
        id=scenario.id,
        name=scenario.name,
        description=scenario.description,
        primary_stat=scenario.primary_stat.value,
        secondary_stat=scenario.secondary_stat.value if scenario.secondary_stat is not None else None,
        tertiary_stat=scenario.tertiary_stat.value if scenario.tertiary_stat is not None else None,
        base_stat_gain=scenario.base_stat_gain,
        energy_cost=scenario.energy_cost,
        bonus_chance=scenario.bonus_chance,
        experience_gain=scenario.experience_gain,
        has_seasonal_bonus=has_seasonal_bonus,
    )
