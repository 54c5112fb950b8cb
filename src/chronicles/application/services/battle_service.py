from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from chronicles.application.dtos import BattleOutcome, BattleRound, EnemyView, LevelUpSummary, StatChange
from chronicles.application.errors import NotFoundError
from chronicles.application.mappers.view_mapper import to_enemy_view
from chronicles.application.services.balance_tables import (
    BATTLE_ENERGY_COST,
    BATTLE_TIME_LIMIT_MS,
    COMBAT_POWER_LUCK_WEIGHT,
    COMBAT_POWER_WEIGHTS,
    CRITICAL_LUCK_DIVISOR,
    CRITICAL_MULTIPLIER,
    DAMAGE_REDUCTION_CAP_PERCENT,
    DEFENSE_DIVISOR,
    ENEMY_DAMAGE_BONUS_RANGE,
    ENEMY_DAMAGE_SCALE,
    OVERLEVEL_EXPERIENCE_FACTOR,
    OVERLEVEL_TIER_MARGIN,
    PLAYER_DAMAGE_BONUS_RANGE,
    PLAYER_DAMAGE_SCALE,
    TIER_EXPERIENCE_BONUS,
    attack_interval_ms,
    random_battle_tier_range,
)
from chronicles.application.services.bonus_skills import apply_bonus, effective_luck, passive_total
from chronicles.application.services.narrative_tables import (
    DEFEAT_NARRATIVES,
    DRAW_NARRATIVE,
    ENEMY_ATTACK_ACTIONS,
    PLAYER_ATTACK_ACTIONS,
    VICTORY_NARRATIVES,
)
from chronicles.application.services.progression_service import ProgressionService
from chronicles.application.services.random_source import RandomSource
from chronicles.application.services.stat_effects import apply_resource_delta
from chronicles.domain.events import BattleConcluded
from chronicles.domain.models.character import Character, CharacterClass
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.history import BattleLogRecord, BattleResult
from chronicles.domain.models.skill import ActiveSkill, BonusEffect, PassiveEffect, SkillType
from chronicles.domain.models.stats import StatType
from chronicles.domain.repositories import EnemyRepository


logger = logging.getLogger(__name__)

NOT_ENOUGH_ENERGY = "You don't have enough energy to fight!"
UNKNOWN_ENEMY = EnemyView(
    id=0,
    name="Unknown",
    description="",
    strength=0,
    agility=0,
    intelligence=0,
    endurance=0,
    health=1,
    difficulty_tier=1,
    enemy_type="",
)


@dataclass
class _Fight:
    """Mutable state of one simulated fight."""

    player_health: int
    enemy_health: int
    elapsed_ms: int = 0
    rounds: list[BattleRound] = field(default_factory=list)
    consumed_skills: set[int] = field(default_factory=set)

    @property
    def finished(self) -> bool:
        return self.player_health <= 0 or self.enemy_health <= 0

    def record(self, attacker: str, action: str, damage: int, **flags) -> None:
        self.rounds.append(
            BattleRound(
                index=len(self.rounds) + 1,
                time_ms=self.elapsed_ms,
                attacker=attacker,
                action=action,
                damage=damage,
                player_health=max(0, self.player_health),
                enemy_health=max(0, self.enemy_health),
                **flags,
            )
        )


def class_attack_stat(character: Character) -> int:
    cls = character.character_class
    if cls == CharacterClass.WARRIOR:
        return int(character.strength)
    if cls == CharacterClass.MAGE:
        return int(character.intelligence)
    if cls == CharacterClass.ROGUE:
        return int(character.agility)
    if cls == CharacterClass.CLERIC:
        return (int(character.intelligence) + int(character.endurance)) // 2
    return (int(character.agility) + int(character.strength)) // 2


def combat_power(character: Character) -> int:
    weights = COMBAT_POWER_WEIGHTS.get(character.character_class, {})
    total = sum(
        character.get_stat(stat) * weights.get(stat, 1.0)
        for stat in (StatType.STRENGTH, StatType.AGILITY, StatType.INTELLIGENCE, StatType.ENDURANCE)
    )
    return int(total + int(character.luck) * COMBAT_POWER_LUCK_WEIGHT)


def scaled_experience(enemy: EnemyTemplate, level: int) -> int:
    experience = int(enemy.experience_reward)
    tier = int(enemy.difficulty_tier)
    if tier > level:
        return int(experience * (1 + TIER_EXPERIENCE_BONUS * (tier - level)))
    if tier < level - OVERLEVEL_TIER_MARGIN:
        return int(experience * OVERLEVEL_EXPERIENCE_FACTOR)
    return experience


class BattleService:
    def __init__(
        self,
        rng: RandomSource,
        enemy_repo: Optional[EnemyRepository] = None,
        *,
        progression: Optional[ProgressionService] = None,
        event_publisher: Optional[Callable[[object], None]] = None,
    ) -> None:
        self._rng = rng
        self.enemy_repo = enemy_repo
        self.progression = progression or ProgressionService(event_publisher=event_publisher)
        self.event_publisher = event_publisher

    def list_available_enemies(self, character: Character) -> list[EnemyView]:
        if self.enemy_repo is None:
            return []
        return [to_enemy_view(enemy) for enemy in self.enemy_repo.list_eligible(character.level, character.season)]

    def pick_random_enemy(self, character: Character) -> EnemyTemplate:
        if self.enemy_repo is None:
            raise NotFoundError("Enemy", "random")
        min_tier, max_tier = random_battle_tier_range(character.level)
        candidates = self.enemy_repo.list_in_tier_range(min_tier, max_tier)
        if not candidates:
            candidates = self.enemy_repo.list_by_tier(1)
        if not candidates:
            raise NotFoundError("Enemy", f"tier {min_tier}-{max_tier}")
        return self._rng.pick(candidates)

    def resolve_enemy(self, character: Character, enemy_id: Optional[int] = None) -> EnemyTemplate:
        if enemy_id is None:
            return self.pick_random_enemy(character)
        enemy = self.enemy_repo.get(int(enemy_id)) if self.enemy_repo is not None else None
        if enemy is None:
            raise NotFoundError("Enemy", enemy_id)
        return enemy

    def resolve_battle(self, character: Character, enemy_id: Optional[int] = None) -> BattleOutcome:
        if character.current_energy < BATTLE_ENERGY_COST:
            enemy = self.resolve_enemy(character, enemy_id) if enemy_id is not None else None
            return self._fled(character, enemy)
        return self.simulate(character, self.resolve_enemy(character, enemy_id))

    def _fled(self, character: Character, enemy: Optional[EnemyTemplate]) -> BattleOutcome:
        enemy_view = to_enemy_view(enemy) if enemy is not None else UNKNOWN_ENEMY
        return BattleOutcome(
            result=BattleResult.FLED,
            narrative=NOT_ENOUGH_ENERGY,
            rounds=(),
            experience_gained=0,
            gold_gained=0,
            reputation_gained=0,
            health_lost=0,
            energy_spent=0,
            enemy=enemy_view,
            character_power=combat_power(character),
            enemy_power=enemy.power if enemy is not None else 0,
        )

    def _regular_attack(self, character: Character, enemy: EnemyTemplate) -> tuple[int, bool]:
        base = class_attack_stat(character)
        low, high = PLAYER_DAMAGE_BONUS_RANGE
        damage = int(base * PLAYER_DAMAGE_SCALE) + self._rng.uniform_int(low, high)
        crit_chance = effective_luck(character) / CRITICAL_LUCK_DIVISOR
        crit_chance += passive_total(character, PassiveEffect.CRITICAL_CHANCE) / 100.0
        critical = self._rng.chance(crit_chance)
        if critical:
            damage = int(damage * CRITICAL_MULTIPLIER)
        return max(1, damage - int(enemy.endurance) // DEFENSE_DIVISOR), critical

    def _player_tick(self, character: Character, enemy: EnemyTemplate, fight: _Fight) -> None:
        active = [skill for skill in character.skills_of_kind(SkillType.ACTIVE) if isinstance(skill, ActiveSkill)]
        for skill in active:
            if skill.id in fight.consumed_skills:
                continue
            if not self._rng.chance(skill.trigger_chance):
                continue
            fight.consumed_skills.add(skill.id)
            scaled = int(character.get_stat(skill.scaling_stat) * float(skill.scaling_multiplier))
            damage = max(1, int(skill.base_damage) + scaled - int(enemy.endurance) // DEFENSE_DIVISOR)
            fight.enemy_health -= damage
            action = skill.narrative or f"unleashes {skill.name}"
            fight.record("player", action, damage, skill_name=skill.name)
            return

        damage, critical = self._regular_attack(character, enemy)
        fight.enemy_health -= damage
        life_steal = passive_total(character, PassiveEffect.LIFE_STEAL)
        if life_steal > 0:
            healed = int(damage * life_steal / 100.0)
            fight.player_health = min(int(character.max_health), fight.player_health + healed)
        normal, crits = PLAYER_ATTACK_ACTIONS[character.character_class]
        actions = crits if critical else normal
        fight.record("player", actions[len(fight.rounds) % len(actions)], damage, critical=critical)

    def _enemy_tick(self, character: Character, enemy: EnemyTemplate, fight: _Fight) -> None:
        action = ENEMY_ATTACK_ACTIONS[len(fight.rounds) % len(ENEMY_ATTACK_ACTIONS)]
        evasion = passive_total(character, PassiveEffect.EVASION)
        if evasion > 0 and self._rng.chance(evasion / 100.0):
            counter = passive_total(character, PassiveEffect.COUNTER_ATTACK)
            if counter > 0 and self._rng.chance(counter / 100.0):
                damage, critical = self._regular_attack(character, enemy)
                fight.enemy_health -= damage
                fight.record(
                    "enemy",
                    f"{action}, but you evade and counter for {damage}",
                    0,
                    counter_damage=damage,
                    evaded=True,
                    critical=critical,
                )
            else:
                fight.record("enemy", f"{action}, but you evade", 0, evaded=True)
            return

        low, high = ENEMY_DAMAGE_BONUS_RANGE
        base = (int(enemy.strength) + int(enemy.intelligence)) // 2
        damage = int(base * ENEMY_DAMAGE_SCALE) + self._rng.uniform_int(low, high)
        damage = max(1, damage - int(character.endurance) // DEFENSE_DIVISOR)
        reduction = min(passive_total(character, PassiveEffect.DAMAGE_REDUCTION), DAMAGE_REDUCTION_CAP_PERCENT)
        if reduction > 0:
            damage = max(1, int(damage * (1 - reduction / 100.0)))
        fight.player_health -= damage
        reflected = int(damage * passive_total(character, PassiveEffect.THORNS) / 100.0)
        fight.enemy_health -= reflected
        fight.record("enemy", action, damage, counter_damage=reflected)

    def simulate(self, character: Character, enemy: EnemyTemplate) -> BattleOutcome:
        """Run a timed fight and apply its consequences to ``character``."""
        if character.current_energy < BATTLE_ENERGY_COST:
            return self._fled(character, enemy)

        start_health = int(character.current_health)
        fight = _Fight(player_health=start_health, enemy_health=int(enemy.health))
        player_interval = attack_interval_ms(character.agility)
        enemy_interval = attack_interval_ms(enemy.agility)
        player_next, enemy_next = player_interval, enemy_interval

        while not fight.finished and fight.elapsed_ms < BATTLE_TIME_LIMIT_MS:
            if player_next <= enemy_next:
                fight.elapsed_ms = player_next
                player_next += player_interval
                self._player_tick(character, enemy, fight)
            else:
                fight.elapsed_ms = enemy_next
                enemy_next += enemy_interval
                self._enemy_tick(character, enemy, fight)

        # Thorns can drop both sides in one enemy tick; the enemy falling takes precedence.
        if fight.enemy_health <= 0:
            result = BattleResult.VICTORY
        elif fight.player_health <= 0:
            result = BattleResult.DEFEAT
        else:
            result = BattleResult.DRAW

        changes: list[StatChange] = []
        energy_change = apply_resource_delta(character, "Energy", -BATTLE_ENERGY_COST)
        if energy_change is not None:
            changes.append(energy_change)
        character.set_health(max(fight.player_health, 1))
        if character.current_health != start_health:
            changes.append(StatChange("Health", start_health, character.current_health, character.current_health - start_health))
        health_lost = start_health - max(fight.player_health, 0)

        experience = gold = reputation = 0
        level_up: Optional[LevelUpSummary] = None
        hero = character.name
        if result == BattleResult.VICTORY:
            experience = apply_bonus(character, BonusEffect.EXPERIENCE_GAIN, scaled_experience(enemy, int(character.level)))
            gold = int(enemy.gold_reward)
            if gold // 2 > 0:
                gold += self._rng.uniform_int(0, gold // 2)
            gold = apply_bonus(character, BonusEffect.GOLD_GAIN, gold)
            reputation = int(enemy.reputation_reward)
            for name, delta in (("Experience", experience), ("Gold", gold), ("Reputation", reputation)):
                change = apply_resource_delta(character, name, delta)
                if change is not None:
                    changes.append(change)
            level_up = self.progression.check_level_up(character)
            narrative = self._rng.pick(VICTORY_NARRATIVES).format(
                rounds=len(fight.rounds),
                seconds=fight.elapsed_ms // 1000,
                hero=hero,
                enemy=enemy.name,
            )
        elif result == BattleResult.DEFEAT:
            narrative = self._rng.pick(DEFEAT_NARRATIVES).format(hero=hero, enemy=enemy.name)
        else:
            narrative = DRAW_NARRATIVE.format(seconds=fight.elapsed_ms // 1000, hero=hero, enemy=enemy.name)

        logger.info(
            "Battle concluded",
            extra={
                "character_id": character.id,
                "enemy_id": enemy.id,
                "result": result.value,
                "rounds": len(fight.rounds),
            },
        )
        if self.event_publisher is not None:
            self.event_publisher(
                BattleConcluded(
                    character_id=character.id,
                    enemy_id=enemy.id,
                    result=result.value,
                    rounds=len(fight.rounds),
                    turn=character.total_turns,
                )
            )

        return BattleOutcome(
            result=result,
            narrative=narrative,
            rounds=tuple(fight.rounds),
            experience_gained=experience,
            gold_gained=gold,
            reputation_gained=reputation,
            health_lost=health_lost,
            energy_spent=BATTLE_ENERGY_COST,
            enemy=to_enemy_view(enemy),
            character_power=combat_power(character),
            enemy_power=enemy.power,
            elapsed_ms=fight.elapsed_ms,
            stat_changes=tuple(changes),
            level_up=level_up if level_up is not None and level_up.leveled_up else None,
        )


def battle_log_record(character: Character, enemy_id: int, outcome: BattleOutcome) -> BattleLogRecord:
    return BattleLogRecord(
        character_id=character.id,
        enemy_id=int(enemy_id),
        result=outcome.result,
        narrative=outcome.narrative,
        rounds_count=len(outcome.rounds),
        character_power=outcome.character_power,
        enemy_power=outcome.enemy_power,
        experience_gained=outcome.experience_gained,
        gold_gained=outcome.gold_gained,
        reputation_gained=outcome.reputation_gained,
        health_lost=outcome.health_lost,
        energy_spent=outcome.energy_spent,
        year=character.current_year,
        month=character.current_month,
        turn=character.total_turns,
    )
