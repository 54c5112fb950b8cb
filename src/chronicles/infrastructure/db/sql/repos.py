from typing import Callable, Iterable, List, Optional

from sqlalchemy import bindparam, text

from chronicles.application.services.balance_tables import eligible_enemy_tier_range
from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import Character, CharacterClass, CharacterSkill, EquippedStorybook
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import ActionType, RandomEvent
from chronicles.domain.models.history import BattleLogRecord, BattleResult, GameEventRecord, MessageLogEntry
from chronicles.domain.models.session import GameSession, GameState
from chronicles.domain.models.skill import Skill
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario
from chronicles.domain.repositories import (
    BattleLogRepository,
    CharacterRepository,
    EnemyRepository,
    GameEventRepository,
    GameSessionRepository,
    MessageLogRepository,
    RandomEventRepository,
    SkillRepository,
    StorybookRepository,
    TrainingScenarioRepository,
)
from chronicles.infrastructure.db.sql.atomic_persistence import (
    character_row_params,
    session_row_params,
    upsert_character,
    upsert_session,
    write_character_children,
)
from chronicles.infrastructure.db.sql.rows import (
    row_to_choice,
    row_to_enemy,
    row_to_event,
    row_to_scenario,
    row_to_skill,
    row_to_storybook,
)
from .connection import SessionLocal


_STORYBOOK_COLUMNS = """
    s.storybook_id, s.name, s.description, s.theme, s.strength_bonus, s.agility_bonus,
    s.intelligence_bonus, s.endurance_bonus, s.charisma_bonus, s.luck_bonus,
    s.event_trigger_chance, s.is_unlockable
"""

_SKILL_COLUMNS = """
    k.skill_id, k.name, k.skill_type, k.description, k.rarity, k.passive_effect, k.passive_value,
    k.trigger_chance, k.base_damage, k.scaling_stat, k.scaling_multiplier, k.narrative,
    k.bonus_effect, k.bonus_percentage, k.bonus_flat
"""


def _insert_returning_id(session, table: str, params: dict) -> int:
    columns = ", ".join(params)
    values = ", ".join(f":{name}" for name in params)
    result = session.execute(text(f"INSERT INTO {table} ({columns}) VALUES ({values})"), params)
    return int(result.lastrowid)


def _run_in_transaction(operation: Callable[[object], None], session) -> None:
    if session is None:
        with SessionLocal.begin() as internal_session:
            operation(internal_session)
        return
    operation(session)


class SqlCharacterRepository(CharacterRepository):
    def get(self, character_id: int) -> Optional[Character]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM game_character WHERE character_id = :cid"),
                {"cid": int(character_id)},
            ).first()
            if not row:
                return None

            character = Character(
                id=row.character_id,
                name=row.name,
                character_class=CharacterClass.parse(row.character_class),
                session_id=row.session_id,
                current_energy=row.current_energy,
                max_energy=row.max_energy,
                current_health=row.current_health,
                max_health=row.max_health,
                level=row.level,
                experience=row.experience,
                gold=row.gold,
                reputation=row.reputation,
                current_year=row.current_year,
                current_month=row.current_month,
                total_turns=row.total_turns,
                **{stat.attribute: getattr(row, stat.attribute) for stat in StatType},
            )
            character.equipped = self._load_loadout(session, row.character_id)
            character.skills = self._load_skills(session, row.character_id)
            return character

    def _load_loadout(self, session, character_id: int) -> list[EquippedStorybook]:
        rows = session.execute(
            text(
                f"""
                SELECT cs.slot, {_STORYBOOK_COLUMNS}
                FROM character_storybook cs
                JOIN storybook s ON s.storybook_id = cs.storybook_id
                WHERE cs.character_id = :cid
                ORDER BY cs.slot
                """
            ),
            {"cid": character_id},
        ).all()
        return [EquippedStorybook(slot=row.slot, storybook=row_to_storybook(row)) for row in rows]

    def _load_skills(self, session, character_id: int) -> list[CharacterSkill]:
        rows = session.execute(
            text(
                f"""
                SELECT cs.acquired_on_turn, cs.acquisition_source, {_SKILL_COLUMNS}
                FROM character_skill cs
                JOIN skill k ON k.skill_id = cs.skill_id
                WHERE cs.character_id = :cid
                ORDER BY cs.acquired_on_turn, k.skill_id
                """
            ),
            {"cid": character_id},
        ).all()
        skills = []
        for row in rows:
            skill = row_to_skill(row)
            if skill is None:
                continue
            skills.append(
                CharacterSkill(
                    skill=skill,
                    acquired_on_turn=row.acquired_on_turn,
                    acquisition_source=row.acquisition_source or "",
                )
            )
        return skills

    def save(self, character: Character) -> None:
        with SessionLocal.begin() as session:
            upsert_character(session, character)

    def create(self, character: Character) -> Character:
        with SessionLocal.begin() as session:
            character.id = _insert_returning_id(session, "game_character", character_row_params(character))
            write_character_children(session, character)
        return character


class SqlGameSessionRepository(GameSessionRepository):
    @staticmethod
    def _row_to_session(row) -> GameSession:
        unlocked = [int(item) for item in (row.unlocked_storybooks or "").split(",") if item.strip().isdigit()]
        return GameSession(
            id=row.session_id,
            name=row.name,
            character_id=row.character_id,
            state=GameState(row.state),
            final_score=row.final_score,
            ending=row.ending,
            unlocked_storybook_ids=unlocked,
        )

    def get(self, session_id: int) -> Optional[GameSession]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM game_session WHERE session_id = :sid"),
                {"sid": int(session_id)},
            ).first()
            return self._row_to_session(row) if row else None

    def save(self, game_session: GameSession) -> None:
        with SessionLocal.begin() as session:
            upsert_session(session, game_session)

    def create(self, game_session: GameSession) -> GameSession:
        with SessionLocal.begin() as session:
            game_session.id = _insert_returning_id(session, "game_session", session_row_params(game_session))
        return game_session

    def list_all(self) -> List[GameSession]:
        with SessionLocal() as session:
            rows = session.execute(text("SELECT * FROM game_session ORDER BY session_id")).all()
            return [self._row_to_session(row) for row in rows]


class SqlEnemyRepository(EnemyRepository):
    def get(self, enemy_id: int) -> Optional[EnemyTemplate]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM enemy WHERE enemy_id = :eid"),
                {"eid": int(enemy_id)},
            ).first()
            return row_to_enemy(row) if row else None

    def list_eligible(self, level: int, season: Season) -> List[EnemyTemplate]:
        low, high = eligible_enemy_tier_range(level)
        return [enemy for enemy in self.list_in_tier_range(low, high) if enemy.appears_in(season)]

    def list_in_tier_range(self, min_tier: int, max_tier: int) -> List[EnemyTemplate]:
        with SessionLocal() as session:
            rows = session.execute(
                text(
                    """
                    SELECT * FROM enemy
                    WHERE is_active = 1 AND difficulty_tier BETWEEN :low AND :high
                    ORDER BY difficulty_tier, enemy_id
                    """
                ),
                {"low": int(min_tier), "high": int(max_tier)},
            ).all()
            return [row_to_enemy(row) for row in rows]

    def list_by_tier(self, tier: int) -> List[EnemyTemplate]:
        return self.list_in_tier_range(tier, tier)


class SqlRandomEventRepository(RandomEventRepository):
    def _load_choices(self, session, event_ids: list[int]) -> dict[int, list]:
        grouped: dict[int, list] = {event_id: [] for event_id in event_ids}
        if not event_ids:
            return grouped
        statement = text(
            "SELECT * FROM event_choice WHERE event_id IN :event_ids ORDER BY display_order, choice_id"
        ).bindparams(bindparam("event_ids", expanding=True))
        for row in session.execute(statement, {"event_ids": event_ids}).all():
            grouped.setdefault(row.event_id, []).append(row_to_choice(row))
        return grouped

    def get(self, event_id: int) -> Optional[RandomEvent]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM random_event WHERE event_id = :eid"),
                {"eid": int(event_id)},
            ).first()
            if not row:
                return None
            choices = self._load_choices(session, [row.event_id])[row.event_id]
            return row_to_event(row, tuple(choices))

    def list_eligible(
        self,
        action: ActionType,
        season: Season,
        equipped_storybook_ids: Iterable[int],
    ) -> List[RandomEvent]:
        equipped = list(equipped_storybook_ids or ())
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT * FROM random_event WHERE is_active = 1 ORDER BY event_id")
            ).all()
            choices = self._load_choices(session, [row.event_id for row in rows])
            events = [row_to_event(row, tuple(choices.get(row.event_id, ()))) for row in rows]
        return [event for event in events if event.triggers_on(action, season) and event.available_with(equipped)]


class SqlTrainingScenarioRepository(TrainingScenarioRepository):
    def get(self, scenario_id: int) -> Optional[TrainingScenario]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM training_scenario WHERE scenario_id = :sid"),
                {"sid": int(scenario_id)},
            ).first()
            return row_to_scenario(row) if row else None

    def list_for_level(self, level: int) -> List[TrainingScenario]:
        with SessionLocal() as session:
            rows = session.execute(
                text(
                    """
                    SELECT * FROM training_scenario
                    WHERE is_active = 1 AND required_level <= :level
                    ORDER BY scenario_id
                    """
                ),
                {"level": int(level)},
            ).all()
            return [row_to_scenario(row) for row in rows]


class SqlSkillRepository(SkillRepository):
    def get(self, skill_id: int) -> Optional[Skill]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM skill WHERE skill_id = :kid"),
                {"kid": int(skill_id)},
            ).first()
            return row_to_skill(row) if row else None


class SqlStorybookRepository(StorybookRepository):
    def get(self, storybook_id: int) -> Optional[Storybook]:
        with SessionLocal() as session:
            row = session.execute(
                text("SELECT * FROM storybook WHERE storybook_id = :sid"),
                {"sid": int(storybook_id)},
            ).first()
            return row_to_storybook(row) if row else None

    def list_all(self) -> List[Storybook]:
        with SessionLocal() as session:
            rows = session.execute(text("SELECT * FROM storybook ORDER BY storybook_id")).all()
            return [row_to_storybook(row) for row in rows]


class SqlBattleLogRepository(BattleLogRepository):
    def append(self, record: BattleLogRecord) -> None:
        with SessionLocal.begin() as session:
            self.build_append_operation(record)(session)

    def build_append_operation(self, record: BattleLogRecord) -> Callable[[object], None]:
        def _operation(session) -> None:
            session.execute(
                text(
                    """
                    INSERT INTO battle_log (
                        character_id, enemy_id, result, narrative, rounds_count, character_power,
                        enemy_power, experience_gained, gold_gained, reputation_gained, health_lost,
                        energy_spent, year, month, turn
                    )
                    VALUES (
                        :character_id, :enemy_id, :result, :narrative, :rounds_count, :character_power,
                        :enemy_power, :experience_gained, :gold_gained, :reputation_gained, :health_lost,
                        :energy_spent, :year, :month, :turn
                    )
                    """
                ),
                {
                    "character_id": record.character_id,
                    "enemy_id": record.enemy_id,
                    "result": record.result.value,
                    "narrative": record.narrative,
                    "rounds_count": record.rounds_count,
                    "character_power": record.character_power,
                    "enemy_power": record.enemy_power,
                    "experience_gained": record.experience_gained,
                    "gold_gained": record.gold_gained,
                    "reputation_gained": record.reputation_gained,
                    "health_lost": record.health_lost,
                    "energy_spent": record.energy_spent,
                    "year": record.year,
                    "month": record.month,
                    "turn": record.turn,
                },
            )

        return lambda session: _run_in_transaction(_operation, session)

    def victory_count(self, character_id: int) -> int:
        with SessionLocal() as session:
            count = session.execute(
                text("SELECT COUNT(*) FROM battle_log WHERE character_id = :cid AND result = :result"),
                {"cid": int(character_id), "result": BattleResult.VICTORY.value},
            ).scalar()
            return int(count or 0)

    def list_for_character(self, character_id: int) -> List[BattleLogRecord]:
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT * FROM battle_log WHERE character_id = :cid ORDER BY battle_id"),
                {"cid": int(character_id)},
            ).all()
            return [
                BattleLogRecord(
                    character_id=row.character_id,
                    enemy_id=row.enemy_id,
                    result=BattleResult(row.result),
                    narrative=row.narrative or "",
                    rounds_count=row.rounds_count,
                    character_power=row.character_power,
                    enemy_power=row.enemy_power,
                    experience_gained=row.experience_gained,
                    gold_gained=row.gold_gained,
                    reputation_gained=row.reputation_gained,
                    health_lost=row.health_lost,
                    energy_spent=row.energy_spent,
                    year=row.year,
                    month=row.month,
                    turn=row.turn,
                )
                for row in rows
            ]


class SqlGameEventRepository(GameEventRepository):
    def append(self, record: GameEventRecord) -> None:
        with SessionLocal.begin() as session:
            self.build_append_operation(record)(session)

    def build_append_operation(self, record: GameEventRecord) -> Callable[[object], None]:
        def _operation(session) -> None:
            session.execute(
                text(
                    """
                    INSERT INTO game_event_log (
                        character_id, event_id, choice_id, year, month, turn,
                        check_succeeded, roll_result, result_summary
                    )
                    VALUES (
                        :character_id, :event_id, :choice_id, :year, :month, :turn,
                        :check_succeeded, :roll_result, :result_summary
                    )
                    """
                ),
                {
                    "character_id": record.character_id,
                    "event_id": record.event_id,
                    "choice_id": record.choice_id,
                    "year": record.year,
                    "month": record.month,
                    "turn": record.turn,
                    "check_succeeded": None if record.check_succeeded is None else int(record.check_succeeded),
                    "roll_result": record.roll_result,
                    "result_summary": record.result_summary,
                },
            )

        return lambda session: _run_in_transaction(_operation, session)

    def list_for_character(self, character_id: int) -> List[GameEventRecord]:
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT * FROM game_event_log WHERE character_id = :cid ORDER BY log_id"),
                {"cid": int(character_id)},
            ).all()
            return [
                GameEventRecord(
                    character_id=row.character_id,
                    event_id=row.event_id,
                    choice_id=row.choice_id,
                    year=row.year,
                    month=row.month,
                    turn=row.turn,
                    check_succeeded=None if row.check_succeeded is None else bool(row.check_succeeded),
                    roll_result=row.roll_result,
                    result_summary=row.result_summary or "",
                )
                for row in rows
            ]


class SqlMessageLogRepository(MessageLogRepository):
    def append(self, entry: MessageLogEntry) -> None:
        with SessionLocal.begin() as session:
            self.build_append_operation(entry)(session)

    def build_append_operation(self, entry: MessageLogEntry) -> Callable[[object], None]:
        def _operation(session) -> None:
            session.execute(
                text(
                    """
                    INSERT INTO message_log (session_id, message, kind, year, month, stat_changes_json)
                    VALUES (:session_id, :message, :kind, :year, :month, :stat_changes_json)
                    """
                ),
                {
                    "session_id": entry.session_id,
                    "message": entry.message,
                    "kind": entry.kind,
                    "year": entry.year,
                    "month": entry.month,
                    "stat_changes_json": entry.stat_changes_json,
                },
            )

        return lambda session: _run_in_transaction(_operation, session)

    def list_for_session(self, session_id: int) -> List[MessageLogEntry]:
        with SessionLocal() as session:
            rows = session.execute(
                text("SELECT * FROM message_log WHERE session_id = :sid ORDER BY message_id"),
                {"sid": int(session_id)},
            ).all()
            return [
                MessageLogEntry(
                    session_id=row.session_id,
                    message=row.message,
                    kind=row.kind,
                    year=row.year,
                    month=row.month,
                    stat_changes_json=row.stat_changes_json,
                )
                for row in rows
            ]
