from __future__ import annotations

from collections.abc import Callable, Sequence

from sqlalchemy import text

from chronicles.domain.models.character import Character
from chronicles.domain.models.session import GameSession
from chronicles.domain.models.stats import StatType
from .connection import SessionLocal


_CHARACTER_COLUMNS = (
    "session_id",
    "name",
    "character_class",
    *(stat.attribute for stat in StatType),
    "current_energy",
    "max_energy",
    "current_health",
    "max_health",
    "level",
    "experience",
    "gold",
    "reputation",
    "current_year",
    "current_month",
    "total_turns",
)

_SESSION_COLUMNS = ("name", "character_id", "state", "final_score", "ending", "unlocked_storybooks")


def _dialect(session) -> str:
    return session.bind.dialect.name if session.bind is not None else "mysql"


def _upsert_statement(session, table: str, key_columns: Sequence[str], columns: Sequence[str]):
    all_columns = (*key_columns, *columns)
    column_list = ", ".join(all_columns)
    values = ", ".join(f":{name}" for name in all_columns)
    if _dialect(session) == "mysql":
        updates = ",\n                ".join(f"{name} = VALUES({name})" for name in columns)
        return text(
            f"""
            INSERT INTO {table} ({column_list})
            VALUES ({values})
            ON DUPLICATE KEY UPDATE
                {updates}
            """
        )
    updates = ",\n                ".join(f"{name} = excluded.{name}" for name in columns)
    keys = ", ".join(key_columns)
    return text(
        f"""
        INSERT INTO {table} ({column_list})
        VALUES ({values})
        ON CONFLICT({keys}) DO UPDATE SET
            {updates}
        """
    )


def character_row_params(character: Character) -> dict[str, object]:
    params: dict[str, object] = {
        "session_id": character.session_id,
        "name": character.name,
        "character_class": character.character_class.value,
        "current_energy": character.current_energy,
        "max_energy": character.max_energy,
        "current_health": character.current_health,
        "max_health": character.max_health,
        "level": character.level,
        "experience": character.experience,
        "gold": character.gold,
        "reputation": character.reputation,
        "current_year": character.current_year,
        "current_month": character.current_month,
        "total_turns": character.total_turns,
    }
    params.update({stat.attribute: character.get_stat(stat) for stat in StatType})
    return params


def session_row_params(game_session: GameSession) -> dict[str, object]:
    return {
        "name": game_session.name,
        "character_id": game_session.character_id,
        "state": game_session.state.value,
        "final_score": game_session.final_score,
        "ending": game_session.ending,
        "unlocked_storybooks": ",".join(str(item) for item in game_session.unlocked_storybook_ids) or None,
    }


def write_character_children(session, character: Character) -> None:
    """Replace the loadout rows and upsert acquired skills for a stored character."""
    session.execute(
        text("DELETE FROM character_storybook WHERE character_id = :cid"),
        {"cid": character.id},
    )
    for entry in character.equipped:
        session.execute(
            text(
                """
                INSERT INTO character_storybook (character_id, slot, storybook_id)
                VALUES (:cid, :slot, :storybook_id)
                """
            ),
            {"cid": character.id, "slot": entry.slot, "storybook_id": entry.storybook.id},
        )
    statement = _upsert_statement(
        session,
        "character_skill",
        ("character_id", "skill_id"),
        ("acquired_on_turn", "acquisition_source"),
    )
    for entry in character.skills:
        session.execute(
            statement,
            {
                "character_id": character.id,
                "skill_id": entry.skill.id,
                "acquired_on_turn": entry.acquired_on_turn,
                "acquisition_source": entry.acquisition_source,
            },
        )


def upsert_character(session, character: Character) -> None:
    statement = _upsert_statement(session, "game_character", ("character_id",), _CHARACTER_COLUMNS)
    session.execute(statement, {"character_id": character.id, **character_row_params(character)})
    write_character_children(session, character)


def upsert_session(session, game_session: GameSession) -> None:
    statement = _upsert_statement(session, "game_session", ("session_id",), _SESSION_COLUMNS)
    session.execute(statement, {"session_id": game_session.id, **session_row_params(game_session)})


def save_character_and_session_atomic(
    character: Character,
    game_session: GameSession | None,
    operations: Sequence[Callable[[object], None]] | None = None,
) -> None:
    """Persist character, session and history rows in one DB transaction."""
    with SessionLocal.begin() as session:
        upsert_character(session, character)
        if game_session is not None:
            upsert_session(session, game_session)
        for operation in operations or ():
            operation(session)
