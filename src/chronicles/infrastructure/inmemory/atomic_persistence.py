from __future__ import annotations

import copy
from collections.abc import Callable, Sequence

from chronicles.domain.models.character import Character
from chronicles.domain.models.session import GameSession


_SNAPSHOT_ATTRIBUTES = ("_characters", "_sessions", "_records", "_entries")


def create_inmemory_atomic_persistor(character_repo, session_repo, *history_repos) -> Callable[..., None]:
    repos = (character_repo, session_repo, *history_repos)

    def _persist(
        character: Character,
        session: GameSession | None,
        operations: Sequence[Callable[[object], None]] | None = None,
    ) -> None:
        snapshot = [
            (repo, attribute, copy.deepcopy(getattr(repo, attribute)))
            for repo in repos
            for attribute in _SNAPSHOT_ATTRIBUTES
            if hasattr(repo, attribute)
        ]
        try:
            character_repo.save(character)
            if session is not None:
                session_repo.save(session)
            for operation in operations or ():
                operation(None)
        except Exception:
            for repo, attribute, value in snapshot:
                setattr(repo, attribute, value)
            raise

    return _persist
