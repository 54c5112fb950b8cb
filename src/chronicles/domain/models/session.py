from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class GameState(str, Enum):
    NEW_GAME = "NewGame"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class GameSession:
    id: Optional[int]
    name: str
    character_id: Optional[int] = None
    state: GameState = GameState.NEW_GAME
    final_score: Optional[int] = None
    ending: Optional[str] = None
    unlocked_storybook_ids: list[int] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.state in {GameState.COMPLETED, GameState.FAILED}

    def start(self) -> None:
        if self.state == GameState.NEW_GAME:
            self.state = GameState.IN_PROGRESS

    def complete(self, *, final_score: int, ending: str) -> bool:
        """Move an active session to Completed; finished sessions are left untouched."""
        if self.is_finished:
            return False
        self.state = GameState.COMPLETED
        self.final_score = int(final_score)
        self.ending = str(ending)
        return True
