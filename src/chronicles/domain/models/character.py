from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from chronicles.domain.models.calendar import GAME_LENGTH_TURNS, Season, next_month
from chronicles.domain.models.skill import Skill, SkillType
from chronicles.domain.models.stats import StatType, clamp_stat
from chronicles.domain.models.storybook import Storybook


MAX_EQUIPPED_STORYBOOKS = 5
LOADOUT_SLOTS = tuple(range(1, MAX_EQUIPPED_STORYBOOKS + 1))
DEFAULT_MAX_ENERGY = 100
DEFAULT_MAX_HEALTH = 100


class CharacterClass(str, Enum):
    WARRIOR = "Warrior"
    MAGE = "Mage"
    ROGUE = "Rogue"
    CLERIC = "Cleric"
    RANGER = "Ranger"

    @classmethod
    def parse(cls, raw: object) -> "CharacterClass":
        text = str(raw or "").strip().lower()
        for value in cls:
            if value.value.lower() == text:
                return value
        raise ValueError(f"Unsupported character class: {raw}")


CLASS_STARTING_STATS: Dict[CharacterClass, Dict[StatType, int]] = {
    CharacterClass.WARRIOR: {
        StatType.STRENGTH: 20, StatType.AGILITY: 12, StatType.INTELLIGENCE: 8,
        StatType.ENDURANCE: 18, StatType.CHARISMA: 10, StatType.LUCK: 12,
    },
    CharacterClass.MAGE: {
        StatType.STRENGTH: 8, StatType.AGILITY: 12, StatType.INTELLIGENCE: 22,
        StatType.ENDURANCE: 10, StatType.CHARISMA: 14, StatType.LUCK: 14,
    },
    CharacterClass.ROGUE: {
        StatType.STRENGTH: 12, StatType.AGILITY: 22, StatType.INTELLIGENCE: 14,
        StatType.ENDURANCE: 10, StatType.CHARISMA: 12, StatType.LUCK: 18,
    },
    CharacterClass.CLERIC: {
        StatType.STRENGTH: 10, StatType.AGILITY: 10, StatType.INTELLIGENCE: 18,
        StatType.ENDURANCE: 16, StatType.CHARISMA: 16, StatType.LUCK: 10,
    },
    CharacterClass.RANGER: {
        StatType.STRENGTH: 14, StatType.AGILITY: 20, StatType.INTELLIGENCE: 12,
        StatType.ENDURANCE: 14, StatType.CHARISMA: 10, StatType.LUCK: 14,
    },
}


@dataclass
class EquippedStorybook:
    slot: int
    storybook: Storybook


@dataclass
class CharacterSkill:
    skill: Skill
    acquired_on_turn: int = 0
    acquisition_source: str = ""


@dataclass
class Character:
    id: Optional[int]
    name: str
    character_class: CharacterClass = CharacterClass.WARRIOR
    session_id: Optional[int] = None
    strength: int = 10
    agility: int = 10
    intelligence: int = 10
    endurance: int = 10
    charisma: int = 10
    luck: int = 10
    current_energy: int = DEFAULT_MAX_ENERGY
    max_energy: int = DEFAULT_MAX_ENERGY
    current_health: int = DEFAULT_MAX_HEALTH
    max_health: int = DEFAULT_MAX_HEALTH
    level: int = 1
    experience: int = 0
    gold: int = 0
    reputation: int = 0
    current_year: int = 1
    current_month: int = 1
    total_turns: int = 0
    equipped: List[EquippedStorybook] = field(default_factory=list)
    skills: List[CharacterSkill] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.character_class, CharacterClass):
            self.character_class = CharacterClass.parse(self.character_class)
        for stat in StatType:
            self.set_stat(stat, getattr(self, stat.attribute))
        self.current_energy = max(0, min(int(self.current_energy), int(self.max_energy)))
        self.current_health = max(1, min(int(self.current_health), int(self.max_health)))

    @classmethod
    def for_class(cls, name: str, character_class: CharacterClass, **kwargs) -> "Character":
        stats = {stat.attribute: value for stat, value in CLASS_STARTING_STATS[character_class].items()}
        stats.update(kwargs)
        return cls(id=stats.pop("id", None), name=name, character_class=character_class, **stats)

    def get_stat(self, stat: StatType) -> int:
        return int(getattr(self, stat.attribute))

    def set_stat(self, stat: StatType, value: int) -> None:
        setattr(self, stat.attribute, clamp_stat(value))

    def add_stat(self, stat: StatType, delta: int) -> None:
        self.set_stat(stat, self.get_stat(stat) + int(delta))

    def set_energy(self, value: int) -> None:
        self.current_energy = max(0, min(int(value), self.max_energy))

    def set_health(self, value: int) -> None:
        self.current_health = max(1, min(int(value), self.max_health))

    @property
    def total_power(self) -> int:
        return sum(self.get_stat(stat) for stat in StatType)

    @property
    def season(self) -> Season:
        return Season.for_month(self.current_month)

    @property
    def is_game_complete(self) -> bool:
        return self.total_turns >= GAME_LENGTH_TURNS

    def advance_turn(self) -> None:
        self.total_turns += 1
        self.current_year, self.current_month = next_month(self.current_year, self.current_month)

    def equipped_storybooks(self) -> List[Storybook]:
        return [entry.storybook for entry in sorted(self.equipped, key=lambda entry: entry.slot)]

    def equipped_storybook_ids(self) -> List[int]:
        return [storybook.id for storybook in self.equipped_storybooks()]

    def storybook_in_slot(self, slot: int) -> Optional[Storybook]:
        for entry in self.equipped:
            if entry.slot == int(slot):
                return entry.storybook
        return None

    def equip_storybook(self, storybook: Storybook, slot: int) -> bool:
        slot = int(slot)
        if slot not in LOADOUT_SLOTS:
            return False
        occupied = self.storybook_in_slot(slot) is not None
        if len(self.equipped) >= MAX_EQUIPPED_STORYBOOKS and not occupied:
            return False
        self.equipped = [
            entry
            for entry in self.equipped
            if entry.slot != slot and entry.storybook.id != storybook.id
        ]
        self.equipped.append(EquippedStorybook(slot=slot, storybook=storybook))
        self.equipped.sort(key=lambda entry: entry.slot)
        return True

    def unequip_slot(self, slot: int) -> bool:
        remaining = [entry for entry in self.equipped if entry.slot != int(slot)]
        if len(remaining) == len(self.equipped):
            return False
        self.equipped = remaining
        return True

    def has_skill(self, skill_id: int) -> bool:
        return any(entry.skill.id == int(skill_id) for entry in self.skills)

    def grant_skill(self, skill: Skill, *, source: str = "", turn: Optional[int] = None) -> bool:
        """Add a skill once; returns False when it was already known."""
        if self.has_skill(skill.id):
            return False
        acquired = self.total_turns if turn is None else int(turn)
        self.skills.append(CharacterSkill(skill=skill, acquired_on_turn=acquired, acquisition_source=source))
        return True

    def skills_of_kind(self, kind: SkillType) -> List[Skill]:
        return [entry.skill for entry in self.skills if entry.skill.kind == kind]
