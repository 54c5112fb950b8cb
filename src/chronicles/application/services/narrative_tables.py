from __future__ import annotations

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.character import CharacterClass
from chronicles.domain.models.stats import StatType


JOURNEY_ENDED = "The 10-year journey has ended. Your story is complete!"

REST_NARRATIVES = {
    Season.SPRING: "You rest among blooming flowers, feeling rejuvenated by the gentle spring breeze.",
    Season.SUMMER: "You find a cool, shaded spot to rest and recover from the summer heat.",
    Season.AUTUMN: "The crisp autumn air refreshes you as you take time to recover.",
    Season.WINTER: "You rest by a warm fire, sheltered from the winter cold.",
}

EXPLORE_NARRATIVES = {
    Season.SPRING: "You venture out into the awakening world, where new paths reveal themselves.",
    Season.SUMMER: "Under the bright summer sun, you explore distant lands and hidden places.",
    Season.AUTUMN: "You wander through forests painted in gold and crimson, seeking adventure.",
    Season.WINTER: "Braving the cold, you explore snow-covered landscapes and frozen paths.",
}

STUDY_NARRATIVES = {
    Season.SPRING: "You study old texts by an open window as the world wakes outside.",
    Season.SUMMER: "Long summer evenings give you time to pore over borrowed scrolls.",
    Season.AUTUMN: "The quiet of autumn suits your studies; the lessons sink in deeply.",
    Season.WINTER: "Snowed in with your books, you lose yourself in study by candlelight.",
}

TRAINING_SEASONAL_SUFFIX = " The favorable season boosts your training effectiveness!"

TRAINING_BONUS_NARRATIVES = (
    "A moment of clarity grants you additional insight!",
    "You push through your limits and achieve a breakthrough!",
    "Everything clicks into place - exceptional progress!",
    "Your dedication pays off with bonus gains!",
    "A surge of motivation drives you to train even harder!",
)

TRAINING_FAILURE_NARRATIVES = (
    "An accident during {name} training leaves you injured. Rest and recover.",
    "You push too hard during training and hurt yourself. Take care of your health.",
    "The training goes wrong and you sustain an injury. Sometimes setbacks happen.",
    "Overexertion leads to an injury. Remember to pace yourself.",
    "A training mishap leaves you battered. Even failures are lessons.",
)

PLAYER_ATTACK_ACTIONS = {
    CharacterClass.WARRIOR: (
        ("swings their sword", "strikes with their weapon", "attacks fiercely"),
        ("delivers a devastating blow", "executes a powerful cleave", "unleashes a mighty strike"),
    ),
    CharacterClass.MAGE: (
        ("casts a spell", "hurls a magic bolt", "channels arcane energy"),
        ("casts a powerful spell", "unleashes arcane fury", "channels devastating magic"),
    ),
    CharacterClass.ROGUE: (
        ("strikes swiftly", "attacks with precision", "slashes quickly"),
        ("finds a vital spot", "strikes from the shadows", "delivers a precise critical blow"),
    ),
    CharacterClass.CLERIC: (
        ("invokes divine power", "strikes with blessed weapon", "channels holy energy"),
        ("calls down divine judgment", "smites with holy power", "channels radiant energy"),
    ),
    CharacterClass.RANGER: (
        ("fires an arrow", "strikes with precision", "attacks from range"),
        ("finds the perfect shot", "strikes a vital point", "unleashes a deadly volley"),
    ),
}

ENEMY_ATTACK_ACTIONS = ("strikes", "attacks", "lunges at you", "swings wildly")

VICTORY_NARRATIVES = (
    "After {rounds} exchanges of intense combat, {hero} emerges victorious over {enemy}!",
    "{hero} defeats {enemy} in a fierce battle lasting {seconds} seconds!",
    "With determination and skill, {hero} overcomes {enemy} after {rounds} exchanges!",
    "The battle is won! {hero} stands triumphant over the fallen {enemy}!",
)

DEFEAT_NARRATIVES = (
    "{hero} falls in battle against {enemy}. A tactical retreat is in order...",
    "{enemy} proves too powerful. {hero} must recover and grow stronger.",
    "Defeated by {enemy}, {hero} retreats to fight another day.",
    "The battle is lost, but {hero}'s journey continues. Learn from this defeat.",
)

DRAW_NARRATIVE = (
    "After {seconds} seconds of intense combat, neither {hero} nor {enemy} could claim victory. "
    "Both fighters retreat to recover."
)

POSITIVE_STAT_NARRATIVES = {
    StatType.STRENGTH: "A surge of determination strengthens your muscles! (+{amount} Strength)",
    StatType.AGILITY: "Your reflexes feel sharper than ever! (+{amount} Agility)",
    StatType.INTELLIGENCE: "A moment of clarity expands your understanding! (+{amount} Intelligence)",
    StatType.ENDURANCE: "You feel more resilient and hardy! (+{amount} Endurance)",
    StatType.CHARISMA: "Your confidence grows after a positive encounter! (+{amount} Charisma)",
    StatType.LUCK: "A fortunate omen crosses your path! (+{amount} Luck)",
}

NEGATIVE_STAT_NARRATIVES = {
    StatType.STRENGTH: "A bout of weakness leaves you feeling frail. (-{amount} Strength)",
    StatType.AGILITY: "A stumble makes you doubt your reflexes. (-{amount} Agility)",
    StatType.INTELLIGENCE: "Mental fog clouds your thoughts. (-{amount} Intelligence)",
    StatType.ENDURANCE: "Fatigue wears down your resilience. (-{amount} Endurance)",
    StatType.CHARISMA: "An awkward encounter dents your confidence. (-{amount} Charisma)",
    StatType.LUCK: "An ill omen dampens your fortune. (-{amount} Luck)",
}

POSITIVE_RESOURCE_NARRATIVES = {
    "Gold": (
        "You find a forgotten pouch of coins! (+{amount} Gold)",
        "A grateful stranger rewards your kindness! (+{amount} Gold)",
        "You discover a small cache of treasure! (+{amount} Gold)",
        "A merchant overpays you by accident! (+{amount} Gold)",
    ),
    "Energy": (
        "A refreshing breeze invigorates you! (+{amount} Energy)",
        "You find a moment of perfect rest! (+{amount} Energy)",
        "A kind soul offers you a revitalizing meal! (+{amount} Energy)",
        "The beauty of nature fills you with renewed vigor! (+{amount} Energy)",
    ),
    "Reputation": (
        "Word of your deeds spreads favorably! (+{amount} Reputation)",
        "A local bard sings of your exploits! (+{amount} Reputation)",
        "Your good nature impresses those nearby! (+{amount} Reputation)",
        "People whisper admiringly as you pass! (+{amount} Reputation)",
    ),
    "Experience": (
        "You reflect on past lessons and gain insight! (+{amount} Experience)",
        "A wise traveler shares valuable knowledge! (+{amount} Experience)",
        "You observe something that deepens your understanding! (+{amount} Experience)",
        "Experience from your journey crystallizes in your mind! (+{amount} Experience)",
    ),
}

NEGATIVE_RESOURCE_NARRATIVES = {
    "Gold": (
        "A pickpocket lightens your purse! (-{amount} Gold)",
        "You lose some coins through a hole in your pocket. (-{amount} Gold)",
        "An unexpected toll drains your funds. (-{amount} Gold)",
        "A scam artist tricks you out of some gold. (-{amount} Gold)",
    ),
    "Energy": (
        "The heat of the day saps your strength. (-{amount} Energy)",
        "Restless thoughts disturb your peace. (-{amount} Energy)",
        "A sudden chill leaves you feeling drained. (-{amount} Energy)",
        "An uneasy feeling exhausts you. (-{amount} Energy)",
    ),
    "Health": (
        "You stub your toe badly on a rock. (-{amount} Health)",
        "A minor fall leaves you bruised. (-{amount} Health)",
        "Something you ate doesn't agree with you. (-{amount} Health)",
        "A small creature bites you unexpectedly. (-{amount} Health)",
    ),
}

EXPLORE_GOLD_NARRATIVE = "Your wandering turns up a few forgotten coins. (+{amount} Gold)"
EXPLORE_STAT_NARRATIVE = "The road teaches you something new. (+{amount} {stat})"

SEASON_DESCRIPTIONS = {
    Season.SPRING: "A time of renewal. Nature awakens and new opportunities arise.",
    Season.SUMMER: "The sun shines bright. Perfect for physical training and exploration.",
    Season.AUTUMN: "Harvest season. A time for reflection and magical studies.",
    Season.WINTER: "Cold winds blow. Rest well and prepare for challenges ahead.",
}
