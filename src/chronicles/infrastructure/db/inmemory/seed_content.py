from __future__ import annotations

from chronicles.domain.models.calendar import Season
from chronicles.domain.models.enemy import EnemyTemplate
from chronicles.domain.models.event import ActionType, ChoicePayload, EventChoice, EventOutcome, RandomEvent
from chronicles.domain.models.rarity import Rarity
from chronicles.domain.models.requirements import StatRequirements
from chronicles.domain.models.skill import (
    ActiveSkill,
    BonusEffect,
    BonusSkill,
    PassiveEffect,
    PassiveSkill,
    Skill,
)
from chronicles.domain.models.stats import StatType
from chronicles.domain.models.storybook import Storybook
from chronicles.domain.models.training import TrainingScenario


T, R, E, B, S = ActionType.TRAIN, ActionType.REST, ActionType.EXPLORE, ActionType.BATTLE, ActionType.STUDY

BRAVE_BOOK_ID = 1
WIND_BOOK_ID = 2
SHADOW_BOOK_ID = 3
FORTUNE_BOOK_ID = 4
DRAGON_BOOK_ID = 5


def default_training_scenarios() -> list[TrainingScenario]:
    common = dict(base_stat_gain=5, secondary_stat_gain=2, energy_cost=15, bonus_chance=0.15, bonus_stat_gain=3, experience_gain=15)
    return [
        TrainingScenario(
            id=1,
            name="Strength Training",
            description="Intense combat drills and weight training to build raw power.",
            primary_stat=StatType.STRENGTH,
            secondary_stat=StatType.ENDURANCE,
            failure_chance=0.05,
            failure_health_penalty=8,
            narrative="You push your body to its limits with intense physical training.",
            **common,
        ),
        TrainingScenario(
            id=2,
            name="Agility Training",
            description="Speed drills and acrobatics to enhance reflexes and coordination.",
            primary_stat=StatType.AGILITY,
            secondary_stat=StatType.LUCK,
            failure_chance=0.06,
            failure_health_penalty=6,
            narrative="You practice swift movements and lightning-fast reflexes.",
            **common,
        ),
        TrainingScenario(
            id=3,
            name="Intelligence Training",
            description="Study arcane texts and solve complex puzzles to sharpen your mind.",
            primary_stat=StatType.INTELLIGENCE,
            secondary_stat=StatType.CHARISMA,
            failure_chance=0.03,
            failure_health_penalty=3,
            bonus_seasons=(Season.AUTUMN, Season.WINTER),
            seasonal_bonus_multiplier=1.25,
            narrative="You immerse yourself in knowledge and mental exercises.",
            **common,
        ),
        TrainingScenario(
            id=4,
            name="Endurance Training",
            description="Long-distance running and stamina exercises to build resilience.",
            primary_stat=StatType.ENDURANCE,
            secondary_stat=StatType.STRENGTH,
            failure_chance=0.04,
            failure_health_penalty=5,
            bonus_seasons=(Season.SPRING, Season.SUMMER),
            seasonal_bonus_multiplier=1.2,
            narrative="You test your limits with grueling endurance exercises.",
            **common,
        ),
        TrainingScenario(
            id=5,
            name="Charisma Training",
            description="Practice public speaking and social interactions to improve your presence.",
            primary_stat=StatType.CHARISMA,
            secondary_stat=StatType.INTELLIGENCE,
            failure_chance=0.03,
            failure_health_penalty=2,
            narrative="You work on your social skills and learn to influence others.",
            **common,
        ),
        TrainingScenario(
            id=6,
            name="Luck Training",
            description="Test fate with games of chance and learn to read fortune's signs.",
            primary_stat=StatType.LUCK,
            secondary_stat=StatType.AGILITY,
            base_stat_gain=5,
            secondary_stat_gain=2,
            energy_cost=15,
            bonus_chance=0.20,
            bonus_stat_gain=4,
            failure_chance=0.08,
            failure_health_penalty=4,
            experience_gain=15,
            narrative="You tempt fate and learn to recognize fortune's favor.",
        ),
    ]


def default_enemies() -> list[EnemyTemplate]:
    rows = (
        # name, description, str, agi, int, end, hp, tier, type, xp, gold, rep
        ("Forest Goblin", "A mischievous creature lurking in the woods.", 20, 30, 10, 15, 50, 1, "Creature", 25, 10, 5),
        ("Giant Rat", "An oversized rodent with sharp teeth.", 15, 35, 5, 10, 40, 1, "Beast", 20, 5, 3),
        ("Bandit Thug", "A common criminal preying on travelers.", 35, 25, 15, 30, 70, 2, "Humanoid", 40, 25, 10),
        ("Wild Wolf", "A fierce predator of the wilderness.", 40, 50, 15, 35, 60, 2, "Beast", 35, 5, 8),
        ("Skeleton Warrior", "An undead soldier animated by dark magic.", 45, 30, 10, 40, 65, 3, "Undead", 45, 20, 12),
        ("Orc Scout", "A quick and cunning orc tracker.", 50, 45, 25, 40, 80, 3, "Humanoid", 50, 30, 12),
        ("Dire Wolf", "A massive wolf with supernatural strength.", 55, 60, 20, 45, 90, 4, "Beast", 60, 15, 15),
        ("Bandit Leader", "A ruthless commander of highway robbers.", 60, 50, 40, 55, 100, 5, "Humanoid", 75, 60, 20),
        ("Orc Warrior", "A brutal fighter from the mountain tribes.", 70, 35, 20, 65, 120, 6, "Humanoid", 90, 50, 25),
        ("Zombie Brute", "A powerful undead monstrosity.", 80, 20, 5, 90, 150, 7, "Undead", 100, 30, 28),
        ("Dark Mage", "A practitioner of forbidden magic.", 30, 40, 90, 35, 80, 8, "Humanoid", 110, 70, 30),
        ("Werewolf", "A cursed human transformed into a beast.", 85, 75, 30, 70, 130, 9, "Beast", 130, 45, 35),
        ("Cave Troll", "A massive creature of immense strength.", 100, 20, 10, 95, 180, 10, "Giant", 150, 60, 40),
    )
    enemies = []
    for index, (name, description, strength, agility, intelligence, endurance, health, tier, kind, xp, gold, rep) in enumerate(rows, start=1):
        enemies.append(
            EnemyTemplate(
                id=index,
                name=name,
                description=description,
                strength=strength,
                agility=agility,
                intelligence=intelligence,
                endurance=endurance,
                health=health,
                difficulty_tier=tier,
                enemy_type=kind,
                experience_reward=xp,
                gold_reward=gold,
                reputation_reward=rep,
                seasons=(Season.AUTUMN, Season.WINTER, Season.SPRING) if name == "Werewolf" else (),
            )
        )
    return enemies


def default_storybooks() -> list[Storybook]:
    return [
        Storybook(
            id=BRAVE_BOOK_ID,
            name="Tales of the Brave",
            description="Stories of legendary warriors inspire courage and strength.",
            theme="Combat",
            strength_bonus=5,
            endurance_bonus=3,
            event_trigger_chance=0.80,
        ),
        Storybook(
            id=WIND_BOOK_ID,
            name="Whispers of the Wind",
            description="Ancient legends of swift heroes who moved like the breeze.",
            theme="Speed",
            agility_bonus=5,
            luck_bonus=3,
            event_trigger_chance=0.80,
        ),
        Storybook(
            id=SHADOW_BOOK_ID,
            name="Grimoire of Shadows",
            description="A mysterious tome filled with arcane secrets and dark knowledge.",
            theme="Magic",
            intelligence_bonus=8,
            charisma_bonus=2,
            event_trigger_chance=0.80,
        ),
        Storybook(
            id=FORTUNE_BOOK_ID,
            name="Chronicle of Fortune",
            description="Tales of adventurers blessed by fate itself.",
            theme="Luck",
            luck_bonus=10,
            charisma_bonus=5,
            event_trigger_chance=0.80,
        ),
        Storybook(
            id=DRAGON_BOOK_ID,
            name="Epic of the Dragon Slayer",
            description="The legendary tale of heroes who faced dragons and emerged victorious.",
            theme="Legendary",
            strength_bonus=10,
            agility_bonus=5,
            endurance_bonus=5,
            event_trigger_chance=0.80,
            is_unlockable=True,
        ),
    ]


QUICK_REFLEXES, EAGLE_EYE, IRON_SKIN, VAMPIRIC_TOUCH, COUNTER_STRIKE, THORNED_ARMOR = 1, 2, 3, 4, 5, 6
POWER_STRIKE, SWIFT_SLASH, ARCANE_BOLT, BERSERKER_RAGE = 7, 8, 9, 10
FORTUNES_FAVOR, WISDOM_SEEKER, BOUNDLESS_ENERGY, REGENERATION, LUCKY_STAR, MASTERS_GUIDANCE = 11, 12, 13, 14, 15, 16


def default_skills() -> list[Skill]:
    return [
        PassiveSkill(QUICK_REFLEXES, "Quick Reflexes", PassiveEffect.EVASION, 8.0,
                     "Your heightened reflexes give you a chance to dodge incoming attacks."),
        PassiveSkill(EAGLE_EYE, "Eagle Eye", PassiveEffect.CRITICAL_CHANCE, 10.0,
                     "Your keen observation allows you to find weak points in enemy defenses."),
        PassiveSkill(IRON_SKIN, "Iron Skin", PassiveEffect.DAMAGE_REDUCTION, 15.0,
                     "Your hardened body reduces damage from all attacks.", Rarity.UNCOMMON),
        PassiveSkill(VAMPIRIC_TOUCH, "Vampiric Touch", PassiveEffect.LIFE_STEAL, 10.0,
                     "Your attacks drain life force from enemies, healing you slightly.", Rarity.RARE),
        PassiveSkill(COUNTER_STRIKE, "Counter Strike", PassiveEffect.COUNTER_ATTACK, 15.0,
                     "When hit, you have a chance to automatically counter-attack.", Rarity.UNCOMMON),
        PassiveSkill(THORNED_ARMOR, "Thorned Armor", PassiveEffect.THORNS, 20.0,
                     "Enemies that strike you take damage from your magical thorns.", Rarity.RARE),
        ActiveSkill(POWER_STRIKE, "Power Strike", 0.20, 15, StatType.STRENGTH, 0.3,
                    "You unleash a powerful strike!", "A devastating blow that deals extra damage based on your strength."),
        ActiveSkill(SWIFT_SLASH, "Swift Slash", 0.25, 10, StatType.AGILITY, 0.35,
                    "You strike with lightning speed!", "A quick attack that strikes before the enemy can react."),
        ActiveSkill(ARCANE_BOLT, "Arcane Bolt", 0.20, 12, StatType.INTELLIGENCE, 0.4,
                    "You hurl a bolt of arcane energy!", "Channel magical energy into a damaging projectile."),
        ActiveSkill(BERSERKER_RAGE, "Berserker Rage", 0.10, 60, StatType.STRENGTH, 0.7,
                    "You enter a berserker rage!", "Enter a battle frenzy, dealing massive damage.", Rarity.EPIC),
        BonusSkill(FORTUNES_FAVOR, "Fortune's Favor", BonusEffect.GOLD_GAIN, 15.0, 5,
                   "Lady Luck smiles upon you, increasing gold found."),
        BonusSkill(WISDOM_SEEKER, "Wisdom Seeker", BonusEffect.EXPERIENCE_GAIN, 10.0, 3,
                   "Your thirst for knowledge grants bonus experience."),
        BonusSkill(BOUNDLESS_ENERGY, "Boundless Energy", BonusEffect.ENERGY_GAIN, 20.0, 10,
                   "Your vitality knows no bounds, recovering more energy when resting.", Rarity.UNCOMMON),
        BonusSkill(REGENERATION, "Regeneration", BonusEffect.HEALTH_REGEN, 0.0, 5,
                   "Your body heals naturally over time.", Rarity.UNCOMMON),
        BonusSkill(LUCKY_STAR, "Lucky Star", BonusEffect.LUCK_BOOST, 15.0, 0,
                   "Fortune favors you in all endeavors.", Rarity.RARE),
        BonusSkill(MASTERS_GUIDANCE, "Master's Guidance", BonusEffect.TRAINING_BOOST, 20.0, 1,
                   "An invisible mentor guides your training.", Rarity.RARE),
    ]


MARKED_SPOT_EVENT_ID = 5


def default_events() -> list[RandomEvent]:
    return [
        RandomEvent(
            id=1,
            title="Mysterious Stranger",
            description="A cloaked figure approaches you with an offer.",
            trigger_actions=(E, R),
            base_probability=0.15,
            choices=(
                EventChoice(1, "Accept the offer", ChoicePayload(
                    "The stranger teaches you a secret technique.", strength=3, intelligence=2, experience=20), display_order=1),
                EventChoice(2, "Decline politely", ChoicePayload(
                    "You politely refuse. The stranger nods and vanishes.", charisma=2), display_order=2),
                EventChoice(
                    3,
                    "Demand to know their identity",
                    ChoicePayload("Your boldness impresses the stranger.", charisma=5, reputation=10),
                    failure=ChoicePayload("The stranger is offended and disappears.", charisma=-2),
                    check_stat=StatType.CHARISMA,
                    check_difficulty=50,
                    display_order=3,
                ),
            ),
        ),
        RandomEvent(
            id=2,
            title="Hidden Treasure",
            description="You discover signs of buried treasure nearby.",
            rarity=Rarity.UNCOMMON,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(E,),
            base_probability=0.10,
            choices=(
                EventChoice(
                    4,
                    "Dig for the treasure",
                    ChoicePayload("You uncover a chest of gold!", gold=50, experience=15),
                    failure=ChoicePayload("You dig but find only rocks.", energy=-10),
                    check_stat=StatType.LUCK,
                    check_difficulty=40,
                    display_order=1,
                ),
                EventChoice(
                    5,
                    "Mark the location for later",
                    ChoicePayload("You note the location carefully.", intelligence=1),
                    follow_up_event_id=MARKED_SPOT_EVENT_ID,
                    display_order=2,
                ),
            ),
        ),
        RandomEvent(
            id=3,
            title="Ambush!",
            description="Bandits leap from the shadows to attack!",
            outcome=EventOutcome.NEGATIVE,
            trigger_actions=(E, B),
            base_probability=0.12,
            choices=(
                EventChoice(
                    6,
                    "Fight back!",
                    ChoicePayload("You defeat the bandits and claim their loot!", strength=2, gold=30, experience=25),
                    failure=ChoicePayload("You're overwhelmed and barely escape.", health=-20, gold=-15),
                    check_stat=StatType.STRENGTH,
                    check_difficulty=45,
                    trigger_battle_id=3,
                    display_order=1,
                ),
                EventChoice(
                    7,
                    "Try to escape",
                    ChoicePayload("Your quick reflexes help you escape!", agility=2, experience=10),
                    failure=ChoicePayload("You trip while fleeing.", health=-10),
                    check_stat=StatType.AGILITY,
                    check_difficulty=40,
                    display_order=2,
                ),
                EventChoice(
                    8,
                    "Negotiate",
                    ChoicePayload("Your silver tongue convinces them to let you go.", charisma=3, reputation=5),
                    failure=ChoicePayload("They laugh and attack anyway.", health=-15),
                    check_stat=StatType.CHARISMA,
                    check_difficulty=55,
                    requirements=StatRequirements.from_mapping({StatType.CHARISMA: 15}),
                    display_order=3,
                ),
            ),
        ),
        RandomEvent(
            id=4,
            title="Training Insight",
            description="You have a moment of clarity during training.",
            rarity=Rarity.UNCOMMON,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(T, S),
            base_probability=0.08,
            choices=(
                EventChoice(9, "Focus on the insight", ChoicePayload(
                    "Your understanding deepens significantly!", intelligence=5, experience=30), display_order=1),
                EventChoice(10, "Apply it to your training", ChoicePayload(
                    "You immediately put the insight to use.", strength=2, agility=2, endurance=2), display_order=2),
            ),
        ),
        # Reached only through "Mark the location for later".
        RandomEvent(
            id=MARKED_SPOT_EVENT_ID,
            title="Return to the Marked Spot",
            description="Weeks later you return to the place you marked. The ground has shifted.",
            rarity=Rarity.UNCOMMON,
            outcome=EventOutcome.POSITIVE,
            choices=(
                EventChoice(11, "Dig carefully", ChoicePayload(
                    "Patience pays off: a small coffer of coins.", gold=35, luck=1), display_order=1),
                EventChoice(12, "Leave it to fate", ChoicePayload(
                    "You walk away, oddly lighter of heart.", luck=2), display_order=2),
            ),
        ),
        RandomEvent(
            id=6,
            title="Warrior's Spirit",
            description="Reading tales of valor fills you with fighting spirit.",
            storybook_id=BRAVE_BOOK_ID,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(T, B),
            base_probability=0.12,
            choices=(
                EventChoice(13, "Channel the courage", ChoicePayload(
                    "You feel stronger!", strength=2, endurance=1, experience=10), display_order=1),
                EventChoice(14, "Meditate on the lessons", ChoicePayload(
                    "Wisdom from warriors past.", intelligence=2), display_order=2),
            ),
        ),
        RandomEvent(
            id=7,
            title="Commander's Mantle",
            description="A spectral general offers to teach you leadership.",
            storybook_id=BRAVE_BOOK_ID,
            rarity=Rarity.UNCOMMON,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(R, T),
            base_probability=0.07,
            choices=(
                EventChoice(
                    15,
                    "Learn to lead",
                    ChoicePayload("You understand the weight of command.", charisma=4, intelligence=2, reputation=10),
                    requirements=StatRequirements.from_mapping({StatType.CHARISMA: 20}),
                    display_order=1,
                ),
                EventChoice(16, "Focus on personal strength", ChoicePayload(
                    "A leader must be strong.", strength=4, endurance=2), display_order=2),
            ),
        ),
        RandomEvent(
            id=8,
            title="Trial of the Champion",
            description="A spectral arena materializes, challenging you to prove your worth.",
            storybook_id=BRAVE_BOOK_ID,
            rarity=Rarity.EPIC,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(T, B),
            base_probability=0.03,
            choices=(
                EventChoice(
                    17,
                    "Accept the trial",
                    ChoicePayload(
                        "You emerge victorious, transformed!",
                        strength=10,
                        endurance=5,
                        agility=3,
                        experience=50,
                        reputation=15,
                        grant_skill_id=COUNTER_STRIKE,
                    ),
                    failure=ChoicePayload("You fall, but learn from defeat.", strength=2, endurance=2),
                    check_stat=StatType.STRENGTH,
                    check_difficulty=60,
                    display_order=1,
                ),
                EventChoice(18, "Observe and learn", ChoicePayload(
                    "Watching teaches much.", strength=4, intelligence=4), display_order=2),
            ),
        ),
        RandomEvent(
            id=9,
            title="Wind Dancer's Lesson",
            description="A figure made of drifting leaves beckons you to follow its steps.",
            storybook_id=WIND_BOOK_ID,
            rarity=Rarity.RARE,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(T, E),
            base_probability=0.05,
            choices=(
                EventChoice(19, "Mirror the dance", ChoicePayload(
                    "Your feet learn what your mind cannot.", agility=4, luck=2, grant_skill_id=QUICK_REFLEXES), display_order=1),
                EventChoice(20, "Watch from afar", ChoicePayload(
                    "You memorise the rhythm.", agility=2), display_order=2),
            ),
        ),
        RandomEvent(
            id=10,
            title="The Whispering Gate",
            description="Runes on the page rearrange themselves into a door of light.",
            storybook_id=SHADOW_BOOK_ID,
            rarity=Rarity.RARE,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(S, R),
            base_probability=0.05,
            choices=(
                EventChoice(
                    21,
                    "Step through",
                    ChoicePayload("Arcane power crackles at your fingertips.", intelligence=5, experience=30, grant_skill_id=ARCANE_BOLT),
                    failure=ChoicePayload("The gate rejects you with a jolt.", health=-8),
                    check_stat=StatType.INTELLIGENCE,
                    check_difficulty=45,
                    display_order=1,
                ),
                EventChoice(22, "Transcribe the runes", ChoicePayload(
                    "Your notes will be useful later.", intelligence=2, charisma=1), display_order=2),
            ),
        ),
        RandomEvent(
            id=11,
            title="Gambler's Coin",
            description="A coin falls from the book's spine, warm to the touch.",
            storybook_id=FORTUNE_BOOK_ID,
            rarity=Rarity.UNCOMMON,
            outcome=EventOutcome.POSITIVE,
            trigger_actions=(E, R),
            base_probability=0.08,
            choices=(
                EventChoice(23, "Flip it", ChoicePayload(
                    "Heads. Of course it was heads.", luck=3, gold=20, grant_skill_id=FORTUNES_FAVOR), display_order=1),
                EventChoice(24, "Pocket it", ChoicePayload("It feels lucky.", luck=1), display_order=2),
            ),
        ),
        RandomEvent(
            id=12,
            title="Dragonfire Memory",
            description="The smell of smoke rises from the pages as an old battle replays.",
            storybook_id=DRAGON_BOOK_ID,
            rarity=Rarity.LEGENDARY,
            outcome=EventOutcome.CRITICAL,
            trigger_actions=(B,),
            trigger_seasons=(Season.SUMMER,),
            base_probability=0.01,
            choices=(
                EventChoice(
                    25,
                    "Stand in the flames",
                    ChoicePayload("You walk out of the fire reborn.", strength=8, endurance=8, experience=60, grant_skill_id=BERSERKER_RAGE),
                    failure=ChoicePayload("The heat drives you back.", health=-15, endurance=1),
                    check_stat=StatType.ENDURANCE,
                    check_difficulty=65,
                    display_order=1,
                ),
                EventChoice(26, "Study the slayer's stance", ChoicePayload(
                    "You learn how heroes hold their ground.", strength=3, agility=3), display_order=2),
            ),
        ),
    ]
