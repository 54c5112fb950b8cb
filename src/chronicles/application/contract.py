CONTRACT_VERSION = "1.0.0"

COMMAND_INTENTS = (
    "create_session",
    "resolve_turn",
    "resolve_training",
    "resolve_battle",
    "resolve_event_choice",
    "equip_storybook",
    "unequip_storybook",
    "set_loadout",
)

QUERY_INTENTS = (
    "get_state",
    "list_sessions",
    "list_storybooks",
    "list_training",
    "list_enemies",
    "list_events",
    "battle_history",
)

CONTRACT_DTO_TYPES = (
    "TurnResult",
    "TrainingResult",
    "BattleOutcome",
    "EventChoiceResult",
    "GameStateView",
    "LoadoutResult",
)
