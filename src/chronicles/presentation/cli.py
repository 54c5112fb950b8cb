from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chronicles.application.dtos import (
    BattleOutcome,
    FinalSummary,
    GameStateView,
    RandomEventView,
    StatChange,
    TurnResult,
)
from chronicles.application.errors import ChroniclesError
from chronicles.application.services.game_service import GameService
from chronicles.domain.models.character import CharacterClass
from chronicles.domain.models.event import ActionType


_CONSOLE = Console()
_BORDER_STATE = "yellow"
_BORDER_RESULT = "green"
_BORDER_FAILURE = "red"
_BORDER_BATTLE = "magenta"
_BORDER_EVENT = "cyan"
_BORDER_FINAL = "bright_yellow"
_MAX_ROUNDS_SHOWN = 12
_QUIT_WORDS = {"q", "quit", "exit"}


def _ornate_title(title: str) -> str:
    return f"[bold yellow]{title}[/bold yellow]"


def _prompt(message: str = "> ") -> str:
    return input(message).strip()


def _format_change(change: StatChange) -> str:
    sign = "+" if change.change > 0 else ""
    return f"{change.name}: {change.old_value} -> {change.new_value} ({sign}{change.change})"


def render_state(state: GameStateView) -> None:
    view = state.character
    header = Table.grid(padding=(0, 1))
    header.add_column(style="bold yellow", justify="right")
    header.add_column(style="white")
    header.add_row("Adventurer", f"{view.name} the {view.character_class}")
    header.add_row("Date", f"Year {view.current_year}, Month {view.current_month} ({state.season.season})")
    header.add_row("Turn", f"{view.total_turns}/120")
    header.add_row("Level", f"{view.level} ({view.experience}/{view.experience_for_next_level} XP)")
    header.add_row("Health", f"{view.current_health}/{view.max_health}")
    header.add_row("Energy", f"{view.current_energy}/{view.max_energy}")
    header.add_row("Gold", str(view.gold))
    header.add_row("Reputation", str(view.reputation))
    header.add_row(
        "Stats",
        f"STR {view.strength}  AGI {view.agility}  INT {view.intelligence}  "
        f"END {view.endurance}  CHA {view.charisma}  LCK {view.luck}",
    )
    if view.storybooks:
        header.add_row("Storybooks", "\n".join(f"[{book.slot}] {book.name}" for book in view.storybooks))
    if view.skills:
        header.add_row("Skills", ", ".join(view.skills))
    _CONSOLE.print(
        Panel.fit(
            header,
            title=_ornate_title(state.session_name),
            subtitle=f"[dim]{state.season.description}[/dim]",
            subtitle_align="left",
            border_style=_BORDER_STATE,
        )
    )


def render_battle(outcome: BattleOutcome) -> None:
    table = Table(show_header=True, header_style="bold yellow", title=f"vs {outcome.enemy.name}")
    table.add_column("#", justify="right")
    table.add_column("Time")
    table.add_column("Attacker")
    table.add_column("Action")
    table.add_column("Damage", justify="right")
    table.add_column("You", justify="right")
    table.add_column("Enemy", justify="right")
    rounds = outcome.rounds
    for battle_round in rounds[-_MAX_ROUNDS_SHOWN:]:
        action = battle_round.action
        if battle_round.critical:
            action += " [bold red](critical)[/bold red]"
        if battle_round.evaded:
            action += " [dim](evaded)[/dim]"
        table.add_row(
            str(battle_round.index),
            f"{battle_round.time_ms / 1000:.1f}s",
            battle_round.attacker,
            action,
            f"{battle_round.damage} (+{battle_round.counter_damage} back)" if battle_round.counter_damage else str(battle_round.damage),
            str(battle_round.player_health),
            str(battle_round.enemy_health),
        )
    if len(rounds) > _MAX_ROUNDS_SHOWN:
        _CONSOLE.print(f"[dim]... {len(rounds) - _MAX_ROUNDS_SHOWN} earlier round(s) omitted[/dim]")
    _CONSOLE.print(table)
    _CONSOLE.print(
        Panel.fit(
            outcome.narrative,
            title=_ornate_title(outcome.result.value),
            border_style=_BORDER_BATTLE,
        )
    )
    if outcome.level_up is not None:
        _CONSOLE.print(f"[bold green]Level up! You are now level {outcome.level_up.new_level}.[/bold green]")


def render_turn_result(result: TurnResult) -> None:
    if result.battle is not None and result.battle.rounds:
        render_battle(result.battle)
    lines = [result.narrative]
    lines.extend(_format_change(change) for change in result.stat_changes)
    _CONSOLE.print(
        Panel.fit(
            "\n".join(line for line in lines if line),
            title=_ornate_title(result.action),
            border_style=_BORDER_RESULT if result.success else _BORDER_FAILURE,
        )
    )


def render_event(view: RandomEventView) -> None:
    table = Table(show_header=True, header_style="bold yellow")
    table.add_column("#", justify="right")
    table.add_column("Choice")
    table.add_column("Check")
    for index, choice in enumerate(view.choices, start=1):
        text = choice.text
        if choice.is_hidden:
            text = f"[dim]{text} (locked: {choice.requirement_hint or 'requirements not met'})[/dim]"
        check = f"{choice.check_stat} {choice.check_difficulty}" if choice.check_stat else "-"
        table.add_row(str(index), text, check)
    source = f" [dim]({view.source_storybook})[/dim]" if view.source_storybook else ""
    _CONSOLE.print(
        Panel.fit(
            f"{view.description}{source}\n[dim]{view.rarity} / {view.outcome}[/dim]",
            title=_ornate_title(view.title),
            border_style=_BORDER_EVENT,
        )
    )
    _CONSOLE.print(table)


def render_final_summary(summary: FinalSummary) -> None:
    body = "\n".join(
        [
            f"Final score: [bold]{summary.final_score}[/bold]",
            f"Battles won: {summary.victories}",
            "",
            summary.ending,
        ]
    )
    _CONSOLE.print(Panel.fit(body, title=_ornate_title("Your Chronicle Ends"), border_style=_BORDER_FINAL))


def resolve_event_interactively(game: GameService, character_id: int, view: Optional[RandomEventView]) -> None:
    while view is not None:
        render_event(view)
        raw = _prompt("Choose an option: ")
        if not raw.isdigit() or not 1 <= int(raw) <= len(view.choices):
            _CONSOLE.print("[red]Pick one of the listed options.[/red]")
            continue
        choice = view.choices[int(raw) - 1]
        result = game.resolve_event_choice(character_id, view.id, choice.id)
        lines = [result.narrative]
        if result.roll_result is not None:
            lines.append(f"Roll: {result.roll_result} vs {result.check_difficulty}")
        lines.extend(_format_change(change) for change in result.stat_changes)
        _CONSOLE.print(
            Panel.fit(
                "\n".join(lines),
                title=_ornate_title(view.title),
                border_style=_BORDER_RESULT if result.success else _BORDER_FAILURE,
            )
        )
        if not result.success:
            continue
        view = result.follow_up_event


def _choose_training(game: GameService, state: GameStateView) -> Optional[int]:
    options = state.training or tuple(game.list_training(state.character.id))
    for index, scenario in enumerate(options, start=1):
        seasonal = " [green](in season)[/green]" if scenario.has_seasonal_bonus else ""
        _CONSOLE.print(f"{index}) {scenario.name} - {scenario.energy_cost} energy{seasonal}")
    raw = _prompt("Training (number): ")
    if not raw.isdigit() or not 1 <= int(raw) <= len(options):
        return None
    return options[int(raw) - 1].id


def _choose_enemy(game: GameService, state: GameStateView) -> Optional[int]:
    enemies = game.list_enemies(state.character.id)
    for index, enemy in enumerate(enemies, start=1):
        _CONSOLE.print(f"{index}) {enemy.name} (tier {enemy.difficulty_tier}, {enemy.enemy_type})")
    raw = _prompt("Opponent (number, ENTER for a random foe): ")
    if raw.isdigit() and 1 <= int(raw) <= len(enemies):
        return enemies[int(raw) - 1].id
    return None


def run_game_loop(game: GameService, session_id: int) -> None:
    actions = list(ActionType)
    while True:
        state = game.get_state(session_id)
        if state.final_summary is not None:
            render_final_summary(state.final_summary)
            return
        render_state(state)
        menu = "  ".join(f"{index}) {action.value}" for index, action in enumerate(actions, start=1))
        _CONSOLE.print(f"{menu}  Q) Quit")
        raw = _prompt()
        if raw.lower() in _QUIT_WORDS:
            _CONSOLE.print("Your chronicle is saved. Goodbye.")
            return
        action = actions[int(raw) - 1] if raw.isdigit() and 1 <= int(raw) <= len(actions) else ActionType.parse(raw)
        if action is None:
            _CONSOLE.print("[red]Unknown action.[/red]")
            continue

        target_id = None
        if action == ActionType.TRAIN:
            target_id = _choose_training(game, state)
        elif action == ActionType.BATTLE:
            target_id = _choose_enemy(game, state)

        try:
            result = game.resolve_turn(session_id, action, target_id)
        except ChroniclesError as exc:
            _CONSOLE.print(f"[red]{exc}[/red]")
            continue
        render_turn_result(result)
        if result.triggered_event is not None and state.character.id is not None:
            resolve_event_interactively(game, state.character.id, result.triggered_event)
        if result.final_summary is not None:
            render_final_summary(result.final_summary)
            return


def create_session_interactively(game: GameService) -> int:
    name = _prompt("Name your hero: ") or "Wanderer"
    classes = list(CharacterClass)
    for index, character_class in enumerate(classes, start=1):
        _CONSOLE.print(f"{index}) {character_class.value}")
    raw = _prompt("Class (number): ")
    character_class = classes[int(raw) - 1] if raw.isdigit() and 1 <= int(raw) <= len(classes) else classes[0]

    storybooks = game.list_storybooks()
    for storybook in storybooks:
        bonuses = ", ".join(f"{stat.value} +{value}" for stat, value in storybook.stat_bonuses().items())
        _CONSOLE.print(f"{storybook.id}) {storybook.name} [dim]({storybook.theme}: {bonuses})[/dim]")
    raw = _prompt("Storybooks (comma separated ids, up to 5, ENTER for none): ")
    known = {storybook.id for storybook in storybooks}
    storybook_ids = [int(part) for part in raw.split(",") if part.strip().isdigit() and int(part) in known][:5]

    state = game.create_session(f"{name}'s Chronicle", name, character_class, storybook_ids)
    return int(state.session_id)


def _choose_session(game: GameService) -> Optional[int]:
    sessions = game.list_sessions()
    if not sessions:
        _CONSOLE.print("No saved chronicles yet.")
        return None
    for session in sessions:
        _CONSOLE.print(f"{session.id}) {session.name} [dim]{session.state.value}[/dim]")
    raw = _prompt("Chronicle (number): ")
    known = {session.id for session in sessions}
    if raw.isdigit() and int(raw) in known:
        return int(raw)
    return None


def main_menu(game: GameService) -> None:
    _CONSOLE.print(Panel.fit("[bold yellow]CHRONICLES OF FATE[/bold yellow]", border_style=_BORDER_STATE))
    while True:
        _CONSOLE.print("1) New Chronicle  2) Continue  3) Quit")
        raw = _prompt()
        if raw == "1":
            run_game_loop(game, create_session_interactively(game))
        elif raw == "2":
            session_id = _choose_session(game)
            if session_id is not None:
                run_game_loop(game, session_id)
        elif raw == "3" or raw.lower() in _QUIT_WORDS:
            _CONSOLE.print(Panel.fit("[bold magenta]Farewell, traveller.[/bold magenta]", border_style="magenta"))
            return
