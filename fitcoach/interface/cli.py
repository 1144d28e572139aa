"""CLI interface for fitcoach using Rich."""

import argparse
import logging

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from fitcoach.agent.chat import ChatOrchestrator, ExchangeResult, build_user_context
from fitcoach.agent.errors import RemoteGenerationFailure
from fitcoach.agent.personalities import (
    PERSONALITIES,
    QUICK_ACTION_SUGGESTIONS,
    clean_quick_action,
    get_option,
)
from fitcoach.agent.response_cache import ResponseCache
from fitcoach.agent.response_parser import (
    StructuredContent,
    TipsList,
    WorkoutPlan,
    classify_content,
)
from fitcoach.memory.profile import LifestyleSnapshot, ProfileStore
from fitcoach.memory.sessions import SessionStore

console = Console()
logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Failed to send message. Please check your connection and try again."


def _exercise_detail(value: str | None) -> str:
    return escape(value) if value else "-"


def render_workout_plan(plan: WorkoutPlan) -> None:
    """Render each day of a workout plan as its own table."""
    for day in plan.days:
        title = day.day if not day.focus else f"{day.day} - {day.focus}"
        table = Table(title=escape(title), title_justify="left")
        table.add_column("Exercise", style="bold")
        table.add_column("Sets")
        table.add_column("Reps")
        table.add_column("Duration")
        table.add_column("Notes", style="dim")
        for ex in day.exercises:
            table.add_row(
                escape(ex.name),
                _exercise_detail(ex.sets),
                _exercise_detail(ex.reps),
                _exercise_detail(ex.duration),
                _exercise_detail(ex.notes),
            )
        console.print(table)
        if day.notes:
            console.print(f"  [italic]Note:[/italic] {escape(day.notes)}")


def render_tips_list(tips: TipsList) -> None:
    body = "\n".join(f"{i}. {escape(tip)}" for i, tip in enumerate(tips.tips, 1))
    console.print(Panel(body, title=escape(tips.title or "Tips"), border_style="green"))


def render_content(content: StructuredContent) -> None:
    if isinstance(content, WorkoutPlan):
        render_workout_plan(content)
    elif isinstance(content, TipsList):
        render_tips_list(content)
    else:
        console.print(Panel(escape(content.text), border_style="cyan"))


def render_result(result: ExchangeResult) -> None:
    if result.is_safety_refusal:
        console.print(Panel(escape(result.reply_text), title="Safety", border_style="red"))
    else:
        render_content(result.structured_content)
    if result.suggested_follow_ups:
        console.print("[bold]Related questions:[/bold]")
        for q in result.suggested_follow_ups:
            console.print(f"  - {escape(q)}")


def choose_personality() -> str:
    """Interactive personality picker."""
    table = Table(title="Choose your coaching personality")
    table.add_column("#", style="bold")
    table.add_column("Personality")
    table.add_column("Description")
    for i, opt in enumerate(PERSONALITIES, 1):
        table.add_row(str(i), opt.title, opt.description)
    console.print(table)
    choice = IntPrompt.ask("Select", choices=[str(i) for i in range(1, len(PERSONALITIES) + 1)])
    return PERSONALITIES[choice - 1].profile.value


def prompt_lifestyle(current: LifestyleSnapshot) -> LifestyleSnapshot:
    return LifestyleSnapshot(
        steps=IntPrompt.ask("Daily steps", default=int(current.steps)),
        exercise_minutes=IntPrompt.ask("Exercise minutes today", default=int(current.exercise_minutes)),
        sleep_hours=FloatPrompt.ask("Sleep last night (hours)", default=float(current.sleep_hours)),
    )


def show_history(sessions: SessionStore, user_id: str) -> None:
    summaries = sessions.list_sessions(user_id, limit=10)
    if not summaries:
        console.print("[dim]No conversations yet.[/dim]")
        return
    table = Table(title="Recent conversations")
    table.add_column("Session")
    table.add_column("Started")
    table.add_column("Turns", justify="right")
    table.add_column("First message")
    for s in summaries:
        table.add_row(s.session_key, s.created_at.replace("T", " "), str(s.turn_count), escape(s.preview))
    console.print(table)


def replay_session(sessions: SessionStore, session_key: str) -> None:
    """Re-render a stored conversation, re-deriving structured content."""
    for turn in sessions.load_session(session_key):
        if turn.role == "user":
            console.print(f"[bold blue]You:[/bold blue] {escape(turn.content)}")
        else:
            render_content(classify_content(turn.content))


def chat_loop(
    orchestrator: ChatOrchestrator,
    profiles: ProfileStore,
    sessions: SessionStore,
    user_id: str,
) -> None:
    session_key = sessions.current_session(user_id)
    console.print(
        "[dim]Commands: /lifestyle /personality /history /open <session> /new /coins /quick /quit[/dim]"
    )

    while True:
        text = Prompt.ask("[bold blue]You[/bold blue]").strip()
        if not text:
            continue

        if text == "/quit":
            break
        if text == "/coins":
            console.print(f"Coins: [bold yellow]{profiles.coins(user_id)}[/bold yellow]")
            continue
        if text == "/history":
            show_history(sessions, user_id)
            continue
        if text.startswith("/open "):
            try:
                requested = sessions.resolve_session(user_id, text.split(maxsplit=1)[1])
                replay_session(sessions, requested)
                session_key = requested
            except ValueError as e:
                console.print(f"[red]{escape(str(e))}[/red]")
            continue
        if text == "/new":
            session_key = sessions.start_session(user_id)
            console.print(f"[dim]Started {session_key}[/dim]")
            continue
        if text == "/lifestyle":
            current = profiles.load(user_id).lifestyle
            profiles.update_lifestyle(user_id, prompt_lifestyle(current))
            continue
        if text == "/personality":
            profile = profiles.update_personality(user_id, choose_personality())
            console.print(f"Personality: [bold]{get_option(profile.personality).title}[/bold]")
            continue
        if text == "/quick":
            for i, s in enumerate(QUICK_ACTION_SUGGESTIONS, 1):
                console.print(f"  {i}. {s}")
            pick = IntPrompt.ask(
                "Send", choices=[str(i) for i in range(1, len(QUICK_ACTION_SUGGESTIONS) + 1)],
            )
            text = clean_quick_action(QUICK_ACTION_SUGGESTIONS[pick - 1])

        context = build_user_context(profiles, sessions, user_id, session_key=session_key)
        try:
            with console.status("Thinking..."):
                result = orchestrator.evaluate(text, context)
        except RemoteGenerationFailure as e:
            logger.warning("Exchange failed: %r", e)
            console.print(f"[red]{FAILURE_NOTICE}[/red]")
            if e.retryable:
                console.print(f"[dim]Your message was kept; resend it: {escape(text)}[/dim]")
            continue

        render_result(result)
        balance = profiles.add_coins(user_id, result.coin_delta)
        if result.coin_delta:
            console.print(f"[yellow]+{result.coin_delta} coin (total {balance})[/yellow]")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="fitcoach: adaptive fitness companion")
    parser.add_argument("--user", default="local-user", help="User id")
    parser.add_argument(
        "--personality",
        choices=[opt.profile.value for opt in PERSONALITIES],
        help="Personality for a new user (asked interactively if omitted)",
    )
    parser.add_argument("--no-cache", action="store_true", help="Disable the response cache")
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    profiles = ProfileStore()
    sessions = SessionStore()

    profile = profiles.load(args.user)
    if profile is None:
        personality = args.personality or choose_personality()
        profile = profiles.get_or_create(args.user, personality)

    option = get_option(profile.personality)
    console.print(Panel(
        f"Welcome! Personality: [bold]{option.title}[/bold]\n"
        f"Day {profiles.tenure_days(args.user)} with your coach - coins: {profile.coins}",
        title="fitcoach",
    ))

    orchestrator = ChatOrchestrator(
        session_store=sessions,
        cache=None if args.no_cache else ResponseCache(),
    )
    chat_loop(orchestrator, profiles, sessions, args.user)


if __name__ == "__main__":
    main()
