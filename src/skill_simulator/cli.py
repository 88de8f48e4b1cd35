"""CLI for talking to a skill without a device."""

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import settings
from .errors import SkillSimulatorError
from .models.envelope import SessionEndedReason
from .models.interaction_model import InteractionModel
from .services.interactor import SkillInteractor
from .services.invokers import Invoker, invoker_from_settings, local_invoker, remote_invoker
from .services.utterance import UtteranceMatcher

app = typer.Typer(help="Voice skill simulator CLI")
console = Console()

ModelOption = typer.Option(..., "--model", "-m", help="Interaction model JSON file", exists=True, dir_okay=False)
HandlerOption = typer.Option(None, "--handler", help="Local handler as module:function")
UrlOption = typer.Option(None, "--url", "-u", help="Remote skill endpoint")
AppIdOption = typer.Option(None, "--app-id", help="Application ID stamped on requests")


def _invoker(handler: str | None, url: str | None) -> Invoker:
    if url:
        return remote_invoker(url)
    if handler:
        return local_invoker(handler)
    return invoker_from_settings()


def _interactor(model_path: Path, handler: str | None, url: str | None, app_id: str | None) -> SkillInteractor:
    model = InteractionModel.from_file(model_path)
    return SkillInteractor(_invoker(handler, url), model, application_id=app_id)


def _print_turn(interactor: SkillInteractor, label: str, response: dict[str, Any]) -> None:
    session = interactor.context().session
    state = "active" if interactor.context().active_session() else "ended"
    console.print(f"\n[bold]{escape(label)}[/bold] [dim]({session.id}, {state})[/dim]")
    console.print_json(data=response)


def _run(coroutine: Any) -> None:
    try:
        asyncio.run(coroutine)
    except SkillSimulatorError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def match(
    phrase: str,
    model_path: Path = ModelOption,
):
    """Show which intent and slots a phrase resolves to, without calling a skill."""
    try:
        matcher = UtteranceMatcher(InteractionModel.from_file(model_path))
    except SkillSimulatorError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    utterance = matcher.match(phrase)
    if not utterance.matched():
        console.print(f"[yellow]No match.[/yellow] Fallback phrase: {matcher.model.default_phrase()!r}")
        raise typer.Exit(1)

    console.print(f"Intent: [cyan]{utterance.intent()}[/cyan]")
    slots = utterance.slots()
    if slots:
        table = Table(title="Slots")
        table.add_column("Name", style="cyan")
        table.add_column("Value", style="green")
        for name, value in slots.items():
            table.add_row(name, value)
        console.print(table)


@app.command()
def launch(
    model_path: Path = ModelOption,
    handler: str = HandlerOption,
    url: str = UrlOption,
    app_id: str = AppIdOption,
):
    """Launch the skill."""

    async def run() -> None:
        interactor = _interactor(model_path, handler, url, app_id)
        _print_turn(interactor, "LaunchRequest", await interactor.launched())

    _run(run())


@app.command()
def speak(
    phrases: list[str],
    model_path: Path = ModelOption,
    handler: str = HandlerOption,
    url: str = UrlOption,
    app_id: str = AppIdOption,
    launch_first: bool = typer.Option(False, "--launch", help="Send a launch request first"),
):
    """Say one or more phrases to the skill, in order, within one conversation."""

    async def run() -> None:
        interactor = _interactor(model_path, handler, url, app_id)
        if launch_first:
            _print_turn(interactor, "LaunchRequest", await interactor.launched())
        for phrase in phrases:
            _print_turn(interactor, repr(phrase), await interactor.spoken(phrase))

    _run(run())


@app.command()
def intend(
    intent_name: str,
    slot: list[str] = typer.Option([], "--slot", "-s", help="Slot as name=value, repeatable"),
    model_path: Path = ModelOption,
    handler: str = HandlerOption,
    url: str = UrlOption,
    app_id: str = AppIdOption,
):
    """Send an intent with explicit slot values."""
    slots: dict[str, str] = {}
    for item in slot:
        name, sep, value = item.partition("=")
        if not sep or not name:
            console.print(f"[red]Invalid slot {item!r}, expected name=value[/red]")
            raise typer.Exit(1)
        slots[name] = value

    async def run() -> None:
        interactor = _interactor(model_path, handler, url, app_id)
        _print_turn(interactor, intent_name, await interactor.intended(intent_name, slots))

    _run(run())


@app.command()
def end(
    reason: SessionEndedReason = typer.Option(SessionEndedReason.USER_INITIATED, "--reason", "-r"),
    error_message: str = typer.Option(None, "--error", help="Error message for reason ERROR"),
    model_path: Path = ModelOption,
    handler: str = HandlerOption,
    url: str = UrlOption,
    app_id: str = AppIdOption,
):
    """Send a session-ended request."""
    error_data = {"type": "INTERNAL_ERROR", "message": error_message} if error_message else None

    async def run() -> None:
        interactor = _interactor(model_path, handler, url, app_id)
        _print_turn(interactor, "SessionEndedRequest", await interactor.session_ended(reason, error_data))

    _run(run())


def main():
    """Entry point."""
    logging.basicConfig(
        level=logging.INFO if not settings.debug else logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app()


if __name__ == "__main__":
    main()
