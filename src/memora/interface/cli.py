"""memora CLI: decks, cards, study sessions, stats and data transfer."""

import json
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from memora import __version__
from memora.application.config import AppConfig, resolve_config
from memora.application.due import filter_cards
from memora.application.logging_setup import setup_logging
from memora.application.scheduler import validate_rating
from memora.application.session import SessionState
from memora.application.stats import StatsService, classify
from memora.application.study_service import StudyService
from memora.domain.errors import InvalidRating, MemoraError
from memora.infrastructure.json_store import JsonFileStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="memora: spaced-repetition flashcards for the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

deck_app = typer.Typer(help="Manage decks.", no_args_is_help=True)
app.add_typer(deck_app, name="deck")

card_app = typer.Typer(help="Manage cards.", no_args_is_help=True)
app.add_typer(card_app, name="card")

config_app = typer.Typer(help="Manage memora configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context) -> AppConfig:
    obj = ctx.find_root().obj or {}
    return resolve_config(
        {"data_file": obj.get("data_file"), "verbose": obj.get("verbose")}
    )


def _open_store(ctx: typer.Context) -> JsonFileStore:
    config = _config(ctx)
    setup_logging(config)
    try:
        return JsonFileStore(config.data_file)
    except MemoraError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)


def format_duration(ms: int) -> str:
    seconds = ms // 1000
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def _ask_rating() -> int | None:
    """Prompt until a valid 0-5 rating is entered. Returns None on 'q'."""
    while True:
        answer = typer.prompt("Rate recall 0-5 (q to quit)").strip().lower()
        if answer == "q":
            return None
        try:
            return validate_rating(int(answer))
        except (ValueError, InvalidRating):
            typer.secho("Please enter a number from 0 to 5.", fg="yellow")


def _format_time(ms: int | None) -> str:
    if ms is None:
        return "never"
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_file: Annotated[
        Path | None, typer.Option("--data-file", help="Path to the memora data file.")
    ] = None,
    verbose: Annotated[
        int | None,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = None,
):
    """Global settings for memora."""
    ctx.ensure_object(dict)
    ctx.obj["data_file"] = data_file
    # Unset leaves verbosity to the env and config file
    ctx.obj["verbose"] = verbose or None


# ---------------------------------------------------------------------------
# Deck subgroup
# ---------------------------------------------------------------------------


@deck_app.command("add")
def deck_add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    description: Annotated[str, typer.Option(help="Short description.")] = "",
):
    """Create a deck."""
    if not name.strip():
        typer.secho("Deck name cannot be empty.", fg="red")
        raise typer.Exit(2)

    store = _open_store(ctx)
    deck = store.add_deck(name.strip(), description.strip())
    typer.secho(f"Created deck '{deck.name}' ({deck.id})", fg="green")


@deck_app.command("list")
def deck_list(ctx: typer.Context):
    """List decks with their due counts."""
    store = _open_store(ctx)
    stats = StatsService(store)
    decks = store.list_decks()
    if not decks:
        typer.secho("No decks yet. Create one with 'memora deck add'.", fg="yellow")
        return

    for deck in decks:
        b = stats.deck_breakdown(deck.id)
        typer.echo(
            f"{deck.id}  {deck.name}  cards={deck.card_count}"
            f"  due={b.due_today + b.new}  tomorrow={b.due_tomorrow}"
            f"  week={b.due_this_week}  last studied={_format_time(deck.last_studied)}"
        )


@deck_app.command("edit")
def deck_edit(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    name: Annotated[str | None, typer.Option(help="New deck name.")] = None,
    description: Annotated[str | None, typer.Option(help="New description.")] = None,
):
    """Rename a deck or change its description."""
    if name is None and description is None:
        typer.secho("Nothing to change. Pass --name or --description.", fg="yellow")
        raise typer.Exit(2)
    if name is not None and not name.strip():
        typer.secho("Deck name cannot be empty.", fg="red")
        raise typer.Exit(2)

    store = _open_store(ctx)
    deck = store.get_deck(deck_id)
    if deck is None:
        typer.secho(f"Unknown deck: {deck_id}", fg="red")
        raise typer.Exit(1)

    deck = replace(
        deck,
        name=deck.name if name is None else name.strip(),
        description=deck.description if description is None else description.strip(),
    )
    store.update_deck(deck)
    typer.secho(f"Updated deck '{deck.name}'", fg="green")


@deck_app.command("delete")
def deck_delete(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Delete a deck with all its cards and review history."""
    store = _open_store(ctx)
    deck = store.get_deck(deck_id)
    if deck is None:
        typer.secho(f"Unknown deck: {deck_id}", fg="red")
        raise typer.Exit(1)

    if not force and not typer.confirm(
        f"Delete '{deck.name}' and its {deck.card_count} cards?"
    ):
        raise typer.Abort()

    store.delete_deck(deck_id)
    typer.secho(f"Deleted deck '{deck.name}'", fg="green")


# ---------------------------------------------------------------------------
# Card subgroup
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck id.")],
    front: Annotated[str, typer.Argument(help="Question side.")],
    back: Annotated[str, typer.Argument(help="Answer side.")],
    tag: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Tag (repeatable).")
    ] = None,
):
    """Add a card to a deck."""
    if not front.strip() or not back.strip():
        typer.secho("Front and back cannot be empty.", fg="red")
        raise typer.Exit(2)

    store = _open_store(ctx)
    if store.get_deck(deck_id) is None:
        typer.secho(f"Unknown deck: {deck_id}", fg="red")
        raise typer.Exit(1)

    tags = list(dict.fromkeys(t.strip() for t in (tag or []) if t.strip()))
    card = store.add_card(front.strip(), back.strip(), deck_id, tags)
    typer.secho(f"Added card {card.id}", fg="green")


@card_app.command("list")
def card_list(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Filter by deck id.")] = None,
    search: Annotated[str | None, typer.Option(help="Search front and back.")] = None,
    tag: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Filter by tag.")
    ] = None,
):
    """List cards with their status."""
    store = _open_store(ctx)
    cards = filter_cards(store.list_cards(), deck_id=deck, search=search, tags=tag)
    if not cards:
        typer.secho("No cards match your filters.", fg="yellow")
        return

    for card in cards:
        tags = f"  [{', '.join(card.tags)}]" if card.tags else ""
        typer.echo(f"{card.id}  {classify(card).value:<8}  {card.front}{tags}")


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    front: Annotated[str | None, typer.Option(help="New question side.")] = None,
    back: Annotated[str | None, typer.Option(help="New answer side.")] = None,
    tag: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Replace the tags (repeatable)."),
    ] = None,
):
    """Edit a card's text or tags. Its review schedule is kept."""
    if front is None and back is None and tag is None:
        typer.secho("Nothing to change. Pass --front, --back or --tag.", fg="yellow")
        raise typer.Exit(2)
    if (front is not None and not front.strip()) or (back is not None and not back.strip()):
        typer.secho("Front and back cannot be empty.", fg="red")
        raise typer.Exit(2)

    store = _open_store(ctx)
    card = store.get_card(card_id)
    if card is None:
        typer.secho(f"Unknown card: {card_id}", fg="red")
        raise typer.Exit(1)

    changes = {}
    if front is not None:
        changes["front"] = front.strip()
    if back is not None:
        changes["back"] = back.strip()
    if tag is not None:
        changes["tags"] = list(dict.fromkeys(t.strip() for t in tag if t.strip()))

    store.update_card(replace(card, **changes))
    typer.secho(f"Updated card {card_id}", fg="green")


@card_app.command("delete")
def card_delete(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Delete a card."""
    store = _open_store(ctx)
    if not store.delete_card(card_id):
        typer.secho(f"Unknown card: {card_id}", fg="red")
        raise typer.Exit(1)
    typer.secho(f"Deleted card {card_id}", fg="green")


# ---------------------------------------------------------------------------
# Study
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Limit to one deck id.")] = None,
):
    """Show the cards due for review now."""
    store = _open_store(ctx)
    cards = StudyService(store).due_cards(deck)
    if not cards:
        typer.secho("All caught up! No cards due.", fg="green")
        return

    typer.echo(f"Due cards: {len(cards)}")
    for card in cards:
        typer.echo(f"  {card.id}  {card.front}")


@app.command()
def study(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Study one deck id only.")] = None,
):
    """[bold green]Study[/bold green] the cards due now. Enter 'q' to stop early."""
    store = _open_store(ctx)
    service = StudyService(store)

    tracker = service.start(deck)
    if tracker is None:
        typer.secho("No cards to review! You're all caught up.", fg="green")
        return

    total = len(tracker.card_ids)
    while tracker.state is SessionState.ACTIVE and tracker.remaining:
        card_id = tracker.remaining[0]
        card = store.get_card(card_id)
        if card is None:
            tracker.drop(card_id)
            continue

        service.present(tracker, card_id)
        done = total - len(tracker.remaining) + 1
        typer.secho(f"\n[{done}/{total}] {card.front}", bold=True)
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(card.back)

        rating = _ask_rating()
        if rating is None:
            break
        service.rate(tracker, card_id, rating)

    if tracker.state is SessionState.ACTIVE:
        service.finish(tracker)

    summary = tracker.summary
    if summary is None:
        typer.secho("Session ended before any card was rated.", fg="yellow")
        return

    typer.secho("\nSession complete!", fg="green", bold=True)
    typer.echo(f"Cards reviewed: {summary.cards_studied}")
    typer.echo(f"Accuracy: {summary.accuracy}%")
    typer.echo(f"Time spent: {format_duration(summary.time_spent)}")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show review statistics and your study streak."""
    store = _open_store(ctx)
    board = StatsService(store).dashboard()
    b = board.breakdown
    s = board.stats

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total_cards": board.total_cards,
                    "due_today": b.due_today,
                    "due_tomorrow": b.due_tomorrow,
                    "due_this_week": b.due_this_week,
                    "new": b.new,
                    "learned": b.learned,
                    "statuses": {k.value: v for k, v in board.statuses.items()},
                    "mastery": board.mastery,
                    "streak_days": s.streak_days,
                    "streak_tier": board.streak_tier,
                    "total_reviews": s.total_reviews,
                    "average_rating": s.average_rating,
                    "cards_learned": s.cards_learned,
                    "last_study_date": s.last_study_date,
                    "activity": [[d.isoformat(), n] for d, n in board.activity],
                },
                indent=2,
            )
        )
        return

    typer.echo(f"Streak: {s.streak_days} days ({board.streak_tier})")
    typer.echo(f"Total reviews: {s.total_reviews}  Average rating: {s.average_rating:.1f}")
    typer.echo(
        f"Due today: {b.due_today}  Tomorrow: {b.due_tomorrow}"
        f"  This week: {b.due_this_week}  New: {b.new}  Learned: {b.learned}"
    )
    statuses = "  ".join(f"{k.value}: {v}" for k, v in board.statuses.items())
    typer.echo(f"Cards: {board.total_cards}  {statuses}  Mastered: {board.mastery}%")

    peak = max((n for _, n in board.activity), default=0)
    typer.echo("\nLast 14 days:")
    for day, count in board.activity:
        bar = "#" * round(count / peak * 20) if peak else ""
        typer.echo(f"  {day.strftime('%b %d')}  {bar} {count}")


# ---------------------------------------------------------------------------
# Data transfer
# ---------------------------------------------------------------------------


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Destination JSON file.")],
):
    """Export every deck, card, session, review and stat to one file."""
    store = _open_store(ctx)
    path.write_text(store.export_data(), encoding="utf-8")
    typer.secho(f"Exported to {path}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="JSON file produced by 'memora export'.")],
):
    """Import an export file, replacing the collections it contains."""
    if not path.exists():
        typer.secho(f"File not found: {path}", fg="red")
        raise typer.Exit(1)

    try:
        data = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        typer.secho("Import failed: the file is not UTF-8 text.", fg="red")
        raise typer.Exit(1)

    store = _open_store(ctx)
    if not store.import_data(data):
        typer.secho("Import failed: the file is not a valid memora export.", fg="red")
        raise typer.Exit(1)
    typer.secho(f"Imported {path}", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@app.command()
def version():
    """Print the memora version."""
    typer.echo(__version__)
