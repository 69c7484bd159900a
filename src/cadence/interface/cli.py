"""cadence CLI: add questions, record reviews, and inspect the due queue."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from cadence.application.config import SrsConfig, resolve_config
from cadence.application.importer import import_questions, load_manifest
from cadence.application.scheduler import get_rating_label
from cadence.application.service import SrsService
from cadence.domain.errors import SrsError
from cadence.domain.mastery import get_mastery_color, get_mastery_label
from cadence.domain.models import Difficulty, Rating, ReviewCard

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: spaced-repetition scheduling for interview questions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

QuestionArg = Annotated[str, typer.Argument(help="Question identifier.")]
ChannelOpt = Annotated[
    str, typer.Option("--channel", "-c", help="Channel the question belongs to.")
]
DifficultyOpt = Annotated[
    Difficulty,
    typer.Option("--difficulty", "-d", case_sensitive=False, help="Question difficulty."),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Annotated[
        Path | None,
        typer.Option("--store", help="Card store file. Defaults to 'store_path' in config."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for cadence."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store
    # No -v keeps the configured verbosity (CADENCE_VERBOSE / config.toml)
    ctx.obj["verbose"] = verbose or None


def _resolve(ctx: typer.Context) -> SrsConfig:
    obj = ctx.obj or {}
    try:
        config = resolve_config(
            {"store_path": obj.get("store_path"), "verbose": obj.get("verbose")}
        )
    except ValidationError as e:
        _fail(f"Invalid configuration: {e}")
    logging.getLogger("cadence").setLevel(_LOG_LEVELS.get(config.verbose, logging.DEBUG))
    return config


def _service(ctx: typer.Context) -> SrsService:
    from cadence.application.factory import get_srs_service

    return get_srs_service(_resolve(ctx))


def _fail(message: str, code: int = 1):
    typer.secho(message, fg="red")
    raise typer.Exit(code)


def _card_payload(card: ReviewCard) -> dict[str, Any]:
    return {
        "question_id": card.question_id,
        "channel": card.channel,
        "difficulty": card.difficulty.value,
        "ease_factor": card.ease_factor,
        "interval_days": card.interval_days,
        "repetitions": card.repetitions,
        "due_date": card.due_date.isoformat(),
        "last_reviewed_at": card.last_reviewed_at.isoformat() if card.last_reviewed_at else None,
        "total_reviews": card.total_reviews,
        "mastery_level": card.mastery_level,
        "mastery_label": get_mastery_label(card.mastery_level),
    }


def _echo_mastery(card: ReviewCard) -> None:
    level = card.mastery_level
    typer.secho(f"Mastery: {get_mastery_label(level)} ({level}/5)", fg=get_mastery_color(level))


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context, question_id: QuestionArg, channel: ChannelOpt, difficulty: DifficultyOpt
):
    """[bold green]Add[/bold green] a question to the review queue (no-op if already tracked)."""
    service = _service(ctx)
    try:
        existed = service.is_in_srs(question_id, channel, difficulty)
        card = service.add_to_srs(question_id, channel, difficulty)
    except SrsError as e:
        _fail(str(e))

    if existed:
        typer.secho(
            f"Already tracked: {card.key} (due {card.due_date.date().isoformat()})", fg="yellow"
        )
    else:
        typer.secho(f"Added {card.key}, due now.", fg="green")


@app.command()
def review(
    ctx: typer.Context,
    question_id: QuestionArg,
    channel: ChannelOpt,
    difficulty: DifficultyOpt,
    rating: Annotated[
        Rating,
        typer.Option("--rating", "-r", case_sensitive=False, help="How well you recalled it."),
    ],
):
    """Record a confidence rating and reschedule the question."""
    service = _service(ctx)
    try:
        card = service.record_review(question_id, channel, difficulty, rating)
    except SrsError as e:
        _fail(str(e))

    typer.echo(
        f"{get_rating_label(rating)}: next review in {card.interval_days}d "
        f"({card.due_date.date().isoformat()}), ease {card.ease_factor:.2f}, "
        f"streak {card.repetitions}"
    )
    _echo_mastery(card)


@app.command()
def preview(
    ctx: typer.Context, question_id: QuestionArg, channel: ChannelOpt, difficulty: DifficultyOpt
):
    """Show the interval each rating would give, without recording anything."""
    service = _service(ctx)
    try:
        previews = service.preview_next_review(question_id, channel, difficulty)
    except SrsError as e:
        _fail(str(e))

    typer.echo("  ".join(f"{get_rating_label(r)}: {label}" for r, label in previews.items()))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    channel: Annotated[
        str | None, typer.Option("--channel", "-c", help="Filter by channel.")
    ] = None,
    difficulty: Annotated[
        Difficulty | None,
        typer.Option("--difficulty", "-d", case_sensitive=False, help="Filter by difficulty."),
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Max cards to list.")] = None,
    json_output: JsonOpt = False,
):
    """List cards due for review, most overdue first."""
    service = _service(ctx)
    try:
        cards = service.get_due_cards(channel=channel, difficulty=difficulty, limit=limit).collect()
    except SrsError as e:
        _fail(str(e))

    if json_output:
        typer.echo(json.dumps([_card_payload(c) for c in cards], indent=2))
        return

    if not cards:
        typer.secho("No cards due.", fg="green")
        return

    for card in cards:
        level = card.mastery_level
        typer.secho(
            f"[{card.due_date.date().isoformat()}] {card.key}  {get_mastery_label(level)}",
            fg=get_mastery_color(level),
        )
    typer.echo(f"\n{len(cards)} card(s) due.")


@app.command()
def stats(ctx: typer.Context, json_output: JsonOpt = False):
    """Summarize the collection: due counts, mastery and review streak."""
    service = _service(ctx)
    try:
        summary = service.get_stats()
    except SrsError as e:
        _fail(str(e))

    if json_output:
        payload = {
            k: v.isoformat() if hasattr(v, "isoformat") else v for k, v in vars(summary).items()
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(
        f"Cards: {summary.total_cards}  Mastered: {summary.mastered}  "
        f"Learning: {summary.learning}"
    )
    typer.echo(
        f"Due today: {summary.due_today}  Tomorrow: {summary.due_tomorrow}  "
        f"This week: {summary.due_this_week}"
    )
    typer.echo(f"New today: {summary.new_today}  Streak: {summary.review_streak} day(s)")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML or JSON list of questions.")],
    channel: Annotated[
        str | None, typer.Option("--channel", "-c", help="Channel for entries that lack one.")
    ] = None,
):
    """Add every question listed in a manifest file."""
    service = _service(ctx)
    try:
        entries = load_manifest(path)
        result = import_questions(service, entries, default_channel=channel)
    except (OSError, ValueError, SrsError) as e:
        _fail(str(e))

    typer.secho(f"Added {len(result.added)} question(s).", fg="green")
    if result.already_tracked:
        typer.echo(f"Already tracked: {len(result.already_tracked)}")
    if result.invalid:
        typer.secho(f"Skipped {len(result.invalid)} invalid entr(y/ies):", fg="yellow")
        for reason in result.invalid:
            typer.echo(f"  {reason}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
