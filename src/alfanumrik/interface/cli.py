"""Alfanumrik CLI: revision queue, practice logging and mastery reports."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from pydantic import TypeAdapter, ValidationError

from alfanumrik.application.config import resolve_config
from alfanumrik.domain.errors import TrackerError
from alfanumrik.domain.learning.models import (
    ActivityEntry,
    ActivityRecord,
    BankQuestion,
    BloomsLevel,
    Difficulty,
    Subject,
)
from alfanumrik.interface._common import _tracker_from_context, to_jsonable

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="alfanumrik: Spaced revision and mastery analytics for exam prep.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage alfanumrik configuration.")
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


def _fail(error: Exception) -> NoReturn:
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Directory holding saved state.")
    ] = None,
    backend: Annotated[str | None, typer.Option(help="Storage backend: json, memory.")] = None,
    question_pool: Annotated[
        Path | None, typer.Option("--question-pool", help="JSON file of practice questions.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for alfanumrik."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "data_dir": data_dir,
        "backend": backend,
        "question_pool": question_pool,
    }
    if verbose > 0:
        logging.getLogger("alfanumrik").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Revision commands
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List revision items that are due, most overdue first."""
    try:
        report = _tracker_from_context(ctx).due_report()
    except TrackerError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps([to_jsonable(r) for r in report], indent=2))
        return

    if not report:
        typer.secho("Nothing due. Come back tomorrow.", fg="green")
        return

    typer.echo(f"Due items: {len(report)}")
    for r in report:
        typer.echo(
            f"  {r.item_key}  [{r.subject} / {r.chapter}]  "
            f"R={r.current_retrievability:.2f}  overdue={r.days_overdue:.1f}d  L{r.level}"
        )
        typer.echo(f"      {r.question_text[:80]}")


@app.command()
def toggle(
    ctx: typer.Context,
    question_file: Annotated[Path, typer.Argument(help="JSON file describing one question.")],
):
    """Add a question to the revision set, or remove it if already there."""
    try:
        question = TypeAdapter(BankQuestion).validate_json(question_file.read_bytes())
    except (OSError, ValidationError) as e:
        _fail(e)

    try:
        added = _tracker_from_context(ctx).toggle_revision(question)
    except TrackerError as e:
        _fail(e)

    if added:
        typer.secho("Added to revision set. First review due tomorrow.", fg="green")
    else:
        typer.secho("Removed from revision set.", fg="yellow")


@app.command()
def review(
    ctx: typer.Context,
    item_key: Annotated[str, typer.Argument(help="Key of the revision item.")],
    answer: Annotated[str | None, typer.Option(help="Chosen option for MCQs.")] = None,
    time_spent: Annotated[float, typer.Option(help="Seconds spent answering.")] = 0,
):
    """Answer a revision item and reschedule it."""
    try:
        result = _tracker_from_context(ctx).submit_review(item_key, answer, time_spent)
    except TrackerError as e:
        _fail(e)

    if result is None:
        typer.secho(f"No revision item with key {item_key}.", fg="yellow")
        return

    if result.correct:
        typer.secho("Correct!", fg="green")
    else:
        typer.secho("Incorrect.", fg="red")
    if result.item is not None:
        typer.echo(
            f"Stability {result.item.stability:.2f}d, difficulty {result.item.difficulty:.1f}, "
            f"next review {result.item.next_due_at:%Y-%m-%d}"
        )


# ---------------------------------------------------------------------------
# Activity commands
# ---------------------------------------------------------------------------


@app.command("log")
def log_attempt(
    ctx: typer.Context,
    subject: Annotated[Subject, typer.Option(help="Subject of the attempt.")],
    chapter: Annotated[str, typer.Option(help="Chapter name.")],
    difficulty: Annotated[Difficulty, typer.Option(help="Difficulty tier.")],
    accuracy: Annotated[float, typer.Option(help="Accuracy 0-100.")],
    marks: Annotated[float, typer.Option(help="Marks achieved.")] = 0,
    total_marks: Annotated[float, typer.Option(help="Marks available.")] = 1,
    blooms: Annotated[BloomsLevel | None, typer.Option(help="Bloom's level.")] = None,
    time_spent: Annotated[float, typer.Option(help="Seconds spent.")] = 0,
):
    """Record a completed practice attempt."""
    entry = ActivityEntry(
        subject=subject,
        chapter=chapter,
        difficulty=difficulty,
        accuracy=accuracy,
        marks_achieved=marks,
        total_marks=total_marks,
        time_spent_seconds=time_spent,
        blooms_level=blooms,
    )
    try:
        record = _tracker_from_context(ctx).log_practice(entry)
    except TrackerError as e:
        _fail(e)
    typer.echo(f"Logged attempt {record.id} on {record.date.isoformat()}")


@app.command()
def history(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option(help="Number of recent attempts.")] = 10,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the most recent practice attempts."""
    try:
        records = _tracker_from_context(ctx).recent_activity(limit)
    except TrackerError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(to_jsonable(records, list[ActivityRecord]), indent=2))
        return

    for r in records:
        typer.echo(
            f"{r.date.isoformat()}  {r.subject.value:<14} {r.chapter:<30} "
            f"{r.difficulty.value:<6} {r.accuracy:>5.0f}%  {r.marks_achieved:g}/{r.total_marks:g}"
        )


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Clear the practice history. The revision set is kept."""
    if not force and not typer.confirm("Clear history?"):
        raise typer.Exit()
    try:
        _tracker_from_context(ctx).reset_history()
    except TrackerError as e:
        _fail(e)
    typer.secho("History cleared.", fg="green")


@app.command()
def practice(
    ctx: typer.Context,
    subject: Annotated[Subject | None, typer.Option(help="Filter by subject.")] = None,
    chapter: Annotated[str | None, typer.Option(help="Filter by chapter.")] = None,
    difficulty: Annotated[Difficulty | None, typer.Option(help="Filter by difficulty.")] = None,
    blooms: Annotated[BloomsLevel | None, typer.Option(help="Filter by Bloom's level.")] = None,
):
    """Draw a practice question from the configured question pool."""
    import asyncio

    try:
        tracker = _tracker_from_context(ctx)
        question = asyncio.run(
            tracker.next_practice_question(subject, chapter, difficulty, blooms)
        )
    except TrackerError as e:
        _fail(e)

    typer.echo(f"[{question.subject.value} / {question.chapter}] ({question.marks or 1} marks)")
    typer.echo(question.question_text)
    for i, option in enumerate(question.options or [], start=1):
        typer.echo(f"  {i}. {option}")


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@app.command()
def summary(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """[bold green]Summarize[/bold green] mastery across all practice history."""
    try:
        s = _tracker_from_context(ctx).summary()
    except TrackerError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps(to_jsonable(s), indent=2))
        return

    typer.echo(
        f"Milestone: {s.next_milestone}  Points: {s.total_points:g}  "
        f"Accuracy: {s.overall_accuracy:.1f}%"
    )
    typer.echo(
        f"Board readiness: {s.board_readiness}  Predicted: {s.predicted_score}  "
        f"Velocity: {s.learning_velocity:+.1f}"
    )

    if s.weak_chapters:
        typer.secho(f"\nWeak chapters: {len(s.weak_chapters)}", fg="red")
        for c in s.weak_chapters:
            typer.echo(f"  {c.subject.value} / {c.chapter}: {c.score:.1f}  ({'; '.join(c.suggestions)})")
    if s.strong_chapters:
        typer.secho(f"\nStrong chapters: {len(s.strong_chapters)}", fg="green")
        for c in s.strong_chapters:
            typer.echo(f"  {c.subject.value} / {c.chapter}: {c.score:.1f}  ({'; '.join(c.suggestions)})")

    typer.echo("\nBloom's mastery:")
    for level, pct in s.blooms_mastery.items():
        typer.echo(f"  {level.value:<11} {pct:>3}%")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    config = resolve_config({"port": port, "host": host})
    uvicorn.run("alfanumrik.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
