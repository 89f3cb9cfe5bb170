"""
Command-line entry point for scheduled event generation.

Lets a system scheduler (cron, systemd timer, Kubernetes CronJob) run the
same generation as GET /api/cron/generate-events without going through HTTP.

Commands:
    muaythai-events generate-events [--days N] [--json]
    muaythai-events preview-events --start YYYY-MM-DD --end YYYY-MM-DD [--template GUID]...
    muaythai-events init-db
    muaythai-events serve [--host HOST] [--port PORT] [--reload]
"""

import json
import sys
from datetime import date
from typing import Optional, Tuple

import click

from backend.src.config.settings import get_settings
from backend.src.db.database import SessionLocal, init_db as create_tables
from backend.src.services.event_generation_service import (
    EventGenerationService,
    GenerationResult,
)
from backend.src.services.exceptions import StoreUnavailableError, ValidationError
from backend.src.utils.formatting import format_time_12h
from backend.src.utils.logging_config import get_logger


CLI_VERSION = "1.0.0"

logger = get_logger("cli")


def _summary(result: GenerationResult) -> dict:
    return {
        "generated_count": result.generated_count,
        "templates_processed": result.templates_processed,
        "skipped_count": result.skipped_count,
        "failed_count": result.failed_count,
        "preview_only": result.preview_only,
    }


def _fail(message: str) -> None:
    click.echo(click.style("Error: ", fg="red", bold=True) + message, err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=CLI_VERSION, prog_name="muaythai-events")
def cli() -> None:
    """
    Muay Thai events - recurring event generation.

    Use 'muaythai-events COMMAND --help' for more information on a command.
    """


@cli.command("generate-events")
@click.option(
    "--days",
    "-d",
    type=click.IntRange(0, 366),
    default=None,
    help="Days ahead to generate (default: MUAYTHAI_GENERATION_LOOKAHEAD_DAYS).",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the summary as JSON.",
)
def generate_events(days: Optional[int], as_json: bool) -> None:
    """Generate events for all active templates from today through today + DAYS.

    Dates that already have an event are skipped, so the command is safe
    to run repeatedly. Exits with status 1 if the database is unreachable.

    \b
    Examples:
        muaythai-events generate-events
        muaythai-events generate-events --days 14 --json
    """
    look_ahead_days = days if days is not None else get_settings().generation_lookahead_days

    db = SessionLocal()
    try:
        service = EventGenerationService(db)
        result = service.generate_upcoming_events(look_ahead_days)
    except StoreUnavailableError as e:
        logger.error(f"Scheduled generation aborted: {e.message}")
        _fail(e.message)
    finally:
        db.close()

    logger.info(
        f"Generated {result.generated_count} events from "
        f"{result.templates_processed} templates",
        extra={"look_ahead_days": look_ahead_days},
    )

    if as_json:
        click.echo(json.dumps(_summary(result)))
        return

    click.echo(
        click.style("✓ ", fg="green")
        + f"Successfully generated {result.generated_count} events "
        f"from {result.templates_processed} templates"
    )
    if result.skipped_count:
        click.echo(f"  Skipped (already existing): {result.skipped_count}")
    if result.failed_count:
        click.echo(click.style(f"  Failed: {result.failed_count}", fg="yellow"))


@cli.command("preview-events")
@click.option(
    "--start",
    "start",
    required=True,
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="First day of the window (YYYY-MM-DD).",
)
@click.option(
    "--end",
    "end",
    required=True,
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Last day of the window (YYYY-MM-DD).",
)
@click.option(
    "--template",
    "-t",
    "templates",
    multiple=True,
    help="Restrict to a template GUID (tpl_xxx). Repeatable.",
)
def preview_events(start, end, templates: Tuple[str, ...]) -> None:
    """Show the events that would be generated, without saving anything.

    \b
    Examples:
        muaythai-events preview-events --start 2025-04-01 --end 2025-04-14
        muaythai-events preview-events --start 2025-04-01 --end 2025-04-30 -t tpl_01hgw...
    """
    window_start: date = start.date()
    window_end: date = end.date()
    if window_start > window_end:
        _fail("--start must be on or before --end")

    db = SessionLocal()
    try:
        service = EventGenerationService(db)
        result = service.generate(
            window_start,
            window_end,
            template_guids=list(templates) or None,
            preview_only=True,
        )
    except ValidationError as e:
        _fail(e.message)
    except StoreUnavailableError as e:
        _fail(e.message)
    finally:
        db.close()

    for item in result.items:
        event = item.event
        click.echo(
            f"{event.event_date.isoformat()}  {format_time_12h(event.start_time):>8}  "
            f"{event.title}  [{item.template_name}, {len(item.tickets)} ticket types]"
        )
    click.echo(
        f"{result.generated_count} events would be generated "
        f"from {result.templates_processed} templates"
    )


@cli.command("init-db")
def init_db() -> None:
    """Create database tables (local setup; production uses Alembic)."""
    create_tables()
    click.echo(click.style("✓ ", fg="green") + "Database tables created")


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes (development).")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the admin API with uvicorn."""
    import uvicorn

    click.echo(f"Starting Muay Thai events API on http://{host}:{port}")
    click.echo(f"API documentation: http://{host}:{port}/docs")
    try:
        uvicorn.run(
            "backend.src.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
        )
    except KeyboardInterrupt:
        click.echo("Server stopped")
